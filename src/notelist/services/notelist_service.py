"""Service layer for NoteList operations."""

import logging
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional, Union

from pydantic import ValidationError as PydanticValidationError

from notelist.config import NoteListConfig, config
from notelist.exceptions import DecodeError, ErrorCode, StorageError
from notelist.models.schema import Category, ExportBundle, Note
from notelist.storage.category_repository import CategoryRepository
from notelist.storage.json_collection import atomic_write_text
from notelist.storage.location import StorageLocation
from notelist.storage.note_repository import NoteRepository

logger = logging.getLogger(__name__)


class NoteListService:
    """Service for the note and category collections.

    One method per front-end command, plus search and bulk export/import.
    The two repositories share a storage directory but are otherwise
    independent: no operation here keeps notes and categories in sync.
    """

    def __init__(
        self,
        location: Optional[StorageLocation] = None,
        note_repository: Optional[NoteRepository] = None,
        category_repository: Optional[CategoryRepository] = None,
        cfg: Optional[NoteListConfig] = None,
    ):
        """Initialize the service.

        Args:
            location: Storage directory resolver. Built from config if None.
            note_repository: Note storage backend. Created over ``location`` if None.
            category_repository: Category storage backend. Created over
                ``location`` if None.
            cfg: Configuration to read defaults from. The global config if None.
        """
        cfg = cfg or config
        self.location = location or StorageLocation.from_config(cfg)
        self.notes = note_repository or NoteRepository(
            self.location, filename=cfg.notes_file, indent=cfg.json_indent
        )
        self.categories = category_repository or CategoryRepository(
            self.location, filename=cfg.categories_file, indent=cfg.json_indent
        )
        self._indent = cfg.json_indent

    # =========================================================================
    # Notes
    # =========================================================================

    def get_notes(self) -> List[Note]:
        """Get every note in stored order."""
        return self.notes.load_all()

    def get_note_by_id(self, note_id: int) -> Optional[Note]:
        """Get a note by ID, or None if there is none."""
        return self.notes.get_by_id(note_id)

    def get_all_categories(self) -> List[str]:
        """Get the sorted set of category names used by notes."""
        return self.notes.list_categories()

    def get_notes_by_categories(self, selected: Iterable[str]) -> List[Note]:
        """Get notes with at least one of the selected categories."""
        return self.notes.filter_by_categories(selected)

    def search_notes(
        self, term: str, categories: Optional[Iterable[str]] = None
    ) -> List[Note]:
        """Search titles and descriptions, optionally within categories."""
        return self.notes.search(term, categories)

    def get_next_note_id(self) -> int:
        """Get the ID the next new note would receive."""
        return self.notes.next_id()

    def save_note(self, note: Note) -> Note:
        """Insert or replace a note by ID."""
        return self.notes.upsert(note)

    def create_note(
        self,
        title: str,
        description: str,
        content: str,
        created_at: str,
        img: Optional[str] = None,
        categories: Optional[List[str]] = None,
    ) -> Note:
        """Store a new note under a freshly assigned ID."""
        return self.notes.create(
            title=title,
            description=description,
            content=content,
            created_at=created_at,
            img=img,
            categories=categories,
        )

    def delete_note(self, note_id: int) -> bool:
        """Delete a note. Returns whether anything was removed."""
        return self.notes.delete_by_id(note_id) > 0

    # =========================================================================
    # Categories
    # =========================================================================

    def get_categories(self) -> List[Category]:
        """Get every stored category in stored order."""
        return self.categories.load_all()

    def save_category(self, category: Category) -> Category:
        """Insert or replace a category by name."""
        return self.categories.upsert(category)

    def delete_category(self, name: str) -> bool:
        """Delete a category by name. Notes that use it are left untouched."""
        return self.categories.delete_by_name(name) > 0

    # =========================================================================
    # Export / Import
    # =========================================================================

    def export_data(self) -> ExportBundle:
        """Snapshot both collections into one bundle."""
        return ExportBundle(
            notes=self.notes.load_all(),
            categories=self.categories.load_all(),
        )

    def export_to_file(self, path: Union[str, Path]) -> Path:
        """Write the export bundle to ``path`` as pretty-printed JSON.

        Returns:
            The path written.
        """
        target = Path(path).expanduser()
        bundle = self.export_data()
        try:
            target.parent.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise StorageError(
                f"Failed to create export directory: {e}",
                operation="mkdir",
                path=str(target.parent),
                code=ErrorCode.DIRECTORY_CREATE_FAILED,
                original_error=e,
            ) from e
        atomic_write_text(
            target, bundle.model_dump_json(indent=self._indent), label="export"
        )
        logger.info(
            f"Exported {len(bundle.notes)} notes and "
            f"{len(bundle.categories)} categories to {target}"
        )
        return target

    @staticmethod
    def parse_bundle(data: str, source: str = "") -> ExportBundle:
        """Decode an export bundle from JSON text.

        Raises:
            DecodeError: If the text is not a valid bundle.
        """
        try:
            return ExportBundle.model_validate_json(data)
        except PydanticValidationError as e:
            raise DecodeError(
                f"Invalid import data: {e.error_count()} error(s), "
                f"first: {e.errors()[0]['msg']}",
                path=source or None,
                original_error=e,
            ) from e

    def import_data(self, bundle: ExportBundle, replace: bool = False) -> Dict[str, int]:
        """Load a bundle into the store.

        By default every category and then every note is upserted in bundle
        order, so records with a matching key are replaced and the rest are
        appended. With ``replace`` both collections are overwritten with the
        bundle's contents.

        Returns:
            Counts of imported notes and categories.
        """
        if replace:
            self.categories.replace_all(bundle.categories)
            self.notes.replace_all(bundle.notes)
        else:
            for category in bundle.categories:
                self.categories.upsert(category)
            for note in bundle.notes:
                self.notes.upsert(note)
        logger.info(
            f"Imported {len(bundle.notes)} notes and {len(bundle.categories)} "
            f"categories (replace={replace})"
        )
        return {"notes": len(bundle.notes), "categories": len(bundle.categories)}

    def import_from_file(
        self, path: Union[str, Path], replace: bool = False
    ) -> Dict[str, int]:
        """Read an export bundle from ``path`` and import it."""
        source = Path(path).expanduser()
        try:
            contents = source.read_text(encoding="utf-8")
        except OSError as e:
            raise StorageError(
                f"Failed to read import file: {e}",
                operation="read",
                path=str(source),
                code=ErrorCode.STORAGE_READ_FAILED,
                original_error=e,
            ) from e
        except UnicodeDecodeError as e:
            raise DecodeError(
                "Invalid import data: not valid UTF-8 text",
                path=str(source),
                original_error=e,
            ) from e
        return self.import_data(self.parse_bundle(contents, str(source)), replace)

    # =========================================================================
    # Status
    # =========================================================================

    def get_stats(self) -> Dict[str, Any]:
        """Summarize the store: counts, next ID and storage directory."""
        notes = self.notes.load_all()
        return {
            "notes_count": len(notes),
            "categories_count": len(self.categories.load_all()),
            "next_note_id": NoteRepository.next_id_for(notes),
            "storage_dir": str(self.location.resolve()),
        }
