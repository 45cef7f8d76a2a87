"""Repository for note storage and retrieval."""
import logging
from typing import Iterable, List, Optional

from notelist.config import NOTES_FILE_NAME
from notelist.models.schema import Note
from notelist.storage.json_collection import JsonCollection
from notelist.storage.location import StorageLocation

logger = logging.getLogger(__name__)


class NoteRepository:
    """Repository for the note collection (``notes.json``).

    Every call loads the full collection from disk. Mutations rewrite the
    whole file while holding the collection lock, so callers in the same
    process never lose each other's updates.
    """

    def __init__(
        self,
        location: StorageLocation,
        filename: str = NOTES_FILE_NAME,
        indent: int = 2,
    ):
        """Initialize the note repository.

        Args:
            location: Storage directory resolver shared with other repositories.
            filename: Name of the collection file inside the storage directory.
            indent: Pretty-print indentation of the rewritten file.
        """
        self.collection: JsonCollection[Note] = JsonCollection(
            location, filename, Note, indent=indent
        )

    def load_all(self) -> List[Note]:
        """Load every note in stored order.

        Returns:
            All notes, or an empty list if the collection file does not exist.
        """
        return self.collection.read()

    def get_by_id(self, note_id: int) -> Optional[Note]:
        """Get the first note with the given ID, or None."""
        for note in self.load_all():
            if note.id == note_id:
                return note
        return None

    def list_categories(self) -> List[str]:
        """Get every category name used by any note, deduplicated and sorted."""
        names = set()
        for note in self.load_all():
            names.update(note.categories)
        return sorted(names)

    def filter_by_categories(self, selected: Iterable[str]) -> List[Note]:
        """Get notes that share at least one category with ``selected``.

        An empty selection means no filter and returns every note.
        """
        selected = list(selected)
        notes = self.load_all()
        if not selected:
            return notes
        return [note for note in notes if note.has_any_category(selected)]

    def search(
        self, term: str, categories: Optional[Iterable[str]] = None
    ) -> List[Note]:
        """Filter by categories, then by a case-insensitive title/description term."""
        notes = self.filter_by_categories(categories or [])
        if not term or not term.strip():
            return notes
        return [note for note in notes if note.matches_term(term)]

    def next_id(self) -> int:
        """One more than the highest stored ID, or 1 for an empty collection.

        This is a hint: another writer can take the ID before it is used.
        ``create`` assigns IDs under the collection lock instead.
        """
        return self.next_id_for(self.load_all())

    @staticmethod
    def next_id_for(notes: List[Note]) -> int:
        """Next ID for an already loaded list of notes."""
        return max((note.id for note in notes), default=0) + 1

    def upsert(self, note: Note) -> Note:
        """Replace the note with the same ID in place, or append it.

        Returns:
            The stored note.
        """
        with self.collection.lock:
            notes = self.load_all()
            for index, existing in enumerate(notes):
                if existing.id == note.id:
                    notes[index] = note
                    logger.debug(f"Updating note {note.id} at position {index}")
                    break
            else:
                notes.append(note)
                logger.debug(f"Appending note {note.id}")
            self.collection.write(notes)
        return note

    def create(
        self,
        title: str,
        description: str,
        content: str,
        created_at: str,
        img: Optional[str] = None,
        categories: Optional[List[str]] = None,
    ) -> Note:
        """Append a new note with a freshly assigned ID.

        The ID is computed and the note written in one locked cycle, so two
        creates in this process never share an ID.
        """
        with self.collection.lock:
            notes = self.load_all()
            note = Note(
                id=self.next_id_for(notes),
                title=title,
                description=description,
                content=content,
                img=img,
                categories=list(categories or []),
                created_at=created_at,
            )
            notes.append(note)
            self.collection.write(notes)
        logger.info(f"Created note {note.id}")
        return note

    def delete_by_id(self, note_id: int) -> int:
        """Remove every note with the given ID.

        Deleting an unknown ID is not an error; the file is still rewritten.

        Returns:
            Number of notes removed.
        """
        with self.collection.lock:
            notes = self.load_all()
            remaining = [note for note in notes if note.id != note_id]
            self.collection.write(remaining)
        removed = len(notes) - len(remaining)
        if removed:
            logger.info(f"Deleted note {note_id}")
        return removed

    def replace_all(self, notes: List[Note]) -> None:
        """Overwrite the whole collection."""
        with self.collection.lock:
            self.collection.write(list(notes))
