"""MCP server implementation for NoteList."""

import json
import logging
import uuid
from typing import Any, List, Optional

from mcp.server.fastmcp import FastMCP

from notelist.config import config
from notelist.exceptions import NoteListError, ValidationError
from notelist.models.schema import Category, Note
from notelist.observability import metrics, timed_operation
from notelist.services.notelist_service import NoteListService

logger = logging.getLogger(__name__)


def _to_json(value: Any) -> str:
    """Render a tool result (models, lists of models, plain data) as JSON text."""
    if hasattr(value, "model_dump"):
        value = value.model_dump(mode="json")
    elif isinstance(value, list):
        value = [
            item.model_dump(mode="json") if hasattr(item, "model_dump") else item
            for item in value
        ]
    return json.dumps(value, indent=2, ensure_ascii=False)


def _require_non_negative(value: int, field: str) -> int:
    if isinstance(value, bool) or not isinstance(value, int) or value < 0:
        raise ValidationError(
            f"{field} must be a non-negative integer", field=field, value=value
        )
    return value


class NoteListMcpServer:
    """MCP server exposing the note and category commands."""

    def __init__(self, service: Optional[NoteListService] = None):
        """Initialize the MCP server.

        Args:
            service: Pre-configured service. When None, one is built from
                the global config.
        """
        self.mcp = FastMCP(config.server_name)
        self.service = service or NoteListService()
        self.initialize()
        self._register_tools()

    def initialize(self) -> None:
        """Initialize services."""
        logger.info(f"NoteList MCP server {config.server_version} initialized")

    def format_error_response(self, error: Exception) -> str:
        """Format an error response in a consistent way.

        Args:
            error: The exception that occurred

        Returns:
            Formatted error message with appropriate level of detail
        """
        # Generate a unique error ID for traceability in logs
        error_id = str(uuid.uuid4())[:8]

        if isinstance(error, NoteListError):
            logger.error(
                f"[{error.code.name}] [{error_id}]: {error.message}",
                extra={"error_details": error.details},
            )
            return f"Error: {error.message}"
        elif isinstance(error, ValueError):
            logger.error(f"Validation error [{error_id}]: {str(error)}")
            return f"Error: Invalid input: {str(error)} (ref: {error_id})"
        elif isinstance(error, (IOError, OSError)):
            logger.error(f"File system error [{error_id}]: {str(error)}", exc_info=True)
            return f"Error: A file system error occurred (ref: {error_id})"
        else:
            logger.error(f"Unexpected error [{error_id}]: {str(error)}", exc_info=True)
            return f"Error: An unexpected error occurred (ref: {error_id})"

    def _register_tools(self) -> None:
        """Register MCP tools."""

        @self.mcp.tool(name="get_notes")
        def get_notes() -> str:
            """List every note in stored order as a JSON array."""
            with timed_operation("get_notes") as op:
                try:
                    notes = self.service.get_notes()
                    op["result_count"] = len(notes)
                    return _to_json(notes)
                except Exception as e:
                    op["error"] = e
                    return self.format_error_response(e)

        @self.mcp.tool(name="get_note_by_id")
        def get_note_by_id(id: int) -> str:
            """Get one note by ID.
            Args:
                id: The note ID
            Returns:
                The note as JSON, or `null` when no note has this ID.
            """
            with timed_operation("get_note_by_id", note_id=id) as op:
                try:
                    note = self.service.get_note_by_id(_require_non_negative(id, "id"))
                    op["found"] = note is not None
                    return _to_json(note) if note else "null"
                except Exception as e:
                    op["error"] = e
                    return self.format_error_response(e)

        @self.mcp.tool(name="get_all_categories")
        def get_all_categories() -> str:
            """List the distinct category names used by notes, sorted."""
            with timed_operation("get_all_categories") as op:
                try:
                    names = self.service.get_all_categories()
                    op["result_count"] = len(names)
                    return _to_json(names)
                except Exception as e:
                    op["error"] = e
                    return self.format_error_response(e)

        @self.mcp.tool(name="get_notes_by_categories")
        def get_notes_by_categories(selected_categories: List[str]) -> str:
            """List notes having at least one of the given categories.
            Args:
                selected_categories: Category names. An empty list returns every note.
            """
            with timed_operation(
                "get_notes_by_categories", selected=len(selected_categories)
            ) as op:
                try:
                    notes = self.service.get_notes_by_categories(selected_categories)
                    op["result_count"] = len(notes)
                    return _to_json(notes)
                except Exception as e:
                    op["error"] = e
                    return self.format_error_response(e)

        @self.mcp.tool(name="search_notes")
        def search_notes(term: str, categories: Optional[List[str]] = None) -> str:
            """Search note titles and descriptions.
            Args:
                term: Case-insensitive text to look for; blank matches every note
                categories: Optional category names to restrict the search to
            """
            with timed_operation("search_notes", term=term[:30]) as op:
                try:
                    notes = self.service.search_notes(term, categories)
                    op["result_count"] = len(notes)
                    return _to_json(notes)
                except Exception as e:
                    op["error"] = e
                    return self.format_error_response(e)

        @self.mcp.tool(name="get_categories")
        def get_categories() -> str:
            """List every stored category ({name, color}) as a JSON array."""
            with timed_operation("get_categories") as op:
                try:
                    categories = self.service.get_categories()
                    op["result_count"] = len(categories)
                    return _to_json(categories)
                except Exception as e:
                    op["error"] = e
                    return self.format_error_response(e)

        @self.mcp.tool(name="save_category")
        def save_category(name: str, color: str) -> str:
            """Create a category, or replace the color of the one with this name.
            Args:
                name: Category name (the key)
                color: Display color
            """
            with timed_operation("save_category", name=name) as op:
                try:
                    if not name.strip():
                        raise ValidationError("Category name cannot be empty", field="name")
                    self.service.save_category(Category(name=name, color=color))
                    return f"Category saved: {name}"
                except Exception as e:
                    op["error"] = e
                    return self.format_error_response(e)

        @self.mcp.tool(name="delete_category")
        def delete_category(category_name: str) -> str:
            """Delete a category by name. Notes using it are not changed.
            Args:
                category_name: Name of the category to delete
            """
            with timed_operation("delete_category", name=category_name) as op:
                try:
                    op["removed"] = self.service.delete_category(category_name)
                    return f"Category deleted: {category_name}"
                except Exception as e:
                    op["error"] = e
                    return self.format_error_response(e)

        @self.mcp.tool(name="delete_note")
        def delete_note(id: int) -> str:
            """Delete a note by ID. Deleting an unknown ID succeeds.
            Args:
                id: The note ID
            """
            with timed_operation("delete_note", note_id=id) as op:
                try:
                    op["removed"] = self.service.delete_note(
                        _require_non_negative(id, "id")
                    )
                    return f"Note deleted: {id}"
                except Exception as e:
                    op["error"] = e
                    return self.format_error_response(e)

        @self.mcp.tool(name="get_next_note_id")
        def get_next_note_id() -> str:
            """Get the ID the next new note should use."""
            with timed_operation("get_next_note_id") as op:
                try:
                    next_id = self.service.get_next_note_id()
                    op["next_id"] = next_id
                    return str(next_id)
                except Exception as e:
                    op["error"] = e
                    return self.format_error_response(e)

        @self.mcp.tool(name="save_note")
        def save_note(
            title: str,
            description: str,
            content: str,
            created_at: str,
            id: Optional[int] = None,
            img: Optional[str] = None,
            categories: Optional[List[str]] = None,
        ) -> str:
            """Create or replace a note.
            Args:
                title: The title of the note
                description: Short description
                content: The main content of the note
                created_at: Creation timestamp, stored as given
                id: ID of the note to replace or insert. When omitted a new ID
                    is assigned.
                img: Optional image path or URL
                categories: Category names (need not exist as categories)
            """
            with timed_operation("save_note", note_id=id, title=title[:30]) as op:
                try:
                    if id is None:
                        note = self.service.create_note(
                            title=title,
                            description=description,
                            content=content,
                            created_at=created_at,
                            img=img,
                            categories=categories or [],
                        )
                    else:
                        note = self.service.save_note(
                            Note(
                                id=_require_non_negative(id, "id"),
                                title=title,
                                description=description,
                                content=content,
                                img=img,
                                categories=categories or [],
                                created_at=created_at,
                            )
                        )
                    op["note_id"] = note.id
                    return f"Note saved with ID: {note.id}"
                except Exception as e:
                    op["error"] = e
                    return self.format_error_response(e)

        @self.mcp.tool(name="export_data")
        def export_data(path: Optional[str] = None) -> str:
            """Export notes and categories as one JSON document.
            Args:
                path: Optional file to write the export to. When omitted the
                    document is returned directly.
            """
            with timed_operation("export_data") as op:
                try:
                    if path:
                        target = self.service.export_to_file(path)
                        return f"Exported to {target}"
                    bundle = self.service.export_data()
                    op["result_count"] = len(bundle.notes)
                    return _to_json(bundle)
                except Exception as e:
                    op["error"] = e
                    return self.format_error_response(e)

        @self.mcp.tool(name="import_data")
        def import_data(
            data: Optional[str] = None,
            path: Optional[str] = None,
            replace: bool = False,
        ) -> str:
            """Import an export document ({"notes": [...], "categories": [...]}).
            Args:
                data: The export document as JSON text
                path: A file containing the export document (used when data is omitted)
                replace: Overwrite both collections instead of merging by key
            """
            with timed_operation("import_data", replace=replace) as op:
                try:
                    if data:
                        counts = self.service.import_data(
                            self.service.parse_bundle(data), replace=replace
                        )
                    elif path:
                        counts = self.service.import_from_file(path, replace=replace)
                    else:
                        raise ValidationError(
                            "Either data or path is required", field="data"
                        )
                    op.update(counts)
                    return (
                        f"Imported {counts['notes']} notes and "
                        f"{counts['categories']} categories"
                    )
                except Exception as e:
                    op["error"] = e
                    return self.format_error_response(e)

        @self.mcp.tool(name="get_stats")
        def get_stats() -> str:
            """Show collection counts, the next note ID, storage location and metrics."""
            with timed_operation("get_stats") as op:
                try:
                    stats = self.service.get_stats()
                    stats["metrics"] = metrics.get_summary()
                    return _to_json(stats)
                except Exception as e:
                    op["error"] = e
                    return self.format_error_response(e)

    def run(self) -> None:
        """Run the MCP server."""
        self.mcp.run()
