"""Data models for NoteList."""

from typing import List, Optional

from pydantic import BaseModel, Field, model_validator

# Note ids are stored as unsigned 32-bit integers
MAX_NOTE_ID = 2**32 - 1


class Category(BaseModel):
    """A named, colored label notes can refer to."""

    name: str = Field(..., description="Category name, unique within the collection")
    color: str = Field(..., description="Display color (not validated)")

    model_config = {"extra": "forbid", "strict": True}

    def __str__(self) -> str:
        """Return string representation of category."""
        return self.name


class Note(BaseModel):
    """A note as stored in notes.json.

    ``created_at`` is an opaque caller-supplied timestamp; the store never
    generates or parses it. ``categories`` may name categories that do not
    exist in the category collection.
    """

    id: int = Field(
        ..., ge=0, le=MAX_NOTE_ID, description="Unique ID of the note"
    )
    title: str = Field(..., description="Title of the note")
    description: str = Field(..., description="Short description of the note")
    content: str = Field(..., description="Content of the note")
    img: Optional[str] = Field(default=None, description="Image path or URL")
    categories: List[str] = Field(
        ..., description="Names of the categories of the note"
    )
    created_at: str = Field(..., description="Creation timestamp as supplied by the caller")

    model_config = {"extra": "forbid", "strict": True}

    def has_any_category(self, selected: List[str]) -> bool:
        """Check whether the note shares at least one category with ``selected``."""
        wanted = set(selected)
        return any(category in wanted for category in self.categories)

    def matches_term(self, term: str) -> bool:
        """Case-insensitive substring match against title and description."""
        needle = term.strip().lower()
        if not needle:
            return True
        return needle in self.title.lower() or needle in self.description.lower()


class ExportBundle(BaseModel):
    """Both collections in one document, as written by export."""

    notes: List[Note] = Field(default_factory=list)
    categories: List[Category] = Field(default_factory=list)

    model_config = {"extra": "forbid"}

    @model_validator(mode="after")
    def _validate_unique_keys(self) -> "ExportBundle":
        """Reject bundles that would break key uniqueness at rest."""
        note_ids = [note.id for note in self.notes]
        if len(note_ids) != len(set(note_ids)):
            raise ValueError("Duplicate note id in bundle")
        names = [category.name for category in self.categories]
        if len(names) != len(set(names)):
            raise ValueError("Duplicate category name in bundle")
        return self
