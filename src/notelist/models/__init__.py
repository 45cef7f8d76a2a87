"""Data models for NoteList."""

from notelist.models.schema import Category, ExportBundle, Note

__all__ = ["Note", "Category", "ExportBundle"]
