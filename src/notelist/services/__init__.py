"""Service layer for NoteList."""
