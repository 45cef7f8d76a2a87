"""Storage layer for NoteList."""

from notelist.storage.category_repository import CategoryRepository
from notelist.storage.json_collection import JsonCollection
from notelist.storage.location import StorageLocation
from notelist.storage.note_repository import NoteRepository

__all__ = [
    "StorageLocation",
    "JsonCollection",
    "NoteRepository",
    "CategoryRepository",
]
