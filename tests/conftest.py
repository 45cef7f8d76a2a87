"""Common test fixtures for NoteList."""

import pytest

from notelist.config import config
from notelist.models.schema import Category, Note
from notelist.observability import metrics
from notelist.services.notelist_service import NoteListService
from notelist.storage.category_repository import CategoryRepository
from notelist.storage.location import StorageLocation
from notelist.storage.note_repository import NoteRepository


@pytest.fixture
def storage_root(tmp_path):
    """Storage directory that does not exist yet."""
    return tmp_path / "store"


@pytest.fixture
def test_config(storage_root, monkeypatch):
    """Point the global config at the temporary storage root."""
    monkeypatch.setattr(config, "data_dir", storage_root)
    yield config


@pytest.fixture
def location(storage_root):
    """StorageLocation rooted in the temporary directory."""
    return StorageLocation(root=storage_root)


@pytest.fixture
def note_repository(location):
    """Create a test note repository."""
    return NoteRepository(location)


@pytest.fixture
def category_repository(location):
    """Create a test category repository."""
    return CategoryRepository(location)


@pytest.fixture
def service(location):
    """Create a test NoteListService."""
    return NoteListService(location=location)


@pytest.fixture(autouse=True)
def _reset_metrics():
    """Start every test with empty operation metrics."""
    metrics.reset()
    yield
    metrics.reset()


@pytest.fixture
def make_note():
    """Factory for notes with sensible defaults."""

    def _make(note_id=1, title=None, categories=None, **overrides):
        fields = {
            "id": note_id,
            "title": title if title is not None else f"Note {note_id}",
            "description": f"Description {note_id}",
            "content": f"Content {note_id}",
            "img": None,
            "categories": list(categories) if categories is not None else [],
            "created_at": "2024-01-01T10:00:00Z",
        }
        fields.update(overrides)
        return Note(**fields)

    return _make


@pytest.fixture
def make_category():
    """Factory for categories."""

    def _make(name="work", color="#ff0000"):
        return Category(name=name, color=color)

    return _make
