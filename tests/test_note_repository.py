"""Tests for the NoteRepository class."""
import json
import threading

import pytest

from notelist.exceptions import DecodeError
from notelist.storage.note_repository import NoteRepository


class TestLoadAndLookup:
    """Tests for loading and looking up notes."""

    def test_empty_store(self, note_repository):
        assert note_repository.load_all() == []
        assert note_repository.get_by_id(1) is None
        assert note_repository.list_categories() == []

    def test_upsert_then_get_by_id_round_trips(self, note_repository, make_note):
        note = make_note(7, categories=["a", "a", "b"], img="cover.png")

        note_repository.upsert(note)

        assert note_repository.get_by_id(7) == note

    def test_get_by_id_returns_first_match(self, note_repository, storage_root, make_note):
        first = make_note(1, title="first")
        second = make_note(1, title="second")
        storage_root.mkdir()
        (storage_root / "notes.json").write_text(
            json.dumps([first.model_dump(), second.model_dump()])
        )

        assert note_repository.get_by_id(1).title == "first"

    def test_corrupted_file_surfaces_decode_error(self, note_repository, storage_root):
        storage_root.mkdir()
        (storage_root / "notes.json").write_text('[{"id": 1,')

        with pytest.raises(DecodeError):
            note_repository.load_all()
        with pytest.raises(DecodeError):
            note_repository.get_by_id(1)


class TestCategoryQueries:
    """Tests for category aggregation and filtering over notes."""

    @pytest.fixture
    def populated(self, note_repository, make_note):
        note_repository.upsert(make_note(1, categories=["home", "work"]))
        note_repository.upsert(make_note(2, categories=["home"]))
        note_repository.upsert(make_note(3, categories=[]))
        note_repository.upsert(make_note(4, categories=["work", "urgent"]))
        return note_repository

    def test_list_categories_sorted_and_deduplicated(self, note_repository, make_note):
        note_repository.upsert(make_note(1, categories=["b", "a"]))
        note_repository.upsert(make_note(2, categories=["c", "b"]))

        assert note_repository.list_categories() == ["a", "b", "c"]

    def test_empty_selection_returns_everything_in_order(self, populated):
        assert populated.filter_by_categories([]) == populated.load_all()

    def test_filter_matches_any_shared_category(self, populated):
        result = populated.filter_by_categories(["work"])

        assert [note.id for note in result] == [1, 4]

    def test_filter_with_several_categories_keeps_order(self, populated):
        result = populated.filter_by_categories(["urgent", "home"])

        assert [note.id for note in result] == [1, 2, 4]

    def test_filter_unknown_category_matches_nothing(self, populated):
        assert populated.filter_by_categories(["missing"]) == []

    def test_filter_accepts_any_iterable(self, populated):
        assert [n.id for n in populated.filter_by_categories({"home"})] == [1, 2]


class TestSearch:
    """Tests for title/description search."""

    @pytest.fixture
    def populated(self, note_repository, make_note):
        note_repository.upsert(make_note(1, title="Shopping List", categories=["home"]))
        note_repository.upsert(
            make_note(2, title="Meeting", description="Quarterly PLANNING", categories=["work"])
        )
        note_repository.upsert(make_note(3, title="Planning trip", categories=["home"]))
        return note_repository

    def test_search_is_case_insensitive_on_title_and_description(self, populated):
        assert [n.id for n in populated.search("planning")] == [2, 3]

    def test_search_trims_term(self, populated):
        assert [n.id for n in populated.search("  shopping ")] == [1]

    def test_blank_term_does_not_filter(self, populated):
        assert len(populated.search("   ")) == 3

    def test_search_within_categories(self, populated):
        assert [n.id for n in populated.search("planning", ["home"])] == [3]

    def test_search_does_not_look_at_content(self, populated):
        assert populated.search("Content 1") == []


class TestNextId:
    """Tests for next-id computation."""

    def test_empty_collection_starts_at_one(self, note_repository):
        assert note_repository.next_id() == 1

    def test_after_upsert_of_id_five(self, note_repository, make_note):
        note_repository.upsert(make_note(5))

        assert note_repository.next_id() == 6

    def test_uses_maximum_not_count(self, note_repository, make_note):
        note_repository.upsert(make_note(10))
        note_repository.upsert(make_note(2))

        assert note_repository.next_id() == 11

    def test_next_id_does_not_reserve(self, note_repository):
        assert note_repository.next_id() == note_repository.next_id() == 1


class TestUpsert:
    """Tests for insert-or-replace semantics."""

    def test_first_save_creates_file(self, note_repository, storage_root, make_note):
        note_repository.upsert(make_note(1))

        data = json.loads((storage_root / "notes.json").read_text())
        assert [record["id"] for record in data] == [1]

    def test_appends_new_ids_in_insertion_order(self, note_repository, make_note):
        for note_id in (3, 1, 2):
            note_repository.upsert(make_note(note_id))

        assert [n.id for n in note_repository.load_all()] == [3, 1, 2]

    def test_update_keeps_position(self, note_repository, make_note):
        for note_id in (1, 2, 3):
            note_repository.upsert(make_note(note_id))

        note_repository.upsert(make_note(2, title="changed"))

        notes = note_repository.load_all()
        assert [n.id for n in notes] == [1, 2, 3]
        assert notes[1].title == "changed"

    def test_upsert_is_idempotent(self, note_repository, storage_root, make_note):
        note = make_note(1, categories=["x"])
        note_repository.upsert(note)
        once = (storage_root / "notes.json").read_text()

        note_repository.upsert(note)

        assert (storage_root / "notes.json").read_text() == once

    def test_upsert_on_corrupted_file_does_not_overwrite(
        self, note_repository, storage_root, make_note
    ):
        storage_root.mkdir()
        (storage_root / "notes.json").write_text("[{")

        with pytest.raises(DecodeError):
            note_repository.upsert(make_note(1))

        assert (storage_root / "notes.json").read_text() == "[{"


class TestCreate:
    """Tests for creating notes with store-assigned IDs."""

    def test_create_assigns_next_id(self, note_repository, make_note):
        note_repository.upsert(make_note(4))

        note = note_repository.create(
            title="new", description="d", content="c", created_at="now"
        )

        assert note.id == 5
        assert note.categories == []
        assert note_repository.get_by_id(5) == note

    def test_consecutive_creates_get_distinct_ids(self, note_repository):
        ids = [
            note_repository.create(title=str(i), description="", content="", created_at="")
            .id
            for i in range(3)
        ]

        assert ids == [1, 2, 3]

    def test_concurrent_creates_do_not_lose_notes(self, note_repository):
        errors = []

        def worker(index):
            try:
                note_repository.create(
                    title=f"t{index}", description="", content="", created_at=""
                )
            except Exception as e:  # pragma: no cover - reported below
                errors.append(e)

        threads = [threading.Thread(target=worker, args=(i,)) for i in range(10)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        assert errors == []
        ids = [n.id for n in note_repository.load_all()]
        assert sorted(ids) == list(range(1, 11))


class TestDelete:
    """Tests for delete_by_id."""

    def test_delete_existing_note(self, note_repository, make_note):
        for note_id in (1, 2, 3):
            note_repository.upsert(make_note(note_id))

        removed = note_repository.delete_by_id(2)

        assert removed == 1
        assert [n.id for n in note_repository.load_all()] == [1, 3]

    def test_delete_missing_id_leaves_collection_unchanged(self, note_repository, make_note):
        note_repository.upsert(make_note(1))
        before = note_repository.load_all()

        assert note_repository.delete_by_id(99) == 0
        assert note_repository.load_all() == before

    def test_delete_on_empty_store_succeeds(self, note_repository, storage_root):
        assert note_repository.delete_by_id(1) == 0
        assert json.loads((storage_root / "notes.json").read_text()) == []

    def test_delete_removes_all_duplicates(self, note_repository, storage_root, make_note):
        storage_root.mkdir()
        (storage_root / "notes.json").write_text(
            json.dumps([make_note(1).model_dump(), make_note(1).model_dump()])
        )

        assert note_repository.delete_by_id(1) == 2
        assert note_repository.load_all() == []


class TestScenario:
    """End-to-end flow over a fresh store."""

    def test_fresh_store_flow(self, location, storage_root, make_note):
        repository = NoteRepository(location)

        assert repository.load_all() == []
        repository.upsert(make_note(1))

        assert len(json.loads((storage_root / "notes.json").read_text())) == 1
        assert repository.next_id() == 2
