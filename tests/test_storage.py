"""Tests for note record and Markdown file storage."""

import pytest
from pageclip.models.note import Note
from pageclip.storage import LocalFileStore, SqliteNoteStore


def make_note(note_id="n1", created=1_000, modified=None, size=10, title="Title"):
    return Note(
        id=note_id,
        title=title,
        url=f"https://example.com/{note_id}",
        file_name=f"{note_id}.md",
        date_created=created,
        date_modified=modified if modified is not None else created,
        size=size,
    )


class TestNote:
    """Tests for the Note record."""

    def test_modified_before_created_rejected(self):
        with pytest.raises(ValueError):
            make_note(created=2_000, modified=1_000)

    def test_negative_size_rejected(self):
        with pytest.raises(ValueError):
            make_note(size=-1)

    def test_touched(self):
        """Test touched() updates size and modification time only."""
        note = make_note(created=1_000)
        updated = note.touched(size=42, modified_at=5_000)
        assert updated.size == 42
        assert updated.date_modified == 5_000
        assert updated.id == note.id
        assert updated.date_created == note.date_created

    def test_touched_never_before_created(self):
        note = make_note(created=1_000)
        assert note.touched(size=1, modified_at=10).date_modified == 1_000


class TestSqliteNoteStore:
    """Tests for SqliteNoteStore."""

    @pytest.fixture
    def store(self, tmp_path):
        store = SqliteNoteStore(tmp_path / "notes.db")
        yield store
        store.close()

    def test_insert_and_get(self, store):
        note = make_note()
        store.insert(note)
        assert store.get_by_id("n1") == note
        assert store.count() == 1

    def test_get_missing(self, store):
        assert store.get_by_id("nope") is None

    def test_ordered_by_modified_desc(self, store):
        """Test notes are listed newest first."""
        store.insert(make_note("old", created=1_000))
        store.insert(make_note("new", created=3_000))
        store.insert(make_note("mid", created=2_000))
        assert [n.id for n in store.get_all()] == ["new", "mid", "old"]

    def test_ties_ordered_by_insertion(self, store):
        """Test notes with equal timestamps list the latest insert first."""
        store.insert(make_note("first", created=1_000))
        store.insert(make_note("second", created=1_000))
        assert [n.id for n in store.get_all()] == ["second", "first"]

    def test_insert_replaces_same_id(self, store):
        store.insert(make_note(title="Old"))
        store.insert(make_note(title="New"))
        assert store.count() == 1
        assert store.get_by_id("n1").title == "New"

    def test_update(self, store):
        """Test update changes the record and its position."""
        store.insert(make_note("a", created=1_000))
        store.insert(make_note("b", created=2_000))
        store.update(store.get_by_id("a").touched(size=99, modified_at=3_000))

        notes = store.get_all()
        assert [n.id for n in notes] == ["a", "b"]
        assert notes[0].size == 99

    def test_update_missing_is_ignored(self, store):
        store.update(make_note("ghost"))
        assert store.count() == 0

    def test_delete(self, store):
        note = make_note()
        store.insert(note)
        store.delete(note)
        assert store.get_by_id(note.id) is None
        assert store.count() == 0

    def test_subscribe(self, store):
        """Test listeners receive the ordered list after every change."""
        seen = []
        unsubscribe = store.subscribe(lambda notes: seen.append([n.id for n in notes]))

        store.insert(make_note("a", created=1_000))
        store.insert(make_note("b", created=2_000))
        store.delete(make_note("a", created=1_000))
        unsubscribe()
        store.insert(make_note("c", created=3_000))

        assert seen == [["a"], ["b", "a"], ["b"]]

    def test_failing_listener_does_not_break_writes(self, store):
        """Test a raising listener neither fails the write nor starves other listeners."""
        seen = []

        def broken(notes):
            raise RuntimeError("listener failed")

        store.subscribe(broken)
        store.subscribe(lambda notes: seen.append(len(notes)))

        store.insert(make_note("a"))

        assert store.count() == 1
        assert seen == [1]

    def test_persists_across_instances(self, tmp_path):
        db_path = tmp_path / "nested" / "notes.db"
        first = SqliteNoteStore(db_path)
        first.insert(make_note())
        first.close()

        second = SqliteNoteStore(db_path)
        try:
            assert second.get_by_id("n1") is not None
        finally:
            second.close()

    def test_in_memory(self):
        store = SqliteNoteStore(":memory:")
        store.insert(make_note())
        assert store.count() == 1
        store.close()


class TestLocalFileStore:
    """Tests for LocalFileStore."""

    @pytest.fixture
    def store(self, tmp_path):
        return LocalFileStore(tmp_path / "pages")

    def test_save_and_read(self, store):
        assert store.save("note.md", "# Привет\n\nText")
        assert store.read("note.md") == "# Привет\n\nText"

    def test_save_creates_directory(self, store):
        assert not store.pages_dir.exists()
        assert store.save("note.md", "x")
        assert (store.pages_dir / "note.md").is_file()

    def test_save_overwrites(self, store):
        store.save("note.md", "old")
        store.save("note.md", "new")
        assert store.read("note.md") == "new"

    def test_no_temporary_files_left(self, store):
        store.save("note.md", "content")
        assert [p.name for p in store.pages_dir.iterdir()] == ["note.md"]

    def test_size_in_bytes(self, store):
        store.save("note.md", "Привет")
        assert store.size("note.md") == len("Привет".encode("utf-8"))

    def test_size_missing(self, store):
        assert store.size("missing.md") == 0

    def test_read_missing(self, store):
        assert store.read("missing.md") is None

    def test_delete(self, store):
        store.save("note.md", "x")
        assert store.delete("note.md")
        assert store.read("note.md") is None

    def test_delete_missing_succeeds(self, store):
        """Test deleting an absent file counts as success."""
        assert store.delete("missing.md")

    def test_rejects_path_traversal(self, store, tmp_path):
        assert not store.save("../escape.md", "x")
        assert not (tmp_path / "escape.md").exists()
        assert store.read("../escape.md") is None
