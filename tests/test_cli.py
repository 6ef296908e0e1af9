"""Tests for the pageclip command-line interface."""

import pytest
from pageclip import __version__
from pageclip.cli import build_config, create_parser, format_size, main
from pageclip.models.note import Note
from pageclip.storage import LocalFileStore, SqliteNoteStore

NOTE_ID = "0b6f1c5e-1111-4222-8333-944455556666"


@pytest.fixture
def storage_dir(tmp_path):
    """Notes directory holding one stored note."""
    note = Note(
        id=NOTE_ID,
        title="Stored Page",
        url="https://example.com/stored",
        file_name=f"{NOTE_ID}.md",
        date_created=1_700_000_000_000,
        date_modified=1_700_000_000_000,
        size=len("# Stored\n\nBody text"),
    )
    LocalFileStore(tmp_path / "pages").save(note.file_name, "# Stored\n\nBody text")
    store = SqliteNoteStore(tmp_path / "notes.db")
    store.insert(note)
    store.close()
    return tmp_path


class TestParser:
    """Tests for argument parsing and config building."""

    def test_version(self, capsys):
        with pytest.raises(SystemExit) as exc:
            main(["--version"])
        assert exc.value.code == 0
        assert __version__ in capsys.readouterr().out

    def test_no_command(self, capsys):
        assert main([]) == 1

    def test_storage_dir_override(self, tmp_path):
        args = create_parser().parse_args(["--storage-dir", str(tmp_path), "list"])
        config = build_config(args)
        assert config.storage.directory == tmp_path
        assert config.log_level == "WARNING"

    def test_verbose(self):
        args = create_parser().parse_args(["-v", "list"])
        assert build_config(args).log_level == "DEBUG"

    def test_config_file(self, tmp_path):
        path = tmp_path / "pageclip.yaml"
        path.write_text("log_level: ERROR\ncontent:\n  paragraph_markup: true\n")
        args = create_parser().parse_args(["--config", str(path), "list"])
        config = build_config(args)
        assert config.log_level == "ERROR"
        assert config.content.paragraph_markup is True

    def test_bad_config_file(self, tmp_path, capsys):
        assert main(["--config", str(tmp_path / "missing.yaml"), "list"]) == 1
        assert "Configuration error" in capsys.readouterr().out

    @pytest.mark.parametrize(
        "size,expected",
        [(512, "512 B"), (2048, "2.0 KB"), (3 * 1024 * 1024, "3.0 MB")],
    )
    def test_format_size(self, size, expected):
        assert format_size(size) == expected


class TestCommands:
    """Tests for the list/show/delete/add commands."""

    def test_list_quiet(self, storage_dir, capsys):
        assert main(["--storage-dir", str(storage_dir), "-q", "list"]) == 0
        assert capsys.readouterr().out.split() == [NOTE_ID]

    def test_list_table(self, storage_dir, capsys, monkeypatch):
        monkeypatch.setenv("COLUMNS", "200")
        assert main(["--storage-dir", str(storage_dir), "list"]) == 0
        out = capsys.readouterr().out
        assert "Stored Page" in out
        assert "1 note(s)" in out

    def test_list_empty(self, tmp_path, capsys):
        assert main(["--storage-dir", str(tmp_path), "list"]) == 0
        assert "No notes yet" in capsys.readouterr().out

    def test_show_raw(self, storage_dir, capsys):
        assert main(["--storage-dir", str(storage_dir), "show", NOTE_ID, "--raw"]) == 0
        assert "# Stored" in capsys.readouterr().out

    def test_show_rendered(self, storage_dir, capsys):
        assert main(["--storage-dir", str(storage_dir), "show", NOTE_ID]) == 0
        out = capsys.readouterr().out
        assert "Stored Page" in out
        assert "Body text" in out

    def test_show_missing(self, storage_dir, capsys):
        assert main(["--storage-dir", str(storage_dir), "show", "nope"]) == 1
        assert "No note with ID" in capsys.readouterr().out

    def test_delete(self, storage_dir, capsys):
        assert main(["--storage-dir", str(storage_dir), "delete", NOTE_ID]) == 0
        assert not (storage_dir / "pages" / f"{NOTE_ID}.md").exists()

        store = SqliteNoteStore(storage_dir / "notes.db")
        try:
            assert store.count() == 0
        finally:
            store.close()

    def test_delete_missing(self, storage_dir):
        assert main(["--storage-dir", str(storage_dir), "delete", "nope"]) == 1

    def test_add_invalid_url(self, tmp_path, capsys):
        assert main(["--storage-dir", str(tmp_path), "add", "not-a-url"]) == 1
        assert "Invalid URL format" in capsys.readouterr().out
