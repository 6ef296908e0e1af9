"""Note record and Markdown file storage for pageclip."""

from .files import LocalFileStore
from .notes import SqliteNoteStore
from .protocols import FileStore, NoteStore, NotesListener

__all__ = [
    "FileStore",
    "LocalFileStore",
    "NoteStore",
    "NotesListener",
    "SqliteNoteStore",
]
