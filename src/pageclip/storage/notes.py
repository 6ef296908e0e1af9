"""SQLite-backed note record storage."""

import logging
import sqlite3
import threading
from pathlib import Path
from typing import Callable, Optional

from ..models.note import Note
from .protocols import NotesListener

logger = logging.getLogger(__name__)

_COLUMNS = "id, title, url, file_name, date_created, date_modified, size"


class SqliteNoteStore:
    """
    Note records in a SQLite database.

    Notes are listed newest first (by modification time, then insertion
    order). Registered listeners are called with the full ordered list after
    every insert, update and delete, which makes the collection observable
    for list views.

    The connection is shared between threads and guarded by a lock, so the
    store can be driven from ``asyncio.to_thread``.

    Example:
        store = SqliteNoteStore(Path("./offline-notes/notes.db"))
        unsubscribe = store.subscribe(lambda notes: print(len(notes)))
        store.insert(note)
        store.close()
    """

    def __init__(self, db_path: Path) -> None:
        """
        Initialize the note store.

        Args:
            db_path: Path of the SQLite database file (":memory:" is allowed)
        """
        self._db_path = db_path
        self._conn: Optional[sqlite3.Connection] = None
        self._lock = threading.RLock()
        self._listeners: list[NotesListener] = []

    def _ensure_db(self) -> sqlite3.Connection:
        """Ensure the database and table exist."""
        if self._conn is None:
            if str(self._db_path) != ":memory:":
                Path(self._db_path).parent.mkdir(parents=True, exist_ok=True)
            self._conn = sqlite3.connect(str(self._db_path), check_same_thread=False)

            self._conn.execute(
                """
                CREATE TABLE IF NOT EXISTS notes (
                    seq INTEGER PRIMARY KEY AUTOINCREMENT,
                    id TEXT UNIQUE NOT NULL,
                    title TEXT NOT NULL,
                    url TEXT NOT NULL,
                    file_name TEXT NOT NULL,
                    date_created INTEGER NOT NULL,
                    date_modified INTEGER NOT NULL,
                    size INTEGER NOT NULL
                )
            """
            )
            self._conn.execute("CREATE INDEX IF NOT EXISTS idx_date_modified ON notes(date_modified)")
            self._conn.commit()

            logger.info(f"Initialized SQLite database at {self._db_path}")

        return self._conn

    @staticmethod
    def _row_to_note(row: tuple) -> Note:
        return Note(
            id=row[0],
            title=row[1],
            url=row[2],
            file_name=row[3],
            date_created=row[4],
            date_modified=row[5],
            size=row[6],
        )

    def insert(self, note: Note) -> None:
        """Insert a note, replacing any record with the same id."""
        with self._lock:
            conn = self._ensure_db()
            with conn:
                conn.execute("DELETE FROM notes WHERE id = ?", (note.id,))
                conn.execute(
                    f"INSERT INTO notes ({_COLUMNS}) VALUES (?, ?, ?, ?, ?, ?, ?)",
                    (
                        note.id,
                        note.title,
                        note.url,
                        note.file_name,
                        note.date_created,
                        note.date_modified,
                        note.size,
                    ),
                )
            logger.debug(f"Inserted note: {note.title}")
        self._notify()

    def update(self, note: Note) -> None:
        with self._lock:
            conn = self._ensure_db()
            with conn:
                cursor = conn.execute(
                    """UPDATE notes
                       SET title = ?, url = ?, file_name = ?, date_created = ?,
                           date_modified = ?, size = ?
                       WHERE id = ?""",
                    (
                        note.title,
                        note.url,
                        note.file_name,
                        note.date_created,
                        note.date_modified,
                        note.size,
                        note.id,
                    ),
                )
            if cursor.rowcount == 0:
                logger.warning(f"Update ignored, note not found: {note.id}")
                return
            logger.debug(f"Updated note: {note.title}")
        self._notify()

    def delete(self, note: Note) -> None:
        with self._lock:
            conn = self._ensure_db()
            with conn:
                conn.execute("DELETE FROM notes WHERE id = ?", (note.id,))
            logger.debug(f"Deleted note: {note.title}")
        self._notify()

    def get_by_id(self, note_id: str) -> Optional[Note]:
        with self._lock:
            row = (
                self._ensure_db()
                .execute(f"SELECT {_COLUMNS} FROM notes WHERE id = ?", (note_id,))
                .fetchone()
            )
        if row is None:
            logger.debug(f"Note not found with ID: {note_id}")
            return None
        return self._row_to_note(row)

    def get_all(self) -> list[Note]:
        """All notes, most recently modified first."""
        with self._lock:
            rows = (
                self._ensure_db()
                .execute(f"SELECT {_COLUMNS} FROM notes ORDER BY date_modified DESC, seq DESC")
                .fetchall()
            )
        return [self._row_to_note(row) for row in rows]

    def count(self) -> int:
        with self._lock:
            (total,) = self._ensure_db().execute("SELECT COUNT(*) FROM notes").fetchone()
        return int(total)

    def subscribe(self, listener: NotesListener) -> Callable[[], None]:
        """
        Register a listener for collection changes.

        Args:
            listener: Called with the ordered note list after each change

        Returns:
            Function that removes the listener again
        """
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _notify(self) -> None:
        if not self._listeners:
            return
        notes = self.get_all()
        for listener in list(self._listeners):
            # The write is already committed; a failing listener must not undo it
            try:
                listener(notes)
            except Exception:
                logger.exception(f"Notes listener {listener!r} failed")

    def close(self) -> None:
        """Close the database connection."""
        with self._lock:
            if self._conn:
                self._conn.close()
                self._conn = None
                logger.info(f"Closed SQLite database at {self._db_path}")

    @property
    def db_path(self) -> Path:
        """Return the path to the database file."""
        return self._db_path
