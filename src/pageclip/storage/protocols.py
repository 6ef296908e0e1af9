"""Protocol definitions for note and file persistence."""

from __future__ import annotations

from typing import Callable, Optional, Protocol

from ..models.note import Note

NotesListener = Callable[[list[Note]], None]


class NoteStore(Protocol):
    """
    Protocol for note record storage.

    ``get_all`` returns notes newest first. Listeners registered through
    ``subscribe`` receive that same ordered list after every change.
    """

    def insert(self, note: Note) -> None: ...

    def update(self, note: Note) -> None: ...

    def delete(self, note: Note) -> None: ...

    def get_by_id(self, note_id: str) -> Optional[Note]: ...

    def get_all(self) -> list[Note]: ...

    def count(self) -> int: ...

    def subscribe(self, listener: NotesListener) -> Callable[[], None]:
        """Register a listener; returns a function that unregisters it."""
        ...


class FileStore(Protocol):
    """
    Protocol for Markdown payload storage.

    ``save`` and ``delete`` report failure through their return value
    instead of raising. Deleting an absent file counts as success.
    """

    def save(self, file_name: str, content: str) -> bool: ...

    def read(self, file_name: str) -> Optional[str]: ...

    def delete(self, file_name: str) -> bool: ...

    def size(self, file_name: str) -> int: ...
