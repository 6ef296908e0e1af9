"""
pageclip - Clip web pages into offline Markdown notes.

Usage:
    from pageclip import Clipper, ClipperConfig

    config = ClipperConfig(storage={"directory": "./notes"})

    async with Clipper(config) as clipper:
        result = await clipper.add_note_from_url("https://example.com/article")
        if result.is_success:
            print(result.note.file_name)
        else:
            print(result.message)
"""

__version__ = "1.0.0"

from .conversion import HtmlToMarkdown, MainContentExtractor
from .core.clipper import Clipper, clip_blocking
from .core.page_fetcher import PageFetcher
from .http import AsyncHttpClient, CharsetResolver
from .models.config import (
    ClipperConfig,
    ContentConfig,
    NetworkConfig,
    SecurityConfig,
    StorageConfig,
)
from .models.events import ClipEvent, EventType
from .models.note import (
    AddNoteError,
    AddNoteResult,
    AddNoteSuccess,
    ClipErrorKind,
    ClipRequest,
    FetchResult,
    Note,
)
from .security import is_valid_url
from .storage import FileStore, LocalFileStore, NoteStore, SqliteNoteStore

__all__ = [
    "__version__",
    # Core
    "Clipper",
    "clip_blocking",
    "PageFetcher",
    "AsyncHttpClient",
    "CharsetResolver",
    "HtmlToMarkdown",
    "MainContentExtractor",
    "is_valid_url",
    # Config
    "ClipperConfig",
    "ContentConfig",
    "NetworkConfig",
    "SecurityConfig",
    "StorageConfig",
    # Events
    "ClipEvent",
    "EventType",
    # Domain
    "AddNoteError",
    "AddNoteResult",
    "AddNoteSuccess",
    "ClipErrorKind",
    "ClipRequest",
    "FetchResult",
    "Note",
    # Storage
    "FileStore",
    "LocalFileStore",
    "NoteStore",
    "SqliteNoteStore",
]
