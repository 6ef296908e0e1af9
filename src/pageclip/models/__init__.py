"""Pageclip configuration, domain and event models."""

from .config import (
    ByteSize,
    ClipperConfig,
    ContentConfig,
    NetworkConfig,
    SecurityConfig,
    StorageConfig,
)
from .events import ClipEvent, EventType
from .note import (
    AddNoteError,
    AddNoteResult,
    AddNoteSuccess,
    ClipErrorKind,
    ClipRequest,
    FetchResult,
    Note,
    now_millis,
)

__all__ = [
    # Config
    "ByteSize",
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
    "now_millis",
]
