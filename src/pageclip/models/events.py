"""Event types emitted while clipping a page."""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Optional


class EventType(str, Enum):
    """Types of events emitted during a clip."""

    CLIP_STARTED = "clip_started"
    FETCH_COMPLETED = "fetch_completed"
    PAGE_CONVERTED = "page_converted"
    FILE_SAVED = "file_saved"
    NOTE_SAVED = "note_saved"
    CLIP_FAILED = "clip_failed"
    NOTE_DELETED = "note_deleted"


@dataclass
class ClipEvent:
    """
    Event emitted during clip operations.

    Example:
        def on_event(event: ClipEvent) -> None:
            if event.is_error:
                print(f"Error: {event.url} - {event.error}")

        async with Clipper(config, on_event=on_event) as clipper:
            await clipper.add_note_from_url("https://example.com")
    """

    type: EventType

    # Timestamp (always UTC)
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    url: Optional[str] = None
    message: Optional[str] = None
    error: Optional[str] = None

    note_id: Optional[str] = None
    file_name: Optional[str] = None
    size: Optional[int] = None

    @property
    def is_error(self) -> bool:
        """Check if this is an error event."""
        return self.type == EventType.CLIP_FAILED
