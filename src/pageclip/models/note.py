"""Domain records for clipped notes."""

from __future__ import annotations

import time
from dataclasses import dataclass, replace
from enum import Enum
from typing import Optional, Union


def now_millis() -> int:
    """Current time as epoch milliseconds."""
    return int(time.time() * 1000)


@dataclass(frozen=True)
class ClipRequest:
    """A request to clip the page at ``url``."""

    url: str


@dataclass(frozen=True)
class FetchResult:
    """
    Outcome of fetching a single page.

    Failures are carried as values: ``success`` is False, ``error`` holds a
    human-readable message, ``title`` is "Error" and ``html`` is empty.
    """

    url: str
    title: str
    html: str
    success: bool
    error: Optional[str] = None

    @classmethod
    def failure(cls, url: str, error: str) -> FetchResult:
        """Create a failed fetch result."""
        return cls(url=url, title="Error", html="", success=False, error=error)


@dataclass(frozen=True)
class Note:
    """
    A stored clip.

    Attributes:
        id: UUID string, unique and immutable
        title: Page title at clip time
        url: Source URL
        file_name: Opaque name of the Markdown payload in the file store
        date_created: Epoch milliseconds
        date_modified: Epoch milliseconds, never earlier than date_created
        size: Byte length of the stored Markdown payload
    """

    id: str
    title: str
    url: str
    file_name: str
    date_created: int
    date_modified: int
    size: int

    def __post_init__(self) -> None:
        if self.date_modified < self.date_created:
            raise ValueError("date_modified must not be earlier than date_created")
        if self.size < 0:
            raise ValueError("size must not be negative")

    def touched(self, size: int, modified_at: Optional[int] = None) -> Note:
        """Return a copy with a new payload size and modification time."""
        modified = max(modified_at if modified_at is not None else now_millis(), self.date_created)
        return replace(self, size=size, date_modified=modified)


class ClipErrorKind(str, Enum):
    """Categories of clip failures."""

    INVALID_INPUT = "invalid_input"
    NETWORK_FAILURE = "network_failure"
    CONTENT_TOO_LARGE = "content_too_large"
    CONVERSION_FAILURE = "conversion_failure"
    PERSISTENCE_FAILURE = "persistence_failure"
    UNKNOWN = "unknown"


@dataclass(frozen=True)
class AddNoteSuccess:
    """The page was clipped and stored."""

    note: Note

    @property
    def is_success(self) -> bool:
        return True


@dataclass(frozen=True)
class AddNoteError:
    """The page could not be clipped."""

    message: str
    kind: ClipErrorKind = ClipErrorKind.UNKNOWN

    @property
    def is_success(self) -> bool:
        return False


AddNoteResult = Union[AddNoteSuccess, AddNoteError]
