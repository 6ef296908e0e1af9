"""Protocol definitions for HTTP client abstraction."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Protocol


@dataclass(frozen=True)
class HttpResponse:
    """
    Immutable HTTP response returned by HttpClient.

    Attributes:
        status_code: HTTP status code (200, 404, etc.)
        content: Raw response body as bytes, still compressed if the server compressed it
        content_type: Content-Type header value
        headers: All response headers
        url: Final URL after any redirects
        reason: HTTP reason phrase ("Not Found", ...)
    """

    status_code: int
    content: bytes
    content_type: str
    headers: dict[str, str] = field(default_factory=dict)
    url: str = ""
    reason: str = ""

    @property
    def is_success(self) -> bool:
        """Check for a 2xx status."""
        return 200 <= self.status_code < 300

    @property
    def content_encoding(self) -> str:
        """Content-Encoding header value, lower-cased (empty if absent)."""
        for name, value in self.headers.items():
            if name.lower() == "content-encoding":
                return value.strip().lower()
        return ""


class HttpClient(Protocol):
    """
    Protocol for HTTP clients.

    This abstraction allows for:
    - Mock implementations in tests
    - Different backends (aiohttp, httpx, etc.)
    - Consistent interface across the codebase
    """

    async def get(
        self,
        url: str,
        *,
        headers: dict[str, str] | None = None,
    ) -> HttpResponse:
        """
        Perform a single HTTP GET request.

        Args:
            url: The URL to fetch
            headers: Optional additional headers

        Returns:
            HttpResponse with status, content, and headers

        Raises:
            Exception on network errors or timeouts
        """
        ...
