"""Page retrieval: HTTP fetch, decompression, charset decoding and title extraction."""

from __future__ import annotations

import asyncio
import gzip
import logging
import zlib

from bs4 import BeautifulSoup

from ..http.charset import CharsetResolver
from ..http.protocols import HttpClient, HttpResponse
from ..models.note import FetchResult

logger = logging.getLogger(__name__)

DEFAULT_TITLE = "Untitled Page"
MAX_PAGE_CHARS = 10_000_000

# Human-readable messages for common failure statuses
STATUS_MESSAGES = {
    404: "Page not found",
    403: "Access forbidden",
    500: "Server error",
}


def status_error_message(status_code: int, reason: str) -> str:
    """Map a non-2xx status to the message reported to the user."""
    return STATUS_MESSAGES.get(status_code, f"HTTP {status_code}: {reason}")


def decompress_body(content: bytes, content_encoding: str) -> bytes:
    """
    Undo gzip/deflate content encoding.

    Falls back to the raw bytes when decompression fails, so a mislabelled
    body is still decoded as best as possible.
    """
    if content_encoding == "gzip":
        try:
            return gzip.decompress(content)
        except (OSError, EOFError, zlib.error) as e:
            logger.error(f"Failed to decompress gzip content: {e}")
            return content
    if content_encoding == "deflate":
        try:
            return zlib.decompress(content)
        except zlib.error:
            try:
                # Raw deflate stream without zlib header
                return zlib.decompress(content, -zlib.MAX_WBITS)
            except zlib.error as e:
                logger.error(f"Failed to decompress deflate content: {e}")
                return content
    return content


def extract_title(html: str) -> str:
    """Page title from <title>, else the first <h1>, else a placeholder."""
    try:
        soup = BeautifulSoup(html, "html.parser")
        for tag_name in ("title", "h1"):
            tag = soup.find(tag_name)
            if tag is not None:
                text = " ".join(tag.get_text().split())
                if text:
                    return text
    except Exception as e:
        logger.error(f"Failed to extract title from HTML: {e}")
    return DEFAULT_TITLE


class PageFetcher:
    """
    Fetches one web page and turns it into decoded HTML plus a title.

    Every failure (bad status, empty or oversized body, network error,
    timeout) comes back as a failed FetchResult; nothing is raised except
    task cancellation.

    Example:
        async with AsyncHttpClient() as client:
            fetcher = PageFetcher(client)
            result = await fetcher.fetch("https://example.com")
            if result.success:
                print(result.title)
            else:
                print(result.error)
    """

    def __init__(
        self,
        http_client: HttpClient,
        charset_resolver: CharsetResolver | None = None,
        max_page_chars: int = MAX_PAGE_CHARS,
    ) -> None:
        """
        Initialize the page fetcher.

        Args:
            http_client: HTTP client implementing HttpClient protocol
            charset_resolver: Charset resolver (uses default if None)
            max_page_chars: Maximum decoded page length in characters
        """
        self._client = http_client
        self._resolver = charset_resolver or CharsetResolver()
        self._max_page_chars = max_page_chars

    def _build_result(self, url: str, response: HttpResponse) -> FetchResult:
        if not response.is_success:
            return FetchResult.failure(url, status_error_message(response.status_code, response.reason))

        if not response.content:
            return FetchResult.failure(url, "Empty response body")

        encoding = response.content_encoding
        logger.debug(f"Content-Type: {response.content_type}, Content-Encoding: {encoding or 'none'}")
        body = decompress_body(response.content, encoding)
        logger.debug(f"Final bytes size after decompression: {len(body)}")

        decoded = self._resolver.decode(body, response.content_type)
        html = decoded.text
        logger.debug(
            f"Decoded {len(html)} characters using {decoded.decision.encoding} "
            f"({decoded.decision.source})"
        )

        if len(html) > self._max_page_chars:
            return FetchResult.failure(
                url, f"Page too large: {len(html)} bytes (limit: {self._max_page_chars})"
            )

        title = extract_title(html)
        logger.debug(f"Successfully fetched page: {title}")
        return FetchResult(url=url, title=title, html=html, success=True)

    async def fetch(self, url: str) -> FetchResult:
        """
        Fetch and decode a page.

        Args:
            url: Page URL (assumed already validated)

        Returns:
            FetchResult; check ``success`` before using ``html``
        """
        logger.debug(f"Fetching web page: {url}")
        try:
            response = await self._client.get(url)
            result = self._build_result(url, response)
        except asyncio.TimeoutError:
            logger.error(f"Timed out fetching web page: {url}")
            return FetchResult.failure(url, "Request timed out")
        except Exception as e:
            logger.error(f"Failed to fetch web page {url}: {e}")
            return FetchResult.failure(url, str(e) or type(e).__name__)

        if not result.success:
            logger.error(f"Failed to fetch web page {url}: {result.error}")
        return result
