"""Async HTTP client that looks like a desktop browser."""

from __future__ import annotations

import logging
from types import TracebackType

import aiohttp

from ..exceptions import ContentTooLargeError
from .protocols import HttpResponse

logger = logging.getLogger(__name__)

DEFAULT_USER_AGENT = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36"
)

# Navigation headers sent with every page request
BROWSER_HEADERS = {
    "Accept": "text/html,application/xhtml+xml,application/xml;q=0.9,image/webp,image/apng,*/*;q=0.8",
    "Accept-Language": "en-US,en;q=0.9,ru;q=0.8",
    "Accept-Encoding": "gzip, deflate",
    "Connection": "keep-alive",
    "Upgrade-Insecure-Requests": "1",
    "Sec-Fetch-Dest": "document",
    "Sec-Fetch-Mode": "navigate",
    "Sec-Fetch-Site": "none",
}


class AsyncHttpClient:
    """
    Single-shot async HTTP client for page clipping.

    Features:
    - Browser-like request headers
    - Redirects followed automatically (including http <-> https)
    - Response bodies returned undecompressed; callers handle Content-Encoding
    - Connect/read/write timeouts
    - Download size ceiling to prevent memory exhaustion

    No retries are performed: a failed request is reported to the caller as-is.

    Example:
        async with AsyncHttpClient() as client:
            response = await client.get("https://example.com")
            print(response.status_code, len(response.content))
    """

    CHUNK_SIZE = 8192

    def __init__(
        self,
        user_agent: str | None = None,
        proxy: str | None = None,
        connect_timeout: float = 30.0,
        read_timeout: float = 30.0,
        write_timeout: float = 30.0,
        max_download_size: int = 50 * 1024 * 1024,
    ) -> None:
        """
        Initialize the HTTP client.

        Args:
            user_agent: Custom User-Agent string (defaults to a desktop Chrome UA)
            proxy: Proxy URL (http:// or socks5://)
            connect_timeout: Seconds allowed to establish a connection
            read_timeout: Seconds allowed between two reads of the response
            write_timeout: Seconds allowed for sending the request
            max_download_size: Maximum raw response size in bytes
        """
        self._user_agent = user_agent or DEFAULT_USER_AGENT
        self._proxy = proxy
        self._max_download_size = max_download_size

        # aiohttp has no write timeout of its own; it is folded into the total budget
        self._timeout = aiohttp.ClientTimeout(
            total=connect_timeout + read_timeout + write_timeout,
            sock_connect=connect_timeout,
            sock_read=read_timeout,
        )

        self._session: aiohttp.ClientSession | None = None

    @property
    def timeout(self) -> aiohttp.ClientTimeout:
        return self._timeout

    def build_headers(self, extra: dict[str, str] | None = None) -> dict[str, str]:
        """Return the full request header set, with optional overrides."""
        headers = {"User-Agent": self._user_agent, **BROWSER_HEADERS}
        if extra:
            headers.update(extra)
        return headers

    async def __aenter__(self) -> AsyncHttpClient:
        """Enter async context and create session."""
        self._session = aiohttp.ClientSession(
            timeout=self._timeout,
            auto_decompress=False,
        )
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        """Exit async context and close session."""
        if self._session:
            await self._session.close()
            self._session = None

    async def get(
        self,
        url: str,
        *,
        headers: dict[str, str] | None = None,
    ) -> HttpResponse:
        """
        Perform one HTTP GET request.

        Args:
            url: The URL to fetch
            headers: Optional additional headers

        Returns:
            HttpResponse with status, raw content, and headers

        Raises:
            aiohttp.ClientError: On network errors
            asyncio.TimeoutError: When a timeout is exceeded
            ContentTooLargeError: When the body exceeds max_download_size
        """
        if self._session is None:
            raise RuntimeError("Client not initialized. Use 'async with' context manager.")

        async with self._session.get(
            url,
            headers=self.build_headers(headers),
            proxy=self._proxy,
            allow_redirects=True,
        ) as response:
            logger.debug(f"HTTP Response: {response.status} {response.reason}")

            content_length = response.headers.get("Content-Length")
            if content_length and content_length.isdigit() and int(content_length) > self._max_download_size:
                raise ContentTooLargeError(f"Content too large: {content_length} bytes")

            content = b""
            if 200 <= response.status < 300:
                async for chunk in response.content.iter_chunked(self.CHUNK_SIZE):
                    content += chunk
                    if len(content) > self._max_download_size:
                        raise ContentTooLargeError(
                            f"Content size limit exceeded: >{self._max_download_size} bytes"
                        )

            return HttpResponse(
                status_code=response.status,
                content=content,
                content_type=response.headers.get("Content-Type", ""),
                headers=dict(response.headers),
                url=str(response.url),
                reason=response.reason or "",
            )
