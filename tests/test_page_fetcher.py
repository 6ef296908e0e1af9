"""Tests for PageFetcher."""

import asyncio
import gzip
import zlib
from unittest.mock import AsyncMock

import aiohttp
import pytest
from pageclip.core.page_fetcher import (
    DEFAULT_TITLE,
    PageFetcher,
    decompress_body,
    extract_title,
    status_error_message,
)
from pageclip.exceptions import ContentTooLargeError
from pageclip.http.protocols import HttpResponse

URL = "https://example.com/article"
HTML = "<html><head><title>Test Page</title></head><body><p>Hello</p></body></html>"


def make_response(
    status_code=200,
    content=HTML.encode("utf-8"),
    content_type="text/html; charset=utf-8",
    headers=None,
    reason="OK",
):
    return HttpResponse(
        status_code=status_code,
        content=content,
        content_type=content_type,
        headers=headers or {},
        url=URL,
        reason=reason,
    )


def make_fetcher(response=None, side_effect=None, **kwargs):
    client = AsyncMock()
    if side_effect is not None:
        client.get.side_effect = side_effect
    else:
        client.get.return_value = response
    return PageFetcher(client, **kwargs), client


class TestExtractTitle:
    """Tests for title extraction."""

    def test_title_tag(self):
        assert extract_title(HTML) == "Test Page"

    def test_h1_fallback(self):
        """Test the first h1 is used without a title."""
        assert extract_title("<body><h1>Heading  One</h1><h1>Two</h1></body>") == "Heading One"

    def test_empty_title_falls_back_to_h1(self):
        assert extract_title("<title>  </title><h1>Heading</h1>") == "Heading"

    def test_default_title(self):
        assert extract_title("<p>No title here</p>") == DEFAULT_TITLE

    def test_whitespace_collapsed(self):
        assert extract_title("<title>\n  Spread \n out  </title>") == "Spread out"


class TestHelpers:
    """Tests for status messages and decompression helpers."""

    @pytest.mark.parametrize(
        "code,expected",
        [(404, "Page not found"), (403, "Access forbidden"), (500, "Server error")],
    )
    def test_known_statuses(self, code, expected):
        assert status_error_message(code, "whatever") == expected

    def test_other_status(self):
        assert status_error_message(418, "I'm a teapot") == "HTTP 418: I'm a teapot"

    def test_gzip(self):
        assert decompress_body(gzip.compress(b"data"), "gzip") == b"data"

    def test_deflate(self):
        assert decompress_body(zlib.compress(b"data"), "deflate") == b"data"

    def test_raw_deflate(self):
        compressor = zlib.compressobj(wbits=-zlib.MAX_WBITS)
        raw = compressor.compress(b"data") + compressor.flush()
        assert decompress_body(raw, "deflate") == b"data"

    def test_invalid_gzip_returns_raw(self):
        assert decompress_body(b"not gzip", "gzip") == b"not gzip"

    def test_identity(self):
        assert decompress_body(b"plain", "") == b"plain"


class TestPageFetcher:
    """Tests for PageFetcher.fetch."""

    @pytest.mark.asyncio
    async def test_success(self):
        """Test a successful fetch returns decoded HTML and title."""
        fetcher, client = make_fetcher(make_response())
        result = await fetcher.fetch(URL)

        assert result.success is True
        assert result.error is None
        assert result.title == "Test Page"
        assert result.html == HTML
        client.get.assert_called_once_with(URL)

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "status,message",
        [
            (404, "Page not found"),
            (403, "Access forbidden"),
            (500, "Server error"),
            (503, "HTTP 503: Service Unavailable"),
        ],
    )
    async def test_error_statuses(self, status, message):
        """Test non-2xx statuses become failed results."""
        fetcher, _ = make_fetcher(make_response(status_code=status, content=b"", reason="Service Unavailable"))
        result = await fetcher.fetch(URL)

        assert result.success is False
        assert result.error == message
        assert result.title == "Error"
        assert result.html == ""

    @pytest.mark.asyncio
    async def test_empty_body(self):
        fetcher, _ = make_fetcher(make_response(content=b""))
        result = await fetcher.fetch(URL)
        assert result.success is False
        assert result.error == "Empty response body"

    @pytest.mark.asyncio
    async def test_gzip_body(self):
        """Test gzip-encoded bodies are decompressed."""
        response = make_response(
            content=gzip.compress(HTML.encode("utf-8")),
            headers={"Content-Encoding": "gzip"},
        )
        fetcher, _ = make_fetcher(response)
        result = await fetcher.fetch(URL)
        assert result.success is True
        assert result.html == HTML

    @pytest.mark.asyncio
    async def test_mislabelled_gzip_uses_raw_bytes(self):
        """Test a body wrongly labelled gzip is decoded as-is."""
        response = make_response(headers={"content-encoding": "GZIP"})
        fetcher, _ = make_fetcher(response)
        result = await fetcher.fetch(URL)
        assert result.success is True
        assert result.title == "Test Page"

    @pytest.mark.asyncio
    async def test_charset_corrected(self):
        """Test wrongly declared windows-1251 pages are decoded via meta charset."""
        html = '<html><head><meta charset="windows-1251"><title>Новости</title></head></html>'
        response = make_response(content=html.encode("windows-1251"))
        fetcher, _ = make_fetcher(response)
        result = await fetcher.fetch(URL)
        assert result.success is True
        assert result.title == "Новости"

    @pytest.mark.asyncio
    async def test_page_too_large(self):
        """Test pages over the character limit are rejected."""
        fetcher, _ = make_fetcher(make_response(), max_page_chars=10)
        result = await fetcher.fetch(URL)
        assert result.success is False
        assert result.error.startswith("Page too large")
        assert "limit: 10" in result.error

    @pytest.mark.asyncio
    async def test_timeout(self):
        fetcher, _ = make_fetcher(side_effect=asyncio.TimeoutError())
        result = await fetcher.fetch(URL)
        assert result.success is False
        assert result.error == "Request timed out"

    @pytest.mark.asyncio
    async def test_network_error(self):
        """Test client errors become failed results with their message."""
        fetcher, _ = make_fetcher(side_effect=aiohttp.ClientConnectionError("Connection refused"))
        result = await fetcher.fetch(URL)
        assert result.success is False
        assert result.error == "Connection refused"

    @pytest.mark.asyncio
    async def test_error_without_message(self):
        """Test exceptions without a message report their type."""
        fetcher, _ = make_fetcher(side_effect=RuntimeError())
        result = await fetcher.fetch(URL)
        assert result.success is False
        assert result.error == "RuntimeError"

    @pytest.mark.asyncio
    async def test_download_limit(self):
        fetcher, _ = make_fetcher(side_effect=ContentTooLargeError("Content too large: 99 bytes"))
        result = await fetcher.fetch(URL)
        assert result.success is False
        assert result.error == "Content too large: 99 bytes"

    @pytest.mark.asyncio
    async def test_untitled_page(self):
        fetcher, _ = make_fetcher(make_response(content=b"<p>just text</p>"))
        result = await fetcher.fetch(URL)
        assert result.success is True
        assert result.title == DEFAULT_TITLE
