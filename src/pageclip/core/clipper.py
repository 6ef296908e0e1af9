"""Clip orchestration: turn a URL into a stored Markdown note."""

from __future__ import annotations

import asyncio
import logging
import uuid
from types import TracebackType
from typing import Callable

from ..conversion.markdown import CONVERSION_ERROR, HtmlToMarkdown
from ..conversion.protocols import MarkdownConverter
from ..http.client import AsyncHttpClient
from ..models.config import ClipperConfig
from ..models.events import ClipEvent, EventType
from ..models.note import (
    AddNoteError,
    AddNoteResult,
    AddNoteSuccess,
    ClipErrorKind,
    ClipRequest,
    FetchResult,
    Note,
    now_millis,
)
from ..security.url_validator import UrlValidator
from ..storage.files import LocalFileStore
from ..storage.notes import SqliteNoteStore
from ..storage.protocols import FileStore, NoteStore
from .page_fetcher import PageFetcher

logger = logging.getLogger(__name__)

EventCallback = Callable[[ClipEvent], None]


def generate_note_id() -> str:
    return str(uuid.uuid4())


def generate_file_name() -> str:
    return f"{uuid.uuid4()}.md"


# Messages produced by the decoded-size check and by the transport download ceiling
_TOO_LARGE_PREFIXES = ("Page too large", "Content too large", "Content size limit")


def _fetch_error_kind(message: str | None) -> ClipErrorKind:
    if message and message.startswith(_TOO_LARGE_PREFIXES):
        return ClipErrorKind.CONTENT_TOO_LARGE
    return ClipErrorKind.NETWORK_FAILURE


class Clipper:
    """
    Clips web pages into stored Markdown notes.

    The clipper validates the URL, fetches the page, converts its main
    content to Markdown, writes the Markdown file and finally records the
    note. The file is always written before the record, and removed before
    the record on delete, so a record never points at a missing file.

    Stores are injected; when omitted they are created from the config.
    Used as an async context manager the clipper also owns its HTTP client.

    Example:
        config = ClipperConfig(storage={"directory": Path("./notes")})

        async with Clipper(config) as clipper:
            result = await clipper.add_note_from_url("https://example.com/article")
            if result.is_success:
                print(result.note.title)
            else:
                print(result.message)
    """

    def __init__(
        self,
        config: ClipperConfig | None = None,
        *,
        note_store: NoteStore | None = None,
        file_store: FileStore | None = None,
        page_fetcher: PageFetcher | None = None,
        converter: MarkdownConverter | None = None,
        url_validator: UrlValidator | None = None,
        on_event: EventCallback | None = None,
    ) -> None:
        """
        Initialize the clipper.

        Args:
            config: Configuration (defaults used if None)
            note_store: Note record store (SQLite store from config if None)
            file_store: Markdown file store (local pages directory from config if None)
            page_fetcher: Page fetcher (created on context entry if None)
            converter: HTML to Markdown converter
            url_validator: URL validator
            on_event: Optional callback receiving lifecycle events
        """
        self.config = config or ClipperConfig()
        self._owns_note_store = note_store is None
        self._note_store: NoteStore = note_store or SqliteNoteStore(self.config.storage.database_path)
        self._file_store: FileStore = file_store or LocalFileStore(self.config.storage.pages_path)
        self._page_fetcher = page_fetcher
        self._converter: MarkdownConverter = converter or HtmlToMarkdown(
            paragraph_markup=self.config.content.paragraph_markup
        )
        self._url_validator = url_validator or UrlValidator(
            block_private_ips=self.config.security.block_private_ips
        )
        self.on_event = on_event
        self._http_client: AsyncHttpClient | None = None

    @property
    def note_store(self) -> NoteStore:
        return self._note_store

    @property
    def file_store(self) -> FileStore:
        return self._file_store

    async def __aenter__(self) -> Clipper:
        """Enter async context and create the HTTP client if needed."""
        if self._page_fetcher is None:
            network = self.config.network
            self._http_client = AsyncHttpClient(
                user_agent=network.user_agent,
                proxy=network.proxy,
                connect_timeout=network.connect_timeout,
                read_timeout=network.read_timeout,
                write_timeout=network.write_timeout,
                max_download_size=network.max_download_size,
            )
            await self._http_client.__aenter__()
            self._page_fetcher = PageFetcher(
                self._http_client,
                max_page_chars=self.config.content.max_page_chars,
            )
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        """Exit async context and release the HTTP client."""
        if self._http_client is not None:
            await self._http_client.__aexit__(exc_type, exc_val, exc_tb)
            self._http_client = None
            self._page_fetcher = None
        if self._owns_note_store and isinstance(self._note_store, SqliteNoteStore):
            self._note_store.close()

    def _emit(self, event: ClipEvent) -> None:
        if self.on_event:
            self.on_event(event)

    def _fail(self, url: str, message: str, kind: ClipErrorKind) -> AddNoteError:
        logger.error(f"Failed to add note from {url}: {message}")
        self._emit(ClipEvent(type=EventType.CLIP_FAILED, url=url, error=message))
        return AddNoteError(message=message, kind=kind)

    async def clip(self, request: ClipRequest) -> AddNoteResult:
        """Clip the page named by a ClipRequest."""
        return await self.add_note_from_url(request.url)

    async def add_note_from_url(self, url: str) -> AddNoteResult:
        """
        Fetch a page, convert it to Markdown and store it as a note.

        Never raises (apart from task cancellation): every failure is
        returned as AddNoteError.

        Args:
            url: Absolute http(s) URL of the page

        Returns:
            AddNoteSuccess with the stored note, or AddNoteError
        """
        try:
            logger.info(f"Starting to add note from URL: {url}")
            self._emit(ClipEvent(type=EventType.CLIP_STARTED, url=url, message=f"Clipping {url}"))

            if not self._url_validator.is_valid(url):
                return self._fail(url, "Invalid URL format", ClipErrorKind.INVALID_INPUT)

            if self._page_fetcher is None:
                raise RuntimeError("Clipper not initialized. Use 'async with' context manager.")

            page: FetchResult = await self._page_fetcher.fetch(url)
            if not page.success:
                message = page.error or "Failed to load page"
                return self._fail(url, message, _fetch_error_kind(page.error))
            self._emit(ClipEvent(type=EventType.FETCH_COMPLETED, url=url, message=page.title))

            markdown = await asyncio.to_thread(self._converter.convert, page.html)
            if not markdown.strip() or markdown == CONVERSION_ERROR:
                return self._fail(url, "Failed to convert page content", ClipErrorKind.CONVERSION_FAILURE)
            self._emit(
                ClipEvent(
                    type=EventType.PAGE_CONVERTED,
                    url=url,
                    message=f"Converted to {len(markdown)} characters of Markdown",
                )
            )

            current_time = now_millis()
            note = Note(
                id=generate_note_id(),
                title=page.title,
                url=url,
                file_name=generate_file_name(),
                date_created=current_time,
                date_modified=current_time,
                size=len(markdown.encode("utf-8")),
            )

            saved = await asyncio.to_thread(self._file_store.save, note.file_name, markdown)
            if not saved:
                return self._fail(url, "Failed to save markdown file", ClipErrorKind.PERSISTENCE_FAILURE)
            self._emit(
                ClipEvent(type=EventType.FILE_SAVED, url=url, file_name=note.file_name, size=note.size)
            )

            try:
                await asyncio.to_thread(self._note_store.insert, note)
            except Exception as e:
                logger.exception(f"Failed to record note for {url}")
                return self._fail(url, str(e) or "Unknown error occurred", ClipErrorKind.PERSISTENCE_FAILURE)
            self._emit(ClipEvent(type=EventType.NOTE_SAVED, url=url, note_id=note.id, message=note.title))

            logger.info(f"Successfully added note: {note.title}")
            return AddNoteSuccess(note=note)

        except Exception as e:
            logger.exception(f"Error adding note from URL: {url}")
            return self._fail(url, str(e) or "Unknown error occurred", ClipErrorKind.UNKNOWN)

    async def get_note(self, note_id: str) -> Note | None:
        return await asyncio.to_thread(self._note_store.get_by_id, note_id)

    async def list_notes(self) -> list[Note]:
        """All notes, most recently modified first."""
        return await asyncio.to_thread(self._note_store.get_all)

    async def count_notes(self) -> int:
        return await asyncio.to_thread(self._note_store.count)

    async def read_markdown(self, note: Note) -> str | None:
        """Read the stored Markdown of a note (None if the file is missing)."""
        return await asyncio.to_thread(self._file_store.read, note.file_name)

    async def delete_note(self, note: Note) -> bool:
        """
        Delete a note: its Markdown file first, then its record.

        A file that is already gone counts as deleted. If the file cannot be
        removed the record is kept and False is returned.

        Args:
            note: The note to delete

        Returns:
            True if the note was deleted
        """
        if not await asyncio.to_thread(self._file_store.delete, note.file_name):
            logger.error(f"Could not delete file for note {note.id}, keeping record")
            return False

        await asyncio.to_thread(self._note_store.delete, note)
        self._emit(ClipEvent(type=EventType.NOTE_DELETED, url=note.url, note_id=note.id))
        logger.info(f"Deleted note: {note.title}")
        return True


def clip_blocking(
    url: str,
    config: ClipperConfig | None = None,
    on_event: EventCallback | None = None,
) -> AddNoteResult:
    """
    Blocking clip with optional event callback.

    This is a convenience wrapper for sync code that can't use async/await.
    For async code, use the Clipper class directly.

    WARNING: Do not call from within an existing event loop (e.g., Jupyter,
    asyncio-based frameworks). Use the async Clipper API instead.

    Args:
        url: The URL to clip
        config: Configuration (defaults used if None)
        on_event: Optional callback for events

    Returns:
        AddNoteResult of the clip
    """
    # Detect if we're already in an async context
    try:
        asyncio.get_running_loop()
        raise RuntimeError("clip_blocking() called from async context. Use 'async with Clipper()' instead.")
    except RuntimeError as e:
        if "no running event loop" not in str(e).lower():
            raise

    async def _run() -> AddNoteResult:
        async with Clipper(config, on_event=on_event) as clipper:
            return await clipper.add_note_from_url(url)

    return asyncio.run(_run())
