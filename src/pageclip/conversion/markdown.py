"""HTML to Markdown conversion."""

from __future__ import annotations

import logging
import re
from collections.abc import Iterator

from bs4 import BeautifulSoup, NavigableString, Tag
from bs4.element import PreformattedString

from .extractor import MainContentExtractor
from .protocols import ContentSelector

logger = logging.getLogger(__name__)

CONVERSION_ERROR = "Error converting page content"

HEADING_LEVELS = {"h1": 1, "h2": 2, "h3": 3, "h4": 4, "h5": 5, "h6": 6}

_WHITESPACE = re.compile(r"\s+")
_FENCED_BLOCK = re.compile(r"(^```\n.*?\n```$)", re.MULTILINE | re.DOTALL)


def _collapse(text: str) -> str:
    """Collapse runs of whitespace to single spaces and trim."""
    return _WHITESPACE.sub(" ", text).strip()


def _element_text(tag: Tag) -> str:
    return _collapse(tag.get_text())


def _element_children(tag: Tag) -> list[Tag]:
    return [child for child in tag.children if isinstance(child, Tag)]


def _sibling_position(tag: Tag) -> int:
    """1-based position of tag among its parent's element children."""
    parent = tag.parent
    if parent is None:
        return 1
    for position, sibling in enumerate(_element_children(parent), start=1):
        if sibling is tag:
            return position
    return 1


def _wrap(marker: str, fragments: Iterator[str]) -> str:
    """Wrap inline content in marker, keeping trailing whitespace outside it."""
    inner = "".join(fragments)
    body = inner.rstrip()
    if not body:
        return inner
    return f"{marker}{body}{marker}{inner[len(body):]}"


def _clean_prose(markdown: str) -> str:
    # Remove trailing whitespace on each line
    markdown = "\n".join(line.rstrip() for line in markdown.split("\n"))
    # Remove excessive blank lines
    return re.sub(r"\n{3,}", "\n\n", markdown)


def _clean_output(markdown: str) -> str:
    """Clean up the converted Markdown, leaving fenced code blocks untouched."""
    parts = _FENCED_BLOCK.split(markdown)
    # Odd indices are the captured fences
    return "".join(part if i % 2 else _clean_prose(part) for i, part in enumerate(parts))


def to_paragraph_markup(markdown: str) -> str:
    """
    Wrap Markdown text in paragraph markup.

    The text is wrapped once in ``<p>...</p>``; blank-line separated blocks
    become ``</p><p>`` breaks and empty paragraphs are dropped.
    """
    wrapped = "<p>" + markdown.replace("\n\n", "</p><p>") + "</p>"
    return wrapped.replace("<p></p>", "").strip()


class HtmlToMarkdown:
    """
    Converts the main content of an HTML page to Markdown.

    The content subtree picked by MainContentExtractor is walked in document
    order. Every node yields Markdown fragments which are joined once at the
    end, so the walk never mutates shared state.

    Example:
        converter = HtmlToMarkdown()
        markdown = converter.convert("<h2>Title</h2><p>Hello <strong>world</strong></p>")
        # '## Title\\n\\nHello **world**'
    """

    def __init__(
        self,
        extractor: ContentSelector | None = None,
        paragraph_markup: bool = False,
    ):
        """
        Initialize the Markdown converter.

        Args:
            extractor: Content extractor (uses default if None)
            paragraph_markup: Wrap the output in <p> paragraph markup
        """
        self._extractor: ContentSelector = extractor or MainContentExtractor()
        self._paragraph_markup = paragraph_markup

    def convert(self, html: str) -> str:
        """
        Convert an HTML document to Markdown.

        Never raises: on internal failure the fixed CONVERSION_ERROR text is
        returned instead.

        Args:
            html: HTML document string

        Returns:
            Markdown string (empty for pages without content)
        """
        try:
            logger.debug(f"Converting HTML to Markdown: {len(html)} characters")
            soup = BeautifulSoup(html, "html.parser")
            content = self._extractor.select(soup)

            result = _clean_output("".join(self._convert_children(content, in_pre=False))).strip()
            if self._paragraph_markup:
                result = to_paragraph_markup(result)

            logger.debug(f"Converted to Markdown: {len(result)} characters")
            return result

        except Exception as e:
            logger.error(f"Failed to convert HTML to Markdown: {e}")
            return CONVERSION_ERROR

    def _convert_children(self, tag: Tag, in_pre: bool) -> Iterator[str]:
        for child in tag.children:
            yield from self._convert_node(child, in_pre)

    def _convert_node(self, node: object, in_pre: bool) -> Iterator[str]:
        if isinstance(node, PreformattedString):
            # Comments, doctypes, CDATA and processing instructions
            return
        if isinstance(node, NavigableString):
            text = str(node).strip() if in_pre else _collapse(str(node))
            if text:
                yield text + " "
            return
        if isinstance(node, Tag):
            yield from self._convert_element(node, in_pre)

    def _convert_element(self, tag: Tag, in_pre: bool) -> Iterator[str]:
        name = tag.name

        if name in HEADING_LEVELS:
            yield f"\n{'#' * HEADING_LEVELS[name]} {_element_text(tag)}\n\n"

        elif name == "p":
            yield from self._convert_children(tag, in_pre)
            yield "\n\n"

        elif name == "br":
            yield "\n"

        elif name in ("strong", "b"):
            yield _wrap("**", self._convert_children(tag, in_pre))

        elif name in ("em", "i"):
            yield _wrap("*", self._convert_children(tag, in_pre))

        elif name == "a":
            href = tag.get("href") or ""
            text = _element_text(tag)
            yield f"[{text}]({href})" if href else text

        elif name in ("ul", "ol"):
            yield from self._convert_children(tag, in_pre)
            yield "\n"

        elif name == "li":
            parent_name = tag.parent.name if tag.parent is not None else None
            if parent_name == "ul":
                yield "- "
            elif parent_name == "ol":
                yield f"{_sibling_position(tag)}. "
            yield from self._convert_children(tag, in_pre)
            yield "\n"

        elif name == "blockquote":
            yield "> "
            yield from self._convert_children(tag, in_pre)
            yield "\n\n"

        elif name == "code":
            if in_pre:
                # The surrounding fence already marks the code
                yield from self._convert_children(tag, in_pre)
            else:
                yield _wrap("`", self._convert_children(tag, in_pre))

        elif name == "pre":
            # Fence content survives cleanup verbatim, so drop the text separator here
            code = "".join(self._convert_children(tag, in_pre=True)).rstrip(" ")
            yield f"\n```\n{code}\n```\n\n"

        elif name == "img":
            src = tag.get("src") or ""
            if src:
                yield f"![{tag.get('alt') or ''}]({src})"

        elif name == "table":
            yield "\n"
            yield from self._convert_table(tag)
            yield "\n"

        elif name in ("tr", "td", "th"):
            # Only rendered as part of a table
            return

        elif name == "hr":
            yield "\n---\n\n"

        else:
            # div, span, section and unknown tags are transparent
            yield from self._convert_children(tag, in_pre)

    def _convert_table(self, table: Tag) -> Iterator[str]:
        rows = table.select("tr")
        if not rows:
            return

        header_cells = [_element_text(cell) for cell in rows[0].select("th, td")]
        if header_cells:
            yield f"| {' | '.join(header_cells)} |\n"
            yield f"| {' | '.join('---' for _ in header_cells)} |\n"

        for row in rows[1:]:
            cells = [_element_text(cell) for cell in row.select("td, th")]
            if cells:
                yield f"| {' | '.join(cells)} |\n"
