"""Main content selection for clipped pages."""

import logging
from typing import Optional

from bs4 import BeautifulSoup, Tag

logger = logging.getLogger(__name__)

# Tried in order; the first match wins
CONTENT_SELECTORS = [
    "main",
    "article",
    "[role=main]",
    ".content",
    ".main-content",
    ".post-content",
    ".entry-content",
    ".article-content",
    "#content",
    "#main",
    "#article",
    ".post",
    ".entry",
]

# Elements removed before selection (navigation, scripts, boilerplate)
REMOVE_SELECTORS = "script, style, nav, footer, header, aside"


class MainContentExtractor:
    """
    Finds the subtree of a page most likely to hold the article body.

    Non-content elements are stripped from the document first, then a fixed
    list of structural selectors is tried in priority order. Pages matching
    none of them fall back to ``<body>``.

    Example:
        soup = BeautifulSoup(html, "html.parser")
        content = MainContentExtractor().select(soup)
    """

    def __init__(self, content_selectors: Optional[list[str]] = None):
        """
        Initialize the content extractor.

        Args:
            content_selectors: CSS selectors for main content (overrides defaults)
        """
        self._content_selectors = content_selectors or CONTENT_SELECTORS

    def _remove_unwanted(self, soup: BeautifulSoup) -> None:
        for el in soup.select(REMOVE_SELECTORS):
            el.decompose()

    def _find_main_content(self, soup: BeautifulSoup) -> Optional[Tag]:
        for selector in self._content_selectors:
            element = soup.select_one(selector)
            if element is not None:
                logger.debug(f"Found main content with selector: {selector}")
                return element
        return None

    def select(self, soup: BeautifulSoup) -> Tag:
        """
        Select the main content of a parsed document.

        The document is modified in place: non-content elements are removed.

        Args:
            soup: Parsed document

        Returns:
            The main content element, the body, or the whole document for
            fragments without a body
        """
        self._remove_unwanted(soup)

        main_content = self._find_main_content(soup)
        if main_content is not None:
            return main_content

        logger.debug("No main content found, using body")
        body = soup.find("body")
        if isinstance(body, Tag):
            return body

        # Fragment without <body>: everything outside <head> is the body
        for head in soup.find_all("head"):
            head.decompose()
        return soup
