"""Protocol definitions for content conversion."""

from typing import Protocol

from bs4 import BeautifulSoup, Tag


class ContentSelector(Protocol):
    """
    Protocol for locating the main content of a parsed page.

    Implementations should return the article/body subtree while dropping
    navigation, headers, footers, scripts, etc.
    """

    def select(self, soup: BeautifulSoup) -> Tag:
        """
        Select the main content element.

        Args:
            soup: Parsed document (may be modified in place)

        Returns:
            The element holding the main content
        """
        ...


class MarkdownConverter(Protocol):
    """
    Protocol for converting HTML to Markdown.

    Implementations must not raise; failures are reported in the returned text.
    """

    def convert(self, html: str) -> str:
        """
        Convert HTML to Markdown.

        Args:
            html: HTML document string

        Returns:
            Markdown string
        """
        ...
