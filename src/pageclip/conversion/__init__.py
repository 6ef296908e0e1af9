"""Content conversion for pageclip (main content selection, HTML to Markdown)."""

from .extractor import CONTENT_SELECTORS, MainContentExtractor
from .markdown import CONVERSION_ERROR, HtmlToMarkdown, to_paragraph_markup
from .protocols import ContentSelector, MarkdownConverter

__all__ = [
    # Protocols
    "ContentSelector",
    "MarkdownConverter",
    # Implementations
    "MainContentExtractor",
    "HtmlToMarkdown",
    "to_paragraph_markup",
    "CONTENT_SELECTORS",
    "CONVERSION_ERROR",
]
