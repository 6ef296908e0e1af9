"""HTTP client and charset handling for pageclip."""

from .charset import (
    CharsetDecision,
    CharsetResolver,
    DecodedText,
    charset_from_content_type,
    find_meta_charset,
    has_encoding_artifacts,
    normalize_charset,
)
from .client import AsyncHttpClient
from .protocols import HttpClient, HttpResponse

__all__ = [
    "AsyncHttpClient",
    "CharsetDecision",
    "CharsetResolver",
    "DecodedText",
    "HttpClient",
    "HttpResponse",
    "charset_from_content_type",
    "find_meta_charset",
    "has_encoding_artifacts",
    "normalize_charset",
]
