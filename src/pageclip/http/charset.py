"""Charset resolution for fetched page bytes."""

from __future__ import annotations

import codecs
import logging
import re
from dataclasses import dataclass

logger = logging.getLogger(__name__)

DEFAULT_CHARSET = "UTF-8"

CHARSET_ALIASES = {
    "utf-8": "UTF-8",
    "utf8": "UTF-8",
    "windows-1251": "windows-1251",
    "cp1251": "windows-1251",
    "iso-8859-1": "ISO-8859-1",
    "latin1": "ISO-8859-1",
    "koi8-r": "KOI8-R",
}

# Tried in order when the page shows artifacts but declares no meta charset
FALLBACK_CHARSETS = ("UTF-8", "windows-1251", "ISO-8859-1", "KOI8-R")

# UTF-8 encoded Cyrillic read back as Windows-1252
ENCODING_ARTIFACTS = (
    "Ð",
    "Ñ",
    "Ð°",
    "Ð±",
    "Ð²",
    "Ð³",
    "Ð´",
    "Ðµ",
    "Ð¶",
    "Ð·",
    "Ð¸",
    "Ð¹",
    "Ðº",
    "Ð»",
    "Ð¼",
    "Ð½",
    "Ð¾",
    "Ð¿",
    "Ñ€",
    "Ñ",
    "Ñ‚",
    "Ñƒ",
    "Ñ„",
    "Ñ…",
    "Ñ†",
    "Ñ‡",
    "Ñˆ",
    "Ñ‰",
    "ÑŠ",
    "Ñ‹",
    "ÑŒ",
    "ÑŽ",
    "Ñ",
)

_CONTENT_TYPE_CHARSET = re.compile(r"charset=([^;\s]+)", re.IGNORECASE)
_META_CHARSET = re.compile(
    r"<meta[^>]*charset\s*=\s*[\"']?([^\"'>\s]+)[\"']?[^>]*>",
    re.IGNORECASE,
)
_META_HTTP_EQUIV = re.compile(
    r"<meta[^>]*http-equiv\s*=\s*[\"']?content-type[\"']?[^>]*content\s*=\s*"
    r"[\"']?[^\"'>]*charset\s*=\s*([^\"'>\s;]+)[^>]*>",
    re.IGNORECASE,
)


@dataclass(frozen=True)
class CharsetDecision:
    """
    The encoding a payload was finally decoded with.

    Attributes:
        encoding: Normalized charset name
        source: Where it came from: "header", "default", "meta" or "fallback"
    """

    encoding: str
    source: str


@dataclass(frozen=True)
class DecodedText:
    """Decoded page text together with the charset decision behind it."""

    text: str
    decision: CharsetDecision


def normalize_charset(name: str) -> str:
    """Map common charset aliases to their canonical name; pass others through."""
    cleaned = name.strip().strip("\"'")
    return CHARSET_ALIASES.get(cleaned.lower(), cleaned)


def is_known_charset(name: str) -> bool:
    """Check whether Python has a codec for the given charset name."""
    try:
        codecs.lookup(name)
    except LookupError:
        return False
    return True


def charset_from_content_type(content_type: str | None) -> tuple[str, bool]:
    """
    Extract the charset from a Content-Type header value.

    Args:
        content_type: Raw header value, possibly empty

    Returns:
        Tuple of (charset, declared). ``declared`` is False when the
        default was used because the header had no usable charset.
    """
    if not content_type or not content_type.strip():
        logger.debug("No Content-Type header, using default charset")
        return DEFAULT_CHARSET, False

    match = _CONTENT_TYPE_CHARSET.search(content_type)
    if match is None:
        logger.debug(f"No charset in Content-Type '{content_type}', using {DEFAULT_CHARSET}")
        return DEFAULT_CHARSET, False

    charset = normalize_charset(match.group(1))
    if not is_known_charset(charset):
        logger.debug(f"Unsupported charset '{charset}' in Content-Type, using {DEFAULT_CHARSET}")
        return DEFAULT_CHARSET, False

    return charset, True


def has_encoding_artifacts(text: str) -> bool:
    """Check text for byte patterns left behind by a wrong-charset decode."""
    return any(pattern in text for pattern in ENCODING_ARTIFACTS)


def find_meta_charset(html: str) -> str | None:
    """Find a charset declared in a <meta> tag, if any."""
    match = _META_CHARSET.search(html) or _META_HTTP_EQUIV.search(html)
    if match is None:
        return None
    return normalize_charset(match.group(1))


class CharsetResolver:
    """
    Picks the text encoding for a raw page payload.

    The Content-Type header is trusted first. When the resulting text looks
    garbled, the resolver consults the page's own <meta> declaration and then
    a fixed list of candidate charsets, always re-decoding the original bytes.

    Example:
        resolver = CharsetResolver()
        decoded = resolver.decode(body, "text/html; charset=utf-8")
        print(decoded.decision.encoding, decoded.text[:80])
    """

    def __init__(self, fallback_charsets: tuple[str, ...] = FALLBACK_CHARSETS) -> None:
        self._fallback_charsets = fallback_charsets

    def _decode_declared(self, content: bytes, charset: str) -> tuple[str, bool]:
        """Decode with charset, replacing bad bytes; report whether the decode was clean."""
        try:
            return content.decode(charset), True
        except UnicodeDecodeError as e:
            logger.debug(f"Invalid {charset} bytes, decoding with replacement: {e}")
            return content.decode(charset, errors="replace"), False

    def _try_fallback_charsets(self, content: bytes) -> tuple[str, str] | None:
        for candidate in self._fallback_charsets:
            try:
                text = content.decode(candidate)
            except (UnicodeDecodeError, LookupError) as e:
                logger.debug(f"Failed to test charset {candidate}: {e}")
                continue
            if not has_encoding_artifacts(text):
                return text, candidate
        return None

    def decode(self, content: bytes, content_type: str | None = None) -> DecodedText:
        """
        Decode page bytes, correcting obviously wrong charsets.

        Artifacts send the page to its meta charset, or to the fallback list
        when it declares none. Bytes invalid in the header charset only defer
        to a meta charset; otherwise they are replaced.

        Args:
            content: Raw (already decompressed) response body
            content_type: Content-Type header value

        Returns:
            DecodedText with the text and the charset that produced it
        """
        charset, declared = charset_from_content_type(content_type)
        text, clean = self._decode_declared(content, charset)
        decision = CharsetDecision(encoding=charset, source="header" if declared else "default")
        artifacts = has_encoding_artifacts(text)

        if clean and not artifacts:
            logger.debug(f"Decoded {len(content)} bytes with {charset}")
            return DecodedText(text=text, decision=decision)

        meta_charset = find_meta_charset(text)
        if meta_charset is not None:
            logger.debug(f"Found charset in HTML meta tag: {meta_charset}")
            try:
                corrected = content.decode(meta_charset, errors="replace")
            except LookupError:
                logger.warning(f"Unknown charset in meta tag: {meta_charset}")
            else:
                return DecodedText(text=corrected, decision=CharsetDecision(meta_charset, "meta"))
        elif artifacts:
            logger.debug(f"Detected encoding artifacts decoding with {charset}, attempting to fix")
            found = self._try_fallback_charsets(content)
            if found is not None:
                fixed_text, fixed_charset = found
                logger.debug(f"Fixed encoding with charset: {fixed_charset}")
                return DecodedText(text=fixed_text, decision=CharsetDecision(fixed_charset, "fallback"))

        if artifacts:
            logger.warning(f"Could not correct page encoding, keeping {charset}")
        return DecodedText(text=text, decision=decision)
