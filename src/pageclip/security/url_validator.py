"""URL validation for clip requests."""

from __future__ import annotations

import ipaddress
import logging
from dataclasses import dataclass
from urllib.parse import urlparse


@dataclass(frozen=True)
class UrlValidationResult:
    """Outcome of checking one URL; ``rejection_reason`` is set when invalid."""

    is_valid: bool
    rejection_reason: str | None = None

    @classmethod
    def valid(cls) -> UrlValidationResult:
        return cls(is_valid=True)

    @classmethod
    def invalid(cls, reason: str) -> UrlValidationResult:
        return cls(is_valid=False, rejection_reason=reason)


# ipaddress predicates checked when private addresses are blocked
_BLOCKED_ADDRESS_KINDS = (
    ("is_private", "Private"),
    ("is_loopback", "Loopback"),
    ("is_link_local", "Link-local"),
    ("is_reserved", "Reserved"),
)


class UrlValidator:
    """
    Validates URLs before they are clipped.

    A URL is accepted when it parses, literally starts with ``http://`` or
    ``https://`` and names a host. Private-network addresses can optionally
    be rejected as well (SSRF protection for server deployments).

    Example:
        validator = UrlValidator()
        result = validator.validate("https://example.com/page")
        if not result.is_valid:
            print(f"Rejected: {result.rejection_reason}")
    """

    ALLOWED_PREFIXES = ("http://", "https://")
    LOCALHOST_NAMES = {"localhost", "localhost.localdomain"}

    def __init__(
        self,
        block_private_ips: bool = False,
        logger: logging.Logger | None = None,
    ):
        """
        Initialize the URL validator.

        Args:
            block_private_ips: Whether to block localhost and private/internal IPs
            logger: Optional logger for validation messages
        """
        self.block_private_ips = block_private_ips
        self.logger = logger or logging.getLogger(__name__)

    def validate(self, url: str) -> UrlValidationResult:
        """
        Validate a URL.

        Args:
            url: The URL to validate

        Returns:
            UrlValidationResult with is_valid and optional rejection_reason
        """
        if not isinstance(url, str) or not url:
            return UrlValidationResult.invalid("URL is empty")

        if not url.startswith(self.ALLOWED_PREFIXES):
            return UrlValidationResult.invalid("URL must start with http:// or https://")

        if any(ch.isspace() for ch in url):
            return UrlValidationResult.invalid("URL contains whitespace")

        try:
            parsed = urlparse(url)
            # Accessing port validates it (raises ValueError when out of range or non-numeric)
            _ = parsed.port
        except ValueError:
            return UrlValidationResult.invalid("Invalid URL format")

        hostname = parsed.hostname
        if not hostname:
            return UrlValidationResult.invalid("URL has no domain")

        if self.block_private_ips:
            if hostname in self.LOCALHOST_NAMES:
                return UrlValidationResult.invalid("Localhost URLs not allowed")
            ip_result = self._check_ip_address(hostname)
            if ip_result is not None:
                return ip_result

        return UrlValidationResult.valid()

    def _check_ip_address(self, hostname: str) -> UrlValidationResult | None:
        """Reject literal IP hosts in blocked ranges; domain names pass (None)."""
        try:
            address = ipaddress.ip_address(hostname)
        except ValueError:
            return None

        for predicate, label in _BLOCKED_ADDRESS_KINDS:
            if getattr(address, predicate):
                return UrlValidationResult.invalid(f"{label} IP address '{hostname}' not allowed")
        return None

    def is_valid(self, url: str) -> bool:
        """Validate url, logging the reason when it is rejected."""
        result = self.validate(url)
        if not result.is_valid:
            self.logger.debug(f"Rejected URL {url!r}: {result.rejection_reason}")
        return result.is_valid


def is_valid_url(url: str) -> bool:
    """Check that url is well-formed and uses the http or https scheme."""
    return UrlValidator().is_valid(url)
