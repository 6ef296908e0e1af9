"""Custom exceptions for pageclip."""


class PageclipError(Exception):
    """Base exception for pageclip."""


class ConfigError(PageclipError):
    """Raised when configuration is missing or invalid."""


class ContentTooLargeError(PageclipError):
    """Raised when a downloaded page exceeds the configured size ceiling."""
