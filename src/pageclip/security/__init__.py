"""URL validation for pageclip."""

from .url_validator import UrlValidationResult, UrlValidator, is_valid_url

__all__ = ["UrlValidator", "UrlValidationResult", "is_valid_url"]
