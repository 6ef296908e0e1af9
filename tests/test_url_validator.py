"""Tests for URL validation."""

import pytest
from pageclip.security import UrlValidator, is_valid_url


class TestUrlValidator:
    """Tests for UrlValidator."""

    @pytest.mark.parametrize(
        "url",
        [
            "https://example.com",
            "http://example.com/path?q=1#frag",
            "https://sub.example.co.uk:8443/a/b",
            "http://127.0.0.1:8080/",
        ],
    )
    def test_accepts_http_urls(self, url):
        """Test that well-formed http(s) URLs are accepted."""
        assert UrlValidator().validate(url).is_valid

    @pytest.mark.parametrize(
        "url",
        [
            "",
            "example.com",
            "ftp://example.com/file",
            "javascript:alert(1)",
            "HTTPS://example.com",
            "https://",
            "https://exa mple.com",
            "https://example.com:notaport/",
        ],
    )
    def test_rejects_invalid_urls(self, url):
        """Test that malformed or non-http(s) URLs are rejected."""
        result = UrlValidator().validate(url)
        assert not result.is_valid
        assert result.rejection_reason

    def test_rejects_non_string(self):
        """Test that non-string input is rejected."""
        assert not UrlValidator().validate(None).is_valid

    def test_scheme_reason(self):
        """Test the rejection reason for a wrong scheme."""
        result = UrlValidator().validate("ftp://example.com")
        assert result.rejection_reason == "URL must start with http:// or https://"

    def test_private_ips_allowed_by_default(self):
        """Test that localhost is allowed unless blocking is enabled."""
        assert UrlValidator().is_valid("http://localhost:8000/")

    @pytest.mark.parametrize(
        "url",
        [
            "http://localhost/",
            "http://127.0.0.1/",
            "http://10.0.0.5/",
            "http://192.168.1.1/admin",
            "http://169.254.169.254/latest/meta-data",
        ],
    )
    def test_blocks_private_ips(self, url):
        """Test that private addresses are rejected when blocking is enabled."""
        assert not UrlValidator(block_private_ips=True).is_valid(url)

    def test_blocking_allows_public_hosts(self):
        """Test that public hosts pass with blocking enabled."""
        assert UrlValidator(block_private_ips=True).is_valid("https://example.com/")


class TestIsValidUrl:
    """Tests for the is_valid_url helper."""

    def test_valid(self):
        assert is_valid_url("https://example.com/article")

    def test_invalid(self):
        assert not is_valid_url("not a url")
