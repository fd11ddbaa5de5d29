"""Tests for URL validation and sanitizing."""

import pytest

from qrgate.services.url_validation import InvalidUrlError, sanitize_url, validate_url


@pytest.mark.parametrize(
    "raw, reason",
    [
        ("", "Please enter a URL"),
        ("   ", "Please enter a URL"),
        ("example.com", "Invalid URL format"),
        ("ftp://example.com/file", "Only HTTP and HTTPS URLs are supported"),
        ("javascript:alert(1)", "Only HTTP and HTTPS URLs are supported"),
        ("http://", "Invalid domain name"),
        ("http://[::1", "Invalid URL format"),
    ],
)
def test_invalid_urls(raw, reason):
    result = validate_url(raw)
    assert result.valid is False
    assert result.reason == reason


@pytest.mark.parametrize(
    "raw",
    ["https://example.com", "http://example.com:8080/a?b=c#d", "HTTPS://Example.com/path"],
)
def test_valid_urls(raw):
    result = validate_url(raw)
    assert result.valid is True
    assert result.reason == "Valid URL"


def test_sanitize_strips_tags():
    assert sanitize_url("https://example.com/<b>page</b>") == "https://example.com/page"


def test_sanitize_raises_with_reason():
    with pytest.raises(InvalidUrlError) as exc:
        sanitize_url("<script>alert(1)</script>")
    assert exc.value.reason == "Invalid URL format"
    assert isinstance(exc.value, ValueError)
