"""URL checks applied before a QR code is generated."""

from __future__ import annotations

import re
from dataclasses import dataclass
from urllib.parse import urlsplit

ALLOWED_SCHEMES = ("http", "https")
_TAG_RE = re.compile(r"<[^>]*>?")


class InvalidUrlError(ValueError):
    """Raised when a URL cannot be encoded."""

    def __init__(self, reason: str) -> None:
        super().__init__(reason)
        self.reason = reason


@dataclass(frozen=True)
class ValidationResult:
    valid: bool
    reason: str


def validate_url(raw: str) -> ValidationResult:
    if not raw or not raw.strip():
        return ValidationResult(False, "Please enter a URL")

    try:
        parts = urlsplit(raw.strip())
        # Accessing .port validates the netloc
        parts.port
    except ValueError:
        return ValidationResult(False, "Invalid URL format")

    if not parts.scheme:
        return ValidationResult(False, "Invalid URL format")
    if parts.scheme.lower() not in ALLOWED_SCHEMES:
        return ValidationResult(False, "Only HTTP and HTTPS URLs are supported")
    if not parts.hostname:
        return ValidationResult(False, "Invalid domain name")
    if any(ch.isspace() for ch in parts.netloc):
        return ValidationResult(False, "Invalid URL format")
    return ValidationResult(True, "Valid URL")


def sanitize_url(raw: str) -> str:
    """
    Strip markup from `raw` and return the normalized URL.

    Raises InvalidUrlError if what remains is not an http(s) URL.
    """
    cleaned = _TAG_RE.sub("", raw or "").strip()
    result = validate_url(cleaned)
    if not result.valid:
        raise InvalidUrlError(result.reason)
    return urlsplit(cleaned).geturl()
