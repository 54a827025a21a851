"""Validation utilities for QR links."""

from typing import Tuple

from ..errors import InvalidDestination

MAX_URL_LENGTH = 2048


def is_blank(value) -> bool:
    """True for None, empty, or whitespace-only strings."""
    return value is None or not str(value).strip()


def is_valid_destination(url: str) -> Tuple[bool, str]:
    """Validate a destination URL.

    Only blank input and oversized input are rejected. Scheme-less
    destinations are allowed; they get https:// at resolve time.

    Args:
        url: The destination to validate

    Returns:
        Tuple of (is_valid, error_message)
    """
    if not isinstance(url, str) or is_blank(url):
        return False, "Destination URL is required"

    if len(url.strip()) > MAX_URL_LENGTH:
        return False, f"Destination URL is too long (max {MAX_URL_LENGTH} characters)"

    return True, ""


def clean_destination(url: str) -> str:
    """Return the trimmed destination or raise InvalidDestination."""
    is_valid, error = is_valid_destination(url)
    if not is_valid:
        raise InvalidDestination(error)
    return url.strip()
