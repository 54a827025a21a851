"""Common utilities for the QR link service."""

from .validators import is_blank, is_valid_destination, clean_destination
from .headers import extract_forwarded_headers, build_origin
from .url_builder import build_redirect_url, encode_uri_component, normalize_destination
from .logging_config import setup_logging, get_logger

__all__ = [
    "is_blank",
    "is_valid_destination",
    "clean_destination",
    "extract_forwarded_headers",
    "build_origin",
    "build_redirect_url",
    "encode_uri_component",
    "normalize_destination",
    "setup_logging",
    "get_logger",
]
