"""Middleware for the QR link web app."""

from .headers import RequestOriginMiddleware
from .logging import LoggingMiddleware

__all__ = ["RequestOriginMiddleware", "LoggingMiddleware"]
