"""JSON API for QR links."""

from .routes import router as api_router

__all__ = ["api_router"]
