"""HTML pages for QR links."""

from .routes import router as web_router, redirect_page

__all__ = ["web_router", "redirect_page"]
