"""Core library for QR redirect links."""

from .payload import PayloadCodec
from .lifecycle import LinkLifecycleManager
from .resolver import RedirectResolver, RedirectSession, ResolverState
from .preview_cache import PreviewCache
from .encoder import QRCodeEncoder

__all__ = [
    "PayloadCodec",
    "LinkLifecycleManager",
    "RedirectResolver",
    "RedirectSession",
    "ResolverState",
    "PreviewCache",
    "QRCodeEncoder",
]
