"""Request-scoped accessors shared by API and web routes."""

from fastapi import Request, status

from qrlink.errors import InvalidDestination, MissingPayload, NotFound, StoreUnavailable
from qrlink.lifecycle import LinkLifecycleManager
from qrlink.models import LinkRecord
from qrlink.payload import PayloadCodec
from qrlink.resolver import RedirectResolver


def get_manager(request: Request) -> LinkLifecycleManager:
    return request.app.state.manager


def get_resolver(request: Request) -> RedirectResolver:
    return request.app.state.resolver


def request_codec(request: Request) -> PayloadCodec:
    """Payload codec bound to the origin this request arrived on."""
    codec = get_manager(request).codec
    origin = getattr(request.state, "origin", None)
    return codec.with_origin(origin) if origin else codec


def link_urls(codec: PayloadCodec, record: LinkRecord) -> dict:
    """Inline and managed (id-based) payload URLs for a record."""
    return {
        "payload_url": codec.encode_inline(record.destination_url),
        "managed_url": codec.encode_by_id(record.id),
    }


def status_for(exc: Exception) -> int:
    """HTTP status for a QR link error."""
    if isinstance(exc, (InvalidDestination, MissingPayload)):
        return status.HTTP_400_BAD_REQUEST
    if isinstance(exc, NotFound):
        return status.HTTP_404_NOT_FOUND
    if isinstance(exc, StoreUnavailable):
        return status.HTTP_503_SERVICE_UNAVAILABLE
    return status.HTTP_500_INTERNAL_SERVER_ERROR
