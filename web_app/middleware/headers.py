"""Request origin middleware."""

from typing import Callable

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request

from qrlink.common.headers import build_origin


class RequestOriginMiddleware(BaseHTTPMiddleware):
    """Resolve the public origin of each request into ``request.state.origin``.

    Generated payloads point back at this origin, so codes created behind a
    proxy carry the proxy's scheme and host.
    """

    def __init__(self, app, fallback_base_url: str = "http://localhost:9300"):
        super().__init__(app)
        self.fallback_base_url = fallback_base_url

    async def dispatch(self, request: Request, call_next: Callable):
        request.state.origin = build_origin(
            headers=dict(request.headers),
            fallback_base_url=self.fallback_base_url,
            request_scheme=request.url.scheme,
            request_host=request.headers.get("host"),
        )
        return await call_next(request)
