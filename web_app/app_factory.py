"""FastAPI application factory."""

import os

from fastapi import FastAPI
from fastapi.responses import HTMLResponse
from fastapi.staticfiles import StaticFiles

from .api import api_router
from .web import web_router, redirect_page
from .middleware.headers import RequestOriginMiddleware
from .middleware.logging import LoggingMiddleware


def create_app(
    manager,
    resolver,
    config,
) -> FastAPI:
    """Create and configure FastAPI application.

    Args:
        manager: Link lifecycle manager (may be set later, e.g. in lifespan)
        resolver: Redirect resolver (may be set later)
        config: Configuration instance

    Returns:
        Configured FastAPI app
    """
    app = FastAPI(
        title="QR Link",
        description="QR codes that redirect to editable destinations",
        version="1.0.0",
        docs_url="/api/docs",
        redoc_url="/api/redoc",
    )

    app.state.manager = manager
    app.state.resolver = resolver
    app.state.config = config

    app.add_middleware(RequestOriginMiddleware, fallback_base_url=config.base_url)
    app.add_middleware(LoggingMiddleware)

    css_path = os.path.join(os.path.dirname(__file__), "..", "ux", "web", "css")
    if os.path.exists(css_path):
        app.mount("/css", StaticFiles(directory=css_path), name="css")

    app.include_router(api_router, prefix="/api", tags=["API"])
    app.add_api_route(
        config.redirect_path,
        redirect_page,
        methods=["GET"],
        response_class=HTMLResponse,
        include_in_schema=False,
    )
    app.include_router(web_router, tags=["Web"])

    return app
