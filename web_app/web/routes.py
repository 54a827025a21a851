"""Web interface routes implementation."""

import os
from urllib.parse import urlencode

from fastapi import APIRouter, Form, HTTPException, Request, status
from fastapi.responses import HTMLResponse, RedirectResponse
from fastapi.templating import Jinja2Templates

from qrlink.common.url_builder import normalize_destination
from qrlink.errors import InvalidDestination, QRLinkError
from qrlink.models import DashboardState
from qrlink.resolver import error_reason

from ..deps import get_manager, get_resolver, link_urls, request_codec, status_for

router = APIRouter()

template_dir = os.path.join(os.path.dirname(__file__), "..", "..", "ux", "web")
templates = Jinja2Templates(directory=template_dir)
# Links built from user-entered destinations only ever use http(s).
templates.env.filters["destination_href"] = normalize_destination


def _error_page(request: Request, title: str, message: str, status_code: int) -> HTMLResponse:
    return templates.TemplateResponse(
        request,
        "error.html",
        {"title": title, "error_message": message},
        status_code=status_code,
    )


def _dashboard_redirect(request: Request, **params) -> RedirectResponse:
    url = str(request.url_for("dashboard"))
    query = urlencode({k: v for k, v in params.items() if v})
    return RedirectResponse(
        url=f"{url}?{query}" if query else url,
        status_code=status.HTTP_303_SEE_OTHER,
    )


@router.get("/", response_class=HTMLResponse, include_in_schema=False)
async def homepage(request: Request):
    """Serve the generator form."""
    return templates.TemplateResponse(request, "index.html", {"url": "", "result": None, "error": None})


@router.post("/create", response_class=HTMLResponse, include_in_schema=False)
async def create_link_web(request: Request, url: str = Form("")):
    """Handle generator form submission."""
    manager = get_manager(request)

    try:
        result = await manager.create(url, codec=request_codec(request))
    except QRLinkError as e:
        return templates.TemplateResponse(
            request,
            "index.html",
            {"url": url, "result": None, "error": str(e)},
            status_code=status_for(e),
        )

    return templates.TemplateResponse(
        request,
        "index.html",
        {"url": url.strip(), "result": result, "error": None},
    )


@router.get("/dashboard", response_class=HTMLResponse, include_in_schema=False, name="dashboard")
async def dashboard(request: Request):
    """List link records with previews and inline editing."""
    manager = get_manager(request)
    codec = request_codec(request)
    state = DashboardState.from_query(request.query_params)

    try:
        records = await manager.list()
    except QRLinkError as e:
        state.error = str(e)
        records = []

    state.previews = await manager.previews_for(records, codec=codec)
    links = [{"record": record, **link_urls(codec, record)} for record in records]

    return templates.TemplateResponse(request, "dashboard.html", {"links": links, "state": state})


@router.post("/dashboard/{record_id}/edit", include_in_schema=False)
async def edit_link_web(request: Request, record_id: str, url: str = Form("")):
    """Save an edited destination."""
    try:
        await get_manager(request).edit(record_id, url)
    except InvalidDestination as e:
        return _dashboard_redirect(request, edit=record_id, error=str(e))
    except QRLinkError as e:
        return _dashboard_redirect(request, error=str(e))

    return _dashboard_redirect(request, notice="Link updated")


@router.post("/dashboard/{record_id}/delete", include_in_schema=False)
async def delete_link_web(request: Request, record_id: str):
    """Delete a link record."""
    try:
        await get_manager(request).delete(record_id)
    except QRLinkError as e:
        return _dashboard_redirect(request, error=str(e))

    return _dashboard_redirect(request, notice="Link deleted")


async def redirect_page(request: Request):
    """Redirect endpoint that scanned codes point to.

    Resolution happens here; the countdown and navigation run in the page.
    """
    config = request.app.state.config

    try:
        resolution = await get_resolver(request).resolve_params(request.query_params)
    except QRLinkError as e:
        return _error_page(request, "Invalid QR Code", error_reason(e), status_for(e))

    return templates.TemplateResponse(
        request,
        "redirect.html",
        {
            "destination": resolution.destination,
            "countdown_seconds": config.countdown_seconds,
            "tick_interval_ms": int(config.countdown_interval_seconds * 1000),
            "navigate_delay_ms": config.navigate_delay_ms,
            "single_timer": config.single_timer,
        },
    )


@router.get("/health", include_in_schema=False)
async def health_check_web(request: Request):
    """Health check endpoint (simple version for load balancers)."""
    health = await get_manager(request).health_check()

    if health["overall"]:
        return {"status": "healthy"}
    raise HTTPException(
        status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
        detail="Service unhealthy",
    )
