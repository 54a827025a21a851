"""API routes implementation."""

from datetime import datetime, timezone

from fastapi import APIRouter, HTTPException, Request, Response, status

from qrlink.errors import QRLinkError
from qrlink.models import LinkRecord
from qrlink.payload import PayloadCodec

from ..deps import get_manager, get_resolver, link_urls, request_codec, status_for
from .schemas import (
    CreateLinkResponse,
    ErrorResponse,
    HealthResponse,
    LinkListResponse,
    LinkRequest,
    LinkResponse,
    ResolveResponse,
)

router = APIRouter()

ERROR_RESPONSES = {
    400: {"model": ErrorResponse, "description": "Blank destination or missing payload"},
    404: {"model": ErrorResponse, "description": "Link record not found"},
    503: {"model": ErrorResponse, "description": "Record store unavailable"},
}


def _link_response(codec: PayloadCodec, record: LinkRecord) -> LinkResponse:
    return LinkResponse(**record.to_dict(), **link_urls(codec, record))


def _http_error(e: QRLinkError) -> HTTPException:
    return HTTPException(status_code=status_for(e), detail=str(e))


@router.post(
    "/links",
    response_model=CreateLinkResponse,
    responses=ERROR_RESPONSES,
    summary="Create QR link",
    description="Render a QR code for a destination and save its link record. "
    "The code is returned even if saving the record failed.",
)
async def create_link(request: Request, body: LinkRequest):
    """Create a QR link."""
    manager = get_manager(request)
    codec = request_codec(request)

    try:
        result = await manager.create(body.url, codec=codec)
    except QRLinkError as e:
        raise _http_error(e)

    return CreateLinkResponse(
        destination_url=body.url.strip(),
        payload_url=result.encoded_payload,
        qr_code=result.code_image.data_url,
        persisted=result.persisted,
        record=_link_response(codec, result.record) if result.record else None,
        persist_error=result.persist_error,
    )


@router.get(
    "/links",
    response_model=LinkListResponse,
    responses={503: ERROR_RESPONSES[503]},
    summary="List QR links",
    description="All link records, newest first.",
)
async def list_links(request: Request):
    manager = get_manager(request)
    codec = request_codec(request)

    try:
        records = await manager.list()
    except QRLinkError as e:
        raise _http_error(e)

    return LinkListResponse(
        count=len(records),
        links=[_link_response(codec, record) for record in records],
    )


@router.get("/links/{record_id}", response_model=LinkResponse, responses=ERROR_RESPONSES, summary="Get QR link")
async def get_link(request: Request, record_id: str):
    try:
        record = await get_manager(request).get(record_id)
    except QRLinkError as e:
        raise _http_error(e)

    return _link_response(request_codec(request), record)


@router.put(
    "/links/{record_id}",
    response_model=LinkResponse,
    responses=ERROR_RESPONSES,
    summary="Edit QR link",
    description="Replace the destination URL of a link record.",
)
async def edit_link(request: Request, record_id: str, body: LinkRequest):
    try:
        record = await get_manager(request).edit(record_id, body.url)
    except QRLinkError as e:
        raise _http_error(e)

    return _link_response(request_codec(request), record)


@router.delete(
    "/links/{record_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    responses=ERROR_RESPONSES,
    summary="Delete QR link",
)
async def delete_link(request: Request, record_id: str):
    try:
        await get_manager(request).delete(record_id)
    except QRLinkError as e:
        raise _http_error(e)

    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.get(
    "/links/{record_id}/preview",
    responses={**ERROR_RESPONSES, 200: {"content": {"image/png": {}}}},
    summary="QR preview image",
    description="PNG preview of the record's QR code. Add ?download=1 for the full-size code as an attachment.",
)
async def link_preview(request: Request, record_id: str, download: bool = False):
    manager = get_manager(request)
    codec = request_codec(request)

    try:
        record = await manager.get(record_id)
        if download:
            image = await manager.render_download(record, codec=codec)
        else:
            image = await manager.get_or_render_preview(record, codec=codec)
    except QRLinkError as e:
        raise _http_error(e)

    headers = {}
    if download:
        headers["Content-Disposition"] = f'attachment; filename="qr-code-{record_id}.png"'
    return Response(content=image.png, media_type="image/png", headers=headers)


@router.get(
    "/resolve",
    response_model=ResolveResponse,
    responses=ERROR_RESPONSES,
    summary="Resolve payload",
    description="Resolve the query parameters of a scanned payload to its destination.",
)
async def resolve_payload(request: Request):
    try:
        resolution = await get_resolver(request).resolve_params(request.query_params)
    except QRLinkError as e:
        raise _http_error(e)

    return ResolveResponse(strategy=resolution.strategy.value, destination=resolution.destination)


@router.get(
    "/health",
    response_model=HealthResponse,
    summary="Health check",
    description="Check if the service is healthy.",
)
async def health_check(request: Request):
    """Health check endpoint for load balancers and monitoring."""
    health = await get_manager(request).health_check()

    return HealthResponse(
        status="healthy" if health["overall"] else "unhealthy",
        database="healthy" if health["database"] else "unhealthy",
        cache="healthy" if health["cache"] else "unhealthy",
        timestamp=datetime.now(timezone.utc),
    )
