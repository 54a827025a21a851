"""Pydantic schemas for API requests and responses."""

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, Field


class LinkRequest(BaseModel):
    """Request carrying a destination URL (create or edit)."""

    url: str = Field(..., description="Destination URL", max_length=2048)

    model_config = {
        "json_schema_extra": {
            "examples": [
                {"url": "https://example.com/menu"},
                {"url": "example.com/path"},
            ]
        }
    }


class LinkResponse(BaseModel):
    """A link record with its payload URLs."""

    id: str = Field(..., description="Record id")
    destination_url: str = Field(..., description="Destination URL")
    created_at: datetime = Field(..., description="Creation timestamp")
    payload_url: str = Field(..., description="Payload URL embedding the destination")
    managed_url: str = Field(..., description="Payload URL referencing the record id")


class LinkListResponse(BaseModel):
    count: int
    links: List[LinkResponse]


class CreateLinkResponse(BaseModel):
    """Creation result. The code is always returned; the record only if it was saved."""

    destination_url: str
    payload_url: str = Field(..., description="Text encoded in the QR code")
    qr_code: str = Field(..., description="QR code as a PNG data URL")
    persisted: bool
    record: Optional[LinkResponse] = None
    persist_error: Optional[str] = None

    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "destination_url": "https://example.com",
                    "payload_url": "https://qr.example.org/q?url=https%3A%2F%2Fexample.com",
                    "qr_code": "data:image/png;base64,iVBORw0...",
                    "persisted": True,
                    "record": None,
                    "persist_error": None,
                }
            ]
        }
    }


class ResolveResponse(BaseModel):
    strategy: str = Field(..., description="'inline' or 'by_id'")
    destination: str = Field(..., description="Normalized destination URL")


class HealthResponse(BaseModel):
    """Health check response."""

    status: str = Field(..., description="Overall status")
    database: str = Field(..., description="Record store status")
    cache: str = Field(..., description="Cache status")
    timestamp: datetime = Field(..., description="Check timestamp")


class ErrorResponse(BaseModel):
    """Error response."""

    detail: str = Field(..., description="Error message")
