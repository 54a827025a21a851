"""Data models for QR links."""

import base64
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Optional


@dataclass
class LinkRecord:
    """Represents a persisted link record."""

    id: str
    destination_url: str
    created_at: datetime

    def to_dict(self) -> dict:
        """Convert to dictionary."""
        return {
            "id": self.id,
            "destination_url": self.destination_url,
            "created_at": self.created_at.isoformat() if self.created_at else None,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "LinkRecord":
        """Create from dictionary (or a database row mapping)."""
        created_at = data["created_at"]
        return cls(
            id=str(data["id"]),
            destination_url=data["destination_url"],
            created_at=created_at if isinstance(created_at, datetime) else datetime.fromisoformat(created_at),
        )


class PayloadStrategy(str, Enum):
    """How a payload resolves to its destination."""

    INLINE = "inline"
    BY_ID = "by_id"


@dataclass(frozen=True)
class RedirectPayload:
    """Decoded redirect instruction: an inline URL or a record id reference."""

    strategy: PayloadStrategy
    value: str


@dataclass(frozen=True)
class CodeOptions:
    """Visual options for rendering a code image."""

    pixel_size: int = 300
    margin: int = 2
    foreground: str = "#1F2937"
    background: str = "#FFFFFF"


@dataclass(frozen=True)
class CodeImage:
    """A rendered code image (PNG)."""

    png: bytes
    width: int
    text: str

    @property
    def data_url(self) -> str:
        """PNG as a data URL, suitable for an <img src>."""
        return "data:image/png;base64," + base64.b64encode(self.png).decode("ascii")


@dataclass
class CreationResult:
    """Outcome of a create request.

    Rendering is required; persistence is best-effort and reported separately,
    so a caller can show the code even when the record failed to save.
    """

    encoded_payload: str
    code_image: CodeImage
    record: Optional[LinkRecord] = None
    persist_error: Optional[str] = None

    @property
    def persisted(self) -> bool:
        return self.record is not None


@dataclass
class DashboardState:
    """Per-request view state of the dashboard page."""

    editing_id: Optional[str] = None
    notice: Optional[str] = None
    error: Optional[str] = None
    previews: dict = field(default_factory=dict)

    @classmethod
    def from_query(cls, params) -> "DashboardState":
        """Build from request query parameters (edit, notice, error)."""
        return cls(
            editing_id=params.get("edit") or None,
            notice=params.get("notice") or None,
            error=params.get("error") or None,
        )

    def is_editing(self, record_id: str) -> bool:
        return self.editing_id == record_id
