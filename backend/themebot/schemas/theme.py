"""
Theme metadata as exchanged over the API and with the ingestion pipeline.
"""
from enum import Enum

from pydantic import BaseModel, Field


class ApprovalState(str, Enum):
    """Moderation status of a submitted theme."""

    PENDING = "pending"
    ACCEPTED = "accepted"
    REJECTED = "rejected"


class MetadataColor(BaseModel):
    """Accent color of a theme."""

    hex: str | None = Field(default=None, description="Hex color, e.g. '#1e1e2e'")
    alpha: float = Field(default=0.0, description="Opacity")


class ThemeMetadata(BaseModel):
    """Full theme record."""

    file_name: str = Field(..., description="Original upload filename")
    file_id: str = Field(..., description="Unique theme id (stored file stem)")
    theme_name: str
    theme_author: str | None = None
    theme_description: str | None = None
    message_id: str | None = Field(default=None, description="Discord message announcing the theme")
    attachment_url: str | None = None
    approval_state: ApprovalState = ApprovalState.PENDING
    color: MetadataColor = Field(default_factory=MetadataColor)
    icon: str | None = None
    thumbnails_urls: list[str] | None = None


class ThemeUpdate(BaseModel):
    """PUT /themes/{id} body. Only the fields present are written; file_id cannot change."""

    file_name: str | None = None
    theme_name: str | None = None
    theme_author: str | None = None
    theme_description: str | None = None
    message_id: str | None = None
    attachment_url: str | None = None
    approval_state: ApprovalState | None = None
    color: MetadataColor | None = None
    icon: str | None = None
    thumbnails_urls: list[str] | None = None
