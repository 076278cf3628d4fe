"""
API response schemas.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field

from adelia.schemas.manifest import Manifest


class CreativeKindResponse(BaseModel):
    kind: str
    title: str
    description: str = ""
    width: int
    height: int
    assets: list[dict[str, Any]] = Field(default_factory=list, description="Asset slots")
    settings_schema: dict[str, Any] = Field(default_factory=dict)


class PreviewResponse(BaseModel):
    kind: str
    phase: str
    html: str
    references: dict[str, str]


class BuildResponse(BaseModel):
    """Result of a full creative build."""

    creative_id: str = Field(..., description="Assigned creative identifier")
    archive_url: str
    hosted_url: str
    zip_name: str
    manifest: Manifest
    embed_script: str = Field(..., description="Loader snippet to paste into a page")
    embed_script_one_line: str


class EventResponse(BaseModel):
    """Event tracking response schema."""

    success: bool = Field(..., description="Whether the event was recorded")
    message: str | None = Field(None, description="Optional message")


class ServeResponse(BaseModel):
    placements: list[dict[str, Any]] = Field(default_factory=list)


class HealthResponse(BaseModel):
    """Health check response schema."""

    status: str = Field(..., description="Service status")
    version: str = Field(..., description="Service version")
    storage: bool = Field(..., description="Asset storage writable")


class ErrorResponse(BaseModel):
    """Error response schema."""

    error: str = Field(..., description="Error type")
    message: str = Field(..., description="Error message")
    details: dict[str, Any] | None = Field(None, description="Error details")
    request_id: str | None = Field(None, description="Request identifier")

    model_config = {
        "json_schema_extra": {
            "example": {
                "error": "CreativeValidationError",
                "message": "A target URL is required for native",
                "details": {"field": "target_url"},
                "request_id": "6c1f5a1e-8a43-4b8e-9d5c-0d1f0a3b2c4d",
            }
        }
    }
