"""
API request schemas.
"""

from __future__ import annotations

import base64
import binascii
from typing import Literal

from pydantic import BaseModel, Field, model_validator

from adelia.common.exceptions import CreativeValidationError
from adelia.creative.assets import AssetReference
from adelia.schemas.settings import AnyCreativeSettings, WebUrl


class AssetPayload(BaseModel):
    """One asset: inline base64 bytes or an already hosted URL."""

    data_base64: str | None = Field(None, description="Base64-encoded file contents")
    url: WebUrl | None = Field(None, max_length=2048, description="Absolute URL of a hosted file")
    file_name: str | None = Field(None, max_length=255, description="Original file name, for the extension")
    content_type: str | None = Field(None, max_length=200)

    @model_validator(mode="after")
    def _one_source(self) -> "AssetPayload":
        if not self.data_base64 and not self.url:
            raise ValueError("either data_base64 or url is required")
        if self.data_base64 and self.url:
            raise ValueError("data_base64 and url are mutually exclusive")
        return self

    def to_reference(self, role: str) -> AssetReference:
        data = None
        if self.data_base64:
            try:
                data = base64.b64decode(self.data_base64, validate=True)
            except (binascii.Error, ValueError) as e:
                raise CreativeValidationError(
                    f"Asset '{role}' is not valid base64",
                    field=f"assets.{role}",
                ) from e
        return AssetReference(
            role=role,
            data=data,
            url=self.url,
            file_name=self.file_name,
            content_type=self.content_type,
        )


class CreativeRequest(BaseModel):
    settings: AnyCreativeSettings
    assets: dict[str, AssetPayload] = Field(default_factory=dict)

    def asset_references(self) -> dict[str, AssetReference]:
        return {role: payload.to_reference(role) for role, payload in self.assets.items()}


class BuildRequest(CreativeRequest):
    """Full build request schema."""

    owner: str = Field(..., min_length=1, max_length=128, description="Owning account")
    creative_id: str | None = Field(
        None,
        min_length=1,
        max_length=64,
        description="Rebuild an existing creative in place",
    )

    model_config = {
        "json_schema_extra": {
            "example": {
                "owner": "acme",
                "settings": {
                    "kind": "native",
                    "campaign": "Spring Sale",
                    "placement": "Feed",
                    "target_url": "https://example.com/spring",
                    "headline": "Fresh for spring",
                    "body": "Up to 40% off",
                    "target_element_id": "ad-slot-1",
                },
                "assets": {"image": {"url": "https://cdn.example.com/spring.jpg"}},
            }
        }
    }


class PreviewRequest(CreativeRequest):
    """Render one phase without uploading anything."""

    phase: Literal["archive", "hosted"] = "archive"


class TrackRequest(BaseModel):
    """JSON body of ``POST /api/track``."""

    adId: str | None = None
    event: str | None = None
