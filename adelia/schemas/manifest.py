"""
Archive manifest.

Written as ``manifest.json`` at the root of every creative archive.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from adelia.common.exceptions import ManifestError
from adelia.common.utils import json_dumps_pretty, json_loads


class ManifestNaming(BaseModel):
    """Names used for the bundle and its files."""

    model_config = ConfigDict(extra="forbid")

    campaign: str = ""
    placement: str = ""
    zip_name: str
    files: dict[str, str] = Field(
        default_factory=dict,
        description="Asset role to archive member name, or to the external URL for remote assets",
    )


class Manifest(BaseModel):
    """Machine-readable description of a creative bundle."""

    model_config = ConfigDict(extra="forbid")

    format: str = Field(..., description="Creative kind")
    version: str = Field(..., description="Manifest format version")
    generated_at: datetime
    naming: ManifestNaming
    settings: dict[str, Any] = Field(default_factory=dict)

    def serialize(self) -> str:
        return json_dumps_pretty(self.model_dump(mode="json"))

    @classmethod
    def parse(cls, raw: str | bytes) -> "Manifest":
        try:
            return cls.model_validate(json_loads(raw))
        except (ValueError, ValidationError) as e:
            raise ManifestError(f"Invalid manifest: {e}") from e
