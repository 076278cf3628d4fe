"""
Stored creative record.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any

from pydantic import BaseModel, Field


class CreativeRecord(BaseModel):
    """What the persistence collaborator keeps for one built creative."""

    id: str | None = Field(None, description="Assigned by the record store")
    owner: str = Field(..., description="Account that owns the creative")
    kind: str
    campaign: str = ""
    placement: str = ""
    width: int
    height: int
    target_element_id: str | None = None
    archive_url: str
    hosted_url: str
    asset_urls: dict[str, str] = Field(default_factory=dict)
    settings: dict[str, Any] = Field(default_factory=dict)
    embed_script: str = ""
    created_at: datetime
    updated_at: datetime
