"""
Pydantic schemas for creative settings, manifests, records and the HTTP API.
"""

from adelia.schemas.manifest import Manifest, ManifestNaming
from adelia.schemas.record import CreativeRecord
from adelia.schemas.request import AssetPayload, BuildRequest, PreviewRequest, TrackRequest
from adelia.schemas.response import (
    BuildResponse,
    CreativeKindResponse,
    ErrorResponse,
    EventResponse,
    HealthResponse,
    PreviewResponse,
    ServeResponse,
)
from adelia.schemas.settings import AnyCreativeSettings, AssetSlot, CreativeSettings

__all__ = [
    # Creative
    "AnyCreativeSettings",
    "AssetSlot",
    "CreativeSettings",
    "Manifest",
    "ManifestNaming",
    "CreativeRecord",
    # Request schemas
    "AssetPayload",
    "BuildRequest",
    "PreviewRequest",
    "TrackRequest",
    # Response schemas
    "BuildResponse",
    "CreativeKindResponse",
    "ErrorResponse",
    "EventResponse",
    "HealthResponse",
    "PreviewResponse",
    "ServeResponse",
]
