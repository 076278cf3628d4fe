"""
Health check endpoints.
"""

import os
from pathlib import Path

from fastapi import APIRouter

from adelia.common.config import get_settings
from adelia.schemas.response import HealthResponse

router = APIRouter()


def _storage_writable() -> bool:
    root = Path(get_settings().storage.root_dir)
    return root.is_dir() and os.access(root, os.W_OK)


@router.get("/health", response_model=HealthResponse)
async def health_check() -> HealthResponse:
    """
    Health check endpoint.

    Returns service status and storage health.
    """
    settings = get_settings()
    storage_healthy = _storage_writable()

    return HealthResponse(
        status="healthy" if storage_healthy else "degraded",
        version=settings.app_version,
        storage=storage_healthy,
    )


@router.get("/ping")
async def ping() -> dict:
    """Simple ping endpoint."""
    return {"pong": True}


@router.get("/ready")
async def readiness_check() -> dict:
    """Readiness check for Kubernetes."""
    if not _storage_writable():
        return {"ready": False, "reason": "Storage not writable"}

    return {"ready": True}


@router.get("/live")
async def liveness_check() -> dict:
    """Liveness check for Kubernetes."""
    return {"alive": True}
