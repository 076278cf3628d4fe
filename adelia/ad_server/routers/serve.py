"""
Publisher serving endpoints.

A publisher adds ``<script src="https://host/adpilot.js?id=OWNER" async>``
once; the tag asks ``/api/serve`` which creatives belong where and mounts
them into the named elements.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, Query, Request, Response

from adelia.ad_server.dependencies import get_record_store, get_tracking_injector
from adelia.ad_server.services.serve_service import ServeService, universal_tag
from adelia.build.storage import RecordStore
from adelia.build.tracking import TrackingInjector
from adelia.common.logger import get_logger, log_context
from adelia.schemas.response import ServeResponse

logger = get_logger(__name__)
router = APIRouter()


def get_serve_service(
    store: RecordStore = Depends(get_record_store),
    tracking: TrackingInjector | None = Depends(get_tracking_injector),
) -> ServeService:
    """Dependency to get serve service."""
    return ServeService(store, tracking)


@router.get("/api/serve", response_model=ServeResponse)
async def serve_placements(
    owner: str = Query(..., min_length=1, description="Owning account"),
    serve_service: ServeService = Depends(get_serve_service),
) -> ServeResponse:
    """Placements for every creative of ``owner`` that names a target element."""
    log_context(owner=owner)
    placements = await serve_service.placements(owner)
    logger.info("Placements served", count=len(placements))
    return ServeResponse(placements=[p.model_dump(exclude_none=True) for p in placements])


@router.get("/adpilot.js")
async def universal_tag_script(
    request: Request,
    owner: str = Query(..., alias="id", min_length=1, description="Owning account"),
) -> Response:
    """Universal tag for one owner."""
    serve_url = str(request.url_for("serve_placements"))
    return Response(
        content=universal_tag(owner, serve_url),
        media_type="application/javascript",
        headers={"Cache-Control": "public, max-age=300"},
    )
