"""
Creative event tracking endpoints.

- Pixel (GET) returns a 1x1 transparent GIF; hosted creatives fire these
  from ``window.reportEvent``.
- JSON (POST) takes ``{"adId": ..., "event": ...}``.

Only creatives present in the record store are counted.
"""

from __future__ import annotations

import base64

from fastapi import APIRouter, Depends, Query, Response
from fastapi.responses import JSONResponse

from adelia.ad_server.dependencies import get_event_store, get_record_store
from adelia.ad_server.services.event_service import EventService, EventStore
from adelia.build.storage import RecordStore
from adelia.common.logger import get_logger, log_context
from adelia.schemas.request import TrackRequest
from adelia.schemas.response import ErrorResponse, EventResponse

logger = get_logger(__name__)
router = APIRouter()

# 1x1 transparent GIF pixel (43 bytes)
_PIXEL_GIF = base64.b64decode(
    "R0lGODlhAQABAIAAAAAAAP///yH5BAEAAAAALAAAAAABAAEAAAIBRAA7"
)

_PIXEL_HEADERS = {
    "Cache-Control": "no-store, no-cache, must-revalidate, proxy-revalidate",
    "Pragma": "no-cache",
    "Expires": "0",
    "Access-Control-Allow-Origin": "*",
}


def _pixel_response() -> Response:
    """Return a 1x1 transparent GIF pixel."""
    return Response(
        content=_PIXEL_GIF,
        status_code=200,
        media_type="image/gif",
        headers=_PIXEL_HEADERS,
    )


def get_event_service(
    store: EventStore = Depends(get_event_store),
    records: RecordStore = Depends(get_record_store),
) -> EventService:
    """Dependency to get event service."""
    return EventService(store, records)


@router.get("/track")
async def track_event_get(
    ad_id: str | None = Query(None, alias="adId", description="Creative ID"),
    event: str = Query("view", description="Event name"),
    event_service: EventService = Depends(get_event_service),
) -> Response:
    """
    Track a creative event via pixel.

    A beacon without ``adId``, or for a creative that was never built, still
    gets the pixel; it is just not counted.
    """
    if ad_id:
        log_context(creative_id=ad_id, event_type=event)
        await event_service.track_event(ad_id, event)
    return _pixel_response()


@router.post(
    "/track",
    response_model=EventResponse,
    responses={400: {"model": ErrorResponse}},
)
async def track_event(
    body: TrackRequest,
    event_service: EventService = Depends(get_event_service),
) -> EventResponse | JSONResponse:
    """Track a creative event (POST)."""
    if not body.adId or not body.event:
        return JSONResponse(
            status_code=400,
            content=ErrorResponse(
                error="ValidationError",
                message="Missing adId or event",
            ).model_dump(),
        )

    log_context(creative_id=body.adId, event_type=body.event)
    logger.info("Creative event received")

    success = await event_service.track_event(body.adId, body.event)
    return EventResponse(
        success=success,
        message="Event recorded" if success else "Failed to record event",
    )
