"""
Creative endpoints.

Endpoints:
    GET  /api/v1/creatives/kinds        – Registered kinds with their asset slots
    POST /api/v1/creatives/preview      – Render one phase without uploading
    POST /api/v1/creatives/build        – Full build: upload, record, embed snippet
    GET  /api/v1/creatives/{id}         – Stored record
    GET  /api/v1/creatives/{id}/stats   – Daily event counters
"""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Depends

from adelia.ad_server.dependencies import (
    get_event_store,
    get_record_store,
    get_tracking_injector,
    get_uploader,
)
from adelia.ad_server.services.build_service import CreativeBuildService
from adelia.ad_server.services.event_service import EventService, EventStore
from adelia.build.packager import CreativePackager
from adelia.build.storage import RecordStore, Uploader
from adelia.build.tracking import TrackingInjector
from adelia.common.logger import get_logger, log_context
from adelia.creative.assets import BuildPhase
from adelia.creative.registry import get_registry
from adelia.schemas.record import CreativeRecord
from adelia.schemas.request import BuildRequest, PreviewRequest
from adelia.schemas.response import BuildResponse, CreativeKindResponse, PreviewResponse

logger = get_logger(__name__)
router = APIRouter()


def get_build_service(
    uploader: Uploader = Depends(get_uploader),
    store: RecordStore = Depends(get_record_store),
    tracking: TrackingInjector | None = Depends(get_tracking_injector),
) -> CreativeBuildService:
    """Dependency to get build service."""
    return CreativeBuildService(uploader, store, tracking=tracking)


@router.get("/kinds", response_model=list[CreativeKindResponse])
async def list_kinds() -> list[CreativeKindResponse]:
    kinds = []
    for creative_type in get_registry().types():
        model = creative_type.settings_model
        defaults = model.model_construct()
        kinds.append(
            CreativeKindResponse(
                kind=creative_type.kind,
                title=creative_type.title,
                description=creative_type.description,
                width=defaults.width,
                height=defaults.height,
                assets=[slot._asdict() for slot in defaults.slots()],
                settings_schema=model.model_json_schema(),
            )
        )
    return kinds


@router.post("/preview", response_model=PreviewResponse)
async def preview_creative(request: PreviewRequest) -> PreviewResponse:
    """
    Render a creative without uploading anything.

    ``archive`` resolves local assets to their archive file names;
    ``hosted`` expects every asset to be a URL already.
    """
    packager = CreativePackager()
    settings = request.settings
    assets = request.asset_references()
    log_context(kind=settings.kind)

    if request.phase == BuildPhase.HOSTED.value:
        packager.registry.validate_assets(settings, assets)
        urls = {role: ref.url for role, ref in assets.items() if ref.url}
        rendering = packager.render_hosted(settings, urls)
    else:
        rendering = packager.build_archive(settings, assets).rendering

    return PreviewResponse(
        kind=rendering.kind,
        phase=rendering.phase.value,
        html=rendering.html,
        references=dict(rendering.references),
    )


@router.post("/build", response_model=BuildResponse, status_code=201)
async def build_creative(
    request: BuildRequest,
    build_service: CreativeBuildService = Depends(get_build_service),
) -> BuildResponse:
    """Build, upload and record a creative, returning its embed snippet."""
    result = await build_service.build(
        owner=request.owner,
        settings=request.settings,
        assets=request.asset_references(),
        creative_id=request.creative_id,
    )
    return BuildResponse(
        creative_id=result.creative_id,
        archive_url=result.archive_url,
        hosted_url=result.hosted_url,
        zip_name=result.archive.zip_name,
        manifest=result.archive.manifest,
        embed_script=result.embed.script,
        embed_script_one_line=result.embed.one_line,
    )


@router.get("/{creative_id}", response_model=CreativeRecord)
async def get_creative(
    creative_id: str,
    store: RecordStore = Depends(get_record_store),
) -> CreativeRecord:
    return await store.get(creative_id)


@router.get("/{creative_id}/stats")
async def get_creative_stats(
    creative_id: str,
    store: RecordStore = Depends(get_record_store),
    events: EventStore = Depends(get_event_store),
) -> dict[str, Any]:
    """Daily counters for a stored creative."""
    await store.get(creative_id)
    stats = await EventService(events).stats(creative_id)
    return {
        "creative_id": creative_id,
        "days": [day.model_dump() for day in stats["days"]],
        "totals": stats["totals"].model_dump(),
    }
