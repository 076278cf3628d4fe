"""
Process-wide collaborators for the API.

Routers depend on these providers; tests swap them out through
``app.dependency_overrides``.
"""

from __future__ import annotations

from functools import lru_cache

from adelia.ad_server.services.event_service import EventStore
from adelia.build.storage import HttpUploader, InMemoryRecordStore, LocalDirectoryUploader, Uploader
from adelia.build.tracking import TrackingInjector
from adelia.common.config import get_settings


@lru_cache
def get_uploader() -> Uploader:
    """Uploader selected by ``upload.backend``."""
    if get_settings().upload.backend == "http":
        return HttpUploader()
    return LocalDirectoryUploader()


@lru_cache
def get_record_store() -> InMemoryRecordStore:
    return InMemoryRecordStore()


@lru_cache
def get_event_store() -> EventStore:
    return EventStore()


def get_tracking_injector() -> TrackingInjector | None:
    """None when tracking is disabled."""
    if not get_settings().tracking.enabled:
        return None
    return TrackingInjector()


async def close_collaborators() -> None:
    """Release network clients held by cached collaborators."""
    if get_uploader.cache_info().currsize:
        uploader = get_uploader()
        if isinstance(uploader, HttpUploader):
            await uploader.close()
        get_uploader.cache_clear()
