"""
Pytest configuration and fixtures.
"""

import os
import tempfile

# Must be set before any adelia module reads the settings.
os.environ.setdefault("ADELIA_ENV", "test")
os.environ.setdefault("ADELIA_STORAGE__ROOT_DIR", tempfile.mkdtemp(prefix="adelia-media-"))

from collections.abc import AsyncGenerator, Callable
from pathlib import Path
from typing import Any

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from adelia.ad_server.dependencies import get_event_store, get_record_store, get_uploader
from adelia.ad_server.main import app
from adelia.ad_server.services.event_service import EventStore
from adelia.build.storage import InMemoryRecordStore, LocalDirectoryUploader
from adelia.creative.assets import AssetReference
from adelia.creative.registry import get_registry
from adelia.schemas.settings import CreativeSettings

TARGET_URL = "https://brand.example/landing"

# Minimal valid extra fields per kind; everything else uses defaults.
KIND_SAMPLES: dict[str, dict[str, Any]] = {
    "expandable-banner": {},
    "puzzle": {"brand_name": "Acme"},
    "color-reveal": {"brand_name": "Acme"},
    "podcast-snippet": {"brand_text": "Acme Radio", "title_text": "Episode 12"},
    "native": {"headline": "Fresh for spring", "body": "Up to 40% off"},
    "scratch-reveal": {},
    "parallax": {"headline": "Look closer"},
    "interstitial": {"headline": "Big news", "auto_close_seconds": 3},
    "skin": {},
    "side-rail": {"side": "both"},
    "scroll-reveal": {},
    "native-video": {"headline": "Watch this"},
    "gated-mini-game": {"brand_name": "Acme"},
    "video-gallery": {"videos": [{"title": "One"}, {"title": "Two"}]},
    "text-dialogue": {
        "lines": [
            {"speaker": "A", "text": "Did you hear?"},
            {"speaker": "B", "text": "Tell me everything."},
        ]
    },
}

_MEDIA_EXTENSIONS = {"image": ".png", "audio": ".mp3", "video": ".mp4"}


@pytest.fixture
def make_settings() -> Callable[..., CreativeSettings]:
    """Build validated settings for a kind from its sample plus overrides."""

    def factory(kind: str, **overrides: Any) -> CreativeSettings:
        data = {
            "campaign": "SpringSale",
            "placement": "Homepage",
            "target_url": TARGET_URL,
            **KIND_SAMPLES[kind],
            **overrides,
        }
        return get_registry().parse_settings(kind, data)

    return factory


@pytest.fixture
def make_assets() -> Callable[..., dict[str, AssetReference]]:
    """Local bytes for every slot of a settings instance."""

    def factory(settings: CreativeSettings, *, optional: bool = True) -> dict[str, AssetReference]:
        assets = {}
        for slot in settings.slots():
            if not slot.required and not optional:
                continue
            ext = _MEDIA_EXTENSIONS[slot.media]
            assets[slot.role] = AssetReference(
                role=slot.role,
                data=f"{slot.role}-bytes".encode(),
                file_name=f"{slot.role}{ext}",
            )
        return assets

    return factory


@pytest.fixture
def uploader(tmp_path: Path) -> LocalDirectoryUploader:
    return LocalDirectoryUploader(root_dir=tmp_path / "media", public_base_url="http://test/media")


@pytest.fixture
def record_store() -> InMemoryRecordStore:
    return InMemoryRecordStore()


@pytest.fixture
def event_store() -> EventStore:
    return EventStore()


@pytest_asyncio.fixture(scope="function")
async def client(
    uploader: LocalDirectoryUploader,
    record_store: InMemoryRecordStore,
    event_store: EventStore,
) -> AsyncGenerator[AsyncClient, None]:
    """Create a test client with storage overrides."""
    app.dependency_overrides[get_uploader] = lambda: uploader
    app.dependency_overrides[get_record_store] = lambda: record_store
    app.dependency_overrides[get_event_store] = lambda: event_store

    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
    ) as ac:
        yield ac

    app.dependency_overrides.clear()


@pytest.fixture
def sample_build_request() -> dict[str, Any]:
    """Sample build request data."""
    return {
        "owner": "acme",
        "settings": {
            "kind": "native",
            "campaign": "SpringSale",
            "placement": "Feed",
            "target_url": TARGET_URL,
            "headline": "Fresh for spring",
            "body": "Up to 40% off",
            "target_element_id": "ad-slot-1",
        },
        "assets": {
            "image": {"data_base64": "aW1hZ2UtYnl0ZXM=", "file_name": "spring.jpg"},
        },
    }
