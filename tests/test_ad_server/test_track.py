"""
Tests for tracking endpoints and the event store.
"""

from datetime import datetime, timezone

import pytest
import pytest_asyncio
from httpx import AsyncClient

from adelia.ad_server.services.event_service import (
    MAX_CUSTOM_EVENTS,
    OVERFLOW_EVENT,
    EventService,
    EventStore,
    normalize_event_name,
)
from adelia.build.storage import InMemoryRecordStore
from adelia.schemas.record import CreativeRecord


def make_record(owner: str = "acme") -> CreativeRecord:
    now = datetime(2026, 3, 1, tzinfo=timezone.utc)
    return CreativeRecord(
        owner=owner,
        kind="native",
        width=300,
        height=250,
        archive_url="http://test/media/a.zip",
        hosted_url="http://test/media/a.html",
        created_at=now,
        updated_at=now,
    )


@pytest_asyncio.fixture
async def known_creative(record_store: InMemoryRecordStore) -> str:
    return await record_store.save_record(make_record(), "abc")


@pytest.mark.asyncio
async def test_pixel_counts_view(client: AsyncClient, event_store: EventStore, known_creative: str) -> None:
    """Test event tracking via GET (pixel tracking)."""
    response = await client.get("/api/track", params={"adId": "abc", "event": "view"})

    assert response.status_code == 200
    assert response.headers["content-type"] == "image/gif"
    assert "no-store" in response.headers["cache-control"]
    assert response.content.startswith(b"GIF89a")

    days = await event_store.daily("abc")
    assert days[0].views == 1
    assert days[0].impressions == 1


@pytest.mark.asyncio
async def test_pixel_defaults_to_view(client: AsyncClient, event_store: EventStore, known_creative: str) -> None:
    await client.get("/api/track", params={"adId": "abc"})
    assert (await event_store.daily("abc"))[0].views == 1


@pytest.mark.asyncio
async def test_pixel_without_id_is_not_counted(client: AsyncClient, event_store: EventStore) -> None:
    response = await client.get("/api/track")
    assert response.status_code == 200
    assert response.headers["content-type"] == "image/gif"


@pytest.mark.asyncio
async def test_track_event_post(client: AsyncClient, event_store: EventStore, known_creative: str) -> None:
    """Test event tracking via POST."""
    response = await client.post("/api/track", json={"adId": "abc", "event": "click"})

    assert response.status_code == 200
    data = response.json()
    assert data["success"] is True
    assert (await event_store.daily("abc"))[0].clicks == 1


@pytest.mark.asyncio
@pytest.mark.parametrize("body", [{}, {"adId": "abc"}, {"event": "click"}, {"adId": "", "event": "click"}])
async def test_track_event_post_requires_fields(client: AsyncClient, body: dict) -> None:
    response = await client.post("/api/track", json=body)
    assert response.status_code == 400
    assert response.json()["message"] == "Missing adId or event"


@pytest.mark.asyncio
async def test_custom_events(client: AsyncClient, event_store: EventStore, known_creative: str) -> None:
    await client.post("/api/track", json={"adId": "abc", "event": "puzzle_solved"})
    await client.post("/api/track", json={"adId": "abc", "event": "puzzle_solved"})
    await client.get("/api/track", params={"adId": "abc", "event": "video_1_view"})
    day = (await event_store.daily("abc"))[0]
    assert day.events == {"puzzle_solved": 2, "video_1_view": 1}
    assert day.views == 0


class TestEventStore:
    @pytest.mark.asyncio
    async def test_days_are_separate(self) -> None:
        store = EventStore()
        await store.record("abc", "view", date="2026-03-01")
        await store.record("abc", "view", date="2026-03-02")
        await store.record("abc", "impression", date="2026-03-02")
        days = await store.daily("abc")
        assert [(d.date, d.views) for d in days] == [("2026-03-01", 1), ("2026-03-02", 2)]

    @pytest.mark.asyncio
    async def test_stats_totals(self) -> None:
        service = EventService(EventStore())
        await service.track_event("abc", "view")
        await service.track_event("abc", "click")
        await service.track_event("abc", "expand")
        assert await service.track_event("", "view") is False

        stats = await service.stats("abc")
        assert stats["totals"].views == 1
        assert stats["totals"].clicks == 1
        assert stats["totals"].events == {"expand": 1}

    def test_event_names_normalized(self) -> None:
        assert normalize_event_name("video.1 view") == "video_1_view"
        assert normalize_event_name("  ") == "unknown"
        assert len(normalize_event_name("x" * 200)) == 64


@pytest.mark.asyncio
async def test_pixel_for_unknown_creative_is_not_counted(client: AsyncClient, event_store: EventStore) -> None:
    for n in range(5):
        response = await client.get("/api/track", params={"adId": f"made-up-{n}", "event": "view"})
        assert response.status_code == 200
        assert response.headers["content-type"] == "image/gif"

    assert event_store._stats == {}


@pytest.mark.asyncio
async def test_post_for_unknown_creative_is_not_counted(client: AsyncClient, event_store: EventStore) -> None:
    response = await client.post("/api/track", json={"adId": "made-up", "event": "click"})

    assert response.status_code == 200
    assert response.json()["success"] is False
    assert await event_store.daily("made-up") == []


@pytest.mark.asyncio
async def test_service_checks_record_store() -> None:
    records = InMemoryRecordStore()
    await records.save_record(make_record(), "known")
    service = EventService(EventStore(), records)

    assert await service.track_event("known", "view") is True
    assert await service.track_event("unknown", "view") is False
    assert await service.store.daily("unknown") == []


@pytest.mark.asyncio
async def test_custom_event_names_are_capped() -> None:
    store = EventStore()
    for n in range(MAX_CUSTOM_EVENTS + 10):
        await store.record("abc", f"event_{n}", date="2026-03-01")

    day = (await store.daily("abc"))[0]
    assert len(day.events) == MAX_CUSTOM_EVENTS + 1
    assert day.events[OVERFLOW_EVENT] == 10
    assert day.events["event_0"] == 1
