"""
Creative event tracking.

Counts views, impressions, clicks and custom events per creative per UTC
day. ``view`` and ``impression`` are the same thing from the creative's
point of view and bump both counters.
"""

from __future__ import annotations

import asyncio
import re
from typing import Any

from pydantic import BaseModel, Field

from adelia.ad_server.middleware.metrics import record_tracking_event
from adelia.build.storage import RecordStore
from adelia.common.exceptions import RecordNotFoundError
from adelia.common.logger import get_logger
from adelia.common.utils import current_date

logger = get_logger(__name__)

VIEW_EVENTS = frozenset({"view", "impression"})
CLICK_EVENT = "click"

_EVENT_NAME_RE = re.compile(r"[^A-Za-z0-9_\-]")
MAX_EVENT_NAME_LENGTH = 64
# Distinct custom names per creative per day; the rest count as OVERFLOW_EVENT
MAX_CUSTOM_EVENTS = 32
OVERFLOW_EVENT = "other"


def normalize_event_name(event: str) -> str:
    """Custom event names become counter keys; keep them short and plain."""
    return _EVENT_NAME_RE.sub("_", event.strip())[:MAX_EVENT_NAME_LENGTH] or "unknown"


class DailyStats(BaseModel):
    """Counters for one creative on one day."""

    date: str
    views: int = 0
    impressions: int = 0
    clicks: int = 0
    events: dict[str, int] = Field(default_factory=dict)


class EventStore:
    """Process-local daily counters keyed by ``(creative_id, date)``."""

    def __init__(self) -> None:
        self._stats: dict[tuple[str, str], DailyStats] = {}
        self._lock = asyncio.Lock()

    async def record(self, creative_id: str, event: str, date: str | None = None) -> DailyStats:
        date = date or current_date()
        async with self._lock:
            stats = self._stats.setdefault((creative_id, date), DailyStats(date=date))
            if event in VIEW_EVENTS:
                stats.views += 1
                stats.impressions += 1
            elif event == CLICK_EVENT:
                stats.clicks += 1
            else:
                name = normalize_event_name(event)
                if name not in stats.events and len(stats.events) >= MAX_CUSTOM_EVENTS:
                    name = OVERFLOW_EVENT
                stats.events[name] = stats.events.get(name, 0) + 1
            return stats.model_copy(deep=True)

    async def daily(self, creative_id: str) -> list[DailyStats]:
        async with self._lock:
            return [
                stats.model_copy(deep=True)
                for (record_id, _), stats in sorted(self._stats.items())
                if record_id == creative_id
            ]


class EventService:
    """Validates and records tracking beacons."""

    def __init__(self, store: EventStore, records: RecordStore | None = None):
        self.store = store
        self.records = records

    async def track_event(self, creative_id: str, event: str) -> bool:
        """
        Record one event.

        Returns False when the beacon carries no creative id or event name,
        or names a creative the record store does not know. Such beacons are
        ignored rather than rejected so pixels never break.
        """
        if not creative_id or not event:
            return False
        if self.records is not None:
            try:
                await self.records.get(creative_id)
            except RecordNotFoundError:
                logger.debug("Beacon for unknown creative ignored", creative_id=creative_id)
                return False
        await self.store.record(creative_id, event)
        record_tracking_event(event)
        logger.debug("Creative event recorded", creative_id=creative_id, event_type=event)
        return True

    async def stats(self, creative_id: str) -> dict[str, Any]:
        days = await self.store.daily(creative_id)
        totals = DailyStats(date="total")
        for day in days:
            totals.views += day.views
            totals.impressions += day.impressions
            totals.clicks += day.clicks
            for name, count in day.events.items():
                totals.events[name] = totals.events.get(name, 0) + count
        return {"creative_id": creative_id, "days": days, "totals": totals}
