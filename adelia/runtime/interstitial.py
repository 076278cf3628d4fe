"""
Interstitial countdown.

Ticks once per second from the configured value; reaching zero closes the
overlay exactly like the close button. Closing is idempotent.

Mirrors ``INTERSTITIAL_JS`` in :mod:`adelia.creative.kinds.overlays`.
"""

from __future__ import annotations

from typing import Callable

from adelia.runtime.messages import RuntimeAction, RuntimeMessage
from adelia.runtime.timers import Scheduler, TimerHandle

TICK_SECONDS = 1.0


class InterstitialCountdown:
    def __init__(
        self,
        scheduler: Scheduler,
        *,
        seconds: int = 10,
        container_id: str | None = None,
        post: Callable[[RuntimeMessage], None] | None = None,
    ):
        self.scheduler = scheduler
        self.remaining = seconds
        self.container_id = container_id
        self._post = post
        self.closed = False
        self.messages: list[RuntimeMessage] = []
        self._ticker: TimerHandle | None = None

    @property
    def visible(self) -> bool:
        return not self.closed

    def start(self) -> None:
        """Begin counting down; a zero start value disables auto-close."""
        if self.remaining > 0 and not self.closed:
            self._schedule_tick()

    def close(self) -> bool:
        """Close button, CTA or countdown expiry. Returns False if already closed."""
        if self.closed:
            return False
        self.closed = True
        if self._ticker is not None:
            self._ticker.cancel()
            self._ticker = None
        message = RuntimeMessage(RuntimeAction.CLOSE_INTERSTITIAL, container_id=self.container_id)
        self.messages.append(message)
        if self._post is not None:
            self._post(message)
        return True

    def _schedule_tick(self) -> None:
        self._ticker = self.scheduler.call_later(TICK_SECONDS, self._tick)

    def _tick(self) -> None:
        self._ticker = None
        self.remaining -= 1
        if self.remaining <= 0:
            self.remaining = 0
            self.close()
        else:
            self._schedule_tick()
