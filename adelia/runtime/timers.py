"""
Scheduler interface for the runtime state machines.

Any object with ``call_later(delay_seconds, callback) -> handle`` where
``handle.cancel()`` works will do; :class:`asyncio.AbstractEventLoop`
qualifies. :class:`VirtualClock` is a deterministic implementation that
only moves when told to.
"""

from __future__ import annotations

import heapq
import itertools
from typing import Callable, Protocol


class TimerHandle(Protocol):
    def cancel(self) -> None: ...


class Scheduler(Protocol):
    def call_later(self, delay: float, callback: Callable[[], None]) -> TimerHandle: ...


class VirtualTimer:
    """Handle returned by :meth:`VirtualClock.call_later`."""

    __slots__ = ("when", "callback", "cancelled")

    def __init__(self, when: float, callback: Callable[[], None]):
        self.when = when
        self.callback = callback
        self.cancelled = False

    def cancel(self) -> None:
        self.cancelled = True


class VirtualClock:
    """Manually advanced clock."""

    def __init__(self, start: float = 0.0):
        self.now = start
        self._queue: list[tuple[float, int, VirtualTimer]] = []
        self._sequence = itertools.count()

    def time(self) -> float:
        return self.now

    def call_later(self, delay: float, callback: Callable[[], None]) -> VirtualTimer:
        timer = VirtualTimer(self.now + max(0.0, delay), callback)
        heapq.heappush(self._queue, (timer.when, next(self._sequence), timer))
        return timer

    def advance(self, seconds: float) -> None:
        """Move time forward, firing every timer that comes due in order."""
        deadline = self.now + seconds
        while self._queue and self._queue[0][0] <= deadline:
            when, _, timer = heapq.heappop(self._queue)
            if timer.cancelled:
                continue
            self.now = when
            timer.callback()
        self.now = deadline

    def pending(self) -> int:
        """Number of live timers."""
        return sum(1 for _, _, timer in self._queue if not timer.cancelled)
