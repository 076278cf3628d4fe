"""
Host side of the content gate, plus the host-page message dispatcher.

The loader snippet for a gated creative either blurs every sibling that
follows it (inline) or covers the viewport and locks scrolling (overlay).
An ``unlock_game_content`` message for its container restores the page and
removes the creative after a delay. Handlers are registered per
``(container id, action)`` so several embeds on one page never act on each
other's messages.

Mirrors ``GATED_TEMPLATE`` and its dispatch table in :mod:`adelia.build.embed`.
"""

from __future__ import annotations

from enum import Enum
from typing import Any, Callable

from adelia.common.logger import get_logger
from adelia.runtime.messages import RuntimeAction, RuntimeMessage
from adelia.runtime.timers import Scheduler

logger = get_logger(__name__)

Handler = Callable[[RuntimeMessage], None]


class HostMessageDispatcher:
    """Dispatch table keyed by ``(container_id, action)``."""

    def __init__(self) -> None:
        self._handlers: dict[tuple[str, RuntimeAction], Handler] = {}

    def register(self, container_id: str, action: RuntimeAction, handler: Handler) -> None:
        self._handlers[(container_id, action)] = handler

    def unregister(self, container_id: str, action: RuntimeAction | None = None) -> None:
        for key in list(self._handlers):
            if key[0] == container_id and (action is None or key[1] is action):
                del self._handlers[key]

    def dispatch(self, payload: Any) -> bool:
        """Route one received payload. Returns whether a handler ran."""
        message = RuntimeMessage.from_payload(payload)
        if message is None or message.container_id is None:
            return False
        handler = self._handlers.get((message.container_id, message.action))
        if handler is None:
            return False
        handler(message)
        return True


class GateMode(str, Enum):
    INLINE = "inline"
    OVERLAY = "overlay"


class GatedContentHost:
    """Page state controlled by one gated embed."""

    def __init__(
        self,
        container_id: str,
        scheduler: Scheduler,
        *,
        mode: GateMode = GateMode.INLINE,
        remove_delay_ms: int = 2000,
        fade_out_ms: int = 500,
    ):
        self.container_id = container_id
        self.scheduler = scheduler
        self.mode = mode
        self.remove_delay_ms = remove_delay_ms
        self.fade_out_ms = fade_out_ms

        self.content_blurred = False
        self.scroll_locked = False
        self.container_attached = False
        self.fading = False
        self.unlocked = False

    def mount(self, dispatcher: HostMessageDispatcher | None = None) -> None:
        """Insert the container and obscure the page."""
        self.container_attached = True
        if self.mode is GateMode.INLINE:
            self.content_blurred = True
        else:
            self.scroll_locked = True
        if dispatcher is not None:
            dispatcher.register(self.container_id, RuntimeAction.UNLOCK_GAME_CONTENT, self.handle_unlock)

    def handle_unlock(self, message: RuntimeMessage | None = None) -> bool:
        """Restore the page. Repeated deliveries are ignored."""
        if self.unlocked:
            return False
        self.unlocked = True
        if self.mode is GateMode.INLINE:
            self.content_blurred = False
        else:
            self.scroll_locked = False
        logger.debug("Gate unlocked", container_id=self.container_id, mode=self.mode.value)
        self.scheduler.call_later(self.remove_delay_ms / 1000, self._fade_out)
        return True

    def _fade_out(self) -> None:
        self.fading = True
        self.scheduler.call_later(self.fade_out_ms / 1000, self._remove)

    def _remove(self) -> None:
        self.container_attached = False
