"""
Expandable banner state machine.

Mirrors ``EXPANDABLE_JS`` in :mod:`adelia.creative.kinds.banners`; change both
together. Behavior:

* entering ``expanded`` cancels a pending collapse swap, shows the expanded
  view at once and arms the auto-close timer;
* entering ``collapsed`` cancels auto-close and swaps the view after the
  transition delay;
* auto-close collapses with action ``collapse_auto``, flagged untracked;
* a message is posted only when the state actually changes.
"""

from __future__ import annotations

from enum import Enum
from typing import Callable

from adelia.runtime.messages import RuntimeAction, RuntimeMessage
from adelia.runtime.timers import Scheduler, TimerHandle
from adelia.schemas.settings import ExpandableBannerSettings

OPEN_ICON = "▼"
CLOSE_ICON = "▲"


class BannerState(str, Enum):
    COLLAPSED = "collapsed"
    EXPANDED = "expanded"


class ExpandableBanner:
    """One banner instance."""

    def __init__(
        self,
        scheduler: Scheduler,
        *,
        init_expanded: bool = False,
        auto_close_seconds: float = 8,
        transition_ms: int = 250,
        collapsed_height: int = 90,
        expanded_height: int = 250,
        container_id: str | None = None,
        post: Callable[[RuntimeMessage], None] | None = None,
    ):
        self.scheduler = scheduler
        self.auto_close_seconds = auto_close_seconds
        self.transition_ms = transition_ms
        self.collapsed_height = collapsed_height
        self.expanded_height = expanded_height
        self.container_id = container_id
        self._post = post

        self.state = BannerState.EXPANDED if init_expanded else BannerState.COLLAPSED
        self.visible = self.state
        self.messages: list[RuntimeMessage] = []
        self.icons_style = ""
        self._custom_icons: tuple[str, str] | None = None

        self._collapse_timer: TimerHandle | None = None
        self._auto_close_timer: TimerHandle | None = None

    @classmethod
    def from_settings(
        cls,
        settings: ExpandableBannerSettings,
        scheduler: Scheduler,
        **kwargs,
    ) -> "ExpandableBanner":
        return cls(
            scheduler,
            init_expanded=settings.init_expanded,
            auto_close_seconds=settings.auto_close_seconds,
            transition_ms=settings.transition_ms,
            collapsed_height=settings.collapsed_height,
            expanded_height=settings.height,
            **kwargs,
        )

    # ------------------------------------------------------------------
    # Introspection
    # ------------------------------------------------------------------

    @property
    def expanded(self) -> bool:
        return self.state is BannerState.EXPANDED

    @property
    def collapse_pending(self) -> bool:
        return self._collapse_timer is not None

    @property
    def auto_close_pending(self) -> bool:
        return self._auto_close_timer is not None

    @property
    def icon(self) -> str:
        """Markup currently shown in the icon slot."""
        if self._custom_icons is not None:
            open_html, close_html = self._custom_icons
            return close_html if self.expanded else open_html
        return CLOSE_ICON if self.expanded else OPEN_ICON

    # ------------------------------------------------------------------
    # Inputs
    # ------------------------------------------------------------------

    def start(self) -> None:
        """Document load: announce dimensions, arm auto-close if open."""
        self._emit(
            RuntimeAction.PRINT,
            params={
                "collapsedHeight": self.collapsed_height,
                "expandedHeight": self.expanded_height,
                "transition": self.transition_ms,
            },
        )
        if self.expanded:
            self._arm_auto_close()

    def trigger(self) -> None:
        """User clicked the toggle."""
        self._transition(not self.expanded, tracked=True)

    def pointer_enter(self) -> None:
        self._transition(True, tracked=True)

    def pointer_leave(self) -> None:
        self._transition(False, tracked=True)

    def receive_host_icons(self, icons_style: str, open_icon_html: str, close_icon_html: str) -> None:
        """Host replaced the default icons; re-sync without reporting."""
        self.icons_style = icons_style
        self._custom_icons = (open_icon_html, close_icon_html)
        self._display()

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _transition(self, expanded: bool, *, tracked: bool, auto: bool = False) -> bool:
        if expanded == self.expanded:
            return False
        self.state = BannerState.EXPANDED if expanded else BannerState.COLLAPSED
        if expanded:
            self._arm_auto_close()
        else:
            self._cancel_auto_close()
        self._display()

        if expanded:
            action = RuntimeAction.EXPAND
        elif auto:
            action = RuntimeAction.COLLAPSE_AUTO
        else:
            action = RuntimeAction.COLLAPSE
        self._emit(action, untracked=not tracked)
        return True

    def _display(self) -> None:
        self._cancel_collapse()
        if self.expanded:
            self.visible = BannerState.EXPANDED
        else:
            self._collapse_timer = self.scheduler.call_later(
                self.transition_ms / 1000, self._finish_collapse
            )

    def _finish_collapse(self) -> None:
        self._collapse_timer = None
        self.visible = BannerState.COLLAPSED

    def _arm_auto_close(self) -> None:
        self._cancel_auto_close()
        if self.auto_close_seconds > 0:
            self._auto_close_timer = self.scheduler.call_later(
                self.auto_close_seconds, self._auto_close
            )

    def _auto_close(self) -> None:
        self._auto_close_timer = None
        self._transition(False, tracked=False, auto=True)

    def _cancel_collapse(self) -> None:
        if self._collapse_timer is not None:
            self._collapse_timer.cancel()
            self._collapse_timer = None

    def _cancel_auto_close(self) -> None:
        if self._auto_close_timer is not None:
            self._auto_close_timer.cancel()
            self._auto_close_timer = None

    def _emit(self, action: RuntimeAction, *, untracked: bool = False, params: dict | None = None) -> None:
        message = RuntimeMessage(
            action=action,
            container_id=self.container_id,
            untracked=untracked,
            params=params,
        )
        self.messages.append(message)
        if self._post is not None:
            self._post(message)
