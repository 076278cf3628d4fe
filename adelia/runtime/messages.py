"""
Cross-frame messages exchanged between a creative and its host page.

Wire shape: ``{namespace: "adelia", action: <tag>, containerId?, untracked?, params?}``,
posted with a wildcard target origin. Messages are never persisted.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any

NAMESPACE = "adelia"


class RuntimeAction(str, Enum):
    """Action tags a creative may post."""

    PRINT = "print"
    EXPAND = "expand"
    COLLAPSE = "collapse"
    COLLAPSE_AUTO = "collapse_auto"
    CLOSE_INTERSTITIAL = "close_interstitial"
    UNLOCK_GAME_CONTENT = "unlock_game_content"


@dataclass(frozen=True)
class RuntimeMessage:
    """One posted message."""

    action: RuntimeAction
    container_id: str | None = None
    untracked: bool = False
    params: dict[str, Any] | None = None

    def to_payload(self) -> dict[str, Any]:
        payload: dict[str, Any] = {"namespace": NAMESPACE, "action": self.action.value}
        if self.container_id:
            payload["containerId"] = self.container_id
        if self.untracked:
            payload["untracked"] = True
        if self.params is not None:
            payload["params"] = dict(self.params)
        return payload

    @classmethod
    def from_payload(cls, payload: Any) -> RuntimeMessage | None:
        """Parse a received payload; ``None`` for anything not ours."""
        if not isinstance(payload, dict) or payload.get("namespace") != NAMESPACE:
            return None
        try:
            action = RuntimeAction(payload.get("action"))
        except ValueError:
            return None
        params = payload.get("params")
        return cls(
            action=action,
            container_id=payload.get("containerId") or None,
            untracked=bool(payload.get("untracked", False)),
            params=params if isinstance(params, dict) else None,
        )
