"""
Reference state machines for the in-browser creative runtime.

Each machine takes a scheduler (an asyncio loop or a :class:`VirtualClock`)
and owns its timers, cancelling them on every superseding transition.
"""

from adelia.runtime.expandable import BannerState, ExpandableBanner
from adelia.runtime.gated import GatedContentHost, GateMode, HostMessageDispatcher
from adelia.runtime.interstitial import InterstitialCountdown
from adelia.runtime.messages import NAMESPACE, RuntimeAction, RuntimeMessage
from adelia.runtime.timers import Scheduler, VirtualClock

__all__ = [
    "NAMESPACE",
    "BannerState",
    "ExpandableBanner",
    "GateMode",
    "GatedContentHost",
    "HostMessageDispatcher",
    "InterstitialCountdown",
    "RuntimeAction",
    "RuntimeMessage",
    "Scheduler",
    "VirtualClock",
]
