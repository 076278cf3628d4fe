"""
Tests for the runtime state machines on a virtual clock.
"""

import asyncio

import pytest

from adelia.runtime.expandable import CLOSE_ICON, OPEN_ICON, BannerState, ExpandableBanner
from adelia.runtime.gated import GatedContentHost, GateMode, HostMessageDispatcher
from adelia.runtime.interstitial import InterstitialCountdown
from adelia.runtime.messages import RuntimeAction, RuntimeMessage
from adelia.runtime.timers import VirtualClock


@pytest.fixture
def clock() -> VirtualClock:
    return VirtualClock()


def actions(messages: list[RuntimeMessage]) -> list[str]:
    return [m.action.value for m in messages]


class TestVirtualClock:
    def test_fires_in_order(self, clock: VirtualClock) -> None:
        fired = []
        clock.call_later(2, lambda: fired.append("b"))
        clock.call_later(1, lambda: fired.append("a"))
        clock.call_later(2, lambda: fired.append("c"))
        clock.advance(1.5)
        assert fired == ["a"]
        clock.advance(0.5)
        assert fired == ["a", "b", "c"]
        assert clock.now == 2

    def test_cancelled_timers_skip(self, clock: VirtualClock) -> None:
        fired = []
        handle = clock.call_later(1, lambda: fired.append("x"))
        handle.cancel()
        assert clock.pending() == 0
        clock.advance(5)
        assert fired == []


class TestRuntimeMessage:
    def test_payload_shape(self) -> None:
        message = RuntimeMessage(RuntimeAction.COLLAPSE_AUTO, container_id="ad_container_1", untracked=True)
        assert message.to_payload() == {
            "namespace": "adelia",
            "action": "collapse_auto",
            "containerId": "ad_container_1",
            "untracked": True,
        }

    def test_round_trip(self) -> None:
        message = RuntimeMessage(RuntimeAction.PRINT, container_id="c", params={"kind": "skin"})
        assert RuntimeMessage.from_payload(message.to_payload()) == message

    @pytest.mark.parametrize(
        "payload",
        [None, "expand", {"action": "expand"}, {"namespace": "other", "action": "expand"},
         {"namespace": "adelia", "action": "explode"}],
    )
    def test_foreign_payloads_ignored(self, payload: object) -> None:
        assert RuntimeMessage.from_payload(payload) is None


class TestExpandableBanner:
    def make(self, clock: VirtualClock, **kwargs) -> ExpandableBanner:
        options = {"auto_close_seconds": 8, "transition_ms": 250, "container_id": "ad_container_x"}
        options.update(kwargs)
        banner = ExpandableBanner(clock, **options)
        banner.start()
        return banner

    def test_starts_collapsed_and_announces_size(self, clock: VirtualClock) -> None:
        banner = self.make(clock)
        assert banner.state is BannerState.COLLAPSED
        assert actions(banner.messages) == ["print"]
        assert banner.messages[0].params == {"collapsedHeight": 90, "expandedHeight": 250, "transition": 250}
        assert not banner.auto_close_pending

    def test_click_expands_and_cancels_pending_collapse(self, clock: VirtualClock) -> None:
        banner = self.make(clock)
        banner.trigger()
        banner.trigger()
        assert banner.collapse_pending
        assert banner.visible is BannerState.EXPANDED

        banner.trigger()
        assert banner.expanded
        assert not banner.collapse_pending
        assert banner.visible is BannerState.EXPANDED
        clock.advance(1)
        assert banner.visible is BannerState.EXPANDED
        assert actions(banner.messages) == ["print", "expand", "collapse", "expand"]

    def test_second_click_collapses_after_delay(self, clock: VirtualClock) -> None:
        banner = self.make(clock)
        banner.trigger()
        banner.trigger()
        assert banner.state is BannerState.COLLAPSED
        clock.advance(0.2)
        assert banner.visible is BannerState.EXPANDED
        clock.advance(0.1)
        assert banner.visible is BannerState.COLLAPSED
        assert not banner.messages[-1].untracked

    def test_auto_close(self, clock: VirtualClock) -> None:
        banner = self.make(clock, auto_close_seconds=3)
        banner.trigger()
        clock.advance(3)
        assert banner.state is BannerState.COLLAPSED
        last = banner.messages[-1]
        assert last.action is RuntimeAction.COLLAPSE_AUTO
        assert last.untracked
        assert last.container_id == "ad_container_x"

    def test_manual_collapse_cancels_auto_close(self, clock: VirtualClock) -> None:
        banner = self.make(clock, auto_close_seconds=3)
        banner.trigger()
        clock.advance(1)
        banner.trigger()
        clock.advance(10)
        assert actions(banner.messages) == ["print", "expand", "collapse"]

    def test_reexpanding_restarts_auto_close(self, clock: VirtualClock) -> None:
        banner = self.make(clock, auto_close_seconds=3)
        banner.trigger()
        clock.advance(2)
        banner.trigger()
        banner.trigger()
        clock.advance(2)
        assert banner.expanded
        clock.advance(1)
        assert not banner.expanded

    def test_zero_disables_auto_close(self, clock: VirtualClock) -> None:
        banner = self.make(clock, auto_close_seconds=0)
        banner.trigger()
        clock.advance(600)
        assert banner.expanded
        assert clock.pending() == 0

    def test_initially_expanded_arms_auto_close(self, clock: VirtualClock) -> None:
        banner = self.make(clock, init_expanded=True, auto_close_seconds=2)
        assert banner.expanded
        clock.advance(2)
        assert not banner.expanded
        assert actions(banner.messages) == ["print", "collapse_auto"]

    def test_hover_mode(self, clock: VirtualClock) -> None:
        banner = self.make(clock)
        banner.pointer_enter()
        banner.pointer_enter()
        banner.pointer_leave()
        assert actions(banner.messages) == ["print", "expand", "collapse"]

    def test_host_icons_resync_without_message(self, clock: VirtualClock) -> None:
        banner = self.make(clock)
        assert banner.icon == OPEN_ICON
        banner.trigger()
        assert banner.icon == CLOSE_ICON

        count = len(banner.messages)
        banner.receive_host_icons(".i{color:red}", "<i>open</i>", "<i>close</i>")
        assert banner.icon == "<i>close</i>"
        assert banner.icons_style == ".i{color:red}"
        assert len(banner.messages) == count

        banner.trigger()
        assert banner.icon == "<i>open</i>"

    def test_post_callback(self, clock: VirtualClock) -> None:
        posted = []
        banner = self.make(clock, post=lambda m: posted.append(m.to_payload()))
        banner.trigger()
        assert posted[-1] == {"namespace": "adelia", "action": "expand", "containerId": "ad_container_x"}


class TestInterstitialCountdown:
    def test_three_seconds_close_once(self, clock: VirtualClock) -> None:
        countdown = InterstitialCountdown(clock, seconds=3)
        countdown.start()
        clock.advance(2)
        assert countdown.remaining == 1
        assert countdown.visible
        clock.advance(1)
        assert countdown.closed
        assert actions(countdown.messages) == ["close_interstitial"]
        clock.advance(10)
        assert len(countdown.messages) == 1

    def test_close_is_idempotent(self, clock: VirtualClock) -> None:
        countdown = InterstitialCountdown(clock, seconds=5, container_id="c")
        countdown.start()
        assert countdown.close() is True
        assert countdown.close() is False
        clock.advance(10)
        assert len(countdown.messages) == 1
        assert countdown.messages[0].container_id == "c"
        assert clock.pending() == 0

    def test_zero_disables_countdown(self, clock: VirtualClock) -> None:
        countdown = InterstitialCountdown(clock, seconds=0)
        countdown.start()
        clock.advance(60)
        assert not countdown.closed

    @pytest.mark.asyncio
    async def test_runs_on_asyncio_loop(self) -> None:
        loop = asyncio.get_running_loop()
        done = asyncio.Event()
        countdown = InterstitialCountdown(loop, seconds=1, post=lambda m: done.set())
        countdown.start()
        await asyncio.wait_for(done.wait(), timeout=5)
        assert countdown.closed


class TestGatedContent:
    @pytest.mark.parametrize("mode", [GateMode.INLINE, GateMode.OVERLAY])
    def test_unlock_twice_equals_once(self, clock: VirtualClock, mode: GateMode) -> None:
        dispatcher = HostMessageDispatcher()
        host = GatedContentHost("ad_container_g", clock, mode=mode, remove_delay_ms=2000, fade_out_ms=500)
        host.mount(dispatcher)
        assert host.content_blurred is (mode is GateMode.INLINE)
        assert host.scroll_locked is (mode is GateMode.OVERLAY)

        payload = RuntimeMessage(RuntimeAction.UNLOCK_GAME_CONTENT, container_id="ad_container_g").to_payload()
        assert dispatcher.dispatch(payload)
        assert dispatcher.dispatch(payload)
        assert host.unlocked
        assert not host.content_blurred
        assert not host.scroll_locked
        assert clock.pending() == 1

        clock.advance(2)
        assert host.fading
        assert host.container_attached
        clock.advance(0.5)
        assert not host.container_attached

    def test_messages_scoped_by_container(self, clock: VirtualClock) -> None:
        dispatcher = HostMessageDispatcher()
        first = GatedContentHost("ad_container_1", clock)
        second = GatedContentHost("ad_container_2", clock)
        first.mount(dispatcher)
        second.mount(dispatcher)

        dispatcher.dispatch(
            {"namespace": "adelia", "action": "unlock_game_content", "containerId": "ad_container_2"}
        )
        assert not first.unlocked
        assert second.unlocked

    def test_unscoped_messages_ignored(self, clock: VirtualClock) -> None:
        dispatcher = HostMessageDispatcher()
        host = GatedContentHost("ad_container_1", clock)
        host.mount(dispatcher)
        assert not dispatcher.dispatch({"namespace": "adelia", "action": "unlock_game_content"})
        assert not host.unlocked

    def test_unregister(self, clock: VirtualClock) -> None:
        dispatcher = HostMessageDispatcher()
        host = GatedContentHost("c", clock)
        host.mount(dispatcher)
        dispatcher.unregister("c")
        assert not dispatcher.dispatch(
            {"namespace": "adelia", "action": "unlock_game_content", "containerId": "c"}
        )
