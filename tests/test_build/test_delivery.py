"""
Tests for tracking injection and loader snippets.
"""

import pytest

from adelia.build.embed import EmbedDescriptor, EmbedSynthesizer, minify_script
from adelia.build.tracking import TRACKING_SCRIPT, TrackingInjector
from adelia.common.config import EmbedSettings, RuntimeSettings
from adelia.runtime.gated import GateMode

HTML = "<!DOCTYPE html>\n<html><body>\n<p>ad</p>\n</body>\n</html>\n"


class TestTrackingInjector:
    def test_injects_before_closing_body(self) -> None:
        injector = TrackingInjector(endpoint="https://track.example/api/track")
        result = injector.inject(HTML, "abc123")

        script_at = result.index("window.reportEvent")
        assert result.index("<p>ad</p>") < script_at < result.rindex("</body>")
        assert 'var AD_ID = "abc123";' in result
        assert 'var TRACK_URL = "https://track.example/api/track";' in result
        assert "[[AD_ID]]" not in result
        assert 'window.reportEvent("view");' in result

    def test_only_last_body_tag(self) -> None:
        html = "<body><script>var s='</body>';</script>\n</body>"
        result = TrackingInjector(endpoint="https://t.example").inject(html, "x")
        assert result.startswith("<body><script>var s='</body>';</script>\n")
        assert result.endswith("</body>")

    def test_appends_without_body_tag(self) -> None:
        result = TrackingInjector(endpoint="https://t.example").inject("<div>fragment</div>", "x")
        assert result.startswith("<div>fragment</div><script>")

    def test_values_are_js_escaped(self) -> None:
        injector = TrackingInjector(endpoint='https://t.example/"</script>')
        script = injector.script_for("id")
        assert "</script>\";" not in script
        assert '\\"\\u003c/script\\u003e' in script

    def test_template_without_tokens_still_appends(self) -> None:
        template = "<script>/* static */</script>"
        injector = TrackingInjector(endpoint="https://t.example", template=template)
        result = injector.inject(HTML, "abc")
        assert template in result

    def test_default_template_has_both_tokens(self) -> None:
        assert "[[AD_ID]]" in TRACKING_SCRIPT
        assert "[[TRACK_URL]]" in TRACKING_SCRIPT


@pytest.fixture
def synthesizer() -> EmbedSynthesizer:
    return EmbedSynthesizer(
        embed=EmbedSettings(),
        runtime=RuntimeSettings(unlock_remove_delay_ms=2000, fade_out_ms=500),
    )


class TestEmbedSynthesizer:
    def test_standard_snippet(self, synthesizer: EmbedSynthesizer) -> None:
        descriptor = EmbedDescriptor(
            container_id=synthesizer.container_id("abc"),
            width=970,
            height=250,
            hosted_document_url="https://cdn.example/ads/acme/x.html",
            kind="expandable-banner",
        )
        script = synthesizer.synthesize(descriptor).script

        assert script.startswith("<script>")
        assert script.endswith("</script>")
        assert 'var containerId = "ad_container_abc";' in script
        assert 'var src = "https://cdn.example/ads/acme/x.html";' in script
        assert 'var clickMacro = "%%CLICK_URL_UNESC%%";' in script
        assert '"clickTag"' in script
        assert '"adeliaContainer"' in script
        assert "width:970px;height:250px" in script
        assert "s.parentNode.insertBefore(d, s)" in script
        assert "scrollPct" not in script
        assert "__" + "WIDTH__" not in script

    def test_scroll_kinds_relay_position(self, synthesizer: EmbedSynthesizer) -> None:
        descriptor = EmbedDescriptor("ad_container_p", 970, 250, "https://cdn.example/p.html", kind="parallax")
        assert "scrollPct" in synthesizer.synthesize(descriptor).script

    def test_query_string_in_hosted_url(self, synthesizer: EmbedSynthesizer) -> None:
        descriptor = EmbedDescriptor("c", 300, 250, "https://cdn.example/x.html?v=2")
        script = synthesizer.synthesize(descriptor).script
        assert 'src.indexOf("?") === -1 ? "?" : "&"' in script

    def test_url_cannot_break_out_of_script(self, synthesizer: EmbedSynthesizer) -> None:
        descriptor = EmbedDescriptor("c", 300, 250, 'https://x.example/"</script><script>alert(1)//')
        script = synthesizer.synthesize(descriptor).script
        assert script.count("</script>") == 1

    @pytest.mark.parametrize(
        ("gate", "overlay"),
        [(GateMode.INLINE, "false"), (GateMode.OVERLAY, "true")],
    )
    def test_gated_snippet(self, synthesizer: EmbedSynthesizer, gate: GateMode, overlay: str) -> None:
        descriptor = EmbedDescriptor(
            "ad_container_g", 300, 400, "https://cdn.example/g.html", kind="gated-mini-game", gate=gate
        )
        script = synthesizer.synthesize(descriptor).script
        assert f"var overlay = {overlay};" in script
        assert "var removeDelay = 2000;" in script
        assert "var fadeMs = 500;" in script
        assert "unlock_game_content" in script
        assert "filter:blur(8px)" in script
        assert "z-index:2147483647" in script
        assert "e.source !== f.contentWindow" in script

    def test_one_line(self, synthesizer: EmbedSynthesizer) -> None:
        snippet = synthesizer.synthesize(EmbedDescriptor("c", 300, 250, "https://cdn.example/x.html"))
        assert "\n" not in snippet.one_line
        assert snippet.one_line.startswith("<script>")
        assert snippet.one_line.endswith("</script>")

    def test_minify_collapses_whitespace(self) -> None:
        assert minify_script("<script>\n  var a = 1;\n\n  var b  =  2;\n</script>") == (
            "<script> var a = 1; var b = 2; </script>"
        )
