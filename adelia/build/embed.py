"""
Publisher loader snippets.

A snippet is one self-contained ``<script>`` block. It builds a container
sized to the creative, an iframe pointing at the hosted document with the
ad server's click macro as ``clickTag``, and inserts the container right
before itself. Gated creatives get a loader that also obscures the page.
"""

from __future__ import annotations

import re
from dataclasses import dataclass

from adelia.common.config import EmbedSettings, RuntimeSettings, get_settings
from adelia.creative.escaping import js_string
from adelia.runtime.gated import GateMode

_NEWLINES_RE = re.compile(r"\s*\n\s*")
_SPACES_RE = re.compile(r"\s{2,}")


def minify_script(script: str) -> str:
    """Collapse a snippet onto one line."""
    return _SPACES_RE.sub(" ", _NEWLINES_RE.sub(" ", script)).strip()


@dataclass(frozen=True)
class EmbedDescriptor:
    """Everything a snippet needs to mount one creative."""

    container_id: str
    width: int
    height: int
    hosted_document_url: str
    kind: str = ""
    gate: GateMode | None = None


@dataclass(frozen=True)
class EmbedSnippet:
    descriptor: EmbedDescriptor
    script: str

    @property
    def one_line(self) -> str:
        return minify_script(self.script)


# ---------------------------------------------------------------------------
# Script templates
# ---------------------------------------------------------------------------

# Shared page-level listener: one per page, entries keyed "containerId:action".
_DISPATCH_JS = """  var table = window.__adeliaHandlers = window.__adeliaHandlers || {};
  if (!window.__adeliaListening) {
    window.__adeliaListening = true;
    window.addEventListener("message", function (e) {
      var m = e.data;
      if (!m || m.namespace !== "adelia" || !m.containerId) { return; }
      var handler = table[m.containerId + ":" + m.action];
      if (handler) { handler(m, e); }
    });
  }"""

_FRAME_JS = """  var containerId = __CONTAINER_ID__;
  var src = __SRC__;
  var clickMacro = __CLICK_MACRO__;
  var sep = src.indexOf("?") === -1 ? "?" : "&";
  var s = document.currentScript;
  var d = document.createElement("div");
  d.id = containerId;
  var f = document.createElement("iframe");
  f.src = src + sep + __CLICK_PARAM__ + "=" + encodeURIComponent(clickMacro) +
    "&" + __CONTAINER_PARAM__ + "=" + encodeURIComponent(containerId);
  f.width = "__WIDTH__";
  f.height = "__HEIGHT__";
  f.setAttribute("scrolling", "no");
  f.setAttribute("frameborder", "0");
  f.style.cssText = "border:none;display:block;width:100%;height:100%;";
  d.appendChild(f);"""

STANDARD_TEMPLATE = """<script>
(function () {
__FRAME__
  d.style.cssText = "width:__WIDTH__px;height:__HEIGHT__px;position:relative;";
  s.parentNode.insertBefore(d, s);
__DISPATCH__
  table[containerId + ":close_interstitial"] = function (m, e) {
    if (e.source !== f.contentWindow) { return; }
    d.style.display = "none";
  };
__EXTRA__
})();
</script>"""

SCROLL_RELAY_JS = """  function relayScroll() {
    var r = d.getBoundingClientRect();
    var vh = window.innerHeight || 1;
    var pct = (vh - r.top) / (vh + r.height) * 100;
    if (f.contentWindow) { f.contentWindow.postMessage({scrollPct: Math.max(0, Math.min(100, pct))}, "*"); }
  }
  window.addEventListener("scroll", relayScroll, {passive: true});
  f.addEventListener("load", relayScroll);"""

# Mirrored by adelia.runtime.gated.GatedContentHost
GATED_TEMPLATE = """<script>
(function () {
__FRAME__
  var overlay = __OVERLAY__;
  var removeDelay = __REMOVE_DELAY__;
  var fadeMs = __FADE_MS__;
  var parent = s.parentNode;
  var gated = null;
  var unlocked = false;
  if (overlay) {
    d.style.cssText = "position:fixed;top:0;right:0;bottom:0;left:0;z-index:2147483647;display:flex;align-items:center;justify-content:center;background:rgba(0,0,0,0.6);";
    f.style.cssText = "border:none;display:block;width:__WIDTH__px;height:__HEIGHT__px;max-width:100%;max-height:100%;";
    document.documentElement.style.overflow = "hidden";
    document.body.style.overflow = "hidden";
  } else {
    d.style.cssText = "position:relative;width:100%;max-width:__WIDTH__px;height:__HEIGHT__px;margin:0 auto;";
  }
  parent.insertBefore(d, s);
  function gate() {
    if (overlay || unlocked) { return; }
    gated = document.createElement("div");
    gated.id = "gated_content_" + containerId;
    var node = s.nextSibling;
    while (node) {
      var following = node.nextSibling;
      gated.appendChild(node);
      node = following;
    }
    gated.style.cssText = "filter:blur(8px);opacity:0.4;pointer-events:none;user-select:none;";
    parent.appendChild(gated);
  }
  if (document.readyState === "loading") {
    document.addEventListener("DOMContentLoaded", gate);
  } else {
    gate();
  }
__DISPATCH__
  table[containerId + ":unlock_game_content"] = function (m, e) {
    if (unlocked || e.source !== f.contentWindow) { return; }
    unlocked = true;
    if (gated) {
      gated.style.filter = "";
      gated.style.opacity = "";
      gated.style.pointerEvents = "";
      gated.style.userSelect = "";
    }
    if (overlay) {
      document.documentElement.style.overflow = "";
      document.body.style.overflow = "";
    }
    setTimeout(function () {
      d.style.transition = "opacity " + fadeMs + "ms";
      d.style.opacity = "0";
      setTimeout(function () {
        if (d.parentNode) { d.parentNode.removeChild(d); }
        delete table[containerId + ":unlock_game_content"];
      }, fadeMs);
    }, removeDelay);
  };
})();
</script>"""

SCROLL_RELAY_KINDS = frozenset({"parallax", "scroll-reveal"})


class EmbedSynthesizer:
    """Builds loader snippets from :class:`EmbedDescriptor` values."""

    def __init__(
        self,
        embed: EmbedSettings | None = None,
        runtime: RuntimeSettings | None = None,
    ):
        settings = get_settings()
        self.embed = embed or settings.embed
        self.runtime = runtime or settings.runtime

    def container_id(self, creative_id: str) -> str:
        return f"{self.embed.container_prefix}{creative_id}"

    def synthesize(self, descriptor: EmbedDescriptor) -> EmbedSnippet:
        if descriptor.gate is not None:
            script = self._gated(descriptor)
        else:
            script = self._standard(descriptor)
        return EmbedSnippet(descriptor=descriptor, script=script)

    def _frame(self, descriptor: EmbedDescriptor) -> str:
        return (
            _FRAME_JS.replace("__CONTAINER_ID__", js_string(descriptor.container_id))
            .replace("__SRC__", js_string(descriptor.hosted_document_url))
            .replace("__CLICK_MACRO__", js_string(self.embed.click_macro))
            .replace("__CLICK_PARAM__", js_string(self.embed.click_param))
            .replace("__CONTAINER_PARAM__", js_string(self.embed.container_param))
        )

    def _standard(self, descriptor: EmbedDescriptor) -> str:
        extra = SCROLL_RELAY_JS if descriptor.kind in SCROLL_RELAY_KINDS else ""
        return (
            STANDARD_TEMPLATE.replace("__FRAME__", self._frame(descriptor))
            .replace("__DISPATCH__", _DISPATCH_JS)
            .replace("__EXTRA__\n", f"{extra}\n" if extra else "")
            .replace("__WIDTH__", str(int(descriptor.width)))
            .replace("__HEIGHT__", str(int(descriptor.height)))
        )

    def _gated(self, descriptor: EmbedDescriptor) -> str:
        return (
            GATED_TEMPLATE.replace("__FRAME__", self._frame(descriptor))
            .replace("__DISPATCH__", _DISPATCH_JS)
            .replace("__OVERLAY__", "true" if descriptor.gate is GateMode.OVERLAY else "false")
            .replace("__REMOVE_DELAY__", str(int(self.runtime.unlock_remove_delay_ms)))
            .replace("__FADE_MS__", str(int(self.runtime.fade_out_ms)))
            .replace("__WIDTH__", str(int(descriptor.width)))
            .replace("__HEIGHT__", str(int(descriptor.height)))
        )
