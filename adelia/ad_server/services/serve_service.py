"""
Publisher-side serving.

``/api/serve`` answers the universal tag with one placement per stored
creative that names a target element. Native creatives are returned as
markup the tag injects directly so they pick up the page's typography;
everything else is an iframe onto the hosted document.
"""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, Field

from adelia.build.storage import RecordStore
from adelia.build.tracking import TrackingInjector
from adelia.common.logger import get_logger
from adelia.creative.escaping import escape_html, js_string
from adelia.schemas.record import CreativeRecord

logger = get_logger(__name__)

NATIVE_KINDS = frozenset({"native"})


class Placement(BaseModel):
    """Where and what the universal tag mounts."""

    selector: str = Field(..., description="CSS selector of the target element")
    html: str = Field(..., description="Markup to mount")
    type: Literal["iframe", "native"] = "iframe"
    width: int | None = None
    height: int | None = None


def selector_for(target_element_id: str) -> str:
    return target_element_id if target_element_id.startswith("#") else f"#{target_element_id}"


def iframe_markup(record: CreativeRecord) -> str:
    return (
        f'<iframe src="{escape_html(record.hosted_url)}" width="{record.width}" '
        f'height="{record.height}" frameborder="0" scrolling="no" '
        'style="width:100%;height:100%;border:none;overflow:hidden"></iframe>'
    )


# Shares the publisher page with other placements; keeps its id in the closure.
NATIVE_TRACKING_JS = """<script>
(function () {
  var adId = __AD_ID__;
  var trackUrl = __TRACK_URL__;
  function beacon(event) {
    var img = new Image();
    img.src = trackUrl + "?adId=" + encodeURIComponent(adId) +
      "&event=" + encodeURIComponent(event) + "&t=" + Date.now();
  }
  var links = document.querySelectorAll("a[data-adelia-id]");
  for (var i = 0; i < links.length; i++) {
    if (links[i].getAttribute("data-adelia-id") === adId) {
      links[i].addEventListener("click", function () { beacon("click"); });
    }
  }
  beacon("view");
})();
</script>"""


def native_tracking_script(creative_id: str, endpoint: str) -> str:
    return NATIVE_TRACKING_JS.replace("__AD_ID__", js_string(creative_id)).replace(
        "__TRACK_URL__", js_string(endpoint)
    )


def native_markup(record: CreativeRecord, tracking: TrackingInjector | None) -> str:
    settings = record.settings
    image = record.asset_urls.get("image")
    headline = escape_html(settings.get("headline", ""))
    parts = [
        '<div class="adelia-native" style="font-family:inherit;border:1px solid #e2e8f0;'
        'border-radius:8px;overflow:hidden;background:#fff;color:inherit;'
        'display:flex;flex-direction:column;max-width:100%">'
    ]
    if image:
        parts.append(
            f'<img src="{escape_html(image)}" alt="{headline}" '
            'style="width:100%;height:auto;object-fit:cover;aspect-ratio:1200/628">'
        )
    parts.append(
        '<div style="padding:16px">'
        '<div style="font-size:.75rem;text-transform:uppercase;letter-spacing:.05em;'
        f'color:#64748b;margin-bottom:4px">{escape_html(settings.get("sponsor_label", "Sponsored"))}</div>'
        f'<h3 style="margin:0 0 8px;font-size:1.125rem;font-weight:700;line-height:1.4">{headline}</h3>'
        f'<p style="margin:0 0 16px;font-size:.875rem;color:#475569;line-height:1.5">'
        f'{escape_html(settings.get("body", ""))}</p>'
        f'<a href="{escape_html(settings.get("target_url", ""))}" target="_blank" '
        'rel="noopener noreferrer" data-adelia-id="'
        f'{escape_html(record.id or "")}" '
        'style="display:inline-block;background:#2563eb;color:#fff;padding:8px 16px;'
        'text-decoration:none;border-radius:4px;font-size:.875rem;font-weight:500">'
        f'{escape_html(settings.get("cta_text", ""))}</a>'
        "</div></div>"
    )
    if tracking is not None and record.id:
        parts.append(native_tracking_script(record.id, tracking.endpoint))
    return "".join(parts)


class ServeService:
    def __init__(self, store: RecordStore, tracking: TrackingInjector | None = None):
        self.store = store
        self.tracking = tracking

    async def placements(self, owner: str) -> list[Placement]:
        records = await self.store.list_by_owner(owner)
        placements = []
        for record in sorted(records, key=lambda r: r.created_at):
            if not record.target_element_id:
                continue
            if record.kind in NATIVE_KINDS:
                placement = Placement(
                    selector=selector_for(record.target_element_id),
                    html=native_markup(record, self.tracking),
                    type="native",
                )
            else:
                placement = Placement(
                    selector=selector_for(record.target_element_id),
                    html=iframe_markup(record),
                    width=record.width,
                    height=record.height,
                )
            placements.append(placement)
        logger.debug("Placements resolved", owner=owner, count=len(placements))
        return placements


UNIVERSAL_TAG_JS = """(function () {
  var owner = __OWNER__;
  var serveUrl = __SERVE_URL__;

  function mount(placements) {
    (placements || []).forEach(function (p) {
      var target = document.querySelector(p.selector);
      if (!target) {
        if (window.console) { console.warn("adelia: no element for " + p.selector); }
        return;
      }
      target.innerHTML = "";
      var wrapper = document.createElement("div");
      wrapper.innerHTML = p.html;
      if (p.type === "native") {
        // innerHTML does not run scripts; re-create them
        var scripts = wrapper.querySelectorAll("script");
        for (var i = 0; i < scripts.length; i++) {
          var s = document.createElement("script");
          s.text = scripts[i].text;
          scripts[i].parentNode.replaceChild(s, scripts[i]);
        }
      } else if (p.height) {
        wrapper.style.height = p.height + "px";
      }
      target.appendChild(wrapper);
    });
  }

  function load() {
    fetch(serveUrl + "?owner=" + encodeURIComponent(owner))
      .then(function (r) {
        if (!r.ok) { throw new Error("serve request failed: " + r.status); }
        return r.json();
      })
      .then(function (config) { mount(config.placements); })
      .catch(function (e) {
        if (window.console) { console.error("adelia:", e); }
      });
  }

  if (document.readyState === "loading") {
    document.addEventListener("DOMContentLoaded", load);
  } else {
    load();
  }
})();
"""


def universal_tag(owner: str, serve_url: str) -> str:
    """Script served at ``/adpilot.js`` for one owner."""
    return UNIVERSAL_TAG_JS.replace("__OWNER__", js_string(owner)).replace(
        "__SERVE_URL__", js_string(serve_url)
    )
