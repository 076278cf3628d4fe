"""
Tracking injection for hosted renderings.

The script exposes ``window.reportEvent(event)``, which fires an image
beacon at the collection endpoint, and reports ``view`` on load. Only the
hosted rendering gets it; the archive stays free of network calls.
"""

from __future__ import annotations

from adelia.common.config import get_settings
from adelia.common.logger import LoggerMixin
from adelia.creative.escaping import js_string

AD_ID_TOKEN = "[[AD_ID]]"
TRACK_URL_TOKEN = "[[TRACK_URL]]"
BODY_CLOSE = "</body>"

TRACKING_SCRIPT = """<script>
(function () {
  var AD_ID = "[[AD_ID]]";
  var TRACK_URL = "[[TRACK_URL]]";
  window.reportEvent = function (event) {
    if (!AD_ID || AD_ID.indexOf("[" + "[") === 0) { return; }
    var img = new Image();
    img.src = TRACK_URL + "?adId=" + encodeURIComponent(AD_ID) +
      "&event=" + encodeURIComponent(event) + "&t=" + Date.now();
  };
  window.reportEvent("view");
})();
</script>"""


def _literal(value: str) -> str:
    """Contents of a JS string literal, without the quotes."""
    return js_string(value)[1:-1]


class TrackingInjector(LoggerMixin):
    """Substitutes the creative id and endpoint, then appends the script."""

    def __init__(self, endpoint: str | None = None, template: str = TRACKING_SCRIPT):
        self.endpoint = endpoint if endpoint is not None else get_settings().tracking.endpoint
        self.template = template

    def script_for(self, creative_id: str) -> str:
        if AD_ID_TOKEN not in self.template or TRACK_URL_TOKEN not in self.template:
            self.logger.warning(
                "Tracking template is missing placeholders",
                creative_id=creative_id,
                has_ad_id=AD_ID_TOKEN in self.template,
                has_track_url=TRACK_URL_TOKEN in self.template,
            )
        return self.template.replace(AD_ID_TOKEN, _literal(creative_id)).replace(
            TRACK_URL_TOKEN, _literal(self.endpoint)
        )

    def inject(self, html: str, creative_id: str) -> str:
        """Insert the tracking script right before the closing body tag."""
        script = self.script_for(creative_id)
        index = html.rfind(BODY_CLOSE)
        if index == -1:
            self.logger.warning("No closing body tag; appending tracking script", creative_id=creative_id)
            return f"{html}{script}\n"
        return f"{html[:index]}{script}\n{html[index:]}"
