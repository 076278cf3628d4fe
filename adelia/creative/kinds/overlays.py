"""
Interstitial: full-screen overlay closed by the user or a countdown.
"""

from __future__ import annotations

from adelia.creative.assets import AssetResolver
from adelia.creative.document import DocumentParts, render_document
from adelia.creative.escaping import escape_html
from adelia.creative.kinds.base import cta_button, exit_zone, image, text_block
from adelia.creative.registry import register_kind
from adelia.schemas.settings import InterstitialSettings

# Mirrored by adelia.runtime.interstitial.InterstitialCountdown
INTERSTITIAL_JS = """(function () {
  var adelia = window.adelia;
  var root = adelia.root;
  var closeButton = document.getElementById("adelia-close");
  var counter = document.getElementById("adelia-countdown-secs");
  var remaining = adelia.num("auto-close-seconds");
  var closed = false;
  var ticker = null;

  function closeAd() {
    if (closed) { return; }
    closed = true;
    if (ticker !== null) {
      clearInterval(ticker);
      ticker = null;
    }
    root.setAttribute("data-state", "closed");
    adelia.post("close_interstitial");
    document.body.style.display = "none";
  }
  adelia.close = closeAd;

  closeButton.addEventListener("click", function () {
    adelia.report("close");
    closeAd();
  });

  Array.prototype.forEach.call(document.querySelectorAll(".adelia-cta"), function (cta) {
    cta.addEventListener("click", function () { setTimeout(closeAd, 0); });
  });

  if (remaining > 0) {
    ticker = setInterval(function () {
      remaining -= 1;
      if (counter) { counter.textContent = String(Math.max(remaining, 0)); }
      if (remaining <= 0) { closeAd(); }
    }, 1000);
  }
})();"""


@register_kind(
    InterstitialSettings,
    title="Interstitial",
    description="Full-screen overlay with countdown auto-close",
)
def render_interstitial(settings: InterstitialSettings, assets: AssetResolver) -> str:
    styles = f"""
#adelia-root{{background:{settings.background_color}}}
.it-shade{{position:absolute;inset:0;background:linear-gradient(180deg,rgba(0,0,0,0) 40%,rgba(0,0,0,.8))}}
.it-close{{position:absolute;right:10px;top:10px;z-index:10;width:32px;height:32px;border-radius:50%;border:0;
background:rgba(0,0,0,.6);color:#fff;font-size:18px;line-height:32px;cursor:pointer}}
.it-timer{{position:absolute;left:10px;top:16px;z-index:10;color:#fff;font-size:12px;text-shadow:0 1px 2px rgba(0,0,0,.8)}}
.it-copy{{position:absolute;left:16px;right:16px;bottom:20px;display:flex;flex-direction:column;gap:8px;color:#fff}}
.it-copy .brand-logo{{height:32px;width:auto;align-self:flex-start}}
.it-headline{{font-size:22px;font-weight:800}}
.it-body{{font-size:14px;opacity:.9}}
.it-copy .adelia-cta{{align-self:flex-start;background:#fff;color:#111;padding:10px 18px}}
"""
    timer = ""
    if settings.show_timer and settings.auto_close_seconds > 0:
        timer = (
            f'<div class="it-timer" data-adelia-chrome>{escape_html(settings.timer_label)} '
            f'<span id="adelia-countdown-secs">{settings.auto_close_seconds}</span>s</div>\n'
        )
    body = (
        f"<div {exit_zone()} style=\"position:absolute;inset:0\">"
        f"{image(assets, 'background')}<div class=\"it-shade\"></div></div>\n"
        f"{timer}"
        '<button type="button" id="adelia-close" class="it-close" data-adelia-chrome aria-label="Close">&times;</button>\n'
        '<div class="it-copy">'
        f"{image(assets, 'logo', css_class='brand-logo')}"
        f"{text_block('div', settings.headline, 'it-headline')}"
        f"{text_block('div', settings.body, 'it-body')}"
        f"{cta_button(settings.cta_text)}"
        "</div>"
    )
    return render_document(
        settings,
        DocumentParts(
            body=body,
            styles=styles,
            script=INTERSTITIAL_JS,
            data={"auto_close_seconds": settings.auto_close_seconds},
        ),
    )
