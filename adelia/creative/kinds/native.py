"""
Native kinds: in-feed card with image or muted autoplay video.
"""

from __future__ import annotations

from adelia.creative.assets import AssetResolver
from adelia.creative.document import DocumentParts, render_document
from adelia.creative.kinds.base import cta_button, exit_zone, image, media_src, text_block
from adelia.creative.registry import register_kind
from adelia.schemas.settings import NativeSettings, NativeVideoSettings

NATIVE_CSS = """
html,body{overflow:visible}
.nt-card{position:absolute;inset:0;display:flex;flex-direction:column;background:#fff;border:1px solid #e4e4e4;border-radius:6px;overflow:hidden}
.nt-media{position:relative;flex:1;min-height:0;background:#f2f2f2}
.nt-media video{position:absolute;inset:0;width:100%;height:100%;object-fit:cover}
.nt-copy{padding:8px 10px;display:flex;flex-direction:column;gap:4px}
.nt-sponsor{font-size:10px;color:#888;text-transform:uppercase;letter-spacing:.06em}
.nt-headline{font-size:15px;font-weight:700;color:#111;line-height:1.25}
.nt-body{font-size:12px;color:#444;line-height:1.35}
.nt-copy .adelia-cta{align-self:flex-start;background:#111;color:#fff;margin-top:2px}
.nt-sound{position:absolute;right:8px;bottom:8px;border:0;border-radius:14px;padding:4px 9px;font-size:11px;background:rgba(0,0,0,.6);color:#fff;cursor:pointer}
"""


def _copy(sponsor: str, headline: str, body: str, cta_text: str) -> str:
    return (
        '<div class="nt-copy">'
        f"{text_block('span', sponsor, 'nt-sponsor')}"
        f"{text_block('div', headline, 'nt-headline')}"
        f"{text_block('div', body, 'nt-body')}"
        f"{cta_button(cta_text) if cta_text else ''}"
        "</div>"
    )


@register_kind(NativeSettings, title="Native", description="In-feed card with image and copy")
def render_native(settings: NativeSettings, assets: AssetResolver) -> str:
    media = image(assets, "image", alt=settings.headline)
    if media:
        media = f'<div class="nt-media">{media}</div>'
    body = (
        f'<div class="nt-card" {exit_zone()}>'
        f"{media}"
        f"{_copy(settings.sponsor_label, settings.headline, settings.body, settings.cta_text)}"
        "</div>"
    )
    return render_document(settings, DocumentParts(body=body, styles=NATIVE_CSS))


NATIVE_VIDEO_JS = """(function () {
  var adelia = window.adelia;
  var video = document.getElementById("adelia-native-video");
  var sound = document.getElementById("adelia-native-sound");
  var started = false;

  video.addEventListener("playing", function () {
    if (!started) {
      started = true;
      adelia.report("video_start");
    }
  });
  video.addEventListener("ended", function () { adelia.report("video_complete"); });

  sound.addEventListener("click", function () {
    video.muted = !video.muted;
    sound.textContent = video.muted ? "Sound on" : "Sound off";
    adelia.report(video.muted ? "mute" : "unmute");
  });
})();"""


@register_kind(
    NativeVideoSettings,
    title="Native Video",
    description="In-feed card with muted autoplay video",
)
def render_native_video(settings: NativeVideoSettings, assets: AssetResolver) -> str:
    poster = assets.resolve("poster")
    poster_attr = f' poster="{media_src(assets, "poster")}"' if poster else ""
    autoplay = " autoplay" if settings.autoplay else ""
    video = (
        f'<video id="adelia-native-video" src="{media_src(assets, "video")}"{poster_attr}'
        f" muted playsinline loop preload=\"metadata\"{autoplay}></video>"
    )
    body = (
        f'<div class="nt-card" {exit_zone()}>'
        f'<div class="nt-media">{video}'
        '<button type="button" id="adelia-native-sound" class="nt-sound" data-adelia-chrome>Sound on</button>'
        "</div>"
        f"{_copy('', settings.headline, settings.body, settings.cta_text)}"
        "</div>"
    )
    return render_document(
        settings,
        DocumentParts(body=body, styles=NATIVE_CSS, script=NATIVE_VIDEO_JS),
    )
