"""
Audio and video storytelling kinds: podcast snippet, video gallery,
text dialogue.
"""

from __future__ import annotations

from adelia.creative.assets import AssetResolver
from adelia.creative.document import DocumentParts, render_document
from adelia.creative.escaping import escape_html
from adelia.creative.kinds.base import cta_button, exit_zone, image, media_src, text_block
from adelia.creative.registry import register_kind
from adelia.schemas.settings import PodcastSnippetSettings, TextDialogueSettings, VideoGallerySettings

# ---------------------------------------------------------------------------
# Podcast snippet
# ---------------------------------------------------------------------------

PODCAST_JS = """(function () {
  var adelia = window.adelia;
  var audio = document.getElementById("adelia-podcast-audio");
  var toggle = document.getElementById("adelia-podcast-toggle");
  var progress = document.getElementById("adelia-podcast-progress");
  var started = false;

  toggle.addEventListener("click", function () {
    if (audio.paused) {
      audio.play();
    } else {
      audio.pause();
    }
  });
  audio.addEventListener("play", function () {
    toggle.textContent = "\\u275A\\u275A";
    if (!started) {
      started = true;
      adelia.report("audio_start");
    }
  });
  audio.addEventListener("pause", function () { toggle.textContent = "\\u25B6"; });
  audio.addEventListener("ended", function () { adelia.report("audio_complete"); });
  audio.addEventListener("timeupdate", function () {
    if (audio.duration) {
      progress.style.width = (audio.currentTime / audio.duration * 100).toFixed(1) + "%";
    }
  });
})();"""


@register_kind(
    PodcastSnippetSettings,
    title="Podcast Snippet",
    description="Audio teaser with play control",
)
def render_podcast_snippet(settings: PodcastSnippetSettings, assets: AssetResolver) -> str:
    accent = settings.accent_color
    styles = f"""
.pc-shade{{position:absolute;inset:0;background:linear-gradient(180deg,rgba(0,0,0,.1),rgba(0,0,0,.75))}}
.pc-top{{position:absolute;left:10px;top:10px;display:flex;align-items:center;gap:8px;color:#fff;font-size:12px;font-weight:700}}
.pc-top .brand-logo{{height:26px;width:auto;border-radius:4px}}
.pc-player{{position:absolute;left:10px;right:10px;bottom:10px;display:flex;flex-direction:column;gap:8px}}
.pc-title{{color:#fff;font-size:16px;font-weight:800}}
.pc-row{{display:flex;align-items:center;gap:10px}}
.pc-toggle{{width:38px;height:38px;border-radius:50%;border:0;background:{accent};color:#fff;font-size:14px;cursor:pointer}}
.pc-track{{flex:1;height:4px;background:rgba(255,255,255,.35);border-radius:2px;overflow:hidden}}
#adelia-podcast-progress{{height:100%;width:0;background:{accent}}}
.pc-player .adelia-cta{{background:#fff;color:#111}}
"""
    body = (
        f"<div {exit_zone()} style=\"position:absolute;inset:0\">"
        f"{image(assets, 'background')}<div class=\"pc-shade\"></div></div>\n"
        '<div class="pc-top">'
        f"{image(assets, 'logo', css_class='brand-logo')}"
        f"{text_block('span', settings.brand_text, 'pc-brand')}"
        "</div>\n"
        '<div class="pc-player">'
        f"{text_block('div', settings.title_text, 'pc-title')}"
        '<div class="pc-row" data-adelia-chrome>'
        '<button type="button" id="adelia-podcast-toggle" class="pc-toggle" aria-label="Play">&#9654;</button>'
        '<div class="pc-track"><div id="adelia-podcast-progress"></div></div>'
        "</div>"
        f"{cta_button(settings.cta_text)}"
        "</div>\n"
        f'<audio id="adelia-podcast-audio" src="{media_src(assets, "audio")}" preload="none"></audio>'
    )
    return render_document(settings, DocumentParts(body=body, styles=styles, script=PODCAST_JS))


# ---------------------------------------------------------------------------
# Video gallery
# ---------------------------------------------------------------------------

GALLERY_CSS = """
.vg-feed{position:absolute;inset:0;overflow-y:scroll;scroll-snap-type:y mandatory;scrollbar-width:none;background:#000}
.vg-feed::-webkit-scrollbar{display:none}
.vg-slide{position:relative;width:100%;height:100%;scroll-snap-align:start}
.vg-slide video{position:absolute;inset:0;width:100%;height:100%;object-fit:cover}
.vg-title{position:absolute;left:12px;right:40px;bottom:64px;color:#fff;font-size:15px;font-weight:700;text-shadow:0 1px 3px rgba(0,0,0,.7)}
.vg-dots{position:absolute;right:8px;top:50%;transform:translateY(-50%);display:flex;flex-direction:column;gap:6px}
.vg-dot{width:6px;height:6px;border-radius:3px;background:rgba(255,255,255,.45)}
.vg-dot.vg-active{background:#fff;height:14px}
.vg-cta{position:absolute;left:12px;right:12px;bottom:14px;display:flex;justify-content:center}
.vg-cta .adelia-cta{width:100%;background:#fff;color:#111}
"""

GALLERY_JS = """(function () {
  var adelia = window.adelia;
  var feed = document.getElementById("adelia-gallery-feed");
  var videos = Array.prototype.slice.call(feed.querySelectorAll("video"));
  var dots = Array.prototype.slice.call(document.querySelectorAll(".vg-dot"));
  var seen = {};

  function activate(index) {
    videos.forEach(function (video, i) {
      if (i === index) {
        var playing = video.play();
        if (playing && playing.catch) { playing.catch(function () { return null; }); }
      } else {
        video.pause();
      }
    });
    dots.forEach(function (dot, i) { dot.classList.toggle("vg-active", i === index); });
    if (!seen[index]) {
      seen[index] = true;
      adelia.report("video_" + (index + 1) + "_view");
    }
  }

  if ("IntersectionObserver" in window) {
    var observer = new IntersectionObserver(function (entries) {
      entries.forEach(function (entry) {
        if (entry.isIntersecting) { activate(videos.indexOf(entry.target)); }
      });
    }, {root: feed, threshold: 0.6});
    videos.forEach(function (video) { observer.observe(video); });
  } else {
    activate(0);
  }

  feed.addEventListener("click", function (e) {
    if (e.target.tagName === "VIDEO") { e.target.muted = !e.target.muted; }
  });
})();"""


@register_kind(
    VideoGallerySettings,
    title="Video Gallery",
    description="Vertical swipe feed of up to three videos",
)
def render_video_gallery(settings: VideoGallerySettings, assets: AssetResolver) -> str:
    slides = []
    for index, video in enumerate(settings.videos, start=1):
        slides.append(
            '<div class="vg-slide">'
            f'<video src="{media_src(assets, f"video_{index}")}" muted playsinline loop preload="metadata"></video>'
            f"{text_block('div', video.title, 'vg-title')}"
            "</div>"
        )
    dots = "".join('<span class="vg-dot"></span>' for _ in settings.videos)
    body = (
        '<div id="adelia-gallery-feed" class="vg-feed" data-adelia-chrome>\n'
        + "\n".join(slides)
        + "\n</div>\n"
        f'<div class="vg-dots">{dots}</div>\n'
        f'<div class="vg-cta">{cta_button(settings.cta_text)}</div>'
    )
    return render_document(
        settings,
        DocumentParts(
            body=body,
            styles=GALLERY_CSS,
            script=GALLERY_JS,
            data={"videos": len(settings.videos)},
        ),
    )


# ---------------------------------------------------------------------------
# Text dialogue
# ---------------------------------------------------------------------------

DIALOGUE_JS = """(function () {
  var adelia = window.adelia;
  var lines = Array.prototype.slice.call(document.querySelectorAll(".td-line"));
  var log = document.getElementById("adelia-dialogue-log");
  var end = document.getElementById("adelia-dialogue-end");
  var audio = document.getElementById("adelia-dialogue-audio");
  var play = document.getElementById("adelia-dialogue-play");
  var next = 0;

  var timer = setInterval(function () {
    if (next >= lines.length) {
      clearInterval(timer);
      end.classList.remove("adelia-hidden");
      adelia.report("dialogue_complete");
      return;
    }
    lines[next].classList.remove("adelia-hidden");
    log.scrollTop = log.scrollHeight;
    next += 1;
  }, adelia.num("line-interval-ms"));

  if (audio && play) {
    play.addEventListener("click", function () {
      if (audio.paused) {
        audio.play();
        play.textContent = "\\u275A\\u275A";
        adelia.report("audio_start");
      } else {
        audio.pause();
        play.textContent = "\\u25B6";
      }
    });
  }
})();"""


@register_kind(
    TextDialogueSettings,
    title="Text Dialogue",
    description="Two-speaker chat played line by line",
)
def render_text_dialogue(settings: TextDialogueSettings, assets: AssetResolver) -> str:
    accent = settings.accent_color
    styles = f"""
#adelia-root{{background:#f5f6fa;display:flex;flex-direction:column}}
.td-head{{display:flex;align-items:center;gap:8px;padding:8px 10px;background:#fff;border-bottom:1px solid #e6e6e6;font-size:13px;font-weight:700}}
.td-head .brand-logo{{height:22px;width:auto}}
.td-play{{margin-left:auto;border:0;border-radius:12px;padding:3px 10px;background:{accent};color:#fff;cursor:pointer}}
#adelia-dialogue-log{{flex:1;overflow-y:auto;padding:10px;display:flex;flex-direction:column;gap:6px}}
.td-line{{max-width:80%;padding:7px 10px;border-radius:12px;font-size:13px;line-height:1.3}}
.td-speaker{{display:block;font-size:10px;opacity:.7;margin-bottom:2px}}
.td-a{{align-self:flex-start;background:#fff;color:#111}}
.td-b{{align-self:flex-end;background:{accent};color:#fff}}
.td-end{{padding:8px;display:flex;justify-content:center}}
.td-end .adelia-cta{{background:{accent};color:#fff}}
"""
    names = {"A": settings.speaker_a, "B": settings.speaker_b}
    lines = "\n".join(
        f'<div class="td-line td-{line.speaker.lower()} adelia-hidden">'
        f'<span class="td-speaker">{escape_html(names[line.speaker])}</span>{escape_html(line.text)}</div>'
        for line in settings.lines
    )

    audio = ""
    play = ""
    if assets.resolve("audio") is not None:
        audio = f'\n<audio id="adelia-dialogue-audio" src="{media_src(assets, "audio")}" preload="none"></audio>'
        play = '<button type="button" id="adelia-dialogue-play" class="td-play" data-adelia-chrome>&#9654;</button>'

    body = (
        f'<div class="td-head" {exit_zone()}>'
        f"{image(assets, 'logo', css_class='brand-logo')}"
        f"<span>{escape_html(settings.speaker_a)} &amp; {escape_html(settings.speaker_b)}</span>"
        f"{play}"
        "</div>\n"
        f'<div id="adelia-dialogue-log">\n{lines}\n</div>\n'
        f'<div id="adelia-dialogue-end" class="td-end adelia-hidden">{cta_button(settings.cta_text)}</div>'
        f"{audio}"
    )
    return render_document(
        settings,
        DocumentParts(
            body=body,
            styles=styles,
            script=DIALOGUE_JS,
            data={"line_interval_ms": settings.line_interval_ms},
        ),
    )
