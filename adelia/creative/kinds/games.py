"""
Game kinds: puzzle, color reveal, scratch reveal, gated mini game.

Shuffles are seeded from the settings so a kind renders byte-identical
output for identical input, and both build phases lay the board out the
same way.
"""

from __future__ import annotations

import random

from adelia.common.utils import stable_seed
from adelia.creative.assets import AssetResolver
from adelia.creative.document import DocumentParts, render_document
from adelia.creative.escaping import escape_html
from adelia.creative.kinds.base import cta_button, exit_zone, image, text_block
from adelia.creative.registry import register_kind
from adelia.schemas.settings import (
    ColorRevealSettings,
    CreativeSettings,
    GatedMiniGameSettings,
    PuzzleSettings,
    ScratchRevealSettings,
)


def seeded_shuffle(settings: CreativeSettings, items: list, *, avoid_identity: bool = False) -> list:
    """Deterministic permutation of ``items`` keyed on the settings."""
    rng = random.Random(stable_seed(settings.kind, settings.model_dump_json()))
    shuffled = list(items)
    rng.shuffle(shuffled)
    if avoid_identity and len(items) > 1 and shuffled == list(items):
        shuffled = shuffled[1:] + shuffled[:1]
    return shuffled


def _brand_bar(assets: AssetResolver, label: str, name: str) -> str:
    return (
        '<div class="brand-bar">'
        f"{image(assets, 'logo', css_class='brand-logo')}"
        f"{text_block('span', label, 'brand-label')}"
        f"{text_block('span', name, 'brand-name')}"
        "</div>"
    )


BRAND_CSS = """
.brand-bar{position:absolute;left:0;right:0;top:0;height:28px;display:flex;align-items:center;gap:6px;
padding:0 8px;background:rgba(255,255,255,.92);font-size:11px;z-index:5}
.brand-logo{height:20px;width:auto}
.brand-label{color:#777;text-transform:uppercase;letter-spacing:.06em}
.brand-name{font-weight:700;color:#111}
"""

# ---------------------------------------------------------------------------
# Puzzle
# ---------------------------------------------------------------------------

PUZZLE_JS = """(function () {
  var adelia = window.adelia;
  var tiles = Array.prototype.slice.call(document.querySelectorAll(".pz-tile"));
  var win = document.getElementById("adelia-puzzle-win");
  var selected = null;
  var solved = false;

  function isSolved() {
    return tiles.every(function (tile) {
      return Number(tile.style.order) === Number(tile.getAttribute("data-piece"));
    });
  }

  tiles.forEach(function (tile) {
    tile.addEventListener("click", function () {
      if (solved) { return; }
      if (selected === null) {
        selected = tile;
        tile.classList.add("pz-selected");
        return;
      }
      if (selected !== tile) {
        var order = selected.style.order;
        selected.style.order = tile.style.order;
        tile.style.order = order;
      }
      selected.classList.remove("pz-selected");
      selected = null;
      if (isSolved()) {
        solved = true;
        adelia.report("puzzle_solved");
        setTimeout(function () { win.classList.remove("adelia-hidden"); }, 400);
      }
    });
  });
})();"""


@register_kind(PuzzleSettings, title="Puzzle", description="Swap tiles to rebuild the artwork")
def render_puzzle(settings: PuzzleSettings, assets: AssetResolver) -> str:
    n = settings.grid_size
    pieces = list(range(n * n))
    order = seeded_shuffle(settings, pieces, avoid_identity=True)
    tile_size = 100 / n

    tiles = []
    for piece in pieces:
        row, col = divmod(piece, n)
        tiles.append(
            f'<div class="pz-tile" data-piece="{piece}" style="order:{order[piece]}">'
            f'<div class="pz-art" style="width:{n * 100}%;height:{n * 100}%;left:-{col * 100}%;top:-{row * 100}%">'
            f"{image(assets, 'background')}</div></div>"
        )

    styles = BRAND_CSS + f"""
.pz-board{{position:absolute;left:0;right:0;top:28px;bottom:44px;display:flex;flex-wrap:wrap}}
.pz-tile{{position:relative;overflow:hidden;width:{tile_size:.4f}%;height:{tile_size:.4f}%;outline:1px solid rgba(255,255,255,.6);cursor:pointer}}
.pz-art{{position:absolute}}
.pz-selected{{outline:3px solid {settings.accent_color};z-index:2}}
.pz-footer{{position:absolute;left:0;right:0;bottom:0;height:44px;display:flex;align-items:center;justify-content:space-between;padding:0 8px;background:#fff}}
.pz-headline{{font-size:13px;font-weight:700}}
.adelia-cta{{background:{settings.accent_color};color:#fff}}
.pz-win{{position:absolute;inset:0;z-index:20;display:flex;flex-direction:column;align-items:center;justify-content:center;gap:10px;padding:20px;text-align:center;background:rgba(255,255,255,.95)}}
.pz-win-title{{font-size:22px;font-weight:800;color:{settings.accent_color}}}
.pz-win-text{{font-size:14px;color:#333}}
"""

    body = (
        f"{_brand_bar(assets, settings.brand_label, settings.brand_name)}\n"
        f'<div class="pz-board" data-adelia-chrome>\n' + "\n".join(tiles) + "\n</div>\n"
        '<div class="pz-footer">'
        f"{text_block('span', settings.headline, 'pz-headline')}"
        f"{cta_button(settings.cta_text)}"
        "</div>\n"
        '<div id="adelia-puzzle-win" class="pz-win adelia-hidden">'
        f"{text_block('div', settings.win_title, 'pz-win-title')}"
        f"{text_block('div', settings.win_text, 'pz-win-text')}"
        f"{cta_button(settings.win_cta_text, url=settings.win_target_url)}"
        "</div>"
    )
    return render_document(
        settings,
        DocumentParts(body=body, styles=styles, script=PUZZLE_JS, data={"grid_size": n}),
    )


# ---------------------------------------------------------------------------
# Color reveal
# ---------------------------------------------------------------------------

COLOR_REVEAL_JS = """(function () {
  var adelia = window.adelia;
  var stage = document.getElementById("adelia-cr-stage");
  var colorImage = document.getElementById("adelia-cr-color");
  var counter = document.getElementById("adelia-cr-counter");
  var done = document.getElementById("adelia-cr-done");
  var hitsToWin = adelia.num("hits-to-win");
  var showingColor = false;
  var hits = 0;

  var flipTimer = setInterval(function () {
    showingColor = !showingColor;
    colorImage.style.opacity = showingColor ? "1" : "0";
  }, adelia.num("flip-interval-ms"));

  stage.addEventListener("click", function () {
    if (hits >= hitsToWin) { return; }
    if (!showingColor) {
      stage.classList.remove("cr-miss");
      void stage.offsetWidth;
      stage.classList.add("cr-miss");
      return;
    }
    hits += 1;
    counter.textContent = hits + " / " + hitsToWin;
    if (hits >= hitsToWin) {
      clearInterval(flipTimer);
      colorImage.style.opacity = "1";
      done.classList.remove("adelia-hidden");
      adelia.report("game_won");
    }
  });
})();"""


@register_kind(
    ColorRevealSettings,
    title="Color Reveal",
    description="Tap the artwork while it flashes into color",
)
def render_color_reveal(settings: ColorRevealSettings, assets: AssetResolver) -> str:
    styles = BRAND_CSS + f"""
#adelia-root{{background:{settings.background_color}}}
#adelia-cr-stage{{position:absolute;left:0;right:0;top:28px;bottom:40px;cursor:crosshair}}
#adelia-cr-color{{opacity:0;transition:opacity .12s}}
.cr-miss{{animation:cr-shake .3s}}
@keyframes cr-shake{{25%{{transform:translateX(-4px)}}75%{{transform:translateX(4px)}}}}
.cr-footer{{position:absolute;left:0;right:0;bottom:0;height:40px;display:flex;align-items:center;justify-content:space-between;padding:0 8px;font-size:13px;font-weight:700}}
.cr-done{{position:absolute;left:0;right:0;bottom:48px;display:flex;justify-content:center}}
.adelia-cta{{background:#111;color:#fff}}
"""
    body = (
        f"{_brand_bar(assets, settings.brand_label, settings.brand_name)}\n"
        '<div id="adelia-cr-stage" data-adelia-chrome>'
        f"{image(assets, 'bw_image')}"
        f"{image(assets, 'color_image', element_id='adelia-cr-color')}"
        "</div>\n"
        '<div class="cr-footer">'
        f"{text_block('span', settings.headline, 'cr-headline')}"
        f'<span id="adelia-cr-counter">0 / {settings.hits_to_win}</span>'
        "</div>\n"
        f'<div id="adelia-cr-done" class="cr-done adelia-hidden">{cta_button(settings.cta_text)}</div>'
    )
    return render_document(
        settings,
        DocumentParts(
            body=body,
            styles=styles,
            script=COLOR_REVEAL_JS,
            data={
                "hits_to_win": settings.hits_to_win,
                "flip_interval_ms": settings.flip_interval_ms,
            },
        ),
    )


# ---------------------------------------------------------------------------
# Scratch reveal
# ---------------------------------------------------------------------------

SCRATCH_CSS = """
#adelia-scratch-canvas{position:absolute;inset:0;width:100%;height:100%;touch-action:none;cursor:crosshair;transition:opacity .4s}
#adelia-scratch-cover{display:none}
.sc-hint{position:absolute;left:0;right:0;top:10px;text-align:center;color:#fff;font-weight:700;pointer-events:none;text-shadow:0 1px 3px rgba(0,0,0,.7)}
.sc-done{position:absolute;left:0;right:0;bottom:14px;display:flex;justify-content:center}
.adelia-cta{background:#fff;color:#111;box-shadow:0 2px 6px rgba(0,0,0,.3)}
"""

SCRATCH_JS = """(function () {
  var adelia = window.adelia;
  var canvas = document.getElementById("adelia-scratch-canvas");
  var cover = document.getElementById("adelia-scratch-cover");
  var hint = document.getElementById("adelia-scratch-hint");
  var done = document.getElementById("adelia-scratch-done");
  var ctx = canvas.getContext("2d");
  var threshold = adelia.num("scratch-percent");
  var radius = adelia.num("brush-radius");
  var drawing = false;
  var strokes = 0;
  var revealed = false;

  function paintCover() {
    canvas.width = canvas.offsetWidth;
    canvas.height = canvas.offsetHeight;
    ctx.globalCompositeOperation = "source-over";
    ctx.drawImage(cover, 0, 0, canvas.width, canvas.height);
    ctx.globalCompositeOperation = "destination-out";
  }

  function point(e) {
    var rect = canvas.getBoundingClientRect();
    var src = e.touches ? e.touches[0] : e;
    return {x: src.clientX - rect.left, y: src.clientY - rect.top};
  }

  function clearedPercent() {
    var data = ctx.getImageData(0, 0, canvas.width, canvas.height).data;
    var cleared = 0;
    var sampled = 0;
    for (var i = 3; i < data.length; i += 64) {
      sampled += 1;
      if (data[i] === 0) { cleared += 1; }
    }
    return sampled ? cleared / sampled * 100 : 0;
  }

  function estimatedPercent() {
    var area = canvas.width * canvas.height || 1;
    return Math.min(100, strokes * Math.PI * radius * radius * 0.5 / area * 100);
  }

  function checkProgress() {
    var pct;
    try {
      pct = clearedPercent();
    } catch (err) {
      // cross-origin cover taints the canvas; skip this read
      pct = estimatedPercent();
    }
    if (pct >= threshold) { finish(); }
  }

  function finish() {
    if (revealed) { return; }
    revealed = true;
    canvas.style.opacity = "0";
    if (hint) { hint.classList.add("adelia-hidden"); }
    setTimeout(function () { canvas.style.display = "none"; }, 400);
    done.classList.remove("adelia-hidden");
    adelia.report("scratch_complete");
  }

  function scratch(e) {
    if (!drawing || revealed) { return; }
    e.preventDefault();
    var p = point(e);
    ctx.beginPath();
    ctx.arc(p.x, p.y, radius, 0, Math.PI * 2);
    ctx.fill();
    strokes += 1;
    if (strokes % 8 === 0) { checkProgress(); }
  }

  function start(e) { drawing = true; scratch(e); }
  function stop() { if (drawing) { drawing = false; checkProgress(); } }

  canvas.addEventListener("mousedown", start);
  canvas.addEventListener("mousemove", scratch);
  window.addEventListener("mouseup", stop);
  canvas.addEventListener("touchstart", start, {passive: false});
  canvas.addEventListener("touchmove", scratch, {passive: false});
  window.addEventListener("touchend", stop);

  if (cover.complete && cover.naturalWidth) { paintCover(); } else { cover.addEventListener("load", paintCover); }
})();"""


@register_kind(
    ScratchRevealSettings,
    title="Scratch Reveal",
    description="Scratch away a cover to reveal the artwork",
)
def render_scratch_reveal(settings: ScratchRevealSettings, assets: AssetResolver) -> str:
    body = (
        f"<div {exit_zone()} style=\"position:absolute;inset:0\">{image(assets, 'back')}</div>\n"
        f"{image(assets, 'cover', css_class='sc-cover', element_id='adelia-scratch-cover')}\n"
        '<canvas id="adelia-scratch-canvas" data-adelia-chrome></canvas>\n'
        f'<div id="adelia-scratch-hint" class="sc-hint">{escape_html(settings.hint_text)}</div>\n'
        f'<div id="adelia-scratch-done" class="sc-done adelia-hidden">{cta_button(settings.cta_text)}</div>'
    )
    return render_document(
        settings,
        DocumentParts(
            body=body,
            styles=SCRATCH_CSS,
            script=SCRATCH_JS,
            data={
                "scratch_percent": settings.scratch_percent,
                "brush_radius": settings.brush_radius,
            },
        ),
    )


# ---------------------------------------------------------------------------
# Gated mini game
# ---------------------------------------------------------------------------

GATED_CSS = """
#adelia-root{background:#fff;display:flex;flex-direction:column;align-items:center;padding:12px;gap:10px}
.mg-head{display:flex;align-items:center;gap:8px;font-size:12px;color:#555}
.mg-head .brand-logo{height:22px;width:auto}
.mg-instruction{font-size:15px;font-weight:700;text-align:center;color:#111}
.mg-grid{display:grid;grid-template-columns:repeat(3,1fr);gap:8px;width:100%;flex:1}
.mg-card{position:relative;border:0;border-radius:8px;background:#2b2d42;cursor:pointer;overflow:hidden;min-height:70px}
.mg-card .mg-back{position:absolute;inset:0;display:flex;align-items:center;justify-content:center;color:#fff;font-size:26px;font-weight:800}
.mg-card .mg-face{position:absolute;inset:8px;width:calc(100% - 16px);height:calc(100% - 16px);object-fit:contain;opacity:0;transition:opacity .2s}
.mg-open{background:#edf2f4}
.mg-open .mg-face{opacity:1}
.mg-open .mg-back{opacity:0}
.mg-matched{box-shadow:inset 0 0 0 3px #06d6a0}
.mg-success{position:absolute;inset:0;display:flex;flex-direction:column;align-items:center;justify-content:center;gap:12px;background:rgba(255,255,255,.96);text-align:center;padding:20px;z-index:10}
.mg-success-text{font-size:17px;font-weight:800;color:#06a77d}
.adelia-cta{background:#2b2d42;color:#fff}
"""

GATED_JS = """(function () {
  var adelia = window.adelia;
  var cards = Array.prototype.slice.call(document.querySelectorAll(".mg-card"));
  var success = document.getElementById("adelia-mg-success");
  var pairs = cards.length / 2;
  var first = null;
  var locked = false;
  var matched = 0;
  var unlocked = false;

  function unlock() {
    if (unlocked) { return; }
    unlocked = true;
    success.classList.remove("adelia-hidden");
    adelia.report("unlock");
    adelia.post("unlock_game_content");
  }

  cards.forEach(function (card) {
    card.addEventListener("click", function () {
      if (locked || card.classList.contains("mg-open")) { return; }
      card.classList.add("mg-open");
      if (first === null) {
        first = card;
        return;
      }
      if (first.getAttribute("data-pair") === card.getAttribute("data-pair")) {
        first.classList.add("mg-matched");
        card.classList.add("mg-matched");
        first = null;
        matched += 1;
        if (matched === pairs) { setTimeout(unlock, 300); }
        return;
      }
      var previous = first;
      first = null;
      locked = true;
      setTimeout(function () {
        previous.classList.remove("mg-open");
        card.classList.remove("mg-open");
        locked = false;
      }, 700);
    });
  });
})();"""

GATED_PAIRS = ("icon_1", "icon_2", "icon_3")


@register_kind(
    GatedMiniGameSettings,
    title="Gated Mini Game",
    description="Memory game that unlocks the article below it",
)
def render_gated_mini_game(settings: GatedMiniGameSettings, assets: AssetResolver) -> str:
    deck = seeded_shuffle(settings, [role for role in GATED_PAIRS for _ in range(2)])
    cards = "\n".join(
        f'<button type="button" class="mg-card" data-pair="{role}">'
        '<span class="mg-back">?</span>'
        f"{image(assets, role, css_class='mg-face')}</button>"
        for role in deck
    )
    body = (
        f'<div class="mg-head" {exit_zone()}>'
        f"{image(assets, 'logo', css_class='brand-logo')}"
        f"{text_block('span', settings.brand_name, 'brand-name')}"
        "</div>\n"
        f"{text_block('div', settings.instruction, 'mg-instruction')}\n"
        f'<div class="mg-grid" data-adelia-chrome>\n{cards}\n</div>\n'
        '<div id="adelia-mg-success" class="mg-success adelia-hidden">'
        f"{text_block('div', settings.success_text, 'mg-success-text')}"
        f"{cta_button(settings.cta_text)}"
        "</div>"
    )
    return render_document(
        settings,
        DocumentParts(
            body=body,
            styles=GATED_CSS,
            script=GATED_JS,
            data={"overlay": settings.overlay},
        ),
    )
