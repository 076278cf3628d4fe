"""
Display banner kinds: expandable, parallax, skin, side rail, scroll reveal.
"""

from __future__ import annotations

from adelia.creative.assets import AssetResolver
from adelia.creative.document import DocumentParts, render_document
from adelia.creative.escaping import escape_html
from adelia.creative.kinds.base import cta_button, exit_zone, image, text_block
from adelia.creative.registry import register_kind
from adelia.schemas.settings import (
    ExpandableBannerSettings,
    ParallaxSettings,
    ScrollRevealSettings,
    SideRailSettings,
    SkinSettings,
)

# ---------------------------------------------------------------------------
# Expandable banner
# ---------------------------------------------------------------------------

EXPANDABLE_CSS = """
.xb-stage{position:relative;width:100%;height:100%}
.xb-view{position:absolute;left:0;top:0;width:100%;overflow:hidden}
.xb-icons{position:absolute;right:6px;top:6px;z-index:10;min-width:24px;height:24px;line-height:24px;
text-align:center;color:#fff;background:rgba(0,0,0,.55);border-radius:12px;cursor:pointer;font-size:12px;user-select:none}
"""

# Mirrored by adelia.runtime.expandable.ExpandableBanner
EXPANDABLE_JS = """(function () {
  var adelia = window.adelia;
  var root = adelia.root;
  var collapsedView = document.getElementById("adelia-collapsed");
  var expandedView = document.getElementById("adelia-expanded");
  var icons = document.getElementById("adelia-icons");
  var iconStyle = document.getElementById("adelia-icon-style");
  var transitionMs = adelia.num("transition-ms");
  var autoCloseMs = adelia.num("auto-close-seconds") * 1000;
  var state = {
    expanded: root.getAttribute("data-init-expanded") === "true",
    collapseTimer: null,
    autoCloseTimer: null,
    customIcons: null
  };

  adelia.printParams = {
    collapsedHeight: adelia.num("collapsed-height"),
    expandedHeight: adelia.num("height"),
    transition: transitionMs
  };

  function showView(expanded) {
    collapsedView.classList.toggle("adelia-hidden", expanded);
    expandedView.classList.toggle("adelia-hidden", !expanded);
  }

  function syncIcon() {
    if (state.customIcons) {
      icons.innerHTML = state.expanded ? state.customIcons.close : state.customIcons.open;
    } else {
      icons.textContent = state.expanded ? "\\u25B2" : "\\u25BC";
    }
  }

  function clearTimer(name) {
    if (state[name] !== null) {
      clearTimeout(state[name]);
      state[name] = null;
    }
  }

  function display() {
    clearTimer("collapseTimer");
    syncIcon();
    root.setAttribute("data-state", state.expanded ? "expanded" : "collapsed");
    if (state.expanded) {
      showView(true);
    } else {
      state.collapseTimer = setTimeout(function () {
        state.collapseTimer = null;
        showView(false);
      }, transitionMs);
    }
  }

  function armAutoClose() {
    clearTimer("autoCloseTimer");
    if (autoCloseMs > 0) {
      state.autoCloseTimer = setTimeout(function () {
        state.autoCloseTimer = null;
        transition(false, false, true);
      }, autoCloseMs);
    }
  }

  function transition(expanded, tracked, auto) {
    if (expanded === state.expanded) { return; }
    state.expanded = expanded;
    if (expanded) { armAutoClose(); } else { clearTimer("autoCloseTimer"); }
    display();
    var action = expanded ? "expand" : (auto ? "collapse_auto" : "collapse");
    adelia.post(action, tracked ? {} : {untracked: true});
    if (tracked) { adelia.report(action); }
  }

  icons.addEventListener("click", function () {
    transition(!state.expanded, true, false);
  });

  if (root.getAttribute("data-expand-action") === "mouseover") {
    root.addEventListener("mouseenter", function () { transition(true, true, false); });
    root.addEventListener("mouseleave", function () { transition(false, true, false); });
  }

  window.addEventListener("message", function (e) {
    var data = e.data;
    if (!data || typeof data !== "object") { return; }
    if (typeof data.openIconHTML !== "string" || typeof data.closeIconHTML !== "string") { return; }
    state.customIcons = {open: data.openIconHTML, close: data.closeIconHTML};
    iconStyle.textContent = typeof data.iconsStyle === "string" ? data.iconsStyle : "";
    display();
  });

  showView(state.expanded);
  syncIcon();
  root.setAttribute("data-state", state.expanded ? "expanded" : "collapsed");
  if (state.expanded) { armAutoClose(); }
})();"""


@register_kind(
    ExpandableBannerSettings,
    title="Push Expandable",
    description="Banner that pushes page content down when expanded",
)
def render_expandable_banner(settings: ExpandableBannerSettings, assets: AssetResolver) -> str:
    zone = f" {exit_zone()}" if settings.click_layer else ""
    collapsed_hidden = " adelia-hidden" if settings.init_expanded else ""
    expanded_hidden = "" if settings.init_expanded else " adelia-hidden"

    body = (
        f'<div class="xb-stage" style="background:{settings.background_color}">\n'
        f'<div id="adelia-collapsed" class="xb-view{collapsed_hidden}" '
        f'style="height:{settings.collapsed_height}px"{zone}>'
        f"{image(assets, 'collapsed')}</div>\n"
        f'<div id="adelia-expanded" class="xb-view{expanded_hidden}" '
        f'style="height:{settings.height}px"{zone}>'
        f"{image(assets, 'expanded')}</div>\n"
        '<style id="adelia-icon-style"></style>\n'
        '<div id="adelia-icons" class="xb-icons" data-adelia-chrome role="button" aria-label="Expand or collapse"></div>\n'
        "</div>"
    )
    return render_document(
        settings,
        DocumentParts(
            body=body,
            styles=EXPANDABLE_CSS,
            script=EXPANDABLE_JS,
            data={
                "init_expanded": settings.init_expanded,
                "collapsed_height": settings.collapsed_height,
                "transition_ms": settings.transition_ms,
                "auto_close_seconds": settings.auto_close_seconds,
                "expand_action": settings.expand_action,
            },
        ),
    )


# ---------------------------------------------------------------------------
# Parallax
# ---------------------------------------------------------------------------

PARALLAX_CSS = """
#adelia-parallax-bg{will-change:transform;transition:transform .08s linear}
#adelia-parallax-content{position:absolute;left:50%;top:50%;max-width:60%;max-height:80%;
transform:translate(-50%,-50%);will-change:transform}
.px-copy{position:absolute;left:16px;bottom:14px;right:16px;display:flex;align-items:center;justify-content:space-between;gap:12px}
.px-headline{color:#fff;font-size:20px;font-weight:800;text-shadow:0 1px 4px rgba(0,0,0,.6)}
.px-copy .adelia-cta{background:#fff;color:#111}
"""

# Host pages post {scrollPct: 0..100} while the creative is in view.
PARALLAX_JS = """(function () {
  var adelia = window.adelia;
  var speed = adelia.num("parallax-speed");
  var height = adelia.num("height");
  var bg = document.getElementById("adelia-parallax-bg");
  var content = document.getElementById("adelia-parallax-content");

  function apply(pct) {
    var clamped = Math.max(0, Math.min(100, pct));
    var offset = (clamped - 50) / 100 * height * speed;
    bg.style.transform = "translate3d(0," + offset.toFixed(1) + "px,0) scale(" + (1 + speed * 0.5) + ")";
    if (content) {
      content.style.transform = "translate(-50%,-50%) translate3d(0," + (-offset / 2).toFixed(1) + "px,0)";
    }
  }

  window.addEventListener("message", function (e) {
    if (e.data && typeof e.data.scrollPct === "number") { apply(e.data.scrollPct); }
  });
  apply(50);
})();"""


@register_kind(
    ParallaxSettings,
    title="Parallax",
    description="Layered artwork shifted by page scroll",
)
def render_parallax(settings: ParallaxSettings, assets: AssetResolver) -> str:
    copy = ""
    if settings.headline or settings.cta_text:
        copy = (
            '<div class="px-copy">'
            f"{text_block('div', settings.headline, 'px-headline')}"
            f"{cta_button(settings.cta_text) if settings.cta_text else ''}"
            "</div>"
        )
    body = (
        f"<div {exit_zone()} style=\"position:absolute;inset:0\">\n"
        f"{image(assets, 'background', element_id='adelia-parallax-bg')}\n"
        f"{image(assets, 'content', css_class='px-content', element_id='adelia-parallax-content')}\n"
        f"{copy}\n"
        "</div>"
    )
    return render_document(
        settings,
        DocumentParts(
            body=body,
            styles=PARALLAX_CSS,
            script=PARALLAX_JS,
            data={"parallax_speed": settings.parallax_speed, "scroll_relay": True},
        ),
    )


# ---------------------------------------------------------------------------
# Skin
# ---------------------------------------------------------------------------

@register_kind(
    SkinSettings,
    title="Skin",
    description="Page takeover framing the content column",
)
def render_skin(settings: SkinSettings, assets: AssetResolver) -> str:
    gutter = f"calc(50% - {settings.content_width // 2}px)"
    styles = (
        "\n.skin-gutter{position:absolute;top:0;bottom:0}"
        f"\n.skin-left{{left:0;width:{gutter}}}"
        f"\n.skin-right{{right:0;width:{gutter}}}"
    )
    body = (
        f"{image(assets, 'background')}\n"
        f'<div class="skin-gutter skin-left" {exit_zone()}></div>\n'
        f'<div class="skin-gutter skin-right" {exit_zone()}></div>'
    )
    return render_document(settings, DocumentParts(body=body, styles=styles))


# ---------------------------------------------------------------------------
# Side rail
# ---------------------------------------------------------------------------

SIDE_RAIL_CSS = """
.rail{position:absolute;top:0;bottom:0;overflow:hidden}
.rail-left{left:0}
.rail-right{right:0}
"""


@register_kind(
    SideRailSettings,
    title="Side Rail",
    description="Vertical rail on one or both page edges",
)
def render_side_rail(settings: SideRailSettings, assets: AssetResolver) -> str:
    sides = ["left", "right"] if settings.side == "both" else [settings.side]
    rails = "\n".join(
        f'<div class="rail rail-{side}" style="width:{settings.width}px" {exit_zone()}>'
        f"{image(assets, 'rail')}</div>"
        for side in sides
    )
    return render_document(
        settings,
        DocumentParts(body=rails, styles=SIDE_RAIL_CSS, data={"side": settings.side}),
    )


# ---------------------------------------------------------------------------
# Scroll reveal
# ---------------------------------------------------------------------------

SCROLL_REVEAL_CSS = """
#adelia-reveal-bg{object-position:50% 0%;transition:object-position .08s linear}
.sr-hint{position:absolute;left:0;right:0;bottom:12px;text-align:center;color:#fff;font-size:12px;
letter-spacing:.08em;text-transform:uppercase;text-shadow:0 1px 3px rgba(0,0,0,.7);transition:opacity .3s}
"""

SCROLL_REVEAL_JS = """(function () {
  var bg = document.getElementById("adelia-reveal-bg");
  var hint = document.getElementById("adelia-reveal-hint");

  window.addEventListener("message", function (e) {
    if (!e.data || typeof e.data.scrollPct !== "number") { return; }
    var pct = Math.max(0, Math.min(100, e.data.scrollPct));
    bg.style.objectPosition = "50% " + pct.toFixed(1) + "%";
    if (hint) { hint.style.opacity = pct > 10 ? "0" : "1"; }
  });
})();"""


@register_kind(
    ScrollRevealSettings,
    title="Scroll Reveal",
    description="Interscroller revealed as the page scrolls past",
)
def render_scroll_reveal(settings: ScrollRevealSettings, assets: AssetResolver) -> str:
    body = (
        f"<div {exit_zone()} style=\"position:absolute;inset:0\">\n"
        f"{image(assets, 'background', element_id='adelia-reveal-bg')}\n"
        f'<div id="adelia-reveal-hint" class="sr-hint">{escape_html(settings.hint_text)}</div>\n'
        "</div>"
    )
    return render_document(
        settings,
        DocumentParts(
            body=body,
            styles=SCROLL_REVEAL_CSS,
            script=SCROLL_REVEAL_JS,
            data={"scroll_relay": True},
        ),
    )

