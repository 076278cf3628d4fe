"""
Markup helpers shared by the kind renderers.
"""

from __future__ import annotations

from adelia.creative.assets import AssetResolver
from adelia.creative.escaping import escape_html


def image(
    assets: AssetResolver,
    role: str,
    *,
    css_class: str = "adelia-fill",
    alt: str = "",
    element_id: str | None = None,
) -> str:
    """``<img>`` for ``role``, or an empty string when the asset is absent."""
    ref = assets.resolve(role)
    if ref is None:
        return ""
    id_attr = f' id="{element_id}"' if element_id else ""
    return f'<img{id_attr} class="{css_class}" src="{escape_html(ref)}" alt="{escape_html(alt)}" draggable="false">'


def media_src(assets: AssetResolver, role: str) -> str:
    return escape_html(assets.resolve(role) or "")


def exit_zone(url: str | None = None) -> str:
    """Attribute marking a click-through zone; empty value means the main landing."""
    return f'data-adelia-exit="{escape_html(url or "")}"'


def cta_button(text: str, *, url: str | None = None, css_class: str = "adelia-cta", style: str = "") -> str:
    style_attr = f' style="{style}"' if style else ""
    return f'<button type="button" class="{css_class}"{style_attr} {exit_zone(url)}>{escape_html(text)}</button>'


def text_block(tag: str, text: str, css_class: str) -> str:
    """Element with escaped text, or nothing for empty text."""
    if not text:
        return ""
    return f'<{tag} class="{css_class}">{escape_html(text)}</{tag}>'
