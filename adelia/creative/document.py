"""
HTML document shell shared by all creative kinds.

A renderer supplies its own styles, body markup, script and root data
attributes; the shell adds the size meta tag, the runtime script and the
``adelia-root`` element carrying the landing URL.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from adelia.common.config import get_settings
from adelia.creative.clicktag import runtime_script
from adelia.creative.escaping import data_attrs, escape_html
from adelia.schemas.settings import CreativeSettings

BASE_CSS = """*{box-sizing:border-box;margin:0;padding:0}
html,body{width:100%;height:100%;overflow:hidden;background:transparent;font-family:-apple-system,BlinkMacSystemFont,"Segoe UI",Roboto,Helvetica,Arial,sans-serif}
#adelia-root{position:relative;overflow:hidden;width:100%;height:100%}
[data-adelia-exit]{cursor:pointer}
.adelia-fill{position:absolute;inset:0;width:100%;height:100%;object-fit:cover;display:block}
.adelia-cta{display:inline-block;border:0;border-radius:4px;padding:8px 14px;font-weight:700;font-size:14px;cursor:pointer}
.adelia-hidden{display:none !important}
"""


@dataclass
class DocumentParts:
    """Pieces a kind renderer contributes to the shell."""

    body: str
    styles: str = ""
    script: str = ""
    data: dict[str, Any] = field(default_factory=dict)


def render_document(settings: CreativeSettings, parts: DocumentParts) -> str:
    """Compose the full creative document."""
    config = get_settings().embed
    width, height = settings.embed_size()

    root_data = {
        "kind": settings.kind,
        "landing": settings.target_url,
        "width": width,
        "height": height,
        **parts.data,
    }
    title = settings.campaign or settings.kind

    kind_script = f"<script>\n{parts.script}\n</script>\n" if parts.script else ""

    return (
        "<!DOCTYPE html>\n"
        '<html lang="en">\n'
        "<head>\n"
        '<meta charset="utf-8">\n'
        '<meta name="viewport" content="width=device-width, initial-scale=1">\n'
        f'<meta name="ad.size" content="width={width},height={height}">\n'
        f"<title>{escape_html(title)}</title>\n"
        f"<style>\n{BASE_CSS}{parts.styles}\n</style>\n"
        "</head>\n"
        "<body>\n"
        f'<div id="adelia-root" class="adelia-{settings.kind}" {data_attrs(root_data)}>\n'
        f"{parts.body}\n"
        "</div>\n"
        f"<script>\n{runtime_script(config.click_param, config.container_param)}\n</script>\n"
        f"{kind_script}"
        "</body>\n"
        "</html>\n"
    )
