"""
Escaping helpers shared by every renderer and by the loader snippets.

All free text reaches markup through :func:`escape_html`. Strings a script
needs are placed in escaped ``data-*`` attributes and read back with
``getAttribute``; only validated numbers and booleans are written into
markup unquoted. Snippet scripts embed strings as JSON literals produced by
:func:`js_string`.
"""

from __future__ import annotations

from typing import Any, Mapping

import orjson

# Order matters: "&" first so produced entities are not escaped twice.
_HTML_REPLACEMENTS = (
    ("&", "&amp;"),
    ('"', "&quot;"),
    ("<", "&lt;"),
    (">", "&gt;"),
)

_JS_REPLACEMENTS = (
    ("<", "\\u003c"),
    (">", "\\u003e"),
    ("&", "\\u0026"),
    ("\u2028", "\\u2028"),
    ("\u2029", "\\u2029"),
)


def escape_html(value: Any) -> str:
    """Escape text for HTML element content and double-quoted attributes."""
    if value is None:
        return ""
    text = str(value)
    for raw, entity in _HTML_REPLACEMENTS:
        text = text.replace(raw, entity)
    return text


def js_string(value: str) -> str:
    """Quoted JavaScript string literal safe to place inside a script element."""
    literal = orjson.dumps(value).decode("utf-8")
    for raw, escaped in _JS_REPLACEMENTS:
        literal = literal.replace(raw, escaped)
    return literal


def attr_value(value: Any) -> str:
    """Render a scalar for a data attribute."""
    if isinstance(value, bool):
        return "true" if value else "false"
    return escape_html(value)


def data_attrs(values: Mapping[str, Any]) -> str:
    """
    Render ``data-*`` attributes, skipping ``None`` values.

    Keys are written as given with underscores turned into dashes, so
    ``{"auto_close": 8}`` becomes ``data-auto-close="8"``.
    """
    parts = []
    for key, value in values.items():
        if value is None:
            continue
        parts.append(f'data-{key.replace("_", "-")}="{attr_value(value)}"')
    return " ".join(parts)
