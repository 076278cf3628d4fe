"""
File naming for creative bundles.

Archive asset names are derived from campaign, placement and asset role so
that files from different creatives can sit side by side in one folder.
"""

from __future__ import annotations

import re
from dataclasses import dataclass

from adelia.common.utils import hash_string

DEFAULT_PREFIX = "adelia"
MAX_COMPONENT_LENGTH = 40

_WHITESPACE_RE = re.compile(r"\s+")
_UNSAFE_RE = re.compile(r"[^a-zA-Z0-9_-]")
_UNSAFE_FILE_RE = re.compile(r"[^a-zA-Z0-9._-]")


def safe_file_component(value: str, max_length: int = MAX_COMPONENT_LENGTH) -> str:
    """Reduce free text to ``[a-zA-Z0-9_-]`` with whitespace as underscores."""
    cleaned = _WHITESPACE_RE.sub("_", value.strip())
    cleaned = _UNSAFE_RE.sub("", cleaned)
    return cleaned[:max_length]


def safe_path_segment(value: str) -> str:
    """Storage path segment: every unsafe character becomes an underscore."""
    return _UNSAFE_RE.sub("_", value.strip()) or "_"


def safe_file_name(value: str) -> str:
    """Like :func:`safe_path_segment` but keeps dots."""
    cleaned = _UNSAFE_FILE_RE.sub("_", value.strip())
    return cleaned if cleaned.strip(".") else "_"


@dataclass(frozen=True)
class CreativeNaming:
    """Names for the files of one creative bundle."""

    campaign: str = ""
    placement: str = ""

    @property
    def prefix(self) -> str:
        campaign = safe_file_component(self.campaign)
        placement = safe_file_component(self.placement)
        parts = [p for p in (campaign, placement) if p]
        if not parts:
            return DEFAULT_PREFIX
        prefix = "__".join(parts)
        # Lossy sanitizing could map two campaigns onto one name
        if campaign != self.campaign.strip() or placement != self.placement.strip():
            prefix = f"{prefix}_{hash_string(self.campaign + '|' + self.placement)[:6]}"
        return prefix

    @property
    def zip_name(self) -> str:
        return f"{self.prefix}.zip"

    def asset_file_name(self, role: str, extension: str) -> str:
        return f"{self.prefix}__{safe_file_component(role)}{extension}"

    def hosted_document_name(self, creative_id: str) -> str:
        return f"{self.prefix}__{safe_file_component(creative_id, 64)}.html"
