"""
Creative engine: escaping, asset resolution, click relay, kind renderers.
"""

from adelia.creative.assets import (
    ArchiveAssetResolver,
    AssetReference,
    AssetResolver,
    BuildPhase,
    HostedAssetResolver,
)
from adelia.creative.clicktag import encode_uri_component, resolve_landing
from adelia.creative.escaping import escape_html
from adelia.creative.naming import CreativeNaming, safe_file_component
from adelia.creative.registry import (
    CreativeRegistry,
    CreativeType,
    RenderedCreative,
    get_registry,
    register_kind,
    registry,
    render,
)

__all__ = [
    "ArchiveAssetResolver",
    "AssetReference",
    "AssetResolver",
    "BuildPhase",
    "HostedAssetResolver",
    "CreativeNaming",
    "CreativeRegistry",
    "CreativeType",
    "RenderedCreative",
    "encode_uri_component",
    "escape_html",
    "get_registry",
    "register_kind",
    "registry",
    "render",
    "resolve_landing",
    "safe_file_component",
]
