"""
Built-in creative kinds.

Importing this package registers every renderer with the default registry.
"""

from adelia.creative.kinds import banners, games, media, native, overlays

__all__ = ["banners", "games", "media", "native", "overlays"]
