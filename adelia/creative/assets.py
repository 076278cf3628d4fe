"""
Asset references and the resolver strategies used by the two build phases.

A renderer never sees where an asset lives. It asks the resolver for the
string to put in ``src`` and gets a local file name (archive phase) or an
absolute URL (hosted phase).
"""

from __future__ import annotations

import mimetypes
from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum
from pathlib import PurePosixPath
from typing import Mapping

from adelia.common.exceptions import CreativeValidationError
from adelia.creative.naming import CreativeNaming

_FALLBACK_EXTENSIONS = {
    "image": ".png",
    "audio": ".mp3",
    "video": ".mp4",
}


class BuildPhase(str, Enum):
    """Which rendering a resolver produces."""

    ARCHIVE = "archive"
    HOSTED = "hosted"


@dataclass(frozen=True)
class AssetReference:
    """
    One asset handed to the build.

    Either ``data`` (raw bytes, bundled into the archive and uploaded) or
    ``url`` (an already hosted file, referenced as-is) must be set.
    """

    role: str
    data: bytes | None = None
    url: str | None = None
    file_name: str | None = None
    content_type: str | None = None

    def __post_init__(self) -> None:
        if self.data is None and not self.url:
            raise CreativeValidationError(
                f"Asset '{self.role}' needs either bytes or a URL",
                field=f"assets.{self.role}",
            )

    @property
    def is_local(self) -> bool:
        return self.data is not None

    def extension(self, media: str = "image") -> str:
        """File extension including the dot."""
        if self.file_name:
            suffix = PurePosixPath(self.file_name).suffix.lower()
            if suffix:
                return suffix
        if self.content_type:
            guessed = mimetypes.guess_extension(self.content_type.split(";")[0].strip())
            if guessed:
                return guessed
        return _FALLBACK_EXTENSIONS.get(media, ".bin")


class AssetResolver(ABC):
    """Maps an asset role to the string a rendering references it by."""

    phase: BuildPhase

    @abstractmethod
    def resolve(self, role: str) -> str | None:
        """Reference for ``role`` or ``None`` when no such asset exists."""

    def __contains__(self, role: str) -> bool:
        return self.resolve(role) is not None


class ArchiveAssetResolver(AssetResolver):
    """Local file names for bundled bytes, original URLs for remote assets."""

    phase = BuildPhase.ARCHIVE

    def __init__(
        self,
        assets: Mapping[str, AssetReference],
        naming: CreativeNaming,
        media: Mapping[str, str] | None = None,
    ):
        self.assets = dict(assets)
        self.naming = naming
        self.media = dict(media or {})

    def resolve(self, role: str) -> str | None:
        asset = self.assets.get(role)
        if asset is None:
            return None
        if asset.is_local:
            return self.naming.asset_file_name(role, asset.extension(self.media.get(role, "image")))
        return asset.url

    def files(self) -> dict[str, str]:
        """Role to archive member name (or external URL) for every asset."""
        return {
            role: ref
            for role in sorted(self.assets)
            if (ref := self.resolve(role)) is not None
        }

    def bundled(self) -> list[tuple[str, bytes]]:
        """Archive member name and bytes for every local asset."""
        members = []
        for role in sorted(self.assets):
            asset = self.assets[role]
            if asset.is_local:
                members.append((self.resolve(role), asset.data))
        return members


class HostedAssetResolver(AssetResolver):
    """Absolute URLs returned by the upload step."""

    phase = BuildPhase.HOSTED

    def __init__(self, urls: Mapping[str, str]):
        self.urls = dict(urls)

    def resolve(self, role: str) -> str | None:
        return self.urls.get(role)
