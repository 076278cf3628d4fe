"""
Two-phase packager.

Phase A renders the creative against local file names and zips the document,
the manifest and the asset bytes. Phase B renders the same settings against
the URLs the upload step returned. Both renderings work on their own.
"""

from __future__ import annotations

import io
import zipfile
from dataclasses import dataclass
from datetime import datetime
from typing import Mapping

from adelia.common.config import get_settings
from adelia.common.exceptions import ManifestError
from adelia.common.logger import LoggerMixin
from adelia.common.utils import current_datetime
from adelia.creative.assets import ArchiveAssetResolver, AssetReference, HostedAssetResolver
from adelia.creative.naming import CreativeNaming
from adelia.creative.registry import CreativeRegistry, RenderedCreative, get_registry
from adelia.schemas.manifest import Manifest, ManifestNaming
from adelia.schemas.settings import CreativeSettings

INDEX_NAME = "index.html"
MANIFEST_NAME = "manifest.json"


@dataclass(frozen=True)
class CreativeArchive:
    """Output of phase A."""

    zip_name: str
    data: bytes
    manifest: Manifest
    rendering: RenderedCreative


def naming_for(settings: CreativeSettings) -> CreativeNaming:
    return CreativeNaming(campaign=settings.campaign, placement=settings.placement)


class CreativePackager(LoggerMixin):
    """Renders both phases through one registry."""

    def __init__(
        self,
        registry: CreativeRegistry | None = None,
        manifest_version: str | None = None,
    ):
        self.registry = registry or get_registry()
        self.manifest_version = manifest_version or get_settings().manifest.version

    def archive_resolver(
        self,
        settings: CreativeSettings,
        assets: Mapping[str, AssetReference],
    ) -> ArchiveAssetResolver:
        media = {slot.role: slot.media for slot in settings.slots()}
        return ArchiveAssetResolver(assets, naming_for(settings), media)

    def build_manifest(
        self,
        settings: CreativeSettings,
        resolver: ArchiveAssetResolver,
        generated_at: datetime | None = None,
    ) -> Manifest:
        naming = resolver.naming
        return Manifest(
            format=settings.kind,
            version=self.manifest_version,
            generated_at=generated_at or current_datetime(),
            naming=ManifestNaming(
                campaign=settings.campaign,
                placement=settings.placement,
                zip_name=naming.zip_name,
                files=resolver.files(),
            ),
            settings=settings.model_dump(mode="json"),
        )

    def build_archive(
        self,
        settings: CreativeSettings,
        assets: Mapping[str, AssetReference],
        generated_at: datetime | None = None,
    ) -> CreativeArchive:
        """
        Phase A: render with local file names and zip the bundle.

        Raises:
            CreativeValidationError: Missing target URL or required asset.
        """
        self.registry.validate_assets(settings, assets)
        resolver = self.archive_resolver(settings, assets)
        rendering = self.registry.render(settings, resolver)
        manifest = self.build_manifest(settings, resolver, generated_at)

        stamp = manifest.generated_at.timetuple()[:6]
        buffer = io.BytesIO()
        with zipfile.ZipFile(buffer, "w", compression=zipfile.ZIP_DEFLATED) as archive:
            members = [
                (INDEX_NAME, rendering.html.encode("utf-8")),
                (MANIFEST_NAME, manifest.serialize().encode("utf-8")),
                *resolver.bundled(),
            ]
            for name, data in members:
                info = zipfile.ZipInfo(name, date_time=stamp)
                info.compress_type = zipfile.ZIP_DEFLATED
                archive.writestr(info, data)

        self.logger.info(
            "Archive built",
            kind=settings.kind,
            zip_name=manifest.naming.zip_name,
            members=len(members),
            size=buffer.tell(),
        )
        return CreativeArchive(
            zip_name=manifest.naming.zip_name,
            data=buffer.getvalue(),
            manifest=manifest,
            rendering=rendering,
        )

    def render_hosted(
        self,
        settings: CreativeSettings,
        urls: Mapping[str, str],
    ) -> RenderedCreative:
        """Phase B: render against uploaded asset URLs."""
        return self.registry.render(settings, HostedAssetResolver(urls))


def read_archive(data: bytes) -> tuple[str, Manifest, dict[str, bytes]]:
    """Open an archive built by :class:`CreativePackager`."""
    with zipfile.ZipFile(io.BytesIO(data)) as archive:
        names = set(archive.namelist())
        if INDEX_NAME not in names or MANIFEST_NAME not in names:
            raise ManifestError("Archive is missing index.html or manifest.json")
        html = archive.read(INDEX_NAME).decode("utf-8")
        manifest = Manifest.parse(archive.read(MANIFEST_NAME))
        files = {
            name: archive.read(name)
            for name in sorted(names - {INDEX_NAME, MANIFEST_NAME})
        }
    return html, manifest, files
