"""
Creative build orchestration.

validate -> phase A archive -> upload assets and archive -> phase B ->
inject tracking -> upload hosted document -> save record -> embed snippet.

Validation failures happen before anything is uploaded. Upload failures
abort the build after the configured retries; artifacts uploaded earlier in
the same build are left in place.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Mapping

from adelia.ad_server.middleware.metrics import record_build, record_render, record_upload
from adelia.build.embed import EmbedDescriptor, EmbedSnippet, EmbedSynthesizer
from adelia.build.packager import CreativeArchive, CreativePackager, naming_for
from adelia.build.storage import RecordStore, Uploader
from adelia.build.tracking import TrackingInjector
from adelia.common.config import get_settings
from adelia.common.exceptions import AdeliaError, RecordNotFoundError
from adelia.common.logger import LoggerMixin, log_scope
from adelia.common.utils import Timer, current_datetime, generate_creative_id, retry_async
from adelia.creative.assets import AssetReference
from adelia.runtime.gated import GateMode
from adelia.schemas.record import CreativeRecord
from adelia.schemas.settings import CreativeSettings, GatedMiniGameSettings


@dataclass(frozen=True)
class BuildResult:
    creative_id: str
    record: CreativeRecord
    archive: CreativeArchive
    archive_url: str
    hosted_url: str
    hosted_html: str
    embed: EmbedSnippet


def gate_mode_for(settings: CreativeSettings) -> GateMode | None:
    if isinstance(settings, GatedMiniGameSettings):
        return GateMode.OVERLAY if settings.overlay else GateMode.INLINE
    return None


class CreativeBuildService(LoggerMixin):
    """Runs one build end to end."""

    def __init__(
        self,
        uploader: Uploader,
        store: RecordStore,
        *,
        packager: CreativePackager | None = None,
        tracking: TrackingInjector | None = None,
        embed: EmbedSynthesizer | None = None,
        max_attempts: int | None = None,
        retry_delay: float | None = None,
    ):
        settings = get_settings()
        self.uploader = uploader
        self.store = store
        self.packager = packager or CreativePackager()
        if tracking is None and settings.tracking.enabled:
            tracking = TrackingInjector()
        self.tracking = tracking
        self.embed = embed or EmbedSynthesizer()
        self.max_attempts = max_attempts if max_attempts is not None else settings.upload.max_attempts
        self.retry_delay = retry_delay if retry_delay is not None else settings.upload.retry_delay_seconds

    async def build(
        self,
        owner: str,
        settings: CreativeSettings,
        assets: Mapping[str, AssetReference],
        creative_id: str | None = None,
    ) -> BuildResult:
        """
        Build, upload and record one creative.

        Args:
            owner: Account the creative belongs to.
            settings: Kind-specific settings.
            assets: Asset role to reference.
            creative_id: Existing id to rebuild in place.

        Raises:
            CreativeValidationError: Before any upload, for bad input.
            UploadError: When an upload still fails after retries.
        """
        with log_scope(kind=settings.kind, owner=owner):
            try:
                with Timer() as timer:
                    result = await self._build(owner, settings, assets, creative_id)
            except AdeliaError as e:
                record_build(settings.kind, success=False)
                self.logger.warning("Creative build failed", error=e.__class__.__name__, message=e.message)
                raise
            record_build(settings.kind, success=True, duration=timer.elapsed_s)
            self.logger.info(
                "Creative built",
                creative_id=result.creative_id,
                hosted_url=result.hosted_url,
                duration_ms=round(timer.elapsed_ms, 2),
            )
        return result

    async def _build(
        self,
        owner: str,
        settings: CreativeSettings,
        assets: Mapping[str, AssetReference],
        creative_id: str | None,
    ) -> BuildResult:
        # Phase A validates before anything leaves the process
        with Timer() as timer:
            archive = self.packager.build_archive(settings, assets)
        record_render(settings.kind, "archive", timer.elapsed_s)
        files = archive.manifest.naming.files
        campaign = settings.campaign
        # Upload keys are scoped by creative id
        creative_id = creative_id or generate_creative_id()

        asset_urls: dict[str, str] = {}
        for role in sorted(assets):
            asset = assets[role]
            if asset.is_local:
                asset_urls[role] = await self._upload(
                    asset.data,
                    owner=owner,
                    campaign=campaign,
                    creative_id=creative_id,
                    file_name=files[role],
                    content_type=asset.content_type,
                )
            else:
                asset_urls[role] = asset.url

        archive_url = await self._upload(
            archive.data,
            owner=owner,
            campaign=campaign,
            creative_id=creative_id,
            file_name=archive.zip_name,
            content_type="application/zip",
        )

        with Timer() as timer:
            hosted = self.packager.render_hosted(settings, asset_urls)
        record_render(settings.kind, "hosted", timer.elapsed_s)
        html = hosted.html
        if self.tracking is not None:
            html = self.tracking.inject(html, creative_id)

        hosted_url = await self._upload(
            html.encode("utf-8"),
            owner=owner,
            campaign=campaign,
            creative_id=creative_id,
            file_name=naming_for(settings).hosted_document_name(creative_id),
            content_type="text/html; charset=utf-8",
        )

        width, height = settings.embed_size()
        snippet = self.embed.synthesize(
            EmbedDescriptor(
                container_id=self.embed.container_id(creative_id),
                width=width,
                height=height,
                hosted_document_url=hosted_url,
                kind=settings.kind,
                gate=gate_mode_for(settings),
            )
        )

        now = current_datetime()
        created_at = now
        try:
            created_at = (await self.store.get(creative_id)).created_at
        except RecordNotFoundError:
            pass

        record = CreativeRecord(
            owner=owner,
            kind=settings.kind,
            campaign=settings.campaign,
            placement=settings.placement,
            width=width,
            height=height,
            target_element_id=settings.target_element_id,
            archive_url=archive_url,
            hosted_url=hosted_url,
            asset_urls=asset_urls,
            settings=settings.model_dump(mode="json"),
            embed_script=snippet.script,
            created_at=created_at,
            updated_at=now,
        )
        saved_id = await self.store.save_record(record, creative_id)

        return BuildResult(
            creative_id=saved_id,
            record=record.model_copy(update={"id": saved_id}),
            archive=archive,
            archive_url=archive_url,
            hosted_url=hosted_url,
            hosted_html=html,
            embed=snippet,
        )

    async def _upload(
        self,
        data: bytes,
        *,
        owner: str,
        campaign: str,
        creative_id: str,
        file_name: str,
        content_type: str | None,
    ) -> str:
        async def attempt() -> str:
            try:
                url = await self.uploader.upload(
                    data,
                    owner=owner,
                    campaign=campaign,
                    file_name=file_name,
                    content_type=content_type,
                    creative_id=creative_id,
                )
            except Exception:
                record_upload(len(data), success=False)
                raise
            record_upload(len(data), success=True)
            return url

        return await retry_async(
            attempt,
            max_attempts=self.max_attempts,
            delay=self.retry_delay,
        )
