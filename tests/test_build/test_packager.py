"""
Tests for two-phase packaging and manifests.
"""

from collections.abc import Callable
from datetime import datetime, timezone

import pytest

from adelia.build.packager import CreativePackager, read_archive
from adelia.common.exceptions import CreativeValidationError, ManifestError
from adelia.creative.assets import AssetReference, BuildPhase
from adelia.schemas.manifest import Manifest, ManifestNaming

GENERATED_AT = datetime(2026, 3, 1, 12, 30, tzinfo=timezone.utc)


@pytest.fixture
def packager() -> CreativePackager:
    return CreativePackager(manifest_version="1.0.0")


class TestArchive:
    def test_zip_contents(
        self,
        packager: CreativePackager,
        make_settings: Callable,
        make_assets: Callable,
    ) -> None:
        settings = make_settings("expandable-banner")
        archive = packager.build_archive(settings, make_assets(settings), GENERATED_AT)

        html, manifest, files = read_archive(archive.data)
        assert archive.zip_name == "SpringSale__Homepage.zip"
        assert html == archive.rendering.html
        assert manifest == archive.manifest
        assert files == {
            "SpringSale__Homepage__collapsed.png": b"collapsed-bytes",
            "SpringSale__Homepage__expanded.png": b"expanded-bytes",
        }
        assert 'src="SpringSale__Homepage__collapsed.png"' in html

    def test_manifest_fields(
        self,
        packager: CreativePackager,
        make_settings: Callable,
        make_assets: Callable,
    ) -> None:
        settings = make_settings("podcast-snippet")
        manifest = packager.build_archive(settings, make_assets(settings), GENERATED_AT).manifest
        assert manifest.format == "podcast-snippet"
        assert manifest.version == "1.0.0"
        assert manifest.generated_at == GENERATED_AT
        assert manifest.naming.campaign == "SpringSale"
        assert manifest.naming.placement == "Homepage"
        assert manifest.naming.files["audio"] == "SpringSale__Homepage__audio.mp3"
        assert manifest.settings["kind"] == "podcast-snippet"
        assert manifest.settings["target_url"] == "https://brand.example/landing"

    def test_same_inputs_same_bytes(
        self,
        packager: CreativePackager,
        make_settings: Callable,
        make_assets: Callable,
    ) -> None:
        settings = make_settings("puzzle")
        first = packager.build_archive(settings, make_assets(settings), GENERATED_AT)
        second = packager.build_archive(settings, make_assets(settings), GENERATED_AT)
        assert first.data == second.data

    def test_remote_assets_are_not_bundled(
        self,
        packager: CreativePackager,
        make_settings: Callable,
    ) -> None:
        settings = make_settings("native")
        assets = {"image": AssetReference(role="image", url="https://cdn.example/spring.jpg")}
        archive = packager.build_archive(settings, assets, GENERATED_AT)
        _, manifest, files = read_archive(archive.data)
        assert files == {}
        assert manifest.naming.files == {"image": "https://cdn.example/spring.jpg"}
        assert 'src="https://cdn.example/spring.jpg"' in archive.rendering.html

    def test_validation_happens_first(
        self,
        packager: CreativePackager,
        make_settings: Callable,
    ) -> None:
        settings = make_settings("scratch-reveal")
        with pytest.raises(CreativeValidationError):
            packager.build_archive(settings, {})

    def test_read_archive_rejects_foreign_zip(self) -> None:
        import io
        import zipfile

        buffer = io.BytesIO()
        with zipfile.ZipFile(buffer, "w") as archive:
            archive.writestr("readme.txt", "hello")
        with pytest.raises(ManifestError):
            read_archive(buffer.getvalue())


class TestPhases:
    @pytest.mark.parametrize(
        "kind",
        ["expandable-banner", "gated-mini-game", "video-gallery", "text-dialogue", "native-video"],
    )
    def test_renderings_differ_only_in_asset_references(
        self,
        kind: str,
        packager: CreativePackager,
        make_settings: Callable,
        make_assets: Callable,
    ) -> None:
        settings = make_settings(kind)
        assets = make_assets(settings)
        archive = packager.build_archive(settings, assets, GENERATED_AT).rendering
        urls = {role: f"https://cdn.example/{role}" for role in assets}
        hosted = packager.render_hosted(settings, urls)

        assert archive.phase is BuildPhase.ARCHIVE
        assert hosted.phase is BuildPhase.HOSTED
        assert hosted.references == urls

        translated = archive.html
        for role, ref in archive.references.items():
            translated = translated.replace(ref, urls[role])
        assert translated == hosted.html


class TestManifest:
    def test_round_trip(self) -> None:
        manifest = Manifest(
            format="native",
            version="1.0.0",
            generated_at=GENERATED_AT,
            naming=ManifestNaming(
                campaign="SpringSale",
                placement="Feed",
                zip_name="SpringSale__Feed.zip",
                files={"image": "SpringSale__Feed__image.jpg"},
            ),
            settings={"kind": "native", "headline": "Fresh <b>"},
        )
        assert Manifest.parse(manifest.serialize()) == manifest

    def test_serialized_keys_sorted(self) -> None:
        manifest = Manifest(
            format="skin",
            version="1.0.0",
            generated_at=GENERATED_AT,
            naming=ManifestNaming(zip_name="adelia.zip"),
        )
        text = manifest.serialize()
        assert text.index('"format"') < text.index('"generated_at"') < text.index('"naming"')

    @pytest.mark.parametrize("raw", ["not json", '{"format": "skin"}', "[]"])
    def test_parse_rejects_garbage(self, raw: str) -> None:
        with pytest.raises(ManifestError):
            Manifest.parse(raw)
