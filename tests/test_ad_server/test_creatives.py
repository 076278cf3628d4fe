"""
Tests for creative endpoints.
"""

import io
import zipfile
from pathlib import Path
from typing import Any

import pytest
from httpx import AsyncClient

from adelia.ad_server.services.event_service import EventStore


@pytest.mark.asyncio
async def test_list_kinds(client: AsyncClient) -> None:
    response = await client.get("/api/v1/creatives/kinds")

    assert response.status_code == 200
    kinds = {item["kind"]: item for item in response.json()}
    assert len(kinds) == 15
    banner = kinds["expandable-banner"]
    assert (banner["width"], banner["height"]) == (970, 250)
    assert [slot["role"] for slot in banner["assets"]] == ["collapsed", "expanded"]
    assert "collapsed_height" in banner["settings_schema"]["properties"]


@pytest.mark.asyncio
async def test_preview_archive(client: AsyncClient, sample_build_request: dict[str, Any]) -> None:
    body = {"settings": sample_build_request["settings"], "assets": sample_build_request["assets"]}
    response = await client.post("/api/v1/creatives/preview", json=body)

    assert response.status_code == 200
    data = response.json()
    assert data["kind"] == "native"
    assert data["phase"] == "archive"
    assert data["references"] == {"image": "SpringSale__Feed__image.jpg"}
    assert 'src="SpringSale__Feed__image.jpg"' in data["html"]
    assert "Fresh for spring" in data["html"]


@pytest.mark.asyncio
async def test_preview_hosted(client: AsyncClient, sample_build_request: dict[str, Any]) -> None:
    body = {
        "settings": sample_build_request["settings"],
        "assets": {"image": {"url": "https://cdn.example/spring.jpg"}},
        "phase": "hosted",
    }
    response = await client.post("/api/v1/creatives/preview", json=body)

    assert response.status_code == 200
    data = response.json()
    assert data["phase"] == "hosted"
    assert 'src="https://cdn.example/spring.jpg"' in data["html"]


@pytest.mark.asyncio
async def test_build_rejects_script_urls(client: AsyncClient, sample_build_request: dict[str, Any]) -> None:
    sample_build_request["settings"]["target_url"] = "javascript:alert(1)"
    response = await client.post("/api/v1/creatives/build", json=sample_build_request)
    assert response.status_code == 422
    assert response.json()["details"]["field"].endswith("target_url")

    sample_build_request["settings"]["target_url"] = "https://brand.example/landing"
    sample_build_request["assets"] = {"image": {"url": "data:image/svg+xml,<svg onload=alert(1)>"}}
    response = await client.post("/api/v1/creatives/build", json=sample_build_request)
    assert response.status_code == 422
    assert response.json()["details"]["field"].endswith("url")


@pytest.mark.asyncio
async def test_preview_rejects_bad_color(client: AsyncClient) -> None:
    body = {
        "settings": {
            "kind": "puzzle",
            "target_url": "https://brand.example/landing",
            "accent_color": "red; background:url(x)",
        },
    }
    response = await client.post("/api/v1/creatives/preview", json=body)
    assert response.status_code == 422
    data = response.json()
    assert data["error"] == "ValidationError"
    assert data["details"]["field"].endswith("accent_color")
    assert data["request_id"]


@pytest.mark.asyncio
async def test_build_creative(
    client: AsyncClient,
    tmp_path: Path,
    sample_build_request: dict[str, Any],
) -> None:
    """Test a full build through the API."""
    response = await client.post("/api/v1/creatives/build", json=sample_build_request)

    assert response.status_code == 201
    data = response.json()
    creative_id = data["creative_id"]
    assert data["zip_name"] == "SpringSale__Feed.zip"
    assert data["archive_url"] == f"http://test/media/ads/acme/SpringSale/{creative_id}/SpringSale__Feed.zip"
    assert data["hosted_url"].endswith(f"SpringSale__Feed__{creative_id}.html")
    assert data["hosted_url"] in data["embed_script"]
    assert "\n" not in data["embed_script_one_line"]
    assert data["manifest"]["format"] == "native"
    assert data["manifest"]["naming"]["files"] == {"image": "SpringSale__Feed__image.jpg"}

    bundle = tmp_path / "media" / "ads" / "acme" / "SpringSale" / creative_id
    with zipfile.ZipFile(io.BytesIO((bundle / "SpringSale__Feed.zip").read_bytes())) as archive:
        assert sorted(archive.namelist()) == [
            "SpringSale__Feed__image.jpg",
            "index.html",
            "manifest.json",
        ]
        assert archive.read("SpringSale__Feed__image.jpg") == b"image-bytes"
    hosted = (bundle / f"SpringSale__Feed__{creative_id}.html").read_text()
    assert f'var AD_ID = "{creative_id}";' in hosted


@pytest.mark.asyncio
async def test_build_missing_required_asset(client: AsyncClient) -> None:
    body = {
        "owner": "acme",
        "settings": {"kind": "skin", "target_url": "https://brand.example/landing"},
        "assets": {},
    }
    response = await client.post("/api/v1/creatives/build", json=body)

    assert response.status_code == 422
    data = response.json()
    assert data["error"] == "CreativeValidationError"
    assert data["details"]["field"] == "assets.background"


@pytest.mark.asyncio
async def test_build_missing_target_url(client: AsyncClient, sample_build_request: dict[str, Any]) -> None:
    sample_build_request["settings"]["target_url"] = "  "
    response = await client.post("/api/v1/creatives/build", json=sample_build_request)

    assert response.status_code == 422
    assert response.json()["details"]["field"] == "target_url"


@pytest.mark.asyncio
async def test_build_rejects_bad_base64(client: AsyncClient, sample_build_request: dict[str, Any]) -> None:
    sample_build_request["assets"]["image"]["data_base64"] = "not base64!"
    response = await client.post("/api/v1/creatives/build", json=sample_build_request)
    assert response.status_code == 422


@pytest.mark.asyncio
async def test_get_creative(client: AsyncClient, sample_build_request: dict[str, Any]) -> None:
    built = (await client.post("/api/v1/creatives/build", json=sample_build_request)).json()

    response = await client.get(f"/api/v1/creatives/{built['creative_id']}")

    assert response.status_code == 200
    record = response.json()
    assert record["id"] == built["creative_id"]
    assert record["owner"] == "acme"
    assert record["target_element_id"] == "ad-slot-1"
    assert record["hosted_url"] == built["hosted_url"]


@pytest.mark.asyncio
async def test_get_unknown_creative(client: AsyncClient) -> None:
    response = await client.get("/api/v1/creatives/does-not-exist")
    assert response.status_code == 404
    assert response.json()["error"] == "RecordNotFoundError"


@pytest.mark.asyncio
async def test_creative_stats(
    client: AsyncClient,
    event_store: EventStore,
    sample_build_request: dict[str, Any],
) -> None:
    creative_id = (await client.post("/api/v1/creatives/build", json=sample_build_request)).json()["creative_id"]
    await client.get("/api/track", params={"adId": creative_id})
    await client.post("/api/track", json={"adId": creative_id, "event": "click"})

    response = await client.get(f"/api/v1/creatives/{creative_id}/stats")

    assert response.status_code == 200
    data = response.json()
    assert data["creative_id"] == creative_id
    assert len(data["days"]) == 1
    assert data["totals"]["views"] == 1
    assert data["totals"]["clicks"] == 1


@pytest.mark.asyncio
async def test_stats_for_unknown_creative(client: AsyncClient) -> None:
    response = await client.get("/api/v1/creatives/nope/stats")
    assert response.status_code == 404
