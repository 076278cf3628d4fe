"""
Tests for the upload and persistence collaborators.
"""

from datetime import datetime, timezone
from pathlib import Path

import httpx
import pytest

from adelia.build.storage import HttpUploader, InMemoryRecordStore, LocalDirectoryUploader
from adelia.common.exceptions import RecordNotFoundError, UploadError
from adelia.schemas.record import CreativeRecord


def make_record(owner: str = "acme", **overrides) -> CreativeRecord:
    now = datetime(2026, 3, 1, tzinfo=timezone.utc)
    data = {
        "owner": owner,
        "kind": "native",
        "width": 300,
        "height": 250,
        "archive_url": "http://test/media/a.zip",
        "hosted_url": "http://test/media/a.html",
        "created_at": now,
        "updated_at": now,
    }
    data.update(overrides)
    return CreativeRecord(**data)


class TestLocalDirectoryUploader:
    @pytest.mark.asyncio
    async def test_writes_under_storage_key(self, tmp_path: Path) -> None:
        uploader = LocalDirectoryUploader(root_dir=tmp_path, public_base_url="http://cdn.test/media/")
        url = await uploader.upload(b"data", owner="acme", campaign="Spring Sale", file_name="x.png")
        assert url == "http://cdn.test/media/ads/acme/Spring_Sale/x.png"
        assert (tmp_path / "ads" / "acme" / "Spring_Sale" / "x.png").read_bytes() == b"data"

    @pytest.mark.asyncio
    async def test_os_errors_become_upload_errors(self, tmp_path: Path) -> None:
        blocker = tmp_path / "blocked"
        blocker.write_text("not a directory")
        uploader = LocalDirectoryUploader(root_dir=blocker, public_base_url="http://cdn.test")
        with pytest.raises(UploadError):
            await uploader.upload(b"data", owner="acme", campaign="", file_name="x.png")


class TestHttpUploader:
    @pytest.mark.asyncio
    async def test_puts_and_returns_reported_url(self) -> None:
        seen = {}

        def handler(request: httpx.Request) -> httpx.Response:
            seen["method"] = request.method
            seen["url"] = str(request.url)
            seen["type"] = request.headers["content-type"]
            return httpx.Response(200, json={"url": "https://cdn.example/final.png"})

        client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
        uploader = HttpUploader(endpoint="https://store.example/", client=client)
        url = await uploader.upload(
            b"png", owner="acme", campaign="c", file_name="x.png", content_type="image/png"
        )
        await uploader.close()

        assert url == "https://cdn.example/final.png"
        assert seen == {
            "method": "PUT",
            "url": "https://store.example/ads/acme/c/x.png",
            "type": "image/png",
        }

    @pytest.mark.asyncio
    async def test_falls_back_to_request_url(self) -> None:
        client = httpx.AsyncClient(transport=httpx.MockTransport(lambda r: httpx.Response(204)))
        uploader = HttpUploader(endpoint="https://store.example", client=client)
        url = await uploader.upload(b"x", owner="o", campaign="", file_name="f.zip")
        await uploader.close()
        assert url == "https://store.example/ads/o/default/f.zip"

    @pytest.mark.asyncio
    async def test_http_errors_become_upload_errors(self) -> None:
        client = httpx.AsyncClient(transport=httpx.MockTransport(lambda r: httpx.Response(503)))
        uploader = HttpUploader(endpoint="https://store.example", client=client)
        with pytest.raises(UploadError) as exc_info:
            await uploader.upload(b"x", owner="o", campaign="", file_name="f.zip")
        await uploader.close()
        assert exc_info.value.status_code == 502

    def test_needs_endpoint(self) -> None:
        with pytest.raises(UploadError):
            HttpUploader(endpoint="")


class TestInMemoryRecordStore:
    @pytest.mark.asyncio
    async def test_save_assigns_id(self) -> None:
        store = InMemoryRecordStore()
        record_id = await store.save_record(make_record())
        saved = await store.get(record_id)
        assert saved.id == record_id
        assert len(record_id) == 32

    @pytest.mark.asyncio
    async def test_save_with_id_overwrites(self) -> None:
        store = InMemoryRecordStore()
        await store.save_record(make_record(kind="native"), "fixed")
        await store.save_record(make_record(kind="skin"), "fixed")
        assert (await store.get("fixed")).kind == "skin"

    @pytest.mark.asyncio
    async def test_missing_record(self) -> None:
        with pytest.raises(RecordNotFoundError):
            await InMemoryRecordStore().get("nope")

    @pytest.mark.asyncio
    async def test_list_by_owner(self) -> None:
        store = InMemoryRecordStore()
        await store.save_record(make_record("acme"))
        await store.save_record(make_record("acme"))
        await store.save_record(make_record("globex"))
        assert len(await store.list_by_owner("acme")) == 2
        assert await store.list_by_owner("initech") == []
