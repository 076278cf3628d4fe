"""
Upload and persistence collaborators.

The build only depends on the two protocols. A local directory uploader
(served by the API under ``/media``), an HTTP uploader and an in-memory
record store ship with the package.
"""

from __future__ import annotations

import asyncio
from pathlib import Path
from typing import Protocol

import httpx

from adelia.common.config import get_settings
from adelia.common.exceptions import RecordNotFoundError, UploadError
from adelia.common.logger import LoggerMixin
from adelia.common.utils import generate_creative_id
from adelia.creative.naming import safe_file_name, safe_path_segment
from adelia.schemas.record import CreativeRecord

DEFAULT_CAMPAIGN_SEGMENT = "default"


def storage_key(owner: str, campaign: str, file_name: str, creative_id: str = "") -> str:
    """
    ``ads/<owner>/<campaign>/[<creative_id>/]<file>`` with unsafe characters replaced.

    File names repeat across creatives of one campaign and placement; the
    creative id segment keeps their uploads apart.
    """
    segments = ["ads", safe_path_segment(owner), safe_path_segment(campaign or DEFAULT_CAMPAIGN_SEGMENT)]
    if creative_id:
        segments.append(safe_path_segment(creative_id))
    segments.append(safe_file_name(file_name))
    return "/".join(segments)


# ---------------------------------------------------------------------------
# Upload
# ---------------------------------------------------------------------------

class Uploader(Protocol):
    async def upload(
        self,
        data: bytes,
        *,
        owner: str,
        campaign: str,
        file_name: str,
        content_type: str | None = None,
        creative_id: str = "",
    ) -> str:
        """Store ``data`` and return its absolute URL."""
        ...


class LocalDirectoryUploader(LoggerMixin):
    """Writes files under a directory that is served at ``public_base_url``."""

    def __init__(self, root_dir: str | Path | None = None, public_base_url: str | None = None):
        storage = get_settings().storage
        self.root_dir = Path(root_dir if root_dir is not None else storage.root_dir)
        self.public_base_url = (public_base_url or storage.public_base_url).rstrip("/")

    async def upload(
        self,
        data: bytes,
        *,
        owner: str,
        campaign: str,
        file_name: str,
        content_type: str | None = None,
        creative_id: str = "",
    ) -> str:
        key = storage_key(owner, campaign, file_name, creative_id)
        path = self.root_dir / key
        try:
            await asyncio.to_thread(self._write, path, data)
        except OSError as e:
            raise UploadError(f"Failed to store {key}: {e}", {"key": key}) from e
        self.logger.debug("Stored file", key=key, size=len(data))
        return f"{self.public_base_url}/{key}"

    @staticmethod
    def _write(path: Path, data: bytes) -> None:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_bytes(data)


class HttpUploader(LoggerMixin):
    """
    PUTs files to a storage service.

    The service is expected to answer with JSON ``{"url": ...}``; when it
    does not, the request URL itself is returned.
    """

    def __init__(
        self,
        endpoint: str | None = None,
        client: httpx.AsyncClient | None = None,
        timeout: float | None = None,
    ):
        upload = get_settings().upload
        self.endpoint = (endpoint or upload.endpoint).rstrip("/")
        if not self.endpoint:
            raise UploadError("HTTP uploader needs an endpoint")
        self.client = client or httpx.AsyncClient(timeout=timeout or upload.timeout_seconds)

    async def upload(
        self,
        data: bytes,
        *,
        owner: str,
        campaign: str,
        file_name: str,
        content_type: str | None = None,
        creative_id: str = "",
    ) -> str:
        key = storage_key(owner, campaign, file_name, creative_id)
        url = f"{self.endpoint}/{key}"
        headers = {"Content-Type": content_type or "application/octet-stream"}
        try:
            response = await self.client.put(url, content=data, headers=headers)
            response.raise_for_status()
        except httpx.HTTPError as e:
            raise UploadError(f"Upload of {key} failed: {e}", {"key": key}) from e

        if response.headers.get("content-type", "").startswith("application/json"):
            location = response.json().get("url")
            if location:
                return location
        return url

    async def close(self) -> None:
        await self.client.aclose()


# ---------------------------------------------------------------------------
# Persistence
# ---------------------------------------------------------------------------

class RecordStore(Protocol):
    async def save_record(self, record: CreativeRecord, record_id: str | None = None) -> str: ...

    async def get(self, record_id: str) -> CreativeRecord: ...

    async def list_by_owner(self, owner: str) -> list[CreativeRecord]: ...


class InMemoryRecordStore:
    """Process-local record store."""

    def __init__(self) -> None:
        self._records: dict[str, CreativeRecord] = {}

    async def save_record(self, record: CreativeRecord, record_id: str | None = None) -> str:
        record_id = record_id or record.id or generate_creative_id()
        self._records[record_id] = record.model_copy(update={"id": record_id})
        return record_id

    async def get(self, record_id: str) -> CreativeRecord:
        try:
            return self._records[record_id]
        except KeyError:
            raise RecordNotFoundError(f"Creative not found: {record_id}", {"id": record_id}) from None

    async def list_by_owner(self, owner: str) -> list[CreativeRecord]:
        return [record for record in self._records.values() if record.owner == owner]
