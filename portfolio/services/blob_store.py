# portfolio/services/blob_store.py
from __future__ import annotations

import logging
import mimetypes
from datetime import datetime, timezone
from pathlib import Path
from typing import List, Optional, Protocol
from urllib.parse import quote

import httpx

from portfolio import config
from portfolio.schemas import CloudFile, to_iso

log = logging.getLogger("portfolio.blob")

LIST_LIMIT = 100


class BlobStoreError(Exception):
    """Upload / download / list against the object store failed."""


class BlobStore(Protocol):
    bucket: str

    async def upload(self, content: bytes, key: str, content_type: str) -> CloudFile: ...

    async def download(self, key: str) -> bytes: ...

    async def delete(self, key: str) -> bool: ...

    async def list(self, prefix: str = "") -> List[CloudFile]: ...

    def public_url(self, key: str) -> str: ...

    async def aclose(self) -> None: ...


def _visible(name: Optional[str]) -> bool:
    return bool(name) and not name.endswith("/") and not name.startswith(".")


# --------------------------
# Supabase Storage (REST)
# --------------------------
class SupabaseBlobStore:
    """Supabase Storage over its REST API.

    Endpoints used:
      POST   /storage/v1/object/{bucket}/{key}       upload
      GET    /storage/v1/object/{bucket}/{key}       authenticated download
      DELETE /storage/v1/object/{bucket}             {"prefixes": [key]}
      POST   /storage/v1/object/list/{bucket}        {"prefix", "limit", "offset", "sortBy"}
      public /storage/v1/object/public/{bucket}/{key}
    """

    def __init__(
        self,
        *,
        url: str,
        api_key: str,
        bucket: str,
        client: Optional[httpx.AsyncClient] = None,
        timeout: float = config.HTTP_TIMEOUT_SECS,
    ):
        if not url or not api_key:
            raise ValueError("Supabase storage needs both a project URL and an API key")
        self.base = url.rstrip("/") + "/storage/v1"
        self.bucket = bucket
        self._api_key = api_key
        self._client = client or httpx.AsyncClient(timeout=timeout)

    @property
    def _headers(self) -> dict:
        return {"Authorization": f"Bearer {self._api_key}", "apikey": self._api_key}

    def _object_url(self, key: str) -> str:
        return f"{self.base}/object/{self.bucket}/{quote(key)}"

    def public_url(self, key: str) -> str:
        return f"{self.base}/object/public/{self.bucket}/{quote(key)}"

    async def upload(self, content: bytes, key: str, content_type: str) -> CloudFile:
        headers = {**self._headers, "Content-Type": content_type, "x-upsert": "false"}
        try:
            r = await self._client.post(self._object_url(key), content=content, headers=headers)
        except httpx.HTTPError as e:
            raise BlobStoreError(f"Upload failed: {e}") from e
        if r.status_code >= 400:
            raise BlobStoreError(f"Upload failed: {r.status_code} {r.text[:200]}")
        log.info("Uploaded %s to bucket %s (%d bytes)", key, self.bucket, len(content))
        return CloudFile(
            name=key,
            size=len(content),
            mime_type=content_type,
            public_url=self.public_url(key),
        )

    async def download(self, key: str) -> bytes:
        try:
            r = await self._client.get(self._object_url(key), headers=self._headers)
        except httpx.HTTPError as e:
            raise BlobStoreError(f"Download failed: {e}") from e
        if r.status_code >= 400:
            raise BlobStoreError(f"Download failed: {r.status_code} {r.text[:200]}")
        return r.content

    async def delete(self, key: str) -> bool:
        try:
            r = await self._client.request(
                "DELETE",
                f"{self.base}/object/{self.bucket}",
                json={"prefixes": [key]},
                headers=self._headers,
            )
        except httpx.HTTPError as e:
            log.error("Delete of %s failed: %s", key, e)
            return False
        if r.status_code >= 400:
            log.error("Delete of %s failed: %s %s", key, r.status_code, r.text[:200])
            return False
        return True

    async def list(self, prefix: str = "") -> List[CloudFile]:
        body = {
            "prefix": prefix,
            "limit": LIST_LIMIT,
            "offset": 0,
            "sortBy": {"column": "created_at", "order": "desc"},
        }
        try:
            r = await self._client.post(f"{self.base}/object/list/{self.bucket}", json=body, headers=self._headers)
        except httpx.HTTPError as e:
            raise BlobStoreError(f"List files failed: {e}") from e
        if r.status_code >= 400:
            raise BlobStoreError(f"List files failed: {r.status_code} {r.text[:200]}")

        rows = r.json()
        if not isinstance(rows, list):
            rows = []

        out: List[CloudFile] = []
        for it in rows:
            name = it.get("name")
            # folders come back with id == null
            if not _visible(name) or it.get("id") is None:
                continue
            key = f"{prefix.rstrip('/')}/{name}" if prefix else name
            meta = it.get("metadata") or {}
            out.append(CloudFile(
                name=key,
                size=int(meta.get("size") or 0),
                mime_type=meta.get("mimetype") or "application/octet-stream",
                created_at=it.get("created_at") or it.get("updated_at") or to_iso(datetime.now(timezone.utc)),
                public_url=self.public_url(key),
            ))
        return out

    async def aclose(self) -> None:
        await self._client.aclose()


# --------------------------
# Local directory (dev / tests)
# --------------------------
class LocalBlobStore:
    """Objects are plain files under <root>/<bucket>/."""

    def __init__(self, root: Path, bucket: str, public_base_url: str = config.PUBLIC_BASE_URL):
        self.bucket = bucket
        self.dir = Path(root) / bucket
        self.public_base_url = public_base_url.rstrip("/")

    def _path(self, key: str) -> Path:
        p = (self.dir / key).resolve()
        if self.dir.resolve() not in p.parents:
            raise BlobStoreError(f"Invalid object key: {key!r}")
        return p

    def public_url(self, key: str) -> str:
        return f"{self.public_base_url}/{self.bucket}/{quote(key)}"

    async def upload(self, content: bytes, key: str, content_type: str) -> CloudFile:
        path = self._path(key)
        if path.exists():
            raise BlobStoreError(f"Upload failed: {key} already exists")
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_bytes(content)
        except OSError as e:
            raise BlobStoreError(f"Upload failed: {e}") from e
        return CloudFile(name=key, size=len(content), mime_type=content_type, public_url=self.public_url(key))

    async def download(self, key: str) -> bytes:
        try:
            return self._path(key).read_bytes()
        except OSError as e:
            raise BlobStoreError(f"Download failed: {e}") from e

    async def delete(self, key: str) -> bool:
        try:
            self._path(key).unlink()
            return True
        except (OSError, BlobStoreError) as e:
            log.error("Delete of %s failed: %s", key, e)
            return False

    async def list(self, prefix: str = "") -> List[CloudFile]:
        base = self.dir / prefix if prefix else self.dir
        if not base.is_dir():
            return []
        files = [p for p in base.iterdir() if p.is_file() and _visible(p.name)]
        files.sort(key=lambda p: p.stat().st_mtime, reverse=True)
        out: List[CloudFile] = []
        for p in files[:LIST_LIMIT]:
            key = p.relative_to(self.dir).as_posix()
            st = p.stat()
            out.append(CloudFile(
                name=key,
                size=st.st_size,
                mime_type=mimetypes.guess_type(p.name)[0] or "application/octet-stream",
                created_at=to_iso(datetime.fromtimestamp(st.st_mtime, tz=timezone.utc)),
                public_url=self.public_url(key),
            ))
        return out

    async def aclose(self) -> None:
        pass


def build_blob_store(bucket: str, api_key: Optional[str] = None) -> BlobStore:
    """Supabase when configured, else the local directory store. Chosen once at startup."""
    key = api_key or config.SUPABASE_SERVICE_ROLE_KEY
    if config.SUPABASE_URL and key:
        log.info("Blob store: Supabase bucket %s", bucket)
        return SupabaseBlobStore(url=config.SUPABASE_URL, api_key=key, bucket=bucket)
    log.info("Blob store: local directory %s/%s", config.LOCAL_STORAGE_DIR, bucket)
    return LocalBlobStore(config.LOCAL_STORAGE_DIR, bucket)
