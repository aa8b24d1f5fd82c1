# portfolio/client/resume_manager.py
"""Resume lifecycle across the blob store and the `resumes` section.

Uploads prefer the blob store and fall back to inlining the file as a
data URL in the record. Deletes go through the server (object + record);
when that path fails the record alone is removed and the object may be
left orphaned in the bucket.
"""
from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, List, Optional, Protocol, Union

import httpx
from pydantic import ValidationError
from sqlalchemy.orm import sessionmaker

from portfolio.client.data_manager import DataManager
from portfolio.client.http import ApiClient
from portfolio.constants import RESUME_UPLOAD
from portfolio.database import session_scope
from portfolio.schemas import ByKey, ByUrl, CloudFile, Inline, Resume, utc_now_iso
from portfolio.services import resumes as resume_service
from portfolio.services.blob_store import BlobStore
from portfolio.utils.files import (
    FilePayload,
    format_file_size,
    from_data_url,
    generate_file_name,
    generate_id,
    to_data_url,
    validate_upload,
)

log = logging.getLogger(__name__)

# metadata a caller may change after upload
EDITABLE_FIELDS = {"name", "description"}


class ResumeStorageError(Exception):
    """The resume record could not be persisted."""


class ResumeContentError(Exception):
    """The record has no usable content reference."""


@dataclass
class MigrationResult:
    success_count: int = 0
    failed_count: int = 0


def _parse_resumes(raw: Any) -> List[Resume]:
    if not isinstance(raw, list):
        return []
    out: List[Resume] = []
    for item in raw:
        try:
            out.append(Resume.model_validate(item))
        except ValidationError as e:
            log.warning("Skipping malformed resume record: %s", e.errors()[:1])
    return out


# --------------------------
# Server-mediated operations
# --------------------------
class ResumeServer(Protocol):
    async def delete_resume(self, resume_id: str) -> None: ...

    async def list_files(self) -> List[CloudFile]: ...


class ApiResumeServer:
    def __init__(self, api: ApiClient):
        self.api = api

    async def delete_resume(self, resume_id: str) -> None:
        await self.api.request("DELETE", f"/resumes/{resume_id}")

    async def list_files(self) -> List[CloudFile]:
        r = await self.api.request("GET", "/resumes/files")
        return [CloudFile.model_validate(f) for f in r.json().get("files", [])]


class LocalResumeServer:
    """Same service functions as the API routes, called in-process.

    Database steps run in a worker thread, like SqlSectionStore.
    """

    def __init__(self, session_factory: sessionmaker, store: BlobStore):
        self.session_factory = session_factory
        self.store = store

    def _call(self, fn, *args):
        with session_scope(self.session_factory) as db:
            return fn(db, *args)

    async def delete_resume(self, resume_id: str) -> None:
        target = await asyncio.to_thread(self._call, resume_service.find_resume, resume_id)
        await resume_service.remove_blob(self.store, target)
        await asyncio.to_thread(self._call, resume_service.remove_record, resume_id)

    async def list_files(self) -> List[CloudFile]:
        return await self.store.list()


# --------------------------
# Manager
# --------------------------
class ResumeManager:
    def __init__(
        self,
        data: DataManager,
        store: BlobStore,
        server: Optional[ResumeServer] = None,
        http: Optional[httpx.AsyncClient] = None,
    ):
        self.data = data
        self.store = store
        self.server = server
        self._http = http

    # ---------- reads ----------
    async def get_all_resumes(self) -> List[Resume]:
        try:
            doc = await self.data.get_portfolio_data()
            raw = doc.get("resumes") if isinstance(doc, dict) else None
        except Exception:
            log.exception("Could not load resumes")
            return []
        return _parse_resumes(raw)

    async def get_resume_by_id(self, resume_id: str) -> Optional[Resume]:
        return next((r for r in await self.get_all_resumes() if r.id == resume_id), None)

    async def _persist(self, resumes: List[Resume]) -> bool:
        return await self.data.update_portfolio_section("resumes", [r.to_json_dict() for r in resumes])

    async def _stored_resumes(self) -> List[Resume]:
        """Base list for a write, read from the remote store only.

        Cached or default data is never used here; writing it back would
        replace the stored records.
        """
        try:
            raw = await self.data.fetch_section("resumes")
        except Exception as e:
            raise ResumeStorageError(f"Could not read stored resumes: {e}") from e
        return _parse_resumes(raw)

    async def _append(self, resume: Resume) -> None:
        resumes = await self._stored_resumes()
        if not await self._persist(resumes + [resume]):
            raise ResumeStorageError(f"Could not save resume record {resume.id}")

    # ---------- upload ----------
    def _new_record(self, file: FilePayload, name: str, description: str, **content: Any) -> Resume:
        return Resume(
            id=generate_id(),
            name=name,
            description=description,
            file_name=file.name,
            file_size=format_file_size(file.size),
            file_type=file.content_type,
            upload_date=utc_now_iso(),
            **content,
        )

    async def upload_resume_to_cloud(self, file: FilePayload, name: str, description: str) -> Resume:
        validate_upload(file, RESUME_UPLOAD)
        stored = await self.store.upload(file.content, generate_file_name(file.name), file.content_type)
        resume = self._new_record(
            file, name, description,
            storage_type="cloud",
            cloud_file_name=stored.name,
            cloud_url=stored.public_url,
        )
        try:
            await self._append(resume)
        except Exception:
            # record not saved: take the object back out so it isn't orphaned
            if not await self.store.delete(stored.name):
                log.warning("Uploaded object %s left without a record", stored.name)
            raise
        log.info("Resume %s uploaded to cloud as %s", resume.id, stored.name)
        return resume

    async def upload_resume_locally(self, file: FilePayload, name: str, description: str) -> Resume:
        validate_upload(file, RESUME_UPLOAD)
        resume = self._new_record(
            file, name, description,
            storage_type="local",
            file_data=to_data_url(file.content, file.content_type),
        )
        await self._append(resume)
        log.info("Resume %s stored inline", resume.id)
        return resume

    async def upload_resume(
        self,
        file: FilePayload,
        name: str,
        description: str = "",
        prefer_cloud: bool = True,
    ) -> Resume:
        """Cloud first (when preferred), inline on any cloud failure.

        Validation errors are raised before either attempt.
        """
        validate_upload(file, RESUME_UPLOAD)
        if prefer_cloud:
            try:
                return await self.upload_resume_to_cloud(file, name, description)
            except Exception as e:
                log.warning("Cloud upload failed, falling back to local storage: %s", e)
        return await self.upload_resume_locally(file, name, description)

    async def upload_resume_from_cloud(
        self,
        cloud_file: CloudFile,
        name: Optional[str] = None,
        description: str = "",
    ) -> Resume:
        """Record for an object that is already in the bucket; nothing is uploaded."""
        resume = Resume(
            id=generate_id(),
            name=name or cloud_file.name,
            description=description,
            file_name=cloud_file.name,
            file_size=format_file_size(cloud_file.size),
            file_type=cloud_file.mime_type,
            upload_date=utc_now_iso(),
            storage_type="cloud",
            cloud_file_name=cloud_file.name,
            cloud_url=cloud_file.public_url,
        )
        await self._append(resume)
        return resume

    async def sync_cloud_files(self) -> List[Resume]:
        """Import every bucket object no record points at yet."""
        files = await (self.server.list_files() if self.server else self.store.list())
        existing = await self._stored_resumes()
        known_keys = {r.cloud_file_name for r in existing if r.cloud_file_name}
        known_urls = {r.cloud_url for r in existing if r.cloud_url}

        imported: List[Resume] = []
        for f in files:
            if f.name in known_keys or f.public_url in known_urls:
                continue
            imported.append(await self.upload_resume_from_cloud(f))
        log.info("Synced %d cloud files (%d new)", len(files), len(imported))
        return imported

    # ---------- download ----------
    async def _fetch_url(self, url: str) -> bytes:
        client = self._http or httpx.AsyncClient()
        try:
            r = await client.get(url)
            r.raise_for_status()
            return r.content
        finally:
            if self._http is None:
                await client.aclose()

    async def read_resume_content(self, resume: Resume) -> bytes:
        ref = resume.content_ref()
        if isinstance(ref, ByKey):
            return await self.store.download(ref.key)
        if isinstance(ref, ByUrl):
            return await self._fetch_url(ref.url)
        if isinstance(ref, Inline):
            return from_data_url(ref.data)
        raise ResumeContentError(f"No file data available for resume {resume.id}")

    async def download_resume(self, resume: Resume, destination: Union[str, Path] = ".") -> Path:
        """Save the resume's bytes under `destination` using its original file name."""
        content = await self.read_resume_content(resume)
        dest = Path(destination)
        path = dest / Path(resume.file_name).name if dest.is_dir() else dest
        path.write_bytes(content)
        log.info("Resume %s saved to %s", resume.id, path)
        return path

    # ---------- delete / update ----------
    async def delete_resume(self, resume: Resume) -> bool:
        if self.server is not None:
            try:
                await self.server.delete_resume(resume.id)
                log.info("Resume %s deleted by server", resume.id)
                self.data.record_removed("resumes", resume.id)
                return True
            except Exception as e:
                log.warning("Server delete failed for %s, removing record only: %s", resume.id, e)

        if resume.storage_type == "cloud":
            log.warning(
                "Cloud object for resume %s (%s) may be orphaned",
                resume.id, resume.cloud_file_name or resume.cloud_url,
            )
        try:
            resumes = await self._stored_resumes()
        except ResumeStorageError as e:
            log.error("Delete of %s aborted: %s", resume.id, e)
            return False
        return await self._persist([r for r in resumes if r.id != resume.id])

    async def update_resume(self, resume_id: str, updates: Dict[str, Any]) -> bool:
        ignored = set(updates) - EDITABLE_FIELDS
        if ignored:
            log.warning("Ignoring non-editable resume fields: %s", sorted(ignored))
        changes = {k: v for k, v in updates.items() if k in EDITABLE_FIELDS}

        try:
            resumes = await self._stored_resumes()
        except ResumeStorageError as e:
            log.error("Update of %s aborted: %s", resume_id, e)
            return False
        for i, r in enumerate(resumes):
            if r.id == resume_id:
                resumes[i] = r.model_copy(update=changes)
                return await self._persist(resumes)
        log.error("Resume %s not found", resume_id)
        return False

    # ---------- migration ----------
    async def migrate_to_cloud(self) -> MigrationResult:
        result = MigrationResult()
        try:
            resumes = await self._stored_resumes()
        except ResumeStorageError as e:
            log.error("Migration aborted: %s", e)
            result.failed_count += 1
            return result

        for i, r in enumerate(resumes):
            if r.storage_type != "local" or not r.file_data:
                continue
            try:
                content = from_data_url(r.file_data)
                stored = await self.store.upload(content, generate_file_name(r.file_name), r.file_type)
                migrated = r.model_copy(update={
                    "storage_type": "cloud",
                    "cloud_file_name": stored.name,
                    "cloud_url": stored.public_url,
                    "file_data": None,
                })
                candidate = resumes[:i] + [migrated] + resumes[i + 1:]
                if not await self._persist(candidate):
                    await self.store.delete(stored.name)
                    raise ResumeStorageError(f"Could not save migrated record {r.id}")
                resumes = candidate
                result.success_count += 1
            except Exception as e:
                log.error("Failed to migrate resume %s: %s", r.id, e)
                result.failed_count += 1

        log.info("Migration done: %d migrated, %d failed", result.success_count, result.failed_count)
        return result
