from __future__ import annotations

import logging
from typing import Any, Dict, List

from sqlalchemy.orm import Session

from portfolio.services.blob_store import BlobStore
from portfolio.services.sections import get_section, upsert_section

log = logging.getLogger(__name__)


class ResumeNotFound(LookupError):
    pass


def _stored(db: Session) -> List[Dict[str, Any]]:
    current = get_section(db, "resumes")
    return current if isinstance(current, list) else []


def _matches(record: Any, resume_id: str) -> bool:
    return isinstance(record, dict) and record.get("id") == resume_id


def find_resume(db: Session, resume_id: str) -> Dict[str, Any]:
    target = next((r for r in _stored(db) if _matches(r, resume_id)), None)
    if target is None:
        raise ResumeNotFound(resume_id)
    return target


async def remove_blob(store: BlobStore, record: Dict[str, Any]) -> bool:
    """Delete the object behind a cloud record; False when there is none or removal failed."""
    key = record.get("cloudFileName")
    if record.get("storageType") != "cloud" or not key:
        return False
    log.info("Deleting cloud file %s", key)
    removed = await store.delete(key)
    if not removed:
        log.warning("Storage deletion failed for %s; continuing with record removal", key)
    return removed


def remove_record(db: Session, resume_id: str) -> None:
    upsert_section(db, "resumes", [r for r in _stored(db) if not _matches(r, resume_id)])
    log.info("Resume %s deleted", resume_id)


async def delete_resume(db: Session, store: BlobStore, resume_id: str) -> Dict[str, Any]:
    """Remove the stored object (cloud resumes) and the record.

    A failed object removal is logged and the record is still removed; the
    object is then orphaned in the bucket.
    """
    target = find_resume(db, resume_id)
    blob_removed = await remove_blob(store, target)
    remove_record(db, resume_id)
    return {"deletedId": resume_id, "blobRemoved": blob_removed}
