# portfolio/routes/uploads.py
import logging

from fastapi import APIRouter, Depends, File, HTTPException, UploadFile
from pydantic import BaseModel, Field

from portfolio.constants import CERTIFICATE_UPLOAD
from portfolio.deps import get_certificate_store
from portfolio.middleware.auth_middleware import require_admin
from portfolio.services.blob_store import BlobStore, BlobStoreError
from portfolio.utils.files import FilePayload, UploadValidationError, generate_file_name, validate_upload

log = logging.getLogger(__name__)

router = APIRouter(prefix="/upload", tags=["Uploads"])

class DeleteIn(BaseModel):
    fileName: str = Field(min_length=1)

@router.post("/certificate")
async def upload_certificate(
    file: UploadFile = File(...),
    store: BlobStore = Depends(get_certificate_store),
    _: dict = Depends(require_admin),
):
    payload = FilePayload(
        name=file.filename or "upload",
        content=await file.read(),
        content_type=file.content_type or "application/octet-stream",
    )
    try:
        validate_upload(payload, CERTIFICATE_UPLOAD)
    except UploadValidationError as e:
        raise HTTPException(status_code=400, detail=str(e))

    try:
        stored = await store.upload(payload.content, generate_file_name(payload.name), payload.content_type)
    except BlobStoreError as e:
        log.error("Certificate upload failed: %s", e)
        raise HTTPException(status_code=502, detail=str(e))
    return {"success": True, "fileName": stored.name, "publicUrl": stored.public_url}

@router.post("/certificate/delete")
async def delete_certificate(
    body: DeleteIn,
    store: BlobStore = Depends(get_certificate_store),
    _: dict = Depends(require_admin),
):
    if not await store.delete(body.fileName):
        raise HTTPException(status_code=502, detail="Failed to delete file from storage")
    return {"success": True}
