# portfolio/routes/resumes.py
from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from portfolio.database import get_db
from portfolio.deps import get_resume_store
from portfolio.middleware.auth_middleware import require_admin
from portfolio.services.blob_store import BlobStore, BlobStoreError
from portfolio.services.resumes import ResumeNotFound, delete_resume

router = APIRouter(prefix="/resumes", tags=["Resumes"])

@router.delete("/{resume_id}")
async def delete_resume_route(
    resume_id: str,
    db: Session = Depends(get_db),
    store: BlobStore = Depends(get_resume_store),
    _: dict = Depends(require_admin),
):
    try:
        result = await delete_resume(db, store, resume_id)
    except ResumeNotFound:
        raise HTTPException(404, "Resume not found")
    return {"success": True, **result}

@router.get("/files")
async def list_resume_files(store: BlobStore = Depends(get_resume_store), _: dict = Depends(require_admin)):
    try:
        files = await store.list()
    except BlobStoreError as e:
        raise HTTPException(status_code=502, detail=str(e))
    return {
        "success": True,
        "files": [f.to_json_dict() for f in files],
        "total": len(files),
        "bucket": store.bucket,
    }
