import json

import httpx
import pytest

from conftest import CountingBlobStore
from portfolio.client.data_manager import DataManager
from portfolio.client.local_cache import MemoryCache
from portfolio.client.resume_manager import ResumeContentError, ResumeManager, ResumeStorageError
from portfolio.constants import CACHE_KEY
from portfolio.schemas import CloudFile, Resume
from portfolio.utils.files import FilePayload, UploadValidationError, to_data_url

PDF = b"%PDF-1.4 fake resume"


def _pdf(name="cv.pdf", content=PDF):
    return FilePayload(name=name, content=content, content_type="application/pdf")


class BrokenServer:
    async def delete_resume(self, resume_id):
        raise RuntimeError("server unreachable")

    async def list_files(self):
        raise RuntimeError("server unreachable")


@pytest.fixture
def blobs(resume_store):
    return CountingBlobStore(resume_store)


@pytest.fixture
def manager(data_manager, blobs):
    return ResumeManager(data_manager, blobs)


@pytest.mark.asyncio
async def test_oversized_file_rejected_before_any_upload(manager, blobs, fake_store):
    big = _pdf(content=b"0" * (15 * 1024 * 1024))

    with pytest.raises(UploadValidationError, match="10MB"):
        await manager.upload_resume(big, "Big")

    assert blobs.calls == []
    assert fake_store.save_calls == 0


@pytest.mark.asyncio
async def test_disallowed_type_rejected(manager, blobs):
    exe = FilePayload(name="cv.exe", content=b"MZ", content_type="application/x-msdownload")

    with pytest.raises(UploadValidationError, match="not allowed"):
        await manager.upload_resume(exe, "Bad")

    assert blobs.calls == []


@pytest.mark.asyncio
async def test_cloud_upload_record(manager, resume_store):
    resume = await manager.upload_resume(_pdf("My CV.pdf"), "Main", "backend roles")

    assert resume.storage_type == "cloud"
    assert resume.file_data is None
    assert resume.file_name == "My CV.pdf"
    assert resume.file_size == "20 Bytes"
    assert resume.cloud_file_name.startswith("My_CV_") and resume.cloud_file_name.endswith(".pdf")
    assert resume.cloud_url == resume_store.public_url(resume.cloud_file_name)
    assert await resume_store.download(resume.cloud_file_name) == PDF

    stored = await manager.get_all_resumes()
    assert [r.id for r in stored] == [resume.id]


@pytest.mark.asyncio
async def test_cloud_failure_falls_back_to_inline(data_manager, resume_store):
    blobs = CountingBlobStore(resume_store, fail_upload=lambda key: True)
    manager = ResumeManager(data_manager, blobs)

    resume = await manager.upload_resume(_pdf(), "Fallback")

    assert blobs.calls == ["upload"]
    assert resume.storage_type == "local"
    assert resume.file_data == to_data_url(PDF, "application/pdf")
    assert await manager.read_resume_content(resume) == PDF


@pytest.mark.asyncio
async def test_prefer_local(manager, blobs):
    resume = await manager.upload_resume(_pdf(), "Local", prefer_cloud=False)
    assert resume.storage_type == "local"
    assert blobs.calls == []


@pytest.mark.asyncio
async def test_record_save_failure_removes_uploaded_object(manager, fake_store, resume_store):
    fake_store._put("resumes", [])
    fake_store.fail = True

    with pytest.raises(ResumeStorageError):
        await manager.upload_resume_to_cloud(_pdf(), "Lost", "")

    assert await resume_store.list() == []


STORED = {
    "id": "r1", "name": "CV", "fileName": "cv.pdf", "fileSize": "1 KB",
    "fileType": "application/pdf", "uploadDate": "2024-01-01T00:00:00Z",
    "fileData": "data:application/pdf;base64,JVBERg==",
}


@pytest.mark.asyncio
async def test_unreadable_store_blocks_resume_writes(manager, fake_store, resume_store):
    fake_store._put("resumes", [STORED])
    # reads fail, writes would still go through
    fake_store.fail_reads = True

    with pytest.raises(ResumeStorageError):
        await manager.upload_resume(_pdf(), "New", prefer_cloud=False)
    with pytest.raises(ResumeStorageError):
        await manager.upload_resume(_pdf(), "New")
    assert await manager.update_resume("r1", {"name": "Renamed"}) is False
    assert await manager.delete_resume(Resume.model_validate(STORED)) is False
    assert (await manager.migrate_to_cloud()).failed_count == 1

    assert fake_store.save_calls == 0
    assert fake_store.sections["resumes"]["data"] == [STORED]
    assert await resume_store.list() == []


@pytest.mark.asyncio
async def test_writes_ignore_cached_resume_list(fake_store, resume_store):
    cache = MemoryCache({CACHE_KEY: json.dumps({"resumes": []})})
    manager = ResumeManager(DataManager(fake_store, cache), resume_store)
    fake_store._put("resumes", [STORED])

    new = await manager.upload_resume(_pdf(), "Second", prefer_cloud=False)

    ids = [r["id"] for r in fake_store.sections["resumes"]["data"]]
    assert ids == ["r1", new.id]


@pytest.mark.asyncio
async def test_get_all_resumes_skips_malformed(manager, fake_store):
    good = {
        "id": "r1", "name": "CV", "fileName": "cv.pdf", "fileSize": "1 KB",
        "fileType": "application/pdf", "uploadDate": "2024-01-01T00:00:00Z",
    }
    fake_store._put("resumes", [good, {"id": "r2"}, "junk"])

    resumes = await manager.get_all_resumes()

    assert [r.id for r in resumes] == ["r1"]
    assert resumes[0].storage_type == "local"
    assert await manager.get_resume_by_id("r1") is not None
    assert await manager.get_resume_by_id("r2") is None


@pytest.mark.asyncio
async def test_get_all_resumes_when_section_missing(manager, fake_store):
    fake_store._put("projects", [])
    assert await manager.get_all_resumes() == []

    fake_store._put("resumes", {"not": "a list"})
    assert await manager.get_all_resumes() == []


@pytest.mark.asyncio
async def test_delete_falls_back_to_record_removal(data_manager, blobs, resume_store):
    manager = ResumeManager(data_manager, blobs, server=BrokenServer())
    resume = await manager.upload_resume(_pdf(), "Orphan")

    assert await manager.delete_resume(resume) is True

    assert await manager.get_all_resumes() == []
    # object stays behind in the bucket
    assert [f.name for f in await resume_store.list()] == [resume.cloud_file_name]


@pytest.mark.asyncio
async def test_update_resume_only_touches_editable_fields(manager):
    resume = await manager.upload_resume(_pdf(), "Old name")

    ok = await manager.update_resume(resume.id, {"name": "New", "description": "d", "storageType": "local"})

    assert ok is True
    updated = await manager.get_resume_by_id(resume.id)
    assert updated.name == "New"
    assert updated.description == "d"
    assert updated.storage_type == "cloud"
    assert await manager.update_resume("missing", {"name": "x"}) is False


@pytest.mark.asyncio
async def test_migrate_to_cloud(data_manager, resume_store):
    blobs = CountingBlobStore(resume_store, fail_upload=lambda key: key.startswith("bad_"))
    manager = ResumeManager(data_manager, blobs)
    await manager.upload_resume(_pdf("good.pdf"), "Good", prefer_cloud=False)
    await manager.upload_resume(_pdf("bad.pdf"), "Bad", prefer_cloud=False)

    result = await manager.migrate_to_cloud()

    assert (result.success_count, result.failed_count) == (1, 1)
    by_name = {r.name: r for r in await manager.get_all_resumes()}
    assert by_name["Good"].storage_type == "cloud"
    assert by_name["Good"].file_data is None
    assert await manager.read_resume_content(by_name["Good"]) == PDF
    assert by_name["Bad"].storage_type == "local"
    assert by_name["Bad"].file_data


@pytest.mark.asyncio
async def test_import_existing_cloud_object(manager, blobs):
    cloud = CloudFile(name="old_cv.pdf", size=2048, mime_type="application/pdf",
                      public_url="http://files.test/resumes/old_cv.pdf")

    resume = await manager.upload_resume_from_cloud(cloud, description="legacy")

    assert resume.name == "old_cv.pdf"
    assert resume.file_size == "2 KB"
    assert resume.cloud_url == cloud.public_url
    assert resume.cloud_file_name == "old_cv.pdf"
    assert "upload" not in blobs.calls


@pytest.mark.asyncio
async def test_sync_cloud_files_imports_unknown_objects(manager, resume_store):
    known = await manager.upload_resume(_pdf(), "Known")
    await resume_store.upload(b"stray", "stray.pdf", "application/pdf")

    imported = await manager.sync_cloud_files()
    assert [r.file_name for r in imported] == ["stray.pdf"]

    assert await manager.sync_cloud_files() == []
    assert len(await manager.get_all_resumes()) == 2
    assert known.id in {r.id for r in await manager.get_all_resumes()}


@pytest.mark.asyncio
async def test_read_content_by_url(data_manager, blobs):
    def handler(request):
        assert str(request.url) == "https://cdn.test/cv.pdf"
        return httpx.Response(200, content=PDF)

    async with httpx.AsyncClient(transport=httpx.MockTransport(handler)) as http:
        manager = ResumeManager(data_manager, blobs, http=http)
        resume = Resume(
            id="u1", name="CV", file_name="cv.pdf", file_size="1 KB",
            file_type="application/pdf", upload_date="2024-01-01T00:00:00Z",
            storage_type="cloud", cloud_url="https://cdn.test/cv.pdf",
        )
        assert await manager.read_resume_content(resume) == PDF


@pytest.mark.asyncio
async def test_download_writes_original_name(manager, tmp_path):
    resume = await manager.upload_resume(_pdf("final.pdf"), "Final", prefer_cloud=False)

    path = await manager.download_resume(resume, tmp_path)

    assert path == tmp_path / "final.pdf"
    assert path.read_bytes() == PDF


@pytest.mark.asyncio
async def test_no_content_reference(manager):
    resume = Resume(
        id="n1", name="Empty", file_name="x.pdf", file_size="0 Bytes",
        file_type="application/pdf", upload_date="2024-01-01T00:00:00Z",
    )
    with pytest.raises(ResumeContentError):
        await manager.read_resume_content(resume)
