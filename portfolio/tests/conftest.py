import os

# keep the app's own engine in memory and off the dev database
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["ENV"] = "test"
os.environ.setdefault("JWT_SECRET", "test-secret")

import copy
from datetime import datetime, timezone
from typing import Any, Callable, Dict, List, Optional

import httpx
import pytest
import pytest_asyncio
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from portfolio.client.data_manager import DataManager
from portfolio.client.events import UpdateNotifier
from portfolio.client.http import ApiClient
from portfolio.client.local_cache import MemoryCache
from portfolio.client.section_store import RemoteUnavailable
from portfolio.constants import BULK_SECTIONS
from portfolio.database import get_db, init_db
from portfolio.main import app
from portfolio.schemas import CloudFile, SectionRecord, to_iso
from portfolio.security import create_access_token
from portfolio.services.blob_store import BlobStoreError, LocalBlobStore


# ---------- in-memory doubles ----------
class FakeSectionStore:
    """Dict-backed section store that can be switched off."""

    def __init__(self):
        self.sections: Dict[str, Dict[str, Any]] = {}
        self.fail = False
        self.fail_reads = False
        self.fetch_calls = 0
        self.save_calls = 0

    async def fetch_all(self) -> List[SectionRecord]:
        self.fetch_calls += 1
        if self.fail or self.fail_reads:
            raise RemoteUnavailable("store is down")
        return [
            SectionRecord(section=name, data=copy.deepcopy(row["data"]), updated_at=row["updated_at"])
            for name, row in sorted(self.sections.items())
        ]

    def _put(self, section: str, data: Any) -> None:
        self.sections[section] = {
            "data": copy.deepcopy(data),
            "updated_at": to_iso(datetime.now(timezone.utc)),
        }

    async def save_section(self, section: str, data: Any) -> None:
        self.save_calls += 1
        if self.fail:
            raise RemoteUnavailable("store is down")
        self._put(section, data)

    async def save_all(self, data: Dict[str, Any]) -> None:
        self.save_calls += 1
        if self.fail:
            raise RemoteUnavailable("store is down")
        for section in BULK_SECTIONS:
            if data.get(section) is not None:
                self._put(section, data[section])


class CountingBlobStore:
    """LocalBlobStore that records calls and can be told to fail uploads."""

    def __init__(self, inner: LocalBlobStore, fail_upload: Optional[Callable[[str], bool]] = None):
        self.inner = inner
        self.bucket = inner.bucket
        self.fail_upload = fail_upload
        self.calls: List[str] = []

    def public_url(self, key: str) -> str:
        return self.inner.public_url(key)

    async def upload(self, content: bytes, key: str, content_type: str) -> CloudFile:
        self.calls.append("upload")
        if self.fail_upload and self.fail_upload(key):
            raise BlobStoreError("simulated network error")
        return await self.inner.upload(content, key, content_type)

    async def download(self, key: str) -> bytes:
        self.calls.append("download")
        return await self.inner.download(key)

    async def delete(self, key: str) -> bool:
        self.calls.append("delete")
        return await self.inner.delete(key)

    async def list(self, prefix: str = "") -> List[CloudFile]:
        self.calls.append("list")
        return await self.inner.list(prefix)

    async def aclose(self) -> None:
        await self.inner.aclose()


# ---------- fixtures ----------
@pytest.fixture
def fake_store():
    return FakeSectionStore()


@pytest.fixture
def cache():
    return MemoryCache()


@pytest.fixture
def notifier():
    return UpdateNotifier()


@pytest.fixture
def data_manager(fake_store, cache, notifier):
    return DataManager(fake_store, cache, notifier)


@pytest.fixture
def resume_store(tmp_path):
    return LocalBlobStore(tmp_path / "blobs", "resumes", "http://files.test")


@pytest.fixture
def certificate_store(tmp_path):
    return LocalBlobStore(tmp_path / "blobs", "certificates", "http://files.test")


@pytest.fixture
def session_factory():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    init_db(engine)
    yield sessionmaker(autocommit=False, autoflush=False, bind=engine)
    engine.dispose()


@pytest.fixture
def api_app(session_factory, resume_store, certificate_store):
    def _get_db():
        db = session_factory()
        try:
            yield db
        finally:
            db.close()

    saved = (app.state.resume_store, app.state.certificate_store)
    app.dependency_overrides[get_db] = _get_db
    app.state.resume_store = resume_store
    app.state.certificate_store = certificate_store
    yield app
    app.dependency_overrides.clear()
    app.state.resume_store, app.state.certificate_store = saved


@pytest.fixture
def admin_token():
    return create_access_token()


@pytest.fixture
def auth_headers(admin_token):
    return {"Authorization": f"Bearer {admin_token}"}


@pytest.fixture
def client(api_app):
    return TestClient(api_app)


@pytest_asyncio.fixture
async def api(api_app, admin_token):
    transport = httpx.ASGITransport(app=api_app)
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as http:
        yield ApiClient(http, token=lambda: admin_token)
