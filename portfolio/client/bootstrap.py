# portfolio/client/bootstrap.py
"""Wire the managers once, at startup, against the chosen backends."""
from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Optional

import httpx

from portfolio import config
from portfolio.client.auth import AdminSession
from portfolio.client.data_manager import DataManager
from portfolio.client.events import UpdateNotifier
from portfolio.client.http import ApiClient
from portfolio.client.local_cache import FileCache
from portfolio.client.resume_manager import ApiResumeServer, LocalResumeServer, ResumeManager
from portfolio.client.section_store import ApiSectionStore, SqlSectionStore
from portfolio.services.blob_store import build_blob_store


@dataclass
class Managers:
    data: DataManager
    resumes: ResumeManager
    session: AdminSession
    api: Optional[ApiClient] = None

    async def aclose(self) -> None:
        await self.resumes.store.aclose()
        if self.api is not None:
            await self.api.aclose()


def connect_api(
    base_url: str = config.PORTFOLIO_API_URL,
    cache_path: Path = config.PORTFOLIO_CACHE_PATH,
    client: Optional[httpx.AsyncClient] = None,
) -> Managers:
    """Managers backed by the HTTP API; uploads go straight to the bucket with the anon key."""
    cache = FileCache(cache_path)
    session = AdminSession(cache)
    api = ApiClient(client, base_url=base_url, token=session.token)
    data = DataManager(ApiSectionStore(api), cache, UpdateNotifier())
    store = build_blob_store(config.RESUME_BUCKET, api_key=config.SUPABASE_ANON_KEY or None)
    resumes = ResumeManager(data, store, server=ApiResumeServer(api))
    return Managers(data=data, resumes=resumes, session=session, api=api)


def connect_database(cache_path: Path = config.PORTFOLIO_CACHE_PATH) -> Managers:
    """Managers talking to the database directly (server-side scripts)."""
    from portfolio.database import SessionLocal, init_db

    init_db()
    cache = FileCache(cache_path)
    data = DataManager(SqlSectionStore(SessionLocal), cache, UpdateNotifier())
    store = build_blob_store(config.RESUME_BUCKET)
    resumes = ResumeManager(data, store, server=LocalResumeServer(SessionLocal, store))
    return Managers(data=data, resumes=resumes, session=AdminSession(cache))
