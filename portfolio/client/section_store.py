# portfolio/client/section_store.py
"""Remote section store backends the DataManager can be wired to."""
from __future__ import annotations

import asyncio
import logging
from typing import Any, Dict, List, Protocol

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import sessionmaker

from portfolio.client.http import ApiClient, ApiError
from portfolio.database import session_scope
from portfolio.schemas import SectionRecord
from portfolio.services import sections as section_db

log = logging.getLogger(__name__)


class RemoteUnavailable(Exception):
    """The structured store could not be read or written."""


class SectionStore(Protocol):
    async def fetch_all(self) -> List[SectionRecord]: ...

    async def save_section(self, section: str, data: Any) -> None: ...

    async def save_all(self, data: Dict[str, Any]) -> None: ...


class ApiSectionStore:
    """Sections through the portfolio HTTP API."""

    def __init__(self, api: ApiClient):
        self.api = api

    async def fetch_all(self) -> List[SectionRecord]:
        try:
            r = await self.api.request("GET", "/portfolio/sections")
            rows = r.json()
            if not isinstance(rows, list):
                raise ValueError("Unexpected sections payload")
            # pydantic.ValidationError is a ValueError
            return [SectionRecord.model_validate(row) for row in rows]
        except (ApiError, ValueError) as e:
            raise RemoteUnavailable(str(e)) from e

    async def save_section(self, section: str, data: Any) -> None:
        try:
            await self.api.request("POST", "/portfolio/sections", params={"section": section}, json=data)
        except ApiError as e:
            raise RemoteUnavailable(str(e)) from e

    async def save_all(self, data: Dict[str, Any]) -> None:
        try:
            await self.api.request("POST", "/portfolio/data", json={"data": data})
        except ApiError as e:
            raise RemoteUnavailable(str(e)) from e


class SqlSectionStore:
    """Sections straight from the database (scripts, server-side rendering).

    SQLAlchemy sessions are blocking, so each call runs in a worker thread.
    """

    def __init__(self, session_factory: sessionmaker):
        self.session_factory = session_factory

    def _run(self, fn, *args):
        try:
            with session_scope(self.session_factory) as db:
                return fn(db, *args)
        except SQLAlchemyError as e:
            raise RemoteUnavailable(str(e)) from e

    async def fetch_all(self) -> List[SectionRecord]:
        return await asyncio.to_thread(self._run, section_db.fetch_sections)

    async def save_section(self, section: str, data: Any) -> None:
        await asyncio.to_thread(self._run, section_db.upsert_section, section, data)

    async def save_all(self, data: Dict[str, Any]) -> None:
        await asyncio.to_thread(self._run, section_db.upsert_sections, data)
