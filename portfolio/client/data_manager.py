# portfolio/client/data_manager.py
"""Section-level reads and writes of the portfolio document.

Reads fall back remote store -> local cache -> seeded defaults, so a page
can always render something. Writes go to the remote store first; the
local cache is only a mirror and is never pushed back to the store.
"""
from __future__ import annotations

import copy
import json
import logging
from datetime import date
from pathlib import Path
from typing import IO, Any, Dict, Optional, Union

from portfolio import data as seed
from portfolio.client.events import DataUpdated, UpdateNotifier
from portfolio.client.local_cache import LocalCache
from portfolio.client.section_store import RemoteUnavailable, SectionStore
from portfolio.constants import CACHE_KEY, SECTIONS
from portfolio.schemas import PortfolioData, assemble_portfolio, utc_now_iso

log = logging.getLogger(__name__)


def get_default_data() -> Dict[str, Any]:
    return {
        "personalInfo": copy.deepcopy(seed.PERSONAL_INFO),
        "technicalSkills": copy.deepcopy(seed.TECHNICAL_SKILLS),
        "projects": copy.deepcopy(seed.PROJECTS),
        "experience": copy.deepcopy(seed.EXPERIENCE),
        "education": copy.deepcopy(seed.EDUCATION),
        "certifications": copy.deepcopy(seed.CERTIFICATIONS),
        "achievements": copy.deepcopy(seed.ACHIEVEMENTS),
        "quickFacts": copy.deepcopy(seed.QUICK_FACTS),
        "currentFocus": copy.deepcopy(seed.CURRENT_FOCUS),
        "resumes": [],
        "lastUpdated": utc_now_iso(),
    }


def _duplicate_ids(items: Any) -> set:
    if not isinstance(items, list):
        return set()
    seen, dupes = set(), set()
    for it in items:
        if not isinstance(it, dict) or it.get("id") is None:
            continue
        ident = it["id"]
        if ident in seen:
            dupes.add(ident)
        seen.add(ident)
    return dupes


class DataManager:
    def __init__(
        self,
        store: SectionStore,
        cache: LocalCache,
        notifier: Optional[UpdateNotifier] = None,
    ):
        self.store = store
        self.cache = cache
        self.notifier = notifier or UpdateNotifier()

    # ---------- cache helpers ----------
    def _read_cache(self) -> Optional[Dict[str, Any]]:
        try:
            raw = self.cache.get(CACHE_KEY)
            if not raw:
                return None
            doc = json.loads(raw)
        except Exception as e:
            log.warning("Local cache unreadable: %s", e)
            return None
        return doc if isinstance(doc, dict) else None

    def _write_cache(self, doc: Dict[str, Any]) -> None:
        try:
            self.cache.set(CACHE_KEY, json.dumps(doc, ensure_ascii=False))
        except Exception as e:
            # mirror only; the remote write already succeeded
            log.warning("Local cache backup update failed: %s", e)

    # ---------- reads ----------
    get_default_data = staticmethod(get_default_data)

    async def get_portfolio_data(self) -> Dict[str, Any]:
        try:
            records = await self.store.fetch_all()
            if records:
                doc = assemble_portfolio(records)
                self._write_cache(doc)
                return doc
            log.warning("No data returned from remote store")
        except RemoteUnavailable as e:
            log.warning("Remote load failed, trying local cache: %s", e)
        except Exception:
            log.exception("Unexpected error loading from remote store")

        cached = self._read_cache()
        if cached is not None:
            log.info("Loaded portfolio data from local cache fallback")
            return cached

        log.warning("Using default data as final fallback")
        return get_default_data()

    def get_portfolio_data_sync(self) -> Dict[str, Any]:
        """Cache-only read for first paint; never touches the network."""
        cached = self._read_cache()
        return cached if cached is not None else get_default_data()

    async def fetch_section(self, section: str) -> Any:
        """Stored value of one section, straight from the remote store.

        No cache or default fallback: read-modify-write callers must not
        build on a stale base. Raises RemoteUnavailable.
        """
        records = await self.store.fetch_all()
        return next((r.data for r in records if r.section == section), None)

    # ---------- writes ----------
    def record_removed(self, section: str, item_id: str) -> None:
        """Mirror an item removal already committed remotely, then notify."""
        timestamp = utc_now_iso()
        doc = self._read_cache()
        if doc is not None and isinstance(doc.get(section), list):
            doc[section] = [
                it for it in doc[section]
                if not (isinstance(it, dict) and it.get("id") == item_id)
            ]
            doc["lastUpdated"] = timestamp
            self._write_cache(doc)
        self.notifier.emit(DataUpdated(section=section, timestamp=timestamp))

    async def update_portfolio_section(self, section: str, data: Any) -> bool:
        if section not in SECTIONS:
            log.error("Refusing to update unknown section %r", section)
            return False
        dupes = _duplicate_ids(data)
        if dupes:
            log.error("Section %s has duplicate ids %s; not saved", section, sorted(map(str, dupes)))
            return False

        try:
            await self.store.save_section(section, data)
        except RemoteUnavailable as e:
            log.error("Failed to update section %s: %s", section, e)
            return False
        except Exception:
            log.exception("Error updating %s section", section)
            return False

        timestamp = utc_now_iso()
        doc = self._read_cache() or get_default_data()
        doc[section] = data
        doc["lastUpdated"] = timestamp
        self._write_cache(doc)

        self.notifier.emit(DataUpdated(section=section, timestamp=timestamp))
        log.info("Section %s updated successfully", section)
        return True

    async def export_data(self, directory: Union[str, Path] = ".") -> Optional[Path]:
        """Write `portfolio_backup_<date>.json` into `directory`; None on failure."""
        doc = await self.get_portfolio_data()
        path = Path(directory) / f"portfolio_backup_{date.today().isoformat()}.json"
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_text(json.dumps(doc, indent=2, ensure_ascii=False), encoding="utf-8")
        except OSError as e:
            log.error("Export failed: %s", e)
            return None
        log.info("Exported portfolio data to %s", path)
        return path

    async def import_data(self, file: Union[str, Path, IO]) -> bool:
        try:
            if isinstance(file, (str, Path)):
                text = Path(file).read_text(encoding="utf-8")
            else:
                text = file.read()
                if isinstance(text, bytes):
                    text = text.decode("utf-8")
            doc = json.loads(text)
            if not isinstance(doc, dict):
                raise ValueError("backup must be a JSON object")
            PortfolioData.model_validate(doc)
        except (OSError, ValueError) as e:
            log.error("Import failed: %s", e)
            return False

        try:
            await self.store.save_all(doc)
        except RemoteUnavailable as e:
            log.error("Import save failed: %s", e)
            return False
        except Exception:
            log.exception("Import save failed")
            return False

        self._write_cache(doc)
        self.notifier.emit(DataUpdated(section=None, timestamp=utc_now_iso()))
        return True

    async def reset_to_defaults(self) -> bool:
        try:
            await self.store.save_all(get_default_data())
        except RemoteUnavailable as e:
            log.error("Reset to defaults failed: %s", e)
            return False
        except Exception:
            log.exception("Reset to defaults failed")
            return False
        try:
            self.cache.remove(CACHE_KEY)
        except Exception as e:
            log.warning("Could not clear local cache: %s", e)
        self.notifier.emit(DataUpdated(section=None, timestamp=utc_now_iso()))
        return True
