# portfolio/client/local_cache.py
"""Persistent key/value store holding the last known portfolio document."""
from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Dict, Optional, Protocol

log = logging.getLogger(__name__)


class LocalCache(Protocol):
    def get(self, key: str) -> Optional[str]: ...

    def set(self, key: str, value: str) -> None: ...

    def remove(self, key: str) -> None: ...


class MemoryCache:
    def __init__(self, initial: Optional[Dict[str, str]] = None):
        self._items: Dict[str, str] = dict(initial or {})

    def get(self, key: str) -> Optional[str]:
        return self._items.get(key)

    def set(self, key: str, value: str) -> None:
        self._items[key] = value

    def remove(self, key: str) -> None:
        self._items.pop(key, None)


class FileCache:
    """All keys in one JSON file; writes go to a temp file and are renamed into place."""

    def __init__(self, path: Path):
        self.path = Path(path)

    def _load(self) -> Dict[str, str]:
        if not self.path.exists():
            return {}
        try:
            with self.path.open("r", encoding="utf-8") as fh:
                items = json.load(fh)
        except (OSError, ValueError) as e:
            log.warning("Cache file %s unreadable, starting empty: %s", self.path, e)
            return {}
        return items if isinstance(items, dict) else {}

    def _save(self, items: Dict[str, str]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        tmp_path = self.path.with_suffix(self.path.suffix + ".tmp")
        with tmp_path.open("w", encoding="utf-8") as fh:
            json.dump(items, fh, ensure_ascii=False)
        tmp_path.replace(self.path)

    def get(self, key: str) -> Optional[str]:
        value = self._load().get(key)
        return value if isinstance(value, str) else None

    def set(self, key: str, value: str) -> None:
        items = self._load()
        items[key] = value
        self._save(items)

    def remove(self, key: str) -> None:
        items = self._load()
        if items.pop(key, None) is not None:
            self._save(items)
