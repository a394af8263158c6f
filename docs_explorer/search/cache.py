# docs_explorer/search/cache.py
"""
In-memory cache of scraped corpora, one entry per source.

Entries expire after ``ttl`` seconds measured with an injectable clock, so
tests can move time forward without sleeping.
"""
from __future__ import annotations

import json
import time
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Callable, Dict, Iterable, Optional, Union

from docs_explorer.logger import get_logger

logger = get_logger("cache")

Clock = Callable[[], float]


@dataclass(slots=True)
class CacheEntry:
    data: Dict[str, Any]
    loaded_at: float


class DocCache:
    """Loads ``<data_dir>/<key>-docs/<key>-docs.json`` on demand and keeps it for ``ttl`` seconds."""

    def __init__(
        self,
        data_dir: Union[str, Path],
        sources: Iterable[str],
        ttl: float = 3600.0,
        clock: Clock = time.monotonic,
    ) -> None:
        self.data_dir = Path(data_dir)
        self.sources: tuple[str, ...] = tuple(sources)
        self.ttl = ttl
        self.clock = clock
        self._entries: Dict[str, CacheEntry] = {}

    def path_for(self, key: str) -> Path:
        return self.data_dir / f"{key}-docs" / f"{key}-docs.json"

    def load(self, key: str) -> Optional[Dict[str, Any]]:
        """Corpus for source *key*, or None when it is unknown or not scraped yet."""
        now = self.clock()
        entry = self._entries.get(key)
        if entry is not None and now - entry.loaded_at < self.ttl:
            return entry.data

        if key not in self.sources:
            logger.error("Unknown documentation source: %s", key)
            return None

        path = self.path_for(key)
        if not path.parent.is_dir():
            logger.info("Documentation directory not found: %s", path.parent)
            return None

        try:
            data = json.loads(path.read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError) as exc:
            logger.error("Error loading %s documentation: %s", key, exc)
            return None
        if not isinstance(data, dict):
            logger.error("Error loading %s documentation: top level is not an object", key)
            return None

        self._entries[key] = CacheEntry(data=data, loaded_at=now)
        return data

    def loaded_at(self, key: str) -> Optional[float]:
        entry = self._entries.get(key)
        return None if entry is None else entry.loaded_at

    def invalidate(self, key: Optional[str] = None) -> None:
        if key is None:
            self._entries.clear()
        else:
            self._entries.pop(key, None)
