"""JSON file cache backend.

Each cache domain is persisted as a single JSON document:

    {data_dir}/cache_search.json   keyword -> {"data": [...], "ttl": s, "ts": ms}
    {data_dir}/cache_detail.json   site_id -> {"data": {...}, "ts": ms}

The whole domain is rewritten after every write, after trimming it to its
capacity by dropping the oldest entries. Missing or unreadable files start
the domain empty.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any

import aiofiles  # type: ignore[import-untyped]
import aiofiles.os  # type: ignore[import-untyped]
import orjson

from vodhub.cache.base import CacheStore, ResultItem, SearchCacheEntry, normalize_keyword
from vodhub.cache.policy import oldest_keys

logger = logging.getLogger(__name__)

SEARCH = "search"
DETAIL = "detail"

DEFAULT_MAX_SEARCH_ENTRIES = 300
DEFAULT_MAX_DETAIL_ENTRIES = 500

_DETAIL_WRAPPER_KEYS = {"data", "ts"}


class JsonFileCacheStore(CacheStore):
    """File-backed cache with bounded entry counts."""

    name = "json"

    def __init__(
        self,
        search_path: str | Path = "cache_search.json",
        detail_path: str | Path = "cache_detail.json",
        max_search_entries: int = DEFAULT_MAX_SEARCH_ENTRIES,
        max_detail_entries: int = DEFAULT_MAX_DETAIL_ENTRIES,
        **kwargs: Any,
    ):
        """Initialize the file-backed store.

        Args:
            search_path: JSON document holding search entries
            detail_path: JSON document holding detail entries
            max_search_entries: Capacity of the search domain
            max_detail_entries: Capacity of the detail domain
        """
        super().__init__(**kwargs)
        self.paths = {SEARCH: Path(search_path), DETAIL: Path(detail_path)}
        self.limits = {SEARCH: max_search_entries, DETAIL: max_detail_entries}
        self._data: dict[str, dict[str, Any]] = {SEARCH: {}, DETAIL: {}}

    async def initialize(self) -> None:
        for domain in (SEARCH, DETAIL):
            self._data[domain] = await self._load(self.paths[domain])
        logger.info(
            f"JSON cache loaded (search: {len(self._data[SEARCH])}, "
            f"detail: {len(self._data[DETAIL])})"
        )

    async def _load(self, path: Path) -> dict[str, Any]:
        if not await aiofiles.os.path.exists(path):
            return {}
        try:
            async with aiofiles.open(path, "rb") as f:
                content = await f.read()
            loaded = orjson.loads(content) if content.strip() else {}
        except (OSError, orjson.JSONDecodeError) as e:
            logger.error(f"Failed to load cache file {path}: {e}")
            return {}
        if not isinstance(loaded, dict):
            logger.error(f"Ignoring cache file {path}: expected a JSON object")
            return {}
        return loaded

    async def _save(self, domain: str) -> None:
        """Trim a domain to its capacity and persist it."""
        entries = self._data[domain]
        evicted = oldest_keys(entries, self.limits[domain])
        for key in evicted:
            del entries[key]
        if evicted:
            logger.debug(f"Evicted {len(evicted)} {domain} cache entries")

        path = self.paths[domain]
        try:
            if not await aiofiles.os.path.exists(path.parent):
                await aiofiles.os.makedirs(path.parent, exist_ok=True)
            async with aiofiles.open(path, "wb") as f:
                await f.write(orjson.dumps(entries))
        except OSError as e:
            logger.error(f"Failed to write cache file {path}: {e}")

    async def get_search(self, keyword: str) -> SearchCacheEntry | None:
        key = normalize_keyword(keyword)
        stored = self._data[SEARCH].get(key)
        if not stored:
            return None

        try:
            entry = SearchCacheEntry.from_stored(key, stored)
        except ValueError as e:
            logger.warning(f"Dropping unreadable search cache entry {key!r}: {e}")
            del self._data[SEARCH][key]
            return None
        if entry.is_expired(self.clock()):
            del self._data[SEARCH][key]
            return None
        return entry

    async def set_search(self, keyword: str, data: list[ResultItem], ttl: int = 0) -> None:
        key = normalize_keyword(keyword)
        entry = SearchCacheEntry(keyword=key, data=data, ttl=ttl, ts=self.clock())
        self._data[SEARCH][key] = entry.to_dict()
        await self._save(SEARCH)

    async def get_detail(self, key: str) -> Any | None:
        stored = self._data[DETAIL].get(key)
        if isinstance(stored, dict) and set(stored) == _DETAIL_WRAPPER_KEYS:
            return stored["data"]
        # Bare payloads from older cache files carry no timestamp
        return stored

    async def set_detail(self, key: str, data: Any) -> None:
        self._data[DETAIL][key] = {"data": data, "ts": self.clock()}
        await self._save(DETAIL)

    async def stats(self) -> dict[str, int]:
        return {"search": len(self._data[SEARCH]), "detail": len(self._data[DETAIL])}
