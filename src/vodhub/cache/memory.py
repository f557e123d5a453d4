"""Process-local cache backends.

``DisabledCacheStore`` never stores anything. ``MemoryCacheStore`` keeps both
cache domains in dictionaries for the lifetime of the process without any
capacity bound; expired search entries are dropped when read.
"""

from __future__ import annotations

from typing import Any

from vodhub.cache.base import CacheStore, ResultItem, SearchCacheEntry, normalize_keyword


class DisabledCacheStore(CacheStore):
    """No-op cache: every read misses, every write is ignored."""

    name = "none"

    async def get_search(self, keyword: str) -> SearchCacheEntry | None:
        return None

    async def set_search(self, keyword: str, data: list[ResultItem], ttl: int = 0) -> None:
        return None

    async def get_detail(self, key: str) -> Any | None:
        return None

    async def set_detail(self, key: str, data: Any) -> None:
        return None


class MemoryCacheStore(CacheStore):
    """In-memory cache backend."""

    name = "memory"

    def __init__(self, **kwargs: Any) -> None:
        super().__init__(**kwargs)
        self._search: dict[str, SearchCacheEntry] = {}
        self._detail: dict[str, Any] = {}

    async def get_search(self, keyword: str) -> SearchCacheEntry | None:
        key = normalize_keyword(keyword)
        entry = self._search.get(key)
        if entry is None:
            return None
        if entry.is_expired(self.clock()):
            del self._search[key]
            return None
        return entry

    async def set_search(self, keyword: str, data: list[ResultItem], ttl: int = 0) -> None:
        key = normalize_keyword(keyword)
        self._search[key] = SearchCacheEntry(keyword=key, data=data, ttl=ttl, ts=self.clock())

    async def get_detail(self, key: str) -> Any | None:
        return self._detail.get(key)

    async def set_detail(self, key: str, data: Any) -> None:
        self._detail[key] = data

    async def stats(self) -> dict[str, int]:
        return {"search": len(self._search), "detail": len(self._detail)}
