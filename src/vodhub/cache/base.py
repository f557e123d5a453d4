"""Base cache store interface.

Defines the abstract contract shared by every cache backend. Two independent
domains are cached:

- search results, keyed by case-folded keyword, with an optional TTL
- detail payloads, keyed by ``{site_key}_{id}``, without TTL
"""

from __future__ import annotations

import time
from abc import ABC, abstractmethod
from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Any

ResultItem = dict[str, Any]
Clock = Callable[[], int]


def now_ms() -> int:
    """Current wall-clock time in epoch milliseconds."""
    return int(time.time() * 1000)


def normalize_keyword(keyword: str) -> str:
    """Case-fold a search keyword into its cache key."""
    return keyword.lower()


def detail_key(site_key: str, content_id: str) -> str:
    """Composite key for a detail payload."""
    return f"{site_key}_{content_id}"


@dataclass
class SearchCacheEntry:
    """A cached, fully merged search result."""

    keyword: str
    data: list[ResultItem] = field(default_factory=list)
    ttl: int = 0
    ts: int = 0

    def is_expired(self, now: int) -> bool:
        """Entries without TTL or without a timestamp never expire."""
        if self.ttl <= 0 or not self.ts:
            return False
        return now - self.ts > self.ttl * 1000

    def to_dict(self) -> dict[str, Any]:
        """Serialize to the persisted wrapper format."""
        return {"data": self.data, "ttl": self.ttl, "ts": self.ts}

    @classmethod
    def from_stored(cls, keyword: str, stored: Any) -> SearchCacheEntry:
        """Build an entry from persisted data.

        Older cache files stored the bare item list without a TTL wrapper;
        those are read as never expiring.

        Raises:
            ValueError: If the stored value is not a readable entry
        """
        if isinstance(stored, list):
            return cls(keyword=keyword, data=stored, ttl=0, ts=0)
        if not isinstance(stored, dict):
            raise ValueError(f"unreadable cache entry of type {type(stored).__name__}")

        data = stored.get("data") or []
        if not isinstance(data, list):
            raise ValueError("cache entry data is not a list")
        try:
            ttl = int(stored.get("ttl") or 0)
            ts = int(stored.get("ts") or 0)
        except (TypeError, ValueError) as e:
            raise ValueError(f"cache entry has invalid ttl/ts: {e}") from e
        return cls(keyword=keyword, data=data, ttl=ttl, ts=ts)


class CacheStore(ABC):
    """Abstract base class for cache backends."""

    #: Backend name reported in health output and logs
    name: str = "base"

    def __init__(self, clock: Clock = now_ms):
        self.clock = clock

    async def initialize(self) -> None:
        """Prepare backing storage. Called once at startup."""

    async def close(self) -> None:
        """Release backend resources."""

    @abstractmethod
    async def get_search(self, keyword: str) -> SearchCacheEntry | None:
        """Return the live search entry for ``keyword``.

        Returns:
            The cached entry, or None if absent or expired
        """
        ...

    @abstractmethod
    async def set_search(self, keyword: str, data: list[ResultItem], ttl: int = 0) -> None:
        """Replace the search entry for ``keyword``.

        Args:
            keyword: Search keyword (case-insensitive)
            data: Fully merged result items
            ttl: Lifetime in seconds, 0 for no expiry
        """
        ...

    @abstractmethod
    async def get_detail(self, key: str) -> Any | None:
        """Return the cached detail payload for a composite key."""
        ...

    @abstractmethod
    async def set_detail(self, key: str, data: Any) -> None:
        """Store a detail payload under a composite key."""
        ...

    async def stats(self) -> dict[str, int]:
        """Entry counts per cache domain."""
        return {"search": 0, "detail": 0}
