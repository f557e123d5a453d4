"""Cache layer for vodhub.

Provides a uniform async cache contract over interchangeable backends:
- none: caching disabled
- memory: process-lifetime dictionaries
- json: one JSON document per domain with bounded entry counts
- sqlite: SQLite tables via SQLAlchemy, falling back to memory if unavailable

Search entries expire lazily on read; detail entries have no TTL.
"""

from vodhub.cache.base import (
    CacheStore,
    ResultItem,
    SearchCacheEntry,
    detail_key,
    normalize_keyword,
    now_ms,
)
from vodhub.cache.factory import build_cache_store, create_cache_store
from vodhub.cache.json_file import JsonFileCacheStore
from vodhub.cache.memory import DisabledCacheStore, MemoryCacheStore
from vodhub.cache.policy import choose_search_ttl
from vodhub.cache.sqlite import SqliteCacheStore

__all__ = [
    # Contract
    "CacheStore",
    "ResultItem",
    "SearchCacheEntry",
    "detail_key",
    "normalize_keyword",
    "now_ms",
    # Backends
    "DisabledCacheStore",
    "MemoryCacheStore",
    "JsonFileCacheStore",
    "SqliteCacheStore",
    # Factory and policy
    "build_cache_store",
    "create_cache_store",
    "choose_search_ttl",
]
