"""Cache store factory for vodhub."""

from __future__ import annotations

import logging

from vodhub.cache.base import CacheStore
from vodhub.cache.json_file import JsonFileCacheStore
from vodhub.cache.memory import DisabledCacheStore, MemoryCacheStore
from vodhub.cache.sqlite import SqliteCacheStore
from vodhub.config import CacheType, Settings, settings
from vodhub.errors import BackendUnavailable

logger = logging.getLogger(__name__)


def build_cache_store(config: Settings | None = None) -> CacheStore:
    """Construct the configured cache store without initializing it."""
    config = config or settings
    cache_type = config.cache_type

    if cache_type == CacheType.NONE:
        return DisabledCacheStore()
    if cache_type == CacheType.MEMORY:
        return MemoryCacheStore()
    if cache_type == CacheType.JSON:
        return JsonFileCacheStore(
            search_path=config.resolve(config.search_cache_file),
            detail_path=config.resolve(config.detail_cache_file),
            max_search_entries=config.search_cache_max_entries,
            max_detail_entries=config.detail_cache_max_entries,
        )
    if cache_type == CacheType.SQLITE:
        return SqliteCacheStore(db_path=config.resolve(config.cache_db_file))
    raise ValueError("Unsupported cache_type. Supported values: none, memory, json, sqlite.")


async def create_cache_store(config: Settings | None = None) -> CacheStore:
    """Build and initialize the configured cache store.

    A durable backend that cannot start is replaced by the in-memory store
    for the rest of the process lifetime; startup never fails on it.
    """
    store = build_cache_store(config)
    try:
        await store.initialize()
    except BackendUnavailable as e:
        logger.error(f"{e}. Falling back to memory cache.")
        store = MemoryCacheStore()
        await store.initialize()

    logger.info(f"Cache type: {store.name}")
    return store
