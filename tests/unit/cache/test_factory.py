"""Tests for cache store selection."""

from pathlib import Path

import pytest

from vodhub.cache.factory import build_cache_store, create_cache_store
from vodhub.cache.json_file import JsonFileCacheStore
from vodhub.cache.memory import DisabledCacheStore, MemoryCacheStore
from vodhub.cache.sqlite import SqliteCacheStore
from vodhub.config import Settings


class TestBuildCacheStore:
    """Test backend construction from settings."""

    @pytest.mark.parametrize(
        ("cache_type", "expected"),
        [
            ("none", DisabledCacheStore),
            ("disabled", DisabledCacheStore),
            ("memory", MemoryCacheStore),
            ("in-memory", MemoryCacheStore),
            ("json", JsonFileCacheStore),
            ("file-backed", JsonFileCacheStore),
            ("sqlite", SqliteCacheStore),
            ("embedded-relational", SqliteCacheStore),
        ],
    )
    def test_backend_for_cache_type(self, tmp_path: Path, cache_type: str, expected: type) -> None:
        store = build_cache_store(Settings(data_dir=tmp_path, cache_type=cache_type))
        assert isinstance(store, expected)

    def test_json_paths_resolved_against_data_dir(self, tmp_path: Path) -> None:
        store = build_cache_store(Settings(data_dir=tmp_path, cache_type="json"))
        assert isinstance(store, JsonFileCacheStore)
        assert store.paths["search"] == tmp_path / "cache_search.json"
        assert store.paths["detail"] == tmp_path / "cache_detail.json"
        assert store.limits == {"search": 300, "detail": 500}


class TestCreateCacheStore:
    """Test initialization and fallback."""

    async def test_sqlite_initialized(self, tmp_path: Path) -> None:
        store = await create_cache_store(Settings(data_dir=tmp_path, cache_type="sqlite"))
        try:
            assert isinstance(store, SqliteCacheStore)
            assert (tmp_path / "cache.db").exists()
        finally:
            await store.close()

    async def test_sqlite_failure_falls_back_to_memory(self, tmp_path: Path) -> None:
        """An unusable SQLite database degrades to the memory store."""
        blocker = tmp_path / "blocker"
        blocker.write_text("")

        store = await create_cache_store(Settings(data_dir=blocker, cache_type="sqlite"))

        assert isinstance(store, MemoryCacheStore)
        await store.set_search("foo", [{"vod_id": 1}])
        assert await store.get_search("foo") is not None
