"""Tests for search, detail and hot-list orchestration."""

import asyncio
from datetime import datetime
from pathlib import Path

import pytest

from tests.conftest import FakeSites, site, write_registry
from vodhub.cache.memory import MemoryCacheStore
from vodhub.config import Settings
from vodhub.errors import SourceNotFound, UpstreamMalformedResponse, UpstreamNetworkError
from vodhub.search.service import SearchService
from vodhub.sources.client import SourceClient
from vodhub.sources.registry import SiteRegistry


@pytest.fixture
def cache() -> MemoryCacheStore:
    return MemoryCacheStore()


@pytest.fixture
def service(
    cache: MemoryCacheStore,
    registry: SiteRegistry,
    source_client: SourceClient,
    settings: Settings,
) -> SearchService:
    return SearchService(cache, registry, source_client, settings)


def register(path: Path, *keys: str) -> None:
    write_registry(path, [site(key) for key in keys])


def serve_three_sites(fake_sites: FakeSites) -> None:
    """One site times out, one errors and one returns two items."""
    fake_sites.slow("slow.example", delay=5.0)
    fake_sites.json("bad.example", {"error": "boom"}, status_code=500)
    fake_sites.json("ok.example", {"list": [{"vod_id": 1}, {"vod_id": 2}]})


class TestSearch:
    """Test buffered search."""

    async def test_partial_failures(
        self, service: SearchService, fake_sites: FakeSites, registry_path: Path
    ) -> None:
        register(registry_path, "slow", "bad", "ok")
        serve_three_sites(fake_sites)

        results = await service.search("foo")

        assert [(item["vod_id"], item["site_key"]) for item in results] == [(1, "ok"), (2, "ok")]

    async def test_cache_hit_makes_no_requests(
        self,
        service: SearchService,
        cache: MemoryCacheStore,
        fake_sites: FakeSites,
        registry_path: Path,
    ) -> None:
        register(registry_path, "ok")
        await cache.set_search("foo", [{"vod_id": 9}], ttl=0)

        assert await service.search("FOO") == [{"vod_id": 9}]
        assert fake_sites.requests == []

    async def test_results_cached_case_insensitively(
        self,
        service: SearchService,
        cache: MemoryCacheStore,
        fake_sites: FakeSites,
        registry_path: Path,
    ) -> None:
        register(registry_path, "ok")
        fake_sites.json("ok.example", {"list": [{"vod_id": 1}]})

        first = await service.search("Foo")
        second = await service.search("fOO")

        assert first == second
        assert len(fake_sites.requests) == 1
        assert await cache.get_search("foo") is not None

    async def test_empty_results_not_cached(
        self,
        service: SearchService,
        cache: MemoryCacheStore,
        fake_sites: FakeSites,
        registry_path: Path,
    ) -> None:
        register(registry_path, "ok")
        fake_sites.json("ok.example", {"list": []})

        assert await service.search("foo") == []
        assert await cache.get_search("foo") is None

    async def test_recent_release_cached_with_ttl(
        self,
        service: SearchService,
        cache: MemoryCacheStore,
        fake_sites: FakeSites,
        registry_path: Path,
    ) -> None:
        register(registry_path, "ok")
        year = datetime.now().year
        fake_sites.json("ok.example", {"list": [{"vod_id": 1, "vod_year": str(year)}]})

        await service.search("new")

        entry = await cache.get_search("new")
        assert entry is not None
        assert entry.ttl == 3600

    async def test_old_release_cached_forever(
        self,
        service: SearchService,
        cache: MemoryCacheStore,
        fake_sites: FakeSites,
        registry_path: Path,
    ) -> None:
        register(registry_path, "ok")
        fake_sites.json("ok.example", {"list": [{"vod_id": 1, "vod_year": "1999"}]})

        await service.search("old")

        entry = await cache.get_search("old")
        assert entry is not None
        assert entry.ttl == 0

    async def test_concurrent_misses_share_one_aggregation(
        self, service: SearchService, fake_sites: FakeSites, registry_path: Path
    ) -> None:
        register(registry_path, "a", "b")
        fake_sites.slow("a.example", delay=0.05)
        fake_sites.slow("b.example", delay=0.05)

        first, second = await asyncio.gather(service.search("foo"), service.search("FOO"))

        assert first == second
        assert len(first) == 2
        assert sorted(fake_sites.hosts_requested()) == ["a.example", "b.example"]

    async def test_no_active_sites(self, service: SearchService) -> None:
        assert await service.search("foo") == []


class TestStream:
    """Test incremental delivery."""

    async def test_chunks_match_buffered_result(
        self, service: SearchService, fake_sites: FakeSites, registry_path: Path
    ) -> None:
        register(registry_path, "slow", "bad", "ok")
        serve_three_sites(fake_sites)

        chunks = [chunk async for chunk in service.stream("foo")]

        assert len(chunks) == 1
        assert [item["vod_id"] for item in chunks[0]] == [1, 2]
        assert all(item["site_key"] == "ok" for item in chunks[0])

    async def test_streamed_result_is_cached(
        self,
        service: SearchService,
        cache: MemoryCacheStore,
        fake_sites: FakeSites,
        registry_path: Path,
    ) -> None:
        register(registry_path, "a", "b")
        fake_sites.json("a.example", {"list": [{"vod_id": 1}]})
        fake_sites.json("b.example", {"list": [{"vod_id": 2}]})

        chunks = [chunk async for chunk in service.stream("foo")]

        entry = await cache.get_search("foo")
        assert entry is not None
        assert sorted(item["vod_id"] for item in entry.data) == [1, 2]
        assert sorted(item["vod_id"] for chunk in chunks for item in chunk) == [1, 2]

    async def test_cache_hit_yields_single_chunk(
        self,
        service: SearchService,
        cache: MemoryCacheStore,
        fake_sites: FakeSites,
        registry_path: Path,
    ) -> None:
        register(registry_path, "ok")
        await cache.set_search("foo", [{"vod_id": 1}, {"vod_id": 2}])

        chunks = [chunk async for chunk in service.stream("foo")]

        assert chunks == [[{"vod_id": 1}, {"vod_id": 2}]]
        assert fake_sites.requests == []

    async def test_no_results_yields_nothing(
        self, service: SearchService, registry_path: Path
    ) -> None:
        register(registry_path, "down")
        assert [chunk async for chunk in service.stream("foo")] == []

    async def test_abandoned_stream_still_populates_cache(
        self,
        service: SearchService,
        cache: MemoryCacheStore,
        fake_sites: FakeSites,
        registry_path: Path,
    ) -> None:
        """A consumer that stops after the first chunk does not cancel the fan-out."""
        register(registry_path, "early", "late")
        fake_sites.json("early.example", {"list": [{"vod_id": 0}]})
        fake_sites.slow("late.example", delay=0.05)

        stream = service.stream("foo")
        first = await stream.__anext__()
        await stream.aclose()
        await service.wait_background()

        assert first == [{"vod_id": 0, "site_key": "early", "site_name": "Site EARLY"}]
        entry = await cache.get_search("foo")
        assert entry is not None
        assert len(entry.data) == 2


class TestDetail:
    """Test single-site detail lookups."""

    async def test_unknown_site_makes_no_request(
        self, service: SearchService, fake_sites: FakeSites
    ) -> None:
        with pytest.raises(SourceNotFound):
            await service.detail("missing", "1")
        assert fake_sites.requests == []

    async def test_payload_returned_and_cached(
        self, service: SearchService, fake_sites: FakeSites, registry_path: Path
    ) -> None:
        register(registry_path, "ok")
        payload = {"code": 1, "list": [{"vod_id": 7, "vod_play_url": "ep1$http://x"}]}
        fake_sites.json("ok.example", payload)

        assert await service.detail("ok", "7") == payload
        assert await service.detail("ok", "7") == payload
        assert len(fake_sites.requests) == 1

    async def test_cached_detail_survives_site_removal(
        self,
        service: SearchService,
        cache: MemoryCacheStore,
        fake_sites: FakeSites,
    ) -> None:
        await cache.set_detail("gone_7", {"list": [{"vod_id": 7}]})

        assert await service.detail("gone", "7") == {"list": [{"vod_id": 7}]}
        assert fake_sites.requests == []

    async def test_payload_with_empty_list_cached(
        self,
        service: SearchService,
        cache: MemoryCacheStore,
        fake_sites: FakeSites,
        registry_path: Path,
    ) -> None:
        register(registry_path, "ok")
        fake_sites.json("ok.example", {"code": 1, "list": []})

        assert await service.detail("ok", "7") == {"code": 1, "list": []}
        assert await cache.get_detail("ok_7") == {"code": 1, "list": []}
        await service.detail("ok", "7")
        assert len(fake_sites.requests) == 1

    async def test_payload_without_item_field_not_cached(
        self,
        service: SearchService,
        cache: MemoryCacheStore,
        fake_sites: FakeSites,
        registry_path: Path,
    ) -> None:
        register(registry_path, "ok")
        fake_sites.json("ok.example", {"code": 0, "msg": "not found"})

        assert await service.detail("ok", "7") == {"code": 0, "msg": "not found"}
        assert await cache.get_detail("ok_7") is None
        await service.detail("ok", "7")
        assert len(fake_sites.requests) == 2

    async def test_markup_payload_raises(
        self, service: SearchService, fake_sites: FakeSites, registry_path: Path
    ) -> None:
        register(registry_path, "ok")
        fake_sites.text("ok.example", "<html><body>blocked</body></html>")

        with pytest.raises(UpstreamMalformedResponse):
            await service.detail("ok", "7")

    async def test_upstream_failure_propagates(
        self, service: SearchService, fake_sites: FakeSites, registry_path: Path
    ) -> None:
        register(registry_path, "ok")
        fake_sites.json("ok.example", {}, status_code=503)

        with pytest.raises(UpstreamNetworkError):
            await service.detail("ok", "7")


class TestHot:
    """Test the recently-updated list."""

    async def test_first_answering_hot_site_wins(
        self, service: SearchService, fake_sites: FakeSites, registry_path: Path
    ) -> None:
        register(registry_path, "other", "ffzy", "bfzy")
        fake_sites.json("other.example", {"list": [{"vod_id": "x"}]})
        fake_sites.json("bfzy.example", {"list": [{"vod_id": i} for i in range(20)]})

        items = await service.hot()

        assert [item["vod_id"] for item in items] == list(range(12))
        assert all(item["site_key"] == "bfzy" for item in items)
        assert "other.example" not in fake_sites.hosts_requested()

    async def test_no_hot_sites(self, service: SearchService, registry_path: Path) -> None:
        register(registry_path, "other")
        assert await service.hot() == []
