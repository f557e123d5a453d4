"""Search, detail and hot-list operations.

Search is cache-first. On a miss the aggregator fans out to every active
site and the fully merged result is written back with a TTL chosen from the
release years it contains. Buffered and streaming delivery share the same
aggregate-and-store routine and differ only in the arrival hook.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import AsyncIterator
from typing import Any

from vodhub.cache.base import CacheStore, ResultItem, detail_key, normalize_keyword
from vodhub.cache.policy import choose_search_ttl
from vodhub.config import Settings, settings
from vodhub.errors import UpstreamError, UpstreamMalformedResponse
from vodhub.search.aggregator import Aggregator, ArrivalHook
from vodhub.sources.client import SourceClient
from vodhub.sources.registry import SiteRegistry

logger = logging.getLogger(__name__)


class SearchService:
    """Coordinates the cache store, site registry and aggregator."""

    def __init__(
        self,
        cache: CacheStore,
        registry: SiteRegistry,
        client: SourceClient,
        config: Settings | None = None,
    ):
        self.cache = cache
        self.registry = registry
        self.client = client
        self.aggregator = Aggregator(client)
        self.config = config or settings

        # In-flight buffered aggregations by case-folded keyword
        self._inflight: dict[str, asyncio.Task[list[ResultItem]]] = {}
        # Streaming aggregations that outlive their consumer
        self._background: set[asyncio.Task[list[ResultItem]]] = set()

    # -------------------------------------------------------------------------
    # Search
    # -------------------------------------------------------------------------

    async def search(self, keyword: str) -> list[ResultItem]:
        """Return the full merged result for ``keyword``.

        Concurrent callers that miss the cache for the same keyword share a
        single aggregation.
        """
        cached = await self.cache.get_search(keyword)
        if cached is not None:
            logger.info(f"Search cache hit: {keyword} ({len(cached.data)} items)")
            return cached.data

        key = normalize_keyword(keyword)
        task = self._inflight.get(key)
        if task is None:
            task = asyncio.create_task(
                self._aggregate_and_store(keyword, self.config.search_timeout)
            )
            self._inflight[key] = task
            task.add_done_callback(lambda _: self._inflight.pop(key, None))
        else:
            logger.debug(f"Joining in-flight search for {keyword}")

        results = await asyncio.shield(task)
        logger.info(f"Search returned {len(results)} items for {keyword}")
        return results

    async def stream(self, keyword: str) -> AsyncIterator[list[ResultItem]]:
        """Yield result chunks for ``keyword`` as sites answer.

        A cache hit yields the cached list as one chunk. Otherwise each
        site's items are yielded as they arrive. If the consumer stops
        iterating early, the aggregation still completes and populates the
        cache.
        """
        cached = await self.cache.get_search(keyword)
        if cached is not None:
            logger.info(f"Search cache hit: {keyword} ({len(cached.data)} items)")
            yield cached.data
            return

        chunks: asyncio.Queue[list[ResultItem] | None] = asyncio.Queue()
        task = asyncio.create_task(
            self._aggregate_and_store(keyword, self.config.stream_timeout, chunks.put_nowait)
        )
        self._background.add(task)

        def finish(done: asyncio.Task[list[ResultItem]]) -> None:
            self._background.discard(done)
            if not done.cancelled() and done.exception() is not None:
                logger.error(f"Streaming search failed for {keyword}", exc_info=done.exception())
            chunks.put_nowait(None)

        task.add_done_callback(finish)

        while (chunk := await chunks.get()) is not None:
            yield chunk

    async def _aggregate_and_store(
        self,
        keyword: str,
        timeout: float,
        on_arrival: ArrivalHook | None = None,
    ) -> list[ResultItem]:
        sources = await self.registry.active()
        results = await self.aggregator.aggregate(keyword, sources, timeout, on_arrival)
        await self._store(keyword, results)
        return results

    async def _store(self, keyword: str, results: list[ResultItem]) -> None:
        """Cache a fully merged result."""
        if not results:
            return
        ttl = choose_search_ttl(results, fresh_ttl=self.config.fresh_content_ttl)
        try:
            await self.cache.set_search(keyword, results, ttl)
        except Exception:
            logger.exception(f"Failed to cache search results for {keyword}")
            return
        logger.info(f"Cached search: {keyword} ({len(results)} items) - TTL: {ttl}")

    # -------------------------------------------------------------------------
    # Detail
    # -------------------------------------------------------------------------

    async def detail(self, site_key: str, content_id: str) -> Any:
        """Return the detail payload for an item on one site.

        Raises:
            SourceNotFound: Unknown ``site_key``; no request is made
            UpstreamError: The site failed or answered with markup
        """
        key = detail_key(site_key, content_id)
        cached = await self.cache.get_detail(key)
        if cached:
            return cached

        source = await self.registry.get(site_key)
        payload = await self.client.detail(source, content_id, self.config.detail_timeout)

        if isinstance(payload, str) and payload.strip().startswith("<"):
            raise UpstreamMalformedResponse(source.key, "received markup instead of JSON")

        if isinstance(payload, dict) and ("list" in payload or "data" in payload):
            await self.cache.set_detail(key, payload)
        return payload

    # -------------------------------------------------------------------------
    # Hot list
    # -------------------------------------------------------------------------

    async def hot(self) -> list[ResultItem]:
        """Recently updated items from the first hot site that answers."""
        hot_keys = set(self.config.hot_site_keys)
        sites = [site for site in await self.registry.load() if site.key in hot_keys]

        for site in sites:
            try:
                items = await self.client.hot(site, self.config.hot_timeout)
            except UpstreamError as e:
                logger.debug(f"Hot list unavailable from {site.key}: {e}")
                continue
            if items:
                return items[: self.config.hot_list_size]
        return []

    async def wait_background(self) -> None:
        """Wait for streaming aggregations whose consumers went away."""
        if self._background:
            await asyncio.gather(*list(self._background), return_exceptions=True)
