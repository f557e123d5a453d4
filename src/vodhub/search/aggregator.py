"""Concurrent fan-out across content sites.

All per-site queries are dispatched before any is awaited and joined with
all-settled semantics: every site either contributes its items or is skipped,
and one failing site never aborts the group.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable, Sequence

from vodhub.cache.base import ResultItem
from vodhub.errors import UpstreamError
from vodhub.sources.client import SourceClient
from vodhub.sources.models import SourceConfig

logger = logging.getLogger(__name__)

# Called with each site's stamped items as soon as that site answers
ArrivalHook = Callable[[list[ResultItem]], None]


class Aggregator:
    """Queries many sites for one keyword and merges their results."""

    def __init__(self, client: SourceClient):
        self._client = client

    async def aggregate(
        self,
        keyword: str,
        sources: Sequence[SourceConfig],
        timeout: float,
        on_arrival: ArrivalHook | None = None,
    ) -> list[ResultItem]:
        """Search every active site and merge the results in arrival order.

        Args:
            keyword: Search keyword as typed by the user
            sources: Candidate sites; inactive ones are ignored
            timeout: Per-site timeout in seconds
            on_arrival: Optional hook receiving each non-empty site result

        Returns:
            Merged items from all sites that answered (possibly empty)
        """
        active = [source for source in sources if source.active]
        merged: list[ResultItem] = []

        async def query(source: SourceConfig) -> int:
            items = await self._client.search(source, keyword, timeout)
            if items:
                merged.extend(items)
                if on_arrival is not None:
                    on_arrival(items)
            return len(items)

        tasks = [asyncio.create_task(query(source)) for source in active]
        outcomes = await asyncio.gather(*tasks, return_exceptions=True)

        for source, outcome in zip(active, outcomes):
            if isinstance(outcome, UpstreamError):
                logger.debug(f"Skipping site {source.key}: {outcome}")
            elif isinstance(outcome, BaseException):
                logger.warning(
                    f"Unexpected failure querying site {source.key}",
                    exc_info=(type(outcome), outcome, outcome.__traceback__),
                )

        return merged
