"""HTTP client for content-listing sites.

Every site exposes the same query API at its base endpoint:

    {api}?ac=list&wd=<keyword>&out=json     keyword search
    {api}?ac=list&pg=1&h=24&out=json        recently updated ("hot") list
    {api}?ac=detail&ids=<id>&out=json       item detail

Some sites default to XML, so ``out=json`` is always requested explicitly.
All failures are raised as ``UpstreamError`` subclasses.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Any
from urllib.parse import quote, urlencode

import httpx
import orjson

from vodhub.cache.base import ResultItem
from vodhub.errors import (
    UpstreamMalformedResponse,
    UpstreamNetworkError,
    UpstreamTimeout,
)
from vodhub.sources.models import SourceConfig, stamp_items

logger = logging.getLogger(__name__)

JSON_OUTPUT_PARAM = "out=json"


def build_url(api: str, params: dict[str, Any]) -> str:
    """Append query parameters to a site's base endpoint.

    Endpoints that already carry a query string get the parameters joined
    with ``&``.
    """
    connector = "&" if "?" in api else "?"
    url = f"{api}{connector}{urlencode(params, quote_via=quote)}"
    if JSON_OUTPUT_PARAM not in url:
        url += f"&{JSON_OUTPUT_PARAM}"
    return url


def extract_items(payload: Any) -> list[Any]:
    """Item list of a listing response, under ``list`` or ``data``."""
    if not isinstance(payload, dict):
        raise ValueError("payload is not a JSON object")
    items = payload.get("list")
    if items is None:
        items = payload.get("data")
    if not isinstance(items, list):
        raise ValueError("payload has no item list")
    return items


class SourceClient:
    """Queries content sites over a shared ``httpx.AsyncClient``."""

    def __init__(self, client: httpx.AsyncClient):
        self._client = client

    async def fetch(self, source: SourceConfig, params: dict[str, Any], timeout: float) -> Any:
        """GET a site endpoint and decode its JSON body.

        Raises:
            UpstreamTimeout: The call exceeded ``timeout`` seconds
            UpstreamNetworkError: Transport failure or non-success status
            UpstreamMalformedResponse: The body is markup or not JSON
        """
        url = build_url(source.api, params)
        try:
            response = await asyncio.wait_for(self._client.get(url, timeout=timeout), timeout)
        except (asyncio.TimeoutError, httpx.TimeoutException) as e:
            raise UpstreamTimeout(source.key, f"timed out after {timeout}s") from e
        except httpx.HTTPError as e:
            raise UpstreamNetworkError(source.key, f"request failed: {e}") from e

        if not response.is_success:
            raise UpstreamNetworkError(
                source.key, f"HTTP {response.status_code}", status_code=response.status_code
            )

        if response.content.lstrip().startswith(b"<"):
            raise UpstreamMalformedResponse(source.key, "received markup instead of JSON")
        try:
            return orjson.loads(response.content)
        except orjson.JSONDecodeError as e:
            raise UpstreamMalformedResponse(source.key, f"invalid JSON: {e}") from e

    async def fetch_list(
        self, source: SourceConfig, params: dict[str, Any], timeout: float
    ) -> list[ResultItem]:
        """Fetch a listing and stamp its items with the site identity."""
        payload = await self.fetch(source, params, timeout)
        try:
            items = extract_items(payload)
        except ValueError as e:
            raise UpstreamMalformedResponse(source.key, str(e)) from e
        return stamp_items(items, source)

    async def search(self, source: SourceConfig, keyword: str, timeout: float) -> list[ResultItem]:
        return await self.fetch_list(source, {"ac": "list", "wd": keyword}, timeout)

    async def hot(self, source: SourceConfig, timeout: float) -> list[ResultItem]:
        return await self.fetch_list(source, {"ac": "list", "pg": 1, "h": 24}, timeout)

    async def detail(self, source: SourceConfig, content_id: str, timeout: float) -> Any:
        logger.info(f"Requesting detail {content_id} from {source.key}")
        return await self.fetch(source, {"ac": "detail", "ids": content_id}, timeout)
