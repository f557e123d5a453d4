"""Global pytest configuration and fixtures.

Outbound site traffic is served by ``FakeSites``, an ``httpx.MockTransport``
that routes requests by host and records every request it sees.
"""

from __future__ import annotations

import asyncio
from collections.abc import AsyncIterator, Awaitable, Callable
from pathlib import Path
from typing import Any

import httpx
import orjson
import pytest
import pytest_asyncio

from vodhub.config import Settings
from vodhub.sources.client import SourceClient
from vodhub.sources.registry import SiteRegistry

Handler = Callable[[httpx.Request], Awaitable[httpx.Response]]


class FakeSites:
    """Per-host canned responses for content sites."""

    def __init__(self) -> None:
        self.handlers: dict[str, Handler] = {}
        self.requests: list[httpx.Request] = []

    def add(self, host: str, handler: Handler) -> None:
        self.handlers[host] = handler

    def json(self, host: str, payload: Any, status_code: int = 200) -> None:
        async def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(status_code, json=payload)

        self.add(host, handler)

    def text(self, host: str, body: str, status_code: int = 200) -> None:
        async def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(status_code, text=body)

        self.add(host, handler)

    def slow(self, host: str, delay: float = 5.0) -> None:
        async def handler(request: httpx.Request) -> httpx.Response:
            await asyncio.sleep(delay)
            return httpx.Response(200, json={"list": [{"vod_id": 1}]})

        self.add(host, handler)

    def timeout(self, host: str) -> None:
        async def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ReadTimeout("timed out", request=request)

        self.add(host, handler)

    def transport(self) -> httpx.MockTransport:
        async def handle(request: httpx.Request) -> httpx.Response:
            self.requests.append(request)
            handler = self.handlers.get(request.url.host)
            if handler is None:
                raise httpx.ConnectError("unknown host", request=request)
            return await handler(request)

        return httpx.MockTransport(handle)

    def hosts_requested(self) -> list[str]:
        return [request.url.host for request in self.requests]


def site(key: str, active: bool = True, api: str | None = None) -> dict[str, Any]:
    """A registry record for a fake site served at ``{key}.example``."""
    return {
        "key": key,
        "name": f"Site {key.upper()}",
        "api": api or f"http://{key}.example/api.php/provide/vod/",
        "active": active,
    }


def write_registry(path: Path, sites: list[dict[str, Any]]) -> Path:
    path.write_bytes(orjson.dumps({"sites": sites}))
    return path


@pytest.fixture
def fake_sites() -> FakeSites:
    return FakeSites()


@pytest.fixture
def settings(tmp_path: Path) -> Settings:
    """Settings isolated to a temporary data directory."""
    return Settings(
        data_dir=tmp_path,
        cache_type="memory",
        search_timeout=0.2,
        stream_timeout=0.2,
        detail_timeout=0.2,
        hot_timeout=0.2,
    )


@pytest.fixture
def registry_path(tmp_path: Path) -> Path:
    return write_registry(tmp_path / "db.json", [])


@pytest.fixture
def registry(registry_path: Path) -> SiteRegistry:
    return SiteRegistry(registry_path)


@pytest_asyncio.fixture
async def source_client(fake_sites: FakeSites) -> AsyncIterator[SourceClient]:
    async with httpx.AsyncClient(transport=fake_sites.transport()) as client:
        yield SourceClient(client)
