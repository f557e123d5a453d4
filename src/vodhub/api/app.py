"""FastAPI application factory for vodhub.

Creates the application with:
- Search (buffered and SSE streaming), detail and hot-list endpoints
- Health probes
- Lifecycle management for the cache store and the outbound HTTP client
- Correlation IDs for request logging
- ORJSON for fast JSON serialization
"""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator, cast

import httpx
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import ORJSONResponse
from starlette.types import ExceptionHandler

from vodhub.api.errors import (
    ApiError,
    api_exception_handler,
    generic_exception_handler,
    source_not_found_handler,
    upstream_exception_handler,
)
from vodhub.api.middleware import CorrelationMiddleware
from vodhub.api.routers import detail, health, search
from vodhub.cache import create_cache_store
from vodhub.config import Settings, settings
from vodhub.errors import SourceNotFound, UpstreamError
from vodhub.observability import configure_logging
from vodhub.search.service import SearchService
from vodhub.sources.client import SourceClient
from vodhub.sources.registry import SiteRegistry

logger = logging.getLogger(__name__)


def create_app(
    config: Settings | None = None,
    transport: httpx.AsyncBaseTransport | None = None,
) -> FastAPI:
    """Create and configure the FastAPI application.

    Args:
        config: Settings to use instead of the environment-derived defaults
        transport: Optional httpx transport for outbound site requests
    """
    config = config or settings

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        """Manage application lifecycle.

        On startup:
        - Configure logging
        - Make sure the site registry document exists
        - Initialize the cache store (falling back to memory if needed)
        - Open the shared outbound HTTP client

        On shutdown:
        - Close the HTTP client
        - Close the cache store
        """
        configure_logging(json_format=config.env != "dev", level=config.log_level)
        logger.info(f"Starting vodhub ({config.env})")

        registry = SiteRegistry(
            config.resolve(config.sites_file),
            template_path=config.resolve(config.sites_template_file),
        )
        registry.ensure_exists()

        cache_store = await create_cache_store(config)
        http_client = httpx.AsyncClient(transport=transport, follow_redirects=True)

        search_service = SearchService(
            cache=cache_store,
            registry=registry,
            client=SourceClient(http_client),
            config=config,
        )
        app.state.cache_store = cache_store
        app.state.search_service = search_service
        logger.info("vodhub startup complete")

        yield

        logger.info("Shutting down vodhub")
        # Abandoned streams still own site calls and a cache write
        await search_service.wait_background()
        await http_client.aclose()
        await cache_store.close()
        logger.info("vodhub shutdown complete")

    app = FastAPI(
        title="vodhub",
        description="Aggregating search across content-listing sites",
        version="0.1.0",
        default_response_class=ORJSONResponse,
        lifespan=lifespan,
    )

    app.add_middleware(CorrelationMiddleware)
    app.add_middleware(CORSMiddleware, allow_origins=["*"], allow_methods=["*"])

    app.add_exception_handler(ApiError, cast(ExceptionHandler, api_exception_handler))
    app.add_exception_handler(SourceNotFound, cast(ExceptionHandler, source_not_found_handler))
    app.add_exception_handler(UpstreamError, cast(ExceptionHandler, upstream_exception_handler))
    app.add_exception_handler(Exception, cast(ExceptionHandler, generic_exception_handler))

    app.include_router(health.router)
    app.include_router(search.router)
    app.include_router(detail.router)

    return app
