"""FastAPI dependencies for vodhub."""

from __future__ import annotations

from fastapi import Request

from vodhub.cache.base import CacheStore
from vodhub.search.service import SearchService


def get_search_service(request: Request) -> SearchService:
    """Search service created during application startup."""
    service: SearchService = request.app.state.search_service
    return service


def get_cache_store(request: Request) -> CacheStore:
    """Active cache store (after any startup fallback)."""
    store: CacheStore = request.app.state.cache_store
    return store
