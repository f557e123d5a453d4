"""Health check endpoints for vodhub.

- /health/live  - Liveness probe (always OK while the process runs)
- /health/ready - Readiness probe (reports the active cache backend)
"""

from __future__ import annotations

import time
from typing import Any

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from vodhub.api.deps import get_cache_store
from vodhub.cache.base import CacheStore

router = APIRouter(tags=["health"])


@router.get("/health/live")
async def live() -> dict[str, str]:
    """Liveness probe."""
    return {"status": "ok"}


@router.get("/health/ready")
async def ready(cache: CacheStore = Depends(get_cache_store)) -> JSONResponse:
    """Readiness probe.

    Returns 200 with cache backend statistics, or 503 if the cache store
    cannot be queried.
    """
    start = time.monotonic()
    try:
        counts = await cache.stats()
    except Exception as e:
        return JSONResponse(
            status_code=503,
            content={"status": "unhealthy", "cache": {"backend": cache.name, "message": str(e)}},
        )

    checks: dict[str, Any] = {
        "backend": cache.name,
        "entries": counts,
        "latency_ms": round((time.monotonic() - start) * 1000, 2),
    }
    return JSONResponse(content={"status": "healthy", "cache": checks})
