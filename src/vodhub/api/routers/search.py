"""Search and hot-list endpoints.

- GET /api/search?wd=<keyword>               -> {"list": [...]}
- GET /api/search?wd=<keyword>&stream=true   -> text/event-stream
- GET /api/hot                               -> {"list": [...]}

Search never fails: sites that error or time out are left out of the result.
"""

from __future__ import annotations

import logging
from typing import Any

from fastapi import APIRouter, Depends, Query
from fastapi.responses import StreamingResponse

from vodhub.api.deps import get_search_service
from vodhub.api.sse import SSE_HEADERS, encode_stream
from vodhub.search.service import SearchService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["search"])


@router.get("/search", response_model=None)
async def search(
    wd: str | None = Query(None, description="Search keyword"),
    stream: str | None = Query(None, description="'true' streams results as SSE"),
    service: SearchService = Depends(get_search_service),
) -> dict[str, Any] | StreamingResponse:
    """Search every active site for a keyword.

    With ``stream=true`` each site's results are pushed as a separate
    ``data`` frame as soon as it answers, followed by a ``done`` event.
    """
    logger.info(f"Search: {wd} (stream: {stream})")
    if not wd:
        return {"list": []}

    if stream == "true":
        return StreamingResponse(
            encode_stream(service.stream(wd)),
            media_type="text/event-stream",
            headers=SSE_HEADERS,
        )

    return {"list": await service.search(wd)}


@router.get("/hot")
async def hot(service: SearchService = Depends(get_search_service)) -> dict[str, Any]:
    """Recently updated items from the configured hot sites."""
    return {"list": await service.hot()}
