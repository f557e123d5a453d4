"""Item detail endpoint.

GET /api/detail?site_key=<key>&id=<id>

Returns the site's detail payload unchanged. Unknown sites are 404;
upstream failures and markup responses are 500.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, Query
from fastapi.responses import ORJSONResponse

from vodhub.api.deps import get_search_service
from vodhub.search.service import SearchService

router = APIRouter(prefix="/api", tags=["detail"])


@router.get("/detail")
async def detail(
    site_key: str = Query(..., description="Registered site key"),
    id: str = Query(..., description="Item id on that site"),
    service: SearchService = Depends(get_search_service),
) -> ORJSONResponse:
    payload = await service.detail(site_key, id)
    return ORJSONResponse(content=payload)
