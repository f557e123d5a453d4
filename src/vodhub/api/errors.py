"""HTTP error responses for the vodhub API.

Errors are rendered as ``{"error": "<text>"}``, the shape the web front end
expects.
"""

from __future__ import annotations

import logging

from fastapi import HTTPException, Request
from fastapi.responses import JSONResponse

from vodhub.errors import SourceNotFound, UpstreamError

logger = logging.getLogger(__name__)


class ApiError(HTTPException):
    """Base exception for API errors."""

    def __init__(self, status_code: int, text: str):
        self.text = text
        super().__init__(status_code=status_code, detail=text)

    def to_body(self) -> dict[str, str]:
        return {"error": self.text}


class NotFoundError(ApiError):
    """Resource not found (404)."""

    def __init__(self, text: str = "Site not found"):
        super().__init__(status_code=404, text=text)


class SourceError(ApiError):
    """Upstream site failure (500)."""

    def __init__(self, text: str = "Source Error"):
        super().__init__(status_code=500, text=text)


async def api_exception_handler(request: Request, exc: ApiError) -> JSONResponse:
    """Exception handler for API errors."""
    return JSONResponse(status_code=exc.status_code, content=exc.to_body())


async def source_not_found_handler(request: Request, exc: SourceNotFound) -> JSONResponse:
    """Unknown site keys map to 404."""
    return await api_exception_handler(request, NotFoundError())


async def upstream_exception_handler(request: Request, exc: UpstreamError) -> JSONResponse:
    """Upstream failures outside fan-out map to a generic 500."""
    logger.error(f"Upstream error: {exc}")
    return await api_exception_handler(request, SourceError())


async def generic_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Exception handler for unexpected errors."""
    logger.exception("Unhandled error", exc_info=exc)
    return JSONResponse(status_code=500, content={"error": "Internal Server Error"})
