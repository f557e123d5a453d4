"""Server-Sent Events encoding for streamed search results.

Each chunk of results is sent as one ``data`` frame holding a JSON array.
The stream ends with a ``done`` event carrying an empty object.
"""

from __future__ import annotations

from collections.abc import AsyncIterator
from typing import Any

import orjson

SSE_HEADERS = {
    "Cache-Control": "no-cache",
    "Connection": "keep-alive",
}


def data_frame(payload: Any) -> bytes:
    """Encode a default-event frame."""
    return b"data: " + orjson.dumps(payload) + b"\n\n"


def done_frame() -> bytes:
    """Encode the terminal ``done`` event."""
    return b"event: done\ndata: {}\n\n"


async def encode_stream(chunks: AsyncIterator[list[Any]]) -> AsyncIterator[bytes]:
    """Turn result chunks into SSE frames, terminated by ``done``."""
    async for chunk in chunks:
        yield data_frame(chunk)
    yield done_frame()
