"""Server-sent-events response helpers shared by streaming routes."""

import asyncio
from contextlib import aclosing
from typing import AsyncIterator, Callable

from fastapi import Request
from fastapi.responses import StreamingResponse

from ...pipeline import StreamEvent, format_sse

DISCONNECT_POLL_INTERVAL_S = 0.5

SSE_HEADERS = {
    "Cache-Control": "no-cache",
    "Connection": "keep-alive",
    "X-Accel-Buffering": "no",
}


async def watch_disconnect(request: Request, cancel: asyncio.Event) -> None:
    """Set `cancel` once the client goes away."""
    while not cancel.is_set():
        if await request.is_disconnected():
            cancel.set()
            return
        await asyncio.sleep(DISCONNECT_POLL_INTERVAL_S)


def sse_response(
    request: Request,
    produce: Callable[[asyncio.Event], AsyncIterator[StreamEvent]],
) -> StreamingResponse:
    """Stream events as `text/event-stream`, each chunk flushed on its own.

    `produce` receives the request's cancel event, which is set when the
    client disconnects.
    """
    cancel = asyncio.Event()

    async def body() -> AsyncIterator[str]:
        watcher = asyncio.create_task(watch_disconnect(request, cancel))
        try:
            async with aclosing(produce(cancel)) as events:
                async for event in events:
                    yield format_sse(event)
        finally:
            watcher.cancel()

    return StreamingResponse(body(), media_type="text/event-stream", headers=SSE_HEADERS)
