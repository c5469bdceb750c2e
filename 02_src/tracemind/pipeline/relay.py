"""Cancellable consumption of a provider's chunk stream."""

import asyncio
import contextlib
from typing import AsyncIterator

from ..logging_config import get_logger

logger = get_logger(__name__)

CANCELLED_MESSAGE = "request cancelled"
QUEUE_SIZE = 64

_END = object()


class StreamCancelled(Exception):
    """The caller's cancel signal fired before the stream finished."""


class _Failure:
    def __init__(self, error: Exception):
        self.error = error


class ChunkRelay:
    """Drive a provider stream in its own task and hand chunks to the consumer.

    The provider's iterator is opened, advanced and closed inside a single
    producer task. The consumer side races each read against `cancel`, so a
    cancel aborts a pending read immediately instead of after the next chunk.
    The relay is single-pass: once exhausted or closed it cannot restart.
    """

    def __init__(self, chunks: AsyncIterator[str], cancel: asyncio.Event | None = None):
        self._chunks = chunks
        self._cancel = cancel
        self._queue: asyncio.Queue = asyncio.Queue(maxsize=QUEUE_SIZE)
        self._producer: asyncio.Task | None = None
        self._finished = False

    async def _produce(self) -> None:
        try:
            async for chunk in self._chunks:
                await self._queue.put(chunk)
        except Exception as e:
            await self._queue.put(_Failure(e))
            return
        finally:
            await close_stream(self._chunks)
        await self._queue.put(_END)

    def __aiter__(self) -> "ChunkRelay":
        return self

    async def __anext__(self) -> str:
        if self._finished:
            raise StopAsyncIteration
        if self._cancel is not None and self._cancel.is_set():
            raise StreamCancelled(CANCELLED_MESSAGE)
        if self._producer is None:
            self._producer = asyncio.create_task(self._produce())

        item = await self._next_item()
        if item is _END:
            self._finished = True
            raise StopAsyncIteration
        if isinstance(item, _Failure):
            self._finished = True
            raise item.error
        return item

    async def _next_item(self) -> object:
        if self._cancel is None:
            return await self._queue.get()

        getter = asyncio.create_task(self._queue.get())
        waiter = asyncio.create_task(self._cancel.wait())
        try:
            done, _ = await asyncio.wait({getter, waiter}, return_when=asyncio.FIRST_COMPLETED)
        finally:
            waiter.cancel()
            if not getter.done():
                getter.cancel()

        if getter in done:
            return getter.result()
        raise StreamCancelled(CANCELLED_MESSAGE)

    async def aclose(self) -> None:
        """Stop the producer; the provider stream is closed in its task."""
        self._finished = True
        producer = self._producer
        if producer is None:
            await close_stream(self._chunks)
            return
        if not producer.done():
            producer.cancel()
        with contextlib.suppress(asyncio.CancelledError):
            await producer


async def close_stream(chunks: AsyncIterator[str]) -> None:
    """Close a provider stream so its HTTP response is released."""
    aclose = getattr(chunks, "aclose", None)
    if aclose is None:
        return
    try:
        await aclose()
    except RuntimeError as e:
        logger.warning("Could not close provider stream: %s", e)
