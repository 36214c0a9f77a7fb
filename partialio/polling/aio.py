"""Bridge from the poll convention to asyncio coroutines.

``poll_fn`` plays the role of the caller's scheduler: it polls once, and
when the result is ``PENDING`` it parks the coroutine on a future that the
waker resolves. The waker goes through ``loop.call_soon_threadsafe``, so a
wake issued during the poll itself (a simulated would-block) resumes the
coroutine on the loop's next turn, and a wake issued from another thread is
still delivered safely.
"""

from __future__ import annotations

import asyncio
import io
import logging
from typing import Callable, TypeVar

from partialio.ops.kinds import ErrorKind, make_error
from partialio.polling.poll import PENDING, Context, Poll, Waker

logger = logging.getLogger(__name__)

T = TypeVar("T")


def _settle(future: asyncio.Future) -> None:
    if not future.done():
        future.set_result(None)


async def poll_fn(poll: Callable[[Context], Poll[T]]) -> T:
    """Await the ready value of a poll function.

    Exceptions raised by ``poll`` propagate to the awaiting coroutine.
    """
    loop = asyncio.get_running_loop()
    while True:
        woken = loop.create_future()
        # bind the future now; a late wake must not settle a later iteration's future
        waker = Waker(lambda future=woken: loop.call_soon_threadsafe(_settle, future))
        result = poll(Context(waker))
        if result is not PENDING:
            return result
        await woken


class AsyncStreamMixin:
    """Coroutine methods for any object implementing the poll-based stream calls.

    The host class supplies whichever of ``poll_read``, ``poll_write``,
    ``poll_flush``, ``poll_close`` and ``poll_seek`` it supports.
    """

    async def read(self, size: int = -1) -> bytes:
        return await poll_fn(lambda cx: self.poll_read(cx, size))

    async def write(self, data: bytes | bytearray | memoryview) -> int:
        return await poll_fn(lambda cx: self.poll_write(cx, data))

    async def flush(self) -> None:
        await poll_fn(self.poll_flush)

    async def close(self) -> None:
        await poll_fn(self.poll_close)

    async def seek(self, offset: int, whence: int = io.SEEK_SET) -> int:
        return await poll_fn(lambda cx: self.poll_seek(cx, offset, whence))

    async def write_all(self, data: bytes | bytearray | memoryview) -> None:
        """Write every byte of ``data``, retrying interrupted writes.

        Raises:
            OSError: ``WRITE_ZERO`` if the stream accepts zero bytes while
                data remains, or any other error from ``write``.
        """
        view = memoryview(data).cast("B")
        while view:
            try:
                written = await self.write(view)
            except InterruptedError:
                logger.debug("write_all: interrupted, retrying")
                continue
            if written == 0:
                raise make_error(ErrorKind.WRITE_ZERO, "failed to write whole buffer")
            view = view[written:]

    async def read_exact(self, size: int) -> bytes:
        """Read exactly ``size`` bytes, retrying interrupted reads.

        Raises:
            OSError: ``UNEXPECTED_EOF`` if the stream ends first.
        """
        chunks = bytearray()
        while len(chunks) < size:
            try:
                chunk = await self.read(size - len(chunks))
            except InterruptedError:
                logger.debug("read_exact: interrupted, retrying")
                continue
            if not chunk:
                raise make_error(ErrorKind.UNEXPECTED_EOF, "failed to fill whole buffer")
            chunks += chunk
        return bytes(chunks)
