"""A poll-based reader wrapper that breaks reads up according to scripted ops."""

from __future__ import annotations

import io

from partialio.polling.base import PartialAsyncBase
from partialio.polling.poll import Context, Poll


class PartialAsyncRead(PartialAsyncBase):
    """Wraps a poll-based reader, consuming one op per poll.

    ``poll_read`` and ``poll_seek`` go through the ops. ``poll_write``,
    ``poll_flush`` and ``poll_close`` are forwarded unrestricted so duplex
    streams keep working.

    Example::

        reader = PartialAsyncRead(MemoryStream(b"hello world"), [
            Failure(ErrorKind.WOULD_BLOCK),
            Limited(5),
            Failure(ErrorKind.INTERRUPTED),
        ])
        assert await reader.read(11) == b"hello"     # polled twice
        with pytest.raises(InterruptedError):
            await reader.read(6)
        assert await reader.read(6) == b" world"

    Args:
        inner: The wrapped stream, implementing ``poll_read`` and optionally
            ``poll_seek``, ``poll_write``, ``poll_flush`` and ``poll_close``.
        ops: Scripted behaviors, consumed one per poll.
        error_factory: Maps a failure classification to the raised exception.
        recorder: Receives one span per poll.
    """

    def poll_read(self, cx: Context, size: int = -1) -> Poll[bytes]:
        inner = self._inner

        def inner_read(inner_cx: Context, allowed: int | None) -> Poll[bytes]:
            return inner.poll_read(inner_cx, size if allowed is None else allowed)

        return self._ops.poll_impl(cx, inner_read, size, "poll_read")

    def poll_seek(self, cx: Context, offset: int, whence: int = io.SEEK_SET) -> Poll[int]:
        inner = self._inner
        return self._ops.poll_impl_no_limit(
            cx, lambda inner_cx: inner.poll_seek(inner_cx, offset, whence), "poll_seek",
        )

    # Duplex forwarding

    def poll_write(self, cx: Context, data: bytes | bytearray | memoryview) -> Poll[int]:
        return self._inner.poll_write(cx, data)

    def poll_flush(self, cx: Context) -> Poll[None]:
        return self._inner.poll_flush(cx)

    def poll_close(self, cx: Context) -> Poll[None]:
        return self._inner.poll_close(cx)

    poll_shutdown = poll_close
