"""A poll-based writer wrapper that breaks writes up according to scripted ops.

This is separate from ``PartialWrite`` because a ``WOULD_BLOCK`` op is not
raised here: the task is woken and ``PENDING`` returned, which makes the
caller write or flush again.
"""

from __future__ import annotations

import io

from partialio.polling.base import PartialAsyncBase
from partialio.polling.poll import Context, Poll


class PartialAsyncWrite(PartialAsyncBase):
    """Wraps a poll-based writer, consuming one op per poll.

    ``poll_write``, ``poll_flush``, ``poll_close`` and ``poll_seek`` go
    through the ops. ``poll_read`` is forwarded unrestricted so duplex
    streams keep working.

    Example::

        writer = PartialAsyncWrite(MemoryStream(), [
            Failure(ErrorKind.WOULD_BLOCK),   # a not-ready state
            Limited(2),                       # only 2 bytes accepted
            Failure(ErrorKind.INVALID_DATA),  # error from the stream
            Unlimited(),                      # as many bytes as possible
        ])
        data = b"\\x01\\x02\\x03\\x04"

        # Polled twice: PENDING first, then 2 bytes.
        assert await writer.write(data) == 2
        with pytest.raises(OSError):
            await writer.write(data[2:])
        assert await writer.write(data[2:]) == 2
        assert writer.get_ref().getvalue() == data

    Args:
        inner: The wrapped stream, implementing ``poll_write``,
            ``poll_flush``, ``poll_close`` and optionally ``poll_read`` and
            ``poll_seek``.
        ops: Scripted behaviors, consumed one per poll.
        error_factory: Maps a failure classification to the raised exception.
        recorder: Receives one span per poll.
    """

    def poll_write(self, cx: Context, data: bytes | bytearray | memoryview) -> Poll[int]:
        view = memoryview(data).cast("B")
        inner = self._inner

        def inner_write(inner_cx: Context, allowed: int | None) -> Poll[int]:
            if allowed is None:
                return inner.poll_write(inner_cx, view)
            return inner.poll_write(inner_cx, view[:allowed])

        return self._ops.poll_impl(cx, inner_write, len(view), "poll_write")

    def poll_flush(self, cx: Context) -> Poll[None]:
        return self._ops.poll_impl_no_limit(cx, self._inner.poll_flush, "poll_flush")

    def poll_close(self, cx: Context) -> Poll[None]:
        return self._ops.poll_impl_no_limit(cx, self._inner.poll_close, "poll_close")

    poll_shutdown = poll_close

    def poll_seek(self, cx: Context, offset: int, whence: int = io.SEEK_SET) -> Poll[int]:
        inner = self._inner
        return self._ops.poll_impl_no_limit(
            cx, lambda inner_cx: inner.poll_seek(inner_cx, offset, whence), "poll_seek",
        )

    # Duplex forwarding

    def poll_read(self, cx: Context, size: int = -1) -> Poll[bytes]:
        return self._inner.poll_read(cx, size)
