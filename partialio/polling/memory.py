"""An in-memory poll-based stream, the async counterpart of ``io.BytesIO``.

Every call is immediately ready, which makes it the natural inner stream
for partial wrappers: whatever stalls or short counts a test observes came
from the scripted ops, not from the stream.
"""

from __future__ import annotations

import io

from partialio.polling.aio import AsyncStreamMixin
from partialio.polling.poll import Context


class MemoryStream(AsyncStreamMixin):
    """A seekable in-memory byte stream with poll-based calls.

    Reads and writes share one position, as with ``io.BytesIO``.

    Args:
        initial: Initial contents. The position starts at 0.
    """

    def __init__(self, initial: bytes = b"") -> None:
        self._buffer = io.BytesIO(initial)
        self._final: bytes | None = None
        self.flushes = 0

    @property
    def closed(self) -> bool:
        return self._buffer.closed

    def getvalue(self) -> bytes:
        """The full contents, regardless of position. Still available after close."""
        if self._final is not None:
            return self._final
        return self._buffer.getvalue()

    def tell(self) -> int:
        return self._buffer.tell()

    def poll_read(self, cx: Context, size: int = -1) -> bytes:
        return self._buffer.read(size)

    def poll_write(self, cx: Context, data: bytes | bytearray | memoryview) -> int:
        return self._buffer.write(data)

    def poll_flush(self, cx: Context) -> None:
        self._buffer.flush()
        self.flushes += 1

    def poll_close(self, cx: Context) -> None:
        if not self._buffer.closed:
            self._final = self._buffer.getvalue()
            self._buffer.close()

    def poll_seek(self, cx: Context, offset: int, whence: int = io.SEEK_SET) -> int:
        return self._buffer.seek(offset, whence)

    def __repr__(self) -> str:
        if self.closed:
            return "MemoryStream(closed)"
        return f"MemoryStream(len={len(self.getvalue())}, pos={self.tell()})"
