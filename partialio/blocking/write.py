"""A blocking writer wrapper that breaks writes up according to scripted ops."""

from __future__ import annotations

from collections.abc import Iterable
from typing import Any

from partialio.blocking.ops import BlockingOps
from partialio.ops.kinds import ErrorFactory, make_error
from partialio.ops.partial_op import PartialOp
from partialio.ops.source import OpStats
from partialio.tracing.recorder import TraceRecorder


class PartialWrite:
    """Wraps a writable stream and applies one scripted op per call.

    ``write``, ``flush`` and ``close`` each consume one op. Reads are
    forwarded to the inner stream unrestricted so duplex streams keep
    working.

    Example::

        writer = PartialWrite(io.BytesIO(), [
            Failure(ErrorKind.INTERRUPTED),  # first write fails, nothing written
            Limited(2),                      # second write accepts 2 bytes
        ])
        writer.write(b"hello")   # raises InterruptedError
        writer.write(b"hello")   # returns 2
        writer.write(b"llo")     # ops exhausted: returns 3

    Args:
        inner: The wrapped stream. Needs ``write`` and ``flush``.
        ops: Scripted behaviors, consumed one per call.
        error_factory: Maps a failure classification to the raised exception.
        recorder: Receives one span per decision.
    """

    def __init__(
        self,
        inner: Any,
        ops: Iterable[PartialOp] = (),
        *,
        error_factory: ErrorFactory = make_error,
        recorder: TraceRecorder | None = None,
    ) -> None:
        self._inner = inner
        self._ops = BlockingOps(ops, error_factory=error_factory, recorder=recorder)

    def set_ops(self, ops: Iterable[PartialOp]) -> PartialWrite:
        """Replace the remaining ops with ``ops``."""
        self._ops.replace(ops)
        return self

    @property
    def inner(self) -> Any:
        return self._inner

    def get_ref(self) -> Any:
        """Return the underlying stream."""
        return self._inner

    def into_inner(self) -> Any:
        """Return the underlying stream, detaching it from this wrapper."""
        inner, self._inner = self._inner, None
        return inner

    @property
    def stats(self) -> OpStats:
        return self._ops.stats

    def write(self, data: bytes | bytearray | memoryview) -> int:
        """Write ``data`` under the next op and return the inner byte count.

        Limits count bytes, whatever the item size of ``data``.
        """
        view = memoryview(data).cast("B")

        def inner_write(allowed: int | None) -> int:
            if allowed is None:
                return self._inner.write(view)
            return self._inner.write(view[:allowed])

        return self._ops.call(inner_write, len(view), "write")

    def flush(self) -> None:
        self._ops.call_no_limit(self._inner.flush, "flush")

    def close(self) -> None:
        self._ops.call_no_limit(self._inner.close, "close")

    # Duplex forwarding

    def read(self, size: int = -1) -> bytes:
        return self._inner.read(size)

    def readinto(self, buffer: bytearray | memoryview) -> int:
        return self._inner.readinto(buffer)

    def __enter__(self) -> PartialWrite:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def __repr__(self) -> str:
        return f"PartialWrite(inner={self._inner!r}, ops={self._ops.source!r})"
