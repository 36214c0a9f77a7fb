"""A blocking reader wrapper that breaks reads up according to scripted ops."""

from __future__ import annotations

from collections.abc import Iterable
from typing import Any

from partialio.blocking.ops import BlockingOps
from partialio.ops.kinds import ErrorFactory, make_error
from partialio.ops.partial_op import PartialOp
from partialio.ops.source import OpStats
from partialio.tracing.recorder import TraceRecorder


class PartialRead:
    """Wraps a readable stream and applies one scripted op per read.

    ``read`` and ``readinto`` each consume one op. Writes and flushes are
    forwarded to the inner stream unrestricted so duplex streams keep
    working.

    Example::

        reader = PartialRead(io.BytesIO(b"hello world"), [
            Limited(3),
            Failure(ErrorKind.WOULD_BLOCK),
        ])
        reader.read(8)   # b"hel"
        reader.read(8)   # raises BlockingIOError
        reader.read(8)   # b"lo world"

    Args:
        inner: The wrapped stream. Needs ``read``; ``readinto`` for
            ``PartialRead.readinto``.
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

    def set_ops(self, ops: Iterable[PartialOp]) -> PartialRead:
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

    def read(self, size: int | None = -1) -> bytes:
        """Read up to ``size`` bytes under the next op.

        A negative or ``None`` size reads until EOF, unless the op limits it.
        """
        def inner_read(allowed: int | None) -> bytes:
            return self._inner.read(size if allowed is None else allowed)

        return self._ops.call(inner_read, size, "read")

    def readinto(self, buffer: bytearray | memoryview) -> int:
        """Read into ``buffer`` under the next op and return the byte count."""
        view = memoryview(buffer).cast("B")

        def inner_readinto(allowed: int | None) -> int:
            if allowed is None:
                return self._inner.readinto(view)
            return self._inner.readinto(view[:allowed])

        return self._ops.call(inner_readinto, len(view), "readinto")

    # Duplex forwarding

    def write(self, data: bytes | bytearray | memoryview) -> int:
        return self._inner.write(data)

    def flush(self) -> None:
        self._inner.flush()

    def close(self) -> None:
        self._inner.close()

    def __enter__(self) -> PartialRead:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def __repr__(self) -> str:
        return f"PartialRead(inner={self._inner!r}, ops={self._ops.source!r})"
