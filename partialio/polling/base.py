"""Shared plumbing for the poll-based partial wrappers."""

from __future__ import annotations

from collections.abc import Iterable
from typing import Any

from partialio.ops.kinds import ErrorFactory, make_error
from partialio.ops.partial_op import PartialOp
from partialio.ops.source import OpStats
from partialio.polling.aio import AsyncStreamMixin
from partialio.polling.engine import PollingOps
from partialio.tracing.recorder import TraceRecorder


class PartialAsyncBase(AsyncStreamMixin):
    """Owns the inner stream and the ``PollingOps`` driving it.

    The wrapper is used by reference for its whole life, so ``set_ops`` may
    be called between polls of one logical operation (for example while a
    coroutine awaiting ``write`` is suspended) and applies from the next poll.
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
        self._ops = PollingOps(ops, error_factory=error_factory, recorder=recorder)

    def set_ops(self, ops: Iterable[PartialOp]):
        """Replace the remaining ops with ``ops``. Returns ``self``."""
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

    def __repr__(self) -> str:
        return f"{type(self).__name__}(inner={self._inner!r}, ops={self._ops.source!r})"
