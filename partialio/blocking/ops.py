"""The blocking-call policy shared by PartialRead and PartialWrite.

One scripted behavior is consumed per call:

- ``Unlimited`` (or an exhausted source) forwards the call unchanged.
- ``Limited(n)`` forwards the call with the length clipped to ``n``.
- ``Failure(kind)`` raises a fabricated error without touching the inner
  stream.

The result of the inner call, success or exception, is returned to the
caller untouched. Nothing is ever retried here.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from typing import Callable, TypeVar

from partialio.ops.kinds import ErrorFactory, make_error
from partialio.ops.partial_op import Failure, Limited, PartialOp
from partialio.ops.source import OpSource, OpStats
from partialio.tracing.recorder import NullTraceRecorder, TraceRecorder

logger = logging.getLogger(__name__)

T = TypeVar("T")


def error_message(operation: str) -> str:
    return f"error during {operation}, generated by partialio"


class BlockingOps:
    """Applies one behavior from an ``OpSource`` to each synchronous call.

    Args:
        ops: The scripted behaviors.
        error_factory: Maps a failure classification to the raised exception.
        recorder: Receives one span per decision.
    """

    def __init__(
        self,
        ops: Iterable[PartialOp] = (),
        *,
        error_factory: ErrorFactory = make_error,
        recorder: TraceRecorder | None = None,
    ) -> None:
        self._source = OpSource(ops)
        self._error_factory = error_factory
        self._recorder = recorder or NullTraceRecorder()

    @property
    def source(self) -> OpSource:
        return self._source

    @property
    def stats(self) -> OpStats:
        return self._source.stats

    def replace(self, ops: Iterable[PartialOp]) -> None:
        self._source.replace(ops)

    def call(
        self,
        inner_call: Callable[[int | None], T],
        requested: int | None,
        operation: str,
    ) -> T:
        """Run one length-bearing call under the next behavior.

        Args:
            inner_call: Performs the inner call. Receives the clipped length,
                or ``None`` when the call should be forwarded unchanged.
            requested: Bytes the caller asked for. ``None`` or negative means
                "until EOF" for reads.
            operation: Name used in log lines, traces and error messages.
        """
        op = self._source.next()
        if isinstance(op, Limited):
            allowed = op.clip(requested)
            logger.debug("%s: limited to %d of %s bytes", operation, allowed, requested)
            return self._forward(inner_call, allowed, "limited", operation, requested)
        if isinstance(op, Failure):
            raise self._fail(op, operation, requested)
        kind = "passthrough" if op is None else "unlimited"
        logger.debug("%s: %s", operation, kind)
        return self._forward(inner_call, None, kind, operation, requested)

    def call_no_limit(self, inner_call: Callable[[], T], operation: str) -> T:
        """Run one lengthless call (flush, close) under the next behavior.

        ``Limited`` is treated exactly like ``Unlimited``.
        """
        op = self._source.next()
        if isinstance(op, Failure):
            raise self._fail(op, operation, None)
        if op is None:
            kind = "passthrough"
        elif isinstance(op, Limited):
            kind = "limited"
        else:
            kind = "unlimited"
        logger.debug("%s: %s", operation, kind)
        return self._forward(lambda _: inner_call(), None, kind, operation, None)

    def _forward(
        self,
        inner_call: Callable[[int | None], T],
        allowed: int | None,
        kind: str,
        operation: str,
        requested: int | None,
    ) -> T:
        try:
            result = inner_call(allowed)
        except BaseException:
            self._recorder.record(
                kind=kind, operation=operation,
                requested=requested, allowed=allowed, outcome="error",
            )
            raise
        self._recorder.record(
            kind=kind, operation=operation,
            requested=requested, allowed=allowed, outcome="ready",
        )
        return result

    def _fail(self, op: Failure, operation: str, requested: int | None) -> BaseException:
        logger.debug("%s: injecting %s", operation, op.kind.name)
        self._recorder.record(
            kind="failure", operation=operation,
            requested=requested, allowed=0, outcome="error", error=op.kind.value,
        )
        return self._error_factory(op.kind, error_message(operation))
