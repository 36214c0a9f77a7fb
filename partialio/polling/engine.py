"""The polling-retry engine shared by every async wrapper.

Each poll of a wrapped operation consumes at most one scripted op:

- ``Failure(kind)`` with any kind but ``WOULD_BLOCK`` raises the fabricated
  error. The inner stream is not polled.
- ``Failure(WOULD_BLOCK)`` is not an error in the poll convention; it means
  "not ready". The engine wakes the current task straight away and returns
  ``PENDING``, so the caller's scheduler polls again on its next turn. No
  external event exists that would otherwise wake it. The inner stream is
  not polled.
- ``Unlimited`` (or an exhausted source) polls the inner stream unchanged.
- ``Limited(n)`` polls the inner stream with the length clipped to
  ``min(n, requested)``.

Whatever the inner poll returns is passed back untouched. That includes
``PENDING``: the inner stream has registered its own wake-up, and waking
here as well would turn a real stall into a busy loop.

The engine keeps no state between polls beyond the source position, so a
poll abandoned halfway leaves nothing to clean up.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from typing import Callable, Optional, TypeVar

from partialio.blocking.ops import error_message
from partialio.ops.kinds import ErrorFactory, make_error
from partialio.ops.partial_op import Failure, Limited, PartialOp
from partialio.ops.source import OpSource, OpStats
from partialio.polling.poll import PENDING, Context, Poll
from partialio.tracing.recorder import NullTraceRecorder, TraceRecorder

logger = logging.getLogger(__name__)

T = TypeVar("T")

InnerPoll = Callable[[Context, Optional[int]], Poll[T]]
"""Polls the inner stream; receives the clipped length or None for "unchanged"."""


class PollingOps:
    """Applies scripted ops to poll-based calls.

    Args:
        ops: The scripted behaviors.
        error_factory: Maps a failure classification to the raised exception.
        recorder: Receives one span per poll.
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

    def poll_impl(
        self,
        cx: Context,
        inner_poll: InnerPoll[T],
        requested: int | None,
        operation: str,
    ) -> Poll[T]:
        """Poll a length-bearing operation (read, write) once.

        Args:
            cx: The caller's context.
            inner_poll: Polls the inner stream with ``(cx, allowed)``, where
                ``allowed`` is ``None`` to forward the request unchanged.
            requested: Bytes the caller asked for.
            operation: Name used in log lines, traces and error messages.
        """
        op = self._source.next()
        if isinstance(op, Failure):
            return self._fail(cx, op, operation, requested)
        if isinstance(op, Limited):
            allowed = op.clip(requested)
            logger.debug("%s: limited to %d of %s bytes", operation, allowed, requested)
            return self._forward(cx, inner_poll, allowed, "limited", operation, requested)
        kind = "passthrough" if op is None else "unlimited"
        logger.debug("%s: %s", operation, kind)
        return self._forward(cx, inner_poll, None, kind, operation, requested)

    def poll_impl_no_limit(
        self,
        cx: Context,
        inner_poll: Callable[[Context], Poll[T]],
        operation: str,
    ) -> Poll[T]:
        """Poll a lengthless operation (flush, close, seek) once.

        ``Limited`` is treated exactly like ``Unlimited``.
        """
        op = self._source.next()
        if isinstance(op, Failure):
            return self._fail(cx, op, operation, None)
        if op is None:
            kind = "passthrough"
        elif isinstance(op, Limited):
            kind = "limited"
        else:
            kind = "unlimited"
        logger.debug("%s: %s", operation, kind)
        return self._forward(
            cx, lambda inner_cx, _: inner_poll(inner_cx), None, kind, operation, None,
        )

    def _forward(
        self,
        cx: Context,
        inner_poll: InnerPoll[T],
        allowed: int | None,
        kind: str,
        operation: str,
        requested: int | None,
    ) -> Poll[T]:
        try:
            result = inner_poll(cx, allowed)
        except BaseException:
            self._recorder.record(
                kind=kind, operation=operation,
                requested=requested, allowed=allowed, outcome="error",
            )
            raise
        outcome = "pending" if result is PENDING else "ready"
        if result is PENDING:
            logger.debug("%s: inner stream not ready", operation)
        self._recorder.record(
            kind=kind, operation=operation,
            requested=requested, allowed=allowed, outcome=outcome,
        )
        return result

    def _fail(
        self,
        cx: Context,
        op: Failure,
        operation: str,
        requested: int | None,
    ) -> Poll[T]:
        if op.is_would_block:
            logger.debug("%s: simulating would-block, waking task for re-poll", operation)
            self._recorder.record(
                kind="would_block", operation=operation,
                requested=requested, allowed=0, outcome="pending",
            )
            cx.waker.wake()
            return PENDING
        logger.debug("%s: injecting %s", operation, op.kind.name)
        self._recorder.record(
            kind="failure", operation=operation,
            requested=requested, allowed=0, outcome="error", error=op.kind.value,
        )
        raise self._error_factory(op.kind, error_message(operation))
