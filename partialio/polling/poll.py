"""The cooperative poll convention used by the async wrappers.

A poll function takes a ``Context`` and either returns a ready value,
raises (ready with an error), or returns ``PENDING``. Returning ``PENDING``
is a promise: the poll function has arranged for ``cx.waker.wake()`` to be
called once it is worth polling again. A scheduler that never sees a wake
after ``PENDING`` has no reason to poll again, so the task stalls.

Example::

    def poll_hello(cx: Context) -> int | Pending:
        return stream.poll_write(cx, b"hello")

    result = block_on(poll_hello)
"""

from __future__ import annotations

from enum import Enum
from typing import Callable, Literal, TypeVar, Union

T = TypeVar("T")


class Pending(Enum):
    """Marker type for the ``PENDING`` sentinel."""

    PENDING = "PENDING"

    def __repr__(self) -> str:
        return "PENDING"


PENDING = Pending.PENDING
"""Returned by a poll function that is not ready yet."""

Poll = Union[T, Literal[Pending.PENDING]]
"""Type alias for the result of a poll function."""


def is_pending(result: object) -> bool:
    return result is PENDING


class Waker:
    """Handle a pending poll function uses to ask for another poll.

    Args:
        callback: Invoked on every ``wake()``. Schedulers build wakers whose
            callback re-queues the parked task.
    """

    __slots__ = ("_callback", "_wakes")

    def __init__(self, callback: Callable[[], None]) -> None:
        self._callback = callback
        self._wakes = 0

    @property
    def wake_count(self) -> int:
        """Number of times ``wake()`` has been called."""
        return self._wakes

    def wake(self) -> None:
        """Request that the owning task be polled again."""
        self._wakes += 1
        self._callback()

    def __repr__(self) -> str:
        return f"Waker(wakes={self._wakes})"


def noop_waker() -> Waker:
    """A waker whose ``wake()`` only counts."""
    return Waker(lambda: None)


class Context:
    """The per-poll context passed to every poll function.

    Attributes:
        waker: The waker of the task currently being polled.
    """

    __slots__ = ("waker",)

    def __init__(self, waker: Waker) -> None:
        self.waker = waker

    @classmethod
    def noop(cls) -> Context:
        """A context with a counting-only waker, handy for driving polls by hand."""
        return cls(noop_waker())

    def __repr__(self) -> str:
        return f"Context({self.waker!r})"
