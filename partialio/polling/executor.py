"""A deterministic, single-threaded executor for poll functions.

The executor is a FIFO run queue. Each scheduling turn pops one task and
polls it once. A task that returns ``PENDING`` is parked until its waker
fires, at which point it goes to the back of the queue. When the queue
drains while tasks are still parked, nothing can ever wake them again and
the executor raises ``StallError``. That makes it a strict checker for the
wake-up contract: a poll function that returns ``PENDING`` without
arranging a wake-up is caught immediately instead of hanging a test.

Example::

    stream = PartialAsyncWrite(MemoryStream(), [Failure(ErrorKind.WOULD_BLOCK)])
    executor = Executor()
    task = executor.spawn(lambda cx: stream.poll_write(cx, b"abcd"))
    executor.run()
    assert task.result() == 4
    assert task.polls == 2
"""

from __future__ import annotations

import logging
from collections import deque
from typing import Any, Callable, Generic, TypeVar

from partialio.polling.poll import PENDING, Context, Poll, Waker

logger = logging.getLogger(__name__)

T = TypeVar("T")

DEFAULT_MAX_TURNS = 100_000


class StallError(RuntimeError):
    """Raised when parked tasks remain but no task is runnable."""

    def __init__(self, tasks: list[Task[Any]]) -> None:
        self.tasks = tasks
        names = ", ".join(task.name for task in tasks)
        super().__init__(f"{len(tasks)} task(s) pending with no wake-up scheduled: {names}")


class Task(Generic[T]):
    """A poll function scheduled on an ``Executor``.

    Attributes:
        name: Identifier for logging and error messages.
        polls: Number of times the poll function has been invoked.
        wakes: Number of wake-ups received.
    """

    def __init__(self, poll: Callable[[Context], Poll[T]], name: str) -> None:
        self.name = name
        self.polls = 0
        self.wakes = 0
        self._poll = poll
        self._done = False
        self._queued = False
        self._value: T | None = None
        self._exception: BaseException | None = None

    @property
    def done(self) -> bool:
        return self._done

    def result(self) -> T:
        """The ready value, or the exception the poll function raised.

        Raises:
            RuntimeError: If the task has not completed.
        """
        if not self._done:
            raise RuntimeError(f"Task {self.name} has not completed")
        if self._exception is not None:
            raise self._exception
        return self._value

    def exception(self) -> BaseException | None:
        if not self._done:
            raise RuntimeError(f"Task {self.name} has not completed")
        return self._exception

    def __repr__(self) -> str:
        if not self._done:
            return f"Task({self.name}, pending, polls={self.polls})"
        if self._exception is not None:
            return f"Task({self.name}, failed={self._exception!r})"
        return f"Task({self.name}, ready={self._value!r})"


class Executor:
    """Runs poll functions to completion, one poll per scheduling turn.

    Args:
        max_turns: Upper bound on turns per ``run()``; exceeding it raises
            RuntimeError. Guards against tasks that wake themselves forever.
    """

    def __init__(self, max_turns: int = DEFAULT_MAX_TURNS) -> None:
        self.max_turns = max_turns
        self._ready: deque[Task[Any]] = deque()
        self._tasks: list[Task[Any]] = []
        self._turns = 0

    @property
    def turns(self) -> int:
        """Total scheduling turns executed."""
        return self._turns

    def spawn(self, poll: Callable[[Context], Poll[T]], name: str | None = None) -> Task[T]:
        """Schedule a poll function; it is first polled on a later turn."""
        task: Task[T] = Task(poll, name or f"task-{len(self._tasks)}")
        self._tasks.append(task)
        self._enqueue(task)
        return task

    def run(self) -> None:
        """Poll tasks until none are runnable.

        Raises:
            StallError: If tasks are still pending once the queue is empty.
            RuntimeError: If ``max_turns`` is exceeded.
        """
        turns_this_run = 0
        while self._ready:
            if turns_this_run >= self.max_turns:
                raise RuntimeError(f"Executor exceeded {self.max_turns} turns")
            task = self._ready.popleft()
            task._queued = False
            if task.done:
                # woken during the poll that completed it
                continue
            self._turns += 1
            turns_this_run += 1
            self._poll_once(task)

        stalled = [task for task in self._tasks if not task.done]
        if stalled:
            logger.error("Executor stalled with %d parked task(s)", len(stalled))
            raise StallError(stalled)

    def _poll_once(self, task: Task[Any]) -> None:
        waker = Waker(lambda: self._wake(task))
        task.polls += 1
        try:
            result = task._poll(Context(waker))
        except Exception as exc:
            logger.debug("[%s] completed with %r after %d poll(s)", task.name, exc, task.polls)
            task._exception = exc
            task._done = True
            return
        if result is PENDING:
            logger.debug("[%s] pending (poll %d)", task.name, task.polls)
            return
        task._value = result
        task._done = True
        logger.debug("[%s] ready after %d poll(s)", task.name, task.polls)

    def _wake(self, task: Task[Any]) -> None:
        task.wakes += 1
        if task.done:
            return
        self._enqueue(task)

    def _enqueue(self, task: Task[Any]) -> None:
        if not task._queued:
            task._queued = True
            self._ready.append(task)


def block_on(poll: Callable[[Context], Poll[T]], max_turns: int = DEFAULT_MAX_TURNS) -> T:
    """Run a single poll function on a fresh executor and return its value."""
    executor = Executor(max_turns=max_turns)
    task = executor.spawn(poll)
    executor.run()
    return task.result()
