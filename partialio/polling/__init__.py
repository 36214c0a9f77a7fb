"""Poll-based partial wrappers and the schedulers that drive them."""

from partialio.polling.aio import AsyncStreamMixin, poll_fn
from partialio.polling.async_read import PartialAsyncRead
from partialio.polling.async_write import PartialAsyncWrite
from partialio.polling.engine import PollingOps
from partialio.polling.executor import Executor, StallError, Task, block_on
from partialio.polling.memory import MemoryStream
from partialio.polling.poll import (
    PENDING,
    Context,
    Pending,
    Poll,
    Waker,
    is_pending,
    noop_waker,
)

__all__ = [
    "AsyncStreamMixin",
    "Context",
    "Executor",
    "MemoryStream",
    "PENDING",
    "PartialAsyncRead",
    "PartialAsyncWrite",
    "Pending",
    "Poll",
    "PollingOps",
    "StallError",
    "Task",
    "Waker",
    "block_on",
    "is_pending",
    "noop_waker",
    "poll_fn",
]
