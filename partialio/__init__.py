"""partialio: scripted partial, interrupted and would-block I/O for testing.

Wrap a stream, hand the wrapper a sequence of ``PartialOp`` values, and each
call on the wrapper replays the next one: a short read or write, an injected
error, or an unrestricted pass-through. Buffering and retry code under test
then meets adverse conditions deterministically.

Logging is silent by default. Enable it with ``enable_console_logging()`` or
``configure_from_env()``.
"""

import logging

logging.getLogger(__name__).addHandler(logging.NullHandler())

__version__ = "0.1.0"

from partialio.blocking import BlockingOps, PartialRead, PartialWrite
from partialio.generation import (
    GenError,
    GenInterrupted,
    GenInterruptedWouldBlock,
    GenNoErrors,
    GenWouldBlock,
    PartialWithErrors,
    interrupted_strategy,
    interrupted_would_block_strategy,
    minimize,
    no_errors_strategy,
    partial_op_strategy,
    partial_ops,
    would_block_strategy,
)
from partialio.logging_config import (
    DecisionLog,
    configure_from_env,
    disable_logging,
    enable_console_logging,
    enable_file_logging,
    log_decisions,
    set_level,
    set_module_level,
)
from partialio.ops import (
    UNLIMITED,
    ErrorFactory,
    ErrorKind,
    Failure,
    Limited,
    OpSource,
    OpStats,
    PartialOp,
    Unlimited,
    make_error,
)
from partialio.polling import (
    PENDING,
    AsyncStreamMixin,
    Context,
    Executor,
    MemoryStream,
    PartialAsyncRead,
    PartialAsyncWrite,
    Pending,
    Poll,
    PollingOps,
    StallError,
    Task,
    Waker,
    block_on,
    is_pending,
    noop_waker,
    poll_fn,
)
from partialio.tracing import InMemoryTraceRecorder, NullTraceRecorder, TraceRecorder

__all__ = [
    # Scripted behaviors
    "ErrorFactory",
    "ErrorKind",
    "Failure",
    "Limited",
    "OpSource",
    "OpStats",
    "PartialOp",
    "UNLIMITED",
    "Unlimited",
    "make_error",
    # Blocking wrappers
    "BlockingOps",
    "PartialRead",
    "PartialWrite",
    # Poll-based wrappers
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
    # Generation
    "GenError",
    "GenInterrupted",
    "GenInterruptedWouldBlock",
    "GenNoErrors",
    "GenWouldBlock",
    "PartialWithErrors",
    "interrupted_strategy",
    "interrupted_would_block_strategy",
    "minimize",
    "no_errors_strategy",
    "partial_op_strategy",
    "partial_ops",
    "would_block_strategy",
    # Tracing
    "InMemoryTraceRecorder",
    "NullTraceRecorder",
    "TraceRecorder",
    # Logging
    "DecisionLog",
    "configure_from_env",
    "disable_logging",
    "enable_console_logging",
    "enable_file_logging",
    "log_decisions",
    "set_level",
    "set_module_level",
]
