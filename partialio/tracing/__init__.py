"""Decision tracing for partial I/O adapters."""

from partialio.tracing.recorder import (
    InMemoryTraceRecorder,
    NullTraceRecorder,
    TraceRecorder,
)

__all__ = [
    "InMemoryTraceRecorder",
    "NullTraceRecorder",
    "TraceRecorder",
]
