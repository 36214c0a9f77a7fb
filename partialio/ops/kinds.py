"""Error classifications for scripted failures.

A scripted ``Failure`` carries an ``ErrorKind`` rather than an exception
instance: the same behavior sequence can be replayed many times, and each
replay needs a fresh error. ``make_error`` is the default mapping from a
classification to a concrete ``OSError``; adapters accept any callable with
the same signature so the calling environment can own that mapping.
"""

from __future__ import annotations

import errno
from enum import Enum
from typing import Callable

ErrorFactory = Callable[["ErrorKind", str], BaseException]
"""Signature of a classification-to-exception mapping."""


class ErrorKind(Enum):
    """Platform error classifications a scripted failure may carry.

    Each member's value is its lowercase name. ``errno`` and
    ``exception_type`` describe how ``make_error`` renders the kind.
    """

    INTERRUPTED = "interrupted"
    WOULD_BLOCK = "would_block"
    TIMED_OUT = "timed_out"
    BROKEN_PIPE = "broken_pipe"
    CONNECTION_RESET = "connection_reset"
    CONNECTION_ABORTED = "connection_aborted"
    NOT_CONNECTED = "not_connected"
    INVALID_INPUT = "invalid_input"
    INVALID_DATA = "invalid_data"
    UNEXPECTED_EOF = "unexpected_eof"
    WRITE_ZERO = "write_zero"
    OTHER = "other"

    @property
    def errno(self) -> int:
        return _ERRNO[self]

    @property
    def exception_type(self) -> type[OSError]:
        return _EXCEPTION_TYPE.get(self, OSError)

    @classmethod
    def parse(cls, value: ErrorKind | str) -> ErrorKind:
        """Coerce a kind or a kind name (``"would_block"``, ``"WOULD_BLOCK"``).

        Raises:
            TypeError: If ``value`` is neither an ErrorKind nor a string.
            ValueError: If the string names no kind.
        """
        if isinstance(value, cls):
            return value
        if not isinstance(value, str):
            raise TypeError(f"expected ErrorKind or str, got {type(value).__name__}")
        try:
            return cls(value.lower())
        except ValueError:
            raise ValueError(f"unknown error kind: {value!r}") from None

    @classmethod
    def classify(cls, exc: BaseException) -> ErrorKind:
        """Recover the classification of an exception.

        Exceptions built by ``make_error`` classify back to their kind. Other
        exceptions are matched on ``errno`` first, then on type, and fall
        back to ``OTHER``.
        """
        kind = getattr(exc, "kind", None)
        if isinstance(kind, cls):
            return kind
        code = getattr(exc, "errno", None)
        if code is not None:
            for member, member_errno in _ERRNO.items():
                if member_errno == code:
                    return member
            if code == errno.EWOULDBLOCK:
                return cls.WOULD_BLOCK
        for member, exc_type in _EXCEPTION_TYPE.items():
            if isinstance(exc, exc_type):
                return member
        if isinstance(exc, EOFError):
            return cls.UNEXPECTED_EOF
        return cls.OTHER


_ERRNO: dict[ErrorKind, int] = {
    ErrorKind.INTERRUPTED: errno.EINTR,
    ErrorKind.WOULD_BLOCK: errno.EAGAIN,
    ErrorKind.TIMED_OUT: errno.ETIMEDOUT,
    ErrorKind.BROKEN_PIPE: errno.EPIPE,
    ErrorKind.CONNECTION_RESET: errno.ECONNRESET,
    ErrorKind.CONNECTION_ABORTED: errno.ECONNABORTED,
    ErrorKind.NOT_CONNECTED: errno.ENOTCONN,
    ErrorKind.INVALID_INPUT: errno.EINVAL,
    ErrorKind.INVALID_DATA: errno.EBADMSG,
    ErrorKind.UNEXPECTED_EOF: errno.ENODATA,
    ErrorKind.WRITE_ZERO: errno.ENOSPC,
    ErrorKind.OTHER: errno.EIO,
}

_EXCEPTION_TYPE: dict[ErrorKind, type[OSError]] = {
    ErrorKind.INTERRUPTED: InterruptedError,
    ErrorKind.WOULD_BLOCK: BlockingIOError,
    ErrorKind.TIMED_OUT: TimeoutError,
    ErrorKind.BROKEN_PIPE: BrokenPipeError,
    ErrorKind.CONNECTION_RESET: ConnectionResetError,
    ErrorKind.CONNECTION_ABORTED: ConnectionAbortedError,
}


def make_error(kind: ErrorKind, message: str) -> OSError:
    """Build the default exception for a scripted failure.

    The result is an instance of ``kind.exception_type`` with ``errno`` set,
    so callers can catch it the way they catch real I/O errors
    (``except InterruptedError``). The kind is attached as ``exc.kind``.
    """
    exc = kind.exception_type(kind.errno, message)
    exc.kind = kind
    return exc
