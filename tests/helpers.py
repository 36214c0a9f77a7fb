"""Inner-stream doubles shared by the partialio tests."""

from __future__ import annotations

import io

from partialio import PENDING, Context, MemoryStream, Waker


class CountingStream(io.BytesIO):
    """BytesIO that counts the calls it receives."""

    def __init__(self, initial: bytes = b"") -> None:
        super().__init__(initial)
        self.calls: list[tuple[str, int | None]] = []

    def write(self, data) -> int:
        self.calls.append(("write", len(data)))
        return super().write(data)

    def read(self, size=-1) -> bytes:
        self.calls.append(("read", size))
        return super().read(size)

    def readinto(self, buffer) -> int:
        self.calls.append(("readinto", len(buffer)))
        return super().readinto(buffer)

    def flush(self) -> None:
        self.calls.append(("flush", None))
        super().flush()


class FailingStream:
    """Blocking stream whose every call raises the given error."""

    def __init__(self, error: BaseException) -> None:
        self.error = error
        self.calls = 0

    def write(self, data) -> int:
        self.calls += 1
        raise self.error

    def read(self, size=-1) -> bytes:
        self.calls += 1
        raise self.error

    def flush(self) -> None:
        self.calls += 1
        raise self.error


class RecordingStream(MemoryStream):
    """MemoryStream that records every poll it receives."""

    def __init__(self, initial: bytes = b"") -> None:
        super().__init__(initial)
        self.polls: list[tuple[str, object]] = []

    def poll_read(self, cx: Context, size: int = -1):
        self.polls.append(("read", size))
        return super().poll_read(cx, size)

    def poll_write(self, cx: Context, data):
        self.polls.append(("write", len(data)))
        return super().poll_write(cx, data)

    def poll_flush(self, cx: Context):
        self.polls.append(("flush", None))
        return super().poll_flush(cx)

    def poll_close(self, cx: Context):
        self.polls.append(("close", None))
        return super().poll_close(cx)

    def poll_seek(self, cx: Context, offset: int, whence: int = io.SEEK_SET):
        self.polls.append(("seek", offset))
        return super().poll_seek(cx, offset, whence)


class GatedStream(MemoryStream):
    """A stream that is not ready until ``open()`` is called.

    While closed it stores the waker of each pending poll and returns
    PENDING; ``open()`` wakes every stored waker once.
    """

    def __init__(self, initial: bytes = b"") -> None:
        super().__init__(initial)
        self.is_open = False
        self.parked: list[Waker] = []

    def open(self) -> None:
        self.is_open = True
        parked, self.parked = self.parked, []
        for waker in parked:
            waker.wake()

    def _gate(self, cx: Context) -> bool:
        if self.is_open:
            return True
        self.parked.append(cx.waker)
        return False

    def poll_write(self, cx: Context, data):
        if not self._gate(cx):
            return PENDING
        return super().poll_write(cx, data)

    def poll_read(self, cx: Context, size: int = -1):
        if not self._gate(cx):
            return PENDING
        return super().poll_read(cx, size)

    def poll_flush(self, cx: Context):
        if not self._gate(cx):
            return PENDING
        return super().poll_flush(cx)


class ErrorStream(MemoryStream):
    """Poll-based stream whose writes and flushes raise ``error``."""

    def __init__(self, error: BaseException) -> None:
        super().__init__()
        self.error = error
        self.polls = 0

    def poll_write(self, cx: Context, data):
        self.polls += 1
        raise self.error

    def poll_flush(self, cx: Context):
        self.polls += 1
        raise self.error
