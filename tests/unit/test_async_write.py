"""Unit tests for PartialAsyncWrite."""

import asyncio
import io
from array import array

import pytest

from partialio import (
    PENDING,
    Context,
    ErrorKind,
    Executor,
    Failure,
    Limited,
    MemoryStream,
    PartialAsyncWrite,
    Unlimited,
    Waker,
    block_on,
)
from tests.helpers import ErrorStream, GatedStream, RecordingStream


class TestPollWrite:
    def test_limited_write(self):
        """Limited(n) clips the inner write."""
        inner = RecordingStream()
        writer = PartialAsyncWrite(inner, [Limited(2)])
        assert writer.poll_write(Context.noop(), b"abcd") == 2
        assert inner.getvalue() == b"ab"
        assert inner.polls == [("write", 2)]

    def test_limited_counts_bytes_not_items(self):
        """A limit caps bytes when the payload has a multi-byte item size."""
        payload = array("i", [1, 2, 3, 4])
        inner = RecordingStream()
        writer = PartialAsyncWrite(inner, [Limited(1)])
        assert writer.poll_write(Context.noop(), payload) == 1
        assert inner.polls == [("write", 1)]
        assert inner.getvalue() == payload.tobytes()[:1]

    def test_would_block_never_touches_inner(self):
        """Would-block calls the waker and skips the inner stream."""
        inner = RecordingStream()
        writer = PartialAsyncWrite(inner, [Failure(ErrorKind.WOULD_BLOCK)])
        wakes = []
        cx = Context(Waker(lambda: wakes.append(1)))
        assert writer.poll_write(cx, b"abcd") is PENDING
        assert wakes == [1]
        assert inner.polls == []

    def test_failure_never_touches_inner(self):
        """Injected failures skip the inner stream."""
        inner = RecordingStream()
        writer = PartialAsyncWrite(inner, [Failure(ErrorKind.CONNECTION_ABORTED)])
        with pytest.raises(ConnectionAbortedError, match="error during poll_write"):
            writer.poll_write(Context.noop(), b"abcd")
        assert inner.polls == []

    def test_inner_error_forwarded(self):
        """Errors from the inner stream propagate unchanged."""
        inner = ErrorStream(BrokenPipeError("closed by peer"))
        writer = PartialAsyncWrite(inner, [Unlimited()])
        with pytest.raises(BrokenPipeError, match="closed by peer"):
            writer.poll_write(Context.noop(), b"x")
        assert inner.polls == 1


class TestLengthlessOperations:
    def test_flush_close_seek_consume_ops(self):
        """Flush and seek each consume one op."""
        inner = RecordingStream(b"0123456789")
        writer = PartialAsyncWrite(
            inner,
            [Limited(1), Failure(ErrorKind.INTERRUPTED), Failure(ErrorKind.WOULD_BLOCK), Unlimited()],
        )
        cx = Context.noop()
        assert writer.poll_flush(cx) is None
        with pytest.raises(InterruptedError, match="poll_seek"):
            writer.poll_seek(cx, 4)
        assert writer.poll_seek(cx, 4) is PENDING
        assert writer.poll_seek(cx, 4) == 4
        assert inner.polls == [("flush", None), ("seek", 4)]
        assert cx.waker.wake_count == 1

    def test_shutdown_is_close(self):
        """poll_shutdown behaves like poll_close."""
        inner = MemoryStream()
        writer = PartialAsyncWrite(inner, [Failure(ErrorKind.WOULD_BLOCK)])
        assert writer.poll_shutdown(Context.noop()) is PENDING
        assert not inner.closed
        writer.poll_shutdown(Context.noop())
        assert inner.closed

    def test_read_forwarded_without_ops(self):
        """Read-side calls on a writer bypass the ops."""
        inner = MemoryStream(b"duplex")
        writer = PartialAsyncWrite(inner, [Failure(ErrorKind.INTERRUPTED)])
        assert writer.poll_read(Context.noop(), 3) == b"dup"
        assert writer.stats.ops_consumed == 0


class TestDriven:
    def test_executor_repolls_after_would_block(self):
        """The executor re-polls once per would-block."""
        inner = MemoryStream()
        writer = PartialAsyncWrite(inner, [Failure(ErrorKind.WOULD_BLOCK), Limited(3)])
        executor = Executor()
        task = executor.spawn(lambda cx: writer.poll_write(cx, b"abcd"))
        executor.run()
        assert task.result() == 3
        assert task.polls == 2
        assert executor.turns == 2

    def test_consecutive_would_blocks(self):
        """Each would-block costs one extra poll."""
        ops = [Failure(ErrorKind.WOULD_BLOCK)] * 5
        writer = PartialAsyncWrite(MemoryStream(), ops)
        executor = Executor()
        task = executor.spawn(lambda cx: writer.poll_write(cx, b"ab"))
        executor.run()
        assert task.result() == 2
        assert task.polls == 6

    def test_inner_pending_relies_on_inner_wake(self):
        """An inner PENDING adds no wake of its own."""
        inner = GatedStream()
        writer = PartialAsyncWrite(inner, [Unlimited()])
        executor = Executor()
        task = executor.spawn(lambda cx: writer.poll_write(cx, b"abc"))
        executor.spawn(lambda cx: inner.open())
        executor.run()
        assert task.result() == 3
        # one PENDING poll, one ready poll after the gate woke it
        assert task.polls == 2
        assert task.wakes == 1

    def test_set_ops_between_polls(self):
        """Ops replaced while pending apply to the re-poll."""
        inner = GatedStream()
        writer = PartialAsyncWrite(inner, [Unlimited()])
        executor = Executor()
        task = executor.spawn(lambda cx: writer.poll_write(cx, b"abcdef"))

        def reconfigure_then_open(cx):
            writer.set_ops([Limited(2)])
            inner.open()

        executor.spawn(reconfigure_then_open)
        executor.run()
        assert task.result() == 2
        assert inner.getvalue() == b"ab"

    def test_block_on_seek(self):
        writer = PartialAsyncWrite(MemoryStream(b"abc"), [Failure(ErrorKind.WOULD_BLOCK)])
        assert block_on(lambda cx: writer.poll_seek(cx, 0, io.SEEK_END)) == 3


class TestAwaitable:
    def test_documented_sequence(self):
        """Would-block, limit and invalid data as seen from asyncio."""
        async def scenario():
            writer = PartialAsyncWrite(
                MemoryStream(),
                [
                    Failure(ErrorKind.WOULD_BLOCK),
                    Limited(2),
                    Failure(ErrorKind.INVALID_DATA),
                    Unlimited(),
                ],
            )
            data = bytes([1, 2, 3, 4])
            assert await writer.write(data) == 2
            assert writer.get_ref().getvalue() == bytes([1, 2])
            with pytest.raises(OSError) as excinfo:
                await writer.write(data[2:])
            assert ErrorKind.classify(excinfo.value) is ErrorKind.INVALID_DATA
            assert await writer.write(data[2:]) == 2
            return writer.get_ref().getvalue()

        assert asyncio.run(scenario()) == bytes([1, 2, 3, 4])

    def test_write_all_retries_interrupted(self):
        """write_all retries interrupts and short writes."""
        async def scenario():
            ops = [Limited(1), Failure(ErrorKind.INTERRUPTED), Failure(ErrorKind.WOULD_BLOCK), Limited(2)]
            writer = PartialAsyncWrite(MemoryStream(), ops)
            await writer.write_all(b"abcdef")
            await writer.flush()
            await writer.close()
            return writer.into_inner()

        inner = asyncio.run(scenario())
        assert inner.getvalue() == b"abcdef"
        assert inner.closed

    def test_write_all_multi_byte_items(self):
        """write_all advances by bytes, not by items of the payload."""
        payload = array("i", range(10))

        async def scenario():
            writer = PartialAsyncWrite(MemoryStream(), [Limited(3), Limited(5), Limited(1)])
            await writer.write_all(payload)
            return writer.get_ref().getvalue()

        assert asyncio.run(scenario()) == payload.tobytes()

    def test_write_all_write_zero(self):
        """A zero-byte write makes write_all raise WRITE_ZERO."""
        class ZeroStream(MemoryStream):
            def poll_write(self, cx, data):
                return 0

        async def scenario():
            writer = PartialAsyncWrite(ZeroStream())
            await writer.write_all(b"abc")

        with pytest.raises(OSError) as excinfo:
            asyncio.run(scenario())
        assert ErrorKind.classify(excinfo.value) is ErrorKind.WRITE_ZERO
