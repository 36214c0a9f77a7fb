"""A buffered writer that mishandles interrupted writes, and how partialio exposes it.

``BuggyWrite`` copies the caller's data into its own buffer and immediately
tries to push the buffer to the inner stream. If that push is interrupted,
``write`` raises, telling the caller that nothing was accepted, yet the
bytes stay buffered and go out on the next ``write`` or ``flush``. A caller
that retries after the error ends up with its data written twice; a caller
that gives up gets it written anyway.

Ops ``[Failure(INTERRUPTED), Unlimited()]`` are enough to show it::

    write(b"Hello" * 50)   -> InterruptedError
    write(b"World" * 40)   -> 200
    flush()                -> ok
    inner contents         -> b"Hello" * 50 + b"World" * 40

The random search below finds failing op sequences and shrinks them. Pass
``--fixed`` to run the same search against a writer that only pushes data
out on flush, which never disagrees with what it reported.

Usage::

    python -m examples.buggy_write --trials 200 --seed 7
"""

from __future__ import annotations

import argparse
import io
import random
from dataclasses import dataclass
from typing import Any

from partialio import (
    ErrorKind,
    Failure,
    GenInterrupted,
    PartialOp,
    PartialWithErrors,
    PartialWrite,
    Unlimited,
    minimize,
)

# Sized around the default generation size (100) so that limits and
# payloads are comparable.
HELLO = b"Hello" * 50
WORLD = b"World" * 40


class BuggyWrite:
    """A buffered writer whose ``write`` method is faulty."""

    def __init__(self, inner: Any, eager: bool = True) -> None:
        self.inner = inner
        self.eager = eager
        self._buf = bytearray()
        self._offset = 0

    def _write_from_offset(self) -> None:
        while self._offset < len(self._buf):
            self._offset += self.inner.write(self._buf[self._offset:])

    def _reset_buffer(self) -> None:
        self._buf.clear()
        self._offset = 0

    def write(self, data: bytes) -> int:
        # Write out anything that is currently in the internal buffer.
        if self._offset < len(self._buf):
            self._write_from_offset()

        self._reset_buffer()
        self._buf.extend(data)

        # BUG: if this raises, bytes were taken from the caller without
        # telling it how many. Constructing with eager=False fixes it.
        if self.eager:
            self._write_from_offset()
        return len(self._buf)

    def flush(self) -> None:
        self._write_from_offset()
        self._reset_buffer()
        self.inner.flush()


@dataclass
class WriteOutcome:
    """What the caller was told, and what actually reached the inner stream."""

    hello_ok: bool
    world_ok: bool
    flush_ok: bool
    inner: bytes

    @property
    def expected(self) -> bytes:
        return (HELLO if self.hello_ok else b"") + (WORLD if self.world_ok else b"")

    @property
    def consistent(self) -> bool:
        """True when the inner stream holds exactly what the caller was told was written.

        A failed flush leaves the outcome unknown, so it counts as consistent.
        """
        return not self.flush_ok or self.inner == self.expected


def run_buggy_write(ops: list[PartialOp] | PartialWithErrors, eager: bool = True) -> WriteOutcome:
    """Write HELLO, then WORLD, then flush, through ``PartialWrite(BytesIO, ops)``."""
    sink = io.BytesIO()
    writer = BuggyWrite(PartialWrite(sink, ops), eager=eager)

    def attempt(call) -> bool:
        try:
            call()
        except InterruptedError:
            return False
        return True

    hello_ok = attempt(lambda: writer.write(HELLO))
    world_ok = attempt(lambda: writer.write(WORLD))
    flush_ok = attempt(writer.flush)
    return WriteOutcome(hello_ok, world_ok, flush_ok, sink.getvalue())


def check_write_is_buggy() -> WriteOutcome:
    """Replay the two-op scenario and assert that BuggyWrite misreports."""
    outcome = run_buggy_write([Failure(ErrorKind.INTERRUPTED), Unlimited()])
    assert not outcome.hello_ok
    assert outcome.world_ok
    assert outcome.flush_ok
    # HELLO reached the stream although its write reported failure.
    assert outcome.inner == HELLO + WORLD
    return outcome


def search(trials: int, seed: int | None, eager: bool) -> PartialWithErrors | None:
    """Randomly search for an op sequence that makes the writer misreport."""
    rng = random.Random(seed)

    def fails(ops: PartialWithErrors) -> bool:
        return not run_buggy_write(ops, eager=eager).consistent

    for _ in range(trials):
        ops = PartialWithErrors.generate(rng, GenInterrupted())
        if fails(ops):
            return minimize(ops, fails)
    return None


def main() -> None:
    parser = argparse.ArgumentParser(description="Find the bug in BuggyWrite with partialio")
    parser.add_argument("--trials", type=int, default=100, help="Random op sequences to try")
    parser.add_argument("--seed", type=int, default=42, help="Random seed (-1 for random)")
    parser.add_argument("--fixed", action="store_true", help="Check the fixed writer instead")
    args = parser.parse_args()

    seed = None if args.seed == -1 else args.seed

    check_write_is_buggy()
    print("Two-op scenario reproduced: HELLO written despite InterruptedError")

    found = search(args.trials, seed, eager=not args.fixed)
    if found is None:
        print(f"No inconsistency found in {args.trials} trial(s)")
    else:
        print(f"Minimal failing ops ({len(found)}): {list(found)!r}")


if __name__ == "__main__":
    main()
