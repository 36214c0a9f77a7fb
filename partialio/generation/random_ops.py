"""Seeded random generation and shrinking of PartialOp sequences.

This is the plain-``random`` counterpart of the hypothesis strategies, for
harnesses that drive their own trials (fixed seeds in CI, soak runs,
replaying a seed from a bug report). ``PartialWithErrors`` is an iterable of
ops, so it can be handed to any wrapper directly.

Example::

    rng = random.Random(42)
    for _ in range(100):
        ops = PartialWithErrors.generate(rng, GenInterrupted())
        if not property_holds(ops):
            smallest = minimize(ops, lambda o: not property_holds(o))
            raise AssertionError(f"failing ops: {smallest!r}")
"""

from __future__ import annotations

import logging
import random
from collections.abc import Iterator, Sequence
from typing import Callable, Protocol, runtime_checkable

from partialio.ops.kinds import ErrorKind
from partialio.ops.partial_op import Failure, Limited, PartialOp

logger = logging.getLogger(__name__)

DEFAULT_SIZE = 100


@runtime_checkable
class GenError(Protocol):
    """A way to generate error classifications."""

    def gen_error(self, rng: random.Random) -> ErrorKind | None:
        """Return a kind to inject, or None for no error."""
        ...


class GenNoErrors:
    """Do not generate any errors; only ``Limited`` ops are produced."""

    def gen_error(self, rng: random.Random) -> ErrorKind | None:
        return None


class GenInterrupted:
    """Generate an ``INTERRUPTED`` error 20% of the time."""

    def gen_error(self, rng: random.Random) -> ErrorKind | None:
        if rng.random() < 0.2:
            return ErrorKind.INTERRUPTED
        return None


class GenWouldBlock:
    """Generate a ``WOULD_BLOCK`` error 20% of the time."""

    def gen_error(self, rng: random.Random) -> ErrorKind | None:
        if rng.random() < 0.2:
            return ErrorKind.WOULD_BLOCK
        return None


class GenInterruptedWouldBlock:
    """Generate ``INTERRUPTED`` and ``WOULD_BLOCK`` errors 10% of the time each."""

    def gen_error(self, rng: random.Random) -> ErrorKind | None:
        roll = rng.random()
        if roll < 0.1:
            return ErrorKind.INTERRUPTED
        if roll < 0.2:
            return ErrorKind.WOULD_BLOCK
        return None


class PartialWithErrors(Sequence[PartialOp]):
    """An immutable sequence of ops generated with a ``GenError``.

    Args:
        ops: The ops, in order.
    """

    def __init__(self, ops: Sequence[PartialOp] = ()) -> None:
        self._ops: tuple[PartialOp, ...] = tuple(ops)

    @classmethod
    def generate(
        cls,
        rng: random.Random,
        gen_error: GenError,
        size: int = DEFAULT_SIZE,
        limit_bytes: int | None = None,
    ) -> PartialWithErrors:
        """Randomly generate up to ``size`` ops.

        Args:
            rng: Source of randomness; seed it for reproducible runs.
            gen_error: Decides, per op, whether to inject an error.
            size: Maximum number of ops.
            limit_bytes: Largest ``Limited`` cap. Defaults to ``size``.

        Raises:
            ValueError: If ``size`` is negative or ``limit_bytes`` is not positive.
        """
        if size < 0:
            raise ValueError(f"size must be non-negative, got {size}")
        if limit_bytes is None:
            limit_bytes = max(size, 1)
        elif limit_bytes < 1:
            raise ValueError(f"limit_bytes must be positive, got {limit_bytes}")
        length = rng.randint(0, size)
        ops: list[PartialOp] = []
        for _ in range(length):
            kind = gen_error.gen_error(rng)
            if kind is not None:
                ops.append(Failure(kind))
            else:
                ops.append(Limited(rng.randint(1, limit_bytes)))
        return cls(ops)

    def shrink(self) -> Iterator[PartialWithErrors]:
        """Yield smaller candidates, most aggressive first.

        Candidates drop halves, then single ops, then halve ``Limited``
        caps. Failures are kept as they are: they are usually what makes a
        case interesting. Each distinct candidate is yielded once.
        """
        seen = {self._ops}
        for candidate in self._candidates():
            if candidate not in seen:
                seen.add(candidate)
                yield type(self)(candidate)

    def _candidates(self) -> Iterator[tuple[PartialOp, ...]]:
        ops = self._ops
        n = len(ops)
        if n == 0:
            return
        yield ()
        half = n // 2
        yield ops[:half]
        yield ops[half:]
        for i in range(n):
            yield ops[:i] + ops[i + 1:]
        for i, op in enumerate(ops):
            if isinstance(op, Limited) and op.limit > 1:
                yield ops[:i] + (Limited(op.limit // 2),) + ops[i + 1:]
        for i, op in enumerate(ops):
            if isinstance(op, Limited) and op.limit > 1:
                yield type(self)(ops[:i] + (Limited(op.limit // 2),) + ops[i + 1:])

    def __getitem__(self, index):
        if isinstance(index, slice):
            return type(self)(self._ops[index])
        return self._ops[index]

    def __len__(self) -> int:
        return len(self._ops)

    def __eq__(self, other: object) -> bool:
        if isinstance(other, PartialWithErrors):
            return self._ops == other._ops
        if isinstance(other, (list, tuple)):
            return list(self._ops) == list(other)
        return NotImplemented

    def __hash__(self) -> int:
        return hash(self._ops)

    def __repr__(self) -> str:
        return f"PartialWithErrors({list(self._ops)!r})"


def minimize(
    ops: Sequence[PartialOp],
    fails: Callable[[PartialWithErrors], bool],
    max_steps: int = 10_000,
) -> PartialWithErrors:
    """Greedily shrink a failing sequence.

    Repeatedly takes the first shrink candidate that still fails until no
    candidate does.

    Args:
        ops: A sequence for which ``fails`` returns True.
        fails: The property check, returning True when the case still fails.
        max_steps: Bound on candidate evaluations.

    Raises:
        ValueError: If ``ops`` does not fail to begin with.
    """
    current = ops if isinstance(ops, PartialWithErrors) else PartialWithErrors(ops)
    if not fails(current):
        raise ValueError("minimize() needs a failing sequence to start from")
    steps = 0
    improved = True
    while improved and steps < max_steps:
        improved = False
        for candidate in current.shrink():
            steps += 1
            if fails(candidate):
                current = candidate
                improved = True
                break
            if steps >= max_steps:
                break
    logger.debug("Shrunk to %d op(s) after %d step(s)", len(current), steps)
    return current
