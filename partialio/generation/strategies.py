"""Hypothesis strategies for generating sequences of PartialOps.

Sequences drawn from these strategies can be fed straight into any partial
wrapper. When a property fails, hypothesis shrinks the sequence towards
fewer ops, no errors and smaller limits, which usually leaves a minimal
reproduction.

Example::

    from hypothesis import given

    @given(ops=partial_ops(interrupted_strategy(), limit_bytes=128))
    def test_reader(ops):
        reader = PartialRead(io.BytesIO(b"x" * 1000), ops)
        ...
"""

from __future__ import annotations

from hypothesis import strategies as st

from partialio.ops.kinds import ErrorKind
from partialio.ops.partial_op import Failure, Limited, PartialOp

DEFAULT_LIMIT_BYTES = 128


def _weighted(percent: int, value: st.SearchStrategy[ErrorKind]) -> st.SearchStrategy[ErrorKind | None]:
    """Draw from ``value`` roughly ``percent``% of the time, else None.

    Shrinks towards None.
    """
    return st.integers(min_value=0, max_value=99).flatmap(
        lambda roll: value if roll >= 100 - percent else st.none()
    )


def partial_op_strategy(
    error_strategy: st.SearchStrategy[ErrorKind | None],
    limit_bytes: int = DEFAULT_LIMIT_BYTES,
) -> st.SearchStrategy[PartialOp]:
    """Generate ops given a way to generate errors.

    Each draw is ``Failure(kind)`` when the error strategy yields a kind,
    and ``Limited(n)`` with ``1 <= n <= limit_bytes`` otherwise. Zero is
    never drawn: for writers it can mean writes are no longer accepted.

    Pass ``no_errors_strategy()`` to only limit calls.
    """
    if limit_bytes < 1:
        raise ValueError(f"limit_bytes must be positive, got {limit_bytes}")
    return st.tuples(error_strategy, st.integers(min_value=1, max_value=limit_bytes)).map(
        lambda drawn: Failure(drawn[0]) if drawn[0] is not None else Limited(drawn[1])
    )


def no_errors_strategy() -> st.SearchStrategy[ErrorKind | None]:
    """Never generate errors."""
    return st.none()


def interrupted_strategy() -> st.SearchStrategy[ErrorKind | None]:
    """Generate ``INTERRUPTED`` errors 20% of the time."""
    return _weighted(20, st.just(ErrorKind.INTERRUPTED))


def would_block_strategy() -> st.SearchStrategy[ErrorKind | None]:
    """Generate ``WOULD_BLOCK`` errors 20% of the time."""
    return _weighted(20, st.just(ErrorKind.WOULD_BLOCK))


def interrupted_would_block_strategy() -> st.SearchStrategy[ErrorKind | None]:
    """Generate ``INTERRUPTED`` and ``WOULD_BLOCK`` errors 10% of the time each."""
    return _weighted(20, st.sampled_from([ErrorKind.INTERRUPTED, ErrorKind.WOULD_BLOCK]))


def partial_ops(
    error_strategy: st.SearchStrategy[ErrorKind | None] | None = None,
    limit_bytes: int = DEFAULT_LIMIT_BYTES,
    max_size: int = 128,
) -> st.SearchStrategy[list[PartialOp]]:
    """Generate lists of ops, shrinking towards the empty list."""
    if error_strategy is None:
        error_strategy = no_errors_strategy()
    return st.lists(partial_op_strategy(error_strategy, limit_bytes), max_size=max_size)
