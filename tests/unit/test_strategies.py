"""Property tests for the hypothesis op strategies."""

import pytest
from hypothesis import given
from hypothesis import strategies as st

from partialio import (
    ErrorKind,
    Failure,
    Limited,
    interrupted_strategy,
    interrupted_would_block_strategy,
    no_errors_strategy,
    partial_op_strategy,
    partial_ops,
    would_block_strategy,
)


@given(ops=partial_ops(no_errors_strategy(), limit_bytes=16))
def test_no_errors_only_limits(ops):
    """The error-free strategy yields only bounded limits."""
    for op in ops:
        assert isinstance(op, Limited)
        assert 1 <= op.limit <= 16


@given(ops=partial_ops(interrupted_strategy(), limit_bytes=8))
def test_interrupted_kinds(ops):
    """The interrupted strategy injects only INTERRUPTED."""
    for op in ops:
        if isinstance(op, Failure):
            assert op.kind is ErrorKind.INTERRUPTED
        else:
            assert 1 <= op.limit <= 8


@given(ops=partial_ops(would_block_strategy()))
def test_would_block_kinds(ops):
    """The would-block strategy injects only WOULD_BLOCK."""
    assert all(op.kind is ErrorKind.WOULD_BLOCK for op in ops if isinstance(op, Failure))


@given(ops=partial_ops(interrupted_would_block_strategy(), max_size=20))
def test_mixed_kinds(ops):
    """The mixed strategy injects only its two kinds."""
    assert len(ops) <= 20
    kinds = {op.kind for op in ops if isinstance(op, Failure)}
    assert kinds <= {ErrorKind.INTERRUPTED, ErrorKind.WOULD_BLOCK}


@given(op=partial_op_strategy(st.sampled_from([ErrorKind.BROKEN_PIPE, None]), limit_bytes=1))
def test_custom_error_strategy(op):
    """Any kind strategy can drive failures."""
    assert op in (Failure(ErrorKind.BROKEN_PIPE), Limited(1))


@given(ops=partial_ops())
def test_default_is_error_free(ops):
    """partial_ops defaults to no errors."""
    assert not any(isinstance(op, Failure) for op in ops)


def test_limit_bytes_must_be_positive():
    """limit_bytes of zero is rejected."""
    with pytest.raises(ValueError, match="positive"):
        partial_op_strategy(no_errors_strategy(), limit_bytes=0)
