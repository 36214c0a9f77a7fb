"""Generators of PartialOp sequences: hypothesis strategies and seeded random generation."""

from partialio.generation.random_ops import (
    GenError,
    GenInterrupted,
    GenInterruptedWouldBlock,
    GenNoErrors,
    GenWouldBlock,
    PartialWithErrors,
    minimize,
)
from partialio.generation.strategies import (
    interrupted_strategy,
    interrupted_would_block_strategy,
    no_errors_strategy,
    partial_op_strategy,
    partial_ops,
    would_block_strategy,
)

__all__ = [
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
]
