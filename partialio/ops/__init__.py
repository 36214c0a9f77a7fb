"""Scripted behaviors, error classifications and the behavior source."""

from partialio.ops.kinds import ErrorFactory, ErrorKind, make_error
from partialio.ops.partial_op import (
    UNLIMITED,
    Failure,
    Limited,
    PartialOp,
    Unlimited,
)
from partialio.ops.source import OpSource, OpStats

__all__ = [
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
]
