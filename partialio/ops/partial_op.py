"""Scripted behaviors applied to individual stream calls.

A ``PartialOp`` names the outcome of exactly one call on a wrapped stream:

- ``Unlimited()`` forwards the call unchanged.
- ``Limited(n)`` forwards the call but lets the inner stream consume or
  produce at most ``n`` bytes.
- ``Failure(kind)`` fabricates an error of the given classification and
  never touches the inner stream.

Example::

    ops = [
        Failure(ErrorKind.WOULD_BLOCK),
        Limited(2),
        Failure(ErrorKind.INVALID_DATA),
        Unlimited(),
    ]
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Union

from partialio.ops.kinds import ErrorKind


@dataclass(frozen=True)
class Unlimited:
    """Impose no restriction on the call."""

    def __repr__(self) -> str:
        return "Unlimited()"


@dataclass(frozen=True)
class Limited:
    """Cap the bytes the inner stream may consume or produce.

    Attributes:
        limit: Positive byte cap. The inner call receives
            ``min(limit, requested)``.

    Raises:
        ValueError: If ``limit`` is less than 1. A zero-length write can mean
            "no longer accepting data" and a zero-length read means EOF, so
            the cap is never zero.
        TypeError: If ``limit`` is not an integer.
    """

    limit: int

    def __post_init__(self) -> None:
        if isinstance(self.limit, bool) or not isinstance(self.limit, int):
            raise TypeError(f"Limited expects an int, got {type(self.limit).__name__}")
        if self.limit < 1:
            raise ValueError(f"Limited requires a positive byte count, got {self.limit}")

    def clip(self, requested: int | None) -> int:
        """Bytes allowed for a call that asked for ``requested``.

        ``None`` or a negative request (read until EOF) is clipped to the limit.
        """
        if requested is None or requested < 0:
            return self.limit
        return min(self.limit, requested)

    def __repr__(self) -> str:
        return f"Limited({self.limit})"


@dataclass(frozen=True)
class Failure:
    """Fabricate an error classified by ``kind``.

    Attributes:
        kind: The error classification. Kind names are accepted and coerced.
    """

    kind: ErrorKind

    def __post_init__(self) -> None:
        object.__setattr__(self, "kind", ErrorKind.parse(self.kind))

    @property
    def is_would_block(self) -> bool:
        return self.kind is ErrorKind.WOULD_BLOCK

    def __repr__(self) -> str:
        return f"Failure({self.kind.name})"


PartialOp = Union[Unlimited, Limited, Failure]
"""Type alias for a single scripted behavior."""

PARTIAL_OP_TYPES = (Unlimited, Limited, Failure)

UNLIMITED = Unlimited()
