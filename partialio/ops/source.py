"""The behavior source: an exhaustible, replaceable supply of PartialOps.

Every adapter owns exactly one ``OpSource``. Fixed lists, generators,
hypothesis-drawn sequences and ``PartialWithErrors`` all go through the
same interface, since the source only needs something iterable.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Iterator
from dataclasses import dataclass

from partialio.ops.partial_op import (
    PARTIAL_OP_TYPES,
    Failure,
    Limited,
    PartialOp,
    Unlimited,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class OpStats:
    """Summary of behavior consumption.

    Attributes:
        ops_consumed: Behaviors pulled from the scripted sequence.
        unlimited: ``Unlimited`` behaviors pulled.
        limited: ``Limited`` behaviors pulled.
        failures: ``Failure`` behaviors pulled (would-block included).
        passthrough: Pulls answered with "exhausted".
        replacements: Number of ``replace()`` calls.
    """

    ops_consumed: int
    unlimited: int
    limited: int
    failures: int
    passthrough: int
    replacements: int


@dataclass
class _MutableOpStats:
    """Internal mutable stats tracker."""

    unlimited: int = 0
    limited: int = 0
    failures: int = 0
    passthrough: int = 0
    replacements: int = 0

    def count(self, op: PartialOp | None) -> None:
        if op is None:
            self.passthrough += 1
        elif isinstance(op, Unlimited):
            self.unlimited += 1
        elif isinstance(op, Limited):
            self.limited += 1
        elif isinstance(op, Failure):
            self.failures += 1

    def freeze(self) -> OpStats:
        return OpStats(
            ops_consumed=self.unlimited + self.limited + self.failures,
            unlimited=self.unlimited,
            limited=self.limited,
            failures=self.failures,
            passthrough=self.passthrough,
            replacements=self.replacements,
        )


class OpSource:
    """Ordered, consumable and replaceable sequence of scripted behaviors.

    Once the sequence runs dry the source stays exhausted: the underlying
    iterator is not advanced again, and every further ``next()`` returns
    ``None`` until ``replace()`` installs a new sequence.

    Args:
        ops: Any iterable of PartialOp. Infinite iterables are fine.
    """

    def __init__(self, ops: Iterable[PartialOp] = ()) -> None:
        self._iter: Iterator[PartialOp] = iter(ops)
        self._exhausted = False
        self._stats = _MutableOpStats()

    @property
    def exhausted(self) -> bool:
        """Whether the current sequence has run dry."""
        return self._exhausted

    def next(self) -> PartialOp | None:
        """Pull the next behavior, or ``None`` once exhausted.

        Raises:
            TypeError: If the sequence yields something that is not a PartialOp.
        """
        if self._exhausted:
            self._stats.count(None)
            return None
        try:
            op = next(self._iter)
        except StopIteration:
            self._exhausted = True
            logger.debug("Behavior source exhausted; passing calls through")
            self._stats.count(None)
            return None
        if not isinstance(op, PARTIAL_OP_TYPES):
            raise TypeError(f"behavior source yielded {op!r}, expected a PartialOp")
        self._stats.count(op)
        return op

    def replace(self, ops: Iterable[PartialOp]) -> None:
        """Discard the remaining behaviors and start consuming ``ops``."""
        self._iter = iter(ops)
        self._exhausted = False
        self._stats.replacements += 1
        logger.debug("Behavior source replaced (replacement #%d)", self._stats.replacements)

    @property
    def stats(self) -> OpStats:
        """Frozen snapshot of consumption statistics."""
        return self._stats.freeze()

    def __repr__(self) -> str:
        state = "exhausted" if self._exhausted else "active"
        return f"OpSource({state}, consumed={self.stats.ops_consumed})"
