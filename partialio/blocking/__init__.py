"""Blocking-call wrappers: one scripted op per synchronous read, write or flush."""

from partialio.blocking.ops import BlockingOps
from partialio.blocking.read import PartialRead
from partialio.blocking.write import PartialWrite

__all__ = [
    "BlockingOps",
    "PartialRead",
    "PartialWrite",
]
