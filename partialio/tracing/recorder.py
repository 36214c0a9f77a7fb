"""Trace recorders for scripted-operation decisions.

Every time an adapter pulls a behavior it records one span describing the
decision: which behavior applied, how many bytes were requested and allowed,
and whether the call ended ready, pending or with an error. Tests use the
in-memory recorder to assert on the exact sequence of decisions.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Protocol

import pandas as pd


class TraceRecorder(Protocol):
    """Protocol for recording operation decisions.

    Implementations can store traces in memory, write them elsewhere, or
    discard them.
    """

    def record(self, *, kind: str, operation: str, **data: Any) -> None:
        """Record one decision span.

        Args:
            kind: Decision taken ("unlimited", "limited", "failure",
                "would_block", "passthrough").
            operation: The stream call being driven (e.g., "poll_write").
            **data: Additional structured data (requested, allowed, outcome).
        """


@dataclass
class InMemoryTraceRecorder:
    """Stores decision spans in memory for later inspection."""

    spans: list[dict[str, Any]] = field(default_factory=list)

    def record(self, *, kind: str, operation: str, **data: Any) -> None:
        span: dict[str, Any] = {
            "seq": len(self.spans),
            "kind": kind,
            "operation": operation,
        }
        if data:
            span["data"] = data
        self.spans.append(span)

    def clear(self) -> None:
        """Clear all recorded spans."""
        self.spans.clear()

    def filter_by_kind(self, kind: str) -> list[dict[str, Any]]:
        """Return spans matching the given decision kind."""
        return [s for s in self.spans if s["kind"] == kind]

    def filter_by_operation(self, operation: str) -> list[dict[str, Any]]:
        """Return spans recorded for one stream operation."""
        return [s for s in self.spans if s["operation"] == operation]

    def kinds(self) -> list[str]:
        """Decision kinds in recording order."""
        return [s["kind"] for s in self.spans]

    def to_dataframe(self) -> pd.DataFrame:
        """Flatten the spans into a DataFrame, one row per decision.

        Columns are ``seq``, ``kind``, ``operation`` plus one column per data
        key seen in any span.
        """
        rows = []
        for span in self.spans:
            row = {k: v for k, v in span.items() if k != "data"}
            row.update(span.get("data", {}))
            rows.append(row)
        return pd.DataFrame(rows, columns=_columns(rows))


def _columns(rows: list[dict[str, Any]]) -> list[str]:
    columns = ["seq", "kind", "operation"]
    for row in rows:
        for key in row:
            if key not in columns:
                columns.append(key)
    return columns


@dataclass
class NullTraceRecorder:
    """No-op recorder that discards all spans."""

    def record(self, *, kind: str, operation: str, **data: Any) -> None:
        pass
