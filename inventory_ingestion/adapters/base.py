"""
Source adapter protocol and probe DTO.

Contract:
    SourceAdapter.read() yields one (ordinal, record) pair per data record.
    SourceAdapter.probe() returns a quick snapshot: row count, columns, sample rows.

Architecture: inventory_ingestion/adapters. Text parsing only, no DB imports.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterator, Protocol, runtime_checkable


@runtime_checkable
class SourceAdapter(Protocol):
    """Protocol for reading in-memory delimited text into record dicts."""

    def read(self, text: str) -> Iterator[tuple[int, dict[str, str]]]:
        """Yield (ordinal, record) per data record, header already normalized."""
        ...

    def probe(self, text: str) -> "SourceProbe":
        """Quick probe: row count, detected columns, sample rows."""
        ...


@dataclass(frozen=True)
class SourceProbe:
    """Result of probing an upload (row count, columns, first N rows)."""

    row_count: int
    columns: tuple[str, ...]
    sample_rows: tuple[dict[str, str], ...]
    detected_delimiter: str | None = None
