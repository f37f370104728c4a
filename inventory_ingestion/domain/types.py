"""
inventory_ingestion.domain.types -- Pure frozen dataclasses for ingestion.

ZERO I/O.  Everything downstream of validation works with NormalizedRow;
raw string dicts only survive inside InvalidRow / RowError for reporting.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from decimal import Decimal
from typing import Any, Union


# =============================================================================
# Row values
# =============================================================================


@dataclass(frozen=True)
class NormalizedRow:
    """A validated, typed inventory record."""

    store_name: str
    book_name: str
    author_name: str
    price: Decimal
    store_address: str | None = None
    logo: str | None = None
    pages: int | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "store_name": self.store_name,
            "store_address": self.store_address,
            "book_name": self.book_name,
            "pages": self.pages,
            "author_name": self.author_name,
            "price": str(self.price),
            "logo": self.logo,
        }


@dataclass(frozen=True)
class ValidRow:
    """A record that passed validation, with its source ordinal."""

    ordinal: int
    row: NormalizedRow
    raw_row: dict[str, str] = field(default_factory=dict, compare=False)


@dataclass(frozen=True)
class InvalidRow:
    """A record rejected by validation."""

    ordinal: int
    raw_row: dict[str, str]
    reason: str
    code: str


ValidationOutcome = Union[ValidRow, InvalidRow]


@dataclass(frozen=True)
class ParseOutcome:
    """Result of parsing and validating one upload, in source order."""

    valid_rows: tuple[ValidRow, ...] = ()
    errors: tuple[InvalidRow, ...] = ()
    total_parsed: int = 0


# =============================================================================
# Ingestion result
# =============================================================================


@dataclass(frozen=True)
class RowError:
    """One failed row as reported to the uploader."""

    row: int
    data: dict[str, str]
    error: str
    code: str

    def to_dict(self) -> dict[str, Any]:
        return {
            "row": self.row,
            "data": dict(self.data),
            "error": self.error,
            "code": self.code,
        }


@dataclass(frozen=True)
class CreatedCounts:
    stores: int = 0
    authors: int = 0
    books: int = 0
    inventory: int = 0

    def to_dict(self) -> dict[str, int]:
        return {
            "stores": self.stores,
            "authors": self.authors,
            "books": self.books,
            "inventory": self.inventory,
        }


@dataclass(frozen=True)
class UpdatedCounts:
    inventory: int = 0

    def to_dict(self) -> dict[str, int]:
        return {"inventory": self.inventory}


@dataclass(frozen=True)
class IngestionResult:
    """
    Aggregate outcome of one ingestion call.

    ``processed`` counts rows reconciled successfully.  ``errors`` holds
    validation failures (in source order) followed by reconciliation
    failures (in processing order).
    """

    processed: int = 0
    created: CreatedCounts = field(default_factory=CreatedCounts)
    updated: UpdatedCounts = field(default_factory=UpdatedCounts)
    errors: tuple[RowError, ...] = ()

    @property
    def success(self) -> bool:
        """False only when nothing succeeded and something failed."""
        return not (self.processed == 0 and self.errors)

    @property
    def message(self) -> str:
        if not self.success:
            return "Failed to process any rows from the CSV file."
        if self.errors:
            return "CSV processed with some errors."
        return "CSV processed successfully."

    def to_dict(self) -> dict[str, Any]:
        return {
            "success": self.success,
            "message": self.message,
            "results": {
                "processed": self.processed,
                "created": self.created.to_dict(),
                "updated": self.updated.to_dict(),
                "errors": [e.to_dict() for e in self.errors],
            },
        }
