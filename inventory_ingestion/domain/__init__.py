"""Pure domain types and validators for inventory ingestion (ZERO I/O)."""

from inventory_ingestion.domain.types import (
    CreatedCounts,
    IngestionResult,
    InvalidRow,
    NormalizedRow,
    ParseOutcome,
    RowError,
    UpdatedCounts,
    ValidationOutcome,
    ValidRow,
)
from inventory_ingestion.domain.validators import (
    REQUIRED_FIELDS,
    parse_pages,
    parse_price,
    validate_row,
)

__all__ = [
    "CreatedCounts",
    "IngestionResult",
    "InvalidRow",
    "NormalizedRow",
    "ParseOutcome",
    "REQUIRED_FIELDS",
    "RowError",
    "UpdatedCounts",
    "ValidationOutcome",
    "ValidRow",
    "parse_pages",
    "parse_price",
    "validate_row",
]
