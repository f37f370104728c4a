"""
Units of work executed on the parser pool.

parse_and_validate() is the whole-file unit: parse every record, run the
row validator over each and partition into valid rows and errors.  It keeps
no state between calls.
"""

from __future__ import annotations

from inventory_ingestion.adapters.base import SourceAdapter
from inventory_ingestion.adapters.csv_adapter import CsvSourceAdapter
from inventory_ingestion.domain.types import InvalidRow, ParseOutcome, ValidRow
from inventory_ingestion.domain.validators import validate_row


def parse_and_validate(
    raw_text: str,
    adapter: SourceAdapter | None = None,
) -> ParseOutcome:
    """
    Parse ``raw_text`` and validate every record.

    Raises:
        CsvParseError: The text is malformed.  No partial outcome is returned.
    """
    adapter = adapter or CsvSourceAdapter()

    valid: list[ValidRow] = []
    errors: list[InvalidRow] = []
    total = 0

    for ordinal, record in adapter.read(raw_text):
        total += 1
        outcome = validate_row(record, ordinal)
        if isinstance(outcome, ValidRow):
            valid.append(outcome)
        else:
            errors.append(outcome)

    return ParseOutcome(
        valid_rows=tuple(valid),
        errors=tuple(errors),
        total_parsed=total,
    )
