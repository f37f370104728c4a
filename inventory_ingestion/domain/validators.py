"""
Row validator for inventory records.

A record is valid when store_name, book_name, author_name and price are all
present and non-blank, price is a finite non-negative decimal that fits
Numeric(10, 2) and pages, if given, is an integer >= 1.  Each failure yields one human-readable reason
prefixed with the row ordinal plus a machine-readable code.

Architecture: inventory_ingestion/domain. ZERO I/O.
"""

from __future__ import annotations

import re
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from typing import Mapping

from inventory_kernel.exceptions import InvalidPagesError, InvalidPriceError

from inventory_ingestion.domain.types import (
    InvalidRow,
    NormalizedRow,
    ValidationOutcome,
    ValidRow,
)

REQUIRED_FIELDS: tuple[str, ...] = ("store_name", "book_name", "author_name", "price")

MISSING_REQUIRED_FIELD = "MISSING_REQUIRED_FIELD"

_INTEGER = re.compile(r"^[+-]?\d+$")

# Largest value a Numeric(10, 2) price column holds
MAX_PRICE = Decimal("99999999.99")

_CENTS = Decimal("0.01")


def _clean(value: object) -> str:
    return str(value).strip() if value is not None else ""


def _optional(value: object) -> str | None:
    cleaned = _clean(value)
    return cleaned or None


def parse_price(value: object) -> Decimal:
    """
    Parse a price string, rounded half-up to cents.

    Raises:
        InvalidPriceError: not a finite number, negative, or above MAX_PRICE.
    """
    try:
        price = Decimal(_clean(value))
    except (InvalidOperation, ValueError):
        raise InvalidPriceError(value) from None
    if not price.is_finite() or price < 0 or price > MAX_PRICE:
        raise InvalidPriceError(value)
    return price.quantize(_CENTS, rounding=ROUND_HALF_UP)


def parse_pages(value: object) -> int | None:
    """
    Parse an optional page count; blank means unknown.

    Raises:
        InvalidPagesError: not an integer, or less than 1.
    """
    cleaned = _clean(value)
    if not cleaned:
        return None
    if not _INTEGER.match(cleaned) or int(cleaned) < 1:
        raise InvalidPagesError(value)
    return int(cleaned)


def validate_row(raw_row: Mapping[str, str], ordinal: int) -> ValidationOutcome:
    """Validate one parsed record.  Pure and deterministic."""
    missing = [name for name in REQUIRED_FIELDS if not _clean(raw_row.get(name))]
    if missing:
        return InvalidRow(
            ordinal=ordinal,
            raw_row=dict(raw_row),
            reason=f"Row {ordinal}: Missing required fields: {', '.join(missing)}",
            code=MISSING_REQUIRED_FIELD,
        )

    try:
        price = parse_price(raw_row["price"])
        pages = parse_pages(raw_row.get("pages"))
    except (InvalidPriceError, InvalidPagesError) as exc:
        return InvalidRow(
            ordinal=ordinal,
            raw_row=dict(raw_row),
            reason=f"Row {ordinal}: {exc}",
            code=exc.code,
        )

    return ValidRow(
        ordinal=ordinal,
        row=NormalizedRow(
            store_name=_clean(raw_row["store_name"]),
            book_name=_clean(raw_row["book_name"]),
            author_name=_clean(raw_row["author_name"]),
            price=price,
            store_address=_optional(raw_row.get("store_address")),
            logo=_optional(raw_row.get("logo")),
            pages=pages,
        ),
        raw_row=dict(raw_row),
    )
