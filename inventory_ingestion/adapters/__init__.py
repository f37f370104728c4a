"""Source adapters for inventory ingestion (text parsing only, no DB)."""

from inventory_ingestion.adapters.base import SourceAdapter, SourceProbe
from inventory_ingestion.adapters.csv_adapter import (
    CsvSourceAdapter,
    decode_buffer,
    normalize_header,
)

__all__ = [
    "SourceAdapter",
    "SourceProbe",
    "CsvSourceAdapter",
    "decode_buffer",
    "normalize_header",
]
