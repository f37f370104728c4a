"""
CSV source adapter.

Uses csv.reader in strict mode over an in-memory string.  Quoted fields may
contain the delimiter and newlines; an unterminated quote raises
CsvParseError and nothing is yielded past that point.

Header normalization happens once, here: trim, case-fold, whitespace runs
collapsed to a single underscore, then known aliases mapped to canonical
column names.  Cell values are trimmed.  Records whose cells are all blank
are skipped and do not consume an ordinal.
"""

from __future__ import annotations

import csv
import io
import re
from typing import Iterator

from inventory_kernel.exceptions import CsvParseError

from inventory_ingestion.adapters.base import SourceProbe

_BOM = "\ufeff"
_WHITESPACE = re.compile(r"\s+")

# Header row is ordinal 1
FIRST_DATA_ORDINAL = 2

HEADER_ALIASES: dict[str, str] = {
    "page_count": "pages",
    "store": "store_name",
    "book": "book_name",
    "author": "author_name",
}


def decode_buffer(buffer: bytes | str) -> str:
    """
    Decode an uploaded buffer to text, dropping a leading BOM.

    Raises:
        CsvParseError: bytes that are not valid UTF-8.
    """
    if isinstance(buffer, bytes):
        try:
            return buffer.decode("utf-8-sig")
        except UnicodeDecodeError as exc:
            raise CsvParseError(
                f"not valid UTF-8 ({exc.reason} at byte {exc.start})",
                buffer.count(b"\n", 0, exc.start) + 1,
            ) from exc
    return buffer[1:] if buffer.startswith(_BOM) else buffer


def normalize_header(name: str) -> str:
    """'  Store   Name ' -> 'store_name'; aliases resolved."""
    key = _WHITESPACE.sub("_", name.strip().lower())
    return HEADER_ALIASES.get(key, key)


def _is_blank(record: list[str]) -> bool:
    return not any(cell.strip() for cell in record)


class CsvSourceAdapter:
    """Read CSV text as one dict per record, keyed by normalized header."""

    def __init__(self, delimiter: str = ","):
        self.delimiter = delimiter

    def _reader(self, text: str):
        if text.startswith(_BOM):
            text = text[1:]
        return csv.reader(
            io.StringIO(text, newline=""),
            delimiter=self.delimiter,
            strict=True,
        )

    def read(self, text: str) -> Iterator[tuple[int, dict[str, str]]]:
        reader = self._reader(text)
        try:
            header = next(reader, None)
            while header is not None and _is_blank(header):
                header = next(reader, None)
            if header is None:
                return
            columns = [normalize_header(h) for h in header]

            ordinal = FIRST_DATA_ORDINAL
            for record in reader:
                if _is_blank(record):
                    continue
                row: dict[str, str] = {}
                for i, column in enumerate(columns):
                    if not column:
                        continue
                    row[column] = record[i].strip() if i < len(record) else ""
                yield ordinal, row
                ordinal += 1
        except csv.Error as exc:
            raise CsvParseError(str(exc), reader.line_num) from exc

    def probe(self, text: str, sample_size: int = 5) -> SourceProbe:
        columns: tuple[str, ...] = ()
        sample: list[dict[str, str]] = []
        count = 0
        for _, row in self.read(text):
            if not columns:
                columns = tuple(row)
            if len(sample) < sample_size:
                sample.append(row)
            count += 1

        if not columns:
            header = next(self._reader(text), None) or []
            columns = tuple(normalize_header(h) for h in header if h.strip())

        return SourceProbe(
            row_count=count,
            columns=columns,
            sample_rows=tuple(sample),
            detected_delimiter=self.delimiter,
        )
