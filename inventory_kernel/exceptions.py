"""
Typed exception hierarchy for the inventory system.

Every exception carries a class-level ``code`` (machine-readable, API-safe)
and stores its context as attributes, so callers catch by type and report
by code instead of parsing messages.

    InventoryError (base)
    |
    +-- IngestionError
    |   +-- EmptyUploadError
    |   +-- CsvParseError
    |
    +-- ParserPoolError
    |   +-- ParserPoolNotRunningError
    |   +-- ParseTimeoutError
    |
    +-- ReconciliationError
    |   +-- InvalidPriceError
    |   +-- InvalidPagesError
    |
    +-- DatabaseUnavailableError
    |
    +-- ReportError
    |   +-- StoreNotFoundError
    |
    +-- ConfigurationError

Propagation policy:
    Row-level failures (validation, reconciliation) are recovered by the
    ingestion service and reported per row.  IngestionError, ParserPoolError
    and DatabaseUnavailableError fail the whole ingestion call.
"""


class InventoryError(Exception):
    """Base exception for all inventory errors."""

    code: str = "INVENTORY_ERROR"


# Ingestion


class IngestionError(InventoryError):
    """Base exception for upload-level ingestion failures."""

    code: str = "INGESTION_ERROR"


class EmptyUploadError(IngestionError):
    """The uploaded buffer contained no data."""

    code: str = "EMPTY_UPLOAD"

    def __init__(self) -> None:
        super().__init__("Uploaded file is empty.")


class CsvParseError(IngestionError):
    """The delimited text could not be parsed (e.g. unterminated quote)."""

    code: str = "CSV_PARSE_ERROR"

    def __init__(self, reason: str, line_number: int | None = None):
        self.reason = reason
        self.line_number = line_number
        where = f" near line {line_number}" if line_number else ""
        super().__init__(f"Malformed CSV{where}: {reason}")


# Parser pool


class ParserPoolError(InventoryError):
    """Base exception for parser worker pool failures."""

    code: str = "PARSER_POOL_ERROR"


class ParserPoolNotRunningError(ParserPoolError):
    """Work was submitted to a pool that is not started or already stopped."""

    code: str = "PARSER_POOL_NOT_RUNNING"

    def __init__(self, pool_name: str):
        self.pool_name = pool_name
        super().__init__(f"Parser pool {pool_name!r} is not running")


class ParseTimeoutError(ParserPoolError):
    """A parse unit did not complete within the run timeout."""

    code: str = "PARSE_TIMEOUT"

    def __init__(self, timeout_seconds: float):
        self.timeout_seconds = timeout_seconds
        super().__init__(f"CSV parsing did not finish within {timeout_seconds}s")


# Reconciliation


class ReconciliationError(InventoryError):
    """Base exception for a single row that could not be reconciled."""

    code: str = "RECONCILIATION_FAILED"


class InvalidPriceError(ReconciliationError):
    """Price is not a finite number or is negative."""

    code: str = "INVALID_PRICE"

    def __init__(self, value: object):
        self.value = str(value)
        super().__init__(f"Invalid price value: {value}")


class InvalidPagesError(ReconciliationError):
    """Page count is not a positive integer."""

    code: str = "INVALID_PAGES"

    def __init__(self, value: object):
        self.value = str(value)
        super().__init__(f"Invalid pages value: {value}")


# Resources


class DatabaseUnavailableError(InventoryError):
    """The relational store is unreachable; the remaining batch is aborted."""

    code: str = "DATABASE_UNAVAILABLE"

    def __init__(self, detail: str, source_row: int | None = None):
        self.detail = detail
        self.source_row = source_row
        super().__init__(f"Unable to connect to database: {detail}")


# Reporting


class ReportError(InventoryError):
    """Base exception for store report failures."""

    code: str = "REPORT_ERROR"


class StoreNotFoundError(ReportError):
    """Store with the given id does not exist."""

    code: str = "STORE_NOT_FOUND"

    def __init__(self, store_id: int):
        self.store_id = store_id
        super().__init__(f"Store with ID {store_id} not found.")


# Configuration


class ConfigurationError(InventoryError):
    """Settings file or environment override is invalid."""

    code: str = "CONFIGURATION_ERROR"

    def __init__(self, key: str, reason: str):
        self.key = key
        self.reason = reason
        super().__init__(f"Invalid setting {key!r}: {reason}")
