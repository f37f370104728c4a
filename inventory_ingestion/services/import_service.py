"""
Import service: buffer -> parse/validate (pool) -> reconcile (per row).

Orchestrates the parser pool and the reconciliation service and aggregates
a single IngestionResult.  Uses structured logging (LogContext,
get_logger("ingestion.*")).

Error propagation:
    - EmptyUploadError, CsvParseError, ParserPoolError and
      DatabaseUnavailableError fail the whole call.
    - Validation and reconciliation failures are reported per row in
      IngestionResult.errors; processing continues.
"""

from __future__ import annotations

import time
from uuid import uuid4

from inventory_kernel.exceptions import EmptyUploadError
from inventory_kernel.logging_config import LogContext, get_logger

from inventory_ingestion.adapters.csv_adapter import decode_buffer
from inventory_ingestion.domain.types import (
    CreatedCounts,
    IngestionResult,
    RowError,
    UpdatedCounts,
)
from inventory_ingestion.services.reconciliation_service import ReconciliationService
from inventory_ingestion.workers.parser_pool import ParserPool

logger = get_logger("ingestion.import_service")


class ImportService:
    """Ingests one uploaded CSV buffer.

    Contract:
        - Parsing and validation run on the injected ParserPool.
        - Valid rows are reconciled in the calling thread, in file order,
          one transaction per row.

    Non-goals:
        - Does NOT enforce an upload size limit.
        - Does NOT deduplicate rows within or across uploads beyond
          natural-key matching.
    """

    def __init__(
        self,
        parser_pool: ParserPool,
        reconciliation_service: ReconciliationService,
        parse_timeout: float | None = None,
    ):
        self._pool = parser_pool
        self._reconciliation = reconciliation_service
        self._parse_timeout = parse_timeout

    def ingest(self, buffer: bytes | str, upload_id: str | None = None) -> IngestionResult:
        """
        Parse, validate and reconcile one upload.

        Raises:
            EmptyUploadError: The buffer is empty or whitespace only.
            CsvParseError: The text is malformed; nothing was reconciled.
            ParseTimeoutError: Parsing exceeded the timeout.
            DatabaseUnavailableError: The database connection was lost;
                rows before the failing one stay committed.
        """
        upload_id = upload_id or str(uuid4())
        with LogContext.bind(upload_id=upload_id, producer="ingestion"):
            text = decode_buffer(buffer)
            if not text.strip():
                logger.warning("upload_rejected_empty")
                raise EmptyUploadError()

            start = time.monotonic()
            logger.info("upload_received", extra={"size": len(buffer)})

            outcome = self._pool.run(text, timeout=self._parse_timeout)
            logger.info(
                "upload_parsed",
                extra={
                    "total_parsed": outcome.total_parsed,
                    "valid_rows": len(outcome.valid_rows),
                    "invalid_rows": len(outcome.errors),
                },
            )

            errors: list[RowError] = [
                RowError(row=e.ordinal, data=e.raw_row, error=e.reason, code=e.code)
                for e in outcome.errors
            ]
            for e in outcome.errors:
                logger.info(
                    "row_rejected",
                    extra={"source_row": e.ordinal, "error_code": e.code, "error_msg": e.reason},
                )

            processed = 0
            stores = authors = books = inventory_created = inventory_updated = 0

            for valid in outcome.valid_rows:
                with LogContext.bind(
                    source_row=str(valid.ordinal),
                    store_name=valid.row.store_name,
                ):
                    result = self._reconciliation.reconcile(valid.row, valid.ordinal)

                    if not result.success:
                        errors.append(
                            RowError(
                                row=valid.ordinal,
                                data=valid.raw_row,
                                error=result.error or "",
                                code=result.error_code or "",
                            )
                        )
                        continue

                    processed += 1
                    stores += result.store_created
                    authors += result.author_created
                    books += result.book_created
                    inventory_created += result.inventory_created
                    inventory_updated += result.inventory_updated

                    logger.debug(
                        "row_reconciled",
                        extra={
                            "store_id": result.store_id,
                            "book_id": result.book_id,
                            "store_created": result.store_created,
                            "store_updated": result.store_updated,
                            "author_created": result.author_created,
                            "book_created": result.book_created,
                            "book_updated": result.book_updated,
                            "inventory_created": result.inventory_created,
                            "inventory_updated": result.inventory_updated,
                        },
                    )

            result = IngestionResult(
                processed=processed,
                created=CreatedCounts(
                    stores=stores,
                    authors=authors,
                    books=books,
                    inventory=inventory_created,
                ),
                updated=UpdatedCounts(inventory=inventory_updated),
                errors=tuple(errors),
            )

            duration_ms = round((time.monotonic() - start) * 1000, 2)
            logger.info(
                "upload_completed",
                extra={
                    "processed": processed,
                    "failed": len(errors),
                    "success": result.success,
                    "duration_ms": duration_ms,
                },
            )
            return result
