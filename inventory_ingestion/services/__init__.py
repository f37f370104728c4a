"""Ingestion and report services."""

from inventory_ingestion.services.import_service import ImportService
from inventory_ingestion.services.reconciliation_service import ReconciliationService
from inventory_ingestion.services.report_service import (
    StoreReport,
    StoreReportService,
    report_filename,
)
from inventory_ingestion.services.report_text import render_text, truncate_text

__all__ = [
    "ImportService",
    "ReconciliationService",
    "StoreReport",
    "StoreReportService",
    "report_filename",
    "render_text",
    "truncate_text",
]
