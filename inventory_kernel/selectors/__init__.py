"""Selectors for the inventory kernel (read side)."""

from inventory_kernel.selectors.report_selector import (
    DEFAULT_REPORT_LIMIT,
    InventoryReportSelector,
    PricedBookRow,
    ProlificAuthorRow,
)
from inventory_kernel.selectors.store_selector import StoreSelector, StoreSummary

__all__ = [
    "DEFAULT_REPORT_LIMIT",
    "InventoryReportSelector",
    "PricedBookRow",
    "ProlificAuthorRow",
    "StoreSelector",
    "StoreSummary",
]
