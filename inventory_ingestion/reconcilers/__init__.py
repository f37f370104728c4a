"""Reconcilers: NormalizedRow -> stores, authors, books and inventory positions."""

from inventory_ingestion.reconcilers.base import ReconcileResult, RowReconciler
from inventory_ingestion.reconcilers.inventory import InventoryReconciler

__all__ = [
    "InventoryReconciler",
    "ReconcileResult",
    "RowReconciler",
]
