"""
RowReconciler protocol and ReconcileResult.

A reconciler applies one validated row to the live tables inside the
caller's transaction.  It raises on failure; ReconciliationService owns the
transaction and turns failures into unsuccessful results.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Protocol

from sqlalchemy.orm import Session

from inventory_kernel.domain.clock import Clock

from inventory_ingestion.domain.types import NormalizedRow


@dataclass(frozen=True)
class ReconcileResult:
    """Result of reconciling a single row."""

    success: bool
    store_id: int | None = None
    book_id: int | None = None
    store_created: bool = False
    store_updated: bool = False
    author_created: bool = False
    book_created: bool = False
    book_updated: bool = False
    inventory_created: bool = False
    inventory_updated: bool = False
    error: str | None = None
    error_code: str | None = None

    @classmethod
    def failed(cls, error: str, error_code: str) -> "ReconcileResult":
        return cls(success=False, error=error, error_code=error_code)


class RowReconciler(Protocol):
    """Protocol for applying one normalized row to the live tables."""

    def reconcile(
        self,
        row: NormalizedRow,
        session: Session,
        clock: Clock,
    ) -> ReconcileResult:
        """Apply the row. Runs inside the caller's transaction; raises on failure."""
        ...
