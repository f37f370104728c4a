"""
Store report service: store summary + rankings for an external renderer.

Both rankings are read inside one transaction.  On PostgreSQL that
transaction runs at REPEATABLE READ so they describe the same snapshot;
SQLite holds its read lock for the whole transaction.

Rendering (PDF layout) is not done here; the service supplies typed rows
and the suggested download filename.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from datetime import date
from typing import Any, Callable

from sqlalchemy.orm import Session

from inventory_kernel.domain.clock import Clock, SystemClock
from inventory_kernel.logging_config import get_logger
from inventory_kernel.selectors.report_selector import (
    DEFAULT_REPORT_LIMIT,
    InventoryReportSelector,
    PricedBookRow,
    ProlificAuthorRow,
)
from inventory_kernel.selectors.store_selector import StoreSelector, StoreSummary

logger = get_logger("ingestion.report_service")

_NON_ALNUM = re.compile(r"[^a-zA-Z0-9]")

# Isolation level giving one snapshot per transaction, by dialect
_SNAPSHOT_ISOLATION: dict[str, str] = {"postgresql": "REPEATABLE READ"}


def report_filename(store_name: str, generated_on: date) -> str:
    """'Book World' on 2024-01-01 -> 'Book-World-Report-2024-01-01.pdf'."""
    return f"{_NON_ALNUM.sub('-', store_name)}-Report-{generated_on.isoformat()}.pdf"


def _begin_snapshot(session: Session) -> None:
    """Bind the session's transaction at snapshot isolation where needed."""
    level = _SNAPSHOT_ISOLATION.get(session.get_bind().dialect.name)
    if level is not None:
        session.connection(execution_options={"isolation_level": level})


@dataclass(frozen=True)
class StoreReport:
    """Everything a renderer needs for one store report."""

    store: StoreSummary
    top_books: tuple[PricedBookRow, ...]
    top_authors: tuple[ProlificAuthorRow, ...]
    generated_on: date
    filename: str

    def to_dict(self) -> dict[str, Any]:
        return {
            "store": self.store.to_dict(),
            "top_books": [b.to_dict() for b in self.top_books],
            "top_authors": [a.to_dict() for a in self.top_authors],
            "generated_on": self.generated_on.isoformat(),
            "filename": self.filename,
        }


class StoreReportService:
    """Builds StoreReport DTOs from a read-only transaction."""

    def __init__(
        self,
        session_factory: Callable[[], Session],
        clock: Clock | None = None,
        limit: int = DEFAULT_REPORT_LIMIT,
    ):
        self._session_factory = session_factory
        self._clock = clock or SystemClock()
        self._limit = limit

    def build_report(self, store_id: int) -> StoreReport:
        """
        Raises:
            StoreNotFoundError: No store has this id.
        """
        session = self._session_factory()
        try:
            with session.begin():
                _begin_snapshot(session)
                store = StoreSelector(session).get_store(store_id)
                selector = InventoryReportSelector(session)
                top_books = selector.top_priciest_books(store_id, self._limit)
                top_authors = selector.top_prolific_authors(store_id, self._limit)
        finally:
            session.close()

        generated_on = self._clock.now().date()
        logger.info(
            "store_report_built",
            extra={
                "store_id": store_id,
                "books": len(top_books),
                "authors": len(top_authors),
            },
        )
        return StoreReport(
            store=store,
            top_books=tuple(top_books),
            top_authors=tuple(top_authors),
            generated_on=generated_on,
            filename=report_filename(store.name, generated_on),
        )

    def list_stores(self) -> list[StoreSummary]:
        session = self._session_factory()
        try:
            with session.begin():
                return StoreSelector(session).list_stores()
        finally:
            session.close()
