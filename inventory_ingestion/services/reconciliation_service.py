"""
Reconciliation service: one row, one transaction.

Opens a session per row from the injected factory, runs the reconciler and
commits.  The row's connection is acquired before the reconciler runs;
failing to reach the database there, or losing the connection mid-row,
raises DatabaseUnavailableError so the caller can abort the batch.  Any
other failure rolls back the whole row and comes back as an
unsuccessful ReconcileResult.
"""

from __future__ import annotations

from typing import Callable

from sqlalchemy.exc import (
    DBAPIError,
    DisconnectionError,
    InterfaceError,
    OperationalError,
    SQLAlchemyError,
)
from sqlalchemy.orm import Session

from inventory_kernel.domain.clock import Clock, SystemClock
from inventory_kernel.exceptions import (
    DatabaseUnavailableError,
    InventoryError,
    ReconciliationError,
)
from inventory_kernel.logging_config import get_logger

from inventory_ingestion.domain.types import NormalizedRow
from inventory_ingestion.reconcilers.base import ReconcileResult, RowReconciler
from inventory_ingestion.reconcilers.inventory import InventoryReconciler

logger = get_logger("ingestion.reconciliation_service")


def _is_disconnect(exc: BaseException) -> bool:
    if isinstance(exc, DisconnectionError):
        return True
    return isinstance(exc, DBAPIError) and bool(exc.connection_invalidated)


def _db_message(exc: SQLAlchemyError) -> str:
    orig = getattr(exc, "orig", None)
    return str(orig) if orig is not None else str(exc)


class ReconciliationService:
    """Reconciles rows one transaction at a time."""

    def __init__(
        self,
        session_factory: Callable[[], Session],
        reconciler: RowReconciler | None = None,
        clock: Clock | None = None,
    ):
        self._session_factory = session_factory
        self._reconciler = reconciler or InventoryReconciler()
        self._clock = clock or SystemClock()

    def reconcile(self, row: NormalizedRow, ordinal: int | None = None) -> ReconcileResult:
        """
        Apply ``row`` in its own transaction.

        Raises:
            DatabaseUnavailableError: The database cannot be reached or the
                connection was lost.
        """
        session = self._session_factory()
        try:
            try:
                session.connection()
            except (OperationalError, InterfaceError, DisconnectionError) as exc:
                raise self._unavailable(exc, ordinal) from exc

            result = self._reconciler.reconcile(row, session, self._clock)
            session.commit()
            return result
        except DatabaseUnavailableError:
            raise
        except InventoryError as exc:
            session.rollback()
            code = exc.code if isinstance(exc, ReconciliationError) else ReconciliationError.code
            return self._failed(str(exc), code, ordinal)
        except SQLAlchemyError as exc:
            if _is_disconnect(exc):
                raise self._unavailable(exc, ordinal) from exc
            session.rollback()
            return self._failed(_db_message(exc), ReconciliationError.code, ordinal)
        except Exception as exc:
            session.rollback()
            return self._failed(str(exc), ReconciliationError.code, ordinal)
        finally:
            session.close()

    def _unavailable(self, exc: SQLAlchemyError, ordinal: int | None) -> DatabaseUnavailableError:
        logger.error("database_unavailable", extra={"source_row": ordinal}, exc_info=True)
        return DatabaseUnavailableError(_db_message(exc), source_row=ordinal)

    def _failed(self, error: str, code: str, ordinal: int | None) -> ReconcileResult:
        logger.warning(
            "row_reconcile_failed",
            extra={"source_row": ordinal, "error_code": code, "error_msg": error},
        )
        return ReconcileResult.failed(error, code)
