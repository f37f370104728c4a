"""
Pytest fixtures for the inventory test suite.

Provides:
- Structured logging configured once per session, plus ``captured_logs``
- A file-backed SQLite database per test (per-row transactions need
  several connections to see the same data)
- Clock, parser pool and service fixtures wired the way scripts wire them
"""

import json
import logging
from datetime import datetime, timezone
from io import StringIO

import pytest
from sqlalchemy.orm import sessionmaker

from inventory_kernel.db.engine import create_engine_from_url, create_tables
from inventory_kernel.domain.clock import DeterministicClock
from inventory_kernel.logging_config import (
    LogContext,
    StructuredFormatter,
    configure_logging,
    reset_logging,
)

from inventory_ingestion.services.import_service import ImportService
from inventory_ingestion.services.reconciliation_service import ReconciliationService
from inventory_ingestion.services.report_service import StoreReportService
from inventory_ingestion.workers.parser_pool import ParserPool

HEADER = "store_name,store_address,book_name,pages,author_name,price,logo"


def _make_csv(*rows: str, header: str = HEADER) -> str:
    return "\n".join((header,) + rows) + "\n"


@pytest.fixture
def make_csv():
    """Build CSV text: make_csv("BookWorld,,Gatsby,180,Fitzgerald,15.99")."""
    return _make_csv


# =============================================================================
# Logging fixtures
# =============================================================================


@pytest.fixture(autouse=True, scope="session")
def _configure_test_logging():
    """Configure structured logging for the test suite."""
    reset_logging()
    configure_logging(level=logging.DEBUG)
    yield
    reset_logging()


@pytest.fixture(autouse=True)
def _clear_log_context():
    """Clear LogContext between tests to prevent cross-test contamination."""
    LogContext.clear()
    yield
    LogContext.clear()


@pytest.fixture
def captured_logs():
    """
    Capture inventory_kernel logs as parsed JSON dicts.

    Usage::

        def test_something(captured_logs, import_service):
            import_service.ingest(data)
            logs = captured_logs()
            assert any(r["message"] == "upload_completed" for r in logs)
    """
    stream = StringIO()
    handler = logging.StreamHandler(stream)
    handler.setFormatter(StructuredFormatter())
    root = logging.getLogger("inventory_kernel")
    previous_level = root.level
    root.setLevel(logging.DEBUG)
    root.addHandler(handler)

    def _get_records() -> list[dict]:
        lines = stream.getvalue().strip().split("\n")
        return [json.loads(line) for line in lines if line]

    yield _get_records

    root.removeHandler(handler)
    root.setLevel(previous_level)


# =============================================================================
# Database fixtures
# =============================================================================


@pytest.fixture
def db_url(tmp_path) -> str:
    return f"sqlite:///{tmp_path / 'inventory.db'}"


@pytest.fixture
def engine(db_url):
    eng = create_engine_from_url(db_url)
    create_tables(eng)
    yield eng
    eng.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(bind=engine, expire_on_commit=False)


@pytest.fixture
def session(session_factory):
    s = session_factory()
    try:
        yield s
    finally:
        s.rollback()
        s.close()


@pytest.fixture
def clock():
    return DeterministicClock(
        fixed_time=datetime(2024, 3, 15, 9, 30, 0, tzinfo=timezone.utc),
    )


# =============================================================================
# Service fixtures
# =============================================================================


@pytest.fixture
def parser_pool():
    pool = ParserPool(min_workers=1, max_workers=2, idle_timeout=5.0, run_timeout=30.0)
    pool.start()
    yield pool
    pool.stop()


@pytest.fixture
def reconciliation_service(session_factory, clock):
    return ReconciliationService(session_factory, clock=clock)


@pytest.fixture
def import_service(parser_pool, reconciliation_service):
    return ImportService(parser_pool, reconciliation_service)


@pytest.fixture
def report_service(session_factory, clock):
    return StoreReportService(session_factory, clock=clock)
