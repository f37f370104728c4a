#!/usr/bin/env python3
"""
Ingest an inventory CSV: parse and validate on the parser pool, then
reconcile every valid row against stores, authors, books and inventory.

Tables must exist (run scripts/setup_db.py once).

Usage:
    python3 scripts/run_import.py --file <path> [options]

Examples:
    # Full pipeline
    python3 scripts/run_import.py --file inventory.csv

    # Probe the file (row count, columns, sample) without touching the DB
    python3 scripts/run_import.py --file inventory.csv --probe-only

    # Print the result as JSON
    python3 scripts/run_import.py --file inventory.csv --json
"""

from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path

# Project root on sys.path
ROOT = Path(__file__).resolve().parent.parent
sys.path.insert(0, str(ROOT))


def _parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Ingest an inventory CSV file.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__,
    )
    parser.add_argument(
        "--file",
        required=True,
        type=Path,
        help="Path to the CSV file.",
    )
    parser.add_argument(
        "--config",
        type=Path,
        default=None,
        help="Settings override YAML (default: INVENTORY_CONFIG env or built-in defaults).",
    )
    parser.add_argument(
        "--db-url",
        default=None,
        help="Database URL (overrides settings).",
    )
    parser.add_argument(
        "--probe-only",
        action="store_true",
        help="Probe the file (row count, columns, sample rows) and exit. No DB writes.",
    )
    parser.add_argument(
        "--json",
        action="store_true",
        help="Print the full result as JSON.",
    )
    return parser.parse_args()


def main() -> int:
    args = _parse_args()

    source_path = args.file.resolve()
    if not source_path.is_file():
        print(f"ERROR: File not found: {source_path}", file=sys.stderr)
        return 1

    # Lazy imports so we fail fast on args first
    from inventory_config import get_settings
    from inventory_ingestion.adapters import CsvSourceAdapter, decode_buffer
    from inventory_ingestion.services import ImportService, ReconciliationService
    from inventory_ingestion.workers import ParserPool
    from inventory_kernel.db.engine import get_session_factory, init_engine_from_url
    from inventory_kernel.domain.clock import SystemClock
    from inventory_kernel.exceptions import InventoryError
    from inventory_kernel.logging_config import configure_logging

    settings = get_settings(args.config)
    configure_logging(level=settings.logging.level)
    buffer = source_path.read_bytes()

    if args.probe_only:
        try:
            probe = CsvSourceAdapter().probe(decode_buffer(buffer))
        except InventoryError as e:
            print(f"ERROR: {e}", file=sys.stderr)
            return 1
        print(f"Rows: {probe.row_count}")
        print(f"Columns: {list(probe.columns)}")
        print("Sample (first 3):")
        for i, row in enumerate(probe.sample_rows[:3], 1):
            print(f"  {i}: {row}")
        return 0

    try:
        init_engine_from_url(
            args.db_url or settings.database.url,
            echo=settings.database.echo,
            **settings.database.engine_options(),
        )
    except Exception as e:
        print(f"ERROR: Database init failed: {e}", file=sys.stderr)
        return 1

    pool_settings = settings.parser_pool
    pool = ParserPool(
        min_workers=pool_settings.min_workers,
        max_workers=pool_settings.max_workers,
        idle_timeout=pool_settings.idle_timeout_seconds,
        run_timeout=pool_settings.run_timeout_seconds,
    )
    service = ImportService(
        parser_pool=pool,
        reconciliation_service=ReconciliationService(
            get_session_factory(),
            clock=SystemClock(),
        ),
    )

    with pool:
        try:
            result = service.ingest(buffer)
        except InventoryError as e:
            print(f"ERROR [{e.code}]: {e}", file=sys.stderr)
            return 1

    if args.json:
        print(json.dumps(result.to_dict(), indent=2))
        return 0 if result.success else 1

    print(result.message)
    print(f"  Processed: {result.processed}")
    created = result.created
    print(
        f"  Created: stores={created.stores}, authors={created.authors}, "
        f"books={created.books}, inventory={created.inventory}"
    )
    print(f"  Updated: inventory={result.updated.inventory}")
    if result.errors:
        for err in result.errors[:10]:
            print(f"  Row {err.row}: {err.error}")
        if len(result.errors) > 10:
            print(f"  ... and {len(result.errors) - 10} more errors.")
    return 0 if result.success else 1


if __name__ == "__main__":
    sys.exit(main())
