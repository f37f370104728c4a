#!/usr/bin/env python3
"""
Create the inventory tables (stores, authors, books, store_books).

Safe to re-run: existing tables are left alone.  Use --drop to start over.

Usage:
    python3 scripts/setup_db.py [--db-url URL] [--drop]
"""

from __future__ import annotations

import argparse
import sys
from pathlib import Path

# Project root on sys.path
ROOT = Path(__file__).resolve().parent.parent
sys.path.insert(0, str(ROOT))


def _parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Create inventory tables.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__,
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
        "--drop",
        action="store_true",
        help="Drop all inventory tables before creating them.",
    )
    return parser.parse_args()


def main() -> int:
    args = _parse_args()

    from inventory_config import get_settings
    from inventory_kernel.db.engine import create_tables, drop_tables, init_engine_from_url
    from inventory_kernel.logging_config import configure_logging

    settings = get_settings(args.config)
    configure_logging(level=settings.logging.level)
    db_url = args.db_url or settings.database.url

    try:
        init_engine_from_url(db_url, echo=settings.database.echo, **settings.database.engine_options())
    except Exception as e:
        print(f"ERROR: Database init failed: {e}", file=sys.stderr)
        return 1

    if args.drop:
        drop_tables()
        print("Dropped inventory tables.")
    create_tables()
    print(f"Inventory tables ready at {db_url}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
