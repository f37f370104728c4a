#!/usr/bin/env python3
"""
Print a store report: top priciest books and most prolific authors.

Usage:
    python3 scripts/store_report.py --store-id 1
    python3 scripts/store_report.py --list
    python3 scripts/store_report.py --store-id 1 --json
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
        description="Print a store inventory report.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__,
    )
    target = parser.add_mutually_exclusive_group(required=True)
    target.add_argument("--store-id", type=int, help="Store to report on.")
    target.add_argument("--list", action="store_true", help="List stores and exit.")
    parser.add_argument(
        "--config",
        type=Path,
        default=None,
        help="Settings override YAML (default: INVENTORY_CONFIG env or built-in defaults).",
    )
    parser.add_argument("--db-url", default=None, help="Database URL (overrides settings).")
    parser.add_argument("--json", action="store_true", help="Print the report as JSON.")
    return parser.parse_args()


def main() -> int:
    args = _parse_args()

    from inventory_config import get_settings
    from inventory_ingestion.services import StoreReportService, render_text
    from inventory_kernel.db.engine import get_session_factory, init_engine_from_url
    from inventory_kernel.exceptions import StoreNotFoundError
    from inventory_kernel.logging_config import configure_logging

    settings = get_settings(args.config)
    configure_logging(level=settings.logging.level)

    try:
        init_engine_from_url(
            args.db_url or settings.database.url,
            echo=settings.database.echo,
            **settings.database.engine_options(),
        )
    except Exception as e:
        print(f"ERROR: Database init failed: {e}", file=sys.stderr)
        return 1

    service = StoreReportService(get_session_factory(), limit=settings.report.limit)

    if args.list:
        for store in service.list_stores():
            print(f"  {store.store_id:>5}  {store.name}")
        return 0

    try:
        report = service.build_report(args.store_id)
    except StoreNotFoundError as e:
        print(f"ERROR: {e}", file=sys.stderr)
        return 1

    if args.json:
        print(json.dumps(report.to_dict(), indent=2))
    else:
        print(f"[{report.filename}]")
        print(render_text(report))
    return 0


if __name__ == "__main__":
    sys.exit(main())
