"""Bounded worker pool that runs CSV parsing off the caller's thread."""

from inventory_ingestion.workers.parser_pool import ParserPool, PoolStats
from inventory_ingestion.workers.tasks import parse_and_validate

__all__ = [
    "ParserPool",
    "PoolStats",
    "parse_and_validate",
]
