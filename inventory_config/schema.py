"""
Settings schema.

Frozen dataclasses the loader parses YAML into.  Nothing here reads files or
the environment.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class DatabaseSettings:
    url: str
    echo: bool = False
    pool_size: int = 5
    max_overflow: int = 10
    pool_timeout: int = 30

    def engine_options(self) -> dict[str, int]:
        """Pool keyword arguments for init_engine_from_url()."""
        return {
            "pool_size": self.pool_size,
            "max_overflow": self.max_overflow,
            "pool_timeout": self.pool_timeout,
        }


@dataclass(frozen=True)
class ParserPoolSettings:
    min_workers: int = 2
    max_workers: int = 4
    idle_timeout_seconds: float = 30.0
    run_timeout_seconds: float | None = None


@dataclass(frozen=True)
class ReportSettings:
    limit: int = 5


@dataclass(frozen=True)
class LoggingSettings:
    level: str = "INFO"


@dataclass(frozen=True)
class InventorySettings:
    """Complete runtime settings."""

    database: DatabaseSettings
    parser_pool: ParserPoolSettings
    report: ReportSettings
    logging: LoggingSettings
