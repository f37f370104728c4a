"""
inventory_config -- single public entrypoint for runtime settings.

``get_settings()`` is the only way services and scripts obtain settings.
YAML loading lives in ``inventory_config.loader``.
"""

from __future__ import annotations

from pathlib import Path

from inventory_config.loader import load_settings
from inventory_config.schema import (
    DatabaseSettings,
    InventorySettings,
    LoggingSettings,
    ParserPoolSettings,
    ReportSettings,
)
from inventory_kernel.logging_config import get_logger

_logger = get_logger("config")


def get_settings(path: Path | str | None = None) -> InventorySettings:
    """Load settings from defaults, the optional override file and the environment."""
    settings = load_settings(path)
    _logger.debug(
        "settings_loaded",
        extra={
            "override": str(path) if path else None,
            "log_level": settings.logging.level,
            "parser_pool_max_workers": settings.parser_pool.max_workers,
        },
    )
    return settings


__all__ = [
    "DatabaseSettings",
    "InventorySettings",
    "LoggingSettings",
    "ParserPoolSettings",
    "ReportSettings",
    "get_settings",
]
