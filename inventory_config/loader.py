"""
Settings loader (``inventory_config.loader``).

Loads ``defaults.yaml``, deep-merges an optional override file and applies
environment overrides, then parses the result into the frozen dataclasses
of ``inventory_config.schema``.

Failure modes
-------------
* Missing override file  -> ``FileNotFoundError`` propagates.
* Malformed YAML  -> ``yaml.YAMLError`` propagates.
* Wrong types or out-of-range values  -> ``ConfigurationError``.
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any, Mapping

import yaml

from inventory_kernel.exceptions import ConfigurationError

from inventory_config.schema import (
    DatabaseSettings,
    InventorySettings,
    LoggingSettings,
    ParserPoolSettings,
    ReportSettings,
)

DEFAULTS_PATH = Path(__file__).parent / "defaults.yaml"

ENV_CONFIG_PATH = "INVENTORY_CONFIG"
ENV_DATABASE_URL = "INVENTORY_DATABASE_URL"
ENV_LOG_LEVEL = "INVENTORY_LOG_LEVEL"

_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


def load_yaml_file(path: Path) -> dict[str, Any]:
    """
    Load a single YAML file and return its contents as a dict.

    Raises:
        FileNotFoundError: if the file does not exist.
        yaml.YAMLError: if the file contains invalid YAML.
        ConfigurationError: if the top level is not a mapping.
    """
    with open(path) as f:
        data = yaml.safe_load(f) or {}
    if not isinstance(data, dict):
        raise ConfigurationError(str(path), "top level must be a mapping")
    return data


def deep_merge(base: dict[str, Any], override: Mapping[str, Any]) -> dict[str, Any]:
    """Return a new dict: ``override`` merged into ``base``, nested dicts merged."""
    merged = dict(base)
    for key, value in override.items():
        if isinstance(value, Mapping) and isinstance(merged.get(key), dict):
            merged[key] = deep_merge(merged[key], value)
        else:
            merged[key] = value
    return merged


def apply_env_overrides(data: dict[str, Any], environ: Mapping[str, str]) -> dict[str, Any]:
    overrides: dict[str, Any] = {}
    if environ.get(ENV_DATABASE_URL):
        overrides.setdefault("database", {})["url"] = environ[ENV_DATABASE_URL]
    if environ.get(ENV_LOG_LEVEL):
        overrides.setdefault("logging", {})["level"] = environ[ENV_LOG_LEVEL]
    return deep_merge(data, overrides)


def _int(section: Mapping[str, Any], key: str, prefix: str, minimum: int) -> int:
    value = section.get(key)
    if isinstance(value, bool) or not isinstance(value, int):
        raise ConfigurationError(f"{prefix}.{key}", f"expected an integer, got {value!r}")
    if value < minimum:
        raise ConfigurationError(f"{prefix}.{key}", f"must be >= {minimum}")
    return value


def _seconds(section: Mapping[str, Any], key: str, prefix: str) -> float | None:
    value = section.get(key)
    if value is None:
        return None
    if isinstance(value, bool) or not isinstance(value, (int, float)) or value <= 0:
        raise ConfigurationError(f"{prefix}.{key}", f"expected positive seconds, got {value!r}")
    return float(value)


def _section(data: Mapping[str, Any], name: str) -> Mapping[str, Any]:
    section = data.get(name) or {}
    if not isinstance(section, Mapping):
        raise ConfigurationError(name, "section must be a mapping")
    return section


def parse_database(data: Mapping[str, Any]) -> DatabaseSettings:
    section = _section(data, "database")
    url = section.get("url")
    if not isinstance(url, str) or not url.strip():
        raise ConfigurationError("database.url", "must be a non-empty string")
    return DatabaseSettings(
        url=url.strip(),
        echo=bool(section.get("echo", False)),
        pool_size=_int(section, "pool_size", "database", 1),
        max_overflow=_int(section, "max_overflow", "database", 0),
        pool_timeout=_int(section, "pool_timeout", "database", 1),
    )


def parse_parser_pool(data: Mapping[str, Any]) -> ParserPoolSettings:
    section = _section(data, "parser_pool")
    min_workers = _int(section, "min_workers", "parser_pool", 0)
    max_workers = _int(section, "max_workers", "parser_pool", 1)
    if max_workers < min_workers:
        raise ConfigurationError(
            "parser_pool.max_workers",
            f"must be >= min_workers ({min_workers})",
        )
    idle = _seconds(section, "idle_timeout_seconds", "parser_pool")
    if idle is None:
        raise ConfigurationError("parser_pool.idle_timeout_seconds", "is required")
    return ParserPoolSettings(
        min_workers=min_workers,
        max_workers=max_workers,
        idle_timeout_seconds=idle,
        run_timeout_seconds=_seconds(section, "run_timeout_seconds", "parser_pool"),
    )


def parse_report(data: Mapping[str, Any]) -> ReportSettings:
    return ReportSettings(limit=_int(_section(data, "report"), "limit", "report", 1))


def parse_logging(data: Mapping[str, Any]) -> LoggingSettings:
    level = str(_section(data, "logging").get("level", "INFO")).strip().upper()
    if level not in _LOG_LEVELS:
        raise ConfigurationError("logging.level", f"unknown level {level!r}")
    return LoggingSettings(level=level)


def parse_settings(data: Mapping[str, Any]) -> InventorySettings:
    return InventorySettings(
        database=parse_database(data),
        parser_pool=parse_parser_pool(data),
        report=parse_report(data),
        logging=parse_logging(data),
    )


def load_settings(
    path: Path | str | None = None,
    environ: Mapping[str, str] | None = None,
) -> InventorySettings:
    """
    Build settings from defaults, an optional override file and the environment.

    Args:
        path: Override YAML.  Falls back to $INVENTORY_CONFIG when None.
        environ: Environment mapping (defaults to os.environ).
    """
    environ = os.environ if environ is None else environ
    data = load_yaml_file(DEFAULTS_PATH)

    override_path = path or environ.get(ENV_CONFIG_PATH)
    if override_path:
        data = deep_merge(data, load_yaml_file(Path(override_path)))

    return parse_settings(apply_env_overrides(data, environ))
