"""Tests for inventory_config: defaults, override files, environment."""

import pytest
import yaml

from inventory_kernel.exceptions import ConfigurationError

from inventory_config import get_settings
from inventory_config.loader import deep_merge, load_settings


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch):
    for name in ("INVENTORY_CONFIG", "INVENTORY_DATABASE_URL", "INVENTORY_LOG_LEVEL"):
        monkeypatch.delenv(name, raising=False)


def _write(tmp_path, data) -> str:
    path = tmp_path / "override.yaml"
    path.write_text(yaml.safe_dump(data))
    return str(path)


class TestDefaults:
    def test_defaults(self):
        settings = get_settings()
        assert settings.parser_pool.min_workers == 2
        assert settings.parser_pool.max_workers == 4
        assert settings.parser_pool.idle_timeout_seconds == 30.0
        assert settings.report.limit == 5
        assert settings.logging.level == "INFO"
        assert settings.database.url.startswith("sqlite")

    def test_engine_options(self):
        options = get_settings().database.engine_options()
        assert options == {"pool_size": 5, "max_overflow": 10, "pool_timeout": 30}


class TestOverrides:
    def test_override_file_merges_sections(self, tmp_path):
        path = _write(tmp_path, {"parser_pool": {"max_workers": 8}, "report": {"limit": 10}})
        settings = get_settings(path)
        assert settings.parser_pool.max_workers == 8
        assert settings.parser_pool.min_workers == 2
        assert settings.report.limit == 10

    def test_config_path_from_env(self, tmp_path, monkeypatch):
        monkeypatch.setenv("INVENTORY_CONFIG", _write(tmp_path, {"logging": {"level": "debug"}}))
        assert get_settings().logging.level == "DEBUG"

    def test_env_overrides_win(self, tmp_path):
        path = _write(tmp_path, {"database": {"url": "sqlite:///from-file.db"}})
        settings = load_settings(
            path,
            environ={
                "INVENTORY_DATABASE_URL": "postgresql://u:p@db/inventory",
                "INVENTORY_LOG_LEVEL": "warning",
            },
        )
        assert settings.database.url == "postgresql://u:p@db/inventory"
        assert settings.logging.level == "WARNING"

    def test_missing_override_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            get_settings(tmp_path / "nope.yaml")


class TestValidation:
    def test_max_below_min(self, tmp_path):
        path = _write(tmp_path, {"parser_pool": {"min_workers": 4, "max_workers": 2}})
        with pytest.raises(ConfigurationError) as exc_info:
            get_settings(path)
        assert exc_info.value.key == "parser_pool.max_workers"

    @pytest.mark.parametrize(
        "override, key",
        [
            ({"report": {"limit": 0}}, "report.limit"),
            ({"parser_pool": {"min_workers": "two"}}, "parser_pool.min_workers"),
            ({"parser_pool": {"idle_timeout_seconds": -1}}, "parser_pool.idle_timeout_seconds"),
            ({"database": {"url": ""}}, "database.url"),
            ({"logging": {"level": "LOUD"}}, "logging.level"),
        ],
    )
    def test_invalid_values(self, tmp_path, override, key):
        with pytest.raises(ConfigurationError) as exc_info:
            get_settings(_write(tmp_path, override))
        assert exc_info.value.key == key
        assert exc_info.value.code == "CONFIGURATION_ERROR"

    def test_non_mapping_file(self, tmp_path):
        path = tmp_path / "list.yaml"
        path.write_text("- a\n- b\n")
        with pytest.raises(ConfigurationError):
            get_settings(path)


class TestDeepMerge:
    def test_nested(self):
        assert deep_merge({"a": {"x": 1, "y": 2}, "b": 1}, {"a": {"y": 3}}) == {
            "a": {"x": 1, "y": 3},
            "b": 1,
        }

    def test_does_not_mutate_base(self):
        base = {"a": {"x": 1}}
        deep_merge(base, {"a": {"x": 2}})
        assert base == {"a": {"x": 1}}
