"""Tests for PIDEA logging configuration and setup."""

import logging
from pathlib import Path

import pytest
import yaml

from pidea_core.logging import (
    CONFIG_DIR,
    LoggingError,
    get_config_path,
    load_config,
    setup_logging,
)


@pytest.fixture(autouse=True)
def restore_logging_state():
    """Restore root and package logger configuration after each test."""
    root = logging.getLogger()
    package = logging.getLogger("pidea_core")
    saved_root = (root.level, list(root.handlers))
    saved_package = (
        package.level,
        list(package.handlers),
        package.propagate,
        package.disabled,
    )

    yield

    root.setLevel(saved_root[0])
    root.handlers[:] = saved_root[1]
    package.setLevel(saved_package[0])
    package.handlers[:] = saved_package[1]
    package.propagate = saved_package[2]
    package.disabled = saved_package[3]


class TestLoggingConfiguration:
    """Test logging configuration discovery and loading."""

    def test_default_config_path(self):
        """Without environment the general configuration is used."""
        assert get_config_path() == CONFIG_DIR / "logging.yaml"

    def test_environment_specific_config_path(self):
        """An environment alias selects its own configuration file."""
        path = get_config_path(environment="development")

        assert path == CONFIG_DIR / "logging-dev.yaml"

    def test_environment_variable_selects_config(self, monkeypatch: pytest.MonkeyPatch):
        """PIDEA_ENV selects the environment configuration."""
        monkeypatch.setenv("PIDEA_ENV", "dev")

        assert get_config_path() == CONFIG_DIR / "logging-dev.yaml"

    def test_missing_environment_config_falls_back(self):
        """An environment without its own file falls back to logging.yaml."""
        assert get_config_path(environment="prod") == CONFIG_DIR / "logging.yaml"

    def test_unknown_named_config_raises(self):
        """A named configuration that does not exist raises LoggingError."""
        with pytest.raises(LoggingError):
            get_config_path(config_name="does-not-exist")

    def test_bundled_configs_are_valid(self):
        """Every bundled YAML file loads to a dictConfig mapping."""
        for path in CONFIG_DIR.glob("logging*.yaml"):
            config = load_config(path)
            assert config["version"] == 1
            assert "pidea_core" in config["loggers"]

    def test_load_config_rejects_non_mapping(self, tmp_path: Path):
        """A YAML document that is not a mapping is rejected."""
        path = tmp_path / "logging.yaml"
        path.write_text("- just\n- a list\n", encoding="utf-8")

        with pytest.raises(LoggingError, match="Invalid configuration format"):
            load_config(path)

    def test_load_config_reports_parse_errors(self, tmp_path: Path):
        """Malformed YAML raises LoggingError."""
        path = tmp_path / "logging.yaml"
        path.write_text("version: [1\n", encoding="utf-8")

        with pytest.raises(LoggingError, match="Failed to parse"):
            load_config(path)


class TestSetupLogging:
    """Test setup_logging behaviour."""

    def test_setup_applies_level_override(self, tmp_path: Path):
        """A level override is applied to configured loggers."""
        config = load_config(CONFIG_DIR / "logging.yaml")
        path = tmp_path / "custom.yaml"
        path.write_text(yaml.safe_dump(config), encoding="utf-8")

        setup_logging(config_path=path, level="DEBUG")

        assert logging.getLogger("pidea_core").level == logging.DEBUG

    def test_setup_falls_back_to_basic_logging(self, tmp_path: Path):
        """An unreadable configuration falls back to basic console logging."""
        setup_logging(config_path=tmp_path / "missing.yaml", level="WARNING")

        assert logging.getLogger().level == logging.WARNING

    def test_force_basic(self):
        """force_basic skips file configuration entirely."""
        setup_logging(force_basic=True, level="ERROR")

        assert logging.getLogger().level == logging.ERROR
