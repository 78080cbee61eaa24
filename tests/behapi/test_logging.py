"""Tests for behapi logging configuration and setup."""

import logging
from unittest.mock import patch

import pytest
import yaml

from behapi.logging import (
    CONFIG_DIR,
    LoggingError,
    get_config_path,
    load_config,
    setup_logging,
)


@pytest.fixture(autouse=True)
def restore_logging():
    """Undo any global logging configuration applied by a test."""
    root = logging.getLogger()
    behapi_logger = logging.getLogger("behapi")
    saved = (
        root.level,
        list(root.handlers),
        behapi_logger.level,
        list(behapi_logger.handlers),
        behapi_logger.propagate,
    )
    yield
    root.setLevel(saved[0])
    root.handlers[:] = saved[1]
    behapi_logger.setLevel(saved[2])
    behapi_logger.handlers[:] = saved[3]
    behapi_logger.propagate = saved[4]


class TestLoggingConfiguration:
    """Test logging configuration functionality."""

    def test_get_config_path_default(self) -> None:
        with patch.dict("os.environ", {}, clear=True):
            config_path = get_config_path()

        assert config_path == CONFIG_DIR / "logging.yaml"
        assert config_path.exists()

    def test_get_config_path_environment_specific(self) -> None:
        with patch.dict("os.environ", {"BEHAPI_ENV": "dev"}):
            assert get_config_path() == CONFIG_DIR / "logging-dev.yaml"

    def test_get_config_path_falls_back_to_default(self) -> None:
        assert get_config_path(environment="test") == CONFIG_DIR / "logging.yaml"

    def test_get_config_path_nonexistent_raises_error(self, tmp_path) -> None:
        with pytest.raises(LoggingError, match="No logging configuration found"):
            get_config_path(config_dir=tmp_path)

    def test_load_config_valid_yaml(self) -> None:
        config = load_config(CONFIG_DIR / "logging.yaml")

        assert config["version"] == 1
        assert "behapi" in config["loggers"]

    def test_load_config_rejects_non_mapping(self, tmp_path) -> None:
        path = tmp_path / "logging.yaml"
        path.write_text("- not\n- a mapping\n")

        with pytest.raises(LoggingError, match="Invalid configuration format"):
            load_config(path)

    def test_load_config_invalid_yaml(self, tmp_path) -> None:
        path = tmp_path / "logging.yaml"
        path.write_text("version: [1")

        with pytest.raises(LoggingError, match="Failed to parse"):
            load_config(path)


class TestSetupLogging:
    def test_level_override_applies_to_behapi_logger(self) -> None:
        setup_logging(level="DEBUG")

        assert logging.getLogger("behapi").level == logging.DEBUG

    def test_invalid_file_falls_back_to_basic_logging(self, tmp_path) -> None:
        path = tmp_path / "broken.yaml"
        path.write_text(yaml.safe_dump({"version": 1, "handlers": {"h": {"class": "no.Such"}}}))

        setup_logging(config_path=path, level="WARNING")

        assert logging.getLogger().level == logging.WARNING

    def test_invalid_level_falls_back_to_basic_logging(self) -> None:
        setup_logging(level="LOUD")

        assert logging.getLogger().level == logging.INFO

    def test_force_basic(self) -> None:
        setup_logging(level="ERROR", force_basic=True)

        assert logging.getLogger().level == logging.ERROR
