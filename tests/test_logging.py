import logging

import pytest
import structlog

from rushqueue.config import settings
from rushqueue.exceptions import ConfigurationError
from rushqueue.logging import setup_logging


def test_setup_logging_writes_component_file(tmp_path, monkeypatch):
    monkeypatch.setattr(settings, "log_dir", tmp_path / "logs")
    monkeypatch.setattr(settings, "log_to_file", True)

    try:
        setup_logging("unit", "DEBUG")
        logging.getLogger("rushqueue.test").info("hello_file")

        assert logging.getLogger().level == logging.DEBUG
        log_file = tmp_path / "logs" / "unit.log"
        assert log_file.exists()
        for handler in logging.getLogger().handlers:
            handler.flush()
        assert "hello_file" in log_file.read_text()
    finally:
        root = logging.getLogger()
        for handler in list(root.handlers):
            root.removeHandler(handler)
            handler.close()
        root.setLevel(logging.WARNING)
        structlog.reset_defaults()


def test_setup_logging_defaults_to_settings_level(monkeypatch):
    monkeypatch.setattr(settings, "log_level", "warning")

    try:
        setup_logging("unit")
        assert logging.getLogger().level == logging.WARNING
    finally:
        root = logging.getLogger()
        for handler in list(root.handlers):
            root.removeHandler(handler)
        root.setLevel(logging.WARNING)
        structlog.reset_defaults()


def test_unknown_level_is_a_configuration_error():
    with pytest.raises(ConfigurationError):
        setup_logging("unit", "chatty")
