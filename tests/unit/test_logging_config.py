"""
Unit tests for logging configuration.
"""

import json
import logging

import pytest

from gbhwdb import logging_config
from gbhwdb.logging_config import (
    LOGGER_NAMES,
    ConsoleFormatter,
    JSONFormatter,
    configure_logging,
    get_logger,
    init_logging,
)


@pytest.fixture(autouse=True)
def reset_loggers():
    """Detach handlers added by a test and restore propagation."""
    yield
    for name in LOGGER_NAMES:
        logger = logging.getLogger(f"gbhwdb.{name}")
        for handler in list(logger.handlers):
            handler.close()
            logger.removeHandler(handler)
        logger.propagate = True
        logger.setLevel(logging.NOTSET)
    logging_config._loggers = None


def make_record(**kwargs) -> logging.LogRecord:
    record = logging.LogRecord(
        name="gbhwdb.crawler",
        level=logging.WARNING,
        pathname=__file__,
        lineno=42,
        msg="Skipping unit: %s",
        args=("alice/DMG/1",),
        exc_info=None,
    )
    for key, value in kwargs.items():
        setattr(record, key, value)
    return record


class TestGetLogger:
    """Tests for get_logger()."""

    def test_known_name(self):
        assert get_logger("crawler").name == "gbhwdb.crawler"

    def test_unknown_name(self):
        with pytest.raises(ValueError, match="Unknown logger name"):
            get_logger("renderer")

    def test_returns_initialized_logger(self):
        loggers = init_logging("DEBUG")
        assert get_logger("photos") is loggers["photos"]


class TestFormatters:
    """Tests for the log formatters."""

    def test_json_formatter(self):
        data = json.loads(JSONFormatter().format(make_record()))

        assert data["level"] == "WARNING"
        assert data["logger"] == "gbhwdb.crawler"
        assert data["message"] == "Skipping unit: alice/DMG/1"
        assert data["line"] == 42
        assert "timestamp" in data

    def test_json_formatter_extra_fields(self):
        record = make_record(extra_fields={"unit": "alice/DMG/1"})
        data = json.loads(JSONFormatter().format(record))

        assert data["unit"] == "alice/DMG/1"

    def test_console_formatter(self):
        text = ConsoleFormatter().format(make_record())
        assert "WARNING - gbhwdb.crawler - Skipping unit: alice/DMG/1" in text


class TestConfigureLogging:
    """Tests for configure_logging()."""

    def test_development_console_handler(self):
        loggers = configure_logging("warning")

        assert set(loggers) == set(LOGGER_NAMES)
        logger = loggers["crawler"]
        assert logger.level == logging.WARNING
        assert logger.propagate is True
        assert len(logger.handlers) == 1
        assert isinstance(logger.handlers[0], logging.StreamHandler)

    def test_level_from_environment(self, monkeypatch):
        monkeypatch.setenv("GBHWDB_LOG_LEVEL", "ERROR")
        assert configure_logging()["build"].level == logging.ERROR

    def test_repeated_calls_do_not_duplicate_handlers(self):
        configure_logging()
        loggers = configure_logging()
        assert len(loggers["export"].handlers) == 1

    def test_production_writes_json_files(self, tmp_path, monkeypatch):
        monkeypatch.setenv("GBHWDB_ENV", "production")
        monkeypatch.setenv("GBHWDB_LOG_DIR", str(tmp_path / "logs"))

        loggers = configure_logging("INFO")
        loggers["crawler"].warning("Skipping unit: bob/SGB/x")
        for handler in loggers["crawler"].handlers:
            handler.flush()

        assert loggers["crawler"].propagate is False
        line = (tmp_path / "logs" / "crawler.log").read_text().strip()
        assert json.loads(line)["message"] == "Skipping unit: bob/SGB/x"
