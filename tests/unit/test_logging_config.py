"""
Unit tests for datamapping.utils.logging

Tests cover JSON formatting, console formatting, context logging, and
environment-based configuration.
"""

import json
import logging
import sys
from unittest.mock import patch

import pytest

from datamapping.utils.logging import (
    ConsoleFormatter,
    ContextLogger,
    JSONFormatter,
    configure_from_env,
    get_logger,
    setup_logging,
    shutdown_logging,
)


def _record(msg="Test message", level=logging.INFO, exc_info=None):
    return logging.LogRecord(
        name="test_logger",
        level=level,
        pathname="/path/to/test.py",
        lineno=42,
        msg=msg,
        args=(),
        exc_info=exc_info,
    )


class TestJSONFormatter:
    """Test JSONFormatter class"""

    def test_init_with_defaults(self):
        """Test initialization with default parameters"""
        # Arrange & Act
        formatter = JSONFormatter()

        # Assert
        assert formatter.include_timestamp is True
        assert formatter.include_hostname is True
        assert formatter.app_name == "datamapping"
        assert formatter.hostname is not None

    def test_init_without_hostname(self):
        formatter = JSONFormatter(include_hostname=False, app_name="nightly-checks")

        assert formatter.hostname is None
        assert formatter.app_name == "nightly-checks"

    def test_format_basic_log_record(self):
        """Test formatting a basic log record"""
        # Arrange
        formatter = JSONFormatter()

        # Act
        data = json.loads(formatter.format(_record()))

        # Assert
        assert data["level"] == "INFO"
        assert data["logger"] == "test_logger"
        assert data["message"] == "Test message"
        assert data["app"] == "datamapping"
        assert "timestamp" in data
        assert "hostname" in data
        assert data["source"]["file"] == "/path/to/test.py"
        assert data["source"]["line"] == 42
        assert "pid" in data["process"]
        assert "context" not in data

    def test_format_without_timestamp(self):
        data = json.loads(JSONFormatter(include_timestamp=False).format(_record()))

        assert "timestamp" not in data

    def test_format_with_exception_info(self):
        """Test formatting with exception information"""
        # Arrange
        formatter = JSONFormatter()
        try:
            raise ValueError("Cannot use both flags")
        except ValueError:
            exc_info = sys.exc_info()

        # Act
        data = json.loads(formatter.format(_record(level=logging.ERROR, exc_info=exc_info)))

        # Assert
        assert data["exception"]["type"] == "ValueError"
        assert "Cannot use both flags" in data["exception"]["message"]
        assert isinstance(data["exception"]["traceback"], list)

    def test_format_with_extra_context(self):
        """Test that extra fields are grouped under context"""
        # Arrange
        formatter = JSONFormatter()
        record = _record("Mapping failed")
        record.mapping = "orders#total -> ledger#amount"
        record.difference_count = 3

        # Act
        data = json.loads(formatter.format(record))

        # Assert
        assert data["context"] == {
            "mapping": "orders#total -> ledger#amount",
            "difference_count": 3,
        }

    def test_non_serializable_context(self):
        record = _record()
        record.flags = frozenset({"IGNORE_NULLS"})

        data = json.loads(JSONFormatter().format(record))

        assert "IGNORE_NULLS" in data["context"]["flags"]


class TestConsoleFormatter:
    """Test ConsoleFormatter class"""

    def test_init_without_colors(self):
        assert ConsoleFormatter(use_colors=False).use_colors is False

    @patch("sys.stderr.isatty", return_value=False)
    def test_colors_disabled_off_tty(self, mock_isatty):
        assert ConsoleFormatter(use_colors=True).use_colors is False

    @patch("sys.stderr.isatty", return_value=True)
    def test_format_with_colors(self, mock_isatty):
        """Test that the level is coloured and then restored on the record"""
        # Arrange
        formatter = ConsoleFormatter(use_colors=True)
        record = _record(level=logging.WARNING)
        record.levelname = "WARNING"

        # Act
        result = formatter.format(record)

        # Assert
        assert "\033[33mWARNING\033[0m" in result
        assert record.levelname == "WARNING"

    def test_format_without_colors(self):
        result = ConsoleFormatter(use_colors=False).format(_record())

        assert "[INFO]" in result
        assert "test_logger: Test message" in result

    def test_format_with_extra_context(self):
        """Test that context is appended to the line"""
        # Arrange
        formatter = ConsoleFormatter(use_colors=False)
        record = _record("Validated batch")
        record.batch = "nightly"
        record.failed = 2

        # Act
        result = formatter.format(record)

        # Assert
        assert result.endswith(" [batch=nightly, failed=2]")


class TestContextLogger:
    """Test ContextLogger"""

    def test_context_attached(self, caplog):
        logger = ContextLogger("datamapping.test", batch="nightly")

        with caplog.at_level(logging.INFO, logger="datamapping.test"):
            logger.info("Mapping failed", mapping="ids")

        record = caplog.records[-1]
        assert record.batch == "nightly"
        assert record.mapping == "ids"
        assert record.getMessage() == "Mapping failed"

    def test_update_context(self):
        logger = ContextLogger("datamapping.test", batch="a")

        logger.update_context(run=2)

        assert logger.get_context() == {"batch": "a", "run": 2}

    def test_get_context_is_copy(self):
        logger = ContextLogger("datamapping.test", batch="a")

        logger.get_context()["batch"] = "b"

        assert logger.get_context() == {"batch": "a"}

    def test_error_with_exc_info(self, caplog):
        logger = ContextLogger("datamapping.test")

        with caplog.at_level(logging.ERROR, logger="datamapping.test"):
            try:
                raise RuntimeError("boom")
            except RuntimeError:
                logger.error("Validation raised", exc_info=True)

        assert caplog.records[-1].exc_info is not None


class TestSetupLogging:
    """Test setup_logging function"""

    def teardown_method(self):
        """Clean up logging handlers after each test"""
        root_logger = logging.getLogger()
        for handler in root_logger.handlers[:]:
            root_logger.removeHandler(handler)
            handler.close()
        root_logger.setLevel(logging.WARNING)

    def test_defaults(self):
        setup_logging()

        root_logger = logging.getLogger()
        assert root_logger.level == logging.INFO
        assert len(root_logger.handlers) == 1

    def test_invalid_level_defaults_to_info(self):
        setup_logging(level="LOUD")

        assert logging.getLogger().level == logging.INFO

    def test_custom_level(self):
        setup_logging(level="debug")

        assert logging.getLogger().level == logging.DEBUG

    def test_json_console(self):
        setup_logging(json_format=True)

        assert isinstance(logging.getLogger().handlers[0].formatter, JSONFormatter)

    def test_file_handler_created(self, tmp_path):
        """Test that a rotating file handler writes to a nested path"""
        # Arrange
        log_file = tmp_path / "logs" / "validation.log"

        # Act
        setup_logging(log_file=str(log_file), console_output=False, json_format=True)
        logging.getLogger("datamapping.test").warning("Mapping failed")
        for handler in logging.getLogger().handlers:
            handler.flush()

        # Assert
        handlers = logging.getLogger().handlers
        assert len(handlers) == 1
        assert isinstance(handlers[0], logging.handlers.RotatingFileHandler)
        lines = log_file.read_text().strip().splitlines()
        assert json.loads(lines[-1])["message"] == "Mapping failed"

    def test_replaces_existing_handlers(self):
        setup_logging()
        setup_logging()

        assert len(logging.getLogger().handlers) == 1

    def test_third_party_loggers_quietened(self):
        setup_logging(level="DEBUG")

        assert logging.getLogger("opentelemetry").level == logging.WARNING

    def test_get_logger(self):
        assert get_logger("datamapping.x") is logging.getLogger("datamapping.x")

    @patch("datamapping.utils.logging.config.logging.shutdown")
    def test_shutdown_logging_removes_handlers(self, mock_shutdown):
        setup_logging()

        shutdown_logging()

        mock_shutdown.assert_called_once()

        assert logging.getLogger().handlers == []


class TestConfigureFromEnv:
    """Test configure_from_env"""

    def teardown_method(self):
        root_logger = logging.getLogger()
        for handler in root_logger.handlers[:]:
            root_logger.removeHandler(handler)
            handler.close()
        root_logger.setLevel(logging.WARNING)

    @pytest.fixture(autouse=True)
    def clear_env(self, monkeypatch):
        for name in ("LOG_LEVEL", "LOG_FILE", "LOG_JSON", "LOG_CONSOLE"):
            monkeypatch.delenv(name, raising=False)

    @patch("datamapping.utils.logging.config.setup_logging")
    def test_defaults(self, mock_setup):
        configure_from_env()

        mock_setup.assert_called_once_with(
            level="INFO",
            log_file=None,
            console_output=True,
            json_format=False,
        )

    @patch("datamapping.utils.logging.config.setup_logging")
    def test_from_variables(self, mock_setup, monkeypatch):
        monkeypatch.setenv("LOG_LEVEL", "DEBUG")
        monkeypatch.setenv("LOG_FILE", "/tmp/datamapping.log")
        monkeypatch.setenv("LOG_JSON", "yes")
        monkeypatch.setenv("LOG_CONSOLE", "false")

        configure_from_env()

        mock_setup.assert_called_once_with(
            level="DEBUG",
            log_file="/tmp/datamapping.log",
            console_output=False,
            json_format=True,
        )
