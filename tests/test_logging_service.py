"""Tests for the logging service."""

import json
import logging
import os
import tempfile
from collections.abc import Iterator
from io import StringIO
from pathlib import Path
from unittest.mock import patch

import pytest
from hypothesis import HealthCheck, given, settings, strategies as st

from src.services.logging import (
    APP_LOG_NAME,
    ENVIRONMENT_VAR,
    ERROR_LOG_NAME,
    LoggingService,
    setup_logging,
)


@pytest.fixture(autouse=True)
def restore_root_logger() -> Iterator[None]:
    root = logging.getLogger()
    handlers = list(root.handlers)
    level = root.level
    yield
    for handler in root.handlers:
        if handler not in handlers:
            handler.close()
    root.handlers[:] = handlers
    root.setLevel(level)


class TestLoggingService:
    """Test cases for LoggingService."""

    def test_development_logging_format(self) -> None:
        """Development console logging is human-readable."""
        with patch.dict(os.environ, {ENVIRONMENT_VAR: "development"}):
            with patch("sys.stdout", new_callable=StringIO) as mock_stdout:
                service = LoggingService(log_level="INFO")
                service.configure()

                logger = service.get_logger("test")
                logger.info("test message", key="value")

                output = mock_stdout.getvalue()

        assert "test message" in output
        assert not output.strip().startswith("{")

    def test_production_logging_format(self) -> None:
        """Production console logging is one JSON object per line."""
        with patch.dict(os.environ, {ENVIRONMENT_VAR: "production"}):
            with patch("sys.stdout", new_callable=StringIO) as mock_stdout:
                service = LoggingService(log_level="INFO")
                service.configure()

                logger = service.get_logger("test")
                logger.info("test message", key="value")

                output = mock_stdout.getvalue()

        lines = [line for line in output.strip().split("\n") if line.strip()]
        parsed = json.loads(lines[-1])
        assert parsed["event"] == "test message"
        assert parsed["key"] == "value"
        assert "timestamp" in parsed
        assert parsed["level"] == "info"

    def test_file_logging_setup(self) -> None:
        with tempfile.TemporaryDirectory() as temp_dir:
            log_dir = Path(temp_dir)
            service = LoggingService(log_level="INFO", log_dir=log_dir, tui_mode=True)
            service.configure()

            logger = service.get_logger("test")
            logger.info("test file message", data="test")

            app_log = log_dir / APP_LOG_NAME
            assert app_log.exists()
            assert (log_dir / ERROR_LOG_NAME).exists()

            parsed = json.loads(app_log.read_text().strip().split("\n")[-1])
            assert parsed["event"] == "test file message"
            assert parsed["data"] == "test"

    def test_error_file_only_gets_errors(self) -> None:
        with tempfile.TemporaryDirectory() as temp_dir:
            log_dir = Path(temp_dir)
            service = LoggingService(log_level="DEBUG", log_dir=log_dir, tui_mode=True)
            service.configure()

            logger = service.get_logger("test")
            logger.info("routine message")
            logger.error("test error message", status_code=500)

            lines = (log_dir / ERROR_LOG_NAME).read_text().strip().split("\n")
            assert len(lines) == 1
            parsed = json.loads(lines[0])
            assert parsed["event"] == "test error message"
            assert parsed["status_code"] == 500
            assert parsed["level"] == "error"

    def test_tui_mode_never_writes_to_console(self) -> None:
        with patch("sys.stdout", new_callable=StringIO) as mock_stdout:
            service = setup_logging(log_level="DEBUG", tui_mode=True)

            service.get_logger("test").warning("should stay quiet")

            assert mock_stdout.getvalue() == ""

        root = logging.getLogger()
        assert all(isinstance(h, logging.NullHandler) for h in root.handlers)

    def test_httpx_request_logging_is_quieted(self) -> None:
        _ = setup_logging(log_level="DEBUG", tui_mode=True)
        assert logging.getLogger("httpx").level == logging.WARNING

    def test_level_below_threshold_is_dropped(self) -> None:
        with tempfile.TemporaryDirectory() as temp_dir:
            log_dir = Path(temp_dir)
            service = LoggingService(log_level="WARNING", log_dir=log_dir, tui_mode=True)
            service.configure()

            logger = service.get_logger("test")
            logger.info("dropped")
            logger.warning("kept")

            content = (log_dir / APP_LOG_NAME).read_text()
            assert "dropped" not in content
            assert "kept" in content

    def test_unknown_level_falls_back_to_info(self) -> None:
        assert LoggingService(log_level="verbose").numeric_level == logging.INFO


class TestStructuredLoggingProperties:
    """Property-based tests for structured logging consistency."""

    @given(
        log_level=st.sampled_from(["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]),
        message=st.text(min_size=1, max_size=100),
        context_data=st.dictionaries(
            keys=st.text(min_size=1, max_size=20).filter(lambda x: x.isidentifier() and x not in {
                "event", "level", "logger", "timestamp", "exc_info", "stack_info", "exception", "positional_args",
            }),
            values=st.one_of(st.text(max_size=50), st.integers(), st.booleans()),
            max_size=5,
        ),
    )
    @settings(max_examples=50, deadline=None, suppress_health_check=[HealthCheck.function_scoped_fixture])
    def test_structured_logging_consistency(
        self,
        log_level: str,
        message: str,
        context_data: dict[str, str | int | bool],
    ) -> None:
        """Every record carries event, level, logger, timestamp and its context."""
        with patch.dict(os.environ, {ENVIRONMENT_VAR: "production"}):
            with patch("sys.stdout", new_callable=StringIO) as mock_stdout:
                service = LoggingService(log_level="DEBUG")
                service.configure()

                logger = service.get_logger("catalog")
                getattr(logger, log_level.lower())(message, **context_data)

                output = mock_stdout.getvalue()

        lines = [line for line in output.strip().split("\n") if line.strip()]
        parsed = json.loads(lines[-1])

        assert parsed["event"] == message
        assert parsed["level"] == log_level.lower()
        assert parsed["logger"] == "catalog"
        assert "T" in parsed["timestamp"]
        for key, value in context_data.items():
            assert parsed[key] == value
