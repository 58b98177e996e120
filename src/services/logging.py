"""Logging configuration for the PlayHub catalog application."""

import logging
import logging.handlers
import os
import sys
from pathlib import Path
from typing import Any

import structlog

ENVIRONMENT_VAR = "PLAYHUB_ENV"

APP_LOG_NAME = "playhub.log"
ERROR_LOG_NAME = "playhub-error.log"


class LoggingService:
    """Configures structlog on top of the standard library logging tree.

    The terminal belongs to the TUI while it runs, so in ``tui_mode`` log
    records only go to files (or nowhere when no log directory is set).
    """

    def __init__(
        self,
        log_level: str = "INFO",
        log_dir: Path | None = None,
        tui_mode: bool = False,
    ) -> None:
        """Initialize the logging service.

        Args:
            log_level: The minimum log level to capture
            log_dir: Directory for log files (None for console only)
            tui_mode: If True, never write log records to the console
        """
        self.log_level = log_level.upper()
        self.log_dir = log_dir
        self.tui_mode = tui_mode
        self.is_development = os.getenv(ENVIRONMENT_VAR, "development") == "development"

    @property
    def numeric_level(self) -> int:
        return getattr(logging, self.log_level, logging.INFO)

    def configure(self) -> None:
        """Configure stdlib handlers, then structlog processors."""
        self._configure_stdlib_logging()

        structlog.configure(
            processors=self._get_processors(),
            context_class=dict,
            logger_factory=structlog.stdlib.LoggerFactory(),
            wrapper_class=structlog.stdlib.BoundLogger,
            cache_logger_on_first_use=True,
        )

    def _configure_stdlib_logging(self) -> None:
        root_logger = logging.getLogger()
        root_logger.handlers.clear()
        root_logger.setLevel(self.numeric_level)

        if not self.tui_mode:
            root_logger.addHandler(self._console_handler())

        if self.log_dir:
            for handler in self._file_handlers(self.log_dir):
                root_logger.addHandler(handler)

        if not root_logger.handlers:
            root_logger.addHandler(logging.NullHandler())

        # httpx logs every request at INFO, including the key query parameter
        logging.getLogger("httpx").setLevel(logging.WARNING)

    def _console_handler(self) -> logging.Handler:
        handler = logging.StreamHandler(sys.stdout)
        handler.setLevel(self.numeric_level)
        if self.is_development:
            handler.setFormatter(logging.Formatter(
                fmt="%(asctime)s [%(levelname)8s] %(name)s: %(message)s",
                datefmt="%H:%M:%S",
            ))
        else:
            handler.setFormatter(logging.Formatter("%(message)s"))
        return handler

    def _file_handlers(self, log_dir: Path) -> list[logging.Handler]:
        """Rotating application log plus an ERROR-only log, both JSON lines."""
        log_dir.mkdir(parents=True, exist_ok=True)
        formatter = logging.Formatter("%(message)s")

        app_handler = logging.handlers.RotatingFileHandler(
            filename=log_dir / APP_LOG_NAME,
            maxBytes=10 * 1024 * 1024,
            backupCount=5,
            encoding="utf-8",
        )
        app_handler.setLevel(self.numeric_level)
        app_handler.setFormatter(formatter)

        error_handler = logging.handlers.RotatingFileHandler(
            filename=log_dir / ERROR_LOG_NAME,
            maxBytes=5 * 1024 * 1024,
            backupCount=3,
            encoding="utf-8",
        )
        error_handler.setLevel(logging.ERROR)
        error_handler.setFormatter(formatter)

        return [app_handler, error_handler]

    def _get_processors(self) -> list[Any]:
        processors: list[Any] = [
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.stdlib.PositionalArgumentsFormatter(),
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.UnicodeDecoder(),
        ]

        # Human-readable output only when the console is the sole sink
        if self.is_development and not self.log_dir and not self.tui_mode:
            processors.append(structlog.dev.ConsoleRenderer(colors=True))
        else:
            processors.append(structlog.processors.JSONRenderer())
        return processors

    def get_logger(self, name: str | None = None) -> structlog.stdlib.BoundLogger:
        """Get a configured logger instance."""
        return structlog.stdlib.get_logger(name)


def setup_logging(
    log_level: str = "INFO",
    log_dir: Path | None = None,
    environment: str | None = None,
    tui_mode: bool = False,
) -> LoggingService:
    """Set up application logging with the specified configuration.

    Args:
        log_level: Minimum log level to capture
        log_dir: Directory for log files (None for console only)
        environment: Environment name (development/production)
        tui_mode: If True, disable console logging to avoid corrupting the TUI

    Returns:
        Configured LoggingService instance
    """
    if environment:
        os.environ[ENVIRONMENT_VAR] = environment

    service = LoggingService(log_level=log_level, log_dir=log_dir, tui_mode=tui_mode)
    service.configure()
    return service
