"""Configuration service for managing application settings."""

import json
import os
from dataclasses import replace
from pathlib import Path

import structlog

from ..models import AppConfig
from ..models.config import DEFAULT_BASE_URL, DEFAULT_PAGE_SIZE

log = structlog.stdlib.get_logger()

API_KEY_ENV = "RAWG_API_KEY"
VALID_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


class ValidationResult:
    """Result of configuration validation."""

    def __init__(self, is_valid: bool, errors: list[str] | None = None) -> None:
        self.is_valid: bool = is_valid
        self.errors: list[str] = errors or []


class ConfigurationService:
    """Service for managing application configuration."""

    def __init__(self, config_path: Path | None = None) -> None:
        self.config_path: Path = config_path or Path.home() / ".config" / "playhub" / "config.json"
        log.info("Configuration service initialized", config_path=str(self.config_path))

    def load_config(self) -> AppConfig:
        """Load configuration from file or return default configuration.

        The ``RAWG_API_KEY`` environment variable, when set, overrides the
        stored API key.
        """
        config = self._load_file()

        env_key = os.getenv(API_KEY_ENV, "").strip()
        if env_key:
            config = replace(config, api_key=env_key)
            log.debug("API key taken from environment")

        return config

    def _load_file(self) -> AppConfig:
        if not self.config_path.exists():
            log.info("Configuration file not found, using defaults")
            return self._get_default_config()

        try:
            with open(self.config_path, 'r', encoding='utf-8') as f:
                data: dict[str, str | int | float | None] = json.load(f)

            config = self._dict_to_config(data)
            validation_result = self.validate_config(config)

            if not validation_result.is_valid:
                log.warning("Invalid configuration loaded, using defaults", errors=validation_result.errors)
                return self._get_default_config()

            log.info("Configuration loaded successfully")
            return config

        except (json.JSONDecodeError, KeyError, TypeError, ValueError, AttributeError) as e:
            log.error("Failed to load configuration, using defaults", error=str(e))
            return self._get_default_config()

    def save_config(self, config: AppConfig) -> None:
        """Save configuration to file."""
        validation_result = self.validate_config(config)
        if not validation_result.is_valid:
            raise ValueError(f"Invalid configuration: {', '.join(validation_result.errors)}")

        self.config_path.parent.mkdir(parents=True, exist_ok=True)

        try:
            data = self._config_to_dict(config)
            with open(self.config_path, 'w', encoding='utf-8') as f:
                json.dump(data, f, indent=2, ensure_ascii=False)

            log.info("Configuration saved successfully")

        except OSError as e:
            log.error("Failed to save configuration", error=str(e))
            raise

    def validate_config(self, config: AppConfig) -> ValidationResult:
        """Validate configuration settings."""
        errors = []

        if not isinstance(config.api_key, str):
            errors.append("api_key must be a string")

        if not isinstance(config.base_url, str) or not config.base_url.startswith(("http://", "https://")):
            errors.append("base_url must be an http(s) URL")

        if not isinstance(config.data_directory, Path):
            errors.append("data_directory must be a Path object")
        elif not config.data_directory.is_absolute():
            errors.append("data_directory must be an absolute path")

        if isinstance(config.page_size, bool) or not isinstance(config.page_size, int) or config.page_size < 1:
            errors.append("page_size must be a positive integer")
        elif config.page_size > 40:
            errors.append("page_size should not exceed 40")

        if not isinstance(config.request_timeout, (int, float)) or config.request_timeout <= 0:
            errors.append("request_timeout must be a positive number")
        elif config.request_timeout > 120:
            errors.append("request_timeout should not exceed 120 seconds")

        if isinstance(config.max_retries, bool) or not isinstance(config.max_retries, int) or config.max_retries < 0:
            errors.append("max_retries must be a non-negative integer")
        elif config.max_retries > 5:
            errors.append("max_retries should not exceed 5")

        if config.log_level not in VALID_LOG_LEVELS:
            errors.append(f"log_level must be one of: {', '.join(VALID_LOG_LEVELS)}")

        return ValidationResult(len(errors) == 0, errors)

    def _get_default_config(self) -> AppConfig:
        """Get default configuration."""
        return AppConfig(
            api_key="",
            data_directory=Path.home() / ".local" / "share" / "playhub",
            log_level="INFO",
            base_url=DEFAULT_BASE_URL,
            page_size=DEFAULT_PAGE_SIZE,
            request_timeout=30.0,
            max_retries=0,
        )

    def _config_to_dict(self, config: AppConfig) -> dict[str, str | int | float | None]:
        """Convert AppConfig to dictionary for JSON serialization."""
        return {
            "api_key": config.api_key,
            "data_directory": str(config.data_directory),
            "log_level": config.log_level,
            "base_url": config.base_url,
            "page_size": config.page_size,
            "request_timeout": config.request_timeout,
            "max_retries": config.max_retries,
        }

    def _dict_to_config(self, data: dict[str, str | int | float | None]) -> AppConfig:
        """Convert dictionary to AppConfig, falling back to defaults per field."""
        defaults = self._get_default_config()

        page_size_raw = data.get("page_size", defaults.page_size)
        timeout_raw = data.get("request_timeout", defaults.request_timeout)
        retries_raw = data.get("max_retries", defaults.max_retries)
        data_dir_raw = data.get("data_directory")

        return AppConfig(
            api_key=str(data.get("api_key") or ""),
            data_directory=Path(str(data_dir_raw)) if data_dir_raw else defaults.data_directory,
            log_level=str(data["log_level"]) if isinstance(data.get("log_level"), str) else defaults.log_level,
            base_url=str(data.get("base_url") or defaults.base_url),
            page_size=int(page_size_raw) if isinstance(page_size_raw, (int, float)) else defaults.page_size,
            request_timeout=float(timeout_raw) if isinstance(timeout_raw, (int, float)) else defaults.request_timeout,
            max_retries=int(retries_raw) if isinstance(retries_raw, (int, float)) else defaults.max_retries,
        )
