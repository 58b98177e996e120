"""Configuration data models."""

from dataclasses import dataclass
from pathlib import Path


DEFAULT_BASE_URL = "https://api.rawg.io/api"
DEFAULT_PAGE_SIZE = 20


@dataclass(frozen=True)
class AppConfig:
    """Application configuration settings."""
    api_key: str
    data_directory: Path  # Favorites and other local state live here
    log_level: str = "INFO"
    base_url: str = DEFAULT_BASE_URL
    page_size: int = DEFAULT_PAGE_SIZE
    request_timeout: float = 30.0
    max_retries: int = 0  # 0 = surface the first transport error
