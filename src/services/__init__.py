"""Service layer for business logic and external integrations."""

from .config import ConfigurationService, ValidationResult
from .detail_loader import GameDetailLoader
from .discovery import DiscoveryService
from .errors import (
    AppError,
    ConfigurationError,
    ErrorCategory,
    ErrorHandlingService,
    ErrorSeverity,
    NetworkError,
    StorageError,
    UserFriendlyError,
    ValidationError,
    get_error_service,
    handle_error,
)
from .favorites import FavoritesStore, FileSlotStorage, MemorySlotStorage, SlotStorage
from .http_client import HttpClientService
from .list_loader import GameListLoader, GameSource
from .rawg_client import RawgApiService

__all__ = [
    "AppError",
    "ConfigurationError",
    "ConfigurationService",
    "DiscoveryService",
    "ErrorCategory",
    "ErrorHandlingService",
    "ErrorSeverity",
    "FavoritesStore",
    "FileSlotStorage",
    "GameDetailLoader",
    "GameListLoader",
    "GameSource",
    "HttpClientService",
    "MemorySlotStorage",
    "NetworkError",
    "RawgApiService",
    "SlotStorage",
    "StorageError",
    "UserFriendlyError",
    "ValidationError",
    "ValidationResult",
    "get_error_service",
    "handle_error",
]
