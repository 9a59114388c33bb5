"""Core infrastructure module - config, logging, exceptions, protocols."""

from yalla_souq.core.config import AppConfig, AuthConfig, MockStoreConfig, SupabaseConfig
from yalla_souq.core.exceptions import (
    AppError,
    AuthProviderError,
    ConfigurationError,
    NotFoundError,
    ValidationError,
)

__all__ = [
    "AppConfig",
    "AuthConfig",
    "MockStoreConfig",
    "SupabaseConfig",
    "AppError",
    "AuthProviderError",
    "ConfigurationError",
    "NotFoundError",
    "ValidationError",
]
