"""Application configuration helpers."""

from __future__ import annotations

from .ankiconnect import AnkiConnectConfig, get_ankiconnect_config
from .errors import ConfigurationError
from .http_resilience import ResilienceConfig, RetryPolicy
from .logging import configure_logging
from .storage import DatabaseConfig, StorageConfig, get_database_config, get_storage_config

__all__ = [
    "AnkiConnectConfig",
    "ConfigurationError",
    "DatabaseConfig",
    "ResilienceConfig",
    "RetryPolicy",
    "StorageConfig",
    "configure_logging",
    "get_ankiconnect_config",
    "get_database_config",
    "get_storage_config",
]
