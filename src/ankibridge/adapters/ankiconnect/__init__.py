"""AnkiConnect content store adapter."""

from __future__ import annotations

from .client import AnkiConnectAPIError, AnkiConnectClient, AnkiConnectUnavailableError
from .schema import ActionResponse, AnkiModel, PermissionResult
from .store import AnkiConnectContentStore, escape_search_value, media_reference

__all__ = [
    "ActionResponse",
    "AnkiConnectAPIError",
    "AnkiConnectClient",
    "AnkiConnectContentStore",
    "AnkiConnectUnavailableError",
    "AnkiModel",
    "PermissionResult",
    "escape_search_value",
    "media_reference",
]
