"""Domain port definitions for adapters."""

from __future__ import annotations

from .content_store import ContentStore
from .reference_cache import ReferenceCache, ReferenceRepository
from .unit_of_work import ReferenceUnitOfWork

__all__ = [
    "ContentStore",
    "ReferenceCache",
    "ReferenceRepository",
    "ReferenceUnitOfWork",
]
