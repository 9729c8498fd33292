"""SQLAlchemy adapter package for the reference cache."""

from __future__ import annotations

from .mappings import create_all_tables, mapper_registry, reference_entry_table, start_mappers
from .repositories import SqlAlchemyReferenceCache, SqlAlchemyReferenceRepository
from .unit_of_work import (
    SqlAlchemyReferenceUnitOfWork,
    StartupError,
    shutdown,
    startup,
)

__all__ = [
    "SqlAlchemyReferenceCache",
    "SqlAlchemyReferenceRepository",
    "SqlAlchemyReferenceUnitOfWork",
    "StartupError",
    "create_all_tables",
    "mapper_registry",
    "reference_entry_table",
    "shutdown",
    "start_mappers",
    "startup",
]
