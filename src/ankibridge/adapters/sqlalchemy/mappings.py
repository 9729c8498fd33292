"""SQLAlchemy mapping metadata for the reference cache."""

from __future__ import annotations

import logging
from functools import cache
from typing import TYPE_CHECKING

from sqlalchemy import (
    BigInteger,
    Column,
    Enum,
    Integer,
    String,
    Table,
    UniqueConstraint,
    orm,
)
from sqlalchemy.orm import configure_mappers

from ankibridge.domain.types import ReferenceEntry, ReferenceNamespace

if TYPE_CHECKING:
    from sqlalchemy.engine import Engine

log = logging.getLogger(__name__)

mapper_registry = orm.registry()
mapper_registry.metadata.naming_convention = {
    "ix": "ix_%(column_0_label)s",
    "uq": "uq_%(table_name)s_%(column_0_label)s",
    "ck": "ck_%(table_name)s_%(constraint_name)s",
    "pk": "pk_%(table_name)s",
}

reference_entry_table = Table(
    "reference_entry",
    mapper_registry.metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column("region", String, nullable=False),
    Column("namespace", Enum(ReferenceNamespace, native_enum=False), nullable=False),
    Column("name", String, nullable=False),
    # Anki ids are epoch milliseconds and overflow 32-bit integers.
    Column("external_id", BigInteger, nullable=False),
    UniqueConstraint("region", "namespace", "name", name="uq_reference_entry_identity"),
)


@cache
def start_mappers() -> orm.registry:
    """Configure SQLAlchemy mappers for the reference entry model."""

    log.info("Starting SQLAlchemy mappers")

    mapper_registry.map_imperatively(ReferenceEntry, reference_entry_table)

    configure_mappers()
    return mapper_registry


def create_all_tables(engine: Engine) -> None:
    """Create database tables for the mapped metadata."""

    log.info("Creating all tables")
    mapper_registry.metadata.create_all(engine)
