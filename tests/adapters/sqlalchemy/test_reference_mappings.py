from __future__ import annotations

from typing import TYPE_CHECKING

import pytest
from sqlalchemy import inspect
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from ankibridge.adapters.sqlalchemy import mapper_registry, start_mappers
from ankibridge.domain.types import ReferenceEntry, ReferenceNamespace

if TYPE_CHECKING:
    from sqlalchemy.engine import Engine


def test_start_mappers_is_idempotent() -> None:
    assert start_mappers() is start_mappers() is mapper_registry


def test_reference_entry_table_is_created(sqlite_engine: Engine) -> None:
    columns = {column["name"] for column in inspect(sqlite_engine).get_columns("reference_entry")}

    assert columns == {"id", "region", "namespace", "name", "external_id"}


def test_names_are_unique_per_region_and_namespace(sqlite_engine: Engine) -> None:
    with Session(sqlite_engine) as session:
        session.add_all(
            [
                ReferenceEntry(
                    region="default",
                    namespace=ReferenceNamespace.DECK,
                    name="Spanish",
                    external_id=1,
                ),
                ReferenceEntry(
                    region="default",
                    namespace=ReferenceNamespace.DECK,
                    name="Spanish",
                    external_id=2,
                ),
            ]
        )
        with pytest.raises(IntegrityError):
            session.commit()


def test_large_external_ids_round_trip(sqlite_engine: Engine) -> None:
    with Session(sqlite_engine) as session:
        session.add(
            ReferenceEntry(
                region="default",
                namespace=ReferenceNamespace.MODEL,
                name="Vocab",
                external_id=1_700_000_000_123,
            )
        )
        session.commit()

    with Session(sqlite_engine) as session:
        entry = session.query(ReferenceEntry).one()
        assert entry.external_id == 1_700_000_000_123
        assert entry.namespace is ReferenceNamespace.MODEL
