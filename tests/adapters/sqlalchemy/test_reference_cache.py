from __future__ import annotations

from typing import TYPE_CHECKING

import pytest
from sqlalchemy import select
from sqlalchemy.exc import OperationalError

from ankibridge.adapters.sqlalchemy import (
    SqlAlchemyReferenceCache,
    SqlAlchemyReferenceUnitOfWork,
    reference_entry_table,
    shutdown,
)
from ankibridge.domain.errors import ReferenceStorageError
from ankibridge.domain.ports import ReferenceCache
from ankibridge.domain.types import ReferenceNamespace

if TYPE_CHECKING:
    from collections.abc import Callable

    from sqlalchemy.engine import Engine


def test_cache_satisfies_port(
    sqlite_unit_of_work: Callable[[], SqlAlchemyReferenceUnitOfWork],
) -> None:
    cache = SqlAlchemyReferenceCache("default", sqlite_unit_of_work)

    assert isinstance(cache, ReferenceCache)


def test_put_is_visible_to_next_get(
    sqlite_unit_of_work: Callable[[], SqlAlchemyReferenceUnitOfWork],
) -> None:
    cache = SqlAlchemyReferenceCache("default", sqlite_unit_of_work)

    assert cache.get(ReferenceNamespace.DECK, "Spanish") is None
    cache.put(ReferenceNamespace.DECK, "Spanish", 1_700_000_000_001)

    assert cache.get(ReferenceNamespace.DECK, "Spanish") == 1_700_000_000_001


def test_put_overwrites_existing_entry(
    sqlite_engine: Engine,
    sqlite_unit_of_work: Callable[[], SqlAlchemyReferenceUnitOfWork],
) -> None:
    cache = SqlAlchemyReferenceCache("default", sqlite_unit_of_work)

    cache.put(ReferenceNamespace.MODEL, "Vocab", 1)
    cache.put(ReferenceNamespace.MODEL, "Vocab", 2)

    assert cache.get(ReferenceNamespace.MODEL, "Vocab") == 2
    with sqlite_engine.connect() as connection:
        rows = connection.execute(select(reference_entry_table)).all()
    assert len(rows) == 1


def test_namespaces_are_independent(
    sqlite_unit_of_work: Callable[[], SqlAlchemyReferenceUnitOfWork],
) -> None:
    cache = SqlAlchemyReferenceCache("default", sqlite_unit_of_work)

    cache.put(ReferenceNamespace.DECK, "Spanish", 1)
    cache.put(ReferenceNamespace.MODEL, "Spanish", 2)

    assert cache.get(ReferenceNamespace.DECK, "Spanish") == 1
    assert cache.get(ReferenceNamespace.MODEL, "Spanish") == 2


def test_regions_are_independent(
    sqlite_unit_of_work: Callable[[], SqlAlchemyReferenceUnitOfWork],
) -> None:
    first = SqlAlchemyReferenceCache("profile-a", sqlite_unit_of_work)
    second = SqlAlchemyReferenceCache("profile-b", sqlite_unit_of_work)

    first.put(ReferenceNamespace.DECK, "Spanish", 1)

    assert second.get(ReferenceNamespace.DECK, "Spanish") is None


def test_storage_failures_are_wrapped(
    sqlite_engine: Engine,
    sqlite_unit_of_work: Callable[[], SqlAlchemyReferenceUnitOfWork],
) -> None:
    reference_entry_table.drop(sqlite_engine)
    cache = SqlAlchemyReferenceCache("default", sqlite_unit_of_work)

    with pytest.raises(ReferenceStorageError) as excinfo:
        cache.get(ReferenceNamespace.DECK, "Spanish")

    assert isinstance(excinfo.value.__cause__, OperationalError)
    with pytest.raises(ReferenceStorageError):
        cache.put(ReferenceNamespace.DECK, "Spanish", 1)


def test_unstarted_database_is_a_storage_error() -> None:
    shutdown()
    cache = SqlAlchemyReferenceCache("default", SqlAlchemyReferenceUnitOfWork)

    with pytest.raises(ReferenceStorageError):
        cache.get(ReferenceNamespace.DECK, "Spanish")
    with pytest.raises(ReferenceStorageError):
        cache.put(ReferenceNamespace.DECK, "Spanish", 1)
