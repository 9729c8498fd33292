from __future__ import annotations

import os
from typing import TYPE_CHECKING

import pytest
from sqlalchemy import create_engine
from sqlalchemy.engine import Engine  # noqa: TC002

from ankibridge.adapters.sqlalchemy import create_all_tables, start_mappers
from ankibridge.adapters.sqlalchemy.unit_of_work import (
    SqlAlchemyReferenceUnitOfWork,
    shutdown,
    startup,
)
from ankibridge.domain.bridge import ContentBridge
from tests.helpers.content_store import FakeContentStore
from tests.helpers.reference_cache import InMemoryReferenceCache

os.environ.setdefault("ANKIBRIDGE_DATABASE_URI", "sqlite+pysqlite:///:memory:")

if TYPE_CHECKING:
    from collections.abc import Callable, Iterator


@pytest.fixture
def store() -> FakeContentStore:
    return FakeContentStore()


@pytest.fixture
def cache() -> InMemoryReferenceCache:
    return InMemoryReferenceCache()


@pytest.fixture
def bridge(store: FakeContentStore, cache: InMemoryReferenceCache) -> ContentBridge:
    return ContentBridge(store=store, cache=cache)


@pytest.fixture
def sqlite_engine() -> Iterator[Engine]:
    engine = create_engine("sqlite+pysqlite:///:memory:", future=True)
    start_mappers()
    create_all_tables(engine)
    try:
        yield engine
    finally:
        engine.dispose()


@pytest.fixture
def sqlite_unit_of_work(
    sqlite_engine: Engine,
) -> Iterator[Callable[[], SqlAlchemyReferenceUnitOfWork]]:
    startup(engine=sqlite_engine, force=True)

    def factory() -> SqlAlchemyReferenceUnitOfWork:
        return SqlAlchemyReferenceUnitOfWork()

    try:
        yield factory
    finally:
        shutdown()
