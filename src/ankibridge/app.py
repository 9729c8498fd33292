"""Application wiring: adapters assembled into a ``ContentBridge``."""

from __future__ import annotations

from collections.abc import Callable
from logging import getLogger
from typing import TYPE_CHECKING

from ankibridge.adapters.ankiconnect import AnkiConnectClient, AnkiConnectContentStore
from ankibridge.adapters.sqlalchemy import (
    SqlAlchemyReferenceCache,
    SqlAlchemyReferenceUnitOfWork,
    startup,
)
from ankibridge.adapters.sqlalchemy.unit_of_work import is_started
from ankibridge.config import get_ankiconnect_config, get_database_config
from ankibridge.domain.bridge import ContentBridge
from ankibridge.domain.ports import ReferenceUnitOfWork

if TYPE_CHECKING:
    from ankibridge.adapters.http_resilience import ResilientClient
    from ankibridge.config import AnkiConnectConfig, ResilienceConfig
    from ankibridge.domain.ports import ContentStore, ReferenceCache

UnitOfWorkFactory = Callable[[], ReferenceUnitOfWork]
ClientFactory = Callable[["ResilienceConfig"], "ResilientClient"]

log = getLogger(__name__)


def build_ankiconnect_store(
    *,
    config: AnkiConnectConfig | None = None,
    client_factory: ClientFactory | None = None,
) -> AnkiConnectContentStore:
    effective_config = config or get_ankiconnect_config()
    client = AnkiConnectClient(config=effective_config, client_factory=client_factory)
    return AnkiConnectContentStore(client=client, config=effective_config)


def build_reference_cache(
    *,
    region: str | None = None,
    unit_of_work_factory: UnitOfWorkFactory | None = None,
) -> SqlAlchemyReferenceCache:
    """Return the persistent reference cache, starting the database adapter if needed."""

    database = get_database_config()
    if unit_of_work_factory is None:
        if not is_started():
            startup(database_uri=database.uri)
        unit_of_work_factory = SqlAlchemyReferenceUnitOfWork
    return SqlAlchemyReferenceCache(region or database.region, unit_of_work_factory)


def build_bridge(
    *,
    store: ContentStore | None = None,
    cache: ReferenceCache | None = None,
) -> ContentBridge:
    effective_store = store or build_ankiconnect_store()
    effective_cache = cache or build_reference_cache()
    log.debug(
        "Built content bridge: store=%s, cache=%s",
        type(effective_store).__name__,
        type(effective_cache).__name__,
    )
    return ContentBridge(store=effective_store, cache=effective_cache)
