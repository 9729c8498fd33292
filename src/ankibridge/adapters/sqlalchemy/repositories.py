"""Repository and reference cache implementations backed by SQLAlchemy sessions."""

from __future__ import annotations

from logging import getLogger
from typing import TYPE_CHECKING

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError

from ankibridge.adapters.sqlalchemy.mappings import reference_entry_table
from ankibridge.domain.errors import ReferenceStorageError
from ankibridge.domain.types import ReferenceEntry

if TYPE_CHECKING:
    from collections.abc import Callable

    from sqlalchemy.orm import Session

    from ankibridge.domain.ports import ReferenceUnitOfWork
    from ankibridge.domain.types import ReferenceNamespace

log = getLogger(__name__)


class SqlAlchemyReferenceRepository:
    def __init__(self, session: Session) -> None:
        self.session = session

    def get(self, region: str, namespace: ReferenceNamespace, name: str) -> int | None:
        entry = self._find(region, namespace, name)
        return entry.external_id if entry is not None else None

    def put(
        self,
        region: str,
        namespace: ReferenceNamespace,
        name: str,
        external_id: int,
    ) -> None:
        entry = self._find(region, namespace, name)
        if entry is None:
            self.session.add(
                ReferenceEntry(
                    region=region,
                    namespace=namespace,
                    name=name,
                    external_id=external_id,
                )
            )
            return
        entry.external_id = external_id

    def _find(self, region: str, namespace: ReferenceNamespace, name: str) -> ReferenceEntry | None:
        stmt = (
            select(ReferenceEntry)
            .where(reference_entry_table.c.region == region)
            .where(reference_entry_table.c.namespace == namespace)
            .where(reference_entry_table.c.name == name)
        )
        return self.session.execute(stmt).scalar_one_or_none()


class SqlAlchemyReferenceCache:
    """``ReferenceCache`` bound to one storage region.

    Every ``put`` runs in its own unit of work and commits before returning,
    so a value written is visible to the next ``get`` for the same key.
    """

    def __init__(
        self,
        region: str,
        unit_of_work_factory: Callable[[], ReferenceUnitOfWork],
    ) -> None:
        self.region = region
        self._unit_of_work_factory = unit_of_work_factory

    def get(self, namespace: ReferenceNamespace, name: str) -> int | None:
        try:
            with self._unit_of_work_factory() as uow:
                return uow.references.get(self.region, namespace, name)
        except SQLAlchemyError as exc:
            raise ReferenceStorageError(
                f"Failed to read {namespace} reference {name!r}: {exc}"
            ) from exc

    def put(self, namespace: ReferenceNamespace, name: str, external_id: int) -> None:
        try:
            with self._unit_of_work_factory() as uow:
                uow.references.put(self.region, namespace, name, external_id)
                uow.commit()
        except SQLAlchemyError as exc:
            raise ReferenceStorageError(
                f"Failed to store {namespace} reference {name!r}: {exc}"
            ) from exc
        log.debug(
            "Stored %s reference %r -> %s in region %r",
            namespace,
            name,
            external_id,
            self.region,
        )
