"""Engine lifecycle and the unit of work used by the reference cache."""

from __future__ import annotations

from typing import TYPE_CHECKING, Literal

from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker

from ankibridge.adapters.sqlalchemy.mappings import create_all_tables, start_mappers
from ankibridge.adapters.sqlalchemy.repositories import SqlAlchemyReferenceRepository
from ankibridge.config.storage import get_database_config
from ankibridge.domain.errors import ReferenceStorageError

if TYPE_CHECKING:
    from types import TracebackType

    from sqlalchemy.engine import Engine


class StartupError(ReferenceStorageError):
    """Raised when the reference database is used before ``startup()`` or set up twice."""


_engine: Engine | None = None
_session_factory: sessionmaker[Session] | None = None


def startup(
    *,
    engine: Engine | None = None,
    database_uri: str | None = None,
    force: bool = False,
) -> None:
    """Bind the adapter to an engine, mapping ``ReferenceEntry`` and creating its table."""

    global _engine, _session_factory  # noqa: PLW0603

    if _engine is not None and not force:
        raise StartupError("Reference database already started. Pass force=True to rebind.")

    resolved_engine = engine or create_engine(
        database_uri or get_database_config().uri,
        future=True,
    )
    start_mappers()
    create_all_tables(resolved_engine)

    _engine = resolved_engine
    _session_factory = sessionmaker(bind=resolved_engine, expire_on_commit=False)


def is_started() -> bool:
    return _engine is not None


def shutdown() -> None:
    """Dispose the engine and forget it; ``startup()`` may be called again afterwards."""

    global _engine, _session_factory  # noqa: PLW0603

    if _engine is not None:
        _engine.dispose()
    _engine = None
    _session_factory = None


class SqlAlchemyReferenceUnitOfWork:
    """One session around the reference repository.

    Leaving the block without ``commit()`` discards the changes; leaving it with
    an exception rolls back first.
    """

    def __init__(self) -> None:
        if _session_factory is None:
            raise StartupError(
                "Reference database not started. Call ankibridge.adapters.sqlalchemy."
                "unit_of_work.startup() before opening a unit of work."
            )
        self._session_factory = _session_factory
        self._session: Session | None = None
        self._references: SqlAlchemyReferenceRepository | None = None

    def __enter__(self) -> SqlAlchemyReferenceUnitOfWork:
        if self._session is not None:
            raise StartupError("Unit of work is already open")
        self._session = self._session_factory()
        self._references = SqlAlchemyReferenceRepository(self._session)
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_value: BaseException | None,
        traceback: TracebackType | None,
    ) -> Literal[False]:
        session = self.session
        if exc_type is not None:
            session.rollback()
        session.close()
        self._session = None
        self._references = None
        return False

    @property
    def session(self) -> Session:
        if self._session is None:
            raise StartupError("Unit of work is not open")
        return self._session

    @property
    def references(self) -> SqlAlchemyReferenceRepository:
        if self._references is None:
            raise StartupError("Unit of work is not open")
        return self._references

    def commit(self) -> None:
        self.session.commit()

    def rollback(self) -> None:
        self.session.rollback()


if TYPE_CHECKING:
    from ankibridge.domain.ports import ReferenceUnitOfWork

    _uow_ref_check: ReferenceUnitOfWork = SqlAlchemyReferenceUnitOfWork()
