"""Unit-of-work boundary for reference cache storage."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from types import TracebackType

    from ankibridge.domain.ports.reference_cache import ReferenceRepository


@runtime_checkable
class ReferenceUnitOfWork(Protocol):
    """Transaction around a ``ReferenceRepository``; nothing persists without ``commit()``."""

    @property
    def references(self) -> ReferenceRepository: ...

    def __enter__(self) -> ReferenceUnitOfWork: ...

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_value: BaseException | None,
        traceback: TracebackType | None,
    ) -> bool: ...

    def commit(self) -> None: ...

    def rollback(self) -> None: ...
