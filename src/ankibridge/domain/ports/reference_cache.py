"""Port for the persistent name -> id reference cache."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from ankibridge.domain.types import ReferenceNamespace


@runtime_checkable
class ReferenceCache(Protocol):
    """Namespaced name -> external id memory scoped to one storage region."""

    def get(self, namespace: ReferenceNamespace, name: str) -> int | None: ...

    def put(self, namespace: ReferenceNamespace, name: str, external_id: int) -> None: ...


@runtime_checkable
class ReferenceRepository(Protocol):
    """Session-scoped persistence of reference entries across regions."""

    def get(self, region: str, namespace: ReferenceNamespace, name: str) -> int | None: ...

    def put(
        self,
        region: str,
        namespace: ReferenceNamespace,
        name: str,
        external_id: int,
    ) -> None: ...
