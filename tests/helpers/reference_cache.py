"""Dictionary-backed reference cache for domain tests."""

from __future__ import annotations

from dataclasses import dataclass, field

from ankibridge.domain.ports import ReferenceCache
from ankibridge.domain.types import ReferenceNamespace


@dataclass(slots=True)
class InMemoryReferenceCache(ReferenceCache):
    entries: dict[tuple[ReferenceNamespace, str], int] = field(
        default_factory=dict[tuple[ReferenceNamespace, str], int]
    )
    puts: list[tuple[ReferenceNamespace, str, int]] = field(
        default_factory=list[tuple[ReferenceNamespace, str, int]]
    )

    def get(self, namespace: ReferenceNamespace, name: str) -> int | None:
        return self.entries.get((namespace, name))

    def put(self, namespace: ReferenceNamespace, name: str, external_id: int) -> None:
        self.puts.append((namespace, name, external_id))
        self.entries[(namespace, name)] = external_id
