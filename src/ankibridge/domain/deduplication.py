"""Removal of candidate notes that already exist in the content store.

Candidates travel as two parallel sequences (field values and tags) aligned by
position. The store is asked for existing notes sharing each candidate's key
field (the first field of the record); flagged positions are then dropped from
both sequences in one forward pass, keeping the survivors in their original
order.
"""

from __future__ import annotations

from dataclasses import dataclass
from logging import getLogger
from typing import TYPE_CHECKING

from ankibridge.domain.errors import DuplicateIndexOutOfRangeError, MisalignedBatchError

if TYPE_CHECKING:
    from collections.abc import Sequence

    from ankibridge.domain.ports import ContentStore
    from ankibridge.domain.types import DuplicateMatches, FieldValues, ModelId, TagSet

log = getLogger(__name__)


@dataclass(frozen=True, slots=True)
class DeduplicationResult:
    removed_indices: tuple[int, ...] = ()

    @property
    def removed(self) -> int:
        return len(self.removed_indices)


def duplicate_key(field_values: Sequence[str]) -> str:
    """Return the value duplicates are matched on: the record's first field."""

    return field_values[0] if field_values else ""


class DuplicateSuppressor:
    def __init__(self, *, store: ContentStore) -> None:
        self._store = store

    def remove_duplicates(
        self,
        fields: list[FieldValues],
        tags: list[TagSet],
        model_id: ModelId,
    ) -> DeduplicationResult:
        """Drop already-existing notes from ``fields`` and ``tags`` in place.

        Raises ``MisalignedBatchError`` when the sequences differ in length and
        ``DuplicateIndexOutOfRangeError`` when the store flags a position that
        is not part of the batch.
        """

        if len(fields) != len(tags):
            raise MisalignedBatchError(fields=len(fields), tags=len(tags))
        if not fields:
            return DeduplicationResult()

        keys = [duplicate_key(record) for record in fields]
        matches = self._store.find_duplicate_notes(model_id, keys)
        if not matches:
            return DeduplicationResult()

        flagged = _flagged_indices(matches, batch_size=len(fields))
        if not flagged:
            return DeduplicationResult()

        kept_fields, kept_tags = _without_indices(fields, tags, flagged)
        fields[:] = kept_fields
        tags[:] = kept_tags

        log.debug(
            "Removed %d duplicate notes for model %s, %d remain",
            len(flagged),
            model_id,
            len(fields),
        )
        return DeduplicationResult(removed_indices=flagged)


def _flagged_indices(matches: DuplicateMatches, *, batch_size: int) -> tuple[int, ...]:
    for index in matches:
        if not 0 <= index < batch_size:
            raise DuplicateIndexOutOfRangeError(index=index, batch_size=batch_size)
    return tuple(sorted(index for index, notes in matches.items() if notes))


def _without_indices(
    fields: Sequence[FieldValues],
    tags: Sequence[TagSet],
    flagged: tuple[int, ...],
) -> tuple[list[FieldValues], list[TagSet]]:
    kept_fields: list[FieldValues] = []
    kept_tags: list[TagSet] = []
    next_flag = 0
    for position, (record, tag_set) in enumerate(zip(fields, tags, strict=True)):
        if next_flag < len(flagged) and flagged[next_flag] == position:
            next_flag += 1
            continue
        kept_fields.append(record)
        kept_tags.append(tag_set)
    return kept_fields, kept_tags
