"""Note submission: resolve-or-create deck and model, then insert notes.

Explicit deck and model ids are trusted verbatim and skip resolution entirely.
Store refusals come back as members of the closed outcome vocabulary in
``ankibridge.domain.outcomes``; only contract violations and transport or
storage faults are raised.
"""

from __future__ import annotations

from dataclasses import dataclass
from logging import getLogger
from typing import TYPE_CHECKING

from ankibridge.domain.errors import InvalidNoteError
from ankibridge.domain.outcomes import (
    BatchOutcome,
    DeckCreationFailed,
    ModelCreationFailed,
    NoteCreated,
    NoteInsertFailed,
)
from ankibridge.domain.types import USE_DEFAULT, ModelSchema, Named

if TYPE_CHECKING:
    from collections.abc import Iterable, Sequence

    from ankibridge.domain.deduplication import DuplicateSuppressor
    from ankibridge.domain.outcomes import SubmitOutcome
    from ankibridge.domain.ports import ContentStore
    from ankibridge.domain.resolution import DeckResolver, ModelResolver
    from ankibridge.domain.types import (
        DeckChoice,
        DeckId,
        FieldValues,
        ModelId,
        NoteCandidate,
        TagSet,
    )

log = getLogger(__name__)


@dataclass(frozen=True, slots=True)
class NoteTarget:
    """Where notes go: a deck (by choice or id) and a model (by schema or id)."""

    model_fields: tuple[str, ...]
    deck: DeckChoice = USE_DEFAULT
    deck_id: DeckId | None = None
    model_name: str | None = None
    model_id: ModelId | None = None
    card_names: tuple[str, ...] = ()
    question_formats: tuple[str, ...] = ()
    answer_formats: tuple[str, ...] = ()
    css: str | None = None

    def model_schema(self) -> ModelSchema:
        if self.model_name is None:
            raise InvalidNoteError("A model name is required when no model id is given")
        return ModelSchema(
            name=self.model_name,
            fields=self.model_fields,
            card_names=self.card_names,
            question_formats=self.question_formats,
            answer_formats=self.answer_formats,
            css=self.css,
        )


@dataclass(frozen=True, slots=True)
class _ResolvedTarget:
    deck_id: DeckId | None
    model_id: ModelId


def validate_target(target: NoteTarget) -> None:
    if not target.model_fields:
        raise InvalidNoteError("Model fields must not be empty")
    if target.model_id is not None:
        return
    if target.model_name is None:
        raise InvalidNoteError("Either a model name or a model id is required")
    templates = (target.card_names, target.question_formats, target.answer_formats)
    lengths = {len(part) for part in templates}
    if len(lengths) != 1 or 0 in lengths:
        raise InvalidNoteError(
            "Card names, question formats and answer formats must be non-empty "
            f"and of equal length, got {[len(part) for part in templates]}"
        )


def validate_values(target: NoteTarget, value_fields: Sequence[str]) -> None:
    if len(value_fields) != len(target.model_fields):
        raise InvalidNoteError(
            f"Expected {len(target.model_fields)} field values, got {len(value_fields)}"
        )


def normalize_tags(tags: Iterable[str] | None) -> frozenset[str]:
    """Absent and empty tag collections both mean "no tags"."""

    if tags is None:
        return frozenset()
    return frozenset(tag for tag in tags if tag)


class NoteSubmitter:
    def __init__(
        self,
        *,
        store: ContentStore,
        decks: DeckResolver,
        models: ModelResolver,
        duplicates: DuplicateSuppressor,
    ) -> None:
        self._store = store
        self._decks = decks
        self._models = models
        self._duplicates = duplicates

    def submit_note(
        self,
        target: NoteTarget,
        value_fields: Sequence[str],
        tags: Iterable[str] | None = None,
    ) -> SubmitOutcome:
        validate_target(target)
        validate_values(target, value_fields)

        resolved = self._resolve_target(target)
        if not isinstance(resolved, _ResolvedTarget):
            return resolved

        note_id = self._store.insert_note(
            resolved.model_id,
            resolved.deck_id,
            list(value_fields),
            normalize_tags(tags),
        )
        if note_id is None:
            log.warning(
                "Content store declined to insert note into model %s, deck %s",
                resolved.model_id,
                resolved.deck_id,
            )
            return NoteInsertFailed()
        return NoteCreated(note_id=note_id)

    def submit_notes(
        self,
        target: NoteTarget,
        notes: Sequence[NoteCandidate],
    ) -> BatchOutcome | DeckCreationFailed | ModelCreationFailed:
        """Submit a batch, skipping notes whose key field already exists."""

        validate_target(target)
        for note in notes:
            validate_values(target, note.fields)

        resolved = self._resolve_target(target)
        if not isinstance(resolved, _ResolvedTarget):
            return resolved

        fields: list[FieldValues] = [list(note.fields) for note in notes]
        tags: list[TagSet] = [set(note.tags) for note in notes]
        dedup = self._duplicates.remove_duplicates(fields, tags, resolved.model_id)

        outcome = BatchOutcome(duplicates=dedup.removed)
        for values, tag_set in zip(fields, tags, strict=True):
            note_id = self._store.insert_note(
                resolved.model_id,
                resolved.deck_id,
                values,
                normalize_tags(tag_set),
            )
            if note_id is None:
                outcome.failed += 1
            else:
                outcome.created.append(note_id)

        log.info(
            "Submitted %d notes: created=%d, duplicates=%d, failed=%d",
            outcome.submitted,
            len(outcome.created),
            outcome.duplicates,
            outcome.failed,
        )
        return outcome

    def _resolve_target(
        self,
        target: NoteTarget,
    ) -> _ResolvedTarget | DeckCreationFailed | ModelCreationFailed:
        if target.deck_id is not None:
            deck_id: DeckId | None = target.deck_id
        else:
            deck_id = self._decks.resolve_or_create(target.deck)
            if deck_id is None and isinstance(target.deck, Named):
                return DeckCreationFailed(deck_name=target.deck.name)

        if target.model_id is not None:
            return _ResolvedTarget(deck_id=deck_id, model_id=target.model_id)

        schema = target.model_schema()
        model_id = self._models.resolve_or_create(schema, default_deck_id=deck_id)
        if model_id is None:
            return ModelCreationFailed(model_name=schema.name)
        return _ResolvedTarget(deck_id=deck_id, model_id=model_id)
