"""Facade over the resolvers, the duplicate suppressor and note submission.

``ContentBridge`` is what the application layer and the CLI talk to. It owns
no state beyond its collaborators: the content store port and the reference
cache port are injected, never looked up globally.
"""

from __future__ import annotations

from logging import getLogger
from typing import TYPE_CHECKING

from ankibridge.domain.deduplication import DuplicateSuppressor
from ankibridge.domain.errors import ContentStoreError, InvalidNoteError
from ankibridge.domain.resolution import DeckResolver, ModelResolver
from ankibridge.domain.submission import NoteSubmitter
from ankibridge.domain.types import Named

if TYPE_CHECKING:
    from collections.abc import Iterable, Mapping, Sequence

    from ankibridge.domain.deduplication import DeduplicationResult
    from ankibridge.domain.outcomes import (
        BatchOutcome,
        DeckCreationFailed,
        ModelCreationFailed,
        SubmitOutcome,
    )
    from ankibridge.domain.ports import ContentStore, ReferenceCache
    from ankibridge.domain.submission import NoteTarget
    from ankibridge.domain.types import (
        DeckId,
        FieldValues,
        MediaKind,
        ModelId,
        ModelSchema,
        NoteCandidate,
        PermissionStatus,
        TagSet,
    )

log = getLogger(__name__)


class ContentBridge:
    def __init__(self, *, store: ContentStore, cache: ReferenceCache) -> None:
        self._store = store
        self._decks = DeckResolver(store=store, cache=cache)
        self._models = ModelResolver(store=store, cache=cache)
        self._duplicates = DuplicateSuppressor(store=store)
        self._submitter = NoteSubmitter(
            store=store,
            decks=self._decks,
            models=self._models,
            duplicates=self._duplicates,
        )

    # --- Resolution -----------------------------------------------------

    def resolve_deck(self, name: str) -> DeckId | None:
        return self._decks.resolve(name)

    def resolve_or_create_deck(self, name: str) -> DeckId:
        """Return the id of deck ``name``, creating it if necessary.

        Raises ``ContentStoreError`` when the store declines to create it.
        """

        deck_id = self._decks.resolve_or_create(Named(name))
        if deck_id is None:
            raise ContentStoreError(f"Content store failed to create deck {name!r}")
        return deck_id

    def resolve_model(self, name: str, min_fields: int = 0) -> ModelId | None:
        return self._models.resolve(name, min_fields)

    def resolve_or_create_model(
        self,
        schema: ModelSchema,
        *,
        default_deck_id: DeckId | None = None,
    ) -> ModelId:
        model_id = self._models.resolve_or_create(schema, default_deck_id=default_deck_id)
        if model_id is None:
            raise ContentStoreError(f"Content store failed to create model {schema.name!r}")
        return model_id

    # --- Notes ----------------------------------------------------------

    def remove_duplicates(
        self,
        fields: list[FieldValues],
        tags: list[TagSet],
        model_id: ModelId,
    ) -> DeduplicationResult:
        return self._duplicates.remove_duplicates(fields, tags, model_id)

    def submit_note(
        self,
        target: NoteTarget,
        value_fields: Sequence[str],
        tags: Iterable[str] | None = None,
    ) -> SubmitOutcome:
        return self._submitter.submit_note(target, value_fields, tags)

    def submit_notes(
        self,
        target: NoteTarget,
        notes: Sequence[NoteCandidate],
    ) -> BatchOutcome | DeckCreationFailed | ModelCreationFailed:
        return self._submitter.submit_notes(target, notes)

    # --- Store pass-throughs --------------------------------------------

    def is_available(self) -> bool:
        return self._store.is_available()

    def permission_identifier(self) -> str:
        return self._store.permission_identifier()

    def request_permission(self) -> PermissionStatus:
        return self._store.request_permission()

    def list_decks(self) -> Mapping[DeckId, str]:
        return self._store.list_decks()

    def list_models(self, min_fields: int = 0) -> Mapping[ModelId, str]:
        return self._store.list_models(min_fields)

    def selected_deck_name(self) -> str:
        return self._store.selected_deck_name()

    def field_names(
        self,
        *,
        model_name: str | None = None,
        model_id: ModelId | None = None,
    ) -> Sequence[str] | None:
        """Field names of a model given by id, or by name via model resolution."""

        if model_id is None:
            if model_name is None:
                raise InvalidNoteError("Either a model name or a model id is required")
            model_id = self._models.resolve(model_name, 0)
            if model_id is None:
                log.debug("No model named %r", model_name)
                return None
        return self._store.model_field_names(model_id)

    def upload_media(self, uri: str, preferred_name: str, kind: MediaKind) -> str | None:
        return self._store.upload_media(uri, preferred_name, kind)
