"""Port for the external, ID-keyed content store (decks, models, notes, media)."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from collections.abc import Mapping, Sequence

    from ankibridge.domain.types import (
        DeckId,
        DuplicateMatches,
        MediaKind,
        ModelId,
        ModelSchema,
        NoteId,
        PermissionStatus,
    )


@runtime_checkable
class ContentStore(Protocol):
    """Operations the reconciliation core needs from the content store.

    Methods returning ``None`` report that the store declined or did not know
    the requested entity. Transport failures are raised as
    ``ContentStoreError``.
    """

    def is_available(self) -> bool: ...

    def permission_identifier(self) -> str: ...

    def request_permission(self) -> PermissionStatus: ...

    def list_decks(self) -> Mapping[DeckId, str]: ...

    def deck_name(self, deck_id: DeckId) -> str | None: ...

    def selected_deck_name(self) -> str: ...

    def create_deck(self, name: str) -> DeckId | None: ...

    def list_models(self, min_fields: int = 0) -> Mapping[ModelId, str]: ...

    def model_name(self, model_id: ModelId) -> str | None: ...

    def model_field_names(self, model_id: ModelId) -> Sequence[str] | None: ...

    def create_model(
        self,
        schema: ModelSchema,
        *,
        default_deck_id: DeckId | None = None,
    ) -> ModelId | None: ...

    def find_duplicate_notes(
        self,
        model_id: ModelId,
        keys: Sequence[str],
    ) -> DuplicateMatches | None: ...

    def insert_note(
        self,
        model_id: ModelId,
        deck_id: DeckId | None,
        field_values: Sequence[str],
        tags: frozenset[str],
    ) -> NoteId | None: ...

    def upload_media(self, uri: str, preferred_name: str, kind: MediaKind) -> str | None: ...
