"""``ContentStore`` implementation on top of AnkiConnect.

AnkiConnect addresses decks and models by name in most actions, so ids are
mapped back to names through the live listings on every call. Nothing is
memoised here: renames made in Anki between two calls must be visible.
"""

from __future__ import annotations

from logging import getLogger
from pathlib import Path
from typing import TYPE_CHECKING
from urllib.parse import urlsplit
from urllib.request import url2pathname

from pydantic import ValidationError

from ankibridge.domain.errors import ContentStoreError
from ankibridge.domain.types import MediaKind

from .client import AnkiConnectAPIError
from .schema import ID_LIST, MODEL_LIST, NAME_LIST, NAMES_AND_IDS, AnkiModel, PermissionResult

if TYPE_CHECKING:
    from collections.abc import Sequence

    from ankibridge.config.ankiconnect import AnkiConnectConfig
    from ankibridge.domain.types import (
        DeckId,
        DuplicateMatches,
        ModelId,
        ModelSchema,
        NoteId,
        PermissionStatus,
    )

    from .client import AnkiConnectClient

log = getLogger(__name__)

_SEARCH_SPECIALS = ("\\", '"', "*", "_")


def escape_search_value(value: str) -> str:
    """Escape a value for use inside a double-quoted Anki search term."""

    for char in _SEARCH_SPECIALS:
        value = value.replace(char, f"\\{char}")
    return value


def media_reference(filename: str, kind: MediaKind) -> str:
    """Return the field markup that embeds a stored media file."""

    if kind is MediaKind.IMAGE:
        return f'<img src="{filename}">'
    return f"[sound:{filename}]"


class AnkiConnectContentStore:
    def __init__(self, *, client: AnkiConnectClient, config: AnkiConnectConfig) -> None:
        self._client = client
        self._config = config

    # --- Connection -----------------------------------------------------

    def is_available(self) -> bool:
        try:
            version = self._client.invoke("version")
        except ContentStoreError as exc:
            log.debug("AnkiConnect is not available: %s", exc)
            return False
        return isinstance(version, int) and version >= self._config.api_version

    def permission_identifier(self) -> str:
        return self._config.origin

    def request_permission(self) -> PermissionStatus:
        result = self._client.invoke("requestPermission")
        return PermissionResult.model_validate(result).permission

    # --- Decks ----------------------------------------------------------

    def list_decks(self) -> dict[DeckId, str]:
        names_and_ids = NAMES_AND_IDS.validate_python(self._client.invoke("deckNamesAndIds"))
        return {deck_id: name for name, deck_id in names_and_ids.items()}

    def deck_name(self, deck_id: DeckId) -> str | None:
        return self.list_decks().get(deck_id)

    def selected_deck_name(self) -> str:
        return self._config.default_deck

    def create_deck(self, name: str) -> DeckId | None:
        try:
            result = self._client.invoke("createDeck", deck=name)
        except AnkiConnectAPIError as exc:
            log.warning("AnkiConnect refused to create deck %r: %s", name, exc.message)
            return None
        return result if isinstance(result, int) else None

    # --- Models ---------------------------------------------------------

    def list_models(self, min_fields: int = 0) -> dict[ModelId, str]:
        names_and_ids = NAMES_AND_IDS.validate_python(self._client.invoke("modelNamesAndIds"))
        models = {model_id: name for name, model_id in names_and_ids.items()}
        if min_fields <= 0 or not models:
            return models

        definitions = MODEL_LIST.validate_python(
            self._client.invoke("findModelsById", modelIds=list(models))
        )
        wide_enough = {model.id for model in definitions if len(model.note_fields) >= min_fields}
        return {model_id: name for model_id, name in models.items() if model_id in wide_enough}

    def model_name(self, model_id: ModelId) -> str | None:
        return self.list_models().get(model_id)

    def model_field_names(self, model_id: ModelId) -> list[str] | None:
        name = self.model_name(model_id)
        if name is None:
            return None
        return NAME_LIST.validate_python(self._client.invoke("modelFieldNames", modelName=name))

    def create_model(
        self,
        schema: ModelSchema,
        *,
        default_deck_id: DeckId | None = None,
    ) -> ModelId | None:
        if default_deck_id is not None:
            log.debug(
                "AnkiConnect cannot bind model %r to deck %s; binding ignored",
                schema.name,
                default_deck_id,
            )
        templates = [
            {"Name": card_name, "Front": front, "Back": back}
            for card_name, front, back in zip(
                schema.card_names,
                schema.question_formats,
                schema.answer_formats,
                strict=True,
            )
        ]
        try:
            result = self._client.invoke(
                "createModel",
                modelName=schema.name,
                inOrderFields=list(schema.fields),
                css=schema.effective_css,
                isCloze=False,
                cardTemplates=templates,
            )
        except AnkiConnectAPIError as exc:
            log.warning("AnkiConnect refused to create model %r: %s", schema.name, exc.message)
            return None
        try:
            return AnkiModel.model_validate(result).id
        except ValidationError:
            log.warning("AnkiConnect returned no model id for %r", schema.name)
            return None

    # --- Notes ----------------------------------------------------------

    def find_duplicate_notes(
        self,
        model_id: ModelId,
        keys: Sequence[str],
    ) -> DuplicateMatches | None:
        field_names = self.model_field_names(model_id)
        if not field_names:
            return None
        key_field = field_names[0]

        positions = [index for index, key in enumerate(keys) if key]
        actions = [
            (
                "findNotes",
                {"query": f'mid:{model_id} "{key_field}:{escape_search_value(keys[index])}"'},
            )
            for index in positions
        ]
        results = self._client.invoke_multi(actions)

        matches: DuplicateMatches = {}
        for index, result in zip(positions, results, strict=True):
            note_ids = ID_LIST.validate_python(result)
            if note_ids:
                matches[index] = note_ids
        return matches

    def insert_note(
        self,
        model_id: ModelId,
        deck_id: DeckId | None,
        field_values: Sequence[str],
        tags: frozenset[str],
    ) -> NoteId | None:
        model_name = self.list_models().get(model_id)
        if model_name is None:
            log.warning("Cannot add note: model %s does not exist", model_id)
            return None
        deck_name = self.selected_deck_name() if deck_id is None else self.deck_name(deck_id)
        if deck_name is None:
            log.warning("Cannot add note: deck %s does not exist", deck_id)
            return None
        field_names = NAME_LIST.validate_python(
            self._client.invoke("modelFieldNames", modelName=model_name)
        )
        # Models only grow; trailing fields the caller does not know stay empty.
        if len(field_values) > len(field_names):
            log.warning(
                "Cannot add note: model %r has %d fields, got %d values",
                model_name,
                len(field_names),
                len(field_values),
            )
            return None

        note = {
            "deckName": deck_name,
            "modelName": model_name,
            "fields": dict(zip(field_names[: len(field_values)], field_values, strict=True)),
            "tags": sorted(tags),
            "options": {"allowDuplicate": True},
        }
        try:
            result = self._client.invoke("addNote", note=note)
        except AnkiConnectAPIError as exc:
            log.warning("AnkiConnect refused to add note to %r: %s", deck_name, exc.message)
            return None
        return result if isinstance(result, int) else None

    # --- Media ----------------------------------------------------------

    def upload_media(self, uri: str, preferred_name: str, kind: MediaKind) -> str | None:
        parts = urlsplit(uri)
        if parts.scheme in {"http", "https"}:
            source: dict[str, object] = {"url": uri}
        elif parts.scheme == "file":
            source = {"path": url2pathname(parts.path)}
        else:
            source = {"path": str(Path(uri).expanduser())}

        try:
            stored = self._client.invoke("storeMediaFile", filename=preferred_name, **source)
        except AnkiConnectAPIError as exc:
            log.warning("AnkiConnect refused to store media %r: %s", preferred_name, exc.message)
            return None
        if not isinstance(stored, str) or not stored:
            return None
        return media_reference(stored, kind)
