"""Model (note-type) name -> id resolution.

Unlike decks, the reference cache is consulted first. Model identity is
schema-sensitive: a cached id is only accepted while the store still knows it
and its field count satisfies the caller's minimum. A stale or too-narrow
cached model falls through to the live listing, where the first exact
(case-sensitive) name match among models with enough fields wins.
"""

from __future__ import annotations

from logging import getLogger
from typing import TYPE_CHECKING

from ankibridge.domain.types import ReferenceNamespace

if TYPE_CHECKING:
    from ankibridge.domain.ports import ContentStore, ReferenceCache
    from ankibridge.domain.types import DeckId, ModelId, ModelSchema

log = getLogger(__name__)


class ModelResolver:
    def __init__(self, *, store: ContentStore, cache: ReferenceCache) -> None:
        self._store = store
        self._cache = cache

    def resolve(self, name: str, min_fields: int) -> ModelId | None:
        cached = self._cache.get(ReferenceNamespace.MODEL, name)
        if cached is not None and self._cached_model_is_usable(cached, min_fields):
            log.debug("Model %r resolved from reference cache: %s", name, cached)
            return cached

        for model_id, model_name in self._store.list_models(min_fields).items():
            if model_name == name:
                log.debug("Model %r resolved from listing: %s", name, model_id)
                return model_id
        return None

    def resolve_or_create(
        self,
        schema: ModelSchema,
        *,
        default_deck_id: DeckId | None = None,
    ) -> ModelId | None:
        existing = self.resolve(schema.name, len(schema.fields))
        if existing is not None:
            return existing

        created = self._store.create_model(schema, default_deck_id=default_deck_id)
        if created is None:
            log.warning("Content store declined to create model %r", schema.name)
            return None
        self._cache.put(ReferenceNamespace.MODEL, schema.name, created)
        log.info(
            "Created model %r with id %s (%d fields, %d card templates)",
            schema.name,
            created,
            len(schema.fields),
            len(schema.card_names),
        )
        return created

    def _cached_model_is_usable(self, model_id: ModelId, min_fields: int) -> bool:
        if self._store.model_name(model_id) is None:
            log.debug("Cached model id %s no longer exists", model_id)
            return False
        field_names = self._store.model_field_names(model_id)
        if field_names is None or len(field_names) < min_fields:
            log.debug("Cached model id %s has fewer than %d fields", model_id, min_fields)
            return False
        return True
