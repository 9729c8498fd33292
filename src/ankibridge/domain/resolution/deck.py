"""Deck name -> id resolution.

Resolution order:
- the live deck listing wins (case-insensitive exact name match, first match
  in listing order), so a deck renamed back to its original name is found
- otherwise a cached id is accepted as long as the store still knows it under
  *some* name, which covers decks renamed outside this system
- otherwise the deck is absent

Only decks created here are written to the reference cache.
"""

from __future__ import annotations

from logging import getLogger
from typing import TYPE_CHECKING

from ankibridge.domain.types import ReferenceNamespace, UseDefault

if TYPE_CHECKING:
    from collections.abc import Mapping

    from ankibridge.domain.ports import ContentStore, ReferenceCache
    from ankibridge.domain.types import DeckChoice, DeckId

log = getLogger(__name__)


class DeckResolver:
    def __init__(self, *, store: ContentStore, cache: ReferenceCache) -> None:
        self._store = store
        self._cache = cache

    def resolve(self, name: str) -> DeckId | None:
        listed = _match_listed_deck(self._store.list_decks(), name)
        if listed is not None:
            log.debug("Deck %r resolved from listing: %s", name, listed)
            return listed

        cached = self._cache.get(ReferenceNamespace.DECK, name)
        if cached is None:
            return None
        if self._store.deck_name(cached) is None:
            log.debug("Cached deck id %s for %r no longer exists", cached, name)
            return None
        log.debug("Deck %r resolved from reference cache: %s", name, cached)
        return cached

    def resolve_or_create(self, choice: DeckChoice) -> DeckId | None:
        """Return the id for ``choice``, creating the deck when it is unknown.

        ``UseDefault`` short-circuits to ``None`` (the store's default deck)
        without touching the store. ``None`` is also returned for a named deck
        when the store declines to create it.
        """

        if isinstance(choice, UseDefault):
            return None
        name = choice.name

        existing = self.resolve(name)
        if existing is not None:
            return existing

        created = self._store.create_deck(name)
        if created is None:
            log.warning("Content store declined to create deck %r", name)
            return None
        self._cache.put(ReferenceNamespace.DECK, name, created)
        log.info("Created deck %r with id %s", name, created)
        return created


def _match_listed_deck(decks: Mapping[DeckId, str], name: str) -> DeckId | None:
    wanted = name.casefold()
    for deck_id, deck_name in decks.items():
        if deck_name.casefold() == wanted:
            return deck_id
    return None
