"""Core value types shared by resolvers, the duplicate suppressor and adapters."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import StrEnum
from typing import Final

type DeckId = int
type ModelId = int
type NoteId = int

type FieldValues = list[str]
type TagSet = set[str] | frozenset[str]

# Sparse mapping of batch index -> existing notes sharing the key field.
type DuplicateMatches = dict[int, list[NoteId]]

DEFAULT_MODEL_CSS: Final[str] = (
    ".card {\n"
    " font-family: arial;\n"
    " font-size: 20px;\n"
    " text-align: center;\n"
    " color: black;\n"
    " background-color: white;\n"
    "}\n"
)


class ReferenceNamespace(StrEnum):
    """Independent namespaces of the reference cache."""

    DECK = "deck"
    MODEL = "model"


class MediaKind(StrEnum):
    IMAGE = "image"
    AUDIO = "audio"


class PermissionStatus(StrEnum):
    GRANTED = "granted"
    DENIED = "denied"


@dataclass(frozen=True, slots=True)
class UseDefault:
    """Deck selection meaning "whatever the store currently uses by default"."""


@dataclass(frozen=True, slots=True)
class Named:
    name: str


type DeckChoice = UseDefault | Named

USE_DEFAULT: Final[UseDefault] = UseDefault()


def deck_choice(name: str | None) -> DeckChoice:
    """Translate an optional boundary value into an explicit deck choice."""

    return USE_DEFAULT if name is None else Named(name)


@dataclass(frozen=True, slots=True)
class ModelSchema:
    """Schema used when a custom model has to be created.

    ``card_names``, ``question_formats`` and ``answer_formats`` are parallel:
    entry ``i`` of each describes card template ``i``.
    """

    name: str
    fields: tuple[str, ...]
    card_names: tuple[str, ...]
    question_formats: tuple[str, ...]
    answer_formats: tuple[str, ...]
    css: str | None = None

    @property
    def effective_css(self) -> str:
        return self.css if self.css is not None else DEFAULT_MODEL_CSS


@dataclass(slots=True)
class NoteCandidate:
    fields: FieldValues
    tags: set[str] = field(default_factory=set[str])


@dataclass(eq=False, kw_only=True)
class ReferenceEntry:
    """Persisted memory of an id this system created under a logical name."""

    region: str
    namespace: ReferenceNamespace
    name: str
    external_id: int
