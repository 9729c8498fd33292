"""Closed result vocabulary of note submission."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import StrEnum
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from ankibridge.domain.types import NoteId


class OutcomeCode(StrEnum):
    FAILED_TO_CREATE_DECK = "FAILED_TO_CREATE_DECK"
    FAILED_TO_CREATE_MODEL = "FAILED_TO_CREATE_MODEL"
    FAILED_TO_ADD_NOTE = "FAILED_TO_ADD_NOTE"


@dataclass(frozen=True, slots=True)
class NoteCreated:
    note_id: NoteId

    @property
    def code(self) -> str:
        return str(self.note_id)


@dataclass(frozen=True, slots=True)
class DeckCreationFailed:
    deck_name: str

    @property
    def code(self) -> str:
        return OutcomeCode.FAILED_TO_CREATE_DECK


@dataclass(frozen=True, slots=True)
class ModelCreationFailed:
    model_name: str

    @property
    def code(self) -> str:
        return OutcomeCode.FAILED_TO_CREATE_MODEL


@dataclass(frozen=True, slots=True)
class NoteInsertFailed:
    @property
    def code(self) -> str:
        return OutcomeCode.FAILED_TO_ADD_NOTE


type SubmitOutcome = NoteCreated | DeckCreationFailed | ModelCreationFailed | NoteInsertFailed


@dataclass(slots=True)
class BatchOutcome:
    """Result of submitting a batch of notes against one deck and model."""

    created: list[NoteId] = field(default_factory=list["NoteId"])
    duplicates: int = 0
    failed: int = 0

    @property
    def submitted(self) -> int:
        return len(self.created) + self.duplicates + self.failed
