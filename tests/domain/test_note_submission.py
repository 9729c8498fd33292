from __future__ import annotations

from typing import TYPE_CHECKING

import pytest

from ankibridge.domain.deduplication import DuplicateSuppressor
from ankibridge.domain.errors import InvalidNoteError
from ankibridge.domain.outcomes import (
    BatchOutcome,
    DeckCreationFailed,
    ModelCreationFailed,
    NoteCreated,
    NoteInsertFailed,
    OutcomeCode,
)
from ankibridge.domain.resolution import DeckResolver, ModelResolver
from ankibridge.domain.submission import NoteSubmitter, NoteTarget, normalize_tags
from ankibridge.domain.types import USE_DEFAULT, NoteCandidate, Named
from tests.helpers.content_store import FakeModel

if TYPE_CHECKING:
    from tests.helpers.content_store import FakeContentStore
    from tests.helpers.reference_cache import InMemoryReferenceCache


def _submitter(store: FakeContentStore, cache: InMemoryReferenceCache) -> NoteSubmitter:
    return NoteSubmitter(
        store=store,
        decks=DeckResolver(store=store, cache=cache),
        models=ModelResolver(store=store, cache=cache),
        duplicates=DuplicateSuppressor(store=store),
    )


def _target(**overrides: object) -> NoteTarget:
    values: dict[str, object] = {
        "model_fields": ("Front", "Back"),
        "deck": Named("Spanish"),
        "model_name": "Vocab",
        "card_names": ("Card 1",),
        "question_formats": ("{{Front}}",),
        "answer_formats": ("{{Back}}",),
    }
    values.update(overrides)
    return NoteTarget(**values)  # type: ignore[arg-type]


def test_explicit_ids_skip_resolution_and_pass_through(
    store: FakeContentStore,
    cache: InMemoryReferenceCache,
) -> None:
    target = _target(deck_id=77, model_id=88)

    outcome = _submitter(store, cache).submit_note(target, ["hola", "hello"], {"es"})

    assert outcome == NoteCreated(note_id=store.inserted[0].note_id)
    assert store.calls == ["insert_note"]
    inserted = store.inserted[0]
    assert inserted.deck_id == 77
    assert inserted.model_id == 88
    assert inserted.field_values == ("hola", "hello")
    assert inserted.tags == frozenset({"es"})


def test_insert_absent_yields_note_insert_failed(
    store: FakeContentStore,
    cache: InMemoryReferenceCache,
) -> None:
    store.decline_insert = True

    outcome = _submitter(store, cache).submit_note(_target(), ["hola", "hello"])

    assert outcome == NoteInsertFailed()
    assert outcome.code == OutcomeCode.FAILED_TO_ADD_NOTE


def test_deck_and_model_are_created_on_first_submission(
    store: FakeContentStore,
    cache: InMemoryReferenceCache,
) -> None:
    submitter = _submitter(store, cache)

    first = submitter.submit_note(_target(), ["hola", "hello"])
    second = submitter.submit_note(_target(), ["adios", "bye"])

    assert isinstance(first, NoteCreated)
    assert isinstance(second, NoteCreated)
    assert store.calls.count("create_deck") == 1
    assert store.calls.count("create_model") == 1
    assert store.inserted[0].deck_id == store.inserted[1].deck_id
    assert first.code == str(first.note_id)


def test_model_creation_receives_resolved_deck(
    store: FakeContentStore,
    cache: InMemoryReferenceCache,
) -> None:
    store.decks = {5: "Spanish"}

    _submitter(store, cache).submit_note(_target(), ["hola", "hello"])

    _, default_deck_id = store.created_models[0]
    assert default_deck_id == 5


def test_default_deck_inserts_without_deck_id(
    store: FakeContentStore,
    cache: InMemoryReferenceCache,
) -> None:
    outcome = _submitter(store, cache).submit_note(_target(deck=USE_DEFAULT), ["hola", "hello"])

    assert isinstance(outcome, NoteCreated)
    assert store.inserted[0].deck_id is None
    assert "create_deck" not in store.calls


def test_declined_deck_creation_is_reported(
    store: FakeContentStore,
    cache: InMemoryReferenceCache,
) -> None:
    store.decline_deck_creation = True

    outcome = _submitter(store, cache).submit_note(_target(), ["hola", "hello"])

    assert outcome == DeckCreationFailed(deck_name="Spanish")
    assert outcome.code == OutcomeCode.FAILED_TO_CREATE_DECK
    assert "insert_note" not in store.calls


def test_declined_model_creation_is_reported(
    store: FakeContentStore,
    cache: InMemoryReferenceCache,
) -> None:
    store.decline_model_creation = True

    outcome = _submitter(store, cache).submit_note(_target(), ["hola", "hello"])

    assert outcome == ModelCreationFailed(model_name="Vocab")
    assert outcome.code == OutcomeCode.FAILED_TO_CREATE_MODEL
    assert "insert_note" not in store.calls


def test_absent_and_empty_tags_are_equivalent() -> None:
    assert normalize_tags(None) == normalize_tags([]) == frozenset()


@pytest.mark.parametrize(
    ("overrides", "values"),
    [
        ({}, ["only one"]),
        ({"model_fields": ()}, []),
        ({"card_names": ()}, ["hola", "hello"]),
        ({"answer_formats": ("{{Back}}", "{{Front}}")}, ["hola", "hello"]),
        ({"model_name": None}, ["hola", "hello"]),
    ],
)
def test_inconsistent_inputs_are_rejected(
    store: FakeContentStore,
    cache: InMemoryReferenceCache,
    overrides: dict[str, object],
    values: list[str],
) -> None:
    with pytest.raises(InvalidNoteError):
        _submitter(store, cache).submit_note(_target(**overrides), values)

    assert store.calls == []


def test_templates_are_not_required_with_model_id(
    store: FakeContentStore,
    cache: InMemoryReferenceCache,
) -> None:
    store.models = {88: FakeModel(name="Vocab", fields=["Front", "Back"])}
    target = _target(model_id=88, model_name=None, card_names=(), question_formats=())

    outcome = _submitter(store, cache).submit_note(target, ["hola", "hello"])

    assert isinstance(outcome, NoteCreated)


def test_batch_skips_duplicates_and_counts_results(
    store: FakeContentStore,
    cache: InMemoryReferenceCache,
) -> None:
    store.duplicates = {1: [400]}
    notes = [
        NoteCandidate(fields=["hola", "hello"], tags={"es"}),
        NoteCandidate(fields=["adios", "bye"]),
        NoteCandidate(fields=["gracias", "thanks"]),
    ]

    outcome = _submitter(store, cache).submit_notes(_target(), notes)

    assert isinstance(outcome, BatchOutcome)
    assert outcome.duplicates == 1
    assert outcome.failed == 0
    assert outcome.submitted == 3
    assert [note.field_values[0] for note in store.inserted] == ["hola", "gracias"]
    assert store.inserted[0].tags == frozenset({"es"})
    assert notes[1].fields == ["adios", "bye"]


def test_batch_counts_declined_inserts(
    store: FakeContentStore,
    cache: InMemoryReferenceCache,
) -> None:
    store.decline_insert = True

    outcome = _submitter(store, cache).submit_notes(
        _target(),
        [NoteCandidate(fields=["hola", "hello"])],
    )

    assert outcome == BatchOutcome(created=[], duplicates=0, failed=1)


def test_batch_reports_deck_failure_before_touching_notes(
    store: FakeContentStore,
    cache: InMemoryReferenceCache,
) -> None:
    store.decline_deck_creation = True

    outcome = _submitter(store, cache).submit_notes(
        _target(),
        [NoteCandidate(fields=["hola", "hello"])],
    )

    assert outcome == DeckCreationFailed(deck_name="Spanish")
    assert "find_duplicate_notes" not in store.calls


def test_note_goes_into_model_that_gained_fields(
    store: FakeContentStore,
    cache: InMemoryReferenceCache,
) -> None:
    store.models = {7: FakeModel(name="Vocab", fields=["Front", "Back", "Notes"])}

    outcome = _submitter(store, cache).submit_note(_target(), ["hola", "hello"])

    assert outcome == NoteCreated(note_id=store.inserted[0].note_id)
    assert store.inserted[0].model_id == 7
    assert store.created_models == []
