# ruff: noqa: T201

from __future__ import annotations

import argparse
import logging
import sys
from signal import SIGINT, signal
from typing import TYPE_CHECKING

from dotenv import load_dotenv

from ankibridge.app import build_bridge
from ankibridge.config import configure_logging
from ankibridge.domain.outcomes import NoteCreated
from ankibridge.domain.submission import NoteTarget
from ankibridge.domain.types import MediaKind, deck_choice

if TYPE_CHECKING:
    from collections.abc import Sequence
    from types import FrameType

    from ankibridge.domain.bridge import ContentBridge

log = logging.getLogger(__name__)


def _parse_args(argv: Sequence[str]) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Reconcile decks, models and notes with Anki")
    parser.add_argument(
        "--verbose",
        "-v",
        action="store_true",
        help="Enable debug logging",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    subparsers.add_parser("status", help="Check whether AnkiConnect is reachable")
    subparsers.add_parser("permission", help="Request AnkiConnect permission for this origin")
    subparsers.add_parser("decks", help="List decks")

    models = subparsers.add_parser("models", help="List models (note types)")
    models.add_argument(
        "--min-fields",
        type=int,
        default=0,
        help="Only list models with at least this many fields (default: %(default)s)",
    )

    fields = subparsers.add_parser("fields", help="Show the field names of a model")
    model_ref = fields.add_mutually_exclusive_group(required=True)
    model_ref.add_argument("--model-name", type=str, help="Model name")
    model_ref.add_argument("--model-id", type=int, help="Model id")

    resolve_deck = subparsers.add_parser("resolve-deck", help="Resolve a deck name to its id")
    resolve_deck.add_argument("name", type=str, help="Deck name")
    resolve_deck.add_argument(
        "--create",
        action="store_true",
        help="Create the deck when it does not exist",
    )

    add_note = subparsers.add_parser("add-note", help="Add a note, creating deck and model")
    add_note.add_argument(
        "--deck",
        type=str,
        help="Deck name (defaults to the deck Anki currently uses)",
    )
    add_note.add_argument("--deck-id", type=int, help="Existing deck id, skips resolution")
    add_note.add_argument("--model", type=str, help="Model name")
    add_note.add_argument("--model-id", type=int, help="Existing model id, skips resolution")
    add_note.add_argument(
        "--field",
        dest="fields",
        action="append",
        default=[],
        required=True,
        help="Model field name, repeat in field order",
    )
    add_note.add_argument(
        "--value",
        dest="values",
        action="append",
        default=[],
        help="Field value, repeat in field order",
    )
    add_note.add_argument(
        "--tag",
        dest="tags",
        action="append",
        default=None,
        help="Tag to attach to the note, may be repeated",
    )
    add_note.add_argument(
        "--card",
        dest="cards",
        nargs=3,
        action="append",
        default=[],
        metavar=("NAME", "FRONT", "BACK"),
        help="Card template used when the model is created, may be repeated",
    )
    add_note.add_argument("--css", type=str, help="CSS used when the model is created")

    upload = subparsers.add_parser("upload-media", help="Store a media file in Anki")
    upload.add_argument("uri", type=str, help="file:// or http(s):// URI, or a local path")
    upload.add_argument("name", type=str, help="Preferred media file name")
    upload.add_argument(
        "--kind",
        type=MediaKind,
        choices=list(MediaKind),
        required=True,
        help="Media kind",
    )

    return parser.parse_args(list(argv))


def _note_target(args: argparse.Namespace) -> NoteTarget:
    cards: list[list[str]] = args.cards
    return NoteTarget(
        model_fields=tuple(args.fields),
        deck=deck_choice(args.deck),
        deck_id=args.deck_id,
        model_name=args.model,
        model_id=args.model_id,
        card_names=tuple(card[0] for card in cards),
        question_formats=tuple(card[1] for card in cards),
        answer_formats=tuple(card[2] for card in cards),
        css=args.css,
    )


def _run(args: argparse.Namespace, bridge: ContentBridge) -> int:  # noqa: C901, PLR0911, PLR0912
    if args.command == "status":
        available = bridge.is_available()
        print(f"available: {'yes' if available else 'no'}")
        print(f"permission identifier: {bridge.permission_identifier()}")
        print(f"selected deck: {bridge.selected_deck_name()}")
        return 0 if available else 1

    if args.command == "permission":
        print(bridge.request_permission())
        return 0

    if args.command == "decks":
        for deck_id, name in bridge.list_decks().items():
            print(f"{deck_id}\t{name}")
        return 0

    if args.command == "models":
        for model_id, name in bridge.list_models(args.min_fields).items():
            print(f"{model_id}\t{name}")
        return 0

    if args.command == "fields":
        names = bridge.field_names(model_name=args.model_name, model_id=args.model_id)
        if names is None:
            log.error("Model not found")
            return 1
        for name in names:
            print(name)
        return 0

    if args.command == "resolve-deck":
        if args.create:
            deck_id = bridge.resolve_or_create_deck(args.name)
        else:
            deck_id = bridge.resolve_deck(args.name)
        if deck_id is None:
            log.error("Deck %r not found", args.name)
            return 1
        print(deck_id)
        return 0

    if args.command == "add-note":
        outcome = bridge.submit_note(_note_target(args), args.values, args.tags)
        print(outcome.code)
        return 0 if isinstance(outcome, NoteCreated) else 1

    if args.command == "upload-media":
        reference = bridge.upload_media(args.uri, args.name, args.kind)
        if reference is None:
            log.error("Anki did not store %s", args.uri)
            return 1
        print(reference)
        return 0

    raise ValueError(f"Unsupported command: {args.command}")


def main(argv: Sequence[str] | None = None) -> None:
    """Main application entry point."""
    args_list = list(argv) if argv is not None else list(sys.argv[1:])
    parsed_args = _parse_args(args_list)
    configure_logging(level=logging.DEBUG if parsed_args.verbose else logging.INFO)

    try:
        bridge = build_bridge()
        exit_code = _run(parsed_args, bridge)
    except ValueError:
        log.exception("CLI validation error")
        sys.exit(2)
    except Exception:
        log.exception("Fatal error")
        sys.exit(1)

    if exit_code:
        sys.exit(exit_code)


def sigint_handler(_signal_received: int, _frame: FrameType | None) -> None:
    """Handle SIGINT (Ctrl+C) gracefully."""
    log.info("Closed by user (Ctrl+C)")
    sys.exit(0)


def run() -> None:
    """Console script entry point."""
    load_dotenv()
    signal(SIGINT, sigint_handler)
    main()


if __name__ == "__main__":
    run()
