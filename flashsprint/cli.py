"""CLI: command-line interface for flashsprint."""

import argparse
import sys

from flashsprint.app import App
from flashsprint.errors import FlashsprintError
from flashsprint.review_session import ReviewSession
from flashsprint.samples import seed
from flashsprint.tags import parse_tags
from flashsprint.textfile import read_file, write_file


def _open(app: App) -> ReviewSession:
    app.init_db()
    app.load_scheduler(app.settings.get("scheduler", "ladder"))
    app.load()
    return ReviewSession(app)


def _format_card(card, width=60) -> str:
    q = card.question if len(card.question) <= width else card.question[:width] + "..."
    return (f"ID {card.id}: Q: {q} | tags: {' '.join(card.tags)} | "
            f"tier={card.tier} due_in={card.due_counter} reviewed={card.review_count}")


def _prompt(text: str) -> str:
    try:
        return input(text).strip()
    except EOFError:
        return "q"


def cmd_add(args, app: App):
    session = _open(app)
    card = session.add_card(args.question, args.answer, parse_tags(args.tags or ""))
    app.save()
    print(f"Added card ID {card.id}")
    app.close()


def cmd_edit(args, app: App):
    session = _open(app)
    card = session.store.get(args.id)
    tags = parse_tags(args.tags) if args.tags is not None else card.tags
    session.edit_card(args.id,
                      args.question if args.question is not None else card.question,
                      args.answer if args.answer is not None else card.answer,
                      tags)
    app.save()
    print(f"Updated card #{args.id}")
    app.close()


def cmd_delete(args, app: App):
    session = _open(app)
    session.delete_card(args.id)
    app.save()
    print(f"Deleted card #{args.id}")
    app.close()


def cmd_search(args, app: App):
    session = _open(app)
    cards = session.search_by_tag(args.tag)
    tag = args.tag.strip().lower()
    if not cards:
        print(f"No cards found for tag '{tag}'")
    else:
        print(f"Cards with tag '{tag}':")
        for card in cards:
            print(_format_card(card, width=10_000))
    app.close()


def cmd_list(args, app: App):
    session = _open(app)
    cards = session.list_all()
    if not cards:
        print("No cards.")
    else:
        print("All cards:")
        for card in cards:
            print(_format_card(card))
    app.close()


def cmd_stats(args, app: App):
    session = _open(app)
    print(f"Scheduler:      {app.scheduler.scheduler_id}")
    print(f"Cards:          {len(app.store)}")
    print(f"Tags:           {len(app.index)}")
    for label, count in session.box_stats().items():
        print(f"  {label}: {count}")
    app.close()


def cmd_review(args, app: App):
    session = _open(app)
    if len(app.store) == 0:
        print("No cards in the queue. Add some first.")
        app.close()
        return

    rotation = app.scheduler.scheduler_id == "rotation"
    print("Starting practice. Enter 'q' at any prompt to stop practicing.")
    while args.limit is None or session.reviewed < args.limit:
        card = session.next_card()
        if card is None:
            if session.remaining_count() == 0:
                print("Queue empty.")
                break
            continue

        print(f"\n---\nCard #{card.id}\nQ: {card.question}")
        if _prompt("(press Enter to see answer, 'q' to stop) ") == "q":
            session.skip_current()
            break
        print(f"A: {card.answer}")
        reply = _prompt("Did you answer correctly? (y/n) or 'q' to stop: ").lower()
        if reply == "q":
            session.skip_current()
            break

        correct = reply.startswith("y")
        card = session.submit(card.id, correct)
        if rotation:
            if correct:
                print(f"Nice! Interval now {card.tier} rotations.")
            else:
                print("Keep practicing - interval reset to 1.")
        else:
            print(f"{'Correct' if correct else 'Wrong'}: now in Box {card.tier + 1}, "
                  f"next reminder in {max(session.due_in(card), 1)} day(s).")

    print(f"Exiting practice. Reviewed {session.reviewed} card(s), {session.correct} correct.")
    app.save()
    app.close()


def cmd_seed(args, app: App):
    session = _open(app)
    added = seed(session, force=args.force)
    if added:
        app.save()
        print(f"Added {added} sample card(s)")
    else:
        print("Store is not empty; use --force to add samples anyway.")
    app.close()


def cmd_export(args, app: App):
    session = _open(app)
    records = session.export_records()
    write_file(args.path, records)
    print(f"Saved {len(records)} card(s) to {args.path}")
    app.close()


def cmd_import(args, app: App):
    session = _open(app)
    records = read_file(args.path)
    session.import_records(records)
    app.save()
    print(f"Loaded {len(records)} card(s) from {args.path}")
    app.close()


COMMANDS = {
    "add": cmd_add,
    "edit": cmd_edit,
    "delete": cmd_delete,
    "search": cmd_search,
    "list": cmd_list,
    "stats": cmd_stats,
    "review": cmd_review,
    "seed": cmd_seed,
    "export": cmd_export,
    "import": cmd_import,
}


def main():
    parser = argparse.ArgumentParser(prog="flashsprint",
                                     description="Flashcards with spaced repetition")
    subparsers = parser.add_subparsers(dest="command")

    p_add = subparsers.add_parser("add", help="Add a card")
    p_add.add_argument("question")
    p_add.add_argument("answer")
    p_add.add_argument("--tags", help="Comma-separated tags, e.g. 'stack,queue'")

    p_edit = subparsers.add_parser("edit", help="Edit a card")
    p_edit.add_argument("id", type=int)
    p_edit.add_argument("--question")
    p_edit.add_argument("--answer")
    p_edit.add_argument("--tags", help="Replace tags (comma-separated)")

    p_delete = subparsers.add_parser("delete", help="Delete a card")
    p_delete.add_argument("id", type=int)

    p_search = subparsers.add_parser("search", help="List cards with a tag")
    p_search.add_argument("tag")

    subparsers.add_parser("list", help="List all cards")
    subparsers.add_parser("stats", help="Show cards per box")

    p_review = subparsers.add_parser("review", help="Start an interactive review")
    p_review.add_argument("--limit", type=int, help="Stop after this many answers")

    p_seed = subparsers.add_parser("seed", help="Add the sample deck")
    p_seed.add_argument("--force", action="store_true", help="Add even if cards exist")

    p_export = subparsers.add_parser("export", help="Save cards to a .txt or .json file")
    p_export.add_argument("path")

    p_import = subparsers.add_parser("import", help="Replace all cards from a .txt or .json file")
    p_import.add_argument("path")

    args = parser.parse_args()
    if not args.command:
        parser.print_help()
        sys.exit(1)

    app = App()
    if not app.data_dir.exists():
        app.data_dir.mkdir(parents=True, exist_ok=True)
        print(f"Created data directory: {app.data_dir}")

    try:
        COMMANDS[args.command](args, app)
    except (FlashsprintError, KeyError, ValueError, OSError) as e:
        print(f"Error: {e}", file=sys.stderr)
        app.close()
        sys.exit(1)
