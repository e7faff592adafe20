"""App: central object that wires together data_dir, db, store, index and scheduler."""

import pathlib
import sqlite3
import threading

from flashsprint.config import get_data_dir, load_settings
from flashsprint.db import init_db, load_queue_order, load_records, save_records
from flashsprint.models import Card, CardRecord
from flashsprint.schedulers import Scheduler, load_scheduler
from flashsprint.store import CardStore
from flashsprint.tags import TagIndex


class App:
    """Holds all shared state for a flashsprint session.

    Usage:
        app = App(data_dir="/path/to/data")
        app.init_db()                    # uses data_dir/flashsprint.db
        app.load_scheduler()             # uses settings["scheduler"]
        app.load()                       # cards from the db
        ...
        app.save()
        app.close()

    For testing:
        app = App(data_dir=tmp_path)
        app.init_db(":memory:")
        app.load_scheduler("rotation")

    The store, index and scheduler are only ever changed together under
    ``lock``.
    """

    def __init__(self, data_dir: pathlib.Path | str | None = None):
        if data_dir is None:
            data_dir = get_data_dir()
        self.data_dir = pathlib.Path(data_dir)
        self.settings = load_settings(self.data_dir)
        self.store = CardStore()
        self.index = TagIndex()
        self.scheduler: Scheduler | None = None
        self.conn: sqlite3.Connection | None = None
        self.lock = threading.RLock()

    def find_card(self, card_id: int) -> Card | None:
        return self.store.find(card_id)

    def init_db(self, db_path: pathlib.Path | str | None = None) -> sqlite3.Connection:
        """Initialize (or connect to) the database.

        Args:
            db_path: Path to the SQLite database file, or ":memory:" for
                     in-memory databases (useful for testing). Defaults to
                     data_dir/<settings["db_name"]>.
        """
        if db_path is None:
            db_path = self.data_dir / self.settings.get("db_name", "flashsprint.db")
        self.conn = init_db(db_path)
        return self.conn

    def load_scheduler(self, name: str | None = None) -> Scheduler:
        """Create the scheduler and queue every card already in the store.

        Args:
            name: Scheduler name. Defaults to settings["scheduler"].
        """
        if name is None:
            name = self.settings.get("scheduler", "ladder")
        with self.lock:
            scheduler = load_scheduler(name, self.find_card, self.settings)
            for card in self.store.all():
                scheduler.place(card)
            self.scheduler = scheduler
        return scheduler

    def restore(self, records: list[CardRecord], next_id: int = 1,
                queue_order: list[int] | None = None):
        """Replace all state with ``records``.

        Every record is validated into a fresh store before anything is
        swapped in, so a bad record leaves the current state untouched.
        Cards are queued in ``queue_order`` first; the rest follow in
        record order.
        """
        with self.lock:
            if self.scheduler is None:
                self.load_scheduler()
            store = CardStore()
            for rec in records:
                store.restore(rec)
            store.bump_next_id(next_id)

            index = TagIndex()
            for card in store.all():
                for tag in card.tags:
                    index.register(tag, card.id)

            self.store = store
            self.index = index
            self.scheduler.clear()
            for card in _in_queue_order(store.all(), queue_order):
                self.scheduler.place(card)

    def load(self):
        """Load every stored card from the database."""
        records, next_id = load_records(self.conn)
        self.restore(records, next_id, load_queue_order(self.conn))

    def save(self):
        with self.lock:
            records = [card.to_record() for card in self.store.all()]
            # a card still being presented goes last, where release would put it
            queue_order = self.scheduler.queue_order() + list(self.scheduler.held)
            save_records(self.conn, records, self.store.next_id, queue_order)

    def close(self):
        """Close the database connection."""
        if self.conn:
            self.conn.close()
            self.conn = None


def _in_queue_order(cards: list[Card], queue_order: list[int] | None) -> list[Card]:
    by_id = {card.id: card for card in cards}
    ordered = [by_id.pop(card_id) for card_id in queue_order or [] if card_id in by_id]
    return ordered + list(by_id.values())
