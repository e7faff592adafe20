"""Database schema, initialization and card record persistence."""

import pathlib
import sqlite3

from flashsprint.models import CardRecord

SCHEMA = """
CREATE TABLE IF NOT EXISTS cards (
    id INTEGER PRIMARY KEY,
    position INTEGER NOT NULL,
    queue_position INTEGER,
    question TEXT NOT NULL,
    answer TEXT NOT NULL,
    tier INTEGER NOT NULL DEFAULT 0 CHECK(tier >= 0),
    due_counter INTEGER NOT NULL DEFAULT 0 CHECK(due_counter >= 0),
    review_count INTEGER NOT NULL DEFAULT 0,
    last_reviewed INTEGER
);

CREATE TABLE IF NOT EXISTS card_tags (
    card_id INTEGER NOT NULL REFERENCES cards(id) ON DELETE CASCADE,
    tag TEXT NOT NULL,
    position INTEGER NOT NULL,
    PRIMARY KEY (card_id, tag)
);

CREATE TABLE IF NOT EXISTS meta (
    key TEXT PRIMARY KEY,
    value TEXT NOT NULL
);
"""


def init_db(db_path: pathlib.Path | str) -> sqlite3.Connection:
    db_path = pathlib.Path(db_path)
    if str(db_path) != ":memory:":
        db_path.parent.mkdir(parents=True, exist_ok=True)
    conn = sqlite3.connect(str(db_path), timeout=5, check_same_thread=False)
    conn.row_factory = sqlite3.Row
    if str(db_path) != ":memory:":
        conn.execute("PRAGMA journal_mode=WAL")
    conn.execute("PRAGMA foreign_keys=ON")
    conn.executescript(SCHEMA)
    conn.commit()
    return conn


def save_records(conn: sqlite3.Connection, records: list[CardRecord], next_id: int,
                 queue_order: list[int] | None = None):
    """Replace everything stored with ``records`` in a single transaction.

    ``queue_order`` is the scheduler order of the card ids; it is kept apart
    from ``position``, which is the store (listing) order.
    """
    queue_pos = {card_id: i for i, card_id in enumerate(queue_order or [])}
    with conn:
        conn.execute("DELETE FROM card_tags")
        conn.execute("DELETE FROM cards")
        for pos, rec in enumerate(records):
            conn.execute("""
                INSERT INTO cards (id, position, queue_position, question, answer, tier,
                                   due_counter, review_count, last_reviewed)
                VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?)
            """, (rec.id, pos, queue_pos.get(rec.id), rec.question, rec.answer, rec.tier,
                  rec.due_counter, rec.review_count, rec.last_reviewed))
            conn.executemany(
                "INSERT OR IGNORE INTO card_tags (card_id, tag, position) VALUES (?, ?, ?)",
                [(rec.id, tag, i) for i, tag in enumerate(rec.tags)])
        conn.execute("INSERT OR REPLACE INTO meta (key, value) VALUES ('next_id', ?)",
                     (str(next_id),))


def load_records(conn: sqlite3.Connection) -> tuple[list[CardRecord], int]:
    """Return stored records in saved order and the stored id high-water mark."""
    tags: dict[int, list[str]] = {}
    for row in conn.execute("SELECT card_id, tag FROM card_tags ORDER BY card_id, position"):
        tags.setdefault(row["card_id"], []).append(row["tag"])

    records = [
        CardRecord(id=row["id"], question=row["question"], answer=row["answer"],
                   tags=tags.get(row["id"], []), tier=row["tier"],
                   due_counter=row["due_counter"], review_count=row["review_count"],
                   last_reviewed=row["last_reviewed"])
        for row in conn.execute("SELECT * FROM cards ORDER BY position, id")
    ]

    row = conn.execute("SELECT value FROM meta WHERE key = 'next_id'").fetchone()
    next_id = int(row["value"]) if row else 1
    return records, next_id


def load_queue_order(conn: sqlite3.Connection) -> list[int]:
    """Card ids in saved scheduler order; ids saved without a queue position are left out."""
    return [row["id"] for row in conn.execute(
        "SELECT id FROM cards WHERE queue_position IS NOT NULL ORDER BY queue_position")]
