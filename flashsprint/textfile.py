"""Import/export of card records as block text or JSON files.

Block text format, one block per card::

    ID=3
    Q=What is FIFO?
    A=First In First Out
    T=queue,ds
    I=2
    D=0
    R=5
    ---

``I`` is the tier, ``D`` the due counter and ``R`` the review count. A last
block without the closing ``---`` is still read; blocks missing a question,
an answer or a numeric ID are skipped.
"""

import json
import pathlib
import sys

from flashsprint.models import CardRecord
from flashsprint.tags import parse_tags


def dump_records(records: list[CardRecord]) -> str:
    lines = []
    for rec in records:
        lines.append(f"ID={rec.id}")
        lines.append(f"Q={_one_line(rec.question)}")
        lines.append(f"A={_one_line(rec.answer)}")
        lines.append(f"T={','.join(rec.tags)}")
        lines.append(f"I={rec.tier}")
        lines.append(f"D={rec.due_counter}")
        lines.append(f"R={rec.review_count}")
        lines.append("---")
    return "\n".join(lines) + ("\n" if lines else "")


def parse_records(text: str) -> list[CardRecord]:
    records = []
    block: dict[str, str] = {}
    for line in text.splitlines():
        line = line.rstrip("\r\n")
        if line == "---":
            _finish_block(block, records)
            block = {}
        elif "=" in line:
            k, v = line.split("=", 1)
            block[k] = v
    _finish_block(block, records)
    return records


def _finish_block(block: dict[str, str], records: list[CardRecord]):
    if not block.get("Q") or not block.get("A"):
        return
    try:
        card_id = int(block.get("ID", ""))
    except ValueError:
        print(f"Warning: skipping card without a valid ID: {block.get('Q')!r}",
              file=sys.stderr)
        return
    records.append(CardRecord(
        id=card_id,
        question=block["Q"],
        answer=block["A"],
        tags=parse_tags(block.get("T", "")),
        tier=max(_int(block.get("I")), 0),
        due_counter=max(_int(block.get("D")), 0),
        review_count=max(_int(block.get("R")), 0),
    ))


def _int(value: str | None) -> int:
    try:
        return int(value) if value is not None else 0
    except ValueError:
        return 0


def _one_line(text: str) -> str:
    return " ".join(text.splitlines())


def write_file(path: pathlib.Path | str, records: list[CardRecord]):
    path = pathlib.Path(path)
    if path.suffix == ".json":
        path.write_text(json.dumps([r.to_dict() for r in records], indent=2) + "\n")
    else:
        path.write_text(dump_records(records))


def read_file(path: pathlib.Path | str) -> list[CardRecord]:
    path = pathlib.Path(path)
    text = path.read_text()
    if path.suffix == ".json":
        return [CardRecord.from_dict(d) for d in json.loads(text)]
    return parse_records(text)
