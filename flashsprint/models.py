"""Shared data classes used across the store, index, schedulers and persistence."""

from dataclasses import dataclass, field


@dataclass
class Card:
    id: int
    question: str
    answer: str
    tags: list[str] = field(default_factory=list)
    tier: int = 0
    due_counter: int = 0
    review_count: int = 0
    last_reviewed: int | None = None

    @property
    def is_due(self) -> bool:
        return self.due_counter == 0

    def to_record(self) -> "CardRecord":
        return CardRecord(
            id=self.id, question=self.question, answer=self.answer,
            tags=list(self.tags), tier=self.tier, due_counter=self.due_counter,
            review_count=self.review_count, last_reviewed=self.last_reviewed)


@dataclass
class CardRecord:
    """Flat export shape of a card, as written to the db or a file."""
    id: int
    question: str
    answer: str
    tags: list[str] = field(default_factory=list)
    tier: int = 0
    due_counter: int = 0
    review_count: int = 0
    last_reviewed: int | None = None

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "question": self.question,
            "answer": self.answer,
            "tags": list(self.tags),
            "tier": self.tier,
            "due_counter": self.due_counter,
            "review_count": self.review_count,
            "last_reviewed": self.last_reviewed,
        }

    @classmethod
    def from_dict(cls, d: dict) -> "CardRecord":
        return cls(
            id=int(d["id"]),
            question=d["question"],
            answer=d["answer"],
            tags=list(d.get("tags") or []),
            tier=int(d.get("tier", 0)),
            due_counter=int(d.get("due_counter", 0)),
            review_count=int(d.get("review_count", 0)),
            last_reviewed=d.get("last_reviewed"),
        )
