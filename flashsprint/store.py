"""CardStore: owns every card and hands out ids."""

from flashsprint.errors import NotFound, ValidationError
from flashsprint.models import Card, CardRecord
from flashsprint.tags import normalize_tags


def _clean_text(question: str, answer: str) -> tuple[str, str]:
    q = (question or "").strip()
    a = (answer or "").strip()
    if not q:
        raise ValidationError("Question must not be empty")
    if not a:
        raise ValidationError("Answer must not be empty")
    return q, a


class CardStore:
    """Single source of truth for card content and existence.

    Ids start at 1 and only ever grow: ``next_id`` is a high-water mark that
    survives deletions and is bumped past any restored id, so a deleted id is
    never handed out again.
    """

    def __init__(self):
        self._cards: dict[int, Card] = {}
        self._next_id = 1

    @property
    def next_id(self) -> int:
        return self._next_id

    def add(self, question: str, answer: str, tags=None) -> int:
        q, a = _clean_text(question, answer)
        card_id = self._next_id
        self._cards[card_id] = Card(id=card_id, question=q, answer=a,
                                    tags=normalize_tags(tags))
        self._next_id += 1
        return card_id

    def get(self, card_id: int) -> Card:
        card = self._cards.get(card_id)
        if card is None:
            raise NotFound(card_id)
        return card

    def find(self, card_id: int) -> Card | None:
        return self._cards.get(card_id)

    def edit(self, card_id: int, question: str, answer: str, tags=None) -> Card:
        q, a = _clean_text(question, answer)
        card = self.get(card_id)
        card.question = q
        card.answer = a
        card.tags = normalize_tags(tags)
        return card

    def delete(self, card_id: int):
        if card_id not in self._cards:
            raise NotFound(card_id)
        del self._cards[card_id]

    def restore(self, record: CardRecord) -> Card:
        """Insert a card with its recorded id and scheduling state."""
        q, a = _clean_text(record.question, record.answer)
        if record.id < 1:
            raise ValidationError(f"Invalid card ID {record.id}")
        if record.id in self._cards:
            raise ValidationError(f"Duplicate card ID {record.id}")
        card = Card(id=record.id, question=q, answer=a,
                    tags=normalize_tags(record.tags),
                    tier=max(record.tier, 0),
                    due_counter=max(record.due_counter, 0),
                    review_count=max(record.review_count, 0),
                    last_reviewed=record.last_reviewed)
        self._cards[card.id] = card
        self._next_id = max(self._next_id, card.id + 1)
        return card

    def all(self) -> list[Card]:
        return list(self._cards.values())

    def clear(self):
        self._cards.clear()
        self._next_id = 1

    def bump_next_id(self, next_id: int):
        self._next_id = max(self._next_id, next_id)

    def __contains__(self, card_id: int) -> bool:
        return card_id in self._cards

    def __len__(self) -> int:
        return len(self._cards)
