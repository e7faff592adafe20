"""Scheduler base: shared held-card bookkeeping and outcome recording."""

import sys
import time
from typing import Callable

from flashsprint.errors import NotFound
from flashsprint.models import Card

Lookup = Callable[[int], Card | None]


class Scheduler:
    """Review-order structure over card ids.

    Subclasses own the queues and implement ``pick_next`` and the tier
    update in ``_apply_outcome``. Cards are fetched through ``lookup`` on
    every access; an id the store no longer knows is dropped with a warning
    instead of being presented.
    """

    scheduler_id = ""

    def __init__(self, lookup: Lookup):
        self._lookup = lookup
        self.held: dict[int, None] = {}

    # -- subclass hooks --

    def enqueue(self, card_id: int):
        raise NotImplementedError

    def place(self, card: Card):
        raise NotImplementedError

    def pick_next(self) -> int | None:
        raise NotImplementedError

    def tier_counts(self) -> dict[str, int]:
        raise NotImplementedError

    def queue_order(self) -> list[int]:
        raise NotImplementedError

    def reminder_delay(self, card: Card) -> int:
        raise NotImplementedError

    def _append(self, card: Card):
        raise NotImplementedError

    def _discard_queued(self, card_id: int) -> bool:
        raise NotImplementedError

    def _apply_outcome(self, card: Card, correct: bool):
        raise NotImplementedError

    def _clear_queues(self):
        raise NotImplementedError

    # -- shared --

    @staticmethod
    def skip_distance(tier: int) -> int:
        return 0 if tier <= 0 else 2 ** (tier - 1)

    def record_outcome(self, card_id: int, correct: bool) -> Card:
        if card_id not in self.held:
            raise ValueError(f"Card {card_id} is not being presented")
        card = self._lookup(card_id)
        del self.held[card_id]
        if card is None:
            self._warn_stale(card_id)
            raise NotFound(card_id)
        self._apply_outcome(card, correct)
        card.review_count += 1
        card.last_reviewed = int(time.time())
        self._append(card)
        return card

    def release(self, card_id: int):
        """Put a held card back at the tail of its queue, state unchanged."""
        if card_id not in self.held:
            raise ValueError(f"Card {card_id} is not being presented")
        del self.held[card_id]
        card = self._lookup(card_id)
        if card is None:
            self._warn_stale(card_id)
            return
        self._append(card)

    def remove(self, card_id: int) -> bool:
        if card_id in self.held:
            del self.held[card_id]
            return True
        return self._discard_queued(card_id)

    def queued_count(self) -> int:
        return len(self.queue_order())

    def clear(self):
        self.held.clear()
        self._clear_queues()

    def _check_new(self, card_id: int):
        if card_id in self:
            raise ValueError(f"Card {card_id} is already scheduled")

    def _warn_stale(self, card_id: int):
        print(f"Warning: card {card_id} is scheduled but missing from the store; dropped",
              file=sys.stderr)

    def __contains__(self, card_id: int) -> bool:
        return card_id in self.held or card_id in self.queue_order()

    def __len__(self) -> int:
        return self.queued_count() + len(self.held)
