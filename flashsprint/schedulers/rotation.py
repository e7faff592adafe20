"""Rotation queue: one global FIFO with per-card countdowns."""

from collections import deque

from flashsprint.models import Card
from flashsprint.schedulers.base import Scheduler


class RotationScheduler(Scheduler):
    """Unbounded interval-doubling scheduler.

    ``tier`` holds the card's interval in rotations. Each ``pick_next`` call
    walks the queue at most once: cards still counting down are decremented
    and sent to the back, and the first card at zero is returned. When the
    walk finds nothing due it returns None; every counter has then moved one
    rotation closer, so the caller may simply ask again.
    """

    scheduler_id = "rotation"

    def __init__(self, lookup):
        super().__init__(lookup)
        self.queue: deque[int] = deque()

    def enqueue(self, card_id: int):
        self._check_new(card_id)
        self.queue.append(card_id)

    def place(self, card: Card):
        self._check_new(card.id)
        self.queue.append(card.id)

    def pick_next(self) -> int | None:
        for _ in range(len(self.queue)):
            card_id = self.queue.popleft()
            card = self._lookup(card_id)
            if card is None:
                self._warn_stale(card_id)
                continue
            if card.due_counter > 0:
                card.due_counter -= 1
                self.queue.append(card_id)
                continue
            self.held[card_id] = None
            return card_id
        return None

    def _apply_outcome(self, card: Card, correct: bool):
        if correct:
            card.tier = max(card.tier * 2, 1)
            card.due_counter = card.tier
        else:
            card.tier = 1
            card.due_counter = 1

    def _append(self, card: Card):
        self.queue.append(card.id)

    def _discard_queued(self, card_id: int) -> bool:
        if card_id in self.queue:
            self.queue.remove(card_id)
            return True
        return False

    def _clear_queues(self):
        self.queue.clear()

    def queue_order(self) -> list[int]:
        return list(self.queue)

    def tier_counts(self) -> dict[str, int]:
        counts: dict[int, int] = {}
        for card_id in [*self.queue, *self.held]:
            card = self._lookup(card_id)
            if card is not None:
                counts[card.tier] = counts.get(card.tier, 0) + 1
        return {f"Interval {tier}": counts[tier] for tier in sorted(counts)}

    def reminder_delay(self, card: Card) -> int:
        """Rotations left before this card comes up again."""
        return card.due_counter
