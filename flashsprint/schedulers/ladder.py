"""Leitner box ladder: lowest non-empty box is always the most due."""

import sys
from collections import deque

from flashsprint.models import Card
from flashsprint.schedulers.base import Lookup, Scheduler

DEFAULT_MAX_TIER = 4


class LadderScheduler(Scheduler):
    """Bounded ladder of FIFO boxes ``0..max_tier``.

    A correct answer moves a card one box up (capped at ``max_tier``), a
    wrong one sends it back to box 0. Inside a box the card that has waited
    longest comes first. ``due_counter`` is not used to gate presentation
    and is kept at 0.
    """

    scheduler_id = "ladder"

    def __init__(self, lookup: Lookup, max_tier: int = DEFAULT_MAX_TIER):
        super().__init__(lookup)
        if max_tier < 0:
            raise ValueError(f"max_tier must be >= 0, got {max_tier}")
        self.max_tier = max_tier
        self.tiers: list[deque[int]] = [deque() for _ in range(max_tier + 1)]

    def enqueue(self, card_id: int):
        self._check_new(card_id)
        self.tiers[0].append(card_id)

    def place(self, card: Card):
        self._check_new(card.id)
        if card.tier > self.max_tier:
            print(f"Warning: card {card.id} tier {card.tier} is above {self.max_tier}; capped",
                  file=sys.stderr)
            card.tier = self.max_tier
        card.due_counter = 0
        self.tiers[card.tier].append(card.id)

    def pick_next(self) -> int | None:
        for queue in self.tiers:
            while queue:
                card_id = queue.popleft()
                if self._lookup(card_id) is None:
                    self._warn_stale(card_id)
                    continue
                self.held[card_id] = None
                return card_id
        return None

    def _apply_outcome(self, card: Card, correct: bool):
        card.tier = min(card.tier + 1, self.max_tier) if correct else 0
        card.due_counter = 0

    def _append(self, card: Card):
        self.tiers[min(card.tier, self.max_tier)].append(card.id)

    def _discard_queued(self, card_id: int) -> bool:
        for queue in self.tiers:
            if card_id in queue:
                queue.remove(card_id)
                return True
        return False

    def _clear_queues(self):
        for queue in self.tiers:
            queue.clear()

    def queue_order(self) -> list[int]:
        return [card_id for queue in self.tiers for card_id in queue]

    def tier_counts(self) -> dict[str, int]:
        counts = [len(q) for q in self.tiers]
        for card_id in self.held:
            card = self._lookup(card_id)
            if card is not None:
                counts[min(card.tier, self.max_tier)] += 1
        return {f"Box {i + 1}": n for i, n in enumerate(counts)}

    def reminder_delay(self, card: Card) -> int:
        """Days until a reminder for this card would fire."""
        return self.skip_distance(card.tier)
