"""ReviewSession: card review and card management over one App."""

import sys
from typing import Iterable

from flashsprint.errors import InconsistentState
from flashsprint.models import Card, CardRecord
from flashsprint.tags import normalize_tags


class ReviewSession:
    """Façade over the app's CardStore, TagIndex and Scheduler.

    Review loop::

        card = session.next_card()
        if card is None:
            if session.remaining_count() == 0:
                ...  # nothing left to review
            else:
                ...  # rotation pass found nothing due yet; ask again
        session.submit(card.id, correct=True)

    A card handed out by ``next_card`` stays out of the scheduler queues
    until it is submitted, skipped or deleted.
    """

    def __init__(self, app):
        if app.scheduler is None:
            app.load_scheduler()
        self.app = app
        self.current_card: Card | None = None
        self.reviewed = 0
        self.correct = 0

    @property
    def store(self):
        return self.app.store

    @property
    def index(self):
        return self.app.index

    @property
    def scheduler(self):
        return self.app.scheduler

    # -- review --

    def next_card(self) -> Card | None:
        with self.app.lock:
            if self.current_card is not None:
                return self.current_card
            card_id = self.scheduler.pick_next()
            if card_id is None:
                return None
            self.current_card = self.store.get(card_id)
            return self.current_card

    def submit(self, card_id: int, correct: bool) -> Card:
        with self.app.lock:
            card = self.scheduler.record_outcome(card_id, correct)
            if self.current_card is not None and self.current_card.id == card_id:
                self.current_card = None
            self.reviewed += 1
            if correct:
                self.correct += 1
            return card

    def skip_current(self):
        """Put the presented card back unchanged."""
        with self.app.lock:
            if self.current_card is None:
                raise ValueError("No current card")
            self.scheduler.release(self.current_card.id)
            self.current_card = None

    def remaining_count(self) -> int:
        return self.scheduler.queued_count()

    def due_in(self, card: Card) -> int:
        return self.scheduler.reminder_delay(card)

    # -- card management --

    def add_card(self, question: str, answer: str,
                 tags: Iterable[str] | str | None = None) -> Card:
        with self.app.lock:
            card_id = self.store.add(question, answer, tags)
            card = self.store.get(card_id)
            registered = []
            try:
                for tag in card.tags:
                    self.index.register(tag, card_id)
                    registered.append(tag)
                self.scheduler.enqueue(card_id)
            except Exception:
                for tag in registered:
                    self.index.unregister(tag, card_id)
                self.store.delete(card_id)
                raise
            return card

    def edit_card(self, card_id: int, question: str, answer: str,
                  tags: Iterable[str] | str | None = None) -> Card:
        with self.app.lock:
            old_tags = list(self.store.get(card_id).tags)
            card = self.store.edit(card_id, question, answer, tags)
            for tag in old_tags:
                if tag not in card.tags:
                    self.index.unregister(tag, card_id)
            for tag in card.tags:
                if tag not in old_tags:
                    self.index.register(tag, card_id)
            return card

    def delete_card(self, card_id: int):
        with self.app.lock:
            card = self.store.get(card_id)
            was_held = card_id in self.scheduler.held
            self.scheduler.remove(card_id)
            unregistered = []
            try:
                for tag in card.tags:
                    self.index.unregister(tag, card_id)
                    unregistered.append(tag)
                self.store.delete(card_id)
            except Exception:
                for tag in unregistered:
                    self.index.register(tag, card_id)
                if was_held:
                    self.scheduler.held[card_id] = None
                else:
                    self.scheduler.place(card)
                raise
            if self.current_card is not None and self.current_card.id == card_id:
                self.current_card = None

    def search_by_tag(self, tag: str) -> list[Card]:
        with self.app.lock:
            cards = []
            for card_id in self.index.lookup(tag):
                card = self.store.find(card_id)
                if card is None:
                    print(f"Warning: tag index lists missing card {card_id}; dropped",
                          file=sys.stderr)
                    self.index.purge(card_id)
                    continue
                cards.append(card)
            return cards

    def list_all(self) -> list[Card]:
        return self.store.all()

    def box_stats(self) -> dict[str, int]:
        with self.app.lock:
            return self.scheduler.tier_counts()

    # -- persistence boundary --

    def export_records(self) -> list[CardRecord]:
        with self.app.lock:
            return [card.to_record() for card in self.store.all()]

    def import_records(self, records: list[CardRecord], next_id: int = 1):
        with self.app.lock:
            self.app.restore(records, next_id)
            self.current_card = None

    def verify(self):
        """Check that store, index and scheduler agree. Raises InconsistentState."""
        with self.app.lock:
            cards = {card.id: card for card in self.store.all()}

            for card in cards.values():
                if card.tags != normalize_tags(card.tags):
                    raise InconsistentState(f"Card {card.id} has unnormalized tags {card.tags}")
                for tag in card.tags:
                    if card.id not in self.index.lookup(tag):
                        raise InconsistentState(f"Card {card.id} missing from tag '{tag}'")
            for tag in self.index.tags():
                ids = self.index.lookup(tag)
                if not ids:
                    raise InconsistentState(f"Empty bucket for tag '{tag}'")
                for card_id in ids:
                    if card_id not in cards or tag not in cards[card_id].tags:
                        raise InconsistentState(f"Tag '{tag}' lists card {card_id} wrongly")

            scheduled = self.scheduler.queue_order() + list(self.scheduler.held)
            for card_id in scheduled:
                if card_id not in cards:
                    raise InconsistentState(f"Scheduler holds missing card {card_id}")
            for card_id in cards:
                n = scheduled.count(card_id)
                if n != 1:
                    raise InconsistentState(f"Card {card_id} is scheduled {n} times")
