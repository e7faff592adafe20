"""Tests for ReviewSession logic."""

import pytest

from flashsprint.errors import InconsistentState, NotFound, ValidationError
from flashsprint.models import CardRecord


def _add_sample(session):
    session.add_card("What is FIFO?", "First In First Out", ["queue", "ds"])
    session.add_card("What is LIFO?", "Last In First Out", ["stack", "ds"])
    session.add_card("What is a deque?", "Double-ended queue", ["queue"])


def test_fifo_scenario(ladder):
    card = ladder.add_card("What is FIFO?", "First In First Out", ["queue", "ds"])
    shown = ladder.next_card()
    assert shown.id == card.id
    assert shown.tier == 0 and shown.due_counter == 0
    ladder.submit(card.id, True)
    assert card.tier == 1
    assert [c.id for c in ladder.search_by_tag("queue")] == [card.id]
    assert [c.id for c in ladder.search_by_tag("QUEUE")] == [card.id]
    ladder.verify()


def test_delete_prunes_buckets(ladder):
    a = ladder.add_card("Q1", "A1", ["solo", "shared"])
    b = ladder.add_card("Q2", "A2", ["shared"])
    ladder.delete_card(a.id)
    assert ladder.search_by_tag("solo") == []
    assert "solo" not in ladder.index
    assert [c.id for c in ladder.search_by_tag("shared")] == [b.id]
    assert a.id not in ladder.scheduler
    ladder.verify()


def test_delete_missing(ladder):
    with pytest.raises(NotFound):
        ladder.delete_card(99)


def test_delete_current_card(ladder):
    _add_sample(ladder)
    card = ladder.next_card()
    ladder.delete_card(card.id)
    assert ladder.current_card is None
    assert card.id not in ladder.scheduler.held
    assert ladder.next_card().id == 2
    ladder.verify()


def test_add_validation_changes_nothing(ladder):
    with pytest.raises(ValidationError):
        ladder.add_card("  ", "A", ["x"])
    assert len(ladder.store) == 0
    assert len(ladder.index) == 0
    assert len(ladder.scheduler) == 0


def test_add_rolls_back_on_scheduler_failure(ladder, monkeypatch):
    def boom(card_id):
        raise RuntimeError("scheduler down")

    monkeypatch.setattr(ladder.scheduler, "enqueue", boom)
    with pytest.raises(RuntimeError):
        ladder.add_card("Q", "A", ["x", "y"])
    assert len(ladder.store) == 0
    assert ladder.index.lookup("x") == []
    assert len(ladder.index) == 0
    monkeypatch.undo()
    card = ladder.add_card("Q", "A")
    assert card.id == 2


def test_delete_rolls_back_on_store_failure(ladder, monkeypatch):
    card = ladder.add_card("Q", "A", ["x"])

    def boom(card_id):
        raise RuntimeError("disk on fire")

    monkeypatch.setattr(ladder.store, "delete", boom)
    with pytest.raises(RuntimeError):
        ladder.delete_card(card.id)
    monkeypatch.undo()
    assert ladder.index.lookup("x") == [card.id]
    assert card.id in ladder.scheduler
    ladder.verify()


def test_ids_strictly_increase(ladder):
    ids = []
    for i in range(5):
        card = ladder.add_card(f"Q{i}", "A")
        ids.append(card.id)
        if i % 2:
            ladder.delete_card(card.id)
    assert ids == sorted(set(ids))
    assert ladder.add_card("Q", "A").id == 6


def test_edit_reconciles_index(ladder):
    card = ladder.add_card("Q", "A", ["keep", "drop"])
    other = ladder.add_card("Q2", "A2", ["keep"])
    ladder.edit_card(card.id, "Q!", "A!", ["Keep", "new"])
    assert ladder.search_by_tag("drop") == []
    assert [c.id for c in ladder.search_by_tag("new")] == [card.id]
    # untouched tag keeps its bucket position
    assert ladder.index.lookup("keep") == [card.id, other.id]
    assert ladder.store.get(card.id).question == "Q!"
    ladder.verify()



def test_tags_given_as_one_string(ladder):
    card = ladder.add_card("Q", "A", "queue")
    assert card.tags == ["queue"]
    ladder.edit_card(card.id, "Q", "A", "Stack, ds")
    assert ladder.store.get(card.id).tags == ["stack", "ds"]
    assert ladder.search_by_tag("q") == []
    ladder.verify()

def test_edit_validation_and_missing(ladder):
    card = ladder.add_card("Q", "A", ["t"])
    with pytest.raises(ValidationError):
        ladder.edit_card(card.id, "Q", "", ["u"])
    assert ladder.index.lookup("t") == [card.id]
    assert ladder.index.lookup("u") == []
    with pytest.raises(NotFound):
        ladder.edit_card(42, "Q", "A")


def test_next_card_keeps_current_until_submitted(ladder):
    _add_sample(ladder)
    first = ladder.next_card()
    assert ladder.next_card() is first
    ladder.submit(first.id, False)
    assert ladder.next_card().id == 2
    assert ladder.reviewed == 1
    assert ladder.correct == 0


def test_skip_current(ladder):
    _add_sample(ladder)
    card = ladder.next_card()
    ladder.skip_current()
    assert ladder.current_card is None
    assert ladder.scheduler.queue_order() == [2, 3, 1]
    with pytest.raises(ValueError):
        ladder.skip_current()


def test_ladder_empty_means_done(ladder):
    assert ladder.next_card() is None
    assert ladder.remaining_count() == 0


def test_rotation_retry_signal(rotation):
    card = rotation.add_card("Q", "A")
    rotation.next_card()
    rotation.submit(card.id, True)
    # interval 1 -> one full pass finds nothing due
    assert rotation.next_card() is None
    assert rotation.remaining_count() == 1
    assert rotation.next_card().id == card.id


def test_ladder_promotion_property(ladder):
    card = ladder.add_card("Q", "A")
    for k in range(1, 7):
        ladder.submit(ladder.next_card().id, True)
        assert card.tier == min(k, 4)
    ladder.submit(ladder.next_card().id, False)
    assert card.tier == 0


def test_box_stats(ladder):
    _add_sample(ladder)
    ladder.submit(ladder.next_card().id, True)
    assert ladder.box_stats() == {"Box 1": 2, "Box 2": 1, "Box 3": 0, "Box 4": 0, "Box 5": 0}


def test_due_in(ladder):
    card = ladder.add_card("Q", "A")
    for _ in range(3):
        ladder.submit(ladder.next_card().id, True)
    assert ladder.due_in(card) == 4


def test_export_import_round_trip(ladder):
    _add_sample(ladder)
    ladder.submit(ladder.next_card().id, True)
    ladder.delete_card(3)
    exported = ladder.export_records()

    ladder.add_card("extra", "card")
    ladder.import_records(exported)
    again = ladder.export_records()
    key = lambda r: (r.id, r.question, r.answer, tuple(r.tags), r.tier, r.due_counter)
    assert sorted(map(key, again)) == sorted(map(key, exported))
    assert ladder.store.next_id == 3
    ladder.verify()


def test_import_rejects_bad_records_without_changes(ladder):
    _add_sample(ladder)
    with pytest.raises(ValidationError):
        ladder.import_records([CardRecord(id=1, question="Q", answer="A"),
                               CardRecord(id=2, question="", answer="A")])
    assert len(ladder.store) == 3
    ladder.verify()


def test_import_resets_presented_card(ladder):
    _add_sample(ladder)
    ladder.next_card()
    ladder.import_records([CardRecord(id=5, question="Q", answer="A", tags=["t"], tier=2)])
    assert ladder.current_card is None
    assert ladder.scheduler.held == {}
    assert ladder.box_stats()["Box 3"] == 1
    assert [c.id for c in ladder.search_by_tag("t")] == [5]


def test_search_purges_stale_ids(ladder, capsys):
    card = ladder.add_card("Q", "A", ["t"])
    ladder.index.register("t", 77)
    assert [c.id for c in ladder.search_by_tag("t")] == [card.id]
    assert ladder.index.lookup("t") == [card.id]
    assert "missing card 77" in capsys.readouterr().err


def test_verify_detects_index_drift(ladder):
    ladder.add_card("Q", "A", ["t"])
    ladder.index.unregister("t", 1)
    with pytest.raises(InconsistentState):
        ladder.verify()


def test_verify_detects_double_scheduling(ladder):
    ladder.add_card("Q", "A")
    ladder.scheduler.tiers[2].append(1)
    with pytest.raises(InconsistentState):
        ladder.verify()


def test_verify_detects_unscheduled_card(ladder):
    ladder.add_card("Q", "A")
    ladder.scheduler.remove(1)
    with pytest.raises(InconsistentState):
        ladder.verify()


def test_invariants_hold_through_mixed_operations(rotation):
    for i in range(6):
        rotation.add_card(f"Q{i}", f"A{i}", [f"t{i % 3}", "all"])
    rotation.verify()
    for step in range(12):
        card = rotation.next_card()
        if card is None:
            continue
        rotation.submit(card.id, step % 3 != 0)
        rotation.verify()
    rotation.delete_card(2)
    rotation.edit_card(4, "Q4", "A4", ["fresh"])
    rotation.verify()
    assert 2 not in rotation.index.lookup("all")
    assert rotation.index.lookup("fresh") == [4]
