"""Sample deck for a fresh install."""

SAMPLE_CARDS = [
    ("What is FIFO in queues?", "First In First Out", ["queue", "ds"]),
    ("How to handle collisions in hash map?",
     "Use chaining (linked lists) or open addressing", ["hashmap", "ds"]),
    ("What is enqueue operation?", "Insert element at the tail of queue", ["queue", "srs"]),
]


def seed(session, force: bool = False) -> int:
    """Add the sample cards unless the store already has cards. Returns count added."""
    if len(session.store) and not force:
        return 0
    for question, answer, tags in SAMPLE_CARDS:
        session.add_card(question, answer, tags)
    return len(SAMPLE_CARDS)
