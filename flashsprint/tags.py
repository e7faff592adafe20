"""Tag normalization and the tag -> card id lookup index."""

from typing import Iterable


def normalize_tag(tag: str) -> str:
    return tag.strip().lower()


def normalize_tags(tags: Iterable[str] | str | None) -> list[str]:
    """Normalize, drop empties and de-duplicate, keeping first-seen order.

    A comma never survives inside a tag: "a,b" becomes the two tags a and b.
    A bare string is read as one comma-separated line.
    """
    if isinstance(tags, str):
        tags = [tags]
    result: list[str] = []
    for item in tags or []:
        for tag in item.split(","):
            t = normalize_tag(tag)
            if t and t not in result:
                result.append(t)
    return result


def parse_tags(text: str) -> list[str]:
    """Parse a comma-separated tag line as typed by a user."""
    return normalize_tags(text)


class TagIndex:
    """Maps a normalized tag to the ids of the cards carrying it.

    Buckets keep insertion order and hold each id at most once. A bucket
    is deleted as soon as its last id is unregistered, so ``lookup`` on a
    tag nobody carries any more returns an empty list.
    """

    def __init__(self):
        self._buckets: dict[str, dict[int, None]] = {}

    def register(self, tag: str, card_id: int):
        t = normalize_tag(tag)
        if not t:
            return
        self._buckets.setdefault(t, {})[card_id] = None

    def unregister(self, tag: str, card_id: int):
        t = normalize_tag(tag)
        bucket = self._buckets.get(t)
        if bucket is None:
            return
        bucket.pop(card_id, None)
        if not bucket:
            del self._buckets[t]

    def lookup(self, tag: str) -> list[int]:
        return list(self._buckets.get(normalize_tag(tag), ()))

    def purge(self, card_id: int) -> list[str]:
        """Drop card_id from every bucket. Returns the tags it was found under."""
        found = [t for t, bucket in self._buckets.items() if card_id in bucket]
        for t in found:
            self.unregister(t, card_id)
        return found

    def tags(self) -> list[str]:
        return list(self._buckets)

    def clear(self):
        self._buckets.clear()

    def __contains__(self, tag: str) -> bool:
        return normalize_tag(tag) in self._buckets

    def __len__(self) -> int:
        return len(self._buckets)
