"""Per-conversation text → mood cache with deterministic eviction."""

from __future__ import annotations

import logging
from collections import OrderedDict

from moodsense.defaults import CACHE_CAPACITY
from moodsense.mood.model import MoodLabel

__all__ = ["ResultCache", "normalize_key"]

logger = logging.getLogger(__name__)


def normalize_key(text: str) -> str:
    """Lower-case and collapse whitespace; this is the whole cache key."""
    return " ".join(text.lower().split())


class ResultCache:
    """Bounded mapping from normalised text to the last published mood.

    Eviction removes the oldest *inserted* key. Overwriting an existing key
    keeps its original position, so a frequently repeated message still
    ages out in insertion order.
    """

    def __init__(self, capacity: int = CACHE_CAPACITY) -> None:
        if capacity < 1:
            raise ValueError(f"capacity must be positive, got {capacity}")
        self.capacity = capacity
        self._entries: OrderedDict[str, MoodLabel] = OrderedDict()

    def get(self, key: str) -> MoodLabel | None:
        return self._entries.get(key)

    def put(self, key: str, mood: MoodLabel) -> None:
        if key in self._entries:
            self._entries[key] = mood
            return
        self._entries[key] = mood
        while len(self._entries) > self.capacity:
            evicted, _ = self._entries.popitem(last=False)
            logger.debug("Cache evicted %r", evicted)

    def clear(self) -> None:
        self._entries.clear()

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, key: object) -> bool:
        return key in self._entries

    def keys(self) -> list[str]:
        return list(self._entries)
