"""Learned per-user text patterns.

Every refined reading teaches the table which mood a normalised message
resolved to. Later messages that repeat or closely resemble a learned one
get an extra personalization vote. The table survives conversation resets;
only process restarts (or an explicit :meth:`clear`) forget it.
"""

from __future__ import annotations

import logging
from collections import OrderedDict

from moodsense.defaults import PATTERN_CAPACITY, PATTERN_SIMILARITY_MIN
from moodsense.mood.model import MoodLabel, WeightedVote
from moodsense.utils.math import jaccard_similarity

__all__ = ["LearnedPatternTable", "SOURCE_PATTERNS"]

logger = logging.getLogger(__name__)

SOURCE_PATTERNS = "patterns"


class LearnedPatternTable:
    def __init__(
        self,
        capacity: int = PATTERN_CAPACITY,
        similarity_min: float = PATTERN_SIMILARITY_MIN,
    ) -> None:
        self.capacity = capacity
        self.similarity_min = similarity_min
        self._patterns: OrderedDict[str, MoodLabel] = OrderedDict()

    def __len__(self) -> int:
        return len(self._patterns)

    def learn(self, key: str, mood: MoodLabel) -> None:
        """Record *mood* for *key*, refreshing its position if already known."""
        if not key:
            return
        self._patterns[key] = mood
        self._patterns.move_to_end(key)
        while len(self._patterns) > self.capacity:
            self._patterns.popitem(last=False)
        if len(self._patterns) % 50 == 0:
            logger.info("Pattern table reached %d entries", len(self._patterns))

    def vote(self, key: str) -> WeightedVote | None:
        """Exact match votes with weight 1.0, a close match with its similarity."""
        if not key:
            return None
        exact = self._patterns.get(key)
        if exact is not None:
            return WeightedVote(exact, 1.0, SOURCE_PATTERNS)

        words = key.split()
        best_mood: MoodLabel | None = None
        best_score = self.similarity_min
        for pattern, mood in self._patterns.items():
            score = jaccard_similarity(words, pattern.split())
            if score > best_score:
                best_mood, best_score = mood, score
        if best_mood is None:
            return None
        return WeightedVote(best_mood, best_score, SOURCE_PATTERNS)

    def clear(self) -> None:
        self._patterns.clear()
