"""Bounded conversation context of recent :class:`SentimentReading` values.

The window is a FIFO over the last *capacity* readings of one
conversation. It answers three questions the ensemble and the
coordinator need: how consistent a mood has been, which way valence is
drifting, and whether consecutive readings stay inside one valence
family.

Usage::

    window = ContextWindow(capacity=15)
    window.append(reading)
    window.consistency(MoodLabel.HAPPY)   # 0.0 .. 1.0
    window.trend()                        # > 0 improving
    window.coherence()                    # bool
"""

from __future__ import annotations

from collections import deque
from collections.abc import Iterable, Iterator
from typing import Deque

from moodsense.defaults import COHERENCE_MIN_RATIO, WINDOW_CAPACITY
from moodsense.mood.model import MoodLabel, SentimentReading
from moodsense.utils.math import mean

__all__ = ["ContextWindow"]


class ContextWindow:
    """FIFO of sentiment readings; the oldest reading is evicted first.

    Parameters
    ----------
    capacity:
        Maximum number of readings kept. ``len(window)`` never exceeds it.
    coherence_min_ratio:
        Share of length-3 sub-windows that must stay within one valence
        family for :meth:`coherence` to report ``True``.
    """

    def __init__(
        self,
        capacity: int = WINDOW_CAPACITY,
        coherence_min_ratio: float = COHERENCE_MIN_RATIO,
    ) -> None:
        if capacity < 1:
            raise ValueError(f"capacity must be positive, got {capacity}")
        self.capacity = capacity
        self.coherence_min_ratio = coherence_min_ratio
        self._readings: Deque[SentimentReading] = deque(maxlen=capacity)

    # ------------------------------------------------------------------
    # Mutation
    # ------------------------------------------------------------------

    def append(self, reading: SentimentReading) -> None:
        self._readings.append(reading)

    def replace(self, sequence_number: int, reading: SentimentReading) -> bool:
        """Swap the reading for *sequence_number* in place.

        Returns ``False`` when that reading has already been evicted.
        """
        for index, existing in enumerate(self._readings):
            if existing.sequence_number == sequence_number:
                self._readings[index] = reading
                return True
        return False

    def clear(self) -> None:
        self._readings.clear()

    # ------------------------------------------------------------------
    # Views
    # ------------------------------------------------------------------

    def __len__(self) -> int:
        return len(self._readings)

    def __iter__(self) -> Iterator[SentimentReading]:
        return iter(self._readings)

    @property
    def readings(self) -> list[SentimentReading]:
        return list(self._readings)

    def snapshot(self) -> "ContextWindow":
        """Independent copy, safe to read while the original keeps changing."""
        copy = ContextWindow(self.capacity, self.coherence_min_ratio)
        copy._readings.extend(self._readings)
        return copy

    def latest(self) -> SentimentReading | None:
        return self._readings[-1] if self._readings else None

    def most_recent_of(self, moods: Iterable[MoodLabel]) -> MoodLabel | None:
        """Return whichever of *moods* appears last in the window."""
        wanted = set(moods)
        for reading in reversed(self._readings):
            if reading.mood in wanted:
                return reading.mood
        return None

    # ------------------------------------------------------------------
    # Features
    # ------------------------------------------------------------------

    def consistency(self, mood: MoodLabel) -> float:
        """Fraction of readings equal to *mood*; 0.0 on an empty window."""
        if not self._readings:
            return 0.0
        matches = sum(1 for r in self._readings if r.mood is mood)
        return matches / len(self._readings)

    def dominant_mood(self) -> MoodLabel | None:
        """Most frequent mood; ties go to the one seen most recently."""
        if not self._readings:
            return None
        counts: dict[MoodLabel, int] = {}
        for reading in self._readings:
            counts[reading.mood] = counts.get(reading.mood, 0) + 1
        best = max(counts.values())
        return self.most_recent_of(m for m, c in counts.items() if c == best)

    def trend(self) -> float:
        """Mean valence of the newer half minus mean valence of the older half."""
        n = len(self._readings)
        if n < 2:
            return 0.0
        half = n // 2
        valences = [r.mood.valence for r in self._readings]
        return mean(valences[n - half:]) - mean(valences[:half])

    def coherence(self) -> bool:
        """True when enough length-3 sub-windows stay in one valence family.

        Windows shorter than three readings have nothing to flip-flop and
        are coherent.
        """
        n = len(self._readings)
        if n < 3:
            return True
        families = [r.mood.family for r in self._readings]
        spans = n - 2
        stable = sum(
            1 for i in range(spans)
            if families[i] == families[i + 1] == families[i + 2]
        )
        return stable / spans >= self.coherence_min_ratio
