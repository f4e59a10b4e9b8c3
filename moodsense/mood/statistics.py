"""Summary statistics over a sequence of sentiment readings.

Used by the CLI ``/stats`` command and by
:meth:`~moodsense.history.storage.MoodHistoryStorage.get_statistics`.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass, field
from enum import Enum

from moodsense.defaults import STATS_TREND_SLOPE
from moodsense.mood.model import MoodLabel, SentimentReading, ValenceFamily
from moodsense.utils.math import linear_slope, mean, population_stddev

__all__ = ["MoodStatistics", "MoodStreak", "MoodTrend", "mood_streaks", "summarize_readings"]


class MoodTrend(str, Enum):
    IMPROVING = "improving"
    DECLINING = "declining"
    STABLE = "stable"


@dataclass(frozen=True, slots=True)
class MoodStreak:
    """A run of consecutive readings in one valence family."""

    family: ValenceFamily
    length: int
    start_sequence: int
    end_sequence: int

    def to_dict(self) -> dict:
        return {
            "family": self.family.value,
            "length": self.length,
            "start_sequence": self.start_sequence,
            "end_sequence": self.end_sequence,
        }


@dataclass(slots=True)
class MoodStatistics:
    total: int = 0
    distribution: dict[MoodLabel, int] = field(default_factory=dict)
    average_confidence: float = 0.0
    most_frequent: MoodLabel | None = None
    variability: float = 0.0
    positive_ratio: float = 0.0
    trend: MoodTrend = MoodTrend.STABLE
    current_streak: MoodStreak | None = None
    longest_streak: MoodStreak | None = None

    def to_dict(self) -> dict:
        return {
            "total": self.total,
            "distribution": {m.value: n for m, n in self.distribution.items()},
            "average_confidence": round(self.average_confidence, 3),
            "most_frequent": self.most_frequent.value if self.most_frequent else None,
            "variability": round(self.variability, 3),
            "positive_ratio": round(self.positive_ratio, 3),
            "trend": self.trend.value,
            "current_streak": self.current_streak.to_dict() if self.current_streak else None,
            "longest_streak": self.longest_streak.to_dict() if self.longest_streak else None,
        }


def mood_streaks(readings: Sequence[SentimentReading]) -> list[MoodStreak]:
    """Split *readings* (oldest first) into maximal same-family runs."""
    streaks: list[MoodStreak] = []
    for reading in readings:
        family = reading.mood.family
        if streaks and streaks[-1].family is family:
            last = streaks[-1]
            streaks[-1] = MoodStreak(family, last.length + 1, last.start_sequence, reading.sequence_number)
        else:
            streaks.append(MoodStreak(family, 1, reading.sequence_number, reading.sequence_number))
    return streaks


def summarize_readings(
    readings: Sequence[SentimentReading],
    trend_slope: float = STATS_TREND_SLOPE,
) -> MoodStatistics:
    """Aggregate *readings* (oldest first).

    Trend is the least-squares slope of valence over reading order:
    above ``trend_slope`` improving, below ``-trend_slope`` declining.
    Fewer than three readings are always stable.

    Streaks are runs of consecutive readings in one valence family. The
    current streak is the run that ends with the latest reading; the
    longest is the earliest run of maximal length.
    """
    if not readings:
        return MoodStatistics()

    distribution: dict[MoodLabel, int] = {}
    for reading in readings:
        distribution[reading.mood] = distribution.get(reading.mood, 0) + 1

    # ties go to the mood seen first
    most_frequent = max(distribution, key=distribution.__getitem__)
    valences = [r.mood.valence for r in readings]
    positives = sum(1 for r in readings if r.mood.family is ValenceFamily.POSITIVE)

    trend = MoodTrend.STABLE
    if len(readings) >= 3:
        slope = linear_slope(valences)
        if slope > trend_slope:
            trend = MoodTrend.IMPROVING
        elif slope < -trend_slope:
            trend = MoodTrend.DECLINING

    streaks = mood_streaks(readings)

    return MoodStatistics(
        total=len(readings),
        distribution=distribution,
        average_confidence=mean([r.confidence for r in readings]),
        most_frequent=most_frequent,
        variability=population_stddev(valences),
        positive_ratio=positives / len(readings),
        trend=trend,
        current_streak=streaks[-1],
        longest_streak=max(streaks, key=lambda s: s.length),
    )
