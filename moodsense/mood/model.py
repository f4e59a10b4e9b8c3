"""Core value types shared by every MoodSense component."""

from __future__ import annotations

import re
from dataclasses import dataclass, replace
from datetime import datetime, timezone
from enum import Enum

from moodsense.defaults import (
    UI_CONFIDENT_THRESHOLD,
    UI_DRAMATIC_THRESHOLD,
    UI_SUBTLE_CEILING,
)

__all__ = [
    "IntensityTier",
    "MoodLabel",
    "SentimentReading",
    "UIIntensityState",
    "ValenceFamily",
    "WeightedVote",
    "ui_intensity_for",
]

_NON_ALPHA_RE = re.compile(r"[^a-z]")


class ValenceFamily(str, Enum):
    POSITIVE = "positive"
    NEGATIVE = "negative"
    NEUTRAL = "neutral"


class MoodLabel(str, Enum):
    """Closed set of emotional categories the engine can publish."""

    HAPPY = "happy"
    SAD = "sad"
    EXCITED = "excited"
    ANGRY = "angry"
    NEUTRAL = "neutral"
    ANXIOUS = "anxious"
    LOVING = "loving"
    FRUSTRATED = "frustrated"
    PEACEFUL = "peaceful"
    CONFUSED = "confused"

    @property
    def valence(self) -> float:
        return _VALENCE[self]

    @property
    def family(self) -> ValenceFamily:
        return _FAMILY[self]

    @property
    def display_name(self) -> str:
        return self.value.capitalize()

    @classmethod
    def parse(cls, token: str | None) -> "MoodLabel | None":
        """Return the label spelled by *token* or ``None``.

        Matching is case-insensitive and ignores every non-alphabetic
        character, so ``" Happy.\\n"`` parses but ``"very happy"`` does not.
        """
        if not token:
            return None
        cleaned = _NON_ALPHA_RE.sub("", token.lower())
        try:
            return cls(cleaned)
        except ValueError:
            return None


# Valence on a [-2, 2] scale, used for trend and variability math.
_VALENCE: dict[MoodLabel, float] = {
    MoodLabel.EXCITED: 2.0,
    MoodLabel.LOVING: 1.7,
    MoodLabel.HAPPY: 1.5,
    MoodLabel.PEACEFUL: 1.0,
    MoodLabel.NEUTRAL: 0.0,
    MoodLabel.CONFUSED: -0.3,
    MoodLabel.ANXIOUS: -1.0,
    MoodLabel.FRUSTRATED: -1.2,
    MoodLabel.SAD: -1.5,
    MoodLabel.ANGRY: -2.0,
}

_FAMILY: dict[MoodLabel, ValenceFamily] = {
    MoodLabel.HAPPY: ValenceFamily.POSITIVE,
    MoodLabel.EXCITED: ValenceFamily.POSITIVE,
    MoodLabel.LOVING: ValenceFamily.POSITIVE,
    MoodLabel.PEACEFUL: ValenceFamily.POSITIVE,
    MoodLabel.SAD: ValenceFamily.NEGATIVE,
    MoodLabel.ANGRY: ValenceFamily.NEGATIVE,
    MoodLabel.FRUSTRATED: ValenceFamily.NEGATIVE,
    MoodLabel.ANXIOUS: ValenceFamily.NEGATIVE,
    MoodLabel.NEUTRAL: ValenceFamily.NEUTRAL,
    MoodLabel.CONFUSED: ValenceFamily.NEUTRAL,
}


# ═══════════════════════════════════════════════════════════════════
# Readings and votes
# ═══════════════════════════════════════════════════════════════════

@dataclass(frozen=True, slots=True)
class SentimentReading:
    """A published mood estimate for one message. Immutable."""

    mood: MoodLabel
    confidence: float
    timestamp: datetime
    source_text: str
    sequence_number: int

    def __post_init__(self) -> None:
        if not 0.0 <= self.confidence <= 1.0:
            raise ValueError(f"confidence must be within [0, 1], got {self.confidence}")

    @classmethod
    def now(
        cls,
        mood: MoodLabel,
        confidence: float,
        source_text: str,
        sequence_number: int,
    ) -> "SentimentReading":
        return cls(
            mood=mood,
            confidence=confidence,
            timestamp=datetime.now(timezone.utc),
            source_text=source_text,
            sequence_number=sequence_number,
        )

    def with_result(self, mood: MoodLabel, confidence: float) -> "SentimentReading":
        return replace(self, mood=mood, confidence=confidence)


@dataclass(frozen=True, slots=True)
class WeightedVote:
    """One (mood, weight, source) contribution to the ensemble."""

    mood: MoodLabel
    weight: float
    source: str

    def __post_init__(self) -> None:
        if self.weight < 0:
            raise ValueError(f"vote weight must be non-negative, got {self.weight}")

    def scaled(self, factor: float, source: str | None = None) -> "WeightedVote":
        return WeightedVote(self.mood, max(self.weight * factor, 0.0), source or self.source)


# ═══════════════════════════════════════════════════════════════════
# UI intensity
# ═══════════════════════════════════════════════════════════════════

class IntensityTier(str, Enum):
    NEUTRAL = "neutral"
    SUBTLE = "subtle"
    CONFIDENT = "confident"
    DRAMATIC = "dramatic"


@dataclass(frozen=True, slots=True)
class UIIntensityState:
    tier: IntensityTier
    mood: MoodLabel | None = None

    @classmethod
    def neutral(cls) -> "UIIntensityState":
        return cls(IntensityTier.NEUTRAL)

    @classmethod
    def subtle(cls, mood: MoodLabel) -> "UIIntensityState":
        return cls(IntensityTier.SUBTLE, mood)

    @classmethod
    def confident(cls, mood: MoodLabel) -> "UIIntensityState":
        return cls(IntensityTier.CONFIDENT, mood)

    @classmethod
    def dramatic(cls, mood: MoodLabel) -> "UIIntensityState":
        return cls(IntensityTier.DRAMATIC, mood)

    def describe(self) -> str:
        if self.mood is None:
            return "Neutral"
        return f"{self.tier.value.capitalize()} {self.mood.display_name}"


def ui_intensity_for(
    mood: MoodLabel,
    confidence: float,
    *,
    confident_threshold: float = UI_CONFIDENT_THRESHOLD,
    dramatic_threshold: float = UI_DRAMATIC_THRESHOLD,
    subtle_ceiling: float = UI_SUBTLE_CEILING,
) -> UIIntensityState:
    """Map a confidence value to a presentation tier.

    Bands, lowest first: ``[0, confident_threshold)`` Neutral,
    ``[confident_threshold, subtle_ceiling)`` Subtle,
    ``[max(confident_threshold, subtle_ceiling), dramatic_threshold)``
    Confident, and Dramatic above that. With the default thresholds the
    Subtle band is empty; it only appears when ``subtle_ceiling`` is raised.
    """
    if confidence < confident_threshold:
        return UIIntensityState.neutral()
    if confidence < subtle_ceiling:
        return UIIntensityState.subtle(mood)
    if confidence < dramatic_threshold:
        return UIIntensityState.confident(mood)
    return UIIntensityState.dramatic(mood)
