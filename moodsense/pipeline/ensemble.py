"""Ensemble scoring: combine vote sources into one (mood, confidence).

Sources and their weights adapt to how deep the conversation is:

- **context**         ``min(len(window) / 15, 0.3)``
- **personalization** ``min(learned_patterns / 50, 0.2)``
- **signal**          the remainder, shared 60/40 with the
- **gateway**         when a gateway vote is present.

Each source's votes are scaled to at most unit mass before the source
weight is applied, so a chatty extractor cannot drown the other sources.
A source whose votes total less than one keeps its smaller mass.

Score per mood = Σ vote share × source weight. The winning mood is the
argmax and confidence is its share of the total score. The one exception
is a signal the extractor forced to Neutral (plain question, bare greeting,
empty text): that result stays Neutral whatever the other sources say.
"""

from __future__ import annotations

import logging
import math
from collections.abc import Sequence
from dataclasses import dataclass, field

from moodsense.context.window import ContextWindow
from moodsense.defaults import (
    CONTEXT_WEIGHT_CAP,
    CONTEXT_WEIGHT_DIVISOR,
    GATEWAY_SHARE,
    PATTERN_WEIGHT_CAP,
    PATTERN_WEIGHT_DIVISOR,
    TREND_DELTA,
    TREND_MIN_READINGS,
)
from moodsense.mood.model import MoodLabel, WeightedVote
from moodsense.pipeline.extractor_signals import SOURCE_EMPTY, SOURCE_GREETING, SOURCE_QUESTION

__all__ = ["EnsembleResult", "EnsembleScorer", "SourceWeights", "is_forced_neutral"]

logger = logging.getLogger(__name__)

SOURCE_CONSISTENCY = "context.consistency"
SOURCE_TREND = "context.trend"

# Signal sources the extractor emits only when it has forced a message to
# Neutral (plain questions, bare greetings, empty text).
FORCED_NEUTRAL_SOURCES: frozenset[str] = frozenset({SOURCE_QUESTION, SOURCE_GREETING, SOURCE_EMPTY})

# Where an improving (enhance) or worsening (dampen) trend nudges the
# dominant mood. Moods not listed stay where they are.
_ENHANCE: dict[MoodLabel, MoodLabel] = {
    MoodLabel.NEUTRAL: MoodLabel.PEACEFUL,
    MoodLabel.PEACEFUL: MoodLabel.HAPPY,
    MoodLabel.HAPPY: MoodLabel.EXCITED,
    MoodLabel.CONFUSED: MoodLabel.NEUTRAL,
    MoodLabel.ANXIOUS: MoodLabel.CONFUSED,
}
_DAMPEN: dict[MoodLabel, MoodLabel] = {
    MoodLabel.EXCITED: MoodLabel.HAPPY,
    MoodLabel.HAPPY: MoodLabel.PEACEFUL,
    MoodLabel.PEACEFUL: MoodLabel.NEUTRAL,
    MoodLabel.NEUTRAL: MoodLabel.CONFUSED,
}


@dataclass(frozen=True, slots=True)
class SourceWeights:
    signal: float
    context: float
    personalization: float
    gateway: float = 0.0


@dataclass(slots=True)
class EnsembleResult:
    mood: MoodLabel
    confidence: float
    scores: dict[MoodLabel, float]
    weights: SourceWeights
    gated: bool = False
    tie_broken: bool = False
    votes: list[WeightedVote] = field(default_factory=list)

    def confidence_of(self, mood: MoodLabel) -> float:
        total = sum(self.scores.values())
        if total <= 0.0:
            return 0.0
        return self.scores.get(mood, 0.0) / total


def is_forced_neutral(signal_votes: Sequence[WeightedVote]) -> bool:
    """True when every signal vote is a Neutral floor from a forcing source.

    Any other signal, including a lone Neutral polarity vote for a message
    the lexicon does not know, leaves the decision to the argmax.
    """
    return bool(signal_votes) and all(
        v.mood is MoodLabel.NEUTRAL and v.source in FORCED_NEUTRAL_SOURCES for v in signal_votes
    )


class EnsembleScorer:
    """Weighted-vote ensemble over the signal, context, pattern and gateway sources."""

    def __init__(
        self,
        context_divisor: float = CONTEXT_WEIGHT_DIVISOR,
        context_cap: float = CONTEXT_WEIGHT_CAP,
        pattern_divisor: float = PATTERN_WEIGHT_DIVISOR,
        pattern_cap: float = PATTERN_WEIGHT_CAP,
        gateway_share: float = GATEWAY_SHARE,
        trend_delta: float = TREND_DELTA,
        trend_min_readings: int = TREND_MIN_READINGS,
    ) -> None:
        self.context_divisor = context_divisor
        self.context_cap = context_cap
        self.pattern_divisor = pattern_divisor
        self.pattern_cap = pattern_cap
        self.gateway_share = gateway_share
        self.trend_delta = trend_delta
        self.trend_min_readings = trend_min_readings

    def source_weights(
        self,
        history_length: int,
        pattern_count: int,
        has_gateway: bool,
    ) -> SourceWeights:
        context = min(history_length / self.context_divisor, self.context_cap)
        personalization = min(pattern_count / self.pattern_divisor, self.pattern_cap)
        remainder = max(1.0 - context - personalization, 0.0)
        if has_gateway:
            gateway = remainder * self.gateway_share
            return SourceWeights(remainder - gateway, context, personalization, gateway)
        return SourceWeights(remainder, context, personalization)

    def context_votes(self, window: ContextWindow) -> list[WeightedVote]:
        """Dominant-mood vote plus an optional trend nudge."""
        dominant = window.dominant_mood()
        if dominant is None:
            return []
        votes = [WeightedVote(dominant, window.consistency(dominant), SOURCE_CONSISTENCY)]
        if len(window) >= self.trend_min_readings:
            trend = window.trend()
            if abs(trend) > self.trend_delta:
                table = _ENHANCE if trend > 0 else _DAMPEN
                shifted = table.get(dominant, dominant)
                votes.append(WeightedVote(shifted, min(abs(trend) / 2.0, 0.5), SOURCE_TREND))
        return votes

    def score(
        self,
        signal_votes: Sequence[WeightedVote],
        window: ContextWindow,
        *,
        pattern_vote: WeightedVote | None = None,
        pattern_count: int = 0,
        gateway_vote: WeightedVote | None = None,
    ) -> EnsembleResult:
        weights = self.source_weights(len(window), pattern_count, gateway_vote is not None)
        context_votes = self.context_votes(window)

        scores: dict[MoodLabel, float] = {mood: 0.0 for mood in MoodLabel}
        sources: list[tuple[Sequence[WeightedVote], float]] = [
            (signal_votes, weights.signal),
            (context_votes, weights.context),
        ]
        if pattern_vote is not None:
            sources.append(([pattern_vote], weights.personalization))
        if gateway_vote is not None:
            sources.append(([gateway_vote], weights.gateway))

        all_votes: list[WeightedVote] = []
        for votes, source_weight in sources:
            mass = sum(v.weight for v in votes)
            if mass <= 0.0 or source_weight <= 0.0:
                continue
            scale = source_weight / max(mass, 1.0)
            for vote in votes:
                scores[vote.mood] += vote.weight * scale
            all_votes.extend(votes)

        total = sum(scores.values())
        if total <= 0.0:
            return EnsembleResult(MoodLabel.NEUTRAL, 0.0, scores, weights, gated=True, votes=all_votes)

        if is_forced_neutral(signal_votes):
            confidence = scores[MoodLabel.NEUTRAL] / total
            logger.debug("Signal forced neutral by the extractor")
            return EnsembleResult(
                MoodLabel.NEUTRAL, confidence, scores, weights, gated=True, votes=all_votes,
            )

        top = max(scores.values())
        tied = [m for m, s in scores.items() if math.isclose(s, top, rel_tol=1e-9, abs_tol=1e-12)]
        if len(tied) > 1:
            mood = window.most_recent_of(tied) or MoodLabel.NEUTRAL
            logger.debug("Tie between %s resolved to %s", [m.value for m in tied], mood.value)
            return EnsembleResult(
                mood, scores[mood] / total, scores, weights, tie_broken=True, votes=all_votes,
            )

        mood = tied[0]
        return EnsembleResult(mood, top / total, scores, weights, votes=all_votes)
