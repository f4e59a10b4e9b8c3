"""Progressive refinement coordinator: the public face of the engine.

Every message goes through two passes:

1. **Fast pass** (inline, under the engine lock)
   cache lookup → signal extraction → ensemble over the current context.
   Confidence is capped at ``fast_confidence_cap`` and the reading is
   published immediately.

2. **Deep pass** (one background task per message)
   The external classifier is queried *outside* the lock. Back under the
   lock the reading is re-scored with the gateway vote plus consistency
   and coherence bonuses, then published as the refined estimate.

Ordering rules:

- the fast publication of message *s* always precedes its refined one;
- a deep pass for *s* is dropped if any newer message has been analysed
  since (supersession, not cancellation);
- a classifier timeout abandons the refinement and the fast estimate
  stands, unless ``refine_on_gateway_timeout`` is set.

Window, cache and pattern table are only mutated while holding
``self._lock``.
"""

from __future__ import annotations

import asyncio
import logging
from collections import deque
from dataclasses import dataclass, replace
from enum import Enum
from typing import Deque, Protocol

from moodsense.context.cache import ResultCache, normalize_key
from moodsense.context.window import ContextWindow
from moodsense.defaults import TRANSITION_CONFIDENCE_JUMP, TRANSITION_MIN_CONFIDENCE
from moodsense.mood.model import (
    MoodLabel,
    SentimentReading,
    UIIntensityState,
    WeightedVote,
    ui_intensity_for,
)
from moodsense.mood.patterns import LearnedPatternTable
from moodsense.mood.statistics import MoodStatistics, summarize_readings
from moodsense.pipeline import events
from moodsense.pipeline.ensemble import EnsembleScorer
from moodsense.pipeline.events import EventBus
from moodsense.pipeline.extractor_signals import SignalExtractor
from moodsense.pipeline.gateway import ExternalClassifierGateway, GatewayStatus
from moodsense.settings import EngineSettings

__all__ = [
    "EnginePhase",
    "MoodEngine",
    "MoodState",
    "ReadingRecorder",
    "significant_change",
]

logger = logging.getLogger(__name__)

SOURCE_CACHE = "cache"


class EnginePhase(str, Enum):
    IDLE = "idle"
    FAST_PUBLISHED = "fast_published"
    DEEP_IN_FLIGHT = "deep_in_flight"
    REFINED_PUBLISHED = "refined_published"


@dataclass(frozen=True, slots=True)
class MoodState:
    """What the presentation layer observes."""

    current_mood: MoodLabel
    confidence: float
    ui_intensity: UIIntensityState
    sequence_number: int = 0
    phase: EnginePhase = EnginePhase.IDLE

    @classmethod
    def idle(cls) -> "MoodState":
        return cls(MoodLabel.NEUTRAL, 0.0, UIIntensityState.neutral())


class ReadingRecorder(Protocol):
    async def record_reading(self, reading: SentimentReading) -> None: ...


def significant_change(
    previous_mood: MoodLabel,
    previous_confidence: float,
    mood: MoodLabel,
    confidence: float,
    *,
    min_confidence: float = TRANSITION_MIN_CONFIDENCE,
    confidence_jump: float = TRANSITION_CONFIDENCE_JUMP,
) -> bool:
    """A transition fires on a confident mood change or a large confidence jump."""
    if mood is not previous_mood and confidence > min_confidence:
        return True
    return confidence - previous_confidence > confidence_jump


@dataclass(slots=True)
class _FastPass:
    reading: SentimentReading
    key: str
    prior_texts: list[str]
    history: ContextWindow
    signal_votes: list[WeightedVote]
    pattern_vote: WeightedVote | None
    pattern_count: int
    cache_hit: bool
    generation: int


class MoodEngine:
    """Progressive mood inference over one conversation.

    Parameters
    ----------
    extractor:
        Lexical/structural vote source. Defaults to :class:`SignalExtractor`.
    gateway:
        Advisory external classifier. Defaults to a gateway without a
        client, which always reports UNAVAILABLE.
    settings:
        Capacities, caps, thresholds and timeouts.
    recorder:
        Optional persistence collaborator; receives each refined reading.
    event_bus:
        Where fast, refined and transition events are published.
    """

    def __init__(
        self,
        extractor: SignalExtractor | None = None,
        gateway: ExternalClassifierGateway | None = None,
        *,
        settings: EngineSettings | None = None,
        ensemble: EnsembleScorer | None = None,
        patterns: LearnedPatternTable | None = None,
        recorder: ReadingRecorder | None = None,
        event_bus: EventBus | None = None,
    ) -> None:
        self.settings = settings or EngineSettings()
        self.extractor = extractor or SignalExtractor()
        self.gateway = gateway or ExternalClassifierGateway(
            None,
            probe_timeout=self.settings.probe_timeout,
            classify_timeout=self.settings.classify_timeout,
        )
        self.ensemble = ensemble or EnsembleScorer()
        self.window = ContextWindow(self.settings.window_capacity)
        self.cache = ResultCache(self.settings.cache_capacity)
        self.patterns = patterns or LearnedPatternTable(self.settings.pattern_capacity)
        self.recorder = recorder
        self.event_bus = event_bus or EventBus()

        self._lock = asyncio.Lock()
        self._sequence = 0
        self._latest_refined = 0
        self._generation = 0
        self._recent_texts: Deque[str] = deque(maxlen=self.settings.prior_text_count)
        self._state = MoodState.idle()
        self._deep_tasks: set[asyncio.Task[None]] = set()

    @property
    def state(self) -> MoodState:
        return self._state

    # ═══════════════════════════════════════════════════════════════
    # Public API
    # ═══════════════════════════════════════════════════════════════

    async def analyze(self, text: str) -> MoodState:
        """Publish a fast estimate for *text* and schedule its refinement.

        Never raises; on an internal failure the current state is returned
        unchanged.
        """
        try:
            async with self._lock:
                fast = self._fast_pass(text)
                task = asyncio.create_task(self._deep_pass(fast))
                self._deep_tasks.add(task)
                task.add_done_callback(self._deep_tasks.discard)
                self._state = replace(self._state, phase=EnginePhase.DEEP_IN_FLIGHT)
        except Exception:
            logger.exception("Fast pass failed")
        return self._state

    async def reset_context(self) -> None:
        """Start a new conversation. Learned patterns are kept."""
        async with self._lock:
            self.window.clear()
            self.cache.clear()
            self._recent_texts.clear()
            self._state = MoodState.idle()
            self._generation += 1
        logger.info("Conversation context reset")

    async def clear_cache(self) -> None:
        async with self._lock:
            self.cache.clear()

    async def wait_for_refinements(self) -> None:
        """Wait until every scheduled deep pass has finished."""
        while self._deep_tasks:
            await asyncio.gather(*list(self._deep_tasks), return_exceptions=True)

    def statistics(self) -> MoodStatistics:
        return summarize_readings(self.window.readings)

    # ═══════════════════════════════════════════════════════════════
    # Fast pass
    # ═══════════════════════════════════════════════════════════════

    def _fast_pass(self, text: str) -> _FastPass:
        self._sequence += 1
        sequence = self._sequence
        source_text = text if isinstance(text, str) else ""
        key = normalize_key(source_text)
        prior_texts = list(self._recent_texts)
        history = self.window.snapshot()

        cached = self.cache.get(key) if key else None
        if cached is not None:
            logger.debug("Cache hit #%d: %s", sequence, cached.value)
            signal_votes = [WeightedVote(cached, 1.0, SOURCE_CACHE)]
        else:
            signal_votes = self.extractor.extract(source_text, prior_texts)

        pattern_vote = self.patterns.vote(key)
        pattern_count = len(self.patterns)
        result = self.ensemble.score(
            signal_votes,
            history,
            pattern_vote=pattern_vote,
            pattern_count=pattern_count,
        )
        if cached is not None:
            mood, confidence = cached, result.confidence_of(cached)
        else:
            mood, confidence = result.mood, result.confidence
        confidence = self._cap(mood, min(confidence, self.settings.fast_confidence_cap))

        reading = SentimentReading.now(mood, confidence, source_text, sequence)
        self.window.append(reading)
        if key:
            self._recent_texts.append(source_text)
            self.cache.put(key, mood)

        self._publish(reading, EnginePhase.FAST_PUBLISHED, events.FAST_PUBLISHED)
        return _FastPass(
            reading=reading,
            key=key,
            prior_texts=prior_texts,
            history=history,
            signal_votes=signal_votes,
            pattern_vote=pattern_vote,
            pattern_count=pattern_count,
            cache_hit=cached is not None,
            generation=self._generation,
        )

    # ═══════════════════════════════════════════════════════════════
    # Deep pass
    # ═══════════════════════════════════════════════════════════════

    async def _deep_pass(self, fast: _FastPass) -> None:
        try:
            refined = await self._refine(fast)
        except Exception:
            logger.exception("Deep pass failed for #%d", fast.reading.sequence_number)
            return
        if refined is None or self.recorder is None:
            return
        try:
            await self.recorder.record_reading(refined)
        except Exception as exc:
            logger.warning("Recording reading #%d failed: %s", refined.sequence_number, exc)

    async def _refine(self, fast: _FastPass) -> SentimentReading | None:
        sequence = fast.reading.sequence_number
        gateway_vote: WeightedVote | None = None

        if not fast.cache_hit and fast.key:
            outcome = await self.gateway.classify(fast.reading.source_text, fast.prior_texts)
            if outcome.status is GatewayStatus.TIMEOUT and not self.settings.refine_on_gateway_timeout:
                async with self._lock:
                    if sequence == self._sequence and fast.generation == self._generation:
                        self._state = replace(self._state, phase=EnginePhase.FAST_PUBLISHED)
                logger.info("Refinement #%d abandoned after classifier timeout", sequence)
                return None
            gateway_vote = outcome.vote

        async with self._lock:
            if fast.generation != self._generation:
                logger.debug("Dropping refinement #%d from a previous conversation", sequence)
                return None
            if sequence < self._sequence or sequence <= self._latest_refined:
                logger.info(
                    "Discarding stale refinement #%d (newest #%d)", sequence, self._sequence,
                )
                return None

            result = self.ensemble.score(
                fast.signal_votes,
                fast.history,
                pattern_vote=fast.pattern_vote,
                pattern_count=fast.pattern_count,
                gateway_vote=gateway_vote,
            )
            if fast.cache_hit:
                mood = fast.reading.mood
                confidence = result.confidence_of(mood)
            else:
                mood, confidence = result.mood, result.confidence

            self.window.replace(sequence, fast.reading.with_result(mood, confidence))
            if self.window.consistency(mood) > self.settings.consistency_bonus_threshold:
                confidence += self.settings.consistency_bonus
            if self.window.coherence():
                confidence += self.settings.coherence_bonus
            confidence = self._cap(mood, min(confidence, 1.0))

            refined = fast.reading.with_result(mood, confidence)
            self.window.replace(sequence, refined)
            if fast.key:
                self.cache.put(fast.key, mood)
                self.patterns.learn(fast.key, mood)
            self._latest_refined = sequence
            self._publish(refined, EnginePhase.REFINED_PUBLISHED, events.REFINED_PUBLISHED)
        return refined

    # ═══════════════════════════════════════════════════════════════
    # Helpers
    # ═══════════════════════════════════════════════════════════════

    def _cap(self, mood: MoodLabel, confidence: float) -> float:
        confidence = max(confidence, 0.0)
        if mood is MoodLabel.NEUTRAL:
            return min(confidence, self.settings.neutral_confidence_cap)
        return confidence

    def _publish(self, reading: SentimentReading, phase: EnginePhase, event_name: str) -> None:
        previous = self._state
        ui = ui_intensity_for(
            reading.mood,
            reading.confidence,
            confident_threshold=self.settings.confident_threshold,
            dramatic_threshold=self.settings.dramatic_threshold,
            subtle_ceiling=self.settings.subtle_ceiling,
        )
        self._state = MoodState(reading.mood, reading.confidence, ui, reading.sequence_number, phase)

        payload = events.reading_payload(reading, ui.describe(), phase.value)
        logger.info(
            "Published %s #%d: %s (%.2f)",
            phase.value, reading.sequence_number, reading.mood.value, reading.confidence,
        )
        self.event_bus.publish(event_name, payload)

        if significant_change(
            previous.current_mood,
            previous.confidence,
            reading.mood,
            reading.confidence,
            min_confidence=self.settings.transition_min_confidence,
            confidence_jump=self.settings.transition_jump,
        ):
            self.event_bus.publish(
                events.TRANSITION,
                events.transition_payload(payload, previous.current_mood.value, previous.confidence),
            )
