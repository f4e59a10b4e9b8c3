"""Runtime settings for one :class:`~moodsense.pipeline.coordinator.MoodEngine`.

Every field defaults to the matching constant in :mod:`moodsense.defaults`.
``EngineSettings.from_config()`` applies the environment overrides read by
the root ``config`` module. Gateway timeout overrides are clamped to the
default probe and classify limits.
"""

from __future__ import annotations

from dataclasses import dataclass

from moodsense import defaults


@dataclass(frozen=True, slots=True)
class EngineSettings:
    window_capacity: int = defaults.WINDOW_CAPACITY
    cache_capacity: int = defaults.CACHE_CAPACITY
    prior_text_count: int = defaults.PRIOR_TEXT_COUNT
    pattern_capacity: int = defaults.PATTERN_CAPACITY

    fast_confidence_cap: float = defaults.FAST_CONFIDENCE_CAP
    neutral_confidence_cap: float = defaults.NEUTRAL_CONFIDENCE_CAP
    consistency_bonus_threshold: float = defaults.CONSISTENCY_BONUS_THRESHOLD
    consistency_bonus: float = defaults.CONSISTENCY_BONUS
    coherence_bonus: float = defaults.COHERENCE_BONUS

    confident_threshold: float = defaults.UI_CONFIDENT_THRESHOLD
    dramatic_threshold: float = defaults.UI_DRAMATIC_THRESHOLD
    subtle_ceiling: float = defaults.UI_SUBTLE_CEILING

    transition_min_confidence: float = defaults.TRANSITION_MIN_CONFIDENCE
    transition_jump: float = defaults.TRANSITION_CONFIDENCE_JUMP

    probe_timeout: float = defaults.GATEWAY_PROBE_TIMEOUT
    classify_timeout: float = defaults.GATEWAY_CLASSIFY_TIMEOUT
    refine_on_gateway_timeout: bool = defaults.REFINE_ON_GATEWAY_TIMEOUT

    @classmethod
    def from_config(cls) -> "EngineSettings":
        import config

        return cls(
            window_capacity=config.MOOD_WINDOW_CAPACITY,
            cache_capacity=config.MOOD_CACHE_CAPACITY,
            confident_threshold=config.MOOD_CONFIDENT_THRESHOLD,
            dramatic_threshold=config.MOOD_DRAMATIC_THRESHOLD,
            subtle_ceiling=config.MOOD_CONFIDENT_THRESHOLD,
            transition_min_confidence=config.MOOD_TRANSITION_MIN_CONFIDENCE,
            transition_jump=config.MOOD_TRANSITION_JUMP,
            # the defaults are hard limits; overrides may only shorten them
            probe_timeout=min(config.GATEWAY_PROBE_TIMEOUT, defaults.GATEWAY_PROBE_TIMEOUT),
            classify_timeout=min(config.GATEWAY_CLASSIFY_TIMEOUT, defaults.GATEWAY_CLASSIFY_TIMEOUT),
        )
