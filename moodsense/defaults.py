"""Centralised algorithm defaults for MoodSense.

All tuneable numeric thresholds used by the engine live here so that the
system can be tuned from a single location. ``config.py`` reads environment
overrides for the externally tunable subset and ``EngineSettings`` falls back
to these values.

Each module still uses local names; they simply import from here.
"""

from __future__ import annotations

# ── ContextWindow (moodsense/context/window.py) ──────────────────
WINDOW_CAPACITY: int = 15
COHERENCE_MIN_RATIO: float = 0.6
PRIOR_TEXT_COUNT: int = 3

# ── ResultCache (moodsense/context/cache.py) ─────────────────────
CACHE_CAPACITY: int = 50

# ── LearnedPatternTable (moodsense/mood/patterns.py) ─────────────
PATTERN_CAPACITY: int = 500
PATTERN_SIMILARITY_MIN: float = 0.7

# ── EnsembleScorer (moodsense/pipeline/ensemble.py) ──────────────
CONTEXT_WEIGHT_DIVISOR: float = 15.0
CONTEXT_WEIGHT_CAP: float = 0.3
PATTERN_WEIGHT_DIVISOR: float = 50.0
PATTERN_WEIGHT_CAP: float = 0.2
GATEWAY_SHARE: float = 0.4
TREND_DELTA: float = 0.2
TREND_MIN_READINGS: int = 3

# ── Gateway (moodsense/pipeline/gateway.py) ──────────────────────
GATEWAY_PROBE_TIMEOUT: float = 0.5     # seconds
GATEWAY_CLASSIFY_TIMEOUT: float = 15.0  # seconds
REFINE_ON_GATEWAY_TIMEOUT: bool = False

# ── Coordinator (moodsense/pipeline/coordinator.py) ──────────────
FAST_CONFIDENCE_CAP: float = 0.7
NEUTRAL_CONFIDENCE_CAP: float = 0.25
CONSISTENCY_BONUS_THRESHOLD: float = 0.7
CONSISTENCY_BONUS: float = 0.2
COHERENCE_BONUS: float = 0.15

# ── Transition signalling ─────────────────────────────────────────
TRANSITION_MIN_CONFIDENCE: float = 0.3
TRANSITION_CONFIDENCE_JUMP: float = 0.2

# ── UI intensity tiers ────────────────────────────────────────────
UI_CONFIDENT_THRESHOLD: float = 0.1
UI_DRAMATIC_THRESHOLD: float = 0.3
# Upper bound of the Subtle band. Equal to UI_CONFIDENT_THRESHOLD, so the
# band is empty and readings go straight from Neutral to Confident.
UI_SUBTLE_CEILING: float = 0.1

# ── Statistics (moodsense/mood/statistics.py) ────────────────────
STATS_TREND_SLOPE: float = 0.1
