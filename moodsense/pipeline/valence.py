"""Continuous valence scoring: text → score in [-1, 1].

The signal extractor treats this as an external linguistic utility and only
thresholds its output. :class:`LexiconValenceScorer` is the built-in
implementation; anything matching :data:`ValenceScorer` can be injected
instead.
"""

from __future__ import annotations

import math
from collections.abc import Callable

from moodsense.pipeline.lexicon import (
    INTENSIFIER_WORDS,
    KEYWORD_INDEX,
    MOOD_PHRASES,
    NEGATION_WORDS,
    normalize_tokens,
)

__all__ = ["LexiconValenceScorer", "ValenceScorer"]

ValenceScorer = Callable[[str], float]

_NEGATION_FLIP: float = -0.6
_INTENSIFIER_BOOST: float = 1.5
_NEGATION_SCOPE: int = 3


class LexiconValenceScorer:
    """Sum of per-word valences squashed into [-1, 1].

    Word valence is the mood label's valence halved (so [-1, 1] per word);
    a preceding intensifier scales it by 1.5 and a negation within three
    tokens flips and dampens it. The raw sum ``x`` is normalised with
    ``x / sqrt(x² + 1)``.
    """

    def __init__(self, extra_valences: dict[str, float] | None = None) -> None:
        self._word_valence: dict[str, float] = {
            word: mood.valence / 2.0 for word, mood in KEYWORD_INDEX.items()
        }
        # longest phrase first so "fed up with you" wins over "fed up"
        self._phrase_valence: list[tuple[tuple[str, ...], float]] = sorted(
            (
                (tuple(phrase.split()), mood.valence / 2.0)
                for mood, phrases in MOOD_PHRASES.items()
                for phrase in phrases
            ),
            key=lambda item: len(item[0]),
            reverse=True,
        )
        if extra_valences:
            self._word_valence.update(extra_valences)

    def __call__(self, text: str) -> float:
        tokens = normalize_tokens(text)
        if not tokens:
            return 0.0

        total = 0.0
        i = 0
        while i < len(tokens):
            phrase_hit = self._match_phrase(tokens, i)
            if phrase_hit is not None:
                length, value = phrase_hit
                total += value
                i += length
                continue

            value = self._word_valence.get(tokens[i])
            if value:
                window = tokens[max(0, i - _NEGATION_SCOPE):i]
                if window and window[-1] in INTENSIFIER_WORDS:
                    value *= _INTENSIFIER_BOOST
                if any(w in NEGATION_WORDS for w in window):
                    value *= _NEGATION_FLIP
                total += value
            i += 1

        return total / math.sqrt(total * total + 1.0)

    def _match_phrase(self, tokens: list[str], start: int) -> tuple[int, float] | None:
        for phrase, value in self._phrase_valence:
            end = start + len(phrase)
            if tuple(tokens[start:end]) == phrase:
                return len(phrase), value
        return None
