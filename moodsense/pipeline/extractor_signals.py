"""Signal extraction: message text → weighted mood votes.

Architecture (3 passes, all deterministic):

Pass 1: **Lexical**
    Normalised tokens are matched against the per-mood phrase and keyword
    tables in :mod:`moodsense.pipeline.lexicon`. Phrases are matched first
    (greedy, longest first) and consume their tokens; single keywords and
    emoji are matched on what is left. A preceding intensifier or
    diminisher scales the hit.

Pass 2: **Structural** (per sentence)
    - negation markers in the three tokens before a hit remap its mood
      through ``NEGATION_MAP``;
    - questions and pure greetings without emotional hits contribute a
      Neutral floor vote; if the whole message is made of them it is
      forced Neutral;
    - exclamation density and capitalisation add a high-arousal vote
      (excited or angry depending on polarity).

Pass 3: **Base polarity**
    A continuous valence score from an injected :data:`ValenceScorer` is
    thresholded into one base-mood vote. Other passes adjust around it,
    they never replace it.

Up to three prior texts are consulted for short replies ("yes", "me too",
"not really") that only make sense against the previous message.

The extractor holds no mutable state; ``extract`` can be called from any
task concurrently.
"""

from __future__ import annotations

import logging
import math
import re
from collections.abc import Sequence
from dataclasses import dataclass, field

from moodsense.mood.model import MoodLabel, ValenceFamily, WeightedVote
from moodsense.pipeline.lexicon import (
    AFFIRMATIVE_REPLIES,
    DIMINISHER_PHRASES,
    DIMINISHER_WORDS,
    EMOJI_MOODS,
    GREETING_WORDS,
    INTENSIFIER_WORDS,
    INTERROGATIVE_WORDS,
    KEYWORD_INDEX,
    NEGATION_MAP,
    NEGATION_WORDS,
    NEGATIVE_REPLIES,
    NEGATIVE_REPLY_LEADS,
    PHRASE_INDEX,
    normalize_tokens,
)
from moodsense.pipeline.valence import LexiconValenceScorer, ValenceScorer

logger = logging.getLogger(__name__)


# ── Tuneable constants ────────────────────────────────────────────
KEYWORD_WEIGHT: float = 1.0
PHRASE_WEIGHT: float = 2.0
INTENSIFIER_MULTIPLIER: float = 1.5
DIMINISHER_MULTIPLIER: float = 0.5
NEGATION_SCOPE: int = 3
NEUTRAL_FLOOR_WEIGHT: float = 0.1
EXCLAMATION_STEP: float = 0.25
EXCLAMATION_CAP: float = 1.0
CAPS_MIN_LETTERS: int = 4
CAPS_RATIO_MIN: float = 0.5
AROUSAL_UNSIGNED_FACTOR: float = 0.5
NEUTRAL_POLARITY_WEIGHT: float = 0.2
CARRYOVER_FACTOR: float = 0.5
REPLY_MAX_TOKENS: int = 3
MAX_PRIOR_TEXTS: int = 3

# ── Vote sources ──────────────────────────────────────────────────
SOURCE_KEYWORD = "lexical.keyword"
SOURCE_PHRASE = "lexical.phrase"
SOURCE_EMOJI = "lexical.emoji"
SOURCE_NEGATION = "structure.negation"
SOURCE_QUESTION = "structure.question"
SOURCE_GREETING = "structure.greeting"
SOURCE_AROUSAL = "structure.arousal"
SOURCE_POLARITY = "polarity"
SOURCE_CARRYOVER = "context.carryover"
SOURCE_EMPTY = "extractor.empty"

_SENTENCE_RE = re.compile(r"[^.!?\n]+[.!?]*|[.!?]+")


@dataclass(slots=True)
class _Hit:
    mood: MoodLabel
    weight: float
    source: str
    index: int


@dataclass(slots=True)
class SentenceSignals:
    """Lexical and structural findings for one sentence."""

    text: str
    tokens: list[str]
    hits: list[_Hit] = field(default_factory=list)
    is_question: bool = False
    is_greeting: bool = False

    @property
    def emotional(self) -> bool:
        return any(hit.mood is not MoodLabel.NEUTRAL for hit in self.hits)

    @property
    def neutral_only(self) -> bool:
        """A question or greeting that carries no emotional hit."""
        return not self.emotional and (self.is_question or self.is_greeting)


def polarity_mood(score: float) -> MoodLabel:
    """Threshold a valence score in [-1, 1] into a base mood."""
    if score >= 0.6:
        return MoodLabel.HAPPY
    if score >= 0.2:
        return MoodLabel.PEACEFUL
    if score > -0.2:
        return MoodLabel.NEUTRAL
    if score > -0.6:
        return MoodLabel.ANXIOUS
    return MoodLabel.SAD


def _sign(mood: MoodLabel) -> int:
    if mood.family is ValenceFamily.POSITIVE:
        return 1
    if mood.family is ValenceFamily.NEGATIVE:
        return -1
    return 0


class SignalExtractor:
    """Turn one message into a list of :class:`WeightedVote`.

    Parameters
    ----------
    valence_scorer:
        Callable returning a valence in [-1, 1] for a text. Defaults to
        :class:`LexiconValenceScorer`.
    """

    def __init__(self, valence_scorer: ValenceScorer | None = None) -> None:
        self._valence_scorer: ValenceScorer = valence_scorer or LexiconValenceScorer()

    # ═══════════════════════════════════════════════════════════════
    # Public API
    # ═══════════════════════════════════════════════════════════════

    def extract(self, text: str, prior_texts: Sequence[str] = ()) -> list[WeightedVote]:
        if not isinstance(text, str) or not text.strip():
            return [WeightedVote(MoodLabel.NEUTRAL, 0.0, SOURCE_EMPTY)]

        try:
            return self._extract(text, prior_texts)
        except Exception:
            logger.exception("Signal extraction failed for %r", text[:60])
            return [WeightedVote(MoodLabel.NEUTRAL, 0.0, SOURCE_EMPTY)]

    def analyze_sentences(self, text: str) -> list[SentenceSignals]:
        """Run the lexical and structural passes sentence by sentence."""
        sentences: list[SentenceSignals] = []
        for match in _SENTENCE_RE.finditer(text):
            chunk = match.group(0).strip()
            if not chunk:
                continue
            tokens = normalize_tokens(chunk)
            signals = SentenceSignals(text=chunk, tokens=tokens)
            signals.hits = self._lexical_hits(chunk, tokens)
            signals.is_question = "?" in chunk or (
                bool(tokens) and tokens[0] in INTERROGATIVE_WORDS
            )
            signals.is_greeting = bool(tokens) and all(t in GREETING_WORDS for t in tokens)
            sentences.append(signals)
        return sentences

    # ═══════════════════════════════════════════════════════════════
    # Internals
    # ═══════════════════════════════════════════════════════════════

    def _extract(self, text: str, prior_texts: Sequence[str]) -> list[WeightedVote]:
        sentences = self.analyze_sentences(text)
        votes: list[WeightedVote] = []

        for sentence in sentences:
            votes.extend(WeightedVote(h.mood, h.weight, h.source) for h in sentence.hits)
            if sentence.neutral_only:
                source = SOURCE_QUESTION if sentence.is_question else SOURCE_GREETING
                votes.append(WeightedVote(MoodLabel.NEUTRAL, NEUTRAL_FLOOR_WEIGHT, source))

        if sentences and all(s.neutral_only for s in sentences):
            logger.debug("Message forced neutral: %r", text[:60])
            return votes

        if not any(s.emotional for s in sentences):
            tokens = [t for s in sentences for t in s.tokens]
            votes.extend(self._carryover(tokens, prior_texts))

        score = self._base_polarity(text)
        base = polarity_mood(score)
        weight = NEUTRAL_POLARITY_WEIGHT if base is MoodLabel.NEUTRAL else abs(score)
        votes.append(WeightedVote(base, weight, SOURCE_POLARITY))

        arousal = self._arousal_vote(text, votes, score)
        if arousal is not None:
            votes.append(arousal)

        logger.debug("Extracted %d votes for %r", len(votes), text[:60])
        return votes

    def _lexical_hits(self, chunk: str, tokens: list[str]) -> list[_Hit]:
        hits: list[_Hit] = []
        consumed = [False] * len(tokens)

        i = 0
        while i < len(tokens):
            phrase = self._match_phrase(tokens, i)
            if phrase is None:
                i += 1
                continue
            length, mood = phrase
            weight = PHRASE_WEIGHT * self._modifier(tokens, i)
            hits.append(self._negate(_Hit(mood, weight, SOURCE_PHRASE, i), tokens, consumed))
            for j in range(i, i + length):
                consumed[j] = True
            i += length

        for i, token in enumerate(tokens):
            if consumed[i]:
                continue
            mood = KEYWORD_INDEX.get(token)
            if mood is None:
                continue
            weight = KEYWORD_WEIGHT * self._modifier(tokens, i)
            hits.append(self._negate(_Hit(mood, weight, SOURCE_KEYWORD, i), tokens, consumed))

        for char in chunk:
            mood = EMOJI_MOODS.get(char)
            if mood is not None:
                hits.append(_Hit(mood, KEYWORD_WEIGHT, SOURCE_EMOJI, len(tokens)))

        hits.sort(key=lambda hit: hit.index)
        return hits

    @staticmethod
    def _match_phrase(tokens: list[str], start: int) -> tuple[int, MoodLabel] | None:
        for phrase, mood in PHRASE_INDEX.get(tokens[start], ()):
            if tuple(tokens[start:start + len(phrase)]) == phrase:
                return len(phrase), mood
        return None

    @staticmethod
    def _modifier(tokens: list[str], index: int) -> float:
        before = tokens[max(0, index - 2):index]
        if not before:
            return 1.0
        if before[-1] in INTENSIFIER_WORDS:
            return INTENSIFIER_MULTIPLIER
        if before[-1] in DIMINISHER_WORDS or tuple(before) in DIMINISHER_PHRASES:
            return DIMINISHER_MULTIPLIER
        return 1.0

    @staticmethod
    def _negate(hit: _Hit, tokens: list[str], consumed: list[bool]) -> _Hit:
        start = max(0, hit.index - NEGATION_SCOPE)
        negated = any(
            tokens[j] in NEGATION_WORDS and not consumed[j]
            for j in range(start, hit.index)
        )
        if not negated:
            return hit
        mood, factor = NEGATION_MAP[hit.mood]
        return _Hit(mood, hit.weight * factor, SOURCE_NEGATION, hit.index)

    def _base_polarity(self, text: str) -> float:
        try:
            score = float(self._valence_scorer(text))
        except Exception as exc:
            logger.warning("Valence scorer failed, using 0.0: %s", exc)
            return 0.0
        if math.isnan(score):
            return 0.0
        return max(-1.0, min(1.0, score))

    @staticmethod
    def _arousal_vote(
        text: str,
        votes: list[WeightedVote],
        base_score: float,
    ) -> WeightedVote | None:
        weight = min(text.count("!") * EXCLAMATION_STEP, EXCLAMATION_CAP)
        letters = [c for c in text if c.isalpha()]
        if len(letters) >= CAPS_MIN_LETTERS:
            caps_ratio = sum(1 for c in letters if c.isupper()) / len(letters)
            if caps_ratio >= CAPS_RATIO_MIN:
                weight += caps_ratio
        if weight <= 0.0:
            return None

        polarity = sum(
            _sign(v.mood) * v.weight for v in votes if v.source != SOURCE_POLARITY
        )
        if polarity == 0.0:
            polarity = base_score
        if polarity < 0:
            return WeightedVote(MoodLabel.ANGRY, weight, SOURCE_AROUSAL)
        if polarity > 0:
            return WeightedVote(MoodLabel.EXCITED, weight, SOURCE_AROUSAL)
        return WeightedVote(MoodLabel.EXCITED, weight * AROUSAL_UNSIGNED_FACTOR, SOURCE_AROUSAL)

    def _carryover(self, tokens: list[str], prior_texts: Sequence[str]) -> list[WeightedVote]:
        if not tokens or len(tokens) > REPLY_MAX_TOKENS:
            return []
        if all(t in AFFIRMATIVE_REPLIES for t in tokens):
            negate = False
        elif tokens[0] in NEGATIVE_REPLY_LEADS and all(t in NEGATIVE_REPLIES for t in tokens):
            negate = True
        else:
            return []

        for prior in reversed(list(prior_texts)[-MAX_PRIOR_TEXTS:]):
            if not isinstance(prior, str):
                continue
            found = self._dominant_mood(prior)
            if found is None:
                continue
            mood, weight = found
            if negate:
                mood, factor = NEGATION_MAP[mood]
                weight *= factor
            return [WeightedVote(mood, weight * CARRYOVER_FACTOR, SOURCE_CARRYOVER)]
        return []

    def _dominant_mood(self, text: str) -> tuple[MoodLabel, float] | None:
        totals: dict[MoodLabel, float] = {}
        for sentence in self.analyze_sentences(text):
            for hit in sentence.hits:
                if hit.mood is not MoodLabel.NEUTRAL:
                    totals[hit.mood] = totals.get(hit.mood, 0.0) + hit.weight
        if not totals:
            return None
        mood = max(totals, key=totals.__getitem__)
        return mood, totals[mood]
