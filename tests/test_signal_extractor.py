"""Tests for moodsense.pipeline.extractor_signals."""

import pytest

from moodsense.mood.model import MoodLabel, WeightedVote
from moodsense.pipeline.extractor_signals import SignalExtractor, polarity_mood


@pytest.fixture
def extractor() -> SignalExtractor:
    return SignalExtractor()


def _moods(votes: list[WeightedVote]) -> set[MoodLabel]:
    return {v.mood for v in votes}


def _sources(votes: list[WeightedVote]) -> set[str]:
    return {v.source for v in votes}


# ── Empty input ──────────────────────────────────────────────────


@pytest.mark.parametrize("text", ["", "   ", "\n\t", None, 42])
def test_empty_or_invalid_input_yields_single_zero_neutral_vote(extractor, text):
    votes = extractor.extract(text)
    assert votes == [WeightedVote(MoodLabel.NEUTRAL, 0.0, "extractor.empty")]


# ── Lexical pass ─────────────────────────────────────────────────


def test_intensified_keyword_and_exclamations(extractor):
    votes = extractor.extract("I am so happy today!!!")
    assert WeightedVote(MoodLabel.HAPPY, 1.5, "lexical.keyword") in votes
    arousal = [v for v in votes if v.source == "structure.arousal"]
    assert len(arousal) == 1
    assert arousal[0].mood is MoodLabel.EXCITED
    assert arousal[0].weight == pytest.approx(0.75)


def test_phrase_consumes_its_keyword(extractor):
    votes = extractor.extract("I feel good")
    assert WeightedVote(MoodLabel.HAPPY, 2.0, "lexical.phrase") in votes
    assert "lexical.keyword" not in _sources(votes)


def test_negation_phrase_is_not_renegated(extractor):
    votes = extractor.extract("It's not bad")
    assert WeightedVote(MoodLabel.PEACEFUL, 2.0, "lexical.phrase") in votes
    assert "structure.negation" not in _sources(votes)


def test_diminisher_phrase_halves_weight(extractor):
    votes = extractor.extract("I am a bit sad")
    assert WeightedVote(MoodLabel.SAD, 0.5, "lexical.keyword") in votes


def test_emoji_counts_as_keyword(extractor):
    votes = extractor.extract("😢")
    assert WeightedVote(MoodLabel.SAD, 1.0, "lexical.emoji") in votes


# ── Structural pass ──────────────────────────────────────────────


def test_negated_keyword_is_remapped(extractor):
    votes = extractor.extract("I am not happy")
    assert WeightedVote(MoodLabel.SAD, 0.6, "structure.negation") in votes
    assert not any(v.mood is MoodLabel.HAPPY and v.source.startswith("lexical") for v in votes)


def test_negation_outside_scope_is_ignored(extractor):
    votes = extractor.extract("no way, this whole trip was great")
    assert WeightedVote(MoodLabel.HAPPY, 1.0, "lexical.keyword") in votes


def test_plain_question_is_forced_neutral(extractor):
    votes = extractor.extract("How are you?")
    assert _moods(votes) == {MoodLabel.NEUTRAL}
    assert "structure.question" in _sources(votes)
    assert "structure.arousal" not in _sources(votes)


def test_greeting_is_forced_neutral(extractor):
    votes = extractor.extract("hi there")
    assert _moods(votes) == {MoodLabel.NEUTRAL}
    assert "structure.greeting" in _sources(votes)


def test_emotional_question_keeps_its_emotion(extractor):
    votes = extractor.extract("Why am I so sad?")
    assert MoodLabel.SAD in _moods(votes)
    assert "structure.question" not in _sources(votes)


def test_greeting_followed_by_emotion_is_not_forced_neutral(extractor):
    votes = extractor.extract("Hey. I am so worried about tomorrow")
    assert MoodLabel.ANXIOUS in _moods(votes)


def test_shouting_negative_text_biases_to_angry(extractor):
    votes = extractor.extract("THIS IS AWFUL")
    arousal = [v for v in votes if v.source == "structure.arousal"]
    assert arousal and arousal[0].mood is MoodLabel.ANGRY
    assert arousal[0].weight == pytest.approx(1.0)


def test_exclamation_weight_is_capped(extractor):
    votes = extractor.extract("great!!!!!!!!!!")
    arousal = [v for v in votes if v.source == "structure.arousal"]
    assert arousal[0].weight == pytest.approx(1.0)


# ── Base polarity ────────────────────────────────────────────────


@pytest.mark.parametrize(
    ("score", "expected"),
    [
        (0.9, MoodLabel.HAPPY),
        (0.6, MoodLabel.HAPPY),
        (0.3, MoodLabel.PEACEFUL),
        (0.0, MoodLabel.NEUTRAL),
        (-0.19, MoodLabel.NEUTRAL),
        (-0.2, MoodLabel.ANXIOUS),
        (-0.6, MoodLabel.SAD),
        (-1.0, MoodLabel.SAD),
    ],
)
def test_polarity_thresholds(score, expected):
    assert polarity_mood(score) is expected


def test_injected_scorer_sets_base_vote():
    extractor = SignalExtractor(valence_scorer=lambda text: -0.8)
    votes = extractor.extract("the meeting moved to thursday")
    assert WeightedVote(MoodLabel.SAD, 0.8, "polarity") in votes


def test_failing_scorer_is_treated_as_zero():
    def broken(text: str) -> float:
        raise RuntimeError("scorer offline")

    extractor = SignalExtractor(valence_scorer=broken)
    votes = extractor.extract("I am happy")
    assert WeightedVote(MoodLabel.NEUTRAL, 0.2, "polarity") in votes
    assert MoodLabel.HAPPY in _moods(votes)


# ── Prior-text carry-over ────────────────────────────────────────


def test_affirmative_reply_inherits_prior_mood(extractor):
    votes = extractor.extract("yes", prior_texts=["I love this song"])
    assert WeightedVote(MoodLabel.LOVING, 0.5, "context.carryover") in votes


def test_negative_reply_inherits_negated_prior_mood(extractor):
    votes = extractor.extract("no", prior_texts=["I love this song"])
    assert WeightedVote(MoodLabel.SAD, 0.25, "context.carryover") in votes


def test_carryover_uses_latest_emotional_prior(extractor):
    votes = extractor.extract("me too", prior_texts=["I am so angry", "ok then"])
    carried = [v for v in votes if v.source == "context.carryover"]
    assert [v.mood for v in carried] == [MoodLabel.ANGRY]


def test_long_reply_does_not_carry_over(extractor):
    votes = extractor.extract("yes yes yes yes", prior_texts=["I love this song"])
    assert "context.carryover" not in _sources(votes)


# ── Purity ───────────────────────────────────────────────────────


def test_extract_is_deterministic(extractor):
    text = "Ugh, nothing works and I'm not calm at all!"
    assert extractor.extract(text) == extractor.extract(text)
