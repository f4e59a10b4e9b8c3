import pytest

from moodsense.mood.model import MoodLabel
from moodsense.mood.patterns import LearnedPatternTable


def test_exact_match_votes_with_full_weight():
    table = LearnedPatternTable()
    table.learn("long day at work", MoodLabel.SAD)
    vote = table.vote("long day at work")
    assert vote is not None
    assert vote.mood is MoodLabel.SAD
    assert vote.weight == 1.0
    assert vote.source == "patterns"


def test_similar_text_votes_with_similarity():
    table = LearnedPatternTable()
    table.learn("i am so happy today", MoodLabel.HAPPY)
    vote = table.vote("i am so happy today friend")
    assert vote is not None
    assert vote.mood is MoodLabel.HAPPY
    assert vote.weight == pytest.approx(5 / 6)


def test_dissimilar_text_has_no_vote():
    table = LearnedPatternTable()
    table.learn("i am so happy today", MoodLabel.HAPPY)
    assert table.vote("the printer is broken again") is None
    assert table.vote("") is None


def test_relearning_overwrites_mood():
    table = LearnedPatternTable()
    table.learn("fine", MoodLabel.NEUTRAL)
    table.learn("fine", MoodLabel.PEACEFUL)
    assert len(table) == 1
    assert table.vote("fine").mood is MoodLabel.PEACEFUL


def test_capacity_evicts_least_recently_learned():
    table = LearnedPatternTable(capacity=2)
    table.learn("one", MoodLabel.HAPPY)
    table.learn("two", MoodLabel.SAD)
    table.learn("one", MoodLabel.HAPPY)
    table.learn("three", MoodLabel.ANGRY)
    assert len(table) == 2
    assert table.vote("two") is None
    assert table.vote("one") is not None
