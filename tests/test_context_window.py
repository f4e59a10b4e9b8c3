"""Tests for moodsense/context/window.py."""

import pytest

from moodsense.context.window import ContextWindow
from moodsense.mood.model import MoodLabel, SentimentReading


def _reading(mood: MoodLabel, seq: int, confidence: float = 0.5) -> SentimentReading:
    return SentimentReading.now(mood, confidence, f"msg {seq}", seq)


def _window(*moods: MoodLabel, capacity: int = 15) -> ContextWindow:
    window = ContextWindow(capacity=capacity)
    for seq, mood in enumerate(moods, start=1):
        window.append(_reading(mood, seq))
    return window


def test_length_never_exceeds_capacity_and_evicts_oldest_first():
    window = ContextWindow(capacity=15)
    for seq in range(1, 21):
        window.append(_reading(MoodLabel.HAPPY, seq))
        assert len(window) <= 15
    assert len(window) == 15
    assert [r.sequence_number for r in window] == list(range(6, 21))


def test_capacity_must_be_positive():
    with pytest.raises(ValueError):
        ContextWindow(capacity=0)


def test_consistency():
    window = _window(MoodLabel.HAPPY, MoodLabel.HAPPY, MoodLabel.HAPPY, MoodLabel.SAD)
    assert window.consistency(MoodLabel.HAPPY) == pytest.approx(0.75)
    assert window.consistency(MoodLabel.ANGRY) == 0.0


def test_consistency_of_empty_window_is_zero():
    assert ContextWindow().consistency(MoodLabel.NEUTRAL) == 0.0


def test_trend_positive_when_improving():
    window = _window(MoodLabel.SAD, MoodLabel.SAD, MoodLabel.HAPPY, MoodLabel.HAPPY)
    assert window.trend() == pytest.approx(3.0)


def test_trend_negative_when_worsening():
    window = _window(MoodLabel.EXCITED, MoodLabel.NEUTRAL, MoodLabel.ANGRY)
    # halves of size 1: angry (-2.0) minus excited (2.0)
    assert window.trend() == pytest.approx(-4.0)


def test_trend_needs_two_readings():
    assert _window(MoodLabel.HAPPY).trend() == 0.0


def test_short_window_is_coherent():
    assert _window(MoodLabel.HAPPY, MoodLabel.ANGRY).coherence()


def test_single_family_window_is_coherent():
    window = _window(MoodLabel.HAPPY, MoodLabel.EXCITED, MoodLabel.LOVING, MoodLabel.PEACEFUL)
    assert window.coherence()


def test_flip_flopping_window_is_incoherent():
    window = _window(
        MoodLabel.HAPPY, MoodLabel.SAD, MoodLabel.HAPPY, MoodLabel.SAD, MoodLabel.HAPPY,
    )
    assert not window.coherence()


def test_coherence_threshold():
    # two of three sub-windows stay positive → 0.67 ≥ 0.6
    assert _window(
        MoodLabel.HAPPY, MoodLabel.HAPPY, MoodLabel.HAPPY, MoodLabel.HAPPY, MoodLabel.SAD,
    ).coherence()
    # one of three → 0.33
    assert not _window(
        MoodLabel.HAPPY, MoodLabel.HAPPY, MoodLabel.HAPPY, MoodLabel.SAD, MoodLabel.SAD,
    ).coherence()


def test_neutral_family_groups_neutral_and_confused():
    window = _window(MoodLabel.NEUTRAL, MoodLabel.CONFUSED, MoodLabel.NEUTRAL)
    assert window.coherence()


def test_replace_swaps_reading_in_place():
    window = _window(MoodLabel.HAPPY, MoodLabel.SAD)
    assert window.replace(1, _reading(MoodLabel.EXCITED, 1, 0.9))
    assert [r.mood for r in window] == [MoodLabel.EXCITED, MoodLabel.SAD]


def test_replace_unknown_sequence_returns_false():
    window = _window(MoodLabel.HAPPY)
    assert not window.replace(99, _reading(MoodLabel.SAD, 99))
    assert len(window) == 1


def test_snapshot_is_independent():
    window = _window(MoodLabel.HAPPY)
    snap = window.snapshot()
    window.append(_reading(MoodLabel.SAD, 2))
    assert len(snap) == 1
    assert len(window) == 2


def test_dominant_mood_prefers_most_recent_on_tie():
    window = _window(MoodLabel.HAPPY, MoodLabel.SAD)
    assert window.dominant_mood() is MoodLabel.SAD
    assert ContextWindow().dominant_mood() is None


def test_most_recent_of():
    window = _window(MoodLabel.HAPPY, MoodLabel.SAD, MoodLabel.ANGRY)
    assert window.most_recent_of([MoodLabel.HAPPY, MoodLabel.SAD]) is MoodLabel.SAD
    assert window.most_recent_of([MoodLabel.LOVING]) is None
