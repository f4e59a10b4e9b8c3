from moodsense.context.cache import ResultCache, normalize_key
from moodsense.mood.model import MoodLabel


def test_put_and_get():
    cache = ResultCache()
    cache.put("hello", MoodLabel.HAPPY)
    assert cache.get("hello") is MoodLabel.HAPPY
    assert cache.get("missing") is None


def test_evicts_oldest_inserted_at_capacity():
    cache = ResultCache(capacity=50)
    for i in range(51):
        cache.put(f"text {i}", MoodLabel.NEUTRAL)
    assert len(cache) == 50
    assert "text 0" not in cache
    assert "text 1" in cache
    assert "text 50" in cache


def test_overwrite_keeps_insertion_position():
    cache = ResultCache(capacity=2)
    cache.put("a", MoodLabel.HAPPY)
    cache.put("b", MoodLabel.SAD)
    cache.put("a", MoodLabel.EXCITED)
    cache.put("c", MoodLabel.ANGRY)
    assert cache.get("a") is None
    assert cache.keys() == ["b", "c"]


def test_clear():
    cache = ResultCache()
    cache.put("a", MoodLabel.HAPPY)
    cache.clear()
    assert len(cache) == 0


def test_normalize_key_collapses_case_and_whitespace():
    assert normalize_key("  Hello   WORLD \n") == "hello world"
    assert normalize_key("I love my dog") == normalize_key("i love  my DOG")
