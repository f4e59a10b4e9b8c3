import asyncio
from datetime import datetime, timedelta, timezone

from moodsense.history.storage import MoodHistoryStorage, MoodTimeRange
from moodsense.mood.model import MoodLabel, SentimentReading
from moodsense.mood.statistics import MoodTrend


def test_record_and_list_readings(tmp_path):
    async def scenario() -> None:
        storage = MoodHistoryStorage(db_path=tmp_path / "mood.db")
        first = SentimentReading.now(MoodLabel.SAD, 0.6, "long day", 1)
        second = SentimentReading.now(MoodLabel.HAPPY, 0.9, "but dinner was great", 2)

        await storage.record_reading(first)
        await storage.record_reading(second)

        readings = await storage.list_readings(limit=10)
        assert [r.sequence_number for r in readings] == [1, 2]
        assert readings[0] == first
        assert readings[1].mood is MoodLabel.HAPPY
        assert readings[1].source_text == "but dinner was great"

    asyncio.run(scenario())


def test_list_readings_limit_keeps_most_recent(tmp_path):
    async def scenario() -> None:
        storage = MoodHistoryStorage(db_path=tmp_path / "mood.db")
        for seq in range(1, 6):
            await storage.record_reading(SentimentReading.now(MoodLabel.NEUTRAL, 0.2, f"m{seq}", seq))

        readings = await storage.list_readings(limit=2)
        assert [r.sequence_number for r in readings] == [4, 5]

    asyncio.run(scenario())


def test_statistics_from_storage(tmp_path):
    async def scenario() -> None:
        storage = MoodHistoryStorage(db_path=tmp_path / "mood.db")
        for seq, mood in enumerate([MoodLabel.SAD, MoodLabel.NEUTRAL, MoodLabel.HAPPY], start=1):
            await storage.record_reading(SentimentReading.now(mood, 0.5, "t", seq))

        stats = await storage.get_statistics()
        assert stats.total == 3
        assert stats.trend is MoodTrend.IMPROVING

    asyncio.run(scenario())


def _at(mood: MoodLabel, seq: int, timestamp: datetime) -> SentimentReading:
    return SentimentReading(
        mood=mood,
        confidence=0.5,
        timestamp=timestamp,
        source_text=f"m{seq}",
        sequence_number=seq,
    )


def test_list_readings_since_filters_by_timestamp(tmp_path):
    async def scenario() -> None:
        storage = MoodHistoryStorage(db_path=tmp_path / "mood.db")
        now = datetime(2026, 3, 10, 12, 0, tzinfo=timezone.utc)
        await storage.record_reading(_at(MoodLabel.SAD, 1, now - timedelta(days=40)))
        await storage.record_reading(_at(MoodLabel.ANGRY, 2, now - timedelta(days=3)))
        await storage.record_reading(_at(MoodLabel.HAPPY, 3, now - timedelta(hours=1)))

        recent = await storage.list_readings(since=now - timedelta(days=7))
        assert [r.sequence_number for r in recent] == [2, 3]

        naive = await storage.list_readings(since=datetime(2026, 3, 10, 0, 0))
        assert [r.sequence_number for r in naive] == [3]

    asyncio.run(scenario())


def test_time_ranges_select_history(tmp_path):
    async def scenario() -> None:
        storage = MoodHistoryStorage(db_path=tmp_path / "mood.db")
        now = datetime(2026, 3, 10, 12, 0, tzinfo=timezone.utc)
        await storage.record_reading(_at(MoodLabel.SAD, 1, now - timedelta(days=400)))
        await storage.record_reading(_at(MoodLabel.SAD, 2, now - timedelta(days=60)))
        await storage.record_reading(_at(MoodLabel.PEACEFUL, 3, now - timedelta(days=10)))
        await storage.record_reading(_at(MoodLabel.HAPPY, 4, now - timedelta(hours=2)))

        async def sequences(time_range: MoodTimeRange) -> list[int]:
            return [r.sequence_number for r in await storage.list_readings_in(time_range, now=now)]

        assert await sequences(MoodTimeRange.TODAY) == [4]
        assert await sequences(MoodTimeRange.WEEK) == [4]
        assert await sequences(MoodTimeRange.MONTH) == [3, 4]
        assert await sequences(MoodTimeRange.THREE_MONTHS) == [2, 3, 4]
        assert await sequences(MoodTimeRange.YEAR) == [2, 3, 4]
        assert await sequences(MoodTimeRange.ALL) == [1, 2, 3, 4]

        stats = await storage.get_statistics(time_range=MoodTimeRange.MONTH, now=now)
        assert stats.total == 2
        assert stats.current_streak.length == 2

    asyncio.run(scenario())
