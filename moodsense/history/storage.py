from __future__ import annotations

import asyncio
from contextlib import asynccontextmanager
from datetime import datetime, timedelta, timezone
from enum import Enum
from pathlib import Path

import aiosqlite

from moodsense.mood.model import MoodLabel, SentimentReading
from moodsense.mood.statistics import MoodStatistics, summarize_readings


class MoodTimeRange(str, Enum):
    """Look-back windows for history queries."""

    TODAY = "today"
    WEEK = "week"
    MONTH = "month"
    THREE_MONTHS = "three_months"
    YEAR = "year"
    ALL = "all"

    def since(self, now: datetime | None = None) -> datetime | None:
        """Earliest timestamp inside the range, or ``None`` for :attr:`ALL`."""
        now = now or datetime.now(timezone.utc)
        if self is MoodTimeRange.ALL:
            return None
        if self is MoodTimeRange.TODAY:
            return now.replace(hour=0, minute=0, second=0, microsecond=0)
        return now - _RANGE_SPANS[self]


_RANGE_SPANS: dict[MoodTimeRange, timedelta] = {
    MoodTimeRange.WEEK: timedelta(days=7),
    MoodTimeRange.MONTH: timedelta(days=30),
    MoodTimeRange.THREE_MONTHS: timedelta(days=90),
    MoodTimeRange.YEAR: timedelta(days=365),
}


def _utc_iso(moment: datetime) -> str:
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=timezone.utc)
    return moment.astimezone(timezone.utc).isoformat(timespec="microseconds")


class MoodHistoryStorage:
    """Append-only SQLite log of refined mood readings.

    Implements the engine's ``record_reading`` collaborator contract.
    """

    def __init__(self, db_path: str | Path = "data/moodsense.db") -> None:
        self.db_path = Path(db_path)
        self.db_path.parent.mkdir(parents=True, exist_ok=True)
        self._initialized = False
        self._init_lock = asyncio.Lock()

    @asynccontextmanager
    async def _connect(self):
        async with aiosqlite.connect(str(self.db_path)) as conn:
            conn.row_factory = aiosqlite.Row
            yield conn

    async def _ensure_initialized(self) -> None:
        if self._initialized:
            return

        async with self._init_lock:
            if self._initialized:
                return

            async with self._connect() as conn:
                await conn.execute(
                    """
                    CREATE TABLE IF NOT EXISTS mood_readings (
                        id INTEGER PRIMARY KEY AUTOINCREMENT,
                        sequence_number INTEGER NOT NULL,
                        mood TEXT NOT NULL,
                        confidence REAL NOT NULL,
                        timestamp TEXT NOT NULL,
                        source_text TEXT NOT NULL
                    )
                    """
                )
                await conn.execute(
                    "CREATE INDEX IF NOT EXISTS idx_mood_readings_timestamp "
                    "ON mood_readings(timestamp)"
                )
                await conn.commit()
            self._initialized = True

    async def record_reading(self, reading: SentimentReading) -> int:
        await self._ensure_initialized()

        async with self._connect() as conn:
            cursor = await conn.execute(
                """
                INSERT INTO mood_readings (sequence_number, mood, confidence, timestamp, source_text)
                VALUES (?, ?, ?, ?, ?)
                """,
                (
                    reading.sequence_number,
                    reading.mood.value,
                    reading.confidence,
                    _utc_iso(reading.timestamp),
                    reading.source_text,
                ),
            )
            await conn.commit()
            return int(cursor.lastrowid)

    async def list_readings(
        self,
        limit: int = 100,
        since: datetime | None = None,
    ) -> list[SentimentReading]:
        """Most recent *limit* readings, oldest first.

        With *since*, only readings timestamped at or after it are
        considered. Naive datetimes are taken as UTC.
        """
        await self._ensure_initialized()

        query = "SELECT * FROM mood_readings"
        params: list[object] = []
        if since is not None:
            query += " WHERE timestamp >= ?"
            params.append(_utc_iso(since))
        query += " ORDER BY id DESC LIMIT ?"
        params.append(limit)

        async with self._connect() as conn:
            cursor = await conn.execute(query, params)
            rows = await cursor.fetchall()
        readings = [
            SentimentReading(
                mood=MoodLabel(row["mood"]),
                confidence=float(row["confidence"]),
                timestamp=datetime.fromisoformat(row["timestamp"]),
                source_text=row["source_text"],
                sequence_number=int(row["sequence_number"]),
            )
            for row in rows
        ]
        readings.reverse()
        return readings

    async def list_readings_in(
        self,
        time_range: MoodTimeRange,
        limit: int = 1000,
        now: datetime | None = None,
    ) -> list[SentimentReading]:
        return await self.list_readings(limit, since=time_range.since(now))

    async def get_statistics(
        self,
        limit: int = 100,
        time_range: MoodTimeRange = MoodTimeRange.ALL,
        now: datetime | None = None,
    ) -> MoodStatistics:
        return summarize_readings(await self.list_readings(limit, since=time_range.since(now)))
