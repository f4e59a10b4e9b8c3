"""Synchronous in-process event bus for mood publications.

The engine publishes three events:

``mood.fast_published``
    The fast-pass estimate for a message. Payload: :class:`ReadingPayload`.
``mood.refined_published``
    The refined estimate, at most once per message and never after a newer
    message's estimate. Payload: :class:`ReadingPayload`.
``mood.transition``
    Follows either publication when the change is significant. Payload:
    :class:`TransitionPayload`.

Handlers run in the publisher's call stack. A handler that raises is logged
and skipped; the remaining handlers still run.
"""

from __future__ import annotations

import logging
from collections import defaultdict
from collections.abc import Callable
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, TypedDict

from moodsense.mood.model import SentimentReading

logger = logging.getLogger(__name__)

FAST_PUBLISHED = "mood.fast_published"
REFINED_PUBLISHED = "mood.refined_published"
TRANSITION = "mood.transition"


class ReadingPayload(TypedDict):
    sequence_number: int
    mood: str
    confidence: float
    ui_intensity: str
    phase: str


class TransitionPayload(ReadingPayload):
    previous_mood: str
    previous_confidence: float


def reading_payload(reading: SentimentReading, ui_intensity: str, phase: str) -> ReadingPayload:
    return ReadingPayload(
        sequence_number=reading.sequence_number,
        mood=reading.mood.value,
        confidence=round(reading.confidence, 3),
        ui_intensity=ui_intensity,
        phase=phase,
    )


def transition_payload(
    current: ReadingPayload,
    previous_mood: str,
    previous_confidence: float,
) -> TransitionPayload:
    return TransitionPayload(
        **current,
        previous_mood=previous_mood,
        previous_confidence=round(previous_confidence, 3),
    )


EventPayload = ReadingPayload | TransitionPayload | dict[str, Any]


@dataclass(slots=True)
class Event:
    name: str
    payload: EventPayload
    timestamp: str


class EventBus:
    def __init__(self) -> None:
        self._subscribers: dict[str, list[Callable[[Event], None]]] = defaultdict(list)

    def subscribe(self, event_name: str, handler: Callable[[Event], None]) -> None:
        self._subscribers[event_name].append(handler)

    def unsubscribe(self, event_name: str, handler: Callable[[Event], None]) -> None:
        handlers = self._subscribers.get(event_name, [])
        if handler in handlers:
            handlers.remove(handler)

    def publish(self, event_name: str, payload: EventPayload) -> None:
        event = Event(
            name=event_name,
            payload=payload,
            timestamp=datetime.now(timezone.utc).isoformat(),
        )
        for handler in list(self._subscribers.get(event_name, [])):
            try:
                handler(event)
            except Exception:
                logger.exception("Subscriber for %s failed", event_name)
