"""Advisory gateway to an external mood classifier.

Two hard time budgets apply: a short connectivity probe and a longer
classification call. Neither ever raises past :meth:`classify`; every
failure becomes a :class:`GatewayStatus` and the engine carries on
without the gateway vote.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Sequence
from dataclasses import dataclass
from enum import Enum

from moodsense.defaults import GATEWAY_CLASSIFY_TIMEOUT, GATEWAY_PROBE_TIMEOUT
from moodsense.llm.prompts import build_mood_prompt
from moodsense.llm_client import MoodClassifierClient
from moodsense.mood.model import MoodLabel, WeightedVote

__all__ = [
    "ExternalClassifierGateway",
    "GatewayOutcome",
    "GatewayStatus",
    "SOURCE_GATEWAY",
    "parse_mood_token",
]

logger = logging.getLogger(__name__)

SOURCE_GATEWAY = "gateway"


class GatewayStatus(str, Enum):
    AVAILABLE = "available"
    UNAVAILABLE = "unavailable"
    TIMEOUT = "timeout"
    NO_VOTE = "no_vote"


@dataclass(frozen=True, slots=True)
class GatewayOutcome:
    status: GatewayStatus
    vote: WeightedVote | None = None

    @property
    def has_vote(self) -> bool:
        return self.vote is not None


def parse_mood_token(response: str | None) -> MoodLabel | None:
    """Reduce a free-text reply to exactly one mood label, or ``None``."""
    return MoodLabel.parse(response)


class ExternalClassifierGateway:
    """Wrap an optional :class:`MoodClassifierClient` behind two timeouts.

    Parameters
    ----------
    client:
        The classifier, or ``None`` to run without one (always UNAVAILABLE).
    probe_timeout:
        Budget in seconds for ``client.ping()``.
    classify_timeout:
        Budget in seconds for ``client.classify_mood()``.
    """

    def __init__(
        self,
        client: MoodClassifierClient | None,
        probe_timeout: float = GATEWAY_PROBE_TIMEOUT,
        classify_timeout: float = GATEWAY_CLASSIFY_TIMEOUT,
    ) -> None:
        self.client = client
        self.probe_timeout = probe_timeout
        self.classify_timeout = classify_timeout

    async def probe(self) -> bool:
        if self.client is None:
            return False
        try:
            return bool(await asyncio.wait_for(self.client.ping(), self.probe_timeout))
        except asyncio.TimeoutError:
            logger.info("Classifier probe timed out after %.2fs", self.probe_timeout)
            return False
        except Exception as exc:
            logger.warning("Classifier probe failed: %s", exc)
            return False

    async def classify(
        self,
        text: str,
        context_texts: Sequence[str] = (),
    ) -> GatewayOutcome:
        if not await self.probe():
            return GatewayOutcome(GatewayStatus.UNAVAILABLE)

        prompt = build_mood_prompt(text, list(context_texts))
        try:
            raw = await asyncio.wait_for(
                self.client.classify_mood(prompt),  # type: ignore[union-attr]
                self.classify_timeout,
            )
        except asyncio.TimeoutError:
            logger.warning("Classifier timed out after %.1fs", self.classify_timeout)
            return GatewayOutcome(GatewayStatus.TIMEOUT)
        except Exception as exc:
            logger.warning("Classifier call failed: %s", exc)
            return GatewayOutcome(GatewayStatus.UNAVAILABLE)

        mood = parse_mood_token(raw)
        if mood is None:
            logger.info("Classifier reply not a mood label: %r", (raw or "")[:40])
            return GatewayOutcome(GatewayStatus.NO_VOTE)

        logger.debug("Classifier voted %s", mood.value)
        return GatewayOutcome(GatewayStatus.AVAILABLE, WeightedVote(mood, 1.0, SOURCE_GATEWAY))
