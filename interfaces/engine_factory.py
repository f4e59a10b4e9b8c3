from __future__ import annotations

import logging

from config import (
    DB_PATH as _DEFAULT_DB_PATH,
    USE_GATEWAY,
)
from moodsense.history.storage import MoodHistoryStorage
from moodsense.llm_client import OllamaMoodClient
from moodsense.pipeline.coordinator import MoodEngine
from moodsense.pipeline.events import EventBus
from moodsense.pipeline.gateway import ExternalClassifierGateway
from moodsense.settings import EngineSettings

logger = logging.getLogger(__name__)


def build_engine(
    db_path: str | None = None,
    *,
    use_gateway: bool | None = None,
    event_bus: EventBus | None = None,
) -> MoodEngine:
    resolved = db_path or _DEFAULT_DB_PATH
    settings = EngineSettings.from_config()
    enabled = USE_GATEWAY if use_gateway is None else use_gateway

    client: OllamaMoodClient | None = None
    if enabled:
        try:
            client = OllamaMoodClient()
        except Exception as exc:
            logger.warning("Classifier client init failed, running without gateway: %s", exc)
            client = None

    gateway = ExternalClassifierGateway(
        client,
        probe_timeout=settings.probe_timeout,
        classify_timeout=settings.classify_timeout,
    )
    return MoodEngine(
        gateway=gateway,
        settings=settings,
        recorder=MoodHistoryStorage(db_path=resolved),
        event_bus=event_bus,
    )
