from __future__ import annotations

import logging
import os
from typing import Any, Protocol

from dotenv import load_dotenv

from config import OLLAMA_BASE_URL, OLLAMA_MODEL
from moodsense.llm.prompts import SYSTEM_PROMPT_MOOD
from moodsense.pipeline.lexicon import KEYWORD_INDEX, normalize_tokens

logger = logging.getLogger(__name__)


class MoodClassifierClient(Protocol):
    async def ping(self) -> bool: ...

    async def classify_mood(self, prompt: str) -> str: ...


class MockMoodClient:
    """Offline stand-in: answers with the first lexicon keyword it recognises."""

    async def ping(self) -> bool:
        return True

    async def classify_mood(self, prompt: str) -> str:
        message = prompt.rsplit("Message:", 1)[-1]
        for token in normalize_tokens(message):
            mood = KEYWORD_INDEX.get(token)
            if mood is not None:
                return mood.value
        return "neutral"


class OllamaMoodClient:
    """Mood classifier backed by a local Ollama server.

    Talks to Ollama's OpenAI-compatible endpoint (``<base_url>/v1``) through
    ``openai.AsyncOpenAI``. Timeouts are enforced by the gateway, so the
    client itself does not retry.
    """

    def __init__(
        self,
        *,
        base_url: str | None = None,
        model_id: str | None = None,
        request_timeout: float = 30.0,
    ) -> None:
        load_dotenv()
        self.base_url = (base_url or os.getenv("OLLAMA_BASE_URL", OLLAMA_BASE_URL)).rstrip("/")
        self.model_id = model_id or os.getenv("OLLAMA_MODEL", OLLAMA_MODEL)
        self.request_timeout = request_timeout

        self._client: Any | None = None
        self._client_init_error: str | None = None

    async def ping(self) -> bool:
        client = self._get_client()
        if client is None:
            return False
        try:
            await client.models.list()
        except Exception as exc:
            logger.debug("Ollama ping failed: %s", exc)
            return False
        return True

    async def classify_mood(self, prompt: str) -> str:
        client = self._get_client()
        if client is None:
            logger.warning("Mood classifier client unavailable, skipping API call")
            return ""

        try:
            completion = await client.chat.completions.create(
                model=self.model_id,
                temperature=0.1,
                top_p=0.5,
                max_tokens=10,
                messages=[
                    {"role": "system", "content": SYSTEM_PROMPT_MOOD},
                    {"role": "user", "content": prompt},
                ],
            )
        except Exception as exc:
            logger.error("classify_mood failed: %s", exc)
            return ""

        usage = getattr(completion, "usage", None)
        if usage:
            logger.debug(
                "Classifier tokens: prompt=%s completion=%s",
                getattr(usage, "prompt_tokens", "?"),
                getattr(usage, "completion_tokens", "?"),
            )

        if not completion.choices:
            return ""
        return (completion.choices[0].message.content or "").strip()

    def _get_client(self):
        if self._client is not None:
            return self._client

        try:
            from openai import AsyncOpenAI
        except Exception:
            self._client_init_error = "openai package is not installed"
            logger.error("OllamaMoodClient: openai package missing, classifier disabled")
            return None

        # Ollama ignores the key but the SDK requires one.
        self._client = AsyncOpenAI(
            api_key="ollama",
            base_url=f"{self.base_url}/v1",
            timeout=self.request_timeout,
            max_retries=0,
        )
        return self._client
