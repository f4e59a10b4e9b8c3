"""Tests for moodsense/llm_client.py with the OpenAI SDK replaced by stubs."""

import asyncio
from types import SimpleNamespace

from moodsense.llm.prompts import build_mood_prompt
from moodsense.llm_client import MockMoodClient, OllamaMoodClient


class _Completions:
    def __init__(self, content: str | None = None, error: Exception | None = None) -> None:
        self.content = content
        self.error = error
        self.calls: list[dict] = []

    async def create(self, **kwargs):
        self.calls.append(kwargs)
        if self.error is not None:
            raise self.error
        message = SimpleNamespace(content=self.content)
        return SimpleNamespace(choices=[SimpleNamespace(message=message)], usage=None)


class _Models:
    def __init__(self, ok: bool = True) -> None:
        self.ok = ok

    async def list(self):
        if not self.ok:
            raise ConnectionError("refused")
        return []


def _client_with(completions: _Completions, models_ok: bool = True) -> OllamaMoodClient:
    client = OllamaMoodClient(base_url="http://ollama.test:11434", model_id="tiny")
    client._client = SimpleNamespace(
        chat=SimpleNamespace(completions=completions),
        models=_Models(models_ok),
    )
    return client


def test_classify_mood_sends_low_temperature_short_request():
    completions = _Completions(" Happy\n")
    client = _client_with(completions)

    reply = asyncio.run(client.classify_mood(build_mood_prompt("what a day", ["hello"])))

    assert reply == "Happy"
    call = completions.calls[0]
    assert call["model"] == "tiny"
    assert call["temperature"] == 0.1
    assert call["top_p"] == 0.5
    assert call["max_tokens"] == 10
    assert "what a day" in call["messages"][-1]["content"]


def test_classify_mood_failure_returns_empty_string():
    client = _client_with(_Completions(error=RuntimeError("500")))
    assert asyncio.run(client.classify_mood("prompt")) == ""


def test_ping_reports_reachability():
    assert asyncio.run(_client_with(_Completions("x")).ping()) is True
    assert asyncio.run(_client_with(_Completions("x"), models_ok=False).ping()) is False


def test_base_url_is_normalised():
    client = OllamaMoodClient(base_url="http://localhost:11434/", model_id="tiny")
    assert client.base_url == "http://localhost:11434"


def test_mock_client_uses_lexicon():
    client = MockMoodClient()
    assert asyncio.run(client.ping()) is True
    prompt = build_mood_prompt("I am so worried", ["great news earlier"])
    assert asyncio.run(client.classify_mood(prompt)) == "anxious"
    assert asyncio.run(client.classify_mood(build_mood_prompt("the bus is late"))) == "neutral"
