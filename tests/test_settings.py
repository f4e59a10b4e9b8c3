import config
from moodsense import defaults
from moodsense.settings import EngineSettings


def test_from_config_clamps_gateway_timeouts(monkeypatch):
    monkeypatch.setattr(config, "GATEWAY_PROBE_TIMEOUT", 5.0)
    monkeypatch.setattr(config, "GATEWAY_CLASSIFY_TIMEOUT", 120.0)

    settings = EngineSettings.from_config()
    assert settings.probe_timeout == defaults.GATEWAY_PROBE_TIMEOUT
    assert settings.classify_timeout == defaults.GATEWAY_CLASSIFY_TIMEOUT


def test_from_config_keeps_shorter_timeouts(monkeypatch):
    monkeypatch.setattr(config, "GATEWAY_PROBE_TIMEOUT", 0.2)
    monkeypatch.setattr(config, "GATEWAY_CLASSIFY_TIMEOUT", 3.0)

    settings = EngineSettings.from_config()
    assert settings.probe_timeout == 0.2
    assert settings.classify_timeout == 3.0


def test_from_config_reads_transition_floor(monkeypatch):
    monkeypatch.setattr(config, "MOOD_TRANSITION_MIN_CONFIDENCE", 0.45)
    assert EngineSettings.from_config().transition_min_confidence == 0.45
