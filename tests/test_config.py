from __future__ import annotations

from pathlib import Path

from crs_interview.config import DEFAULT_DRAW_HISTORY_PATH, DEFAULT_PROCESSING_DELAY, Settings


def test_defaults_without_environment(monkeypatch):
    for name in ("CRS_DRAW_HISTORY_PATH", "CRS_PROCESSING_DELAY", "CRS_LOG_LEVEL"):
        monkeypatch.delenv(name, raising=False)
    settings = Settings.from_env()
    assert settings.draw_history_path == DEFAULT_DRAW_HISTORY_PATH
    assert settings.processing_delay == DEFAULT_PROCESSING_DELAY
    assert settings.log_level == "INFO"
    assert DEFAULT_DRAW_HISTORY_PATH.exists()


def test_environment_overrides(monkeypatch):
    monkeypatch.setenv("CRS_DRAW_HISTORY_PATH", "/tmp/draws.json")
    monkeypatch.setenv("CRS_PROCESSING_DELAY", "0.5")
    monkeypatch.setenv("CRS_LOG_LEVEL", "debug")
    settings = Settings.from_env()
    assert settings.draw_history_path == Path("/tmp/draws.json")
    assert settings.processing_delay == 0.5
    assert settings.log_level == "DEBUG"


def test_bad_delay_falls_back(monkeypatch):
    monkeypatch.setenv("CRS_PROCESSING_DELAY", "soon")
    assert Settings.from_env().processing_delay == DEFAULT_PROCESSING_DELAY
    monkeypatch.setenv("CRS_PROCESSING_DELAY", "-2")
    assert Settings.from_env().processing_delay == 0.0
