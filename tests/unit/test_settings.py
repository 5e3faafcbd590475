"""Runtime settings."""

from __future__ import annotations

from pathlib import Path

import pytest

from safestep.config.settings import Settings, resolve_provider_snapshot
from safestep.domain.enums import TravelMode
from safestep.security.key_manager import get_key_manager

_ENV = (
    "ROUTE_TIMEOUT_SECONDS",
    "AI_TIMEOUT_SECONDS",
    "GEMINI_MODEL",
    "GROQ_MODEL",
    "OSRM_WALKING_URL",
    "OSRM_CYCLING_URL",
    "OSRM_DRIVING_URL",
    "SAFETY_CACHE_TTL_SECONDS",
    "CORS_ORIGINS",
    "DANGER_ZONES_FILE",
)


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for name in _ENV:
        monkeypatch.delenv(name, raising=False)


def test_defaults():
    settings = Settings.from_env()
    assert settings.routing[TravelMode.WALKING].profile == "foot"
    assert settings.routing[TravelMode.CYCLING].profile == "bike"
    assert settings.routing[TravelMode.DRIVING].profile == "driving"
    assert "routed-car" in settings.routing[TravelMode.DRIVING].base_url
    assert settings.route_timeout_seconds == 10.0
    assert settings.gemini_model == "gemini-2.5-flash"
    assert settings.cors_origins == ["*"]
    assert settings.danger_zones_file is None


def test_env_overrides(monkeypatch):
    monkeypatch.setenv("ROUTE_TIMEOUT_SECONDS", "4.5")
    monkeypatch.setenv("GROQ_MODEL", "llama-3.1-8b-instant")
    monkeypatch.setenv("OSRM_DRIVING_URL", "http://localhost:5000/route/v1")
    monkeypatch.setenv("CORS_ORIGINS", "https://a.example, https://b.example")
    monkeypatch.setenv("DANGER_ZONES_FILE", "/srv/zones.json")

    settings = Settings.from_env()

    assert settings.route_timeout_seconds == 4.5
    assert settings.groq_model == "llama-3.1-8b-instant"
    assert settings.routing[TravelMode.DRIVING].base_url == "http://localhost:5000/route/v1"
    assert settings.routing[TravelMode.DRIVING].profile == "driving"
    assert settings.cors_origins == ["https://a.example", "https://b.example"]
    assert settings.danger_zones_file == Path("/srv/zones.json")


def test_bad_number_keeps_default(monkeypatch):
    monkeypatch.setenv("AI_TIMEOUT_SECONDS", "soon")
    assert Settings.from_env().ai_timeout_seconds == 12.0


def test_provider_snapshot_without_keys():
    snapshot = resolve_provider_snapshot()
    assert snapshot.primary_ai == "unconfigured"
    assert snapshot.secondary_ai == "unconfigured"
    assert snapshot.terminal == "heuristic"


def test_provider_snapshot_with_keys(monkeypatch):
    monkeypatch.setenv("GOOGLE_API_KEY", "google-key-for-test")
    monkeypatch.setenv("GROQ_API_KEY", "groq-key-for-test")
    get_key_manager().reload("GROQ_API_KEY")
    snapshot = resolve_provider_snapshot()
    assert snapshot.primary_ai == "gemini"
    assert snapshot.secondary_ai == "groq"
