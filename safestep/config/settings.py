"""Runtime settings and provider snapshot helpers."""

from __future__ import annotations

import os
from pathlib import Path
from typing import Optional

from pydantic import BaseModel, Field

from safestep.domain.enums import TravelMode
from safestep.security.key_manager import GEMINI_KEY_NAMES, GROQ_KEY_NAMES, get_key_manager

_OSRM_PUBLIC = "https://router.project-osrm.org/route/v1"
_OSRM_CAR = "https://routing.openstreetmap.de/routed-car/route/v1"


def _env_float(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        return float(raw)
    except ValueError:
        return default


def _env_str(name: str, default: str) -> str:
    raw = os.getenv(name)
    return raw.strip() if raw and raw.strip() else default


class RoutingEndpoint(BaseModel):
    base_url: str
    profile: str


class Settings(BaseModel):
    """Explicit configuration handed to every service at construction time."""

    routing: dict[TravelMode, RoutingEndpoint] = Field(
        default_factory=lambda: {
            TravelMode.WALKING: RoutingEndpoint(base_url=_OSRM_PUBLIC, profile="foot"),
            TravelMode.CYCLING: RoutingEndpoint(base_url=_OSRM_PUBLIC, profile="bike"),
            TravelMode.DRIVING: RoutingEndpoint(base_url=_OSRM_CAR, profile="driving"),
        }
    )
    route_timeout_seconds: float = 10.0
    ai_timeout_seconds: float = 12.0
    gemini_base_url: str = "https://generativelanguage.googleapis.com/v1beta"
    gemini_model: str = "gemini-2.5-flash"
    groq_base_url: str = "https://api.groq.com/openai/v1"
    groq_model: str = "llama-3.3-70b-versatile"
    safety_cache_ttl_seconds: float = 1800.0
    safety_cache_max_size: int = 200
    cors_origins: list[str] = Field(default_factory=lambda: ["*"])
    danger_zones_file: Optional[Path] = None

    @classmethod
    def from_env(cls) -> "Settings":
        defaults = cls()
        routing = {
            TravelMode.WALKING: RoutingEndpoint(
                base_url=_env_str("OSRM_WALKING_URL", defaults.routing[TravelMode.WALKING].base_url),
                profile="foot",
            ),
            TravelMode.CYCLING: RoutingEndpoint(
                base_url=_env_str("OSRM_CYCLING_URL", defaults.routing[TravelMode.CYCLING].base_url),
                profile="bike",
            ),
            TravelMode.DRIVING: RoutingEndpoint(
                base_url=_env_str("OSRM_DRIVING_URL", defaults.routing[TravelMode.DRIVING].base_url),
                profile="driving",
            ),
        }
        zones_file = os.getenv("DANGER_ZONES_FILE", "").strip()
        return cls(
            routing=routing,
            route_timeout_seconds=_env_float("ROUTE_TIMEOUT_SECONDS", defaults.route_timeout_seconds),
            ai_timeout_seconds=_env_float("AI_TIMEOUT_SECONDS", defaults.ai_timeout_seconds),
            gemini_model=_env_str("GEMINI_MODEL", defaults.gemini_model),
            groq_model=_env_str("GROQ_MODEL", defaults.groq_model),
            safety_cache_ttl_seconds=_env_float("SAFETY_CACHE_TTL_SECONDS", defaults.safety_cache_ttl_seconds),
            cors_origins=[o.strip() for o in _env_str("CORS_ORIGINS", "*").split(",") if o.strip()],
            danger_zones_file=Path(zones_file) if zones_file else None,
        )


def resolve_primary_provider() -> str:
    return "gemini" if get_key_manager().has_any(GEMINI_KEY_NAMES) else "unconfigured"


def resolve_secondary_provider() -> str:
    return "groq" if get_key_manager().has_any(GROQ_KEY_NAMES) else "unconfigured"


class ProviderSnapshot(BaseModel):
    primary_ai: str = Field(default="unconfigured")
    secondary_ai: str = Field(default="unconfigured")
    terminal: str = Field(default="heuristic")
    route_provider: str = Field(default="osrm")


def resolve_provider_snapshot() -> ProviderSnapshot:
    return ProviderSnapshot(
        primary_ai=resolve_primary_provider(),
        secondary_ai=resolve_secondary_provider(),
    )


__all__ = [
    "RoutingEndpoint",
    "Settings",
    "ProviderSnapshot",
    "resolve_provider_snapshot",
]
