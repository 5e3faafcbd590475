"""pytest global fixtures: keep tests away from real providers."""

from __future__ import annotations

from typing import Optional

import pytest

from safestep.domain.enums import Provenance
from safestep.tools.interfaces import RawRoute, RouteInput

_KEY_NAMES = ("GEMINI_API_KEY", "GOOGLE_API_KEY", "GROQ_API_KEY")


@pytest.fixture(autouse=True)
def no_real_apis(monkeypatch):
    """Remove every provider credential and reset the key cache."""
    for name in _KEY_NAMES:
        monkeypatch.delenv(name, raising=False)
    from safestep.security.key_manager import get_key_manager

    km = get_key_manager()
    for name in _KEY_NAMES:
        km.reload(name)
    yield
    for name in _KEY_NAMES:
        km.reload(name)


class FakeModel:
    """Scripted text model that counts invocations."""

    def __init__(self, name: str, provenance: Provenance, reply: Optional[str] = None, error: Optional[Exception] = None):
        self.name = name
        self.provenance = provenance
        self._reply = reply
        self._error = error
        self.calls = 0
        self.prompts: list[str] = []

    async def complete(self, prompt: str, *, json_mode: bool = True) -> str:
        self.calls += 1
        self.prompts.append(prompt)
        if self._error is not None:
            raise self._error
        return self._reply or ""


class FakeRouteTool:
    """Returns one scripted raw route per mode, or raises."""

    def __init__(self, routes: Optional[dict] = None, error: Optional[Exception] = None):
        self._routes = routes or {}
        self._error = error
        self.calls: list[RouteInput] = []

    async def fetch_route(self, params: RouteInput) -> RawRoute:
        self.calls.append(params)
        if self._error is not None:
            raise self._error
        route = self._routes.get(params.mode)
        if isinstance(route, Exception):
            raise route
        if route is None:
            raise RuntimeError(f"no scripted route for {params.mode}")
        return route


@pytest.fixture
def make_model():
    return FakeModel


@pytest.fixture
def make_route_tool():
    return FakeRouteTool


ORIGIN = (51.5300, -0.1200)
DESTINATION = (51.5370, -0.0950)
# Passes through the Regent's Canal towpath zone.
ROUTE_GEOMETRY = [ORIGIN, (51.5336, -0.1062), DESTINATION]


def scripted_routes() -> dict:
    from safestep.domain.enums import TravelMode

    return {
        TravelMode.WALKING: RawRoute(geometry=ROUTE_GEOMETRY, distance_meters=2000, duration_seconds=1500),
        TravelMode.CYCLING: RawRoute(geometry=ROUTE_GEOMETRY, distance_meters=2100, duration_seconds=560),
        TravelMode.DRIVING: RawRoute(geometry=ROUTE_GEOMETRY, distance_meters=2600, duration_seconds=300),
    }


@pytest.fixture
def make_planner():
    """Build a planner wired to fakes: scripted routes, the bundled zones, no cache."""
    from safestep.domain.danger_zones import load_danger_zones
    from safestep.planner.routing_provider import RouteService
    from safestep.services.eta_service import EtaService
    from safestep.services.journey_service import JourneyPlanner
    from safestep.services.safety_service import SafetyService

    def _build(models=(), routes=None, route_error=None):
        tool = FakeRouteTool(routes if routes is not None else scripted_routes(), error=route_error)
        return JourneyPlanner(
            route_service=RouteService(tool),
            safety_service=SafetyService(models),
            eta_service=EtaService(models),
            zones=load_danger_zones(),
        )

    return _build
