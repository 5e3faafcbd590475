"""End-to-end journey estimation: routes, safety, ETA, reconciliation, zones."""

from __future__ import annotations

import asyncio
import logging
from datetime import datetime
from typing import Optional, Sequence

import httpx
from pydantic import BaseModel, Field

from safestep.adapters.llm import GeminiModel, GroqModel
from safestep.adapters.route import OsrmRouteTool
from safestep.config.settings import Settings
from safestep.domain.constants import ROUTE_ZONE_BUFFER_METERS
from safestep.domain.danger_zones import active_warnings, find_intersecting_zones, load_danger_zones
from safestep.domain.enums import TravelMode
from safestep.domain.exceptions import LocationResolutionError
from safestep.domain.models import (
    Coordinate,
    DangerZone,
    ModeComparison,
    RouteResult,
    SafetyEstimate,
    TimeEstimate,
)
from safestep.infrastructure.cache import Cache, MemoryCache
from safestep.planner.reconcile import ModeResult, compare_modes, reconcile_modes
from safestep.planner.routing_provider import RouteService
from safestep.services.eta_service import EtaService
from safestep.services.safety_service import SafetyService

_LOGGER = logging.getLogger("safestep.journey")


class JourneyRequest(BaseModel):
    origin: Optional[Coordinate] = None
    destination: Optional[Coordinate] = None
    origin_label: str = ""
    destination_label: str = ""
    travel_mode: TravelMode = TravelMode.WALKING
    modes: list[TravelMode] = Field(default_factory=lambda: list(TravelMode))


class JourneyPlan(BaseModel):
    travel_mode: TravelMode
    routes: dict[TravelMode, RouteResult]
    times: dict[TravelMode, TimeEstimate]
    safety: SafetyEstimate
    comparison: list[ModeComparison] = Field(default_factory=list)
    danger_zones: list[DangerZone] = Field(default_factory=list)
    warnings: list[str] = Field(default_factory=list)
    generated_at: datetime

    @property
    def selected_route(self) -> RouteResult:
        return self.routes[self.travel_mode]

    @property
    def selected_time(self) -> TimeEstimate:
        return self.times[self.travel_mode]


class JourneyPlanner:
    def __init__(
        self,
        route_service: RouteService,
        safety_service: SafetyService,
        eta_service: EtaService,
        zones: Sequence[DangerZone] = (),
    ) -> None:
        self.route_service = route_service
        self.safety_service = safety_service
        self.eta_service = eta_service
        self._zones = tuple(zones)

    async def plan(self, request: JourneyRequest, now: Optional[datetime] = None) -> JourneyPlan:
        if request.origin is None or request.destination is None:
            missing = "origin" if request.origin is None else "destination"
            raise LocationResolutionError(f"could not resolve {missing} to coordinates")

        now = now or datetime.now()
        origin, destination = request.origin, request.destination
        origin_label = request.origin_label or origin.label()
        destination_label = request.destination_label or destination.label()
        modes = list(dict.fromkeys([*request.modes, request.travel_mode]))

        routes = await self.route_service.get_all_routes(origin, destination, modes)

        safety, *times = await asyncio.gather(
            self.safety_service.analyze(origin_label, destination_label, request.travel_mode, now),
            *(
                self.eta_service.estimate(
                    origin_label,
                    destination_label,
                    mode,
                    routes[mode].duration_seconds,
                    routes[mode].distance_meters,
                    now,
                )
                for mode in modes
            ),
        )

        results = reconcile_modes(
            {mode: ModeResult(route=routes[mode], time=time) for mode, time in zip(modes, times)}
        )
        selected = results[request.travel_mode].route
        zones = find_intersecting_zones(selected.geometry, self._zones, ROUTE_ZONE_BUFFER_METERS)
        if zones:
            _LOGGER.info("%d danger zone(s) near the %s route", len(zones), request.travel_mode.value)

        return JourneyPlan(
            travel_mode=request.travel_mode,
            routes={mode: result.route for mode, result in results.items()},
            times={mode: result.time for mode, result in results.items() if result.time is not None},
            safety=safety,
            comparison=compare_modes(results),
            danger_zones=zones,
            warnings=active_warnings(zones, now),
            generated_at=now,
        )


def build_journey_planner(
    settings: Settings,
    *,
    cache: Optional[Cache] = None,
    route_transport: Optional[httpx.AsyncBaseTransport] = None,
    ai_transport: Optional[httpx.AsyncBaseTransport] = None,
) -> JourneyPlanner:
    """Wire the default providers: OSRM routing, Gemini then Groq, heuristic last."""
    models = [
        GeminiModel(settings, transport=ai_transport),
        GroqModel(settings, transport=ai_transport),
    ]
    if cache is None:
        cache = MemoryCache(
            default_ttl=settings.safety_cache_ttl_seconds,
            max_size=settings.safety_cache_max_size,
        )
    # Tier bound sits just above the HTTP timeout.
    tier_timeout = settings.ai_timeout_seconds + 1.0
    return JourneyPlanner(
        route_service=RouteService(OsrmRouteTool(settings, transport=route_transport)),
        safety_service=SafetyService(models, cache=cache, timeout=tier_timeout),
        eta_service=EtaService(models, timeout=tier_timeout),
        zones=load_danger_zones(settings.danger_zones_file),
    )


__all__ = ["JourneyPlan", "JourneyPlanner", "JourneyRequest", "build_journey_planner"]
