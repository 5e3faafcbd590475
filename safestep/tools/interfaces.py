"""Tool abstraction protocols and I/O schemas."""

from __future__ import annotations

from typing import Protocol, runtime_checkable

from pydantic import BaseModel

from safestep.domain.enums import Provenance, TravelMode
from safestep.domain.models import LatLon
from safestep.shared.exceptions import ToolError


class RouteInput(BaseModel):
    origin_lat: float
    origin_lon: float
    dest_lat: float
    dest_lon: float
    mode: TravelMode = TravelMode.WALKING


class RawRoute(BaseModel):
    """Unvalidated route as returned by the routing backend (lat/lon geometry)."""

    geometry: list[LatLon]
    distance_meters: float
    duration_seconds: float


@runtime_checkable
class RouteTool(Protocol):
    async def fetch_route(self, params: RouteInput) -> RawRoute: ...


@runtime_checkable
class TextModel(Protocol):
    """A remote generative model addressed with a single prompt."""

    name: str
    provenance: Provenance

    async def complete(self, prompt: str, *, json_mode: bool = True) -> str: ...


__all__ = ["RouteInput", "RawRoute", "RouteTool", "TextModel", "ToolError"]
