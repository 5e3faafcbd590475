"""Pydantic domain models."""

from __future__ import annotations

import datetime as dt
import math
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from safestep.domain.enums import Provenance, RiskLevel, RouteQuality, TravelMode

LatLon = tuple[float, float]


class Coordinate(BaseModel):
    model_config = ConfigDict(frozen=True)

    lat: float
    lon: float

    @model_validator(mode="after")
    def _check_range(self) -> "Coordinate":
        if not (math.isfinite(self.lat) and math.isfinite(self.lon)):
            raise ValueError("coordinate must be finite")
        if not -90.0 <= self.lat <= 90.0 or not -180.0 <= self.lon <= 180.0:
            raise ValueError(f"coordinate out of range: {self.lat},{self.lon}")
        return self

    def as_tuple(self) -> LatLon:
        return (self.lat, self.lon)

    def label(self) -> str:
        return f"{self.lat:.5f},{self.lon:.5f}"


class RouteResult(BaseModel):
    """One route per (origin, destination, mode) query. Geometry is lat/lon ordered."""

    model_config = ConfigDict(frozen=True)

    mode: TravelMode
    geometry: tuple[LatLon, ...]
    distance_meters: int = Field(ge=0)
    duration_seconds: int = Field(ge=0)
    quality: RouteQuality = RouteQuality.ROUTED
    was_corrected: bool = False
    correction_reason: str = ""

    @field_validator("geometry")
    @classmethod
    def _min_two_points(cls, value: tuple[LatLon, ...]) -> tuple[LatLon, ...]:
        if len(value) < 2:
            raise ValueError("route geometry needs at least two points")
        return value

    @property
    def distance_km(self) -> float:
        return self.distance_meters / 1000


class SafetyEstimate(BaseModel):
    model_config = ConfigDict(frozen=True)

    score: float
    explanation: str
    provenance: Provenance
    was_clamped: bool = False

    @property
    def is_live(self) -> bool:
        return self.provenance != Provenance.HEURISTIC


class TimeEstimate(BaseModel):
    model_config = ConfigDict(frozen=True)

    mode: TravelMode
    route_duration_seconds: int = Field(ge=0)
    base_duration_seconds: int = Field(ge=0)
    adjusted_duration_seconds: int = Field(ge=0)
    arrival_at: dt.datetime
    arrival_clock_time: str
    notes: str = ""
    provenance: Provenance
    confidence: int = 0


class TimeRestriction(BaseModel):
    model_config = ConfigDict(frozen=True)

    start_hour: int = Field(ge=0, le=24)
    end_hour: int = Field(ge=0, le=24)
    # start_hour > end_hour wraps past midnight; days are matched on the current day.
    # 0 = Sunday ... 6 = Saturday
    days_of_week: Optional[tuple[int, ...]] = None


class DangerZone(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str
    name: str
    lat: float
    lon: float
    radius_meters: float = Field(gt=0)
    risk_level: RiskLevel
    description: str = ""
    time_restrictions: Optional[TimeRestriction] = None
    alternate_route: Optional[str] = None


class ModeComparison(BaseModel):
    mode: TravelMode
    distance_km: float
    duration_seconds: int
    average_speed_kmh: float
    is_fastest: bool = False
    saved_minutes: Optional[int] = None
    saved_percent: Optional[int] = None


__all__ = [
    "LatLon",
    "Coordinate",
    "RouteResult",
    "SafetyEstimate",
    "TimeEstimate",
    "TimeRestriction",
    "DangerZone",
    "ModeComparison",
]
