"""API request/response models."""

from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, Field

from safestep.domain.enums import Provenance, TravelMode
from safestep.domain.models import Coordinate


class AnalyzeRequest(BaseModel):
    origin: str = Field(default="", max_length=300, description="Origin label or 'lat,lon'")
    destination: str = Field(default="", max_length=300, description="Destination label")
    mode: TravelMode = TravelMode.WALKING


class AnalyzeResponse(BaseModel):
    score: float
    tip: str
    provenance: Provenance
    is_live: bool


class JourneyRequestBody(BaseModel):
    origin: Optional[Coordinate] = None
    destination: Optional[Coordinate] = None
    origin_label: str = Field(default="", max_length=300)
    destination_label: str = Field(default="", max_length=300)
    travel_mode: TravelMode = TravelMode.WALKING
    modes: list[TravelMode] = Field(default_factory=lambda: list(TravelMode), min_length=1)


class HealthResponse(BaseModel):
    status: str = "ok"
