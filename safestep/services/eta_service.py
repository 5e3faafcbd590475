"""Travel-time / ETA pipeline: primary AI, secondary AI, deterministic heuristic.

Durations are seconds everywhere in this module's public surface. The AI
prompt asks for minutes and the tier adapter converts.

Walking carries no access-time term, so a walking estimate reports the same
figure as base and adjusted duration. That figure already contains the
contextual pace factor (night, long distance).
"""

from __future__ import annotations

import logging
import math
from datetime import datetime, timedelta
from functools import partial
from typing import Optional, Sequence

from pydantic import BaseModel, Field, field_validator

from safestep.domain.constants import TIER_CONFIDENCE
from safestep.domain.enums import Provenance, TravelMode
from safestep.domain.models import TimeEstimate
from safestep.parsing.json_payload import parse_json_object
from safestep.planner.distance import round_half_up
from safestep.planner.route_realism import access_time_seconds, context_factor, time_of_day
from safestep.tools.interfaces import TextModel
from safestep.trust.fallback import Attempt, run_chain

_LOGGER = logging.getLogger("safestep.eta")


class TimePayload(BaseModel):
    estimatedDuration: float = Field(strict=True, ge=0)
    adjustedDuration: float = Field(strict=True, ge=0)
    notes: str = ""

    @field_validator("estimatedDuration", "adjustedDuration")
    @classmethod
    def _finite(cls, value: float) -> float:
        if not math.isfinite(value):
            raise ValueError("duration must be finite")
        return value


def format_clock(moment: datetime) -> str:
    return moment.strftime("%H:%M")


def _build_estimate(
    *,
    mode: TravelMode,
    route_duration_seconds: int,
    base_seconds: int,
    adjusted_seconds: int,
    now: datetime,
    notes: str,
    provenance: Provenance,
) -> TimeEstimate:
    if mode == TravelMode.WALKING:
        base_seconds = adjusted_seconds
    arrival = now + timedelta(seconds=adjusted_seconds)
    return TimeEstimate(
        mode=mode,
        route_duration_seconds=route_duration_seconds,
        base_duration_seconds=base_seconds,
        adjusted_duration_seconds=adjusted_seconds,
        arrival_at=arrival,
        arrival_clock_time=format_clock(arrival),
        notes=notes,
        provenance=provenance,
        confidence=TIER_CONFIDENCE[provenance],
    )


def heuristic_time_estimate(
    mode: TravelMode,
    base_duration_seconds: float,
    distance_meters: float,
    now: datetime,
) -> TimeEstimate:
    mode = TravelMode(mode)
    route_seconds = round_half_up(base_duration_seconds)
    adjustment = context_factor(mode, now.hour, distance_meters)
    access = access_time_seconds(mode)
    adjusted = round_half_up(base_duration_seconds * adjustment.factor) + access

    notes = list(adjustment.reasons)
    if access:
        what = "parking and walking to the door" if mode == TravelMode.DRIVING else "locking the bike"
        notes.append(f"+{access // 60} min for {what}")
    if not notes:
        notes.append("no adjustment for current conditions")

    return _build_estimate(
        mode=mode,
        route_duration_seconds=route_seconds,
        base_seconds=route_seconds,
        adjusted_seconds=adjusted,
        now=now,
        notes="; ".join(notes),
        provenance=Provenance.HEURISTIC,
    )


def build_time_prompt(
    origin: str,
    destination: str,
    mode: TravelMode,
    base_duration_seconds: float,
    distance_meters: float,
    now: datetime,
    *,
    json_only: bool = False,
) -> str:
    prompt = f"""
You estimate realistic door-to-door travel times.
Route: {origin} to {destination}, travelling by {mode.value}.
Routed distance: {distance_meters / 1000:.2f} km. Routing engine duration: {base_duration_seconds / 60:.1f} minutes.
Departure: {now.strftime("%A %H:%M")} ({time_of_day(now).value.replace("_", " ")}).

Consider:
- road type and typical speeds for this mode
- rush hour (07:00-09:00 and 17:00-19:00)
- terrain and elevation
- weather and season
- time to access the destination (parking for cars, bike racks for cyclists; none for walkers)

Respond with JSON: {{ "estimatedDuration": number, "adjustedDuration": number, "notes": "string" }}
Both durations are in MINUTES. estimatedDuration is the travel time on the road, adjustedDuration adds destination access time.
""".strip()
    if json_only:
        prompt += "\nReturn the JSON object only, with no markdown and no commentary."
    return prompt


class EtaService:
    def __init__(self, models: Sequence[TextModel], *, timeout: Optional[float] = None) -> None:
        self._models = list(models)
        self._timeout = timeout

    async def _ask(
        self,
        model: TextModel,
        prompt: str,
        mode: TravelMode,
        route_seconds: int,
        now: datetime,
    ) -> TimeEstimate:
        raw = await model.complete(prompt, json_mode=True)
        payload = TimePayload.model_validate(parse_json_object(raw))
        base = round_half_up(payload.estimatedDuration * 60)
        adjusted = round_half_up(payload.adjustedDuration * 60)
        if adjusted < base:
            _LOGGER.warning("%s adjusted duration below base for %s, using base", model.name, mode.value)
            adjusted = base
        return _build_estimate(
            mode=mode,
            route_duration_seconds=route_seconds,
            base_seconds=base,
            adjusted_seconds=adjusted,
            now=now,
            notes=payload.notes.strip(),
            provenance=model.provenance,
        )

    async def estimate(
        self,
        origin: str,
        destination: str,
        mode: TravelMode,
        base_duration_seconds: float,
        distance_meters: float,
        now: Optional[datetime] = None,
    ) -> TimeEstimate:
        mode = TravelMode(mode)
        now = now or datetime.now()
        route_seconds = round_half_up(base_duration_seconds)
        attempts = [
            Attempt(
                provenance=model.provenance,
                name=model.name,
                run=partial(
                    self._ask,
                    model,
                    build_time_prompt(
                        origin,
                        destination,
                        mode,
                        base_duration_seconds,
                        distance_meters,
                        now,
                        json_only=index > 0,
                    ),
                    mode,
                    route_seconds,
                    now,
                ),
            )
            for index, model in enumerate(self._models)
        ]
        terminal = partial(heuristic_time_estimate, mode, base_duration_seconds, distance_meters, now)
        result = await run_chain("eta", attempts, terminal, timeout=self._timeout)
        return result.value


__all__ = [
    "EtaService",
    "TimePayload",
    "build_time_prompt",
    "format_clock",
    "heuristic_time_estimate",
]
