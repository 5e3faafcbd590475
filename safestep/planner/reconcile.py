"""Cross-mode consistency checks and mode comparison."""

from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from datetime import timedelta
from typing import Mapping, Optional

from safestep.domain.constants import (
    COMPARABLE_DISTANCE_MAX_RATIO,
    COMPARABLE_DISTANCE_MIN_RATIO,
    NOMINAL_CYCLING_SPEED_KMH,
)
from safestep.domain.enums import RouteQuality, TravelMode
from safestep.domain.models import ModeComparison, RouteResult, TimeEstimate
from safestep.planner.distance import round_half_up

_LOGGER = logging.getLogger("safestep.reconcile")


@dataclass(frozen=True)
class ModeResult:
    route: RouteResult
    time: Optional[TimeEstimate] = None


def cycling_slower_than_walking(walking: RouteResult, cycling: RouteResult) -> bool:
    """True when the two paths are comparable (+/-20%) and cycling still takes longer."""
    if walking.distance_meters <= 0:
        return False
    ratio = cycling.distance_meters / walking.distance_meters
    if not COMPARABLE_DISTANCE_MIN_RATIO <= ratio <= COMPARABLE_DISTANCE_MAX_RATIO:
        return False
    return cycling.duration_seconds > walking.duration_seconds


def nominal_cycling_seconds(distance_meters: float) -> int:
    return round_half_up((distance_meters / 1000) / NOMINAL_CYCLING_SPEED_KMH * 3600)


def _shift_time(estimate: TimeEstimate, new_route_seconds: int) -> TimeEstimate:
    # Keep the contextual and access delta, move the base to the corrected route time.
    delta = estimate.adjusted_duration_seconds - estimate.base_duration_seconds
    adjusted = max(new_route_seconds, new_route_seconds + delta)
    arrival = estimate.arrival_at + timedelta(seconds=adjusted - estimate.adjusted_duration_seconds)
    note = f"cycling time recalculated at {NOMINAL_CYCLING_SPEED_KMH:.0f} km/h"
    return estimate.model_copy(
        update={
            "route_duration_seconds": new_route_seconds,
            "base_duration_seconds": new_route_seconds,
            "adjusted_duration_seconds": adjusted,
            "arrival_at": arrival,
            "arrival_clock_time": arrival.strftime("%H:%M"),
            "notes": f"{estimate.notes}; {note}" if estimate.notes else note,
        }
    )


def reconcile_modes(results: Mapping[TravelMode, ModeResult]) -> dict[TravelMode, ModeResult]:
    """Correct a cycling result that is slower than walking over a comparable path.

    Driving is never touched. The input mapping is not mutated.
    """
    reconciled = dict(results)
    walking = reconciled.get(TravelMode.WALKING)
    cycling = reconciled.get(TravelMode.CYCLING)
    if walking is None or cycling is None:
        return reconciled
    if not cycling_slower_than_walking(walking.route, cycling.route):
        return reconciled

    corrected_seconds = nominal_cycling_seconds(cycling.route.distance_meters)
    _LOGGER.warning(
        "cycling duration (%ss) is longer than walking (%ss), recalculating to %ss",
        cycling.route.duration_seconds,
        walking.route.duration_seconds,
        corrected_seconds,
    )
    route = cycling.route.model_copy(
        update={
            "duration_seconds": corrected_seconds,
            "quality": RouteQuality.CORRECTED
            if cycling.route.quality == RouteQuality.ROUTED
            else cycling.route.quality,
            "was_corrected": True,
            "correction_reason": "cycling slower than walking over comparable distance",
        }
    )
    time = _shift_time(cycling.time, corrected_seconds) if cycling.time is not None else None
    reconciled[TravelMode.CYCLING] = replace(cycling, route=route, time=time)
    return reconciled


def compare_modes(results: Mapping[TravelMode, ModeResult]) -> list[ModeComparison]:
    """Modes with usable data, fastest first, with savings versus the slowest."""
    rows: list[ModeComparison] = []
    for mode, result in results.items():
        duration = result.time.adjusted_duration_seconds if result.time else result.route.duration_seconds
        if duration <= 0 or result.route.distance_meters <= 0:
            continue
        distance_km = result.route.distance_km
        rows.append(
            ModeComparison(
                mode=mode,
                distance_km=round(distance_km, 2),
                duration_seconds=duration,
                average_speed_kmh=round(distance_km / (duration / 3600), 1),
            )
        )
    if not rows:
        return rows

    rows.sort(key=lambda row: row.duration_seconds)
    fastest = rows[0].duration_seconds
    slowest = rows[-1].duration_seconds
    for row in rows:
        row.is_fastest = row.duration_seconds == fastest
        if row.duration_seconds < slowest:
            saved = slowest - row.duration_seconds
            row.saved_minutes = round(saved / 60)
            row.saved_percent = round(saved / slowest * 100)
    return rows


__all__ = [
    "ModeResult",
    "compare_modes",
    "cycling_slower_than_walking",
    "nominal_cycling_seconds",
    "reconcile_modes",
]
