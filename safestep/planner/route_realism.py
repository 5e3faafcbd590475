"""Speed-model plausibility checks and time-of-day travel adjustments."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime

from safestep.domain.constants import (
    ACCESS_TIME_SECONDS,
    EXPECTED_SPEED_KMH,
    PLAUSIBLE_LOWER_RATIO,
    PLAUSIBLE_UPPER_RATIO,
    RUSH_HOURS,
)
from safestep.domain.enums import TimeOfDay, TravelMode

_WALKING_LONG_DISTANCE_M = 3000.0
_WALKING_FACTOR_CAP = 1.3


def expected_duration_seconds(distance_meters: float, mode: TravelMode) -> float:
    return (distance_meters / 1000) / EXPECTED_SPEED_KMH[mode] * 3600


@dataclass(frozen=True)
class PlausibilityCheck:
    duration_seconds: float
    expected_seconds: float
    corrected: bool
    reason: str = ""


def check_duration(distance_meters: float, duration_seconds: float, mode: TravelMode) -> PlausibilityCheck:
    """Replace an upstream duration that falls outside [0.3x, 2x] of the speed model."""
    expected = expected_duration_seconds(distance_meters, mode)
    if duration_seconds > expected * PLAUSIBLE_UPPER_RATIO:
        return PlausibilityCheck(
            duration_seconds=expected,
            expected_seconds=expected,
            corrected=True,
            reason=f"upstream duration {duration_seconds:.0f}s above {PLAUSIBLE_UPPER_RATIO}x expected {expected:.0f}s",
        )
    if duration_seconds < expected * PLAUSIBLE_LOWER_RATIO:
        return PlausibilityCheck(
            duration_seconds=expected,
            expected_seconds=expected,
            corrected=True,
            reason=f"upstream duration {duration_seconds:.0f}s below {PLAUSIBLE_LOWER_RATIO}x expected {expected:.0f}s",
        )
    return PlausibilityCheck(duration_seconds=duration_seconds, expected_seconds=expected, corrected=False)


def is_rush_hour(hour: int) -> bool:
    return hour in RUSH_HOURS


def is_night(hour: int) -> bool:
    return hour < 6 or hour > 21


def time_of_day(moment: datetime) -> TimeOfDay:
    hour = moment.hour
    if hour < 5 or hour >= 21:
        return TimeOfDay.NIGHT
    if hour < 8:
        return TimeOfDay.EARLY_MORNING
    if hour < 12:
        return TimeOfDay.MORNING
    if hour < 17:
        return TimeOfDay.AFTERNOON
    return TimeOfDay.EVENING


@dataclass(frozen=True)
class ContextAdjustment:
    factor: float
    reasons: tuple[str, ...]


def context_factor(mode: TravelMode, hour: int, distance_meters: float) -> ContextAdjustment:
    factor = 1.0
    reasons: list[str] = []

    if mode == TravelMode.DRIVING:
        if is_rush_hour(hour):
            factor = 1.3
            reasons.append("rush-hour traffic +30%")
        elif is_night(hour):
            factor = 0.85
            reasons.append("light night traffic -15%")
    elif mode == TravelMode.CYCLING:
        # Checked in order, the later match wins. The two windows never overlap.
        if is_night(hour):
            factor = 1.15
            reasons.append("reduced night visibility +15%")
        if is_rush_hour(hour):
            factor = 1.1
            reasons.append("rush-hour congestion +10%")
    elif mode == TravelMode.WALKING:
        if is_night(hour):
            factor = 1.2
            reasons.append("cautious night pace +20%")
        if distance_meters > _WALKING_LONG_DISTANCE_M:
            factor = min(factor + 0.1, _WALKING_FACTOR_CAP)
            reasons.append("fatigue over long distance +10%")

    return ContextAdjustment(factor=factor, reasons=tuple(reasons))


def access_time_seconds(mode: TravelMode) -> int:
    return ACCESS_TIME_SECONDS[mode]


__all__ = [
    "PlausibilityCheck",
    "ContextAdjustment",
    "expected_duration_seconds",
    "check_duration",
    "is_rush_hour",
    "is_night",
    "time_of_day",
    "context_factor",
    "access_time_seconds",
]
