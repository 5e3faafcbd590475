"""Deterministic distance and travel-time estimation."""

from __future__ import annotations

import math

from safestep.domain.constants import DISPLAY_SPEED_KMH, EARTH_RADIUS_KM
from safestep.domain.enums import TravelMode
from safestep.shared.exceptions import ToolError


def deg2rad(degrees: float) -> float:
    return degrees * (math.pi / 180)


def rad2deg(radians: float) -> float:
    return radians * (180 / math.pi)


def haversine(lat1: float, lon1: float, lat2: float, lon2: float) -> float:
    """Great-circle distance in kilometres."""
    dlat = deg2rad(lat2 - lat1)
    dlon = deg2rad(lon2 - lon1)
    a = (
        math.sin(dlat / 2) ** 2
        + math.cos(deg2rad(lat1))
        * math.cos(deg2rad(lat2))
        * math.sin(dlon / 2) ** 2
    )
    return EARTH_RADIUS_KM * 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))


def haversine_distance(lat1: float, lon1: float, lat2: float, lon2: float) -> float:
    """Great-circle distance in metres."""
    return haversine(lat1, lon1, lat2, lon2) * 1000


def round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def estimate_travel_time(distance_meters: float, mode: TravelMode | str) -> int:
    """Quick display estimate in seconds at conservative urban speeds."""
    try:
        speed = DISPLAY_SPEED_KMH[TravelMode(mode)]
    except ValueError:
        raise ToolError("distance_estimator", f"Unknown transport mode: {mode}") from None
    return round_half_up((distance_meters / 1000) / speed * 3600)


__all__ = [
    "deg2rad",
    "rad2deg",
    "haversine",
    "haversine_distance",
    "round_half_up",
    "estimate_travel_time",
]
