"""Static danger-zone reference data and route checks."""

from __future__ import annotations

import json
from datetime import datetime
from functools import lru_cache
from pathlib import Path
from typing import Iterable, Optional, Sequence

from safestep.domain.models import DangerZone, LatLon
from safestep.planner.distance import haversine_distance

_ZONES_FILE = Path(__file__).resolve().parents[1] / "data" / "danger_zones.json"


def _parse_zones(data: dict) -> tuple[DangerZone, ...]:
    return tuple(DangerZone.model_validate(row) for row in data.get("danger_zones", []))


@lru_cache(maxsize=4)
def _load_file(path: str) -> tuple[DangerZone, ...]:
    with open(path, encoding="utf-8") as fh:
        return _parse_zones(json.load(fh))


def load_danger_zones(path: Optional[Path] = None) -> tuple[DangerZone, ...]:
    """Zones are loaded once per file and shared read-only."""
    return _load_file(str(path or _ZONES_FILE))


def is_point_in_zone(lat: float, lon: float, zone: DangerZone, buffer_meters: float = 0.0) -> bool:
    return haversine_distance(lat, lon, zone.lat, zone.lon) <= zone.radius_meters + buffer_meters


def find_intersecting_zones(
    path: Sequence[LatLon],
    zones: Iterable[DangerZone],
    buffer_meters: float = 100.0,
) -> list[DangerZone]:
    """Zones whose radius plus buffer touches any route vertex, in zone order."""
    hits: list[DangerZone] = []
    for zone in zones:
        if any(is_point_in_zone(lat, lon, zone, buffer_meters) for lat, lon in path):
            hits.append(zone)
    return hits


def _weekday_sunday_first(moment: datetime) -> int:
    return (moment.weekday() + 1) % 7


def _in_hour_window(hour: int, start: int, end: int) -> bool:
    if start <= end:
        return start <= hour < end
    # window wraps past midnight, e.g. 22 -> 4
    return hour >= start or hour < end


def safety_warning(zone: DangerZone, now: datetime) -> Optional[str]:
    restriction = zone.time_restrictions
    if restriction is None:
        return f"High-risk area: {zone.name}. {zone.description}".strip()

    in_window = _in_hour_window(now.hour, restriction.start_hour, restriction.end_hour)
    on_day = restriction.days_of_week is None or _weekday_sunday_first(now) in restriction.days_of_week
    if in_window and on_day:
        return (
            f"CAUTION: {zone.name} has restricted access "
            f"{restriction.start_hour}:00-{restriction.end_hour}:00. {zone.description}"
        ).strip()
    return None


def active_warnings(zones: Iterable[DangerZone], now: datetime) -> list[str]:
    return [w for w in (safety_warning(zone, now) for zone in zones) if w]


__all__ = [
    "load_danger_zones",
    "is_point_in_zone",
    "find_intersecting_zones",
    "safety_warning",
    "active_warnings",
]
