"""Route acquisition with plausibility correction and straight-line fallback."""

from __future__ import annotations

import asyncio
import logging
from typing import Any, Iterable, Optional

from safestep.domain.constants import STRAIGHT_LINE_BUFFER
from safestep.domain.enums import RouteQuality, TravelMode
from safestep.domain.models import Coordinate, RouteResult
from safestep.planner.distance import haversine, round_half_up
from safestep.planner.route_realism import check_duration, expected_duration_seconds
from safestep.security.key_manager import get_key_manager
from safestep.tools.interfaces import RawRoute, RouteInput, RouteTool

_MAX_DIAGNOSTIC_EVENTS = 50
_LOGGER = logging.getLogger("safestep.routing")


def straight_line_route(origin: Coordinate, destination: Coordinate, mode: TravelMode) -> RouteResult:
    """Two-point estimate: haversine x 1.2 at the mode's expected speed."""
    distance_km = haversine(origin.lat, origin.lon, destination.lat, destination.lon) * STRAIGHT_LINE_BUFFER
    duration = expected_duration_seconds(distance_km * 1000, mode)
    return RouteResult(
        mode=mode,
        geometry=(origin.as_tuple(), destination.as_tuple()),
        distance_meters=round_half_up(distance_km * 1000),
        duration_seconds=round_half_up(duration),
        quality=RouteQuality.STRAIGHT_LINE,
        was_corrected=True,
        correction_reason="routing service unavailable; straight-line estimate",
    )


def validate_route(raw: RawRoute, mode: TravelMode) -> RouteResult:
    check = check_duration(raw.distance_meters, raw.duration_seconds, mode)
    if check.corrected:
        _LOGGER.warning(
            "%s duration looks unrealistic (%.0fs vs expected %.0fs), using calculated duration",
            mode.value,
            raw.duration_seconds,
            check.expected_seconds,
        )
    return RouteResult(
        mode=mode,
        geometry=tuple(raw.geometry),
        distance_meters=round_half_up(raw.distance_meters),
        duration_seconds=round_half_up(check.duration_seconds),
        quality=RouteQuality.CORRECTED if check.corrected else RouteQuality.ROUTED,
        was_corrected=check.corrected,
        correction_reason=check.reason,
    )


class RouteService:
    """Fetches one validated route per mode; never raises for upstream failures."""

    def __init__(self, route_tool: RouteTool) -> None:
        self._route_tool = route_tool
        self._fallback_count = 0
        self._correction_count = 0
        self._diagnostic_events: list[dict[str, Any]] = []

    def _record_event(self, event: dict[str, Any]) -> None:
        self._diagnostic_events.append(event)
        if len(self._diagnostic_events) > _MAX_DIAGNOSTIC_EVENTS:
            self._diagnostic_events = self._diagnostic_events[-_MAX_DIAGNOSTIC_EVENTS:]

    def _record_fallback(self, mode: TravelMode, error: Exception) -> None:
        self._fallback_count += 1
        safe_msg = get_key_manager().scrub_text(str(error))
        self._record_event({
            "route_quality": RouteQuality.STRAIGHT_LINE.value,
            "mode": mode.value,
            "error_type": type(error).__name__,
            "error_message": safe_msg,
        })
        _LOGGER.warning(
            "routing fallback to straight line: mode=%s error=%s",
            mode.value,
            type(error).__name__,
        )

    async def get_route(self, origin: Coordinate, destination: Coordinate, mode: TravelMode) -> RouteResult:
        mode = TravelMode(mode)
        params = RouteInput(
            origin_lat=origin.lat,
            origin_lon=origin.lon,
            dest_lat=destination.lat,
            dest_lon=destination.lon,
            mode=mode,
        )
        try:
            raw = await self._route_tool.fetch_route(params)
            result = validate_route(raw, mode)
        except asyncio.CancelledError:
            raise
        except Exception as exc:
            self._record_fallback(mode, exc)
            return straight_line_route(origin, destination, mode)

        if result.was_corrected:
            self._correction_count += 1
            self._record_event({
                "route_quality": result.quality.value,
                "mode": mode.value,
                "reason": result.correction_reason,
            })
        return result

    async def get_all_routes(
        self,
        origin: Coordinate,
        destination: Coordinate,
        modes: Optional[Iterable[TravelMode]] = None,
    ) -> dict[TravelMode, RouteResult]:
        """Fetch every mode concurrently; each fetch resolves on its own."""
        selected = list(dict.fromkeys(TravelMode(m) for m in (modes or list(TravelMode))))
        results = await asyncio.gather(*(self.get_route(origin, destination, mode) for mode in selected))
        return dict(zip(selected, results))

    def get_fallback_count(self) -> int:
        return self._fallback_count

    def get_diagnostics(self) -> dict[str, Any]:
        return {
            "fallback_count": self._fallback_count,
            "correction_count": self._correction_count,
            "events": list(self._diagnostic_events),
        }


__all__ = ["RouteService", "straight_line_route", "validate_route"]
