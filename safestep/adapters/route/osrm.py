"""OSRM route adapter.

Endpoints are chosen per travel mode from ``Settings.routing``; the public
OSRM demo server serves ``foot`` and ``bike`` profiles and the
openstreetmap.de car server serves ``driving``.
Wire format: ``{routes: [{geometry: {coordinates: [[lon, lat], ...]}, distance, duration}]}``.
"""

from __future__ import annotations

import logging
from typing import Any, Optional

import httpx

from safestep.config.settings import RoutingEndpoint, Settings
from safestep.domain.enums import TravelMode
from safestep.security.http_client import SecureHttpClient
from safestep.tools.interfaces import RawRoute, RouteInput, ToolError

_LOGGER = logging.getLogger("safestep.routing")


def _format_location(lat: float, lon: float) -> str:
    """OSRM coordinate order is lon,lat."""
    return f"{lon},{lat}"


def build_route_url(endpoint: RoutingEndpoint, params: RouteInput) -> str:
    origin = _format_location(params.origin_lat, params.origin_lon)
    destination = _format_location(params.dest_lat, params.dest_lon)
    return f"{endpoint.base_url.rstrip('/')}/{endpoint.profile}/{origin};{destination}"


def parse_route_payload(data: Any) -> RawRoute:
    if not isinstance(data, dict):
        raise ToolError("osrm_route", "response body is not an object")
    routes = data.get("routes") or []
    if not routes:
        code = data.get("code", "unknown")
        raise ToolError("osrm_route", f"no route found (code={code})")

    route = routes[0]
    try:
        coordinates = route["geometry"]["coordinates"]
        geometry = [(float(lat), float(lon)) for lon, lat in coordinates]
        distance = float(route["distance"])
        duration = float(route["duration"])
    except (KeyError, TypeError, ValueError) as exc:
        raise ToolError("osrm_route", f"malformed route payload: {type(exc).__name__}") from None

    if len(geometry) < 2:
        raise ToolError("osrm_route", "route geometry has fewer than two points")
    return RawRoute(geometry=geometry, distance_meters=distance, duration_seconds=duration)


class OsrmRouteTool:
    def __init__(
        self,
        settings: Settings,
        *,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self._endpoints = settings.routing
        self._http = SecureHttpClient(
            tool_name="osrm_route",
            timeout=settings.route_timeout_seconds,
            max_retries=0,
            transport=transport,
        )

    async def fetch_route(self, params: RouteInput) -> RawRoute:
        mode = TravelMode(params.mode)
        url = build_route_url(self._endpoints[mode], params)
        _LOGGER.debug("fetching %s route: %s", mode.value, url)
        data = await self._http.get_json(url, params={"overview": "full", "geometries": "geojson"})
        return parse_route_payload(data)


__all__ = ["OsrmRouteTool", "build_route_url", "parse_route_payload"]
