"""Route adapters."""

from safestep.adapters.route.osrm import OsrmRouteTool, build_route_url, parse_route_payload

__all__ = ["OsrmRouteTool", "build_route_url", "parse_route_payload"]
