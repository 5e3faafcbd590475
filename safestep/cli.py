"""safestep CLI: estimate a journey between two coordinates."""

from __future__ import annotations

import argparse
import asyncio
import json
import sys

from dotenv import load_dotenv
from pydantic import ValidationError

from safestep.config.settings import Settings
from safestep.domain.enums import Provenance, TravelMode
from safestep.domain.models import Coordinate
from safestep.planner.distance import estimate_travel_time, haversine_distance
from safestep.services.journey_service import JourneyPlan, JourneyRequest, build_journey_planner

_PROVENANCE_LABEL = {
    Provenance.PRIMARY_AI: "AI live (primary)",
    Provenance.SECONDARY_AI: "AI live (backup)",
    Provenance.HEURISTIC: "offline estimate",
}


def parse_coordinate(text: str) -> Coordinate:
    try:
        lat, lon = (float(part) for part in text.split(","))
        return Coordinate(lat=lat, lon=lon)
    except (ValueError, ValidationError):
        raise argparse.ArgumentTypeError(f"expected 'lat,lon', got {text!r}") from None


def format_duration(seconds: int) -> str:
    hours, rest = divmod(int(seconds), 3600)
    minutes = rest // 60
    return f"{hours}h {minutes}m" if hours else f"{minutes}m"


def format_quick_estimate(origin: Coordinate, destination: Coordinate) -> str:
    """Direct-distance estimate shown while routes are still being fetched."""
    distance = haversine_distance(origin.lat, origin.lon, destination.lat, destination.lon)
    parts = [f"{mode.value} {format_duration(estimate_travel_time(distance, mode))}" for mode in TravelMode]
    return f"Quick estimate ({distance / 1000:.2f} km direct): " + ", ".join(parts)


def format_plan(plan: JourneyPlan) -> str:
    lines: list[str] = []
    safety = plan.safety
    lines.append(f"Safety score: {safety.score:g}/10  [{_PROVENANCE_LABEL[safety.provenance]}]")
    lines.append(f"  {safety.explanation}")
    lines.append("")
    lines.append("Travel time analysis")
    lines.append("-" * 40)
    for row in plan.comparison:
        time = plan.times.get(row.mode)
        arrival = f"  arrives {time.arrival_clock_time}" if time else ""
        badge = "  FASTEST" if row.is_fastest else ""
        lines.append(
            f"  {row.mode.value:<8} {format_duration(row.duration_seconds):>7}  "
            f"{row.distance_km:.2f} km  {row.average_speed_kmh:.1f} km/h{arrival}{badge}"
        )
    for warning in plan.warnings:
        lines.append(f"! {warning}")
    for zone in plan.danger_zones:
        if zone.alternate_route:
            lines.append(f"  alternative near {zone.name}: {zone.alternate_route}")
    return "\n".join(lines)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="safestep", description=__doc__)
    parser.add_argument("--from", dest="origin", type=parse_coordinate, required=True, help="origin as lat,lon")
    parser.add_argument("--to", dest="destination", type=parse_coordinate, required=True, help="destination as lat,lon")
    parser.add_argument(
        "--mode",
        choices=[m.value for m in TravelMode],
        default=TravelMode.WALKING.value,
        help="travel mode used for the safety score",
    )
    parser.add_argument("--origin-label", default="", help="human readable origin")
    parser.add_argument("--destination-label", default="", help="human readable destination")
    parser.add_argument("--json", action="store_true", help="print the raw plan as JSON")
    return parser


def main(argv: list[str] | None = None) -> int:
    load_dotenv()
    args = build_parser().parse_args(argv)
    if not args.json:
        print(format_quick_estimate(args.origin, args.destination), flush=True)
    planner = build_journey_planner(Settings.from_env())
    request = JourneyRequest(
        origin=args.origin,
        destination=args.destination,
        origin_label=args.origin_label,
        destination_label=args.destination_label,
        travel_mode=TravelMode(args.mode),
    )
    plan = asyncio.run(planner.plan(request))
    if args.json:
        print(json.dumps(plan.model_dump(mode="json"), ensure_ascii=False, indent=2))
    else:
        print(format_plan(plan))
    return 0


if __name__ == "__main__":
    sys.exit(main())
