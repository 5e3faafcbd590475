"""Domain package exports."""

from safestep.domain.enums import Provenance, RiskLevel, RouteQuality, TimeOfDay, TravelMode
from safestep.domain.exceptions import DomainError, LocationResolutionError
from safestep.domain.models import (
    Coordinate,
    DangerZone,
    ModeComparison,
    RouteResult,
    SafetyEstimate,
    TimeEstimate,
    TimeRestriction,
)

__all__ = [
    "Coordinate",
    "DangerZone",
    "DomainError",
    "LocationResolutionError",
    "ModeComparison",
    "Provenance",
    "RiskLevel",
    "RouteQuality",
    "RouteResult",
    "SafetyEstimate",
    "TimeEstimate",
    "TimeOfDay",
    "TimeRestriction",
    "TravelMode",
]
