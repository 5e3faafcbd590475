"""Domain enums."""

from enum import Enum


class TravelMode(str, Enum):
    WALKING = "walking"
    CYCLING = "cycling"
    DRIVING = "driving"


class Provenance(str, Enum):
    PRIMARY_AI = "primary_ai"
    SECONDARY_AI = "secondary_ai"
    HEURISTIC = "heuristic"


class RouteQuality(str, Enum):
    ROUTED = "routed"
    CORRECTED = "corrected"
    STRAIGHT_LINE = "straight_line"


class RiskLevel(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    CRITICAL = "critical"


class TimeOfDay(str, Enum):
    EARLY_MORNING = "early_morning"
    MORNING = "morning"
    AFTERNOON = "afternoon"
    EVENING = "evening"
    NIGHT = "night"
