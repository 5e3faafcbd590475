"""Domain constants for route validation and time estimation."""

from safestep.domain.enums import Provenance, TravelMode

EARTH_RADIUS_KM = 6371.0

# Expected average speeds (km/h) for plausibility checks and fallback routes.
EXPECTED_SPEED_KMH = {
    TravelMode.WALKING: 5.0,
    TravelMode.CYCLING: 15.0,
    TravelMode.DRIVING: 50.0,
}

# Conservative urban speeds used for quick display estimates.
DISPLAY_SPEED_KMH = {
    TravelMode.WALKING: 5.0,
    TravelMode.CYCLING: 15.0,
    TravelMode.DRIVING: 40.0,
}

PLAUSIBLE_UPPER_RATIO = 2.0
PLAUSIBLE_LOWER_RATIO = 0.3
STRAIGHT_LINE_BUFFER = 1.2

NOMINAL_CYCLING_SPEED_KMH = 15.0
COMPARABLE_DISTANCE_MIN_RATIO = 0.8
COMPARABLE_DISTANCE_MAX_RATIO = 1.2

RUSH_HOURS = frozenset({7, 8, 9, 17, 18, 19})

ACCESS_TIME_SECONDS = {
    TravelMode.WALKING: 0,
    TravelMode.CYCLING: 120,
    TravelMode.DRIVING: 300,
}

TIER_CONFIDENCE = {
    Provenance.PRIMARY_AI: 85,
    Provenance.SECONDARY_AI: 80,
    Provenance.HEURISTIC: 65,
}

HEURISTIC_SAFETY_SCORE = 7.8
SAFETY_SCORE_MIN = 1.0
SAFETY_SCORE_MAX = 10.0

ROUTE_ZONE_BUFFER_METERS = 150.0
