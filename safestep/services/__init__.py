"""Application services."""

from safestep.services.eta_service import EtaService
from safestep.services.journey_service import JourneyPlan, JourneyPlanner, JourneyRequest, build_journey_planner
from safestep.services.safety_service import SafetyService

__all__ = [
    "EtaService",
    "JourneyPlan",
    "JourneyPlanner",
    "JourneyRequest",
    "SafetyService",
    "build_journey_planner",
]
