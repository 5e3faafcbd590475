"""FastAPI application exposing the estimation core."""

from __future__ import annotations

import logging
import os

from dotenv import load_dotenv
from fastapi import Depends, FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware

from safestep import __version__
from safestep.api.schemas import AnalyzeRequest, AnalyzeResponse, HealthResponse, JourneyRequestBody
from safestep.config.settings import Settings, resolve_provider_snapshot
from safestep.domain.exceptions import LocationResolutionError
from safestep.security.key_manager import get_key_manager
from safestep.services.journey_service import JourneyPlan, JourneyPlanner, JourneyRequest, build_journey_planner

_api_logger = logging.getLogger("safestep.api")

load_dotenv()

settings = Settings.from_env()

app = FastAPI(
    title="safestep",
    version=__version__,
    docs_url="/docs" if os.getenv("ENABLE_DOCS", "false").lower() == "true" else None,
    redoc_url=None,
)


class SecurityHeadersMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next):
        response = await call_next(request)
        response.headers["X-Content-Type-Options"] = "nosniff"
        response.headers["X-Frame-Options"] = "DENY"
        response.headers["Referrer-Policy"] = "strict-origin-when-cross-origin"
        response.headers["Cache-Control"] = "no-store"
        return response


app.add_middleware(SecurityHeadersMiddleware)
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=False,
    allow_methods=["GET", "POST"],
    allow_headers=["*"],
)

_planner: JourneyPlanner | None = None


def get_planner() -> JourneyPlanner:
    global _planner
    if _planner is None:
        _planner = build_journey_planner(settings)
    return _planner


@app.exception_handler(LocationResolutionError)
async def _location_error_handler(_request: Request, exc: LocationResolutionError) -> JSONResponse:
    return JSONResponse(status_code=422, content={"error": str(exc)})


@app.get("/health", response_model=HealthResponse)
async def health():
    return HealthResponse(status="ok")


@app.post("/analyze", response_model=AnalyzeResponse)
async def analyze(req: AnalyzeRequest, planner: JourneyPlanner = Depends(get_planner)):
    if not req.origin.strip() or not req.destination.strip():
        return JSONResponse(status_code=400, content={"error": "Missing origin or destination"})

    estimate = await planner.safety_service.analyze(req.origin.strip(), req.destination.strip(), req.mode)
    return AnalyzeResponse(
        score=estimate.score,
        tip=estimate.explanation,
        provenance=estimate.provenance,
        is_live=estimate.is_live,
    )


@app.post("/journey", response_model=JourneyPlan)
async def journey(body: JourneyRequestBody, planner: JourneyPlanner = Depends(get_planner)):
    request = JourneyRequest(**body.model_dump())
    return await planner.plan(request)


@app.get("/diagnostics")
def diagnostics(planner: JourneyPlanner = Depends(get_planner)):
    """Provider status, cache hit rate and routing fallbacks. Protect this in production."""
    return {
        "providers": resolve_provider_snapshot().model_dump(),
        "safety_cache": planner.safety_service.cache_stats,
        "routing": planner.route_service.get_diagnostics(),
    }


def _safe_log_exception(context: str, exc: Exception) -> None:
    _api_logger.error("%s: %s", context, get_key_manager().scrub_text(str(exc)))


@app.exception_handler(Exception)
async def _unhandled_error_handler(_request: Request, exc: Exception) -> JSONResponse:
    _safe_log_exception("unhandled api error", exc)
    return JSONResponse(status_code=500, content={"error": "Internal Server Error"})
