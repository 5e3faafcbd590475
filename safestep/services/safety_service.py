"""Safety scoring pipeline: primary AI, secondary AI, fixed offline estimate."""

from __future__ import annotations

import logging
import math
from datetime import datetime
from functools import partial
from typing import Optional, Sequence

from pydantic import BaseModel, Field, field_validator

from safestep.domain.constants import HEURISTIC_SAFETY_SCORE, SAFETY_SCORE_MAX, SAFETY_SCORE_MIN
from safestep.domain.enums import Provenance, TravelMode
from safestep.domain.models import SafetyEstimate
from safestep.infrastructure.cache import Cache, NullCache, make_cache_key
from safestep.parsing.json_payload import parse_json_object
from safestep.tools.interfaces import TextModel
from safestep.trust.fallback import Attempt, run_chain

_LOGGER = logging.getLogger("safestep.safety")

_MODE_PHRASE = {
    TravelMode.WALKING: "walking",
    TravelMode.CYCLING: "cycling",
    TravelMode.DRIVING: "driving",
}


class SafetyPayload(BaseModel):
    score: float = Field(strict=True)
    tip: str = Field(strict=True, min_length=1)

    @field_validator("score")
    @classmethod
    def _finite(cls, value: float) -> float:
        if not math.isfinite(value):
            raise ValueError("score must be finite")
        return value


def build_safety_prompt(
    origin: str,
    destination: str,
    mode: TravelMode,
    now: datetime,
    *,
    json_only: bool = False,
) -> str:
    prompt = f"""
You are a realistic safety auditor providing real-time navigation advice.
Analyze the route from {origin} to {destination} for a user who is {_MODE_PHRASE[mode]}.
The current local time is {now.strftime("%A %H:%M")}.

CRITICAL SCORING RULES:
- Use the full 1-10 scale. NEVER default to a middle score. Be harsh if needed.
- Main, well-lit roads and busy streets score HIGH (9-10).
- Alleys, unlit parks, isolated or desolate areas score LOW (1-4), especially at night.
- Average residential areas score MODERATE (6-8).

OUTPUT REQUIREMENTS:
- The tip must be detailed (2-3 sentences).
- Mention real-time factors such as lighting coverage, likely crowd density and visibility.
- If the score is low, suggest an alternative action (e.g. "Keep to the main avenue").

Output ONLY valid JSON in this format: {{ "score": number, "tip": "string" }}
""".strip()
    if json_only:
        prompt += "\nReturn the JSON object only, with no markdown and no commentary."
    return prompt


def heuristic_safety(mode: TravelMode) -> SafetyEstimate:
    return SafetyEstimate(
        score=HEURISTIC_SAFETY_SCORE,
        explanation=(
            f"Offline estimate for this {_MODE_PHRASE[mode]} route: stay on main roads with good lighting "
            "and keep to areas with other people around. Live analysis is currently unavailable."
        ),
        provenance=Provenance.HEURISTIC,
    )


def normalize_score(score: float) -> tuple[float, bool]:
    clamped = min(SAFETY_SCORE_MAX, max(SAFETY_SCORE_MIN, score))
    return clamped, clamped != score


class SafetyService:
    def __init__(
        self,
        models: Sequence[TextModel],
        *,
        cache: Optional[Cache] = None,
        timeout: Optional[float] = None,
    ) -> None:
        self._models = list(models)
        self._cache = cache if cache is not None else NullCache()
        self._timeout = timeout

    @property
    def cache_stats(self) -> dict:
        return dict(getattr(self._cache, "stats", {}))

    async def _ask(self, model: TextModel, prompt: str) -> SafetyEstimate:
        raw = await model.complete(prompt, json_mode=True)
        payload = SafetyPayload.model_validate(parse_json_object(raw))
        score, clamped = normalize_score(payload.score)
        if clamped:
            _LOGGER.warning("%s returned out-of-range score %s, clamped to %s", model.name, payload.score, score)
        return SafetyEstimate(
            score=score,
            explanation=payload.tip.strip(),
            provenance=model.provenance,
            was_clamped=clamped,
        )

    async def analyze(
        self,
        origin: str,
        destination: str,
        mode: TravelMode = TravelMode.WALKING,
        now: Optional[datetime] = None,
    ) -> SafetyEstimate:
        mode = TravelMode(mode)
        now = now or datetime.now()
        key = make_cache_key("safety", origin, destination, mode.value)
        cached = self._cache.get(key)
        if cached is not None:
            return cached

        attempts = [
            Attempt(
                provenance=model.provenance,
                name=model.name,
                run=partial(
                    self._ask,
                    model,
                    build_safety_prompt(origin, destination, mode, now, json_only=index > 0),
                ),
            )
            for index, model in enumerate(self._models)
        ]
        result = await run_chain("safety", attempts, partial(heuristic_safety, mode), timeout=self._timeout)
        if result.provenance != Provenance.HEURISTIC:
            self._cache.set(key, result.value)
        return result.value


__all__ = [
    "SafetyPayload",
    "SafetyService",
    "build_safety_prompt",
    "heuristic_safety",
    "normalize_score",
]
