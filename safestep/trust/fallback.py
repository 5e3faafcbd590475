"""Ordered tier fallback.

A chain is an explicit list of attempts tried strictly in order. Each attempt
resolves to a ``TierSuccess`` or ``TierFailure`` value; the first success
wins and a synchronous terminal estimator closes the chain, so a chain
always produces a value.
"""

from __future__ import annotations

import asyncio
import logging
import time
from dataclasses import dataclass, field
from typing import Awaitable, Callable, Generic, Optional, Sequence, TypeVar, Union

from safestep.domain.enums import Provenance
from safestep.infrastructure.logging import StructuredLogger, get_logger
from safestep.security.key_manager import get_key_manager

T = TypeVar("T")

_LOGGER = logging.getLogger("safestep.fallback")


def _elapsed_ms(started: float) -> float:
    return round((time.monotonic() - started) * 1000, 1)


@dataclass(frozen=True)
class Attempt(Generic[T]):
    provenance: Provenance
    name: str
    run: Callable[[], Awaitable[T]]


@dataclass(frozen=True)
class TierSuccess(Generic[T]):
    provenance: Provenance
    value: T


@dataclass(frozen=True)
class TierFailure:
    provenance: Provenance
    name: str
    error_type: str
    message: str


TierOutcome = Union[TierSuccess[T], TierFailure]


@dataclass(frozen=True)
class ChainResult(Generic[T]):
    value: T
    provenance: Provenance
    failures: tuple[TierFailure, ...] = field(default_factory=tuple)


async def run_attempt(
    attempt: Attempt[T],
    *,
    chain: str,
    timeout: Optional[float] = None,
    slog: Optional[StructuredLogger] = None,
) -> TierOutcome:
    slog = slog or get_logger()
    slog.tier_start(chain, attempt.name)
    started = time.monotonic()
    try:
        if timeout is not None:
            value = await asyncio.wait_for(attempt.run(), timeout=timeout)
        else:
            value = await attempt.run()
    except Exception as exc:
        message = get_key_manager().scrub_text(str(exc)) or type(exc).__name__
        slog.tier_failed(
            chain,
            attempt.name,
            message,
            duration_ms=_elapsed_ms(started),
            error_type=type(exc).__name__,
        )
        _LOGGER.warning("%s tier %s failed: %s", chain, attempt.name, type(exc).__name__)
        return TierFailure(
            provenance=attempt.provenance,
            name=attempt.name,
            error_type=type(exc).__name__,
            message=message,
        )
    slog.tier_end(chain, attempt.name, duration_ms=_elapsed_ms(started))
    return TierSuccess(provenance=attempt.provenance, value=value)


async def run_chain(
    chain: str,
    attempts: Sequence[Attempt[T]],
    terminal: Callable[[], T],
    *,
    timeout: Optional[float] = None,
    slog: Optional[StructuredLogger] = None,
) -> ChainResult[T]:
    """Return the first successful attempt, else the terminal estimate."""
    slog = slog or get_logger()
    failures: list[TierFailure] = []
    for attempt in attempts:
        outcome = await run_attempt(attempt, chain=chain, timeout=timeout, slog=slog)
        if isinstance(outcome, TierSuccess):
            slog.chain_result(chain, outcome.provenance.value, len(failures))
            return ChainResult(value=outcome.value, provenance=outcome.provenance, failures=tuple(failures))
        failures.append(outcome)

    slog.chain_result(chain, Provenance.HEURISTIC.value, len(failures))
    return ChainResult(value=terminal(), provenance=Provenance.HEURISTIC, failures=tuple(failures))


__all__ = [
    "Attempt",
    "TierSuccess",
    "TierFailure",
    "TierOutcome",
    "ChainResult",
    "run_attempt",
    "run_chain",
]
