"""Tiered fallback and trust indicators."""

from safestep.trust.fallback import Attempt, ChainResult, TierFailure, TierSuccess, run_attempt, run_chain

__all__ = ["Attempt", "ChainResult", "TierFailure", "TierSuccess", "run_attempt", "run_chain"]
