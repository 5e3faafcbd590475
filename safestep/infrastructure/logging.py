"""Structured logging: JSON lines with secret scrubbing."""

from __future__ import annotations

import json
import sys
import time
import uuid
from typing import Any, Optional


def _get_scrubber():
    """Imported lazily to avoid a cycle with the security package."""
    from safestep.security.key_manager import get_key_manager

    return get_key_manager()


class StructuredLogger:
    """Emit one JSON object per line, scrubbed of known secrets."""

    def __init__(self, trace_id: Optional[str] = None, output=None):
        self.trace_id = trace_id or str(uuid.uuid4())[:8]
        self._output = output

    def _scrub(self, text: str) -> str:
        return _get_scrubber().scrub_text(text)

    def _emit(self, data: dict[str, Any]) -> None:
        data["trace_id"] = self.trace_id
        data["timestamp"] = time.time()
        out = self._output or sys.stderr
        try:
            line = json.dumps(data, ensure_ascii=False, default=str)
            out.write(self._scrub(line) + "\n")
            out.flush()
        except (OSError, ValueError) as exc:
            fallback = {
                "event": "logger_internal_error",
                "trace_id": self.trace_id,
                "timestamp": time.time(),
                "error": str(exc),
            }
            sys.stderr.write(json.dumps(fallback, ensure_ascii=False, default=str) + "\n")

    def tier_start(self, chain: str, tier: str, **extra: Any) -> None:
        self._emit({"event": "tier_start", "chain": chain, "tier": tier, **extra})

    def tier_end(self, chain: str, tier: str, duration_ms: float, **extra: Any) -> None:
        self._emit({
            "event": "tier_end",
            "chain": chain,
            "tier": tier,
            "duration_ms": duration_ms,
            **extra,
        })

    def tier_failed(self, chain: str, tier: str, error: str, duration_ms: float, **extra: Any) -> None:
        self._emit({
            "event": "tier_failed",
            "chain": chain,
            "tier": tier,
            "duration_ms": duration_ms,
            "error": self._scrub(error),
            **extra,
        })

    def chain_result(self, chain: str, provenance: str, failures: int, **extra: Any) -> None:
        self._emit({"event": "chain_result", "chain": chain, "provenance": provenance, "failures": failures, **extra})


def get_logger(trace_id: Optional[str] = None) -> StructuredLogger:
    """New logger per chain run, so concurrent runs never share a trace id."""
    return StructuredLogger(trace_id=trace_id)


__all__ = ["StructuredLogger", "get_logger"]
