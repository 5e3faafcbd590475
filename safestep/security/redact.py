"""Helpers for redacting sensitive values in logs and error strings."""

from __future__ import annotations

import re

_REDACTED = "***REDACTED***"

_QUERY_VALUE_RE = re.compile(
    r"(?i)(?P<prefix>\b(?:key|api[_-]?key|token|secret|signature|sig|password)\s*=\s*)(?P<value>[^&\s\"']+)"
)
_JSON_KV_RE = re.compile(
    r"(?i)(?P<prefix>(?:[\"']?(?:api[_-]?key|x-goog-api-key|token|secret|password)[\"']?\s*[:=]\s*[\"']?))(?P<value>[^\"',\s}]+)"
)
_AUTH_HEADER_RE = re.compile(
    r"(?i)(?P<prefix>\bauthorization\s*:\s*(?:bearer|basic|token)\s+)(?P<value>[^\s,;]+)"
)
_GOOG_HEADER_RE = re.compile(
    r"(?i)(?P<prefix>\bx-goog-api-key\s*:\s*)(?P<value>[^\s,;]+)"
)
_BEARER_RE = re.compile(
    r"(?i)(?P<prefix>\bbearer\s+)(?P<value>[A-Za-z0-9._~+/=-]+)"
)
_GOOGLE_KEY_RE = re.compile(r"\bAIza[0-9A-Za-z_-]{20,}\b")
_GROQ_KEY_RE = re.compile(r"\bgsk_[A-Za-z0-9]{16,}\b")
_OPENAI_STYLE_KEY_RE = re.compile(r"\bsk-[A-Za-z0-9_-]{8,}\b")


def _replace_value(pattern: re.Pattern[str], text: str) -> str:
    def repl(match: re.Match[str]) -> str:
        return f"{match.group('prefix')}{_REDACTED}"

    return pattern.sub(repl, text)


def redact_sensitive(text: str) -> str:
    """Redact common secret patterns while preserving surrounding context."""
    if not text:
        return text

    redacted = str(text)

    value_patterns: tuple[re.Pattern[str], ...] = (
        _QUERY_VALUE_RE,
        _JSON_KV_RE,
        _AUTH_HEADER_RE,
        _GOOG_HEADER_RE,
        _BEARER_RE,
    )
    for pattern in value_patterns:
        redacted = _replace_value(pattern, redacted)

    full_patterns: tuple[re.Pattern[str], ...] = (
        _GOOGLE_KEY_RE,
        _GROQ_KEY_RE,
        _OPENAI_STYLE_KEY_RE,
    )
    for pattern in full_patterns:
        redacted = pattern.sub(_REDACTED, redacted)
    return redacted


__all__ = ["redact_sensitive"]
