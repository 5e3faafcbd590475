"""Gemini adapter (primary AI tier).

REST endpoint: POST {base}/models/{model}:generateContent with the key in the
``x-goog-api-key`` header. JSON mode sets ``responseMimeType``.
"""

from __future__ import annotations

from typing import Any, Optional

import httpx

from safestep.config.settings import Settings
from safestep.domain.enums import Provenance
from safestep.security.http_client import SecureHttpClient
from safestep.security.key_manager import get_key_manager
from safestep.shared.exceptions import ToolError


def extract_text(data: Any) -> str:
    try:
        parts = data["candidates"][0]["content"]["parts"]
        text = "".join(str(part.get("text", "")) for part in parts)
    except (KeyError, IndexError, TypeError, AttributeError):
        raise ToolError("gemini", "response has no candidate text") from None
    if not text.strip():
        raise ToolError("gemini", "empty response")
    return text


class GeminiModel:
    name = "gemini"
    provenance = Provenance.PRIMARY_AI

    def __init__(self, settings: Settings, *, transport: Optional[httpx.AsyncBaseTransport] = None) -> None:
        self._url = f"{settings.gemini_base_url.rstrip('/')}/models/{settings.gemini_model}:generateContent"
        self._http = SecureHttpClient(
            tool_name="gemini",
            timeout=settings.ai_timeout_seconds,
            max_retries=0,
            transport=transport,
        )

    async def complete(self, prompt: str, *, json_mode: bool = True) -> str:
        api_key = get_key_manager().get_gemini_key(required=True)
        body: dict[str, Any] = {"contents": [{"role": "user", "parts": [{"text": prompt}]}]}
        if json_mode:
            body["generationConfig"] = {"responseMimeType": "application/json"}
        data = await self._http.post_json(self._url, json=body, headers={"x-goog-api-key": api_key})
        return extract_text(data)


__all__ = ["GeminiModel", "extract_text"]
