"""Groq adapter (secondary AI tier), OpenAI-compatible chat completions."""

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
        text = data["choices"][0]["message"]["content"] or ""
    except (KeyError, IndexError, TypeError):
        raise ToolError("groq", "response has no message content") from None
    if not str(text).strip():
        raise ToolError("groq", "empty response")
    return str(text)


class GroqModel:
    name = "groq"
    provenance = Provenance.SECONDARY_AI

    def __init__(self, settings: Settings, *, transport: Optional[httpx.AsyncBaseTransport] = None) -> None:
        self._url = f"{settings.groq_base_url.rstrip('/')}/chat/completions"
        self._model = settings.groq_model
        self._http = SecureHttpClient(
            tool_name="groq",
            timeout=settings.ai_timeout_seconds,
            max_retries=0,
            transport=transport,
        )

    async def complete(self, prompt: str, *, json_mode: bool = True) -> str:
        api_key = get_key_manager().get_groq_key(required=True)
        body: dict[str, Any] = {
            "model": self._model,
            "messages": [{"role": "user", "content": prompt}],
            "temperature": 0.3,
        }
        if json_mode:
            body["response_format"] = {"type": "json_object"}
        data = await self._http.post_json(
            self._url,
            json=body,
            headers={"Authorization": f"Bearer {api_key}"},
        )
        return extract_text(data)


__all__ = ["GroqModel", "extract_text"]
