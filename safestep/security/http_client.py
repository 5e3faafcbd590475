"""Secure HTTP client, the single exit point for external API calls.

Responsibilities:
  1. scrub API keys out of every exception message
  2. one timeout / retry policy for all callers
  3. keep the httpx dependency in one place
"""

from __future__ import annotations

import asyncio
from typing import Any, Optional

import httpx

from safestep.security.key_manager import get_key_manager
from safestep.shared.exceptions import ToolError

_USER_AGENT = "SafeStep/1.0"


class SecureHttpClient:
    """Async httpx wrapper that scrubs secrets from errors."""

    def __init__(
        self,
        *,
        timeout: float = 10.0,
        max_retries: int = 0,
        tool_name: str = "http",
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self._timeout = timeout
        self._max_retries = max(0, max_retries)
        self._tool_name = tool_name
        self._transport = transport
        self._km = get_key_manager()

    @property
    def timeout(self) -> float:
        return self._timeout

    def _client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(
            timeout=self._timeout,
            transport=self._transport,
            headers={"User-Agent": _USER_AGENT},
        )

    async def get_json(
        self,
        url: str,
        *,
        params: Optional[dict[str, Any]] = None,
        headers: Optional[dict[str, str]] = None,
    ) -> Any:
        return await self._request("GET", url, params=params, headers=headers)

    async def post_json(
        self,
        url: str,
        *,
        json: Optional[dict[str, Any]] = None,
        headers: Optional[dict[str, str]] = None,
    ) -> Any:
        return await self._request("POST", url, json=json, headers=headers)

    async def _request(self, method: str, url: str, **kwargs: Any) -> Any:
        last_error: Optional[Exception] = None

        for attempt in range(1, self._max_retries + 2):
            try:
                async with self._client() as client:
                    resp = await client.request(method, url, **kwargs)
                    resp.raise_for_status()
                    return resp.json()
            except httpx.HTTPStatusError as e:
                safe_msg = self._km.scrub_text(str(e))
                last_error = ToolError(self._tool_name, f"HTTP {e.response.status_code}: {safe_msg}")
            except httpx.TimeoutException:
                last_error = ToolError(self._tool_name, f"request timed out after {self._timeout}s (attempt {attempt})")
            except httpx.HTTPError as e:
                safe_msg = self._km.scrub_text(str(e))
                last_error = ToolError(self._tool_name, f"network request failed: {safe_msg}")
            except ValueError as e:
                # resp.json() on a non-JSON body
                safe_msg = self._km.scrub_text(str(e))
                last_error = ToolError(self._tool_name, f"response is not JSON: {safe_msg}")

            if attempt <= self._max_retries:
                await asyncio.sleep(0.5 * attempt)

        raise last_error  # type: ignore[misc]


__all__ = ["SecureHttpClient"]
