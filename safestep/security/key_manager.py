"""Central API key manager.

All provider credentials are read through this module so that they can be
scrubbed from log lines and exception messages. Nothing else should call
``os.getenv`` for a secret.
"""

from __future__ import annotations

import os
import time
from collections import deque
from typing import Optional

from safestep.security.redact import redact_sensitive
from safestep.shared.exceptions import KeyMissingError

GEMINI_KEY_NAMES = ("GEMINI_API_KEY", "GOOGLE_API_KEY")
GROQ_KEY_NAMES = ("GROQ_API_KEY",)
_PLACEHOLDER_VALUES = {"your_gemini_api_key_here", "your_groq_api_key_here", "changeme"}
_ACCESS_LOG_MAX = 1000


class _KeyEntry:
    __slots__ = ("value", "loaded_at", "source")

    def __init__(self, value: str, source: str):
        self.value = value
        self.loaded_at = time.time()
        self.source = source


class KeyManager:
    """Process-wide key manager."""

    def __init__(self):
        self._keys: dict[str, _KeyEntry] = {}
        self._access_log: deque[dict] = deque(maxlen=_ACCESS_LOG_MAX)

    # -- reading ---------------------------------------------------------

    def get(self, name: str, *, required: bool = False) -> Optional[str]:
        """Return the key, loading it from the environment on first use."""
        entry = self._keys.get(name)
        if entry is None:
            raw = os.getenv(name, "").strip()
            if raw and raw not in _PLACEHOLDER_VALUES:
                entry = _KeyEntry(value=raw, source="env")
                self._keys[name] = entry
            elif required:
                raise KeyMissingError(name)
            else:
                return None

        self._access_log.append({
            "key": name,
            "time": time.time(),
            "source": entry.source,
        })
        return entry.value

    def first_of(self, names: tuple[str, ...], *, required: bool = False) -> Optional[str]:
        for name in names:
            val = self.get(name)
            if val:
                return val
        if required:
            raise KeyMissingError(names[0])
        return None

    def get_gemini_key(self, *, required: bool = True) -> Optional[str]:
        return self.first_of(GEMINI_KEY_NAMES, required=required)

    def get_groq_key(self, *, required: bool = True) -> Optional[str]:
        return self.first_of(GROQ_KEY_NAMES, required=required)

    # -- redaction -------------------------------------------------------

    @staticmethod
    def redact(value: str) -> str:
        """Keep only the first and last four characters."""
        if not value or len(value) <= 8:
            return "****"
        return value[:4] + "****" + value[-4:]

    def scrub_text(self, text: str) -> str:
        """Remove every loaded key value from arbitrary text."""
        result = str(text) if text is not None else ""
        for name, entry in self._keys.items():
            if entry.value and entry.value in result:
                result = result.replace(entry.value, f"[{name}:***REDACTED***]")
        return redact_sensitive(result)

    # -- audit -----------------------------------------------------------

    def get_access_log(self, last_n: int = 100) -> list[dict]:
        return list(self._access_log)[-last_n:]

    def has_key(self, name: str) -> bool:
        """Check presence without writing to the access log."""
        if name in self._keys:
            return True
        raw = os.getenv(name, "").strip()
        return bool(raw) and raw not in _PLACEHOLDER_VALUES

    def has_any(self, names: tuple[str, ...]) -> bool:
        return any(self.has_key(name) for name in names)

    def reload(self, name: str) -> None:
        """Force a reload from the environment (key rotation, tests)."""
        raw = os.getenv(name, "").strip()
        if raw and raw not in _PLACEHOLDER_VALUES:
            self._keys[name] = _KeyEntry(value=raw, source="env")
        elif name in self._keys:
            del self._keys[name]


_manager: Optional[KeyManager] = None


def get_key_manager() -> KeyManager:
    global _manager
    if _manager is None:
        _manager = KeyManager()
    return _manager


__all__ = ["KeyManager", "KeyMissingError", "get_key_manager", "GEMINI_KEY_NAMES", "GROQ_KEY_NAMES"]
