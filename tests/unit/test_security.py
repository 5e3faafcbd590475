"""Security helpers: key manager, redaction, secure HTTP client."""

from __future__ import annotations

import asyncio

import httpx
import pytest

# Test sentinels only; intentionally fake values to avoid secret scanner noise.
TEST_FAKE_SECRET = "TEST_FAKE_SECRET"
TEST_GOOGLE_KEY = "AIza" + "x" * 30
TEST_GROQ_KEY = "gsk_" + "y" * 24


class TestKeyManager:
    def test_get_from_env(self, monkeypatch):
        monkeypatch.setenv("GEMINI_API_KEY", "test_key_12345678")
        from safestep.security.key_manager import KeyManager
        km = KeyManager()
        assert km.get("GEMINI_API_KEY") == "test_key_12345678"

    def test_get_missing_not_required(self):
        from safestep.security.key_manager import KeyManager
        assert KeyManager().get("GROQ_API_KEY", required=False) is None

    def test_get_missing_required_raises(self):
        from safestep.security.key_manager import KeyManager, KeyMissingError
        with pytest.raises(KeyMissingError):
            KeyManager().get("GROQ_API_KEY", required=True)

    def test_placeholder_counts_as_missing(self, monkeypatch):
        monkeypatch.setenv("GEMINI_API_KEY", "your_gemini_api_key_here")
        from safestep.security.key_manager import KeyManager
        km = KeyManager()
        assert km.get("GEMINI_API_KEY") is None
        assert km.has_key("GEMINI_API_KEY") is False

    def test_google_key_is_gemini_alias(self, monkeypatch):
        monkeypatch.setenv("GOOGLE_API_KEY", "google_alias_key")
        from safestep.security.key_manager import KeyManager
        assert KeyManager().get_gemini_key() == "google_alias_key"

    def test_redact_short(self):
        from safestep.security.key_manager import KeyManager
        assert KeyManager.redact("abc") == "****"
        assert KeyManager.redact("") == "****"

    def test_redact_normal(self):
        from safestep.security.key_manager import KeyManager
        result = KeyManager.redact("abcdefghijklmnop")
        assert result == "abcd****mnop"

    def test_scrub_text(self, monkeypatch):
        monkeypatch.setenv("GROQ_API_KEY", TEST_FAKE_SECRET)
        from safestep.security.key_manager import KeyManager
        km = KeyManager()
        km.get("GROQ_API_KEY")
        scrubbed = km.scrub_text(f"upstream rejected token {TEST_FAKE_SECRET}")
        assert TEST_FAKE_SECRET not in scrubbed
        assert "[GROQ_API_KEY:***REDACTED***]" in scrubbed

    def test_access_log(self, monkeypatch):
        monkeypatch.setenv("GROQ_API_KEY", "test_key_for_log")
        from safestep.security.key_manager import KeyManager
        km = KeyManager()
        km.get("GROQ_API_KEY")
        km.get("GROQ_API_KEY")
        log = km.get_access_log()
        assert len(log) == 2
        assert log[0]["key"] == "GROQ_API_KEY"

    def test_access_log_is_bounded(self, monkeypatch):
        monkeypatch.setenv("GROQ_API_KEY", "test_key_for_log")
        from safestep.security import key_manager
        km = key_manager.KeyManager()
        for _ in range(key_manager._ACCESS_LOG_MAX + 50):
            km.get("GROQ_API_KEY")
        assert len(km.get_access_log(last_n=10_000)) == key_manager._ACCESS_LOG_MAX
        assert len(km.get_access_log()) == 100

    def test_reload_drops_removed_key(self, monkeypatch):
        monkeypatch.setenv("GROQ_API_KEY", "rotating_key_1234")
        from safestep.security.key_manager import KeyManager
        km = KeyManager()
        assert km.get("GROQ_API_KEY") == "rotating_key_1234"
        monkeypatch.delenv("GROQ_API_KEY")
        km.reload("GROQ_API_KEY")
        assert km.get("GROQ_API_KEY") is None


class TestRedaction:
    def test_query_param(self):
        from safestep.security.redact import redact_sensitive
        text = "GET https://generativelanguage.googleapis.com/v1beta/models?key=abc123&alt=json"
        assert "abc123" not in redact_sensitive(text)
        assert "key=***REDACTED***" in redact_sensitive(text)

    def test_bearer_header(self):
        from safestep.security.redact import redact_sensitive
        scrubbed = redact_sensitive("Authorization: Bearer abc.def.ghi")
        assert "abc.def.ghi" not in scrubbed

    @pytest.mark.parametrize("secret", [TEST_GOOGLE_KEY, TEST_GROQ_KEY, "sk-" + "z" * 20])
    def test_bare_provider_keys(self, secret):
        from safestep.security.redact import redact_sensitive
        scrubbed = redact_sensitive(f"failed with {secret} in payload")
        assert secret not in scrubbed
        assert "***REDACTED***" in scrubbed

    def test_empty_text(self):
        from safestep.security.redact import redact_sensitive
        assert redact_sensitive("") == ""


class TestSecureHttpClient:
    def test_error_message_redacted(self, monkeypatch):
        monkeypatch.setenv("GEMINI_API_KEY", TEST_GOOGLE_KEY)
        from safestep.security.key_manager import get_key_manager
        from safestep.security.http_client import SecureHttpClient
        from safestep.shared.exceptions import ToolError

        get_key_manager().reload("GEMINI_API_KEY")

        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(403, json={"error": "forbidden"})

        client = SecureHttpClient(tool_name="gemini", transport=httpx.MockTransport(handler))
        with pytest.raises(ToolError) as excinfo:
            asyncio.run(client.get_json(f"https://example.test/models?key={TEST_GOOGLE_KEY}"))
        assert TEST_GOOGLE_KEY not in str(excinfo.value)
        assert "HTTP 403" in str(excinfo.value)

    def test_non_json_body(self):
        from safestep.security.http_client import SecureHttpClient
        from safestep.shared.exceptions import ToolError

        transport = httpx.MockTransport(lambda request: httpx.Response(200, text="<html>oops</html>"))
        client = SecureHttpClient(tool_name="osrm", transport=transport)
        with pytest.raises(ToolError, match="not JSON"):
            asyncio.run(client.get_json("https://example.test/route"))

    def test_timeout_becomes_tool_error(self):
        from safestep.security.http_client import SecureHttpClient
        from safestep.shared.exceptions import ToolError

        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ReadTimeout("slow", request=request)

        client = SecureHttpClient(tool_name="groq", timeout=2.0, transport=httpx.MockTransport(handler))
        with pytest.raises(ToolError, match="timed out"):
            asyncio.run(client.post_json("https://example.test/chat", json={}))

    def test_no_retry_by_default(self):
        from safestep.security.http_client import SecureHttpClient
        from safestep.shared.exceptions import ToolError

        calls = []

        def handler(request: httpx.Request) -> httpx.Response:
            calls.append(request)
            return httpx.Response(500)

        client = SecureHttpClient(tool_name="gemini", transport=httpx.MockTransport(handler))
        with pytest.raises(ToolError):
            asyncio.run(client.post_json("https://example.test/generate", json={}))
        assert len(calls) == 1
