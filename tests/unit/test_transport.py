"""Tests for transport auth helpers."""

import base64
import platform

import pytest

from tinify_lib_python.transport import (
    API_KEY_ENV,
    basic_auth_value,
    get_auth_headers,
    resolve_api_key,
    user_agent,
)


class TestResolveApiKey:
    """Tests for API key resolution."""

    def test_explicit_key(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """Test explicit API key takes precedence."""
        monkeypatch.setenv(API_KEY_ENV, "env-key")
        assert resolve_api_key("explicit-key") == "explicit-key"

    def test_env_variable(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """Test environment variable fallback."""
        monkeypatch.setenv(API_KEY_ENV, "env-key")
        assert resolve_api_key() == "env-key"

    def test_blank_explicit_falls_back(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """Test a blank explicit key is ignored."""
        monkeypatch.setenv(API_KEY_ENV, "env-key")
        assert resolve_api_key("   ") == "env-key"

    def test_keyring_fallback(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """Test keyring is consulted last."""
        monkeypatch.setattr(
            "tinify_lib_python.transport.auth._try_keyring", lambda: "ring-key"
        )
        assert resolve_api_key() == "ring-key"

    def test_no_key_found(self) -> None:
        """Test when no key is found."""
        assert resolve_api_key() is None
        assert resolve_api_key("") is None


class TestAuthHeaders:
    """Tests for auth header generation."""

    def test_basic_auth_value(self) -> None:
        """Test Basic credentials with the fixed 'api' user."""
        assert basic_auth_value("key") == "Basic YXBpOmtleQ=="

    def test_basic_auth_non_ascii_key(self) -> None:
        """Test non-ASCII key characters are replaced instead of failing."""
        expected = base64.b64encode(b"api:k?y").decode("ascii")
        assert basic_auth_value("kéy") == f"Basic {expected}"

    def test_user_agent(self) -> None:
        """Test product, runtime and platform are reported."""
        agent = user_agent()
        assert agent.startswith("tinify-lib-python/")
        assert f"Python/{platform.python_version()}" in agent

    def test_get_auth_headers(self) -> None:
        """Test default headers for pooled connections."""
        headers = get_auth_headers("key")
        assert headers["Authorization"] == "Basic YXBpOmtleQ=="
        assert headers["User-Agent"] == user_agent()
