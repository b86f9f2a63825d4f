"""
API key resolution and request identity headers.

Resolves API keys from multiple sources:
1. Explicit value
2. Environment variable (TINIFY_API_KEY)
3. System keyring (optional)
"""

from __future__ import annotations

import base64
import os
import platform

from tinify_lib_python._features import HAS_KEYRING

API_KEY_ENV = "TINIFY_API_KEY"
_KEYRING_SERVICE = "tinify"

_UA_VERSION: str | None = None


def resolve_api_key(explicit_key: str | None = None) -> str | None:
    """Resolve the Tinify API key.

    Args:
        explicit_key: Explicitly provided API key

    Returns:
        Resolved API key or None if not found
    """
    if explicit_key and explicit_key.strip():
        return explicit_key

    key = os.getenv(API_KEY_ENV)
    if key and key.strip():
        return key

    return _try_keyring()


def _try_keyring() -> str | None:
    """Try to get the API key from the system keyring."""
    if not HAS_KEYRING:
        return None
    try:
        import keyring

        return keyring.get_password(_KEYRING_SERVICE, "api_key") or None
    except Exception:
        # Keyring backend error (common in containers, WSL, etc.)
        return None


def basic_auth_value(api_key: str) -> str:
    """Build the ``Authorization`` header value for an API key.

    The API expects HTTP Basic credentials with the fixed user ``api``.
    Non-ASCII characters in the key are sent as ``?``.

    Args:
        api_key: Tinify API key

    Returns:
        ``"Basic <base64(api:key)>"``
    """
    raw = f"api:{api_key}".encode("ascii", errors="replace")
    credentials = base64.b64encode(raw).decode("ascii")
    return f"Basic {credentials}"


def _get_ua_version() -> str:
    """Get package version for User-Agent (cached)."""
    global _UA_VERSION
    if _UA_VERSION is None:
        try:
            from importlib.metadata import version

            _UA_VERSION = version("tinify-lib-python")
        except Exception:
            _UA_VERSION = "0.1.0"
    return _UA_VERSION


def user_agent() -> str:
    """Product User-Agent sent with every request."""
    return (
        f"tinify-lib-python/{_get_ua_version()} "
        f"Python/{platform.python_version()} ({platform.system()})"
    )


def get_auth_headers(api_key: str) -> dict[str, str]:
    """Default headers attached to every pooled connection.

    Args:
        api_key: Tinify API key

    Returns:
        Authorization and User-Agent headers
    """
    return {
        "Authorization": basic_auth_value(api_key),
        "User-Agent": user_agent(),
    }
