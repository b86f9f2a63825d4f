"""
Transport layer - pooled connections and the request engine.

Provides httpx-based transport with:
- Connection pooling keyed by API key and transport
- Fixed-budget retry on transport failures and 5xx responses
- API key resolution and Basic authentication
"""

from tinify_lib_python.transport.auth import (
    API_KEY_ENV,
    basic_auth_value,
    get_auth_headers,
    resolve_api_key,
    user_agent,
)
from tinify_lib_python.transport.http import (
    CONNECTION_ERROR_PREFIX,
    TIMEOUT_MESSAGE,
    RequestEngine,
)
from tinify_lib_python.transport.pool import (
    API_ENDPOINT,
    ConnectionRegistry,
    PoolConfig,
    RegistryStats,
    close_global_registry,
    get_connection_registry,
    set_connection_registry,
)

__all__ = [
    "API_ENDPOINT",
    "API_KEY_ENV",
    "CONNECTION_ERROR_PREFIX",
    "TIMEOUT_MESSAGE",
    "ConnectionRegistry",
    "PoolConfig",
    "RegistryStats",
    "RequestEngine",
    "basic_auth_value",
    "close_global_registry",
    "get_auth_headers",
    "get_connection_registry",
    "resolve_api_key",
    "set_connection_registry",
    "user_agent",
]
