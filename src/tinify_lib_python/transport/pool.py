"""
Connection registry for the Tinify API.

Pools ``httpx.AsyncClient`` instances keyed by (API key, transport) so
every client constructed with the same credentials and transport reuses
one set of TLS connections.
"""

from __future__ import annotations

import asyncio
import os
import ssl
from dataclasses import dataclass
from typing import Any

import httpx

from tinify_lib_python._features import HAS_HTTP2, require_extra
from tinify_lib_python.telemetry.logger import get_logger
from tinify_lib_python.telemetry.usage import CompressionCounter
from tinify_lib_python.transport.auth import get_auth_headers

API_ENDPOINT = "https://api.tinify.com"

logger = get_logger(__name__)


def _trust_env_enabled() -> bool:
    """Use env proxy settings only when explicitly enabled."""
    return os.getenv("TINIFY_HTTP_TRUST_ENV", "0") == "1"


@dataclass
class PoolConfig:
    """Configuration for the default pooled transport.

    Pooled clients carry no request timeout; the request engine applies
    one per request.

    Attributes:
        base_url: API endpoint
        max_connections: Maximum total connections
        max_keepalive_connections: Maximum idle connections to keep
        keepalive_expiry: Seconds before an idle connection is dropped
        http2: Use HTTP/2 (None = when the ``h2`` package is installed)
        verify: TLS trust policy passed to httpx (bool or SSLContext)
        trust_env: Honour proxy environment variables
            (None = TINIFY_HTTP_TRUST_ENV=1)
    """

    base_url: str = API_ENDPOINT
    max_connections: int = 100
    max_keepalive_connections: int = 20
    keepalive_expiry: float = 300.0
    http2: bool | None = None
    verify: bool | ssl.SSLContext = True
    trust_env: bool | None = None

    @classmethod
    def default(cls) -> PoolConfig:
        """Create default configuration."""
        return cls()

    def to_httpx_limits(self) -> httpx.Limits:
        """Convert to httpx Limits."""
        return httpx.Limits(
            max_connections=self.max_connections,
            max_keepalive_connections=self.max_keepalive_connections,
            keepalive_expiry=self.keepalive_expiry,
        )

    def use_http2(self) -> bool:
        """Resolve the HTTP/2 toggle."""
        if self.http2 is None:
            return HAS_HTTP2
        if self.http2:
            require_extra("http2", "h2")
        return self.http2

    def use_trust_env(self) -> bool:
        """Resolve the proxy environment toggle."""
        return _trust_env_enabled() if self.trust_env is None else self.trust_env

    def create_transport(self) -> httpx.AsyncHTTPTransport:
        """Create the shared default transport."""
        return httpx.AsyncHTTPTransport(
            verify=self.verify,
            http2=self.use_http2(),
            limits=self.to_httpx_limits(),
            trust_env=self.use_trust_env(),
        )


@dataclass
class RegistryStats:
    """Statistics for the connection registry.

    Attributes:
        connections_created: Pooled clients created
        connections_closed: Pooled clients closed
        lookups: Total acquire calls
    """

    connections_created: int = 0
    connections_closed: int = 0
    lookups: int = 0

    @property
    def active_connections(self) -> int:
        """Pooled clients currently open."""
        return self.connections_created - self.connections_closed

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary."""
        return {
            "connections_created": self.connections_created,
            "connections_closed": self.connections_closed,
            "active_connections": self.active_connections,
            "lookups": self.lookups,
        }


class _SharedTransport(httpx.AsyncBaseTransport):
    """Delegating transport whose ``aclose`` leaves the inner transport open.

    One inner transport backs many pooled clients; closing a client must
    not tear it down for the others, and transports supplied by callers
    are never closed by the registry.
    """

    def __init__(self, inner: httpx.AsyncBaseTransport) -> None:
        self._inner = inner

    async def handle_async_request(self, request: httpx.Request) -> httpx.Response:
        return await self._inner.handle_async_request(request)

    async def aclose(self) -> None:
        return None


class ConnectionRegistry:
    """Pool of API connections keyed by credential and transport identity.

    Two ``acquire`` calls with the same API key and the same transport
    object return the same ``httpx.AsyncClient``; changing either yields
    a distinct one. When no transport is given, the registry's default
    pooled transport is used.

    The registry is an explicit object: the hosting application creates
    one and passes it to every client, tests create a fresh one per test.
    It also owns the ``CompressionCounter`` shared by those clients.

    Example:
        >>> async with ConnectionRegistry() as registry:
        ...     client = await TinifyClient.create("my-key", registry=registry)
    """

    def __init__(
        self,
        config: PoolConfig | None = None,
        counter: CompressionCounter | None = None,
    ) -> None:
        """Initialize the registry.

        Args:
            config: Configuration for the default transport
            counter: Compression counter shared by clients of this registry
        """
        self._config = config or PoolConfig.default()
        self._counter = counter or CompressionCounter()
        self._clients: dict[tuple[str, int], httpx.AsyncClient] = {}
        # Strong references keep id() of supplied transports stable.
        self._transports: dict[int, httpx.AsyncBaseTransport] = {}
        self._default_transport: httpx.AsyncHTTPTransport | None = None
        self._stats = RegistryStats()
        self._lock = asyncio.Lock()
        self._closed = False

    def _resolve_transport(
        self, transport: httpx.AsyncBaseTransport | None
    ) -> httpx.AsyncBaseTransport:
        if transport is not None:
            return transport
        if self._default_transport is None:
            self._default_transport = self._config.create_transport()
        return self._default_transport

    async def acquire(
        self,
        api_key: str,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> httpx.AsyncClient:
        """Get or create the pooled client for a key and transport.

        Args:
            api_key: Tinify API key
            transport: Transport handling requests (default: pooled HTTP)

        Returns:
            httpx.AsyncClient with base URL, auth and User-Agent configured

        Raises:
            RuntimeError: If the registry was closed
        """
        if self._closed:
            raise RuntimeError("Connection registry is closed")

        async with self._lock:
            self._stats.lookups += 1
            handler = self._resolve_transport(transport)
            key = (api_key, id(handler))

            client = self._clients.get(key)
            if client is None:
                client = httpx.AsyncClient(
                    base_url=self._config.base_url,
                    headers=get_auth_headers(api_key),
                    timeout=None,
                    transport=_SharedTransport(handler),
                    trust_env=self._config.use_trust_env(),
                )
                self._clients[key] = client
                self._transports[id(handler)] = handler
                self._stats.connections_created += 1
                logger.debug(
                    "Created pooled connection",
                    transport=type(handler).__name__,
                    active=self._stats.active_connections,
                )

            return client

    async def clear(self) -> None:
        """Close every pooled client and empty the registry.

        Clients previously returned by ``acquire`` must not be used
        afterwards. Caller supplied transports are left open.
        """
        async with self._lock:
            for client in self._clients.values():
                await client.aclose()
                self._stats.connections_closed += 1
            self._clients.clear()
            self._transports.clear()

            if self._default_transport is not None:
                await self._default_transport.aclose()
                self._default_transport = None

    async def close(self) -> None:
        """Close all connections and refuse further acquisitions."""
        self._closed = True
        await self.clear()

    def __len__(self) -> int:
        return len(self._clients)

    @property
    def compression_counter(self) -> CompressionCounter:
        """Compression counter shared by clients of this registry."""
        return self._counter

    @property
    def stats(self) -> RegistryStats:
        """Registry statistics."""
        return self._stats

    @property
    def config(self) -> PoolConfig:
        """Get registry configuration."""
        return self._config

    @property
    def is_closed(self) -> bool:
        """Check if registry is closed."""
        return self._closed

    async def __aenter__(self) -> ConnectionRegistry:
        return self

    async def __aexit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        await self.close()


# Process-wide convenience registry
_global_registry: ConnectionRegistry | None = None


def get_connection_registry() -> ConnectionRegistry:
    """Get the process-wide registry, creating it on first use."""
    global _global_registry
    if _global_registry is None or _global_registry.is_closed:
        _global_registry = ConnectionRegistry()
    return _global_registry


def set_connection_registry(registry: ConnectionRegistry) -> None:
    """Replace the process-wide registry.

    Args:
        registry: ConnectionRegistry instance
    """
    global _global_registry
    _global_registry = registry


async def close_global_registry() -> None:
    """Close the process-wide registry."""
    global _global_registry
    if _global_registry is not None:
        await _global_registry.close()
        _global_registry = None
