"""
Builder for fluent TinifyClient construction.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from tinify_lib_python.resilience import DEFAULT_MAX_RETRIES, RetryConfig

if TYPE_CHECKING:
    import httpx

    from tinify_lib_python.client.core import TinifyClient
    from tinify_lib_python.transport import ConnectionRegistry


class TinifyClientBuilder:
    """Builder for creating TinifyClient instances with custom configuration.

    Example:
        >>> client = await (
        ...     TinifyClientBuilder()
        ...     .api_key("my-api-key")
        ...     .registry(registry)
        ...     .retry_delay_ms(0)
        ...     .build()
        ... )
    """

    def __init__(self) -> None:
        """Initialize the builder."""
        self._api_key: str | None = None
        self._transport: httpx.AsyncBaseTransport | None = None
        self._registry: ConnectionRegistry | None = None
        self._max_retries: int | None = None
        self._retry_delay_ms: int | None = None
        self._timeout: float | None = None

    def api_key(self, key: str) -> TinifyClientBuilder:
        """Set explicit API key.

        Args:
            key: Tinify API key

        Returns:
            Self for chaining
        """
        self._api_key = key
        return self

    def transport(self, transport: httpx.AsyncBaseTransport) -> TinifyClientBuilder:
        """Send requests through a custom transport.

        Args:
            transport: httpx transport, e.g. ``httpx.MockTransport`` in tests

        Returns:
            Self for chaining
        """
        self._transport = transport
        return self

    def registry(self, registry: ConnectionRegistry) -> TinifyClientBuilder:
        """Draw connections from a specific registry.

        Args:
            registry: Connection registry

        Returns:
            Self for chaining
        """
        self._registry = registry
        return self

    def max_retries(self, n: int) -> TinifyClientBuilder:
        """Set the number of retries after the first attempt.

        Args:
            n: Retry count (0 disables retries)

        Returns:
            Self for chaining
        """
        self._max_retries = n
        return self

    def retry_delay_ms(self, ms: int) -> TinifyClientBuilder:
        """Set the delay between attempts.

        Args:
            ms: Delay in milliseconds

        Returns:
            Self for chaining
        """
        self._retry_delay_ms = ms
        return self

    def timeout(self, seconds: float) -> TinifyClientBuilder:
        """Set per-request timeout.

        Args:
            seconds: Timeout in seconds

        Returns:
            Self for chaining
        """
        self._timeout = seconds
        return self

    def _retry_config(self) -> RetryConfig | None:
        if self._max_retries is None and self._retry_delay_ms is None:
            return None
        default = RetryConfig.default()
        return RetryConfig(
            max_retries=(
                self._max_retries if self._max_retries is not None else DEFAULT_MAX_RETRIES
            ),
            delay_ms=(
                self._retry_delay_ms if self._retry_delay_ms is not None else default.delay_ms
            ),
        )

    async def build(self) -> TinifyClient:
        """Build the TinifyClient instance.

        Returns:
            Configured TinifyClient

        Raises:
            ValueError: If no API key is set or found, or the retry
                settings are invalid
        """
        from tinify_lib_python.client.core import TinifyClient

        return await TinifyClient.create(
            self._api_key,
            self._transport,
            registry=self._registry,
            retry=self._retry_config(),
            timeout=self._timeout,
        )
