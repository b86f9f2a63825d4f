"""
Core TinifyClient implementation.
"""

from __future__ import annotations

import asyncio
import inspect
from pathlib import Path
from typing import TYPE_CHECKING, Any

from tinify_lib_python.client.optimized import OptimizedImage
from tinify_lib_python.client.result import ImageResult
from tinify_lib_python.errors import AccountError, ClientError, TinifyLibError
from tinify_lib_python.telemetry.logger import get_logger
from tinify_lib_python.transport import (
    RequestEngine,
    get_connection_registry,
    resolve_api_key,
)

if TYPE_CHECKING:
    import os

    import httpx

    from tinify_lib_python.client.builder import TinifyClientBuilder
    from tinify_lib_python.operations import TransformOperations
    from tinify_lib_python.resilience import RetryConfig
    from tinify_lib_python.transport import ConnectionRegistry

logger = get_logger(__name__)

SHRINK_PATH = "/shrink"


class TinifyClient:
    """Client for the Tinify image compression API.

    Every upload returns an ``OptimizedImage`` handle; the compressed
    bytes are fetched from it on demand. Connections come from a
    ``ConnectionRegistry`` so clients sharing a key and transport share
    one pool.

    Example:
        >>> client = await TinifyClient.create("my-api-key")
        >>> async with await client.shrink_from_file("in.png") as image:
        ...     await image.to_file("out.png")
        >>> print(client.compression_count)

        >>> # Custom retry policy and transport
        >>> client = await (
        ...     TinifyClient.builder()
        ...     .api_key("my-api-key")
        ...     .max_retries(3)
        ...     .retry_delay_ms(1000)
        ...     .build()
        ... )
    """

    def __init__(self, engine: RequestEngine, registry: ConnectionRegistry) -> None:
        """Initialize the client (internal use).

        Use TinifyClient.create() or TinifyClientBuilder for public construction.
        """
        self._engine = engine
        self._registry = registry

    @classmethod
    async def create(
        cls,
        api_key: str | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
        *,
        registry: ConnectionRegistry | None = None,
        retry: RetryConfig | None = None,
        timeout: float | None = None,
    ) -> TinifyClient:
        """Create a new TinifyClient instance.

        Args:
            api_key: Tinify API key (default: TINIFY_API_KEY or keyring)
            transport: Transport to send requests through (default: pooled HTTP)
            registry: Connection registry (default: process-wide registry)
            retry: Retry policy (default: one retry after 500 ms)
            timeout: Per-request timeout in seconds (default: none)

        Returns:
            Configured TinifyClient instance

        Raises:
            ValueError: If no API key is given or found
        """
        key = resolve_api_key(api_key)
        if not key:
            raise ValueError(
                "A Tinify API key is required. Pass api_key or set TINIFY_API_KEY."
            )

        registry = registry or get_connection_registry()
        http_client = await registry.acquire(key, transport)
        engine = RequestEngine(
            http_client,
            counter=registry.compression_counter,
            retry=retry,
            timeout=timeout,
        )
        return cls(engine, registry)

    @classmethod
    def builder(cls) -> TinifyClientBuilder:
        """Get a builder for advanced configuration."""
        from tinify_lib_python.client.builder import TinifyClientBuilder

        return TinifyClientBuilder()

    @property
    def compression_count(self) -> int | None:
        """Compressions used this month, as last reported by the API."""
        return self._registry.compression_counter.value

    @property
    def registry(self) -> ConnectionRegistry:
        """Connection registry this client draws from."""
        return self._registry

    @property
    def engine(self) -> RequestEngine:
        """Request engine used by this client."""
        return self._engine

    async def _shrink(self, **body: Any) -> OptimizedImage:
        response = await self._engine.execute("POST", SHRINK_PATH, **body)
        image = OptimizedImage.from_response(response, self)
        logger.debug(
            "Image uploaded",
            location=image.location,
            size=image.image_size,
            type=image.image_type,
        )
        return image

    async def shrink_from_buffer(self, data: bytes | bytearray | memoryview) -> OptimizedImage:
        """Upload image bytes for compression.

        Args:
            data: Raw image bytes

        Returns:
            Handle to the compressed image
        """
        return await self._shrink(content=bytes(data))

    async def shrink_from_file(self, path: str | os.PathLike[str]) -> OptimizedImage:
        """Upload an image file for compression.

        Args:
            path: Path of the image file

        Returns:
            Handle to the compressed image
        """
        data = await asyncio.to_thread(Path(path).read_bytes)
        return await self._shrink(content=data)

    async def shrink_from_stream(self, stream: Any) -> OptimizedImage:
        """Upload the contents of a readable binary stream.

        The stream is read to the end before the request is sent. Both
        regular file-like objects and objects with an async ``read`` are
        accepted.

        Args:
            stream: Object with a ``read()`` method returning bytes

        Returns:
            Handle to the compressed image
        """
        if inspect.iscoroutinefunction(stream.read):
            data = await stream.read()
        else:
            data = await asyncio.to_thread(stream.read)
        if not isinstance(data, (bytes, bytearray, memoryview)):
            raise TypeError(f"Stream must yield bytes, got {type(data).__name__}")
        return await self._shrink(content=bytes(data))

    async def shrink_from_url(self, url: str) -> OptimizedImage:
        """Ask the API to fetch and compress an image by URL.

        Args:
            url: Publicly reachable image URL

        Returns:
            Handle to the compressed image
        """
        return await self._shrink(json={"source": {"url": url}})

    async def get_result(
        self,
        image: OptimizedImage,
        operations: TransformOperations | None = None,
    ) -> ImageResult:
        """Fetch an uploaded image, optionally transformed.

        Without operations the compressed image is downloaded with GET;
        with operations they are POSTed to the image location.

        Args:
            image: Handle returned by a ``shrink_*`` call
            operations: Transforms to apply

        Returns:
            ImageResult owned by the caller

        Raises:
            TinifyLibError: If the upload response carried no location
        """
        if image.location is None:
            raise TinifyLibError("Upload response did not include a Location header")

        if operations is None:
            response = await self._engine.execute("GET", image.location)
        else:
            response = await self._engine.execute(
                "POST", image.location, json=operations.to_dict()
            )
        return ImageResult.from_response(response)

    async def validate(self) -> bool:
        """Check the API key with an empty compression request.

        Returns:
            True if the key is usable (the empty request was rejected as a
            client error or the account hit its limit), False if the API
            unexpectedly accepted the request

        Raises:
            TinifyError: On unauthorized keys, server errors and
                connection failures
        """
        try:
            await self._engine.execute("POST", SHRINK_PATH)
        except AccountError as e:
            if e.status_code == 429:
                return True
            raise
        except ClientError:
            return True
        return False
