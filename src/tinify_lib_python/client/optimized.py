"""
Remote handle to an uploaded, compressed image.
"""

from __future__ import annotations

import asyncio
from contextlib import suppress
from typing import TYPE_CHECKING, Any

from tinify_lib_python.errors import ImageDisposedError
from tinify_lib_python.telemetry.logger import get_logger

if TYPE_CHECKING:
    import os
    from typing import BinaryIO

    import httpx

    from tinify_lib_python.client.core import TinifyClient
    from tinify_lib_python.client.result import ImageResult
    from tinify_lib_python.operations import TransformOperations

logger = get_logger(__name__)


def _parse_output(response: httpx.Response) -> tuple[int | None, str | None]:
    """Extract ``output.size`` and ``output.type`` from an upload response."""
    if not response.content.strip():
        return None, None

    body: Any = None
    with suppress(ValueError):
        body = response.json()
    output = body.get("output") if isinstance(body, dict) else None
    if not isinstance(output, dict):
        return None, None

    size = output.get("size")
    image_type = output.get("type")
    return (
        size if isinstance(size, int) and not isinstance(size, bool) else None,
        image_type if isinstance(image_type, str) else None,
    )


class OptimizedImage:
    """An uploaded image living on the Tinify servers.

    The compressed bytes are fetched lazily: the first sink call issues a
    GET to ``location`` and every later sink reuses that result.
    Concurrent first calls share a single fetch. ``transform`` always
    issues a fresh request and never touches the cached result.

    Example:
        >>> async with await client.shrink_from_file("in.png") as image:
        ...     await image.to_file("out.png")
        ...     data = await image.to_buffer()
    """

    def __init__(
        self,
        client: TinifyClient,
        location: str | None,
        image_size: int | None = None,
        image_type: str | None = None,
    ) -> None:
        self._client = client
        self.location = location
        self.image_size = image_size
        self.image_type = image_type
        self._result: ImageResult | None = None
        self._lock = asyncio.Lock()
        self._closed = False

    @classmethod
    def from_response(cls, response: httpx.Response, client: TinifyClient) -> OptimizedImage:
        """Build a handle from a successful upload response.

        Args:
            response: Response of ``POST /shrink``
            client: Client used for later fetches

        Returns:
            OptimizedImage pointing at the response ``Location``
        """
        size, image_type = _parse_output(response)
        return cls(client, response.headers.get("Location"), size, image_type)

    def _check_open(self) -> None:
        if self._closed:
            raise ImageDisposedError(type(self).__name__)

    @property
    def is_closed(self) -> bool:
        """Check if the handle was disposed."""
        return self._closed

    @property
    def is_fetched(self) -> bool:
        """Check if the compressed bytes were already downloaded."""
        return self._result is not None

    async def get_result(self) -> ImageResult:
        """Fetch the compressed image once and cache it.

        Returns:
            The cached ImageResult

        Raises:
            ImageDisposedError: If the handle was disposed
            TinifyError: If the fetch fails; a later call tries again
        """
        self._check_open()
        if self._result is not None:
            return self._result

        async with self._lock:
            self._check_open()
            if self._result is None:
                logger.debug("Fetching compressed image", location=self.location)
                result = await self._client.get_result(self)
                # Closed while the fetch was in flight
                if self._closed:
                    result.close()
                    raise ImageDisposedError(type(self).__name__)
                self._result = result
            return self._result

    async def to_file(self, path: str | os.PathLike[str]) -> None:
        """Write the compressed image to a file."""
        result = await self.get_result()
        await result.to_file(path)

    async def to_buffer(self) -> bytes:
        """Return the compressed image bytes."""
        result = await self.get_result()
        return result.to_buffer()

    async def to_stream(self, stream: BinaryIO) -> None:
        """Write the compressed image to a binary stream."""
        result = await self.get_result()
        result.to_stream(stream)

    async def copy_into(self, buffer: bytearray | memoryview) -> int:
        """Copy the compressed image into a caller buffer.

        Raises:
            ValueError: If the buffer is smaller than the image
        """
        result = await self.get_result()
        return result.copy_into(buffer)

    async def transform(self, operations: TransformOperations) -> ImageResult:
        """Apply server-side transforms and return the new image.

        Each call is a new request. The returned result is owned by the
        caller and is independent of this handle.

        Args:
            operations: Transforms to apply

        Returns:
            ImageResult of the transformed image
        """
        self._check_open()
        return await self._client.get_result(self, operations)

    def close(self) -> None:
        """Dispose the handle and its cached result. Idempotent."""
        if self._closed:
            return
        self._closed = True
        if self._result is not None:
            self._result.close()
            self._result = None

    async def aclose(self) -> None:
        """Async alias of ``close``."""
        self.close()

    async def __aenter__(self) -> OptimizedImage:
        return self

    async def __aexit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        self.close()

    def __repr__(self) -> str:
        return (
            f"OptimizedImage(location={self.location!r}, size={self.image_size}, "
            f"type={self.image_type!r})"
        )
