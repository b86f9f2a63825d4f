"""
Materialized image result: fetched bytes plus response metadata.
"""

from __future__ import annotations

import asyncio
from contextlib import suppress
from pathlib import Path
from typing import TYPE_CHECKING, Any

from tinify_lib_python.errors import ImageDisposedError

if TYPE_CHECKING:
    import os
    from typing import BinaryIO

    import httpx


def _first_int(response: httpx.Response, name: str) -> int | None:
    """First parseable non-negative integer among a header's values."""
    for value in response.headers.get_list(name, split_commas=True):
        with suppress(ValueError):
            parsed = int(value.strip())
            if parsed >= 0:
                return parsed
    return None


def _media_type(content_type: str | None) -> str | None:
    if not content_type:
        return None
    return content_type.split(";", 1)[0].strip() or None


class ImageResult:
    """Fetched image bytes and the metadata the API reported for them.

    The buffer is fixed at construction and every sink is non-mutating,
    so sinks may be called any number of times in any order. ``close``
    releases the buffer; it is idempotent and sinks raise
    ``ImageDisposedError`` afterwards.

    Attributes:
        width: Image width in pixels (``Image-Width``)
        height: Image height in pixels (``Image-Height``)
        location: ``Location`` header; for store transforms this is the
            cloud object URL
        content_type: Media type of the body
        size: Declared ``Content-Length``
    """

    def __init__(
        self,
        data: bytes = b"",
        *,
        width: int | None = None,
        height: int | None = None,
        location: str | None = None,
        content_type: str | None = None,
        size: int | None = None,
    ) -> None:
        self._data: bytes | None = bytes(data)
        self.width = width
        self.height = height
        self.location = location
        self.content_type = content_type
        self.size = size

    @classmethod
    def from_response(cls, response: httpx.Response) -> ImageResult:
        """Build a result from a successful, fully read response.

        Malformed dimension or length headers are treated as absent.

        Args:
            response: Response of a GET or POST to an image location

        Returns:
            ImageResult owning a copy of the body
        """
        return cls(
            response.content,
            width=_first_int(response, "Image-Width"),
            height=_first_int(response, "Image-Height"),
            location=response.headers.get("Location"),
            content_type=_media_type(response.headers.get("Content-Type")),
            size=_first_int(response, "Content-Length"),
        )

    def _buffer(self) -> bytes:
        if self._data is None:
            raise ImageDisposedError(type(self).__name__)
        return self._data

    @property
    def data_length(self) -> int:
        """Number of buffered bytes."""
        return len(self._buffer())

    @property
    def is_closed(self) -> bool:
        """Check if the buffer was released."""
        return self._data is None

    def to_buffer(self) -> bytes:
        """Return the image bytes."""
        return self._buffer()

    def to_stream(self, stream: BinaryIO) -> None:
        """Write the image bytes to a binary stream.

        Args:
            stream: Writable binary file-like object
        """
        stream.write(self._buffer())

    async def to_file(self, path: str | os.PathLike[str]) -> None:
        """Write the image bytes to a file, replacing its contents.

        Args:
            path: Destination file path
        """
        data = self._buffer()
        await asyncio.to_thread(Path(path).write_bytes, data)

    def copy_into(self, buffer: bytearray | memoryview) -> int:
        """Copy the image bytes into the start of a writable buffer.

        Args:
            buffer: Destination, at least ``data_length`` bytes long

        Returns:
            Number of bytes copied

        Raises:
            ValueError: If the destination is smaller than the image
        """
        data = self._buffer()
        view = memoryview(buffer).cast("B")
        if view.readonly:
            raise ValueError("Destination buffer is read-only")
        if view.nbytes < len(data):
            raise ValueError(
                f"Destination buffer too small: {view.nbytes} < {len(data)} bytes"
            )
        view[: len(data)] = data
        return len(data)

    def close(self) -> None:
        """Release the buffer. Safe to call more than once."""
        self._data = None

    async def aclose(self) -> None:
        """Async alias of ``close``."""
        self.close()

    def __enter__(self) -> ImageResult:
        return self

    def __exit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        self.close()

    async def __aenter__(self) -> ImageResult:
        return self

    async def __aexit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        self.close()

    def __repr__(self) -> str:
        length = "closed" if self._data is None else f"{len(self._data)} bytes"
        return (
            f"ImageResult({length}, width={self.width}, height={self.height}, "
            f"content_type={self.content_type!r})"
        )
