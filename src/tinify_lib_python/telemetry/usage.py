"""
Compression usage tracking.

The API reports the number of compressions made this month in the
``Compression-Count`` header of every response.
"""

from __future__ import annotations

from contextlib import suppress

COMPRESSION_COUNT_HEADER = "Compression-Count"


class CompressionCounter:
    """Last compression count reported by the API.

    The value is shared by every request engine built from the same
    connection registry. It is eventually consistent process state, not
    per-request state: under concurrent completions it holds whichever
    response was processed last, which may not be the caller's own.

    Updates are a single attribute store and reads take no lock.
    """

    def __init__(self) -> None:
        self._value: int | None = None

    @property
    def value(self) -> int | None:
        """Last observed count, or None before any response carried one."""
        return self._value

    def update(self, value: int) -> None:
        """Overwrite the counter."""
        self._value = value

    def observe(self, header_value: str | None) -> bool:
        """Update from a raw header value.

        Args:
            header_value: ``Compression-Count`` header value, if present

        Returns:
            True when the value parsed and the counter was updated
        """
        if header_value is None:
            return False
        with suppress(ValueError):
            self.update(int(header_value.strip()))
            return True
        return False

    def reset(self) -> None:
        """Forget the last observed count."""
        self._value = None
