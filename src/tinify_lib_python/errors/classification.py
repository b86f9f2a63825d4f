"""Error classification for Tinify API responses.

Maps HTTP status codes to error kinds and parses the ``{message, error}``
error payload returned by the API.
"""

from __future__ import annotations

import json
from dataclasses import dataclass
from enum import Enum
from typing import Any


class ErrorKind(str, Enum):
    """Kind tag carried by every TinifyError."""

    ACCOUNT = "account"
    """Missing/invalid credentials or exhausted monthly quota."""

    CLIENT = "client"
    """Malformed or unprocessable request."""

    SERVER = "server"
    """Transient server-side failure (5xx)."""

    CONNECTION = "connection"
    """Transport failure or unexpected status."""


PARSE_ERROR = "ParseError"

_ACCOUNT_STATUSES: frozenset[int] = frozenset({401, 429})


def classify_status(status_code: int) -> ErrorKind:
    """Classify an HTTP status into an error kind.

    Args:
        status_code: HTTP status code

    Returns:
        ErrorKind for the status
    """
    if status_code in _ACCOUNT_STATUSES:
        return ErrorKind.ACCOUNT
    if 400 <= status_code < 500:
        return ErrorKind.CLIENT
    if 500 <= status_code < 600:
        return ErrorKind.SERVER
    return ErrorKind.CONNECTION


def is_server_error(status_code: int) -> bool:
    """Check whether a status is retried by the request engine."""
    return 500 <= status_code < 600


@dataclass(frozen=True)
class ErrorPayload:
    """Error body returned by the API.

    Attributes:
        message: Human readable message
        error: Machine error token
    """

    message: str
    error: str

    @classmethod
    def parse(cls, body: bytes | str) -> ErrorPayload:
        """Parse an error body, never raising.

        An empty body or one that is not a JSON object with string
        ``message``/``error`` fields yields a ``ParseError`` payload, so the
        caller still learns the real HTTP status.

        Args:
            body: Raw response body

        Returns:
            Parsed or synthesized payload
        """
        if isinstance(body, bytes):
            body = body.decode("utf-8", errors="replace")
        if not body.strip():
            return cls("Response content was empty.", PARSE_ERROR)

        try:
            data: Any = json.loads(body)
        except ValueError as e:
            return cls(f"Error while parsing response: {e}", PARSE_ERROR)

        if not isinstance(data, dict):
            return cls(
                f"Error while parsing response: expected an object, got {type(data).__name__}",
                PARSE_ERROR,
            )

        message = data.get("message")
        error = data.get("error")
        return cls(
            message if isinstance(message, str) else "",
            error if isinstance(error, str) else "",
        )
