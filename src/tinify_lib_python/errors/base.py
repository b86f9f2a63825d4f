"""Base error classes for tinify-lib-python.

Every failure surfaced by the request engine is a ``TinifyError`` tagged
with an ``ErrorKind``:
- ACCOUNT: bad credentials or exhausted quota (HTTP 401, 429)
- CLIENT: malformed request (other 4xx)
- SERVER: remote-side fault (5xx)
- CONNECTION: transport failure, timeout, or any other status

Thin subclasses exist per kind so callers can either switch on
``err.kind`` or catch a narrower type.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from tinify_lib_python.errors.classification import ErrorKind, classify_status


@dataclass
class ErrorContext:
    """Structured error context for diagnostics."""

    details: dict[str, Any] = field(default_factory=dict)
    """Additional details about the error"""

    source: str | None = None
    """Error source (e.g., 'remote', 'transport', 'client')"""

    hint: str | None = None
    """Actionable hint for resolving the error"""


class TinifyLibError(Exception):
    """Base class for all tinify-lib-python errors.

    Attributes:
        message: Human-readable error message
        context: Structured error context
    """

    def __init__(
        self,
        message: str,
        context: ErrorContext | None = None,
    ) -> None:
        self.message = message
        self.context = context or ErrorContext()
        super().__init__(message)

    def with_hint(self, hint: str) -> TinifyLibError:
        """Add a hint to this error."""
        self.context.hint = hint
        return self


class TinifyError(TinifyLibError):
    """Failure of a call against the Tinify API.

    The display message is ``"<message> (HTTP <status>/<error_type>)"``
    for failures carrying an HTTP status, and the bare transport message
    for transport failures.

    Attributes:
        kind: Error kind tag
        status_code: HTTP status code, None for transport failures
        error_type: Machine error token from the server payload
            (``"ParseError"`` when the body could not be parsed)
        server_message: Message without the status suffix
    """

    def __init__(
        self,
        message: str,
        *,
        kind: ErrorKind,
        status_code: int | None = None,
        error_type: str | None = None,
        cause: BaseException | None = None,
    ) -> None:
        ctx = ErrorContext(source="transport" if status_code is None else "remote")
        ctx.details["kind"] = kind.value
        if status_code is not None:
            ctx.details["status_code"] = status_code
        if error_type:
            ctx.details["error_type"] = error_type

        display = message
        if status_code is not None:
            display = f"{message} (HTTP {status_code}/{error_type})"

        super().__init__(display, ctx)
        self.kind = kind
        self.status_code = status_code
        self.error_type = error_type
        self.server_message = message
        if cause is not None:
            self.__cause__ = cause

    @classmethod
    def from_response(
        cls,
        message: str,
        error_type: str,
        status_code: int,
    ) -> TinifyError:
        """Create the error matching an HTTP status.

        Args:
            message: Server supplied message
            error_type: Server supplied error token
            status_code: HTTP status code

        Returns:
            Instance of the subclass matching the classified kind
        """
        kind = classify_status(status_code)
        return _KIND_TO_CLASS[kind](
            message,
            kind=kind,
            status_code=status_code,
            error_type=error_type,
        )

    @property
    def is_retryable(self) -> bool:
        """Whether the caller may reasonably retry the whole operation."""
        return self.kind in (ErrorKind.SERVER, ErrorKind.CONNECTION)


class AccountError(TinifyError):
    """Invalid credentials or account limit exceeded."""


class ClientError(TinifyError):
    """Request rejected by the API as malformed or unprocessable."""


class ServerError(TinifyError):
    """Temporary fault on the Tinify side."""


class ConnectionFailure(TinifyError):
    """Transport level failure: timeout, DNS, socket or TLS error."""

    @classmethod
    def from_transport(
        cls, message: str, cause: BaseException | None = None
    ) -> ConnectionFailure:
        """Create a failure for an exception raised while sending."""
        return cls(message, kind=ErrorKind.CONNECTION, cause=cause)


class ImageDisposedError(TinifyLibError, RuntimeError):
    """Raised when an image or result is used after it was closed."""

    def __init__(self, name: str) -> None:
        super().__init__(
            f"Cannot access a closed {name}",
            ErrorContext(source="client"),
        )
        self.name = name


_KIND_TO_CLASS: dict[ErrorKind, type[TinifyError]] = {
    ErrorKind.ACCOUNT: AccountError,
    ErrorKind.CLIENT: ClientError,
    ErrorKind.SERVER: ServerError,
    ErrorKind.CONNECTION: ConnectionFailure,
}
