"""Error hierarchy for tinify-lib-python.

A single error family tagged by kind: account, client, server and
connection failures.
"""

from tinify_lib_python.errors.base import (
    AccountError,
    ClientError,
    ConnectionFailure,
    ErrorContext,
    ImageDisposedError,
    ServerError,
    TinifyError,
    TinifyLibError,
)
from tinify_lib_python.errors.classification import (
    PARSE_ERROR,
    ErrorKind,
    ErrorPayload,
    classify_status,
    is_server_error,
)

__all__ = [
    "PARSE_ERROR",
    "AccountError",
    "ClientError",
    "ConnectionFailure",
    "ErrorContext",
    "ErrorKind",
    "ErrorPayload",
    "ImageDisposedError",
    "ServerError",
    "TinifyError",
    "TinifyLibError",
    "classify_status",
    "is_server_error",
]
