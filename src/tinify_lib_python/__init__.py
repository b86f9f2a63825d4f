"""tinify-lib-python: async Python client for the Tinify image compression API.

Upload images, fetch the compressed result, and apply server-side
transforms (resize, metadata preservation, format conversion, cloud
storage) over pooled, retrying HTTP connections.
"""
from __future__ import annotations

from tinify_lib_python._features import HAS_HTTP2, HAS_KEYRING, require_extra
from tinify_lib_python.client import (
    ImageResult,
    OptimizedImage,
    TinifyClient,
    TinifyClientBuilder,
)
from tinify_lib_python.errors import (
    AccountError,
    ClientError,
    ConnectionFailure,
    ErrorKind,
    ImageDisposedError,
    ServerError,
    TinifyError,
    TinifyLibError,
)
from tinify_lib_python.operations import (
    AwsCloudStoreOperation,
    CloudStoreHeaders,
    ConvertOperation,
    GoogleCloudStoreOperation,
    ImageFormat,
    PreserveOperation,
    PreserveOptions,
    ResizeMethod,
    ResizeOperation,
    TransformOperations,
)
from tinify_lib_python.resilience import RetryConfig
from tinify_lib_python.transport import ConnectionRegistry, PoolConfig

__version__ = "0.1.0"

__all__ = [
    # Client
    "ImageResult",
    "OptimizedImage",
    "TinifyClient",
    "TinifyClientBuilder",
    # Feature flags
    "HAS_HTTP2",
    "HAS_KEYRING",
    "require_extra",
    # Errors
    "AccountError",
    "ClientError",
    "ConnectionFailure",
    "ErrorKind",
    "ImageDisposedError",
    "ServerError",
    "TinifyError",
    "TinifyLibError",
    # Operations
    "AwsCloudStoreOperation",
    "CloudStoreHeaders",
    "ConvertOperation",
    "GoogleCloudStoreOperation",
    "ImageFormat",
    "PreserveOperation",
    "PreserveOptions",
    "ResizeMethod",
    "ResizeOperation",
    "TransformOperations",
    # Connections
    "ConnectionRegistry",
    "PoolConfig",
    "RetryConfig",
    # Version
    "__version__",
]
