"""
Resilience layer - retry configuration for the request engine.
"""

from tinify_lib_python.resilience.retry import (
    DEFAULT_MAX_RETRIES,
    DEFAULT_RETRY_DELAY_MS,
    RetryConfig,
)

__all__ = [
    "DEFAULT_MAX_RETRIES",
    "DEFAULT_RETRY_DELAY_MS",
    "RetryConfig",
]
