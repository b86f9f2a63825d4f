"""
Retry policy for the request engine.

The Tinify API is retried with a fixed budget and a fixed delay between
attempts; there is no exponential growth and no jitter.
"""

from __future__ import annotations

import os
from contextlib import suppress
from dataclasses import dataclass

# Default retry budget: one retry, at most two attempts in total.
DEFAULT_MAX_RETRIES = 1
DEFAULT_RETRY_DELAY_MS = 500


@dataclass(frozen=True)
class RetryConfig:
    """Configuration for retry policy.

    Attributes:
        max_retries: Number of retries after the first attempt (0 = none)
        delay_ms: Delay before every non-first attempt in milliseconds
    """

    max_retries: int = DEFAULT_MAX_RETRIES
    delay_ms: int = DEFAULT_RETRY_DELAY_MS

    def __post_init__(self) -> None:
        if self.max_retries < 0:
            raise ValueError("max_retries must be >= 0")
        if self.delay_ms < 0:
            raise ValueError("delay_ms must be >= 0")

    @classmethod
    def default(cls) -> RetryConfig:
        """Create default configuration, honouring TINIFY_RETRY_DELAY_MS."""
        delay_ms = DEFAULT_RETRY_DELAY_MS
        env_delay = os.getenv("TINIFY_RETRY_DELAY_MS")
        if env_delay:
            with suppress(ValueError):
                delay_ms = max(0, int(env_delay))
        return cls(delay_ms=delay_ms)

    @classmethod
    def no_retry(cls) -> RetryConfig:
        """Create a config that disables retries."""
        return cls(max_retries=0)

    @classmethod
    def immediate(cls, max_retries: int = DEFAULT_MAX_RETRIES) -> RetryConfig:
        """Create a config that retries without waiting (useful in tests)."""
        return cls(max_retries=max_retries, delay_ms=0)

    @property
    def max_attempts(self) -> int:
        """Total number of attempts including the first one."""
        return self.max_retries + 1

    @property
    def delay_seconds(self) -> float:
        """Delay between attempts in seconds."""
        return self.delay_ms / 1000.0
