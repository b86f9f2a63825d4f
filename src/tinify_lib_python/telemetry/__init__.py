"""
Telemetry - structured logging and API usage tracking.
"""

from tinify_lib_python.telemetry.logger import (
    LogLevel,
    SensitiveDataMasker,
    TextFormatter,
    TinifyLogger,
    get_logger,
)
from tinify_lib_python.telemetry.usage import COMPRESSION_COUNT_HEADER, CompressionCounter

__all__ = [
    "COMPRESSION_COUNT_HEADER",
    "CompressionCounter",
    "LogLevel",
    "SensitiveDataMasker",
    "TextFormatter",
    "TinifyLogger",
    "get_logger",
]
