"""
Client layer - User-facing API.

This module provides:
- TinifyClient: Main entry point for image compression
- TinifyClientBuilder: Fluent client configuration
- OptimizedImage: Handle to an uploaded image
- ImageResult: Fetched image bytes and metadata
"""

from tinify_lib_python.client.builder import TinifyClientBuilder
from tinify_lib_python.client.core import SHRINK_PATH, TinifyClient
from tinify_lib_python.client.optimized import OptimizedImage
from tinify_lib_python.client.result import ImageResult

__all__ = [
    "SHRINK_PATH",
    "ImageResult",
    "OptimizedImage",
    "TinifyClient",
    "TinifyClientBuilder",
]
