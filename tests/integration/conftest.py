"""
Integration test fixtures.

Tests here go through the registry's default pooled transport, with
requests intercepted by pytest-httpx.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import pytest

from tinify_lib_python.client import TinifyClient

if TYPE_CHECKING:
    from tinify_lib_python.transport import ConnectionRegistry


@pytest.fixture
async def client(registry: ConnectionRegistry) -> TinifyClient:
    """Client on the default transport of a fresh registry."""
    return await TinifyClient.create("valid-key", registry=registry)
