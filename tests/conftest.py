"""Root pytest fixtures for tinify-lib-python tests."""

from __future__ import annotations

from collections import deque
from typing import TYPE_CHECKING, Any

import httpx
import pytest

from tinify_lib_python.transport import ConnectionRegistry

if TYPE_CHECKING:
    from collections.abc import AsyncIterator

_TINIFY_ENV = (
    "TINIFY_API_KEY",
    "TINIFY_RETRY_DELAY_MS",
    "TINIFY_TIMEOUT_SECS",
    "TINIFY_HTTP_TRUST_ENV",
)


class FakeTinifyApi:
    """Scripted stand-in for the Tinify API behind ``httpx.MockTransport``.

    Outcomes are consumed in order: an ``httpx.Response`` is returned, an
    exception is raised from the transport. Every request is recorded.
    """

    def __init__(self) -> None:
        self.requests: list[httpx.Request] = []
        self._outcomes: deque[httpx.Response | BaseException] = deque()
        self.transport = httpx.MockTransport(self._handle)

    def enqueue(self, *outcomes: httpx.Response | BaseException) -> FakeTinifyApi:
        self._outcomes.extend(outcomes)
        return self

    def respond(
        self,
        status_code: int = 200,
        *,
        headers: dict[str, str] | None = None,
        content: bytes | None = None,
        json: Any = None,
    ) -> FakeTinifyApi:
        return self.enqueue(
            httpx.Response(status_code, headers=headers, content=content, json=json)
        )

    @property
    def pending(self) -> int:
        return len(self._outcomes)

    def _handle(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if not self._outcomes:
            raise AssertionError(f"Unexpected request: {request.method} {request.url}")
        outcome = self._outcomes.popleft()
        if isinstance(outcome, BaseException):
            raise outcome
        return outcome


@pytest.fixture(autouse=True)
def _isolated_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep host configuration and keyring out of tests."""
    for name in _TINIFY_ENV:
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setattr("tinify_lib_python.transport.auth._try_keyring", lambda: None)


@pytest.fixture(autouse=True)
def retry_waits(monkeypatch: pytest.MonkeyPatch) -> list[float]:
    """Record retry delays instead of sleeping."""
    waits: list[float] = []

    async def _record(seconds: float) -> None:
        waits.append(seconds)

    monkeypatch.setattr("tinify_lib_python.transport.http._wait", _record)
    return waits


@pytest.fixture
def api() -> FakeTinifyApi:
    """Scripted API reachable through ``api.transport``."""
    return FakeTinifyApi()


@pytest.fixture
async def registry() -> AsyncIterator[ConnectionRegistry]:
    """Fresh connection registry, closed after the test."""
    async with ConnectionRegistry() as reg:
        yield reg


def pytest_configure(config: pytest.Config) -> None:
    """Register custom markers."""
    config.addinivalue_line(
        "markers",
        "integration: mark test as exercising the default pooled transport end to end",
    )
