"""Tests for the request engine."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

import httpx
import pytest

from tinify_lib_python.errors import (
    AccountError,
    ClientError,
    ConnectionFailure,
    ErrorKind,
    ServerError,
)
from tinify_lib_python.resilience import RetryConfig
from tinify_lib_python.telemetry import CompressionCounter
from tinify_lib_python.transport import RequestEngine

if TYPE_CHECKING:
    from tinify_lib_python.transport import ConnectionRegistry


async def _engine(
    registry: ConnectionRegistry,
    api,
    retry: RetryConfig | None = None,
    timeout: float | None = None,
) -> RequestEngine:
    client = await registry.acquire("key", api.transport)
    return RequestEngine(
        client,
        counter=registry.compression_counter,
        retry=retry,
        timeout=timeout,
    )


def _server_error(status: int = 584) -> httpx.Response:
    return httpx.Response(status, json={"error": "InternalServerError", "message": "Oops!"})


class TestSuccess:
    """Tests for successful requests."""

    @pytest.mark.asyncio
    async def test_returns_response(self, registry, api) -> None:
        """Test a 2xx response is returned as is."""
        api.respond(201, headers={"Location": "https://api.tinify.com/output/abc"})
        engine = await _engine(registry, api)

        response = await engine.execute("POST", "/shrink", content=b"png file")

        assert response.status_code == 201
        assert response.headers["Location"] == "https://api.tinify.com/output/abc"
        assert api.requests[0].content == b"png file"

    @pytest.mark.asyncio
    async def test_identity_headers(self, registry, api) -> None:
        """Test every request carries Basic auth and User-Agent."""
        api.respond(200)
        engine = await _engine(registry, api)

        await engine.execute("GET", "/")

        request = api.requests[0]
        assert request.headers["Authorization"] == "Basic YXBpOmtleQ=="
        assert request.headers["User-Agent"].startswith("tinify-lib-python/")
        assert request.url == httpx.URL("https://api.tinify.com/")

    @pytest.mark.asyncio
    async def test_absolute_url(self, registry, api) -> None:
        """Test absolute locations bypass the base URL."""
        api.respond(200)
        engine = await _engine(registry, api)

        await engine.execute("GET", "https://api.tinify.com/output/abc")

        assert api.requests[0].url == httpx.URL("https://api.tinify.com/output/abc")

    @pytest.mark.asyncio
    async def test_json_body(self, registry, api) -> None:
        """Test JSON bodies are compact and typed."""
        api.respond(201)
        engine = await _engine(registry, api)

        await engine.execute("POST", "/shrink", json={"source": {"url": "https://x/y.png"}})

        request = api.requests[0]
        assert request.headers["Content-Type"] == "application/json"
        assert request.content == b'{"source":{"url":"https://x/y.png"}}'

    @pytest.mark.asyncio
    async def test_compression_count(self, registry, api) -> None:
        """Test the counter follows the Compression-Count header."""
        api.respond(201, headers={"Compression-Count": "12"})
        engine = await _engine(registry, api)

        await engine.execute("POST", "/shrink")

        assert registry.compression_counter.value == 12
        assert engine.counter is registry.compression_counter

    @pytest.mark.asyncio
    async def test_compression_count_from_error_response(self, registry, api) -> None:
        """Test the counter is updated even when the request fails."""
        api.respond(
            400,
            headers={"Compression-Count": "7"},
            json={"error": "BadRequest", "message": "Oops!"},
        )
        engine = await _engine(registry, api)

        with pytest.raises(ClientError):
            await engine.execute("POST", "/shrink")

        assert registry.compression_counter.value == 7

    @pytest.mark.asyncio
    async def test_repeated_compression_count_uses_first(self, registry, api) -> None:
        """Test the first of repeated Compression-Count headers wins."""
        api.enqueue(
            httpx.Response(
                201, headers=[("Compression-Count", "7"), ("Compression-Count", "8")]
            )
        )
        engine = await _engine(registry, api)

        await engine.execute("POST", "/shrink")

        assert registry.compression_counter.value == 7

    @pytest.mark.asyncio
    async def test_invalid_compression_count_ignored(self, registry, api) -> None:
        """Test unparsable counts leave the counter alone."""
        api.respond(201, headers={"Compression-Count": "many"})
        engine = await _engine(registry, api)

        await engine.execute("POST", "/shrink")

        assert registry.compression_counter.value is None


class TestBodyValidation:
    """Tests for request body checks."""

    @pytest.mark.asyncio
    async def test_content_and_json_rejected(self, registry, api) -> None:
        """Test both body kinds at once is an error."""
        engine = await _engine(registry, api)
        with pytest.raises(ValueError, match="either content or json"):
            await engine.execute("POST", "/shrink", content=b"x", json={})
        assert api.requests == []

    @pytest.mark.asyncio
    async def test_non_bytes_content_rejected(self, registry, api) -> None:
        """Test bodies that cannot be re-sent are refused."""
        engine = await _engine(registry, api)
        with pytest.raises(TypeError, match="bytes-like"):
            await engine.execute("POST", "/shrink", content="text")  # type: ignore[arg-type]


class TestTransportFailures:
    """Tests for timeouts and connection errors."""

    @pytest.mark.asyncio
    async def test_timeout_once_then_success(self, registry, api, retry_waits) -> None:
        """Test a single timeout is retried."""
        api.enqueue(httpx.ReadTimeout("timed out"), httpx.Response(201))
        engine = await _engine(registry, api)

        response = await engine.execute("POST", "/shrink", content=b"png")

        assert response.status_code == 201
        assert len(api.requests) == 2
        assert api.requests[1].content == b"png"
        assert retry_waits == [0.5]

    @pytest.mark.asyncio
    async def test_timeout_twice(self, registry, api) -> None:
        """Test repeated timeouts surface as a connection error."""
        api.enqueue(httpx.ConnectTimeout("timed out"), httpx.ReadTimeout("timed out"))
        engine = await _engine(registry, api)

        with pytest.raises(ConnectionFailure) as exc_info:
            await engine.execute("POST", "/shrink")

        assert str(exc_info.value) == "Timeout while connecting"
        assert exc_info.value.kind is ErrorKind.CONNECTION
        assert isinstance(exc_info.value.__cause__, httpx.ReadTimeout)
        assert len(api.requests) == 2

    @pytest.mark.asyncio
    async def test_socket_error_twice(self, registry, api) -> None:
        """Test repeated connection errors carry the inner message."""
        api.enqueue(httpx.ConnectError("boom"), httpx.ConnectError("boom"))
        engine = await _engine(registry, api)

        with pytest.raises(ConnectionFailure) as exc_info:
            await engine.execute("GET", "/")

        assert str(exc_info.value) == "Error while connecting: boom"
        assert exc_info.value.status_code is None

    @pytest.mark.asyncio
    async def test_socket_error_uses_underlying_cause(self, registry, api) -> None:
        """Test the message comes from the underlying cause when chained."""
        outer = httpx.ConnectError("wrapper")
        outer.__cause__ = OSError("connection refused")
        api.enqueue(outer, outer)
        engine = await _engine(registry, api)

        with pytest.raises(ConnectionFailure) as exc_info:
            await engine.execute("GET", "/")

        assert str(exc_info.value) == "Error while connecting: connection refused"
        assert isinstance(exc_info.value.__cause__, OSError)

    @pytest.mark.asyncio
    async def test_socket_error_once_then_success(self, registry, api) -> None:
        """Test a single connection error is retried."""
        api.enqueue(OSError("reset"), httpx.Response(200))
        engine = await _engine(registry, api)

        response = await engine.execute("GET", "/")

        assert response.status_code == 200

    @pytest.mark.asyncio
    async def test_timeout_passed_per_request(self, registry, api) -> None:
        """Test the engine timeout is applied to each request."""
        api.respond(200)
        engine = await _engine(registry, api, timeout=2.5)

        await engine.execute("GET", "/")

        assert api.requests[0].extensions["timeout"]["read"] == 2.5


class TestServerErrors:
    """Tests for 5xx handling."""

    @pytest.mark.asyncio
    async def test_server_error_once_then_success(self, registry, api, retry_waits) -> None:
        """Test a single 5xx is retried."""
        api.enqueue(_server_error(), httpx.Response(201))
        engine = await _engine(registry, api)

        response = await engine.execute("POST", "/shrink")

        assert response.status_code == 201
        assert retry_waits == [0.5]

    @pytest.mark.asyncio
    async def test_server_error_twice(self, registry, api) -> None:
        """Test repeated 5xx surface as a server error."""
        api.enqueue(_server_error(), _server_error())
        engine = await _engine(registry, api)

        with pytest.raises(ServerError) as exc_info:
            await engine.execute("POST", "/shrink")

        assert str(exc_info.value) == "Oops! (HTTP 584/InternalServerError)"
        assert exc_info.value.kind is ErrorKind.SERVER
        assert len(api.requests) == 2

    @pytest.mark.asyncio
    async def test_server_error_unparsable_body(self, registry, api) -> None:
        """Test an unparsable 5xx body becomes a ParseError message."""
        api.enqueue(
            httpx.Response(543, content=b"<!-- this is not json -->"),
            httpx.Response(543, content=b"<!-- this is not json -->"),
        )
        engine = await _engine(registry, api)

        with pytest.raises(ServerError) as exc_info:
            await engine.execute("POST", "/shrink")

        error = exc_info.value
        assert error.status_code == 543
        assert error.error_type == "ParseError"
        assert error.server_message.startswith("Error while parsing response: ")
        assert str(error).endswith("(HTTP 543/ParseError)")

    @pytest.mark.asyncio
    async def test_server_error_empty_body(self, registry, api) -> None:
        """Test an empty 5xx body is reported as such."""
        api.enqueue(httpx.Response(503), httpx.Response(503))
        engine = await _engine(registry, api)

        with pytest.raises(ServerError) as exc_info:
            await engine.execute("GET", "/")

        assert str(exc_info.value) == "Response content was empty. (HTTP 503/ParseError)"

    @pytest.mark.asyncio
    async def test_retry_logged(self, registry, api, caplog) -> None:
        """Test retries are logged as warnings with the status."""
        api.enqueue(_server_error(503), httpx.Response(200))
        engine = await _engine(registry, api)

        with caplog.at_level(logging.WARNING, logger="tinify_lib_python.transport.http"):
            await engine.execute("GET", "/")

        record = caplog.records[-1]
        assert record.getMessage() == "Server error, retrying"
        assert record.extra_fields["status"] == 503


class TestClientAndAccountErrors:
    """Tests for non-retried statuses."""

    @pytest.mark.asyncio
    async def test_unauthorized(self, registry, api) -> None:
        """Test 401 is an account error and not retried."""
        api.respond(401, json={"error": "Unauthorized", "message": "Oops!"})
        engine = await _engine(registry, api)

        with pytest.raises(AccountError) as exc_info:
            await engine.execute("POST", "/shrink")

        assert str(exc_info.value) == "Oops! (HTTP 401/Unauthorized)"
        assert len(api.requests) == 1

    @pytest.mark.asyncio
    async def test_too_many_requests(self, registry, api) -> None:
        """Test 429 is an account error."""
        api.respond(429, json={"error": "TooManyRequests", "message": "Limit reached"})
        engine = await _engine(registry, api)

        with pytest.raises(AccountError) as exc_info:
            await engine.execute("POST", "/shrink")

        assert exc_info.value.status_code == 429

    @pytest.mark.asyncio
    async def test_client_error(self, registry, api, retry_waits) -> None:
        """Test other 4xx are client errors, not retried."""
        api.respond(492, json={"error": "BadRequest", "message": "Oops!"})
        engine = await _engine(registry, api)

        with pytest.raises(ClientError) as exc_info:
            await engine.execute("POST", "/shrink")

        assert exc_info.value.kind is ErrorKind.CLIENT
        assert str(exc_info.value) == "Oops! (HTTP 492/BadRequest)"
        assert len(api.requests) == 1
        assert retry_waits == []

    @pytest.mark.asyncio
    async def test_unexpected_status(self, registry, api) -> None:
        """Test a non-success, non-error status is a connection error."""
        api.respond(304)
        engine = await _engine(registry, api)

        with pytest.raises(ConnectionFailure) as exc_info:
            await engine.execute("GET", "/")

        assert exc_info.value.status_code == 304


class TestRetryBudget:
    """Tests for configurable retry budgets."""

    @pytest.mark.asyncio
    async def test_no_retry(self, registry, api, retry_waits) -> None:
        """Test a zero budget fails on the first transient error."""
        api.enqueue(_server_error())
        engine = await _engine(registry, api, retry=RetryConfig.no_retry())

        with pytest.raises(ServerError):
            await engine.execute("GET", "/")

        assert len(api.requests) == 1
        assert retry_waits == []

    @pytest.mark.asyncio
    async def test_larger_budget(self, registry, api, retry_waits) -> None:
        """Test each retry waits the configured delay."""
        api.enqueue(
            httpx.ConnectError("boom"),
            _server_error(),
            httpx.ReadTimeout("slow"),
            httpx.Response(200),
        )
        engine = await _engine(registry, api, retry=RetryConfig(max_retries=3, delay_ms=250))

        response = await engine.execute("GET", "/")

        assert response.status_code == 200
        assert retry_waits == [0.25, 0.25, 0.25]

    @pytest.mark.asyncio
    async def test_own_counter_by_default(self, registry, api) -> None:
        """Test an engine without a shared counter keeps its own."""
        api.respond(200, headers={"Compression-Count": "3"})
        client = await registry.acquire("key", api.transport)
        engine = RequestEngine(client)

        await engine.execute("GET", "/")

        assert isinstance(engine.counter, CompressionCounter)
        assert engine.counter.value == 3
        assert registry.compression_counter.value is None
        assert engine.retry_config == RetryConfig()
