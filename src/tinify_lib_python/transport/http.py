"""HTTP request engine for the Tinify API.

Issues one logical operation against the API with:
- A fixed retry budget and fixed delay between attempts
- Retries on transport failures, timeouts and 5xx responses
- Compression-Count tracking on every response
- Classification of terminal failures into TinifyError kinds
"""

from __future__ import annotations

import asyncio
import json as json_module
import os
from contextlib import suppress
from typing import Any

import httpx

from tinify_lib_python.errors import (
    ConnectionFailure,
    ErrorPayload,
    TinifyError,
    is_server_error,
)
from tinify_lib_python.resilience.retry import RetryConfig
from tinify_lib_python.telemetry.logger import get_logger
from tinify_lib_python.telemetry.usage import COMPRESSION_COUNT_HEADER, CompressionCounter

logger = get_logger(__name__)

TIMEOUT_MESSAGE = "Timeout while connecting"
CONNECTION_ERROR_PREFIX = "Error while connecting: "

_JSON_HEADERS = {"Content-Type": "application/json"}


def _env_timeout() -> float | None:
    """Read TINIFY_TIMEOUT_SECS, None when unset or invalid."""
    env_timeout = os.getenv("TINIFY_TIMEOUT_SECS")
    if env_timeout:
        with suppress(ValueError):
            return float(env_timeout)
    return None


async def _wait(seconds: float) -> None:
    """Suspend the calling task between attempts."""
    await asyncio.sleep(seconds)


def _transport_message(exc: BaseException) -> str:
    inner = exc.__cause__ if exc.__cause__ is not None else exc
    return str(inner) or type(inner).__name__


class RequestEngine:
    """Executes requests against a pooled API connection.

    ``execute`` either returns a 2xx response or raises a ``TinifyError``;
    no other exception type escapes it for network or protocol failures.

    Request bodies must be re-sendable: ``content`` is held as ``bytes``
    and ``json`` is serialized once, so every attempt sends the same
    payload.

    Example:
        >>> engine = RequestEngine(client, counter=registry.compression_counter)
        >>> response = await engine.execute("POST", "/shrink", content=data)
    """

    def __init__(
        self,
        client: httpx.AsyncClient,
        *,
        counter: CompressionCounter | None = None,
        retry: RetryConfig | None = None,
        timeout: float | None = None,
    ) -> None:
        """Initialize the engine.

        Args:
            client: Pooled client from the connection registry
            counter: Compression counter to update from responses
            retry: Retry configuration
            timeout: Per-request timeout in seconds (None = TINIFY_TIMEOUT_SECS
                or unlimited)
        """
        self._client = client
        self._counter = counter or CompressionCounter()
        self._retry = retry or RetryConfig.default()
        self._timeout = timeout if timeout is not None else _env_timeout()

    @property
    def retry_config(self) -> RetryConfig:
        """Retry configuration used by this engine."""
        return self._retry

    @property
    def counter(self) -> CompressionCounter:
        """Compression counter updated by this engine."""
        return self._counter

    def _encode_body(
        self, content: bytes | None, json: Any
    ) -> tuple[bytes | None, dict[str, str] | None]:
        if content is not None and json is not None:
            raise ValueError("Pass either content or json, not both")
        if json is not None:
            payload = json_module.dumps(json, separators=(",", ":"))
            return payload.encode("utf-8"), _JSON_HEADERS
        if content is None:
            return None, None
        if not isinstance(content, (bytes, bytearray, memoryview)):
            raise TypeError(
                "Request content must be bytes-like so it can be re-sent on retry, "
                f"got {type(content).__name__}"
            )
        return bytes(content), None

    async def execute(
        self,
        method: str,
        url: str | httpx.URL,
        *,
        content: bytes | None = None,
        json: Any = None,
    ) -> httpx.Response:
        """Execute one logical operation with retry.

        Args:
            method: HTTP method
            url: Target, relative to the API endpoint or absolute
            content: Raw request body
            json: JSON-serializable request body

        Returns:
            Successful (2xx) response with its body read

        Raises:
            TinifyError: Classified failure once the retry budget is spent
                or on a non-retryable status
        """
        body, headers = self._encode_body(content, json)
        attempts = self._retry.max_attempts

        for attempt in range(attempts):
            remaining = attempts - attempt - 1
            if attempt > 0:
                await _wait(self._retry.delay_seconds)

            try:
                response = await self._client.request(
                    method,
                    url,
                    content=body,
                    headers=headers,
                    timeout=self._timeout,
                )
            except (httpx.TimeoutException, TimeoutError) as e:
                if remaining > 0:
                    logger.warning(
                        "Request timed out, retrying",
                        method=method,
                        url=str(url),
                        attempt=attempt + 1,
                    )
                    continue
                raise ConnectionFailure.from_transport(TIMEOUT_MESSAGE, e) from e
            except Exception as e:
                if remaining > 0:
                    logger.warning(
                        "Request failed, retrying",
                        method=method,
                        url=str(url),
                        attempt=attempt + 1,
                        error=_transport_message(e),
                    )
                    continue
                inner = e.__cause__ if e.__cause__ is not None else e
                raise ConnectionFailure.from_transport(
                    CONNECTION_ERROR_PREFIX + _transport_message(e), inner
                ) from inner

            counts = response.headers.get_list(COMPRESSION_COUNT_HEADER, split_commas=True)
            self._counter.observe(counts[0] if counts else None)

            if response.is_success:
                return response

            if remaining > 0 and is_server_error(response.status_code):
                logger.warning(
                    "Server error, retrying",
                    method=method,
                    url=str(url),
                    attempt=attempt + 1,
                    status=response.status_code,
                )
                await response.aclose()
                continue

            error_body = response.content
            await response.aclose()
            payload = ErrorPayload.parse(error_body)
            error = TinifyError.from_response(
                payload.message, payload.error, response.status_code
            )
            logger.debug(
                "Request failed",
                method=method,
                url=str(url),
                status=response.status_code,
                kind=error.kind.value,
                error_type=payload.error,
            )
            raise error

        # Every iteration either returns, raises or continues with budget left.
        raise ConnectionFailure.from_transport(TIMEOUT_MESSAGE)
