"""Retrying HTTP transport for the albatross API.

Network-level failures (no status code obtained) are retried with
exponential backoff under the configured ``RetryPolicy``. Any response,
including 4xx and 5xx, ends the exchange and is handed back to the caller
for payload parsing.
"""

from __future__ import annotations

import asyncio
from collections.abc import AsyncIterable, Awaitable, Callable, Coroutine, Iterable
from dataclasses import dataclass
from typing import IO, Any, Protocol, Union

import httpx
from tenacity import RetryCallState, RetryError

from albatross.config import TransportConfig
from albatross.core.exceptions import (
    BodyReadError,
    CancellationError,
    NetworkError,
    RequestConstructionError,
    ResponseBodyReadError,
    RetriesExhaustedError,
)
from albatross.core.logging import DiagnosticSink, get_logger
from albatross.utils.retry import with_retry

STANDARD_METHODS = frozenset(
    {"GET", "HEAD", "POST", "PUT", "PATCH", "DELETE", "OPTIONS", "TRACE", "CONNECT"}
)

# Logged excerpt of a 5xx payload
_LOG_BODY_LIMIT = 500

RequestBody = Union[bytes, bytearray, str, IO[bytes], Iterable[bytes], AsyncIterable[bytes]]


class RequestExecutor(Protocol):
    """Performs one exchange. ``httpx.AsyncClient`` satisfies this."""

    async def send(self, request: httpx.Request, *, stream: bool = False) -> httpx.Response: ...


@dataclass(frozen=True)
class Exchanged:
    response: httpx.Response


@dataclass(frozen=True)
class Failed:
    error: NetworkError


Outcome = Union[Exchanged, Failed]


@dataclass(frozen=True)
class ResponseEnvelope:
    status_code: int
    body: bytes
    response: httpx.Response


class RetryingTransport:
    """Sends requests through an executor, retrying network failures."""

    def __init__(
        self,
        executor: RequestExecutor,
        config: TransportConfig,
        logger: DiagnosticSink | None = None,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ) -> None:
        self._executor = executor
        self._config = config
        self._timeout = httpx.Timeout(config.timeout)
        self._logger = logger if logger is not None else get_logger(__name__)
        self._sleep = sleep

    @property
    def config(self) -> TransportConfig:
        return self._config

    async def send(
        self,
        url: str,
        method: str,
        body: RequestBody | None = None,
        *,
        headers: dict[str, str] | None = None,
        cancel: asyncio.Event | None = None,
        deadline: float | None = None,
    ) -> ResponseEnvelope:
        """Send ``method url`` and return the drained response.

        ``cancel`` aborts a pending backoff wait or in-flight exchange when
        set; ``deadline`` bounds the whole call in seconds. Both surface as
        ``CancellationError``.
        """
        try:
            async with asyncio.timeout(deadline):
                exchange = self._send(url, method, body, headers)
                if cancel is None:
                    return await exchange
                return await _until_cancelled(exchange, cancel)
        except TimeoutError as exc:
            raise CancellationError(
                message="deadline exceeded",
                detail=f"url={url}, deadline={deadline}",
            ) from exc

    async def _send(
        self,
        url: str,
        method: str,
        body: RequestBody | None,
        headers: dict[str, str] | None,
    ) -> ResponseEnvelope:
        content = await _read_body(body)

        policy = self._config.retry
        if policy is None:
            outcome = await self._attempt(url, method, content, headers)
        else:
            retrying = with_retry(
                policy,
                should_retry=lambda result: isinstance(result, Failed),
                sleep=self._sleep,
                before_sleep=self._log_retry,
            )
            try:
                outcome = await retrying(self._attempt, url, method, content, headers)
            except RetryError as exc:
                failed = exc.last_attempt.result()
                raise RetriesExhaustedError(
                    failed.error, attempts=exc.last_attempt.attempt_number
                ) from failed.error

        if isinstance(outcome, Failed):
            raise outcome.error
        return await self._drain(url, outcome.response)

    async def _attempt(
        self,
        url: str,
        method: str,
        content: bytes | None,
        headers: dict[str, str] | None,
    ) -> Outcome:
        # A fresh request per attempt so the body stream is never half consumed.
        request = self._build_request(url, method, content, headers)
        try:
            response = await self._executor.send(request, stream=True)
        except (httpx.TransportError, OSError) as exc:
            self._logger.error("network_error", url=url, method=request.method, error=str(exc))
            return Failed(NetworkError.from_exception(exc, url=url))
        return Exchanged(response)

    def _build_request(
        self,
        url: str,
        method: str,
        content: bytes | None,
        headers: dict[str, str] | None,
    ) -> httpx.Request:
        verb = method.upper()
        if verb not in STANDARD_METHODS:
            raise RequestConstructionError(
                message=f"unsupported HTTP method: {method}",
                detail=f"url={url}",
            )
        try:
            request = httpx.Request(
                verb,
                url,
                content=content,
                headers=headers,
                extensions={"timeout": self._timeout.as_dict()},
            )
        except (httpx.InvalidURL, TypeError, ValueError) as exc:
            raise RequestConstructionError(
                message=f"invalid request: {exc}",
                detail=f"method={verb}, url={url}",
            ) from exc
        if request.url.scheme not in ("http", "https") or not request.url.host:
            raise RequestConstructionError(
                message=f"url must be absolute http(s): {url}",
                detail=f"method={verb}",
            )
        return request

    async def _drain(self, url: str, response: httpx.Response) -> ResponseEnvelope:
        try:
            data = await response.aread()
        except (httpx.HTTPError, OSError) as exc:
            raise ResponseBodyReadError(
                message=f"failed to read response body: {exc}",
                status_code=response.status_code,
                response=response,
                detail=f"url={url}",
            ) from exc
        finally:
            await response.aclose()

        if response.status_code >= 500:
            # Returned as-is so the caller can parse the error payload
            self._logger.error(
                "server_error",
                url=url,
                status_code=response.status_code,
                body=data[:_LOG_BODY_LIMIT].decode("utf-8", errors="replace"),
            )

        return ResponseEnvelope(status_code=response.status_code, body=data, response=response)

    def _log_retry(self, retry_state: RetryCallState) -> None:
        delay = retry_state.next_action.sleep if retry_state.next_action else 0.0
        self._logger.debug(
            "retry_scheduled",
            attempt=retry_state.attempt_number,
            delay_seconds=delay,
        )


async def _read_body(body: RequestBody | None) -> bytes | None:
    if body is None:
        return None
    if isinstance(body, (bytes, bytearray)):
        return bytes(body)
    if isinstance(body, str):
        return body.encode("utf-8")
    try:
        if hasattr(body, "read"):
            data = body.read()
            if isinstance(data, str):
                data = data.encode("utf-8")
            return bytes(data)
        if isinstance(body, AsyncIterable):
            chunks = [chunk async for chunk in body]
            return b"".join(chunks)
        if isinstance(body, Iterable):
            return b"".join(bytes(chunk) for chunk in body)
    except (OSError, ValueError, TypeError) as exc:
        raise BodyReadError(message=f"error reading the request body: {exc}") from exc
    raise BodyReadError(
        message=f"unsupported request body type: {type(body).__name__}",
    )


async def _until_cancelled(
    exchange: Coroutine[Any, Any, ResponseEnvelope], cancel: asyncio.Event
) -> ResponseEnvelope:
    """Run ``exchange`` until it finishes or ``cancel`` is set."""
    task = asyncio.ensure_future(exchange)
    waiter = asyncio.ensure_future(cancel.wait())
    try:
        await asyncio.wait({task, waiter}, return_when=asyncio.FIRST_COMPLETED)
    except asyncio.CancelledError:
        await _cancel_and_wait(task)
        raise
    finally:
        waiter.cancel()

    if task.done():
        return task.result()

    await _cancel_and_wait(task)
    raise CancellationError(message="request cancelled")


async def _cancel_and_wait(task: asyncio.Future[ResponseEnvelope]) -> None:
    # Lets the exchange run its cleanup so an open response is closed before we return.
    task.cancel()
    try:
        await task
    except asyncio.CancelledError:
        pass
