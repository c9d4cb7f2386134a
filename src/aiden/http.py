"""HTTP transport for the Aiden API.

``HttpClient`` owns request construction (URL, auth headers, JSON body), a
per-call timeout, bounded retries with exponential backoff for 429 and 5xx
responses, and translation of every failure into a typed ``AidenError``.
"""

from __future__ import annotations

import asyncio
import contextlib
import json
import random
import time
from collections.abc import Awaitable, Callable, Mapping
from dataclasses import dataclass, field
from email.utils import parsedate_to_datetime
from typing import Any, Literal, TypeVar

import httpx
import pydantic

from aiden.config import ClientConfig, SendFn
from aiden.errors import (
    DEFAULT_RETRY_AFTER_MS,
    UNKNOWN_REQUEST_ID,
    AidenError,
    APIConnectionError,
    APITimeoutError,
    error_from_response,
)
from aiden.types import ApiResponse, PaginatedResponse

HttpMethod = Literal["GET", "POST", "PUT", "PATCH", "DELETE"]
QueryValue = str | int | float | bool | None
EventLogger = Callable[[str, dict[str, object]], None]

MAX_BACKOFF_MS = 30_000
MAX_JITTER_MS = 500

EnvelopeT = TypeVar("EnvelopeT", ApiResponse, PaginatedResponse)


@dataclass(frozen=True, slots=True)
class RequestOptions:
    """Per-request overrides accepted by every SDK method."""

    timeout: float | None = None
    user_id: str | None = None
    headers: Mapping[str, str] = field(default_factory=dict)
    cancel: asyncio.Event | None = None

    def __post_init__(self) -> None:
        if self.timeout is not None and self.timeout <= 0:
            raise ValueError("timeout must be positive when provided")

    def with_headers(self, headers: Mapping[str, str]) -> RequestOptions:
        merged = {**self.headers, **headers}
        return RequestOptions(timeout=self.timeout, user_id=self.user_id, headers=merged, cancel=self.cancel)


class _TimedOut(Exception):
    pass


class _Cancelled(Exception):
    pass


class HttpClient:
    """Executes API calls with auth, timeouts, retries, and error classification."""

    def __init__(
        self,
        config: ClientConfig,
        *,
        logger: EventLogger | None = None,
        sleep: Callable[[float], Awaitable[Any]] = asyncio.sleep,
        rng: Callable[[], float] = random.random,
        now: Callable[[], float] = time.time,
    ) -> None:
        self.config = config
        self.base_url = config.base_url.rstrip("/")
        self.max_retries = config.max_retries
        self.default_timeout = config.timeout
        self._logger = logger
        self._sleep = sleep
        self._rng = rng
        self._now = now

        transport = config.transport
        self._owns_client = transport is None
        self._client: httpx.AsyncClient | None = None
        if transport is None:
            self._client = httpx.AsyncClient(timeout=None, follow_redirects=True)
            self._send: SendFn = self._send_with_client
        elif isinstance(transport, httpx.AsyncClient):
            self._client = transport
            self._send = self._send_with_client
        elif callable(transport):
            self._send = transport
        else:  # pragma: no cover - ClientConfig rejects this first
            raise ValueError("No usable HTTP transport configured")

    async def request(
        self,
        method: HttpMethod,
        path: str,
        *,
        query: Mapping[str, QueryValue] | None = None,
        body: Any = None,
        files: Mapping[str, Any] | None = None,
        form: Mapping[str, str] | None = None,
        options: RequestOptions | None = None,
    ) -> ApiResponse:
        """Make an API request and return the single-resource envelope."""

        response = await self.request_raw(
            method, path, query=query, body=body, files=files, form=form, options=options
        )
        return await self._read_envelope(response, ApiResponse)

    async def request_paginated(
        self,
        method: HttpMethod,
        path: str,
        *,
        query: Mapping[str, QueryValue] | None = None,
        body: Any = None,
        options: RequestOptions | None = None,
    ) -> PaginatedResponse:
        """Make an API request for a list endpoint and return the collection envelope."""

        response = await self.request_raw(method, path, query=query, body=body, options=options)
        return await self._read_envelope(response, PaginatedResponse)

    async def request_raw(
        self,
        method: HttpMethod,
        path: str,
        *,
        query: Mapping[str, QueryValue] | None = None,
        body: Any = None,
        files: Mapping[str, Any] | None = None,
        form: Mapping[str, str] | None = None,
        options: RequestOptions | None = None,
    ) -> httpx.Response:
        """Make an API request and return the unread response (streaming, downloads).

        The caller owns the returned response and must close it.

        ``files``/``form`` send a multipart body instead of JSON.
        """

        options = options or RequestOptions()
        url = self.build_url(path, query)
        timeout = options.timeout if options.timeout is not None else self.default_timeout
        headers = self.build_headers(options)
        if files is not None:
            # httpx sets the multipart Content-Type with its boundary
            headers.pop("Content-Type", None)
            request = httpx.Request(method, url, headers=headers, files=files, data=form)
        else:
            request = httpx.Request(
                method,
                url,
                headers=headers,
                content=json.dumps(body).encode("utf-8") if body is not None else None,
            )

        last_error: AidenError | None = None

        for attempt in range(self.max_retries + 1):
            retries_left = attempt < self.max_retries
            start = time.perf_counter()
            try:
                response = await self._send_with_timeout(request, timeout, options.cancel)
            except _TimedOut:
                raise APITimeoutError(f"Request timed out after {timeout}s", timeout) from None
            except _Cancelled:
                raise APIConnectionError("Request was cancelled") from None
            except httpx.TimeoutException as exc:
                raise APITimeoutError(f"Request timed out after {timeout}s", timeout) from exc
            except httpx.ConnectError as exc:
                last_error = APIConnectionError(f"Failed to connect to {url}", exc)
            except AidenError:
                raise
            except Exception as exc:
                last_error = APIConnectionError(f"Request failed: {exc}", exc)
            else:
                status = response.status_code
                if response.is_success:
                    self._log(
                        "response_complete",
                        {
                            "status": status,
                            "request_id": response.headers.get("x-request-id"),
                            "duration_sec": time.perf_counter() - start,
                            "method": method,
                            "url": url,
                        },
                    )
                    return response

                error_body = await self._read_error_body(response)
                if status == 429 and retries_left:
                    retry_after_ms = self.parse_retry_after(response)
                    delay_ms = min(retry_after_ms, self.calculate_backoff(attempt))
                    last_error = error_from_response(status, error_body, retry_after_ms)
                    self._log_retry(attempt, delay_ms, status=status)
                    await self._sleep(delay_ms / 1000)
                    continue

                if status >= 500 and retries_left:
                    delay_ms = self.calculate_backoff(attempt)
                    last_error = error_from_response(status, error_body)
                    self._log_retry(attempt, delay_ms, status=status)
                    await self._sleep(delay_ms / 1000)
                    continue

                raise error_from_response(
                    status,
                    error_body,
                    self.parse_retry_after(response) if status == 429 else None,
                )

            if retries_left:
                delay_ms = self.calculate_backoff(attempt)
                self._log_retry(attempt, delay_ms, error=last_error.message)
                await self._sleep(delay_ms / 1000)

        raise last_error or APIConnectionError("Request failed after all retries")

    def build_url(self, path: str, query: Mapping[str, QueryValue] | None = None) -> str:
        clean_path = "/" + path.lstrip("/")
        url = httpx.URL(f"{self.base_url}{clean_path}")
        params = {key: _query_value(value) for key, value in (query or {}).items() if value is not None}
        if params:
            url = url.copy_merge_params(params)
        return str(url)

    def build_headers(self, options: RequestOptions) -> httpx.Headers:
        headers = httpx.Headers(
            {
                "Content-Type": "application/json",
                "Accept": "application/json",
                "Authorization": f"Bearer {self.config.api_key}",
            }
        )
        user_id = options.user_id if options.user_id is not None else self.config.user_id
        if user_id:
            headers["X-User-ID"] = user_id
        if options.headers:
            headers.update(options.headers)
        return headers

    def calculate_backoff(self, attempt: int) -> float:
        """Exponential backoff in milliseconds: 1s, 2s, 4s... plus jitter, capped at 30s."""

        base = (2**attempt) * 1000
        jitter = self._rng() * MAX_JITTER_MS
        return min(base + jitter, MAX_BACKOFF_MS)

    def parse_retry_after(self, response: httpx.Response) -> int:
        """Read ``Retry-After`` as seconds or an HTTP date; milliseconds, default 60s."""

        retry_after = response.headers.get("retry-after")
        if not retry_after:
            return DEFAULT_RETRY_AFTER_MS
        try:
            return int(retry_after.strip()) * 1000
        except ValueError:
            pass
        try:
            when = parsedate_to_datetime(retry_after)
        except (TypeError, ValueError):
            return DEFAULT_RETRY_AFTER_MS
        return max(0, int((when.timestamp() - self._now()) * 1000))

    async def aclose(self) -> None:
        if self._owns_client and self._client is not None:
            await self._client.aclose()

    async def _send_with_client(self, request: httpx.Request) -> httpx.Response:
        assert self._client is not None
        return await self._client.send(request, stream=True, follow_redirects=True)

    async def _send_with_timeout(
        self, request: httpx.Request, timeout: float, cancel: asyncio.Event | None
    ) -> httpx.Response:
        # A caller-supplied cancel event replaces the synthesized timeout.
        send_task = asyncio.ensure_future(self._send(request))
        cancel_task = asyncio.ensure_future(cancel.wait()) if cancel is not None else None
        waiters: set[asyncio.Future[Any]] = {send_task}
        if cancel_task is not None:
            waiters.add(cancel_task)
        try:
            done, _ = await asyncio.wait(
                waiters,
                timeout=None if cancel_task is not None else timeout,
                return_when=asyncio.FIRST_COMPLETED,
            )
        finally:
            if cancel_task is not None and not cancel_task.done():
                cancel_task.cancel()
            if not send_task.done():
                send_task.cancel()
                with contextlib.suppress(asyncio.CancelledError, Exception):
                    await send_task

        if send_task in done:
            return send_task.result()
        if cancel_task is not None and cancel_task in done:
            raise _Cancelled()
        raise _TimedOut()

    async def _read_error_body(self, response: httpx.Response) -> Any:
        try:
            await response.aread()
            return response.json()
        except (json.JSONDecodeError, UnicodeDecodeError, httpx.HTTPError):
            return {
                "error": {
                    "code": "UNKNOWN_ERROR",
                    "message": response.reason_phrase or f"HTTP {response.status_code}",
                },
                "meta": {"requestId": response.headers.get("x-request-id") or UNKNOWN_REQUEST_ID},
            }
        finally:
            await response.aclose()

    async def _read_envelope(self, response: httpx.Response, model: type[EnvelopeT]) -> EnvelopeT:
        header_request_id = response.headers.get("x-request-id") or UNKNOWN_REQUEST_ID
        try:
            content = await response.aread()
        except httpx.HTTPError as exc:
            raise APIConnectionError(f"Failed to read response body: {exc}", exc) from exc
        finally:
            await response.aclose()

        if response.status_code == 204 or not content.strip():
            return model(meta={"requestId": header_request_id})

        try:
            payload = json.loads(content)
        except (json.JSONDecodeError, UnicodeDecodeError) as exc:
            raise AidenError(
                "Response body is not valid JSON",
                code="INVALID_RESPONSE",
                status=response.status_code,
                request_id=header_request_id,
            ) from exc
        if not isinstance(payload, dict):
            raise AidenError(
                "Response body is not a JSON object",
                code="INVALID_RESPONSE",
                status=response.status_code,
                request_id=header_request_id,
            )

        meta = payload.get("meta")
        meta = dict(meta) if isinstance(meta, dict) else {}
        meta.setdefault("requestId", header_request_id)
        if meta["requestId"] is None:
            meta["requestId"] = header_request_id
        payload = {**payload, "meta": meta}
        try:
            return model.model_validate(payload)
        except pydantic.ValidationError as exc:
            raise AidenError(
                f"Response envelope has an unexpected shape: {exc.error_count()} validation error(s)",
                code="INVALID_RESPONSE",
                status=response.status_code,
                request_id=str(meta["requestId"]),
            ) from exc

    def _log_retry(self, attempt: int, delay_ms: float, **data: object) -> None:
        self._log("request_retry", {"attempt": attempt, "delay_ms": delay_ms, **data})

    def _log(self, event: str, data: dict[str, object]) -> None:
        if self._logger:
            self._logger(event, data)


def _query_value(value: QueryValue) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


__all__ = ["HttpClient", "HttpMethod", "RequestOptions", "EventLogger"]
