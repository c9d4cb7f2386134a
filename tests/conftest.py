import json
import pathlib
import sys
from collections.abc import AsyncIterator, Callable
from typing import Any

import httpx
import pytest

PROJECT_ROOT = pathlib.Path(__file__).resolve().parents[1]
SRC_PATH = PROJECT_ROOT / "src"

# Ensure src/ is importable when running tests without installing the package.
if str(SRC_PATH) not in sys.path:
    sys.path.insert(0, str(SRC_PATH))

from aiden.config import ClientConfig  # noqa: E402
from aiden.http import HttpClient  # noqa: E402

BASE_URL = "https://api.test.com"
API_KEY = "test-key"


# ============================================================================
# HTTP Transport Fixtures
# ============================================================================


class RecordingSleep:
    """Async sleep replacement that records requested delays instead of waiting."""

    def __init__(self) -> None:
        self.calls: list[float] = []

    async def __call__(self, seconds: float) -> None:
        self.calls.append(seconds)


class RecordingHandler:
    """httpx.MockTransport handler replaying scripted responses and recording requests."""

    def __init__(self, responses: list[Any]) -> None:
        self._responses = list(responses)
        self.requests: list[httpx.Request] = []

    @property
    def call_count(self) -> int:
        return len(self.requests)

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        item = self._responses[0] if len(self._responses) == 1 else self._responses.pop(0)
        if isinstance(item, Exception):
            raise item
        if callable(item):
            return item(request)
        status, body, headers = item
        if isinstance(body, (dict, list)):
            return httpx.Response(status, json=body, headers=headers or {}, request=request)
        return httpx.Response(status, text=body or "", headers=headers or {}, request=request)


def envelope(data: Any = None, request_id: str = "req-1", **meta: Any) -> dict[str, Any]:
    return {"data": data, "meta": {"requestId": request_id, "timestamp": "2026-01-01T00:00:00Z", **meta}}


def error_body(code: str, message: str, request_id: str = "req-1", details: Any = None) -> dict[str, Any]:
    error: dict[str, Any] = {"code": code, "message": message}
    if details is not None:
        error["details"] = details
    return {"error": error, "meta": {"requestId": request_id, "timestamp": "2026-01-01T00:00:00Z"}}


@pytest.fixture
def recording_sleep() -> RecordingSleep:
    return RecordingSleep()


@pytest.fixture
def recording_handler() -> type[RecordingHandler]:
    """Factory fixture: ``recording_handler([(status, body, headers), ...])``."""

    return RecordingHandler


@pytest.fixture
def make_http(recording_sleep: RecordingSleep) -> Callable[..., HttpClient]:
    """Build an HttpClient backed by httpx.MockTransport with deterministic sleep and jitter."""

    def _make(handler: Callable[[httpx.Request], httpx.Response], **config: Any) -> HttpClient:
        client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
        cfg = ClientConfig(
            api_key=config.pop("api_key", API_KEY),
            base_url=config.pop("base_url", BASE_URL),
            transport=client,
            **config,
        )
        return HttpClient(cfg, sleep=recording_sleep, rng=lambda: 0.0)

    return _make


# ============================================================================
# SSE Fixtures
# ============================================================================


def sse_event(event_type: str, data: Any, *, phase: str = "do", visibility: str = "prominent") -> str:
    payload = {"type": event_type, "phase": phase, "data": data, "timestamp": 1_700_000_000_000, "visibility": visibility}
    return f"event: {event_type}\ndata: {json.dumps(payload)}\n\n"


def sse_response(chunks: list[bytes | str], *, fail_with: Exception | None = None) -> httpx.Response:
    """Response whose body yields ``chunks`` one at a time, optionally failing afterwards."""

    async def body() -> AsyncIterator[bytes]:
        for chunk in chunks:
            yield chunk.encode("utf-8") if isinstance(chunk, str) else chunk
        if fail_with is not None:
            raise fail_with

    return httpx.Response(200, content=body(), headers={"content-type": "text/event-stream"})
