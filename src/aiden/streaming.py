"""Server-Sent Events parsing for POST-based streaming endpoints.

The Aiden API streams over POST, so the SSE wire format is decoded here from
the raw response bytes. ``SSEDecoder`` is the pure, incremental parser;
``AidenStream`` owns one response body and exposes it as a single-pass
sequence of ``StreamEvent`` objects:

    async with await client.knowledge.think({"message": "Hello"}) as stream:
        async for event in stream:
            if event.type == "delta":
                print(event.data["content"], end="")
"""

from __future__ import annotations

import codecs
import contextlib
import inspect
import json
from collections.abc import AsyncIterator, Callable
from enum import Enum
from typing import Any

import httpx

from aiden.errors import AidenError, APIConnectionError, StreamConsumedError
from aiden.types import StreamEvent, StreamEventType

EVENT_DELIMITER = "\n\n"

EventCallback = Callable[[StreamEvent], Any]


class SSEDecoder:
    """Incrementally turn SSE bytes into StreamEvents.

    Feed chunks as they arrive; complete records (terminated by a blank line)
    are returned immediately and the incomplete tail is kept for the next
    call. Multi-byte UTF-8 sequences split across chunks are preserved.
    """

    def __init__(self) -> None:
        self._decoder = codecs.getincrementaldecoder("utf-8")(errors="replace")
        self._buffer = ""

    def feed(self, chunk: bytes | str) -> list[StreamEvent]:
        text = self._decoder.decode(chunk) if isinstance(chunk, (bytes, bytearray)) else chunk
        self._buffer = (self._buffer + text).replace("\r\n", "\n")
        *complete, self._buffer = self._buffer.split(EVENT_DELIMITER)
        return _parse_records(complete)

    def flush(self) -> list[StreamEvent]:
        """Parse whatever remains once the byte source is exhausted."""

        remainder = self._buffer + self._decoder.decode(b"", final=True)
        self._buffer = ""
        if not remainder.strip():
            return []
        return _parse_records(remainder.replace("\r\n", "\n").split(EVENT_DELIMITER))


def _parse_records(records: list[str]) -> list[StreamEvent]:
    events: list[StreamEvent] = []
    for record in records:
        trimmed = record.strip()
        if not trimmed:
            continue
        event = parse_record(trimmed)
        if event is not None:
            events.append(event)
    return events


def parse_record(record: str) -> StreamEvent | None:
    """Parse one blank-line-delimited SSE record; ``None`` when it carries no data."""

    data = ""
    event_type = ""
    for line in record.split("\n"):
        if line.startswith("data:"):
            value = line[len("data:") :]
            data += value[1:] if value.startswith(" ") else value
        elif line.startswith("event:"):
            event_type = line[len("event:") :].strip()
        # id:, retry: and ":" comment lines carry nothing we surface

    if not data:
        return None

    try:
        payload = json.loads(data)
    except json.JSONDecodeError:
        return StreamEvent.wrap(StreamEventType.DELTA.value, {"content": data})

    # The API usually sends fully formed events as the data payload.
    if isinstance(payload, dict) and payload.get("type") and "timestamp" in payload:
        return StreamEvent.from_payload(payload)
    return StreamEvent.wrap(event_type or StreamEventType.MESSAGE.value, payload)


class StreamState(str, Enum):
    UNCONSUMED = "unconsumed"
    CONSUMING = "consuming"
    EXHAUSTED = "exhausted"


class AidenStream:
    """Single-pass async sequence of StreamEvents read from one SSE response."""

    def __init__(self, response: httpx.Response) -> None:
        self._response = response
        self._state = StreamState.UNCONSUMED
        self._iterator: AsyncIterator[StreamEvent] | None = None

    @property
    def state(self) -> StreamState:
        return self._state

    @property
    def response(self) -> httpx.Response:
        return self._response

    def __aiter__(self) -> AsyncIterator[StreamEvent]:
        if self._state is not StreamState.UNCONSUMED:
            raise StreamConsumedError("Stream has already been consumed. SSE streams can only be read once.")
        self._state = StreamState.CONSUMING
        self._iterator = self._iterate()
        return self._iterator

    async def __aenter__(self) -> AidenStream:
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()

    async def _iterate(self) -> AsyncIterator[StreamEvent]:
        decoder = SSEDecoder()
        try:
            try:
                async for chunk in self._response.aiter_bytes():
                    for event in decoder.feed(chunk):
                        yield event
            except (httpx.StreamConsumed, httpx.StreamClosed) as exc:
                raise APIConnectionError("Response body is not available -- no stream available", exc) from exc
            except httpx.HTTPError as exc:
                raise APIConnectionError(f"Stream read failed: {exc}", exc) from exc
            for event in decoder.flush():
                yield event
        finally:
            self._state = StreamState.EXHAUSTED
            await self._response.aclose()

    async def subscribe(
        self,
        *,
        on_event: EventCallback | None = None,
        on_delta: Callable[[str], Any] | None = None,
        on_complete: Callable[[Any], Any] | None = None,
        on_error: Callable[[Exception], Any] | None = None,
        on_thinking: EventCallback | None = None,
    ) -> Any:
        """Drive the stream through callbacks; return the last ``complete`` payload.

        Callbacks may be plain functions or coroutine functions. Without
        ``on_error`` failures propagate; with it they are delivered there
        instead.
        """

        iterator = self.__aiter__()
        complete_data: Any = None

        try:
            async for event in iterator:
                await _call(on_event, event)
                if event.type == StreamEventType.DELTA:
                    await _call(on_delta, _delta_content(event))
                elif event.type == StreamEventType.COMPLETE:
                    complete_data = event.data
                    await _call(on_complete, complete_data)
                elif event.type == StreamEventType.ERROR:
                    await _call(on_error, _stream_error(event))
                elif event.is_thinking:
                    await _call(on_thinking, event)
        except Exception as exc:
            if on_error is None:
                raise
            await _call(on_error, exc)

        return complete_data

    async def text(self) -> str:
        """Collect every delta's content into one string."""

        parts: list[str] = []
        async for event in self:
            if event.type == StreamEventType.DELTA:
                parts.append(_delta_content(event))
        return "".join(parts)

    async def abort(self) -> None:
        """Best-effort cancellation of the underlying byte stream."""

        with contextlib.suppress(Exception):
            await self._response.aclose()

    async def aclose(self) -> None:
        """Stop any in-progress iteration and release the response body."""

        if self._iterator is not None:
            aclose = getattr(self._iterator, "aclose", None)
            if callable(aclose):
                await aclose()
        await self.abort()


async def _call(callback: Callable[..., Any] | None, *args: Any) -> None:
    if callback is None:
        return
    result = callback(*args)
    if inspect.isawaitable(result):
        await result


def _delta_content(event: StreamEvent) -> str:
    data = event.data
    if isinstance(data, dict):
        content = data.get("content")
        return content if isinstance(content, str) else ""
    return ""


def _stream_error(event: StreamEvent) -> AidenError:
    data = event.data if isinstance(event.data, dict) else {}
    message = data.get("message") if isinstance(data.get("message"), str) else "Stream reported an error"
    code = data.get("code") if isinstance(data.get("code"), str) else "STREAM_ERROR"
    return AidenError(message, code=code, status=0)


__all__ = ["AidenStream", "SSEDecoder", "StreamState", "parse_record"]
