"""Response envelopes and streaming event models for the Aiden API."""

from __future__ import annotations

import time
from collections.abc import Mapping
from dataclasses import dataclass
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class PaginationMeta(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True, alias_generator=to_camel, extra="allow")

    page: int
    limit: int
    total: int
    total_pages: int


class ResponseMeta(BaseModel):
    """Metadata included in every API response."""

    model_config = ConfigDict(frozen=True, populate_by_name=True, alias_generator=to_camel, extra="allow")

    request_id: str = "unknown"
    timestamp: str | None = None
    pagination: PaginationMeta | None = None


class ApiResponse(BaseModel):
    """Successful single-resource envelope: ``{data, meta}``."""

    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="allow")

    data: Any = None
    meta: ResponseMeta = Field(default_factory=ResponseMeta)


class PaginatedResponse(BaseModel):
    """Successful collection envelope: ``{data: [...], meta}``."""

    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="allow")

    data: list[Any] = Field(default_factory=list)
    meta: ResponseMeta = Field(default_factory=ResponseMeta)


class StreamEventType(str, Enum):
    """Event types the API emits on its SSE endpoints."""

    CONNECTED = "connected"
    SESSION_CREATED = "session_created"
    THINKING_START = "thinking_start"
    ANALYSIS_RESULT = "analysis_result"
    DECISION_TRACE = "decision_trace"
    PDCA_STEP = "pdca_step"
    THINKING_COMPLETE = "thinking_complete"
    EXECUTION_START = "execution_start"
    GENERATION_START = "generation_start"
    DELTA = "delta"
    FALLBACK = "fallback"
    RAG_SEARCH_START = "rag_search_start"
    RAG_SEARCH_RESULT = "rag_search_result"
    RAG_CITATION = "rag_citation"
    PROXY_SEARCH_START = "proxy_search_start"
    PROXY_SEARCH_RESULT = "proxy_search_result"
    CITATION = "citation"
    TOOL_CALL_START = "tool_call_start"
    TOOL_CALL_PROGRESS = "tool_call_progress"
    TOOL_CALL_RESULT = "tool_call_result"
    USAGE = "usage"
    DOCUMENT_CREATED = "document_created"
    COMPLETE = "complete"
    ERROR = "error"
    MESSAGE = "message"


THINKING_EVENT_TYPES: frozenset[str] = frozenset(
    {
        StreamEventType.THINKING_START.value,
        StreamEventType.ANALYSIS_RESULT.value,
        StreamEventType.DECISION_TRACE.value,
        StreamEventType.PDCA_STEP.value,
        StreamEventType.THINKING_COMPLETE.value,
    }
)


class Phase(str, Enum):
    """Stage of the server's plan-do-check-act cycle that produced an event."""

    PLAN = "plan"
    DO = "do"
    CHECK = "check"
    ACT = "act"


class Visibility(str, Enum):
    PROMINENT = "prominent"
    DETAIL = "detail"
    HIDDEN = "hidden"


@dataclass(frozen=True, slots=True)
class StreamEvent:
    """Single SSE event. ``type`` is a plain string so unknown server types survive."""

    type: str
    phase: str
    data: Any
    timestamp: int | float | None
    visibility: str = Visibility.PROMINENT.value
    suggested_delay: int | float | None = None

    @classmethod
    def from_payload(cls, payload: Mapping[str, Any]) -> StreamEvent:
        """Build an event from a fully formed server payload."""

        return cls(
            type=str(payload["type"]),
            phase=str(payload.get("phase") or Phase.DO.value),
            data=payload.get("data"),
            timestamp=payload["timestamp"],
            visibility=str(payload.get("visibility") or Visibility.PROMINENT.value),
            suggested_delay=payload.get("suggestedDelay"),
        )

    @classmethod
    def wrap(cls, event_type: str, data: Any) -> StreamEvent:
        """Wrap a bare payload as a prominent ``do``-phase event stamped now."""

        return cls(
            type=event_type,
            phase=Phase.DO.value,
            data=data,
            timestamp=now_ms(),
            visibility=Visibility.PROMINENT.value,
        )

    @property
    def is_thinking(self) -> bool:
        return self.type in THINKING_EVENT_TYPES


def now_ms() -> int:
    return int(time.time() * 1000)


__all__ = [
    "ApiResponse",
    "PaginatedResponse",
    "PaginationMeta",
    "Phase",
    "ResponseMeta",
    "StreamEvent",
    "StreamEventType",
    "THINKING_EVENT_TYPES",
    "Visibility",
    "now_ms",
]
