"""RAG search, thinking chat, and research sessions.

The streaming endpoints here return an ``AidenStream``; everything else
returns an envelope.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from aiden.http import RequestOptions
from aiden.resources.base import BaseResource
from aiden.streaming import AidenStream
from aiden.types import ApiResponse, PaginatedResponse


class KnowledgeResource(BaseResource):
    base_path = "/api/v1/knowledge"

    # Thinking chat

    async def think(self, params: Mapping[str, Any], options: RequestOptions | None = None) -> AidenStream:
        """Send a message to the unified thinking chat and stream the decision trace and answer."""

        return await self._stream(self._path("chat", "think"), dict(params), options)

    async def think_in_notebook(
        self, notebook_id: str, params: Mapping[str, Any], options: RequestOptions | None = None
    ) -> AidenStream:
        return await self._stream(self._path("notebooks", notebook_id, "chat", "think"), dict(params), options)

    # Chat sessions

    async def create_session(
        self, params: Mapping[str, Any] | None = None, options: RequestOptions | None = None
    ) -> ApiResponse:
        return await self._create(self._path("chat", "sessions"), dict(params or {}), options)

    async def list_sessions(
        self, params: Mapping[str, Any] | None = None, options: RequestOptions | None = None
    ) -> PaginatedResponse:
        return await self._list(self._path("chat", "sessions"), params, options)

    async def get_session(self, session_id: str, options: RequestOptions | None = None) -> ApiResponse:
        return await self._get(self._path("chat", "sessions", session_id), options=options)

    async def delete_session(self, session_id: str, options: RequestOptions | None = None) -> None:
        await self._delete(self._path("chat", "sessions", session_id), options)

    async def stream_message(
        self, session_id: str, params: Mapping[str, Any], options: RequestOptions | None = None
    ) -> AidenStream:
        return await self._stream(self._path("chat", "sessions", session_id, "stream"), dict(params), options)

    async def create_notebook_session(
        self,
        notebook_id: str,
        params: Mapping[str, Any] | None = None,
        options: RequestOptions | None = None,
    ) -> ApiResponse:
        return await self._create(self._path("notebooks", notebook_id, "chat", "sessions"), dict(params or {}), options)

    async def list_notebook_sessions(
        self,
        notebook_id: str,
        params: Mapping[str, Any] | None = None,
        options: RequestOptions | None = None,
    ) -> PaginatedResponse:
        return await self._list(self._path("notebooks", notebook_id, "chat", "sessions"), params, options)

    async def stream_notebook_message(
        self,
        notebook_id: str,
        session_id: str,
        params: Mapping[str, Any],
        options: RequestOptions | None = None,
    ) -> AidenStream:
        path = self._path("notebooks", notebook_id, "chat", "sessions", session_id, "stream")
        return await self._stream(path, dict(params), options)

    # RAG

    async def rag_ask(
        self, notebook_id: str, params: Mapping[str, Any], options: RequestOptions | None = None
    ) -> ApiResponse:
        """Answer a question from a notebook's knowledge with cited sources."""

        return await self._create(self._path("notebooks", notebook_id, "rag", "ask"), dict(params), options)

    async def rag_ask_stream(
        self, notebook_id: str, params: Mapping[str, Any], options: RequestOptions | None = None
    ) -> AidenStream:
        return await self._stream(self._path("notebooks", notebook_id, "rag", "ask", "stream"), dict(params), options)

    async def rag_search(
        self, notebook_id: str, params: Mapping[str, Any], options: RequestOptions | None = None
    ) -> ApiResponse:
        return await self._create(self._path("notebooks", notebook_id, "rag", "search"), dict(params), options)

    async def search(self, params: Mapping[str, Any], options: RequestOptions | None = None) -> ApiResponse:
        return await self._create(self._path("search"), dict(params), options)

    async def rag_stats(self, options: RequestOptions | None = None) -> ApiResponse:
        return await self._get(self._path("rag", "stats"), options=options)

    async def reindex(self, notebook_id: str, options: RequestOptions | None = None) -> ApiResponse:
        return await self._create(self._path("notebooks", notebook_id, "rag", "reindex"), {}, options)

    async def capabilities(self, options: RequestOptions | None = None) -> ApiResponse:
        return await self._get(self._path("chat", "capabilities"), options=options)

    # Research

    async def research_preview(self, params: Mapping[str, Any], options: RequestOptions | None = None) -> ApiResponse:
        return await self._create(self._path("research", "preview"), dict(params), options)

    async def create_research_session(
        self,
        notebook_id: str,
        params: Mapping[str, Any] | None = None,
        options: RequestOptions | None = None,
    ) -> ApiResponse:
        return await self._create(
            self._path("notebooks", notebook_id, "research", "sessions"), dict(params or {}), options
        )

    async def stream_research(
        self,
        notebook_id: str,
        session_id: str,
        params: Mapping[str, Any] | None = None,
        options: RequestOptions | None = None,
    ) -> AidenStream:
        path = self._path("notebooks", notebook_id, "research", "sessions", session_id, "stream")
        return await self._stream(path, dict(params or {}), options)


__all__ = ["KnowledgeResource"]
