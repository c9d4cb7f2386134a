"""Public chat widget sessions and message feedback.

Knowledge-backed chat (RAG, thinking) lives on ``KnowledgeResource``.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from aiden.http import RequestOptions
from aiden.resources.base import BaseResource
from aiden.types import ApiResponse


class ChatResource(BaseResource):
    base_path = "/api/v1/chat"

    async def create_widget_session(
        self, widget_id: str, params: Mapping[str, Any] | None = None, options: RequestOptions | None = None
    ) -> ApiResponse:
        return await self._create(self._path(widget_id, "session"), dict(params or {}), options)

    async def send_widget_message(
        self, widget_id: str, params: Mapping[str, Any], options: RequestOptions | None = None
    ) -> ApiResponse:
        return await self._create(self._path(widget_id, "message"), dict(params), options)

    async def get_widget_session(
        self, widget_id: str, session_id: str, options: RequestOptions | None = None
    ) -> ApiResponse:
        return await self._get(self._path(widget_id, "session", session_id), options=options)

    async def delete_widget_session(
        self, widget_id: str, session_id: str, options: RequestOptions | None = None
    ) -> None:
        await self._delete(self._path(widget_id, "session", session_id), options)

    # Feedback

    async def submit_feedback(self, params: Mapping[str, Any], options: RequestOptions | None = None) -> ApiResponse:
        """Rate a chat message ``positive`` or ``negative`` with an optional comment."""

        return await self._create(self._path("feedback"), dict(params), options)

    async def get_feedback(self, message_id: str, options: RequestOptions | None = None) -> ApiResponse:
        return await self._get(self._path("feedback", message_id), options=options)


__all__ = ["ChatResource"]
