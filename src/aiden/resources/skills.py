"""Skills (AI workflows) and their executions."""

from __future__ import annotations

from collections.abc import AsyncIterator, Mapping
from typing import Any

from aiden.http import RequestOptions
from aiden.resources.base import BaseResource
from aiden.types import ApiResponse, PaginatedResponse


class SkillsResource(BaseResource):
    base_path = "/api/v1/skills"

    async def create(self, params: Mapping[str, Any], options: RequestOptions | None = None) -> ApiResponse:
        return await self._create(self.base_path, dict(params), options)

    async def list(
        self, params: Mapping[str, Any] | None = None, options: RequestOptions | None = None
    ) -> PaginatedResponse:
        return await self._list(self.base_path, params, options)

    def list_all(
        self, params: Mapping[str, Any] | None = None, options: RequestOptions | None = None
    ) -> AsyncIterator[Any]:
        return self._list_all(self.base_path, params, options)

    async def get(self, skill_id: str, options: RequestOptions | None = None) -> ApiResponse:
        return await self._get(self._path(skill_id), options=options)

    async def update(self, skill_id: str, params: Mapping[str, Any], options: RequestOptions | None = None) -> ApiResponse:
        return await self._update(self._path(skill_id), dict(params), options)

    async def delete(self, skill_id: str, options: RequestOptions | None = None) -> None:
        await self._delete(self._path(skill_id), options)

    async def activate(self, skill_id: str, options: RequestOptions | None = None) -> ApiResponse:
        return await self._create(self._path(skill_id, "activate"), {}, options)

    async def deactivate(self, skill_id: str, options: RequestOptions | None = None) -> ApiResponse:
        return await self._create(self._path(skill_id, "deactivate"), {}, options)

    async def run(
        self, skill_id: str, params: Mapping[str, Any] | None = None, options: RequestOptions | None = None
    ) -> ApiResponse:
        """Start an execution; poll ``get_execution`` for its outcome."""

        return await self._create(self._path(skill_id, "run"), dict(params or {}), options)

    async def list_executions(
        self,
        skill_id: str,
        params: Mapping[str, Any] | None = None,
        options: RequestOptions | None = None,
    ) -> PaginatedResponse:
        return await self._list(self._path(skill_id, "executions"), params, options)

    async def get_execution(self, skill_id: str, execution_id: str, options: RequestOptions | None = None) -> ApiResponse:
        return await self._get(self._path(skill_id, "executions", execution_id), options=options)

    async def get_execution_logs(
        self,
        skill_id: str,
        params: Mapping[str, Any] | None = None,
        options: RequestOptions | None = None,
    ) -> PaginatedResponse:
        return await self._list(self._path(skill_id, "logs"), params, options)

    async def list_templates(self, options: RequestOptions | None = None) -> PaginatedResponse:
        return await self._list(self._path("templates"), None, options)

    async def copy_template(
        self, template_id: str, params: Mapping[str, Any] | None = None, options: RequestOptions | None = None
    ) -> ApiResponse:
        return await self._create(self._path("copy-template"), {"templateId": template_id, **(params or {})}, options)


__all__ = ["SkillsResource"]
