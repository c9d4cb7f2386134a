"""Flow definitions, instances, runs and executions."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from aiden.http import RequestOptions
from aiden.resources.base import BaseResource
from aiden.streaming import AidenStream
from aiden.types import ApiResponse, PaginatedResponse


class FlowsResource(BaseResource):
    base_path = "/api/v1/flows"

    async def create(self, params: Mapping[str, Any], options: RequestOptions | None = None) -> ApiResponse:
        return await self._create(self.base_path, dict(params), options)

    async def list(
        self, params: Mapping[str, Any] | None = None, options: RequestOptions | None = None
    ) -> PaginatedResponse:
        return await self._list(self.base_path, params, options)

    # Instances

    async def create_instance(self, params: Mapping[str, Any], options: RequestOptions | None = None) -> ApiResponse:
        return await self._create(self._path("instances"), dict(params), options)

    async def list_instances(
        self, params: Mapping[str, Any] | None = None, options: RequestOptions | None = None
    ) -> PaginatedResponse:
        return await self._list(self._path("instances"), params, options)

    # Runs

    async def run(
        self, flow_id: str, params: Mapping[str, Any] | None = None, options: RequestOptions | None = None
    ) -> ApiResponse:
        """Trigger a run of ``flow_id``; follow it with ``stream_run`` or ``get_run``."""

        return await self._create(self._path(flow_id, "run"), dict(params or {}), options)

    async def list_runs(
        self, params: Mapping[str, Any] | None = None, options: RequestOptions | None = None
    ) -> PaginatedResponse:
        return await self._list(self._path("runs"), params, options)

    async def get_run(self, run_id: str, options: RequestOptions | None = None) -> ApiResponse:
        return await self._get(self._path("runs", run_id), options=options)

    async def get_run_logs(
        self, run_id: str, params: Mapping[str, Any] | None = None, options: RequestOptions | None = None
    ) -> PaginatedResponse:
        return await self._list(self._path("runs", run_id, "logs"), params, options)

    async def stream_run(self, run_id: str, options: RequestOptions | None = None) -> AidenStream:
        """Follow a run's progress as server-sent events."""

        return await self._stream_get(self._path("runs", run_id, "stream"), options)

    # Executions

    async def list_executions(
        self, params: Mapping[str, Any] | None = None, options: RequestOptions | None = None
    ) -> PaginatedResponse:
        return await self._list(self._path("executions"), params, options)

    async def get_execution(self, execution_id: str, options: RequestOptions | None = None) -> ApiResponse:
        return await self._get(self._path("executions", execution_id), options=options)


__all__ = ["FlowsResource"]
