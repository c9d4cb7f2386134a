"""Notebooks and their knowledge assets."""

from __future__ import annotations

from collections.abc import AsyncIterator, Mapping, Sequence
from typing import Any

from aiden.http import RequestOptions
from aiden.resources.base import BaseResource
from aiden.types import ApiResponse, PaginatedResponse


class NotebooksResource(BaseResource):
    base_path = "/api/v1/notebooks"

    async def create(self, params: Mapping[str, Any], options: RequestOptions | None = None) -> ApiResponse:
        return await self._create(self.base_path, dict(params), options)

    async def list(
        self, params: Mapping[str, Any] | None = None, options: RequestOptions | None = None
    ) -> PaginatedResponse:
        return await self._list(self.base_path, params, options)

    def list_all(
        self, params: Mapping[str, Any] | None = None, options: RequestOptions | None = None
    ) -> AsyncIterator[Any]:
        """Auto-paginate through all notebooks."""

        return self._list_all(self.base_path, params, options)

    async def get(self, notebook_id: str, options: RequestOptions | None = None) -> ApiResponse:
        return await self._get(self._path(notebook_id), options=options)

    async def update(
        self, notebook_id: str, params: Mapping[str, Any], options: RequestOptions | None = None
    ) -> ApiResponse:
        return await self._update(self._path(notebook_id), dict(params), options)

    async def delete(self, notebook_id: str, options: RequestOptions | None = None) -> None:
        await self._delete(self._path(notebook_id), options)

    async def bulk_delete(self, ids: Sequence[str], options: RequestOptions | None = None) -> None:
        await self._bulk_delete(self._path("bulk-delete"), ids, options)

    async def duplicate(self, notebook_id: str, options: RequestOptions | None = None) -> ApiResponse:
        return await self._create(self._path(notebook_id, "duplicate"), {}, options)

    # Knowledge assets

    async def create_asset(
        self, notebook_id: str, params: Mapping[str, Any], options: RequestOptions | None = None
    ) -> ApiResponse:
        """Create a text or URL knowledge asset in a notebook."""

        return await self._create(self._path(notebook_id, "knowledge-assets"), dict(params), options)

    async def list_assets(
        self,
        notebook_id: str,
        params: Mapping[str, Any] | None = None,
        options: RequestOptions | None = None,
    ) -> PaginatedResponse:
        return await self._list(self._path(notebook_id, "knowledge-assets"), params, options)

    async def get_asset(self, notebook_id: str, asset_id: str, options: RequestOptions | None = None) -> ApiResponse:
        return await self._get(self._path(notebook_id, "knowledge-assets", asset_id), options=options)

    async def update_asset(
        self,
        notebook_id: str,
        asset_id: str,
        params: Mapping[str, Any],
        options: RequestOptions | None = None,
    ) -> ApiResponse:
        return await self._patch(self._path(notebook_id, "knowledge-assets", asset_id), dict(params), options)

    async def delete_asset(self, notebook_id: str, asset_id: str, options: RequestOptions | None = None) -> None:
        await self._delete(self._path(notebook_id, "knowledge-assets", asset_id), options)

    async def reindex_asset(
        self, notebook_id: str, asset_id: str, options: RequestOptions | None = None
    ) -> ApiResponse:
        return await self._create(self._path(notebook_id, "knowledge-assets", asset_id, "reindex"), {}, options)

    # Artifacts and cells

    async def list_artifacts(
        self,
        notebook_id: str,
        params: Mapping[str, Any] | None = None,
        options: RequestOptions | None = None,
    ) -> PaginatedResponse:
        return await self._list(self._path(notebook_id, "artifacts"), params, options)

    async def add_cell(
        self, notebook_id: str, cell: Mapping[str, Any], options: RequestOptions | None = None
    ) -> ApiResponse:
        return await self._create(self._path(notebook_id, "cells"), dict(cell), options)

    async def update_cell(
        self,
        notebook_id: str,
        cell_id: str,
        cell: Mapping[str, Any],
        options: RequestOptions | None = None,
    ) -> ApiResponse:
        return await self._update(self._path(notebook_id, "cells", cell_id), dict(cell), options)

    async def delete_cell(self, notebook_id: str, cell_id: str, options: RequestOptions | None = None) -> None:
        await self._delete(self._path(notebook_id, "cells", cell_id), options)


__all__ = ["NotebooksResource"]
