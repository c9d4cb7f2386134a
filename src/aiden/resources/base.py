"""Shared CRUD, streaming, and pagination helpers for resource wrappers."""

from __future__ import annotations

from collections.abc import AsyncIterator, Mapping, Sequence
from typing import Any, ClassVar

from aiden.http import HttpClient, QueryValue, RequestOptions
from aiden.streaming import AidenStream
from aiden.types import ApiResponse, PaginatedResponse

DEFAULT_PAGE_LIMIT = 50
SSE_HEADERS = {"Accept": "text/event-stream"}


class BaseResource:
    """Base for resource wrappers; subclasses set ``base_path`` and add endpoints."""

    base_path: ClassVar[str] = ""

    def __init__(self, http: HttpClient) -> None:
        self._http = http

    def _path(self, *parts: str) -> str:
        return "/".join([self.base_path, *parts]) if parts else self.base_path

    async def _get(
        self,
        path: str,
        *,
        query: Mapping[str, Any] | None = None,
        options: RequestOptions | None = None,
    ) -> ApiResponse:
        return await self._http.request("GET", path, query=_clean_query(query), options=options)

    async def _list(
        self,
        path: str,
        params: Mapping[str, Any] | None = None,
        options: RequestOptions | None = None,
    ) -> PaginatedResponse:
        return await self._http.request_paginated("GET", path, query=_clean_query(params), options=options)

    async def _create(self, path: str, body: Any, options: RequestOptions | None = None) -> ApiResponse:
        return await self._http.request("POST", path, body=body, options=options)

    async def _update(self, path: str, body: Any, options: RequestOptions | None = None) -> ApiResponse:
        return await self._http.request("PUT", path, body=body, options=options)

    async def _patch(self, path: str, body: Any, options: RequestOptions | None = None) -> ApiResponse:
        return await self._http.request("PATCH", path, body=body, options=options)

    async def _delete(self, path: str, options: RequestOptions | None = None) -> None:
        response = await self._http.request_raw("DELETE", path, options=options)
        await response.aclose()

    async def _bulk_delete(self, path: str, ids: Sequence[str], options: RequestOptions | None = None) -> None:
        response = await self._http.request_raw("POST", path, body={"ids": list(ids)}, options=options)
        await response.aclose()

    async def _stream(self, path: str, body: Any, options: RequestOptions | None = None) -> AidenStream:
        options = (options or RequestOptions()).with_headers(SSE_HEADERS)
        response = await self._http.request_raw("POST", path, body=body, options=options)
        return AidenStream(response)

    async def _stream_get(self, path: str, options: RequestOptions | None = None) -> AidenStream:
        options = (options or RequestOptions()).with_headers(SSE_HEADERS)
        response = await self._http.request_raw("GET", path, options=options)
        return AidenStream(response)

    async def _list_all(
        self,
        path: str,
        params: Mapping[str, Any] | None = None,
        options: RequestOptions | None = None,
    ) -> AsyncIterator[Any]:
        """Yield every item across pages; caller filters are sent with every page."""

        filters = dict(params or {})
        filters.pop("page", None)
        limit = filters.pop("limit", None) or DEFAULT_PAGE_LIMIT
        page = 1
        while True:
            response = await self._list(path, {**filters, "page": page, "limit": limit}, options)
            for item in response.data:
                yield item

            pagination = response.meta.pagination
            if pagination is None or page >= pagination.total_pages:
                break
            page += 1


def _clean_query(params: Mapping[str, Any] | None) -> dict[str, QueryValue]:
    if not params:
        return {}
    return {key: value for key, value in params.items() if value is not None}


__all__ = ["BaseResource", "DEFAULT_PAGE_LIMIT"]
