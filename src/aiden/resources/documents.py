"""Uploaded documents: multipart upload, metadata and raw downloads."""

from __future__ import annotations

import json
from collections.abc import Mapping
from typing import IO, Any

import httpx

from aiden.http import RequestOptions
from aiden.resources.base import BaseResource
from aiden.types import ApiResponse, PaginatedResponse

DEFAULT_CONTENT_TYPE = "application/octet-stream"


class DocumentsResource(BaseResource):
    base_path = "/api/v1/documents"

    async def upload(
        self,
        file: bytes | IO[bytes],
        filename: str,
        *,
        content_type: str | None = None,
        metadata: Mapping[str, Any] | None = None,
        options: RequestOptions | None = None,
    ) -> ApiResponse:
        """Upload ``file`` as multipart form data under the ``file`` field."""

        files = {"file": (filename, file, content_type or DEFAULT_CONTENT_TYPE)}
        form = {"metadata": json.dumps(dict(metadata))} if metadata else None
        return await self._http.request("POST", self._path("upload"), files=files, form=form, options=options)

    async def list(
        self, params: Mapping[str, Any] | None = None, options: RequestOptions | None = None
    ) -> PaginatedResponse:
        return await self._list(self.base_path, params, options)

    async def get(self, document_id: str, options: RequestOptions | None = None) -> ApiResponse:
        return await self._get(self._path(document_id), options=options)

    async def download(self, document_id: str, options: RequestOptions | None = None) -> httpx.Response:
        """Return the unread file response; the caller reads and closes it.

            response = await client.documents.download("doc-1")
            try:
                async for chunk in response.aiter_bytes():
                    out.write(chunk)
            finally:
                await response.aclose()
        """

        return await self._http.request_raw("GET", self._path(document_id, "download"), options=options)

    async def delete(self, document_id: str, options: RequestOptions | None = None) -> None:
        await self._delete(self._path(document_id), options)


__all__ = ["DocumentsResource"]
