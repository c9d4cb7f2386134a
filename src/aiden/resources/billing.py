"""Billing, usage tracking, invoices, and spending limits."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from aiden.http import RequestOptions
from aiden.resources.base import BaseResource
from aiden.types import ApiResponse, PaginatedResponse


class BillingResource(BaseResource):
    base_path = "/api/v1/billing"

    async def overview(self, options: RequestOptions | None = None) -> ApiResponse:
        return await self._get(self._path("overview"), options=options)

    async def status(self, options: RequestOptions | None = None) -> ApiResponse:
        return await self._get(self._path("status"), options=options)

    async def update_limits(self, params: Mapping[str, Any], options: RequestOptions | None = None) -> ApiResponse:
        return await self._update(self._path("limits"), dict(params), options)

    async def usage_daily(
        self, params: Mapping[str, Any] | None = None, options: RequestOptions | None = None
    ) -> ApiResponse:
        return await self._get(self._path("usage", "daily"), query=params, options=options)

    async def usage_by_model(
        self, params: Mapping[str, Any] | None = None, options: RequestOptions | None = None
    ) -> ApiResponse:
        return await self._get(self._path("usage", "models"), query=params, options=options)

    async def transactions(
        self, params: Mapping[str, Any] | None = None, options: RequestOptions | None = None
    ) -> PaginatedResponse:
        return await self._list(self._path("transactions"), params, options)

    async def invoices(
        self, params: Mapping[str, Any] | None = None, options: RequestOptions | None = None
    ) -> PaginatedResponse:
        return await self._list(self._path("invoices"), params, options)

    async def get_invoice(self, invoice_id: str, options: RequestOptions | None = None) -> ApiResponse:
        return await self._get(self._path("invoices", invoice_id), options=options)


__all__ = ["BillingResource"]
