"""Client configuration for the Aiden SDK.

``ClientConfig`` is the immutable value every client is built from. The
``load_config`` helper resolves one from CLI overrides and the environment for
applications such as the ``aiden`` console entrypoint; the transport layer never
reads the environment itself.
"""

from __future__ import annotations

import os
from collections.abc import Awaitable, Callable, Mapping
from enum import Enum
from typing import Any

import httpx
from pydantic import BaseModel, ConfigDict, Field, field_validator

SendFn = Callable[[httpx.Request], Awaitable[httpx.Response]]

DEFAULT_TIMEOUT = 30.0
DEFAULT_MAX_RETRIES = 3


class LogLevel(str, Enum):
    DEBUG = "debug"
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"


class ClientConfig(BaseModel):
    """Resolved connection settings shared by every call of one client."""

    model_config = ConfigDict(frozen=True, validate_default=True, extra="forbid", arbitrary_types_allowed=True)

    api_key: str
    base_url: str
    user_id: str | None = None
    timeout: float = DEFAULT_TIMEOUT
    max_retries: int = Field(default=DEFAULT_MAX_RETRIES, ge=0)
    transport: httpx.AsyncClient | Callable[..., Any] | None = None

    @field_validator("api_key")
    @classmethod
    def _validate_api_key(cls, value: str) -> str:
        stripped = value.strip() if isinstance(value, str) else ""
        if not stripped:
            raise ValueError("AidenClient requires an api_key. Get one from your Aiden dashboard.")
        return stripped

    @field_validator("base_url")
    @classmethod
    def _validate_base_url(cls, value: str) -> str:
        stripped = value.strip() if isinstance(value, str) else ""
        if not stripped:
            raise ValueError('AidenClient requires a base_url (e.g. "https://api.aiden.ai").')
        return stripped

    @field_validator("user_id")
    @classmethod
    def _clean_user_id(cls, value: str | None) -> str | None:
        if value is None:
            return None
        stripped = value.strip()
        return stripped if stripped else None

    @field_validator("timeout")
    @classmethod
    def _validate_timeout(cls, value: float) -> float:
        if value <= 0:
            raise ValueError("timeout must be positive")
        return value

    @field_validator("transport", mode="before")
    @classmethod
    def _validate_transport(cls, value: Any) -> Any:
        if value is None or isinstance(value, httpx.AsyncClient) or callable(value):
            return value
        raise ValueError(
            "No usable HTTP transport: pass an httpx.AsyncClient or an async callable "
            f"taking an httpx.Request (got {type(value).__name__})"
        )


def load_config(
    overrides: Mapping[str, Any] | None = None,
    env: Mapping[str, str] | None = None,
) -> ClientConfig:
    """Resolve a ClientConfig from explicit overrides first, then ``AIDEN_*`` variables."""

    env = os.environ if env is None else env
    overrides = overrides or {}

    api_key = _first_value(_clean_str(overrides.get("api_key")), _clean_str(env.get("AIDEN_API_KEY")))
    base_url = _first_value(_clean_str(overrides.get("base_url")), _clean_str(env.get("AIDEN_BASE_URL")))
    user_id = _first_value(_clean_str(overrides.get("user_id")), _clean_str(env.get("AIDEN_USER_ID")))
    timeout = _first_value(
        overrides.get("timeout"),
        _coerce_number(env.get("AIDEN_TIMEOUT"), float),
        DEFAULT_TIMEOUT,
    )
    max_retries = _first_value(
        overrides.get("max_retries"),
        _coerce_number(env.get("AIDEN_MAX_RETRIES"), int),
        DEFAULT_MAX_RETRIES,
    )

    if api_key is None:
        raise SystemExit("AIDEN_API_KEY not set; pass --api-key or export it")
    if base_url is None:
        raise SystemExit("AIDEN_BASE_URL not set; pass --base-url or export it")

    return ClientConfig(
        api_key=api_key,
        base_url=base_url,
        user_id=user_id,
        timeout=timeout,
        max_retries=max_retries,
    )


def _clean_str(value: Any) -> Any:
    if isinstance(value, str):
        stripped = value.strip()
        return stripped if stripped else None
    return value


def _first_value(*candidates: Any) -> Any:
    for candidate in candidates:
        if candidate is not None:
            return candidate
    return None


def _coerce_number(value: str | None, kind: type[int] | type[float]) -> int | float | None:
    cleaned = _clean_str(value)
    if cleaned is None:
        return None
    try:
        return kind(cleaned)
    except ValueError as exc:
        raise SystemExit(f"invalid numeric setting: {cleaned!r}") from exc


__all__ = [
    "ClientConfig",
    "LogLevel",
    "SendFn",
    "DEFAULT_TIMEOUT",
    "DEFAULT_MAX_RETRIES",
    "load_config",
]
