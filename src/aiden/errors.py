"""Typed errors raised by the Aiden SDK.

Every failure that leaves the transport layer is an ``AidenError`` subclass
tagged with an ``ErrorKind``. Callers can branch on ``err.kind`` or catch the
specific class:

    try:
        await client.notebooks.create({"name": "Research"})
    except RateLimitError as err:
        print(f"rate limited, retry after {err.retry_after_ms}ms")
    except AidenError as err:
        print(err.kind, err.code, err.request_id)
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from enum import Enum
from typing import Any

DEFAULT_RETRY_AFTER_MS = 60_000
UNKNOWN_REQUEST_ID = "unknown"


class ErrorKind(str, Enum):
    """Discriminant carried by every AidenError."""

    API = "api"
    VALIDATION = "validation"
    AUTHENTICATION = "authentication"
    FORBIDDEN = "forbidden"
    NOT_FOUND = "not_found"
    CONFLICT = "conflict"
    UNPROCESSABLE_ENTITY = "unprocessable_entity"
    RATE_LIMIT = "rate_limit"
    INTERNAL = "internal"
    BAD_GATEWAY = "bad_gateway"
    SERVICE_UNAVAILABLE = "service_unavailable"
    GATEWAY_TIMEOUT = "gateway_timeout"
    CONNECTION = "connection"
    TIMEOUT = "timeout"


@dataclass(frozen=True, slots=True)
class FieldError:
    """One field-level validation failure reported by the API."""

    field: str
    message: str
    code: str | None = None


class AidenError(Exception):
    """Base class for all API errors; also used for statuses without a dedicated kind."""

    kind: ErrorKind = ErrorKind.API

    def __init__(
        self,
        message: str,
        *,
        code: str,
        status: int,
        request_id: str = UNKNOWN_REQUEST_ID,
        meta: Mapping[str, Any] | None = None,
        details: Any = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.code = code
        self.status = status
        self.request_id = request_id
        self.meta = meta
        self.details = details

    def __repr__(self) -> str:
        return (
            f"{type(self).__name__}(message={self.message!r}, code={self.code!r}, "
            f"status={self.status}, request_id={self.request_id!r})"
        )


class ValidationError(AidenError):
    """400: the request body or parameters failed validation."""

    kind = ErrorKind.VALIDATION

    def __init__(self, message: str, *, code: str, **kwargs: Any) -> None:
        super().__init__(message, code=code, status=400, **kwargs)
        self.field_errors: list[FieldError] | None = _field_errors(self.details)


class AuthenticationError(AidenError):
    """401: the API key is missing, invalid, or expired."""

    kind = ErrorKind.AUTHENTICATION

    def __init__(self, message: str, *, code: str, **kwargs: Any) -> None:
        super().__init__(message, code=code, status=401, **kwargs)


class ForbiddenError(AidenError):
    """403: the key lacks scope or a license is required."""

    kind = ErrorKind.FORBIDDEN

    def __init__(self, message: str, *, code: str, **kwargs: Any) -> None:
        super().__init__(message, code=code, status=403, **kwargs)


class NotFoundError(AidenError):
    kind = ErrorKind.NOT_FOUND

    def __init__(self, message: str, *, code: str, **kwargs: Any) -> None:
        super().__init__(message, code=code, status=404, **kwargs)


class ConflictError(AidenError):
    kind = ErrorKind.CONFLICT

    def __init__(self, message: str, *, code: str, **kwargs: Any) -> None:
        super().__init__(message, code=code, status=409, **kwargs)


class UnprocessableEntityError(AidenError):
    kind = ErrorKind.UNPROCESSABLE_ENTITY

    def __init__(self, message: str, *, code: str, **kwargs: Any) -> None:
        super().__init__(message, code=code, status=422, **kwargs)


class RateLimitError(AidenError):
    """429: rate limit exceeded; ``retry_after_ms`` says when to come back."""

    kind = ErrorKind.RATE_LIMIT

    def __init__(self, message: str, *, retry_after_ms: int = DEFAULT_RETRY_AFTER_MS, **kwargs: Any) -> None:
        kwargs.pop("code", None)
        super().__init__(message, code="RATE_LIMITED", status=429, **kwargs)
        self.retry_after_ms = retry_after_ms


class InternalError(AidenError):
    kind = ErrorKind.INTERNAL

    def __init__(self, message: str, **kwargs: Any) -> None:
        kwargs.pop("code", None)
        super().__init__(message, code="INTERNAL_ERROR", status=500, **kwargs)


class BadGatewayError(AidenError):
    """502: an upstream model or service failed."""

    kind = ErrorKind.BAD_GATEWAY

    def __init__(self, message: str, **kwargs: Any) -> None:
        kwargs.pop("code", None)
        super().__init__(message, code="BAD_GATEWAY", status=502, **kwargs)


class ServiceUnavailableError(AidenError):
    kind = ErrorKind.SERVICE_UNAVAILABLE

    def __init__(self, message: str, **kwargs: Any) -> None:
        kwargs.pop("code", None)
        super().__init__(message, code="SERVICE_UNAVAILABLE", status=503, **kwargs)


class GatewayTimeoutError(AidenError):
    """504: an upstream model timed out."""

    kind = ErrorKind.GATEWAY_TIMEOUT

    def __init__(self, message: str, **kwargs: Any) -> None:
        kwargs.pop("code", None)
        super().__init__(message, code="GATEWAY_TIMEOUT", status=504, **kwargs)


class APIConnectionError(AidenError):
    """No response was received from the server."""

    kind = ErrorKind.CONNECTION

    def __init__(self, message: str, cause: BaseException | None = None) -> None:
        super().__init__(message, code="CONNECTION_ERROR", status=0)
        if cause is not None:
            self.__cause__ = cause


class APITimeoutError(AidenError):
    """The request did not complete within ``timeout`` seconds."""

    kind = ErrorKind.TIMEOUT

    def __init__(self, message: str, timeout: float) -> None:
        super().__init__(message, code="TIMEOUT", status=0, details={"timeout": timeout})
        self.timeout = timeout


class StreamConsumedError(RuntimeError):
    """Raised when an SSE stream is read a second time."""


_ERRORS_BY_STATUS: dict[int, type[AidenError]] = {
    400: ValidationError,
    401: AuthenticationError,
    403: ForbiddenError,
    404: NotFoundError,
    409: ConflictError,
    422: UnprocessableEntityError,
    429: RateLimitError,
    500: InternalError,
    502: BadGatewayError,
    503: ServiceUnavailableError,
    504: GatewayTimeoutError,
}


def error_from_response(status: int, body: Any, retry_after_ms: int | None = None) -> AidenError:
    """Build the typed error for an ``{error, meta}`` body returned with ``status``.

    Never raises: malformed bodies degrade to ``UNKNOWN_ERROR``.
    """

    error = body.get("error") if isinstance(body, Mapping) else None
    if not isinstance(error, Mapping):
        error = {}
    meta = body.get("meta") if isinstance(body, Mapping) else None
    if not isinstance(meta, Mapping):
        meta = None

    code = error.get("code")
    code = code if isinstance(code, str) and code else "UNKNOWN_ERROR"
    message = error.get("message")
    message = message if isinstance(message, str) and message else f"HTTP {status}"
    request_id = (meta or {}).get("requestId") or UNKNOWN_REQUEST_ID
    kwargs: dict[str, Any] = {"code": code, "request_id": str(request_id), "meta": meta, "details": error.get("details")}

    error_cls = _ERRORS_BY_STATUS.get(status)
    if error_cls is None:
        return AidenError(message, status=status, **kwargs)
    if error_cls is RateLimitError:
        return RateLimitError(
            message,
            retry_after_ms=retry_after_ms if retry_after_ms is not None else DEFAULT_RETRY_AFTER_MS,
            **kwargs,
        )
    return error_cls(message, **kwargs)


def _field_errors(details: Any) -> list[FieldError] | None:
    if not isinstance(details, list):
        return None
    errors: list[FieldError] = []
    for item in details:
        if not isinstance(item, Mapping):
            continue
        field_name = item.get("field")
        message = item.get("message")
        if not isinstance(field_name, str) or not isinstance(message, str):
            continue
        code = item.get("code")
        errors.append(FieldError(field=field_name, message=message, code=code if isinstance(code, str) else None))
    return errors


__all__ = [
    "AidenError",
    "APIConnectionError",
    "APITimeoutError",
    "AuthenticationError",
    "BadGatewayError",
    "ConflictError",
    "DEFAULT_RETRY_AFTER_MS",
    "ErrorKind",
    "FieldError",
    "ForbiddenError",
    "GatewayTimeoutError",
    "InternalError",
    "NotFoundError",
    "RateLimitError",
    "ServiceUnavailableError",
    "StreamConsumedError",
    "UNKNOWN_REQUEST_ID",
    "UnprocessableEntityError",
    "ValidationError",
    "error_from_response",
]
