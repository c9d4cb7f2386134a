"""Async Python client for the Aiden AI platform API."""

from __future__ import annotations

__version__ = "0.1.0"

from .client import AidenClient  # noqa: E402,F401
from .config import ClientConfig, LogLevel, load_config  # noqa: E402,F401
from .errors import (  # noqa: E402,F401
    AidenError,
    APIConnectionError,
    APITimeoutError,
    AuthenticationError,
    BadGatewayError,
    ConflictError,
    ErrorKind,
    FieldError,
    ForbiddenError,
    GatewayTimeoutError,
    InternalError,
    NotFoundError,
    RateLimitError,
    ServiceUnavailableError,
    StreamConsumedError,
    UnprocessableEntityError,
    ValidationError,
    error_from_response,
)
from .http import HttpClient, RequestOptions  # noqa: E402,F401
from .streaming import AidenStream, SSEDecoder  # noqa: E402,F401
from .types import (  # noqa: E402,F401
    ApiResponse,
    PaginatedResponse,
    PaginationMeta,
    Phase,
    ResponseMeta,
    StreamEvent,
    StreamEventType,
    Visibility,
)
