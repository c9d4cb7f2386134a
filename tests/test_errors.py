import pytest

from aiden.errors import (
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
    UnprocessableEntityError,
    ValidationError,
    error_from_response,
)


def _body(code: str = "SOME_CODE", message: str = "boom", request_id: str = "req-42", details=None) -> dict:
    error = {"code": code, "message": message}
    if details is not None:
        error["details"] = details
    return {"error": error, "meta": {"requestId": request_id, "timestamp": "2026-01-01T00:00:00Z"}}


@pytest.mark.parametrize(
    "status, cls, kind",
    [
        (400, ValidationError, ErrorKind.VALIDATION),
        (401, AuthenticationError, ErrorKind.AUTHENTICATION),
        (403, ForbiddenError, ErrorKind.FORBIDDEN),
        (404, NotFoundError, ErrorKind.NOT_FOUND),
        (409, ConflictError, ErrorKind.CONFLICT),
        (422, UnprocessableEntityError, ErrorKind.UNPROCESSABLE_ENTITY),
        (429, RateLimitError, ErrorKind.RATE_LIMIT),
        (500, InternalError, ErrorKind.INTERNAL),
        (502, BadGatewayError, ErrorKind.BAD_GATEWAY),
        (503, ServiceUnavailableError, ErrorKind.SERVICE_UNAVAILABLE),
        (504, GatewayTimeoutError, ErrorKind.GATEWAY_TIMEOUT),
    ],
)
def test_status_maps_to_error_class(status, cls, kind):
    err = error_from_response(status, _body())

    assert type(err) is cls
    assert err.kind is kind
    assert err.status == status
    assert err.message == "boom"
    assert err.request_id == "req-42"
    assert isinstance(err, AidenError)


def test_client_errors_keep_server_code():
    err = error_from_response(404, _body(code="NOTEBOOK_NOT_FOUND"))

    assert err.code == "NOTEBOOK_NOT_FOUND"


@pytest.mark.parametrize(
    "status, code",
    [(500, "INTERNAL_ERROR"), (502, "BAD_GATEWAY"), (503, "SERVICE_UNAVAILABLE"), (504, "GATEWAY_TIMEOUT")],
)
def test_server_errors_use_fixed_codes(status, code):
    err = error_from_response(status, _body(code="WHATEVER"))

    assert err.code == code


def test_rate_limit_defaults_retry_after():
    err = error_from_response(429, _body())

    assert isinstance(err, RateLimitError)
    assert err.code == "RATE_LIMITED"
    assert err.retry_after_ms == 60_000


def test_rate_limit_uses_given_retry_after():
    err = error_from_response(429, _body(), retry_after_ms=5_000)

    assert err.retry_after_ms == 5_000


def test_validation_error_exposes_field_errors():
    details = [
        {"field": "name", "message": "is required", "code": "required"},
        {"field": "limit", "message": "too big"},
        "not-a-field-error",
    ]
    err = error_from_response(400, _body(code="VALIDATION_ERROR", details=details))

    assert isinstance(err, ValidationError)
    assert err.field_errors == [
        FieldError(field="name", message="is required", code="required"),
        FieldError(field="limit", message="too big", code=None),
    ]


def test_validation_error_without_details_has_no_field_errors():
    err = error_from_response(400, _body())

    assert err.field_errors is None


def test_unknown_status_yields_generic_error():
    err = error_from_response(418, _body(code="TEAPOT", message="short and stout"))

    assert type(err) is AidenError
    assert err.kind is ErrorKind.API
    assert err.status == 418
    assert err.code == "TEAPOT"


@pytest.mark.parametrize("body", [None, "oops", [], {"error": "flat"}, {"meta": None}])
def test_malformed_body_degrades_to_unknown(body):
    err = error_from_response(500, body)

    assert isinstance(err, InternalError)
    assert err.message == "HTTP 500"
    assert err.request_id == "unknown"


def test_malformed_body_unknown_status_uses_unknown_code():
    err = error_from_response(499, {"unexpected": True})

    assert err.code == "UNKNOWN_ERROR"
    assert err.message == "HTTP 499"


def test_connection_error_keeps_cause():
    cause = OSError("refused")
    err = APIConnectionError("Failed to connect", cause)

    assert err.kind is ErrorKind.CONNECTION
    assert err.code == "CONNECTION_ERROR"
    assert err.status == 0
    assert err.request_id == "unknown"
    assert err.__cause__ is cause


def test_timeout_error_records_timeout():
    err = APITimeoutError("Request timed out after 2.5s", 2.5)

    assert err.kind is ErrorKind.TIMEOUT
    assert err.code == "TIMEOUT"
    assert err.status == 0
    assert err.timeout == 2.5
    assert err.details == {"timeout": 2.5}


def test_repr_includes_code_and_request_id():
    err = error_from_response(403, _body(code="LICENSE_REQUIRED"))

    text = repr(err)
    assert text.startswith("ForbiddenError(")
    assert "LICENSE_REQUIRED" in text
    assert "req-42" in text
