from __future__ import annotations

from typing import Any

from .exceptions import (
    ApiError,
    AuthError,
    ConflictError,
    NotFoundError,
    PermissionDeniedError,
    RateLimitError,
    ServerError,
    ValidationError,
)

_DEFAULT_CODES = {
    400: "BAD_REQUEST",
    401: "UNAUTHORIZED",
    403: "FORBIDDEN",
    404: "NOT_FOUND",
    409: "CONFLICT",
    422: "VALIDATION_ERROR",
    429: "RATE_LIMITED",
}


def _default_code(status_code: int) -> str:
    if status_code >= 500:
        return "SERVER_ERROR"
    return _DEFAULT_CODES.get(status_code, "HTTP_ERROR")


def _error_class(status_code: int) -> type[ApiError]:
    if status_code == 401:
        return AuthError
    if status_code == 403:
        return PermissionDeniedError
    if status_code == 404:
        return NotFoundError
    if status_code in {400, 422}:
        return ValidationError
    if status_code == 409:
        return ConflictError
    if status_code == 429:
        return RateLimitError
    if status_code >= 500:
        return ServerError
    return ApiError


def map_error(status_code: int, payload: Any, trace_id: str | None) -> ApiError:
    """Build the typed error for a non-2xx response.

    The backend answers either ``{"message": ...}`` or an ASP.NET problem
    details document (``title``/``errors``/``traceId``); a bare JSON string is
    treated as the message.
    """
    if isinstance(payload, str):
        payload = {"message": payload}
    if not isinstance(payload, dict):
        payload = {}

    errors = payload.get("errors")
    code = payload.get("code")
    if not code:
        code = "VALIDATION_ERROR" if isinstance(errors, dict) and errors else _default_code(status_code)
    message = payload.get("message") or payload.get("title") or payload.get("detail") or "Request failed"
    details = errors if errors else payload.get("details")

    payload_trace_id = payload.get("trace_id") or payload.get("traceId")
    resolved_trace_id = str(payload_trace_id) if payload_trace_id else trace_id

    mapped = _error_class(status_code)
    return mapped(
        code=str(code),
        message=str(message),
        details=details,
        trace_id=resolved_trace_id,
        status_code=status_code,
        raw_payload=dict(payload),
    )
