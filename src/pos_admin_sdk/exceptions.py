from __future__ import annotations

from dataclasses import dataclass


@dataclass
class ApiError(Exception):
    code: str
    message: str
    details: object | None
    trace_id: str | None
    status_code: int
    raw_payload: object | None = None

    def __str__(self) -> str:
        trace = f" trace_id={self.trace_id}" if self.trace_id else ""
        return f"[{self.status_code}] {self.code}: {self.message}{trace}"


class UnauthorizedError(ApiError):
    pass


class ForbiddenError(ApiError):
    pass


class NotFoundError(ApiError):
    pass


class ValidationError(ApiError):
    pass


class AuthError(UnauthorizedError):
    """Authentication failed or the stored token was rejected."""


class PermissionDeniedError(ForbiddenError):
    """The signed-in role may not perform the operation."""


class ConflictError(ApiError):
    """409 or conflict-style errors."""


class RateLimitError(ApiError):
    """429 throttling error."""


class ServerError(ApiError):
    """5xx server-side failures."""


class TransportError(ApiError):
    """Network/transport failure before an HTTP response was returned."""


class SessionRequiredError(UnauthorizedError):
    """No stored token; raised before any request is sent."""

    @classmethod
    def missing(cls) -> "SessionRequiredError":
        return cls(
            code="SESSION_REQUIRED",
            message="Sign in first: no stored session token",
            details=None,
            trace_id=None,
            status_code=401,
        )


@dataclass(frozen=True)
class ValidationIssue:
    row_index: int | None
    field: str
    reason: str


class ClientValidationError(ValueError):
    def __init__(self, issues: list[ValidationIssue]) -> None:
        self.issues = issues
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        if not self.issues:
            return "Validation failed"
        issue = self.issues[0]
        if issue.row_index is None:
            return issue.reason
        return f"row {issue.row_index} {issue.field}: {issue.reason}"

    @property
    def field_errors(self) -> dict[str, str]:
        return {issue.field: issue.reason for issue in self.issues}


def raise_issue(field: str, reason: str, row_index: int | None = None) -> None:
    raise ClientValidationError([ValidationIssue(row_index=row_index, field=field, reason=reason)])
