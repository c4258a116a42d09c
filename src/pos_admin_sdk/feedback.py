from __future__ import annotations

import sys
from dataclasses import dataclass, field
from typing import Any, TextIO

from pydantic import ValidationError as PydanticValidationError

from .exceptions import ApiError, ClientValidationError, TransportError

GENERIC_API_MESSAGE = "Request failed"
UNEXPECTED_RESPONSE_MESSAGE = "Unexpected response from the server."

DEFAULT_ERROR_MESSAGES = {
    "products.list": "Failed to load products.",
    "products.deactivate": "Failed to deactivate product.",
    "suppliers.list": "Failed to load suppliers.",
    "purchase_orders.list": "Failed to load purchase orders.",
    "purchase_orders.get": "Failed to load purchase order.",
    "purchase_orders.received.add": "Failed to record received stock.",
    "stock_receives.create_from_po": "Failed to post to inventory.",
    "stock_receives.list": "Failed to load stock receive history.",
    "auth_logs.login_attempts": "Failed to load login attempts.",
    "auth_logs.system_logs": "Failed to load system logs.",
    "auth_logs.user_sessions": "Failed to load user sessions.",
    "inventory.list": "Failed to load transactions.",
    "users.list": "Failed to load users.",
}

SUCCESS_MESSAGES = {
    "auth.login": "Signed in",
    "auth.logout": "Signed out",
    "products.deactivate": "Product deactivated",
    "purchase_orders.received.add": "Received stock recorded",
    "purchase_orders.export": "Export written",
    "stock_receives.create_from_po": "Posted to inventory",
}


@dataclass(frozen=True)
class Notice:
    level: str
    message: str
    trace_id: str | None = None

    def render(self) -> str:
        trace = f" trace_id={self.trace_id}" if self.trace_id else ""
        return f"[{self.level}] {self.message}{trace}"


@dataclass
class Notifier:
    stream: TextIO | None = None
    notices: list[Notice] = field(default_factory=list)

    def notify(self, notice: Notice) -> Notice:
        self.notices.append(notice)
        out = self.stream or sys.stdout
        out.write(notice.render() + "\n")
        return notice

    def success(self, message: str, trace_id: str | None = None) -> Notice:
        return self.notify(Notice("success", message, trace_id))

    def info(self, message: str) -> Notice:
        return self.notify(Notice("info", message))

    def error(self, error: Exception, operation: str | None = None) -> Notice:
        return self.notify(Notice("error", error_message(error, operation), getattr(error, "trace_id", None)))


def error_message(error: Exception, operation: str | None = None) -> str:
    """Server message first, then the exception's own text, then the operation default."""
    fallback = DEFAULT_ERROR_MESSAGES.get(operation or "", "Something went wrong.")
    if isinstance(error, ApiError):
        if error.message and error.message != GENERIC_API_MESSAGE:
            return error.message
        return fallback
    if isinstance(error, PydanticValidationError):
        return UNEXPECTED_RESPONSE_MESSAGE
    text = str(error).strip()
    return text or fallback


def success_message(operation: str) -> str:
    return SUCCESS_MESSAGES.get(operation, "Done")


def build_error_payload(error: Exception) -> dict[str, Any]:
    if isinstance(error, ApiError):
        category = _classify_api_error(error)
        return {
            "category": category,
            "code": error.code,
            "message": error.message,
            "trace_id": error.trace_id,
            "status_code": error.status_code,
            "action": _suggest_action(category),
        }
    if isinstance(error, ClientValidationError):
        return {
            "category": "422",
            "code": "CLIENT_VALIDATION",
            "message": str(error),
            "trace_id": None,
            "status_code": None,
            "action": _suggest_action("422"),
        }
    return {
        "category": "internal",
        "code": "INTERNAL_ERROR",
        "message": str(error),
        "trace_id": None,
        "status_code": None,
        "action": _suggest_action("internal"),
    }


def _classify_api_error(error: ApiError) -> str:
    if isinstance(error, TransportError):
        return "network"
    if error.status_code == 401:
        return "401"
    if error.status_code == 403:
        return "403"
    if error.status_code == 409:
        return "409"
    if error.status_code in {400, 422}:
        return "422"
    if error.status_code >= 500:
        return "500"
    return "api"


def _suggest_action(category: str) -> str:
    if category in {"network", "500", "409"}:
        return "Retry"
    if category == "401":
        return "Sign in again"
    if category == "403":
        return "Go back to the dashboard"
    if category == "422":
        return "Fix the highlighted fields"
    return "Contact support"
