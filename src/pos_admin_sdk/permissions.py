from __future__ import annotations

from dataclasses import dataclass
from typing import Protocol

ADMIN_ONLY = frozenset({"Admin"})

SCREEN_ROLES: dict[str, frozenset[str]] = {
    "dashboard/admin": ADMIN_ONLY,
    "dashboard/manager": frozenset({"Manager"}),
    "dashboard/warehouse": frozenset({"Warehouse"}),
    "dashboard/cashier": frozenset({"Cashier"}),
    "products": ADMIN_ONLY,
    "categories": ADMIN_ONLY,
    "inventory/receive": ADMIN_ONLY,
    "inventory/adjust": ADMIN_ONLY,
    "inventory/bad-orders": ADMIN_ONLY,
    "inventory/low-stock": ADMIN_ONLY,
    "inventory/units": ADMIN_ONLY,
    "inventory/unit-conversions": ADMIN_ONLY,
    "inventory/transactions": ADMIN_ONLY,
    "purchase-orders": ADMIN_ONLY,
    "suppliers": ADMIN_ONLY,
    "pending-deliveries": ADMIN_ONLY,
    "settings/vat": ADMIN_ONLY,
    "settings/receipt": ADMIN_ONLY,
    "settings/logs": ADMIN_ONLY,
    "settings/discount": ADMIN_ONLY,
    "settings/users": ADMIN_ONLY,
    "settings/counters": ADMIN_ONLY,
    "settings/business-profile": ADMIN_ONLY,
}


class SessionLike(Protocol):
    @property
    def is_authenticated(self) -> bool: ...

    @property
    def role(self) -> str | None: ...


@dataclass(frozen=True)
class AccessDecision:
    allowed: bool
    reason: str = ""


def check_access(session: SessionLike, screen: str) -> AccessDecision:
    roles = SCREEN_ROLES.get(screen)
    if roles is None:
        return AccessDecision(False, f"Unknown screen: {screen}.")
    if not session.is_authenticated:
        return AccessDecision(False, "Login required.")
    if session.role not in roles:
        return AccessDecision(False, f"Unauthorized: {screen} requires {', '.join(sorted(roles))}.")
    return AccessDecision(True)


__all__ = ["AccessDecision", "SCREEN_ROLES", "check_access"]
