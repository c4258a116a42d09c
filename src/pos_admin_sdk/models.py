from __future__ import annotations

from datetime import datetime
from enum import IntEnum
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class ApiModel(BaseModel):
    """Backend record: camelCase on the wire, snake_case in Python."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="ignore")

    def to_payload(self) -> dict[str, Any]:
        return self.model_dump(by_alias=True, exclude_none=True, mode="json")


class TaxType(IntEnum):
    VATABLE = 0
    EXEMPT = 1
    ZERO_RATED = 2


TAX_TYPE_LABELS = {
    TaxType.VATABLE: "VATable",
    TaxType.EXEMPT: "VAT-Exempt",
    TaxType.ZERO_RATED: "Zero-Rated",
}


class PurchaseOrderStatus(IntEnum):
    DRAFT = 0
    ORDERED = 1
    PARTIALLY_RECEIVED = 2
    CANCELLED = 3
    RECEIVED = 4


PURCHASE_ORDER_STATUS_LABELS = {
    PurchaseOrderStatus.DRAFT: "Draft",
    PurchaseOrderStatus.ORDERED: "Ordered",
    PurchaseOrderStatus.PARTIALLY_RECEIVED: "Partially Received",
    PurchaseOrderStatus.CANCELLED: "Cancelled",
    PurchaseOrderStatus.RECEIVED: "Received",
}


class InventoryActionType(IntEnum):
    STOCK_IN = 0
    SALE = 1
    RETURN = 2
    TRANSFER = 3
    ADJUSTMENT = 4
    BAD_ORDER = 5
    VOIDED_SALE = 6


class UserRole(IntEnum):
    ADMIN = 0
    MANAGER = 1
    CASHIER = 2
    WAREHOUSE = 3


USER_ROLE_LABELS = {
    UserRole.ADMIN: "Admin",
    UserRole.MANAGER: "Manager",
    UserRole.CASHIER: "Cashier",
    UserRole.WAREHOUSE: "Warehouse",
}


def parse_enum(enum_type: type[IntEnum], value: str | int) -> IntEnum:
    """Accept an enum member name, label-ish spelling or wire integer."""
    if isinstance(value, int):
        return enum_type(value)
    text = str(value).strip()
    if text.lstrip("-").isdigit():
        return enum_type(int(text))
    key = text.upper().replace("-", "_").replace(" ", "_")
    try:
        return enum_type[key]
    except KeyError as exc:
        names = ", ".join(member.name.lower() for member in enum_type)
        raise ValueError(f"Unknown {enum_type.__name__} {value!r}; expected one of {names}") from exc


def role_label(role: str | int | None) -> str | None:
    """Roles come back as labels from /account/login and as ints from /account/users."""
    if role is None:
        return None
    if isinstance(role, int):
        return USER_ROLE_LABELS.get(UserRole(role))
    text = str(role).strip()
    if text.isdigit():
        return USER_ROLE_LABELS.get(UserRole(int(text)))
    return text.capitalize() if text else None


class LoginRequest(ApiModel):
    email: str
    password: str


class LoginResponse(ApiModel):
    token: str
    expires: Optional[datetime] = None
    role: str
    email: str
    user_id: str


class SessionUser(ApiModel):
    email: str
    role: str
    user_id: str
    expires: Optional[datetime] = None


class SessionData(BaseModel):
    token: str
    user: Optional[SessionUser] = None
    env_name: str | None = None


class LoginAttemptLog(ApiModel):
    id: int
    username_or_email: str
    attempted_at: datetime
    was_successful: bool
    failure_reason: str | None = None
    ip_address: str | None = None
    terminal_name: str | None = None


class SystemLog(ApiModel):
    id: int
    timestamp: datetime
    module: str
    action_type: str
    description: str
    data_before: str | None = None
    data_after: str | None = None
    ip_address: str | None = None
    user_id: str | None = None
    performed_by: str | None = None


class UserSessionLog(ApiModel):
    id: int
    user_id: str
    user_full_name: str
    login_time: datetime
    logout_time: datetime | None = None
    terminal_name: str | None = None
    ip_address: str | None = None

    @property
    def is_active(self) -> bool:
        return self.logout_time is None


class BusinessProfileBase(ApiModel):
    store_name: str
    vat_registered_tin: str = Field(alias="vatRegisteredTIN")
    bir_permit_number: str | None = None
    serial_number: str | None = None
    min: str | None = None
    address: str | None = None
    contact_email: str | None = None
    contact_phone: str | None = None


class BusinessProfileCreate(BusinessProfileBase):
    pass


class BusinessProfileUpdate(BusinessProfileBase):
    id: int


class BusinessProfileRead(BusinessProfileBase):
    id: int
    created_at: datetime | None = None
    updated_at: datetime | None = None
