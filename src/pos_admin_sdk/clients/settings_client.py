from __future__ import annotations

from typing import Any, Mapping

from ..models import BusinessProfileCreate, BusinessProfileRead, BusinessProfileUpdate, LoginAttemptLog, SystemLog, UserSessionLog
from ..models_settings import (
    CounterCreate,
    CounterRead,
    CounterUpdate,
    DiscountSettingCreate,
    DiscountSettingRead,
    DiscountSettingUpdate,
    ReceiptSettingCreate,
    ReceiptSettingRead,
    ReceiptSettingUpdate,
    UserCreate,
    UserRead,
    UserUpdate,
    VatSettingCreate,
    VatSettingRead,
    VatSettingUpdate,
)
from .base import BaseClient, ResourceClient, coerce_model


class UsersClient(ResourceClient[UserRead]):
    base_path = "/account/users"
    module = "users"
    read_model = UserRead
    create_model = UserCreate
    update_model = UserUpdate

    def update(self, payload: UserUpdate | Mapping[str, Any]) -> None:  # type: ignore[override]
        body = self._dump(payload, UserUpdate)
        self._mutate("PUT", self.base_path, body, operation="update")

    def deactivate(self, resource_id: int | str) -> None:
        self._mutate("PUT", f"{self.base_path}/deactivate/{resource_id}", None, operation="deactivate")


class VatSettingsClient(ResourceClient[VatSettingRead]):
    base_path = "/settings/vat"
    module = "vat_settings"
    read_model = VatSettingRead
    create_model = VatSettingCreate
    update_model = VatSettingUpdate
    related_paths = ("/product",)

    def update(self, payload: VatSettingUpdate | Mapping[str, Any]) -> None:  # type: ignore[override]
        body = self._dump(payload, VatSettingUpdate)
        self._mutate("PUT", self.base_path, body, operation="update")


class DiscountSettingsClient(ResourceClient[DiscountSettingRead]):
    base_path = "/settings/discounts"
    module = "discount_settings"
    read_model = DiscountSettingRead
    create_model = DiscountSettingCreate
    update_model = DiscountSettingUpdate


class ReceiptSettingsClient(ResourceClient[ReceiptSettingRead]):
    base_path = "/settings/receipt"
    module = "receipt_settings"
    read_model = ReceiptSettingRead
    create_model = ReceiptSettingCreate
    update_model = ReceiptSettingUpdate


class CountersClient(ResourceClient[CounterRead]):
    base_path = "/settings/counters"
    module = "counters"
    read_model = CounterRead
    create_model = CounterCreate
    update_model = CounterUpdate


class BusinessProfileClient(ResourceClient[BusinessProfileRead]):
    """Single-record settings: one business profile per installation."""

    base_path = "/settings/businessprofile"
    module = "business_profile"
    read_model = BusinessProfileRead
    create_model = BusinessProfileCreate
    update_model = BusinessProfileUpdate

    def get(self) -> BusinessProfileRead:
        data = self._request("GET", self.base_path, module=self.module, operation="get")
        return self._parse_one(data)

    def update(self, payload: BusinessProfileUpdate | Mapping[str, Any]) -> None:  # type: ignore[override]
        dto = coerce_model(payload, BusinessProfileUpdate)
        self._mutate("PUT", f"{self.base_path}/{dto.id}", dto.to_payload(), operation="update")


class AuthLogsClient(BaseClient):
    module = "auth_logs"

    def login_attempts(self) -> list[LoginAttemptLog]:
        return self._list("/authlogs/login-attempts", LoginAttemptLog, "login_attempts")

    def system_logs(self) -> list[SystemLog]:
        return self._list("/authlogs/system-logs", SystemLog, "system_logs")

    def user_sessions(self) -> list[UserSessionLog]:
        return self._list("/authlogs/user-sessions", UserSessionLog, "user_sessions")

    def _list(self, path: str, model, operation: str) -> list:
        data = self._request("GET", path, module=self.module, operation=operation, use_get_cache=False)
        if not isinstance(data, list):
            raise ValueError(f"Expected {operation} response to be a JSON array")
        return [model.model_validate(row) for row in data]
