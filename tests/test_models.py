from __future__ import annotations

import pytest

from pos_admin_sdk.models import (
    PURCHASE_ORDER_STATUS_LABELS,
    TAX_TYPE_LABELS,
    InventoryActionType,
    PurchaseOrderStatus,
    TaxType,
    UserRole,
    parse_enum,
    role_label,
)
from pos_admin_sdk.models_catalog import ProductCreate
from pos_admin_sdk.models_settings import UserRead


def test_parse_enum_accepts_ints_digits_and_names() -> None:
    assert parse_enum(PurchaseOrderStatus, 2) is PurchaseOrderStatus.PARTIALLY_RECEIVED
    assert parse_enum(PurchaseOrderStatus, "4") is PurchaseOrderStatus.RECEIVED
    assert parse_enum(PurchaseOrderStatus, "partially-received") is PurchaseOrderStatus.PARTIALLY_RECEIVED
    assert parse_enum(InventoryActionType, "bad order") is InventoryActionType.BAD_ORDER
    with pytest.raises(ValueError):
        parse_enum(PurchaseOrderStatus, "lost")


def test_labels() -> None:
    assert TAX_TYPE_LABELS[TaxType.EXEMPT] == "VAT-Exempt"
    assert PURCHASE_ORDER_STATUS_LABELS[PurchaseOrderStatus.CANCELLED] == "Cancelled"


def test_role_label() -> None:
    assert role_label(0) == "Admin"
    assert role_label("3") == "Warehouse"
    assert role_label("manager") == "Manager"
    assert role_label(None) is None


def test_payload_uses_camel_case_and_int_enums() -> None:
    payload = ProductCreate(name="Ice", category_id=4, unit_id=2, price=30, tax_type=TaxType.ZERO_RATED).to_payload()
    assert payload == {"name": "Ice", "categoryId": 4, "unitId": 2, "price": 30.0, "taxType": 2}


def test_read_models_ignore_unknown_keys() -> None:
    user = UserRead.model_validate(
        {"id": "u-1", "firstName": "Ana", "lastName": "Cruz", "email": "ana@store.test", "role": 1, "securityStamp": "x"}
    )
    assert user.role is UserRole.MANAGER
