from __future__ import annotations

from datetime import datetime

from pydantic import Field

from .models import ApiModel, TaxType, UserRole


class UserRead(ApiModel):
    id: str
    first_name: str
    middle_name: str | None = None
    last_name: str
    full_name: str | None = None
    email: str
    role: UserRole
    is_active: bool = True
    date_created: datetime | None = None


class UserCreate(ApiModel):
    first_name: str = Field(min_length=1)
    middle_name: str | None = None
    last_name: str = Field(min_length=1)
    email: str = Field(min_length=3)
    password: str = Field(min_length=8)
    role: UserRole


class UserUpdate(ApiModel):
    id: str
    first_name: str | None = None
    middle_name: str | None = None
    last_name: str | None = None
    email: str | None = None
    role: UserRole | None = None
    is_active: bool | None = None
    password: str | None = None


class VatSettingRead(ApiModel):
    id: int
    name: str
    rate: float
    tax_type: TaxType
    is_vat_inclusive: bool = False
    description: str | None = None
    is_active: bool = True


class VatSettingCreate(ApiModel):
    name: str = Field(min_length=1)
    rate: float = Field(ge=0, le=100)
    tax_type: TaxType = TaxType.VATABLE
    is_vat_inclusive: bool = False
    description: str | None = None


class VatSettingUpdate(VatSettingCreate):
    id: int
    is_active: bool = True


class DiscountSettingRead(ApiModel):
    id: int
    name: str
    discount_percent: float
    requires_approval: bool = False
    description: str | None = None
    is_active: bool = True
    created_at: datetime | None = None
    updated_at: datetime | None = None


class DiscountSettingCreate(ApiModel):
    name: str = Field(min_length=1)
    discount_percent: float = Field(ge=0, le=100)
    requires_approval: bool = False
    description: str | None = None


class DiscountSettingUpdate(DiscountSettingCreate):
    pass


class ReceiptSettingRead(ApiModel):
    id: int
    header_message: str | None = None
    footer_message: str | None = None
    logo_url: str | None = None
    receipt_size: str | None = None
    show_vat_breakdown: bool = False
    show_serial_and_permit_number: bool = False
    show_item_code: bool = False
    is_active: bool = True


class ReceiptSettingCreate(ApiModel):
    header_message: str | None = None
    footer_message: str | None = None
    logo_url: str | None = None
    receipt_size: str | None = None
    show_vat_breakdown: bool = False
    show_serial_and_permit_number: bool = False
    show_item_code: bool = False


class ReceiptSettingUpdate(ReceiptSettingCreate):
    is_active: bool = True


class CounterRead(ApiModel):
    id: int
    name: str
    description: str | None = None
    terminal_identifier: str | None = None
    is_active: bool = True
    created_at: datetime | None = None
    updated_at: datetime | None = None


class CounterCreate(ApiModel):
    name: str = Field(min_length=1)
    description: str | None = None
    terminal_identifier: str | None = None


class CounterUpdate(CounterCreate):
    is_active: bool = True
