from __future__ import annotations

from pydantic import Field

from .models import ApiModel, TaxType


class ProductRead(ApiModel):
    id: int
    name: str
    barcode: str | None = None
    is_barcoded: bool = False
    category_id: int | None = None
    category_name: str | None = None
    unit_id: int | None = None
    unit_name: str | None = None
    description: str | None = None
    price: float = 0.0
    tax_type: TaxType = TaxType.VATABLE
    is_perishable: bool = False
    reorder_level: float | None = None
    on_hand: float | None = None
    is_active: bool = True
    image_base64: str | None = None


class ProductCreate(ApiModel):
    name: str = Field(min_length=1)
    barcode: str | None = None
    is_barcoded: bool | None = None
    category_id: int
    unit_id: int
    description: str | None = None
    price: float = Field(ge=0)
    tax_type: TaxType = TaxType.VATABLE
    is_perishable: bool | None = None
    reorder_level: float | None = Field(default=None, ge=0)
    image_base64: str | None = None


class ProductUpdate(ProductCreate):
    id: int
    is_active: bool = True


class CategoryRead(ApiModel):
    id: int
    name: str
    description: str | None = None
    is_active: bool = True


class CategoryCreate(ApiModel):
    name: str = Field(min_length=1)
    description: str | None = None


class CategoryUpdate(CategoryCreate):
    id: int
    is_active: bool = True


class UnitRead(ApiModel):
    id: int
    name: str
    abbreviation: str | None = None
    unit_type: str | None = None
    allows_decimal: bool = False
    is_active: bool = True


class UnitCreate(ApiModel):
    name: str = Field(min_length=1)
    abbreviation: str | None = None
    unit_type: str | None = None
    allows_decimal: bool | None = None


class UnitUpdate(UnitCreate):
    id: int
    is_active: bool = True


class ProductUnitConversionRead(ApiModel):
    id: int
    product_id: int
    product_name: str | None = None
    from_unit_id: int
    from_unit_name: str | None = None
    to_unit_id: int
    to_unit_name: str | None = None
    conversion_rate: float
    notes: str | None = None


class ProductUnitConversionCreate(ApiModel):
    product_id: int
    from_unit_id: int
    to_unit_id: int
    conversion_rate: float = Field(gt=0)
    notes: str | None = None


class ProductUnitConversionUpdate(ProductUnitConversionCreate):
    id: int
