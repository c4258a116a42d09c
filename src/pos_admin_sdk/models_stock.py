from __future__ import annotations

from datetime import datetime

from pydantic import Field

from .models import ApiModel, InventoryActionType


class StockAdjustmentCreate(ApiModel):
    product_id: int
    # signed: negative removes stock
    quantity: float
    unit_id: int | None = None
    reason: str | None = None
    is_system_generated: bool | None = None


class StockAdjustmentUpdate(ApiModel):
    id: int
    quantity: float
    unit_id: int | None = None
    reason: str | None = None
    is_system_generated: bool | None = None


class StockAdjustmentRead(ApiModel):
    id: int
    product_id: int
    product_name: str | None = None
    quantity: float
    unit_id: int | None = None
    unit_name: str | None = None
    reason: str | None = None
    adjustment_date: datetime
    adjusted_by_user_id: str | None = None
    adjusted_by_user_name: str | None = None
    is_system_generated: bool | None = None
    inventory_transaction_id: int | None = None


class StockAdjustmentListItem(ApiModel):
    id: int
    product_name: str
    quantity: float
    unit_name: str | None = None
    reason: str | None = None
    adjustment_date: datetime
    adjusted_by_user_name: str | None = None


class BadOrderCreate(ApiModel):
    product_id: int
    quantity: int = Field(gt=0)
    reason: str = Field(min_length=1)
    remarks: str | None = None
    bad_order_date: datetime | None = None
    reported_by_user_id: str | None = None


class BadOrderUpdate(ApiModel):
    quantity: int = Field(gt=0)
    reason: str = Field(min_length=1)
    remarks: str | None = None
    bad_order_date: datetime | None = None


class BadOrderRead(ApiModel):
    id: int
    product_id: int
    product_name: str
    quantity: int
    reason: str
    remarks: str | None = None
    bad_order_date: datetime
    reported_by_user_id: str | None = None
    reported_by_user_name: str | None = None
    inventory_transaction_id: int | None = None
    is_system_generated: bool = False


class InventoryTransactionRead(ApiModel):
    id: int
    product_id: int
    product_name: str | None = None
    action_type: InventoryActionType
    # signed as stored by the server
    quantity: float
    unit_cost: float | None = None
    reference_number: str | None = None
    remarks: str | None = None
    transaction_date: datetime
    performed_by_user_id: str | None = None
    performed_by_user_name: str | None = None


class InventoryTransactionCreate(ApiModel):
    product_id: int
    action_type: InventoryActionType
    # absolute amount; the server applies the sign
    quantity: float = Field(gt=0)
    unit_cost: float | None = None
    reference_number: str | None = None
    remarks: str | None = None
    transaction_date: datetime | None = None


class InventoryTransactionUpdate(ApiModel):
    quantity: float | None = None
    unit_cost: float | None = None
    reference_number: str | None = None
    remarks: str | None = None
    transaction_date: datetime | None = None


class ProductStock(ApiModel):
    product_id: int
    on_hand: float
    reserved: float = 0.0

    @property
    def available(self) -> float:
        return self.on_hand - self.reserved
