from __future__ import annotations

from datetime import datetime

from pydantic import AliasChoices, Field

from .models import ApiModel, PurchaseOrderStatus


class SupplierRead(ApiModel):
    id: int
    name: str
    contact_person: str | None = None
    email: str | None = None
    phone: str | None = None
    address: str | None = None
    notes: str | None = None
    is_active: bool = True


class SupplierCreate(ApiModel):
    name: str = Field(min_length=1)
    contact_person: str | None = None
    email: str | None = None
    phone: str | None = None
    address: str | None = None
    notes: str | None = None


class SupplierUpdate(SupplierCreate):
    is_active: bool = True


class PurchaseOrderItemCreate(ApiModel):
    product_id: int
    unit_id: int
    quantity_ordered: float = Field(gt=0)
    unit_cost: float = Field(ge=0)
    remarks: str | None = None


class PurchaseOrderItemUpdate(PurchaseOrderItemCreate):
    # None marks a new line
    id: int | None = None


class PurchaseOrderItemRead(ApiModel):
    id: int
    product_id: int
    product_name: str | None = None
    unit_id: int | None = None
    unit_name: str | None = None
    # older backend builds answer quantity/receivedQuantity/costPerUnit/notes
    quantity_ordered: float = Field(validation_alias=AliasChoices("quantityOrdered", "quantity_ordered", "quantity"))
    quantity_received: float = Field(
        default=0.0,
        validation_alias=AliasChoices("quantityReceived", "quantity_received", "receivedQuantity"),
    )
    unit_cost: float = Field(validation_alias=AliasChoices("unitCost", "unit_cost", "costPerUnit"))
    remarks: str | None = Field(default=None, validation_alias=AliasChoices("remarks", "notes"))
    remaining_ordered: float | None = None
    is_closed: bool | None = None


class ReceivedStockRead(ApiModel):
    id: int
    purchase_order_id: int
    purchase_order_item_id: int
    product_id: int
    product_name: str | None = None
    quantity_received: float
    received_date: datetime
    reference_number: str | None = None
    notes: str | None = None
    received_by_user_id: str | None = None
    received_by_user_name: str | None = None
    processed: bool | None = None


class ReceiveStockCreate(ApiModel):
    purchase_order_id: int
    purchase_order_item_id: int
    quantity_received: float = Field(gt=0)
    received_date: datetime | None = None
    reference_number: str | None = None
    notes: str | None = None


class PurchaseOrderCreate(ApiModel):
    supplier_id: int
    purchase_order_number: str | None = None
    order_date: datetime | None = None
    expected_delivery_date: datetime | None = None
    remarks: str | None = None
    items: list[PurchaseOrderItemCreate] = Field(default_factory=list)


class PurchaseOrderUpdate(ApiModel):
    id: int
    supplier_id: int
    purchase_order_number: str
    expected_delivery_date: datetime | None = None
    remarks: str | None = None
    items: list[PurchaseOrderItemUpdate]


class PurchaseOrderRead(ApiModel):
    id: int
    supplier_id: int
    supplier_name: str | None = None
    purchase_order_number: str
    order_date: datetime | None = None
    expected_delivery_date: datetime | None = None
    remarks: str | None = None
    total_cost: float = 0.0
    items: list[PurchaseOrderItemRead] = Field(
        default_factory=list,
        validation_alias=AliasChoices("items", "purchaseItems", "purchase_items"),
    )
    received_stocks: list[ReceivedStockRead] = Field(default_factory=list)
    status: PurchaseOrderStatus | None = None
    created_by_user_id: str | None = None
    created_by_user_name: str | None = None
    created_at: datetime | None = None

    def item(self, item_id: int) -> PurchaseOrderItemRead | None:
        return next((line for line in self.items if line.id == item_id), None)


class StockReceiveItemRead(ApiModel):
    id: int
    stock_receive_id: int
    purchase_order_id: int
    product_id: int
    product_name: str | None = None
    from_unit_id: int | None = None
    from_unit_name: str | None = None
    quantity_in_from_unit: float = 0.0
    quantity: float
    unit_cost: float | None = None
    batch_number: str | None = None
    expiry_date: datetime | None = None
    remarks: str | None = None
    inventory_transaction_id: int | None = None
    received_date: datetime
    received_by_user_id: str | None = None
    received_by_user_name: str | None = None


class StockReceiveRead(ApiModel):
    id: int
    purchase_order_id: int
    purchase_order_number: str | None = None
    received_date: datetime
    received_by_user_id: str | None = None
    received_by_user_name: str | None = None
    reference_number: str | None = None
    remarks: str | None = None
    items: list[StockReceiveItemRead] = Field(default_factory=list)

    @property
    def total_quantity(self) -> float:
        return sum(item.quantity for item in self.items)
