from __future__ import annotations

from typing import Any, Mapping

from ..exceptions import raise_issue
from ..models import PurchaseOrderStatus
from ..models_purchasing import (
    PurchaseOrderCreate,
    PurchaseOrderItemCreate,
    PurchaseOrderItemRead,
    PurchaseOrderItemUpdate,
    PurchaseOrderRead,
    PurchaseOrderUpdate,
    ReceivedStockRead,
    ReceiveStockCreate,
    StockReceiveRead,
    SupplierCreate,
    SupplierRead,
    SupplierUpdate,
)
from ..purchasing import validate_receive_quantity
from .base import ResourceClient, coerce_model

PURCHASE_ORDERS_PATH = "/PurchaseOrder"
STOCK_RECEIVES_PATH = "/stockreceives"
INVENTORY_PATH = "/InventoryTransaction"


class SuppliersClient(ResourceClient[SupplierRead]):
    base_path = "/suppliers"
    module = "suppliers"
    read_model = SupplierRead
    create_model = SupplierCreate
    update_model = SupplierUpdate
    related_paths = (PURCHASE_ORDERS_PATH,)


class PurchaseOrdersClient(ResourceClient[PurchaseOrderRead]):
    base_path = PURCHASE_ORDERS_PATH
    module = "purchase_orders"
    read_model = PurchaseOrderRead
    create_model = PurchaseOrderCreate
    update_model = PurchaseOrderUpdate
    related_paths = (STOCK_RECEIVES_PATH,)

    def get_by_supplier(self, supplier_id: int) -> list[PurchaseOrderRead]:
        return self.get_all(params={"supplierId": supplier_id})

    def get_by_status(self, status: PurchaseOrderStatus | int) -> list[PurchaseOrderRead]:
        return self.get_all(params={"status": int(status)})

    def add_item(self, purchase_order_id: int, payload: PurchaseOrderItemCreate | Mapping[str, Any]) -> PurchaseOrderItemRead | None:
        body = self._dump(payload, PurchaseOrderItemCreate)
        data = self._mutate("POST", f"{self.base_path}/{purchase_order_id}/items", body, operation="items.add")
        return PurchaseOrderItemRead.model_validate(data) if isinstance(data, dict) else None

    def update_item(self, item_id: int, payload: PurchaseOrderItemUpdate | Mapping[str, Any]) -> None:
        body = self._dump(payload, PurchaseOrderItemUpdate)
        self._mutate("PUT", f"{self.base_path}/items/{item_id}", body, operation="items.update")

    def remove_item(self, item_id: int) -> None:
        self._mutate("DELETE", f"{self.base_path}/items/{item_id}", None, operation="items.remove")

    def receive_stock(
        self,
        payload: ReceiveStockCreate | Mapping[str, Any],
        *,
        order: PurchaseOrderRead | None = None,
    ) -> ReceivedStockRead | None:
        """Record a received quantity against one order line.

        When ``order`` is given the quantity is checked against what is still
        outstanding on that line before anything is sent.
        """
        dto = coerce_model(payload, ReceiveStockCreate)
        if order is not None:
            if dto.purchase_order_id != order.id:
                raise_issue("purchase_order_id", "Receive payload does not belong to this purchase order.")
            item = order.item(dto.purchase_order_item_id)
            if item is None:
                raise_issue("purchase_order_item_id", "Purchase order item not found.")
            validate_receive_quantity(dto.quantity_received, item)
        data = self._mutate(
            "POST",
            f"{self.base_path}/received",
            dto.to_payload(),
            operation="received.add",
        )
        return ReceivedStockRead.model_validate(data) if isinstance(data, dict) else None

    def delete_received_stock(self, received_stock_id: int) -> None:
        self._mutate("DELETE", f"{self.base_path}/received/{received_stock_id}", None, operation="received.delete")

    def _invalidation_paths(self) -> list[str]:
        return [*super()._invalidation_paths(), INVENTORY_PATH]


class StockReceivesClient(ResourceClient[StockReceiveRead]):
    base_path = STOCK_RECEIVES_PATH
    module = "stock_receives"
    read_model = StockReceiveRead
    related_paths = (PURCHASE_ORDERS_PATH, INVENTORY_PATH, "/product")

    def get_by_purchase_order_id(self, purchase_order_id: int) -> list[StockReceiveRead]:
        data = self._request(
            "GET",
            f"{self.base_path}/by-po/{purchase_order_id}",
            module=self.module,
            operation="list_by_po",
        )
        return self._parse_list(data)

    def create_from_purchase_order(self, purchase_order_id: int, allow_over_receive: bool = False) -> StockReceiveRead | None:
        """Post the order's received rows into stock; the server updates on-hand."""
        data = self._mutate(
            "POST",
            f"{self.base_path}/from-po/{purchase_order_id}",
            None,
            operation="create_from_po",
            params={"allowOverReceive": "true" if allow_over_receive else "false"},
        )
        return self._parse_optional(data)
