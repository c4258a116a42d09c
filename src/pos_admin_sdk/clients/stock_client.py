from __future__ import annotations

from datetime import date, datetime
from typing import Any

from ..models import InventoryActionType
from ..models_stock import (
    BadOrderCreate,
    BadOrderRead,
    BadOrderUpdate,
    InventoryTransactionCreate,
    InventoryTransactionRead,
    InventoryTransactionUpdate,
    ProductStock,
    StockAdjustmentCreate,
    StockAdjustmentListItem,
    StockAdjustmentRead,
    StockAdjustmentUpdate,
)
from .base import ResourceClient

INVENTORY_PATH = "/InventoryTransaction"


class StockAdjustmentsClient(ResourceClient[StockAdjustmentRead]):
    base_path = "/StockAdjustments"
    module = "stock_adjustments"
    read_model = StockAdjustmentRead
    create_model = StockAdjustmentCreate
    update_model = StockAdjustmentUpdate
    related_paths = (INVENTORY_PATH, "/product")

    def get_all(self, params: dict[str, Any] | None = None) -> list[StockAdjustmentListItem]:  # type: ignore[override]
        data = self._request("GET", self.base_path, params=params or None, module=self.module, operation="list")
        return self._parse_list(data, StockAdjustmentListItem)


class BadOrdersClient(ResourceClient[BadOrderRead]):
    base_path = "/BadOrders"
    module = "bad_orders"
    read_model = BadOrderRead
    create_model = BadOrderCreate
    update_model = BadOrderUpdate
    related_paths = (INVENTORY_PATH, "/product")


class InventoryTransactionsClient(ResourceClient[InventoryTransactionRead]):
    base_path = INVENTORY_PATH
    module = "inventory_transactions"
    read_model = InventoryTransactionRead
    create_model = InventoryTransactionCreate
    update_model = InventoryTransactionUpdate
    related_paths = ("/product",)

    def search(
        self,
        product_id: int | None = None,
        action_type: InventoryActionType | int | None = None,
        from_date: date | datetime | str | None = None,
        to_date: date | datetime | str | None = None,
    ) -> list[InventoryTransactionRead]:
        return self.get_all(params=build_transaction_params(product_id, action_type, from_date, to_date))

    def get_product_stock(self, product_id: int) -> ProductStock:
        data = self._request(
            "GET",
            f"{self.base_path}/products/{product_id}/stock",
            module=self.module,
            operation="product_stock",
        )
        if not isinstance(data, dict):
            raise ValueError("Expected product stock response to be a JSON object")
        return ProductStock.model_validate(data)


def build_transaction_params(
    product_id: int | None = None,
    action_type: InventoryActionType | int | None = None,
    from_date: date | datetime | str | None = None,
    to_date: date | datetime | str | None = None,
) -> dict[str, Any]:
    params: dict[str, Any] = {}
    if product_id is not None:
        params["productId"] = product_id
    if action_type is not None:
        params["actionType"] = int(action_type)
    if from_date:
        params["from"] = _iso(from_date)
    if to_date:
        params["to"] = _iso(to_date)
    return params


def _iso(value: date | datetime | str) -> str:
    if isinstance(value, (date, datetime)):
        return value.isoformat()
    return value
