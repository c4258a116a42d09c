from __future__ import annotations

import math
from dataclasses import dataclass
from datetime import date, datetime
from typing import Any, Generic, Mapping, Sequence, TypeVar

from .models import PurchaseOrderStatus
from .models_catalog import ProductRead
from .models_purchasing import PurchaseOrderRead, StockReceiveRead
from .purchasing import PENDING_STATUSES

T = TypeVar("T")
RowT = TypeVar("RowT", bound=Mapping[str, Any])

PRODUCT_SORT_MODES = ("all", "lowFirst", "onHandAsc", "onHandDesc")
PRODUCT_PICKER_LIMIT = 200
SORT_DIRECTIONS = ("asc", "desc")


def matches_term(term: str | None, *fields: object) -> bool:
    needle = (term or "").strip().lower()
    if not needle:
        return True
    return any(needle in str(field).lower() for field in fields if field is not None)


def search_products(products: Sequence[ProductRead], term: str | None, limit: int = PRODUCT_PICKER_LIMIT) -> list[ProductRead]:
    """Product picker used when adding purchase-order lines."""
    if not (term or "").strip():
        return list(products[:limit])
    matched = [
        product
        for product in products
        if matches_term(term, product.name, product.barcode or "", product.category_name or "", product.id)
    ]
    return matched[:limit]


def is_low_stock(product: ProductRead) -> bool:
    # no reorder level means never low
    if product.reorder_level is None:
        return False
    return (product.on_hand or 0) <= product.reorder_level


def filter_products(
    products: Sequence[ProductRead],
    term: str | None = "",
    *,
    category_id: int | None = None,
    low_stock_only: bool = False,
    sort_by: str = "all",
) -> list[ProductRead]:
    if sort_by not in PRODUCT_SORT_MODES:
        raise ValueError(f"Unknown sort mode {sort_by!r}; expected one of {', '.join(PRODUCT_SORT_MODES)}")
    rows = list(products)
    if category_id is not None:
        rows = [product for product in rows if product.category_id == category_id]
    if (term or "").strip():
        rows = [
            product
            for product in rows
            if matches_term(
                term,
                " ".join([product.name, product.barcode or "", product.category_name or "", product.unit_name or ""]),
            )
        ]
    if low_stock_only:
        rows = [product for product in rows if is_low_stock(product)]

    if sort_by == "lowFirst":
        rows.sort(key=lambda product: (0 if is_low_stock(product) else 1, product.on_hand or 0))
    elif sort_by == "onHandAsc":
        rows.sort(key=lambda product: product.on_hand or 0)
    elif sort_by == "onHandDesc":
        rows.sort(key=lambda product: product.on_hand or 0, reverse=True)
    return rows


def product_category_options(products: Sequence[ProductRead]) -> list[tuple[int, str]]:
    options: dict[int, str] = {}
    for product in products:
        if product.category_id is not None and product.category_name:
            options.setdefault(product.category_id, product.category_name)
    return sorted(options.items(), key=lambda option: option[1].lower())


def filter_purchase_orders(
    orders: Sequence[PurchaseOrderRead],
    term: str | None = "",
    *,
    supplier_id: int | None = None,
    status: PurchaseOrderStatus | None = None,
    pending_only: bool = False,
) -> list[PurchaseOrderRead]:
    rows = []
    for order in orders:
        if pending_only and order.status not in PENDING_STATUSES:
            continue
        if supplier_id is not None and order.supplier_id != supplier_id:
            continue
        if status is not None and order.status != status:
            continue
        if not matches_term(term, order.purchase_order_number, order.supplier_name or ""):
            continue
        rows.append(order)
    return rows


def filter_stock_receives(receives: Sequence[StockReceiveRead], term: str | None = "") -> list[StockReceiveRead]:
    """Receiving history search: PO number, receiver, reference or any item's product."""
    return [
        receive
        for receive in receives
        if matches_term(
            term,
            receive.purchase_order_number,
            receive.received_by_user_name,
            receive.reference_number,
            *(item.product_name for item in receive.items),
        )
    ]


def _searchable(value: Any) -> str | None:
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, (datetime, date)):
        return value.isoformat()
    if isinstance(value, (str, int, float)):
        return str(value)
    return None


def filter_logs(rows: Sequence[RowT], term: str | None = "") -> list[RowT]:
    """Keep rows where any text, number or date column contains ``term``."""
    return [row for row in rows if matches_term(term, *(_searchable(value) for value in row.values()))]


def sort_rows(rows: Sequence[RowT], key: str, direction: str = "asc") -> list[RowT]:
    if direction not in SORT_DIRECTIONS:
        raise ValueError(f"Unknown sort direction {direction!r}; expected asc or desc")
    present = [row for row in rows if row.get(key) is not None]
    # empty cells go last in either direction
    missing = [row for row in rows if row.get(key) is None]
    numeric = all(isinstance(row[key], (int, float)) and not isinstance(row[key], bool) for row in present)

    def sort_key(row: RowT) -> Any:
        return row[key] if numeric else str(row[key]).lower()

    present.sort(key=sort_key, reverse=direction == "desc")
    return present + missing


@dataclass(frozen=True)
class Page(Generic[T]):
    items: list[T]
    page: int
    page_size: int
    total: int

    @property
    def total_pages(self) -> int:
        return max(1, math.ceil(self.total / self.page_size))

    @property
    def has_next(self) -> bool:
        return self.page < self.total_pages

    @property
    def range_label(self) -> str:
        if self.total == 0:
            return "No results"
        start = (self.page - 1) * self.page_size + 1
        end = min(self.page * self.page_size, self.total)
        return f"{start}–{end} of {self.total}"


def paginate(rows: Sequence[T], page: int = 1, page_size: int = 10) -> Page[T]:
    if page_size < 1:
        raise ValueError("page_size must be at least 1")
    total = len(rows)
    total_pages = max(1, math.ceil(total / page_size))
    # out-of-range pages fall back to the first page
    current = page if 1 <= page <= total_pages else 1
    start = (current - 1) * page_size
    return Page(items=list(rows[start : start + page_size]), page=current, page_size=page_size, total=total)
