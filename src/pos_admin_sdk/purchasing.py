"""Purchase-order arithmetic: line totals, receiving limits, delivery status.

Quantities and costs arrive as JSON numbers; sums are done in ``Decimal`` so
that totals such as ``3 * 19.99`` render exactly.
"""

from __future__ import annotations

from datetime import date, datetime
from decimal import ROUND_HALF_UP, Decimal
from typing import Iterable, Protocol

from .exceptions import raise_issue
from .models import PurchaseOrderStatus
from .models_purchasing import (
    PurchaseOrderItemRead,
    PurchaseOrderItemUpdate,
    PurchaseOrderRead,
    PurchaseOrderUpdate,
    ReceiveStockCreate,
)

CENT = Decimal("0.01")
PENDING_STATUSES = frozenset({PurchaseOrderStatus.ORDERED, PurchaseOrderStatus.PARTIALLY_RECEIVED})


class OrderLine(Protocol):
    quantity_ordered: float
    unit_cost: float


def to_decimal(value: float | int | str | Decimal | None) -> Decimal:
    if value is None:
        return Decimal("0")
    if isinstance(value, Decimal):
        return value
    return Decimal(str(value))


def money(value: Decimal) -> Decimal:
    return value.quantize(CENT, rounding=ROUND_HALF_UP)


def format_money(value: float | Decimal) -> str:
    return f"{money(to_decimal(value)):.2f}"


def line_total(item: OrderLine) -> Decimal:
    return money(to_decimal(item.quantity_ordered) * to_decimal(item.unit_cost))


def order_total(items: Iterable[OrderLine]) -> Decimal:
    total = sum((to_decimal(item.quantity_ordered) * to_decimal(item.unit_cost) for item in items), Decimal("0"))
    return money(total)


def remaining_to_receive(item: PurchaseOrderItemRead) -> Decimal:
    remaining = to_decimal(item.quantity_ordered) - to_decimal(item.quantity_received)
    return max(Decimal("0"), remaining)


def is_fully_received(item: PurchaseOrderItemRead) -> bool:
    return remaining_to_receive(item) <= 0


def default_receive_quantity(item: PurchaseOrderItemRead) -> Decimal:
    remaining = remaining_to_receive(item)
    return remaining if remaining > 0 else Decimal("1")


def clamp_receive_quantity(requested: float | Decimal | None, item: PurchaseOrderItemRead) -> Decimal:
    remaining = remaining_to_receive(item)
    if remaining <= 0:
        return Decimal("0")
    if requested is None:
        return remaining
    value = to_decimal(requested)
    if value <= 0:
        return remaining
    return min(value, remaining)


def validate_receive_quantity(quantity: float | Decimal | None, item: PurchaseOrderItemRead) -> Decimal:
    value = to_decimal(quantity)
    if not value.is_finite():
        raise_issue("quantity_received", "Quantity received must be a number.")
    if value <= 0:
        raise_issue("quantity_received", "Quantity received must be greater than 0.")
    remaining = remaining_to_receive(item)
    if value > remaining:
        raise_issue(
            "quantity_received",
            f"Quantity received cannot exceed remaining quantity ({_plain(remaining)}).",
        )
    return value


def build_receive_payload(
    order: PurchaseOrderRead,
    item_id: int,
    quantity: float | Decimal,
    *,
    received_date: datetime | None = None,
    reference_number: str | None = None,
    notes: str | None = None,
) -> ReceiveStockCreate:
    item = order.item(item_id)
    if item is None:
        raise_issue("purchase_order_item_id", f"Purchase order {order.purchase_order_number} has no item {item_id}.")
    value = validate_receive_quantity(quantity, item)
    return ReceiveStockCreate(
        purchase_order_id=order.id,
        purchase_order_item_id=item.id,
        quantity_received=float(value),
        received_date=received_date,
        reference_number=(reference_number or "").strip() or None,
        notes=(notes or "").strip() or None,
    )


def receipt_progress(order: PurchaseOrderRead) -> tuple[Decimal, Decimal]:
    received = sum((to_decimal(item.quantity_received) for item in order.items), Decimal("0"))
    ordered = sum((to_decimal(item.quantity_ordered) for item in order.items), Decimal("0"))
    return received, ordered


def is_pending(order: PurchaseOrderRead) -> bool:
    return order.status in PENDING_STATUSES


def is_overdue(expected: date | datetime | str | None, today: date | None = None) -> bool:
    if not expected:
        return False
    if isinstance(expected, str):
        try:
            expected = datetime.fromisoformat(expected.replace("Z", "+00:00"))
        except ValueError:
            return False
    expected_day = expected.date() if isinstance(expected, datetime) else expected
    return expected_day < (today or date.today())


def build_update_payload(order: PurchaseOrderRead) -> PurchaseOrderUpdate:
    """The backend wants the full line list on every order update."""
    return PurchaseOrderUpdate(
        id=order.id,
        supplier_id=order.supplier_id,
        purchase_order_number=order.purchase_order_number,
        expected_delivery_date=order.expected_delivery_date,
        remarks=order.remarks,
        items=[
            PurchaseOrderItemUpdate(
                id=item.id,
                product_id=item.product_id,
                unit_id=item.unit_id or 0,
                quantity_ordered=item.quantity_ordered,
                unit_cost=item.unit_cost,
                remarks=item.remarks,
            )
            for item in order.items
        ],
    )


def _plain(value: Decimal) -> str:
    return format(value.normalize(), "f")
