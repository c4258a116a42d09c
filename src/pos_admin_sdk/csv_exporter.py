from __future__ import annotations

import csv
import io
import re
from datetime import datetime
from pathlib import Path
from typing import Any, Sequence

from .models_purchasing import PurchaseOrderRead
from .purchasing import format_money, line_total
from .table_printer import sanitize_row

ITEM_HEADERS = ["Product", "Quantity", "Received", "CostPerUnit", "LineTotal", "Notes"]
RECEIVED_HEADERS = ["Product", "QuantityReceived", "ReceivedDate", "ReferenceNumber", "Notes", "ReceivedBy"]

UNSAFE_FILENAME_CHARS = re.compile(r"[\\/:]+")


def _quantity(value: float | None) -> str:
    number = value or 0
    return str(int(number)) if float(number).is_integer() else str(number)


def purchase_order_items_rows(order: PurchaseOrderRead) -> list[list[str]]:
    rows = [list(ITEM_HEADERS)]
    for item in order.items:
        rows.append(
            [
                item.product_name or f"#{item.product_id}",
                _quantity(item.quantity_ordered),
                _quantity(item.quantity_received),
                format_money(item.unit_cost),
                f"{line_total(item):.2f}",
                item.remarks or "",
            ]
        )
    return rows


def received_stock_rows(order: PurchaseOrderRead) -> list[list[str]]:
    rows = [list(RECEIVED_HEADERS)]
    for record in order.received_stocks:
        rows.append(
            [
                record.product_name or f"#{record.product_id}",
                _quantity(record.quantity_received),
                record.received_date.isoformat(),
                record.reference_number or "",
                record.notes or "",
                record.received_by_user_name or "",
            ]
        )
    return rows


def render_csv(rows: Sequence[Sequence[Any]]) -> str:
    buffer = io.StringIO()
    writer = csv.writer(buffer, quoting=csv.QUOTE_ALL, lineterminator="\n")
    writer.writerows([[str(value) for value in row] for row in rows])
    return buffer.getvalue().rstrip("\n")


def _file_stem(order: PurchaseOrderRead) -> str:
    """Order number usable as a file name inside ``output_dir``."""
    stem = UNSAFE_FILENAME_CHARS.sub("-", order.purchase_order_number).strip(". ")
    return stem or f"purchase-order-{order.id}"


def _write(path: Path, content: str) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(content, encoding="utf-8")
    return path


def export_purchase_order_items(order: PurchaseOrderRead, output_dir: str | Path) -> Path:
    path = Path(output_dir) / f"{_file_stem(order)}-items.csv"
    return _write(path, render_csv(purchase_order_items_rows(order)))


def export_received_stock(order: PurchaseOrderRead, output_dir: str | Path) -> Path | None:
    """Returns ``None`` and writes nothing when the order has no received records."""
    if not order.received_stocks:
        return None
    path = Path(output_dir) / f"{_file_stem(order)}-received.csv"
    return _write(path, render_csv(received_stock_rows(order)))


def export_listing(
    *,
    module: str,
    rows: list[dict[str, Any]],
    headers: list[str],
    output_dir: str | Path = "exports",
    filters: dict[str, str] | None = None,
) -> Path:
    destination = Path(output_dir)
    destination.mkdir(parents=True, exist_ok=True)

    now = datetime.now().astimezone()
    path = destination / f"{module}_{now.strftime('%Y%m%d_%H%M%S')}.csv"

    with path.open("w", newline="", encoding="utf-8-sig") as handle:
        handle.write(f"# timestamp_local: {now.isoformat()}\n")
        handle.write(f"# module: {module}\n")
        handle.write(f"# filters: {filters or {}}\n")
        writer = csv.DictWriter(handle, fieldnames=headers, extrasaction="ignore")
        writer.writeheader()
        for row in rows:
            writer.writerow(sanitize_row(row, headers))

    return path
