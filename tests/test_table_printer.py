from __future__ import annotations

import io
from datetime import datetime
from decimal import Decimal

from pos_admin_sdk.models import PurchaseOrderStatus
from pos_admin_sdk.table_printer import normalize_value, print_table, sanitize_row


def test_normalize_value() -> None:
    assert normalize_value(None) == "—"
    assert normalize_value("  ") == "—"
    assert normalize_value(True) == "Active"
    assert normalize_value(False) == "Inactive"
    assert normalize_value(PurchaseOrderStatus.PARTIALLY_RECEIVED) == "Partially Received"
    assert normalize_value(datetime(2024, 5, 1, 8, 30)) == "2024-05-01 08:30"
    assert normalize_value(Decimal("6")) == "6.00"
    assert normalize_value(5.0) == "5"
    assert normalize_value(2.5) == "2.50"
    assert normalize_value(7) == "7"


def test_sanitize_row_masks_secrets() -> None:
    row = {"email": "ana@store.test", "password": "secret", "access_token": "jwt", "image_base64": "AAAA"}
    assert sanitize_row(row, list(row)) == {
        "email": "ana@store.test",
        "password": "—",
        "access_token": "—",
        "image_base64": "—",
    }


def test_print_table_layout() -> None:
    stream = io.StringIO()
    print_table("Units", [{"id": 1, "name": "Bottle"}, {"id": 12, "name": "Box"}], [("id", "ID"), ("name", "Name")], stream)

    assert stream.getvalue().splitlines() == [
        "",
        "Units",
        "ID | Name  ",
        "---+-------",
        "1  | Bottle",
        "12 | Box   ",
    ]


def test_print_table_empty() -> None:
    stream = io.StringIO()
    print_table("Suppliers", [], [("name", "Name")], stream)
    assert stream.getvalue() == "\nSuppliers\n(no results)\n"
