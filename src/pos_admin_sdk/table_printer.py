from __future__ import annotations

import sys
from datetime import datetime
from decimal import Decimal
from enum import IntEnum
from typing import Any, Mapping, TextIO

EMPTY_VALUE = "—"
SENSITIVE_KEYS = {"token", "secret", "password", "imagebase64"}


def normalize_value(value: Any) -> str:
    if value is None:
        return EMPTY_VALUE
    if isinstance(value, str):
        clean = value.strip()
        return clean or EMPTY_VALUE
    if isinstance(value, bool):
        return "Active" if value else "Inactive"
    if isinstance(value, IntEnum):
        return value.name.replace("_", " ").title()
    if isinstance(value, datetime):
        return value.strftime("%Y-%m-%d %H:%M")
    if isinstance(value, Decimal):
        return f"{value:.2f}"
    if isinstance(value, float):
        return f"{value:.2f}" if not value.is_integer() else str(int(value))
    return str(value)


def sanitize_row(row: Mapping[str, Any], headers: list[str]) -> dict[str, str]:
    sanitized: dict[str, str] = {}
    for header in headers:
        compact = header.lower().replace("_", "")
        if any(token in compact for token in SENSITIVE_KEYS):
            sanitized[header] = EMPTY_VALUE
            continue
        sanitized[header] = normalize_value(row.get(header))
    return sanitized


def print_table(
    title: str,
    rows: list[Mapping[str, Any]],
    columns: list[tuple[str, str]],
    stream: TextIO | None = None,
) -> None:
    out = stream or sys.stdout
    out.write(f"\n{title}\n")
    if not rows:
        out.write("(no results)\n")
        return

    keys = [key for key, _ in columns]
    cells = [sanitize_row(row, keys) for row in rows]
    widths = []
    for key, header in columns:
        max_cell = max(len(cell[key]) for cell in cells)
        widths.append(max(len(header), max_cell))

    header_line = " | ".join(header.ljust(widths[idx]) for idx, (_, header) in enumerate(columns))
    separator = "-+-".join("-" * width for width in widths)
    out.write(header_line + "\n")
    out.write(separator + "\n")
    for cell in cells:
        out.write(" | ".join(cell[key].ljust(widths[idx]) for idx, key in enumerate(keys)) + "\n")
