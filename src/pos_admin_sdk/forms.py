from __future__ import annotations

import math
import re
from dataclasses import dataclass
from enum import Enum
from typing import Any, Mapping, Sequence

from pydantic.alias_generators import to_snake

EMAIL_REGEX = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")
MAX_TEXT = 255


class FormStatus(str, Enum):
    IDLE = "idle"
    DIRTY = "dirty"
    VALID = "valid"
    SUBMITTING = "submitting"
    SUCCESS = "success"
    ERROR = "error"


@dataclass
class FormResult:
    values: dict[str, Any]
    field_errors: dict[str, str]

    @property
    def first_invalid_field(self) -> str | None:
        return next(iter(self.field_errors), None)

    @property
    def is_valid(self) -> bool:
        return len(self.field_errors) == 0


@dataclass
class FormState:
    status: FormStatus = FormStatus.IDLE
    submit_enabled: bool = False
    submit_disabled_reason: str = "Fill in the required fields."


def build_form_state(result: FormResult) -> FormState:
    if result.is_valid:
        return FormState(status=FormStatus.VALID, submit_enabled=True, submit_disabled_reason="")
    first_invalid_field = result.first_invalid_field or "form"
    return FormState(
        status=FormStatus.DIRTY,
        submit_enabled=False,
        submit_disabled_reason=f"Fix '{first_invalid_field}' before submitting.",
    )


def _text(value: Any) -> str:
    return str(value).strip() if value is not None else ""


def _optional_text(value: Any) -> str | None:
    return _text(value) or None


def _number(value: Any) -> float | None:
    if value is None or value == "":
        return None
    try:
        number = float(value)
    except (TypeError, ValueError):
        return None
    return number if math.isfinite(number) else None


def _require_text(values: dict, errors: dict, key: str, label: str, raw: Any) -> None:
    text = _text(raw)
    values[key] = text
    if not text:
        errors[key] = f"{label} is required."
    elif len(text) > MAX_TEXT:
        errors[key] = f"{label} cannot exceed {MAX_TEXT} characters."


def _require_id(values: dict, errors: dict, key: str, label: str, raw: Any) -> None:
    number = _number(raw)
    if number is None or number <= 0 or not float(number).is_integer():
        errors[key] = f"{label} is required."
        values[key] = None
        return
    values[key] = int(number)


def _optional_email(values: dict, errors: dict, raw: Any) -> None:
    email = _text(raw).lower()
    values["email"] = email or None
    if email and not EMAIL_REGEX.match(email):
        errors["email"] = "Invalid email. Use the name@domain.com format."


def validate_product_form(data: Mapping[str, Any]) -> FormResult:
    values: dict[str, Any] = {}
    errors: dict[str, str] = {}
    _require_text(values, errors, "name", "Product name", data.get("name"))
    _require_id(values, errors, "category_id", "Category", data.get("category_id"))
    _require_id(values, errors, "unit_id", "Unit", data.get("unit_id"))
    price = _number(data.get("price"))
    if price is None:
        errors["price"] = "Price is required."
    elif price < 0:
        errors["price"] = "Price cannot be negative."
    values["price"] = price
    reorder_level = _number(data.get("reorder_level"))
    if reorder_level is not None and reorder_level < 0:
        errors["reorder_level"] = "Reorder level cannot be negative."
    values["reorder_level"] = reorder_level
    barcode = _optional_text(data.get("barcode"))
    if data.get("is_barcoded") and not barcode:
        errors["barcode"] = "Barcode is required for barcoded products."
    values["barcode"] = barcode
    values["description"] = _optional_text(data.get("description"))
    return FormResult(values=values, field_errors=errors)


def validate_category_form(data: Mapping[str, Any]) -> FormResult:
    values: dict[str, Any] = {}
    errors: dict[str, str] = {}
    _require_text(values, errors, "name", "Category name", data.get("name"))
    values["description"] = _optional_text(data.get("description"))
    return FormResult(values=values, field_errors=errors)


def validate_unit_form(data: Mapping[str, Any]) -> FormResult:
    values: dict[str, Any] = {}
    errors: dict[str, str] = {}
    _require_text(values, errors, "name", "Unit name", data.get("name"))
    abbreviation = _optional_text(data.get("abbreviation"))
    if abbreviation and len(abbreviation) > 10:
        errors["abbreviation"] = "Abbreviation cannot exceed 10 characters."
    values["abbreviation"] = abbreviation
    values["unit_type"] = _optional_text(data.get("unit_type"))
    values["allows_decimal"] = bool(data.get("allows_decimal"))
    return FormResult(values=values, field_errors=errors)


def validate_unit_conversion_form(data: Mapping[str, Any]) -> FormResult:
    values: dict[str, Any] = {}
    errors: dict[str, str] = {}
    _require_id(values, errors, "product_id", "Product", data.get("product_id"))
    _require_id(values, errors, "from_unit_id", "From unit", data.get("from_unit_id"))
    _require_id(values, errors, "to_unit_id", "To unit", data.get("to_unit_id"))
    if values["from_unit_id"] and values["from_unit_id"] == values["to_unit_id"]:
        errors["to_unit_id"] = "From and to units must differ."
    rate = _number(data.get("conversion_rate"))
    if rate is None or rate <= 0:
        errors["conversion_rate"] = "Conversion rate must be greater than 0."
    values["conversion_rate"] = rate
    values["notes"] = _optional_text(data.get("notes"))
    return FormResult(values=values, field_errors=errors)


def validate_supplier_form(data: Mapping[str, Any]) -> FormResult:
    values: dict[str, Any] = {}
    errors: dict[str, str] = {}
    _require_text(values, errors, "name", "Supplier name", data.get("name"))
    _optional_email(values, errors, data.get("email"))
    for key in ("contact_person", "phone", "address", "notes"):
        values[key] = _optional_text(data.get(key))
    return FormResult(values=values, field_errors=errors)


def validate_user_form(data: Mapping[str, Any], *, creating: bool = True) -> FormResult:
    values: dict[str, Any] = {}
    errors: dict[str, str] = {}
    _require_text(values, errors, "first_name", "First name", data.get("first_name"))
    _require_text(values, errors, "last_name", "Last name", data.get("last_name"))
    values["middle_name"] = _optional_text(data.get("middle_name"))

    email = _text(data.get("email")).lower()
    values["email"] = email
    if not email:
        errors["email"] = "Email is required."
    elif not EMAIL_REGEX.match(email):
        errors["email"] = "Invalid email. Use the name@domain.com format."

    password = _text(data.get("password"))
    values["password"] = password or None
    if creating and not password:
        errors["password"] = "Password is required."
    elif password and len(password) < 8:
        errors["password"] = "Password must be at least 8 characters."

    role = data.get("role")
    if role is None or role == "":
        errors["role"] = "Role is required."
    values["role"] = role
    return FormResult(values=values, field_errors=errors)


def _percent(values: dict, errors: dict, key: str, label: str, raw: Any) -> None:
    number = _number(raw)
    values[key] = number
    if number is None:
        errors[key] = f"{label} is required."
    elif not 0 <= number <= 100:
        errors[key] = f"{label} must be between 0 and 100."


def validate_vat_form(data: Mapping[str, Any]) -> FormResult:
    values: dict[str, Any] = {}
    errors: dict[str, str] = {}
    _require_text(values, errors, "name", "Name", data.get("name"))
    _percent(values, errors, "rate", "Rate", data.get("rate"))
    if data.get("tax_type") is None:
        errors["tax_type"] = "Tax type is required."
    values["tax_type"] = data.get("tax_type")
    values["is_vat_inclusive"] = bool(data.get("is_vat_inclusive"))
    values["description"] = _optional_text(data.get("description"))
    return FormResult(values=values, field_errors=errors)


def validate_discount_form(data: Mapping[str, Any]) -> FormResult:
    values: dict[str, Any] = {}
    errors: dict[str, str] = {}
    _require_text(values, errors, "name", "Name", data.get("name"))
    _percent(values, errors, "discount_percent", "Discount percent", data.get("discount_percent"))
    values["requires_approval"] = bool(data.get("requires_approval"))
    values["description"] = _optional_text(data.get("description"))
    return FormResult(values=values, field_errors=errors)


def validate_counter_form(data: Mapping[str, Any]) -> FormResult:
    values: dict[str, Any] = {}
    errors: dict[str, str] = {}
    _require_text(values, errors, "name", "Counter name", data.get("name"))
    values["description"] = _optional_text(data.get("description"))
    values["terminal_identifier"] = _optional_text(data.get("terminal_identifier"))
    return FormResult(values=values, field_errors=errors)


def validate_business_profile_form(data: Mapping[str, Any]) -> FormResult:
    values: dict[str, Any] = {}
    errors: dict[str, str] = {}
    _require_text(values, errors, "store_name", "Store name", data.get("store_name"))
    _require_text(values, errors, "vat_registered_tin", "VAT registered TIN", data.get("vat_registered_tin"))
    email = _text(data.get("contact_email")).lower()
    values["contact_email"] = email or None
    if email and not EMAIL_REGEX.match(email):
        errors["contact_email"] = "Invalid email. Use the name@domain.com format."
    for key in ("bir_permit_number", "serial_number", "min", "address", "contact_phone"):
        values[key] = _optional_text(data.get(key))
    return FormResult(values=values, field_errors=errors)


def validate_stock_adjustment_form(data: Mapping[str, Any]) -> FormResult:
    values: dict[str, Any] = {}
    errors: dict[str, str] = {}
    _require_id(values, errors, "product_id", "Product", data.get("product_id"))
    quantity = _number(data.get("quantity"))
    if quantity is None or quantity == 0:
        errors["quantity"] = "Quantity must not be zero."
    values["quantity"] = quantity
    values["unit_id"] = data.get("unit_id") or None
    values["reason"] = _optional_text(data.get("reason"))
    return FormResult(values=values, field_errors=errors)


def validate_bad_order_form(data: Mapping[str, Any]) -> FormResult:
    values: dict[str, Any] = {}
    errors: dict[str, str] = {}
    _require_id(values, errors, "product_id", "Product", data.get("product_id"))
    quantity = _number(data.get("quantity"))
    if quantity is None or quantity <= 0 or not quantity.is_integer():
        errors["quantity"] = "Quantity must be a whole number greater than 0."
        values["quantity"] = quantity
    else:
        values["quantity"] = int(quantity)
    _require_text(values, errors, "reason", "Reason", data.get("reason"))
    values["remarks"] = _optional_text(data.get("remarks"))
    return FormResult(values=values, field_errors=errors)


def validate_purchase_order_form(data: Mapping[str, Any]) -> FormResult:
    values: dict[str, Any] = {}
    errors: dict[str, str] = {}
    _require_id(values, errors, "supplier_id", "Supplier", data.get("supplier_id"))
    values["purchase_order_number"] = _optional_text(data.get("purchase_order_number"))
    values["expected_delivery_date"] = data.get("expected_delivery_date") or None
    values["remarks"] = _optional_text(data.get("remarks"))

    raw_items: Sequence[Mapping[str, Any]] = data.get("items") or []
    if not raw_items:
        errors["items"] = "Add at least one item."
    items = []
    for index, raw in enumerate(raw_items):
        line: dict[str, Any] = {}
        line_errors: dict[str, str] = {}
        _require_id(line, line_errors, "product_id", "Product", raw.get("product_id"))
        _require_id(line, line_errors, "unit_id", "Unit", raw.get("unit_id"))
        quantity = _number(raw.get("quantity_ordered"))
        if quantity is None or quantity <= 0:
            line_errors["quantity_ordered"] = "Quantity must be greater than 0."
        cost = _number(raw.get("unit_cost"))
        if cost is None or cost < 0:
            line_errors["unit_cost"] = "Unit cost cannot be negative."
        line.update(quantity_ordered=quantity, unit_cost=cost, remarks=_optional_text(raw.get("remarks")))
        if raw.get("id") is not None:
            line["id"] = raw.get("id")
        for key, message in line_errors.items():
            errors[f"items.{index}.{key}"] = message
        items.append(line)
    values["items"] = items
    return FormResult(values=values, field_errors=errors)


def map_api_validation_errors(error_details: Any) -> dict[str, str]:
    """Flatten backend validation details into ``{snake_field: message}``."""
    if not error_details:
        return {}

    mapped: dict[str, str] = {}
    if isinstance(error_details, dict):
        source = error_details.get("errors") if isinstance(error_details.get("errors"), dict) else error_details
        for key, value in source.items():
            field = _field_name(key)
            if isinstance(value, str):
                mapped[field] = value
            elif isinstance(value, list) and value and isinstance(value[0], str):
                mapped[field] = value[0]
    elif isinstance(error_details, list):
        for item in error_details:
            if not isinstance(item, dict):
                continue
            field = item.get("field") or item.get("loc")
            message = item.get("message") or item.get("msg")
            if isinstance(field, list):
                field = field[-1] if field else None
            if field and message:
                mapped[_field_name(str(field))] = str(message)
    return mapped


def _field_name(key: str) -> str:
    # "$.items[0].UnitCost" / "Dto.Name" -> last segment in snake_case
    tail = key.split(".")[-1].lstrip("$")
    tail = re.sub(r"\[\d+\]$", "", tail)
    return to_snake(tail) if tail else key
