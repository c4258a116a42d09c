from __future__ import annotations

from pos_admin_sdk.forms import (
    FormStatus,
    build_form_state,
    map_api_validation_errors,
    validate_bad_order_form,
    validate_business_profile_form,
    validate_category_form,
    validate_counter_form,
    validate_discount_form,
    validate_product_form,
    validate_purchase_order_form,
    validate_stock_adjustment_form,
    validate_supplier_form,
    validate_unit_conversion_form,
    validate_unit_form,
    validate_user_form,
    validate_vat_form,
)


def test_product_form_required_fields() -> None:
    result = validate_product_form({"name": "  ", "price": "-1"})

    assert not result.is_valid
    assert result.field_errors["name"] == "Product name is required."
    assert result.field_errors["category_id"] == "Category is required."
    assert result.field_errors["unit_id"] == "Unit is required."
    assert result.field_errors["price"] == "Price cannot be negative."
    assert result.first_invalid_field == "name"


def test_product_form_valid_values_are_normalized() -> None:
    result = validate_product_form(
        {"name": " Coke 1.5L ", "category_id": "2", "unit_id": 1, "price": "85", "reorder_level": "12", "barcode": " "}
    )

    assert result.is_valid
    assert result.values["name"] == "Coke 1.5L"
    assert result.values["category_id"] == 2
    assert result.values["price"] == 85.0
    assert result.values["barcode"] is None


def test_product_form_barcode_required_when_barcoded() -> None:
    result = validate_product_form({"name": "X", "category_id": 1, "unit_id": 1, "price": 1, "is_barcoded": True})
    assert result.field_errors == {"barcode": "Barcode is required for barcoded products."}


def test_form_state_follows_result() -> None:
    invalid = build_form_state(validate_category_form({}))
    assert invalid.status is FormStatus.DIRTY
    assert not invalid.submit_enabled
    assert invalid.submit_disabled_reason == "Fix 'name' before submitting."

    valid = build_form_state(validate_category_form({"name": "Snacks"}))
    assert valid.status is FormStatus.VALID
    assert valid.submit_enabled


def test_unit_and_counter_forms() -> None:
    assert validate_unit_form({"name": "Box", "abbreviation": "box-of-many-things"}).field_errors == {
        "abbreviation": "Abbreviation cannot exceed 10 characters."
    }
    assert validate_counter_form({}).field_errors == {"name": "Counter name is required."}


def test_supplier_form_email_optional_but_checked() -> None:
    assert validate_supplier_form({"name": "CCBPI"}).is_valid
    result = validate_supplier_form({"name": "CCBPI", "email": "orders-at-ccbpi"})
    assert result.field_errors == {"email": "Invalid email. Use the name@domain.com format."}
    assert validate_supplier_form({"name": "CCBPI", "email": "PO@CCBPI.test"}).values["email"] == "po@ccbpi.test"


def test_user_form_create_and_edit() -> None:
    created = validate_user_form({"first_name": "Ana", "last_name": "Cruz", "email": "ana@store.test", "password": "short", "role": 2})
    assert created.field_errors == {"password": "Password must be at least 8 characters."}

    missing = validate_user_form({})
    assert set(missing.field_errors) == {"first_name", "last_name", "email", "password", "role"}

    edited = validate_user_form({"first_name": "Ana", "last_name": "Cruz", "email": "ana@store.test", "role": 2}, creating=False)
    assert edited.is_valid
    assert edited.values["password"] is None


def test_percent_forms() -> None:
    assert validate_vat_form({"name": "VAT", "rate": 12, "tax_type": 0}).is_valid
    assert validate_vat_form({"name": "VAT", "rate": 120, "tax_type": 0}).field_errors == {
        "rate": "Rate must be between 0 and 100."
    }
    assert validate_discount_form({"name": "Senior", "discount_percent": "abc"}).field_errors == {
        "discount_percent": "Discount percent is required."
    }
    assert validate_discount_form({"name": "Senior", "discount_percent": 20}).is_valid


def test_purchase_order_form_lines() -> None:
    result = validate_purchase_order_form(
        {
            "supplier_id": 3,
            "items": [
                {"product_id": 7, "unit_id": 1, "quantity_ordered": 10, "unit_cost": 60.5},
                {"product_id": 8, "unit_id": 1, "quantity_ordered": 0, "unit_cost": -1},
            ],
        }
    )

    assert result.field_errors == {
        "items.1.quantity_ordered": "Quantity must be greater than 0.",
        "items.1.unit_cost": "Unit cost cannot be negative.",
    }
    assert result.values["items"][0]["quantity_ordered"] == 10.0


def test_non_finite_numbers_are_rejected() -> None:
    order = validate_purchase_order_form(
        {"supplier_id": 3, "items": [{"product_id": 7, "unit_id": 1, "quantity_ordered": "nan", "unit_cost": "inf"}]}
    )
    product = validate_product_form({"name": "Ice", "category_id": 4, "unit_id": 2, "price": "nan", "reorder_level": "-inf"})

    assert order.field_errors == {
        "items.0.quantity_ordered": "Quantity must be greater than 0.",
        "items.0.unit_cost": "Unit cost cannot be negative.",
    }
    assert not order.is_valid
    assert product.field_errors["price"] == "Price is required."
    assert product.values["reorder_level"] is None


def test_purchase_order_form_needs_supplier_and_items() -> None:
    result = validate_purchase_order_form({"items": []})
    assert result.field_errors == {"supplier_id": "Supplier is required.", "items": "Add at least one item."}


def test_stock_forms() -> None:
    assert validate_stock_adjustment_form({"product_id": 7, "quantity": 0}).field_errors == {
        "quantity": "Quantity must not be zero."
    }
    assert validate_stock_adjustment_form({"product_id": 7, "quantity": -3}).is_valid

    bad = validate_bad_order_form({"product_id": 7, "quantity": 1.5, "reason": ""})
    assert bad.field_errors == {
        "quantity": "Quantity must be a whole number greater than 0.",
        "reason": "Reason is required.",
    }
    assert validate_bad_order_form({"product_id": 7, "quantity": "2", "reason": "Damaged"}).values["quantity"] == 2


def test_unit_conversion_form() -> None:
    same = validate_unit_conversion_form({"product_id": 7, "from_unit_id": 2, "to_unit_id": 2, "conversion_rate": 0})
    assert same.field_errors == {
        "to_unit_id": "From and to units must differ.",
        "conversion_rate": "Conversion rate must be greater than 0.",
    }


def test_business_profile_form() -> None:
    result = validate_business_profile_form({"store_name": "Corner Mart"})
    assert result.field_errors == {"vat_registered_tin": "VAT registered TIN is required."}


def test_map_api_validation_errors() -> None:
    problem = {
        "title": "One or more validation errors occurred.",
        "errors": {"Name": ["The Name field is required."], "$.items[0].UnitCost": ["Invalid."], "contactEmail": "Bad email"},
    }
    assert map_api_validation_errors(problem) == {
        "name": "The Name field is required.",
        "unit_cost": "Invalid.",
        "contact_email": "Bad email",
    }
    assert map_api_validation_errors([{"field": "purchaseOrderNumber", "message": "Duplicate"}]) == {
        "purchase_order_number": "Duplicate"
    }
    assert map_api_validation_errors(None) == {}
