from __future__ import annotations

import responses
from responses import matchers

from pos_admin_sdk import load_config
from pos_admin_sdk.clients.settings_client import (
    AuthLogsClient,
    BusinessProfileClient,
    CountersClient,
    DiscountSettingsClient,
    ReceiptSettingsClient,
    UsersClient,
    VatSettingsClient,
)
from pos_admin_sdk.http_client import HttpClient
from pos_admin_sdk.models import TaxType, UserRole

BASE = "https://api.example.com/api"


def _http() -> HttpClient:
    cfg = load_config()
    object.__setattr__(cfg, "api_base_url", BASE)
    return HttpClient(cfg)


@responses.activate
def test_users_list_create_update_deactivate() -> None:
    responses.add(
        responses.GET,
        f"{BASE}/account/users",
        json=[{"id": "u-1", "firstName": "Ana", "lastName": "Cruz", "email": "ana@store.test", "role": 2}],
        status=200,
    )
    responses.add(
        responses.POST,
        f"{BASE}/account/users",
        status=204,
        match=[
            matchers.json_params_matcher(
                {"firstName": "Ben", "lastName": "Uy", "email": "ben@store.test", "password": "secret123", "role": 3}
            )
        ],
    )
    responses.add(
        responses.PUT,
        f"{BASE}/account/users",
        status=204,
        match=[matchers.json_params_matcher({"id": "u-1", "role": 1})],
    )
    responses.add(responses.PUT, f"{BASE}/account/users/deactivate/u-1", status=204)
    client = UsersClient(http=_http(), access_token="t")

    users = client.get_all()
    client.create(
        {"first_name": "Ben", "last_name": "Uy", "email": "ben@store.test", "password": "secret123", "role": UserRole.WAREHOUSE}
    )
    client.update({"id": "u-1", "role": UserRole.MANAGER})
    client.deactivate("u-1")

    assert users[0].role is UserRole.CASHIER
    assert [call.request.method for call in responses.calls] == ["GET", "POST", "PUT", "PUT"]


@responses.activate
def test_vat_update_puts_to_collection() -> None:
    responses.add(
        responses.PUT,
        f"{BASE}/settings/vat",
        status=204,
        match=[
            matchers.json_params_matcher(
                {"id": 1, "name": "VAT 12%", "rate": 12.0, "taxType": 0, "isVatInclusive": True, "isActive": True}
            )
        ],
    )
    VatSettingsClient(http=_http(), access_token="t").update(
        {"id": 1, "name": "VAT 12%", "rate": 12, "tax_type": TaxType.VATABLE, "is_vat_inclusive": True}
    )
    assert len(responses.calls) == 1


@responses.activate
def test_vat_set_active() -> None:
    responses.add(
        responses.PATCH,
        f"{BASE}/settings/vat/1/status",
        status=204,
        match=[matchers.query_param_matcher({"isActive": "true"})],
    )
    VatSettingsClient(http=_http(), access_token="t").set_active(1, True)
    assert len(responses.calls) == 1


@responses.activate
def test_discounts_receipt_and_counters_lists() -> None:
    responses.add(
        responses.GET,
        f"{BASE}/settings/discounts",
        json=[{"id": 1, "name": "Senior", "discountPercent": 20, "requiresApproval": True}],
        status=200,
    )
    responses.add(
        responses.GET,
        f"{BASE}/settings/receipt",
        json=[{"id": 1, "headerMessage": "Thank you", "receiptSize": "58mm"}],
        status=200,
    )
    responses.add(
        responses.GET,
        f"{BASE}/settings/counters",
        json=[{"id": 1, "name": "Counter 1", "terminalIdentifier": "T-01"}],
        status=200,
    )
    http = _http()

    discounts = DiscountSettingsClient(http=http, access_token="t").get_all()
    receipts = ReceiptSettingsClient(http=http, access_token="t").get_all()
    counters = CountersClient(http=http, access_token="t").get_all()

    assert discounts[0].discount_percent == 20
    assert receipts[0].receipt_size == "58mm"
    assert counters[0].terminal_identifier == "T-01"


@responses.activate
def test_business_profile_get_and_update() -> None:
    profile = {"id": 1, "storeName": "Corner Mart", "vatRegisteredTIN": "123-456-789-000"}
    responses.add(responses.GET, f"{BASE}/settings/businessprofile", json=profile, status=200)
    responses.add(
        responses.PUT,
        f"{BASE}/settings/businessprofile/1",
        status=204,
        match=[matchers.json_params_matcher({**profile, "address": "Main St."})],
    )
    client = BusinessProfileClient(http=_http(), access_token="t")

    current = client.get()
    client.update({"id": 1, "store_name": "Corner Mart", "vat_registered_tin": "123-456-789-000", "address": "Main St."})

    assert current.vat_registered_tin == "123-456-789-000"


@responses.activate
def test_auth_logs_are_never_cached() -> None:
    row = {"id": 1, "usernameOrEmail": "ana@store.test", "wasSuccessful": False, "attemptedAt": "2024-05-01T08:00:00Z"}
    responses.add(responses.GET, f"{BASE}/authlogs/login-attempts", json=[row], status=200)
    responses.add(responses.GET, f"{BASE}/authlogs/login-attempts", json=[row, row], status=200)
    client = AuthLogsClient(http=_http(), access_token="t")

    assert len(client.login_attempts()) == 1
    assert len(client.login_attempts()) == 2
