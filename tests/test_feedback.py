from __future__ import annotations

import io

from pos_admin_sdk.error_mapper import map_error
from pos_admin_sdk.exceptions import ClientValidationError, TransportError, ValidationIssue
from pos_admin_sdk.feedback import Notifier, build_error_payload, error_message, success_message


def _transport_error() -> TransportError:
    return TransportError(
        code="TRANSPORT_ERROR",
        message="Connection refused",
        details=None,
        trace_id="trace-net",
        status_code=0,
    )


def test_error_message_prefers_server_message() -> None:
    err = map_error(400, {"message": "Quantity exceeds remaining."}, "t")
    assert error_message(err, "purchase_orders.received.add") == "Quantity exceeds remaining."


def test_error_message_falls_back_to_operation_default() -> None:
    err = map_error(500, None, "t")
    assert error_message(err, "purchase_orders.received.add") == "Failed to record received stock."
    assert error_message(err) == "Something went wrong."


def test_error_message_for_client_validation() -> None:
    err = ClientValidationError([ValidationIssue(None, "quantity_received", "Quantity received must be greater than 0.")])
    assert error_message(err) == "Quantity received must be greater than 0."


def test_notifier_writes_prefixed_lines() -> None:
    stream = io.StringIO()
    notifier = Notifier(stream=stream)

    notifier.success("Received stock recorded", "trace-1")
    notifier.info("No received records to export")
    notifier.error(map_error(409, {"message": "Duplicate PO number."}, "trace-2"))

    assert stream.getvalue().splitlines() == [
        "[success] Received stock recorded trace_id=trace-1",
        "[info] No received records to export",
        "[error] Duplicate PO number. trace_id=trace-2",
    ]
    assert [notice.level for notice in notifier.notices] == ["success", "info", "error"]


def test_success_messages() -> None:
    assert success_message("stock_receives.create_from_po") == "Posted to inventory"
    assert success_message("unknown") == "Done"


def test_build_error_payload_categories() -> None:
    assert build_error_payload(map_error(401, {}, "t"))["category"] == "401"
    assert build_error_payload(map_error(401, {}, "t"))["action"] == "Sign in again"
    assert build_error_payload(map_error(403, {}, "t"))["category"] == "403"
    assert build_error_payload(map_error(409, {}, "t"))["action"] == "Retry"
    assert build_error_payload(map_error(422, {}, "t"))["category"] == "422"
    assert build_error_payload(map_error(502, {}, "t"))["category"] == "500"
    assert build_error_payload(map_error(404, {}, "t"))["category"] == "api"
    assert build_error_payload(_transport_error())["category"] == "network"

    internal = build_error_payload(RuntimeError("boom"))
    assert internal["category"] == "internal"
    assert internal["code"] == "INTERNAL_ERROR"
    assert internal["message"] == "boom"
