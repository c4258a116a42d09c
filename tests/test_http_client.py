from __future__ import annotations

import pytest
import responses
from responses import matchers

from pos_admin_sdk import load_config
from pos_admin_sdk.exceptions import NotFoundError, ServerError, TransportError
from pos_admin_sdk.http_client import HttpClient, ResponseCache
from pos_admin_sdk.tracing import TraceContext

BASE = "https://api.example.com/api"


def _client(base_url: str = BASE, **kwargs) -> HttpClient:
    cfg = load_config()
    object.__setattr__(cfg, "api_base_url", base_url)
    return HttpClient(cfg, trace=TraceContext(), **kwargs)


@responses.activate
def test_request_sends_json_headers_and_trace() -> None:
    http = _client()
    responses.add(
        responses.GET,
        f"{BASE}/category",
        json=[],
        status=200,
        match=[matchers.header_matcher({"Accept": "application/json", "Content-Type": "application/json"})],
    )

    assert http.request("GET", "/category") == []
    assert responses.calls[0].request.headers["X-Trace-ID"] == http.trace.trace_id


@responses.activate
def test_get_cache_serves_repeat_reads() -> None:
    http = _client()
    responses.add(responses.GET, f"{BASE}/product", json=[{"id": 1}], status=200)

    first = http.request("GET", "/product", module="products", operation="list")
    second = http.request("GET", "/product", module="products", operation="list")

    assert first == second == [{"id": 1}]
    assert len(responses.calls) == 1
    assert http.last_operation is not None
    assert http.last_operation.result == "success(cache)"


@responses.activate
def test_get_cache_false_always_hits_network() -> None:
    http = _client()
    responses.add(responses.GET, f"{BASE}/authlogs/login-attempts", json=[1], status=200)
    responses.add(responses.GET, f"{BASE}/authlogs/login-attempts", json=[2], status=200)

    assert http.request("GET", "/authlogs/login-attempts", use_get_cache=False) == [1]
    assert http.request("GET", "/authlogs/login-attempts", use_get_cache=False) == [2]
    assert len(http.cache) == 0


@responses.activate
def test_zero_ttl_disables_cache(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("POS_ADMIN_CACHE_TTL_SECONDS", "0")
    http = _client()
    responses.add(responses.GET, f"{BASE}/units", json=[], status=200)

    http.request("GET", "/units")
    http.request("GET", "/units")

    assert http.enable_get_cache is False
    assert len(responses.calls) == 2


@responses.activate
def test_cache_is_keyed_by_authorization_header() -> None:
    http = _client()
    responses.add(responses.GET, f"{BASE}/suppliers", json=[{"id": 1}], status=200)
    responses.add(responses.GET, f"{BASE}/suppliers", json=[{"id": 2}], status=200)

    first = http.request("GET", "/suppliers", headers={"Authorization": "Bearer a"})
    second = http.request("GET", "/suppliers", headers={"Authorization": "Bearer b"})

    assert first == [{"id": 1}]
    assert second == [{"id": 2}]


@responses.activate
def test_mutation_invalidates_matching_paths_case_insensitively() -> None:
    http = _client()
    responses.add(responses.GET, f"{BASE}/PurchaseOrder", json=[{"id": 1}], status=200)
    responses.add(responses.GET, f"{BASE}/category", json=[{"id": 9}], status=200)
    responses.add(responses.POST, f"{BASE}/PurchaseOrder/received", status=204)
    responses.add(responses.GET, f"{BASE}/PurchaseOrder", json=[{"id": 1, "status": 2}], status=200)

    http.request("GET", "/PurchaseOrder")
    http.request("GET", "/category")
    result = http.request(
        "POST",
        "/PurchaseOrder/received",
        json_body={"purchaseOrderId": 1},
        invalidate_paths=["/purchaseorder"],
    )
    refreshed = http.request("GET", "/PurchaseOrder")
    http.request("GET", "/category")

    assert result is None
    assert refreshed == [{"id": 1, "status": 2}]
    assert [call.request.method for call in responses.calls] == ["GET", "GET", "POST", "GET"]


@responses.activate
def test_failed_mutation_keeps_cache() -> None:
    http = _client()
    responses.add(responses.GET, f"{BASE}/product", json=[{"id": 1}], status=200)
    responses.add(responses.DELETE, f"{BASE}/product/1", json={"message": "Product not found."}, status=404)

    http.request("GET", "/product")
    with pytest.raises(NotFoundError) as exc_info:
        http.request("DELETE", "/product/1", invalidate_paths=["/product"])

    assert exc_info.value.message == "Product not found."
    assert len(http.cache) == 1


@responses.activate
def test_get_retries_server_errors() -> None:
    http = _client()
    responses.add(responses.GET, f"{BASE}/units", json={"message": "busy"}, status=503)
    responses.add(responses.GET, f"{BASE}/units", json=[{"id": 1}], status=200)

    assert http.request("GET", "/units") == [{"id": 1}]
    assert len(responses.calls) == 2


@responses.activate
def test_mutations_are_not_retried() -> None:
    http = _client()
    responses.add(responses.POST, f"{BASE}/category", json={"message": "boom"}, status=500)

    with pytest.raises(ServerError):
        http.request("POST", "/category", json_body={"name": "Drinks"})
    assert len(responses.calls) == 1


@responses.activate
def test_transport_error_after_last_attempt(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("POS_ADMIN_RETRIES", "1")
    http = _client()

    with pytest.raises(TransportError) as exc_info:
        http.request("GET", "/unreachable")

    assert exc_info.value.status_code == 0
    assert exc_info.value.code == "TRANSPORT_ERROR"
    assert len(responses.calls) == 2
    assert http.normalize_error(exc_info.value).type == "network"


@responses.activate
def test_error_trace_id_from_problem_details() -> None:
    http = _client()
    responses.add(
        responses.PUT,
        f"{BASE}/units/1",
        json={"title": "One or more validation errors occurred.", "errors": {"Name": ["Required"]}, "traceId": "00-xyz"},
        status=400,
    )

    with pytest.raises(Exception) as exc_info:
        http.request("PUT", "/units/1", json_body={"id": 1})

    assert exc_info.value.trace_id == "00-xyz"
    assert http.last_operation.result == "error"
    assert http.normalize_error(exc_info.value).type == "validation"


@responses.activate
def test_clear_cache() -> None:
    http = _client()
    responses.add(responses.GET, f"{BASE}/units", json=[], status=200)
    http.request("GET", "/units")
    http.clear_cache()
    assert len(http.cache) == 0


def test_response_cache_expires_entries(monkeypatch: pytest.MonkeyPatch) -> None:
    clock = iter([100.0, 105.0, 131.0])
    monkeypatch.setattr("pos_admin_sdk.http_client.time.monotonic", lambda: next(clock))
    cache = ResponseCache(ttl_seconds=30)
    key = ResponseCache.key(f"{BASE}/units", "Bearer a", None)

    cache.put(key, [{"id": 1}])

    assert cache.get(key) == (True, [{"id": 1}])
    assert cache.get(key) == (False, None)
    assert len(cache) == 0


def test_response_cache_invalidate_counts_removed_entries() -> None:
    cache = ResponseCache(ttl_seconds=30)
    cache.put(ResponseCache.key(f"{BASE}/PurchaseOrder/11", None, None), {})
    cache.put(ResponseCache.key(f"{BASE}/PurchaseOrder", None, {"status": 1}), [])
    cache.put(ResponseCache.key(f"{BASE}/suppliers", None, None), [])

    assert cache.invalidate(["/purchaseorder"]) == 2
    assert cache.invalidate([]) == 0
    assert len(cache) == 1


@responses.activate
def test_plain_text_success_body_is_returned_as_text() -> None:
    http = _client()
    responses.add(responses.GET, f"{BASE}/category", json=[{"id": 5}], status=200)
    responses.add(responses.DELETE, f"{BASE}/category/5", body="Category deleted.", status=200, content_type="text/plain")

    http.request("GET", "/category")
    result = http.request("DELETE", "/category/5", invalidate_paths=["/category"])

    assert result == "Category deleted."
    assert http.last_operation.result == "success"
    assert len(http.cache) == 0
