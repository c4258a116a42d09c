from __future__ import annotations

import json
import time
from dataclasses import dataclass, field
from typing import Any, Iterable
from urllib.parse import urljoin

import requests
from requests.adapters import HTTPAdapter

from .config import ClientConfig
from .error_mapper import map_error
from .exceptions import ApiError, TransportError
from .tracing import TRACE_HEADER, TraceContext

JsonPayload = dict[str, Any] | list[Any] | str | int | float | bool | None

IDEMPOTENT_METHODS = frozenset({"GET", "HEAD"})
JSON_HEADERS = {"Accept": "application/json", "Content-Type": "application/json"}

CacheKey = tuple[str, str, str]


def error_kind(status_code: int) -> str:
    if status_code <= 0:
        return "network"
    if status_code in (401, 403):
        return "auth"
    if status_code == 409:
        return "conflict"
    if status_code in (400, 404, 422):
        return "validation"
    return "internal"


@dataclass(frozen=True)
class NormalizedError:
    code: str
    message: str
    trace_id: str | None
    type: str


@dataclass
class LastOperation:
    module: str
    operation: str
    duration_ms: int
    result: str
    trace_id: str | None


@dataclass
class ResponseCache:
    """Short-lived store of GET bodies, dropped by resource path after writes."""

    ttl_seconds: float
    entries: dict[CacheKey, tuple[float, JsonPayload]] = field(default_factory=dict)

    @property
    def enabled(self) -> bool:
        return self.ttl_seconds > 0

    def __len__(self) -> int:
        return len(self.entries)

    @staticmethod
    def key(url: str, authorization: str | None, params: dict[str, Any] | None) -> CacheKey:
        return url, authorization or "", json.dumps(params or {}, sort_keys=True, default=str)

    def get(self, key: CacheKey) -> tuple[bool, JsonPayload]:
        hit = self.entries.get(key)
        if hit is None:
            return False, None
        expires_at, payload = hit
        if time.monotonic() >= expires_at:
            del self.entries[key]
            return False, None
        return True, payload

    def put(self, key: CacheKey, payload: JsonPayload) -> None:
        self.entries[key] = (time.monotonic() + self.ttl_seconds, payload)

    def invalidate(self, paths: Iterable[str]) -> int:
        # backend routes ignore case ("/PurchaseOrder" == "/purchaseorder")
        needles = [path.lower() for path in paths if path]
        if not needles:
            return 0
        stale = [key for key in self.entries if any(needle in key[0].lower() for needle in needles)]
        for key in stale:
            del self.entries[key]
        return len(stale)

    def clear(self) -> None:
        self.entries.clear()


@dataclass
class HttpClient:
    config: ClientConfig
    trace: TraceContext | None = None
    session: requests.Session | None = None
    cache_ttl_seconds: float | None = None
    enable_get_cache: bool = True
    cache: ResponseCache = field(init=False)
    last_operation: LastOperation | None = field(default=None, init=False)

    def __post_init__(self) -> None:
        if self.trace is None:
            self.trace = TraceContext()
        if self.session is None:
            self.session = requests.Session()
            pool = HTTPAdapter(pool_connections=self.config.max_connections, pool_maxsize=self.config.max_connections)
            for scheme in ("http://", "https://"):
                self.session.mount(scheme, pool)
        ttl = self.config.cache_ttl_seconds if self.cache_ttl_seconds is None else self.cache_ttl_seconds
        self.cache = ResponseCache(ttl_seconds=float(ttl))
        self.enable_get_cache = self.enable_get_cache and self.cache.enabled

    def url_for(self, path: str) -> str:
        return urljoin(self.config.api_base_url.rstrip("/") + "/", path.lstrip("/"))

    def request(
        self,
        method: str,
        path: str,
        *,
        headers: dict[str, str] | None = None,
        json_body: Any = None,
        params: dict[str, Any] | None = None,
        module: str = "unknown",
        operation: str = "unknown",
        use_get_cache: bool = True,
        invalidate_paths: Iterable[str] | None = None,
    ) -> JsonPayload:
        verb = method.upper()
        url = self.url_for(path)
        sent_headers = {**JSON_HEADERS, **(headers or {})}
        sent_headers[TRACE_HEADER] = self.trace.ensure()

        cache_key = None
        if verb == "GET" and use_get_cache and self.enable_get_cache:
            cache_key = ResponseCache.key(url, sent_headers.get("Authorization"), params)
            found, payload = self.cache.get(cache_key)
            if found:
                self.last_operation = LastOperation(module, operation, 0, "success(cache)", self.trace.trace_id)
                return payload

        started = time.monotonic()
        try:
            response = self._send(verb, url, sent_headers, json_body, params)
        except TransportError:
            self._record(module, operation, started, "error")
            raise
        self.trace.update_from_headers(response.headers)

        if not response.ok:
            body = _error_body(response)
            if isinstance(body, dict):
                self.trace.update_from_payload(body)
            self._record(module, operation, started, "error")
            raise map_error(response.status_code, body, self.trace.trace_id)

        if verb not in IDEMPOTENT_METHODS:
            self.cache.invalidate(invalidate_paths or ())
        payload = _success_body(response)
        if cache_key is not None and payload is not None:
            self.cache.put(cache_key, payload)
        self._record(module, operation, started, "success")
        return payload

    def _send(
        self,
        verb: str,
        url: str,
        headers: dict[str, str],
        json_body: Any,
        params: dict[str, Any] | None,
    ) -> requests.Response:
        attempts = 1 + (self.config.retries if verb in IDEMPOTENT_METHODS else 0)
        for attempt in range(attempts):
            last = attempt == attempts - 1
            try:
                response = self.session.request(
                    verb,
                    url,
                    headers=headers,
                    json=json_body,
                    params=params,
                    timeout=(self.config.connect_timeout_seconds, self.config.read_timeout_seconds),
                    verify=self.config.verify_ssl,
                )
            except requests.RequestException as exc:
                if last:
                    raise TransportError(
                        code="TRANSPORT_ERROR",
                        message=str(exc),
                        details={"type": type(exc).__name__},
                        trace_id=self.trace.trace_id,
                        status_code=0,
                    ) from exc
            else:
                if response.status_code < 500 or last:
                    return response
            time.sleep(self.config.retry_backoff_seconds * 2**attempt)
        raise AssertionError("unreachable")

    def normalize_error(self, error: Exception) -> NormalizedError:
        if isinstance(error, ApiError):
            return NormalizedError(error.code, error.message, error.trace_id, error_kind(error.status_code or 0))
        return NormalizedError("UNKNOWN_ERROR", str(error), None, "internal")

    def clear_cache(self) -> None:
        self.cache.clear()

    def _record(self, module: str, operation: str, started: float, result: str) -> None:
        elapsed = int((time.monotonic() - started) * 1000)
        self.last_operation = LastOperation(module, operation, elapsed, result, self.trace.trace_id)


def _success_body(response: requests.Response) -> JsonPayload:
    if not response.content:
        return None
    try:
        return response.json()
    except ValueError:
        # plain-text acknowledgements such as "Category deleted."
        return response.text.strip() or None


def _error_body(response: requests.Response) -> Any:
    try:
        return response.json()
    except ValueError:
        return {"message": response.text} if response.text else {}
