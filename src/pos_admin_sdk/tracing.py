from __future__ import annotations

import uuid
from dataclasses import dataclass
from typing import Iterable, Mapping

TRACE_HEADER = "X-Trace-ID"
RESPONSE_TRACE_HEADERS = (TRACE_HEADER, "X-Trace-Id", "x-trace-id", "Request-Id")
# ASP.NET problem details carry "traceId"
PAYLOAD_TRACE_KEYS = ("trace_id", "traceId")


def _first_text(source: Mapping[str, object], keys: Iterable[str]) -> str | None:
    for key in keys:
        value = source.get(key)
        if isinstance(value, str) and value:
            return value
    return None


@dataclass
class TraceContext:
    """Correlation id sent as ``X-Trace-ID``; adopts whatever id the server echoes back."""

    trace_id: str | None = None

    def ensure(self) -> str:
        if not self.trace_id:
            self.trace_id = uuid.uuid4().hex
        return self.trace_id

    def update_from_headers(self, headers: Mapping[str, str]) -> None:
        self.trace_id = _first_text(headers, RESPONSE_TRACE_HEADERS) or self.trace_id

    def update_from_payload(self, payload: Mapping[str, object]) -> None:
        self.trace_id = _first_text(payload, PAYLOAD_TRACE_KEYS) or self.trace_id
