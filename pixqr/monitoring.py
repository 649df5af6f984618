"""Prometheus metrics for HTTP traffic and payload generation.

Latency buckets span 1 ms to 500 ms; batch sizes are bounded by ``max_payers``.
"""
from __future__ import annotations

from typing import Final

from prometheus_client import CONTENT_TYPE_LATEST, Counter, Histogram, generate_latest

_HTTP_REQUEST_TOTAL: Final = Counter(
    "pixqr_http_requests_total",
    "Total HTTP requests",
    labelnames=("method", "route", "status"),
)
_HTTP_REQUEST_LATENCY: Final = Histogram(
    "pixqr_http_request_duration_seconds",
    "Latency of HTTP requests",
    labelnames=("method", "route"),
    buckets=(0.001, 0.0025, 0.005, 0.01, 0.025, 0.05, 0.1, 0.5),
)
_SERVICE_ERRORS_TOTAL: Final = Counter(
    "pixqr_service_errors_total",
    "Service-level errors by code",
    labelnames=("code", "route"),
)
_PAYLOADS_GENERATED_TOTAL: Final = Counter(
    "pixqr_payloads_generated_total",
    "BR Code payloads generated by key kind",
    labelnames=("key_kind",),
)
_BATCH_PAYERS: Final = Histogram(
    "pixqr_batch_payers",
    "Payers per generated batch",
    buckets=(1, 5, 10, 25, 50, 100, 250, 500, 1000, 5000),
)


def observe_request(method: str, route: str, status_code: int, duration_ms: float) -> None:
    _HTTP_REQUEST_TOTAL.labels(method=method, route=route, status=str(status_code)).inc()
    _HTTP_REQUEST_LATENCY.labels(method=method, route=route).observe(duration_ms / 1000)


def record_service_error(code: str, route: str) -> None:
    _SERVICE_ERRORS_TOTAL.labels(code=code, route=route).inc()


def record_payloads_generated(key_kind: str, count: int) -> None:
    _PAYLOADS_GENERATED_TOTAL.labels(key_kind=key_kind).inc(count)
    _BATCH_PAYERS.observe(count)


def metrics_payload() -> tuple[bytes, str]:
    """Return Prometheus exposition payload and content type."""

    return generate_latest(), CONTENT_TYPE_LATEST
