"""Prometheus request metrics."""

from __future__ import annotations

from prometheus_client import Counter, Gauge, Histogram

http_requests_total = Counter(
    "eventctg_http_requests_total",
    "Total HTTP requests",
    ["method", "route", "status"],
)

http_request_latency_seconds = Histogram(
    "eventctg_http_request_latency_seconds",
    "HTTP request latency",
    ["method", "route"],
)

http_requests_in_flight = Gauge(
    "eventctg_http_requests_in_flight",
    "Requests currently being served",
)


def observe_request(method: str, route: str, status: int, duration_seconds: float) -> None:
    # route is the matched template (/events/{event_id}), never the raw path
    http_requests_total.labels(method=method, route=route, status=str(status)).inc()
    http_request_latency_seconds.labels(method=method, route=route).observe(duration_seconds)
