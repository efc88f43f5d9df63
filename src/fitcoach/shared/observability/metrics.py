"""Prometheus metrics for the coaching backend."""

from __future__ import annotations

from prometheus_client import Counter, Histogram


# ── HTTP metrics ─────────────────────────────────────────────
HTTP_REQUESTS_TOTAL = Counter(
    "http_requests_total",
    "Total HTTP requests",
    ["method", "endpoint", "status_code"],
)

HTTP_REQUEST_DURATION = Histogram(
    "http_request_duration_seconds",
    "HTTP request duration in seconds",
    ["method", "endpoint"],
    buckets=(0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0, 10.0, 30.0, 60.0),
)

# ── Provider metrics ─────────────────────────────────────────
PROVIDER_ATTEMPTS = Counter(
    "provider_attempts_total",
    "Provider attempts by outcome (success or failure reason)",
    ["capability", "provider", "outcome"],
)

PROVIDER_LATENCY = Histogram(
    "provider_attempt_latency_seconds",
    "Latency of a single provider attempt",
    ["capability", "provider"],
    buckets=(0.25, 0.5, 1.0, 2.0, 5.0, 10.0, 30.0, 60.0, 120.0, 300.0),
)

CAPABILITY_OUTCOMES = Counter(
    "capability_outcomes_total",
    "Terminal outcome of each obtain() call",
    ["capability", "status"],
)
