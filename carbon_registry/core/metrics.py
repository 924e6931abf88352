"""Prometheus metric inventory for the registry.

Every metric the service exports is declared here. The modules that own
the behavior import the metric and increment it at the point of action,
so this file stays the single list of what is measured.

Ledger counters count credit units, not calls: ``credits_purchased_total``
grows by the purchased quantity, which lets a dashboard compare issued,
sold and retired volume on the same axis.
"""

from __future__ import annotations

from prometheus_client import Counter, Gauge, Histogram

# ---------------------------------------------------------------------------
# HTTP metrics (populated by the MetricsMiddleware)
# ---------------------------------------------------------------------------

REQUEST_COUNT = Counter(
    "http_requests_total",
    "Total HTTP requests by method, endpoint, and status code",
    ["method", "endpoint", "status_code"],
)

REQUEST_DURATION = Histogram(
    "http_request_duration_seconds",
    "HTTP request duration in seconds",
    ["method", "endpoint"],
    buckets=[0.005, 0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0],
)

ACTIVE_REQUESTS = Gauge(
    "http_active_requests",
    "Number of HTTP requests currently being processed",
)

# ---------------------------------------------------------------------------
# Ledger metrics
# ---------------------------------------------------------------------------

PROJECTS_REGISTERED = Counter(
    "projects_registered_total",
    "Projects registered, by category",
    ["category"],
)

CREDITS_ISSUED = Counter(
    "credits_issued_total",
    "Credit units issued by successful verifications",
)

CREDITS_PURCHASED = Counter(
    "credits_purchased_total",
    "Credit units bought out of batches",
)

CREDITS_RETIRED = Counter(
    "credits_retired_total",
    "Credit units permanently retired",
)

LEDGER_REJECTIONS = Counter(
    "ledger_rejections_total",
    "Registry operations rejected, by error code",
    ["code"],
)

RATE_LIMIT_HITS = Counter(
    "rate_limit_hits_total",
    "Requests rejected by rate limiting (429s)",
    ["key_type"],  # "caller" or "ip"
)
