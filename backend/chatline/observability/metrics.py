"""
Prometheus Metrics for the Chatline backend.

DATA FLOW:
    This file                  presentation/api/metrics.py         Observability Stack
    ─────────                  ────────────────────────────         ───────────────────
    Define metrics ──────────► /metrics endpoint ──────────────►   Prometheus ──► Grafana

METRIC TYPES:
    - Gauge: Value goes up/down (live sessions)
    - Counter: Value only goes up (messages persisted, delivery outcomes)
    - Histogram: Distribution (store and HTTP latency)
"""

from prometheus_client import (
    Gauge,
    Histogram,
    Counter,
    generate_latest,
    CONTENT_TYPE_LATEST,
)


# =============================================================================
# METRICS DEFINITIONS
# =============================================================================
LIVE_SESSIONS = Gauge(
    "chat_live_sessions", "Number of authenticated connections in the registry"
)

REQUEST_LATENCY = Histogram(
    "http_server_request_duration_seconds",
    "Http request latency in seconds",
    ["method", "route", "http_status_code"],
    buckets=[0.01, 0.05, 0.1, 0.25, 0.5, 1, 2, 5],
)

STORE_LATENCY = Histogram(
    "chat_store_operation_seconds",
    "Latency of conversation store operations in seconds",
    ["operation"],
    buckets=[0.001, 0.005, 0.01, 0.05, 0.1, 0.5, 1, 5],
)

MESSAGES_PERSISTED_TOTAL = Counter(
    "chat_messages_persisted_total",
    "Total number of messages appended to the conversation store",
    ["kind"],
)

DELIVERIES_TOTAL = Counter(
    "chat_deliveries_total",
    "Delivery attempts to recipients by outcome",
    ["outcome"],
)

OUTBOUND_OVERFLOW_TOTAL = Counter(
    "chat_outbound_overflow_total",
    "Connections closed because their outbound buffer overflowed",
)

STORE_RETRIES_TOTAL = Counter(
    "chat_store_retries_total",
    "Append retries after a transient store failure",
)

ERRORS_TOTAL = Counter(
    "chat_errors_total",
    "Total number of errors by type",
    ["error_type"],
)


# =============================================================================
# LABEL CONSTANTS (avoid hardcoding strings throughout codebase)
# =============================================================================
class DeliveryOutcome:
    """Outcome labels for chat_deliveries_total."""

    DELIVERED = "delivered"
    OFFLINE = "offline"
    DROPPED = "dropped"


class MetricsErrorType:
    """Error type labels for chat_errors_total; all but UNAUTHORIZED double as gateway error codes."""

    STORE_UNAVAILABLE = "unavailable"
    UNAUTHORIZED = "unauthorized"
    INVALID_ARGUMENT = "invalid_argument"
    NOT_FOUND = "not_found"


# =============================================================================
# RECORDING FUNCTIONS
# =============================================================================
def set_live_sessions(count: int):
    """Integration point: infrastructure/realtime/connection_registry.py"""
    LIVE_SESSIONS.set(count)


def observe_request_latency(method: str, route: str, status_code: int, duration: float):
    """Integration point: fastapi_app.py MetricsMiddleware"""
    REQUEST_LATENCY.labels(
        method=method, route=route, http_status_code=str(status_code)
    ).observe(duration)


def observe_store_latency(operation: str, duration: float):
    """Integration point: persistence stores (append, fetch_history, ...)"""
    STORE_LATENCY.labels(operation=operation).observe(duration)


def increment_messages_persisted(has_media: bool):
    MESSAGES_PERSISTED_TOTAL.labels(kind="media" if has_media else "text").inc()


def increment_delivery(outcome: str):
    """Integration point: application/commands/chat/submit_message.py"""
    DELIVERIES_TOTAL.labels(outcome=outcome).inc()


def increment_outbound_overflow():
    OUTBOUND_OVERFLOW_TOTAL.inc()


def increment_store_retry():
    STORE_RETRIES_TOTAL.inc()


def increment_error(error_type: str):
    ERRORS_TOTAL.labels(error_type=error_type).inc()


def get_metrics_content():
    """Return (body, content_type) for the /metrics endpoint."""
    return generate_latest(), CONTENT_TYPE_LATEST
