"""
Prometheus metrics collection for Wedding Ledger.

Provides observability into imports, report generation and the budget /
RSVP health of each event.
"""

import time
from collections.abc import Callable
from functools import wraps
from typing import ParamSpec, TypeVar

from prometheus_client import Counter, Gauge, Histogram, start_http_server

# ============================================================================
# Operation Metrics
# ============================================================================

operation_duration_seconds = Histogram(
    "wledger_operation_duration_seconds",
    "Duration of ledger operations in seconds",
    ["operation"],
    buckets=(0.005, 0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0),
)

operations_total = Counter(
    "wledger_operations_total",
    "Total number of ledger operations",
    ["operation", "status"],  # status: success, failure
)

# ============================================================================
# Import Metrics
# ============================================================================

guests_imported_total = Counter(
    "wledger_guests_imported_total",
    "Total number of guests created by CSV import",
    ["source"],  # source: guests_csv, families_csv
)

import_rows_skipped_total = Counter(
    "wledger_import_rows_skipped_total",
    "Total number of CSV rows skipped during import",
    ["reason"],
)

# ============================================================================
# Event Health Metrics
# ============================================================================

budget_utilization_ratio = Gauge(
    "wledger_budget_utilization_ratio",
    "Committed spend divided by total budget",
    ["event_id"],
)

budget_health_state = Gauge(
    "wledger_budget_health_state",
    "Budget health (0=on-track, 1=at-risk, 2=over-budget)",
    ["event_id"],
)

rsvp_confirmation_rate = Gauge(
    "wledger_rsvp_confirmation_rate",
    "Share of invited guests who accepted, in percent",
    ["event_id"],
)

# ============================================================================
# Helper Functions
# ============================================================================

P = ParamSpec("P")
R = TypeVar("R")

HEALTH_STATE_VALUES = {"on-track": 0, "at-risk": 1, "over-budget": 2}


def track_operation_duration(operation: str) -> Callable[[Callable[P, R]], Callable[P, R]]:
    """
    Decorator to track operation duration and outcome.

    Args:
        operation: Operation name used as the metric label
    """

    def decorator(func: Callable[P, R]) -> Callable[P, R]:
        @wraps(func)
        def wrapper(*args: P.args, **kwargs: P.kwargs) -> R:
            start = time.perf_counter()
            status = "success"
            try:
                return func(*args, **kwargs)
            except Exception:
                status = "failure"
                raise
            finally:
                operation_duration_seconds.labels(operation=operation).observe(
                    time.perf_counter() - start
                )
                operations_total.labels(operation=operation, status=status).inc()

        return wrapper

    return decorator


def start_metrics_server(port: int = 9090) -> None:
    """Start Prometheus metrics HTTP server."""
    start_http_server(port)


def update_budget_metrics(event_id: str, utilization: float, health: str) -> None:
    """Publish the latest budget summary for an event."""
    budget_utilization_ratio.labels(event_id=event_id).set(utilization)
    budget_health_state.labels(event_id=event_id).set(HEALTH_STATE_VALUES.get(health, 0))


def update_guest_metrics(event_id: str, confirmation_rate: int) -> None:
    """Publish the latest RSVP confirmation rate for an event."""
    rsvp_confirmation_rate.labels(event_id=event_id).set(confirmation_rate)
