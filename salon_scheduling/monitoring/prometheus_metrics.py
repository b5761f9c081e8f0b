"""
Prometheus metrics for the scheduling engine.

Metrics live in a private registry so embedding hosts can expose them next to
their own without name clashes.
"""

from typing import Optional

from prometheus_client import CollectorRegistry, Counter, Histogram

# Create a custom registry to avoid conflicts with default metrics
REGISTRY = CollectorRegistry()

service_operation_duration_seconds = Histogram(
    "salon_scheduling_service_operation_duration_seconds",
    "Service operation duration in seconds",
    ["service", "operation"],
    registry=REGISTRY,
    buckets=(0.001, 0.005, 0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5),
)

service_operations_total = Counter(
    "salon_scheduling_service_operations_total",
    "Total number of service operations",
    ["service", "operation", "status"],
    registry=REGISTRY,
)

errors_total = Counter(
    "salon_scheduling_errors_total",
    "Total number of errors",
    ["service", "operation", "error_type"],
    registry=REGISTRY,
)

booking_conflicts_total = Counter(
    "salon_scheduling_booking_conflicts_total",
    "Booking writes rejected because the interval overlapped an active booking",
    ["operation"],  # create | reschedule
    registry=REGISTRY,
)

transaction_retries_total = Counter(
    "salon_scheduling_transaction_retries_total",
    "Transactions retried after a transient storage failure",
    ["operation"],
    registry=REGISTRY,
)


class PrometheusMetrics:
    """Thin facade so call sites never touch metric objects directly."""

    def record_service_operation(
        self,
        service: str,
        operation: str,
        duration: float,
        status: str,
        error_type: Optional[str] = None,
    ) -> None:
        service_operation_duration_seconds.labels(service=service, operation=operation).observe(
            duration
        )
        service_operations_total.labels(service=service, operation=operation, status=status).inc()
        if error_type:
            errors_total.labels(service=service, operation=operation, error_type=error_type).inc()

    def record_booking_conflict(self, operation: str) -> None:
        booking_conflicts_total.labels(operation=operation).inc()

    def record_transaction_retry(self, operation: str) -> None:
        transaction_retries_total.labels(operation=operation).inc()


prometheus_metrics = PrometheusMetrics()
