"""Prometheus metrics for ledger computations and record validation"""

from prometheus_client import Counter, Histogram

# Computation metrics
summary_counter = Counter(
    "ledger_summary_total",
    "Ledger views computed",
    ["view"],  # summary | statement | user_detail | schedule
)

summary_duration_histogram = Histogram(
    "ledger_summary_duration_seconds",
    "Time spent computing a ledger view from a loaded snapshot",
    ["view"],
    buckets=[0.001, 0.005, 0.01, 0.05, 0.1, 0.5, 1.0],
)

# Boundary validation
invalid_record_counter = Counter(
    "ledger_invalid_records_total",
    "Records rejected at the validation boundary",
    ["kind"],  # purchase | payment_record
)

# Service health
request_duration_histogram = Histogram(
    "http_request_duration_seconds",
    "HTTP request latency",
    ["method", "endpoint", "status"],
)


def record_summary(view: str, duration_seconds: float) -> None:
    """Count a computed view and observe how long it took"""
    summary_counter.labels(view=view).inc()
    summary_duration_histogram.labels(view=view).observe(duration_seconds)
