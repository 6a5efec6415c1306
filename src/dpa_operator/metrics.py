"""Prometheus metrics for the Data Protection Application Operator."""

from prometheus_client import Counter, Gauge, Histogram

# Reconciliation metrics
reconcile_total = Counter(
    "dpa_operator_reconcile_total",
    "Total number of reconciliations",
    ["kind", "result"],
)

reconcile_duration_seconds = Histogram(
    "dpa_operator_reconcile_duration_seconds",
    "Duration of reconciliations in seconds",
    ["kind"],
    buckets=[0.1, 0.5, 1.0, 2.5, 5.0, 10.0],
)

reconcile_step_duration_seconds = Histogram(
    "dpa_operator_reconcile_step_duration_seconds",
    "Duration of individual reconcile steps in seconds",
    ["step"],
    buckets=[0.01, 0.05, 0.1, 0.5, 1.0, 2.5, 5.0],
)

error_total = Counter(
    "dpa_operator_error_total",
    "Total number of errors by type",
    ["kind", "error_type"],
)

# Secret metrics
secret_operations_total = Counter(
    "dpa_operator_secret_operations_total",
    "Total number of managed secret writes and no-op checks",
    ["secret", "operation"],
)

# Watch metrics
watch_requests_total = Counter(
    "dpa_operator_watch_requests_total",
    "Reconcile requests produced from secondary object events",
    ["result"],
)

# Cloud storage check metrics
upload_test_speed_mbps = Gauge(
    "dpa_operator_upload_test_speed_mbps",
    "Last measured upload throughput in Mbps",
    ["provider", "bucket"],
)

upload_test_total = Counter(
    "dpa_operator_upload_test_total",
    "Total number of upload speed tests",
    ["provider", "result"],
)
