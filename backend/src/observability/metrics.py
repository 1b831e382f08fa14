"""Prometheus metrics for publishing record validation.

Counts passes and findings per rule set and intent, and tracks pass
duration. Recording can be switched off with ENABLE_METRICS=false.
"""

from typing import Optional

from prometheus_client import Counter, Histogram

from config import get_settings

validation_passes_total = Counter(
    "publishing_validation_passes_total",
    "Total validation passes executed",
    ["domain", "intent", "outcome"]  # outcome: valid|invalid
)

validation_findings_total = Counter(
    "publishing_validation_findings_total",
    "Total validation findings detected",
    ["domain", "intent", "severity"]  # severity: error|warning|info
)

validation_duration_seconds = Histogram(
    "publishing_validation_duration_seconds",
    "Time spent in one validation pass in seconds",
    ["domain", "intent"],
    buckets=[0.0005, 0.001, 0.005, 0.01, 0.05, 0.1, 0.5, 1.0, 5.0]
)


def record_validation_pass(
    domain: str,
    intent: str,
    result,
    duration_seconds: float,
    enabled: Optional[bool] = None,
) -> None:
    """Update pass, finding and duration metrics for one finished pass.

    enabled overrides the global ENABLE_METRICS switch when given.
    """
    if enabled is None:
        enabled = get_settings().ENABLE_METRICS
    if not enabled:
        return

    outcome = "valid" if result.is_valid else "invalid"
    validation_passes_total.labels(domain=domain, intent=intent, outcome=outcome).inc()

    for severity, count in (
        ("error", result.error_count),
        ("warning", result.warning_count),
        ("info", result.info_count),
    ):
        if count:
            validation_findings_total.labels(domain=domain, intent=intent, severity=severity).inc(count)

    validation_duration_seconds.labels(domain=domain, intent=intent).observe(duration_seconds)
