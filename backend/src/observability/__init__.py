"""Observability module for publishing record validation.

Provides structured logging with run correlation and Prometheus metrics.
"""

from .logging_config import configure_logging, get_logger, JSONFormatter, RunIDFilter
from .metrics import (
    validation_passes_total,
    validation_findings_total,
    validation_duration_seconds,
    record_validation_pass,
)
from .run_context import validation_run_id_var, get_run_id, set_run_id, reset_run_id, new_run_id

__all__ = [
    # Logging
    "configure_logging",
    "get_logger",
    "JSONFormatter",
    "RunIDFilter",
    # Metrics
    "validation_passes_total",
    "validation_findings_total",
    "validation_duration_seconds",
    "record_validation_pass",
    # Run correlation
    "validation_run_id_var",
    "get_run_id",
    "set_run_id",
    "reset_run_id",
    "new_run_id",
]
