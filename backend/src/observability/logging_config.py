"""Structured JSON logging configuration.

Provides centralized logging setup with validation run correlation and JSON
formatting. Validation findings are logged at DEBUG, pass summaries at INFO
and internal rule faults at ERROR.
"""

import logging
import json
import sys
from datetime import datetime, timezone

from .run_context import get_run_id


# Extra attributes copied from log records into the JSON payload
EXTRA_FIELDS = (
    "finding_code",
    "finding_field",
    "severity",
    "rule_name",
    "record_id",
    "is_valid",
    "batch_size",
)


class RunIDFilter(logging.Filter):
    """Add validation_run_id to all log records."""

    def filter(self, record: logging.LogRecord) -> bool:
        record.validation_run_id = get_run_id() or "no-run-id"
        return True


class JSONFormatter(logging.Formatter):
    """Format log records as JSON."""

    def format(self, record: logging.LogRecord) -> str:
        log_data = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "validation_run_id": getattr(record, "validation_run_id", "no-run-id"),
            "module": record.module,
            "function": record.funcName,
            "message": record.getMessage(),
        }

        # Add exception info if present
        if record.exc_info:
            log_data["error"] = str(record.exc_info[1])
            log_data["traceback"] = self.formatException(record.exc_info)

        for name in EXTRA_FIELDS:
            if hasattr(record, name):
                value = getattr(record, name)
                log_data[name] = value if isinstance(value, (bool, int, float)) or value is None else str(value)

        return json.dumps(log_data)


def configure_logging(level: str = "INFO", json_format: bool = True) -> None:
    """Configure application-wide logging.

    Args:
        level: Log level (DEBUG, INFO, WARNING, ERROR)
        json_format: If True, use JSON formatter; otherwise use simple format
    """
    root_logger = logging.getLogger()
    root_logger.setLevel(getattr(logging, level.upper()))

    root_logger.handlers.clear()

    handler = logging.StreamHandler(sys.stdout)
    handler.setLevel(getattr(logging, level.upper()))

    if json_format:
        formatter = JSONFormatter()
    else:
        formatter = logging.Formatter(
            '%(asctime)s - %(levelname)s - %(validation_run_id)s - %(module)s.%(funcName)s - %(message)s'
        )

    handler.setFormatter(formatter)
    handler.addFilter(RunIDFilter())

    root_logger.addHandler(handler)


def get_logger(name: str) -> logging.Logger:
    """Get a logger instance (typically for __name__)"""
    return logging.getLogger(name)
