"""Pydantic schemas for validation results"""

from .validation import (
    FindingResponse,
    ValidationApiResponse,
    FindingLogEntry,
    FindingDetails,
    FindingCounts,
    ValidationLogRecord,
    to_api_response,
    to_log_record,
    format_for_api,
    format_for_logging,
)

__all__ = [
    # API shape
    "FindingResponse",
    "ValidationApiResponse",
    "to_api_response",
    "format_for_api",
    # Log shape
    "FindingLogEntry",
    "FindingDetails",
    "FindingCounts",
    "ValidationLogRecord",
    "to_log_record",
    "format_for_logging",
]
