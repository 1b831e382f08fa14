"""Pydantic schemas for the external projections of a ValidationResult.

Two shapes are produced:
- the API shape returned to clients: valid flag plus errors and warnings
  as {field, code, message} objects (info findings are not exposed)
- the log shape used by audit logging: full findings grouped by severity
  with counts and the summary line
"""

from datetime import datetime
from typing import Any, Optional

from pydantic import BaseModel, Field

from domain.validation.models import Finding, FindingSeverity, ValidationResult


class FindingResponse(BaseModel):
    """Single finding as returned by validation endpoints"""
    field: Optional[str] = None
    code: str
    message: str


class ValidationApiResponse(BaseModel):
    """Response schema for a validation call"""
    valid: bool
    errors: list[FindingResponse] = Field(default_factory=list)
    warnings: list[FindingResponse] = Field(default_factory=list)


class FindingLogEntry(BaseModel):
    """Full-fidelity finding for log records"""
    code: str
    message: str
    field: Optional[str] = None
    severity: FindingSeverity
    timestamp: datetime

    class Config:
        use_enum_values = True


class FindingDetails(BaseModel):
    errors: list[FindingLogEntry] = Field(default_factory=list)
    warnings: list[FindingLogEntry] = Field(default_factory=list)
    info: list[FindingLogEntry] = Field(default_factory=list)


class FindingCounts(BaseModel):
    errors: int = 0
    warnings: int = 0
    info: int = 0


class ValidationLogRecord(BaseModel):
    """Log-shape projection (camelCase isValid kept for log consumers)"""
    is_valid: bool = Field(alias="isValid")
    summary: str
    details: FindingDetails
    counts: FindingCounts

    class Config:
        populate_by_name = True


def _api_finding(finding: Finding) -> FindingResponse:
    return FindingResponse(field=finding.field, code=finding.code, message=finding.message)


def _log_finding(finding: Finding) -> FindingLogEntry:
    return FindingLogEntry(
        code=finding.code,
        message=finding.message,
        field=finding.field,
        severity=finding.severity,
        timestamp=finding.timestamp,
    )


def to_api_response(result: ValidationResult) -> ValidationApiResponse:
    return ValidationApiResponse(
        valid=result.is_valid,
        errors=[_api_finding(f) for f in result.errors],
        warnings=[_api_finding(f) for f in result.warnings],
    )


def to_log_record(result: ValidationResult) -> ValidationLogRecord:
    return ValidationLogRecord(
        is_valid=result.is_valid,
        summary=result.summary,
        details=FindingDetails(
            errors=[_log_finding(f) for f in result.errors],
            warnings=[_log_finding(f) for f in result.warnings],
            info=[_log_finding(f) for f in result.info],
        ),
        counts=FindingCounts(
            errors=result.error_count,
            warnings=result.warning_count,
            info=result.info_count,
        ),
    )


def format_for_api(result: ValidationResult) -> dict[str, Any]:
    """API shape as a plain dict: {valid, errors, warnings}"""
    return to_api_response(result).model_dump()


def format_for_logging(result: ValidationResult) -> dict[str, Any]:
    """Log shape as a JSON-ready dict: {isValid, summary, details, counts}"""
    return to_log_record(result).model_dump(mode="json", by_alias=True)
