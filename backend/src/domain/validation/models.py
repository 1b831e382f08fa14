"""Validation models and enums for publishing record validation"""

from dataclasses import dataclass, field as dataclass_field
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Mapping, Optional


class FindingSeverity(str, Enum):
    """Finding severity levels.

    ERROR blocks the requested intent, WARNING signals risk or quality
    problems, INFO is advisory only.
    """
    ERROR = "error"
    WARNING = "warning"
    INFO = "info"


class ValidationIntent(str, Enum):
    """Lifecycle intent a validation pass was run for"""
    CREATE = "create"
    UPDATE = "update"
    PUBLISHING_READINESS = "publishing_readiness"
    CONTENT_QUALITY = "content_quality"
    BATCH_IMPORT = "batch_import"
    REPORT = "report"
    TERRITORIAL_COVERAGE = "territorial_coverage"
    LICENSING_COMPLIANCE = "licensing_compliance"


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(frozen=True)
class Finding:
    """A single detected issue.

    Findings are created once by the accumulator that owns the pass and are
    never modified afterwards. The timestamp is informational and not part
    of a finding's identity.
    """
    code: str
    message: str
    severity: FindingSeverity
    field: Optional[str] = None
    timestamp: datetime = dataclass_field(default_factory=_utc_now, compare=False)

    def to_dict(self) -> dict[str, Any]:
        """Convert to a JSON-friendly dictionary"""
        return {
            "code": self.code,
            "message": self.message,
            "field": self.field,
            "severity": self.severity.value,
            "timestamp": self.timestamp.isoformat(),
        }


@dataclass(frozen=True)
class ValidationResult:
    """Finalized, read-only snapshot of one validation pass.

    Validity and counts are derived from the finding sequences, so they can
    never disagree with them.

    record_results is only filled by batch validation: it maps the index of
    every batch record that produced at least one finding to that record's
    own result.
    """
    errors: tuple[Finding, ...] = ()
    warnings: tuple[Finding, ...] = ()
    info: tuple[Finding, ...] = ()
    record_results: Mapping[int, "ValidationResult"] = dataclass_field(default_factory=dict)

    @property
    def is_valid(self) -> bool:
        return len(self.errors) == 0

    @property
    def error_count(self) -> int:
        return len(self.errors)

    @property
    def warning_count(self) -> int:
        return len(self.warnings)

    @property
    def info_count(self) -> int:
        return len(self.info)

    @property
    def summary(self) -> str:
        """Human readable one-line summary"""
        if self.is_valid and not self.warnings:
            return "Validation passed without issues"
        if self.is_valid:
            return f"Validation passed with {len(self.warnings)} warning(s)"
        return (
            f"Validation failed with {len(self.errors)} error(s) "
            f"and {len(self.warnings)} warning(s)"
        )

    def codes(self, severity: Optional[FindingSeverity] = None) -> list[str]:
        """Finding codes in detection order, optionally for one severity"""
        if severity == FindingSeverity.ERROR:
            return [f.code for f in self.errors]
        if severity == FindingSeverity.WARNING:
            return [f.code for f in self.warnings]
        if severity == FindingSeverity.INFO:
            return [f.code for f in self.info]
        return [f.code for f in (*self.errors, *self.warnings, *self.info)]

    def has_code(self, code: str) -> bool:
        return code in self.codes()


@dataclass(frozen=True)
class ValidationContext:
    """Context object passed to every rule function.

    Holds the per-call inputs a rule may need besides the record itself:
    the caller's options, the reference instant for past/future checks and,
    for update intents, the id of the record being changed.
    """
    intent: ValidationIntent
    now: datetime = dataclass_field(default_factory=_utc_now)
    options: Mapping[str, Any] = dataclass_field(default_factory=dict)
    record_id: Optional[Any] = None

    @property
    def strict(self) -> bool:
        return bool(self.options.get("strict", False))

    @property
    def current_status(self) -> Optional[str]:
        return self.options.get("current_status")
