"""Per-pass finding accumulator"""

import logging
from typing import Any, Optional

from .models import Finding, FindingSeverity, ValidationResult


logger = logging.getLogger(__name__)


class ResultAccumulator:
    """Collects findings for exactly one validation pass.

    An accumulator must not be shared between concurrent passes. Validators
    create a new one for every public call, so the only long-lived state a
    validator holds is immutable configuration.
    """

    def __init__(self, log: Optional[Any] = None):
        self._log = log or logger
        self.reset()

    def reset(self) -> None:
        """Drop all findings and mark the pass as valid again"""
        self._errors: list[Finding] = []
        self._warnings: list[Finding] = []
        self._info: list[Finding] = []

    @property
    def is_valid(self) -> bool:
        return not self._errors

    @property
    def error_count(self) -> int:
        return len(self._errors)

    def add_error(self, code: str, message: str, field: Optional[str] = None) -> None:
        """Record a violation that makes the record unacceptable for the intent"""
        self._add(self._errors, FindingSeverity.ERROR, code, message, field)

    def add_warning(self, code: str, message: str, field: Optional[str] = None) -> None:
        """Record a non-blocking risk or quality signal"""
        self._add(self._warnings, FindingSeverity.WARNING, code, message, field)

    def add_info(self, code: str, message: str, field: Optional[str] = None) -> None:
        """Record an advisory note"""
        self._add(self._info, FindingSeverity.INFO, code, message, field)

    def add(self, severity: FindingSeverity, code: str, message: str, field: Optional[str] = None) -> None:
        if severity == FindingSeverity.ERROR:
            self.add_error(code, message, field)
        elif severity == FindingSeverity.WARNING:
            self.add_warning(code, message, field)
        else:
            self.add_info(code, message, field)

    def snapshot(self, record_results: Optional[dict] = None) -> ValidationResult:
        """Build an immutable result from the current state.

        Safe to call mid-pass; later additions do not affect a snapshot
        that was already taken.
        """
        return ValidationResult(
            errors=tuple(self._errors),
            warnings=tuple(self._warnings),
            info=tuple(self._info),
            record_results=dict(record_results or {}),
        )

    def _add(
        self,
        bucket: list[Finding],
        severity: FindingSeverity,
        code: str,
        message: str,
        field: Optional[str],
    ) -> None:
        bucket.append(Finding(code=code, message=message, severity=severity, field=field))
        self._log.debug(
            f"Validation {severity.value} added: {code}",
            extra={"finding_code": code, "finding_field": field, "severity": severity.value},
        )
