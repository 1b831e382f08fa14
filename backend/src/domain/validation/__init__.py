"""Validation framework for publishing records.

Findings, the per-pass accumulator, primitive field checks, identifier
validators and the pass runner shared by every publishing rule set.
"""

from .models import (
    FindingSeverity,
    ValidationIntent,
    Finding,
    ValidationResult,
    ValidationContext,
)
from .accumulator import ResultAccumulator
from .port import RecordValidatorPort, ConflictCheckerPort, ConflictFinding, NullConflictChecker
from .engine import run_validation_pass, HALT_PASS

__all__ = [
    "FindingSeverity",
    "ValidationIntent",
    "Finding",
    "ValidationResult",
    "ValidationContext",
    "ResultAccumulator",
    "RecordValidatorPort",
    "ConflictCheckerPort",
    "ConflictFinding",
    "NullConflictChecker",
    "run_validation_pass",
    "HALT_PASS",
]
