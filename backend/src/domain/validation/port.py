"""Validation ports (Hexagonal Architecture)

Record validators are the inbound port used by controllers and import jobs.
The rights conflict lookup is an outbound port: the engine asks it for
existing grants that collide with a requested one, and persistence adapters
implement it.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Mapping, Optional

from .models import FindingSeverity, ValidationResult


class RecordValidatorPort(ABC):
    """Port interface for domain record validators.

    Every implementation must return a well-formed ValidationResult for any
    input, including malformed records; domain rule violations are never
    raised as exceptions.
    """

    @abstractmethod
    def validate_for_creation(
        self,
        record: Any,
        options: Optional[Mapping[str, Any]] = None,
    ) -> ValidationResult:
        """Validate a complete record before it is created.

        Args:
            record: Loosely typed record (mapping of field name to value)
            options: Options bag, e.g. {"strict": True}

        Returns:
            ValidationResult snapshot for this pass
        """
        pass

    @abstractmethod
    def validate_for_update(
        self,
        record_id: Any,
        partial_record: Any,
        options: Optional[Mapping[str, Any]] = None,
    ) -> ValidationResult:
        """Validate only the fields present in a partial update.

        Args:
            record_id: Id of the record being updated
            partial_record: Mapping with the changed fields only
            options: Options bag, e.g. {"current_status": "draft"}

        Returns:
            ValidationResult snapshot for this pass
        """
        pass


@dataclass(frozen=True)
class ConflictFinding:
    """A collision between a requested rights grant and an existing one"""
    code: str
    message: str
    field: Optional[str] = "territory"
    severity: FindingSeverity = FindingSeverity.WARNING
    conflicting_grant_id: Optional[Any] = None


class ConflictCheckerPort(ABC):
    """Lookup of existing rights grants that conflict with a request.

    Criteria keys: publication_id, right_type, territory, language,
    exclusive and id (the grant being updated, if any).
    """

    @abstractmethod
    def find_conflicts(self, criteria: Mapping[str, Any]) -> list[ConflictFinding]:
        pass


class NullConflictChecker(ConflictCheckerPort):
    """Default checker used when no persistence adapter is wired in"""

    def find_conflicts(self, criteria: Mapping[str, Any]) -> list[ConflictFinding]:
        return []
