"""Rights grant validator"""

from datetime import datetime
from functools import partial
from typing import Any, Callable, Mapping, Optional

from config import Settings
from domain.validation.dates import utc_now
from domain.validation.models import ValidationIntent, ValidationResult
from domain.validation.port import ConflictCheckerPort, NullConflictChecker

from .base import PublishingRecordValidator
from .rules import rights_rules as rules
from .rules.common import require_mapping


class RightsValidator(PublishingRecordValidator):
    """Validates rights grants, grant portfolios and licensing terms.

    Args:
        conflict_checker: Lookup of existing grants that collide with a
            requested one. Defaults to NullConflictChecker, which never
            reports conflicts.
    """

    domain = "rights"

    def __init__(
        self,
        logger: Optional[Any] = None,
        clock: Callable[[], datetime] = utc_now,
        settings: Optional[Settings] = None,
        conflict_checker: Optional[ConflictCheckerPort] = None,
    ):
        super().__init__(logger=logger, clock=clock, settings=settings)
        self.conflict_checker = conflict_checker or NullConflictChecker()

    def _conflict_rule(self):
        return partial(rules.check_rights_conflicts, checker=self.conflict_checker, log=self.logger)

    def validate_for_creation(
        self,
        record: Any,
        options: Optional[Mapping[str, Any]] = None,
        *,
        now: Optional[datetime] = None,
    ) -> ValidationResult:
        context = self._context(ValidationIntent.CREATE, options, now)
        return self._run(record, context, [
            ("record_format", require_mapping),
            ("required_fields", rules.check_rights_required),
            ("scope", rules.check_rights_scope),
            ("license", rules.check_rights_license),
            ("dates", rules.check_rights_dates),
            ("financial_terms", rules.check_rights_financial_terms),
            ("conflicts", self._conflict_rule()),
        ])

    def validate_for_update(
        self,
        record_id: Any,
        partial_record: Any,
        options: Optional[Mapping[str, Any]] = None,
        *,
        now: Optional[datetime] = None,
    ) -> ValidationResult:
        """Conflicts are only looked up when territory, language or
        right_type change."""
        context = self._context(ValidationIntent.UPDATE, options, now, record_id=record_id)
        return self._run(partial_record, context, [
            ("record_format", require_mapping),
            ("updated_fields", rules.check_rights_update),
            ("conflicts", self._conflict_rule()),
        ])

    def validate_territorial_coverage(
        self,
        publication_id: Any,
        rights_data: Any,
        options: Optional[Mapping[str, Any]] = None,
        *,
        now: Optional[datetime] = None,
    ) -> ValidationResult:
        """Check all grants of one publication together.

        Args:
            publication_id: Publication the grants belong to
            rights_data: List of grant mappings (a single mapping is
                treated as a one-grant portfolio)
        """
        if isinstance(rights_data, Mapping):
            rights_data = [rights_data]

        context = self._context(
            ValidationIntent.TERRITORIAL_COVERAGE,
            {**(options or {}), "publication_id": publication_id},
            now,
        )
        return self._run(rights_data, context, [
            ("grant_list", rules.require_grant_list),
            ("publication", rules.check_coverage_publication),
            ("grants", rules.check_coverage_grants),
            ("overlaps", rules.check_territorial_overlaps),
            ("world_coverage", rules.check_world_coverage),
        ])

    def validate_licensing_compliance(
        self,
        rights_data: Any,
        options: Optional[Mapping[str, Any]] = None,
        *,
        now: Optional[datetime] = None,
    ) -> ValidationResult:
        context = self._context(ValidationIntent.LICENSING_COMPLIANCE, options, now)
        return self._run(rights_data, context, [
            ("record_format", require_mapping),
            ("license", rules.check_rights_license),
            ("exclusivity", rules.check_exclusivity_consistency),
            ("contract_dates", rules.check_rights_dates),
            ("financial_terms", rules.check_rights_financial_terms),
        ])
