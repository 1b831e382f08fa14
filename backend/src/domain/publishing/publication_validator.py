"""Publication validator"""

from datetime import datetime
from typing import Any, Mapping, Optional

from domain.validation.models import ValidationIntent, ValidationResult

from .base import PublishingRecordValidator
from .rules import publication_rules as rules
from .rules.common import require_mapping


class PublicationValidator(PublishingRecordValidator):
    """Validates publications for creation, update and publishing readiness"""

    domain = "publication"

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
            ("required_fields", rules.check_publication_required),
            ("metadata", rules.check_publication_metadata),
            ("pricing", rules.check_publication_pricing),
            ("territories", rules.check_publication_territories),
        ])

    def validate_for_update(
        self,
        record_id: Any,
        partial_record: Any,
        options: Optional[Mapping[str, Any]] = None,
        *,
        now: Optional[datetime] = None,
    ) -> ValidationResult:
        context = self._context(ValidationIntent.UPDATE, options, now, record_id=record_id)
        return self._run(partial_record, context, [
            ("record_format", require_mapping),
            ("updated_fields", rules.check_publication_update),
        ])

    def validate_for_publishing_readiness(
        self,
        record: Any,
        options: Optional[Mapping[str, Any]] = None,
        *,
        now: Optional[datetime] = None,
    ) -> ValidationResult:
        """Strict required fields, completeness, format requirements, then
        distribution readiness (pricing and territories)."""
        context = self._context(ValidationIntent.PUBLISHING_READINESS, {**(options or {}), "strict": True}, now)
        return self._run(record, context, [
            ("record_format", require_mapping),
            ("required_fields", rules.check_publication_required),
            ("content_completeness", rules.check_content_completeness),
            ("format_requirements", rules.check_publication_metadata),
            ("distribution_pricing", rules.check_publication_pricing),
            ("distribution_territories", rules.check_publication_territories),
        ])
