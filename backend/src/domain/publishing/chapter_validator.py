"""Chapter validator"""

from datetime import datetime
from typing import Any, Mapping, Optional

from domain.validation.models import ValidationIntent, ValidationResult

from .base import PublishingRecordValidator
from .rules import chapter_rules as rules
from .rules.common import require_mapping


class ChapterValidator(PublishingRecordValidator):
    """Validates chapters for creation, update, publishing and content quality"""

    domain = "chapter"

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
            ("required_fields", rules.check_chapter_required),
            ("content", rules.check_chapter_content),
            ("metadata", rules.check_chapter_metadata),
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
            ("updated_fields", rules.check_chapter_update),
        ])

    def validate_for_publishing_readiness(
        self,
        record: Any,
        options: Optional[Mapping[str, Any]] = None,
        *,
        now: Optional[datetime] = None,
    ) -> ValidationResult:
        """Strict required fields; blank content becomes an error"""
        context = self._context(ValidationIntent.PUBLISHING_READINESS, {**(options or {}), "strict": True}, now)
        return self._run(record, context, [
            ("record_format", require_mapping),
            ("required_fields", rules.check_chapter_required),
            ("content_completeness", rules.check_chapter_content),
            ("metadata", rules.check_chapter_metadata),
        ])

    def validate_content_quality(
        self,
        record: Any,
        options: Optional[Mapping[str, Any]] = None,
        *,
        now: Optional[datetime] = None,
    ) -> ValidationResult:
        context = self._context(ValidationIntent.CONTENT_QUALITY, options, now)
        return self._run(record, context, [
            ("record_format", require_mapping),
            ("content_present", rules.check_quality_content_present),
            ("content_length", rules.check_quality_length),
            ("content_structure", rules.check_quality_structure),
        ])
