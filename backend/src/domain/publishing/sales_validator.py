"""Sales transaction validator"""

from datetime import datetime
from functools import partial
from typing import Any, Mapping, Optional

from domain.validation.models import ValidationIntent, ValidationResult

from .base import PublishingRecordValidator
from .rules import sales_rules as rules
from .rules.common import require_mapping


class SalesValidator(PublishingRecordValidator):
    """Validates sales records, report parameters and batch imports.

    The stale-sale threshold and the batch size cap come from settings
    (SALES_STALE_AFTER_DAYS, SALES_BATCH_MAX_RECORDS).
    """

    domain = "sales"

    def _record_groups(self):
        return [
            ("record_format", require_mapping),
            ("required_fields", rules.check_sales_required),
            ("store", rules.check_sales_store),
            ("financials", rules.check_sales_financials),
            ("quantity", rules.check_sales_quantity),
            ("sale_date", partial(rules.check_sales_date, stale_after_days=self.settings.SALES_STALE_AFTER_DAYS)),
            ("currency", rules.check_sales_currency),
            ("business_rules", rules.check_sales_business_rules),
        ]

    def validate_for_creation(
        self,
        record: Any,
        options: Optional[Mapping[str, Any]] = None,
        *,
        now: Optional[datetime] = None,
    ) -> ValidationResult:
        context = self._context(ValidationIntent.CREATE, options, now)
        return self._run(record, context, self._record_groups())

    def validate_for_update(
        self,
        record_id: Any,
        partial_record: Any,
        options: Optional[Mapping[str, Any]] = None,
        *,
        now: Optional[datetime] = None,
    ) -> ValidationResult:
        context = self._context(ValidationIntent.UPDATE, options, now, record_id=record_id)
        update_rule = partial(rules.check_sales_update, stale_after_days=self.settings.SALES_STALE_AFTER_DAYS)
        return self._run(partial_record, context, [
            ("record_format", require_mapping),
            ("updated_fields", update_rule),
        ])

    def validate_report_data(
        self,
        report_params: Any,
        options: Optional[Mapping[str, Any]] = None,
        *,
        now: Optional[datetime] = None,
    ) -> ValidationResult:
        """Validate report parameters: date range, stores, currency, grouping"""
        context = self._context(ValidationIntent.REPORT, options, now)
        return self._run(report_params, context, [
            ("record_format", require_mapping),
            ("date_range", rules.check_report_dates),
            ("stores", rules.check_report_stores),
            ("currency", rules.check_report_currency),
            ("group_by", rules.check_report_grouping),
        ])

    def validate_batch(
        self,
        records: Any,
        options: Optional[Mapping[str, Any]] = None,
        *,
        now: Optional[datetime] = None,
    ) -> ValidationResult:
        """Validate a batch import.

        Malformed, empty and oversized batches are rejected before any
        record is looked at. Otherwise every record goes through the
        creation path with the same reference instant; records with any
        finding keep their own result in record_results.
        """
        context = self._context(ValidationIntent.BATCH_IMPORT, options, now)
        record_results: dict = {}

        def validate_record(record: Any) -> ValidationResult:
            return self.validate_for_creation(record, options, now=context.now)

        return self._run(records, context, [
            ("batch_shape", partial(rules.check_batch_shape, max_records=self.settings.SALES_BATCH_MAX_RECORDS)),
            ("batch_records", partial(
                rules.check_batch_records,
                validate_record=validate_record,
                record_results=record_results,
            )),
            ("batch_consistency", rules.check_batch_consistency),
        ], record_results=record_results)
