"""Shared base for the publishing record validators"""

import logging
from datetime import datetime
from typing import Any, Callable, Mapping, Optional, Sequence, Tuple

from config import Settings, get_settings
from domain.validation.dates import ensure_utc, utc_now
from domain.validation.engine import RuleGroup, run_validation_pass
from domain.validation.models import ValidationContext, ValidationIntent, ValidationResult
from domain.validation.port import RecordValidatorPort


logger = logging.getLogger(__name__)


class PublishingRecordValidator(RecordValidatorPort):
    """Base class for domain validators.

    Holds immutable configuration only (logger, clock, settings). Every
    public call builds its own context and runs its own pass, so a single
    instance can serve concurrent callers.

    Args:
        logger: Logger-like sink (debug/error with extra=); defaults
            to the module logger of the concrete validator
        clock: Callable returning the current aware datetime
        settings: Settings override; defaults to get_settings()
    """

    domain = "record"

    def __init__(
        self,
        logger: Optional[Any] = None,
        clock: Callable[[], datetime] = utc_now,
        settings: Optional[Settings] = None,
    ):
        self.logger = logger or logging.getLogger(type(self).__module__)
        self.clock = clock
        self.settings = settings or get_settings()

    def _context(
        self,
        intent: ValidationIntent,
        options: Optional[Mapping[str, Any]] = None,
        now: Optional[datetime] = None,
        record_id: Any = None,
    ) -> ValidationContext:
        return ValidationContext(
            intent=intent,
            now=ensure_utc(now) if now is not None else ensure_utc(self.clock()),
            options=dict(options) if isinstance(options, Mapping) else {},
            record_id=record_id,
        )

    def _run(
        self,
        record: Any,
        context: ValidationContext,
        rule_groups: Sequence[Tuple[str, RuleGroup]],
        record_results: Optional[dict] = None,
    ) -> ValidationResult:
        return run_validation_pass(
            self.domain,
            record,
            context,
            rule_groups,
            log=self.logger,
            record_results=record_results,
            enable_metrics=self.settings.ENABLE_METRICS,
        )
