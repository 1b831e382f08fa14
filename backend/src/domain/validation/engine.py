"""Validation pass runner.

Executes an ordered list of named rule groups against one record on a fresh
accumulator and always returns a ValidationResult. This is the single
recovery boundary of the engine: an exception escaping a rule group is a
programming fault, and is logged and converted into one validation_error
finding instead of propagating to the caller.
"""

import logging
import time
from typing import Any, Callable, Optional, Sequence, Tuple

from observability.metrics import record_validation_pass
from observability.run_context import get_run_id, new_run_id, reset_run_id, set_run_id

from .accumulator import ResultAccumulator
from .models import ValidationContext, ValidationResult


logger = logging.getLogger(__name__)


# Returned by a rule group to stop the pass (structurally impossible input)
HALT_PASS = object()

RuleGroup = Callable[[ResultAccumulator, Any, ValidationContext], Any]


def run_validation_pass(
    domain: str,
    record: Any,
    context: ValidationContext,
    rule_groups: Sequence[Tuple[str, RuleGroup]],
    log: Optional[Any] = None,
    record_results: Optional[dict] = None,
    enable_metrics: Optional[bool] = None,
) -> ValidationResult:
    """Run rule groups in order and snapshot the findings.

    Args:
        domain: Rule set name used in logs and metrics (e.g. "chapter")
        record: The record handed to every rule group (never mutated)
        context: Per-call context (intent, options, reference instant)
        rule_groups: (name, function) pairs executed strictly in order
        log: Logger-like sink with debug/error; defaults to module logger
        record_results: Per-record results collected by batch rule groups
        enable_metrics: Metrics switch of the calling validator; None falls
            back to the global settings

    Returns:
        ValidationResult for this pass
    """
    log = log or logger
    acc = ResultAccumulator(log)
    acc.reset()

    # Nested passes (batch records) share the outer pass's run id
    nested = get_run_id() is not None
    token = None if nested else set_run_id(new_run_id())
    started = time.perf_counter()

    try:
        for rule_name, rule_func in rule_groups:
            try:
                outcome = rule_func(acc, record, context)
            except Exception as e:
                log.error(
                    f"Validation rule '{rule_name}' failed for {domain} ({context.intent.value}): {e}",
                    exc_info=True,
                    extra={"rule_name": rule_name, "record_id": context.record_id},
                )
                acc.add_error(
                    'validation_error',
                    f"{domain.capitalize()} {context.intent.value} validation failed: {e}",
                    'general',
                )
                break

            if outcome is HALT_PASS:
                log.debug(f"Validation pass for {domain} halted by rule '{rule_name}'")
                break

        result = acc.snapshot(record_results)
        duration = time.perf_counter() - started

        message = (
            f"Validation completed for {domain} ({context.intent.value}): "
            f"{result.error_count} errors, {result.warning_count} warnings, {result.info_count} info"
        )
        log.debug(message, extra={"record_id": context.record_id, "is_valid": result.is_valid})
        if not nested:
            record_validation_pass(domain, context.intent.value, result, duration, enabled=enable_metrics)

        return result
    finally:
        if token is not None:
            reset_run_id(token)
