"""Unit tests for the validation pass runner

Tests cover:
- Rule groups run in order on a fresh accumulator
- HALT_PASS stops the pass
- Internal faults become a validation_error finding and keep earlier findings
- Run id correlation and summary logging
"""

import logging
from unittest.mock import MagicMock, patch

from domain.validation.engine import HALT_PASS, run_validation_pass
from domain.validation.models import ValidationContext, ValidationIntent
from observability.run_context import get_run_id


def make_context(intent=ValidationIntent.CREATE):
    return ValidationContext(intent=intent)


class DebugErrorSink:
    """Logger-like sink exposing only debug and error"""

    def __init__(self):
        self.debugs = []
        self.errors = []

    def debug(self, msg, *args, **kwargs):
        self.debugs.append(msg)

    def error(self, msg, *args, **kwargs):
        self.errors.append(msg)


class TestRunValidationPass:
    """Test pass execution and recovery"""

    def test_groups_run_in_order(self):
        """Test findings appear in rule group order"""
        calls = []

        def first(acc, record, ctx):
            calls.append("first")
            acc.add_error("first_error", "first")

        def second(acc, record, ctx):
            calls.append("second")
            acc.add_warning("second_warning", "second")

        result = run_validation_pass("chapter", {}, make_context(), [("first", first), ("second", second)])

        assert calls == ["first", "second"]
        assert result.codes() == ["first_error", "second_warning"]

    def test_halt_stops_the_pass(self):
        """Test a rule returning HALT_PASS prevents later groups"""
        later = MagicMock()

        def halt(acc, record, ctx):
            acc.add_error("invalid_record_format", "Record must be an object", "general")
            return HALT_PASS

        result = run_validation_pass("chapter", "oops", make_context(), [("format", halt), ("later", later)])

        later.assert_not_called()
        assert result.codes() == ["invalid_record_format"]

    def test_internal_fault_becomes_finding(self):
        """Test an exception is converted to validation_error on field general"""
        def ok(acc, record, ctx):
            acc.add_warning("short_content", "short")

        def broken(acc, record, ctx):
            raise KeyError("title")

        never = MagicMock()

        result = run_validation_pass(
            "chapter", {}, make_context(), [("ok", ok), ("broken", broken), ("never", never)]
        )

        never.assert_not_called()
        assert result.is_valid is False
        assert result.codes() == ["validation_error", "short_content"]
        error = result.errors[0]
        assert error.field == "general"
        assert error.message.startswith("Chapter create validation failed:")

    def test_internal_fault_is_logged_with_traceback(self):
        """Test the fault is logged at error level with exc_info"""
        log = MagicMock(spec=logging.Logger)

        def broken(acc, record, ctx):
            raise ValueError("boom")

        run_validation_pass("rights", {}, make_context(), [("broken", broken)], log=log)

        log.error.assert_called_once()
        assert log.error.call_args.kwargs["exc_info"] is True

    def test_summary_logged_at_debug(self):
        """Test a top-level pass logs its summary at debug"""
        log = MagicMock(spec=logging.Logger)

        run_validation_pass("sales", {}, make_context(), [], log=log)

        log.info.assert_not_called()
        messages = [c.args[0] for c in log.debug.call_args_list]
        assert any("Validation completed for sales (create)" in m for m in messages)

    def test_sink_with_debug_and_error_only(self):
        """Test a minimal debug/error sink is enough for a full pass"""
        sink = DebugErrorSink()

        def broken(acc, record, ctx):
            raise ValueError("boom")

        result = run_validation_pass("chapter", {}, make_context(), [("broken", broken)], log=sink)

        assert result.codes() == ["validation_error"]
        assert len(sink.errors) == 1
        assert any("Validation completed for chapter" in m for m in sink.debugs)

    def test_run_id_set_during_pass_and_cleared_after(self):
        """Test rules see a run id and it is reset afterwards"""
        seen = []

        def capture(acc, record, ctx):
            seen.append(get_run_id())

        run_validation_pass("chapter", {}, make_context(), [("capture", capture)])

        assert seen[0] is not None
        assert get_run_id() is None

    def test_nested_pass_shares_run_id(self):
        """Test a pass started inside another reuses the outer run id"""
        seen = []

        def inner(acc, record, ctx):
            seen.append(get_run_id())

        def outer(acc, record, ctx):
            seen.append(get_run_id())
            run_validation_pass("sales", {}, make_context(), [("inner", inner)])

        run_validation_pass("sales", [], make_context(ValidationIntent.BATCH_IMPORT), [("outer", outer)])

        assert seen[0] == seen[1]

    def test_metrics_recorded_for_top_level_pass_only(self):
        """Test metrics are updated once per top-level pass"""
        def outer(acc, record, ctx):
            run_validation_pass("sales", {}, make_context(), [])

        with patch("domain.validation.engine.record_validation_pass") as record_metrics:
            run_validation_pass("sales", [], make_context(ValidationIntent.BATCH_IMPORT), [("outer", outer)])

        record_metrics.assert_called_once()
        assert record_metrics.call_args.args[:2] == ("sales", "batch_import")

    def test_metrics_switch_passed_through(self):
        """Test the caller's metrics switch reaches the recorder"""
        with patch("domain.validation.engine.record_validation_pass") as record_metrics:
            run_validation_pass("sales", {}, make_context(), [], enable_metrics=False)

        assert record_metrics.call_args.kwargs["enabled"] is False

    def test_record_is_not_mutated(self):
        """Test the runner hands rules the caller's record untouched"""
        record = {"title": "A"}

        def read_only(acc, data, ctx):
            acc.add_info("seen", data["title"])

        run_validation_pass("chapter", record, make_context(), [("read", read_only)])

        assert record == {"title": "A"}
