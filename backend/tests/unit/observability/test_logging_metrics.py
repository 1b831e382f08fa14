"""Unit tests for JSON logging, run id correlation and validation metrics"""

import json
import logging
import sys
from unittest.mock import patch

from config import Settings
from domain.publishing import SalesValidator
from domain.validation.accumulator import ResultAccumulator
from observability import metrics
from observability.logging_config import JSONFormatter, RunIDFilter, configure_logging
from observability.run_context import get_run_id, new_run_id, reset_run_id, set_run_id


def make_record(msg="Validation completed", exc_info=None, **extra):
    record = logging.LogRecord(
        name="domain.publishing.chapter_validator",
        level=logging.INFO,
        pathname=__file__,
        lineno=10,
        msg=msg,
        args=(),
        exc_info=exc_info,
    )
    for key, value in extra.items():
        setattr(record, key, value)
    return record


class TestRunIDFilter:
    """Test run id injection"""

    def test_outside_pass(self):
        """Test records outside a pass get the placeholder"""
        record = make_record()
        assert RunIDFilter().filter(record) is True
        assert record.validation_run_id == "no-run-id"

    def test_inside_pass(self):
        """Test records inside a pass carry the current run id"""
        run_id = new_run_id()
        token = set_run_id(run_id)
        try:
            record = make_record()
            RunIDFilter().filter(record)
        finally:
            reset_run_id(token)

        assert record.validation_run_id == run_id
        assert get_run_id() is None


class TestJSONFormatter:
    """Test JSON log lines"""

    def test_base_fields(self):
        """Test level, message and run id"""
        record = make_record(validation_run_id="run-1")
        payload = json.loads(JSONFormatter().format(record))

        assert payload["level"] == "INFO"
        assert payload["message"] == "Validation completed"
        assert payload["validation_run_id"] == "run-1"

    def test_extra_fields(self):
        """Test finding extras are copied with their JSON types"""
        record = make_record(finding_code="required_field", finding_field="title", is_valid=False, record_id=7)
        payload = json.loads(JSONFormatter().format(record))

        assert payload["finding_code"] == "required_field"
        assert payload["finding_field"] == "title"
        assert payload["is_valid"] is False
        assert payload["record_id"] == 7

    def test_exception(self):
        """Test exception text and traceback are included"""
        try:
            raise ValueError("boom")
        except ValueError:
            record = make_record(exc_info=sys.exc_info())

        payload = json.loads(JSONFormatter().format(record))

        assert payload["error"] == "boom"
        assert "ValueError" in payload["traceback"]


class TestConfigureLogging:
    """Test root logger setup"""

    def test_json_handler_with_run_filter(self):
        """Test one stdout handler with the JSON formatter and run id filter"""
        root = logging.getLogger()
        saved_handlers, saved_level = root.handlers[:], root.level
        try:
            configure_logging("DEBUG", json_format=True)

            assert root.level == logging.DEBUG
            assert len(root.handlers) == 1
            handler = root.handlers[0]
            assert isinstance(handler.formatter, JSONFormatter)
            assert any(isinstance(f, RunIDFilter) for f in handler.filters)
        finally:
            root.handlers[:] = saved_handlers
            root.setLevel(saved_level)


class TestValidationMetrics:
    """Test metric recording for finished passes"""

    def _result(self):
        acc = ResultAccumulator()
        acc.add_error("required_field", "title is required", "title")
        acc.add_warning("short_content", "Content is very short", "content")
        return acc.snapshot()

    def test_counts_pass_and_findings(self):
        """Test pass outcome and per-severity finding counters"""
        passes = metrics.validation_passes_total.labels(domain="chapter", intent="create", outcome="invalid")
        errors = metrics.validation_findings_total.labels(domain="chapter", intent="create", severity="error")
        passes_before = passes._value.get()
        errors_before = errors._value.get()

        with patch("observability.metrics.get_settings", return_value=Settings(ENABLE_METRICS=True)):
            metrics.record_validation_pass("chapter", "create", self._result(), 0.002)

        assert passes._value.get() == passes_before + 1
        assert errors._value.get() == errors_before + 1

    def test_disabled(self):
        """Test nothing is recorded when metrics are switched off"""
        passes = metrics.validation_passes_total.labels(domain="rights", intent="update", outcome="invalid")
        before = passes._value.get()

        with patch("observability.metrics.get_settings", return_value=Settings(ENABLE_METRICS=False)):
            metrics.record_validation_pass("rights", "update", self._result(), 0.002)

        assert passes._value.get() == before

    def test_validator_settings_switch_off_metrics(self, valid_sale, now):
        """Test a validator built with metrics off records nothing"""
        passes = metrics.validation_passes_total.labels(domain="sales", intent="create", outcome="valid")
        before = passes._value.get()
        validator = SalesValidator(clock=lambda: now, settings=Settings(ENABLE_METRICS=False))

        with patch("observability.metrics.get_settings", return_value=Settings(ENABLE_METRICS=True)):
            result = validator.validate_for_creation(valid_sale)

        assert result.is_valid is True
        assert passes._value.get() == before

    def test_validator_settings_switch_on_metrics(self, valid_sale, now):
        """Test a validator built with metrics on records its pass"""
        passes = metrics.validation_passes_total.labels(domain="sales", intent="create", outcome="valid")
        before = passes._value.get()
        validator = SalesValidator(clock=lambda: now, settings=Settings(ENABLE_METRICS=True))

        with patch("observability.metrics.get_settings", return_value=Settings(ENABLE_METRICS=False)):
            validator.validate_for_creation(valid_sale)

        assert passes._value.get() == before + 1
