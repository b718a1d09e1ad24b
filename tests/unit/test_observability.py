"""
Unit tests for structured logging and Prometheus metrics.
"""

import io
import json
import logging

import pytest

from labflow.core.errors import ErrorCode
from labflow.core.models import RecordError
from labflow.observability import metrics as prom
from labflow.observability.logger import (
    JSON_FORMAT,
    NO_RUN,
    RunContextFilter,
    RunJsonFormatter,
    RunLogger,
    get_logger,
    log_stage,
    setup_logger,
)


def _sample_value(name, labels=None):
    return prom.REGISTRY.get_sample_value(name, labels or {}) or 0.0


def _captured_logger(name, caplog):
    # package loggers do not propagate to root, so attach the capture handler directly
    logger = logging.getLogger(name)
    logger.setLevel(logging.DEBUG)
    if caplog.handler not in logger.handlers:
        logger.addHandler(caplog.handler)
    return logger


@pytest.mark.unit
class TestLogger:
    """Tests for logger setup"""

    def test_json_formatter_fields(self):
        """Test JSON records carry level, logger, run_id and stage"""
        formatter = RunJsonFormatter(fmt=JSON_FORMAT)
        record = logging.LogRecord("labflow.test", logging.WARNING, __file__, 1, "hello", None, None, func="fn")
        record.run_id = "run_abc_1"
        record.stage = "intake"
        data = json.loads(formatter.format(record))
        assert data["message"] == "hello"
        assert data["level"] == "WARNING"
        assert data["logger"] == "labflow.test"
        assert data["run_id"] == "run_abc_1"
        assert data["stage"] == "intake"
        assert "timestamp" in data

    def test_records_outside_a_run(self):
        """Test the filter fills run_id and the formatter drops an empty stage"""
        record = logging.LogRecord("labflow.test", logging.INFO, __file__, 1, "idle", None, None)
        assert RunContextFilter().filter(record)
        data = json.loads(RunJsonFormatter(fmt=JSON_FORMAT).format(record))
        assert data["run_id"] == NO_RUN
        assert "stage" not in data

    def test_setup_logger_level_and_single_handler(self):
        """Test repeated setup keeps one handler and applies the level"""
        logger = setup_logger("labflow.test.setup", level="debug", format_type="text")
        logger = setup_logger("labflow.test.setup", level="WARNING", format_type="text")
        assert logger.level == logging.WARNING
        assert len(logger.handlers) == 1
        assert logger.propagate is False

    def test_text_format_shows_run_id(self):
        """Test the text handler renders the bound run id"""
        logger = setup_logger("labflow.test.text", level="INFO", format_type="text")
        stream = io.StringIO()
        logger.handlers[0].setStream(stream)
        RunLogger(logger, "run_text_1").info("hello")
        logger.info("no run")
        lines = stream.getvalue().splitlines()
        assert lines[0].endswith("[run_text_1] hello")
        assert lines[1].endswith("[-] no run")

    def test_child_loggers_share_package_handler(self):
        """Test module loggers use the package logger's handler"""
        logger = get_logger("labflow.some.module")
        assert logger.handlers == []
        assert logging.getLogger("labflow").handlers


@pytest.mark.unit
class TestRunLogger:
    """Tests for run-bound logging"""

    def test_binds_run_id_and_merges_extra(self, caplog):
        """Test every record carries the run id next to per-call fields"""
        logger = _captured_logger("labflow.test.adapter", caplog)
        log = RunLogger(logger, "run_x_1", input_format="xml")
        log.info("ingested", extra={"count": 12})
        record = caplog.records[-1]
        assert log.run_id == "run_x_1"
        assert record.run_id == "run_x_1"
        assert record.input_format == "xml"
        assert record.count == 12

    def test_log_stage_reraises_and_times(self, caplog):
        """Test log_stage logs the outcome, observes the duration and never swallows errors"""
        logger = _captured_logger("labflow.test.stage", caplog)
        log = RunLogger(logger, "run_stage_1")
        count_before = _sample_value("labflow_stage_duration_seconds_count", {"stage": "unit-stage"})

        with pytest.raises(RuntimeError):
            with log_stage("unit-stage", log):
                raise RuntimeError("boom")
        with log_stage("unit-stage", log) as stage:
            pass

        assert stage.duration >= 0
        assert _sample_value("labflow_stage_duration_seconds_count", {"stage": "unit-stage"}) == count_before + 2
        failed = [r for r in caplog.records if r.getMessage() == "Stage failed: unit-stage"]
        assert failed and failed[0].status == "error"
        assert failed[0].run_id == "run_stage_1"
        completed = [r for r in caplog.records if r.getMessage() == "Completed stage: unit-stage"]
        assert completed[0].stage == "unit-stage"


@pytest.mark.unit
class TestMetrics:
    """Tests for the Prometheus helpers"""

    def test_record_intake(self):
        """Test intake attempts are counted by format and status"""
        labels = {"format": "xml", "status": "error"}
        before = _sample_value("labflow_intakes_total", labels)
        prom.record_intake("xml", ok=False)
        assert _sample_value("labflow_intakes_total", labels) == before + 1

    def test_record_gate_outcome(self):
        """Test record and error counters and the quarantine gauge"""
        errors = [RecordError(record_index=0, record_id="A", code=ErrorCode.DUPLICATE, message="m", field="id/accession")]
        valid_before = _sample_value("labflow_records_processed_total", {"status": "valid"})
        dup_before = _sample_value("labflow_validation_errors_total", {"code": "E006", "field_name": "id/accession"})

        prom.record_gate_outcome(3, 1, errors)

        assert _sample_value("labflow_records_processed_total", {"status": "valid"}) == valid_before + 3
        assert _sample_value("labflow_validation_errors_total", {"code": "E006", "field_name": "id/accession"}) == dup_before + 1
        assert _sample_value("labflow_quarantine_size") == 1

    def test_record_ack(self):
        """Test ack counters, breaches and the delay histogram"""
        breaches_before = _sample_value("labflow_sla_breaches_total")
        count_before = _sample_value("labflow_ack_delay_milliseconds_count")
        prom.record_ack(500, 1800, sla_met=False)
        assert _sample_value("labflow_sla_breaches_total") == breaches_before + 1
        assert _sample_value("labflow_ack_delay_milliseconds_count") == count_before + 1

    def test_generate_metrics(self):
        """Test the text exposition contains labflow metrics"""
        prom.observe_stage("intake", 0.01)
        text = prom.generate_metrics().decode("utf-8")
        assert "labflow_stage_duration_seconds" in text
        assert prom.get_content_type().startswith("text/plain")
