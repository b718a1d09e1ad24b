"""
Structured logging for labflow runs

Every record written through the package handler carries the run it belongs
to. Pipeline stages log through a RunLogger bound to their run id, and
``log_stage`` times a stage, logs its outcome and feeds the Prometheus stage
histogram. Output is JSON (python-json-logger) or plain text for local use.
"""
import logging
import os
import sys
import time
from typing import Any

from pythonjsonlogger import jsonlogger

from labflow.observability.metrics import observe_stage

LOG_LEVELS = {
    "DEBUG": logging.DEBUG,
    "INFO": logging.INFO,
    "WARNING": logging.WARNING,
    "ERROR": logging.ERROR,
    "CRITICAL": logging.CRITICAL,
}

DEFAULT_LOGGER_NAME = "labflow"

# Placeholder for records logged outside a run
NO_RUN = "-"

JSON_FORMAT = "%(timestamp)s %(level)s %(logger)s %(run_id)s %(stage)s %(message)s"
TEXT_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - [%(run_id)s] %(message)s"


class RunContextFilter(logging.Filter):
    """Gives every record ``run_id`` and ``stage`` attributes so formats can rely on them."""

    def filter(self, record: logging.LogRecord) -> bool:
        if not getattr(record, "run_id", None):
            record.run_id = NO_RUN
        if not hasattr(record, "stage"):
            record.stage = None
        return True


class RunJsonFormatter(jsonlogger.JsonFormatter):
    """
    JSON formatter for pipeline records

    Emits timestamp, level, logger, run_id and stage first, then the message
    and any extra fields (counts, durations, error codes). ``stage`` is left
    out for records that do not belong to a stage.
    """

    def add_fields(self, log_record: dict, record: logging.LogRecord, message_dict: dict) -> None:
        super().add_fields(log_record, record, message_dict)

        log_record["timestamp"] = log_record.get("timestamp") or self.formatTime(record, self.datefmt)
        log_record["level"] = record.levelname
        log_record["logger"] = record.name
        log_record["run_id"] = getattr(record, "run_id", NO_RUN)
        if log_record.get("stage") is None:
            log_record.pop("stage", None)


def setup_logger(
    name: str = DEFAULT_LOGGER_NAME,
    level: str | None = None,
    format_type: str | None = None,
) -> logging.Logger:
    """
    Setup and configure a logger

    Args:
        name: Logger name
        level: Log level name (defaults to LOG_LEVEL, then INFO)
        format_type: "json" or "text" (defaults to LOG_FORMAT, then json)

    Returns:
        Configured logger instance
    """
    log_level = LOG_LEVELS.get((level or os.getenv("LOG_LEVEL", "INFO")).upper(), logging.INFO)
    format_type = format_type or os.getenv("LOG_FORMAT", "json")

    logger = logging.getLogger(name)
    logger.setLevel(log_level)
    logger.handlers.clear()

    # stdout is left to command output (playbooks)
    handler = logging.StreamHandler(sys.stderr)
    handler.setLevel(log_level)
    handler.addFilter(RunContextFilter())
    if format_type == "json":
        handler.setFormatter(RunJsonFormatter(fmt=JSON_FORMAT, datefmt="%Y-%m-%dT%H:%M:%S"))
    else:
        handler.setFormatter(logging.Formatter(fmt=TEXT_FORMAT, datefmt="%Y-%m-%d %H:%M:%S"))

    logger.addHandler(handler)
    logger.propagate = False
    return logger


def get_logger(name: str = DEFAULT_LOGGER_NAME) -> logging.Logger:
    """
    Get a logger instance

    Loggers below the ``labflow`` namespace share the package logger's
    handler; any other name gets its own handler.
    """
    if name.startswith(f"{DEFAULT_LOGGER_NAME}."):
        if not logging.getLogger(DEFAULT_LOGGER_NAME).handlers:
            setup_logger(DEFAULT_LOGGER_NAME)
        return logging.getLogger(name)

    logger = logging.getLogger(name)
    if not logger.handlers:
        return setup_logger(name)
    return logger


class RunLogger(logging.LoggerAdapter):
    """
    Logger bound to one pipeline run

    Adds ``run_id`` to every record; per-call ``extra`` fields are merged in
    rather than replaced.

    Usage:
        log = RunLogger(logger, run.run_id)
        log.info("Processed 10 records", extra={"count": 10})
    """

    def __init__(self, logger: logging.Logger, run_id: str, **context: Any):
        super().__init__(logger, {"run_id": run_id, **context})

    @property
    def run_id(self) -> str:
        return self.extra["run_id"]

    def process(self, msg, kwargs):
        kwargs["extra"] = {**self.extra, **kwargs.get("extra", {})}
        return msg, kwargs


class log_stage:
    """
    Context manager timing one pipeline stage of a run

    Logs the start and the outcome of the stage with its duration and
    records the duration in the ``labflow_stage_duration_seconds`` histogram.
    Exceptions are logged and re-raised.

    Usage:
        with log_stage("process", run_log) as stage:
            ...
        stage.duration
    """

    def __init__(self, stage: str, logger: RunLogger, **extra_fields):
        self.stage = stage
        self.logger = logger
        self.extra_fields = extra_fields
        self.start_time = 0.0
        self.duration = 0.0

    def __enter__(self):
        self.start_time = time.perf_counter()
        self.logger.info(f"Starting stage: {self.stage}", extra={"stage": self.stage, **self.extra_fields})
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.duration = time.perf_counter() - self.start_time
        observe_stage(self.stage, self.duration)

        fields = {"stage": self.stage, "duration_seconds": round(self.duration, 3), **self.extra_fields}
        if exc_type is None:
            self.logger.info(f"Completed stage: {self.stage}", extra={**fields, "status": "ok"})
        else:
            self.logger.error(
                f"Stage failed: {self.stage}",
                extra={**fields, "status": "error", "error_type": exc_type.__name__},
                exc_info=True,
            )
        return False
