"""
Tests for logging configuration.
"""

import json
import logging

from adaptive_cat.config import Settings
from adaptive_cat.logging_config import JSONFormatter, build_logging_config


def _record(level=logging.INFO, **extra) -> logging.LogRecord:
    record = logging.LogRecord(
        name="adaptive_cat.engine",
        level=level,
        pathname="engine.py",
        lineno=42,
        msg="Stopping attempt: %s",
        args=("calculated error within limits",),
        exc_info=None,
    )
    for key, value in extra.items():
        setattr(record, key, value)
    return record


class TestJSONFormatter:
    def test_basic_fields(self):
        entry = json.loads(JSONFormatter().format(_record()))
        assert entry["level"] == "INFO"
        assert entry["logger"] == "adaptive_cat.engine"
        assert entry["message"] == "Stopping attempt: calculated error within limits"
        assert "timestamp" in entry
        assert "source" not in entry

    def test_correlation_fields(self):
        entry = json.loads(JSONFormatter().format(_record(attempt_id=12, examinee_id=3)))
        assert entry["attempt_id"] == 12
        assert entry["examinee_id"] == 3

    def test_errors_include_source(self):
        entry = json.loads(JSONFormatter().format(_record(level=logging.ERROR)))
        assert entry["source"] == "engine.py:42"


class TestBuildLoggingConfig:
    def test_development_uses_plain_formatter(self):
        config = build_logging_config(Settings(ENV="development", LOG_LEVEL="DEBUG"))
        assert config["handlers"]["console"]["formatter"] == "default"
        assert config["loggers"]["adaptive_cat"]["level"] == logging.DEBUG

    def test_production_uses_json_formatter(self):
        config = build_logging_config(Settings(ENV="production"))
        assert config["handlers"]["console"]["formatter"] == "json"

    def test_unknown_level_falls_back_to_info(self):
        config = build_logging_config(Settings(LOG_LEVEL="chatty"))
        assert config["root"]["level"] == logging.INFO
