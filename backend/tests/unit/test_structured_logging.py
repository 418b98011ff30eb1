"""
Unit tests for the structured logging module.
"""

import json
import logging

import sys
import os

# Add backend to path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.dirname(os.path.abspath(__file__)))))

from structured_logging import (
    JSONFormatter,
    LogContext,
    RotatingJSONFileHandler,
    generate_request_id,
    get_context,
)


def _record(msg="Safe time calculated", level=logging.INFO, **extra):
    record = logging.LogRecord("safe_exposure_calculator", level, __file__, 10, msg, None, None)
    for key, value in extra.items():
        setattr(record, key, value)
    return record


class TestJSONFormatter:
    """Tests for JSON log output."""

    def test_basic_fields(self):
        formatter = JSONFormatter(service_name="suntime-test", environment="test")
        entry = json.loads(formatter.format(_record()))
        assert entry["message"] == "Safe time calculated"
        assert entry["level"] == "INFO"
        assert entry["logger"] == "safe_exposure_calculator"
        assert entry["service"] == "suntime-test"
        assert entry["environment"] == "test"

    def test_extra_fields(self):
        entry = json.loads(JSONFormatter().format(_record(minutes=15, uv_level="High")))
        assert entry["extra"]["minutes"] == 15
        assert entry["extra"]["uv_level"] == "High"

    def test_masks_sensitive_fields(self):
        entry = json.loads(JSONFormatter().format(_record(api_key="abc123")))
        assert entry["extra"]["api_key"] == "***MASKED***"

    def test_masks_request_credentials(self):
        entry = json.loads(JSONFormatter().format(_record(authorization="Bearer x", cookie="session=1")))
        assert entry["extra"]["authorization"] == "***MASKED***"
        assert entry["extra"]["cookie"] == "***MASKED***"

    def test_engine_fields_are_not_masked(self):
        record = _record(vitamin_d=15.0, uv_index=6, days_remaining=20, session_token_count=3)
        entry = json.loads(JSONFormatter().format(record))
        assert entry["extra"]["vitamin_d"] == 15.0
        assert entry["extra"]["uv_index"] == 6
        assert entry["extra"]["days_remaining"] == 20
        assert entry["extra"]["session_token_count"] == 3

    def test_error_records_include_source(self):
        entry = json.loads(JSONFormatter().format(_record(level=logging.ERROR)))
        assert entry["source"]["line"] == 10

    def test_request_context_is_attached(self):
        with LogContext(request_id="req-1", correlation_id="corr-1"):
            entry = json.loads(JSONFormatter().format(_record()))
        assert entry["request_id"] == "req-1"
        assert entry["correlation_id"] == "corr-1"


class TestLogContext:
    """Tests for request context tracking."""

    def test_context_is_restored(self):
        with LogContext(request_id="outer"):
            with LogContext(request_id="inner"):
                assert get_context()["request_id"] == "inner"
            assert get_context()["request_id"] == "outer"
        assert "request_id" not in get_context()

    def test_request_ids_are_unique(self):
        assert generate_request_id() != generate_request_id()
        assert len(generate_request_id()) == 12


class TestFileHandler:
    """Tests for the rotating NDJSON file handler."""

    def test_writes_one_json_object_per_line(self, tmp_path):
        log_file = tmp_path / "logs" / "suntime.json"
        handler = RotatingJSONFileHandler(str(log_file))
        handler.setFormatter(JSONFormatter())
        handler.emit(_record("first"))
        handler.emit(_record("second"))
        handler.close()

        lines = log_file.read_text().strip().splitlines()
        assert [json.loads(line)["message"] for line in lines] == ["first", "second"]
