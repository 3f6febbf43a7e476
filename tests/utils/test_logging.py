"""
Unit tests for logging setup module.

Covers the JSON formatter, environment-specific handler setup and the
performance logging decorator.
"""

import json
import logging
import logging.handlers
import sys
import tempfile
from pathlib import Path

import pytest

from geojoin.utils.logging_setup import (
    setup_logging,
    get_logger,
    log_performance,
    JSONFormatter
)


def make_record(msg="Join finished", level=logging.INFO, exc_info=None):
    record = logging.LogRecord(
        name="modules.overlay_join.join_engine",
        level=level,
        pathname="/path/to/join_engine.py",
        lineno=87,
        msg=msg,
        args=(),
        exc_info=exc_info
    )
    record.funcName = "run"
    record.module = "join_engine"
    return record


class TestJSONFormatter:
    """Test suite for JSONFormatter class."""

    def test_standard_fields(self):
        """Standard record attributes map onto the JSON keys."""
        parsed = json.loads(JSONFormatter(datefmt='%Y-%m-%d %H:%M:%S').format(make_record()))

        assert parsed["level"] == "INFO"
        assert parsed["logger"] == "modules.overlay_join.join_engine"
        assert parsed["thread"] == "MainThread"
        assert parsed["message"] == "Join finished"
        assert parsed["module"] == "join_engine"
        assert parsed["function"] == "run"
        assert parsed["line"] == 87
        assert "timestamp" in parsed

    def test_exception_is_included(self):
        try:
            raise ValueError("TopologyException: side location conflict")
        except ValueError:
            record = make_record("Overlay failed", logging.ERROR, sys.exc_info())

        parsed = json.loads(JSONFormatter().format(record))

        assert parsed["level"] == "ERROR"
        assert "ValueError" in parsed["exception"]

    def test_extra_fields_are_included(self):
        record = make_record()
        record.block_id = "060750101001000"
        record.accepted = 3

        parsed = json.loads(JSONFormatter().format(record))

        assert parsed["block_id"] == "060750101001000"
        assert parsed["accepted"] == 3

    def test_non_serializable_extra_is_stringified(self):
        """Extra values without a JSON form fall back to str()."""
        record = make_record()
        record.bbox_owner = object()

        parsed = json.loads(JSONFormatter().format(record))

        assert parsed["bbox_owner"].startswith("<object object")

    def test_reserved_attributes_are_not_duplicated(self):
        record = make_record()
        record.taskName = None

        parsed = json.loads(JSONFormatter().format(record))

        assert "taskName" not in parsed
        assert "msg" not in parsed
        assert "args" not in parsed


class TestSetupLogging:
    """Test suite for setup_logging function."""

    def setup_method(self):
        """Reset logging configuration before each test."""
        logger = logging.getLogger()
        logger.handlers.clear()
        logger.setLevel(logging.WARNING)

    def test_development_uses_plain_console_formatter(self):
        setup_logging(environment="development", log_level="DEBUG")

        logger = logging.getLogger()
        assert logger.level == logging.DEBUG
        assert len(logger.handlers) == 1
        handler = logger.handlers[0]
        assert isinstance(handler, logging.StreamHandler)
        assert handler.stream is sys.stdout
        assert not isinstance(handler.formatter, JSONFormatter)
        assert "%(threadName)s" in handler.formatter._fmt

    def test_production_uses_json_formatter(self):
        setup_logging(environment="production", log_level="INFO")

        logger = logging.getLogger()
        assert logger.level == logging.INFO
        assert isinstance(logger.handlers[0].formatter, JSONFormatter)

    def test_log_dir_adds_rotating_file_handler(self):
        with tempfile.TemporaryDirectory() as temp_dir:
            setup_logging(environment="development", log_level="INFO", log_dir=temp_dir)

            logger = logging.getLogger()
            file_handlers = [h for h in logger.handlers
                             if isinstance(h, logging.handlers.RotatingFileHandler)]
            assert len(logger.handlers) == 2
            assert len(file_handlers) == 1
            assert (Path(temp_dir) / "geojoin_development.log").exists()

            for handler in file_handlers:
                handler.close()

    def test_log_dir_is_created(self):
        with tempfile.TemporaryDirectory() as temp_dir:
            log_dir = Path(temp_dir) / "nested" / "logs"
            setup_logging(environment="production", log_dir=str(log_dir))

            assert log_dir.is_dir()
            for handler in logging.getLogger().handlers:
                handler.close()

    def test_existing_handlers_are_replaced(self):
        logger = logging.getLogger()
        dummy_handler = logging.StreamHandler()
        logger.addHandler(dummy_handler)

        setup_logging(environment="development")

        assert len(logger.handlers) == 1
        assert logger.handlers[0] is not dummy_handler

    def test_shapely_loggers_are_quietened(self):
        setup_logging(environment="development", log_level="DEBUG")

        assert logging.getLogger("shapely").level == logging.WARNING
        assert logging.getLogger("shapely.geos").level == logging.WARNING

    def test_invalid_level_raises(self):
        with pytest.raises(AttributeError):
            setup_logging(environment="development", log_level="VERBOSE")


class TestGetLogger:
    """Test suite for get_logger function."""

    def test_returns_named_logger(self):
        logger = get_logger("modules.overlay_join")
        assert isinstance(logger, logging.Logger)
        assert logger.name == "modules.overlay_join"
        assert get_logger("modules.overlay_join") is logger


class TestLogPerformance:
    """Test suite for log_performance decorator."""

    def test_success_logs_start_and_completion(self, caplog):
        @log_performance
        def build_index():
            return "built"

        with caplog.at_level(logging.INFO):
            result = build_index()

        assert result == "built"
        assert "Starting build_index" in caplog.text
        assert "Completed build_index" in caplog.text

    def test_failure_is_logged_and_reraised(self, caplog):
        @log_performance
        def build_index():
            raise ValueError("empty block set")

        with caplog.at_level(logging.INFO):
            with pytest.raises(ValueError):
                build_index()

        assert "Failed build_index" in caplog.text
        assert "empty block set" in caplog.text

    def test_arguments_are_passed_through(self):
        @log_performance
        def ratio(overlap, area, scale=1.0):
            return overlap / area * scale

        assert ratio(1.0, 100.0, scale=100.0) == 1.0

    def test_metadata_is_preserved(self):
        @log_performance
        def join():
            """Run the join."""

        assert join.__name__ == "join"
        assert join.__doc__ == "Run the join."


class TestLoggingIntegration:
    """Integration tests for logging components."""

    def setup_method(self):
        logging.getLogger().handlers.clear()

    def test_config_loader_uses_module_logger(self):
        from geojoin.config import ConfigLoader

        config_loader = ConfigLoader()

        assert config_loader.logger.name == "geojoin.config.config_loader"

    def test_json_file_output_is_parseable(self):
        with tempfile.TemporaryDirectory() as temp_dir:
            setup_logging(environment="production", log_level="INFO", log_dir=temp_dir)

            get_logger("modules.overlay_join").info("Join completed", extra={"total": 12})
            for handler in logging.getLogger().handlers:
                handler.flush()

            log_file = Path(temp_dir) / "geojoin_production.log"
            parsed = json.loads(log_file.read_text().strip().splitlines()[-1])
            assert parsed["message"] == "Join completed"
            assert parsed["total"] == 12

            for handler in logging.getLogger().handlers:
                handler.close()
