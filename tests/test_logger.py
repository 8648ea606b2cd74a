"""Tests for logging system."""

import json
import logging
import sys
from io import StringIO

import pytest

from src.xsdgraph import logger as logger_module
from src.xsdgraph.loader import SchemaLoader
from src.xsdgraph.logger import (
    LogLevel, StructuredFormatter, XSDLogger, create_logger
)


def make_record(level=logging.INFO, msg="Test message"):
    return logging.LogRecord(
        name="test.logger",
        level=level,
        pathname="",
        lineno=0,
        msg=msg,
        args=(),
        exc_info=None
    )


class TestLogLevel:
    """Tests for LogLevel enum."""

    def test_log_level_values(self):
        assert LogLevel.DEBUG == "debug"
        assert LogLevel.INFO == "info"
        assert LogLevel.WARN == "warn"
        assert LogLevel.ERROR == "error"


class TestStructuredFormatter:
    """Tests for StructuredFormatter class."""

    def test_basic_formatting(self):
        formatted = StructuredFormatter().format(make_record())
        log_data = json.loads(formatted)

        assert log_data["level"] == "info"
        assert log_data["component"] == "xsdgraph"
        assert log_data["message"] == "Test message"
        assert log_data["timestamp"].endswith("Z")

    def test_formatting_with_component(self):
        record = make_record(logging.ERROR, "Error message")
        record.component = "loader"

        log_data = json.loads(StructuredFormatter().format(record))

        assert log_data["component"] == "loader"

    def test_formatting_with_optional_fields(self):
        record = make_record(logging.DEBUG, "Debug message")
        record.schema = "http://example.com/a.xsd"
        record.operationId = "12345"
        record.localPath = "/mirror/example.com/a.xsd"
        record.unrelated = "dropped"

        log_data = json.loads(StructuredFormatter().format(record))

        assert log_data["schema"] == "http://example.com/a.xsd"
        assert log_data["operationId"] == "12345"
        assert log_data["localPath"] == "/mirror/example.com/a.xsd"
        assert "unrelated" not in log_data

    def test_formatting_with_extra_fields(self):
        record = make_record()
        record.extra = {"namespace": "urn:a", "schemas": 3}

        log_data = json.loads(StructuredFormatter().format(record))

        assert log_data["namespace"] == "urn:a"
        assert log_data["schemas"] == 3


class TestXSDLogger:
    """Tests for XSDLogger class."""

    @pytest.fixture
    def stream(self):
        return StringIO()

    @pytest.fixture
    def test_logger(self, stream):
        test_logger = XSDLogger(level=LogLevel.DEBUG, component="test")

        # Replace the handler with one writing to our stream
        for handler in test_logger.logger.handlers[:]:
            test_logger.logger.removeHandler(handler)

        handler = logging.StreamHandler(stream)
        handler.setFormatter(StructuredFormatter())
        test_logger.logger.addHandler(handler)
        return test_logger

    def test_logger_creation(self):
        xsd_logger = XSDLogger()

        assert xsd_logger.component == "xsdgraph"
        assert xsd_logger.operation_id
        assert xsd_logger.logger.level == logging.INFO
        assert not xsd_logger.logger.propagate

    def test_logger_creation_with_params(self):
        xsd_logger = XSDLogger(level=LogLevel.DEBUG, component="parser")

        assert xsd_logger.component == "parser"
        assert xsd_logger.logger.name == "xsdgraph.parser"
        assert xsd_logger.logger.level == logging.DEBUG

    def test_destination(self):
        to_stdout = XSDLogger(component="out", destination="stdout")
        to_stderr = XSDLogger(component="err")

        assert to_stdout.logger.handlers[0].stream is sys.stdout
        assert to_stderr.logger.handlers[0].stream is sys.stderr

    def test_child_shares_operation(self):
        parent = XSDLogger(level=LogLevel.DEBUG, component="loader", destination="stdout")

        child = parent.child("fetcher")

        assert child.component == "fetcher"
        assert child.operation_id == parent.operation_id
        assert child.logger.level == logging.DEBUG
        assert child.logger.handlers[0].stream is sys.stdout

    def test_loader_components_share_operation(self, config):
        loader = SchemaLoader(config=config)

        assert loader.fetcher.logger.operation_id == loader.logger.operation_id
        assert loader.parser.logger.operation_id == loader.logger.operation_id

    def test_recreating_does_not_duplicate_handlers(self):
        XSDLogger(component="dup")
        xsd_logger = XSDLogger(component="dup")

        assert len(xsd_logger.logger.handlers) == 1

    def test_debug_logging(self, test_logger, stream):
        test_logger.debug("Debug message", namespace="urn:a")

        log_data = json.loads(stream.getvalue())

        assert log_data["level"] == "debug"
        assert log_data["message"] == "Debug message"
        assert log_data["component"] == "test"
        assert log_data["namespace"] == "urn:a"

    def test_info_logging(self, test_logger, stream):
        test_logger.info("Info message")

        log_data = json.loads(stream.getvalue())

        assert log_data["level"] == "info"
        assert log_data["message"] == "Info message"

    def test_warn_logging(self, test_logger, stream):
        test_logger.warn("Warning message")

        log_data = json.loads(stream.getvalue())

        assert log_data["level"] == "warning"

    def test_error_logging(self, test_logger, stream):
        test_logger.error("Error message", error="boom")

        log_data = json.loads(stream.getvalue())

        assert log_data["level"] == "error"
        assert log_data["error"] == "boom"

    def test_level_filtering(self, stream):
        xsd_logger = XSDLogger(level=LogLevel.ERROR, component="quiet")
        xsd_logger.logger.handlers[0].setStream(stream)

        xsd_logger.info("hidden")
        xsd_logger.error("shown")

        lines = stream.getvalue().strip().split('\n')
        assert len(lines) == 1
        assert json.loads(lines[0])["message"] == "shown"

    def test_schema_event_logging(self, test_logger, stream):
        test_logger.schema_event("cached", "http://example.com/a.xsd", size=120)

        log_data = json.loads(stream.getvalue())

        assert log_data["level"] == "debug"
        assert log_data["message"] == "Schema cached"
        assert log_data["schema"] == "http://example.com/a.xsd"
        assert log_data["size"] == 120

    def test_performance_metric_logging(self, test_logger, stream):
        test_logger.performance_metric("load_time", 2.5, "seconds")

        log_data = json.loads(stream.getvalue())

        assert log_data["message"] == "Performance: load_time"
        assert log_data["metricName"] == "load_time"
        assert log_data["value"] == 2.5
        assert log_data["unit"] == "seconds"

    def test_operation_id_consistency(self, test_logger, stream):
        test_logger.info("First message")
        test_logger.info("Second message")

        lines = stream.getvalue().strip().split('\n')

        assert json.loads(lines[0])["operationId"] == json.loads(lines[1])["operationId"]


class TestCreateLogger:
    """Tests for create_logger function."""

    def test_create_logger_default(self):
        xsd_logger = create_logger()

        assert isinstance(xsd_logger, XSDLogger)
        assert xsd_logger.component == "xsdgraph"

    def test_create_logger_with_params(self):
        xsd_logger = create_logger(level=LogLevel.ERROR, component="fetcher")

        assert xsd_logger.component == "fetcher"
        assert xsd_logger.logger.level == logging.ERROR

    def test_create_logger_accepts_level_string(self):
        xsd_logger = create_logger(level="warn", component="strings")

        assert xsd_logger.logger.level == logging.WARN


def test_import_creates_no_logger():
    # loggers are only built by the components that use them
    assert not hasattr(logger_module, "logger")
