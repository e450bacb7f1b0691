import io
import json
import logging
import sys
import pytest
from csv_categorizer.core.logging import (
    CorrelationIdFilter,
    StructuredFormatter,
    correlation_id,
    get_logger,
    log_with_context,
    set_correlation_id,
    setup_logging
)


def make_record(msg="Test message", level=logging.INFO, exc_info=None):
    return logging.LogRecord(
        name="test.logger",
        level=level,
        pathname="",
        lineno=0,
        msg=msg,
        args=(),
        exc_info=exc_info
    )


@pytest.fixture
def no_correlation_id():
    token = correlation_id.set(None)
    yield
    correlation_id.reset(token)


@pytest.fixture
def captured():
    """Logger writing JSON lines to a buffer through the correlation filter"""
    stream = io.StringIO()
    handler = logging.StreamHandler(stream)
    handler.setFormatter(StructuredFormatter())
    handler.addFilter(CorrelationIdFilter())

    logger = get_logger("test.captured")
    logger.addHandler(handler)
    logger.setLevel(logging.INFO)
    logger.propagate = False
    yield logger, stream
    logger.removeHandler(handler)
    logger.propagate = True


def lines(stream):
    return [json.loads(line) for line in stream.getvalue().strip().split("\n") if line]


class TestStructuredFormatter:
    """Test JSON rendering of log records"""

    def test_basic_fields(self):
        log_data = json.loads(StructuredFormatter().format(make_record()))

        assert "timestamp" in log_data
        assert log_data["level"] == "INFO"
        assert log_data["service"] == "categorizer-api"
        assert log_data["logger"] == "test.logger"
        assert log_data["message"] == "Test message"
        assert "correlation_id" not in log_data

    def test_custom_service_name(self):
        log_data = json.loads(StructuredFormatter("batch-worker").format(make_record()))
        assert log_data["service"] == "batch-worker"

    def test_exception_included(self):
        try:
            raise ValueError("bad payload")
        except ValueError:
            record = make_record(level=logging.ERROR, exc_info=sys.exc_info())

        log_data = json.loads(StructuredFormatter().format(record))
        assert "ValueError: bad payload" in log_data["exception"]


class TestCorrelationId:
    """Test correlation ID propagation"""

    def test_filter_tags_record(self, no_correlation_id):
        set_correlation_id("test-123")
        record = make_record()

        assert CorrelationIdFilter().filter(record) is True
        log_data = json.loads(StructuredFormatter().format(record))
        assert log_data["correlation_id"] == "test-123"

    def test_generated_correlation_id(self, no_correlation_id):
        corr_id = set_correlation_id()
        assert len(corr_id) == 36
        assert correlation_id.get() == corr_id

    def test_untagged_without_correlation_id(self, no_correlation_id, captured):
        logger, stream = captured
        logger.info("No request in flight")

        assert "correlation_id" not in lines(stream)[0]


class TestLogWithContext:
    """Test logging with extra context fields"""

    def test_context_fields_merged(self, no_correlation_id, captured):
        logger, stream = captured
        set_correlation_id("corr-7")

        log_with_context(logger, "info", "Chunk dispatched", chunk_index=2, chunk_size=100)

        log_data = lines(stream)[0]
        assert log_data["message"] == "Chunk dispatched"
        assert log_data["chunk_index"] == 2
        assert log_data["chunk_size"] == 100
        assert log_data["correlation_id"] == "corr-7"

    def test_respects_level(self, captured):
        logger, stream = captured
        logger.setLevel(logging.WARNING)

        log_with_context(logger, "debug", "Dropped", detail="x")
        log_with_context(logger, "warning", "Kept", detail="y")

        output = lines(stream)
        assert len(output) == 1
        assert output[0]["message"] == "Kept"
        assert output[0]["level"] == "WARNING"

    def test_exc_info(self, captured):
        logger, stream = captured
        try:
            raise RuntimeError("service down")
        except RuntimeError:
            log_with_context(logger, "error", "Call failed", exc_info=True, attempt=1)

        log_data = lines(stream)[0]
        assert log_data["attempt"] == 1
        assert "RuntimeError: service down" in log_data["exception"]


class TestSetupLogging:
    """Test root logger configuration"""

    def test_installs_single_json_handler(self):
        root = logging.getLogger()
        saved_handlers, saved_level = root.handlers[:], root.level
        try:
            setup_logging("debug")

            assert root.level == logging.DEBUG
            assert len(root.handlers) == 1
            handler = root.handlers[0]
            assert isinstance(handler.formatter, StructuredFormatter)
            assert any(isinstance(f, CorrelationIdFilter) for f in handler.filters)
            assert logging.getLogger("httpx").level == logging.WARNING
        finally:
            root.handlers = saved_handlers
            root.setLevel(saved_level)
