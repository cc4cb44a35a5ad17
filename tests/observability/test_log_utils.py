"""Tests for structured logging helpers and correlation IDs."""

import logging

from zoning_search.observability import get_correlation_id, set_correlation_id
from zoning_search.observability.correlation import CorrelationIdFilter, clear_correlation_id
from zoning_search.observability.log_utils import (
    log_exception_with_context,
    log_with_context,
    safe_log_value,
)


class TestSafeLogValue:
    def test_summarizes_collections(self) -> None:
        """Should never dump vectors or payloads into a log line."""
        assert safe_log_value([0.1] * 1024) == "list(1024 items)"
        assert safe_log_value({"result": {}, "usage": {}}) == "dict(2 keys)"

    def test_truncates_long_strings(self) -> None:
        value = safe_log_value("x" * 600, max_length=100)

        assert value.startswith("x" * 100)
        assert value.endswith("(truncated, 600 total)")

    def test_none(self) -> None:
        assert safe_log_value(None) == "None"


class TestContextLogging:
    def test_log_with_context(self, caplog) -> None:
        logger = logging.getLogger("zoning_search.tests.log_utils")

        with caplog.at_level(logging.INFO, logger=logger.name):
            log_with_context(logger, logging.INFO, "Stored chunks", file_number="2023-005555ENV", count=12)

        record = caplog.records[-1]
        assert record.getMessage() == "Stored chunks"
        assert record.file_number == "2023-005555ENV"
        assert record.count == "12"

    def test_warning_has_no_traceback(self, caplog) -> None:
        logger = logging.getLogger("zoning_search.tests.log_utils")

        with caplog.at_level(logging.WARNING, logger=logger.name):
            log_exception_with_context(
                logger, "Skipping document", ValueError("bad pdf"), level=logging.WARNING, source_url="u"
            )

        record = caplog.records[-1]
        assert record.levelno == logging.WARNING
        assert record.error_type == "ValueError"
        assert record.error_msg == "bad pdf"
        assert record.exc_info is None

    def test_error_has_traceback(self, caplog) -> None:
        logger = logging.getLogger("zoning_search.tests.log_utils")

        with caplog.at_level(logging.ERROR, logger=logger.name):
            log_exception_with_context(logger, "Run failed", RuntimeError("boom"))

        assert caplog.records[-1].exc_info is not None


class TestCorrelationId:
    def test_set_and_clear(self) -> None:
        assert set_correlation_id("abc") == "abc"
        assert get_correlation_id() == "abc"

        clear_correlation_id()

        assert get_correlation_id() == ""

    def test_generated_when_missing(self) -> None:
        value = set_correlation_id()
        try:
            assert len(value) == 32
        finally:
            clear_correlation_id()

    def test_filter_stamps_records(self) -> None:
        clear_correlation_id()
        record = logging.LogRecord("x", logging.INFO, __file__, 1, "msg", None, None)

        assert CorrelationIdFilter().filter(record) is True
        assert record.correlation_id == "-"
