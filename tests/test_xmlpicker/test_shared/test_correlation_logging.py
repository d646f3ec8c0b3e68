"""Tests for correlation-aware logging."""

import logging

import pytest

from xmlpicker.shared.logging import CorrelationLogger, configure_logging, get_logger
from xmlpicker.shared.result import BuildStatistics


class TestCorrelationLogger:
    """Test suite for CorrelationLogger."""

    def test_records_carry_component_and_correlation_id(self, caplog):
        """Test every record gets the structured extras."""
        logger = get_logger("xmlpicker.test", "run-42", "unit")
        with caplog.at_level(logging.INFO, logger="xmlpicker.test"):
            logger.info("hello", extra={"file": "a.xml"})

        record = caplog.records[-1]
        assert record.getMessage() == "hello"
        assert record.component == "unit"
        assert record.correlation_id == "run-42"
        assert record.file == "a.xml"

    def test_component_defaults_to_module_name(self):
        """Test the component falls back to the last name segment."""
        logger = get_logger("xmlpicker.tree.builder")
        assert logger.component == "builder"
        assert logger.correlation_id is None

    def test_bind_adds_context(self, caplog):
        """Test bound context appears on records without mutating the parent."""
        base = CorrelationLogger("xmlpicker.test", "run-1", "unit")
        bound = base.bind(selector="/a/b")
        with caplog.at_level(logging.WARNING, logger="xmlpicker.test"):
            bound.warning("bound")
            base.warning("plain")

        bound_record, plain_record = caplog.records[-2:]
        assert bound_record.selector == "/a/b"
        assert bound_record.correlation_id == "run-1"
        assert not hasattr(plain_record, "selector")

    def test_is_debug_enabled(self, caplog):
        """Test the debug level probe."""
        logger = get_logger("xmlpicker.debugprobe")
        with caplog.at_level(logging.DEBUG, logger="xmlpicker.debugprobe"):
            assert logger.is_debug_enabled()
        with caplog.at_level(logging.ERROR, logger="xmlpicker.debugprobe"):
            assert not logger.is_debug_enabled()


class TestConfigureLogging:
    """Test command line logging setup."""

    def test_levels(self):
        """Test verbosity flags map to root levels."""
        root = logging.getLogger()
        previous = root.level
        try:
            configure_logging(verbose=True)
            assert root.level == logging.DEBUG
            configure_logging(quiet=True)
            assert root.level == logging.ERROR
            configure_logging()
            assert root.level == logging.WARNING
        finally:
            root.setLevel(previous)


class TestBuildStatistics:
    """Test suite for BuildStatistics."""

    def test_to_dict(self):
        """Test statistics serialization."""
        stats = BuildStatistics(tokens_consumed=10, elements_seen=4, matches_yielded=2)
        stats.finish()
        data = stats.to_dict()
        assert data["tokens_consumed"] == 10
        assert data["elements_seen"] == 4
        assert data["matches_yielded"] == 2
        assert data["processing_time_ms"] >= 0

    def test_finish_freezes_time(self):
        """Test that finishing twice keeps the first timestamp."""
        stats = BuildStatistics()
        stats.finish()
        first = stats.finished_at
        stats.finish()
        assert stats.finished_at == first
        assert stats.processing_time_ms == stats.processing_time_ms

    def test_tokens_per_second(self):
        """Test throughput over the frozen processing time."""
        stats = BuildStatistics(tokens_consumed=100, started_at=10.0, finished_at=12.0)
        assert stats.processing_time_ms == pytest.approx(2000.0)
        assert stats.tokens_per_second == pytest.approx(50.0)

    def test_tokens_per_second_without_elapsed_time(self):
        """Test a zero-length run reports no throughput."""
        stats = BuildStatistics(tokens_consumed=5, started_at=3.0, finished_at=3.0)
        assert stats.tokens_per_second == 0.0
