"""Tests for logging utilities."""

import logging
from pathlib import Path
from unittest.mock import MagicMock

import pytest
import structlog

from bezierops.config import BezierOpsSettings, LoggingConfig
from bezierops.core import path_union
from bezierops.domain import rectangle
from bezierops.utils import OperationLogger, OperationStats, configure_logging, get_logger


@pytest.fixture
def restore_logging():
    """Undo global logging configuration made by a test."""
    root = logging.getLogger()
    handlers = list(root.handlers)
    level = root.level
    yield
    for handler in root.handlers[:]:
        if handler not in handlers:
            root.removeHandler(handler)
            handler.close()
    root.setLevel(level)
    structlog.reset_defaults()


class TestOperationStats:
    """Tests for OperationStats class."""

    def test_duration(self) -> None:
        """Test duration from start and end times."""
        stats = OperationStats(start_time=10.0, end_time=10.25)
        assert stats.duration_ms == pytest.approx(250.0)

    def test_duration_unfinished(self) -> None:
        """Test duration before the operation finished."""
        assert OperationStats(start_time=10.0).duration_ms == 0.0


class TestOperationLogger:
    """Tests for OperationLogger class."""

    def test_start_resets_stats(self) -> None:
        """Test that each operation starts with fresh statistics."""
        op_logger = OperationLogger(MagicMock())
        op_logger.log_segmentation(3, 2, 0, 10, 1.0)
        op_logger.log_operation_start("intersect", 4, 4)
        assert op_logger.stats.operation == "intersect"
        assert op_logger.stats.arcs == 0

    def test_segmentation_accumulates(self) -> None:
        """Test that segmentation counts are recorded."""
        mock_logger = MagicMock()
        op_logger = OperationLogger(mock_logger)
        op_logger.log_operation_start("union", 4, 4)
        op_logger.log_segmentation(
            curve_pairs=10, intersections=2, overlaps=1, arcs=12, duration_ms=1.234
        )

        assert op_logger.stats.curve_pairs == 10
        assert op_logger.stats.intersections == 2
        assert op_logger.stats.overlaps == 1
        assert op_logger.stats.arcs == 12
        assert mock_logger.debug.call_args.kwargs["duration_ms"] == 1.23

    def test_classification_logs_label_counts(self) -> None:
        """Test that label counts are passed as structured fields."""
        mock_logger = MagicMock()
        op_logger = OperationLogger(mock_logger)
        op_logger.log_classification({"inside": 2, "outside": 4}, 0.5)

        kwargs = mock_logger.debug.call_args.kwargs
        assert kwargs["inside"] == 2
        assert kwargs["outside"] == 4
        assert "classification" in op_logger.stats.stage_ms

    def test_error(self) -> None:
        """Test error logging fields."""
        mock_logger = MagicMock()
        OperationLogger(mock_logger).log_operation_error("subtract", ValueError("bad"))
        mock_logger.error.assert_called_once_with(
            "Operation failed",
            operation="subtract",
            error="bad",
            error_type="ValueError",
        )


class TestConfigureLogging:
    """Tests for logger setup."""

    def test_get_logger_without_configuration(self) -> None:
        """Test that an unconfigured logger can be used safely."""
        logger = get_logger("bezierops.test")
        logger.debug("quiet message", value=1)

    def test_configure_with_file(self, tmp_path: Path, restore_logging) -> None:
        """Test that messages reach the log file."""
        log_file = tmp_path / "bezierops.log"
        logger = configure_logging(log_file=log_file, console_level="ERROR")
        logger.debug("Segmenting", arcs=3)

        for handler in logging.getLogger().handlers:
            handler.flush()
        content = log_file.read_text(encoding="utf-8")
        assert "Logging initialized" in content
        assert "Segmenting" in content

    def test_quiet_console(self, restore_logging) -> None:
        """Test that quiet mode raises the console threshold."""
        configure_logging(quiet=True)
        console = logging.getLogger().handlers[-1]
        assert console.level == logging.ERROR

    def test_reconfigure_replaces_handlers(self, tmp_path: Path, restore_logging) -> None:
        """Test that configuring twice does not duplicate handlers."""
        root = logging.getLogger()
        configure_logging(log_file=tmp_path / "first.log")
        count = len(root.handlers)

        configure_logging(log_file=tmp_path / "second.log")
        configure_logging()

        assert len(root.handlers) == count - 1
        assert not any(
            isinstance(h, logging.FileHandler) and h.baseFilename.endswith("first.log")
            for h in root.handlers
        )

    def test_repeated_operations_keep_handler_count(self, tmp_path: Path, restore_logging) -> None:
        """Test that every processor with logging enabled shares one set of handlers."""
        root = logging.getLogger()
        settings = BezierOpsSettings(
            logging=LoggingConfig(enabled=True, log_file=tmp_path / "ops.log")
        )
        path_union(rectangle(0, 0, 2, 2), rectangle(1, 1, 2, 2), settings=settings)
        count = len(root.handlers)

        for _ in range(3):
            path_union(rectangle(0, 0, 2, 2), rectangle(1, 1, 2, 2), settings=settings)

        assert len(root.handlers) == count
