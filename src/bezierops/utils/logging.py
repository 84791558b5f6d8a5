"""Logging utilities for bezierops."""

import logging
import sys
from dataclasses import dataclass, field
from pathlib import Path

import structlog

# Handlers installed by the last configure_logging() call
_installed_handlers: list[logging.Handler] = []


@dataclass
class OperationStats:
    """Statistics from one boolean operation."""

    operation: str = ""
    curve_pairs: int = 0
    intersections: int = 0
    overlaps: int = 0
    arcs: int = 0
    selected_arcs: int = 0
    subpaths: int = 0
    stage_ms: dict[str, float] = field(default_factory=dict)
    start_time: float | None = None
    end_time: float | None = None

    @property
    def duration_ms(self) -> float:
        """Calculate operation duration."""
        if self.start_time and self.end_time:
            return (self.end_time - self.start_time) * 1000.0
        return 0.0


def configure_logging(
    log_file: Path | None = None,
    console_level: str = "WARNING",
    file_level: str = "DEBUG",
    quiet: bool = False,
) -> structlog.stdlib.BoundLogger:
    """Configure dual-output structured logging.

    Logging is opt-in: the library never installs handlers on import.
    Calling this again replaces the handlers installed by the previous call,
    so repeated configuration never duplicates output.

    Args:
        log_file: Path to log file (no file output if None)
        console_level: Logging level for console output
        file_level: Logging level for file output
        quiet: If True, suppress console output except errors

    Returns:
        Configured structlog logger
    """
    root_logger = logging.getLogger()
    root_logger.setLevel(logging.DEBUG)

    for handler in _installed_handlers:
        root_logger.removeHandler(handler)
        handler.close()
    _installed_handlers.clear()

    if log_file is not None:
        file_handler = logging.FileHandler(log_file, encoding="utf-8")
        file_handler.setLevel(getattr(logging, file_level.upper()))
        file_handler.setFormatter(
            logging.Formatter("%(asctime)s | %(levelname)-8s | %(name)s | %(message)s")
        )
        root_logger.addHandler(file_handler)
        _installed_handlers.append(file_handler)

    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setLevel(logging.ERROR if quiet else getattr(logging, console_level.upper()))
    console_handler.setFormatter(logging.Formatter("%(message)s"))
    root_logger.addHandler(console_handler)
    _installed_handlers.append(console_handler)

    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.stdlib.PositionalArgumentsFormatter(),
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.UnicodeDecoder(),
            structlog.processors.JSONRenderer(),
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    logger = structlog.get_logger("bezierops")
    logger.info(
        "Logging initialized",
        log_file=str(log_file) if log_file else None,
        level=file_level if log_file else console_level,
    )

    return logger


def get_logger(name: str) -> structlog.stdlib.BoundLogger:
    """Get a structured logger for a module.

    When configure_logging() has not been called, the stdlib logger is
    wrapped directly so messages follow the host application's logging
    setup (silent below WARNING by default).

    Args:
        name: Logger name, usually __name__

    Returns:
        structlog logger bound to the stdlib logger of that name
    """
    if structlog.is_configured():
        return structlog.get_logger(name)
    return structlog.wrap_logger(
        logging.getLogger(name),
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_log_level,
            structlog.processors.format_exc_info,
            structlog.processors.KeyValueRenderer(key_order=["event"]),
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
    )


class OperationLogger:
    """Logger for tracking boolean operation stages and statistics."""

    def __init__(self, logger: structlog.stdlib.BoundLogger) -> None:
        self._logger = logger
        self._stats = OperationStats()

    def log_operation_start(
        self,
        operation: str,
        subject_curves: int,
        clip_curves: int,
    ) -> None:
        """Log start of an operation and reset statistics."""
        self._stats = OperationStats(operation=operation)
        self._logger.debug(
            "Operation started",
            operation=operation,
            subject_curves=subject_curves,
            clip_curves=clip_curves,
        )

    def log_shortcut(self, operation: str, reason: str) -> None:
        """Log an operation answered without running the pipeline."""
        self._logger.debug("Operation short-circuited", operation=operation, reason=reason)

    def log_segmentation(
        self,
        curve_pairs: int,
        intersections: int,
        overlaps: int,
        arcs: int,
        duration_ms: float,
    ) -> None:
        """Log segmentation results."""
        self._logger.debug(
            "Paths segmented",
            curve_pairs=curve_pairs,
            intersections=intersections,
            overlaps=overlaps,
            arcs=arcs,
            duration_ms=round(duration_ms, 2),
        )
        self._stats.curve_pairs += curve_pairs
        self._stats.intersections += intersections
        self._stats.overlaps += overlaps
        self._stats.arcs += arcs
        self._stats.stage_ms["segmentation"] = duration_ms

    def log_classification(self, labels: dict[str, int], duration_ms: float) -> None:
        """Log arc classification counts."""
        self._logger.debug(
            "Arcs classified",
            duration_ms=round(duration_ms, 2),
            **labels,
        )
        self._stats.stage_ms["classification"] = duration_ms

    def log_reassembly(self, selected_arcs: int, subpaths: int, duration_ms: float) -> None:
        """Log boundary reassembly results."""
        self._logger.debug(
            "Boundary reassembled",
            selected_arcs=selected_arcs,
            subpaths=subpaths,
            duration_ms=round(duration_ms, 2),
        )
        self._stats.selected_arcs += selected_arcs
        self._stats.subpaths += subpaths
        self._stats.stage_ms["reassembly"] = duration_ms

    def log_operation_complete(self, operation: str, subpaths: int, duration_ms: float) -> None:
        """Log successful completion of an operation."""
        self._logger.info(
            "Operation complete",
            operation=operation,
            subpaths=subpaths,
            duration_ms=round(duration_ms, 2),
        )

    def log_operation_error(self, operation: str, error: Exception) -> None:
        """Log an operation failure."""
        self._logger.error(
            "Operation failed",
            operation=operation,
            error=str(error),
            error_type=type(error).__name__,
        )

    @property
    def stats(self) -> OperationStats:
        """Get statistics of the most recent operation."""
        return self._stats
