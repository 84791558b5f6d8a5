"""Utility functions for bezierops.

This module provides utility functions including:

- Logging setup and configuration
- Per-operation statistics
"""

from bezierops.utils.logging import (
    OperationLogger,
    OperationStats,
    configure_logging,
    get_logger,
)

__all__ = [
    "OperationLogger",
    "OperationStats",
    "configure_logging",
    "get_logger",
]
