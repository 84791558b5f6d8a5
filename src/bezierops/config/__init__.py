"""Configuration management for bezierops.

This module provides configuration management using Pydantic models.
Every numeric tolerance used by the engine lives here rather than in the
algorithms themselves.

Key classes:
- ToleranceConfig: Epsilon, merge and coincidence distances, clipping limits
- Tolerances: Concrete tolerance values resolved for one input size
- ProcessingConfig: Thread pool settings
- LoggingConfig: Logging settings
- BezierOpsSettings: Main library settings
"""

from bezierops.config.settings import (
    BezierOpsSettings,
    LoggingConfig,
    ProcessingConfig,
    ToleranceConfig,
    Tolerances,
    get_default_settings,
)

__all__ = [
    "BezierOpsSettings",
    "LoggingConfig",
    "ProcessingConfig",
    "ToleranceConfig",
    "Tolerances",
    "get_default_settings",
]
