"""Configuration settings for bezierops."""

from dataclasses import dataclass
from pathlib import Path

from pydantic import BaseModel, Field


@dataclass(frozen=True)
class Tolerances:
    """Concrete tolerance values for one invocation.

    Produced by ToleranceConfig.resolve() once the size of the input is known.

    Attributes:
        epsilon: Parameter-space tolerance
        merge_distance: Distance under which two points are the same vertex
        coincidence_distance: Distance under which a point lies on a curve
        tangent_angle: Angle (radians) under which two tangents are parallel
        max_depth: Clipping depth before falling back to root solving
        min_reduction: Minimum fraction a clip must remove to avoid a split
    """

    epsilon: float
    merge_distance: float
    coincidence_distance: float
    tangent_angle: float
    max_depth: int
    min_reduction: float


class ToleranceConfig(BaseModel):
    """Numeric tolerances for intersection and boolean operations.

    Distances are specified as multiples of epsilon at a reference size and are
    scaled proportionally to the extent of the input geometry, so a drawing in
    font units and the same drawing in unit coordinates behave identically.
    """

    epsilon: float = Field(
        default=1e-6,
        ge=1e-12,
        le=1e-2,
        description="Parameter-space tolerance for intersections",
    )
    reference_size: float = Field(
        default=1.0,
        gt=0.0,
        description="Geometry extent at which distance tolerances are specified",
    )
    vertex_merge_factor: float = Field(
        default=10.0,
        ge=1.0,
        le=1000.0,
        description="Vertex merge distance as a multiple of epsilon (at reference size)",
    )
    coincidence_factor: float = Field(
        default=10.0,
        ge=1.0,
        le=1000.0,
        description="Point-on-curve distance as a multiple of epsilon (at reference size)",
    )
    tangent_angle_tolerance: float = Field(
        default=1e-3,
        ge=1e-9,
        le=0.1,
        description="Angle in radians under which tangents count as parallel",
    )
    max_clip_depth: int = Field(
        default=48,
        ge=8,
        le=128,
        description="Clipping iterations per branch before falling back to root solving",
    )
    min_clip_reduction: float = Field(
        default=0.2,
        ge=0.01,
        le=0.9,
        description="Fraction of an interval a clip must remove before the curve is split",
    )

    def scale_tolerance(self, base_value: float, size: float) -> float:
        """Scale a tolerance value for geometry of the given extent.

        Args:
            base_value: The tolerance value at reference size
            size: Extent of the geometry being processed

        Returns:
            Scaled tolerance value
        """
        return base_value * (max(size, self.reference_size) / self.reference_size)

    def get_merge_distance(self, size: float) -> float:
        """Get vertex merge distance scaled for size."""
        return self.scale_tolerance(self.epsilon * self.vertex_merge_factor, size)

    def get_coincidence_distance(self, size: float) -> float:
        """Get point-on-curve distance scaled for size."""
        return self.scale_tolerance(self.epsilon * self.coincidence_factor, size)

    def resolve(self, size: float) -> Tolerances:
        """Resolve concrete tolerances for geometry of the given extent."""
        return Tolerances(
            epsilon=self.epsilon,
            merge_distance=self.get_merge_distance(size),
            coincidence_distance=self.get_coincidence_distance(size),
            tangent_angle=self.tangent_angle_tolerance,
            max_depth=self.max_clip_depth,
            min_reduction=self.min_clip_reduction,
        )

    def with_epsilon(self, epsilon: float) -> "ToleranceConfig":
        """Return a validated copy using a different epsilon.

        Raises:
            ValidationError: If epsilon is outside the allowed range
        """
        return ToleranceConfig.model_validate({**self.model_dump(), "epsilon": epsilon})


class ProcessingConfig(BaseModel):
    """Configuration for pipeline execution."""

    parallel: bool = Field(
        default=False,
        description="Run curve-pair intersections on a thread pool",
    )
    max_workers: int | None = Field(
        default=None,
        ge=1,
        description="Max worker threads (None = auto)",
    )


class LoggingConfig(BaseModel):
    """Logging configuration."""

    enabled: bool = Field(
        default=False,
        description="Configure logging handlers when a processor is created",
    )
    log_file: Path | None = Field(
        default=None,
        description="Path to log file",
    )
    log_level: str = Field(
        default="WARNING",
        description="Console log level",
    )
    file_log_level: str = Field(
        default="DEBUG",
        description="File log level (more verbose)",
    )


class BezierOpsSettings(BaseModel):
    """Main library settings."""

    tolerance: ToleranceConfig = Field(default_factory=ToleranceConfig)
    processing: ProcessingConfig = Field(default_factory=ProcessingConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)


def get_default_settings() -> BezierOpsSettings:
    """Get default library settings."""
    return BezierOpsSettings()
