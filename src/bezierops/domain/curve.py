"""Core geometric types for curve representation.

This module defines the fundamental geometric types used throughout bezierops:
- Point: An immutable 2D point/vector value
- BezierCurve: An immutable line, quadratic or cubic Bezier segment

Evaluation, splitting, bounds and arc length delegate to
fontTools.misc.bezierTools so the engine works on the same primitives that
outline tools use.
"""

import math
from dataclasses import dataclass
from typing import Any

from fontTools.misc.arrayTools import calcBounds
from fontTools.misc.bezierTools import (
    calcCubicArcLength,
    calcCubicBounds,
    calcQuadraticArcLength,
    calcQuadraticBounds,
    segmentPointAtT,
    splitCubicAtT,
    splitQuadraticAtT,
)

from bezierops.exceptions import CurveError, DegenerateCurveError

Box = tuple[float, float, float, float]

# Offset used to probe a tangent direction through a stationary point
_TANGENT_PROBE = 1e-6


@dataclass(frozen=True, slots=True)
class Point:
    """A point (or vector) in 2D space.

    Immutable and hashable for use in sets/dicts.

    Attributes:
        x: X coordinate
        y: Y coordinate
    """

    x: float
    y: float

    def __add__(self, other: "Point") -> "Point":
        return Point(self.x + other.x, self.y + other.y)

    def __sub__(self, other: "Point") -> "Point":
        return Point(self.x - other.x, self.y - other.y)

    def __mul__(self, factor: float) -> "Point":
        return Point(self.x * factor, self.y * factor)

    __rmul__ = __mul__

    def __truediv__(self, divisor: float) -> "Point":
        return Point(self.x / divisor, self.y / divisor)

    def __neg__(self) -> "Point":
        return Point(-self.x, -self.y)

    def dot(self, other: "Point") -> float:
        """Dot product with another vector."""
        return self.x * other.x + self.y * other.y

    def cross(self, other: "Point") -> float:
        """Z component of the cross product with another vector."""
        return self.x * other.y - self.y * other.x

    def length(self) -> float:
        """Euclidean length of this vector."""
        return math.hypot(self.x, self.y)

    def distance_to(self, other: "Point") -> float:
        """Euclidean distance to another point."""
        return math.hypot(self.x - other.x, self.y - other.y)

    def normalized(self) -> "Point":
        """Unit vector in the same direction.

        Raises:
            ValueError: If the vector has zero length
        """
        length = self.length()
        if length == 0.0:
            raise ValueError("Cannot normalize a zero-length vector")
        return Point(self.x / length, self.y / length)

    def lerp(self, other: "Point", t: float) -> "Point":
        """Linear interpolation towards another point."""
        return Point(self.x + (other.x - self.x) * t, self.y + (other.y - self.y) * t)

    def to_tuple(self) -> tuple[float, float]:
        """Convert to simple (x, y) tuple.

        Returns:
            Tuple of (x, y) coordinates
        """
        return (self.x, self.y)

    def to_dict(self) -> dict[str, Any]:
        """Serialize to dictionary.

        Returns:
            Dictionary with x and y fields
        """
        return {"x": self.x, "y": self.y}

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Point":
        """Deserialize from dictionary.

        Args:
            data: Dictionary with x and y fields

        Returns:
            Point instance
        """
        return cls(x=data["x"], y=data["y"])


def _as_point(value: Any) -> Point:
    if isinstance(value, Point):
        return value
    x, y = value
    return Point(float(x), float(y))


@dataclass(frozen=True)
class BezierCurve:
    """A Bezier segment of degree 1 (line), 2 (quadratic) or 3 (cubic).

    Control points may be given as Point instances or (x, y) pairs and are
    stored as a tuple of Points.

    Attributes:
        points: Control points, start point first and end point last
    """

    points: tuple[Point, ...]

    def __post_init__(self) -> None:
        points = tuple(_as_point(p) for p in self.points)
        if not 2 <= len(points) <= 4:
            raise CurveError(f"Expected 2-4 control points for a Bezier curve, got {len(points)}")
        object.__setattr__(self, "points", points)

    @classmethod
    def line(cls, start: Any, end: Any) -> "BezierCurve":
        """Create a straight line segment."""
        return cls((start, end))

    @classmethod
    def quadratic(cls, start: Any, control: Any, end: Any) -> "BezierCurve":
        """Create a quadratic Bezier segment."""
        return cls((start, control, end))

    @classmethod
    def cubic(cls, start: Any, control1: Any, control2: Any, end: Any) -> "BezierCurve":
        """Create a cubic Bezier segment."""
        return cls((start, control1, control2, end))

    @property
    def degree(self) -> int:
        return len(self.points) - 1

    @property
    def start(self) -> Point:
        return self.points[0]

    @property
    def end(self) -> Point:
        return self.points[-1]

    @property
    def is_line(self) -> bool:
        return len(self.points) == 2

    def to_tuples(self) -> tuple[tuple[float, float], ...]:
        """Control points as plain (x, y) tuples."""
        return tuple(p.to_tuple() for p in self.points)

    def point_at(self, t: float) -> Point:
        """Evaluate the curve at parameter t (0 <= t <= 1)."""
        x, y = segmentPointAtT(self.to_tuples(), t)
        return Point(x, y)

    def derivative_points(self) -> tuple[Point, ...]:
        """Control points of the hodograph (the derivative curve)."""
        n = self.degree
        return tuple(
            (self.points[i + 1] - self.points[i]) * n for i in range(n)
        )

    def derivative_at(self, t: float) -> Point:
        """First derivative of the curve at parameter t."""
        hodograph = self.derivative_points()
        if len(hodograph) == 1:
            return hodograph[0]
        x, y = segmentPointAtT(tuple(p.to_tuple() for p in hodograph), t)
        return Point(x, y)

    def tangent_at(self, t: float) -> Point:
        """Unit tangent direction at parameter t.

        Where the derivative vanishes (coincident control points at an end, or
        a cusp) the direction is taken from a small chord around t.

        Raises:
            DegenerateCurveError: If no direction can be determined
        """
        scale = self._extent()
        if scale == 0.0:
            raise DegenerateCurveError("curve collapses to a point", self.to_tuples())

        derivative = self.derivative_at(t)
        if derivative.length() > 1e-12 * scale:
            return derivative.normalized()

        before = self.point_at(max(0.0, t - _TANGENT_PROBE))
        after = self.point_at(min(1.0, t + _TANGENT_PROBE))
        chord = after - before
        if chord.length() > 1e-15 * scale:
            return chord.normalized()

        raise DegenerateCurveError("tangent direction is undefined", self.to_tuples())

    def subdivide(self, t: float) -> tuple["BezierCurve", "BezierCurve"]:
        """Split the curve at parameter t into two curves."""
        if self.is_line:
            mid = self.start.lerp(self.end, t)
            return BezierCurve((self.start, mid)), BezierCurve((mid, self.end))
        if len(self.points) == 3:
            first, second = splitQuadraticAtT(*self.to_tuples(), t)
        else:
            first, second = splitCubicAtT(*self.to_tuples(), t)
        return BezierCurve(first), BezierCurve(second)

    def section(self, t0: float, t1: float) -> "BezierCurve":
        """The part of the curve between parameters t0 and t1 (t0 < t1)."""
        if t0 <= 0.0 and t1 >= 1.0:
            return self
        if self.is_line:
            return BezierCurve((self.point_at(t0), self.point_at(t1)))

        split = splitQuadraticAtT if len(self.points) == 3 else splitCubicAtT
        if t0 <= 0.0:
            return BezierCurve(split(*self.to_tuples(), t1)[0])
        if t1 >= 1.0:
            return BezierCurve(split(*self.to_tuples(), t0)[1])
        return BezierCurve(split(*self.to_tuples(), t0, t1)[1])

    def reversed(self) -> "BezierCurve":
        """The same curve traversed from end to start."""
        return BezierCurve(tuple(reversed(self.points)))

    def with_endpoints(self, start: Point, end: Point) -> "BezierCurve":
        """Copy of the curve with its end points replaced."""
        return BezierCurve((start, *self.points[1:-1], end))

    def bounding_box(self) -> Box:
        """Tight bounding box of the curve.

        Returns:
            Tuple of (min_x, min_y, max_x, max_y)
        """
        if len(self.points) == 4:
            return calcCubicBounds(*self.to_tuples())
        if len(self.points) == 3:
            return calcQuadraticBounds(*self.to_tuples())
        return calcBounds(self.to_tuples())

    def control_bounds(self) -> Box:
        """Bounding box of the control polygon (contains the curve)."""
        return calcBounds(self.to_tuples())

    def length(self) -> float:
        """Arc length of the curve."""
        if len(self.points) == 4:
            return calcCubicArcLength(*self.to_tuples())
        if len(self.points) == 3:
            return calcQuadraticArcLength(*self.to_tuples())
        return self.start.distance_to(self.end)

    def is_point_like(self, tolerance: float) -> bool:
        """True if every control point lies within tolerance of the start."""
        return all(p.distance_to(self.start) <= tolerance for p in self.points)

    def _extent(self) -> float:
        x_min, y_min, x_max, y_max = self.control_bounds()
        return max(x_max - x_min, y_max - y_min)

    def to_dict(self) -> dict[str, Any]:
        """Serialize to dictionary.

        Returns:
            Dictionary with the control points
        """
        return {"points": [p.to_dict() for p in self.points]}

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "BezierCurve":
        """Deserialize from dictionary.

        Args:
            data: Dictionary representation of a curve

        Returns:
            BezierCurve instance
        """
        return cls(tuple(Point.from_dict(p) for p in data["points"]))
