"""Builders for common closed shapes.

All shapes are returned as single-subpath BezierPaths. circle and rectangle
wind counter-clockwise; polygon keeps the order of the given vertices.
"""

from collections.abc import Sequence

from bezierops.domain.curve import BezierCurve, Point
from bezierops.domain.path import BezierPath, Subpath

# Handle length of a quarter-circle cubic relative to the radius
CIRCLE_KAPPA = 0.5522847498


def circle(center: tuple[float, float] | Point, radius: float) -> BezierPath:
    """Approximate a circle with four cubic quarter arcs.

    The subpath starts at the rightmost point and runs counter-clockwise.
    The radial error of the approximation is about 0.03% of the radius.

    Args:
        center: Centre of the circle
        radius: Radius (must be positive)

    Returns:
        Closed path of four cubic curves

    Raises:
        ValueError: If radius is not positive
    """
    if radius <= 0:
        raise ValueError(f"Circle radius must be positive, got {radius}")

    cx, cy = center.to_tuple() if isinstance(center, Point) else center
    k = radius * CIRCLE_KAPPA
    r = radius

    east = (cx + r, cy)
    north = (cx, cy + r)
    west = (cx - r, cy)
    south = (cx, cy - r)

    curves = (
        BezierCurve.cubic(east, (cx + r, cy + k), (cx + k, cy + r), north),
        BezierCurve.cubic(north, (cx - k, cy + r), (cx - r, cy + k), west),
        BezierCurve.cubic(west, (cx - r, cy - k), (cx - k, cy - r), south),
        BezierCurve.cubic(south, (cx + k, cy - r), (cx + r, cy - k), east),
    )
    return BezierPath((Subpath(curves, closed=True),))


def rectangle(x: float, y: float, width: float, height: float) -> BezierPath:
    """Axis-aligned rectangle with its lower-left corner at (x, y)."""
    if width <= 0 or height <= 0:
        raise ValueError(f"Rectangle size must be positive, got {width}x{height}")
    return polygon([(x, y), (x + width, y), (x + width, y + height), (x, y + height)])


def polygon(points: Sequence[tuple[float, float] | Point]) -> BezierPath:
    """Closed polygon through the given vertices, in the given order.

    Args:
        points: At least three vertices (the closing edge is implied)

    Returns:
        Closed path of line segments

    Raises:
        ValueError: If fewer than three vertices are given
    """
    if len(points) < 3:
        raise ValueError(f"A polygon needs at least 3 points, got {len(points)}")

    curves = tuple(
        BezierCurve.line(points[i], points[(i + 1) % len(points)])
        for i in range(len(points))
    )
    return BezierPath((Subpath(curves, closed=True),))
