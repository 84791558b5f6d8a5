"""Geometric operations on Bezier curves.

This module provides the geometric utilities shared by the solver, the
segmenter and the classifier:
- Bounding box overlap and extent
- Signed distances of control points to a line
- Nearest point on a curve (Bernstein root solving)
- Degenerate curve detection (point-like or folded control polygons)
- Winding number of a point with respect to closed curves (ray crossing)
- Turn angles between directions

All functions are pure and stateless, so they are safe to call from worker
threads.
"""

import math
from collections.abc import Iterable

from bezierops.core import _bezier
from bezierops.domain import BezierCurve, Box, Point
from bezierops.exceptions import DegenerateCurveError


def boxes_overlap(a: Box, b: Box, padding: float = 0.0) -> bool:
    """Check whether two boxes overlap, counting touching boxes as overlapping.

    Zero-width boxes (horizontal or vertical lines) are handled.

    Args:
        a: First box as (min_x, min_y, max_x, max_y)
        b: Second box
        padding: Distance by which the boxes are grown before testing

    Returns:
        True if the padded boxes share at least one point

    Examples:
        >>> boxes_overlap((0, 0, 1, 1), (1, 0, 2, 1))
        True
        >>> boxes_overlap((0, 0, 1, 0), (0.5, -1, 0.5, 1))
        True
        >>> boxes_overlap((0, 0, 1, 1), (1.5, 0, 2, 1), padding=0.1)
        False
    """
    return (
        a[0] - padding <= b[2]
        and b[0] - padding <= a[2]
        and a[1] - padding <= b[3]
        and b[1] - padding <= a[3]
    )


def union_box(a: Box | None, b: Box | None) -> Box | None:
    """Smallest box containing both boxes (None counts as empty)."""
    if a is None:
        return b
    if b is None:
        return a
    return (min(a[0], b[0]), min(a[1], b[1]), max(a[2], b[2]), max(a[3], b[3]))


def box_extent(box: Box | None) -> float:
    """Larger of the box's width and height (0.0 for no box)."""
    if box is None:
        return 0.0
    return max(box[2] - box[0], box[3] - box[1])


def coordinate_coefficients(curve: BezierCurve) -> tuple[list[float], list[float]]:
    """Split a curve into x and y Bernstein coefficient lists."""
    return [p.x for p in curve.points], [p.y for p in curve.points]


def signed_distances(points: Iterable[Point], origin: Point, direction: Point) -> list[float]:
    """Signed perpendicular distance of each point to a line.

    Positive values lie to the left of the direction vector.

    Args:
        points: Points to measure
        origin: A point on the line
        direction: Unit direction of the line

    Returns:
        List of signed distances, one per point
    """
    return [direction.cross(p - origin) for p in points]


def nearest_parameter(curve: BezierCurve, point: Point) -> tuple[float, float]:
    """Find the parameter of the point on a curve closest to a given point.

    Solves (C(t) - p) . C'(t) = 0 in Bernstein form and compares the roots
    with both end points.

    Args:
        curve: Curve to search
        point: Query point

    Returns:
        Tuple of (parameter, distance)
    """
    if curve.is_line:
        chord = curve.end - curve.start
        length_sq = chord.dot(chord)
        if length_sq == 0.0:
            return 0.0, curve.start.distance_to(point)
        t = min(1.0, max(0.0, (point - curve.start).dot(chord) / length_sq))
        return t, curve.point_at(t).distance_to(point)

    xs, ys = coordinate_coefficients(curve)
    dx = [x - point.x for x in xs]
    dy = [y - point.y for y in ys]
    numerator = _bezier.add(
        _bezier.multiply(dx, _bezier.hodograph(xs)),
        _bezier.multiply(dy, _bezier.hodograph(ys)),
    )

    best_t = 0.0
    best_distance = curve.start.distance_to(point)
    end_distance = curve.end.distance_to(point)
    if end_distance < best_distance:
        best_t, best_distance = 1.0, end_distance

    for t in _bezier.find_roots(numerator):
        distance = curve.point_at(t).distance_to(point)
        if distance < best_distance:
            best_t, best_distance = t, distance

    return best_t, best_distance


def is_folded(curve: BezierCurve, tolerance: float) -> bool:
    """Detect a collinear control polygon that doubles back on itself.

    Such a curve retraces part of its own path, so its tangent direction
    flips and is undefined at the turning point.

    Args:
        curve: Curve to test
        tolerance: Distance under which control points count as on the chord

    Returns:
        True if the control points are collinear and the curve reverses
    """
    if curve.is_line:
        return False

    start = curve.start
    far = max(curve.points, key=lambda p: p.distance_to(start))
    reach = far - start
    if reach.length() <= tolerance:
        return False
    direction = reach.normalized()

    if any(abs(d) > tolerance for d in signed_distances(curve.points, start, direction)):
        return False

    along = [direction.dot(p) for p in curve.derivative_points()]
    return any(0.0 < t < 1.0 for t in _bezier.find_roots(along)) or curve.end == start


def validate_curve(curve: BezierCurve, tolerance: float) -> None:
    """Reject curves whose tangent direction is undefined.

    Args:
        curve: Curve to validate
        tolerance: Distance under which points are considered coincident

    Raises:
        DegenerateCurveError: If the curve is point-like or folds back on itself
    """
    if curve.is_point_like(tolerance):
        raise DegenerateCurveError("control points coincide", curve.to_tuples())
    if is_folded(curve, tolerance):
        raise DegenerateCurveError(
            "collinear control points fold back on themselves", curve.to_tuples()
        )


def _crossing_states(values: list[float], roots: list[float]) -> list[tuple[float, bool]]:
    # (parameter, above) at the curve start, inside each interval between
    # roots, and at the curve end; zero counts as above.
    states = [(0.0, values[0] >= 0.0)]
    bounds = [0.0, *roots, 1.0]
    for lo, hi in zip(bounds, bounds[1:]):
        if hi > lo:
            states.append((lo, _bezier.evaluate(values, 0.5 * (lo + hi)) >= 0.0))
    states.append((1.0, values[-1] >= 0.0))
    return states


def curve_winding(point: Point, curve: BezierCurve) -> int:
    """Signed crossings of a curve with the ray from point towards +x.

    Upward crossings count +1 and downward crossings -1. A crossing happens
    where the curve changes between the half-planes y < point.y and
    y >= point.y, so curves running along the ray or touching it do not
    count, and shared end points of consecutive curves are counted once.

    Args:
        point: Ray origin
        curve: Curve to test

    Returns:
        Signed crossing count
    """
    x_min, y_min, x_max, y_max = curve.control_bounds()
    if x_max <= point.x or y_max < point.y or y_min > point.y:
        return 0

    xs, ys = coordinate_coefficients(curve)
    values = [y - point.y for y in ys]
    roots = _bezier.find_roots(values)

    winding = 0
    states = _crossing_states(values, roots)
    for (_, before), (t, after) in zip(states, states[1:]):
        # A state change happens at the parameter that opened the new state
        if before != after and _bezier.evaluate(xs, t) > point.x:
            winding += 1 if after else -1
    return winding


def winding_number(point: Point, curves: Iterable[BezierCurve]) -> int:
    """Winding number of closed curves around a point.

    The curves must form closed loops (each subpath returning to its start).
    Counter-clockwise loops contribute +1.

    Args:
        point: Point to test
        curves: Curves of one or more closed subpaths

    Returns:
        Winding number (non-zero means inside under the non-zero rule)
    """
    return sum(curve_winding(point, curve) for curve in curves)


def turn_angle(incoming: Point, outgoing: Point) -> float:
    """Signed angle from one direction to another, in (-pi, pi].

    Positive angles turn counter-clockwise (left).

    Examples:
        >>> round(turn_angle(Point(1, 0), Point(0, 1)), 6)
        1.570796
        >>> round(turn_angle(Point(1, 0), Point(0, -1)), 6)
        -1.570796
    """
    return math.atan2(incoming.cross(outgoing), incoming.dot(outgoing))
