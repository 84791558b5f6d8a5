"""Fat line construction and Bezier clipping.

A fat line is the strip between two lines parallel to a curve's chord that
contains the whole control polygon, and hence the curve. Clipping a second
curve against it uses the fact that the signed distance from the chord line
to the second curve is itself a polynomial whose Bernstein coefficients are
the distances of its control points. The parameter range where the convex
hull of those coefficients lies inside the strip bounds every point of the
second curve that can meet the first.
"""

from dataclasses import dataclass

from bezierops.core.geometry import signed_distances
from bezierops.domain import BezierCurve, Point


@dataclass(frozen=True, slots=True)
class FatLine:
    """A strip around a curve's chord.

    Attributes:
        origin: Start point of the chord
        direction: Unit direction of the chord
        d_min: Signed distance of the strip's lower edge from the chord
        d_max: Signed distance of the strip's upper edge from the chord
    """

    origin: Point
    direction: Point
    d_min: float
    d_max: float


def fat_line(curve: BezierCurve) -> FatLine | None:
    """Build the fat line of a curve.

    When the end points coincide the chord is taken towards the control point
    furthest from the start.

    Args:
        curve: Curve to bound

    Returns:
        FatLine, or None if every control point coincides
    """
    origin = curve.start
    chord = curve.end - origin
    if chord.length() == 0.0:
        chord = max(curve.points, key=lambda p: p.distance_to(origin)) - origin
        if chord.length() == 0.0:
            return None

    direction = chord.normalized()
    distances = signed_distances(curve.points, origin, direction)
    return FatLine(origin, direction, min(distances), max(distances))


def clip_to_fat_line(
    curve: BezierCurve,
    line: FatLine,
    padding: float = 0.0,
) -> tuple[float, float] | None:
    """Find the parameter range of a curve that can lie inside a fat line.

    The distance polynomial is treated as the explicit Bezier curve with
    control points (i / n, d_i). The returned range covers every point of its
    convex hull inside the strip: hull vertices inside the strip and all
    crossings of hull edges with the strip boundaries.

    Args:
        curve: Curve to clip
        line: Fat line to clip against
        padding: Distance by which the strip is widened on both sides

    Returns:
        Tuple of (t_min, t_max) in the curve's parameter space, or None when
        the curve lies entirely outside the strip
    """
    lower = line.d_min - padding
    upper = line.d_max + padding
    distances = signed_distances(curve.points, line.origin, line.direction)
    n = len(distances) - 1
    params = [i / n for i in range(n + 1)]

    inside = [t for t, d in zip(params, distances) if lower <= d <= upper]
    for i in range(n + 1):
        for j in range(i + 1, n + 1):
            di, dj = distances[i], distances[j]
            for bound in (lower, upper):
                if (di - bound) * (dj - bound) < 0.0:
                    inside.append(params[i] + (bound - di) / (dj - di) * (params[j] - params[i]))

    if not inside:
        return None
    return max(0.0, min(inside)), min(1.0, max(inside))
