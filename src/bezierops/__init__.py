"""bezierops - Intersections and boolean operations for Bezier paths.

bezierops finds the intersections of line, quadratic and cubic Bezier curves
and combines closed paths with union, intersection and subtraction while
keeping the curves exact (no flattening to polygons).

Example:
    >>> from bezierops import circle, path_intersect
    >>> lens = path_intersect(circle((0, 0), 1), circle((1, 0), 1))
    >>> len(lens.subpaths)
    1
"""

from bezierops.config import BezierOpsSettings, ToleranceConfig
from bezierops.core import (
    BooleanProcessor,
    intersect_curves,
    path_intersect,
    path_remove_interior_points,
    path_subtract,
    path_union,
    self_intersections,
)
from bezierops.domain import (
    BezierCurve,
    BezierPath,
    BooleanOperation,
    CurveIntersection,
    CurveOverlap,
    IntersectionKind,
    IntersectionResult,
    Point,
    Subpath,
    circle,
    polygon,
    rectangle,
)
from bezierops.exceptions import (
    BezierOpsError,
    CurveError,
    DegenerateCurveError,
    PathError,
    UnclosedBoundaryError,
)
from bezierops.io import PathPen

__version__ = "0.1.0"

__all__ = [
    "BezierCurve",
    "BezierOpsError",
    "BezierOpsSettings",
    "BezierPath",
    "BooleanOperation",
    "BooleanProcessor",
    "CurveError",
    "CurveIntersection",
    "CurveOverlap",
    "DegenerateCurveError",
    "IntersectionKind",
    "IntersectionResult",
    "PathError",
    "PathPen",
    "Point",
    "Subpath",
    "ToleranceConfig",
    "UnclosedBoundaryError",
    "__version__",
    "circle",
    "intersect_curves",
    "path_intersect",
    "path_remove_interior_points",
    "path_subtract",
    "path_union",
    "polygon",
    "rectangle",
    "self_intersections",
]
