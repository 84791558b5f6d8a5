"""Domain models for bezierops.

This module contains the value types the engine consumes and produces:
points, Bezier curves, paths, intersection results, and the arc types used
while combining paths. All input types are:

- Immutable (frozen dataclasses)
- Serializable via to_dict()/from_dict()
- Drawable onto any fontTools pen

Key classes:
- Point: A 2D point/vector
- BezierCurve: A line, quadratic or cubic segment
- Subpath / BezierPath: Chains of curves and shapes built from them
- CurveIntersection / CurveOverlap / IntersectionResult: Solver output
- Arc / ArcLabel / CurveRef / PathRole: Boolean arrangement types
- BooleanOperation: Union, intersect or subtract
"""

from bezierops.domain.boolean import (
    Arc,
    ArcLabel,
    BooleanOperation,
    BoundaryEdge,
    CurveRef,
    PathRole,
)
from bezierops.domain.curve import BezierCurve, Box, Point
from bezierops.domain.intersection import (
    CurveIntersection,
    CurveOverlap,
    IntersectionKind,
    IntersectionResult,
)
from bezierops.domain.path import BezierPath, Subpath, WindingDirection
from bezierops.domain.shapes import circle, polygon, rectangle

__all__: list[str] = [
    # Enums
    "ArcLabel",
    "BooleanOperation",
    "IntersectionKind",
    "PathRole",
    "WindingDirection",
    # Core types
    "Arc",
    "BezierCurve",
    "BezierPath",
    "BoundaryEdge",
    "Box",
    "CurveIntersection",
    "CurveOverlap",
    "CurveRef",
    "IntersectionResult",
    "Point",
    "Subpath",
    # Shape builders
    "circle",
    "polygon",
    "rectangle",
]
