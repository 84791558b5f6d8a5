"""Exception hierarchy for bezierops."""


class BezierOpsError(Exception):
    """Base exception for all bezierops errors."""

    pass


class GeometryError(BezierOpsError):
    """Errors in geometric construction or calculation."""

    pass


class CurveError(GeometryError):
    """Invalid curve definition."""

    def __init__(self, message: str) -> None:
        super().__init__(message)


class DegenerateCurveError(GeometryError):
    """Curve whose tangent direction is undefined.

    Raised for curves whose control points all coincide, and for curves whose
    control points are collinear and fold back on themselves.
    """

    def __init__(self, reason: str, points: tuple[tuple[float, float], ...] | None = None) -> None:
        self.reason = reason
        self.points = points
        if points is not None:
            super().__init__(f"Degenerate curve {list(points)}: {reason}")
        else:
            super().__init__(f"Degenerate curve: {reason}")


class PathError(GeometryError):
    """Error with subpath structure (continuity or closure)."""

    def __init__(self, message: str) -> None:
        super().__init__(message)


class BooleanOperationError(BezierOpsError):
    """Errors raised while combining paths."""

    pass


class UnclosedBoundaryError(BooleanOperationError):
    """A boundary walk could not find a continuation arc.

    This signals an inconsistent arc classification: either the tolerance is
    too coarse for the input or the input is genuinely degenerate. Retrying
    with a looser tolerance usually helps.
    """

    def __init__(self, vertex: tuple[float, float], consumed: int, remaining: int) -> None:
        self.vertex = vertex
        self.consumed = consumed
        self.remaining = remaining
        super().__init__(
            f"Boundary walk stuck at ({vertex[0]:.6g}, {vertex[1]:.6g}): "
            f"{consumed} arcs consumed, {remaining} remaining"
        )
