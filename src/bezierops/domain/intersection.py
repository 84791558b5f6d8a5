"""Intersection result types.

An intersection is reported in parameter space: (t1, t2) such that curve A
evaluated at t1 and curve B evaluated at t2 are the same point within the
merge distance. Coincident sections (infinitely many shared points) are
reported as overlaps instead of point lists.
"""

from collections.abc import Iterator
from dataclasses import dataclass, field
from enum import Enum, auto

from bezierops.domain.curve import Point


class IntersectionKind(Enum):
    """How two curves meet at an intersection point.

    - CROSSING: Curve B passes from one side of curve A to the other
    - TANGENT: The curves touch with parallel tangents without crossing,
      or meet at an end point with parallel tangents
    """

    CROSSING = auto()
    TANGENT = auto()


@dataclass(frozen=True, slots=True)
class CurveIntersection:
    """A single point where two curves meet.

    Attributes:
        t1: Parameter on the first curve
        t2: Parameter on the second curve
        point: Resolved coordinate of the intersection
        kind: Crossing or tangential contact
    """

    t1: float
    t2: float
    point: Point
    kind: IntersectionKind = IntersectionKind.CROSSING

    @property
    def is_tangent(self) -> bool:
        return self.kind is IntersectionKind.TANGENT

    def swapped(self) -> "CurveIntersection":
        """The same intersection seen from the second curve."""
        return CurveIntersection(self.t2, self.t1, self.point, self.kind)


@dataclass(frozen=True, slots=True)
class CurveOverlap:
    """A section that two curves share.

    The interval [t1_start, t1_end] on the first curve (t1_start < t1_end)
    traces the same points as [t2_start, t2_end] on the second. When the
    second curve runs the other way, t2_start > t2_end and same_direction is
    False.

    Attributes:
        t1_start: Start of the shared section on the first curve
        t1_end: End of the shared section on the first curve
        t2_start: Parameter on the second curve matching t1_start
        t2_end: Parameter on the second curve matching t1_end
    """

    t1_start: float
    t1_end: float
    t2_start: float
    t2_end: float

    @property
    def same_direction(self) -> bool:
        return self.t2_end >= self.t2_start

    def swapped(self) -> "CurveOverlap":
        """The same overlap seen from the second curve."""
        if self.same_direction:
            return CurveOverlap(self.t2_start, self.t2_end, self.t1_start, self.t1_end)
        return CurveOverlap(self.t2_end, self.t2_start, self.t1_end, self.t1_start)


@dataclass(frozen=True)
class IntersectionResult:
    """Everything two curves have in common.

    Attributes:
        intersections: Isolated meeting points, sorted by (t1, t2)
        overlaps: Coincident sections
    """

    intersections: tuple[CurveIntersection, ...] = ()
    overlaps: tuple[CurveOverlap, ...] = field(default=())

    def __iter__(self) -> Iterator[CurveIntersection]:
        return iter(self.intersections)

    def __len__(self) -> int:
        return len(self.intersections)

    def is_empty(self) -> bool:
        return not self.intersections and not self.overlaps

    def parameters(self) -> list[tuple[float, float]]:
        """The (t1, t2) pairs of all isolated intersections."""
        return [(i.t1, i.t2) for i in self.intersections]

    def swapped(self) -> "IntersectionResult":
        """The result as if the two curves had been passed the other way round."""
        return IntersectionResult(
            intersections=tuple(
                sorted((i.swapped() for i in self.intersections), key=lambda i: (i.t1, i.t2))
            ),
            overlaps=tuple(o.swapped() for o in self.overlaps),
        )

    def split_parameters(self) -> tuple[list[float], list[float]]:
        """Parameters at which each curve must be cut.

        Includes intersection parameters and both ends of every overlap.

        Returns:
            Tuple of (parameters on first curve, parameters on second curve)
        """
        first = [i.t1 for i in self.intersections]
        second = [i.t2 for i in self.intersections]
        for overlap in self.overlaps:
            first.extend((overlap.t1_start, overlap.t1_end))
            second.extend((overlap.t2_start, overlap.t2_end))
        return first, second
