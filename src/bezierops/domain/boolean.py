"""Boolean operation and arc classification types."""

from dataclasses import dataclass
from enum import Enum, auto

from bezierops.domain.curve import BezierCurve


class BooleanOperation(Enum):
    """Set operation applied to two closed paths."""

    UNION = auto()
    INTERSECT = auto()
    SUBTRACT = auto()


class PathRole(Enum):
    """Which input an arc came from.

    - SUBJECT: The first operand (P in P - Q)
    - CLIP: The second operand
    """

    SUBJECT = auto()
    CLIP = auto()

    @property
    def other(self) -> "PathRole":
        return PathRole.CLIP if self is PathRole.SUBJECT else PathRole.SUBJECT


class ArcLabel(Enum):
    """Position of an arc relative to the other input path.

    Coincident arcs lie along a boundary of the other path and carry the
    orientation of that boundary relative to the arc.
    """

    INSIDE = auto()
    OUTSIDE = auto()
    COINCIDENT_SAME = auto()
    COINCIDENT_OPPOSITE = auto()

    @property
    def is_coincident(self) -> bool:
        return self in (ArcLabel.COINCIDENT_SAME, ArcLabel.COINCIDENT_OPPOSITE)


@dataclass(frozen=True, slots=True)
class CurveRef:
    """Identity of an input curve.

    Attributes:
        role: Input path the curve belongs to
        subpath: Index of the subpath within that path
        curve: Index of the curve within the subpath
    """

    role: PathRole
    subpath: int
    curve: int


@dataclass
class Arc:
    """A parameter-bounded section of an input curve.

    Arcs are stored in an ArcGraph arena and refer to their end vertices by
    integer handle. The label is filled in by the containment classifier.

    Attributes:
        source: The input curve the arc was cut from
        t_start: Start parameter on the source curve
        t_end: End parameter on the source curve
        start_vertex: Handle of the vertex at t_start
        end_vertex: Handle of the vertex at t_end
        curve: The section of the source curve, snapped to its vertices
        label: Classification relative to the other path
    """

    source: CurveRef
    t_start: float
    t_end: float
    start_vertex: int
    end_vertex: int
    curve: BezierCurve
    label: ArcLabel | None = None

    @property
    def role(self) -> PathRole:
        return self.source.role


@dataclass(frozen=True, slots=True)
class BoundaryEdge:
    """An arc selected for an output boundary, with its traversal direction.

    Attributes:
        arc: Handle of the arc in the ArcGraph arena
        reversed: Traverse the arc from its end vertex to its start vertex
    """

    arc: int
    reversed: bool = False
