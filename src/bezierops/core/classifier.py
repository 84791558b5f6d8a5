"""Arc containment classification.

Each arc is tested at its parametric midpoint against the other input path:

1. If the midpoint lies on a curve of the other path (within the coincidence
   distance) and the tangents there are parallel, the arc is coincident.
   The sign of the tangents' dot product tells whether both boundaries run
   the same way.
2. Otherwise the winding number of the midpoint with respect to the other
   path decides: non-zero is inside, zero is outside.

For a single self-overlapping path, boundary_edges() instead keeps the arcs
that separate filled from unfilled space.
"""

import logging
import math

from bezierops.config import Tolerances
from bezierops.core.geometry import boxes_overlap, nearest_parameter, winding_number
from bezierops.core.segmentation import ArcGraph
from bezierops.domain import (
    Arc,
    ArcLabel,
    BezierCurve,
    BezierPath,
    BoundaryEdge,
    PathRole,
    Point,
)

logger = logging.getLogger(__name__)


class ContainmentClassifier:
    """Labels arcs relative to the other input path.

    Args:
        tolerances: Resolved tolerances for the inputs
    """

    def __init__(self, tolerances: Tolerances) -> None:
        self.tolerances = tolerances

    def classify(self, graph: ArcGraph, subject: BezierPath, clip: BezierPath) -> None:
        """Set the label of every arc in the graph.

        Args:
            graph: Arc graph built from subject and clip
            subject: First input path (as segmented)
            clip: Second input path (as segmented)
        """
        curves = {
            PathRole.SUBJECT: [c for _, _, c in subject.iter_curves()],
            PathRole.CLIP: [c for _, _, c in clip.iter_curves()],
        }
        counts = dict.fromkeys(ArcLabel, 0)
        for arc in graph.arcs:
            arc.label = self.classify_arc(arc, curves[arc.role.other])
            counts[arc.label] += 1

        logger.debug(
            "Classified %d arcs: %s",
            len(graph.arcs),
            ", ".join(f"{label.name.lower()}={count}" for label, count in counts.items()),
        )

    def classify_arc(self, arc: Arc, other: list[BezierCurve]) -> ArcLabel:
        """Label one arc against the curves of the other path.

        Args:
            arc: Arc to classify
            other: All curves of the other (closed) path

        Returns:
            ArcLabel for the arc
        """
        midpoint = arc.curve.point_at(0.5)
        tangent = arc.curve.tangent_at(0.5)

        coincident = self._coincident_direction(midpoint, tangent, other)
        if coincident is not None:
            return ArcLabel.COINCIDENT_SAME if coincident > 0 else ArcLabel.COINCIDENT_OPPOSITE

        if winding_number(midpoint, other) != 0:
            return ArcLabel.INSIDE
        return ArcLabel.OUTSIDE

    def _coincident_direction(
        self, point: Point, tangent: Point, curves: list[BezierCurve]
    ) -> float | None:
        """Dot product of the tangents where point lies on a parallel curve."""
        limit = self.tolerances.coincidence_distance
        parallel = math.sin(self.tolerances.tangent_angle)
        probe = (point.x, point.y, point.x, point.y)

        for curve in curves:
            if not boxes_overlap(curve.control_bounds(), probe, limit):
                continue
            t, distance = nearest_parameter(curve, point)
            if distance > limit:
                continue
            other_tangent = curve.tangent_at(t)
            if abs(tangent.cross(other_tangent)) <= parallel:
                return tangent.dot(other_tangent)
        return None

    def boundary_edges(self, graph: ArcGraph, path: BezierPath) -> list[BoundaryEdge]:
        """Select the arcs of a self-segmented path that bound its filled area.

        The winding number is probed a short distance to the left and right
        of each arc's midpoint. Arcs with filled space on exactly one side are
        kept, oriented so the filled side lies on the left. Arcs retracing an
        already selected arc are dropped.

        Args:
            graph: Arc graph built from the path alone
            path: The path (as segmented)

        Returns:
            Selected edges in arc handle order
        """
        curves = [c for _, _, c in path.iter_curves()]
        offset = 10 * self.tolerances.merge_distance

        edges: list[BoundaryEdge] = []
        seen: list[tuple[int, int, Point]] = []
        for handle, arc in enumerate(graph.arcs):
            midpoint = arc.curve.point_at(0.5)
            tangent = arc.curve.tangent_at(0.5)
            normal = Point(-tangent.y, tangent.x)

            left_filled = winding_number(midpoint + normal * offset, curves) != 0
            right_filled = winding_number(midpoint - normal * offset, curves) != 0
            if left_filled == right_filled:
                continue

            edge = BoundaryEdge(handle, reversed=right_filled)
            start, end = arc.start_vertex, arc.end_vertex
            if edge.reversed:
                start, end = end, start
            if any(
                s == start and e == end and m.distance_to(midpoint) <= self.tolerances.merge_distance
                for s, e, m in seen
            ):
                continue
            seen.append((start, end, midpoint))
            edges.append(edge)
        return edges
