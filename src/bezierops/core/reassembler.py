"""Boundary reassembly from classified arcs.

Arcs are selected according to the boolean operation, then walked into
closed loops. At a vertex with several unused continuations the walk takes
the largest counter-clockwise turn; an exact reversal of the incoming
direction is only taken when nothing else is available. Remaining ties go to
the straightest continuation and then to the lowest arc handle, which keeps
the output deterministic.

Consecutive edges cut from the same input curve are joined back into a
single curve section before the loop is emitted.
"""

import logging
import math

from bezierops.config import Tolerances
from bezierops.core.geometry import turn_angle
from bezierops.core.segmentation import ArcGraph
from bezierops.domain import (
    ArcLabel,
    BezierCurve,
    BezierPath,
    BooleanOperation,
    BoundaryEdge,
    PathRole,
    Point,
    Subpath,
)
from bezierops.exceptions import UnclosedBoundaryError

logger = logging.getLogger(__name__)

# (role, label) -> traverse reversed, per operation
SELECTION_RULES: dict[BooleanOperation, dict[tuple[PathRole, ArcLabel], bool]] = {
    BooleanOperation.UNION: {
        (PathRole.SUBJECT, ArcLabel.OUTSIDE): False,
        (PathRole.CLIP, ArcLabel.OUTSIDE): False,
        (PathRole.SUBJECT, ArcLabel.COINCIDENT_SAME): False,
    },
    BooleanOperation.INTERSECT: {
        (PathRole.SUBJECT, ArcLabel.INSIDE): False,
        (PathRole.CLIP, ArcLabel.INSIDE): False,
        (PathRole.SUBJECT, ArcLabel.COINCIDENT_SAME): False,
    },
    BooleanOperation.SUBTRACT: {
        (PathRole.SUBJECT, ArcLabel.OUTSIDE): False,
        (PathRole.CLIP, ArcLabel.INSIDE): True,
        (PathRole.SUBJECT, ArcLabel.COINCIDENT_OPPOSITE): False,
    },
}


class BoundaryReassembler:
    """Stitches selected arcs into closed subpaths.

    Args:
        tolerances: Resolved tolerances for the inputs
    """

    def __init__(self, tolerances: Tolerances) -> None:
        self.tolerances = tolerances

    def select(self, graph: ArcGraph, operation: BooleanOperation) -> list[BoundaryEdge]:
        """Pick the arcs that bound the result of an operation.

        Args:
            graph: Classified arc graph
            operation: Boolean operation

        Returns:
            Selected edges in arc handle order
        """
        rules = SELECTION_RULES[operation]
        edges = []
        for handle, arc in enumerate(graph.arcs):
            key = (arc.role, arc.label)
            if key in rules:
                edges.append(BoundaryEdge(handle, reversed=rules[key]))
        return edges

    def assemble(self, graph: ArcGraph, operation: BooleanOperation) -> BezierPath:
        """Build the result boundary of an operation.

        Args:
            graph: Classified arc graph
            operation: Boolean operation

        Returns:
            BezierPath whose subpaths are all closed

        Raises:
            UnclosedBoundaryError: If a walk cannot be closed
        """
        return self.walk(graph, self.select(graph, operation))

    def walk(self, graph: ArcGraph, edges: list[BoundaryEdge]) -> BezierPath:
        """Walk selected edges into closed loops.

        Args:
            graph: Arc graph the edges refer to
            edges: Selected edges

        Returns:
            BezierPath with one closed subpath per loop

        Raises:
            UnclosedBoundaryError: If a walk runs out of continuations
        """
        starts = [self._start_vertex(graph, e) for e in edges]
        ends = [self._end_vertex(graph, e) for e in edges]
        curves = [self._edge_curve(graph, e) for e in edges]

        leaving: dict[int, list[int]] = {}
        for index, vertex in enumerate(starts):
            leaving.setdefault(vertex, []).append(index)

        used = [False] * len(edges)
        consumed = 0
        subpaths: list[Subpath] = []

        for seed in range(len(edges)):
            if used[seed]:
                continue
            used[seed] = True
            consumed += 1
            loop = [seed]
            origin = starts[seed]
            vertex = ends[seed]

            while vertex != origin:
                options = [i for i in leaving.get(vertex, ()) if not used[i]]
                if not options:
                    raise UnclosedBoundaryError(
                        graph.vertex_point(vertex).to_tuple(),
                        consumed,
                        len(edges) - consumed,
                    )
                chosen = self._choose(curves[loop[-1]], options, curves)
                used[chosen] = True
                consumed += 1
                loop.append(chosen)
                vertex = ends[chosen]

            merged = self._merge(graph, [edges[i] for i in loop], [curves[i] for i in loop])
            subpaths.append(Subpath(tuple(merged), closed=True))

        logger.debug("Assembled %d edges into %d subpaths", len(edges), len(subpaths))
        return BezierPath(tuple(subpaths))

    def _choose(self, incoming: BezierCurve, options: list[int], curves: list[BezierCurve]) -> int:
        if len(options) == 1:
            return options[0]

        direction_in = incoming.tangent_at(1.0)
        reversal_limit = math.pi - self.tolerances.tangent_angle
        ranked = []
        for index in options:
            turn = turn_angle(direction_in, curves[index].tangent_at(0.0))
            is_reversal = abs(turn) >= reversal_limit
            ranked.append((is_reversal, turn, index))

        forward = [r for r in ranked if not r[0]] or ranked
        best_turn = max(r[1] for r in forward)
        ties = [r for r in forward if best_turn - r[1] <= self.tolerances.tangent_angle]
        return min(ties, key=lambda r: (abs(r[1]), r[2]))[2]

    def _merge(
        self, graph: ArcGraph, edges: list[BoundaryEdge], curves: list[BezierCurve]
    ) -> list[BezierCurve]:
        """Join consecutive sections of the same input curve."""
        runs: list[tuple[BoundaryEdge, float, float]] = []
        pieces: list[BezierCurve] = []
        for edge, curve in zip(edges, curves):
            arc = graph.arcs[edge.arc]
            if runs and self._continues(graph, runs[-1], edge):
                previous, lo, hi = runs[-1]
                lo, hi = min(lo, arc.t_start), max(hi, arc.t_end)
                runs[-1] = (previous, lo, hi)
                pieces[-1] = self._section(graph, previous, lo, hi, pieces[-1].start, curve.end)
                continue
            runs.append((edge, arc.t_start, arc.t_end))
            pieces.append(curve)

        # The loop may start part way through an input curve
        while len(runs) > 1 and self._continues(graph, runs[-1], runs[0][0]):
            last, lo, hi = runs.pop()
            first, first_lo, first_hi = runs[0]
            lo, hi = min(lo, first_lo), max(hi, first_hi)
            tail = pieces.pop()
            runs[0] = (last, lo, hi)
            pieces[0] = self._section(graph, last, lo, hi, tail.start, pieces[0].end)

        return pieces

    @staticmethod
    def _continues(graph: ArcGraph, run: tuple[BoundaryEdge, float, float], edge: BoundaryEdge) -> bool:
        previous, lo, hi = run
        if edge.reversed != previous.reversed:
            return False
        source = graph.arcs[previous.arc].source
        arc = graph.arcs[edge.arc]
        if arc.source != source:
            return False
        if edge.reversed:
            return arc.t_end == lo
        return arc.t_start == hi

    @staticmethod
    def _section(
        graph: ArcGraph,
        edge: BoundaryEdge,
        lo: float,
        hi: float,
        start: Point,
        end: Point,
    ) -> BezierCurve:
        source = graph.curves[graph.arcs[edge.arc].source]
        section = source.section(lo, hi)
        if edge.reversed:
            section = section.reversed()
        return section.with_endpoints(start, end)

    @staticmethod
    def _start_vertex(graph: ArcGraph, edge: BoundaryEdge) -> int:
        arc = graph.arcs[edge.arc]
        return arc.end_vertex if edge.reversed else arc.start_vertex

    @staticmethod
    def _end_vertex(graph: ArcGraph, edge: BoundaryEdge) -> int:
        arc = graph.arcs[edge.arc]
        return arc.start_vertex if edge.reversed else arc.end_vertex

    @staticmethod
    def _edge_curve(graph: ArcGraph, edge: BoundaryEdge) -> BezierCurve:
        curve = graph.arcs[edge.arc].curve
        return curve.reversed() if edge.reversed else curve

