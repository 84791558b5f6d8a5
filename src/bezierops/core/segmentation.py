"""Path segmentation into an arc graph.

Every curve of both input paths is cut at all of its intersections with the
other path, with other curves of its own path, and with itself. The pieces
become Arcs stored in an ArcGraph arena, and their end points become shared
vertices: points closer than the merge distance collapse into one vertex
no matter which curve produced them.

Key classes:
- VertexTable: Spatial-hash proximity merge of points into vertex handles
- ArcGraph: Arena of arcs with per-vertex incoming/outgoing handle lists
- PathSegmenter: Runs the intersection jobs and builds the ArcGraph
"""

import logging
import math
from collections.abc import Iterator
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field

from bezierops.config import Tolerances
from bezierops.core.geometry import boxes_overlap
from bezierops.core.intersection import CurveIntersector
from bezierops.domain import (
    Arc,
    BezierCurve,
    BezierPath,
    CurveRef,
    IntersectionResult,
    PathRole,
    Point,
)

logger = logging.getLogger(__name__)


class VertexTable:
    """Deduplicates points into vertices by proximity.

    Points are bucketed on a grid whose cell size equals the merge distance,
    so a lookup only needs to inspect the 3x3 block of cells around a point.
    The first point registered for a vertex is its coordinate.

    Args:
        merge_distance: Distance under which two points are the same vertex
    """

    def __init__(self, merge_distance: float) -> None:
        self.merge_distance = merge_distance
        self._cell = merge_distance if merge_distance > 0 else 1e-12
        self._points: list[Point] = []
        self._grid: dict[tuple[int, int], list[int]] = {}

    def __len__(self) -> int:
        return len(self._points)

    def _key(self, point: Point) -> tuple[int, int]:
        return (math.floor(point.x / self._cell), math.floor(point.y / self._cell))

    def find(self, point: Point) -> int | None:
        """Handle of the nearest vertex within the merge distance, if any."""
        kx, ky = self._key(point)
        best: int | None = None
        best_distance = self.merge_distance
        for dx in (-1, 0, 1):
            for dy in (-1, 0, 1):
                for handle in self._grid.get((kx + dx, ky + dy), ()):
                    distance = self._points[handle].distance_to(point)
                    if distance <= best_distance:
                        best, best_distance = handle, distance
        return best

    def add(self, point: Point) -> int:
        """Return the vertex for a point, creating one if none is close enough."""
        handle = self.find(point)
        if handle is not None:
            return handle
        handle = len(self._points)
        self._points.append(point)
        self._grid.setdefault(self._key(point), []).append(handle)
        return handle

    def point(self, handle: int) -> Point:
        return self._points[handle]


@dataclass
class ArcGraph:
    """Arena of arcs joined at shared vertices.

    Arcs are addressed by their index in the arena. Each vertex keeps the
    handles of the arcs that leave and enter it, so traversal never needs
    object references between arcs.

    Attributes:
        vertices: Vertex table shared by both input paths
        curves: Input curves the arcs were cut from
        arcs: Arc arena
        outgoing: Arc handles starting at each vertex
        incoming: Arc handles ending at each vertex
    """

    vertices: VertexTable
    curves: dict[CurveRef, BezierCurve] = field(default_factory=dict)
    arcs: list[Arc] = field(default_factory=list)
    outgoing: dict[int, list[int]] = field(default_factory=dict)
    incoming: dict[int, list[int]] = field(default_factory=dict)

    def add_arc(self, arc: Arc) -> int:
        """Store an arc and index it by its end vertices."""
        handle = len(self.arcs)
        self.arcs.append(arc)
        self.outgoing.setdefault(arc.start_vertex, []).append(handle)
        self.incoming.setdefault(arc.end_vertex, []).append(handle)
        return handle

    def __len__(self) -> int:
        return len(self.arcs)

    def __iter__(self) -> Iterator[Arc]:
        return iter(self.arcs)

    def arcs_for(self, role: PathRole) -> list[Arc]:
        """Arcs cut from one input path."""
        return [arc for arc in self.arcs if arc.role is role]

    def vertex_point(self, handle: int) -> Point:
        return self.vertices.point(handle)


@dataclass(frozen=True, slots=True)
class _Job:
    first: CurveRef
    second: CurveRef


class PathSegmenter:
    """Cuts two paths into arcs at all of their intersections.

    Args:
        tolerances: Resolved tolerances for the inputs
        parallel: Run intersection jobs on a thread pool
        max_workers: Thread pool size (None = executor default)
    """

    def __init__(
        self,
        tolerances: Tolerances,
        parallel: bool = False,
        max_workers: int | None = None,
    ) -> None:
        self.tolerances = tolerances
        self.parallel = parallel
        self.max_workers = max_workers
        self.intersector = CurveIntersector(tolerances)
        self.job_count = 0
        self.intersection_count = 0
        self.overlap_count = 0

    def segment(self, subject: BezierPath, clip: BezierPath | None = None) -> ArcGraph:
        """Build the arc graph for one or two paths.

        With a single path, the path is cut against itself only (used to
        resolve self-overlapping paths).

        Args:
            subject: First path
            clip: Second path, or None

        Returns:
            ArcGraph containing every arc of both paths
        """
        paths = {PathRole.SUBJECT: subject}
        if clip is not None:
            paths[PathRole.CLIP] = clip

        curves: dict[CurveRef, BezierCurve] = {}
        for role, path in paths.items():
            for subpath_idx, curve_idx, curve in path.iter_curves():
                curves[CurveRef(role, subpath_idx, curve_idx)] = curve

        jobs = self._build_jobs(curves)
        results = self._run_jobs(jobs, curves)

        splits: dict[CurveRef, list[float]] = {ref: [] for ref in curves}
        for job, result in zip(jobs, results):
            first, second = result.split_parameters()
            splits[job.first].extend(first)
            splits[job.second].extend(second)
            self.intersection_count += len(result.intersections)
            self.overlap_count += len(result.overlaps)

        graph = ArcGraph(VertexTable(self.tolerances.merge_distance), curves)
        # Register original curve end points first so they win vertex merges
        for curve in curves.values():
            graph.vertices.add(curve.start)
            graph.vertices.add(curve.end)

        for ref, curve in curves.items():
            for arc in self._cut(ref, curve, splits[ref], graph.vertices):
                graph.add_arc(arc)

        logger.debug(
            "Segmented %d curves into %d arcs and %d vertices (%d jobs)",
            len(curves), len(graph.arcs), len(graph.vertices), len(jobs),
        )
        return graph

    def _build_jobs(self, curves: dict[CurveRef, BezierCurve]) -> list[_Job]:
        refs = list(curves)
        merge = self.tolerances.merge_distance
        boxes = {ref: curves[ref].control_bounds() for ref in refs}

        jobs: list[_Job] = []
        for i, first in enumerate(refs):
            if len(curves[first].points) == 4:
                jobs.append(_Job(first, first))
            for second in refs[i + 1:]:
                if boxes_overlap(boxes[first], boxes[second], merge):
                    jobs.append(_Job(first, second))
        self.job_count += len(jobs)
        return jobs

    def _run_job(self, job: _Job, curves: dict[CurveRef, BezierCurve]) -> IntersectionResult:
        if job.first == job.second:
            return self.intersector.self_intersect(curves[job.first])
        return self.intersector.intersect(curves[job.first], curves[job.second])

    def _run_jobs(
        self, jobs: list[_Job], curves: dict[CurveRef, BezierCurve]
    ) -> list[IntersectionResult]:
        if not self.parallel or len(jobs) < 2:
            return [self._run_job(job, curves) for job in jobs]

        # map() yields results in job order regardless of completion order
        with ThreadPoolExecutor(max_workers=self.max_workers) as executor:
            return list(executor.map(lambda job: self._run_job(job, curves), jobs))

    def _cut(
        self,
        ref: CurveRef,
        curve: BezierCurve,
        params: list[float],
        vertices: VertexTable,
    ) -> list[Arc]:
        eps = self.tolerances.epsilon
        merge = self.tolerances.merge_distance

        cuts = [0.0]
        for t in sorted(params):
            if eps < t < 1.0 - eps and t - cuts[-1] > eps:
                cuts.append(t)
        if 1.0 - cuts[-1] <= eps and len(cuts) > 1:
            cuts.pop()
        cuts.append(1.0)

        arcs: list[Arc] = []
        for t0, t1 in zip(cuts, cuts[1:]):
            start = vertices.add(curve.point_at(t0) if t0 > 0.0 else curve.start)
            end = vertices.add(curve.point_at(t1) if t1 < 1.0 else curve.end)
            section = curve.section(t0, t1)
            if start == end and section.is_point_like(merge):
                continue
            section = section.with_endpoints(vertices.point(start), vertices.point(end))
            arcs.append(Arc(ref, t0, t1, start, end, section))
        return arcs
