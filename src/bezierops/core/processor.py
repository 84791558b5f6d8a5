"""Boolean operation pipeline.

This module coordinates the full boolean workflow on two paths:

1. Resolve tolerances for the size of the inputs
2. Prepare the inputs (drop point-like curves, snap continuity, close
   subpaths, normalize winding by nesting depth)
3. Reduce each input to the outline of the area it fills, so that
   self-overlapping subpaths contribute no interior arcs
4. Short-circuit empty or disjoint inputs
5. Segment both paths into an arc graph at every intersection
6. Classify every arc against the other path
7. Select and walk the arcs into the result boundary

Key components:
- BooleanProcessor: Orchestrator holding settings and logging
- prepare_path: Input preparation for one path
- path_union / path_intersect / path_subtract: Operation drivers
- path_remove_interior_points: Outline of a self-overlapping path
"""

import time
from functools import reduce

from bezierops.config import BezierOpsSettings, Tolerances, get_default_settings
from bezierops.core.classifier import ContainmentClassifier
from bezierops.core.geometry import box_extent, boxes_overlap, union_box, winding_number
from bezierops.core.reassembler import BoundaryReassembler
from bezierops.core.segmentation import ArcGraph, PathSegmenter
from bezierops.domain import BezierCurve, BezierPath, BooleanOperation, Subpath
from bezierops.exceptions import BezierOpsError, PathError
from bezierops.utils import OperationLogger, configure_logging, get_logger


def _prepare_subpath(subpath: Subpath, index: int, merge: float) -> Subpath | None:
    curves = [c for c in subpath.curves if not c.is_point_like(merge)]
    if not curves:
        return None
    if not subpath.closed:
        raise PathError(f"Subpath {index} is open; boolean operations need closed subpaths")

    snapped = [curves[0]]
    for curve in curves[1:]:
        previous = snapped[-1]
        gap = previous.end.distance_to(curve.start)
        if gap > merge:
            raise PathError(
                f"Subpath {index} is discontinuous: gap of {gap:.6g} at "
                f"({curve.start.x:.6g}, {curve.start.y:.6g})"
            )
        if gap > 0.0:
            curve = curve.with_endpoints(previous.end, curve.end)
        snapped.append(curve)

    closing_gap = snapped[-1].end.distance_to(snapped[0].start)
    if closing_gap > merge:
        snapped.append(BezierCurve.line(snapped[-1].end, snapped[0].start))
    elif closing_gap > 0.0:
        snapped[-1] = snapped[-1].with_endpoints(snapped[-1].start, snapped[0].start)

    return Subpath(tuple(snapped), closed=True)


def normalize_orientation(subpaths: list[Subpath]) -> list[Subpath]:
    """Wind subpaths by nesting depth.

    Subpaths at even depth (outer boundaries) wind counter-clockwise and
    subpaths at odd depth (holes) wind clockwise. Depth is the number of
    other subpaths containing a point of the subpath.

    Args:
        subpaths: Closed subpaths of one path

    Returns:
        Subpaths in the same order, reversed where needed
    """
    result = []
    for index, subpath in enumerate(subpaths):
        sample = subpath.curves[0].point_at(0.5)
        depth = sum(
            1
            for other_index, other in enumerate(subpaths)
            if other_index != index and winding_number(sample, other.curves) != 0
        )
        area = subpath.signed_area()
        if area != 0.0 and (area > 0.0) != (depth % 2 == 0):
            subpath = subpath.reversed()
        result.append(subpath)
    return result


def prepare_path(path: BezierPath, tolerances: Tolerances, normalize: bool = True) -> BezierPath:
    """Prepare a path for segmentation.

    Drops curves shorter than the merge distance, snaps small gaps between
    consecutive curves, closes closed subpaths with a line when their last
    curve stops short of the start, and optionally normalizes winding.

    Args:
        path: Input path
        tolerances: Resolved tolerances
        normalize: Re-wind subpaths by nesting depth

    Returns:
        Prepared path with closed, continuous subpaths

    Raises:
        PathError: If a subpath is open or has a gap wider than the merge distance
    """
    subpaths = []
    for index, subpath in enumerate(path.subpaths):
        prepared = _prepare_subpath(subpath, index, tolerances.merge_distance)
        if prepared is not None:
            subpaths.append(prepared)
    if normalize:
        subpaths = normalize_orientation(subpaths)
    return BezierPath(tuple(subpaths))


class BooleanProcessor:
    """Runs boolean operations on paths.

    Example:
        processor = BooleanProcessor(tolerance=1e-6)
        lens = processor.intersect(circle((0, 0), 1), circle((1, 0), 1))

    Args:
        settings: Library settings (defaults if None)
        tolerance: Overrides settings.tolerance.epsilon when given
    """

    def __init__(
        self,
        settings: BezierOpsSettings | None = None,
        tolerance: float | None = None,
    ) -> None:
        settings = settings or get_default_settings()
        if tolerance is not None:
            settings = settings.model_copy(
                update={"tolerance": settings.tolerance.with_epsilon(tolerance)}
            )
        self.settings = settings

        if settings.logging.enabled:
            self.logger = configure_logging(
                log_file=settings.logging.log_file,
                console_level=settings.logging.log_level,
                file_level=settings.logging.file_log_level,
            )
        else:
            self.logger = get_logger(__name__)
        self.operation_logger = OperationLogger(self.logger)

    def resolve_tolerances(self, *paths: BezierPath) -> Tolerances:
        """Resolve tolerances for the combined extent of the given paths."""
        box = reduce(union_box, (p.bounding_box() for p in paths), None)
        return self.settings.tolerance.resolve(box_extent(box))

    def union(self, subject: BezierPath, clip: BezierPath) -> BezierPath:
        """Area covered by either path."""
        return self.combine(subject, clip, BooleanOperation.UNION)

    def intersect(self, subject: BezierPath, clip: BezierPath) -> BezierPath:
        """Area covered by both paths."""
        return self.combine(subject, clip, BooleanOperation.INTERSECT)

    def subtract(self, subject: BezierPath, clip: BezierPath) -> BezierPath:
        """Area covered by subject but not by clip."""
        return self.combine(subject, clip, BooleanOperation.SUBTRACT)

    def combine(
        self,
        subject: BezierPath,
        clip: BezierPath,
        operation: BooleanOperation,
    ) -> BezierPath:
        """Apply a boolean operation to two paths.

        Args:
            subject: First operand
            clip: Second operand
            operation: Operation to apply

        Returns:
            BezierPath whose subpaths are all closed

        Raises:
            PathError: If an input subpath is open or discontinuous
            DegenerateCurveError: If an input curve has an undefined tangent
            UnclosedBoundaryError: If the result boundary cannot be closed
        """
        name = operation.name.lower()
        self.operation_logger.log_operation_start(name, subject.curve_count(), clip.curve_count())
        stats = self.operation_logger.stats
        stats.start_time = time.time()

        try:
            result = self._combine(subject, clip, operation)
        except BezierOpsError as e:
            self.operation_logger.log_operation_error(name, e)
            raise

        stats.end_time = time.time()
        self.operation_logger.log_operation_complete(name, len(result), stats.duration_ms)
        return result

    def _combine(
        self,
        subject: BezierPath,
        clip: BezierPath,
        operation: BooleanOperation,
    ) -> BezierPath:
        tolerances = self.resolve_tolerances(subject, clip)
        subject = self._outline(prepare_path(subject, tolerances), tolerances)
        clip = self._outline(prepare_path(clip, tolerances), tolerances)

        shortcut = self._shortcut(subject, clip, operation, tolerances)
        if shortcut is not None:
            return shortcut

        graph = self._segment(tolerances, subject, clip)

        start = time.time()
        ContainmentClassifier(tolerances).classify(graph, subject, clip)
        labels: dict[str, int] = {}
        for arc in graph.arcs:
            key = arc.label.name.lower()
            labels[key] = labels.get(key, 0) + 1
        self.operation_logger.log_classification(labels, (time.time() - start) * 1000)

        start = time.time()
        reassembler = BoundaryReassembler(tolerances)
        edges = reassembler.select(graph, operation)
        result = reassembler.walk(graph, edges)
        self.operation_logger.log_reassembly(len(edges), len(result), (time.time() - start) * 1000)
        return result

    def _outline(self, path: BezierPath, tolerances: Tolerances) -> BezierPath:
        """Boundary of the area a prepared path fills under the non-zero rule.

        Self-overlapping subpaths are cut against each other and themselves
        so that arcs running through filled space are dropped and every kept
        arc has the filled side on its left. A simple path comes back with
        the same curves.
        """
        if path.is_empty():
            return path

        segmenter = PathSegmenter(
            tolerances,
            parallel=self.settings.processing.parallel,
            max_workers=self.settings.processing.max_workers,
        )
        graph = segmenter.segment(path)
        edges = ContainmentClassifier(tolerances).boundary_edges(graph, path)
        outline = BoundaryReassembler(tolerances).walk(graph, edges)
        self.logger.debug(
            "Input outlined",
            curves=path.curve_count(),
            arcs=len(graph.arcs),
            outline_curves=outline.curve_count(),
        )
        return outline

    def _segment(
        self,
        tolerances: Tolerances,
        subject: BezierPath,
        clip: BezierPath | None = None,
    ) -> ArcGraph:
        start = time.time()
        segmenter = PathSegmenter(
            tolerances,
            parallel=self.settings.processing.parallel,
            max_workers=self.settings.processing.max_workers,
        )
        graph = segmenter.segment(subject, clip)
        self.operation_logger.log_segmentation(
            curve_pairs=segmenter.job_count,
            intersections=segmenter.intersection_count,
            overlaps=segmenter.overlap_count,
            arcs=len(graph.arcs),
            duration_ms=(time.time() - start) * 1000,
        )
        return graph

    def _shortcut(
        self,
        subject: BezierPath,
        clip: BezierPath,
        operation: BooleanOperation,
        tolerances: Tolerances,
    ) -> BezierPath | None:
        """Result for empty or disjoint inputs, or None to run the pipeline."""
        if subject.is_empty() or clip.is_empty():
            reason = "empty input"
        elif not boxes_overlap(
            subject.bounding_box(), clip.bounding_box(), tolerances.merge_distance
        ):
            reason = "disjoint bounds"
        else:
            return None

        self.operation_logger.log_shortcut(operation.name.lower(), reason)
        if operation is BooleanOperation.UNION:
            return BezierPath(subject.subpaths + clip.subpaths)
        if operation is BooleanOperation.INTERSECT:
            return BezierPath()
        return subject

    def remove_interior_points(self, path: BezierPath) -> BezierPath:
        """Outline of a path with overlapping parts merged.

        The path is cut against itself and only arcs separating filled from
        unfilled space (non-zero winding rule) are kept, wound so the filled
        side lies on the left.

        Args:
            path: Path that may overlap itself

        Returns:
            BezierPath whose subpaths do not overlap each other

        Raises:
            PathError: If a subpath is open or discontinuous
            UnclosedBoundaryError: If the outline cannot be closed
        """
        self.operation_logger.log_operation_start("remove_interior_points", path.curve_count(), 0)
        stats = self.operation_logger.stats
        stats.start_time = time.time()

        try:
            tolerances = self.resolve_tolerances(path)
            prepared = prepare_path(path, tolerances, normalize=False)
            if prepared.is_empty():
                return prepared

            graph = self._segment(tolerances, prepared)
            edges = ContainmentClassifier(tolerances).boundary_edges(graph, prepared)
            result = BoundaryReassembler(tolerances).walk(graph, edges)
        except BezierOpsError as e:
            self.operation_logger.log_operation_error("remove_interior_points", e)
            raise

        stats.end_time = time.time()
        self.operation_logger.log_operation_complete(
            "remove_interior_points", len(result), stats.duration_ms
        )
        return result


def path_union(
    subject: BezierPath,
    clip: BezierPath,
    tolerance: float | None = None,
    settings: BezierOpsSettings | None = None,
) -> BezierPath:
    """Union of two closed paths.

    Args:
        subject: First path
        clip: Second path
        tolerance: Parameter-space epsilon (default 1e-6)
        settings: Library settings

    Returns:
        BezierPath covering the area of either input
    """
    return BooleanProcessor(settings, tolerance).union(subject, clip)


def path_intersect(
    subject: BezierPath,
    clip: BezierPath,
    tolerance: float | None = None,
    settings: BezierOpsSettings | None = None,
) -> BezierPath:
    """Intersection of two closed paths.

    Args:
        subject: First path
        clip: Second path
        tolerance: Parameter-space epsilon (default 1e-6)
        settings: Library settings

    Returns:
        BezierPath covering the area shared by both inputs
    """
    return BooleanProcessor(settings, tolerance).intersect(subject, clip)


def path_subtract(
    subject: BezierPath,
    clip: BezierPath,
    tolerance: float | None = None,
    settings: BezierOpsSettings | None = None,
) -> BezierPath:
    """Subtract one closed path from another.

    Args:
        subject: Path to subtract from
        clip: Path to remove
        tolerance: Parameter-space epsilon (default 1e-6)
        settings: Library settings

    Returns:
        BezierPath covering subject's area outside clip
    """
    return BooleanProcessor(settings, tolerance).subtract(subject, clip)


def path_remove_interior_points(
    path: BezierPath,
    tolerance: float | None = None,
    settings: BezierOpsSettings | None = None,
) -> BezierPath:
    """Merge the overlapping parts of a path into one outline."""
    return BooleanProcessor(settings, tolerance).remove_interior_points(path)
