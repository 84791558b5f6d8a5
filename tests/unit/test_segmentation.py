"""Tests for vertex merging and path segmentation."""

import pytest

from bezierops.config import ToleranceConfig
from bezierops.core.segmentation import ArcGraph, PathSegmenter, VertexTable
from bezierops.domain import PathRole, Point, circle, rectangle


@pytest.fixture
def tolerances():
    """Tolerances for geometry a few units across."""
    return ToleranceConfig().resolve(3.0)


@pytest.fixture
def overlapping_squares():
    """Two 2x2 squares overlapping in the unit square [1, 2] x [1, 2]."""
    return rectangle(0, 0, 2, 2), rectangle(1, 1, 2, 2)


class TestVertexTable:
    """Tests for VertexTable class."""

    def test_close_points_merge(self) -> None:
        """Test that points within the merge distance share a vertex."""
        table = VertexTable(1e-5)
        first = table.add(Point(0, 0))
        assert table.add(Point(1e-6, 0)) == first
        assert table.add(Point(1, 1)) != first
        assert len(table) == 2

    def test_first_point_wins(self) -> None:
        """Test that a vertex keeps the coordinate it was created with."""
        table = VertexTable(1e-5)
        handle = table.add(Point(0, 0))
        table.add(Point(5e-6, 5e-6))
        assert table.point(handle) == Point(0, 0)

    def test_merge_across_cells(self) -> None:
        """Test merging points that fall into neighbouring grid cells."""
        table = VertexTable(1.0)
        assert table.add(Point(0.99, 0)) == table.add(Point(1.01, 0))

    def test_find_missing(self) -> None:
        """Test that find() does not create vertices."""
        table = VertexTable(1e-5)
        table.add(Point(0, 0))
        assert table.find(Point(1, 0)) is None
        assert len(table) == 1


class TestPathSegmenter:
    """Tests for PathSegmenter class."""

    def test_overlapping_squares(self, tolerances, overlapping_squares) -> None:
        """Test that two crossing points cut two edges of each square."""
        subject, clip = overlapping_squares
        graph = PathSegmenter(tolerances).segment(subject, clip)

        assert isinstance(graph, ArcGraph)
        assert len(graph.arcs_for(PathRole.SUBJECT)) == 6
        assert len(graph.arcs_for(PathRole.CLIP)) == 6
        # 8 corners and 2 crossings
        assert len(graph.vertices) == 10

    def test_arcs_share_vertices(self, tolerances, overlapping_squares) -> None:
        """Test that arcs meeting at a crossing use the same vertex."""
        subject, clip = overlapping_squares
        graph = PathSegmenter(tolerances).segment(subject, clip)

        crossing = graph.vertices.find(Point(2, 1))
        assert crossing is not None
        assert len(graph.outgoing[crossing]) == 2
        assert len(graph.incoming[crossing]) == 2
        for handle in graph.outgoing[crossing]:
            assert graph.arcs[handle].curve.start == graph.vertex_point(crossing)

    def test_arc_parameters_cover_curve(self, tolerances, overlapping_squares) -> None:
        """Test that the arcs of each input curve tile [0, 1]."""
        subject, clip = overlapping_squares
        graph = PathSegmenter(tolerances).segment(subject, clip)

        by_curve: dict = {}
        for arc in graph:
            by_curve.setdefault(arc.source, []).append((arc.t_start, arc.t_end))
        assert len(by_curve) == 8
        for spans in by_curve.values():
            spans.sort()
            assert spans[0][0] == 0.0
            assert spans[-1][1] == 1.0
            for (_, end), (start, _) in zip(spans, spans[1:]):
                assert end == start

    def test_disjoint_paths_keep_whole_curves(self, tolerances) -> None:
        """Test that curves without intersections become single arcs."""
        graph = PathSegmenter(tolerances).segment(rectangle(0, 0, 1, 1), rectangle(5, 5, 1, 1))
        assert len(graph) == 8
        assert all(arc.t_start == 0.0 and arc.t_end == 1.0 for arc in graph)

    def test_single_path(self, tolerances) -> None:
        """Test segmenting one path against itself."""
        graph = PathSegmenter(tolerances).segment(circle((0, 0), 1))
        assert len(graph) == 4
        assert graph.arcs_for(PathRole.CLIP) == []

    def test_counters(self, tolerances, overlapping_squares) -> None:
        """Test that job and intersection counters are updated."""
        subject, clip = overlapping_squares
        segmenter = PathSegmenter(tolerances)
        segmenter.segment(subject, clip)
        assert segmenter.job_count > 0
        assert segmenter.intersection_count >= 2
        assert segmenter.overlap_count == 0

    def test_parallel_matches_sequential(self) -> None:
        """Test that the thread pool produces the same arcs in the same order."""
        subject, clip = circle((0, 0), 1), circle((1, 0), 1)
        tolerances = ToleranceConfig().resolve(2.0)

        sequential = PathSegmenter(tolerances).segment(subject, clip)
        parallel = PathSegmenter(tolerances, parallel=True, max_workers=4).segment(subject, clip)

        def summary(graph):
            return [
                (a.source, a.t_start, a.t_end, a.start_vertex, a.end_vertex) for a in graph.arcs
            ]

        assert summary(parallel) == summary(sequential)

    def test_circles_cut_at_two_points(self) -> None:
        """Test two overlapping circles are each cut twice."""
        subject, clip = circle((0, 0), 1), circle((1, 0), 1)
        graph = PathSegmenter(ToleranceConfig().resolve(2.0)).segment(subject, clip)
        assert len(graph.arcs_for(PathRole.SUBJECT)) == 6
        assert len(graph.arcs_for(PathRole.CLIP)) == 6
        points = [graph.vertex_point(h) for h in range(len(graph.vertices))]
        upper = [p for p in points if p.y > 0.5 and abs(p.x - 0.5) < 1e-6]
        assert len(upper) == 1
        assert upper[0].y == pytest.approx(3**0.5 / 2, abs=1e-3)
