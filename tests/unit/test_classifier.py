"""Tests for arc containment classification."""

from collections import Counter

import pytest

from bezierops.config import ToleranceConfig
from bezierops.core.classifier import ContainmentClassifier
from bezierops.core.segmentation import PathSegmenter
from bezierops.domain import ArcLabel, BezierPath, PathRole, Point, polygon, rectangle


def _classified(subject: BezierPath, clip: BezierPath):
    tolerances = ToleranceConfig().resolve(3.0)
    graph = PathSegmenter(tolerances).segment(subject, clip)
    ContainmentClassifier(tolerances).classify(graph, subject, clip)
    return graph


def _labels(graph, role: PathRole) -> Counter:
    return Counter(arc.label for arc in graph.arcs_for(role))


class TestClassify:
    """Tests for ContainmentClassifier.classify()."""

    def test_overlapping_squares(self) -> None:
        """Test inside and outside arcs of two overlapping squares."""
        graph = _classified(rectangle(0, 0, 2, 2), rectangle(1, 1, 2, 2))

        assert _labels(graph, PathRole.SUBJECT) == Counter(
            {ArcLabel.OUTSIDE: 4, ArcLabel.INSIDE: 2}
        )
        assert _labels(graph, PathRole.CLIP) == Counter({ArcLabel.OUTSIDE: 4, ArcLabel.INSIDE: 2})

    def test_inside_arcs_lie_in_overlap(self) -> None:
        """Test that inside arcs have their midpoints in the shared square."""
        graph = _classified(rectangle(0, 0, 2, 2), rectangle(1, 1, 2, 2))
        for arc in graph.arcs:
            if arc.label is ArcLabel.INSIDE:
                mid = arc.curve.point_at(0.5)
                assert 1.0 <= mid.x <= 2.0
                assert 1.0 <= mid.y <= 2.0

    def test_identical_paths_are_coincident(self) -> None:
        """Test that every arc of identical paths is coincident and same-direction."""
        square = rectangle(0, 0, 1, 1)
        graph = _classified(square, square)
        assert all(arc.label is ArcLabel.COINCIDENT_SAME for arc in graph.arcs)

    def test_shared_edge_runs_opposite(self) -> None:
        """Test the shared edge of two adjacent squares."""
        graph = _classified(rectangle(0, 0, 1, 1), rectangle(1, 0, 1, 1))

        shared = [arc for arc in graph.arcs if arc.label is ArcLabel.COINCIDENT_OPPOSITE]
        assert len(shared) == 2
        assert {arc.role for arc in shared} == {PathRole.SUBJECT, PathRole.CLIP}
        assert _labels(graph, PathRole.SUBJECT)[ArcLabel.OUTSIDE] == 3

    def test_reversed_clip_is_coincident_opposite(self) -> None:
        """Test identical outlines wound in opposite directions."""
        square = rectangle(0, 0, 1, 1)
        graph = _classified(square, square.reversed())
        assert all(arc.label is ArcLabel.COINCIDENT_OPPOSITE for arc in graph.arcs)


class TestClassifyArc:
    """Tests for single-arc classification."""

    def test_nested_square(self) -> None:
        """Test that a square inside another is inside and the outer is outside."""
        graph = _classified(rectangle(0, 0, 4, 4), rectangle(1, 1, 2, 2))
        assert _labels(graph, PathRole.SUBJECT) == Counter({ArcLabel.OUTSIDE: 4})
        assert _labels(graph, PathRole.CLIP) == Counter({ArcLabel.INSIDE: 4})

    def test_hole_is_outside(self) -> None:
        """Test that arcs inside a hole of the other path are outside it."""
        ring = BezierPath(
            rectangle(0, 0, 6, 6).subpaths + rectangle(1, 1, 4, 4).reversed().subpaths
        )
        graph = _classified(rectangle(2, 2, 2, 2), ring)
        assert _labels(graph, PathRole.SUBJECT) == Counter({ArcLabel.OUTSIDE: 4})


class TestBoundaryEdges:
    """Tests for ContainmentClassifier.boundary_edges()."""

    @pytest.fixture
    def self_overlapping(self) -> BezierPath:
        """One path made of two overlapping counter-clockwise squares."""
        return BezierPath(rectangle(0, 0, 2, 2).subpaths + rectangle(1, 1, 2, 2).subpaths)

    def test_keeps_outline(self, self_overlapping: BezierPath) -> None:
        """Test that only arcs on the outer outline are kept."""
        tolerances = ToleranceConfig().resolve(3.0)
        graph = PathSegmenter(tolerances).segment(self_overlapping)
        edges = ContainmentClassifier(tolerances).boundary_edges(graph, self_overlapping)

        assert len(edges) == 8
        assert not any(edge.reversed for edge in edges)

    def test_clockwise_outline_is_reversed(self) -> None:
        """Test that a clockwise outline is walked with its filled side on the left."""
        square = polygon([(0, 0), (0, 1), (1, 1), (1, 0)])
        tolerances = ToleranceConfig().resolve(1.0)
        graph = PathSegmenter(tolerances).segment(square)
        edges = ContainmentClassifier(tolerances).boundary_edges(graph, square)

        assert len(edges) == 4
        assert all(edge.reversed for edge in edges)
        first = graph.arcs[edges[0].arc]
        assert first.curve.start == Point(0, 0)
