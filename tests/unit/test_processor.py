"""Tests for input preparation and boolean operation orchestration."""

from pathlib import Path
from unittest.mock import MagicMock, patch

import pytest
from pydantic import ValidationError

from bezierops.config import BezierOpsSettings, LoggingConfig, ProcessingConfig, ToleranceConfig
from bezierops.core.processor import (
    BooleanProcessor,
    normalize_orientation,
    path_union,
    prepare_path,
)
from bezierops.core.segmentation import PathSegmenter
from bezierops.domain import (
    BezierCurve,
    BezierPath,
    BooleanOperation,
    Subpath,
    WindingDirection,
    polygon,
    rectangle,
)
from bezierops.exceptions import PathError
from bezierops.utils import OperationLogger


@pytest.fixture
def tolerances():
    """Tolerances for geometry two units across."""
    return ToleranceConfig().resolve(2.0)


def _lines(*points: tuple[float, float]) -> list[BezierCurve]:
    return [BezierCurve.line(a, b) for a, b in zip(points, points[1:])]


class TestPreparePath:
    """Tests for prepare_path()."""

    def test_drops_point_like_curves(self, tolerances) -> None:
        """Test that zero-length curves are removed."""
        curves = _lines((0, 0), (1, 0), (1, 0), (1, 1), (0, 1), (0, 0))
        prepared = prepare_path(BezierPath.from_curves(curves), tolerances)
        assert prepared.curve_count() == 4

    def test_snaps_small_gaps(self, tolerances) -> None:
        """Test that gaps below the merge distance are closed."""
        curves = [
            BezierCurve.line((0, 0), (1, 0)),
            BezierCurve.line((1, 1e-6), (1, 1)),
            BezierCurve.line((1, 1), (0, 1)),
            BezierCurve.line((0, 1), (0, 0)),
        ]
        prepared = prepare_path(BezierPath.from_curves(curves), tolerances)
        subpath = prepared.subpaths[0]
        assert subpath.is_continuous(0.0)
        assert subpath.curves[1].start == subpath.curves[0].end

    def test_rejects_large_gaps(self, tolerances) -> None:
        """Test that a real gap is reported."""
        curves = [
            BezierCurve.line((0, 0), (1, 0)),
            BezierCurve.line((1, 0.5), (1, 1)),
            BezierCurve.line((1, 1), (0, 0)),
        ]
        with pytest.raises(PathError, match="discontinuous"):
            prepare_path(BezierPath.from_curves(curves), tolerances)

    def test_rejects_open_subpaths(self, tolerances) -> None:
        """Test that open subpaths cannot be combined."""
        path = BezierPath.from_curves(_lines((0, 0), (1, 0), (1, 1)), closed=False)
        with pytest.raises(PathError, match="open"):
            prepare_path(path, tolerances)

    def test_adds_closing_line(self, tolerances) -> None:
        """Test that a closed subpath stopping short gets its closing edge."""
        path = BezierPath.from_curves(_lines((0, 0), (1, 0), (1, 1), (0, 1)))
        subpath = prepare_path(path, tolerances).subpaths[0]
        assert len(subpath) == 4
        assert subpath.curves[-1].is_line
        assert subpath.end == subpath.start

    def test_drops_empty_subpaths(self, tolerances) -> None:
        """Test that a subpath made only of points disappears."""
        dot = Subpath((BezierCurve.line((5, 5), (5, 5)),))
        path = BezierPath(rectangle(0, 0, 1, 1).subpaths + (dot,))
        assert len(prepare_path(path, tolerances)) == 1


class TestNormalizeOrientation:
    """Tests for winding normalization."""

    def test_clockwise_outer_is_reversed(self) -> None:
        """Test that an outer boundary becomes counter-clockwise."""
        square = polygon([(0, 0), (0, 1), (1, 1), (1, 0)]).subpaths[0]
        [result] = normalize_orientation([square])
        assert result.direction() is WindingDirection.COUNTER_CLOCKWISE

    def test_hole_is_clockwise(self) -> None:
        """Test that a nested subpath becomes a clockwise hole."""
        outer = polygon([(0, 0), (0, 4), (4, 4), (4, 0)]).subpaths[0]
        inner = rectangle(1, 1, 2, 2).subpaths[0]
        result = normalize_orientation([outer, inner])

        assert result[0].direction() is WindingDirection.COUNTER_CLOCKWISE
        assert result[1].direction() is WindingDirection.CLOCKWISE
        assert sum(s.signed_area() for s in result) == pytest.approx(12.0)

    def test_prepare_without_normalizing(self, tolerances) -> None:
        """Test that winding is untouched when normalization is off."""
        path = polygon([(0, 0), (0, 1), (1, 1), (1, 0)])
        prepared = prepare_path(path, tolerances, normalize=False)
        assert prepared.subpaths[0].direction() is WindingDirection.CLOCKWISE


class TestBooleanProcessor:
    """Tests for BooleanProcessor class."""

    def test_tolerance_override(self) -> None:
        """Test that an explicit tolerance replaces the configured epsilon."""
        processor = BooleanProcessor(tolerance=1e-4)
        assert processor.settings.tolerance.epsilon == 1e-4

    @pytest.mark.parametrize("tolerance", [-1.0, 0.0, 0.1])
    def test_out_of_range_tolerance_rejected(self, tolerance: float) -> None:
        """Test that the tolerance argument is validated before any geometry runs."""
        with pytest.raises(ValidationError):
            path_union(rectangle(0, 0, 2, 2), rectangle(1, 1, 2, 2), tolerance=tolerance)

    def test_resolve_tolerances_uses_combined_extent(self) -> None:
        """Test tolerance scaling with the size of both inputs."""
        processor = BooleanProcessor()
        tolerances = processor.resolve_tolerances(rectangle(0, 0, 1, 1), rectangle(0, 0, 100, 50))
        assert tolerances.merge_distance == pytest.approx(1e-6 * 10 * 100)

    def test_stats_after_operation(self) -> None:
        """Test that pipeline statistics are recorded."""
        processor = BooleanProcessor()
        processor.union(rectangle(0, 0, 2, 2), rectangle(1, 1, 2, 2))

        stats = processor.operation_logger.stats
        assert stats.operation == "union"
        assert stats.arcs == 12
        assert stats.selected_arcs == 8
        assert stats.subpaths == 1
        assert stats.curve_pairs > 0
        assert set(stats.stage_ms) == {"segmentation", "classification", "reassembly"}
        assert stats.duration_ms >= 0.0

    def test_shortcut_skips_pipeline(self) -> None:
        """Test that disjoint inputs never reach segmentation."""
        processor = BooleanProcessor()
        result = processor.combine(
            rectangle(0, 0, 1, 1), rectangle(5, 5, 1, 1), BooleanOperation.INTERSECT
        )
        assert result.is_empty()
        assert processor.operation_logger.stats.arcs == 0

    def test_simple_inputs_keep_their_curves(self) -> None:
        """Test that outlining leaves paths without self-overlap untouched."""
        a, b = rectangle(0, 0, 1, 1), rectangle(5, 5, 1, 1)
        result = BooleanProcessor().union(a, b)
        assert result.to_dict() == BezierPath(a.subpaths + b.subpaths).to_dict()

    def test_crossed_subject_is_outlined(self) -> None:
        """Test that a subject crossing itself loses its interior crossing."""
        bowtie = polygon([(0, 0), (2, 2), (2, 0), (0, 2)])
        result = BooleanProcessor().intersect(bowtie, rectangle(-1, -1, 4, 4))

        assert len(result) == 2
        assert result.curve_count() == 6
        for subpath in result.subpaths:
            assert subpath.direction() is WindingDirection.COUNTER_CLOCKWISE

    def test_error_is_logged_and_raised(self) -> None:
        """Test that failures are logged before propagating."""
        mock_logger = MagicMock()
        processor = BooleanProcessor()
        processor.operation_logger = OperationLogger(mock_logger)
        open_path = BezierPath.from_curves(_lines((0, 0), (1, 0), (1, 1)), closed=False)

        with pytest.raises(PathError):
            processor.union(open_path, rectangle(0, 0, 1, 1))

        mock_logger.error.assert_called_once()
        assert mock_logger.error.call_args.kwargs["error_type"] == "PathError"

    def test_parallel_setting_is_passed_to_segmenter(self) -> None:
        """Test that processing settings reach the segmenter."""
        settings = BezierOpsSettings(processing=ProcessingConfig(parallel=True, max_workers=2))
        processor = BooleanProcessor(settings)
        with patch("bezierops.core.processor.PathSegmenter", wraps=PathSegmenter) as seg:
            processor.union(rectangle(0, 0, 2, 2), rectangle(1, 1, 2, 2))
        assert seg.call_args.kwargs == {"parallel": True, "max_workers": 2}

    @patch("bezierops.core.processor.configure_logging")
    def test_logging_enabled(self, mock_configure, tmp_path: Path) -> None:
        """Test that enabling logging configures handlers once."""
        log_file = tmp_path / "ops.log"
        settings = BezierOpsSettings(logging=LoggingConfig(enabled=True, log_file=log_file))
        BooleanProcessor(settings)
        mock_configure.assert_called_once_with(
            log_file=log_file,
            console_level="WARNING",
            file_level="DEBUG",
        )
