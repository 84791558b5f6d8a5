"""Converters between the fontTools pen protocol and domain models.

This module bridges anything that can draw onto a fontTools pen (glyph sets,
recordings, other pens) and BezierPath. Quadratic curves stay quadratic and
cubic curves stay cubic; TrueType runs of implied on-curve points are split
into single segments by BasePen.
"""

from typing import Any

from fontTools.pens.basePen import BasePen
from fontTools.pens.recordingPen import RecordingPen, replayRecording

from bezierops.domain import BezierCurve, BezierPath, Subpath


class PathPen(BasePen):
    """Pen that collects drawing commands into a BezierPath.

    Contours ended with closePath() become closed subpaths; contours ended
    with endPath() become open subpaths. Contours without any segment are
    dropped.

    Example:
        pen = PathPen()
        glyph_set["O"].draw(pen)
        outline = pen.path

    Args:
        glyph_set: Optional glyph set used to decompose components
    """

    def __init__(self, glyph_set: Any = None) -> None:
        super().__init__(glyph_set)
        self._subpaths: list[Subpath] = []
        self._curves: list[BezierCurve] = []

    @property
    def path(self) -> BezierPath:
        """The path drawn so far (including an unfinished contour as open)."""
        subpaths = list(self._subpaths)
        if self._curves:
            subpaths.append(Subpath(tuple(self._curves), closed=False))
        return BezierPath(tuple(subpaths))

    def _flush(self, closed: bool) -> None:
        if self._curves:
            self._subpaths.append(Subpath(tuple(self._curves), closed=closed))
        self._curves = []

    def _moveTo(self, pt: tuple[float, float]) -> None:
        self._flush(closed=False)

    def _lineTo(self, pt: tuple[float, float]) -> None:
        self._curves.append(BezierCurve.line(self._getCurrentPoint(), pt))

    def _qCurveToOne(self, pt1: tuple[float, float], pt2: tuple[float, float]) -> None:
        self._curves.append(BezierCurve.quadratic(self._getCurrentPoint(), pt1, pt2))

    def _curveToOne(
        self,
        pt1: tuple[float, float],
        pt2: tuple[float, float],
        pt3: tuple[float, float],
    ) -> None:
        self._curves.append(BezierCurve.cubic(self._getCurrentPoint(), pt1, pt2, pt3))

    def _closePath(self) -> None:
        self._flush(closed=True)

    def _endPath(self) -> None:
        self._flush(closed=False)


def path_from_recording(recording: list[tuple[str, tuple[Any, ...]]]) -> BezierPath:
    """Build a path from RecordingPen commands.

    The recording is a list of commands like:
    - ('moveTo', ((x, y),))
    - ('lineTo', ((x, y),))
    - ('qCurveTo', ((x1, y1), (x2, y2), ...))  # Quadratic
    - ('curveTo', ((x1, y1), (x2, y2), (x3, y3)))  # Cubic
    - ('closePath', ())

    Args:
        recording: Drawing commands (for example RecordingPen.value)

    Returns:
        BezierPath with one subpath per contour
    """
    pen = PathPen()
    replayRecording(recording, pen)
    return pen.path


def path_to_recording(path: BezierPath) -> list[tuple[str, tuple[Any, ...]]]:
    """Record the drawing commands of a path.

    Args:
        path: Path to draw

    Returns:
        RecordingPen command list
    """
    pen = RecordingPen()
    path.draw(pen)
    return pen.value


def path_from_drawing(drawable: Any, glyph_set: Any = None) -> BezierPath:
    """Build a path from any object with a draw(pen) method.

    Args:
        drawable: Object drawing onto a pen (a glyph from a glyph set, for example)
        glyph_set: Glyph set used to decompose components

    Returns:
        BezierPath of the drawing
    """
    pen = PathPen(glyph_set)
    drawable.draw(pen)
    return pen.path
