"""Path types built from Bezier curves.

This module defines:
- WindingDirection: Enum for subpath winding direction
- Subpath: A chain of curves, open or closed
- BezierPath: A collection of subpaths forming one shape

Both types speak the fontTools pen protocol through draw(), so any pen
(AreaPen, BoundsPen, RecordingPen, a glyph pen) can consume them directly.
"""

from collections.abc import Iterator
from dataclasses import dataclass
from enum import Enum, auto
from typing import Any

from fontTools.pens.areaPen import AreaPen
from fontTools.pens.boundsPen import BoundsPen

from bezierops.domain.curve import BezierCurve, Box, Point
from bezierops.exceptions import PathError


class WindingDirection(Enum):
    """Subpath winding direction.

    Positive signed area means counter-clockwise in a y-up coordinate system.
    Boolean results wind outer boundaries counter-clockwise and holes
    clockwise.
    """

    CLOCKWISE = auto()
    COUNTER_CLOCKWISE = auto()


@dataclass(frozen=True)
class Subpath:
    """An ordered chain of curves.

    Consecutive curves share end points: curves[i].end == curves[i + 1].start.
    A closed subpath additionally returns to its first point; when the last
    curve stops short of the start, an implied closing line is drawn (pen
    closePath semantics).

    Attributes:
        curves: Curves in drawing order
        closed: Whether the subpath is closed
    """

    curves: tuple[BezierCurve, ...]
    closed: bool = True

    def __post_init__(self) -> None:
        curves = tuple(self.curves)
        if not curves:
            raise PathError("A subpath needs at least one curve")
        object.__setattr__(self, "curves", curves)

    def __len__(self) -> int:
        return len(self.curves)

    def __iter__(self) -> Iterator[BezierCurve]:
        return iter(self.curves)

    @property
    def start(self) -> Point:
        return self.curves[0].start

    @property
    def end(self) -> Point:
        return self.curves[-1].end

    def is_continuous(self, tolerance: float = 0.0) -> bool:
        """Check that every curve starts where the previous one ended."""
        return all(
            prev.end.distance_to(curr.start) <= tolerance
            for prev, curr in zip(self.curves, self.curves[1:])
        )

    def is_closed_within(self, tolerance: float) -> bool:
        """Check that the last curve ends on the first point."""
        return self.end.distance_to(self.start) <= tolerance

    def draw(self, pen: Any) -> None:
        """Draw the subpath onto a fontTools pen.

        Args:
            pen: Any object implementing the pen protocol
        """
        pen.moveTo(self.start.to_tuple())
        for curve in self.curves:
            points = curve.to_tuples()
            if len(points) == 2:
                pen.lineTo(points[1])
            elif len(points) == 3:
                pen.qCurveTo(*points[1:])
            else:
                pen.curveTo(*points[1:])
        if self.closed:
            pen.closePath()
        else:
            pen.endPath()

    def signed_area(self) -> float:
        """Calculate the signed area enclosed by the subpath.

        Open subpaths are measured as if closed with a straight line.

        Returns:
            Signed area (positive = counter-clockwise)
        """
        pen = AreaPen()
        Subpath(self.curves, closed=True).draw(pen)
        return pen.value

    def direction(self) -> WindingDirection:
        """Winding direction derived from the signed area."""
        if self.signed_area() > 0:
            return WindingDirection.COUNTER_CLOCKWISE
        return WindingDirection.CLOCKWISE

    def bounding_box(self) -> Box:
        """Tight bounding box of the subpath.

        Returns:
            Tuple of (min_x, min_y, max_x, max_y)
        """
        pen = BoundsPen(None)
        self.draw(pen)
        return pen.bounds

    def reversed(self) -> "Subpath":
        """The same subpath traversed in the opposite direction."""
        return Subpath(
            tuple(curve.reversed() for curve in reversed(self.curves)),
            closed=self.closed,
        )

    def to_dict(self) -> dict[str, Any]:
        """Serialize to dictionary.

        Returns:
            Dictionary with curves and closed flag
        """
        return {
            "curves": [c.to_dict() for c in self.curves],
            "closed": self.closed,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Subpath":
        """Deserialize from dictionary.

        Args:
            data: Dictionary representation of a subpath

        Returns:
            Subpath instance
        """
        return cls(
            tuple(BezierCurve.from_dict(c) for c in data["curves"]),
            closed=data.get("closed", True),
        )


@dataclass(frozen=True)
class BezierPath:
    """A shape made of zero or more subpaths.

    The empty path is a valid value (for example the result of subtracting a
    path from itself).

    Attributes:
        subpaths: Subpaths in drawing order
    """

    subpaths: tuple[Subpath, ...] = ()

    def __post_init__(self) -> None:
        object.__setattr__(self, "subpaths", tuple(self.subpaths))

    @classmethod
    def from_curves(cls, *chains: list[BezierCurve], closed: bool = True) -> "BezierPath":
        """Build a path with one subpath per chain of curves."""
        return cls(tuple(Subpath(tuple(chain), closed=closed) for chain in chains))

    def __len__(self) -> int:
        return len(self.subpaths)

    def __iter__(self) -> Iterator[Subpath]:
        return iter(self.subpaths)

    def is_empty(self) -> bool:
        return not self.subpaths

    def iter_curves(self) -> Iterator[tuple[int, int, BezierCurve]]:
        """Iterate over (subpath index, curve index, curve) triples."""
        for subpath_idx, subpath in enumerate(self.subpaths):
            for curve_idx, curve in enumerate(subpath.curves):
                yield subpath_idx, curve_idx, curve

    def curve_count(self) -> int:
        return sum(len(s.curves) for s in self.subpaths)

    def draw(self, pen: Any) -> None:
        """Draw every subpath onto a fontTools pen."""
        for subpath in self.subpaths:
            subpath.draw(pen)

    def signed_area(self) -> float:
        """Total signed area of all subpaths (holes subtract when wound clockwise)."""
        return sum(s.signed_area() for s in self.subpaths)

    def bounding_box(self) -> Box | None:
        """Tight bounding box of the path, or None when empty."""
        if self.is_empty():
            return None
        pen = BoundsPen(None)
        self.draw(pen)
        return pen.bounds

    def reversed(self) -> "BezierPath":
        """The path with every subpath reversed."""
        return BezierPath(tuple(s.reversed() for s in self.subpaths))

    def to_dict(self) -> dict[str, Any]:
        """Serialize to dictionary.

        Returns:
            Dictionary with the list of subpaths
        """
        return {"subpaths": [s.to_dict() for s in self.subpaths]}

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "BezierPath":
        """Deserialize from dictionary.

        Args:
            data: Dictionary representation of a path

        Returns:
            BezierPath instance
        """
        return cls(tuple(Subpath.from_dict(s) for s in data["subpaths"]))
