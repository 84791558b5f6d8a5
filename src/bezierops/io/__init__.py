"""Pen protocol bridge for bezierops.

This module connects BezierPath to the fontTools pen protocol, so outlines
can be taken from glyph sets or recordings and drawn onto any pen. It does
not read or write files.

Key classes:
- PathPen: Pen building a BezierPath from drawing commands

Key functions:
- path_from_recording / path_to_recording: RecordingPen command lists
- path_from_drawing: Any object with a draw(pen) method
"""

from bezierops.io.pen import PathPen, path_from_drawing, path_from_recording, path_to_recording

__all__ = [
    "PathPen",
    "path_from_drawing",
    "path_from_recording",
    "path_to_recording",
]
