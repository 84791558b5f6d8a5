"""Core algorithms for bezierops.

This module contains the core algorithms for:

- Curve geometry (bounds, nearest points, winding numbers)
- Curve intersection (Bezier clipping, line solvers, overlaps)
- Path segmentation into an arc graph
- Arc containment classification
- Boundary reassembly and the boolean operation drivers

All services are designed to be:
- Stateless apart from their resolved tolerances
- Deterministic (parallel and sequential runs give identical output)

Key functions:
- intersect_curves: Find where two curves meet
- self_intersections: Find where a cubic crosses itself
- winding_number: Winding number of closed curves around a point
- path_union / path_intersect / path_subtract: Boolean operations
- path_remove_interior_points: Outline of a self-overlapping path

Key classes:
- CurveIntersector: Intersection solver bound to tolerances
- PathSegmenter / ArcGraph / VertexTable: Arc arrangement
- ContainmentClassifier: Inside/outside/coincident labelling
- BoundaryReassembler: Walks selected arcs into closed subpaths
- BooleanProcessor: Orchestrates the pipeline
"""

from bezierops.core.classifier import ContainmentClassifier
from bezierops.core.clipping import FatLine, clip_to_fat_line, fat_line
from bezierops.core.geometry import (
    boxes_overlap,
    nearest_parameter,
    turn_angle,
    validate_curve,
    winding_number,
)
from bezierops.core.intersection import CurveIntersector, intersect_curves, self_intersections
from bezierops.core.processor import (
    BooleanProcessor,
    path_intersect,
    path_remove_interior_points,
    path_subtract,
    path_union,
    prepare_path,
)
from bezierops.core.reassembler import BoundaryReassembler
from bezierops.core.segmentation import ArcGraph, PathSegmenter, VertexTable

__all__ = [
    # Segmentation classes
    "ArcGraph",
    # Processor classes
    "BooleanProcessor",
    # Reassembly classes
    "BoundaryReassembler",
    # Classifier classes
    "ContainmentClassifier",
    # Intersection classes
    "CurveIntersector",
    "FatLine",
    "PathSegmenter",
    "VertexTable",
    # Geometry functions
    "boxes_overlap",
    "clip_to_fat_line",
    "fat_line",
    "intersect_curves",
    "nearest_parameter",
    "path_intersect",
    "path_remove_interior_points",
    "path_subtract",
    "path_union",
    "prepare_path",
    "self_intersections",
    "turn_angle",
    "validate_curve",
    "winding_number",
]
