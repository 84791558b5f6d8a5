"""Curve/curve intersection solver.

This module finds every point where two Bezier curves meet:

- Line/line pairs use the closed-form solution
- Line/curve pairs solve the curve's signed distance to the line in
  Bernstein form, plus tangential touches at the extrema of that distance
- Curve/curve pairs use Bezier clipping on an explicit worklist of
  (a0, a1, b0, b1, depth) parameter intervals, with a projection fallback
  once the depth limit is reached

Coincident sections are detected up front by projecting each curve's end
points onto the other, and are reported as overlaps instead of points.
Every point candidate is polished with damped Newton iterations, snapped
onto curve end points and deduplicated by physical distance.

Key classes:
- CurveIntersector: Solver bound to one set of resolved tolerances

Key functions:
- intersect_curves: Intersections of two curves
- self_intersections: Self-intersections of a cubic curve
"""

import logging
import math
from functools import reduce

from bezierops.config import ToleranceConfig, Tolerances
from bezierops.core import _bezier
from bezierops.core.clipping import clip_to_fat_line, fat_line
from bezierops.core.geometry import (
    box_extent,
    boxes_overlap,
    nearest_parameter,
    signed_distances,
    union_box,
    validate_curve,
)
from bezierops.domain import (
    BezierCurve,
    CurveIntersection,
    CurveOverlap,
    IntersectionKind,
    IntersectionResult,
    Point,
)
from bezierops.exceptions import DegenerateCurveError

logger = logging.getLogger(__name__)

# Interior samples used to confirm that two curves coincide
_OVERLAP_SAMPLES = 5

# Parameter offset used to probe which side of a curve the other one lies on
_SIDE_PROBE = 1e-3

_REFINE_ITERATIONS = 50

Candidate = tuple[float, float]


class CurveIntersector:
    """Intersection solver for curves sharing one set of tolerances.

    Stateless apart from its tolerances, so one instance can be shared by
    worker threads.

    Args:
        tolerances: Resolved tolerances for the geometry being processed
    """

    def __init__(self, tolerances: Tolerances) -> None:
        self.tolerances = tolerances

    def intersect(self, a: BezierCurve, b: BezierCurve) -> IntersectionResult:
        """Find all points and coincident sections shared by two curves.

        Args:
            a: First curve
            b: Second curve

        Returns:
            IntersectionResult with intersections sorted by (t1, t2)

        Raises:
            DegenerateCurveError: If either curve has an undefined tangent
        """
        tol = self.tolerances
        validate_curve(a, tol.merge_distance)
        validate_curve(b, tol.merge_distance)

        if a.points == b.points:
            own = self.self_intersect(a).intersections
            mirrored = tuple(i.swapped() for i in own)
            return IntersectionResult(
                intersections=tuple(sorted(own + mirrored, key=lambda i: (i.t1, i.t2))),
                overlaps=(CurveOverlap(0.0, 1.0, 0.0, 1.0),),
            )

        if not boxes_overlap(a.control_bounds(), b.control_bounds(), tol.merge_distance):
            return IntersectionResult()

        overlap, contacts = self.find_overlap(a, b)
        if overlap is not None:
            return IntersectionResult(overlaps=(overlap,))

        if a.is_line and b.is_line:
            candidates = self._line_line(a, b)
        elif a.is_line:
            candidates = [(s, t) for t, s in self._line_curve(b, a)]
        elif b.is_line:
            candidates = self._line_curve(a, b)
        else:
            candidates = self._clip(a, b)

        intersections = self._finalize(a, b, candidates + contacts)
        return IntersectionResult(intersections=intersections)

    def self_intersect(self, curve: BezierCurve) -> IntersectionResult:
        """Find the points where a cubic curve crosses itself.

        The curve is split into pieces that are monotone in x and y, which
        cannot cross themselves, and every pair of pieces is intersected.
        Lines and quadratics never self-intersect.

        Args:
            curve: Curve to test

        Returns:
            IntersectionResult whose intersections all have t1 < t2
        """
        if len(curve.points) < 4:
            return IntersectionResult()

        tol = self.tolerances
        bounds = [0.0, *_monotone_splits(curve), 1.0]
        pieces = [
            (lo, hi, curve.section(lo, hi))
            for lo, hi in zip(bounds, bounds[1:])
            if hi - lo > tol.epsilon
        ]
        pieces = [p for p in pieces if not p[2].is_point_like(tol.merge_distance)]

        found: list[CurveIntersection] = []
        for i in range(len(pieces)):
            lo_i, hi_i, piece_i = pieces[i]
            for j in range(i + 1, len(pieces)):
                lo_j, hi_j, piece_j = pieces[j]
                for hit in self.intersect(piece_i, piece_j).intersections:
                    t1 = lo_i + hit.t1 * (hi_i - lo_i)
                    t2 = lo_j + hit.t2 * (hi_j - lo_j)
                    if abs(t1 - t2) <= 10 * tol.epsilon:
                        continue
                    if curve.point_at(t1).distance_to(curve.point_at(t2)) > tol.merge_distance:
                        continue
                    found.append(CurveIntersection(min(t1, t2), max(t1, t2), hit.point, hit.kind))

        unique: list[CurveIntersection] = []
        for hit in sorted(found, key=lambda i: (i.t1, i.t2)):
            if all(hit.point.distance_to(u.point) > tol.merge_distance for u in unique):
                unique.append(hit)
        return IntersectionResult(intersections=tuple(unique))

    def find_overlap(
        self, a: BezierCurve, b: BezierCurve
    ) -> tuple[CurveOverlap | None, list[Candidate]]:
        """Detect a section that two curves share.

        Each curve's end points are projected onto the other. Two distinct
        projection pairs whose sampled interiors coincide form an overlap;
        otherwise the pairs are end point contacts.

        Args:
            a: First curve
            b: Second curve

        Returns:
            Tuple of (overlap or None, end point contact candidates)
        """
        tol = self.tolerances
        pairs: list[Candidate] = []
        for t in (0.0, 1.0):
            s, distance = nearest_parameter(b, a.point_at(t))
            if distance <= tol.coincidence_distance:
                pairs.append((t, s))
        for s in (0.0, 1.0):
            t, distance = nearest_parameter(a, b.point_at(s))
            if distance <= tol.coincidence_distance:
                pairs.append((t, s))

        distinct: list[Candidate] = []
        for pair in sorted(pairs):
            point = a.point_at(pair[0])
            if all(point.distance_to(a.point_at(d[0])) > tol.merge_distance for d in distinct):
                distinct.append(pair)

        if len(distinct) < 2:
            return None, distinct

        (t_lo, s_lo), (t_hi, s_hi) = distinct[0], distinct[-1]
        if self._sections_coincide(a, b, t_lo, t_hi, s_lo, s_hi):
            logger.debug(
                "Coincident section found: t1=[%.6g, %.6g] t2=[%.6g, %.6g]",
                t_lo, t_hi, s_lo, s_hi,
            )
            return CurveOverlap(t_lo, t_hi, s_lo, s_hi), []
        return None, distinct

    def _sections_coincide(
        self,
        a: BezierCurve,
        b: BezierCurve,
        t_lo: float,
        t_hi: float,
        s_lo: float,
        s_hi: float,
    ) -> bool:
        limit = self.tolerances.coincidence_distance
        s_min, s_max = min(s_lo, s_hi), max(s_lo, s_hi)
        slack = 10 * self.tolerances.epsilon

        for k in range(1, _OVERLAP_SAMPLES + 1):
            f = k / (_OVERLAP_SAMPLES + 1)
            s, distance = nearest_parameter(b, a.point_at(t_lo + f * (t_hi - t_lo)))
            if distance > limit or not s_min - slack <= s <= s_max + slack:
                return False
            t, distance = nearest_parameter(a, b.point_at(s_lo + f * (s_hi - s_lo)))
            if distance > limit or not t_lo - slack <= t <= t_hi + slack:
                return False
        return True

    def _line_line(self, a: BezierCurve, b: BezierCurve) -> list[Candidate]:
        r = a.end - a.start
        q = b.end - b.start
        denom = r.cross(q)
        if abs(denom) <= 1e-15 * r.length() * q.length():
            return []

        offset = b.start - a.start
        s = offset.cross(q) / denom
        t = offset.cross(r) / denom
        slack_s = self.tolerances.merge_distance / r.length()
        slack_t = self.tolerances.merge_distance / q.length()
        if -slack_s <= s <= 1 + slack_s and -slack_t <= t <= 1 + slack_t:
            return [(min(1.0, max(0.0, s)), min(1.0, max(0.0, t)))]
        return []

    def _line_curve(self, curve: BezierCurve, line: BezierCurve) -> list[Candidate]:
        """Candidates (t on curve, s on line) for a curve against a line."""
        merge = self.tolerances.merge_distance
        chord = line.end - line.start
        length = chord.length()
        direction = chord.normalized()
        distances = signed_distances(curve.points, line.start, direction)

        params = _bezier.find_roots(distances)
        # Touches without a sign change sit at extrema of the distance
        for t in _bezier.find_roots(_bezier.hodograph(distances)):
            if abs(_bezier.evaluate(distances, t)) <= merge:
                params.append(t)

        candidates: list[Candidate] = []
        slack = merge / length
        for t in params:
            s = (curve.point_at(t) - line.start).dot(direction) / length
            if -slack <= s <= 1 + slack:
                candidates.append((t, min(1.0, max(0.0, s))))
        return candidates

    def _clip(self, a: BezierCurve, b: BezierCurve) -> list[Candidate]:
        tol = self.tolerances
        merge = tol.merge_distance
        keep = 1.0 - tol.min_reduction
        candidates: list[Candidate] = []
        worklist: list[tuple[float, float, float, float, int]] = [(0.0, 1.0, 0.0, 1.0, 0)]

        while worklist:
            a0, a1, b0, b1, depth = worklist.pop()
            section_a = a.section(a0, a1)
            section_b = b.section(b0, b1)

            if not boxes_overlap(section_a.control_bounds(), section_b.control_bounds(), merge):
                continue

            small_a = box_extent(section_a.control_bounds()) <= merge
            small_b = box_extent(section_b.control_bounds()) <= merge
            if (a1 - a0 <= tol.epsilon and b1 - b0 <= tol.epsilon) or (small_a and small_b):
                candidates.append((0.5 * (a0 + a1), 0.5 * (b0 + b1)))
                continue

            if depth >= tol.max_depth:
                candidates.append(self._project(a, b, 0.5 * (a0 + a1)))
                continue

            old_width_a = a1 - a0
            old_width_b = b1 - b0

            line_a = fat_line(section_a)
            if line_a is not None:
                clipped = clip_to_fat_line(section_b, line_a, merge)
                if clipped is None:
                    continue
                b0, b1 = b0 + clipped[0] * old_width_b, b0 + clipped[1] * old_width_b
                section_b = b.section(b0, b1)

            line_b = fat_line(section_b)
            if line_b is not None:
                clipped = clip_to_fat_line(section_a, line_b, merge)
                if clipped is None:
                    continue
                a0, a1 = a0 + clipped[0] * old_width_a, a0 + clipped[1] * old_width_a

            width_a = a1 - a0
            width_b = b1 - b0
            if width_a > keep * old_width_a and width_b > keep * old_width_b:
                # Slow progress: split the wider interval
                if width_a >= width_b:
                    mid = 0.5 * (a0 + a1)
                    worklist.append((mid, a1, b0, b1, depth + 1))
                    worklist.append((a0, mid, b0, b1, depth + 1))
                else:
                    mid = 0.5 * (b0 + b1)
                    worklist.append((a0, a1, mid, b1, depth + 1))
                    worklist.append((a0, a1, b0, mid, depth + 1))
                continue

            worklist.append((a0, a1, b0, b1, depth + 1))

        return candidates

    def _project(self, a: BezierCurve, b: BezierCurve, s: float) -> Candidate:
        """Alternate nearest-point projections between the curves from s."""
        t = 0.5
        for _ in range(16):
            t, _ = nearest_parameter(b, a.point_at(s))
            s, distance = nearest_parameter(a, b.point_at(t))
            if distance <= self.tolerances.merge_distance * 1e-3:
                break
        return s, t

    def _refine(self, a: BezierCurve, b: BezierCurve, s: float, t: float) -> tuple[float, float, float]:
        """Levenberg-Marquardt iterations on A(s) - B(t) = 0.

        Returns:
            Tuple of (s, t, residual distance)
        """
        residual = a.point_at(s) - b.point_at(t)
        error = residual.length()
        damping = 1e-3
        for _ in range(_REFINE_ITERATIONS):
            if error == 0.0:
                break
            da = a.derivative_at(s)
            db = -b.derivative_at(t)
            # Normal equations of the 2x2 system J d = -F with J = [da db]
            jaa = da.dot(da)
            jbb = db.dot(db)
            jab = da.dot(db)
            ga = -da.dot(residual)
            gb = -db.dot(residual)

            improved = False
            for _ in range(8):
                m00 = jaa * (1.0 + damping)
                m11 = jbb * (1.0 + damping)
                det = m00 * m11 - jab * jab
                if det == 0.0:
                    damping *= 10.0
                    continue
                ds = (ga * m11 - gb * jab) / det
                dt = (gb * m00 - ga * jab) / det
                s_next = min(1.0, max(0.0, s + ds))
                t_next = min(1.0, max(0.0, t + dt))
                residual_next = a.point_at(s_next) - b.point_at(t_next)
                error_next = residual_next.length()
                if error_next < error:
                    s, t, residual, error = s_next, t_next, residual_next, error_next
                    damping = max(damping * 0.1, 1e-12)
                    improved = True
                    break
                damping *= 10.0
            if not improved:
                break
        return s, t, error

    def _finalize(
        self, a: BezierCurve, b: BezierCurve, candidates: list[Candidate]
    ) -> tuple[CurveIntersection, ...]:
        tol = self.tolerances
        merge = tol.merge_distance

        refined: list[tuple[float, float, float]] = []
        for s, t in candidates:
            s, t, error = self._refine(a, b, s, t)
            if error > merge:
                continue
            s = _snap(a, s, merge, tol.epsilon)
            t = _snap(b, t, merge, tol.epsilon)
            refined.append((s, t, a.point_at(s).distance_to(b.point_at(t))))

        # Prefer end point hits, then the smallest residual
        refined.sort(key=lambda c: (c[0] not in (0.0, 1.0) and c[1] not in (0.0, 1.0), c[2]))
        kept: list[tuple[float, float, Point]] = []
        for s, t, _ in refined:
            point = _contact_point(a, b, s, t)
            if all(point.distance_to(k[2]) > merge for k in kept):
                kept.append((s, t, point))

        kept.sort(key=lambda k: (k[0], k[1]))
        return tuple(
            CurveIntersection(s, t, point, self._classify(a, b, s, t)) for s, t, point in kept
        )

    def _classify(self, a: BezierCurve, b: BezierCurve, s: float, t: float) -> IntersectionKind:
        try:
            tangent_a = a.tangent_at(s)
            tangent_b = b.tangent_at(t)
        except DegenerateCurveError:
            return IntersectionKind.TANGENT

        if abs(tangent_a.cross(tangent_b)) >= math.sin(self.tolerances.tangent_angle):
            return IntersectionKind.CROSSING
        if s in (0.0, 1.0) or t in (0.0, 1.0):
            return IntersectionKind.TANGENT

        sides = []
        for probe in (max(0.0, t - _SIDE_PROBE), min(1.0, t + _SIDE_PROBE)):
            point = b.point_at(probe)
            u, distance = nearest_parameter(a, point)
            if distance <= self.tolerances.merge_distance:
                continue
            sides.append(a.tangent_at(u).cross(point - a.point_at(u)) > 0.0)
        if len(sides) == 2 and sides[0] != sides[1]:
            return IntersectionKind.CROSSING
        return IntersectionKind.TANGENT


def _snap(curve: BezierCurve, t: float, merge: float, epsilon: float) -> float:
    if t <= epsilon or (t < 0.5 and curve.point_at(t).distance_to(curve.start) <= merge):
        return 0.0
    if t >= 1.0 - epsilon or (t > 0.5 and curve.point_at(t).distance_to(curve.end) <= merge):
        return 1.0
    return t


def _contact_point(a: BezierCurve, b: BezierCurve, s: float, t: float) -> Point:
    if s == 0.0:
        return a.start
    if s == 1.0:
        return a.end
    if t == 0.0:
        return b.start
    if t == 1.0:
        return b.end
    return a.point_at(s).lerp(b.point_at(t), 0.5)


def _monotone_splits(curve: BezierCurve) -> list[float]:
    """Parameters in (0, 1) where x'(t) or y'(t) changes sign."""
    derivative = curve.derivative_points()
    splits: list[float] = []
    for coords in ([p.x for p in derivative], [p.y for p in derivative]):
        splits.extend(t for t in _bezier.find_roots(coords) if 0.0 < t < 1.0)
    return sorted(set(splits))


def _resolve_tolerances(
    curves: list[BezierCurve],
    epsilon: float | None,
    config: ToleranceConfig | None,
) -> Tolerances:
    config = config or ToleranceConfig()
    if epsilon is not None:
        config = config.with_epsilon(epsilon)
    box = reduce(union_box, (c.control_bounds() for c in curves), None)
    return config.resolve(box_extent(box))


def intersect_curves(
    a: BezierCurve,
    b: BezierCurve,
    epsilon: float | None = None,
    config: ToleranceConfig | None = None,
) -> IntersectionResult:
    """Find all intersections between two curves.

    Args:
        a: First curve
        b: Second curve
        epsilon: Parameter-space tolerance (default from config, 1e-6)
        config: Tolerance configuration

    Returns:
        IntersectionResult; (t1, t2) pairs are available via parameters()

    Raises:
        DegenerateCurveError: If either curve has an undefined tangent

    Examples:
        >>> arch = BezierCurve.cubic((0, 0), (1, 2), (2, 2), (3, 0))
        >>> line = BezierCurve.line((0, 1), (3, 1))
        >>> [round(t1, 6) for t1, _ in intersect_curves(arch, line).parameters()]
        [0.211325, 0.788675]
    """
    tolerances = _resolve_tolerances([a, b], epsilon, config)
    return CurveIntersector(tolerances).intersect(a, b)


def self_intersections(
    curve: BezierCurve,
    epsilon: float | None = None,
    config: ToleranceConfig | None = None,
) -> IntersectionResult:
    """Find the points where a curve crosses itself.

    Args:
        curve: Curve to test
        epsilon: Parameter-space tolerance (default from config, 1e-6)
        config: Tolerance configuration

    Returns:
        IntersectionResult whose intersections all have t1 < t2
    """
    tolerances = _resolve_tolerances([curve], epsilon, config)
    validate_curve(curve, tolerances.merge_distance)
    return CurveIntersector(tolerances).self_intersect(curve)
