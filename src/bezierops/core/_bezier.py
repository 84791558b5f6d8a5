"""Internal Bernstein polynomial helpers.

This is an internal module containing the scalar polynomial machinery used
by the intersection solver, the nearest-point search and the winding test.
Polynomials are kept in Bernstein form on [0, 1] throughout, so the control
coefficients bound the polynomial and subdivision is numerically stable.
Not intended for public use.
"""

from math import comb

# Parameter width at which a bracketed root is considered found
_ROOT_TOLERANCE = 1e-15

# Limit on bisection steps for one bracketed root
_MAX_BISECTIONS = 64

# Subdivision depth after which an interval still showing sign changes is
# treated as a (near) multiple root
_MAX_SPLIT_DEPTH = 40


def evaluate(coeffs: list[float], t: float) -> float:
    """Evaluate a Bernstein polynomial using De Casteljau's algorithm.

    Args:
        coeffs: Bernstein coefficients (degree = len - 1)
        t: Parameter value

    Returns:
        Polynomial value at t
    """
    work = list(coeffs)
    mt = 1.0 - t
    for level in range(len(work) - 1, 0, -1):
        for i in range(level):
            work[i] = mt * work[i] + t * work[i + 1]
    return work[0]


def split(coeffs: list[float], t: float) -> tuple[list[float], list[float]]:
    """Split a Bernstein polynomial at t into two polynomials on [0, 1].

    Args:
        coeffs: Bernstein coefficients
        t: Split parameter

    Returns:
        Tuple of (coefficients on [0, t], coefficients on [t, 1]) each
        reparameterised to [0, 1]
    """
    work = list(coeffs)
    mt = 1.0 - t
    left = [work[0]]
    right = [work[-1]]
    for level in range(len(work) - 1, 0, -1):
        for i in range(level):
            work[i] = mt * work[i] + t * work[i + 1]
        left.append(work[0])
        right.append(work[level - 1])
    right.reverse()
    return left, right


def hodograph(coeffs: list[float]) -> list[float]:
    """Bernstein coefficients of the derivative polynomial."""
    n = len(coeffs) - 1
    return [n * (coeffs[i + 1] - coeffs[i]) for i in range(n)]


def multiply(a: list[float], b: list[float]) -> list[float]:
    """Product of two Bernstein polynomials.

    Uses the identity B(i, m) * B(j, n) = C(m, i) C(n, j) / C(m + n, i + j)
    * B(i + j, m + n).
    """
    m = len(a) - 1
    n = len(b) - 1
    product = [0.0] * (m + n + 1)
    for i, ai in enumerate(a):
        for j, bj in enumerate(b):
            product[i + j] += comb(m, i) * comb(n, j) * ai * bj
    return [value / comb(m + n, k) for k, value in enumerate(product)]


def add(a: list[float], b: list[float]) -> list[float]:
    """Sum of two Bernstein polynomials of the same degree."""
    return [x + y for x, y in zip(a, b, strict=True)]


def _sign_changes(coeffs: list[float]) -> int:
    changes = 0
    previous = 0.0
    for value in coeffs:
        if value == 0.0:
            continue
        if previous != 0.0 and (value > 0.0) != (previous > 0.0):
            changes += 1
        previous = value
    return changes


def _first_nonzero(coeffs: list[float]) -> float:
    return next(value for value in coeffs if value != 0.0)


def _bisect(coeffs: list[float], lo: float, hi: float) -> float:
    # Exactly one root lies strictly inside (lo, hi); its sign near lo is that
    # of the first non-zero coefficient.
    low_positive = _first_nonzero(coeffs) > 0.0
    a, b = 0.0, 1.0
    for _ in range(_MAX_BISECTIONS):
        mid = 0.5 * (a + b)
        value = evaluate(coeffs, mid)
        if value == 0.0:
            a = b = mid
            break
        if (value > 0.0) == low_positive:
            a = mid
        else:
            b = mid
        if (b - a) * (hi - lo) < _ROOT_TOLERANCE:
            break
    return lo + 0.5 * (a + b) * (hi - lo)


def find_roots(coeffs: list[float], tolerance: float = 1e-12) -> list[float]:
    """Find the roots of a Bernstein polynomial in [0, 1].

    Counts sign changes of the control coefficients (an upper bound on the
    number of roots, with matching parity). Intervals with no sign change
    are discarded, intervals with exactly one are solved by bisection, and
    the rest are subdivided at their midpoint. Roots that sit exactly on an
    interval end are detected from zero end coefficients.

    Intervals still showing sign changes at the depth limit are reported at
    their midpoint when the polynomial is within tolerance of zero there.
    A polynomial that is identically zero has no isolated roots and yields
    an empty list.

    Args:
        coeffs: Bernstein coefficients
        tolerance: Relative value tolerance for multiple roots

    Returns:
        Sorted list of distinct roots in [0, 1]
    """
    scale = max((abs(c) for c in coeffs), default=0.0)
    if scale == 0.0:
        return []

    roots: list[float] = []
    worklist: list[tuple[list[float], float, float, int]] = [(list(coeffs), 0.0, 1.0, 0)]

    while worklist:
        local, lo, hi, depth = worklist.pop()

        if local[0] == 0.0:
            roots.append(lo)
        if local[-1] == 0.0:
            roots.append(hi)

        interior = local[1:-1] if local[0] == 0.0 or local[-1] == 0.0 else local
        if not any(interior):
            continue

        changes = _sign_changes(local)
        if changes == 0:
            continue

        if changes == 1:
            root = _bisect(local, lo, hi)
            if lo < root < hi:
                roots.append(root)
            continue

        mid = 0.5 * (lo + hi)
        if depth >= _MAX_SPLIT_DEPTH:
            if abs(evaluate(local, 0.5)) <= tolerance * scale:
                roots.append(mid)
            continue

        left, right = split(local, 0.5)
        # Push right first so the left half is processed first
        worklist.append((right, mid, hi, depth + 1))
        worklist.append((left, lo, mid, depth + 1))

    roots.sort()
    distinct: list[float] = []
    for root in roots:
        if not distinct or root - distinct[-1] > _ROOT_TOLERANCE * 16:
            distinct.append(root)
    return distinct
