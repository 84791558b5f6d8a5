"""Tests for the internal Bernstein polynomial helpers."""

import pytest

from bezierops.core import _bezier


class TestEvaluateAndSplit:
    """Tests for evaluation and subdivision."""

    def test_evaluate_linear(self) -> None:
        """Test evaluating a degree 1 polynomial."""
        assert _bezier.evaluate([1.0, 3.0], 0.25) == pytest.approx(1.5)

    def test_evaluate_quadratic_midpoint(self) -> None:
        """Test De Casteljau evaluation of a quadratic."""
        assert _bezier.evaluate([1.0, 2.0, 3.0], 0.5) == pytest.approx(2.0)

    def test_evaluate_end_points(self) -> None:
        """Test that end coefficients are interpolated."""
        coeffs = [4.0, -1.0, 7.0, 2.0]
        assert _bezier.evaluate(coeffs, 0.0) == 4.0
        assert _bezier.evaluate(coeffs, 1.0) == 2.0

    def test_split_halves(self) -> None:
        """Test splitting a quadratic at its midpoint."""
        left, right = _bezier.split([0.0, 1.0, 0.0], 0.5)
        assert left == pytest.approx([0.0, 0.5, 0.5])
        assert right == pytest.approx([0.5, 0.5, 0.0])

    def test_split_preserves_values(self) -> None:
        """Test that split halves trace the original polynomial."""
        coeffs = [1.0, -2.0, 3.0, 0.5]
        left, right = _bezier.split(coeffs, 0.3)
        assert _bezier.evaluate(left, 0.5) == pytest.approx(_bezier.evaluate(coeffs, 0.15))
        assert _bezier.evaluate(right, 0.5) == pytest.approx(_bezier.evaluate(coeffs, 0.65))


class TestPolynomialArithmetic:
    """Tests for hodograph, multiply and add."""

    def test_hodograph(self) -> None:
        """Test derivative coefficients."""
        assert _bezier.hodograph([0.0, 1.0, 3.0]) == [2.0, 4.0]

    def test_multiply_t_squared(self) -> None:
        """Test that t * t gives t squared."""
        assert _bezier.multiply([0.0, 1.0], [0.0, 1.0]) == pytest.approx([0.0, 0.0, 1.0])

    def test_multiply_matches_pointwise_product(self) -> None:
        """Test the product against evaluation at a few parameters."""
        a = [1.0, -2.0, 0.5]
        b = [3.0, 1.0]
        product = _bezier.multiply(a, b)
        assert len(product) == 4
        for t in (0.0, 0.2, 0.7, 1.0):
            expected = _bezier.evaluate(a, t) * _bezier.evaluate(b, t)
            assert _bezier.evaluate(product, t) == pytest.approx(expected)

    def test_add_requires_same_degree(self) -> None:
        """Test that adding polynomials of different degree fails."""
        assert _bezier.add([1.0, 2.0], [3.0, 4.0]) == [4.0, 6.0]
        with pytest.raises(ValueError):
            _bezier.add([1.0, 2.0], [1.0, 2.0, 3.0])


class TestFindRoots:
    """Tests for find_roots()."""

    def test_single_root(self) -> None:
        """Test a linear polynomial with one interior root."""
        assert _bezier.find_roots([-0.25, 0.75]) == pytest.approx([0.25])

    def test_two_roots(self) -> None:
        """Test a quadratic with two interior roots."""
        coeffs = _bezier.multiply([-0.25, 0.75], [-0.75, 0.25])
        assert _bezier.find_roots(coeffs) == pytest.approx([0.25, 0.75], abs=1e-12)

    def test_roots_on_interval_ends(self) -> None:
        """Test roots at exactly t=0 and t=1."""
        assert _bezier.find_roots([0.0, 1.0]) == [0.0]
        assert _bezier.find_roots([1.0, 0.0]) == [1.0]

    def test_double_root(self) -> None:
        """Test that a double root is reported once."""
        coeffs = _bezier.multiply([-0.5, 0.5], [-0.5, 0.5])
        assert _bezier.find_roots(coeffs) == pytest.approx([0.5])

    def test_no_roots(self) -> None:
        """Test a polynomial that stays positive."""
        assert _bezier.find_roots([1.0, 2.0, 1.0]) == []

    def test_identically_zero(self) -> None:
        """Test that the zero polynomial has no isolated roots."""
        assert _bezier.find_roots([0.0, 0.0, 0.0]) == []

    def test_roots_are_sorted(self) -> None:
        """Test ordering of roots from a cubic."""
        coeffs = _bezier.multiply(
            _bezier.multiply([-0.1, 0.9], [-0.5, 0.5]),
            [-0.8, 0.2],
        )
        roots = _bezier.find_roots(coeffs)
        assert roots == sorted(roots)
        assert roots == pytest.approx([0.1, 0.5, 0.8], abs=1e-12)
