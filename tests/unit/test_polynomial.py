"""Tests for the bounded-degree polynomial model and its solver."""

import math

import pytest

from regression import PolynomialRegression
from regression.polynomial import expand_shifted, power_sums
from regression.solver import COEFFICIENT_LIMIT, solve_regularized


class TestSolver:
    def test_solves_well_posed_system(self):
        solution = solve_regularized([[2.0, 1.0], [1.0, 3.0]], [3.0, 5.0])
        assert solution == pytest.approx([0.8, 1.4], rel=1e-5)

    def test_singular_system_is_regularized_and_clamped(self):
        solution = solve_regularized([[0.0, 0.0], [0.0, 0.0]], [1.0, 1.0])
        assert solution == pytest.approx([COEFFICIENT_LIMIT, COEFFICIENT_LIMIT])

    def test_inputs_are_not_modified(self):
        matrix = [[1.0, 2.0], [3.0, 4.0]]
        vector = [5.0, 6.0]
        solve_regularized(matrix, vector)
        assert matrix == [[1.0, 2.0], [3.0, 4.0]]
        assert vector == [5.0, 6.0]


class TestHelpers:
    def test_power_sums(self):
        assert power_sums([1.0, 2.0], 2) == [2.0, 3.0, 5.0]

    def test_expand_shifted(self):
        # (x - 2) / 4 == -0.5 + 0.25x
        assert expand_shifted([0.0, 1.0], 2.0, 4.0) == pytest.approx([-0.5, 0.25])

    def test_expand_shifted_quadratic(self):
        # ((x - 1) / 2)² == 0.25 - 0.5x + 0.25x²
        assert expand_shifted([0.0, 0.0, 1.0], 1.0, 2.0) == pytest.approx([0.25, -0.5, 0.25])


class TestPolynomialRegression:
    def test_recovers_quadratic_in_raw_domain(self):
        x = [float(i) for i in range(10)]
        y = [2 + 3 * v + v * v for v in x]
        model = PolynomialRegression(20, degree=2)
        coefficients, std_dev = model.fit(x, y)
        assert coefficients == pytest.approx([2.0, 3.0, 1.0], abs=1e-2)
        assert model.evaluate(coefficients, 4.0) == pytest.approx(30.0, abs=1e-2)
        assert std_dev < 1e-2

    def test_degree_is_clamped(self):
        assert PolynomialRegression(10, degree=9).degree == 5
        assert PolynomialRegression(10, degree=0).degree == 1

    def test_needs_degree_plus_one_samples(self):
        model = PolynomialRegression(10, degree=2)
        assert model.min_samples == 3
        assert model.fit([0.0, 1.0], [1.0, 2.0]) == ([0.0, 0.0, 0.0], 0.0)

    def test_evaluate_falls_back_to_line_on_overflow(self):
        model = PolynomialRegression(10, degree=2)
        assert model.evaluate([1.0, 2.0, 3.0], 1e200) == pytest.approx(1 + 2e200)
        assert model.evaluate([1.0, 2.0, 3.0], 2.0) == pytest.approx(17.0)

    def test_overflowing_moments_settle_for_a_line(self):
        x = [0.0, 1.0, 2.0, 3.0]
        y = [1e308, 1.5e308, 1.2e308, 1.7e308]
        coefficients, std_dev = PolynomialRegression(10, degree=2).fit(x, y)
        assert len(coefficients) == 2
        assert all(math.isfinite(c) for c in coefficients)
        assert math.isfinite(std_dev)

    def test_repr_carries_degree(self):
        assert repr(PolynomialRegression(10, degree=3)) == "PolynomialRegression(period=10, degree=3)"

    def test_failed_fallback_gives_flat_curve(self):
        model = PolynomialRegression(10, degree=2)
        coefficients, std_dev = model.fit([0.0, 1.0, 2.0, 3.0], [1.0, math.nan, 3.0, 2.0])
        assert coefficients == pytest.approx([2.0, 0.0, 0.0])
        assert model.evaluate(coefficients, 7.0) == pytest.approx(2.0)
        assert math.isfinite(std_dev)
