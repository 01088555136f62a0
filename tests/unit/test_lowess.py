"""Tests for robust LOWESS smoothing."""

import math

import pytest

from regression import LOWESSRegression
from regression.lowess import bisquare, finite_median, tricube


def spiked_line(n=21, spike_at=10, spike=50.0):
    x = [i / (n - 1) for i in range(n)]
    y = [10 + 2 * v for v in x]
    y[spike_at] += spike
    return x, y


class TestKernels:
    def test_tricube(self):
        assert tricube(0.0) == 1.0
        assert tricube(1.0) == 0.0
        assert tricube(2.0) == 0.0
        assert tricube(0.5) == pytest.approx((1 - 0.125) ** 3)

    def test_bisquare(self):
        assert bisquare(0.0) == 1.0
        assert bisquare(0.5) == pytest.approx(0.5625)
        assert bisquare(1.5) == 0.0

    def test_finite_median_counts_non_finite_as_zero(self):
        values = [1.0, math.nan, 3.0]
        assert finite_median(values) == 1.0
        assert math.isnan(values[1])
        assert finite_median([]) == 0.0


class TestLOWESSRegression:
    def test_parameters_are_clamped(self):
        model = LOWESSRegression(10, bandwidth=5.0, robust_iterations=9)
        assert model.bandwidth == 1.0
        assert model.robust_iterations == 5
        model = LOWESSRegression(10, bandwidth=0.0, robust_iterations=0)
        assert model.bandwidth == 0.1
        assert model.robust_iterations == 1

    def test_returns_one_value_per_sample(self):
        x, y = spiked_line()
        coefficients, std_dev = LOWESSRegression(21).fit(x, y)
        assert len(coefficients) == len(x)
        assert math.isfinite(std_dev)
        assert std_dev > 0

    def test_robust_passes_suppress_outlier(self):
        x, y = spiked_line()
        truth = 10 + 2 * x[10]
        plain, _ = LOWESSRegression(21, bandwidth=0.3, robust_iterations=1).fit(x, y)
        robust, _ = LOWESSRegression(21, bandwidth=0.3, robust_iterations=2).fit(x, y)
        assert abs(robust[10] - truth) < 1.0
        assert abs(robust[10] - truth) < abs(plain[10] - truth)

    def test_too_few_samples(self):
        assert LOWESSRegression(10).fit([0.0, 1.0], [1.0, 2.0]) == ([0.0, 0.0], 0.0)

    def test_evaluate_interpolates_table(self):
        model = LOWESSRegression(10)
        table = [0.0, 10.0, 20.0]
        assert model.evaluate(table, 0.25) == pytest.approx(5.0)
        assert model.evaluate(table, 0.5) == pytest.approx(10.0)
        assert model.evaluate(table, 1.0) == pytest.approx(20.0)

    def test_evaluate_clamps_outside_unit_interval(self):
        model = LOWESSRegression(10)
        table = [0.0, 10.0, 20.0]
        assert model.evaluate(table, -1.0) == 0.0
        assert model.evaluate(table, 2.0) == pytest.approx(20.0)

    def test_evaluate_non_finite_positions(self):
        model = LOWESSRegression(10)
        table = [0.0, 10.0, 20.0]
        assert model.evaluate(table, math.nan) == 10.0
        assert model.evaluate(table, math.inf) == pytest.approx(20.0)
        assert model.evaluate(table, -math.inf) == 0.0

    def test_evaluate_short_tables(self):
        model = LOWESSRegression(10)
        assert model.evaluate([], 0.5) == 0.0
        assert model.evaluate([7.0], 0.9) == 7.0

    def test_non_finite_input_uses_moving_average(self):
        x = [0.0, 0.25, 0.5, 0.75, 1.0]
        y = [1.0, 2.0, math.inf, 4.0, 5.0]
        coefficients, std_dev = LOWESSRegression(10).fit(x, y)
        assert len(coefficients) == 5
        assert std_dev == pytest.approx(0.4)
