"""Tests for model-kind resolution and the behavior shared by every model."""

import math

import pytest

from regression import (
    ExponentialMovingRegression,
    ExponentialRegression,
    LinearRegression,
    LogarithmicRegression,
    LOWESSRegression,
    MovingRegression,
    PolynomialRegression,
    RegressionKind,
    SampleLengthMismatch,
    UnsupportedModelKind,
    WeightedRegression,
    create_regression,
)

EXPECTED_TYPES = {
    RegressionKind.LINEAR: LinearRegression,
    RegressionKind.LOGARITHMIC: LogarithmicRegression,
    RegressionKind.EXPONENTIAL: ExponentialRegression,
    RegressionKind.WEIGHTED: WeightedRegression,
    RegressionKind.POLYNOMIAL: PolynomialRegression,
    RegressionKind.MOVING: MovingRegression,
    RegressionKind.EXPONENTIAL_MOVING: ExponentialMovingRegression,
    RegressionKind.LOWESS: LOWESSRegression,
}


def price_window(n=30):
    x = [i / n for i in range(n)]
    y = [100 + 0.5 * i + 3 * math.sin(i) for i in range(n)]
    return x, y


class TestRegressionKind:
    @pytest.mark.parametrize(
        "tag, kind",
        [
            ("linear", RegressionKind.LINEAR),
            ("ExponentialMoving", RegressionKind.EXPONENTIAL_MOVING),
            ("exponential-moving", RegressionKind.EXPONENTIAL_MOVING),
            ("LOWESS", RegressionKind.LOWESS),
            ("Polynomial", RegressionKind.POLYNOMIAL),
        ],
    )
    def test_tag_spellings(self, tag, kind):
        assert RegressionKind(tag) is kind

    def test_unknown_tag(self):
        with pytest.raises(ValueError):
            RegressionKind("spline")


class TestCreateRegression:
    @pytest.mark.parametrize("kind", list(RegressionKind))
    def test_builds_every_kind(self, kind):
        model = create_regression(kind, 50)
        assert type(model) is EXPECTED_TYPES[kind]
        assert model.period == 50

    def test_accepts_string_tags(self):
        assert isinstance(create_regression("Weighted", 10), WeightedRegression)

    def test_unknown_kind_raises(self):
        with pytest.raises(UnsupportedModelKind):
            create_regression("spline", 10)
        with pytest.raises(ValueError):
            create_regression("spline", 10)

    def test_forwards_model_parameters(self):
        assert create_regression("polynomial", 10, 4).degree == 4
        assert create_regression("exponential_moving", 10, alpha=0.5).alpha == 0.5
        lowess = create_regression("lowess", 10, bandwidth=0.6, robust_iterations=3)
        assert lowess.bandwidth == 0.6
        assert lowess.robust_iterations == 3


@pytest.mark.parametrize("kind", list(RegressionKind))
class TestModelContract:
    def test_fit_is_finite(self, kind):
        model = create_regression(kind, 30)
        x, y = price_window()
        coefficients, std_dev = model.fit(x, y)
        assert coefficients
        assert all(math.isfinite(c) for c in coefficients)
        assert math.isfinite(std_dev)
        assert std_dev >= 0

    def test_curve_tracks_prices(self, kind):
        model = create_regression(kind, 30)
        x, y = price_window()
        coefficients, _ = model.fit(x, y)
        value = model.evaluate(coefficients, x[-1])
        assert 90 < value < 130

    def test_too_few_samples_is_degenerate(self, kind):
        model = create_regression(kind, 30)
        coefficients, std_dev = model.fit([0.0], [100.0])
        assert std_dev == 0.0
        assert all(math.isfinite(model.evaluate(coefficients, v)) for v in (0.0, 0.5, 1.0))

    def test_length_mismatch(self, kind):
        with pytest.raises(SampleLengthMismatch):
            create_regression(kind, 30).fit([0.0, 0.5, 1.0], [1.0, 2.0])

    def test_fit_does_not_modify_inputs(self, kind):
        x, y = price_window()
        x_copy, y_copy = list(x), list(y)
        create_regression(kind, 30).fit(x, y)
        assert x == x_copy
        assert y == y_copy

    @pytest.mark.parametrize("coefficients", [[], [1.0], [1.0] * 7, [100.0, 0.5, 0.1]])
    def test_evaluate_is_total_and_deterministic(self, kind, coefficients):
        model = create_regression(kind, 30)
        for x in (-1.0, 0.0, 0.5, 1.0, 250.0):
            first = model.evaluate(coefficients, x)
            assert model.evaluate(coefficients, x) == first
            assert math.isfinite(first)
