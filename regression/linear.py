"""Ordinary least-squares line: y = intercept + slope·x."""

from typing import Sequence

from regression.base import RegressionModel
from regression.numeric import (
    FLAT_LINE_STD_DEV,
    RegressionResult,
    finite_or_span,
    leading,
    least_squares_line,
    mean,
    normalized_line_fit,
    rms_error,
)


class LineModel(RegressionModel):
    """Shared shape of the models whose coefficients are [intercept, slope]."""

    def evaluate(self, coefficients: Sequence[float], x: float) -> float:
        if len(coefficients) < 2:
            return leading(coefficients)
        return coefficients[0] + coefficients[1] * x

    def degenerate(self, n: int) -> RegressionResult:
        return RegressionResult([0.0, 0.0], 0.0)


class LinearRegression(LineModel):
    """
    Closed-form OLS over every supplied sample.

    A vertical sample cloud (all x equal) has no slope; the fit becomes a
    flat line at mean(y) with a 0.0001 dispersion.
    """

    def _fit_protected(self, x, y):
        line = least_squares_line(x, y)
        if line is None:
            return RegressionResult([mean(y), 0.0], FLAT_LINE_STD_DEV)

        coefficients = list(line)
        return RegressionResult(coefficients, self.std_dev(x, y, coefficients))

    def _fit_fallback(self, x, y):
        intercept, slope, y_scale = normalized_line_fit(x, y)
        coefficients = [intercept, slope]
        std_dev = rms_error(x, y, coefficients, self.evaluate)
        return RegressionResult(coefficients, finite_or_span(std_dev, y_scale))
