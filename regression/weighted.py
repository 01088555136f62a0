"""Recency-weighted least-squares line."""

import math

from regression.linear import LineModel
from regression.numeric import (
    FLAT_LINE_STD_DEV,
    RegressionResult,
    clamp,
    finite_or_span,
    least_squares_line,
    normalized_line_fit,
    residual_std_dev,
    rms_error,
    weighted_mean,
)

MAX_SLOPE = 1e6


def exponential_weights(n: int) -> list[float]:
    """exp(i/n): the newest sample weighs e times the oldest."""
    return [math.exp(i / n) for i in range(n)]


def linear_weights(n: int) -> list[float]:
    """1 + i/n: a gentler ramp for the fallback path."""
    return [1 + i / n for i in range(n)]


class WeightedRegression(LineModel):
    """
    Weighted normal equations with weights growing toward the most recent
    sample. Dispersion is weighted the same way.
    """

    def std_dev(self, x, y, coefficients):
        return residual_std_dev(x, y, coefficients, self.evaluate, exponential_weights(len(x)))

    def _fit_protected(self, x, y):
        weights = exponential_weights(len(x))
        line = least_squares_line(x, y, weights)
        if line is None:
            return RegressionResult([weighted_mean(y, weights), 0.0], FLAT_LINE_STD_DEV)

        coefficients = list(line)
        return RegressionResult(coefficients, self.std_dev(x, y, coefficients))

    def _fit_fallback(self, x, y):
        weights = linear_weights(len(x))
        intercept, slope, y_scale = normalized_line_fit(x, y, weights)
        coefficients = [intercept, clamp(slope, -MAX_SLOPE, MAX_SLOPE)]
        std_dev = rms_error(x, y, coefficients, self.evaluate, weights)
        return RegressionResult(coefficients, finite_or_span(std_dev, y_scale))
