"""Exponential trend: y = a·e^(b·x), fitted as ln(y) = ln(a) + b·x."""

import math
from typing import Sequence

from regression.base import RegressionModel
from regression.numeric import (
    FLAT_LINE_STD_DEV,
    NumericOverflow,
    RegressionResult,
    Scale,
    clamp,
    finite_or_span,
    leading,
    least_squares_line,
    mean,
    residual_std_dev,
    rms_error,
)

TINY = math.ulp(0.0)  # Smallest positive double, stands in for non-positive prices
MAX_GROWTH = 10.0  # Bound on a and on every prediction, as a multiple of max(y)
MAX_RATE = 10.0


class ExponentialRegression(RegressionModel):
    """
    Log-linearized exponential fit.

    Requires y > 0 on the protected path. Anything else (zero or negative
    prices, overflow in e^x) goes to the fallback, which floors y at the
    smallest positive double and works on normalized data. The degenerate
    result is the multiplicative identity [1, 0].
    """

    def evaluate(self, coefficients: Sequence[float], x: float) -> float:
        if len(coefficients) < 2:
            return leading(coefficients)
        a, b = coefficients[0], coefficients[1]
        try:
            result = a * math.exp(b * x)
        except OverflowError:
            result = math.inf
        if not math.isfinite(result):
            return a * (1 + b * x)
        return result

    def degenerate(self, n: int) -> RegressionResult:
        return RegressionResult([1.0, 0.0], 0.0)

    def std_dev(self, x, y, coefficients):
        cap = max(y) * MAX_GROWTH

        def capped(c, xi):
            return min(self.evaluate(c, xi), cap)

        return residual_std_dev(x, y, coefficients, capped)

    def _fit_protected(self, x, y):
        if any(v <= 0 for v in y):
            raise NumericOverflow("exponential model requires positive values")

        log_y = [math.log(v) for v in y]
        line = least_squares_line(x, log_y)
        if line is None:
            # Geometric mean
            return RegressionResult([math.exp(mean(log_y)), 0.0], FLAT_LINE_STD_DEV)

        log_a, b = line
        a = math.exp(log_a)
        if not math.isfinite(a):
            raise NumericOverflow("exponential scale left the finite range")

        coefficients = [a, b]
        return RegressionResult(coefficients, self.std_dev(x, y, coefficients))

    def _fit_fallback(self, x, y):
        adjusted = [max(v, TINY) for v in y]
        x_scale = Scale.of(x)
        y_scale = Scale.of(adjusted)
        top = max(adjusted)

        norm_x = x_scale.normalize_all(x)
        log_y = [math.log(max(v / top, TINY)) for v in adjusted]

        line = least_squares_line(norm_x, log_y)
        if line is None:
            norm_b, norm_log_a = 0.0, mean(log_y)
        else:
            norm_log_a, norm_b = line

        b = clamp(norm_b / x_scale.span, -MAX_RATE, MAX_RATE)
        # Shift from the normalized origin back to x = 0
        try:
            a = math.exp(norm_log_a - b * x_scale.minimum) * top
        except OverflowError:
            a = math.inf
        coefficients = [min(a, top * MAX_GROWTH), b]

        std_dev = rms_error(x, y, coefficients, self.evaluate)
        return RegressionResult(coefficients, finite_or_span(std_dev, y_scale))
