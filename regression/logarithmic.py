"""Logarithmic trend: y = a + b·ln(x + 1), with x floored just above zero."""

import math
from typing import Sequence

from regression.linear import LineModel
from regression.numeric import (
    FLAT_LINE_STD_DEV,
    RegressionResult,
    Scale,
    finite_or_span,
    leading,
    least_squares_line,
    mean,
    rms_error,
)

X_FLOOR = 1e-10


def log_position(x: float) -> float:
    return math.log(max(x, X_FLOOR) + 1)


class LogarithmicRegression(LineModel):
    """Least squares of y against ln(x + 1); degenerate result [0, 0]."""

    def evaluate(self, coefficients: Sequence[float], x: float) -> float:
        if len(coefficients) < 2:
            return leading(coefficients)
        return coefficients[0] + coefficients[1] * log_position(x)

    def _fit_protected(self, x, y):
        line = least_squares_line([log_position(v) for v in x], y)
        if line is None:
            return RegressionResult([mean(y), 0.0], FLAT_LINE_STD_DEV)

        coefficients = list(line)
        return RegressionResult(coefficients, self.std_dev(x, y, coefficients))

    def _fit_fallback(self, x, y):
        x_scale, y_scale = Scale.of(x), Scale.of(y)
        log_x = [log_position(v) for v in x_scale.normalize_all(x)]
        norm_y = y_scale.normalize_all(y)

        line = least_squares_line(log_x, norm_y)
        norm_intercept, norm_slope = line if line is not None else (mean(norm_y), 0.0)

        # ln is not affine, so only y is mapped back; x stays in its normalized frame
        coefficients = [norm_intercept * y_scale.span + y_scale.minimum, norm_slope * y_scale.span]
        std_dev = rms_error(x, y, coefficients, self.evaluate)
        return RegressionResult(coefficients, finite_or_span(std_dev, y_scale))
