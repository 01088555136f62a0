"""Least-squares line over the most recent ``period`` samples only."""

from regression.linear import LineModel
from regression.numeric import (
    FLAT_LINE_STD_DEV,
    RegressionResult,
    finite_or_span,
    least_squares_line,
    normalized_line_fit,
    residual_std_dev,
    rms_error,
)


class MovingRegression(LineModel):
    """
    Linear regression restricted to a trailing window.

    When the window holds fewer than ``period`` samples the whole series is
    used. A degenerate window yields a flat line at the latest y, not the
    window mean, so the channel stays anchored to current price.
    """

    def window_start(self, n: int) -> int:
        return max(0, n - self.period)

    def std_dev(self, x, y, coefficients):
        start = self.window_start(len(x))
        return residual_std_dev(x[start:], y[start:], coefficients, self.evaluate)

    def _fit_protected(self, x, y):
        start = self.window_start(len(x))
        line = least_squares_line(x[start:], y[start:])
        if line is None:
            return RegressionResult([y[-1], 0.0], FLAT_LINE_STD_DEV)

        coefficients = list(line)
        return RegressionResult(coefficients, self.std_dev(x, y, coefficients))

    def _fit_fallback(self, x, y):
        start = self.window_start(len(x))
        window_x, window_y = x[start:], y[start:]

        intercept, slope, y_scale = normalized_line_fit(window_x, window_y)
        coefficients = [intercept, slope]
        std_dev = rms_error(window_x, window_y, coefficients, self.evaluate)
        return RegressionResult(coefficients, finite_or_span(std_dev, y_scale))
