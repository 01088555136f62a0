"""EMA-presmoothed moving regression."""

import math
from typing import Sequence

from regression.moving import MovingRegression
from regression.numeric import (
    FLAT_LINE_STD_DEV,
    RegressionResult,
    clamp,
    ensure_finite,
    finite_or_span,
    least_squares_line,
    mean,
    normalized_line_fit,
    residual_std_dev,
    rms_error,
)

MIN_ALPHA, MAX_ALPHA = 0.01, 0.99
FALLBACK_MAX_ALPHA = 0.2
WARMUP = 5  # Fallback averages the first points instead of smoothing them


def ema(values: Sequence[float], alpha: float) -> list[float]:
    """Single EMA pass seeded with the first value. Raises NumericOverflow."""
    smoothed = [values[0]]
    for value in values[1:]:
        smoothed.append(alpha * value + (1 - alpha) * smoothed[-1])
        ensure_finite(smoothed[-1], what="smoothed value")
    return smoothed


def trailing_mean(values: Sequence[float], end: int, width: int) -> float:
    return mean(values[max(0, end - width + 1):end + 1])


def conservative_smoothing(values: Sequence[float], alpha: float) -> list[float]:
    """
    Cumulative mean over the warm-up, EMA afterwards; any non-finite EMA step
    is replaced by a short trailing mean.
    """
    smoothed = [values[0]]
    for i in range(1, len(values)):
        if i < WARMUP:
            smoothed.append(trailing_mean(values, i, i + 1))
            continue
        step = alpha * values[i] + (1 - alpha) * smoothed[-1]
        if not math.isfinite(step):
            step = trailing_mean(values, i, WARMUP)
        smoothed.append(step)
    return smoothed


class ExponentialMovingRegression(MovingRegression):
    """
    Smooths y with an EMA, then fits a line through the last ``period``
    smoothed points. Dispersion is measured against the smoothed series,
    which gives a tighter channel than raw prices would.
    """

    def __init__(self, period: int, alpha: float = 0.3):
        super().__init__(period)
        self.alpha = clamp(alpha, MIN_ALPHA, MAX_ALPHA)

    def std_dev(self, x, y, coefficients):
        try:
            smoothed = ema(y, self.alpha)
        except ArithmeticError:
            smoothed = conservative_smoothing(y, min(self.alpha, FALLBACK_MAX_ALPHA))
        start = self.window_start(len(x))
        return residual_std_dev(x[start:], smoothed[start:], coefficients, self.evaluate)

    def _fit_protected(self, x, y):
        smoothed = ema(y, self.alpha)
        start = self.window_start(len(x))

        line = least_squares_line(x[start:], smoothed[start:])
        if line is None:
            return RegressionResult([smoothed[-1], 0.0], FLAT_LINE_STD_DEV)

        coefficients = list(line)
        return RegressionResult(coefficients, self.std_dev(x, y, coefficients))

    def _fit_fallback(self, x, y):
        smoothed = conservative_smoothing(y, min(self.alpha, FALLBACK_MAX_ALPHA))
        start = self.window_start(len(x))
        window_x, window_y = x[start:], smoothed[start:]

        intercept, slope, y_scale = normalized_line_fit(window_x, window_y)
        coefficients = [intercept, slope]
        std_dev = rms_error(window_x, window_y, coefficients, self.evaluate)
        return RegressionResult(coefficients, finite_or_span(std_dev, y_scale))

    def __repr__(self) -> str:
        return f"{type(self).__name__}(period={self.period}, alpha={self.alpha})"
