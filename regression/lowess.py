"""LOWESS: locally weighted scatterplot smoothing with robust re-weighting."""

import math
import statistics
from typing import Sequence

from regression.base import RegressionModel
from regression.numeric import (
    DEGENERATE_DENOMINATOR,
    FLAT_LINE_STD_DEV,
    RegressionResult,
    clamp,
    ensure_finite,
    mean,
    range_std_dev,
    rms_error,
)

MIN_BANDWIDTH, MAX_BANDWIDTH = 0.1, 1.0
MIN_ROBUST_ITERATIONS, MAX_ROBUST_ITERATIONS = 1, 5
ITERATION_CAP = 10
MAD_SCALE = 6.0
MAD_FLOOR = 1e-10
FALLBACK_WINDOW = 5


def tricube(distance: float) -> float:
    """(1 − d³)³ inside the unit interval, 0 outside."""
    if distance >= 1:
        return 0.0
    return max(0.0, 1 - distance ** 3) ** 3


def bisquare(u: float) -> float:
    """(1 − u²)² inside the unit interval, 0 outside."""
    if u >= 1:
        return 0.0
    return (1 - u * u) ** 2


def finite_median(values: Sequence[float]) -> float:
    """Median with non-finite entries counted as 0. Works on a copy."""
    if not values:
        return 0.0
    return statistics.median(v if math.isfinite(v) else 0.0 for v in values)


class LOWESSRegression(RegressionModel):
    """
    Robust local smoothing.

    Each pass computes, for every sample i, a tri-cube weighted average of
    all y around x_i; after a pass the residuals are turned into bisquare
    robustness weights (scaled by 6·MAD) that multiply the kernel weights of
    the next pass, so outliers lose their pull.

    The "coefficients" returned by ``fit`` are not model parameters but the
    smoothed value at every sample, one per input point. ``evaluate`` reads
    them as a table laid out evenly over [0, 1] (entry i at i/(n−1)) and
    interpolates linearly; x outside [0, 1] is clamped, so a LOWESS result
    cannot extrapolate.
    """

    MIN_SAMPLES = 3

    def __init__(self, period: int, bandwidth: float = 0.3, robust_iterations: int = 2):
        super().__init__(period)
        self.bandwidth = clamp(bandwidth, MIN_BANDWIDTH, MAX_BANDWIDTH)
        self.robust_iterations = int(
            clamp(robust_iterations, MIN_ROBUST_ITERATIONS, MAX_ROBUST_ITERATIONS)
        )

    def degenerate(self, n: int) -> RegressionResult:
        return RegressionResult([0.0] * max(n, 1), 0.0)

    def flat_line(self, n: int, level: float) -> list[float]:
        return [level] * max(n, 1)

    def evaluate(self, coefficients: Sequence[float], x: float) -> float:
        n = len(coefficients)
        if n == 0:
            return 0.0
        if n == 1:
            return coefficients[0]

        if math.isnan(x):
            return coefficients[n // 2]
        position = clamp(x, 0.0, 1.0) * (n - 1)
        lower = min(int(position), n - 2)
        fraction = position - lower
        return coefficients[lower] + (coefficients[lower + 1] - coefficients[lower]) * fraction

    def std_dev(self, x, y, coefficients):
        errors = [yi - si for yi, si in zip(y, coefficients)]
        valid = [e * e for e in errors if math.isfinite(e)]
        if not valid:
            return FLAT_LINE_STD_DEV
        std_dev = math.sqrt(math.fsum(valid) / len(valid))
        return std_dev if math.isfinite(std_dev) else range_std_dev(y)

    def effective_bandwidth(self, x: Sequence[float], i: int) -> float:
        """Kernel radius at sample i; widens away from the series edges."""
        span = x[-1] - x[0]
        if abs(span) < DEGENERATE_DENOMINATOR:
            return max(self.bandwidth, MIN_BANDWIDTH)
        edge_distance = min(x[-1] - x[i], x[i] - x[0])
        return max(self.bandwidth * span, edge_distance * 2)

    def kernel_weights(self, x: Sequence[float], i: int, robustness: Sequence[float]) -> list[float]:
        radius = max(self.effective_bandwidth(x, i), DEGENERATE_DENOMINATOR)
        weights = []
        for xj, rj in zip(x, robustness):
            w = tricube(abs(xj - x[i]) / radius) * rj
            weights.append(w if math.isfinite(w) else 0.0)
        return weights

    @staticmethod
    def local_average(y: Sequence[float], weights: Sequence[float]) -> float:
        """Σw·y / Σw, or the median of y when the weights vanish or overflow."""
        sum_wy = sum_w = 0.0
        for w, v in zip(weights, y):
            if w > 0:
                sum_wy += w * v
                sum_w += w
        if not (math.isfinite(sum_wy) and math.isfinite(sum_w)) or sum_w <= DEGENERATE_DENOMINATOR:
            return finite_median(y)
        result = sum_wy / sum_w
        return result if math.isfinite(result) else finite_median(y)

    @staticmethod
    def robustness_weights(y: Sequence[float], smoothed: Sequence[float]) -> list[float]:
        residuals = [abs(yi - si) for yi, si in zip(y, smoothed)]
        scale = max(finite_median(residuals) * MAD_SCALE, MAD_FLOOR)
        weights = []
        for r in residuals:
            w = bisquare(r / scale)
            weights.append(w if math.isfinite(w) else 0.0)
        return weights

    def smooth(self, x: Sequence[float], y: Sequence[float]) -> list[float]:
        """Run the robust passes and return the smoothed value at every sample."""
        n = len(x)
        robustness = [1.0] * n
        smoothed = list(y)
        passes = min(self.robust_iterations, ITERATION_CAP)

        for iteration in range(passes):
            for i in range(n):
                value = self.local_average(y, self.kernel_weights(x, i, robustness))
                smoothed[i] = value if math.isfinite(value) else y[i]
            if iteration < passes - 1:
                robustness = self.robustness_weights(y, smoothed)

        return smoothed

    def _fit_protected(self, x, y):
        for xi, yi in zip(x, y):
            ensure_finite(xi, yi, what="input sample")

        smoothed = self.smooth(x, y)
        return RegressionResult(smoothed, self.std_dev(x, y, smoothed))

    def _fit_fallback(self, x, y):
        n = len(y)
        half = min(FALLBACK_WINDOW, n) // 2
        smoothed = []
        for i in range(n):
            window = y[max(0, i - half):min(n - 1, i + half) + 1]
            smoothed.append(mean(window))

        std_dev = rms_error(range(n), y, smoothed, lambda table, i: table[i])
        if not math.isfinite(std_dev):
            std_dev = max(range_std_dev(y), FLAT_LINE_STD_DEV)
        return RegressionResult(smoothed, std_dev)

    def __repr__(self) -> str:
        return (
            f"{type(self).__name__}(period={self.period}, bandwidth={self.bandwidth}, "
            f"robust_iterations={self.robust_iterations})"
        )
