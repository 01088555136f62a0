"""Floating-point guards and residual dispersion helpers shared by every model."""

import math
import sys
from dataclasses import dataclass
from typing import Callable, NamedTuple, Sequence

DEGENERATE_DENOMINATOR = 1e-10
FLAT_LINE_STD_DEV = 0.0001  # Keeps a degenerate channel from collapsing to zero width
MIN_SPAN = 0.0001
RANGE_STD_DEV_FRACTION = 0.1

Evaluator = Callable[[Sequence[float], float], float]


class NumericOverflow(ArithmeticError):
    """An accumulated sum or derived coefficient became infinite or NaN."""


class RegressionResult(NamedTuple):
    coefficients: list[float]
    std_dev: float


def is_finite_number(value) -> bool:
    """True for real numbers that are neither NaN nor infinite."""
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return False
    return math.isfinite(value)


def ensure_finite(*values: float, what: str = "sum"):
    """Raise NumericOverflow on the first non-finite value."""
    for value in values:
        if not math.isfinite(value):
            raise NumericOverflow(f"{what} left the finite range")


def try_protected(compute: Callable[..., RegressionResult], *args) -> RegressionResult | NumericOverflow:
    """
    Run a protected computation and hand back either its result or the
    overflow signal that stopped it. Python's own arithmetic failures
    (``math.exp`` overflow, ``log`` of a non-positive value, a zero
    divisor) count as overflow too.
    """
    try:
        return compute(*args)
    except NumericOverflow as exc:
        return exc
    except (OverflowError, ZeroDivisionError, ValueError) as exc:
        return NumericOverflow(str(exc))


def leading(coefficients: Sequence[float]) -> float:
    """First coefficient, or 0 for an empty vector."""
    return float(coefficients[0]) if len(coefficients) > 0 else 0.0


def clamp(value: float, low: float, high: float) -> float:
    return max(low, min(value, high))


def mean(values: Sequence[float]) -> float:
    """Arithmetic mean that cannot overflow for finite inputs."""
    n = len(values)
    return math.fsum(v / n for v in values)


def bounded_span(low: float, high: float) -> float:
    """``high - low``, saturating at the largest double when finite bounds are too far apart."""
    span = high - low
    if math.isinf(span) and math.isfinite(low) and math.isfinite(high):
        return sys.float_info.max
    return span


@dataclass(frozen=True)
class Scale:
    """Min-max mapping of a sample onto [0, 1]."""

    minimum: float
    span: float

    @classmethod
    def of(cls, values: Sequence[float], floor: float = MIN_SPAN) -> "Scale":
        low, high = min(values), max(values)
        return cls(low, max(bounded_span(low, high), floor))

    def normalize(self, value: float) -> float:
        shifted = value - self.minimum
        if math.isinf(shifted):
            # Range wider than a double; divide first, values land slightly above 1
            return value / self.span - self.minimum / self.span
        return shifted / self.span

    def normalize_all(self, values: Sequence[float]) -> list[float]:
        return [self.normalize(v) for v in values]


def least_squares_line(
    xs: Sequence[float],
    ys: Sequence[float],
    weights: Sequence[float] | None = None,
) -> tuple[float, float] | None:
    """
    Closed-form (intercept, slope) from the 2x2 normal equations.

    Returns None when the denominator ``Σw·Σwx² − (Σwx)²`` is numerically
    zero. Raises NumericOverflow as soon as any running sum stops being
    finite, or when the solved line is not finite.
    """
    sum_w = sum_x = sum_y = sum_xy = sum_x2 = 0.0
    for i, (x, y) in enumerate(zip(xs, ys)):
        w = 1.0 if weights is None else weights[i]
        sum_w += w
        sum_x += w * x
        sum_y += w * y
        sum_xy += w * x * y
        sum_x2 += w * x * x
        ensure_finite(sum_w, sum_x, sum_y, sum_xy, sum_x2)

    denominator = sum_w * sum_x2 - sum_x * sum_x
    if abs(denominator) < DEGENERATE_DENOMINATOR:
        return None

    slope = (sum_w * sum_xy - sum_x * sum_y) / denominator
    intercept = (sum_y - slope * sum_x) / sum_w
    ensure_finite(slope, intercept, what="regression line")
    return intercept, slope


def weighted_mean(values: Sequence[float], weights: Sequence[float] | None = None) -> float:
    if weights is None:
        return mean(values)
    return math.fsum(w * v for w, v in zip(weights, values)) / math.fsum(weights)


def normalized_line_fit(
    xs: Sequence[float],
    ys: Sequence[float],
    weights: Sequence[float] | None = None,
) -> tuple[float, float, Scale]:
    """
    Fit a line on min-max normalized copies of ``xs`` and ``ys`` and map the
    result back to the raw domain. On [0, 1] the sums cannot overflow, so
    this is the common fallback for every line-shaped model. Returns
    ``(intercept, slope, y_scale)``.
    """
    x_scale, y_scale = Scale.of(xs), Scale.of(ys)
    norm_x = x_scale.normalize_all(xs)
    norm_y = y_scale.normalize_all(ys)

    line = None
    if len(xs) >= 2:
        line = least_squares_line(norm_x, norm_y, weights)
    if line is None:
        norm_intercept, norm_slope = weighted_mean(norm_y, weights), 0.0
    else:
        norm_intercept, norm_slope = line

    slope = norm_slope * (y_scale.span / x_scale.span)
    intercept = (norm_intercept * y_scale.span + y_scale.minimum) - slope * x_scale.minimum
    ensure_finite(intercept, slope, what="denormalized line")
    return intercept, slope, y_scale


def rms_error(
    x: Sequence[float],
    y: Sequence[float],
    coefficients: Sequence[float],
    evaluate: Evaluator,
    weights: Sequence[float] | None = None,
) -> float:
    """
    Root of the (optionally weighted) mean squared residual. May come back
    infinite or NaN; callers decide how to recover.
    """
    total = 0.0
    total_weight = 0.0
    for i, (xi, yi) in enumerate(zip(x, y)):
        w = 1.0 if weights is None else weights[i]
        error = yi - evaluate(coefficients, xi)
        total += w * error * error
        total_weight += w
    if weights is not None and total_weight < DEGENERATE_DENOMINATOR:
        return FLAT_LINE_STD_DEV
    try:
        return math.sqrt(total / total_weight)
    except (ValueError, ZeroDivisionError):
        return math.nan


def range_std_dev(values: Sequence[float]) -> float:
    """Dispersion estimate of last resort: 10% of the finite range, or 0.1."""
    finite = [v for v in values if math.isfinite(v)]
    if not finite:
        return RANGE_STD_DEV_FRACTION
    # Scale before subtracting so that a range wider than the double limit stays finite
    estimate = max(finite) * RANGE_STD_DEV_FRACTION - min(finite) * RANGE_STD_DEV_FRACTION
    return estimate if estimate > 0 else RANGE_STD_DEV_FRACTION


def residual_std_dev(
    x: Sequence[float],
    y: Sequence[float],
    coefficients: Sequence[float],
    evaluate: Evaluator,
    weights: Sequence[float] | None = None,
) -> float:
    """sqrt(mean((y - f(x))²)); never raises, degrades to the range estimate."""
    try:
        std_dev = rms_error(x, y, coefficients, evaluate, weights)
    except OverflowError:
        std_dev = math.inf
    if not math.isfinite(std_dev):
        return range_std_dev(y)
    return std_dev


def finite_or_span(std_dev: float, scale: Scale) -> float:
    """Fallback-path guard: substitute 10% of the y span for a non-finite result."""
    if math.isfinite(std_dev):
        return std_dev
    return scale.span * RANGE_STD_DEV_FRACTION
