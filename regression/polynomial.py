"""Polynomial least squares of bounded degree."""

import math
from typing import Sequence

import structlog

from regression.base import RegressionModel
from regression.numeric import (
    NumericOverflow,
    RegressionResult,
    Scale,
    clamp,
    ensure_finite,
    leading,
    normalized_line_fit,
    try_protected,
)
from regression.solver import solve_regularized

MIN_DEGREE, MAX_DEGREE = 1, 5
X_SPAN_FLOOR = 1e-10

log = structlog.get_logger(component="regression")


def power_sums(values: Sequence[float], max_power: int) -> list[float]:
    """[Σv⁰, Σv¹, ..., Σv^max_power], checked for overflow after every term."""
    sums = [0.0] * (max_power + 1)
    for v in values:
        term = 1.0
        for p in range(max_power + 1):
            sums[p] += term
            term *= v
        ensure_finite(*sums, what="power sum")
    return sums


def expand_shifted(coefficients: Sequence[float], origin: float, span: float) -> list[float]:
    """
    Rewrite Σ c_k·((x − origin)/span)^k as Σ d_j·x^j.

    d_j = Σ_{k≥j} c_k · C(k, j) · (−origin)^(k−j) / span^k
    """
    degree = len(coefficients) - 1
    expanded = [0.0] * (degree + 1)
    for k, c in enumerate(coefficients):
        scale = c / span ** k
        for j in range(k + 1):
            expanded[j] += scale * math.comb(k, j) * (-origin) ** (k - j)
    ensure_finite(*expanded, what="expanded coefficient")
    return expanded


class PolynomialRegression(RegressionModel):
    """
    y = c0 + c1·x + ... + cd·x^d, with d clamped to 1..5.

    The normal equations are built on x mapped to [0, 1], which keeps the
    power sums well conditioned, and the solution is expanded back so that
    ``evaluate`` works on raw x. If the requested degree cannot be solved
    the fit retries one degree lower, then settles for a straight line; the
    coefficient vector is then shorter than degree + 1.
    """

    def __init__(self, period: int, degree: int = 2):
        super().__init__(period)
        self.degree = int(clamp(degree, MIN_DEGREE, MAX_DEGREE))

    @property
    def min_samples(self) -> int:
        return self.degree + 1

    def degenerate(self, n: int) -> RegressionResult:
        return RegressionResult([0.0] * (self.degree + 1), 0.0)

    def flat_line(self, n: int, level: float) -> list[float]:
        return [level] + [0.0] * self.degree

    def evaluate(self, coefficients: Sequence[float], x: float) -> float:
        result = 0.0
        try:
            for power, c in enumerate(coefficients):
                result += c * x ** power
        except OverflowError:
            result = math.inf
        if math.isfinite(result):
            return result
        if len(coefficients) > 1:
            return coefficients[0] + coefficients[1] * x
        return leading(coefficients)

    def solve(self, x: Sequence[float], y: Sequence[float], degree: int) -> list[float]:
        """Raw-domain coefficients for ``degree``. Raises NumericOverflow."""
        terms = degree + 1
        x_scale = Scale.of(x, floor=X_SPAN_FLOOR)
        t = x_scale.normalize_all(x)

        sums = power_sums(t, 2 * degree)
        matrix = [[sums[row + col] for col in range(terms)] for row in range(terms)]

        vector = [0.0] * terms
        for ti, yi in zip(t, y):
            term = 1.0
            for row in range(terms):
                vector[row] += yi * term
                term *= ti
            ensure_finite(*vector, what="moment vector")

        normalized = solve_regularized(matrix, vector)
        return expand_shifted(normalized, x_scale.minimum, x_scale.span)

    def _fit_degree(self, x, y, degree: int) -> RegressionResult:
        coefficients = self.solve(x, y, degree)
        return RegressionResult(coefficients, self.std_dev(x, y, coefficients))

    def _fit_protected(self, x, y):
        return self._fit_degree(x, y, self.degree)

    def _fit_fallback(self, x, y):
        lower = max(MIN_DEGREE, self.degree - 1)
        outcome = try_protected(self._fit_degree, x, y, lower)
        if not isinstance(outcome, NumericOverflow):
            return outcome

        log.debug("polynomial_linear_fallback", degree=lower, reason=str(outcome))
        return self._fit_line(x, y)

    def _fit_line(self, x, y) -> RegressionResult:
        intercept, slope, _ = normalized_line_fit(x, y)
        coefficients = [intercept, slope]
        return RegressionResult(coefficients, self.std_dev(x, y, coefficients))

    def __repr__(self) -> str:
        return f"{type(self).__name__}(period={self.period}, degree={self.degree})"
