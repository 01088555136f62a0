"""The contract every regression model implements."""

import math
from abc import ABC, abstractmethod
from typing import Sequence

import structlog

from regression.numeric import (
    NumericOverflow,
    RegressionResult,
    mean,
    range_std_dev,
    residual_std_dev,
    try_protected,
)

log = structlog.get_logger(component="regression")


class SampleLengthMismatch(ValueError):
    """x and y were supplied with different lengths."""


class RegressionModel(ABC):
    """
    fit(x, y) -> (coefficients, std_dev), evaluate(coefficients, x) -> y.

    Instances carry only their construction parameters. Every working array
    lives inside a single ``fit`` call, so one instance can serve a whole
    calculation loop (one fit per bar), but it is not meant to be shared
    between threads.

    ``fit`` is total: too few samples give the model's degenerate result,
    and a protected computation that overflows is replaced by the model's
    normalized fallback. ``evaluate`` is total as well.
    """

    MIN_SAMPLES = 2

    def __init__(self, period: int):
        self.period = max(1, int(period))

    @property
    def min_samples(self) -> int:
        return self.MIN_SAMPLES

    def fit(self, x: Sequence[float], y: Sequence[float]) -> RegressionResult:
        if len(x) != len(y):
            raise SampleLengthMismatch(f"x has {len(x)} samples, y has {len(y)}")

        n = len(x)
        if n < self.min_samples:
            return self.degenerate(n)

        outcome = try_protected(self._fit_protected, x, y)
        if not isinstance(outcome, NumericOverflow):
            return outcome

        log.debug("regression_fallback", model=type(self).__name__, samples=n, reason=str(outcome))
        fallback = try_protected(self._fit_fallback, x, y)
        if not isinstance(fallback, NumericOverflow):
            return fallback

        log.warning("fallback_failed", model=type(self).__name__, samples=n, reason=str(fallback))
        finite = [v for v in y if math.isfinite(v)]
        if not finite:
            return RegressionResult(self.degenerate(n).coefficients, range_std_dev(y))
        return RegressionResult(self.flat_line(n, mean(finite)), range_std_dev(y))

    def std_dev(self, x: Sequence[float], y: Sequence[float], coefficients: Sequence[float]) -> float:
        """Residual dispersion of ``y`` around the fitted curve."""
        return residual_std_dev(x, y, coefficients, self.evaluate)

    def flat_line(self, n: int, level: float) -> list[float]:
        """Coefficients of a horizontal curve at ``level``."""
        return [level, 0.0]

    @abstractmethod
    def evaluate(self, coefficients: Sequence[float], x: float) -> float:
        ...

    @abstractmethod
    def degenerate(self, n: int) -> RegressionResult:
        """Result for fewer than ``min_samples`` samples."""

    @abstractmethod
    def _fit_protected(self, x: Sequence[float], y: Sequence[float]) -> RegressionResult:
        """Full-precision fit; raises NumericOverflow on the first non-finite value."""

    @abstractmethod
    def _fit_fallback(self, x: Sequence[float], y: Sequence[float]) -> RegressionResult:
        """Conservative fit on normalized data, used when the protected path overflows."""

    def __repr__(self) -> str:
        return f"{type(self).__name__}(period={self.period})"
