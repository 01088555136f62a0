"""Model-kind tags and the factory that turns them into model instances."""

from enum import Enum
from typing import Callable

from regression.base import RegressionModel
from regression.exponential import ExponentialRegression
from regression.exponential_moving import ExponentialMovingRegression
from regression.linear import LinearRegression
from regression.logarithmic import LogarithmicRegression
from regression.lowess import LOWESSRegression
from regression.moving import MovingRegression
from regression.polynomial import PolynomialRegression
from regression.weighted import WeightedRegression

DEFAULT_ALPHA = 0.3
DEFAULT_BANDWIDTH = 0.3
DEFAULT_ROBUST_ITERATIONS = 2


def _canonical(tag: str) -> str:
    return "".join(ch for ch in tag.lower() if ch.isalnum())


class RegressionKind(str, Enum):
    LINEAR = "linear"
    LOGARITHMIC = "logarithmic"
    EXPONENTIAL = "exponential"
    WEIGHTED = "weighted"
    POLYNOMIAL = "polynomial"
    MOVING = "moving"
    EXPONENTIAL_MOVING = "exponential_moving"
    LOWESS = "lowess"

    @classmethod
    def _missing_(cls, value):
        # Accept "ExponentialMoving", "exponential-moving", "LOWESS", ...
        if isinstance(value, str):
            wanted = _canonical(value)
            for member in cls:
                if _canonical(member.value) == wanted:
                    return member
        return None


class UnsupportedModelKind(ValueError):
    """The factory was asked for a model kind it does not know."""


_BUILDERS: dict[RegressionKind, Callable[..., RegressionModel]] = {
    RegressionKind.LINEAR: lambda period, **_: LinearRegression(period),
    RegressionKind.LOGARITHMIC: lambda period, **_: LogarithmicRegression(period),
    RegressionKind.EXPONENTIAL: lambda period, **_: ExponentialRegression(period),
    RegressionKind.WEIGHTED: lambda period, **_: WeightedRegression(period),
    RegressionKind.POLYNOMIAL: lambda period, degree, **_: PolynomialRegression(period, degree),
    RegressionKind.MOVING: lambda period, **_: MovingRegression(period),
    RegressionKind.EXPONENTIAL_MOVING: lambda period, alpha, **_: ExponentialMovingRegression(
        period, alpha
    ),
    RegressionKind.LOWESS: lambda period, bandwidth, robust_iterations, **_: LOWESSRegression(
        period, bandwidth, robust_iterations
    ),
}


def create_regression(
    kind: RegressionKind | str,
    period: int,
    degree: int = 2,
    *,
    alpha: float = DEFAULT_ALPHA,
    bandwidth: float = DEFAULT_BANDWIDTH,
    robust_iterations: int = DEFAULT_ROBUST_ITERATIONS,
) -> RegressionModel:
    """
    Build the model for ``kind``. ``degree`` only matters for polynomial
    fits, ``alpha`` for exponential-moving and ``bandwidth`` /
    ``robust_iterations`` for LOWESS.

    Raises UnsupportedModelKind for an unknown tag.
    """
    try:
        kind = RegressionKind(kind)
    except ValueError:
        raise UnsupportedModelKind(f"Unsupported regression kind: {kind!r}") from None

    builder = _BUILDERS.get(kind)
    if builder is None:
        raise UnsupportedModelKind(f"Unsupported regression kind: {kind!r}")
    return builder(
        period,
        degree=degree,
        alpha=alpha,
        bandwidth=bandwidth,
        robust_iterations=robust_iterations,
    )
