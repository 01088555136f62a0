from .numeric import NumericOverflow, RegressionResult, is_finite_number, residual_std_dev
from .base import RegressionModel, SampleLengthMismatch
from .linear import LinearRegression
from .logarithmic import LogarithmicRegression
from .exponential import ExponentialRegression
from .weighted import WeightedRegression
from .polynomial import PolynomialRegression
from .moving import MovingRegression
from .exponential_moving import ExponentialMovingRegression
from .lowess import LOWESSRegression
from .factory import RegressionKind, UnsupportedModelKind, create_regression

__all__ = [
    "NumericOverflow",
    "RegressionResult",
    "is_finite_number",
    "residual_std_dev",
    "RegressionModel",
    "SampleLengthMismatch",
    "LinearRegression",
    "LogarithmicRegression",
    "ExponentialRegression",
    "WeightedRegression",
    "PolynomialRegression",
    "MovingRegression",
    "ExponentialMovingRegression",
    "LOWESSRegression",
    "RegressionKind",
    "UnsupportedModelKind",
    "create_regression",
]
