"""Fibonacci subdivision of a regression channel."""

FIBONACCI_LEVELS = (1.0, 0.886, 0.764, 0.618, 0.5, 0.382, 0.236, 0.114, 0.0)
MIDDLE_INDEX = FIBONACCI_LEVELS.index(0.5)


def channel_levels(middle: float, offset: float) -> list[float]:
    """
    Price at every Fibonacci ratio between ``middle - offset`` (0.0) and
    ``middle + offset`` (1.0), upper band first.
    """
    lower = middle - offset
    height = 2 * offset
    return [lower + height * ratio for ratio in FIBONACCI_LEVELS]


def extrapolate_levels(previous: list[float], last: list[float]) -> list[float]:
    """Continue every level by the step it took between the last two bars."""
    return [b + (b - a) for a, b in zip(previous, last)]
