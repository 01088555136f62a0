"""Computed channel for one bar."""

from dataclasses import dataclass, field

from channel.levels import MIDDLE_INDEX


@dataclass(frozen=True)
class ChannelData:
    bar_index: int
    levels: list[float]  # Upper band first, see FIBONACCI_LEVELS
    channel_offset: float  # Half the channel height
    coefficients: list[float]
    std_dev: float
    window_levels: dict[int, list[float]] = field(default_factory=dict)

    @property
    def upper(self) -> float:
        return self.levels[0]

    @property
    def middle(self) -> float:
        return self.levels[MIDDLE_INDEX]

    @property
    def lower(self) -> float:
        return self.levels[-1]
