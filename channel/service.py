"""Channel calculator: fits the configured model over a price window and derives band levels."""

from datetime import datetime
from typing import Sequence

from config import RegressionMode, Settings, configure_logging
from channel.cache import LRUCache
from channel.levels import channel_levels, extrapolate_levels
from channel.models import ChannelData
from regression import RegressionModel, create_regression

_MODEL_FIELDS = (
    "regression_kind",
    "period",
    "degree",
    "ema_alpha",
    "lowess_bandwidth",
    "lowess_robust_iterations",
)
_CHANNEL_FIELDS = ("channel_width", "regression_mode", "start_date", "end_date", "cache_size")


def _build_model(settings: Settings) -> RegressionModel:
    return create_regression(
        settings.regression_kind,
        settings.period,
        settings.degree,
        alpha=settings.ema_alpha,
        bandwidth=settings.lowess_bandwidth,
        robust_iterations=settings.lowess_robust_iterations,
    )


class ChannelCalculator:
    """
    Wires together: host price series → regression model → channel levels → LRU cache.

    The host owns ``closes`` (and ``timestamps`` for date-range mode) and may
    keep appending to them; the last element is treated as the forming bar
    and never gets a fitted channel of its own.
    """

    def __init__(
        self,
        settings: Settings,
        closes: Sequence[float],
        timestamps: Sequence[datetime] | None = None,
    ):
        self.settings = settings
        self.log = configure_logging("regression-channel", settings.log_level)
        self._closes = closes
        self._timestamps = timestamps
        self._model = _build_model(settings)
        self._cache: LRUCache[int, ChannelData] = LRUCache(settings.cache_size)

        if settings.regression_mode is RegressionMode.DATE_RANGE and timestamps is None:
            raise ValueError("date range mode needs bar timestamps")

    @property
    def model(self) -> RegressionModel:
        return self._model

    def calculate(self, index: int) -> ChannelData | None:
        """Channel for bar ``index``, or None when it cannot be computed yet."""
        total = len(self._closes)
        if index < 0 or index >= total - 1:
            return None

        if self.settings.regression_mode is RegressionMode.DATE_RANGE:
            return self._calculate_date_range()

        cached = self._cache.get(index)
        if cached is not None:
            return cached

        period = self.settings.period
        start = index - period + 1
        if start < 0:
            return None

        window = list(self._closes[start:index + 1])
        size = len(window)
        x = [i / size for i in range(size)]
        coefficients, std_dev = self._model.fit(x, window)
        offset = std_dev * self.settings.channel_width

        current = channel_levels(self._model.evaluate(coefficients, (size - 1) / size), offset)

        window_levels: dict[int, list[float]] = {}
        for i, position in enumerate(x):
            bar = start + i
            if bar >= total - 1:
                continue
            window_levels[bar] = channel_levels(self._model.evaluate(coefficients, position), offset)

        # The last closed bar also projects the forming bar
        if index == total - 2 and index - 1 in window_levels:
            window_levels[total - 1] = extrapolate_levels(window_levels[index - 1], window_levels[index])

        channel = ChannelData(
            bar_index=index,
            levels=current,
            channel_offset=offset,
            coefficients=list(coefficients),
            std_dev=std_dev,
            window_levels=window_levels,
        )
        self._cache.set(index, channel)
        return channel

    def _calculate_date_range(self) -> ChannelData | None:
        start_date, end_date = self.settings.start_date, self.settings.end_date
        in_range = [
            i for i, stamp in enumerate(self._timestamps)
            if start_date <= stamp <= end_date and i < len(self._closes)
        ]
        if len(in_range) < 2:
            return None

        anchor = in_range[-1]
        cached = self._cache.get(anchor)
        if cached is not None:
            return cached

        size = len(in_range)
        x = [i / size for i in range(size)]
        y = [self._closes[i] for i in in_range]
        coefficients, std_dev = self._model.fit(x, y)
        offset = std_dev * self.settings.channel_width

        window_levels = {
            bar: channel_levels(self._model.evaluate(coefficients, position), offset)
            for bar, position in zip(in_range, x)
        }
        channel = ChannelData(
            bar_index=anchor,
            levels=channel_levels(self._model.evaluate(coefficients, 1.0), offset),
            channel_offset=offset,
            coefficients=list(coefficients),
            std_dev=std_dev,
            window_levels=window_levels,
        )
        self._cache.set(anchor, channel)
        self.log.debug("date_range_channel", bars=size, anchor=anchor, std_dev=std_dev)
        return channel

    def update_settings(self, settings: Settings) -> bool:
        """Apply new settings; returns True when anything affecting results changed."""
        model_changed = any(
            getattr(self.settings, name) != getattr(settings, name) for name in _MODEL_FIELDS
        )
        channel_changed = any(
            getattr(self.settings, name) != getattr(settings, name) for name in _CHANNEL_FIELDS
        )
        if not (model_changed or channel_changed):
            return False

        if settings.regression_mode is RegressionMode.DATE_RANGE and self._timestamps is None:
            raise ValueError("date range mode needs bar timestamps")

        self.settings = settings
        if model_changed:
            self._model = _build_model(settings)
        self._cache = LRUCache(settings.cache_size)
        self.log.info("channel_settings_updated", model=repr(self._model), rebuilt=model_changed)
        return True

    def clear_cache(self):
        self._cache.clear()
