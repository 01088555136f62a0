"""Centralized configuration using pydantic-settings. All values are env-configurable."""

from datetime import datetime
from enum import Enum

from pydantic import Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from regression.factory import RegressionKind


class RegressionMode(str, Enum):
    PERIODS = "periods"
    DATE_RANGE = "date_range"


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_prefix="CHANNEL_")

    # Model
    regression_kind: RegressionKind = RegressionKind.LINEAR
    period: int = Field(default=120, ge=1, le=5000)
    degree: int = Field(default=2, ge=1, le=5)  # Polynomial only
    ema_alpha: float = 0.3
    lowess_bandwidth: float = 0.3
    lowess_robust_iterations: int = 2

    # Channel
    channel_width: float = Field(default=2.0, gt=0)  # In standard deviations
    regression_mode: RegressionMode = RegressionMode.PERIODS
    start_date: datetime | None = None
    end_date: datetime | None = None
    cache_size: int = Field(default=500, gt=0)

    # Monitoring
    log_level: str = "INFO"

    @model_validator(mode="after")
    def _normalize_date_range(self):
        if self.regression_mode is RegressionMode.DATE_RANGE:
            if self.start_date is None or self.end_date is None:
                # Incomplete range falls back to a fixed lookback
                self.regression_mode = RegressionMode.PERIODS
            elif self.start_date > self.end_date:
                self.start_date, self.end_date = self.end_date, self.start_date
        return self
