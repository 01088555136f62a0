"""Shared test fixtures."""

import pytest
import structlog

from config import Settings


@pytest.fixture(autouse=True)
def _reset_structlog():
    """Drop structlog config after each test so no logger keeps a closed capture stream."""
    yield
    structlog.reset_defaults()


@pytest.fixture
def settings():
    """Small-window linear channel settings."""
    return Settings(period=5, channel_width=2.0, log_level="WARNING")


@pytest.fixture
def line_series():
    """Noise-free y = 1 + 2x."""
    x = [0.0, 1.0, 2.0, 3.0, 4.0]
    y = [1.0, 3.0, 5.0, 7.0, 9.0]
    return x, y


@pytest.fixture
def huge_x_series():
    """Positions large enough that Σx² overflows a double."""
    x = [0.0, 1e200, 2e200, 3e200, 4e200]
    y = [1.0, 2.0, 1.5, 3.0, 2.5]
    return x, y
