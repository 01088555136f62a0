from .cache import LRUCache
from .levels import FIBONACCI_LEVELS, channel_levels
from .models import ChannelData
from .service import ChannelCalculator

__all__ = ["LRUCache", "FIBONACCI_LEVELS", "channel_levels", "ChannelData", "ChannelCalculator"]
