from .settings import RegressionMode, Settings
from .logging_config import configure_logging

__all__ = ["RegressionMode", "Settings", "configure_logging"]
