"""
livebar: a live, colour-coded progress bar for pytest runs.
"""

from .config import LivebarConfig, ProgressBarOptions, create_custom_config, get_default_config
from .services import RunAggregator, SlowUnitDetector, check_slow_unit

__version__ = "0.1.0"

__all__ = [
    "LivebarConfig",
    "ProgressBarOptions",
    "RunAggregator",
    "SlowUnitDetector",
    "check_slow_unit",
    "create_custom_config",
    "get_default_config",
]
