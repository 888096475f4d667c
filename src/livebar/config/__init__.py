"""
Configuration for the progress bar and its pytest options.
"""

from .display_config import (
    CI_THROTTLE_RATE,
    LivebarConfig,
    ProgressBarOptions,
    create_custom_config,
    get_default_config,
    is_continuous_integration,
)

__all__ = [
    "CI_THROTTLE_RATE",
    "LivebarConfig",
    "ProgressBarOptions",
    "create_custom_config",
    "get_default_config",
    "is_continuous_integration",
]
