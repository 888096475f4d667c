"""
Progress bar managers.

The controller owns what is drawn; the tick scheduler owns when it is redrawn
without an incoming event.
"""

from .progress_controller import ProgressContractError, ProgressRenderController
from .tick_scheduler import TickScheduler

__all__ = ["ProgressContractError", "ProgressRenderController", "TickScheduler"]
