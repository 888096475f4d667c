"""
Data types exchanged between the test runner and the progress bar.
"""

from .notifications import (
    Message,
    Notification,
    RunClosed,
    RunStarted,
    UnitFailed,
    UnitPassed,
    UnitPending,
    UnitStarted,
)
from .run_counts import RunCounts

__all__ = [
    "Message",
    "Notification",
    "RunClosed",
    "RunCounts",
    "RunStarted",
    "UnitFailed",
    "UnitPassed",
    "UnitPending",
    "UnitStarted",
]
