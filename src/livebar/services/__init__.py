"""
Run orchestration services.
"""

from .run_aggregator import RunAggregator
from .slow_unit import SlowUnitDetector, check_slow_unit

__all__ = ["RunAggregator", "SlowUnitDetector", "check_slow_unit"]
