"""
Slow test detection.
"""

from typing import Optional


def check_slow_unit(
    threshold: float, elapsed: float, description: str, location: str
) -> Optional[str]:
    """
    Build a slow-test warning if the test took longer than the threshold.

    Args:
        threshold: Seconds allowed per test; 0 disables detection
        elapsed: Seconds the test took
        description: Test name shown in the warning
        location: Source location shown in the warning

    Returns:
        Warning text, or None if the test was fast enough
    """
    if threshold > 0.0 and elapsed > threshold:
        return f"SLOW TEST: {elapsed:.4f} {description}\n=> {location}"
    return None


class SlowUnitDetector:
    """Slow-test check bound to a fixed threshold."""

    def __init__(self, threshold: float = 0.0) -> None:
        if threshold < 0:
            raise ValueError(f"Slow threshold must not be negative, got {threshold}")
        self.threshold = threshold

    @property
    def enabled(self) -> bool:
        return self.threshold > 0.0

    def check(self, elapsed: float, description: str, location: str) -> Optional[str]:
        return check_slow_unit(self.threshold, elapsed, description, location)
