"""
Aggregate test counts for a single run.
"""

from dataclasses import dataclass


@dataclass
class RunCounts:
    """
    Running totals for one run.

    `total` is fixed when the run starts. `current` is advanced by the
    progress controller; the outcome counters are advanced by the run
    aggregator. Outside the output lock, passed + pending + failed == current.
    """

    total: int = 0
    current: int = 0
    passed: int = 0
    pending: int = 0
    failed: int = 0

    @property
    def remaining(self) -> int:
        return self.total - self.current

    @property
    def finished(self) -> bool:
        return self.current >= self.total
