"""
Background refresh ticker.

Keeps time-dependent bar fields (spinner, elapsed, ETA) moving while a slow
test is running and no events arrive.
"""

from __future__ import annotations

import logging
import threading
from typing import Callable, Optional

logger = logging.getLogger(__name__)

DEFAULT_GRACE_PERIOD = 0.5
"""Seconds cancel() waits for an in-flight callback before giving up"""


class TickScheduler:
    """
    Call a function at a fixed interval on a daemon thread.

    Cancellation is not graceful: the stop signal is checked at each wake-up
    and cancel() only waits a bounded grace period, so an in-flight callback
    may or may not complete. Callers must make the callback safe to run late.
    """

    def __init__(
        self,
        callback: Callable[[], None],
        interval: float = 1.0,
        name: str = "livebar-ticker",
    ) -> None:
        if interval <= 0:
            raise ValueError(f"Tick interval must be positive, got {interval}")
        self._callback = callback
        self._interval = interval
        self._name = name
        self._stop = threading.Event()
        self._thread: Optional[threading.Thread] = None
        self._ticks = 0

    @property
    def interval(self) -> float:
        return self._interval

    @property
    def ticks(self) -> int:
        """Number of callbacks completed so far."""
        return self._ticks

    @property
    def running(self) -> bool:
        return (
            self._thread is not None
            and self._thread.is_alive()
            and not self._stop.is_set()
        )

    def start(self) -> "TickScheduler":
        """Start ticking. A scheduler can only be started once."""
        if self._thread is not None:
            raise RuntimeError("TickScheduler already started")
        self._thread = threading.Thread(target=self._run, name=self._name, daemon=True)
        self._thread.start()
        logger.debug(f"Ticker started every {self._interval}s")
        return self

    def cancel(self, grace_period: float = DEFAULT_GRACE_PERIOD) -> None:
        """Signal the ticker to stop and wait briefly for it to exit."""
        self._stop.set()
        thread = self._thread
        if thread is None or thread is threading.current_thread():
            return
        thread.join(timeout=grace_period)
        if thread.is_alive():
            logger.debug("Ticker still busy after cancel; abandoning daemon thread")
        else:
            logger.debug(f"Ticker stopped after {self._ticks} ticks")

    def _run(self) -> None:
        while not self._stop.wait(self._interval):
            try:
                self._callback()
            except OSError as e:
                logger.warning(f"Progress refresh failed, stopping ticker: {e}")
                self._stop.set()
                return
            self._ticks += 1

    def __enter__(self) -> "TickScheduler":
        return self.start()

    def __exit__(self, *args) -> None:
        self.cancel()
