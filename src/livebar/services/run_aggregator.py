"""
Run aggregator.

Receives lifecycle notifications from the test runner, keeps the counts,
drives the progress controller and owns the background ticker. Failures are
reported inline as they happen and never stop the run.
"""

from __future__ import annotations

import logging
import time
from typing import Callable, Optional, TextIO

from pydantic import TypeAdapter

from ..config.display_config import LivebarConfig, get_default_config
from ..schemas.notifications import (
    Message,
    Notification,
    RunClosed,
    RunStarted,
    UnitFailed,
    UnitPassed,
    UnitPending,
    UnitStarted,
)
from ..schemas.run_counts import RunCounts
from ..utils.ui.core.output_coordinator import OutputCoordinator
from ..utils.ui.managers.progress_controller import ProgressRenderController
from ..utils.ui.managers.tick_scheduler import TickScheduler
from .slow_unit import SlowUnitDetector

logger = logging.getLogger(__name__)

_NOTIFICATION_ADAPTER = TypeAdapter(Notification)


class RunAggregator:
    """
    Turn runner notifications into progress bar updates.

    Every handler runs under the output lock, so the ticker never observes
    counts in the middle of an update or draws between a clear and the text
    that follows it.
    """

    def __init__(
        self,
        stream: TextIO,
        config: Optional[LivebarConfig] = None,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        """
        Build the rendering stack for a stream.

        Args:
            stream: Destination for the bar and inline reports
            config: Display configuration; defaults to get_default_config()
            clock: Monotonic time source in seconds
        """
        self.config = config or get_default_config()
        self._clock = clock
        self.output = OutputCoordinator.from_config(stream, self.config)
        self.controller = ProgressRenderController(self.output, self.config, clock)
        self.detector = SlowUnitDetector(self.config.slow_threshold)
        self._palette = self.config.palette
        self._ticker: Optional[TickScheduler] = None
        self._unit_started_at: Optional[float] = None

        self._handlers = {
            RunStarted: self._run_started,
            UnitStarted: self._unit_started,
            UnitPassed: self._unit_passed,
            UnitPending: self._unit_pending,
            UnitFailed: self._unit_failed,
            Message: self._message,
            RunClosed: self._run_closed,
        }

    @property
    def counts(self) -> RunCounts:
        return self.controller.counts

    @property
    def ticker(self) -> Optional[TickScheduler]:
        return self._ticker

    def handle(self, notification: Notification) -> None:
        """Dispatch a single notification."""
        handler = self._handlers.get(type(notification))
        if handler is None:
            raise TypeError(f"Unknown notification: {notification!r}")
        handler(notification)

    def handle_raw(self, payload: dict) -> None:
        """Validate a notification given as a plain mapping and dispatch it."""
        self.handle(_NOTIFICATION_ADAPTER.validate_python(payload))

    def on_run_start(self, expected_total: int) -> None:
        self.handle(RunStarted(expected_total=expected_total))

    def on_unit_start(self) -> None:
        self.handle(UnitStarted())

    def on_unit_pass(
        self,
        elapsed: Optional[float] = None,
        description: str = "",
        location: str = "",
    ) -> None:
        self.handle(
            UnitPassed(elapsed=elapsed, description=description, location=location)
        )

    def on_unit_pending(self) -> None:
        self.handle(UnitPending())

    def on_unit_fail(self, report: str) -> None:
        self.handle(UnitFailed(report=report))

    def on_message(self, text: str) -> None:
        self.handle(Message(text=text))

    def on_run_close(self) -> None:
        self.handle(RunClosed())

    def suspend_ticker(self) -> None:
        """
        Stop background refreshes for the rest of the run.

        Used when another program (a debugger prompt) takes over the terminal.
        """
        self._cancel_ticker()
        self.controller.clear()

    def _run_started(self, notification: RunStarted) -> None:
        self._cancel_ticker()
        with self.output.exclusive():
            self.controller.start(notification.expected_total)
            self._unit_started_at = None
            self.controller.refresh(force=True)
        self._ticker = TickScheduler(
            self.controller.refresh, interval=self.config.tick_interval
        ).start()
        logger.debug(f"Run started with {notification.expected_total} units")

    def _unit_started(self, notification: UnitStarted) -> None:
        self._unit_started_at = self._clock()

    def _unit_passed(self, notification: UnitPassed) -> None:
        elapsed = notification.elapsed
        if elapsed is None:
            started = self._unit_started_at
            elapsed = self._clock() - started if started is not None else 0.0

        with self.output.exclusive():
            counts = self.controller.check_advance()
            counts.passed += 1
            warning = self.detector.check(
                elapsed, notification.description, notification.location
            )
            if warning is not None:
                self.controller.clear()
                self.output.line(warning, self._palette.warning)
                self.output.line()
            self.controller.advance()

    def _unit_pending(self, notification: UnitPending) -> None:
        with self.output.exclusive():
            counts = self.controller.check_advance()
            counts.pending += 1
            self.controller.advance()

    def _unit_failed(self, notification: UnitFailed) -> None:
        with self.output.exclusive():
            counts = self.controller.check_advance()
            counts.failed += 1
            self.controller.clear()
            self.output.line(notification.report)
            self.output.line()
            self.controller.advance()

    def _message(self, notification: Message) -> None:
        with self.output.exclusive():
            if self.output.supports_inline_log and self.controller.active:
                self.controller.log(notification.text)
            else:
                self.controller.clear()
                self.output.line(notification.text)

    def _run_closed(self, notification: RunClosed) -> None:
        self._cancel_ticker()
        self.controller.close()
        if self.controller.started:
            counts = self.counts
            logger.debug(
                f"Run closed: {counts.current}/{counts.total} "
                f"(passed={counts.passed} pending={counts.pending} failed={counts.failed})"
            )

    def _cancel_ticker(self) -> None:
        ticker = self._ticker
        self._ticker = None
        if ticker is not None:
            ticker.cancel()
