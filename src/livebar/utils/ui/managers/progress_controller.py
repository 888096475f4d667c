"""
Progress render controller.

Owns the run counts, the bar template and the throttle policy. All writes are
delegated to the OutputCoordinator and every operation runs under its lock, so
a render triggered by the background ticker never lands in the middle of an
event-driven sequence.
"""

from __future__ import annotations

import logging
import time
from typing import Callable, Optional

from ....config.display_config import LivebarConfig, ProgressBarOptions
from ....schemas.run_counts import RunCounts
from ..colors import color_for
from ..core.output_coordinator import OutputCoordinator
from ..renderers.progress_bar import ProgressBarRenderer, RenderState

logger = logging.getLogger(__name__)


class ProgressContractError(RuntimeError):
    """The progress bar was driven in a way its caller guarantees cannot happen."""


class ProgressRenderController:
    """Render the bar for one run at a time."""

    def __init__(
        self,
        output: OutputCoordinator,
        config: LivebarConfig,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._output = output
        self._config = config
        self._palette = config.palette
        self._clock = clock

        self._counts: Optional[RunCounts] = None
        self._options: ProgressBarOptions = config.progress_bar
        self._renderer = ProgressBarRenderer(self._options)
        self._throttle_rate: float = 0.0
        self._started_at: float = 0.0
        self._last_render_at: Optional[float] = None
        self._last_line: Optional[str] = None
        self._finished = False
        self._closed = False

    @property
    def counts(self) -> RunCounts:
        """Counts of the active run."""
        return self._require_started()

    @property
    def started(self) -> bool:
        return self._counts is not None

    @property
    def active(self) -> bool:
        """True while the bar may still be drawn."""
        return self.started and not self._closed and not self._finished

    @property
    def finished(self) -> bool:
        return self._finished

    @property
    def closed(self) -> bool:
        return self._closed

    @property
    def throttle_rate(self) -> float:
        return self._throttle_rate

    @property
    def last_line(self) -> Optional[str]:
        """Plain text of the most recent render."""
        return self._last_line

    def start(self, total: int, options: Optional[ProgressBarOptions] = None) -> None:
        """
        Begin a run of `total` units.

        Resets every count to zero and picks the throttle interval. Nothing is
        written until the first render.

        Args:
            total: Number of units the run will report
            options: Bar options; defaults to the configured ones
        """
        if total < 0:
            raise ValueError(f"Run total must not be negative, got {total}")
        options = options or self._config.progress_bar
        with self._output.exclusive():
            self._counts = RunCounts(total=total)
            self._options = options
            self._renderer = ProgressBarRenderer(options)
            self._throttle_rate = self._config.throttle_rate_for(options)
            self._started_at = self._clock()
            self._last_render_at = None
            self._last_line = None
            self._finished = False
            self._closed = False
        logger.debug(
            f"Progress started: total={total} throttle={self._throttle_rate}s"
        )

    def check_advance(self) -> RunCounts:
        """
        Raise ProgressContractError if advance() would be rejected.

        Lets a caller validate before it touches the counts or the terminal.
        """
        counts = self._require_started()
        if self._closed:
            raise ProgressContractError("advance() called after the run closed")
        if counts.current >= counts.total:
            raise ProgressContractError(
                f"advance() called beyond total ({counts.total})"
            )
        return counts

    def advance(self) -> None:
        """Count one more completed unit and render, subject to throttling."""
        with self._output.exclusive():
            counts = self.check_advance()
            counts.current += 1
            self._render(force=counts.finished)

    def refresh(self, force: bool = False) -> None:
        """
        Redraw the bar at its current state.

        A refresh after close() or after the bar has finished does nothing, so a
        tick racing with teardown is harmless. A bar erased by clear() is
        redrawn regardless of throttling.
        """
        with self._output.exclusive():
            if self._closed or self._finished:
                return
            self._require_started()
            erased = self._output.interactive and not self._output.bar_visible
            self._render(force=force or erased)

    def clear(self) -> None:
        """Erase the bar to make room for other output. Counts are untouched."""
        with self._output.exclusive():
            self._output.erase()

    def log(self, text: str) -> None:
        """Print a line above the bar and redraw the bar straight away."""
        with self._output.exclusive():
            self._output.erase()
            self._output.line(text)
            if self.active:
                self._render(force=True)

    def close(self) -> None:
        """Stop rendering. A bar still on screen is left in place."""
        with self._output.exclusive():
            if self._closed:
                return
            self._closed = True
            self._output.end_line()
        logger.debug("Progress closed")

    def _require_started(self) -> RunCounts:
        if self._counts is None:
            raise ProgressContractError("Progress bar used before start()")
        return self._counts

    def _render(self, force: bool = False) -> None:
        now = self._clock()
        if (
            not force
            and self._throttle_rate > 0
            and self._last_render_at is not None
            and now - self._last_render_at < self._throttle_rate
        ):
            return

        counts = self._counts
        state = RenderState(
            current=counts.current,
            total=counts.total,
            elapsed=now - self._started_at,
            color=color_for(counts, self._palette),
        )
        width = self._options.length or self._output.width
        line = self._renderer.render(state, width)

        self._output.render_bar(line, state.color, final=counts.finished)
        self._last_render_at = now
        self._last_line = line
        self._finished = counts.finished
