"""
Text rendering for the progress bar line.
"""

from __future__ import annotations

from dataclasses import dataclass
from string import Formatter
from typing import Dict

from rich.cells import cell_len

from ....config.display_config import ProgressBarOptions

UNKNOWN_DURATION = "??:??:??"


def format_clock(seconds: float) -> str:
    """Format a duration as HH:MM:SS."""
    total = max(int(seconds), 0)
    hours, rest = divmod(total, 3600)
    minutes, secs = divmod(rest, 60)
    return f"{hours:02d}:{minutes:02d}:{secs:02d}"


@dataclass(frozen=True)
class RenderState:
    """Snapshot of everything one render of the bar depends on."""

    current: int
    total: int
    elapsed: float
    color: str

    @property
    def fraction(self) -> float:
        if self.total <= 0:
            return 1.0
        return min(self.current / self.total, 1.0)

    @property
    def eta(self) -> str:
        if self.current <= 0:
            return UNKNOWN_DURATION
        remaining = self.elapsed * (self.total - self.current) / self.current
        return format_clock(remaining)


class ProgressBarRenderer:
    """Expand a bar template for a given state and line width."""

    def __init__(self, options: ProgressBarOptions) -> None:
        self.options = options

    def fields(self, state: RenderState) -> Dict[str, str]:
        """Values for every template field except the bar."""
        frames = self.options.spinner_frames
        return {
            "current": str(state.current),
            "total": str(state.total),
            "percent": str(int(state.fraction * 100)),
            "elapsed": format_clock(state.elapsed),
            "eta": state.eta,
            "spinner": frames[int(state.elapsed) % len(frames)],
        }

    def bar(self, fraction: float, width: int) -> str:
        """Build the bar body for the given width in cells."""
        width = max(width, 0)
        complete = int(width * fraction)
        return (
            self.options.progress_mark * complete
            + self.options.remainder_mark * (width - complete)
        )

    def render(self, state: RenderState, width: int) -> str:
        """
        Render the full bar line.

        The {bar} field absorbs whatever width the other fields leave over,
        shared evenly if the template uses it more than once.

        Args:
            state: Counts and timing to display
            width: Target line width in cells

        Returns:
            The rendered line, without color
        """
        template = self.options.format
        values = self.fields(state)
        bar_slots = sum(
            1 for _, name, _, _ in Formatter().parse(template) if name == "bar"
        )
        if not bar_slots:
            return template.format(**values)

        fixed = cell_len(template.format(bar="", **values))
        bar_width = max(width - fixed, 0) // bar_slots
        return template.format(bar=self.bar(state.fraction, bar_width), **values)
