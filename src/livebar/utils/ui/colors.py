"""
Verdict and color selection for the progress bar.

The verdict is a pure function of the counts and is recomputed on every
render; nothing here is cached.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from ...schemas.run_counts import RunCounts
from .theme import THEME


class Verdict(Enum):
    """Aggregate outcome of a run so far."""

    SUCCESS = "success"
    WARNING = "warning"
    FAILURE = "failure"


@dataclass(frozen=True)
class ColorPalette:
    """Display colors for each verdict, as rich color names."""

    success: str = THEME["success"]
    warning: str = THEME["warning"]
    failure: str = THEME["failure"]

    def color(self, verdict: Verdict) -> str:
        return getattr(self, verdict.value)


DEFAULT_PALETTE = ColorPalette()


def verdict_for(counts: RunCounts) -> Verdict:
    """
    Pick the verdict for the given counts.

    Failure wins over warning, warning wins over success.
    """
    if counts.failed > 0:
        return Verdict.FAILURE
    if counts.pending > 0:
        return Verdict.WARNING
    return Verdict.SUCCESS


def color_for(counts: RunCounts, palette: ColorPalette = DEFAULT_PALETTE) -> str:
    """Return the display color for the given counts."""
    return palette.color(verdict_for(counts))
