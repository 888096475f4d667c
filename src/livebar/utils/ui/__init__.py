"""
Terminal UI for the progress bar.

Submodules import the configuration package, so they are not re-exported
here; import them from their own modules.
"""

from .colors import ColorPalette, Verdict, color_for, verdict_for

__all__ = ["ColorPalette", "Verdict", "color_for", "verdict_for"]
