"""
Renderers for UI components.
"""

from .progress_bar import ProgressBarRenderer, RenderState, format_clock

__all__ = ["ProgressBarRenderer", "RenderState", "format_clock"]
