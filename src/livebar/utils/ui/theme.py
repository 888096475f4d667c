"""
UI Theme configuration: colors, glyphs and the default bar template.
"""

from typing import Dict, List

THEME: Dict[str, str] = {
    # Run verdicts
    "success": "green",
    "warning": "yellow",
    "failure": "red",
}

GLYPHS: Dict[str, str] = {
    "progress": "=",  # Completed part of the bar
    "remainder": " ",  # Unconsumed width
}

SPINNER_FRAMES: List[str] = ["⠋", "⠙", "⠹", "⠸", "⠼", "⠴", "⠦", "⠧", "⠇", "⠏"]

DEFAULT_FORMAT = " {current}/{total} |{bar}| {spinner} {eta} "

FORMAT_FIELDS = frozenset(
    {"current", "total", "elapsed", "eta", "percent", "spinner", "bar"}
)
