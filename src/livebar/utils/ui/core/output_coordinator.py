"""
Output coordinator for the progress bar.

This is the only component that writes to the terminal. Every write goes
through a rich Console bound to the run's stream, and every multi-step
sequence (erase, print, redraw) is made under one re-entrant lock so the
event path and the background ticker never interleave mid-line.
"""

from __future__ import annotations

import threading
from contextlib import contextmanager
from typing import Iterator, Optional, TextIO

from rich.console import Console
from rich.control import Control
from rich.segment import ControlType
from rich.text import Text

from ....config.display_config import LivebarConfig


def stream_is_tty(stream: TextIO) -> bool:
    """Return True if the stream reports itself as a terminal."""
    isatty = getattr(stream, "isatty", None)
    if isatty is None:
        return False
    try:
        return bool(isatty())
    except ValueError:
        # Closed stream
        return False


class StreamConsole(Console):
    """
    Console that lets stream errors reach the caller.

    rich handles a broken pipe by silencing the console, pointing sys.stdout
    at devnull and exiting the process. The bar writes to its own stream, so
    the error is raised instead and pending output is dropped.
    """

    def __exit__(self, exc_type, exc_value, traceback) -> None:
        try:
            super().__exit__(exc_type, exc_value, traceback)
        except OSError:
            del self._buffer[:]
            raise

    def on_broken_pipe(self) -> None:
        # Called from within rich's except block
        raise


class OutputCoordinator:
    """
    Serialize all progress bar output onto a single stream.

    State is either idle or bar-visible: rendering the bar makes it visible,
    erasing it (or ending it with a newline) makes it idle again.
    """

    def __init__(
        self,
        stream: TextIO,
        color_enabled: bool = False,
        continuous_integration: bool = False,
        force_tty: bool = False,
        supports_inline_log: bool = True,
    ) -> None:
        """
        Bind the coordinator to a stream.

        Args:
            stream: Writable text stream, usually the terminal
            color_enabled: Whether the destination accepts color
            continuous_integration: Suppresses color when set
            force_tty: Redraw in place even if the stream is not a tty
            supports_inline_log: Whether messages may be logged above the bar
        """
        self.stream = stream
        self.interactive = force_tty or stream_is_tty(stream)
        self.use_color = color_enabled and not continuous_integration
        self.supports_inline_log = supports_inline_log

        self.console = StreamConsole(
            file=stream,
            force_terminal=self.interactive,
            force_interactive=self.interactive,
            color_system="standard" if self.use_color else None,
            no_color=False,
            highlight=False,
            markup=False,
            emoji=False,
            soft_wrap=True,
            legacy_windows=False,
        )
        self._lock = threading.RLock()
        self._bar_visible = False

    @classmethod
    def from_config(cls, stream: TextIO, config: LivebarConfig) -> "OutputCoordinator":
        return cls(
            stream,
            color_enabled=config.color_enabled,
            continuous_integration=config.continuous_integration,
            force_tty=config.force_tty,
            supports_inline_log=config.inline_log,
        )

    @property
    def bar_visible(self) -> bool:
        return self._bar_visible

    @property
    def width(self) -> int:
        """Current width of the destination in cells."""
        return self.console.width

    @contextmanager
    def exclusive(self) -> Iterator["OutputCoordinator"]:
        """
        Hold the output lock and batch writes.

        Everything written inside the block reaches the stream as a single
        write when the outermost block exits.
        """
        with self._lock:
            with self.console:
                yield self

    def erase(self) -> None:
        """Remove the bar from the current line, if it is shown."""
        with self.exclusive():
            if not self._bar_visible:
                return
            if self.interactive:
                self.console.control(
                    Control(ControlType.CARRIAGE_RETURN, (ControlType.ERASE_IN_LINE, 2))
                )
            self._bar_visible = False

    def write(self, text: str, color: Optional[str] = None) -> None:
        """Write text as-is, optionally wrapped in a color."""
        with self.exclusive():
            self.console.print(Text(text, style=color or ""), end="")

    def line(self, text: str = "", color: Optional[str] = None) -> None:
        """Write text followed by a newline."""
        self.write(f"{text}\n", color)

    def render_bar(self, text: str, color: Optional[str], final: bool = False) -> None:
        """
        Draw the bar line.

        On interactive streams the line is redrawn in place; otherwise each
        render is written as its own line. A final render always ends the line.
        """
        with self.exclusive():
            if self.interactive:
                self.console.control(
                    Control(ControlType.CARRIAGE_RETURN, (ControlType.ERASE_IN_LINE, 2))
                )
                self.write(text, color)
                if final:
                    self.write("\n")
                self._bar_visible = not final
            else:
                self.line(text, color)
                self._bar_visible = False

    def end_line(self) -> None:
        """Leave a visible bar in place and move to a fresh line."""
        with self.exclusive():
            if self._bar_visible:
                self.write("\n")
                self._bar_visible = False
