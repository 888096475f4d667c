"""
Pytest configuration and fixtures.
"""

import sys
import threading
from pathlib import Path
from typing import List, Optional

import pytest

pytest_plugins = ["pytester"]


def pytest_configure(config):
    """Configure pytest."""
    # Add src to path
    src_path = Path(__file__).parent.parent / "src"
    sys.path.insert(0, str(src_path))


class RecordingStream:
    """
    Text stream double that keeps every write call separately.

    Each entry in `chunks` is the argument of one write(), so tests can check
    that a multi-part update reached the stream in a single call.
    """

    def __init__(self, tty: bool = False) -> None:
        self.tty = tty
        self.chunks: List[str] = []
        self.closed = False
        self._lock = threading.Lock()

    def write(self, text: str) -> int:
        with self._lock:
            self.chunks.append(text)
        return len(text)

    def flush(self) -> None:
        pass

    def isatty(self) -> bool:
        return self.tty

    @property
    def encoding(self) -> str:
        return "utf-8"

    def getvalue(self) -> str:
        with self._lock:
            return "".join(self.chunks)


class FailingStream(RecordingStream):
    """RecordingStream whose writes raise `error` once it is set."""

    def __init__(self, tty: bool = True) -> None:
        super().__init__(tty=tty)
        self.error: Optional[OSError] = None

    def write(self, text: str) -> int:
        if self.error is not None:
            raise self.error
        return super().write(text)


class FakeClock:
    """Manually advanced monotonic clock."""

    def __init__(self, start: float = 100.0) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def stream() -> RecordingStream:
    return RecordingStream(tty=True)


@pytest.fixture
def plain_stream() -> RecordingStream:
    return RecordingStream(tty=False)


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def plugin_args(request) -> List[str]:
    """Arguments that load the plugin in a pytester run, unless installed."""
    if request.config.pluginmanager.hasplugin("livebar"):
        return []
    return ["-p", "livebar.plugin"]


@pytest.fixture
def livebar_args(plugin_args) -> List[str]:
    """Command-line arguments that enable the bar in a pytester run."""
    return [*plugin_args, "--livebar"]


@pytest.fixture(autouse=True, scope="session")
def _terminal_environment():
    """Keep the terminal type and CI detection independent of the host."""
    with pytest.MonkeyPatch.context() as mp:
        mp.setenv("TERM", "xterm-256color")
        mp.delenv("CONTINUOUS_INTEGRATION", raising=False)
        yield
