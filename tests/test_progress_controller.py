"""
Tests for the progress render controller.
"""

from __future__ import annotations

import pytest
from hypothesis import given, strategies as st

from conftest import FakeClock, RecordingStream
from livebar.config.display_config import create_custom_config
from livebar.utils.ui.core.output_coordinator import OutputCoordinator
from livebar.utils.ui.managers.progress_controller import (
    ProgressContractError,
    ProgressRenderController,
)

ERASE = "\r\x1b[2K"

_BAR = {"format": "{current}/{total} {spinner}", "length": 40, "spinner_frames": ["a", "b"]}


def _controller(stream, clock, bar=None, **overrides) -> ProgressRenderController:
    config = create_custom_config(progress_bar={**_BAR, **(bar or {})}, **overrides)
    output = OutputCoordinator.from_config(stream, config)
    return ProgressRenderController(output, config, clock)


def test_start_writes_nothing(stream, clock) -> None:
    controller = _controller(stream, clock)
    controller.start(3)
    assert stream.chunks == []
    assert controller.counts.total == 3
    assert controller.counts.current == 0


def test_advance_renders(stream, clock) -> None:
    controller = _controller(stream, clock)
    controller.start(3)
    controller.advance()
    clock.advance(1)
    controller.advance()
    assert stream.chunks == [ERASE + "1/3 a", ERASE + "2/3 b"]


def test_last_advance_finishes_line(stream, clock) -> None:
    controller = _controller(stream, clock)
    controller.start(1)
    controller.advance()
    assert stream.getvalue() == ERASE + "1/1 a\n"
    assert controller.finished
    assert not controller.active

    controller.refresh()
    controller.clear()
    assert len(stream.chunks) == 1


def test_advance_beyond_total_raises(stream, clock) -> None:
    controller = _controller(stream, clock)
    controller.start(1)
    controller.advance()
    with pytest.raises(ProgressContractError):
        controller.advance()


def test_use_before_start_raises(stream, clock) -> None:
    controller = _controller(stream, clock)
    with pytest.raises(ProgressContractError):
        controller.refresh()
    with pytest.raises(ProgressContractError):
        controller.advance()
    with pytest.raises(ProgressContractError):
        _ = controller.counts


def test_negative_total_rejected(stream, clock) -> None:
    with pytest.raises(ValueError):
        _controller(stream, clock).start(-1)


def test_zero_total_finishes_on_first_render(stream, clock) -> None:
    controller = _controller(stream, clock)
    controller.start(0)
    controller.refresh(force=True)
    assert stream.getvalue() == ERASE + "0/0 a\n"
    assert controller.finished


def test_clear_then_refresh_is_idempotent(stream, clock) -> None:
    controller = _controller(stream, clock)
    controller.start(5)
    controller.advance()
    before = stream.chunks[-1]

    controller.clear()
    controller.refresh()
    assert stream.chunks[-2:] == [ERASE, before]
    assert controller.counts.current == 1


@given(
    total=st.integers(min_value=1, max_value=50),
    data=st.data(),
    elapsed=st.floats(min_value=0, max_value=1e5, allow_nan=False),
)
def test_clear_refresh_renders_identical_line(total: int, data, elapsed: float) -> None:
    """Verify clear followed by refresh redraws exactly the same line."""
    advances = data.draw(st.integers(min_value=0, max_value=total - 1))
    stream = RecordingStream(tty=True)
    clock = FakeClock()
    controller = _controller(stream, clock, bar={"format": "{current} {bar} {eta}"})
    controller.start(total)
    for _ in range(advances):
        controller.advance()
    clock.advance(elapsed)
    controller.refresh(force=True)
    line = controller.last_line

    controller.clear()
    controller.refresh(force=True)
    assert controller.last_line == line
    assert stream.chunks[-1] == ERASE + line


def test_throttle_skips_renders(stream, clock) -> None:
    controller = _controller(stream, clock, bar={"throttle_rate": 5.0})
    controller.start(4)
    controller.refresh(force=True)
    controller.advance()
    controller.refresh()
    assert len(stream.chunks) == 1

    clock.advance(5)
    controller.advance()
    assert stream.chunks[-1] == ERASE + "2/4 b"


def test_final_render_ignores_throttle(stream, clock) -> None:
    controller = _controller(stream, clock, bar={"throttle_rate": 60.0})
    controller.start(2)
    controller.advance()
    controller.advance()
    assert stream.chunks[-1] == ERASE + "2/2 a\n"


def test_continuous_integration_throttles_by_default(stream, clock) -> None:
    controller = _controller(stream, clock, continuous_integration=True)
    controller.start(1)
    assert controller.throttle_rate == 1.0

    controller = _controller(stream, clock)
    controller.start(1)
    assert controller.throttle_rate == 0.0


def test_log_prints_above_bar(stream, clock) -> None:
    controller = _controller(stream, clock)
    controller.start(3)
    controller.advance()
    controller.log("hello")
    assert stream.chunks[-1] == ERASE + "hello\n" + ERASE + "1/3 a"


def test_close_leaves_bar_and_stops_rendering(stream, clock) -> None:
    controller = _controller(stream, clock)
    controller.start(3)
    controller.advance()
    controller.close()
    controller.close()
    assert stream.getvalue() == ERASE + "1/3 a\n"

    controller.refresh()
    controller.refresh(force=True)
    assert stream.getvalue() == ERASE + "1/3 a\n"
    with pytest.raises(ProgressContractError):
        controller.advance()


def test_start_resets_previous_run(stream, clock) -> None:
    controller = _controller(stream, clock)
    controller.start(1)
    controller.advance()
    controller.close()

    controller.start(2)
    assert controller.active
    assert controller.counts.current == 0


def test_clear_then_refresh_redraws_despite_throttle(stream, clock) -> None:
    """Verify an erased bar comes back on the next refresh in CI mode."""
    controller = _controller(stream, clock, continuous_integration=True)
    controller.start(3)
    controller.refresh(force=True)
    before = stream.chunks[-1]

    controller.clear()
    controller.refresh()
    assert stream.chunks[-2:] == [ERASE, before]

    controller.refresh()
    assert len(stream.chunks) == 3


def test_check_advance_leaves_counts_untouched(stream, clock) -> None:
    controller = _controller(stream, clock)
    controller.start(1)
    assert controller.check_advance().current == 0
    controller.advance()
    with pytest.raises(ProgressContractError):
        controller.check_advance()
    assert controller.counts.current == 1
