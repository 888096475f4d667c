"""
Tests for the background refresh ticker.
"""

from __future__ import annotations

import logging
import threading
import time

import pytest

from livebar.utils.ui.managers.tick_scheduler import TickScheduler


def _wait_for(predicate, timeout: float = 2.0) -> bool:
    deadline = time.monotonic() + timeout
    while time.monotonic() < deadline:
        if predicate():
            return True
        time.sleep(0.005)
    return predicate()


def test_ticks_until_cancelled() -> None:
    """Verify the callback repeats and stops after cancel."""
    calls = []
    ticker = TickScheduler(lambda: calls.append(1), interval=0.01).start()
    assert _wait_for(lambda: len(calls) >= 3)
    ticker.cancel()

    stopped_at = len(calls)
    time.sleep(0.05)
    assert len(calls) == stopped_at
    assert not ticker.running
    assert ticker.ticks == stopped_at


def test_no_tick_before_first_interval() -> None:
    calls = []
    ticker = TickScheduler(lambda: calls.append(1), interval=10.0).start()
    ticker.cancel()
    assert calls == []


def test_runs_on_daemon_thread() -> None:
    threads = []
    ticker = TickScheduler(lambda: threads.append(threading.current_thread()), interval=0.01)
    with ticker:
        assert _wait_for(lambda: threads)
    assert threads[0].daemon
    assert threads[0] is not threading.current_thread()


def test_cancel_from_callback_does_not_deadlock() -> None:
    holder = {}

    def callback() -> None:
        holder["ticker"].cancel()

    holder["ticker"] = TickScheduler(callback, interval=0.01).start()
    assert _wait_for(lambda: not holder["ticker"].running)


def test_stream_error_stops_ticker(caplog) -> None:
    """Verify a stream error ends the ticker with a warning instead of a crash."""
    caplog.set_level(logging.WARNING, logger="livebar")

    def callback() -> None:
        raise BrokenPipeError(32, "Broken pipe")

    ticker = TickScheduler(callback, interval=0.01).start()
    assert _wait_for(lambda: not ticker.running)
    ticker.cancel()
    assert ticker.ticks == 0
    assert "Progress refresh failed, stopping ticker" in caplog.text


def test_cancel_is_bounded_when_callback_hangs() -> None:
    release = threading.Event()
    entered = threading.Event()

    def callback() -> None:
        entered.set()
        release.wait(5)

    ticker = TickScheduler(callback, interval=0.01).start()
    assert entered.wait(2)
    started = time.monotonic()
    ticker.cancel(grace_period=0.05)
    assert time.monotonic() - started < 1.0
    release.set()


def test_cancel_before_start_is_harmless() -> None:
    TickScheduler(lambda: None).cancel()


def test_invalid_interval() -> None:
    with pytest.raises(ValueError):
        TickScheduler(lambda: None, interval=0)


def test_start_twice_raises() -> None:
    ticker = TickScheduler(lambda: None, interval=1.0).start()
    try:
        with pytest.raises(RuntimeError):
            ticker.start()
    finally:
        ticker.cancel()
