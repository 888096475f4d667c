"""
Tests for slow test detection.
"""

from __future__ import annotations

import pytest
from hypothesis import given, strategies as st

from livebar.services.slow_unit import SlowUnitDetector, check_slow_unit

_seconds = st.floats(min_value=0, max_value=1e6, allow_nan=False, allow_infinity=False)


@given(threshold=_seconds, elapsed=_seconds)
def test_warning_iff_threshold_exceeded(threshold: float, elapsed: float) -> None:
    """Verify a warning is produced exactly when enabled and strictly exceeded."""
    warning = check_slow_unit(threshold, elapsed, "desc", "loc")
    assert (warning is not None) == (threshold > 0 and elapsed > threshold)


def test_warning_format() -> None:
    warning = check_slow_unit(0.5, 1.25, "test_login", "tests/test_auth.py:12")
    assert warning == "SLOW TEST: 1.2500 test_login\n=> tests/test_auth.py:12"


def test_zero_threshold_disables() -> None:
    assert check_slow_unit(0.0, 1e9, "a", "b") is None
    assert not SlowUnitDetector(0.0).enabled


def test_elapsed_equal_to_threshold_is_not_slow() -> None:
    assert SlowUnitDetector(2.0).check(2.0, "a", "b") is None


def test_negative_threshold_rejected() -> None:
    with pytest.raises(ValueError):
        SlowUnitDetector(-1.0)
