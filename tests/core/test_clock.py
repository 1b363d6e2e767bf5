import logging

import pytest

from selftime import ClockAnomalyError, ManualClock, MonotonicClock


def test_monotonic_clock_moves_forward():
    clock = MonotonicClock()
    a = clock.now()
    b = clock.now()
    assert clock.duration_between(a, b) >= 0


def test_manual_clock_advance():
    clock = ManualClock()
    assert clock.now() == 0
    clock.advance(25)
    clock.advance_seconds(0.5)
    assert clock.now() == 500_000_025
    with pytest.raises(ValueError):
        clock.advance(-1)


def test_backwards_duration_clamped_and_logged(caplog):
    clock = ManualClock()
    with caplog.at_level(logging.WARNING, logger="selftime.clock"):
        assert clock.duration_between(100, 40) == 0
    assert clock.anomalies == 1
    assert "backwards" in caplog.text


def test_strict_clock_raises():
    clock = ManualClock(strict=True)
    with pytest.raises(ClockAnomalyError) as excinfo:
        clock.duration_between(100, 40)
    assert excinfo.value.start == 100 and excinfo.value.end == 40
