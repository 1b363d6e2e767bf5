# SPDX-License-Identifier: MIT
"""Monotonic clock sources.

Instants and durations are plain ``int`` nanoseconds. ``duration_between``
never returns a negative value: a backwards step is clamped to zero (or
raised as :class:`~selftime.exceptions.ClockAnomalyError` in strict mode).
"""
from __future__ import annotations

import time
from typing import Optional

from .exceptions import ClockAnomalyError
from .logging import get_logger

logger = get_logger(__name__)

NANOS_PER_SECOND = 1_000_000_000


class Clock:
    """Base clock. Subclasses implement :meth:`now`."""

    def __init__(self, strict: bool = False) -> None:
        self.strict = strict
        self.anomalies = 0

    def now(self) -> int:
        raise NotImplementedError

    def duration_between(self, start: int, end: int, strict: Optional[bool] = None) -> int:
        """Return ``end - start`` in nanoseconds, clamped at zero.

        ``strict`` overrides the clock's own policy for this one call, so a
        strict session can share a clock with lenient ones.
        """
        if end >= start:
            return end - start
        self.anomalies += 1
        if self.strict if strict is None else strict:
            raise ClockAnomalyError(start, end)
        logger.warning("clock moved backwards by %dns; clamping to zero", start - end)
        return 0

    def elapsed(self, start: int) -> int:
        return self.duration_between(start, self.now())


class MonotonicClock(Clock):
    """Wall clock backed by :func:`time.perf_counter_ns`."""

    def now(self) -> int:
        return time.perf_counter_ns()


class ManualClock(Clock):
    """Deterministic clock advanced by hand.

    Useful for golden-output tests::

        clock = ManualClock()
        session = Session("total", clock=clock)
        clock.advance(5_000)
    """

    def __init__(self, start: int = 0, strict: bool = False) -> None:
        super().__init__(strict=strict)
        self._now = start

    def now(self) -> int:
        return self._now

    def advance(self, ns: int) -> int:
        if ns < 0:
            raise ValueError("use set() to move a ManualClock backwards")
        self._now += ns
        return self._now

    def advance_seconds(self, seconds: float) -> int:
        return self.advance(int(round(seconds * NANOS_PER_SECOND)))

    def set(self, instant: int) -> None:
        self._now = instant


_DEFAULT: Optional[MonotonicClock] = None


def default_clock() -> MonotonicClock:
    """Return the shared non-strict monotonic clock."""
    global _DEFAULT
    if _DEFAULT is None:
        _DEFAULT = MonotonicClock()
    return _DEFAULT
