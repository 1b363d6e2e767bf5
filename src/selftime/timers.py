# SPDX-License-Identifier: MIT
"""One-shot timing helpers (Timer, Stopwatch, measure).

These share the monotonic clock with the scope tree but are independent of
it: they time a single region and hand back the elapsed nanoseconds.
"""
from __future__ import annotations

import sys
from contextlib import contextmanager
from dataclasses import dataclass, field
from typing import Any, Callable, Iterator, Optional, TextIO, Tuple, TypeVar

from .clock import NANOS_PER_SECOND, Clock, default_clock

T = TypeVar("T")


@dataclass
class Timer:
    """High-precision timer (monotonic) usable as context manager."""
    clock: Clock = field(default_factory=default_clock, repr=False)
    start: int = 0
    elapsed_ns: int = 0

    def __enter__(self) -> "Timer":
        self.start = self.clock.now()
        return self

    def __exit__(self, exc_type, exc, tb) -> None:  # type: ignore[override]
        self.elapsed_ns = self.clock.elapsed(self.start)

    @property
    def elapsed(self) -> float:
        return self.elapsed_ns / NANOS_PER_SECOND


class Stopwatch:
    """Manual start/stop stopwatch that can be resumed."""

    def __init__(self, clock: Optional[Clock] = None) -> None:
        self.clock = clock or default_clock()
        self._start: Optional[int] = None
        self.elapsed_ns = 0

    @property
    def running(self) -> bool:
        return self._start is not None

    def start(self) -> None:
        if self._start is None:
            self._start = self.clock.now()

    def stop(self) -> None:
        if self._start is not None:
            self.elapsed_ns += self.clock.elapsed(self._start)
            self._start = None

    def reset(self) -> None:
        self._start = None
        self.elapsed_ns = 0

    @property
    def elapsed(self) -> float:
        return self.elapsed_ns / NANOS_PER_SECOND


def measure(fn: Callable[..., T], *args: Any, clock: Optional[Clock] = None, **kwargs: Any) -> Tuple[T, int]:
    """Call ``fn`` and return ``(result, elapsed_ns)``."""
    clock = clock or default_clock()
    t0 = clock.now()
    result = fn(*args, **kwargs)
    return result, clock.elapsed(t0)


def _emit(label: str, elapsed_ns: int, stream: TextIO) -> None:
    stream.write(f"{label}: {elapsed_ns // 1_000_000}ms\n")


def measure_print(
    label: str,
    fn: Callable[..., T],
    *args: Any,
    stream: Optional[TextIO] = None,
    clock: Optional[Clock] = None,
    **kwargs: Any,
) -> T:
    """Call ``fn``, print ``"label: Nms"`` to ``stream`` (stdout) and return its result."""
    result, elapsed_ns = measure(fn, *args, clock=clock, **kwargs)
    _emit(label, elapsed_ns, stream or sys.stdout)
    return result


def measure_eprint(label: str, fn: Callable[..., T], *args: Any, clock: Optional[Clock] = None, **kwargs: Any) -> T:
    """Same as :func:`measure_print` but writes to stderr."""
    return measure_print(label, fn, *args, stream=sys.stderr, clock=clock, **kwargs)


@contextmanager
def time_block(
    label: Optional[str] = None, stream: Optional[TextIO] = None, clock: Optional[Clock] = None
) -> Iterator[Timer]:
    """Time a block; the yielded Timer holds ``elapsed_ns`` once the block exits.

    When ``label`` is given the duration is also printed (stdout by default).
    """
    timer = Timer(clock=clock or default_clock())
    with timer:
        yield timer
    if label is not None:
        _emit(label, timer.elapsed_ns, stream or sys.stdout)
