# SPDX-License-Identifier: MIT
"""Project-wide exception types."""
from __future__ import annotations

from typing import Any, Sequence


class SelfTimeError(RuntimeError):
    """Base class for selftime-specific errors."""


class ConfigValidationError(SelfTimeError):
    """Configuration validation failed."""


class ClockAnomalyError(SelfTimeError):
    """The clock moved backwards between two reads of the same scope."""

    def __init__(self, start: int, end: int) -> None:
        super().__init__(f"clock moved backwards by {start - end}ns ({start} -> {end})")
        self.start = start
        self.end = end


class UsageError(SelfTimeError):
    """Broken instrumentation call sequence."""


class UnjoinedChildrenError(UsageError):
    """A scope (or the session) was finished while forked children are still live."""

    def __init__(self, identifier: Any, outstanding: Sequence[Any]) -> None:
        names = ", ".join(repr(o) for o in outstanding)
        super().__init__(f"cannot finish {identifier!r}: unjoined children [{names}]")
        self.identifier = identifier
        self.outstanding = tuple(outstanding)


class ScopeCheckedOutError(UsageError):
    """The scope is paused because a child is live; use the child handle instead."""


class ScopeJoinedError(UsageError):
    """The scope has already been joined and can no longer be used."""


class DoubleJoinError(ScopeJoinedError):
    """Join was called twice on the same scope."""


class SessionFinishedError(UsageError):
    """The session was already finished; its table is frozen."""


class ForeignThreadError(UsageError):
    """A session was used from a thread other than the one that created it."""
