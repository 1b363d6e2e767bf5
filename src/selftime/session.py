# SPDX-License-Identifier: MIT
"""Profiling session: the root scope, the live-scope stack and the aggregator."""
from __future__ import annotations

import threading
from typing import Any, Hashable, List, Optional, cast

from .aggregator import Aggregator
from .clock import Clock, MonotonicClock
from .config import ProfilerConfig
from .exceptions import ForeignThreadError, SessionFinishedError, UnjoinedChildrenError, UsageError
from .logging import get_logger, log_event
from .report import Report, render_table
from .scope import ScopeHandle, ScopeNode

logger = get_logger(__name__)


class Session:
    """A self-time profiling session.

    Create it with a root identifier, fork nested scopes from the current
    frontier and call :meth:`finish` once every child has been joined::

        session = Session("total")
        for _ in range(3):
            with session.fork("step") as step:
                with step.fork("io"):
                    read()
                decode()
        print(session.finish_pretty())

    The session is also a context manager; leaving the block without an
    exception finishes it and stores the result on ``session.report``.
    """

    def __init__(
        self,
        root_identifier: Hashable,
        *,
        clock: Optional[Clock] = None,
        config: Optional[ProfilerConfig] = None,
    ) -> None:
        self.config = config or ProfilerConfig()
        self.clock = clock or MonotonicClock()
        self.strict_clock = self.config.strict_clock or self.clock.strict
        self._aggregator = Aggregator()
        self._owner = threading.get_ident()
        self._anomalies = 0
        self._finished = False
        self.report: Optional[Report] = None
        self.started_at = self.clock.now()
        self.finished_at: Optional[int] = None
        self.root = ScopeHandle(self, ScopeNode(root_identifier, resume_point=self.started_at))
        self._stack: List[ScopeHandle] = [self.root]

    # ------------------------------------------------------------------
    # public API
    # ------------------------------------------------------------------
    @property
    def frontier(self) -> ScopeHandle:
        """Handle of the innermost live scope."""
        if not self._stack:
            raise SessionFinishedError("session is finished; no live scope")
        return self._stack[-1]

    @property
    def depth(self) -> int:
        return len(self._stack)

    @property
    def finished(self) -> bool:
        return self._finished

    @property
    def aggregator(self) -> Aggregator:
        return self._aggregator

    @property
    def clock_anomalies(self) -> int:
        return self._anomalies

    @property
    def elapsed_ns(self) -> int:
        end = self.finished_at if self.finished_at is not None else self.clock.now()
        return max(0, end - self.started_at)

    def fork(self, identifier: Hashable) -> ScopeHandle:
        """Fork a child of the current frontier scope."""
        self._check_usable()
        return self._stack[-1].fork(identifier)

    def finish(self) -> Report:
        """Join the root, freeze the table and return the report."""
        self._check_usable()
        if len(self._stack) > 1:
            raise UnjoinedChildrenError(self.root.identifier, self._outstanding_after(self.root))
        self.root.join()
        return cast(Report, self.report)

    def finish_pretty(self) -> str:
        report = self.finish()
        return render_table(report, ascii_units=self.config.ascii_units, title=self.config.table_title)

    def snapshot(self) -> Report:
        """Report over the scopes joined so far; does not touch live scopes."""
        return Report(self._aggregator.items())

    def __enter__(self) -> "Session":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        if exc_type is None and not self._finished:
            self.finish()

    def __repr__(self) -> str:
        state = "finished" if self._finished else f"depth={len(self._stack)}"
        return f"Session({self.root.identifier!r}, {state})"

    # ------------------------------------------------------------------
    # hooks used by ScopeHandle
    # ------------------------------------------------------------------
    def _check_usable(self) -> None:
        if self._finished:
            raise SessionFinishedError(f"session {self.root.identifier!r} is already finished")
        if self.config.check_thread and threading.get_ident() != self._owner:
            raise ForeignThreadError(
                f"session {self.root.identifier!r} belongs to thread {self._owner}; "
                "create one session per thread"
            )

    def _span(self, start: int, end: int) -> int:
        """Duration between two clock readings under this session's clock policy."""
        if end < start:
            self._anomalies += 1
        return self.clock.duration_between(start, end, strict=self.strict_clock)

    def _push(self, handle: ScopeHandle) -> None:
        self._stack.append(handle)
        if self.config.log_scopes:
            logger.debug("fork %r (depth %d)", handle.identifier, handle.node.depth)

    def _pop(self, handle: ScopeHandle, self_ns: int) -> None:
        if self._stack[-1] is not handle:
            raise UsageError(f"joined {handle!r} but frontier was {self._stack[-1]!r}")
        self._stack.pop()
        self._aggregator.record(handle.identifier, self_ns)
        if self.config.log_scopes:
            logger.debug("join %r self=%dns", handle.identifier, self_ns)

    def _outstanding_after(self, handle: ScopeHandle) -> List[Any]:
        idx = self._stack.index(handle)
        return [h.identifier for h in self._stack[idx + 1:]]

    def _unwind_to(self, handle: ScopeHandle) -> None:
        while self._stack and self._stack[-1] is not handle:
            self._stack[-1].join()

    def _on_root_joined(self, now: int) -> None:
        self.finished_at = now
        self._aggregator.freeze()
        self._finished = True
        self.report = Report(self._aggregator.items())
        log_event(
            "session_finished",
            {
                "root": self.root.identifier,
                "elapsed_ns": self.elapsed_ns,
                "clock_anomalies": self.clock_anomalies,
                "report": self.report.as_dicts(),
            },
            logger=logger,
        )
