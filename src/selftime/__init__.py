# SPDX-License-Identifier: MIT
"""selftime: hierarchical self-time profiler.

Time nested regions of code, subtract each region's children from its own
total, and merge repeated region names into one ordered report::

    from selftime import Session

    with Session("total") as session:
        for chunk in chunks:
            with session.fork("chunk") as c:
                with c.fork("parse"):
                    parse(chunk)
    print(session.report.to_table())

Modules:

* clock: monotonic and manual clock sources (nanosecond ints).
* scope: scope nodes and the fork/join handles.
* session: the profiling session owning the tree and the aggregator.
* aggregator: identifier -> (total, count) table.
* report: sorted report and its table/markdown renderings.
* timers: one-shot helpers (measure, time_block, Timer, Stopwatch).
* config: ProfilerConfig and its YAML/env/override loader.
* logging: logger setup for applications embedding selftime.
* exceptions: project-wide exception types.
"""

__version__ = "0.1.0"

from .aggregator import AggregateEntry, Aggregator
from .clock import Clock, ManualClock, MonotonicClock, default_clock
from .config import ProfilerConfig, load_config, validate_config
from .exceptions import (
    ClockAnomalyError,
    ConfigValidationError,
    DoubleJoinError,
    ForeignThreadError,
    ScopeCheckedOutError,
    ScopeJoinedError,
    SelfTimeError,
    SessionFinishedError,
    UnjoinedChildrenError,
    UsageError,
)
from .report import Report, ReportEntry, format_duration, render_markdown, render_table
from .scope import ScopeHandle, ScopeNode, ScopeState
from .session import Session
from .timers import Stopwatch, Timer, measure, measure_eprint, measure_print, time_block

__all__ = [
    "__version__",
    "Session",
    "ScopeHandle",
    "ScopeNode",
    "ScopeState",
    "Aggregator",
    "AggregateEntry",
    "Report",
    "ReportEntry",
    "format_duration",
    "render_table",
    "render_markdown",
    "Clock",
    "MonotonicClock",
    "ManualClock",
    "default_clock",
    "ProfilerConfig",
    "load_config",
    "validate_config",
    "Timer",
    "Stopwatch",
    "measure",
    "measure_print",
    "measure_eprint",
    "time_block",
    "SelfTimeError",
    "UsageError",
    "UnjoinedChildrenError",
    "ScopeCheckedOutError",
    "ScopeJoinedError",
    "DoubleJoinError",
    "SessionFinishedError",
    "ForeignThreadError",
    "ClockAnomalyError",
    "ConfigValidationError",
]
