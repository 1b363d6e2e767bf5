# SPDX-License-Identifier: MIT
"""Ordered views over a finished aggregator table.

Entries are sorted by total self time, largest first. Ties keep the order in
which identifiers were first recorded.

Duration units are chosen by magnitude::

    < 1µs   -> "ns" (integer)
    < 1ms   -> "µs"
    < 1s    -> "ms"
    >= 1s   -> "s"

Non-integer values keep up to three decimals with trailing zeros removed. A
value that rounds up to 1000 of its unit moves to the next unit, so
999_999_999ns is "1s" rather than "1000ms". Below 1ms this cannot happen with
integer nanoseconds: 999_999ns is exactly "999.999µs".
"""
from __future__ import annotations

from typing import Any, Dict, Iterable, Iterator, List, NamedTuple, Optional, Sequence, Tuple, Union, overload

from .clock import NANOS_PER_SECOND

IDENT_HEADER = "Identifier"
DURATION_HEADER = "Duration"
FORKED_HEADER = "Times Forked"

_SCALES = ((1_000, "µs"), (1_000_000, "ms"), (NANOS_PER_SECOND, "s"))


def format_duration(ns: int, ascii_units: bool = False) -> str:
    """Render ``ns`` nanoseconds in a human-scaled unit."""
    if ns < 0:
        raise ValueError(f"negative duration: {ns}")
    if ns < _SCALES[0][0]:
        return f"{ns}ns"
    for i, (scale, unit) in enumerate(_SCALES):
        text = f"{ns / scale:.3f}".rstrip("0").rstrip(".")
        if i + 1 == len(_SCALES):
            break
        if ns < _SCALES[i + 1][0] and text != "1000":
            break
    if ascii_units and unit == "µs":
        unit = "us"
    return f"{text}{unit}"


class ReportEntry(NamedTuple):
    identifier: Any
    total_ns: int
    occurrences: int

    @property
    def total_seconds(self) -> float:
        return self.total_ns / NANOS_PER_SECOND

    def as_dict(self) -> Dict[str, Any]:
        return {
            "identifier": self.identifier,
            "total_ns": self.total_ns,
            "occurrences": self.occurrences,
        }


class Report(Sequence[ReportEntry]):
    """Immutable, ordered result of a profiling session."""

    def __init__(self, items: Iterable[Tuple[Any, int, int]]) -> None:
        entries = [ReportEntry(*item) for item in items]
        # sorted() is stable, so equal totals keep first-occurrence order
        self._entries: Tuple[ReportEntry, ...] = tuple(sorted(entries, key=lambda e: -e.total_ns))

    @property
    def entries(self) -> Tuple[ReportEntry, ...]:
        return self._entries

    @property
    def identifiers(self) -> List[Any]:
        return [e.identifier for e in self._entries]

    @property
    def total_ns(self) -> int:
        return sum(e.total_ns for e in self._entries)

    def get(self, identifier: Any) -> Optional[ReportEntry]:
        for entry in self._entries:
            if entry.identifier == identifier:
                return entry
        return None

    def as_dicts(self) -> List[Dict[str, Any]]:
        return [e.as_dict() for e in self._entries]

    def to_table(self, ascii_units: bool = False, title: Optional[str] = None) -> str:
        return render_table(self, ascii_units=ascii_units, title=title)

    def to_markdown(self, ascii_units: bool = False) -> str:
        return render_markdown(self, ascii_units=ascii_units)

    @overload
    def __getitem__(self, index: int) -> ReportEntry: ...

    @overload
    def __getitem__(self, index: slice) -> Sequence[ReportEntry]: ...

    def __getitem__(self, index: Union[int, slice]) -> Union[ReportEntry, Sequence[ReportEntry]]:
        return self._entries[index]

    def __iter__(self) -> Iterator[ReportEntry]:
        return iter(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def __eq__(self, other: object) -> bool:
        if isinstance(other, Report):
            return self._entries == other._entries
        return NotImplemented

    def __hash__(self) -> int:
        return hash(self._entries)

    def __str__(self) -> str:
        return self.to_table()

    def __repr__(self) -> str:
        return f"Report({list(self._entries)!r})"


def _rows(report: Iterable[ReportEntry], ascii_units: bool) -> List[List[str]]:
    return [
        [str(e.identifier), format_duration(e.total_ns, ascii_units), str(e.occurrences)]
        for e in report
    ]


def _layout(report: Iterable[ReportEntry], ascii_units: bool) -> Tuple[List[str], List[List[str]], List[int]]:
    header = [IDENT_HEADER, DURATION_HEADER, FORKED_HEADER]
    rows = _rows(report, ascii_units)
    widths = [max(len(r[i]) for r in [header] + rows) for i in range(len(header))]
    return header, rows, widths


def _fmt_line(cells: List[str], widths: List[int]) -> str:
    return "| " + " | ".join(c.ljust(w) for c, w in zip(cells, widths)) + " |"


def render_table(report: Iterable[ReportEntry], ascii_units: bool = False, title: Optional[str] = None) -> str:
    """Render a boxed, left-aligned text table.

    +------------+----------+--------------+
    | Identifier | Duration | Times Forked |
    +------------+----------+--------------+
    | innest     | 12.07ms  | 12           |
    +------------+----------+--------------+
    """
    header, rows, widths = _layout(report, ascii_units)
    hline = "+" + "+".join("-" * (w + 2) for w in widths) + "+"
    lines = [hline, _fmt_line(header, widths), hline]
    lines += [_fmt_line(r, widths) for r in rows]
    lines.append(hline)
    if title:
        lines.insert(0, title)
    return "\n".join(lines)


def render_markdown(report: Iterable[ReportEntry], ascii_units: bool = False) -> str:
    header, rows, widths = _layout(report, ascii_units)
    lines = [_fmt_line(header, widths), _fmt_line(["-" * w for w in widths], widths)]
    lines += [_fmt_line(r, widths) for r in rows]
    return "\n".join(lines)
