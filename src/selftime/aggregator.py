# SPDX-License-Identifier: MIT
"""Session-wide identifier -> (total, count) table."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Hashable, Iterator, List, Tuple

from .exceptions import SessionFinishedError


@dataclass
class AggregateEntry:
    total_ns: int = 0
    occurrences: int = 0


class Aggregator:
    """Merges scope timings by identifier.

    Keys keep first-insertion order, which the report uses to break ties.
    Once :meth:`freeze` is called the table rejects further records.
    """

    def __init__(self) -> None:
        self._entries: Dict[Hashable, AggregateEntry] = {}
        self._frozen = False

    @property
    def frozen(self) -> bool:
        return self._frozen

    def record(self, identifier: Hashable, duration_ns: int) -> AggregateEntry:
        if self._frozen:
            raise SessionFinishedError(f"cannot record {identifier!r}: table is frozen")
        if duration_ns < 0:
            raise ValueError(f"negative duration for {identifier!r}: {duration_ns}")
        entry = self._entries.get(identifier)
        if entry is None:
            entry = self._entries[identifier] = AggregateEntry()
        entry.total_ns += duration_ns
        entry.occurrences += 1
        return entry

    def freeze(self) -> None:
        self._frozen = True

    def get(self, identifier: Hashable) -> AggregateEntry:
        return self._entries[identifier]

    def items(self) -> List[Tuple[Any, int, int]]:
        """Return ``(identifier, total_ns, occurrences)`` in first-insertion order."""
        return [(k, e.total_ns, e.occurrences) for k, e in self._entries.items()]

    @property
    def total_ns(self) -> int:
        return sum(e.total_ns for e in self._entries.values())

    def __contains__(self, identifier: object) -> bool:
        return identifier in self._entries

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[Hashable]:
        return iter(self._entries)
