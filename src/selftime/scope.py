# SPDX-License-Identifier: MIT
"""Scope nodes and the handles callers hold on them.

A parent is paused for exactly as long as one of its children is live: the
instant read when forking closes the parent's running interval and opens the
child's, and the instant read when joining closes the child's and reopens the
parent's. Summing every node's self time therefore partitions the session's
wall time.
"""
from __future__ import annotations

import enum
from typing import TYPE_CHECKING, Any, Callable, Hashable, Optional, Tuple

from .exceptions import (
    DoubleJoinError,
    ScopeCheckedOutError,
    ScopeJoinedError,
    UnjoinedChildrenError,
    UsageError,
)

if TYPE_CHECKING:  # pragma: no cover
    from .session import Session


class ScopeState(str, enum.Enum):
    ACTIVE = "active"
    PAUSED = "paused"
    JOINED = "joined"


class ScopeNode:
    """One node of the timing tree."""

    __slots__ = ("identifier", "parent", "depth", "accumulated_ns", "resume_point", "state")

    def __init__(self, identifier: Hashable, resume_point: int, parent: Optional["ScopeNode"] = None) -> None:
        self.identifier = identifier
        self.parent = parent
        self.depth = 0 if parent is None else parent.depth + 1
        self.accumulated_ns = 0
        self.resume_point: Optional[int] = resume_point
        self.state = ScopeState.ACTIVE

    def _run_until(self, now: int, span: Callable[[int, int], int]) -> None:
        if self.resume_point is None:
            raise UsageError(f"scope {self.identifier!r} is not running")
        self.accumulated_ns += span(self.resume_point, now)

    def pause(self, now: int, span: Callable[[int, int], int]) -> None:
        self._run_until(now, span)
        self.resume_point = None
        self.state = ScopeState.PAUSED

    def resume(self, now: int) -> None:
        self.resume_point = now
        self.state = ScopeState.ACTIVE

    def close(self, now: int, span: Callable[[int, int], int]) -> int:
        self._run_until(now, span)
        self.resume_point = None
        self.state = ScopeState.JOINED
        return self.accumulated_ns

    def __repr__(self) -> str:
        return f"ScopeNode({self.identifier!r}, state={self.state.value}, self_ns={self.accumulated_ns})"


class ScopeHandle:
    """Caller-facing handle on a scope node.

    Only the handle of the innermost live scope (the session frontier) may
    fork or join. A handle is also a context manager that joins on exit::

        with session.fork("load") as load:
            with load.fork("parse"):
                ...
    """

    def __init__(self, session: "Session", node: ScopeNode) -> None:
        self._session = session
        self._node = node

    @property
    def identifier(self) -> Any:
        return self._node.identifier

    @property
    def state(self) -> ScopeState:
        return self._node.state

    @property
    def node(self) -> ScopeNode:
        return self._node

    @property
    def is_root(self) -> bool:
        return self._node.parent is None

    def _ensure_active(self) -> None:
        state = self._node.state
        if state is ScopeState.PAUSED:
            raise ScopeCheckedOutError(
                f"scope {self.identifier!r} is paused while {self._session.frontier.identifier!r} "
                "is live; join the child first"
            )
        if state is ScopeState.JOINED:
            raise ScopeJoinedError(f"scope {self.identifier!r} has already been joined")

    def _ensure_frontier(self) -> None:
        frontier = self._session.frontier
        if frontier is not self:
            raise UsageError(f"scope {self.identifier!r} is not the session frontier ({frontier!r})")

    def fork(self, identifier: Hashable) -> "ScopeHandle":
        """Pause this scope and open a child scope named ``identifier``."""
        session = self._session
        session._check_usable()
        self._ensure_active()
        self._ensure_frontier()
        now = session.clock.now()
        self._node.pause(now, session._span)
        child = ScopeHandle(session, ScopeNode(identifier, resume_point=now, parent=self._node))
        session._push(child)
        return child

    def join(self) -> Tuple[Any, int]:
        """Close this scope, record its self time and resume the parent.

        Returns ``(identifier, self_ns)``.
        """
        session = self._session
        node = self._node
        if node.state is ScopeState.JOINED:
            raise DoubleJoinError(f"scope {self.identifier!r} has already been joined")
        session._check_usable()
        if node.state is ScopeState.PAUSED:
            raise UnjoinedChildrenError(self.identifier, session._outstanding_after(self))
        self._ensure_frontier()
        now = session.clock.now()
        self_ns = node.close(now, session._span)
        session._pop(self, self_ns)
        if node.parent is not None:
            node.parent.resume(now)
        else:
            session._on_root_joined(now)
        return node.identifier, self_ns

    def __enter__(self) -> "ScopeHandle":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        if self._node.state is ScopeState.JOINED:
            return
        if exc_type is not None:
            # the block is unwinding; close anything it left open beneath us
            self._session._unwind_to(self)
        self.join()

    def __repr__(self) -> str:
        return f"ScopeHandle({self.identifier!r}, state={self.state.value})"
