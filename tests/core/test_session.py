"""Session lifecycle, aggregation and the self-time partition."""
import random
import threading

import pytest

from selftime import (
    ClockAnomalyError,
    ForeignThreadError,
    ManualClock,
    ProfilerConfig,
    Session,
    SessionFinishedError,
    UnjoinedChildrenError,
)


def _scenario(session, clock):
    with session.fork("outer") as outer:
        clock.advance(1)
        for _ in range(3):
            with outer.fork("inner") as inner:
                clock.advance(200)
                for _ in range(4):
                    with inner.fork("innest"):
                        clock.advance(500)


def test_nested_scenario_order_and_counts(session, clock):
    _scenario(session, clock)
    report = session.finish()
    assert [(e.identifier, e.occurrences) for e in report] == [
        ("innest", 12),
        ("inner", 3),
        ("outer", 1),
        ("total", 1),
    ]
    assert report.get("innest").total_ns == 12 * 500
    assert report.get("inner").total_ns == 3 * 200
    assert report.get("outer").total_ns == 1
    assert report.get("total").total_ns == 0


def test_self_times_partition_wall_time(clock):
    rng = random.Random(7)
    session = Session("root", clock=clock)
    stack = [session.root]
    for _ in range(500):
        clock.advance(rng.randint(0, 1_000))
        if len(stack) > 1 and rng.random() < 0.45:
            stack.pop().join()
        else:
            stack.append(stack[-1].fork(rng.choice("abcde")))
    while len(stack) > 1:
        clock.advance(rng.randint(0, 1_000))
        stack.pop().join()
    clock.advance(123)
    report = session.finish()
    assert report.total_ns == session.finished_at - session.started_at
    assert report.total_ns == session.elapsed_ns


def test_same_identifier_merges_across_depths(session, clock):
    durations = []
    with session.fork("x") as x:
        clock.advance(10)
        durations.append(10)
        with x.fork("y") as y:
            with y.fork("x"):
                clock.advance(30)
                durations.append(30)
    with session.fork("x"):
        clock.advance(5)
        durations.append(5)
    report = session.finish()
    entry = report.get("x")
    assert entry.occurrences == 3
    assert entry.total_ns == sum(durations)
    assert report.identifiers.count("x") == 1


def test_finish_with_unjoined_child_fails_and_keeps_state(session, clock):
    outer = session.fork("outer")
    clock.advance(50)
    with pytest.raises(UnjoinedChildrenError) as excinfo:
        session.finish()
    assert excinfo.value.outstanding == ("outer",)
    assert not session.finished
    assert session.report is None
    outer.join()
    report = session.finish()
    assert report.get("outer").total_ns == 50


def test_finish_twice_fails(session):
    session.finish()
    with pytest.raises(SessionFinishedError):
        session.finish()
    with pytest.raises(SessionFinishedError):
        session.fork("late")


def test_table_frozen_after_finish(session):
    session.finish()
    assert session.aggregator.frozen
    with pytest.raises(SessionFinishedError):
        session.aggregator.record("late", 1)


def test_fork_delegates_to_frontier(session):
    a = session.fork("a")
    b = session.fork("b")
    assert b.node.parent is a.node
    assert session.depth == 3
    b.join()
    a.join()


def test_context_manager_finishes(clock):
    with Session("total", clock=clock) as session:
        with session.fork("work"):
            clock.advance(10)
    assert session.finished
    assert session.report.get("work").total_ns == 10


def test_context_manager_leaves_session_open_on_error(clock):
    with pytest.raises(RuntimeError):
        with Session("total", clock=clock) as session:
            raise RuntimeError("boom")
    assert not session.finished


def test_snapshot_only_sees_joined_scopes(session, clock):
    with session.fork("done"):
        clock.advance(4)
    live = session.fork("live")
    clock.advance(8)
    snap = session.snapshot()
    assert snap.identifiers == ["done"]
    live.join()
    assert session.snapshot().get("live").total_ns == 8


def test_finish_pretty_uses_config(make_session, clock):
    session = make_session(ascii_units=True, table_title="run 1")
    with session.fork("io"):
        clock.advance(1_500)
    text = session.finish_pretty()
    assert text.splitlines()[0] == "run 1"
    assert "1.5us" in text


def test_backwards_clock_clamps_to_zero(session, clock):
    child = session.fork("child")
    clock.set(clock.now() - 1_000)
    _, self_ns = child.join()
    assert self_ns == 0
    assert session.clock_anomalies == 1
    assert session.aggregator.get("child").total_ns == 0


def test_backwards_clock_raises_in_strict_mode():
    clock = ManualClock(start=5_000)
    session = Session("total", clock=clock, config=ProfilerConfig(strict_clock=True))
    child = session.fork("child")
    clock.set(0)
    with pytest.raises(ClockAnomalyError):
        child.join()
    assert "child" not in session.aggregator


def test_strict_session_leaves_shared_clock_lenient():
    clock = ManualClock(start=0)
    Session("a", clock=clock, config=ProfilerConfig(strict_clock=True)).finish()
    assert clock.strict is False

    session = Session("b", clock=clock)
    child = session.fork("c")
    clock.set(-5)
    assert child.join() == ("c", 0)
    assert session.clock_anomalies == 1


def test_clock_anomalies_are_counted_per_session(clock):
    first = Session("a", clock=clock)
    child = first.fork("c")
    clock.set(clock.now() - 10)
    child.join()
    first.finish()

    second = Session("b", clock=clock)
    second.finish()
    assert first.clock_anomalies == 1
    assert second.clock_anomalies == 0
    assert clock.anomalies == 1


def test_foreign_thread_rejected(session):
    errors = []

    def worker():
        try:
            session.fork("elsewhere")
        except ForeignThreadError as e:
            errors.append(e)

    t = threading.Thread(target=worker)
    t.start()
    t.join()
    assert len(errors) == 1
    assert session.depth == 1


def test_thread_check_can_be_disabled(make_session):
    session = make_session(check_thread=False)
    handles = []
    t = threading.Thread(target=lambda: handles.append(session.fork("elsewhere")))
    t.start()
    t.join()
    handles[0].join()
    assert session.finish().get("elsewhere").occurrences == 1


def test_real_clock_session_is_non_negative():
    session = Session("total")
    for _ in range(100):
        session.fork("noop").join()
    report = session.finish()
    assert report.get("noop").occurrences == 100
    assert all(e.total_ns >= 0 for e in report)
