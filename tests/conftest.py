import sys
from pathlib import Path

import pytest

# Ensure src is on sys.path so `import selftime` works without an install
ROOT = Path(__file__).resolve().parents[1]
SRC = ROOT / "src"
if str(SRC) not in sys.path:
    sys.path.insert(0, str(SRC))

from selftime import ManualClock, ProfilerConfig, Session  # noqa: E402


@pytest.fixture
def clock() -> ManualClock:
    """Deterministic clock starting at t=1_000_000ns."""
    return ManualClock(start=1_000_000)


@pytest.fixture
def session(clock: ManualClock) -> Session:
    return Session("total", clock=clock)


@pytest.fixture
def make_session(clock: ManualClock):
    def _make(root="total", **cfg) -> Session:
        return Session(root, clock=clock, config=ProfilerConfig(**cfg))

    return _make


@pytest.fixture(autouse=True)
def _quiet_selftime_logger():
    """Drop handlers a test (or a CLI invocation) installed on the selftime logger."""
    yield
    from selftime.logging import LoggingConfig, init_logging

    init_logging(LoggingConfig(console=False, log_level="WARNING"))
