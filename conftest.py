"""
Shared pytest fixtures: captured sinks and a controllable clock.
"""

import io

import pytest

from linelog import sinks


@pytest.fixture(autouse=True)
def _restore_sinks():
    """Every test starts and ends with the default sinks."""
    sinks.reset()
    yield
    sinks.reset()


@pytest.fixture
def out():
    """Buffer installed as the normal sink"""
    buf = io.StringIO()
    sinks.set_out(buf)
    return buf


@pytest.fixture
def err():
    """Buffer installed as the error sink"""
    buf = io.StringIO()
    sinks.set_err(buf)
    return buf


class FakeClock:
    def __init__(self, start_ns: int = 1_000_000_000):
        self.now_ns = start_ns

    def advance(self, ms: float) -> None:
        self.now_ns += int(ms * 1_000_000)

    def __call__(self) -> int:
        return self.now_ns


@pytest.fixture
def clock(monkeypatch):
    """Replace the monotonic clock used for durations"""
    fake = FakeClock()
    monkeypatch.setattr('linelog.clock.monotonic_ns', fake)
    return fake
