from __future__ import annotations

import pytest

from src.wage_ledger.wage_ledger.access.model import Caller
from src.wage_ledger.wage_ledger.container import build_container


class FakeClock:
    """Nanosecond clock that only moves when told to."""

    def __init__(self, start: int = 1_740_787_200_000_000_000):
        self.now = start

    def __call__(self) -> int:
        return self.now

    def advance(self, ns: int = 1_000_000_000) -> None:
        self.now += ns


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def container(clock):
    return build_container(backend="memory", clock=clock)


@pytest.fixture
def admin(container):
    caller = Caller(principal="admin-principal")
    container.access_service.initialize(caller)
    return caller


@pytest.fixture
def owner(admin):
    # Any non-anonymous principal is a user once an admin exists.
    return Caller(principal="owner-principal")
