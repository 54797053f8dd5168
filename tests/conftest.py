"""Shared fixtures: a controllable clock and a store that uses it."""

from __future__ import annotations

from datetime import datetime, timedelta, timezone

import pytest

from task_priority_engine.task_engine import SortingStrategy, TaskStore


class FakeClock:
    def __init__(self, start: datetime) -> None:
        self.current = start

    def __call__(self) -> datetime:
        return self.current

    def advance(self, **kwargs: float) -> None:
        self.current += timedelta(**kwargs)


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock(datetime(2026, 3, 10, 9, 0, tzinfo=timezone.utc))


@pytest.fixture
def store(clock: FakeClock) -> TaskStore:
    return TaskStore(SortingStrategy.PRIORITY, clock=clock)
