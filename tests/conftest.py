"""Shared fixtures: a controllable clock and a deterministic id generator."""
from __future__ import annotations

from datetime import datetime, timedelta, timezone
from typing import Callable

import pytest

T0 = datetime(2026, 10, 16, 12, 0, 0, tzinfo=timezone.utc)


class FakeClock:
    """Callable clock that only moves when told to."""

    def __init__(self, start: datetime = T0) -> None:
        self.now = start

    def __call__(self) -> datetime:
        return self.now

    def advance(self, delta: timedelta) -> None:
        self.now = self.now + delta


def sequential_ids(prefix: str = "sess-") -> Callable[[], str]:
    counter = 0

    def generate() -> str:
        nonlocal counter
        counter += 1
        return f"{prefix}{counter}"

    return generate


@pytest.fixture()
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture()
def id_generator() -> Callable[[], str]:
    return sequential_ids()
