from __future__ import annotations

from datetime import date, datetime
from typing import Protocol


class Clock(Protocol):
    def now(self) -> datetime:
        raise NotImplementedError


class SystemClock:
    """Local wall clock."""

    def now(self) -> datetime:
        return datetime.now()


def today(clock: Clock) -> date:
    return clock.now().date()
