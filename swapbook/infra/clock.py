"""Clock implementations: the system UTC clock and a fixed clock for tests."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import UTC, date, datetime
from typing import final

from swapbook.core.types import UtcDatetime


@final
class SystemClock:
    """Wall-clock UTC time."""

    def now(self) -> UtcDatetime:
        return UtcDatetime.now()

    def today(self) -> date:
        return datetime.now(tz=UTC).date()


@final
@dataclass
class FixedClock:
    """Clock pinned to one instant. advance() moves it forward."""

    instant: datetime

    def __post_init__(self) -> None:
        if self.instant.tzinfo is None:
            raise TypeError("FixedClock requires timezone-aware datetime, got naive")

    def now(self) -> UtcDatetime:
        return UtcDatetime(value=self.instant.astimezone(UTC))

    def today(self) -> date:
        return self.instant.astimezone(UTC).date()

    def advance(self, to: datetime) -> None:
        if to < self.instant:
            raise TypeError(f"FixedClock cannot move backwards: {to} < {self.instant}")
        self.instant = to
