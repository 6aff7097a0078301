"""Core value types: UtcDatetime and the Reference tagged union.

Reference = ById | ByName. A lifecycle request names each reference datum
either by numeric id or by display name, never both; reference_of() turns a
loose (id, name) pair into exactly one variant with a single rule: the id
wins when both are supplied.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import UTC, datetime
from typing import final

from swapbook.core.result import Err, Ok


@final
@dataclass(frozen=True, slots=True)
class UtcDatetime:
    """Timezone-aware UTC datetime. Naive datetimes are rejected."""

    value: datetime

    def __post_init__(self) -> None:
        if self.value.tzinfo is None:
            raise TypeError("UtcDatetime requires timezone-aware datetime, got naive")

    @staticmethod
    def parse(raw: datetime) -> Ok[UtcDatetime] | Err[str]:
        """Parse a datetime, rejecting naive (no tzinfo) datetimes."""
        if raw.tzinfo is None:
            return Err("UtcDatetime requires timezone-aware datetime, got naive")
        return Ok(UtcDatetime(value=raw.astimezone(UTC)))

    @staticmethod
    def now() -> UtcDatetime:
        """Current UTC time."""
        return UtcDatetime(value=datetime.now(tz=UTC))


# ---------------------------------------------------------------------------
# Reference = ById | ByName
# ---------------------------------------------------------------------------


@final
@dataclass(frozen=True, slots=True)
class ById:
    """Reference to an entity by its numeric id."""

    id: int

    def describe(self) -> tuple[str, str]:
        """(field, value) pair used in not-found reporting."""
        return ("id", str(self.id))


@final
@dataclass(frozen=True, slots=True)
class ByName:
    """Reference to an entity by its display name (case-insensitive)."""

    name: str

    def __post_init__(self) -> None:
        if not self.name or not self.name.strip():
            raise TypeError("ByName requires a non-blank name")

    def describe(self) -> tuple[str, str]:
        return ("name", self.name)


type Reference = ById | ByName


def reference_of(id: int | None = None, name: str | None = None) -> Reference | None:  # noqa: A002
    """Build a Reference from an optional id and an optional name.

    Resolution order is uniform for every field: id first, then name.
    Returns None when neither is supplied (or the name is blank).
    """
    if id is not None:
        return ById(id=id)
    if name is not None and name.strip():
        return ByName(name=name.strip())
    return None
