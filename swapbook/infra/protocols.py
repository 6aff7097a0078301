"""Collaborator protocols the lifecycle core depends on.

Domain code depends on these abstractions; adapters implement them. The
in-memory adapters in memory_adapter.py are the reference implementation
of the contracts documented here.

All methods return Ok[T] | Err[E]. Lookup misses, denials and storage
failures are visible values, never exceptions.
"""

from __future__ import annotations

from datetime import date
from typing import Protocol, runtime_checkable

from swapbook.core.errors import (
    ConcurrencyConflictError,
    NotFoundError,
    PersistenceError,
    UnauthorizedError,
)
from swapbook.core.result import Err, Ok
from swapbook.core.types import Reference, UtcDatetime
from swapbook.trade.types import Operation, ReferenceEntity, ReferenceKind, Trade, TradeRequest


@runtime_checkable
class ReferenceDataResolver(Protocol):
    """Read-only lookup of reference data by id or by name.

    Invariants:
      - resolve() never mutates anything.
      - A miss is Err(NotFoundError) naming the kind and the id/name tried.
      - Inactive entities are returned, not hidden; the caller decides.
    """

    def resolve(
        self, kind: ReferenceKind, reference: Reference,
    ) -> Ok[ReferenceEntity] | Err[NotFoundError]: ...


class TradeContext(Protocol):
    """What an authorizer may inspect about the trade being touched."""

    @property
    def trade_id(self) -> int | None: ...

    @property
    def request(self) -> TradeRequest | None: ...


@runtime_checkable
class Authorizer(Protocol):
    """Privilege check, called once per mutating operation before any work."""

    def authorize(
        self, user_id: int, operation: Operation, context: TradeContext,
    ) -> Ok[None] | Err[UnauthorizedError]: ...


@runtime_checkable
class TradeStore(Protocol):
    """Versioned trade persistence.

    Invariants:
      - At most one row per trade_id is active at any time.
      - save() assigns row ids to the trade, its legs and their cashflows,
        and returns the stored aggregate.
      - save(new, supersedes=prev) deactivates prev and inserts new in one
        commit. It fails with ConcurrencyConflictError, writing nothing, if
        the active row for the trade_id is not prev (by row id and version).
      - save(new) with no supersedes fails with ConcurrencyConflictError if
        any version of the trade_id is already active.
      - update() overwrites the active row in place; the row must still be
        the active one at the same version.
    """

    def save(
        self, trade: Trade, *, supersedes: Trade | None = None,
    ) -> Ok[Trade] | Err[ConcurrencyConflictError | PersistenceError]: ...

    def update(
        self, trade: Trade,
    ) -> Ok[Trade] | Err[ConcurrencyConflictError | PersistenceError]: ...

    def deactivate(
        self, trade_id: int, at: UtcDatetime,
    ) -> Ok[Trade] | Err[NotFoundError | PersistenceError]: ...

    def find_active_by_trade_id(
        self, trade_id: int,
    ) -> Ok[Trade | None] | Err[PersistenceError]: ...

    def find_active_by_status(
        self, status: str,
    ) -> Ok[tuple[Trade, ...]] | Err[PersistenceError]: ...

    def count(self) -> Ok[int] | Err[PersistenceError]: ...


class Clock(Protocol):
    """Source of 'now' and 'today' for timestamps and the trade-date window."""

    def now(self) -> UtcDatetime: ...

    def today(self) -> date: ...
