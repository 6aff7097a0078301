"""In-memory implementations of the reference-data and trade-store protocols.

Test doubles that let the whole suite run without a database, and the
reference implementation of the TradeStore commit contract: every write
happens under one lock, all checks run before the first mutation, so a
commit either lands completely or not at all.
"""

from __future__ import annotations

import threading
from dataclasses import replace
from typing import final

from swapbook.core.errors import ConcurrencyConflictError, NotFoundError, PersistenceError
from swapbook.core.result import Err, Ok
from swapbook.core.types import ById, ByName, Reference, UtcDatetime
from swapbook.trade.types import ReferenceEntity, ReferenceKind, Trade, TradeStatus

# ---------------------------------------------------------------------------
# Reference data
# ---------------------------------------------------------------------------

STATIC_REFERENCE_DATA: dict[ReferenceKind, tuple[str, ...]] = {
    ReferenceKind.TRADE_STATUS: tuple(s.value for s in TradeStatus),
    ReferenceKind.LEG_TYPE: ("Fixed", "Floating"),
    ReferenceKind.PAY_REC: ("Pay", "Receive"),
    ReferenceKind.SCHEDULE: ("Monthly", "Quarterly", "Semi-annually", "Annually", "1M", "3M", "6M", "12M"),
    ReferenceKind.BUSINESS_DAY_CONVENTION: ("Following", "Modified Following", "Preceding"),
    ReferenceKind.HOLIDAY_CALENDAR: ("NY", "LDN", "TARGET"),
    ReferenceKind.CURRENCY: ("USD", "EUR", "GBP", "JPY", "CHF"),
    ReferenceKind.INDEX: ("SOFR", "SONIA", "ESTR", "EURIBOR 3M"),
    ReferenceKind.TRADE_TYPE: ("Swap",),
    ReferenceKind.TRADE_SUB_TYPE: ("IR Swap", "Basis Swap"),
}


@final
class InMemoryReferenceData:
    """Reference data keyed by (kind, id), searchable by name within a kind."""

    def __init__(self) -> None:
        self._by_id: dict[tuple[ReferenceKind, int], ReferenceEntity] = {}
        self._next_id: dict[ReferenceKind, int] = {}

    def add(
        self,
        kind: ReferenceKind,
        name: str,
        *,
        id: int | None = None,  # noqa: A002
        active: bool = True,
        aliases: tuple[str, ...] = (),
    ) -> ReferenceEntity:
        """Register an entity. Ids default to 1, 2, ... per kind."""
        entity_id = id if id is not None else self._next_id.get(kind, 1)
        if (kind, entity_id) in self._by_id:
            raise TypeError(f"{kind.value} id {entity_id} already registered")
        entity = ReferenceEntity(kind=kind, id=entity_id, name=name, active=active, aliases=aliases)
        self._by_id[(kind, entity_id)] = entity
        self._next_id[kind] = max(self._next_id.get(kind, 1), entity_id + 1)
        return entity

    def add_user(
        self, full_name: str, login_id: str, *, id: int | None = None, active: bool = True,  # noqa: A002
    ) -> ReferenceEntity:
        """Register a user, findable by login id or by first name."""
        first_name = full_name.strip().split()[0]
        return self.add(
            ReferenceKind.USER, full_name, id=id, active=active, aliases=(login_id, first_name),
        )

    def seed_static(self) -> InMemoryReferenceData:
        """Add the static code lists (statuses, leg types, schedules, ...)."""
        for kind, names in STATIC_REFERENCE_DATA.items():
            for name in names:
                self.add(kind, name)
        return self

    def resolve(
        self, kind: ReferenceKind, reference: Reference,
    ) -> Ok[ReferenceEntity] | Err[NotFoundError]:
        match reference:
            case ById(id=entity_id):
                entity = self._by_id.get((kind, entity_id))
            case ByName(name=name):
                entity = next(
                    (e for (k, _), e in self._by_id.items() if k is kind and e.matches_name(name)),
                    None,
                )
        if entity is not None:
            return Ok(entity)
        field, value = reference.describe()
        return Err(NotFoundError(
            message=f"{kind.value} not found: {field}={value}",
            code="NOT_FOUND",
            timestamp=UtcDatetime.now(),
            source="memory_adapter.InMemoryReferenceData.resolve",
            entity=kind.value,
            field=field,
            value=value,
        ))


# ---------------------------------------------------------------------------
# Trade store
# ---------------------------------------------------------------------------


def _conflict(trade_id: int, expected: int | None, actual: int | None, operation: str) -> ConcurrencyConflictError:
    return ConcurrencyConflictError(
        message=(
            f"Active version of trade {trade_id} changed: "
            f"expected {expected}, found {actual}"
        ),
        code="CONCURRENCY_CONFLICT",
        timestamp=UtcDatetime.now(),
        source=f"memory_adapter.InMemoryTradeStore.{operation}",
        trade_id=trade_id,
        expected_version=expected,
        actual_version=actual,
    )


@final
class InMemoryTradeStore:
    """Versioned trade rows with an active-row index per trade_id."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._rows: dict[int, Trade] = {}
        self._active: dict[int, int] = {}  # trade_id -> row id
        self._next_row_id = 1
        self._next_leg_id = 1
        self._next_cashflow_id = 1

    # -- writes --

    def save(
        self, trade: Trade, *, supersedes: Trade | None = None,
    ) -> Ok[Trade] | Err[ConcurrencyConflictError | PersistenceError]:
        """Insert a new version; with supersedes, deactivate it in the same commit."""
        with self._lock:
            current = self._current(trade.trade_id)
            if supersedes is None:
                if current is not None:
                    return Err(_conflict(trade.trade_id, None, current.version, "save"))
            elif current is None or current.id != supersedes.id or current.version != supersedes.version:
                return Err(_conflict(
                    trade.trade_id, supersedes.version,
                    None if current is None else current.version, "save",
                ))

            stored = self._assign_ids(trade)
            if current is not None:
                self._rows[current.id] = replace(  # type: ignore[index]
                    current, active=False, deactivated_at=stored.created_at,
                )
            self._rows[stored.id] = stored  # type: ignore[index]
            if stored.active:
                self._active[stored.trade_id] = stored.id  # type: ignore[assignment]
            return Ok(stored)

    def update(
        self, trade: Trade,
    ) -> Ok[Trade] | Err[ConcurrencyConflictError | PersistenceError]:
        """Overwrite the active row in place (same row id, same version)."""
        with self._lock:
            current = self._current(trade.trade_id)
            if current is None or current.id != trade.id or current.version != trade.version:
                return Err(_conflict(
                    trade.trade_id, trade.version,
                    None if current is None else current.version, "update",
                ))
            self._rows[current.id] = trade  # type: ignore[index]
            if not trade.active:
                del self._active[trade.trade_id]
            return Ok(trade)

    def deactivate(
        self, trade_id: int, at: UtcDatetime,
    ) -> Ok[Trade] | Err[NotFoundError | PersistenceError]:
        with self._lock:
            current = self._current(trade_id)
            if current is None:
                return Err(NotFoundError(
                    message=f"Trade not found: {trade_id}",
                    code="NOT_FOUND",
                    timestamp=at,
                    source="memory_adapter.InMemoryTradeStore.deactivate",
                    entity="trade",
                    field="trade_id",
                    value=str(trade_id),
                ))
            deactivated = replace(current, active=False, deactivated_at=at)
            self._rows[current.id] = deactivated  # type: ignore[index]
            del self._active[trade_id]
            return Ok(deactivated)

    # -- reads --

    def find_active_by_trade_id(self, trade_id: int) -> Ok[Trade | None] | Err[PersistenceError]:
        with self._lock:
            return Ok(self._current(trade_id))

    def find_active_by_status(self, status: str) -> Ok[tuple[Trade, ...]] | Err[PersistenceError]:
        wanted = status.strip().lower()
        with self._lock:
            return Ok(tuple(
                self._rows[row_id]
                for row_id in self._active.values()
                if self._rows[row_id].status.name.lower() == wanted
            ))

    def count(self) -> Ok[int] | Err[PersistenceError]:
        """Number of stored rows, every version included."""
        with self._lock:
            return Ok(len(self._rows))

    def versions(self, trade_id: int) -> tuple[Trade, ...]:
        """Test-only helper: every row for trade_id, oldest version first."""
        with self._lock:
            rows = [t for t in self._rows.values() if t.trade_id == trade_id]
        return tuple(sorted(rows, key=lambda t: t.version))

    # -- internals --

    def _current(self, trade_id: int) -> Trade | None:
        row_id = self._active.get(trade_id)
        return None if row_id is None else self._rows[row_id]

    def _assign_ids(self, trade: Trade) -> Trade:
        row_id = self._next_row_id
        self._next_row_id += 1
        legs = []
        for leg in trade.legs:
            leg_id = self._next_leg_id
            self._next_leg_id += 1
            cashflows = []
            for cf in leg.cashflows:
                cashflows.append(replace(cf, id=self._next_cashflow_id, leg_id=leg_id))
                self._next_cashflow_id += 1
            legs.append(replace(leg, id=leg_id, trade_row_id=row_id, cashflows=tuple(cashflows)))
        return replace(trade, id=row_id, legs=tuple(legs))
