"""Trade aggregate, reference entities and lifecycle request types.

The aggregate is an owned tree without back-pointers:

    Trade (one row per version)
      legs: tuple[TradeLeg, TradeLeg]
        cashflows: tuple[Cashflow, ...]

Children carry their parent's identifier (leg.trade_row_id,
cashflow.leg_id) once the store has assigned one; before the first commit
those ids are None.

All types: @final @dataclass(frozen=True, slots=True). Status-only
transitions produce a new value with dataclasses.replace and the store
overwrites the row in place.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from enum import Enum
from typing import final

from swapbook.core.types import Reference, UtcDatetime

# ---------------------------------------------------------------------------
# Enums
# ---------------------------------------------------------------------------


class TradeStatus(Enum):
    """Statuses the lifecycle manager assigns. Domain data, not an exclusive state."""

    NEW = "NEW"
    AMENDED = "AMENDED"
    TERMINATED = "TERMINATED"
    CANCELLED = "CANCELLED"


class LegRateType(Enum):
    """Leg rate types the cashflow generator prices. Matched case-insensitively."""

    FIXED = "Fixed"
    FLOATING = "Floating"

    @staticmethod
    def from_name(name: str) -> LegRateType | None:
        for member in LegRateType:
            if member.value.lower() == name.strip().lower():
                return member
        return None


class Operation(Enum):
    """Privileged operations the core asks the authorizer about."""

    CREATE_TRADE = "CREATE_TRADE"
    AMEND_TRADE = "AMEND_TRADE"
    TERMINATE_TRADE = "TERMINATE_TRADE"
    CANCEL_TRADE = "CANCEL_TRADE"
    VIEW_TRADE = "VIEW_TRADE"


class ReferenceKind(Enum):
    """Every kind of reference datum a trade or leg points at."""

    BOOK = "book"
    COUNTERPARTY = "counterparty"
    USER = "user"
    TRADE_TYPE = "trade_type"
    TRADE_SUB_TYPE = "trade_sub_type"
    TRADE_STATUS = "trade_status"
    CURRENCY = "currency"
    LEG_TYPE = "leg_type"
    INDEX = "index"
    HOLIDAY_CALENDAR = "holiday_calendar"
    SCHEDULE = "schedule"
    BUSINESS_DAY_CONVENTION = "business_day_convention"
    PAY_REC = "pay_rec"


# Kinds whose entities carry a meaningful active flag.
ACTIVE_CHECKED_KINDS: frozenset[ReferenceKind] = frozenset({
    ReferenceKind.BOOK,
    ReferenceKind.COUNTERPARTY,
    ReferenceKind.USER,
})


# ---------------------------------------------------------------------------
# Reference entities
# ---------------------------------------------------------------------------


@final
@dataclass(frozen=True, slots=True)
class ReferenceEntity:
    """A resolved reference datum.

    name is the display value: "FX-BOOK-1", "USD", "Fixed", "Quarterly",
    "Pay". aliases hold extra names the entity answers to (a user's login id).
    """

    kind: ReferenceKind
    id: int
    name: str
    active: bool = True
    aliases: tuple[str, ...] = ()

    def matches_name(self, raw: str) -> bool:
        wanted = raw.strip().lower()
        return wanted == self.name.lower() or any(wanted == a.lower() for a in self.aliases)


# ---------------------------------------------------------------------------
# Requests
# ---------------------------------------------------------------------------


@final
@dataclass(frozen=True, slots=True)
class TradeLegRequest:
    """Caller-supplied terms for one leg. Reference fields are optional here;
    which ones are required is decided during resolution."""

    notional: Decimal
    rate: Decimal | None = None
    currency: Reference | None = None
    leg_type: Reference | None = None
    index: Reference | None = None
    holiday_calendar: Reference | None = None
    schedule: Reference | None = None
    payment_bdc: Reference | None = None
    fixing_bdc: Reference | None = None
    pay_rec: Reference | None = None


@final
@dataclass(frozen=True, slots=True)
class TradeRequest:
    """Caller-supplied terms for a create or amend."""

    trade_date: date
    start_date: date
    maturity_date: date
    execution_date: date
    legs: tuple[TradeLegRequest, ...]
    book: Reference | None = None
    counterparty: Reference | None = None
    trader: Reference | None = None
    inputter: Reference | None = None
    trade_type: Reference | None = None
    trade_sub_type: Reference | None = None
    trade_status: Reference | None = None
    trade_id: int | None = None
    uti_code: str | None = None


# ---------------------------------------------------------------------------
# Aggregate
# ---------------------------------------------------------------------------


@final
@dataclass(frozen=True, slots=True)
class Cashflow:
    """One scheduled payment of a leg. Immutable once generated."""

    value_date: date
    payment_value: Decimal
    rate: Decimal | None
    pay_rec: ReferenceEntity
    payment_type: ReferenceEntity | None
    payment_bdc: ReferenceEntity | None
    created_at: UtcDatetime
    active: bool = True
    id: int | None = None
    leg_id: int | None = None

    def __post_init__(self) -> None:
        if self.payment_value < 0:
            raise TypeError(f"Cashflow.payment_value must be >= 0, got {self.payment_value}")


@final
@dataclass(frozen=True, slots=True)
class TradeLeg:
    """One side of a trade version with its resolved reference data."""

    notional: Decimal
    rate: Decimal | None
    currency: ReferenceEntity
    leg_rate_type: ReferenceEntity
    pay_rec: ReferenceEntity
    created_at: UtcDatetime
    index: ReferenceEntity | None = None
    holiday_calendar: ReferenceEntity | None = None
    schedule: ReferenceEntity | None = None
    payment_bdc: ReferenceEntity | None = None
    fixing_bdc: ReferenceEntity | None = None
    cashflows: tuple[Cashflow, ...] = ()
    active: bool = True
    id: int | None = None
    trade_row_id: int | None = None

    @property
    def rate_type(self) -> LegRateType | None:
        return LegRateType.from_name(self.leg_rate_type.name)


@final
@dataclass(frozen=True, slots=True)
class Trade:
    """One version of a trade. trade_id is stable; id is the row id."""

    trade_id: int
    version: int
    trade_date: date
    start_date: date
    maturity_date: date
    execution_date: date
    status: ReferenceEntity
    book: ReferenceEntity
    counterparty: ReferenceEntity
    trader: ReferenceEntity
    inputter: ReferenceEntity
    trade_type: ReferenceEntity
    trade_sub_type: ReferenceEntity
    legs: tuple[TradeLeg, ...]
    created_at: UtcDatetime
    last_touch_at: UtcDatetime
    active: bool = True
    deactivated_at: UtcDatetime | None = None
    uti_code: str | None = None
    id: int | None = None

    def __post_init__(self) -> None:
        if self.version < 1:
            raise TypeError(f"Trade.version must be >= 1, got {self.version}")

    @property
    def status_name(self) -> str:
        return self.status.name
