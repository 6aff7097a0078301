"""Hypothesis strategies and pytest fixtures for swapbook.

Fixtures build one fully wired lifecycle manager over in-memory adapters:
static reference data, a few books, counterparties and users (active and
inactive), a privilege directory and a clock pinned to 2025-10-11.
"""

from __future__ import annotations

from datetime import UTC, date, datetime
from decimal import Decimal

import pytest
from hypothesis import HealthCheck, settings
from hypothesis import strategies as st
from hypothesis.strategies import SearchStrategy

from swapbook.core.types import ById, ByName
from swapbook.infra.clock import FixedClock
from swapbook.infra.memory_adapter import InMemoryReferenceData, InMemoryTradeStore
from swapbook.trade.authorization import PrivilegeAuthorizer, UserProfile, UserType
from swapbook.trade.lifecycle import TradeLifecycleManager
from swapbook.trade.types import ReferenceKind, TradeLegRequest, TradeRequest

# ---------------------------------------------------------------------------
# Hypothesis global settings
# ---------------------------------------------------------------------------

settings.register_profile(
    "ci",
    max_examples=200,
    suppress_health_check=[HealthCheck.too_slow, HealthCheck.function_scoped_fixture],
    deadline=None,
)
settings.register_profile(
    "dev",
    max_examples=50,
    suppress_health_check=[HealthCheck.too_slow, HealthCheck.function_scoped_fixture],
    deadline=None,
)
settings.load_profile("dev")


# ===================================================================
# STRATEGIES
# ===================================================================


def positive_decimals(
    min_value: str = "0.01",
    max_value: str = "1000000000",
    places: int = 2,
) -> SearchStrategy[Decimal]:
    """Strictly positive Decimal values."""
    return st.decimals(
        min_value=Decimal(min_value),
        max_value=Decimal(max_value),
        places=places,
        allow_nan=False,
        allow_infinity=False,
    ).filter(lambda d: d > 0)


def business_dates(min_year: int = 2000, max_year: int = 2040) -> SearchStrategy[date]:
    return st.dates(min_value=date(min_year, 1, 1), max_value=date(max_year, 12, 31))


# ===================================================================
# REFERENCE DATA
# ===================================================================

TODAY = date(2025, 10, 11)
NOW = datetime(2025, 10, 11, 9, 30, tzinfo=UTC)

TRADER_ID = 1
SUPPORT_ID = 2
DORMANT_ID = 3
ADMIN_ID = 4
SALES_ID = 5
MIDDLE_OFFICE_ID = 6


@pytest.fixture
def ref_data() -> InMemoryReferenceData:
    ref = InMemoryReferenceData().seed_static()
    ref.add(ReferenceKind.BOOK, "FX-BOOK-1", id=1)
    ref.add(ReferenceKind.BOOK, "OLD-BOOK", id=2, active=False)
    ref.add(ReferenceKind.COUNTERPARTY, "BigBank", id=1)
    ref.add(ReferenceKind.COUNTERPARTY, "GoneBank", id=2, active=False)
    ref.add_user("Simon King", "simon", id=TRADER_ID)
    ref.add_user("Ashley Lee", "ashley", id=SUPPORT_ID)
    ref.add_user("Dana Dormant", "dana", id=DORMANT_ID, active=False)
    ref.add_user("Ada Admin", "ada", id=ADMIN_ID)
    ref.add_user("Sam Sales", "sam", id=SALES_ID)
    ref.add_user("Mo Office", "mo", id=MIDDLE_OFFICE_ID)
    return ref


@pytest.fixture
def authorizer() -> PrivilegeAuthorizer:
    auth = PrivilegeAuthorizer()
    auth.register(UserProfile(user_id=TRADER_ID, user_type=UserType.TRADER))
    auth.register(UserProfile(user_id=SUPPORT_ID, user_type=UserType.SUPPORT))
    auth.register(UserProfile(user_id=DORMANT_ID, user_type=UserType.TRADER, active=False))
    auth.register(UserProfile(user_id=ADMIN_ID, user_type=UserType.ADMIN))
    auth.register(UserProfile(user_id=SALES_ID, user_type=UserType.SALES))
    auth.register(UserProfile(user_id=MIDDLE_OFFICE_ID, user_type=UserType.MIDDLE_OFFICE))
    return auth


@pytest.fixture
def clock() -> FixedClock:
    return FixedClock(instant=NOW)


@pytest.fixture
def store() -> InMemoryTradeStore:
    return InMemoryTradeStore()


@pytest.fixture
def manager(
    ref_data: InMemoryReferenceData,
    store: InMemoryTradeStore,
    authorizer: PrivilegeAuthorizer,
    clock: FixedClock,
) -> TradeLifecycleManager:
    return TradeLifecycleManager(ref_data, store, authorizer, clock=clock)


# ===================================================================
# REQUESTS
# ===================================================================


@pytest.fixture
def fixed_leg() -> TradeLegRequest:
    """10,000,000 paying 3.5% quarterly in USD."""
    return TradeLegRequest(
        notional=Decimal("10000000"),
        rate=Decimal("3.5"),
        currency=ByName(name="USD"),
        leg_type=ByName(name="Fixed"),
        schedule=ByName(name="Quarterly"),
        holiday_calendar=ByName(name="NY"),
        payment_bdc=ByName(name="Modified Following"),
        pay_rec=ByName(name="Pay"),
    )


@pytest.fixture
def floating_leg() -> TradeLegRequest:
    """10,000,000 receiving SOFR quarterly in USD."""
    return TradeLegRequest(
        notional=Decimal("10000000"),
        currency=ById(id=1),
        leg_type=ByName(name="floating"),
        index=ByName(name="SOFR"),
        schedule=ByName(name="3M"),
        fixing_bdc=ByName(name="Following"),
        pay_rec=ByName(name="Receive"),
    )


@pytest.fixture
def trade_request(fixed_leg: TradeLegRequest, floating_leg: TradeLegRequest) -> TradeRequest:
    """A valid fixed/floating swap booked today, maturing 2026-12-03."""
    return TradeRequest(
        trade_date=TODAY,
        start_date=TODAY,
        maturity_date=date(2026, 12, 3),
        execution_date=TODAY,
        legs=(fixed_leg, floating_leg),
        book=ByName(name="FX-BOOK-1"),
        counterparty=ById(id=1),
        trader=ByName(name="simon"),
        inputter=ByName(name="Ada"),
        trade_type=ByName(name="Swap"),
        trade_sub_type=ByName(name="IR Swap"),
    )
