"""Tests for swapbook.infra.memory_adapter — in-memory test doubles."""

from __future__ import annotations

import threading
from dataclasses import replace
from datetime import UTC, date, datetime
from decimal import Decimal

import pytest

from swapbook.core.errors import ConcurrencyConflictError, NotFoundError
from swapbook.core.result import Err, Ok, unwrap
from swapbook.core.types import ById, ByName, UtcDatetime
from swapbook.infra.memory_adapter import InMemoryReferenceData, InMemoryTradeStore
from swapbook.infra.protocols import ReferenceDataResolver, TradeStore
from swapbook.trade.types import (
    Cashflow,
    ReferenceEntity,
    ReferenceKind,
    Trade,
    TradeLeg,
)

_T0 = UtcDatetime(value=datetime(2025, 10, 11, 9, 0, tzinfo=UTC))
_T1 = UtcDatetime(value=datetime(2025, 10, 11, 10, 0, tzinfo=UTC))


def _ref(kind: ReferenceKind, name: str, id: int = 1) -> ReferenceEntity:  # noqa: A002
    return ReferenceEntity(kind=kind, id=id, name=name)


def _leg(pay_rec: str, pay_rec_id: int) -> TradeLeg:
    pr = _ref(ReferenceKind.PAY_REC, pay_rec, pay_rec_id)
    cf = Cashflow(
        value_date=date(2026, 1, 11), payment_value=Decimal("87500.00"), rate=Decimal("3.5"),
        pay_rec=pr, payment_type=None, payment_bdc=None, created_at=_T0,
    )
    return TradeLeg(
        notional=Decimal("10000000"), rate=Decimal("3.5"),
        currency=_ref(ReferenceKind.CURRENCY, "USD"),
        leg_rate_type=_ref(ReferenceKind.LEG_TYPE, "Fixed"),
        pay_rec=pr, created_at=_T0, cashflows=(cf, cf),
    )


def _trade(trade_id: int = 10000, version: int = 1, status: str = "NEW") -> Trade:
    return Trade(
        trade_id=trade_id,
        version=version,
        trade_date=date(2025, 10, 11),
        start_date=date(2025, 10, 11),
        maturity_date=date(2026, 12, 3),
        execution_date=date(2025, 10, 11),
        status=_ref(ReferenceKind.TRADE_STATUS, status),
        book=_ref(ReferenceKind.BOOK, "FX-BOOK-1"),
        counterparty=_ref(ReferenceKind.COUNTERPARTY, "BigBank"),
        trader=_ref(ReferenceKind.USER, "Simon King"),
        inputter=_ref(ReferenceKind.USER, "Simon King"),
        trade_type=_ref(ReferenceKind.TRADE_TYPE, "Swap"),
        trade_sub_type=_ref(ReferenceKind.TRADE_SUB_TYPE, "IR Swap"),
        legs=(_leg("Pay", 1), _leg("Receive", 2)),
        created_at=_T0,
        last_touch_at=_T0,
    )


# ---------------------------------------------------------------------------
# InMemoryReferenceData
# ---------------------------------------------------------------------------


class TestInMemoryReferenceData:
    def test_satisfies_protocol(self) -> None:
        assert isinstance(InMemoryReferenceData(), ReferenceDataResolver)

    def test_ids_assigned_per_kind(self) -> None:
        ref = InMemoryReferenceData()
        assert ref.add(ReferenceKind.BOOK, "A").id == 1
        assert ref.add(ReferenceKind.BOOK, "B").id == 2
        assert ref.add(ReferenceKind.CURRENCY, "USD").id == 1

    def test_duplicate_id_rejected(self) -> None:
        ref = InMemoryReferenceData()
        ref.add(ReferenceKind.BOOK, "A", id=5)
        with pytest.raises(TypeError):
            ref.add(ReferenceKind.BOOK, "B", id=5)

    def test_name_lookup_is_case_insensitive(self) -> None:
        ref = InMemoryReferenceData().seed_static()
        assert unwrap(ref.resolve(ReferenceKind.LEG_TYPE, ByName(name="FIXED"))).name == "Fixed"

    def test_lookup_is_scoped_to_kind(self) -> None:
        ref = InMemoryReferenceData()
        ref.add(ReferenceKind.BOOK, "USD")
        assert isinstance(ref.resolve(ReferenceKind.CURRENCY, ByName(name="USD")), Err)

    def test_user_found_by_login_or_first_name(self) -> None:
        ref = InMemoryReferenceData()
        user = ref.add_user("Simon King", "sking")
        assert ref.resolve(ReferenceKind.USER, ByName(name="sking")) == Ok(user)
        assert ref.resolve(ReferenceKind.USER, ByName(name="simon")) == Ok(user)
        assert ref.resolve(ReferenceKind.USER, ById(id=user.id)) == Ok(user)

    def test_inactive_entities_are_returned(self) -> None:
        ref = InMemoryReferenceData()
        ref.add(ReferenceKind.BOOK, "OLD", active=False)
        assert not unwrap(ref.resolve(ReferenceKind.BOOK, ByName(name="old"))).active

    def test_not_found(self) -> None:
        match InMemoryReferenceData().resolve(ReferenceKind.INDEX, ById(id=9)):
            case Err(NotFoundError() as e):
                assert (e.entity, e.field, e.value) == ("index", "id", "9")
            case other:
                pytest.fail(f"expected NotFoundError, got {other}")


# ---------------------------------------------------------------------------
# InMemoryTradeStore
# ---------------------------------------------------------------------------


class TestInMemoryTradeStore:
    def test_satisfies_protocol(self) -> None:
        assert isinstance(InMemoryTradeStore(), TradeStore)

    def test_save_assigns_row_ids_down_the_tree(self) -> None:
        stored = unwrap(InMemoryTradeStore().save(_trade()))
        assert stored.id == 1
        assert [leg.id for leg in stored.legs] == [1, 2]
        assert all(leg.trade_row_id == stored.id for leg in stored.legs)
        assert [cf.id for leg in stored.legs for cf in leg.cashflows] == [1, 2, 3, 4]
        for leg in stored.legs:
            assert all(cf.leg_id == leg.id for cf in leg.cashflows)

    def test_second_active_version_rejected(self) -> None:
        store = InMemoryTradeStore()
        unwrap(store.save(_trade()))
        result = store.save(_trade())
        assert isinstance(result, Err)
        assert isinstance(result.error, ConcurrencyConflictError)
        assert unwrap(store.count()) == 1

    def test_supersede_swaps_active_row(self) -> None:
        store = InMemoryTradeStore()
        v1 = unwrap(store.save(_trade()))
        v2 = unwrap(store.save(replace(_trade(version=2), created_at=_T1), supersedes=v1))
        assert unwrap(store.find_active_by_trade_id(10000)) == v2
        old, new = store.versions(10000)
        assert not old.active and old.deactivated_at == _T1
        assert new.active and new.version == 2
        assert old.legs == v1.legs

    def test_stale_supersede_is_conflict_and_writes_nothing(self) -> None:
        store = InMemoryTradeStore()
        v1 = unwrap(store.save(_trade()))
        unwrap(store.save(_trade(version=2), supersedes=v1))
        result = store.save(_trade(version=2), supersedes=v1)
        assert isinstance(result, Err)
        assert result.error.expected_version == 1  # type: ignore[union-attr]
        assert result.error.actual_version == 2  # type: ignore[union-attr]
        assert unwrap(store.count()) == 2

    def test_update_in_place(self) -> None:
        store = InMemoryTradeStore()
        v1 = unwrap(store.save(_trade()))
        cancelled = replace(v1, status=_ref(ReferenceKind.TRADE_STATUS, "CANCELLED", 4))
        assert unwrap(store.update(cancelled)) == cancelled
        assert unwrap(store.count()) == 1
        assert unwrap(store.find_active_by_trade_id(10000)) == cancelled

    def test_update_of_superseded_row_is_conflict(self) -> None:
        store = InMemoryTradeStore()
        v1 = unwrap(store.save(_trade()))
        unwrap(store.save(_trade(version=2), supersedes=v1))
        assert isinstance(store.update(v1), Err)

    def test_deactivate(self) -> None:
        store = InMemoryTradeStore()
        unwrap(store.save(_trade()))
        gone = unwrap(store.deactivate(10000, _T1))
        assert not gone.active and gone.deactivated_at == _T1
        assert unwrap(store.find_active_by_trade_id(10000)) is None
        assert isinstance(store.deactivate(10000, _T1), Err)

    def test_find_active_by_status(self) -> None:
        store = InMemoryTradeStore()
        unwrap(store.save(_trade(10000)))
        unwrap(store.save(_trade(10001, status="CANCELLED")))
        found = unwrap(store.find_active_by_status("new"))
        assert [t.trade_id for t in found] == [10000]

    def test_concurrent_amends_commit_exactly_once(self) -> None:
        store = InMemoryTradeStore()
        v1 = unwrap(store.save(_trade()))
        results: list[object] = []
        barrier = threading.Barrier(8)

        def amend() -> None:
            barrier.wait()
            results.append(store.save(_trade(version=2), supersedes=v1))

        threads = [threading.Thread(target=amend) for _ in range(8)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        assert sum(isinstance(r, Ok) for r in results) == 1
        assert sum(t.active for t in store.versions(10000)) == 1
