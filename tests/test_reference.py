"""Tests for swapbook.trade.reference — resolving request references."""

from __future__ import annotations

from dataclasses import replace
from datetime import UTC, datetime

import pytest

from swapbook.core.errors import InactiveReferenceError, NotFoundError, ValidationError
from swapbook.core.result import Err, unwrap
from swapbook.core.types import ById, ByName, UtcDatetime
from swapbook.infra.memory_adapter import InMemoryReferenceData
from swapbook.trade.reference import (
    missing_references,
    resolve_leg,
    resolve_status,
    resolve_trade_references,
)
from swapbook.trade.types import TradeLegRequest, TradeRequest, TradeStatus

_CREATED = UtcDatetime(value=datetime(2025, 10, 11, tzinfo=UTC))


class TestMissingReferences:
    def test_complete_request_has_none(self, trade_request: TradeRequest) -> None:
        assert missing_references(trade_request) == ()

    def test_every_missing_field_listed(self, trade_request: TradeRequest) -> None:
        bare_leg = TradeLegRequest(notional=trade_request.legs[0].notional)
        req = replace(trade_request, book=None, inputter=None, legs=(bare_leg,))
        messages = [v.constraint for v in missing_references(req)]
        assert messages == [
            "Book id or name is required",
            "InputterUser id or name is required",
            "Currency id or name is required",
            "LegType id or name is required",
            "PayRec id or name is required",
        ]


class TestResolveTradeReferences:
    def test_resolves_by_id_and_name(
        self, ref_data: InMemoryReferenceData, trade_request: TradeRequest,
    ) -> None:
        refs = unwrap(resolve_trade_references(ref_data, trade_request))
        assert refs.book.name == "FX-BOOK-1"
        assert refs.counterparty.name == "BigBank"
        assert refs.trader.name == "Simon King"
        assert refs.inputter.name == "Ada Admin"
        assert refs.status is None

    def test_requested_status_is_resolved(
        self, ref_data: InMemoryReferenceData, trade_request: TradeRequest,
    ) -> None:
        req = replace(trade_request, trade_status=ByName(name="terminated"))
        refs = unwrap(resolve_trade_references(ref_data, req))
        assert refs.status is not None and refs.status.name == "TERMINATED"

    def test_unknown_book_is_not_found(
        self, ref_data: InMemoryReferenceData, trade_request: TradeRequest,
    ) -> None:
        result = resolve_trade_references(ref_data, replace(trade_request, book=ByName(name="NOPE")))
        assert isinstance(result, Err)
        assert isinstance(result.error, NotFoundError)
        assert (result.error.entity, result.error.field, result.error.value) == ("book", "name", "NOPE")

    @pytest.mark.parametrize(("field", "reference", "message"), [
        ("book", ById(id=2), "Book must be active to populate a Trade"),
        ("counterparty", ByName(name="GoneBank"), "Counterparty must be active to populate a Trade"),
        ("trader", ByName(name="dana"), "TraderUser must be active to populate a Trade"),
        ("inputter", ById(id=3), "InputterUser must be active to populate a Trade"),
    ])
    def test_inactive_references(
        self,
        ref_data: InMemoryReferenceData,
        trade_request: TradeRequest,
        field: str,
        reference: ById | ByName,
        message: str,
    ) -> None:
        result = resolve_trade_references(ref_data, replace(trade_request, **{field: reference}))
        assert isinstance(result, Err)
        assert isinstance(result.error, InactiveReferenceError)
        assert result.error.message == message

    def test_missing_required_is_validation_error(
        self, ref_data: InMemoryReferenceData, trade_request: TradeRequest,
    ) -> None:
        result = resolve_trade_references(ref_data, replace(trade_request, trade_type=None))
        assert isinstance(result, Err)
        assert isinstance(result.error, ValidationError)
        assert result.error.messages == ("TradeType id or name is required",)


class TestResolveStatus:
    def test_each_lifecycle_status_exists(self, ref_data: InMemoryReferenceData) -> None:
        for status in TradeStatus:
            assert unwrap(resolve_status(ref_data, status)).name == status.value

    def test_missing_status_row(self) -> None:
        result = resolve_status(InMemoryReferenceData(), TradeStatus.AMENDED)
        assert isinstance(result, Err)
        assert result.error.message.startswith("AMENDED status not found")


class TestResolveLeg:
    def test_fixed_leg(self, ref_data: InMemoryReferenceData, fixed_leg: TradeLegRequest) -> None:
        leg = unwrap(resolve_leg(ref_data, fixed_leg, 0, _CREATED))
        assert leg.currency.name == "USD"
        assert leg.leg_rate_type.name == "Fixed"
        assert leg.pay_rec.name == "Pay"
        assert leg.schedule is not None and leg.schedule.name == "Quarterly"
        assert leg.index is None
        assert leg.cashflows == ()
        assert leg.created_at == _CREATED

    def test_optional_reference_not_found_names_the_leg(
        self, ref_data: InMemoryReferenceData, floating_leg: TradeLegRequest,
    ) -> None:
        leg = replace(floating_leg, index=ByName(name="LIBOR"))
        result = resolve_leg(ref_data, leg, 1, _CREATED)
        assert isinstance(result, Err)
        assert isinstance(result.error, NotFoundError)
        assert result.error.message.startswith("legs[1].index:")

    def test_missing_required(self, ref_data: InMemoryReferenceData, fixed_leg: TradeLegRequest) -> None:
        result = resolve_leg(ref_data, replace(fixed_leg, pay_rec=None), 0, _CREATED)
        assert isinstance(result, Err)
        assert result.error.messages == ("PayRec id or name is required",)  # type: ignore[union-attr]
