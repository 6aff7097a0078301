"""Trade business rules and cross-leg consistency rules.

Both validators build a fresh violation list per call and report every
violation they find. Neither keeps state between calls.
"""

from __future__ import annotations

from collections.abc import Sequence
from datetime import date, timedelta

from swapbook.core.errors import FieldViolation, ValidationError, validation_error
from swapbook.core.result import Err, Ok
from swapbook.trade.types import LegRateType, TradeLeg, TradeRequest

_SOURCE = "trade.validation"

REQUIRED_LEG_COUNT = 2
DEFAULT_MAX_TRADE_DATE_AGE_DAYS = 30


# ---------------------------------------------------------------------------
# Trade-level date rules
# ---------------------------------------------------------------------------


def validate_trade_dates(
    request: TradeRequest,
    today: date,
    max_trade_date_age_days: int = DEFAULT_MAX_TRADE_DATE_AGE_DAYS,
) -> Ok[None] | Err[ValidationError]:
    """Date ordering rules for a create or amend request.

    - maturity date not before start date
    - maturity date not before trade date
    - start date not before trade date
    - trade date at most max_trade_date_age_days before today
    - execution date equal to trade date
    """
    violations: list[FieldViolation] = []

    if request.maturity_date < request.start_date:
        violations.append(FieldViolation(
            path="trade.maturity_date",
            constraint="Maturity date cannot be before start date",
            actual_value=request.maturity_date.isoformat(),
        ))
    if request.maturity_date < request.trade_date:
        violations.append(FieldViolation(
            path="trade.maturity_date",
            constraint="Maturity date cannot be before trade date",
            actual_value=request.maturity_date.isoformat(),
        ))
    if request.start_date < request.trade_date:
        violations.append(FieldViolation(
            path="trade.start_date",
            constraint="Start date cannot be before trade date",
            actual_value=request.start_date.isoformat(),
        ))
    if request.trade_date < today - timedelta(days=max_trade_date_age_days):
        violations.append(FieldViolation(
            path="trade.trade_date",
            constraint=f"Trade date cannot be more than {max_trade_date_age_days} days in the past",
            actual_value=request.trade_date.isoformat(),
        ))
    if request.execution_date != request.trade_date:
        violations.append(FieldViolation(
            path="trade.execution_date",
            constraint="Execution date must be equal to trade date",
            actual_value=request.execution_date.isoformat(),
        ))

    if violations:
        return Err(validation_error(
            f"{_SOURCE}.validate_trade_dates", "TRADE_DATE_RULES", violations,
            message="Trade business rules failed",
        ))
    return Ok(None)


# ---------------------------------------------------------------------------
# Cross-leg rules
# ---------------------------------------------------------------------------


def _leg_violations(position: int, leg: TradeLeg) -> list[FieldViolation]:
    violations: list[FieldViolation] = []
    if leg.notional <= 0:
        violations.append(FieldViolation(
            path=f"legs[{position}].notional",
            constraint="Notional must be positive",
            actual_value=str(leg.notional),
        ))
    match leg.rate_type:
        case LegRateType.FLOATING:
            if leg.index is None:
                violations.append(FieldViolation(
                    path=f"legs[{position}].index",
                    constraint="Floating legs must have an index specified",
                    actual_value="",
                ))
        case LegRateType.FIXED:
            if leg.rate is None or leg.rate <= 0:
                violations.append(FieldViolation(
                    path=f"legs[{position}].rate",
                    constraint="Fixed legs must have a valid rate",
                    actual_value="" if leg.rate is None else str(leg.rate),
                ))
        case None:
            pass
    return violations


def validate_leg_consistency(legs: Sequence[TradeLeg]) -> Ok[None] | Err[ValidationError]:
    """Structural and business rules across a trade's resolved legs.

    - exactly two legs
    - the two legs have different pay/receive flags (compared by the
      resolved pay/receive entity id)
    - a Floating leg has an index; a Fixed leg has a rate > 0
    - every notional is > 0
    """
    violations: list[FieldViolation] = []

    if len(legs) != REQUIRED_LEG_COUNT:
        violations.append(FieldViolation(
            path="legs",
            constraint=f"Trade must have exactly {REQUIRED_LEG_COUNT} legs",
            actual_value=str(len(legs)),
        ))

    for position, leg in enumerate(legs):
        violations.extend(_leg_violations(position, leg))

    if len(legs) == REQUIRED_LEG_COUNT and legs[0].pay_rec.id == legs[1].pay_rec.id:
        violations.append(FieldViolation(
            path="legs.pay_rec",
            constraint="Legs must have opposite pay/receive flags",
            actual_value=legs[0].pay_rec.name,
        ))

    if violations:
        return Err(validation_error(
            f"{_SOURCE}.validate_leg_consistency", "CROSS_LEG_RULES", violations,
            message="Trade leg consistency rules failed",
        ))
    return Ok(None)
