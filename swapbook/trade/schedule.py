"""Cashflow schedule generation for a single trade leg.

1. The leg's calculation schedule label gives the payment interval in months
   (parse_schedule_months); no schedule means quarterly.
2. Payment dates start one interval after the start date and step by the
   interval, end-of-month clamped, while they do not pass the maturity date
   (payment_dates).
3. Fixed legs pay notional x rate% x months/12 per period (decimal_money);
   Floating legs carry a zero placeholder until rate fixing.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from datetime import date
from decimal import Decimal

from dateutil.relativedelta import relativedelta

from swapbook.core.decimal_money import fixed_payment
from swapbook.core.errors import FieldViolation, ValidationError, validation_error
from swapbook.core.result import Err, Ok
from swapbook.core.types import UtcDatetime
from swapbook.trade.types import Cashflow, LegRateType, TradeLeg

logger = logging.getLogger(__name__)

_SOURCE = "trade.schedule"

DEFAULT_INTERVAL_MONTHS = 3

_ZERO = Decimal("0.00")

_NAMED_SCHEDULES: dict[str, int] = {
    "monthly": 1,
    "quarterly": 3,
    "semi-annually": 6,
    "semiannually": 6,
    "half-yearly": 6,
    "annually": 12,
    "yearly": 12,
}

_SUPPORTED = "Monthly, Quarterly, Semi-annually, Annually, or 1M, 3M, 6M, 12M"


def _format_violation(label: str, path: str) -> FieldViolation:
    return FieldViolation(
        path=path,
        constraint=f"Invalid schedule format: {label}. Supported formats: {_SUPPORTED}",
        actual_value=label,
    )


def _format_error(label: str) -> Err[ValidationError]:
    return Err(validation_error(
        f"{_SOURCE}.parse_schedule_months",
        "INVALID_SCHEDULE",
        (_format_violation(label, "leg.schedule"),),
        message=f"Invalid schedule format: {label}",
    ))


def parse_schedule_months(label: str | None) -> Ok[int] | Err[ValidationError]:
    """Payment interval in months for a schedule label.

    >>> parse_schedule_months("Quarterly")
    Ok(value=3)
    >>> parse_schedule_months("6M")
    Ok(value=6)
    """
    if label is None or not label.strip():
        return Ok(DEFAULT_INTERVAL_MONTHS)

    text = label.strip()
    named = _NAMED_SCHEDULES.get(text.lower())
    if named is not None:
        return Ok(named)

    if text[-1] in "Mm":
        digits = text[:-1]
        if digits.isascii() and digits.isdigit() and int(digits) > 0:
            return Ok(int(digits))
    return _format_error(label)


def payment_dates(start_date: date, maturity_date: date, interval_months: int) -> tuple[date, ...]:
    """Every step start + n, start + 2n, ... that does not pass maturity.

    Steps are taken one at a time from the previous date, so a month-end
    clamp carries forward (Jan 31 -> Feb 28 -> Mar 28).
    """
    if interval_months <= 0:
        raise TypeError(f"interval_months must be > 0, got {interval_months}")
    step = relativedelta(months=interval_months)
    dates: list[date] = []
    current = start_date + step
    while current <= maturity_date:
        dates.append(current)
        current = current + step
    return tuple(dates)


def _period_value(leg: TradeLeg, interval_months: int) -> Ok[Decimal] | Err[ValidationError]:
    """Payment per period. Floating legs and unknown leg types pay zero."""
    match leg.rate_type:
        case LegRateType.FIXED:
            if leg.rate is None:
                return Err(validation_error(
                    f"{_SOURCE}.generate_cashflows", "MISSING_RATE",
                    (FieldViolation(
                        path="leg.rate",
                        constraint="Fixed legs must have a valid rate",
                        actual_value="",
                    ),),
                ))
            return Ok(fixed_payment(leg.notional, leg.rate, interval_months))
        case LegRateType.FLOATING | None:
            return Ok(_ZERO)


def _schedule_label(leg: TradeLeg) -> str | None:
    return leg.schedule.name if leg.schedule is not None else None


def parse_leg_schedules(legs: Sequence[TradeLeg]) -> Ok[tuple[int, ...]] | Err[ValidationError]:
    """Payment interval of every leg; one error listing each bad label."""
    intervals: list[int] = []
    violations: list[FieldViolation] = []
    for i, leg in enumerate(legs):
        label = _schedule_label(leg)
        match parse_schedule_months(label):
            case Ok(months):
                intervals.append(months)
            case Err(_):
                violations.append(_format_violation(label or "", f"legs[{i}].schedule"))
    if violations:
        return Err(validation_error(
            f"{_SOURCE}.parse_leg_schedules",
            "INVALID_SCHEDULE",
            violations,
            message="Invalid schedule format",
        ))
    return Ok(tuple(intervals))


def generate_cashflows(
    leg: TradeLeg,
    start_date: date,
    maturity_date: date,
    created_at: UtcDatetime | None = None,
) -> Ok[tuple[Cashflow, ...]] | Err[ValidationError]:
    """Ordered cashflows for one leg between start and maturity.

    The leg is read, never modified; attach the result with
    dataclasses.replace(leg, cashflows=...).
    """
    schedule_label = _schedule_label(leg)
    match parse_schedule_months(schedule_label):
        case Err(e):
            return Err(e)
        case Ok(interval):
            pass

    match _period_value(leg, interval):
        case Err(e):
            return Err(e)
        case Ok(payment_value):
            pass

    stamp = created_at if created_at is not None else UtcDatetime.now()
    dates = payment_dates(start_date, maturity_date, interval)
    cashflows = tuple(
        Cashflow(
            value_date=d,
            payment_value=payment_value,
            rate=leg.rate,
            pay_rec=leg.pay_rec,
            payment_type=leg.leg_rate_type,
            payment_bdc=leg.payment_bdc,
            created_at=stamp,
            leg_id=leg.id,
        )
        for d in dates
    )
    logger.info(
        "Generated %d cashflows for leg %s from %s to %s",
        len(cashflows), leg.id, start_date, maturity_date,
    )
    return Ok(cashflows)
