"""Exact decimal helpers for fixed-leg payment amounts.

The order of rounding steps is part of the contract: the percentage rate is
first converted to a decimal fraction rounded to RATE_SCALE places, and only
the final payment amount is rounded to MONEY_SCALE places. Both roundings
are ROUND_HALF_UP. Changing either step changes the generated amounts.

    percent_to_decimal(Decimal("3.5"))                               -> 0.0350000000
    percentage_of_notional(Decimal("10000000"), Decimal("0.035"), 3) -> 87500.00
"""

from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal, localcontext

from swapbook.core.money import SWAPBOOK_DECIMAL_CONTEXT

RATE_SCALE = 10
MONEY_SCALE = 2

_ONE_HUNDRED = Decimal("100")
_MONTHS_PER_YEAR = Decimal("12")
_RATE_QUANTUM = Decimal(1).scaleb(-RATE_SCALE)
_MONEY_QUANTUM = Decimal(1).scaleb(-MONEY_SCALE)


def percent_to_decimal(rate: Decimal) -> Decimal:
    """Convert a percentage (3.5) to a fraction (0.0350000000)."""
    with localcontext(SWAPBOOK_DECIMAL_CONTEXT):
        return (rate / _ONE_HUNDRED).quantize(_RATE_QUANTUM, rounding=ROUND_HALF_UP)


def _digits(value: Decimal) -> int:
    return len(value.as_tuple().digits)


def percentage_of_notional(notional: Decimal, rate_decimal: Decimal, months: int) -> Decimal:
    """Pro-rated payment: notional x rate x months / 12, rounded to cents."""
    month_count = Decimal(months)
    with localcontext(SWAPBOOK_DECIMAL_CONTEXT) as ctx:
        # Precision grows with the operands so the product and the
        # division to cents stay exact; only the final cent is rounded.
        ctx.prec = max(ctx.prec, _digits(notional) + _digits(rate_decimal) + _digits(month_count) + 2)
        numerator = notional * rate_decimal * month_count
        ctx.prec = max(
            ctx.prec, _digits(numerator) + max(numerator.adjusted(), 0) + MONEY_SCALE + 4,
        )
        cents, remainder = divmod(abs(numerator).scaleb(MONEY_SCALE), _MONTHS_PER_YEAR)
        if remainder * 2 >= _MONTHS_PER_YEAR:
            cents += 1
        return cents.copy_sign(numerator).scaleb(-MONEY_SCALE).quantize(_MONEY_QUANTUM)


def fixed_payment(notional: Decimal, rate_percent: Decimal, months: int) -> Decimal:
    """Payment for one fixed-leg period given the quoted percentage rate."""
    return percentage_of_notional(notional, percent_to_decimal(rate_percent), months)
