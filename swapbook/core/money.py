"""Decimal context for all financial arithmetic.

SWAPBOOK_DECIMAL_CONTEXT: prec=28 with traps for InvalidOperation,
DivisionByZero and Overflow. Rounding to money and rate scales is always
explicit (see decimal_money.py).
"""

from __future__ import annotations

from decimal import ROUND_HALF_EVEN as _ROUND_HALF_EVEN
from decimal import (
    Context,
    DivisionByZero,
    InvalidOperation,
    Overflow,
)

SWAPBOOK_DECIMAL_CONTEXT = Context(
    prec=28,
    rounding=_ROUND_HALF_EVEN,
    Emin=-999999,
    Emax=999999,
    capitals=1,
    clamp=0,
    flags=[],
    traps=[InvalidOperation, DivisionByZero, Overflow],
)
