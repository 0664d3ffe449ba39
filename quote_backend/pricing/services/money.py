# pricing/services/money.py

"""
PATH: pricing/services/money.py

MONEY ARITHMETIC (LEAF)

Purpose:
- One decimal context for every pricing calculation.
- Safe conversion of request values into Decimal.
- 2dp quantization used as the LAST step of a calculation path.

Rules:
- 20 significant digits, banker's rounding (ROUND_HALF_EVEN).
- Floats are converted via str() so binary artifacts never enter the math.
- MONEY_CONTEXT is built once at import and never mutated; use it through
  localcontext() so concurrent requests cannot interfere.
"""

from __future__ import annotations

import math
from decimal import (
    Context,
    Decimal,
    InvalidOperation,
    Overflow,
    DivisionByZero,
    ROUND_DOWN,
    ROUND_HALF_EVEN,
    ROUND_UP,
    localcontext,
)

MONEY_PRECISION = 20
MONEY_QUANT = Decimal("0.01")
ZERO = Decimal("0")

MONEY_CONTEXT = Context(
    prec=MONEY_PRECISION,
    rounding=ROUND_HALF_EVEN,
    Emin=-999999,
    Emax=999999,
    traps=[InvalidOperation, DivisionByZero, Overflow],
)

# tax rounding policies ('floor' rounds toward zero, 'ceil' away from zero)
ROUNDING_METHODS = {
    "round": ROUND_HALF_EVEN,
    "floor": ROUND_DOWN,
    "ceil": ROUND_UP,
}


def money_context():
    """Context manager applying MONEY_CONTEXT to the current thread."""
    return localcontext(MONEY_CONTEXT)


def to_decimal(value) -> Decimal:
    """
    Convert a request value to Decimal.

    Raises InvalidOperation / TypeError for malformed input; callers decide
    whether that is fatal.
    """
    if isinstance(value, bool) or value is None:
        raise TypeError(f"Not a numeric value: {value!r}")
    if isinstance(value, Decimal):
        d = value
    else:
        d = Decimal(str(value).strip())
    if not d.is_finite():
        raise InvalidOperation(f"Non-finite value: {value!r}")
    return d


def quantize_money(value: Decimal, *, rounding: str = ROUND_HALF_EVEN) -> Decimal:
    value = Decimal(value)
    # 2dp result needs integer digits + 2; never narrower than MONEY_PRECISION
    context = MONEY_CONTEXT.copy()
    context.prec = max(MONEY_PRECISION, value.adjusted() + 3)
    return value.quantize(MONEY_QUANT, rounding=rounding, context=context)


def round_currency(amount) -> Decimal:
    """Round a standalone amount to cents with banker's rounding."""
    return quantize_money(to_decimal(amount))


def safe_float(value) -> float:
    """
    Last-resort conversion for fallback paths. Never raises.
    """
    try:
        return float(value)
    except (TypeError, ValueError):
        return 0.0


def float_to_money(value: float) -> Decimal:
    """
    Convert a fallback float result to a 2dp Decimal.
    """
    if not math.isfinite(value):
        return Decimal("0.00")
    return Decimal(f"{value:.2f}")
