# pricing/services/tax.py

"""
PATH: pricing/services/tax.py

TAX CALCULATOR

Rules:
- rate is a FRACTION in [0, 1] (0.10 == 10%), not a percentage.
- rounding_method: "floor" (toward zero), "ceil" (away from zero),
  anything else -> banker's rounding.
- inclusive=True: the amount already contains tax, nothing is added.
- Never raises.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from decimal import Decimal, ROUND_HALF_EVEN
from typing import Optional

from pricing.services.money import (
    ROUNDING_METHODS,
    ZERO,
    float_to_money,
    money_context,
    quantize_money,
    safe_float,
    to_decimal,
)

logger = logging.getLogger(__name__)

DEFAULT_TAX_RATE = Decimal("0.10")
MAX_TAX_RATE = Decimal("1")


@dataclass(frozen=True)
class TaxConfig:
    rate: Decimal = DEFAULT_TAX_RATE
    inclusive: bool = False
    rounding_method: str = "round"


@dataclass(frozen=True)
class TaxResult:
    tax_amount: Decimal
    after_tax_amount: Decimal
    is_valid: bool
    error: Optional[str] = None


def _fallback_amount(amount) -> Decimal:
    try:
        return quantize_money(to_decimal(amount))
    except Exception:
        return float_to_money(safe_float(amount))


def calculate_tax(amount, config: Optional[TaxConfig] = None) -> TaxResult:
    config = config or TaxConfig()

    try:
        with money_context():
            amount_d = to_decimal(amount)
            rate = to_decimal(config.rate)

            if rate < ZERO or rate > MAX_TAX_RATE:
                return TaxResult(
                    tax_amount=quantize_money(ZERO),
                    after_tax_amount=quantize_money(amount_d),
                    is_valid=False,
                    error="Tax rate must be between 0 and 1",
                )

            rounding = ROUNDING_METHODS.get(config.rounding_method, ROUND_HALF_EVEN)
            tax_amount = quantize_money(amount_d * rate, rounding=rounding)

            after_tax = amount_d if config.inclusive else amount_d + tax_amount

        return TaxResult(
            tax_amount=tax_amount,
            after_tax_amount=quantize_money(after_tax),
            is_valid=True,
        )

    except Exception:
        logger.exception(
            "Tax calculation failed",
            extra={"amount": repr(amount), "tax_rate": repr(config.rate)},
        )
        return TaxResult(
            tax_amount=quantize_money(ZERO),
            after_tax_amount=_fallback_amount(amount),
            is_valid=False,
            error="Tax calculation error occurred",
        )
