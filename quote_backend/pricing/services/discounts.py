# pricing/services/discounts.py

"""
PATH: pricing/services/discounts.py

DISCOUNT CALCULATOR

Purpose:
- Compute discount + resulting amount for one (base x quantity) pair.
- Same algorithm for cart items (base=price), labor items (base=rate)
  and the cart-wide discount (base=grand subtotal, quantity=1).

Rules:
- percentage: value must be within [0, 100], otherwise REJECTED (no discount applied).
- nominal: value must be >= 0; a value above the subtotal is CLAMPED to the
  subtotal (final amount 0.00). Clamping is not an error.
- Never raises: on malformed input we return a float-based fallback marked invalid.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from decimal import Decimal
from typing import Iterable, Optional, Tuple

from pricing.cart import (
    CartItem,
    Discount,
    DISCOUNT_NOMINAL,
    DISCOUNT_PERCENTAGE,
    LaborItem,
)
from pricing.services.money import (
    ZERO,
    float_to_money,
    money_context,
    quantize_money,
    safe_float,
    to_decimal,
)

logger = logging.getLogger(__name__)

MAX_PERCENTAGE = Decimal("100")
CALCULATION_ERROR = "Calculation error occurred"


@dataclass(frozen=True)
class DiscountResult:
    discount_amount: Decimal
    final_amount: Decimal
    is_valid: bool
    error: Optional[str] = None


def _rejected(subtotal: Decimal, message: str) -> DiscountResult:
    return DiscountResult(
        discount_amount=quantize_money(ZERO),
        final_amount=quantize_money(subtotal),
        is_valid=False,
        error=message,
    )


def calculate_line_discount(base_amount, quantity, discount: Optional[Discount] = None) -> DiscountResult:
    """
    subtotal = base_amount x quantity, then apply the optional discount.
    """
    try:
        with money_context():
            subtotal = to_decimal(base_amount) * to_decimal(quantity)

            if discount is None:
                return DiscountResult(
                    discount_amount=quantize_money(ZERO),
                    final_amount=quantize_money(subtotal),
                    is_valid=True,
                )

            value = to_decimal(discount.value)

            if discount.type == DISCOUNT_PERCENTAGE:
                if value < ZERO or value > MAX_PERCENTAGE:
                    return _rejected(
                        subtotal,
                        f"Percentage discount must be between 0 and {MAX_PERCENTAGE}",
                    )
                discount_amount = subtotal * (value / MAX_PERCENTAGE)

            elif discount.type == DISCOUNT_NOMINAL:
                if value < ZERO:
                    return _rejected(subtotal, "Nominal discount cannot be negative")
                if value > subtotal:
                    return DiscountResult(
                        discount_amount=quantize_money(subtotal),
                        final_amount=quantize_money(ZERO),
                        is_valid=True,
                    )
                discount_amount = value

            else:
                return _rejected(subtotal, f"Unsupported discount type: {discount.type!r}")

            final_amount = subtotal - discount_amount

        return DiscountResult(
            discount_amount=quantize_money(discount_amount),
            final_amount=quantize_money(final_amount),
            is_valid=True,
        )

    except Exception:
        logger.exception(
            "Line discount calculation failed",
            extra={"base_amount": repr(base_amount), "quantity": repr(quantity)},
        )
        return DiscountResult(
            discount_amount=quantize_money(ZERO),
            final_amount=float_to_money(safe_float(base_amount) * safe_float(quantity)),
            is_valid=False,
            error=CALCULATION_ERROR,
        )


def calculate_item_discount(price, quantity, discount: Optional[Discount] = None) -> DiscountResult:
    return calculate_line_discount(price, quantity, discount)


def calculate_total_discount(subtotal, discount: Optional[Discount] = None) -> DiscountResult:
    """Cart-wide discount: the grand subtotal is a single line of quantity 1."""
    return calculate_line_discount(subtotal, 1, discount)


def line_subtotal(base_amount, quantity) -> Decimal:
    """
    Unrounded base x quantity; falls back to float math for malformed input.
    """
    try:
        with money_context():
            return to_decimal(base_amount) * to_decimal(quantity)
    except Exception:
        return float_to_money(safe_float(base_amount) * safe_float(quantity))


def _with_applied(discount: Optional[Discount], result: DiscountResult) -> Optional[Discount]:
    if discount is None:
        return None
    return replace(discount, applied_amount=result.discount_amount)


def apply_item_totals(items: Iterable[CartItem]) -> Tuple[Tuple[CartItem, ...], Tuple[DiscountResult, ...]]:
    """
    Returns updated copies of items (subtotal, total, discount.applied_amount)
    plus the per-line calculator results, in input order.
    """
    updated = []
    results = []
    for item in items:
        result = calculate_item_discount(item.price, item.quantity, item.discount)
        updated.append(
            replace(
                item,
                subtotal=quantize_money(line_subtotal(item.price, item.quantity)),
                total=result.final_amount,
                discount=_with_applied(item.discount, result),
            )
        )
        results.append(result)
    return tuple(updated), tuple(results)


def apply_labor_totals(
    labor_items: Iterable[LaborItem],
) -> Tuple[Tuple[LaborItem, ...], Tuple[DiscountResult, ...]]:
    updated = []
    results = []
    for item in labor_items:
        result = calculate_line_discount(item.rate, item.quantity, item.discount)
        updated.append(
            replace(
                item,
                subtotal=quantize_money(line_subtotal(item.rate, item.quantity)),
                total=result.final_amount,
                discount=_with_applied(item.discount, result),
            )
        )
        results.append(result)
    return tuple(updated), tuple(results)
