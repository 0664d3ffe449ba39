# pricing/services/cart_totals.py

"""
PATH: pricing/services/cart_totals.py

CART AGGREGATOR (APPLICATION SERVICE)

Purpose:
- Resolve a full quote/cart breakdown in one pass:
  line discounts -> subtotals -> cart-wide discount -> tax -> final total.

Order (strict):
1) item lines (base = price)
2) labor lines (base = rate)
3) items_subtotal / labor_subtotal = sum(base x quantity)
4) item_discounts / labor_discounts = sum(applied_amount)
5) grand subtotal = (items - item discounts) + (labor - labor discounts)
6) cart-wide discount on the grand subtotal (quantity 1)
7) tax on (grand subtotal - cart-wide discount)

Error policy:
- Cart-wide discount / tax problems are recorded as FieldError and the
  calculation continues with the calculator's fallback numbers.
- Anything unexpected returns fallback_totals() (float math, no discounts).
- Never raises. is_valid must be checked by the caller.
- Every reported problem is also counted in error_tracking (health endpoint).

Notes:
- Totals are fully recomputed on every call; the input cart is not mutated.
- Metadata (elapsed time, timestamp) is diagnostic only and never feeds totals.
"""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass, replace
from decimal import Decimal
from typing import List, Tuple

from django.utils import timezone

from pricing.cart import CalculationMetadata, CartData, CartTotals, FieldError
from pricing.services.discounts import (
    apply_item_totals,
    apply_labor_totals,
    calculate_total_discount,
    line_subtotal,
)
from pricing.services.error_tracking import (
    CALCULATION_ERROR,
    DISCOUNT_ERROR,
    TAX_ERROR,
    error_tracker,
)
from pricing.services.money import (
    ZERO,
    float_to_money,
    money_context,
    quantize_money,
    safe_float,
    to_decimal,
)
from pricing.services.tax import DEFAULT_TAX_RATE, TaxConfig, calculate_tax

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CartCalculation:
    totals: CartTotals
    updated_cart_data: CartData
    is_valid: bool
    errors: Tuple[FieldError, ...] = ()


def _elapsed_ms(started: float) -> int:
    return int((time.perf_counter() - started) * 1000)


def _rate_decimal(tax_rate) -> Decimal:
    try:
        return to_decimal(tax_rate)
    except Exception:
        return ZERO


def _applied(discount) -> Decimal:
    if discount is None or discount.applied_amount is None:
        return ZERO
    return discount.applied_amount


def calculate_comprehensive_cart_totals(
    cart_data: CartData,
    tax_rate=DEFAULT_TAX_RATE,
    *,
    tax_inclusive: bool = False,
    rounding_method: str = "round",
) -> CartCalculation:
    errors: List[FieldError] = []
    started = time.perf_counter()

    try:
        updated_items, item_results = apply_item_totals(cart_data.items)
        updated_labor, labor_results = apply_labor_totals(cart_data.labor_items)

        for idx, result in enumerate(item_results):
            if not result.is_valid:
                logger.warning(
                    "Item line discount not applied",
                    extra={"line": f"items[{idx}]", "reason": result.error},
                )
        for idx, result in enumerate(labor_results):
            if not result.is_valid:
                logger.warning(
                    "Labor line discount not applied",
                    extra={"line": f"laborItems[{idx}]", "reason": result.error},
                )

        with money_context():
            items_subtotal = sum(
                (line_subtotal(i.price, i.quantity) for i in updated_items), ZERO
            )
            labor_subtotal = sum(
                (line_subtotal(i.rate, i.quantity) for i in updated_labor), ZERO
            )

            item_discounts = sum((_applied(i.discount) for i in updated_items), ZERO)
            labor_discounts = sum((_applied(i.discount) for i in updated_labor), ZERO)

            items_after_discounts = items_subtotal - item_discounts
            labor_after_discounts = labor_subtotal - labor_discounts
            grand_subtotal = items_after_discounts + labor_after_discounts

        total_discount_calc = calculate_total_discount(grand_subtotal, cart_data.total_discount)
        if not total_discount_calc.is_valid:
            error_tracker.record(DISCOUNT_ERROR, "total_discount")
            errors.append(
                FieldError(
                    field="totalDiscount",
                    message=total_discount_calc.error or "Total discount calculation failed",
                )
            )

        tax_calc = calculate_tax(
            total_discount_calc.final_amount,
            TaxConfig(rate=tax_rate, inclusive=tax_inclusive, rounding_method=rounding_method),
        )
        if not tax_calc.is_valid:
            error_tracker.record(TAX_ERROR, "tax")
            errors.append(
                FieldError(field="tax", message=tax_calc.error or "Tax calculation failed")
            )

        updated_total_discount = None
        if cart_data.total_discount is not None:
            updated_total_discount = replace(
                cart_data.total_discount,
                applied_amount=total_discount_calc.discount_amount,
            )

        totals = CartTotals(
            subtotal=quantize_money(grand_subtotal),
            items_subtotal=quantize_money(items_subtotal),
            labor_subtotal=quantize_money(labor_subtotal),
            item_discounts=quantize_money(item_discounts),
            labor_discounts=quantize_money(labor_discounts),
            total_discount=updated_total_discount,
            tax_rate=_rate_decimal(tax_rate),
            tax_amount=tax_calc.tax_amount,
            final_total=tax_calc.after_tax_amount,
        )

        elapsed = _elapsed_ms(started)
        updated_cart_data = CartData(
            items=updated_items,
            labor_items=updated_labor,
            total_discount=updated_total_discount,
            totals=totals,
            metadata=CalculationMetadata(
                calculation_time_ms=elapsed,
                calculated_at=timezone.now(),
            ),
        )

        logger.info(
            "Comprehensive cart calculation completed",
            extra={
                "item_count": len(updated_items),
                "labor_count": len(updated_labor),
                "final_total": str(totals.final_total),
                "calculation_time_ms": elapsed,
            },
        )

        return CartCalculation(
            totals=totals,
            updated_cart_data=updated_cart_data,
            is_valid=not errors,
            errors=tuple(errors),
        )

    except Exception:
        logger.exception(
            "Comprehensive cart calculation failed",
            extra={"calculation_time_ms": _elapsed_ms(started)},
        )
        error_tracker.record(CALCULATION_ERROR, "cart_totals")
        errors.append(FieldError(field="calculation", message="Comprehensive calculation failed"))
        return CartCalculation(
            totals=fallback_totals(cart_data, tax_rate),
            updated_cart_data=cart_data,
            is_valid=False,
            errors=tuple(errors),
        )


def fallback_totals(cart_data, tax_rate) -> CartTotals:
    """
    Last-resort totals: plain float math, no discounts, never raises.
    """
    items = getattr(cart_data, "items", None) or ()
    labor_items = getattr(cart_data, "labor_items", None) or ()

    items_subtotal = sum(
        safe_float(getattr(i, "price", 0)) * safe_float(getattr(i, "quantity", 0)) for i in items
    )
    labor_subtotal = sum(
        safe_float(getattr(i, "rate", 0)) * safe_float(getattr(i, "quantity", 0))
        for i in labor_items
    )
    subtotal = items_subtotal + labor_subtotal
    rate = safe_float(tax_rate)
    tax_amount = subtotal * rate

    return CartTotals(
        subtotal=float_to_money(subtotal),
        items_subtotal=float_to_money(items_subtotal),
        labor_subtotal=float_to_money(labor_subtotal),
        item_discounts=Decimal("0.00"),
        labor_discounts=Decimal("0.00"),
        tax_rate=_rate_decimal(rate),
        tax_amount=float_to_money(tax_amount),
        final_total=float_to_money(subtotal + tax_amount),
    )
