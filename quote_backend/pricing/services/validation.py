# pricing/services/validation.py

"""
PATH: pricing/services/validation.py

CART PRE-FLIGHT VALIDATOR

Purpose:
- Check a raw (JSON-shaped) cart before calculation.
- Return the COMPLETE error set in one pass, plus non-blocking warnings.

Rules:
- errors block is_valid; warnings never do.
- percentage discounts above 100 are errors; nominal discounts above
  MAX_NOMINAL_DISCOUNT are only warnings (large B2B discounts are legitimate).
- Numbers must be real JSON numbers (bool is not a number).
- A discount key holding anything but null is validated (an empty {} or [] is an error).
"""

from __future__ import annotations

import math
from decimal import Decimal
from typing import Any, List

from pricing.cart import (
    DISCOUNT_NOMINAL,
    DISCOUNT_PERCENTAGE,
    DISCOUNT_TYPES,
    FieldError,
    RATE_TYPES,
    ValidationResult,
)

MIN_ITEM_PRICE = Decimal("0.01")
MAX_PERCENTAGE = Decimal("100")
MAX_NOMINAL_DISCOUNT = Decimal("1000000")

HIGH_PRICE_WARNING = Decimal("50000")
HIGH_QUANTITY_WARNING = Decimal("1000")
HIGH_LABOR_RATE_WARNING = Decimal("1000")


def _is_number(value: Any) -> bool:
    if isinstance(value, bool):
        return False
    if isinstance(value, int):
        return True
    if isinstance(value, float):
        return math.isfinite(value)
    if isinstance(value, Decimal):
        return value.is_finite()
    return False


def _num(value: Any) -> Decimal:
    # only called after _is_number()
    return value if isinstance(value, Decimal) else Decimal(str(value))


def _is_integer(value: Any) -> bool:
    return _is_number(value) and _num(value) == _num(value).to_integral_value()


def _non_empty_str(value: Any) -> bool:
    return isinstance(value, str) and value.strip() != ""


def validate_discount(discount: Any, prefix: str, errors: List[FieldError], warnings: List[str]) -> None:
    if not isinstance(discount, dict):
        errors.append(FieldError(prefix, "Discount must be an object"))
        return

    dtype = discount.get("type")
    value = discount.get("value")

    if dtype not in DISCOUNT_TYPES:
        errors.append(
            FieldError(f"{prefix}.type", 'Discount type must be "percentage" or "nominal"')
        )

    if not _is_number(value) or _num(value) < 0:
        errors.append(
            FieldError(f"{prefix}.value", "Discount value must be a non-negative number")
        )
        return

    if dtype == DISCOUNT_PERCENTAGE and _num(value) > MAX_PERCENTAGE:
        errors.append(
            FieldError(f"{prefix}.value", f"Percentage discount cannot exceed {MAX_PERCENTAGE}%")
        )

    if dtype == DISCOUNT_NOMINAL and _num(value) > MAX_NOMINAL_DISCOUNT:
        warnings.append(f"Very high nominal discount detected: ${value}")


def validate_cart_item(item: Any, prefix: str, errors: List[FieldError], warnings: List[str]) -> None:
    if not isinstance(item, dict):
        errors.append(FieldError(prefix, "Item must be an object"))
        return

    name = item.get("name")
    price = item.get("price")
    quantity = item.get("quantity")

    if not _non_empty_str(item.get("productId")):
        errors.append(
            FieldError(f"{prefix}.productId", "Product ID is required and must be a string")
        )

    if not _non_empty_str(name):
        errors.append(FieldError(f"{prefix}.name", "Item name is required and cannot be empty"))

    if not _is_number(price) or _num(price) < MIN_ITEM_PRICE:
        errors.append(FieldError(f"{prefix}.price", f"Price must be a number >= {MIN_ITEM_PRICE}"))

    if not _is_integer(quantity) or _num(quantity) <= 0:
        errors.append(FieldError(f"{prefix}.quantity", "Quantity must be a positive integer"))

    if item.get("discount") is not None:
        validate_discount(item["discount"], f"{prefix}.discount", errors, warnings)

    if _is_number(price) and _num(price) > HIGH_PRICE_WARNING:
        warnings.append(f"High item price detected: ${price} for {name}")

    if _is_number(quantity) and _num(quantity) > HIGH_QUANTITY_WARNING:
        warnings.append(f"High quantity detected: {quantity} for {name}")


def validate_labor_item(item: Any, prefix: str, errors: List[FieldError], warnings: List[str]) -> None:
    if not isinstance(item, dict):
        errors.append(FieldError(prefix, "Labor item must be an object"))
        return

    name = item.get("name")
    rate = item.get("rate")
    quantity = item.get("quantity")

    if not _non_empty_str(name):
        errors.append(
            FieldError(f"{prefix}.name", "Labor item name is required and cannot be empty")
        )

    if item.get("rateType") not in RATE_TYPES:
        errors.append(
            FieldError(f"{prefix}.rateType", "Rate type must be one of: hourly, fixed, per_unit")
        )

    if not _is_number(rate) or _num(rate) < 0:
        errors.append(FieldError(f"{prefix}.rate", "Rate must be a non-negative number"))

    # labor quantity may be fractional (e.g. 1.5 hours)
    if not _is_number(quantity) or _num(quantity) <= 0:
        errors.append(FieldError(f"{prefix}.quantity", "Quantity must be a positive number"))

    if item.get("discount") is not None:
        validate_discount(item["discount"], f"{prefix}.discount", errors, warnings)

    if _is_number(rate) and _num(rate) > HIGH_LABOR_RATE_WARNING:
        warnings.append(f"High labor rate detected: ${rate}/hr for {name}")


def validate_cart_data(cart_data: Any) -> ValidationResult:
    errors: List[FieldError] = []
    warnings: List[str] = []

    if not isinstance(cart_data, dict):
        return ValidationResult(
            is_valid=False,
            errors=(FieldError("cartData", "Cart data is required and must be an object"),),
        )

    items = cart_data.get("items")
    if not isinstance(items, list):
        errors.append(FieldError("items", "Items must be an array"))
    else:
        for idx, item in enumerate(items):
            validate_cart_item(item, f"items[{idx}]", errors, warnings)

    labor_items = cart_data.get("laborItems")
    if not isinstance(labor_items, list):
        errors.append(FieldError("laborItems", "Labor items must be an array"))
    else:
        for idx, item in enumerate(labor_items):
            validate_labor_item(item, f"laborItems[{idx}]", errors, warnings)

    if cart_data.get("totalDiscount") is not None:
        validate_discount(cart_data["totalDiscount"], "totalDiscount", errors, warnings)

    return ValidationResult(
        is_valid=not errors,
        errors=tuple(errors),
        warnings=tuple(warnings),
    )
