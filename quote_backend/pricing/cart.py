# pricing/cart.py

"""
PATH: pricing/cart.py

CART VALUE OBJECTS (FRAMEWORK-AGNOSTIC)

Purpose:
- Typed, request-scoped shapes consumed and produced by the pricing engine.
- Built from the camelCase JSON contract used by the quoting frontend.
- Rendered back to that contract by pricing/serializers/responses.py.

Rules:
- All objects are frozen; the engine returns updated copies, it never mutates input.
- Money fields are Decimal. Derived fields (subtotal, total, applied_amount) are
  None until the engine fills them.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from typing import Optional, Tuple

DISCOUNT_PERCENTAGE = "percentage"
DISCOUNT_NOMINAL = "nominal"
DISCOUNT_TYPES = (DISCOUNT_PERCENTAGE, DISCOUNT_NOMINAL)

RATE_HOURLY = "hourly"
RATE_FIXED = "fixed"
RATE_PER_UNIT = "per_unit"
RATE_TYPES = (RATE_HOURLY, RATE_FIXED, RATE_PER_UNIT)


@dataclass(frozen=True)
class Discount:
    """
    Percentage (0-100) or nominal (absolute currency) discount.

    applied_amount is engine output: the amount actually taken off.
    """

    type: str
    value: Decimal
    applied_amount: Optional[Decimal] = None
    reason: str = ""

    @staticmethod
    def from_raw(raw: Optional[dict]) -> Optional["Discount"]:
        if not raw:
            return None
        return Discount(
            type=str(raw.get("type") or ""),
            value=raw.get("value"),
            applied_amount=raw.get("applied_amount"),
            reason=str(raw.get("reason") or ""),
        )


@dataclass(frozen=True)
class CartItem:
    product_id: str
    name: str
    price: Decimal
    quantity: Decimal
    discount: Optional[Discount] = None
    subtotal: Optional[Decimal] = None
    total: Optional[Decimal] = None
    id: str = ""
    category: str = ""
    notes: str = ""

    @staticmethod
    def from_raw(raw: dict) -> "CartItem":
        return CartItem(
            product_id=str(raw.get("product_id") or ""),
            name=str(raw.get("name") or ""),
            price=raw.get("price"),
            quantity=raw.get("quantity"),
            discount=Discount.from_raw(raw.get("discount")),
            id=str(raw.get("id") or ""),
            category=str(raw.get("category") or ""),
            notes=str(raw.get("notes") or ""),
        )


@dataclass(frozen=True)
class LaborItem:
    name: str
    rate_type: str
    rate: Decimal
    quantity: Decimal
    discount: Optional[Discount] = None
    subtotal: Optional[Decimal] = None
    total: Optional[Decimal] = None
    id: str = ""
    description: str = ""
    unit: str = ""
    category: str = ""

    @staticmethod
    def from_raw(raw: dict) -> "LaborItem":
        return LaborItem(
            name=str(raw.get("name") or ""),
            rate_type=str(raw.get("rate_type") or ""),
            rate=raw.get("rate"),
            quantity=raw.get("quantity"),
            discount=Discount.from_raw(raw.get("discount")),
            id=str(raw.get("id") or ""),
            description=str(raw.get("description") or ""),
            unit=str(raw.get("unit") or ""),
            category=str(raw.get("category") or ""),
        )


@dataclass(frozen=True)
class CartTotals:
    """
    Full breakdown of one calculation.
    Every intermediate value is exposed so clients can render line by line.
    """

    subtotal: Decimal
    items_subtotal: Decimal
    labor_subtotal: Decimal
    item_discounts: Decimal
    labor_discounts: Decimal
    tax_rate: Decimal
    tax_amount: Decimal
    final_total: Decimal
    total_discount: Optional[Discount] = None


@dataclass(frozen=True)
class CalculationMetadata:
    calculation_time_ms: int
    calculated_at: datetime


@dataclass(frozen=True)
class CartData:
    """
    Aggregate root for one calculation request.
    """

    items: Tuple[CartItem, ...] = ()
    labor_items: Tuple[LaborItem, ...] = ()
    total_discount: Optional[Discount] = None
    totals: Optional[CartTotals] = None
    metadata: Optional[CalculationMetadata] = None

    @staticmethod
    def from_raw(raw: dict) -> "CartData":
        """
        Build from serializer-validated data (snake_case keys).
        """
        return CartData(
            items=tuple(CartItem.from_raw(i) for i in (raw.get("items") or [])),
            labor_items=tuple(LaborItem.from_raw(i) for i in (raw.get("labor_items") or [])),
            total_discount=Discount.from_raw(raw.get("total_discount")),
        )


@dataclass(frozen=True)
class FieldError:
    """
    One blocking problem, addressed by dotted path (e.g. "items[0].price").
    """

    field: str
    message: str


@dataclass(frozen=True)
class ValidationResult:
    is_valid: bool
    errors: Tuple[FieldError, ...] = ()
    warnings: Tuple[str, ...] = ()
