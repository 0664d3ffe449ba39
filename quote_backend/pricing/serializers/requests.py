"""
PATH: pricing/serializers/requests.py

PRICING REQUEST SERIALIZERS

Purpose:
- Validate request SHAPES for the pricing endpoints (camelCase wire contract).
- Map wire names onto the snake_case keys pricing.cart.CartData.from_raw() reads.

Notes:
- Business rules (price >= 0.01, percentage <= 100, ...) are NOT enforced here.
  They belong to the validator / calculators so errors come back as FieldError data.
"""

from __future__ import annotations

from decimal import Decimal

from rest_framework import serializers

from pricing.cart import DISCOUNT_TYPES, RATE_TYPES


def _number(**kwargs):
    # unbounded precision: the engine owns rounding
    return serializers.DecimalField(max_digits=None, decimal_places=None, **kwargs)


class DiscountInputSerializer(serializers.Serializer):
    type = serializers.ChoiceField(choices=DISCOUNT_TYPES)
    value = _number()
    reason = serializers.CharField(required=False, allow_blank=True, default="")


class CartItemInputSerializer(serializers.Serializer):
    id = serializers.CharField(required=False, allow_blank=True, default="")
    productId = serializers.CharField(source="product_id", allow_blank=True)
    name = serializers.CharField(allow_blank=True)
    category = serializers.CharField(required=False, allow_blank=True, default="")
    notes = serializers.CharField(required=False, allow_blank=True, default="")
    price = _number()
    quantity = _number()
    discount = DiscountInputSerializer(required=False, allow_null=True, default=None)


class LaborItemInputSerializer(serializers.Serializer):
    id = serializers.CharField(required=False, allow_blank=True, default="")
    name = serializers.CharField(allow_blank=True)
    description = serializers.CharField(required=False, allow_blank=True, default="")
    rateType = serializers.ChoiceField(source="rate_type", choices=RATE_TYPES)
    rate = _number()
    quantity = _number()
    unit = serializers.CharField(required=False, allow_blank=True, default="")
    category = serializers.CharField(required=False, allow_blank=True, default="")
    discount = DiscountInputSerializer(required=False, allow_null=True, default=None)


class CartDataInputSerializer(serializers.Serializer):
    items = CartItemInputSerializer(many=True, required=False, default=list)
    laborItems = LaborItemInputSerializer(
        many=True, source="labor_items", required=False, default=list
    )
    totalDiscount = DiscountInputSerializer(
        source="total_discount", required=False, allow_null=True, default=None
    )


class CalculateCartInputSerializer(serializers.Serializer):
    cartData = CartDataInputSerializer(source="cart_data")
    taxRate = _number(
        source="tax_rate",
        required=False,
        min_value=Decimal("0"),
        max_value=Decimal("1"),
    )
    quoteId = serializers.UUIDField(source="quote_id", required=False, allow_null=True)


class ValidateCartInputSerializer(serializers.Serializer):
    """
    cartData is accepted as raw JSON: the validator reports every problem itself.
    """

    cartData = serializers.JSONField(source="cart_data")


class FormatCurrencyInputSerializer(serializers.Serializer):
    amounts = serializers.ListField(child=_number(), allow_empty=True)
    locale = serializers.CharField(required=False, allow_blank=True, default="")
    currency = serializers.CharField(required=False, allow_blank=True, default="")
