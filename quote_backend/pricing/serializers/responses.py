"""
PATH: pricing/serializers/responses.py

PRICING RESPONSE SERIALIZERS

Purpose:
- Render engine dataclasses (pricing.cart / pricing.services.*) in the camelCase
  contract the quoting frontend consumes.
- Money is always a 2dp STRING (never a float).
"""

from __future__ import annotations

from rest_framework import serializers


def _money(**kwargs):
    # engine money is already quantized to 2dp; no digit cap so large totals render
    return serializers.DecimalField(
        max_digits=None, decimal_places=None, read_only=True, **kwargs
    )


def _number(**kwargs):
    return serializers.DecimalField(
        max_digits=None, decimal_places=None, read_only=True, **kwargs
    )


class DiscountSerializer(serializers.Serializer):
    type = serializers.CharField(read_only=True)
    value = _number()
    appliedAmount = _money(source="applied_amount", allow_null=True)
    reason = serializers.CharField(read_only=True)


class CartItemSerializer(serializers.Serializer):
    id = serializers.CharField(read_only=True)
    productId = serializers.CharField(source="product_id", read_only=True)
    name = serializers.CharField(read_only=True)
    category = serializers.CharField(read_only=True)
    notes = serializers.CharField(read_only=True)
    price = _number()
    quantity = _number()
    discount = DiscountSerializer(read_only=True, allow_null=True)
    subtotal = _money(allow_null=True)
    total = _money(allow_null=True)


class LaborItemSerializer(serializers.Serializer):
    id = serializers.CharField(read_only=True)
    name = serializers.CharField(read_only=True)
    description = serializers.CharField(read_only=True)
    rateType = serializers.CharField(source="rate_type", read_only=True)
    rate = _number()
    quantity = _number()
    unit = serializers.CharField(read_only=True)
    category = serializers.CharField(read_only=True)
    discount = DiscountSerializer(read_only=True, allow_null=True)
    subtotal = _money(allow_null=True)
    total = _money(allow_null=True)


class CartTotalsSerializer(serializers.Serializer):
    subtotal = _money()
    itemsSubtotal = _money(source="items_subtotal")
    laborSubtotal = _money(source="labor_subtotal")
    itemDiscounts = _money(source="item_discounts")
    laborDiscounts = _money(source="labor_discounts")
    totalDiscount = DiscountSerializer(source="total_discount", read_only=True, allow_null=True)
    taxRate = _number(source="tax_rate")
    taxAmount = _money(source="tax_amount")
    finalTotal = _money(source="final_total")


class CalculationMetadataSerializer(serializers.Serializer):
    calculationTime = serializers.IntegerField(source="calculation_time_ms", read_only=True)
    calculatedAt = serializers.DateTimeField(source="calculated_at", read_only=True)


class CartDataSerializer(serializers.Serializer):
    items = CartItemSerializer(many=True, read_only=True)
    laborItems = LaborItemSerializer(source="labor_items", many=True, read_only=True)
    totalDiscount = DiscountSerializer(source="total_discount", read_only=True, allow_null=True)
    totals = CartTotalsSerializer(read_only=True, allow_null=True)
    metadata = CalculationMetadataSerializer(read_only=True, allow_null=True)


class FieldErrorSerializer(serializers.Serializer):
    field = serializers.CharField(read_only=True)
    message = serializers.CharField(read_only=True)


class CartCalculationSerializer(serializers.Serializer):
    totals = CartTotalsSerializer(read_only=True)
    updatedCartData = CartDataSerializer(source="updated_cart_data", read_only=True)
    isValid = serializers.BooleanField(source="is_valid", read_only=True)
    errors = FieldErrorSerializer(many=True, read_only=True)


class ValidationResultSerializer(serializers.Serializer):
    isValid = serializers.BooleanField(source="is_valid", read_only=True)
    errors = FieldErrorSerializer(many=True, read_only=True)
    warnings = serializers.ListField(child=serializers.CharField(), read_only=True)
