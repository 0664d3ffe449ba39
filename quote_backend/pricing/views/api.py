# pricing/views/api.py

"""
PRICING API VIEWS

Purpose:
- Thin HTTP layer over the pricing engine (pricing/services).
- Calculate quote/cart totals, pre-flight validate a cart, format currency.
- Health + error statistics from pricing/services/error_tracking.py.

Status mapping:
- engine result valid   -> 200
- engine result invalid -> 400 (body still carries best-effort numbers)
- request shape invalid -> 400 (DRF serializer errors)
- unexpected exception  -> 500
"""

from __future__ import annotations

import logging
import time

from django.conf import settings
from django.utils import timezone
from drf_spectacular.utils import OpenApiExample, extend_schema
from rest_framework import status
from rest_framework.permissions import AllowAny, IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView

from pricing.cart import CartData, CartItem
from pricing.serializers import (
    CalculateCartInputSerializer,
    CartCalculationSerializer,
    FormatCurrencyInputSerializer,
    ValidateCartInputSerializer,
    ValidationResultSerializer,
)
from pricing.services.cart_totals import calculate_comprehensive_cart_totals
from pricing.services.error_tracking import (
    CALCULATION_ERROR,
    HEALTH_CRITICAL,
    HEALTH_WARNING,
    VALIDATION_ERROR,
    error_tracker,
)
from pricing.services.formatting import format_currency, round_currency
from pricing.services.validation import validate_cart_data

logger = logging.getLogger(__name__)


# =====================================================
# API ERROR NORMALIZATION
# =====================================================

def error_response(*, code: str, message: str, http_status: int):
    return Response(
        {"error": {"code": code, "message": message}},
        status=http_status,
    )


def _pricing_setting(key: str, default):
    return getattr(settings, "PRICING", {}).get(key, default)


def _elapsed_ms(started: float) -> int:
    return int((time.perf_counter() - started) * 1000)


# =====================================================
# PRICING API VIEWS
# =====================================================

class PricingHealthCheckView(APIView):
    """
    Liveness of the pricing engine: runs one tiny calculation and reports
    the recent engine error rate.

    - sample calculation failed or rate critical -> 503
    - error rate elevated                        -> 202
    - otherwise                                  -> 200
    """

    permission_classes = [AllowAny]
    serializer_class = None

    @extend_schema(responses={200: dict, 202: dict, 503: dict}, description="Pricing engine health check")
    def get(self, request):
        sample = CartData(
            items=(CartItem(product_id="health-check", name="health-check", price="1.00", quantity=1),),
        )
        result = calculate_comprehensive_cart_totals(sample, "0.10")
        engine_ok = result.is_valid and str(result.totals.final_total) == "1.10"

        system_health = error_tracker.system_health()
        if not engine_ok or system_health["status"] == HEALTH_CRITICAL:
            http_status = status.HTTP_503_SERVICE_UNAVAILABLE
        elif system_health["status"] == HEALTH_WARNING:
            http_status = status.HTTP_202_ACCEPTED
        else:
            http_status = status.HTTP_200_OK

        return Response(
            {
                "status": "ok" if engine_ok else "degraded",
                "module": "pricing",
                "systemHealth": system_health,
                "errorStatistics": error_tracker.stats(),
            },
            status=http_status,
        )


class PricingErrorStatsView(APIView):
    """
    Engine error counters for monitoring (this process only).
    """

    permission_classes = [IsAuthenticated]
    serializer_class = None

    @extend_schema(responses={200: dict}, description="Recent pricing engine error statistics")
    def get(self, request):
        started = time.perf_counter()
        data = error_tracker.stats()
        data["isHighErrorRate"] = error_tracker.is_high_error_rate()
        data["monitoringTime"] = _elapsed_ms(started)
        return Response(
            {"success": True, "data": data, "timestamp": timezone.now().isoformat()},
            status=status.HTTP_200_OK,
        )


class CalculateCartView(APIView):
    """
    Calculate full cart totals (line discounts, cart discount, tax).

    Money rule:
    - Totals are computed server-side only; client-sent subtotal/total are ignored.
    """

    permission_classes = [IsAuthenticated]
    serializer_class = CartCalculationSerializer

    @extend_schema(
        request=CalculateCartInputSerializer,
        responses={200: dict, 400: dict, 500: dict},
        description="Calculate cart totals with discounts and tax (taxRate is a fraction 0..1).",
        examples=[
            OpenApiExample(
                "One discounted item",
                value={
                    "cartData": {
                        "items": [
                            {
                                "productId": "SKU-100",
                                "name": "Cat 6 cable box",
                                "price": "100.00",
                                "quantity": 2,
                                "discount": {"type": "percentage", "value": 10},
                            }
                        ],
                        "laborItems": [],
                    },
                    "taxRate": "0.10",
                },
                request_only=True,
            ),
        ],
    )
    def post(self, request):
        started = time.perf_counter()

        serializer = CalculateCartInputSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        data = serializer.validated_data
        tax_rate = data.get("tax_rate")
        if tax_rate is None:
            tax_rate = _pricing_setting("DEFAULT_TAX_RATE", "0.10")
        quote_id = data.get("quote_id")

        try:
            cart = CartData.from_raw(data["cart_data"])
            calculation = calculate_comprehensive_cart_totals(cart, tax_rate)
            payload = CartCalculationSerializer(calculation).data
        except Exception as exc:
            logger.exception(
                "Financial calculation failed",
                extra={"quote_id": str(quote_id or ""), "response_time_ms": _elapsed_ms(started)},
            )
            error_tracker.record(CALCULATION_ERROR, "calculate_endpoint")
            return error_response(
                code="CALCULATION_FAILED",
                message=str(exc) or "Financial calculation failed",
                http_status=status.HTTP_500_INTERNAL_SERVER_ERROR,
            )

        response_time = _elapsed_ms(started)
        payload["calculationTime"] = response_time

        logger.info(
            "Financial calculation completed",
            extra={
                "quote_id": str(quote_id or ""),
                "is_valid": calculation.is_valid,
                "final_total": str(calculation.totals.final_total),
                "response_time_ms": response_time,
            },
        )

        return Response(
            {
                "success": calculation.is_valid,
                "data": {"calculation": payload},
                "message": (
                    "Calculation completed successfully"
                    if calculation.is_valid
                    else "Calculation completed with errors"
                ),
                "timestamp": timezone.now().isoformat(),
            },
            status=status.HTTP_200_OK if calculation.is_valid else status.HTTP_400_BAD_REQUEST,
        )


class ValidateCartView(APIView):
    """
    Pre-flight validation without calculation.
    Errors block; warnings are informational.
    """

    permission_classes = [IsAuthenticated]
    serializer_class = ValidationResultSerializer

    @extend_schema(
        request=ValidateCartInputSerializer,
        responses={200: dict, 400: dict, 500: dict},
        description="Validate cart data (structure + numeric rules) without calculating totals.",
    )
    def post(self, request):
        started = time.perf_counter()

        serializer = ValidateCartInputSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        try:
            result = validate_cart_data(serializer.validated_data["cart_data"])
            payload = ValidationResultSerializer(result).data
        except Exception as exc:
            logger.exception("Cart data validation failed")
            error_tracker.record(VALIDATION_ERROR, "validate_endpoint")
            return error_response(
                code="VALIDATION_FAILED",
                message=str(exc) or "Cart data validation failed",
                http_status=status.HTTP_500_INTERNAL_SERVER_ERROR,
            )

        response_time = _elapsed_ms(started)
        logger.info(
            "Cart data validation completed",
            extra={
                "is_valid": result.is_valid,
                "error_count": len(result.errors),
                "response_time_ms": response_time,
            },
        )

        return Response(
            {
                "success": result.is_valid,
                "data": {"validation": payload, "validationTime": response_time},
                "message": "Cart data is valid" if result.is_valid else "Cart data validation failed",
                "timestamp": timezone.now().isoformat(),
            },
            status=status.HTTP_200_OK if result.is_valid else status.HTTP_400_BAD_REQUEST,
        )


class FormatCurrencyView(APIView):
    """
    Format + round amounts for display.
    """

    permission_classes = [IsAuthenticated]
    serializer_class = None

    @extend_schema(
        request=FormatCurrencyInputSerializer,
        responses={200: dict},
        description="Format amounts for a locale/currency; unsupported combinations fall back to $X.XX.",
    )
    def post(self, request):
        serializer = FormatCurrencyInputSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        locale = serializer.validated_data["locale"] or _pricing_setting("DEFAULT_LOCALE", "en_US")
        currency = serializer.validated_data["currency"] or _pricing_setting("DEFAULT_CURRENCY", "USD")

        formatted = [
            {
                "original": str(amount),
                "formatted": format_currency(amount, locale, currency),
                "rounded": str(round_currency(amount)),
            }
            for amount in serializer.validated_data["amounts"]
        ]

        return Response(
            {
                "success": True,
                "data": {"formattedAmounts": formatted, "locale": locale, "currency": currency},
                "timestamp": timezone.now().isoformat(),
            },
            status=status.HTTP_200_OK,
        )
