"""
PATH: pricing/urls.py

PRICING URLS

- Engine health check + error statistics
- Cart calculation + pre-flight validation
- Currency display formatting
"""

from django.urls import path

from pricing.views import (
    CalculateCartView,
    FormatCurrencyView,
    PricingErrorStatsView,
    PricingHealthCheckView,
    ValidateCartView,
)

app_name = "pricing"

urlpatterns = [
    path("health/", PricingHealthCheckView.as_view(), name="health"),
    path("errors/", PricingErrorStatsView.as_view(), name="errors"),

    path("calculate/", CalculateCartView.as_view(), name="calculate"),
    path("validate/", ValidateCartView.as_view(), name="validate"),

    path("format-currency/", FormatCurrencyView.as_view(), name="format-currency"),
]
