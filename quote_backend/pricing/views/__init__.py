from .api import (
    CalculateCartView,
    FormatCurrencyView,
    PricingErrorStatsView,
    PricingHealthCheckView,
    ValidateCartView,
)

__all__ = [
    "CalculateCartView",
    "FormatCurrencyView",
    "PricingErrorStatsView",
    "PricingHealthCheckView",
    "ValidateCartView",
]
