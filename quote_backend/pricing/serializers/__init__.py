from .requests import (
    CalculateCartInputSerializer,
    CartDataInputSerializer,
    FormatCurrencyInputSerializer,
    ValidateCartInputSerializer,
)
from .responses import (
    CartCalculationSerializer,
    CartDataSerializer,
    CartTotalsSerializer,
    ValidationResultSerializer,
)

__all__ = [
    "CalculateCartInputSerializer",
    "CartDataInputSerializer",
    "FormatCurrencyInputSerializer",
    "ValidateCartInputSerializer",
    "CartCalculationSerializer",
    "CartDataSerializer",
    "CartTotalsSerializer",
    "ValidationResultSerializer",
]
