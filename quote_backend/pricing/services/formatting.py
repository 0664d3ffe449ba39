# pricing/services/formatting.py

"""
PATH: pricing/services/formatting.py

CURRENCY DISPLAY HELPERS

- format_currency(): locale-aware via Babel; unsupported locale/currency
  falls back to "$X.XX".
- round_currency(): banker's rounding to cents (re-exported from money).
"""

from __future__ import annotations

import logging
from decimal import localcontext

from babel.core import UnknownLocaleError
from babel.numbers import UnknownCurrencyError, format_currency as babel_format_currency
from babel.numbers import validate_currency

from pricing.services.money import quantize_money, round_currency, to_decimal

__all__ = ["format_currency", "round_currency"]

logger = logging.getLogger(__name__)

DEFAULT_LOCALE = "en_US"
DEFAULT_CURRENCY = "USD"


def _normalize_locale(locale: str) -> str:
    # accept BCP 47 tags ("en-US") as well as POSIX style ("en_US")
    return (locale or DEFAULT_LOCALE).strip().replace("-", "_")


def format_currency(amount, locale: str = DEFAULT_LOCALE, currency: str = DEFAULT_CURRENCY) -> str:
    value = quantize_money(to_decimal(amount))
    code = (currency or DEFAULT_CURRENCY).strip().upper()

    try:
        validate_currency(code)
        with localcontext() as ctx:
            ctx.prec = max(ctx.prec, value.adjusted() + 3)
            # always 2 fraction digits, whatever the currency's minor unit (JPY, KWD, ...)
            return babel_format_currency(
                value, code, locale=_normalize_locale(locale), currency_digits=False
            )
    except (UnknownLocaleError, UnknownCurrencyError, ValueError):
        logger.warning(
            "Currency formatting failed, using fallback",
            extra={"amount": str(value), "locale": locale, "currency": currency},
        )
        return f"${value:.2f}"
