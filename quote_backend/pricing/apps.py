# pricing/apps.py

"""
PRICING APP CONFIG

Server-side financial calculation engine for quotes and POS carts:
- line + cart-wide discounts
- tax
- cart pre-flight validation
"""

from django.apps import AppConfig


class PricingConfig(AppConfig):
    default_auto_field = "django.db.models.BigAutoField"
    name = "pricing"
    verbose_name = "Pricing Engine"
