from decimal import Decimal

from django.test import SimpleTestCase

from pricing.services.tax import TaxConfig, calculate_tax


class TaxCalculatorTests(SimpleTestCase):
    """
    Tax rate is a fraction (0.10 == 10%).
    """

    def test_default_rate_is_ten_percent(self):
        result = calculate_tax(Decimal("50"))

        self.assertTrue(result.is_valid)
        self.assertEqual(result.tax_amount, Decimal("5.00"))
        self.assertEqual(result.after_tax_amount, Decimal("55.00"))

    def test_rounding_is_deterministic(self):
        results = {calculate_tax(100, TaxConfig(rate=Decimal("0.085"))) for _ in range(5)}

        self.assertEqual(len(results), 1)
        result = results.pop()
        self.assertEqual(result.tax_amount, Decimal("8.50"))
        self.assertEqual(result.after_tax_amount, Decimal("108.50"))

    def test_rate_above_one_is_rejected(self):
        result = calculate_tax(100, TaxConfig(rate=Decimal("1.5")))

        self.assertFalse(result.is_valid)
        self.assertEqual(result.tax_amount, Decimal("0"))
        self.assertEqual(result.after_tax_amount, Decimal("100"))
        self.assertEqual(result.error, "Tax rate must be between 0 and 1")

    def test_negative_rate_is_rejected(self):
        result = calculate_tax(100, TaxConfig(rate=Decimal("-0.01")))

        self.assertFalse(result.is_valid)
        self.assertEqual(result.after_tax_amount, Decimal("100.00"))

    def test_inclusive_tax_does_not_add(self):
        result = calculate_tax(Decimal("100"), TaxConfig(rate=Decimal("0.085"), inclusive=True))

        self.assertTrue(result.is_valid)
        self.assertEqual(result.tax_amount, Decimal("8.50"))
        self.assertEqual(result.after_tax_amount, Decimal("100.00"))

    def test_rounding_methods(self):
        # 10.05 * 0.0725 = 0.728625
        amount = Decimal("10.05")
        rate = Decimal("0.0725")

        floor = calculate_tax(amount, TaxConfig(rate=rate, rounding_method="floor"))
        ceil = calculate_tax(amount, TaxConfig(rate=rate, rounding_method="ceil"))
        default = calculate_tax(amount, TaxConfig(rate=rate))

        self.assertEqual(floor.tax_amount, Decimal("0.72"))
        self.assertEqual(ceil.tax_amount, Decimal("0.73"))
        self.assertEqual(default.tax_amount, Decimal("0.73"))
        self.assertEqual(floor.after_tax_amount, Decimal("10.77"))

    def test_exact_midpoint_rounds_half_even(self):
        # 0.25 * 0.1 = 0.025
        config = TaxConfig(rate=Decimal("0.1"))

        self.assertEqual(calculate_tax(Decimal("0.25"), config).tax_amount, Decimal("0.02"))
        self.assertEqual(
            calculate_tax(
                Decimal("0.25"), TaxConfig(rate=Decimal("0.1"), rounding_method="ceil")
            ).tax_amount,
            Decimal("0.03"),
        )

    def test_unknown_rounding_method_uses_bankers_rounding(self):
        result = calculate_tax(Decimal("0.25"), TaxConfig(rate=Decimal("0.1"), rounding_method="nearest"))

        self.assertEqual(result.tax_amount, Decimal("0.02"))

    def test_malformed_amount_falls_back_without_raising(self):
        result = calculate_tax("abc", TaxConfig(rate=Decimal("0.1")))

        self.assertFalse(result.is_valid)
        self.assertEqual(result.error, "Tax calculation error occurred")
        self.assertEqual(result.tax_amount, Decimal("0.00"))
        self.assertEqual(result.after_tax_amount, Decimal("0.00"))
