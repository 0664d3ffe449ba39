from decimal import Decimal

from django.test import SimpleTestCase

from pricing.cart import CartItem, Discount, LaborItem
from pricing.services.discounts import (
    apply_item_totals,
    apply_labor_totals,
    calculate_line_discount,
    calculate_total_discount,
)


def pct(value):
    return Discount(type="percentage", value=Decimal(str(value)))


def nominal(value):
    return Discount(type="nominal", value=Decimal(str(value)))


class LineDiscountTests(SimpleTestCase):
    """
    GUARANTEES:
    - percentage discounts outside [0, 100] are rejected, never clamped
    - nominal discounts above the subtotal are clamped, never rejected
    - results are 2dp, banker's rounded
    """

    def test_no_discount_returns_subtotal(self):
        result = calculate_line_discount(Decimal("19.99"), 3)

        self.assertTrue(result.is_valid)
        self.assertEqual(result.discount_amount, Decimal("0.00"))
        self.assertEqual(result.final_amount, Decimal("59.97"))
        self.assertIsNone(result.error)

    def test_percentage_discount(self):
        result = calculate_line_discount(Decimal("100.00"), 2, pct(10))

        self.assertTrue(result.is_valid)
        self.assertEqual(result.discount_amount, Decimal("20.00"))
        self.assertEqual(result.final_amount, Decimal("180.00"))

    def test_full_percentage_discount_is_allowed(self):
        result = calculate_line_discount(Decimal("45.50"), 1, pct(100))

        self.assertTrue(result.is_valid)
        self.assertEqual(result.discount_amount, Decimal("45.50"))
        self.assertEqual(result.final_amount, Decimal("0.00"))

    def test_percentage_above_100_is_rejected_not_clamped(self):
        result = calculate_line_discount(Decimal("100"), 1, pct(150))

        self.assertFalse(result.is_valid)
        self.assertEqual(result.discount_amount, Decimal("0.00"))
        self.assertEqual(result.final_amount, Decimal("100.00"))
        self.assertIn("between 0 and 100", result.error)

    def test_negative_percentage_is_rejected(self):
        result = calculate_line_discount(Decimal("100"), 1, pct(-1))

        self.assertFalse(result.is_valid)
        self.assertEqual(result.final_amount, Decimal("100.00"))

    def test_nominal_discount(self):
        result = calculate_line_discount(Decimal("10"), 2, nominal("2.5"))

        self.assertTrue(result.is_valid)
        self.assertEqual(result.discount_amount, Decimal("2.50"))
        self.assertEqual(result.final_amount, Decimal("17.50"))

    def test_nominal_above_subtotal_is_clamped(self):
        """
        Business rule:
        A huge nominal discount saturates at the subtotal (final 0.00), it is not an error.
        """
        result = calculate_line_discount(Decimal("10"), 1, nominal(999999999))

        self.assertTrue(result.is_valid)
        self.assertIsNone(result.error)
        self.assertEqual(result.discount_amount, Decimal("10.00"))
        self.assertEqual(result.final_amount, Decimal("0.00"))

    def test_negative_nominal_is_rejected(self):
        result = calculate_line_discount(Decimal("10"), 1, nominal(-5))

        self.assertFalse(result.is_valid)
        self.assertEqual(result.discount_amount, Decimal("0.00"))
        self.assertEqual(result.final_amount, Decimal("10.00"))
        self.assertEqual(result.error, "Nominal discount cannot be negative")

    def test_unknown_discount_type_is_rejected(self):
        result = calculate_line_discount(Decimal("10"), 1, Discount(type="bogo", value=Decimal("1")))

        self.assertFalse(result.is_valid)
        self.assertEqual(result.final_amount, Decimal("10.00"))

    def test_midpoint_uses_bankers_rounding(self):
        # 0.25 * 50% = 0.125 -> 0.12 (half-even), not 0.13
        result = calculate_line_discount(Decimal("0.25"), 1, pct(50))

        self.assertEqual(result.discount_amount, Decimal("0.12"))
        self.assertEqual(result.final_amount, Decimal("0.12"))

    def test_float_input_has_no_binary_drift(self):
        result = calculate_line_discount(0.1, 3)

        self.assertEqual(result.final_amount, Decimal("0.30"))

    def test_malformed_discount_value_falls_back_without_raising(self):
        broken = Discount(type="percentage", value="ten")

        result = calculate_line_discount(Decimal("12.5"), 2, broken)

        self.assertFalse(result.is_valid)
        self.assertEqual(result.error, "Calculation error occurred")
        self.assertEqual(result.discount_amount, Decimal("0.00"))
        self.assertEqual(result.final_amount, Decimal("25.00"))

    def test_malformed_base_amount_falls_back_without_raising(self):
        result = calculate_line_discount("abc", 2)

        self.assertFalse(result.is_valid)
        self.assertEqual(result.final_amount, Decimal("0.00"))


class TotalDiscountTests(SimpleTestCase):
    def test_total_discount_uses_quantity_one(self):
        result = calculate_total_discount(Decimal("180.00"), nominal(30))

        self.assertTrue(result.is_valid)
        self.assertEqual(result.discount_amount, Decimal("30.00"))
        self.assertEqual(result.final_amount, Decimal("150.00"))

    def test_no_total_discount(self):
        result = calculate_total_discount(Decimal("180.00"))

        self.assertEqual(result.final_amount, Decimal("180.00"))


class ApplyLineTotalsTests(SimpleTestCase):
    def test_item_lines_get_subtotal_total_and_applied_amount(self):
        item = CartItem(
            product_id="SKU-1",
            name="Router",
            price=Decimal("100.00"),
            quantity=Decimal("2"),
            discount=pct(10),
        )

        updated, results = apply_item_totals([item])

        self.assertEqual(updated[0].subtotal, Decimal("200.00"))
        self.assertEqual(updated[0].total, Decimal("180.00"))
        self.assertEqual(updated[0].discount.applied_amount, Decimal("20.00"))
        self.assertTrue(results[0].is_valid)

    def test_input_items_are_not_mutated(self):
        item = CartItem(
            product_id="SKU-1",
            name="Router",
            price=Decimal("100.00"),
            quantity=Decimal("1"),
            discount=nominal(5),
        )

        apply_item_totals([item])

        self.assertIsNone(item.subtotal)
        self.assertIsNone(item.discount.applied_amount)

    def test_labor_lines_use_rate(self):
        labor = LaborItem(
            name="Installation",
            rate_type="hourly",
            rate=Decimal("75"),
            quantity=Decimal("1.5"),
        )

        updated, _ = apply_labor_totals([labor])

        self.assertEqual(updated[0].subtotal, Decimal("112.50"))
        self.assertEqual(updated[0].total, Decimal("112.50"))
        self.assertIsNone(updated[0].discount)
