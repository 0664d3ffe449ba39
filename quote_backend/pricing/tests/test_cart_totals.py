from decimal import Decimal

from django.test import SimpleTestCase

from pricing.cart import CartData, CartItem, Discount, LaborItem
from pricing.services.cart_totals import calculate_comprehensive_cart_totals


def item(price, quantity, discount=None, product_id="SKU-1", name="Item"):
    return CartItem(
        product_id=product_id,
        name=name,
        price=Decimal(str(price)),
        quantity=Decimal(str(quantity)),
        discount=discount,
    )


def labor(rate, quantity, discount=None, name="Labor"):
    return LaborItem(
        name=name,
        rate_type="hourly",
        rate=Decimal(str(rate)),
        quantity=Decimal(str(quantity)),
        discount=discount,
    )


class ComprehensiveCartTotalsTests(SimpleTestCase):
    """
    Order of operations:
    line discounts -> grand subtotal -> cart-wide discount -> tax -> final total
    """

    # =========================================================
    # HAPPY PATH
    # =========================================================
    def test_single_item_with_percentage_discount(self):
        cart = CartData(items=(item("100.00", 2, Discount(type="percentage", value=Decimal("10"))),))

        calc = calculate_comprehensive_cart_totals(cart, Decimal("0.10"))

        self.assertTrue(calc.is_valid)
        self.assertEqual(calc.errors, ())
        self.assertEqual(calc.totals.items_subtotal, Decimal("200.00"))
        self.assertEqual(calc.totals.item_discounts, Decimal("20.00"))
        self.assertEqual(calc.totals.subtotal, Decimal("180.00"))
        self.assertEqual(calc.totals.tax_amount, Decimal("18.00"))
        self.assertEqual(calc.totals.final_total, Decimal("198.00"))

    def test_items_labor_and_cart_wide_discount(self):
        cart = CartData(
            items=(item("50", 2, Discount(type="nominal", value=Decimal("10"))),),
            labor_items=(labor("75", "1.5", Discount(type="percentage", value=Decimal("20"))),),
            total_discount=Discount(type="nominal", value=Decimal("30")),
        )

        calc = calculate_comprehensive_cart_totals(cart, Decimal("0.08"))

        totals = calc.totals
        self.assertTrue(calc.is_valid)
        self.assertEqual(totals.items_subtotal, Decimal("100.00"))
        self.assertEqual(totals.item_discounts, Decimal("10.00"))
        self.assertEqual(totals.labor_subtotal, Decimal("112.50"))
        self.assertEqual(totals.labor_discounts, Decimal("22.50"))
        self.assertEqual(totals.subtotal, Decimal("180.00"))
        self.assertEqual(totals.total_discount.applied_amount, Decimal("30.00"))
        self.assertEqual(totals.tax_amount, Decimal("12.00"))
        self.assertEqual(totals.final_total, Decimal("162.00"))

    def test_empty_cart_is_all_zeros(self):
        calc = calculate_comprehensive_cart_totals(CartData(), Decimal("0.10"))

        self.assertTrue(calc.is_valid)
        self.assertEqual(calc.totals.subtotal, Decimal("0.00"))
        self.assertEqual(calc.totals.final_total, Decimal("0.00"))

    def test_updated_cart_carries_line_totals_and_metadata(self):
        cart = CartData(items=(item("19.99", 3, Discount(type="nominal", value=Decimal("5"))),))

        calc = calculate_comprehensive_cart_totals(cart, Decimal("0.10"))

        line = calc.updated_cart_data.items[0]
        self.assertEqual(line.subtotal, Decimal("59.97"))
        self.assertEqual(line.total, Decimal("54.97"))
        self.assertEqual(line.discount.applied_amount, Decimal("5.00"))
        self.assertEqual(calc.updated_cart_data.totals, calc.totals)
        self.assertIsNotNone(calc.updated_cart_data.metadata)
        self.assertGreaterEqual(calc.updated_cart_data.metadata.calculation_time_ms, 0)

    def test_input_cart_is_not_mutated(self):
        cart = CartData(items=(item("10", 1, Discount(type="nominal", value=Decimal("1"))),))

        calculate_comprehensive_cart_totals(cart, Decimal("0.10"))

        self.assertIsNone(cart.totals)
        self.assertIsNone(cart.items[0].total)
        self.assertIsNone(cart.items[0].discount.applied_amount)

    # =========================================================
    # PROPERTIES
    # =========================================================
    def test_recalculation_is_idempotent(self):
        cart = CartData(
            items=(item("33.33", 3, Discount(type="percentage", value=Decimal("7.5"))),),
            labor_items=(labor("85", "2.25"),),
        )

        first = calculate_comprehensive_cart_totals(cart, Decimal("0.0825"))
        second = calculate_comprehensive_cart_totals(first.updated_cart_data, Decimal("0.0825"))

        self.assertEqual(first.totals, second.totals)

    def test_items_subtotal_grows_with_quantity(self):
        previous = Decimal("-1")
        for quantity in range(1, 6):
            calc = calculate_comprehensive_cart_totals(CartData(items=(item("12.49", quantity),)))
            self.assertGreater(calc.totals.items_subtotal, previous)
            previous = calc.totals.items_subtotal

    def test_oversized_nominal_discount_never_goes_negative(self):
        cart = CartData(items=(item("10", 1, Discount(type="nominal", value=Decimal("999999999"))),))

        calc = calculate_comprehensive_cart_totals(cart, Decimal("0.10"))

        self.assertTrue(calc.is_valid)
        self.assertEqual(calc.totals.item_discounts, Decimal("10.00"))
        self.assertEqual(calc.totals.final_total, Decimal("0.00"))

    def test_large_totals_beyond_working_precision(self):
        cart = CartData(items=(item("1000000000000000000", 1),))

        calc = calculate_comprehensive_cart_totals(cart, Decimal("0.10"))

        self.assertTrue(calc.is_valid)
        self.assertEqual(calc.errors, ())
        self.assertEqual(calc.totals.subtotal, Decimal("1000000000000000000.00"))
        self.assertEqual(calc.totals.tax_amount, Decimal("100000000000000000.00"))
        self.assertEqual(calc.totals.final_total, Decimal("1100000000000000000.00"))

    # =========================================================
    # PARTIAL FAILURES (calculation continues)
    # =========================================================
    def test_invalid_cart_wide_discount_is_reported_and_skipped(self):
        cart = CartData(
            items=(item("100", 1),),
            total_discount=Discount(type="percentage", value=Decimal("150")),
        )

        calc = calculate_comprehensive_cart_totals(cart, Decimal("0.10"))

        self.assertFalse(calc.is_valid)
        self.assertEqual([e.field for e in calc.errors], ["totalDiscount"])
        self.assertEqual(calc.totals.total_discount.applied_amount, Decimal("0.00"))
        self.assertEqual(calc.totals.final_total, Decimal("110.00"))

    def test_invalid_tax_rate_is_reported_and_untaxed(self):
        cart = CartData(items=(item("100", 1),))

        calc = calculate_comprehensive_cart_totals(cart, Decimal("1.5"))

        self.assertFalse(calc.is_valid)
        self.assertEqual([e.field for e in calc.errors], ["tax"])
        self.assertEqual(calc.totals.tax_amount, Decimal("0.00"))
        self.assertEqual(calc.totals.final_total, Decimal("100.00"))

    def test_errors_accumulate(self):
        cart = CartData(
            items=(item("100", 1),),
            total_discount=Discount(type="nominal", value=Decimal("-1")),
        )

        calc = calculate_comprehensive_cart_totals(cart, Decimal("2"))

        self.assertEqual([e.field for e in calc.errors], ["totalDiscount", "tax"])

    def test_rejected_line_discount_is_not_a_cart_error(self):
        cart = CartData(items=(item("40", 1, Discount(type="percentage", value=Decimal("150"))),))

        calc = calculate_comprehensive_cart_totals(cart, Decimal("0"))

        self.assertTrue(calc.is_valid)
        self.assertEqual(calc.totals.item_discounts, Decimal("0.00"))
        self.assertEqual(calc.totals.final_total, Decimal("40.00"))

    # =========================================================
    # TOTAL FAILURE (fallback totals)
    # =========================================================
    def test_missing_cart_returns_fallback(self):
        calc = calculate_comprehensive_cart_totals(None, Decimal("0.10"))

        self.assertFalse(calc.is_valid)
        self.assertEqual(calc.errors[0].field, "calculation")
        self.assertEqual(calc.errors[0].message, "Comprehensive calculation failed")
        self.assertEqual(calc.totals.final_total, Decimal("0.00"))
        self.assertIsNone(calc.updated_cart_data)

    def test_broken_line_falls_back_to_undiscounted_float_totals(self):
        cart = CartData(
            items=(
                CartItem(
                    product_id="SKU-1",
                    name="Cable",
                    price=Decimal("20"),
                    quantity=Decimal("2"),
                    discount="broken",
                ),
            )
        )

        calc = calculate_comprehensive_cart_totals(cart, Decimal("0.10"))

        self.assertFalse(calc.is_valid)
        self.assertEqual(calc.errors[-1].field, "calculation")
        self.assertEqual(calc.totals.items_subtotal, Decimal("40.00"))
        self.assertEqual(calc.totals.item_discounts, Decimal("0.00"))
        self.assertEqual(calc.totals.tax_amount, Decimal("4.00"))
        self.assertEqual(calc.totals.final_total, Decimal("44.00"))
        self.assertIs(calc.updated_cart_data, cart)
