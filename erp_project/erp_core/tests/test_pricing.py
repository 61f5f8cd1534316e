from decimal import Decimal

from django.test import SimpleTestCase

from ..exceptions import InvalidLineValue
from ..services.pricing import price_line, price_lines


class LinePricingTests(SimpleTestCase):
    def test_worked_example_totals(self):
        priced = price_lines([
            {"quantity": 2, "unit_price": "25000", "tax_rate": "18"},
            {"quantity": 1, "unit_price": "42000", "tax_rate": "18"},
        ])
        self.assertEqual(priced.subtotal, Decimal("92000.00"))
        self.assertEqual(priced.tax_amount, Decimal("16560.00"))
        self.assertEqual(priced.total_amount, Decimal("108560.00"))
        self.assertEqual([p.line_total for p in priced.lines],
                         [Decimal("59000.00"), Decimal("49560.00")])

    def test_tax_is_rounded_half_up_per_line(self):
        # 10.10 * 5% = 0.505 → 0.51 on each line, so document tax is 1.02 (not 1.01)
        priced = price_lines([
            {"quantity": 1, "unit_price": "10.10", "tax_rate": "5"},
            {"quantity": 1, "unit_price": "10.10", "tax_rate": "5"},
        ])
        self.assertEqual(priced.lines[0].tax_amount, Decimal("0.51"))
        self.assertEqual(priced.tax_amount, Decimal("1.02"))
        self.assertEqual(priced.total_amount, Decimal("21.22"))

    def test_fractional_quantity(self):
        line = price_line("2.5", "99.99", "12")
        self.assertEqual(line.subtotal, Decimal("249.98"))  # 249.975 rounds up
        self.assertEqual(line.tax_amount, Decimal("30.00"))
        self.assertEqual(line.line_total, Decimal("279.98"))

    def test_subtotal_plus_tax_equals_total(self):
        priced = price_lines([
            {"quantity": "3", "unit_price": "333.33", "tax_rate": "7.5"},
            {"quantity": "7", "unit_price": "0.07", "tax_rate": "28"},
        ])
        self.assertEqual(priced.subtotal + priced.tax_amount, priced.total_amount)

    def test_no_lines_gives_zero_totals(self):
        priced = price_lines([])
        self.assertEqual(priced.lines, [])
        self.assertEqual(priced.total_amount, Decimal("0.00"))

    def test_zero_price_and_zero_rate_are_allowed(self):
        line = price_line(1, 0, 0)
        self.assertEqual(line.line_total, Decimal("0.00"))

    def test_invalid_values_are_rejected(self):
        for quantity, price, rate in [
            (0, "10", "18"),
            (-1, "10", "18"),
            (1, "-0.01", "18"),
            (1, "10", "-5"),
            ("abc", "10", "18"),
            (None, "10", "18"),
        ]:
            with self.subTest(quantity=quantity, price=price, rate=rate):
                with self.assertRaises(InvalidLineValue):
                    price_line(quantity, price, rate)

    def test_one_bad_line_rejects_the_document(self):
        with self.assertRaises(InvalidLineValue):
            price_lines([
                {"quantity": 1, "unit_price": "10", "tax_rate": "18"},
                {"quantity": 0, "unit_price": "10", "tax_rate": "18"},
            ])
