import datetime
from decimal import Decimal

from django.core.exceptions import ValidationError
from django.test import TestCase

from ..models import Budget, BudgetRevision, Invoice, VendorBill
from ..services import (budget_vs_actual, cost_center_performance,
                        create_budget, create_document, deactivate_budget,
                        revise_budget)
from ..services.reports import percentage
from .helpers import ErpFixtureMixin

Q1_START = datetime.date(2026, 1, 1)
Q1_END = datetime.date(2026, 3, 31)


class BudgetTests(ErpFixtureMixin, TestCase):
    def test_create_and_reject_duplicate(self):
        budget = create_budget(
            name="Production Q1", analytical_account=self.prod,
            period_start=Q1_START, period_end=Q1_END, amount="100000")
        self.assertEqual(budget.effective_amount, Decimal("100000"))
        with self.assertRaises(ValidationError):
            create_budget(
                name="Again", analytical_account=self.prod,
                period_start=Q1_START, period_end=Q1_END, amount="5")

    def test_invalid_period_and_amount(self):
        with self.assertRaises(ValidationError):
            create_budget(name="Backwards", analytical_account=self.prod,
                          period_start=Q1_END, period_end=Q1_START, amount="10")
        with self.assertRaises(ValidationError):
            create_budget(name="Negative", analytical_account=self.prod,
                          period_start=Q1_START, period_end=Q1_END, amount="-1")
        self.assertFalse(Budget.objects.exists())

    def test_revision_history(self):
        budget = create_budget(name="Sales Q1", analytical_account=self.sales,
                               period_start=Q1_START, period_end=Q1_END, amount="50000")
        revise_budget(budget, revised_amount="65000", reason="Trade fair")
        revise_budget(budget, notes="no amount change")

        budget.refresh_from_db()
        self.assertEqual(budget.effective_amount, Decimal("65000.00"))
        revision = BudgetRevision.objects.get(budget=budget)
        self.assertEqual(revision.previous_amount, Decimal("50000.00"))
        self.assertEqual(revision.new_amount, Decimal("65000.00"))
        self.assertEqual(revision.reason, "Trade fair")
        with self.assertRaises(ValidationError):
            revision.save()

    def test_revise_rejects_unknown_field(self):
        budget = create_budget(name="Admin Q1", analytical_account=self.admin_cc,
                               period_start=Q1_START, period_end=Q1_END, amount="1000")
        with self.assertRaises(ValidationError):
            revise_budget(budget, analytical_account=self.prod)


class ReportTests(ErpFixtureMixin, TestCase):
    def setUp(self):
        super().setUp()
        create_budget(name="Production Q1", analytical_account=self.prod,
                      period_start=Q1_START, period_end=Q1_END, amount="100000")
        create_budget(name="Sales Q1", analytical_account=self.sales,
                      period_start=Q1_START, period_end=Q1_END, amount="0")
        # 10 × 2500 + 18% = 29500 to Production
        create_document(VendorBill, self.vendor, [{"product": self.teak, "quantity": 10}],
                        post=True, date=self.today)
        # drafts and bills outside the period do not count
        create_document(VendorBill, self.vendor, [{"product": self.teak, "quantity": 99}],
                        date=self.today)
        create_document(VendorBill, self.vendor, [{"product": self.teak, "quantity": 1}],
                        post=True, date=datetime.date(2026, 4, 2))
        create_document(Invoice, self.customer, self.invoice_lines(), post=True, date=self.today)

    def test_budget_vs_actual(self):
        report = budget_vs_actual(Q1_START, Q1_END)
        items = {item["analytical_account_code"]: item for item in report["items"]}

        prod = items["PROD"]
        self.assertEqual(prod["actual_amount"], Decimal("29500.00"))
        self.assertEqual(prod["variance"], Decimal("70500.00"))
        self.assertEqual(prod["utilization_percentage"], Decimal("29.50"))
        self.assertEqual(prod["remaining_balance"], Decimal("70500.00"))
        # zero budget never divides by zero
        self.assertEqual(items["SALES"]["utilization_percentage"], Decimal("0.00"))

        self.assertEqual(report["total_budget"], Decimal("100000.00"))
        self.assertEqual(report["total_actual"], Decimal("29500.00"))
        self.assertEqual(report["overall_utilization"], Decimal("29.50"))

    def test_budget_vs_actual_for_one_cost_center(self):
        report = budget_vs_actual(Q1_START, Q1_END, analytical_account=self.sales)
        self.assertEqual(len(report["items"]), 1)
        self.assertEqual(report["total_actual"], Decimal("0.00"))

    def test_inactive_budgets_are_ignored(self):
        deactivate_budget(Budget.objects.get(analytical_account=self.prod))
        report = budget_vs_actual(Q1_START, Q1_END)
        self.assertEqual(report["total_budget"], Decimal("0.00"))

    def test_over_budget_has_no_remaining_balance(self):
        revise_budget(Budget.objects.get(analytical_account=self.prod), revised_amount="20000")
        item = budget_vs_actual(Q1_START, Q1_END, analytical_account=self.prod)["items"][0]
        self.assertEqual(item["variance"], Decimal("-9500.00"))
        self.assertEqual(item["remaining_balance"], Decimal("0.00"))
        self.assertEqual(item["utilization_percentage"], Decimal("147.50"))

    def test_cost_center_performance(self):
        rows = {row["code"]: row for row in cost_center_performance(Q1_START, Q1_END)}
        self.assertEqual(rows["PROD"]["expenses"], Decimal("29500.00"))
        self.assertEqual(rows["PROD"]["net_contribution"], Decimal("-29500.00"))
        self.assertEqual(rows["SALES"]["revenue"], Decimal("108560.00"))
        self.assertEqual(rows["ADMIN"]["net_contribution"], Decimal("0.00"))

    def test_percentage_rounds_half_up(self):
        self.assertEqual(percentage(Decimal("1"), Decimal("8")), Decimal("12.50"))
        self.assertEqual(percentage(Decimal("1"), Decimal("3")), Decimal("33.33"))
        self.assertEqual(percentage(Decimal("5"), Decimal("0")), Decimal("0.00"))
