import datetime
from decimal import Decimal

from django.core.exceptions import ValidationError
from django.test import TestCase

from ..exceptions import (DependentRecordsExist, DocumentLocked,
                          InvalidLineValue, InvalidTransition)
from ..models import (AuditLog, Invoice, InvoiceLine, PurchaseOrder,
                      SalesOrder, SalesOrderLine, VendorBill)
from ..services import (cancel_document, confirm_order,
                        create_bill_from_purchase_order, create_document,
                        create_invoice_from_sales_order, post_document,
                        record_payment, update_document_header,
                        update_document_lines)
from .helpers import ErpFixtureMixin


class CreateDocumentTests(ErpFixtureMixin, TestCase):
    def test_invoice_totals_number_and_cost_centers(self):
        invoice = create_document(Invoice, self.customer, self.invoice_lines(), date=self.today)

        invoice.refresh_from_db()
        self.assertEqual(invoice.number, "INV-01001")
        self.assertEqual(invoice.status, "draft")
        self.assertEqual(invoice.subtotal, Decimal("92000.00"))
        self.assertEqual(invoice.tax_amount, Decimal("16560.00"))
        self.assertEqual(invoice.total_amount, Decimal("108560.00"))
        self.assertEqual(invoice.lines.count(), 2)
        # finished goods → Sales by rule
        self.assertTrue(all(line.analytical_account == self.sales for line in invoice.lines.all()))
        self.assertTrue(AuditLog.objects.filter(object_type="Invoice", action="create").exists())

    def test_numbers_are_sequential_per_document_type(self):
        first = create_document(Invoice, self.customer, self.invoice_lines())
        second = create_document(Invoice, self.customer, self.invoice_lines())
        order = create_document(PurchaseOrder, self.vendor, [{"product": self.teak, "quantity": 1}])
        self.assertEqual(first.number, "INV-01001")
        self.assertEqual(second.number, "INV-01002")
        self.assertEqual(order.number, "PO-01001")

    def test_prices_default_from_product(self):
        bill = create_document(VendorBill, self.vendor, [{"product": self.teak, "quantity": 10}])
        line = bill.lines.get()
        self.assertEqual(line.unit_price, Decimal("2500"))
        self.assertEqual(line.tax_rate, Decimal("18"))
        self.assertEqual(bill.total_amount, Decimal("29500.00"))

    def test_due_date_defaults_from_payment_terms(self):
        invoice = create_document(Invoice, self.customer, self.invoice_lines(), date=self.today)
        self.assertEqual(invoice.due_date, self.today + datetime.timedelta(days=45))

    def test_invalid_line_writes_nothing(self):
        lines = self.invoice_lines() + [{"product": self.desk, "quantity": 0}]
        with self.assertRaises(InvalidLineValue):
            create_document(Invoice, self.customer, lines)
        self.assertFalse(Invoice.objects.exists())
        self.assertFalse(InvoiceLine.objects.exists())

    def test_counterparty_type_is_checked(self):
        with self.assertRaises(ValidationError):
            create_document(Invoice, self.vendor, self.invoice_lines())
        with self.assertRaises(ValidationError):
            create_document(PurchaseOrder, self.customer, [{"product": self.teak, "quantity": 1}])

    def test_explicit_cost_center_is_kept(self):
        lines = [{"product": self.teak, "quantity": 1, "analytical_account": self.admin_cc.pk}]
        order = create_document(PurchaseOrder, self.vendor, lines)
        self.assertEqual(order.lines.get().analytical_account, self.admin_cc)

    def test_empty_draft_is_allowed_but_cannot_be_posted(self):
        invoice = create_document(Invoice, self.customer, [])
        self.assertEqual(invoice.total_amount, Decimal("0.00"))
        with self.assertRaises(InvalidTransition):
            post_document(invoice)
        invoice.refresh_from_db()
        self.assertEqual(invoice.status, "draft")

    def test_create_and_post(self):
        invoice = create_document(Invoice, self.customer, self.invoice_lines(), post=True)
        self.assertEqual(invoice.status, "sent")


class UpdateDocumentTests(ErpFixtureMixin, TestCase):
    def setUp(self):
        super().setUp()
        self.invoice = create_document(Invoice, self.customer, self.invoice_lines(), date=self.today)

    def test_replace_lines_on_draft(self):
        doc = update_document_lines(
            self.invoice, [{"product": self.desk, "quantity": 1, "unit_price": "1000", "tax_rate": "5"}],
            notes="Revised")
        doc.refresh_from_db()
        self.assertEqual(doc.lines.count(), 1)
        self.assertEqual(doc.total_amount, Decimal("1050.00"))
        self.assertEqual(doc.notes, "Revised")

    def test_posted_invoice_without_payments_is_editable(self):
        post_document(self.invoice)
        doc = update_document_lines(self.invoice, [{"product": self.desk, "quantity": 1}])
        self.assertEqual(doc.status, "sent")
        self.assertEqual(doc.total_amount, Decimal("29500.00"))

    def test_partially_paid_invoice_is_locked(self):
        post_document(self.invoice)
        record_payment(self.invoice, amount="50000")
        with self.assertRaises(DocumentLocked):
            update_document_lines(self.invoice, [{"product": self.desk, "quantity": 1}])
        self.invoice.refresh_from_db()
        self.assertEqual(self.invoice.total_amount, Decimal("108560.00"))
        self.assertEqual(self.invoice.lines.count(), 2)

    def test_confirmed_order_is_locked(self):
        order = create_document(SalesOrder, self.customer, self.invoice_lines())
        confirm_order(order)
        with self.assertRaises(DocumentLocked):
            update_document_lines(order, [{"product": self.desk, "quantity": 1}])

    def test_cancelled_document_is_locked(self):
        cancel_document(self.invoice)
        with self.assertRaises(DocumentLocked):
            update_document_lines(self.invoice, self.invoice_lines())
        with self.assertRaises(DocumentLocked):
            update_document_header(self.invoice, notes="late")

    def test_failed_update_leaves_document_unchanged(self):
        with self.assertRaises(InvalidLineValue):
            update_document_lines(self.invoice, [{"product": self.desk, "quantity": 1, "unit_price": "-1"}])
        self.invoice.refresh_from_db()
        self.assertEqual(self.invoice.lines.count(), 2)
        self.assertEqual(self.invoice.total_amount, Decimal("108560.00"))

    def test_header_update(self):
        due = self.today + datetime.timedelta(days=10)
        doc = update_document_header(self.invoice, due_date=due, notes="Call first")
        doc.refresh_from_db()
        self.assertEqual(doc.due_date, due)
        with self.assertRaises(ValidationError):
            update_document_header(self.invoice, due_date=self.today - datetime.timedelta(days=1))
        with self.assertRaises(ValidationError):
            update_document_header(self.invoice, status="paid")


class LifecycleTests(ErpFixtureMixin, TestCase):
    def test_bill_post_and_cancel(self):
        bill = create_document(VendorBill, self.vendor, [{"product": self.teak, "quantity": 2}])
        post_document(bill)
        bill.refresh_from_db()
        self.assertEqual(bill.status, "posted")
        with self.assertRaises(InvalidTransition):
            post_document(bill)
        cancel_document(bill, reason="duplicate")
        bill.refresh_from_db()
        self.assertEqual(bill.status, "cancelled")

    def test_cancel_refused_when_payments_exist(self):
        invoice = create_document(Invoice, self.customer, self.invoice_lines(), post=True)
        record_payment(invoice, amount="1000")
        with self.assertRaises(DependentRecordsExist):
            cancel_document(invoice)
        invoice.refresh_from_db()
        self.assertEqual(invoice.status, "partially_paid")

    def test_paid_invoice_cannot_be_cancelled(self):
        invoice = create_document(Invoice, self.customer, self.invoice_lines(), post=True)
        record_payment(invoice, amount="108560")
        with self.assertRaises(ValidationError):
            cancel_document(invoice)

    def test_purchase_order_with_bill_cannot_be_cancelled(self):
        order = create_document(PurchaseOrder, self.vendor, [{"product": self.teak, "quantity": 10}])
        confirm_order(order)
        bill = create_bill_from_purchase_order(order)
        self.assertEqual(bill.purchase_order, order)
        self.assertEqual(bill.status, "draft")
        self.assertEqual(bill.total_amount, order.total_amount)

        with self.assertRaises(DependentRecordsExist):
            cancel_document(order)
        order.refresh_from_db()
        self.assertEqual(order.status, "confirmed")

    def test_purchase_order_without_bills_can_be_cancelled(self):
        order = create_document(PurchaseOrder, self.vendor, [{"product": self.teak, "quantity": 10}])
        confirm_order(order)
        cancel_document(order)
        order.refresh_from_db()
        self.assertEqual(order.status, "cancelled")

    def test_invoice_from_draft_sales_order_is_refused(self):
        order = create_document(SalesOrder, self.customer, self.invoice_lines())
        with self.assertRaises(ValidationError):
            create_invoice_from_sales_order(order)
        confirm_order(order)
        invoice = create_invoice_from_sales_order(order)
        self.assertEqual(invoice.sales_order, order)
        self.assertEqual(invoice.total_amount, Decimal("108560.00"))

    def test_confirm_order_rejects_invoices(self):
        invoice = create_document(Invoice, self.customer, self.invoice_lines())
        with self.assertRaises(InvalidTransition):
            confirm_order(invoice)

    def test_direct_invalid_transition(self):
        invoice = create_document(Invoice, self.customer, self.invoice_lines())
        with self.assertRaises(InvalidTransition):
            invoice.transition_to("paid")
        invoice.refresh_from_db()
        self.assertEqual(invoice.status, "draft")

    def test_order_with_dependents_cannot_be_deleted(self):
        order = create_document(PurchaseOrder, self.vendor, [{"product": self.teak, "quantity": 1}])
        confirm_order(order)
        create_bill_from_purchase_order(order)
        with self.assertRaises(DependentRecordsExist):
            order.delete()

    def test_line_edit_outside_services_updates_totals(self):
        invoice = create_document(Invoice, self.customer, self.invoice_lines())
        line = invoice.lines.first()
        line.quantity = Decimal("1")
        line.save()
        invoice.refresh_from_db()
        # 25000 + 18% = 29500 instead of 59000
        self.assertEqual(invoice.total_amount, Decimal("79060.00"))
        self.assertEqual(invoice.subtotal + invoice.tax_amount, invoice.total_amount)

    def test_lifecycle_services_update_the_callers_instance(self):
        order = create_document(SalesOrder, self.customer, self.invoice_lines())
        confirm_order(order)
        self.assertEqual(order.status, "confirmed")
        invoice = create_invoice_from_sales_order(order)
        post_document(invoice)
        self.assertEqual(invoice.status, "sent")
        cancel_document(invoice)
        self.assertEqual(invoice.status, "cancelled")

    def test_stale_order_copy_cannot_raise_a_bill(self):
        order = create_document(PurchaseOrder, self.vendor, [{"product": self.teak, "quantity": 1}])
        confirm_order(order)
        stale = PurchaseOrder.objects.get(pk=order.pk)
        cancel_document(order)
        # the copy still says "confirmed" but the stored order is cancelled
        self.assertEqual(stale.status, "confirmed")
        with self.assertRaises(ValidationError):
            create_bill_from_purchase_order(stale)
        self.assertFalse(VendorBill.objects.exists())


class ZeroTotalDocumentTests(ErpFixtureMixin, TestCase):
    def test_zero_total_invoice_is_paid_when_posted(self):
        invoice = create_document(
            Invoice, self.customer, [{"product": self.desk, "quantity": 1, "unit_price": "0"}],
            post=True)
        self.assertEqual(invoice.status, "paid")
        invoice.refresh_from_db()
        self.assertEqual(invoice.status, "paid")
        self.assertEqual(invoice.paid_amount, Decimal("0.00"))

    def test_repricing_a_settled_zero_total_invoice_reopens_it(self):
        invoice = create_document(
            Invoice, self.customer, [{"product": self.desk, "quantity": 1, "unit_price": "0"}],
            post=True)
        doc = update_document_lines(invoice, [{"product": self.desk, "quantity": 1}])
        self.assertEqual(doc.status, "sent")
        self.assertEqual(doc.total_amount, Decimal("29500.00"))


class DirectLineEditTests(ErpFixtureMixin, TestCase):
    """Saving or deleting a line outside the services obeys the same lock."""

    def test_paid_invoice_lines_are_frozen(self):
        invoice = create_document(Invoice, self.customer, self.invoice_lines(), post=True)
        record_payment(invoice, amount="108560")
        line = invoice.lines.first()
        line.quantity = Decimal("10")
        with self.assertRaises(DocumentLocked):
            line.save()
        with self.assertRaises(DocumentLocked):
            invoice.lines.first().delete()

        invoice.refresh_from_db()
        self.assertEqual(invoice.status, "paid")
        self.assertEqual(invoice.total_amount, Decimal("108560.00"))
        self.assertEqual(invoice.lines.count(), 2)
        self.assertLessEqual(invoice.total_amount, invoice.paid_amount)

    def test_no_new_line_on_confirmed_order(self):
        order = create_document(SalesOrder, self.customer, self.invoice_lines())
        confirm_order(order)
        with self.assertRaises(DocumentLocked):
            SalesOrderLine.objects.create(
                sales_order=order, product=self.desk, quantity=Decimal("1"),
                unit_price=Decimal("25000"), tax_rate=Decimal("18"))
        order.refresh_from_db()
        self.assertEqual(order.lines.count(), 2)
        self.assertEqual(order.total_amount, Decimal("108560.00"))

    def test_cancelled_invoice_lines_are_frozen(self):
        invoice = create_document(Invoice, self.customer, self.invoice_lines())
        cancel_document(invoice)
        line = invoice.lines.first()
        line.unit_price = Decimal("1")
        with self.assertRaises(DocumentLocked):
            line.save()

    def test_posted_invoice_without_payments_accepts_line_edits(self):
        invoice = create_document(Invoice, self.customer, self.invoice_lines(), post=True)
        line = invoice.lines.first()
        line.quantity = Decimal("1")
        line.save()
        invoice.refresh_from_db()
        self.assertEqual(invoice.status, "sent")
        self.assertEqual(invoice.total_amount, Decimal("79060.00"))
