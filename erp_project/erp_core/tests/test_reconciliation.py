import datetime
from decimal import Decimal

from django.core.exceptions import ValidationError
from django.db.models import ProtectedError
from django.test import TestCase

from ..exceptions import (DependentRecordsExist, InvalidTransition,
                          PaymentExceedsOutstanding)
from ..models import AuditLog, Invoice, Payment, VendorBill
from ..services import (cancel_document, create_document, delete_payment,
                        record_payment, reconcile_document)
from .helpers import ErpFixtureMixin


class InvoicePaymentTests(ErpFixtureMixin, TestCase):
    def setUp(self):
        super().setUp()
        self.invoice = create_document(Invoice, self.customer, self.invoice_lines(), post=True)

    def test_partial_then_full_payment(self):
        payment = record_payment(self.invoice, amount="50000", payment_date=self.today)
        self.invoice.refresh_from_db()
        self.assertEqual(payment.number, "PAY-01001")
        self.assertEqual(payment.payment_type, "inbound")
        self.assertEqual(payment.contact, self.customer)
        self.assertEqual(self.invoice.status, "partially_paid")
        self.assertEqual(self.invoice.paid_amount, Decimal("50000.00"))
        self.assertEqual(self.invoice.outstanding_amount, Decimal("58560.00"))

        record_payment(self.invoice, amount="58560")
        self.invoice.refresh_from_db()
        self.assertEqual(self.invoice.status, "paid")
        self.assertEqual(self.invoice.outstanding_amount, Decimal("0.00"))

    def test_overpayment_is_rejected(self):
        record_payment(self.invoice, amount="50000")
        with self.assertRaises(PaymentExceedsOutstanding):
            record_payment(self.invoice, amount="58560.01")
        self.assertEqual(Payment.objects.count(), 1)
        self.invoice.refresh_from_db()
        self.assertEqual(self.invoice.paid_amount, Decimal("50000.00"))

    def test_non_positive_amount_is_rejected(self):
        for amount in ("0", "-10"):
            with self.assertRaises(ValidationError):
                record_payment(self.invoice, amount=amount)
        self.assertFalse(Payment.objects.exists())

    def test_payment_on_draft_or_paid_invoice_is_refused(self):
        draft = create_document(Invoice, self.customer, self.invoice_lines())
        with self.assertRaises(InvalidTransition):
            record_payment(draft, amount="100")
        record_payment(self.invoice, amount="108560")
        with self.assertRaises(InvalidTransition):
            record_payment(self.invoice, amount="1")

    def test_reconcile_is_idempotent(self):
        record_payment(self.invoice, amount="50000")
        first = reconcile_document(self.invoice)
        second = reconcile_document(self.invoice)
        self.assertEqual((first.paid_amount, first.status), (second.paid_amount, second.status))
        self.assertEqual(second.status, "partially_paid")

    def test_reconcile_repairs_stale_state(self):
        Payment.objects.create(
            payment_type="inbound", contact=self.customer, amount=Decimal("108560"),
            invoice=self.invoice)
        self.invoice.refresh_from_db()
        self.assertEqual(self.invoice.status, "sent")

        doc = reconcile_document(Invoice, self.invoice.pk)
        self.assertEqual(doc.status, "paid")
        self.assertEqual(doc.paid_amount, Decimal("108560.00"))

    def test_missing_document_is_a_no_op(self):
        self.assertIsNone(reconcile_document(Invoice, 999999))

    def test_deleting_payments_reverts_status(self):
        first = record_payment(self.invoice, amount="50000")
        second = record_payment(self.invoice, amount="58560")

        doc = delete_payment(second)
        self.assertEqual(doc.status, "partially_paid")
        self.assertEqual(doc.paid_amount, Decimal("50000.00"))

        doc = delete_payment(first)
        self.assertEqual(doc.status, "sent")
        self.assertEqual(doc.paid_amount, Decimal("0.00"))
        self.assertTrue(AuditLog.objects.filter(object_type="Payment", action="delete").exists())

    def test_plain_delete_also_reconciles(self):
        payment = record_payment(self.invoice, amount="108560")
        payment.delete()
        self.invoice.refresh_from_db()
        self.assertEqual(self.invoice.status, "sent")

    def test_payments_are_immutable(self):
        payment = record_payment(self.invoice, amount="1000")
        payment.amount = Decimal("2000")
        with self.assertRaises(ValidationError):
            payment.save()

    def test_invoice_with_payments_cannot_be_deleted_or_cancelled(self):
        record_payment(self.invoice, amount="1000")
        with self.assertRaises(DependentRecordsExist):
            self.invoice.delete()
        with self.assertRaises(DependentRecordsExist):
            cancel_document(self.invoice)
        self.assertTrue(Invoice.objects.filter(pk=self.invoice.pk).exists())

    def test_protected_at_database_level(self):
        record_payment(self.invoice, amount="1000")
        with self.assertRaises(ProtectedError):
            Invoice.objects.filter(pk=self.invoice.pk).delete()


class BillPaymentTests(ErpFixtureMixin, TestCase):
    def setUp(self):
        super().setUp()
        self.bill = create_document(
            VendorBill, self.vendor, [{"product": self.teak, "quantity": 10}],
            post=True, date=self.today)

    def test_outbound_payment_settles_bill(self):
        payment = record_payment(self.bill, amount="29500", method="cheque", reference="000123")
        self.bill.refresh_from_db()
        self.assertEqual(payment.payment_type, "outbound")
        self.assertEqual(payment.contact, self.vendor)
        self.assertEqual(self.bill.status, "paid")
        self.assertEqual(self.bill.due_date, self.today + datetime.timedelta(days=15))

    def test_payment_contact_must_match_document(self):
        with self.assertRaises(ValidationError):
            Payment.objects.create(
                payment_type="outbound", contact=self.customer,
                amount=Decimal("10"), vendor_bill=self.bill)

    def test_payment_direction_must_match_document(self):
        with self.assertRaises(ValidationError):
            Payment.objects.create(
                payment_type="inbound", contact=self.vendor,
                amount=Decimal("10"), vendor_bill=self.bill)


class StandalonePaymentTests(ErpFixtureMixin, TestCase):
    def test_advance_needs_contact_and_type(self):
        with self.assertRaises(ValidationError):
            record_payment(amount="5000")
        payment = record_payment(amount="5000", contact=self.customer, payment_type="inbound")
        self.assertIsNone(payment.document)
        self.assertIsNone(delete_payment(payment))
