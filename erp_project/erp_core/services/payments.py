import logging
from decimal import Decimal

from django.core.exceptions import ValidationError
from django.db import transaction

from ..exceptions import InvalidTransition, PaymentExceedsOutstanding
from ..models import Invoice, Payment, VendorBill
from .audit_helper import log_action
from .lifecycle import lock_document
from .pricing import to_decimal
from .reconciliation import reconcile_document

logger = logging.getLogger(__name__)


# ----------------------------
# Payment workflows
# ----------------------------
def record_payment(
    document=None,
    amount=None,
    method: str = "bank_transfer",
    payment_date=None,
    reference: str | None = None,
    notes: str | None = None,
    contact=None,
    payment_type: str | None = None,
    user=None,
) -> Payment:
    """
    Record a payment, optionally settling one invoice or vendor bill.
    Workflow:
        1. Lock the document row.
        2. Only sent/posted or partially paid documents accept payments.
        3. Amount must be > 0 and not exceed the outstanding balance.
        4. Create the payment, then reconcile the document.
    Without a document, `contact` and `payment_type` are required
    (e.g. an advance from a customer).
    """
    amount = to_decimal(amount, "amount")
    if amount <= Decimal("0"):
        raise ValidationError("Payment amount must be > 0")

    with transaction.atomic():
        fields = {
            "amount": amount,
            "method": method,
            "reference": reference,
            "notes": notes,
        }
        if payment_date is not None:
            fields["payment_date"] = payment_date

        if document is not None:
            doc = lock_document(document)
            if doc.status not in (doc.POSTED_STATUS, "partially_paid"):
                raise InvalidTransition(
                    f"{doc} is {doc.status}; payments need a {doc.POSTED_STATUS} "
                    "or partially paid document.")
            if amount > doc.outstanding_amount:
                raise PaymentExceedsOutstanding(
                    f"Payment {amount} exceeds outstanding {doc.outstanding_amount} on {doc}.")
            if isinstance(doc, Invoice):
                fields.update(invoice=doc, payment_type="inbound")
            elif isinstance(doc, VendorBill):
                fields.update(vendor_bill=doc, payment_type="outbound")
            else:
                raise ValidationError(f"{doc} does not accept payments.")
            fields["contact"] = doc.counterparty
        else:
            if contact is None or payment_type is None:
                raise ValidationError(
                    "A payment without a document needs a contact and a payment type.")
            fields.update(contact=contact, payment_type=payment_type)

        payment = Payment.objects.create(**fields)
        log_action(
            action="create",
            instance=payment,
            user=user,
            changes={"amount": str(amount), "document": str(document) if document else None},
        )

        if document is not None:
            doc = reconcile_document(doc)

    logger.info("Recorded %s against %s", payment, document or payment.contact)
    return payment


def delete_payment(payment: Payment, user=None):
    """
    Remove a payment (the only way to correct one) and re-derive the
    paid amount and status of the document it settled.
    """
    with transaction.atomic():
        target = None
        if payment.invoice_id:
            target = (Invoice, payment.invoice_id)
        elif payment.vendor_bill_id:
            target = (VendorBill, payment.vendor_bill_id)

        log_action(
            action="delete",
            instance=payment,
            user=user,
            changes={"number": payment.number, "amount": str(payment.amount)},
        )
        payment.delete()

        document = reconcile_document(*target) if target else None

    logger.info("Deleted payment %s", payment.number)
    return document
