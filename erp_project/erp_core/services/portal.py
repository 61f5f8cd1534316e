from django.core.exceptions import PermissionDenied

from ..exceptions import DocumentNotFound
from ..models import Invoice, Payment, VendorBill
from .payments import record_payment


def portal_contact(user):
    """The contact a portal user acts for; anyone else is refused."""
    contact = getattr(user, "contact", None)
    if not getattr(user, "is_authenticated", False) or contact is None:
        raise PermissionDenied("No contact is linked to this account.")
    return contact


def portal_invoices(user):
    # drafts are internal
    return (Invoice.objects.for_counterparty(portal_contact(user))
            .exclude(status="draft").order_by("-date", "-id"))


def portal_bills(user):
    return (VendorBill.objects.for_counterparty(portal_contact(user))
            .exclude(status="draft").order_by("-date", "-id"))


def portal_payments(user):
    return Payment.objects.filter(contact=portal_contact(user)).select_related(
        "invoice", "vendor_bill")


def portal_pay_invoice(user, invoice_id, amount, method="upi", reference=None):
    """A customer pays one of their own invoices (inbound payment)."""
    invoice = portal_invoices(user).filter(pk=invoice_id).first()
    if invoice is None:
        # other customers' invoices look the same as missing ones
        raise DocumentNotFound(f"Invoice {invoice_id} not found.")
    return record_payment(
        invoice, amount=amount, method=method, reference=reference, user=user)
