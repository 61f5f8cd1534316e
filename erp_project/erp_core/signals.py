import logging

from django.db.models.signals import post_delete, post_save
from django.dispatch import receiver

from .models import (InvoiceLine, Payment, PurchaseOrderLine, SalesOrderLine,
                     VendorBillLine)

logger = logging.getLogger(__name__)

LINE_MODELS = (PurchaseOrderLine, VendorBillLine, SalesOrderLine, InvoiceLine)

"""
    Recalculate document totals when a line is added/updated/removed
    outside the document services (e.g. admin inlines).
    Lines of locked documents never get here: DocumentLine.save()/delete()
    raise DocumentLocked first.
"""


def document_line_changed(sender, instance, **kwargs):
    field = sender.DOCUMENT_FIELD
    document_model = sender._meta.get_field(field).related_model
    try:
        doc = document_model.objects.get(pk=getattr(instance, f"{field}_id"))
    except document_model.DoesNotExist:
        return
    # recompute and save only the changed fields to reduce churn
    doc.recalc_totals()
    doc.save(update_fields=["subtotal", "tax_amount", "total_amount", "updated_at"])
    if doc.IS_PAYABLE and doc.status != "draft":
        # lazy import to avoid circular import at module load time
        from .services.reconciliation import reconcile_document

        reconcile_document(doc)


for line_model in LINE_MODELS:
    post_save.connect(document_line_changed, sender=line_model,
                      dispatch_uid=f"{line_model.__name__}_totals_saved")
    post_delete.connect(document_line_changed, sender=line_model,
                        dispatch_uid=f"{line_model.__name__}_totals_deleted")


""" Keep paid_amount/status right however a payment disappears (admin, shell, services) """


@receiver(post_delete, sender=Payment)
def payment_deleted(sender, instance, **kwargs):
    # lazy import to avoid circular import at module load time
    from .models import Invoice, VendorBill
    from .services.reconciliation import reconcile_document

    if instance.invoice_id:
        reconcile_document(Invoice, instance.invoice_id)
    elif instance.vendor_bill_id:
        reconcile_document(VendorBill, instance.vendor_bill_id)
