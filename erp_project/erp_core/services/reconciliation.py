import logging
from decimal import Decimal

from django.db import models, transaction
from django.db.models import Sum
from django.db.models.functions import Coalesce

logger = logging.getLogger(__name__)

ZERO = Decimal("0.00")


def payment_status(document, paid: Decimal) -> str:
    """
    Status a bill/invoice should have for a given paid amount:
        paid >= total → paid
        paid > 0      → partially_paid
        otherwise     → posted (bills) / sent (invoices)
    Drafts and cancelled documents keep their status.
    """
    if document.status in ("draft", "cancelled"):
        return document.status
    if paid >= document.total_amount:
        return "paid"
    if paid > ZERO:
        return "partially_paid"
    return document.POSTED_STATUS


def reconcile_document(document_or_model, pk=None):
    """
    Recompute paid_amount and the payment-driven status of one bill/invoice
    from its linked payments.
    Call with an instance, or with (model class, pk) when the instance may
    already be gone (e.g. after a payment delete). A missing document is
    a no-op and returns None.
    Idempotent: running it twice yields the same stored state.
    """
    if pk is None:
        model, pk = type(document_or_model), document_or_model.pk
    else:
        model = document_or_model

    with transaction.atomic():
        # lock the document row until the transaction finishes
        document = model.objects.select_for_update().filter(pk=pk).first()
        if document is None:
            logger.info("Skipping reconciliation: %s %s not found",
                        model.__name__, pk)
            return None

        paid = document.payments.aggregate(
            total=Coalesce(Sum("amount"), ZERO, output_field=models.DecimalField())
        )["total"]
        new_status = payment_status(document, paid)

        if document.paid_amount == paid and document.status == new_status:
            return document

        logger.info(
            "Reconciled %s: paid %s -> %s, status %s -> %s",
            document, document.paid_amount, paid, document.status, new_status,
        )
        document.paid_amount = paid
        document.status = new_status
        # status is set directly: reconciliation owns payment-driven moves
        document.save(update_fields=["paid_amount", "status", "updated_at"])
        return document
