import logging

from django.db import transaction

from ..exceptions import (DependentRecordsExist, DocumentLocked,
                          DocumentNotFound, InvalidTransition)
from .audit_helper import log_action
from .reconciliation import reconcile_document

logger = logging.getLogger(__name__)


def lock_document(document):
    """Re-read `document` with a row lock; must run inside transaction.atomic()."""
    model = type(document)
    try:
        return model.objects.select_for_update().get(pk=document.pk)
    except model.DoesNotExist:
        raise DocumentNotFound(f"{model.__name__} {document.pk} does not exist")


def sync_state(target, source):
    """Copy the stored workflow state of `source` onto the caller's instance."""
    if target is not source:
        for field in ("status", "paid_amount", "updated_at"):
            setattr(target, field, getattr(source, field))
    return target


def ensure_lines_editable(document):
    if not document.lines_are_editable():
        if document.status == "cancelled":
            raise DocumentLocked(f"{document} is cancelled.")
        if document.IS_PAYABLE and document.has_payments():
            raise DocumentLocked(
                f"{document} has payments; delete them before editing lines.")
        raise DocumentLocked(f"{document} is {document.status}; only drafts can be edited.")


# ----------------------------------------------
# draft → posted / sent / confirmed
# ----------------------------------------------
def post_document(document, user=None):
    """
    Move a draft document to its posted state:
    bills → posted, invoices → sent, orders → confirmed.
    Requires at least one line.
    """
    with transaction.atomic():
        doc = lock_document(document)
        if doc.status != "draft":
            raise InvalidTransition(
                f"Only draft documents can be posted; {doc} is {doc.status}.")
        if not doc.lines.exists():
            raise InvalidTransition(f"Cannot post {doc} with no lines.")
        doc.transition_to(doc.POSTED_STATUS)
        if doc.IS_PAYABLE:
            # a zero-total bill/invoice is settled as soon as it is posted
            doc = reconcile_document(doc)
        log_action(
            action="post",
            instance=doc,
            user=user,
            changes={"status": doc.status, "total_amount": str(doc.total_amount)},
        )
    logger.info("Posted %s (%s)", doc, doc.status)
    return sync_state(document, doc)


def confirm_order(order, user=None):
    """Confirm a purchase or sales order."""
    if order.POSTED_STATUS != "confirmed":
        raise InvalidTransition(f"{order} is not an order.")
    return post_document(order, user=user)


# ----------------------------------------------
# → cancelled
# ----------------------------------------------
def cancel_document(document, user=None, reason=None):
    """
    Cancel a document (status only, the row is kept).
    Refused when:
        - it is already paid or has any payment linked
        - it is an order with bills/invoices raised from it
    """
    with transaction.atomic():
        doc = lock_document(document)
        if doc.status == "cancelled":
            return sync_state(document, doc)
        if doc.status == "paid":
            raise InvalidTransition(f"{doc} is paid and cannot be cancelled.")
        if doc.has_payments():
            raise DependentRecordsExist(
                f"{doc} has payments; delete them before cancelling.")
        if doc.has_dependents():
            raise DependentRecordsExist(
                f"{doc} has bills/invoices created from it and cannot be cancelled.")
        previous = doc.status
        doc.transition_to("cancelled")
        log_action(
            action="cancel",
            instance=doc,
            user=user,
            changes={"from": previous, "reason": reason},
        )
    logger.info("Cancelled %s (was %s)", doc, previous)
    return sync_state(document, doc)
