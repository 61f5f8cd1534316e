from django.db import models
from .contact import Contact
from .document import Document, DocumentLine

ORDER_STATUS_CHOICES = [
    ("draft", "Draft"),
    ("confirmed", "Confirmed"),
    ("cancelled", "Cancelled"),
]

BILL_STATUS_CHOICES = [
    ("draft", "Draft"),
    ("posted", "Posted"),
    ("partially_paid", "Partially paid"),
    ("paid", "Paid"),
    ("cancelled", "Cancelled"),
]


# ---------- Purchase orders / lines ----------
class PurchaseOrder(Document):
    SEQUENCE_NAME = "purchase_order"
    COUNTERPARTY_FIELD = "vendor"
    POSTED_STATUS = "confirmed"
    DEPENDENTS_ATTR = "vendor_bills"
    ALLOWED_TRANSITIONS = {
        "draft": ["confirmed", "cancelled"],
        "confirmed": ["cancelled"],
    }

    vendor = models.ForeignKey(
        Contact,
        # prevent deleting a vendor who has orders
        on_delete=models.PROTECT,
        related_name="purchase_orders",
    )
    status = models.CharField(
        max_length=20, choices=ORDER_STATUS_CHOICES, default="draft")

    class Meta(Document.Meta):
        indexes = [
            models.Index(fields=["vendor", "status"], name="ix_po_vendor_status"),
            models.Index(fields=["date"], name="ix_po_date"),
        ]


class PurchaseOrderLine(DocumentLine):
    DOCUMENT_FIELD = "purchase_order"

    # Deleting an order deletes its lines
    purchase_order = models.ForeignKey(
        PurchaseOrder, on_delete=models.CASCADE, related_name="lines")

    class Meta(DocumentLine.Meta):
        pass


# ---------- Vendor bills / lines ----------
# Accounts payable document, optionally raised from a purchase order
class VendorBill(Document):
    SEQUENCE_NAME = "vendor_bill"
    COUNTERPARTY_FIELD = "vendor"
    POSTED_STATUS = "posted"
    IS_PAYABLE = True
    ALLOWED_TRANSITIONS = {
        "draft": ["posted", "cancelled"],
        "posted": ["partially_paid", "paid", "cancelled"],
        "partially_paid": ["posted", "paid"],
        "paid": ["partially_paid", "posted"],
    }

    vendor = models.ForeignKey(
        Contact,
        on_delete=models.PROTECT,
        related_name="vendor_bills",
    )
    purchase_order = models.ForeignKey(
        PurchaseOrder,
        null=True,
        blank=True,
        # an order with bills can't be deleted
        on_delete=models.PROTECT,
        related_name="vendor_bills",
    )
    # Vendor's own bill number (e.g. "VB-4567")
    vendor_reference = models.CharField(max_length=64, null=True, blank=True)
    status = models.CharField(
        max_length=20, choices=BILL_STATUS_CHOICES, default="draft")

    class Meta(Document.Meta):
        indexes = [
            models.Index(fields=["vendor", "status"], name="ix_bill_vendor_status"),
            models.Index(fields=["date"], name="ix_bill_date"),
        ]


class VendorBillLine(DocumentLine):
    DOCUMENT_FIELD = "vendor_bill"

    vendor_bill = models.ForeignKey(
        VendorBill, on_delete=models.CASCADE, related_name="lines")

    class Meta(DocumentLine.Meta):
        pass
