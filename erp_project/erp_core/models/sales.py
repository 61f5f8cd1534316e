from django.db import models
from .contact import Contact
from .document import Document, DocumentLine
from .purchase import ORDER_STATUS_CHOICES

INVOICE_STATUS_CHOICES = [
    ("draft", "Draft"),
    ("sent", "Sent"),
    ("partially_paid", "Partially paid"),
    ("paid", "Paid"),
    ("cancelled", "Cancelled"),
]


# ---------- Sales orders / lines ----------
class SalesOrder(Document):
    SEQUENCE_NAME = "sales_order"
    COUNTERPARTY_FIELD = "customer"
    POSTED_STATUS = "confirmed"
    DEPENDENTS_ATTR = "invoices"
    ALLOWED_TRANSITIONS = {
        "draft": ["confirmed", "cancelled"],
        "confirmed": ["cancelled"],
    }

    customer = models.ForeignKey(
        Contact,
        # prevent deleting a customer who has orders
        on_delete=models.PROTECT,
        related_name="sales_orders",
    )
    status = models.CharField(
        max_length=20, choices=ORDER_STATUS_CHOICES, default="draft")

    class Meta(Document.Meta):
        indexes = [
            models.Index(fields=["customer", "status"], name="ix_so_customer_status"),
            models.Index(fields=["date"], name="ix_so_date"),
        ]


class SalesOrderLine(DocumentLine):
    DOCUMENT_FIELD = "sales_order"

    sales_order = models.ForeignKey(
        SalesOrder, on_delete=models.CASCADE, related_name="lines")

    class Meta(DocumentLine.Meta):
        pass


# ---------- Customer invoices / lines ----------
# Accounts receivable document
""" Workflow:
    draft → sent → partially_paid → paid
    Payments move it between sent/partially_paid/paid (reconciliation only). """


class Invoice(Document):
    SEQUENCE_NAME = "invoice"
    COUNTERPARTY_FIELD = "customer"
    POSTED_STATUS = "sent"
    IS_PAYABLE = True
    ALLOWED_TRANSITIONS = {
        "draft": ["sent", "cancelled"],
        "sent": ["partially_paid", "paid", "cancelled"],
        "partially_paid": ["sent", "paid"],
        "paid": ["partially_paid", "sent"],
    }

    customer = models.ForeignKey(
        Contact,
        on_delete=models.PROTECT,
        related_name="invoices",
    )
    sales_order = models.ForeignKey(
        SalesOrder,
        null=True,
        blank=True,
        on_delete=models.PROTECT,
        related_name="invoices",
    )
    status = models.CharField(
        max_length=20, choices=INVOICE_STATUS_CHOICES, default="draft")

    class Meta(Document.Meta):
        indexes = [
            models.Index(fields=["customer", "status"], name="ix_inv_customer_status"),
            models.Index(fields=["date"], name="ix_inv_date"),
        ]


class InvoiceLine(DocumentLine):
    DOCUMENT_FIELD = "invoice"

    invoice = models.ForeignKey(
        Invoice, on_delete=models.CASCADE, related_name="lines")

    class Meta(DocumentLine.Meta):
        pass
