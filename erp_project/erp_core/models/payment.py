from decimal import Decimal
from django.core.exceptions import ValidationError
from django.db import models
from django.db.models import Q
from django.utils import timezone
from .contact import Contact
from .purchase import VendorBill
from .sales import Invoice

PAYMENT_TYPES = [
    ("inbound", "Inbound (customer pays us)"),
    ("outbound", "Outbound (we pay a vendor)"),
]

PAYMENT_METHODS = [
    ("cash", "Cash"),
    ("cheque", "Cheque"),
    ("bank_transfer", "Bank transfer"),
    ("card", "Card"),
    ("upi", "UPI"),
    ("other", "Other"),
]


# ---------- Payments ----------
class Payment(models.Model):
    """
    Money received from a customer or paid to a vendor.
    - optionally settles exactly one invoice or one vendor bill
    - immutable: corrections are delete + recreate, so reconciliation
      always sees the full set of payments
    """

    number = models.CharField(max_length=32, unique=True, blank=True)
    payment_type = models.CharField(max_length=10, choices=PAYMENT_TYPES)
    method = models.CharField(
        max_length=20, choices=PAYMENT_METHODS, default="bank_transfer")
    contact = models.ForeignKey(
        Contact, on_delete=models.PROTECT, related_name="payments")
    amount = models.DecimalField(max_digits=18, decimal_places=2)
    payment_date = models.DateField(default=timezone.localdate)
    reference = models.CharField(max_length=100, null=True, blank=True)  # cheque no., UTR …
    notes = models.TextField(null=True, blank=True)

    # At most one settled document; deleting it is blocked while payments exist
    invoice = models.ForeignKey(
        Invoice,
        null=True,
        blank=True,
        on_delete=models.PROTECT,
        related_name="payments",
    )
    vendor_bill = models.ForeignKey(
        VendorBill,
        null=True,
        blank=True,
        on_delete=models.PROTECT,
        related_name="payments",
    )

    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ("-payment_date", "-id")
        indexes = [
            models.Index(fields=["contact", "payment_date"], name="ix_payment_contact_date"),
        ]
        constraints = [
            models.CheckConstraint(
                condition=Q(amount__gt=0), name="ck_payment_amount_positive"),
            # a payment never settles an invoice and a bill at once
            models.CheckConstraint(
                condition=Q(invoice__isnull=True) | Q(vendor_bill__isnull=True),
                name="ck_payment_single_document",
            ),
        ]

    def __str__(self):
        return f"Payment {self.number or self.pk}: {self.amount}"

    @property
    def document(self):
        return self.invoice or self.vendor_bill

    def clean(self):
        if self.amount is not None and self.amount <= Decimal("0"):
            raise ValidationError("Payment amount must be > 0")
        if self.invoice_id and self.vendor_bill_id:
            raise ValidationError(
                "A payment can settle an invoice or a vendor bill, not both.")
        # Direction must match the settled document
        if self.invoice_id and self.payment_type != "inbound":
            raise ValidationError("Invoice payments must be inbound.")
        if self.vendor_bill_id and self.payment_type != "outbound":
            raise ValidationError("Vendor bill payments must be outbound.")
        # Payer/payee must be the document's counterparty
        if self.invoice_id and self.contact_id != self.invoice.customer_id:
            raise ValidationError("Payment contact must be the invoice customer.")
        if self.vendor_bill_id and self.contact_id != self.vendor_bill.vendor_id:
            raise ValidationError("Payment contact must be the bill vendor.")

    def save(self, *args, **kwargs):
        # lazy import to avoid circular import at module load time
        from ..services.sequences import next_sequence

        if self.pk:
            raise ValidationError(
                "Payments are immutable; delete and record a new one instead.")
        if not self.number:
            self.number = next_sequence("payment")
        self.full_clean()  # run validations before saving
        return super().save(*args, **kwargs)
