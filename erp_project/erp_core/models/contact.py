from decimal import Decimal
from django.core.exceptions import ValidationError
from django.db import models
from ..managers import ActiveManager

CONTACT_TYPES = [
    ("customer", "Customer"),
    ("vendor", "Vendor"),
    ("both", "Customer & vendor"),
]


# ---------- Contact ----------
# Counterparty on every document: vendors on purchase side, customers on sales side
class Contact(models.Model):

    # Generated from the "contact" sequence when left blank (e.g. "C-01001")
    code = models.CharField(max_length=32, unique=True, blank=True)

    # The contact's legal or trade name
    name = models.CharField(max_length=200)
    contact_type = models.CharField(
        max_length=10, choices=CONTACT_TYPES, default="customer")

    # Optional contact for billing/communication (portal invites go here)
    email = models.EmailField(null=True, blank=True)
    phone = models.CharField(max_length=32, blank=True)

    address = models.TextField(blank=True)
    city = models.CharField(max_length=100, blank=True)
    state = models.CharField(max_length=100, blank=True)
    country = models.CharField(max_length=100, default="India")
    pincode = models.CharField(max_length=16, blank=True)
    gstin = models.CharField(max_length=20, blank=True)  # GST registration

    credit_limit = models.DecimalField(
        max_digits=18, decimal_places=2, null=True, blank=True)
    # Standard credit terms
    payment_terms_days = models.PositiveIntegerField(default=30)
    """ Example: If terms = 30 → bill/invoice due 30 days after issue. """

    # Soft delete: documents keep pointing at inactive contacts
    is_active = models.BooleanField(default=True)
    created_at = models.DateTimeField(auto_now_add=True)

    objects = ActiveManager()

    class Meta:
        ordering = ("name",)
        indexes = [
            models.Index(fields=["contact_type"], name="ix_contact_type"),
            models.Index(fields=["name"], name="ix_contact_name"),
        ]

    def __str__(self):
        return self.name

    @property
    def is_customer(self):
        return self.contact_type in ("customer", "both")

    @property
    def is_vendor(self):
        return self.contact_type in ("vendor", "both")

    def clean(self):
        if self.credit_limit is not None and self.credit_limit < Decimal("0"):
            raise ValidationError("Credit limit must be >= 0")

    def save(self, *args, **kwargs):
        # lazy import to avoid circular import at module load time
        from ..services.sequences import next_sequence

        if not self.code:
            self.code = next_sequence("contact")
        self.full_clean()  # run validations before saving
        return super().save(*args, **kwargs)
