import datetime
from decimal import Decimal

from django.core.exceptions import ValidationError
from django.db import models
from django.utils import timezone

from ..exceptions import DependentRecordsExist, InvalidTransition
from ..managers import DocumentManager
from .analytical import AnalyticalAccount
from .product import Product

ZERO = Decimal("0.00")


# ---------- Shared document header ----------
# Purchase orders, vendor bills, sales orders and invoices all share this shape.
# Concrete models add their counterparty FK, status choices and lines.
class Document(models.Model):

    # Overridden by concrete documents
    SEQUENCE_NAME = None  # key into Sequence table, e.g. "invoice"
    COUNTERPARTY_FIELD = None  # "vendor" or "customer"
    POSTED_STATUS = None  # status reached by posting/confirming
    IS_PAYABLE = False  # bills & invoices accept payments, orders don't
    DEPENDENTS_ATTR = None  # reverse relation holding bills/invoices of an order

    """ Workflow (bills/invoices):
        draft → posted/sent → partially_paid ⇄ paid
        draft/posted/sent → cancelled
        Payment-driven moves are made only by reconciliation. """
    ALLOWED_TRANSITIONS = {}

    # Human-readable number (e.g. "INV-01001") taken from the Sequence table
    number = models.CharField(max_length=32, unique=True, blank=True)
    date = models.DateField(default=timezone.localdate)  # issue / order date
    # payment deadline (or expected delivery date for orders)
    due_date = models.DateField(null=True, blank=True)

    # Aggregates over lines: subtotal + tax_amount = total_amount
    subtotal = models.DecimalField(max_digits=18, decimal_places=2, default=ZERO)
    tax_amount = models.DecimalField(max_digits=18, decimal_places=2, default=ZERO)
    total_amount = models.DecimalField(max_digits=18, decimal_places=2, default=ZERO)
    # Sum of linked payments; only reconciliation writes it
    paid_amount = models.DecimalField(max_digits=18, decimal_places=2, default=ZERO)

    notes = models.TextField(null=True, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    objects = DocumentManager()

    class Meta:
        abstract = True
        ordering = ("-date", "-id")

    def __str__(self):
        # If no number yet, fall back to database ID
        return f"{self._meta.verbose_name.title()} {self.number or self.pk}"

    @property
    def counterparty(self):
        return getattr(self, self.COUNTERPARTY_FIELD)

    @property
    def outstanding_amount(self):
        # overpayment is rejected upstream, but never report a negative balance
        return max(self.total_amount - self.paid_amount, ZERO)

    def has_payments(self):
        if not self.IS_PAYABLE or not self.pk:
            return False
        return self.payments.exists()

    def has_dependents(self):
        """True if bills/invoices were raised from this order."""
        if not self.DEPENDENTS_ATTR or not self.pk:
            return False
        return getattr(self, self.DEPENDENTS_ATTR).exists()

    def lines_are_editable(self):
        """
        Lines may change while the document is a draft; bills and invoices
        also stay editable after posting as long as no payment is linked.
        """
        if self.status == "draft":
            return True
        if self.IS_PAYABLE and self.status != "cancelled":
            return not self.has_payments()
        return False

    def recalc_totals(self):
        """ Keep stored aggregates in sync with the stored lines """
        # guard if no pk: there are no lines yet
        if not getattr(self, "pk", None):
            self.subtotal = self.tax_amount = self.total_amount = ZERO
            return
        subtotal = ZERO
        tax = ZERO
        for line in self.lines.all():
            subtotal += line.line_subtotal
            tax += line.tax_amount
        self.subtotal = subtotal
        self.tax_amount = tax
        self.total_amount = subtotal + tax

    def default_due_date(self):
        # counterparty payment terms, 30 days when unknown
        days = 30
        party = self.counterparty if getattr(self, f"{self.COUNTERPARTY_FIELD}_id") else None
        if party is not None and party.payment_terms_days:
            days = party.payment_terms_days
        return self.date + datetime.timedelta(days=days)

    def clean(self):
        if self.due_date and self.date and self.due_date < self.date:
            raise ValidationError("Due date cannot be before the document date.")
        party = self.counterparty if getattr(self, f"{self.COUNTERPARTY_FIELD}_id") else None
        if party is not None and not party.is_active:
            raise ValidationError(f"{party} is inactive.")

    def save(self, *args, **kwargs):
        # lazy import to avoid circular import at module load time
        from ..services.sequences import next_sequence

        if not self.number:
            self.number = next_sequence(self.SEQUENCE_NAME)
            # number is generated here, so it must be persisted too
            if kwargs.get("update_fields") is not None:
                kwargs["update_fields"] = list(kwargs["update_fields"]) + ["number"]
        if self.IS_PAYABLE and not self.due_date and self.date:
            self.due_date = self.default_due_date()
        return super().save(*args, **kwargs)

    """ Documents are cancelled, not deleted, once money or follow-ups reference them """

    def delete(self, *args, **kwargs):
        if self.has_payments():
            raise DependentRecordsExist(
                f"Cannot delete {self}: payments are linked to it.")
        if self.has_dependents():
            raise DependentRecordsExist(
                f"Cannot delete {self}: bills or invoices were created from it.")
        return super().delete(*args, **kwargs)

    def transition_to(self, new_status):
        # Look up what states are allowed from current self.status
        if new_status not in self.ALLOWED_TRANSITIONS.get(self.status, []):
            # If requested new_status isn't allowed → block it
            raise InvalidTransition(
                f"Cannot go from {self.status} to {new_status}")

        # If valid, update self.status and persist
        self.status = new_status
        self.save(update_fields=["status", "updated_at"])
        return self


# ---------- Shared document line ----------
class DocumentLine(models.Model):
    # Each concrete line adds the FK to its document with related_name="lines"
    DOCUMENT_FIELD = None  # name of that FK, e.g. "invoice"

    product = models.ForeignKey(
        Product,
        # Prevent deleting a product which has been ordered/billed/invoiced
        on_delete=models.PROTECT,
    )
    description = models.TextField(null=True, blank=True)

    # Core pricing logic:
    # quantity × unit_price = line subtotal
    # line subtotal × tax_rate / 100 = tax_amount
    # line subtotal + tax_amount = line_total
    quantity = models.DecimalField(
        max_digits=14, decimal_places=4, default=Decimal("1"))
    unit_price = models.DecimalField(
        max_digits=18, decimal_places=4, default=ZERO)
    tax_rate = models.DecimalField(
        max_digits=6, decimal_places=2, default=ZERO,
        help_text="Percentage, e.g. 18 for 18%")
    tax_amount = models.DecimalField(
        max_digits=18, decimal_places=2, default=ZERO)
    line_total = models.DecimalField(
        max_digits=18, decimal_places=2, default=ZERO)

    # Cost center; filled by auto-analytical rules when left empty
    analytical_account = models.ForeignKey(
        AnalyticalAccount,
        null=True,
        blank=True,
        on_delete=models.PROTECT,
    )

    class Meta:
        abstract = True
        ordering = ("id",)

    def __str__(self):
        return f"{self.product} x {self.quantity} = {self.line_total}"

    @property
    def line_subtotal(self):
        return self.line_total - self.tax_amount

    def clean(self):
        # lazy import to avoid circular import at module load time
        from ..services.pricing import validate_line_values

        validate_line_values(self.quantity, self.unit_price, self.tax_rate)

    def parent_document(self):
        """Stored state of the owning document (None while it is unsaved)."""
        field = self._meta.get_field(self.DOCUMENT_FIELD)
        pk = getattr(self, field.attname)
        if pk is None:
            return None
        return field.related_model.objects.filter(pk=pk).first()

    def ensure_editable(self):
        from ..services.lifecycle import ensure_lines_editable

        document = self.parent_document()
        if document is not None:
            ensure_lines_editable(document)

    def save(self, *args, **kwargs):
        from ..services.pricing import price_line

        # only lines of an editable document may change (DocumentLocked otherwise)
        self.ensure_editable()
        # line totals are always recomputed from their inputs
        priced = price_line(self.quantity, self.unit_price, self.tax_rate)
        self.tax_amount = priced.tax_amount
        self.line_total = priced.line_total
        return super().save(*args, **kwargs)

    def delete(self, *args, **kwargs):
        self.ensure_editable()
        return super().delete(*args, **kwargs)
