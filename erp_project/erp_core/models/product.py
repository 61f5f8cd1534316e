from decimal import Decimal
from django.core.exceptions import ValidationError
from django.db import models
from ..managers import ActiveManager
from .analytical import PRODUCT_CATEGORIES, AnalyticalAccount


# ---------- Products (goods/services bought & sold) ----------
class Product(models.Model):

    # Generated from the "product" sequence when left blank (e.g. "P-01001")
    code = models.CharField(max_length=32, unique=True, blank=True)

    # Required human-readable name of the product
    name = models.CharField(max_length=200)

    # Drives auto-analytical rules (e.g. raw materials → Production)
    category = models.CharField(
        max_length=20, choices=PRODUCT_CATEGORIES, default="other")

    unit = models.CharField(max_length=16, default="PCS")  # PCS, SET, LTR, CFT …

    # standard prices, used to prefill document lines
    purchase_price = models.DecimalField(
        max_digits=18, decimal_places=4, default=Decimal("0.00"))
    sale_price = models.DecimalField(
        max_digits=18, decimal_places=4, default=Decimal("0.00"))
    # default tax percentage for lines of this product
    tax_rate = models.DecimalField(
        max_digits=6, decimal_places=2, default=Decimal("0.00"))
    hsn_code = models.CharField(max_length=16, null=True, blank=True)

    # Static default cost center
    """ If set, every line for this product is tagged with it,
    auto-analytical rules are not consulted. """
    analytical_account = models.ForeignKey(
        AnalyticalAccount,
        null=True,
        blank=True,
        on_delete=models.SET_NULL,  # product stays without default cost center
        related_name="products",
    )

    is_active = models.BooleanField(default=True)
    created_at = models.DateTimeField(auto_now_add=True)

    objects = ActiveManager()

    class Meta:
        ordering = ("name",)
        indexes = [
            models.Index(fields=["category"], name="ix_product_category"),
            models.Index(fields=["name"], name="ix_product_name"),
        ]

    def __str__(self):
        return self.name

    def clean(self):
        if self.purchase_price < 0 or self.sale_price < 0:
            raise ValidationError("Prices must be >= 0")
        if self.tax_rate < 0:
            raise ValidationError("Tax rate must be >= 0")

    def save(self, *args, **kwargs):
        # lazy import to avoid circular import at module load time
        from ..services.sequences import next_sequence

        if not self.code:
            self.code = next_sequence("product")
        self.full_clean()  # run validations before saving
        return super().save(*args, **kwargs)
