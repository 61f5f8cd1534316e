from django.core.exceptions import ValidationError
from django.db import models

from ..managers import ActiveManager, RuleManager

# Product groups a rule can target; mirrors Product.category
PRODUCT_CATEGORIES = [
    ("raw_material", "Raw material"),
    ("finished_goods", "Finished goods"),
    ("consumables", "Consumables"),
    ("services", "Services"),
    ("other", "Other"),
]


# ---------- Cost centers (analytical accounts) ----------
class AnalyticalAccount(models.Model):
    """
    Tag used to attribute revenue/expense lines to an organizational unit
    (e.g. "PROD – Production") for budget tracking.
    - code is unique
    - parent builds an informational hierarchy; cycles are rejected on save
    """

    code = models.CharField(max_length=32, unique=True)
    name = models.CharField(max_length=200)
    description = models.TextField(null=True, blank=True)

    # Optional hierarchy (e.g. PROD → PROD-ASSEMBLY)
    parent = models.ForeignKey(
        "self",
        null=True,
        blank=True,
        # you can't delete a parent if children exist
        on_delete=models.PROTECT,
        related_name="children",
    )
    # "soft deactivate" (hide in UI, stop new assignments) without deleting history
    is_active = models.BooleanField(default=True)
    created_at = models.DateTimeField(auto_now_add=True)

    objects = ActiveManager()

    class Meta:
        ordering = ("code",)

    def __str__(self):
        return f"{self.code} – {self.name}"  # Example: "PROD – Production"

    def ancestors(self):
        """Walk up the parent chain (stops if a cycle is already stored)."""
        seen = set()
        node = self.parent
        while node is not None and node.pk not in seen:
            seen.add(node.pk)
            yield node
            node = node.parent

    def clean(self):
        if self.parent_id is None:
            return
        if self.pk and self.parent_id == self.pk:
            raise ValidationError("A cost center cannot be its own parent.")
        # A cost center must never become its own ancestor
        if self.pk and any(node.pk == self.pk for node in self.parent.ancestors()):
            raise ValidationError(
                "Parent assignment would create a cycle in the cost center tree.")

    def save(self, *args, **kwargs):
        self.full_clean()  # run validations before saving
        return super().save(*args, **kwargs)


# ---------- Auto-analytical rules ----------
class AutoAnalyticalRule(models.Model):
    """
    Assigns a default cost center to document lines that have none.
    Rules are evaluated by ascending priority, first match wins.
    A rule without any condition matches every line.
    """

    name = models.CharField(max_length=200)
    description = models.TextField(null=True, blank=True)

    # Optional match conditions
    product_category = models.CharField(
        max_length=20, choices=PRODUCT_CATEGORIES, null=True, blank=True)
    # case-insensitive substring of the product name
    product_name_contains = models.CharField(
        max_length=200, null=True, blank=True)
    vendor = models.ForeignKey(
        "Contact",
        null=True,
        blank=True,
        on_delete=models.CASCADE,
        related_name="analytical_rules",
    )

    # Target cost center
    analytical_account = models.ForeignKey(
        AnalyticalAccount,
        # keep rules valid: can't delete a cost center a rule points to
        on_delete=models.PROTECT,
        related_name="rules",
    )
    # lower = evaluated first
    priority = models.PositiveIntegerField(default=1)
    is_active = models.BooleanField(default=True)
    created_at = models.DateTimeField(auto_now_add=True)

    objects = RuleManager()

    class Meta:
        ordering = ("priority", "id")
        indexes = [models.Index(fields=["is_active", "priority"], name="ix_rule_active_priority")]

    def __str__(self):
        return f"{self.name} (#{self.priority}) → {self.analytical_account.code}"

    @property
    def has_conditions(self):
        return bool(
            self.product_category or self.product_name_contains or self.vendor_id)

    def clean(self):
        if self.product_name_contains is not None:
            # blank substring would match every product; store as "no condition"
            self.product_name_contains = self.product_name_contains.strip() or None
        if self.vendor_id and self.vendor.contact_type == "customer":
            raise ValidationError("Rule vendor must be a vendor contact.")

    def save(self, *args, **kwargs):
        self.full_clean()
        return super().save(*args, **kwargs)
