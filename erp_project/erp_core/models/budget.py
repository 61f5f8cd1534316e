from django.conf import settings
from django.core.exceptions import ValidationError
from django.db import models
from ..managers import ActiveManager
from .analytical import AnalyticalAccount


# ---------- Budgets ----------
class Budget(models.Model):
    """Planned spend of one cost center over a period."""

    name = models.CharField(max_length=200)
    analytical_account = models.ForeignKey(
        AnalyticalAccount,
        on_delete=models.PROTECT,
        related_name="budgets",
    )
    period_start = models.DateField()
    period_end = models.DateField()
    amount = models.DecimalField(max_digits=18, decimal_places=2)
    # replaces amount once revised
    revised_amount = models.DecimalField(
        max_digits=18, decimal_places=2, null=True, blank=True)
    notes = models.TextField(null=True, blank=True)
    is_active = models.BooleanField(default=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    objects = ActiveManager()

    class Meta:
        ordering = ("-period_start", "analytical_account__code")
        constraints = [
            # one budget per cost center and period
            models.UniqueConstraint(
                fields=["analytical_account", "period_start", "period_end"],
                name="uq_budget_cost_center_period",
            ),
        ]

    def __str__(self):
        return f"{self.name} ({self.period_start} – {self.period_end})"

    @property
    def effective_amount(self):
        if self.revised_amount is not None:
            return self.revised_amount
        return self.amount

    def clean(self):
        if self.period_start and self.period_end and self.period_start > self.period_end:
            raise ValidationError("Budget period start must be on or before its end.")
        if self.amount is not None and self.amount < 0:
            raise ValidationError("Budget amount must be >= 0")
        if self.revised_amount is not None and self.revised_amount < 0:
            raise ValidationError("Revised amount must be >= 0")


# Append-only history of effective amount changes
class BudgetRevision(models.Model):
    budget = models.ForeignKey(
        Budget, on_delete=models.CASCADE, related_name="revisions")
    previous_amount = models.DecimalField(max_digits=18, decimal_places=2)
    new_amount = models.DecimalField(max_digits=18, decimal_places=2)
    reason = models.TextField(null=True, blank=True)
    revised_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        null=True,
        blank=True,
        on_delete=models.SET_NULL,
    )
    revised_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ("-revised_at", "-id")

    def __str__(self):
        return f"{self.budget}: {self.previous_amount} → {self.new_amount}"

    def save(self, *args, **kwargs):
        if self.pk:
            raise ValidationError("Budget revisions cannot be edited.")
        return super().save(*args, **kwargs)
