import logging

from django.core.exceptions import ValidationError
from django.db import transaction

from ..models import Budget, BudgetRevision
from .audit_helper import log_action
from .pricing import to_decimal

logger = logging.getLogger(__name__)


def create_budget(
    *,
    name: str,
    analytical_account,
    period_start,
    period_end,
    amount,
    notes: str | None = None,
    user=None,
) -> Budget:
    """Create a budget; one per cost center and period."""
    if Budget.objects.filter(
        analytical_account=analytical_account,
        period_start=period_start,
        period_end=period_end,
    ).exists():
        raise ValidationError(
            f"A budget for {analytical_account} from {period_start} to {period_end} already exists.")

    with transaction.atomic():
        budget = Budget(
            name=name,
            analytical_account=analytical_account,
            period_start=period_start,
            period_end=period_end,
            amount=to_decimal(amount, "amount"),
            notes=notes,
        )
        budget.full_clean()
        budget.save()
        log_action(action="create", instance=budget, user=user,
                   changes={"amount": str(budget.amount)})
    return budget


def revise_budget(
    budget: Budget,
    *,
    amount=None,
    revised_amount=None,
    reason: str | None = None,
    user=None,
    **fields,
) -> Budget:
    """
    Change a budget. Whenever its effective amount
    (revised_amount, else amount) changes, a BudgetRevision is appended.
    Other editable fields: name, notes, period_start, period_end.
    """
    with transaction.atomic():
        budget = Budget.objects.select_for_update().get(pk=budget.pk)
        previous = budget.effective_amount

        if amount is not None:
            budget.amount = to_decimal(amount, "amount")
        if revised_amount is not None:
            budget.revised_amount = to_decimal(revised_amount, "revised_amount")
        for field, value in fields.items():
            if field not in ("name", "notes", "period_start", "period_end"):
                raise ValidationError(f"Unknown budget field: {field}")
            setattr(budget, field, value)

        budget.full_clean()
        budget.save()

        if budget.effective_amount != previous:
            BudgetRevision.objects.create(
                budget=budget,
                previous_amount=previous,
                new_amount=budget.effective_amount,
                reason=reason,
                revised_by=user if getattr(user, "is_authenticated", False) else None,
            )
            logger.info("Budget %s revised %s -> %s", budget.pk, previous, budget.effective_amount)

        log_action(action="update", instance=budget, user=user,
                   changes={"effective_amount": [str(previous), str(budget.effective_amount)]})
    return budget


def deactivate_budget(budget: Budget, user=None) -> Budget:
    # soft delete; reports only read active budgets
    budget.is_active = False
    budget.save(update_fields=["is_active", "updated_at"])
    log_action(action="deactivate", instance=budget, user=user)
    return budget
