from decimal import ROUND_HALF_UP, Decimal

from django.db.models import Sum

from ..models import AnalyticalAccount, Budget, InvoiceLine, VendorBillLine

ZERO = Decimal("0.00")
CENT = Decimal("0.01")

# Documents whose lines count as actuals
BILL_ACTUAL_STATUSES = ("posted", "partially_paid", "paid")
INVOICE_ACTUAL_STATUSES = ("sent", "partially_paid", "paid")


def percentage(part, whole):
    if not whole:
        return ZERO
    return (part * 100 / whole).quantize(CENT, rounding=ROUND_HALF_UP)


def _totals_by_cost_center(line_model, doc_field, statuses, period_start, period_end,
                           analytical_account=None):
    qs = line_model.objects.filter(
        analytical_account__isnull=False,
        **{
            f"{doc_field}__status__in": statuses,
            f"{doc_field}__date__gte": period_start,
            f"{doc_field}__date__lte": period_end,
        },
    )
    if analytical_account is not None:
        qs = qs.filter(analytical_account=analytical_account)
    rows = qs.values("analytical_account").annotate(total=Sum("line_total"))
    return {row["analytical_account"]: row["total"] or ZERO for row in rows}


def budget_vs_actual(period_start, period_end, analytical_account=None) -> dict:
    """
    Compare active budgets overlapping the period with actual spend.
    Actual = line totals of posted (or paid) vendor bills dated inside
    the period, per cost center.
    """
    budgets = Budget.objects.active().filter(
        period_start__lte=period_end,
        period_end__gte=period_start,
    ).select_related("analytical_account")
    if analytical_account is not None:
        budgets = budgets.filter(analytical_account=analytical_account)

    actuals = _totals_by_cost_center(
        VendorBillLine, "vendor_bill", BILL_ACTUAL_STATUSES,
        period_start, period_end, analytical_account)

    items = []
    for budget in budgets:
        budget_amount = budget.effective_amount
        actual = actuals.get(budget.analytical_account_id, ZERO)
        variance = budget_amount - actual
        items.append({
            "budget_id": budget.pk,
            "budget_name": budget.name,
            "analytical_account_id": budget.analytical_account_id,
            "analytical_account_code": budget.analytical_account.code,
            "analytical_account_name": budget.analytical_account.name,
            "budget_amount": budget_amount,
            "actual_amount": actual,
            "variance": variance,
            "utilization_percentage": percentage(actual, budget_amount),
            "remaining_balance": max(variance, ZERO),
        })

    total_budget = sum((i["budget_amount"] for i in items), ZERO)
    total_actual = sum((i["actual_amount"] for i in items), ZERO)
    return {
        "total_budget": total_budget,
        "total_actual": total_actual,
        "total_variance": total_budget - total_actual,
        "overall_utilization": percentage(total_actual, total_budget),
        "items": items,
    }


def cost_center_performance(period_start, period_end) -> list:
    """Per active cost center: expenses (bills), revenue (invoices), net contribution."""
    expenses = _totals_by_cost_center(
        VendorBillLine, "vendor_bill", BILL_ACTUAL_STATUSES, period_start, period_end)
    revenue = _totals_by_cost_center(
        InvoiceLine, "invoice", INVOICE_ACTUAL_STATUSES, period_start, period_end)

    results = []
    for account in AnalyticalAccount.objects.active():
        spent = expenses.get(account.pk, ZERO)
        earned = revenue.get(account.pk, ZERO)
        results.append({
            "id": account.pk,
            "code": account.code,
            "name": account.name,
            "expenses": spent,
            "revenue": earned,
            "net_contribution": earned - spent,
        })
    return results
