from django.contrib import admin

from erp_core.models import AuditLog, Budget, Payment
from erp_core.services import delete_payment, revise_budget

from .actions import deactivate_budgets
from .inlines import BudgetRevisionInline
from .ReadOnly import ReadOnlyAdmin


# Payments are recorded through the services/API; admin only views and deletes them
@admin.register(Payment)
class PaymentAdmin(ReadOnlyAdmin):
    list_display = ("number", "payment_type", "contact", "amount", "payment_date",
                    "method", "invoice", "vendor_bill")
    list_filter = ("payment_type", "method", "payment_date")
    search_fields = ("number", "reference", "contact__name")

    def get_queryset(self, request):
        qs = super().get_queryset(request)
        return qs.select_related("contact", "invoice", "vendor_bill")

    def has_delete_permission(self, request, obj=None):
        # deleting is the correction path; reconciliation follows
        return request.user.is_active and request.user.is_back_office

    def delete_model(self, request, obj):
        delete_payment(obj, user=request.user)

    def delete_queryset(self, request, queryset):
        for payment in queryset:
            delete_payment(payment, user=request.user)


@admin.register(Budget)
class BudgetAdmin(admin.ModelAdmin):
    list_display = ("name", "analytical_account", "period_start", "period_end",
                    "amount", "revised_amount", "is_active")
    list_filter = ("is_active", "analytical_account")
    search_fields = ("name", "analytical_account__code")
    inlines = [BudgetRevisionInline]
    actions = [deactivate_budgets]

    def save_model(self, request, obj, form, change):
        if not change:
            super().save_model(request, obj, form, change)
            return
        # amount changes go through revise_budget so history is kept
        fields = {f: form.cleaned_data[f] for f in ("name", "notes", "period_start", "period_end")
                  if f in form.changed_data}
        revise_budget(
            obj,
            amount=form.cleaned_data.get("amount") if "amount" in form.changed_data else None,
            revised_amount=(form.cleaned_data.get("revised_amount")
                            if "revised_amount" in form.changed_data else None),
            reason="Edited in admin",
            user=request.user,
            **fields,
        )


# Register `AuditLog` model
@admin.register(AuditLog)
class AuditLogAdmin(ReadOnlyAdmin):
    list_display = ("id", "user", "action", "object_type", "object_id", "created_at")
    search_fields = ("object_type", "object_id", "user__username")
    list_filter = ("action", "object_type", "created_at")

    # Fetch everything in one SQL join
    def get_queryset(self, request):
        qs = super().get_queryset(request)
        return qs.select_related("user")
