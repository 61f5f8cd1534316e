from django.contrib import admin, messages
from django.core.exceptions import ValidationError

from ..services import (cancel_document, confirm_order, deactivate_budget,
                        invite_contact, post_document)

# ---------- Admin actions ----------
# Each action goes through the services so admins can't bypass the lifecycle rules


@admin.action(description="Post selected documents")
def post_documents(modeladmin, request, queryset):
    modeladmin.run_service(request, queryset.filter(status="draft"), post_document, "post", "Posted")


@admin.action(description="Confirm selected orders")
def confirm_orders(modeladmin, request, queryset):
    modeladmin.run_service(request, queryset.filter(status="draft"), confirm_order, "confirm", "Confirmed")


@admin.action(description="Cancel selected documents")
def cancel_documents(modeladmin, request, queryset):
    modeladmin.run_service(request, queryset.exclude(status="cancelled"), cancel_document, "cancel", "Cancelled")


@admin.action(description="Send portal invitation")
def invite_contacts(modeladmin, request, queryset):
    sent = 0
    for contact in queryset:
        try:
            invite_contact(contact, user=request.user)
            sent += 1
        except ValidationError as exc:
            modeladmin.message_user(
                request, f"{contact}: {'; '.join(exc.messages)}", level=messages.ERROR)
    modeladmin.message_user(request, f"Sent {sent} invitation(s).")


@admin.action(description="Deactivate selected budgets")
def deactivate_budgets(modeladmin, request, queryset):
    for budget in queryset.filter(is_active=True):
        deactivate_budget(budget, user=request.user)
